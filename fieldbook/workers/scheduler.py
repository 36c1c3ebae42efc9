from datetime import datetime
import logging
from typing import Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..config import get_settings
from ..core.clock import utc_now
from ..db.session import SessionLocal
from ..services.booking_repository import BookingRepository

logger = logging.getLogger(__name__)

COMPLETION_JOB_ID = "mark_completed_bookings"


def mark_completed_bookings(
    session_factory: sessionmaker[Session] = SessionLocal,
    clock: Callable[[], datetime] = utc_now,
) -> int:
    """Promote active bookings whose end time has passed to ``completed``.

    Failures are logged and swallowed; the next tick retries.
    """
    now = clock()
    try:
        with session_factory() as db:
            count = BookingRepository.complete_expired(db, now)
            db.commit()
    except SQLAlchemyError:
        logger.exception("Booking completion sweep failed")
        return 0
    if count > 0:
        logger.info("Marked %d booking(s) as completed", count)
    return count


def get_scheduler(
    session_factory: sessionmaker[Session] = SessionLocal,
    clock: Callable[[], datetime] = utc_now,
    interval_minutes: int | None = None,
) -> AsyncIOScheduler:
    if interval_minutes is None:
        interval_minutes = get_settings().booking_sweep_interval_min
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        mark_completed_bookings,
        "interval",
        minutes=interval_minutes,
        id=COMPLETION_JOB_ID,
        kwargs={"session_factory": session_factory, "clock": clock},
        coalesce=True,
        max_instances=1,
    )
    return scheduler
