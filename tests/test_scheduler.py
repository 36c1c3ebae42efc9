from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fieldbook.db import models
from fieldbook.db.session import Base
from fieldbook.services import booking_service
from fieldbook.workers import scheduler


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def seed_bookings(SessionLocal, now):
    with SessionLocal() as db:
        user = models.User(email="sweep@example.com")
        complex_ = models.Complex(name="Arena")
        field = models.Field(complex=complex_, name="Pitch", price=40)
        db.add_all([user, complex_, field])
        db.commit()

        def booking(start, end, status):
            return models.Booking(
                user_id=user.id,
                field_id=field.id,
                start_at=start,
                end_at=end,
                status=status,
            )

        yesterday = now - timedelta(days=1)
        rows = {
            "expired_confirmed": booking(
                yesterday - timedelta(hours=2), yesterday, models.BookingStatus.confirmed
            ),
            "expired_pending": booking(
                yesterday - timedelta(hours=2), yesterday, models.BookingStatus.pending
            ),
            "expired_cancelled": booking(
                yesterday - timedelta(hours=2), yesterday, models.BookingStatus.cancelled
            ),
            "running": booking(
                now - timedelta(minutes=30), now + timedelta(minutes=30), models.BookingStatus.confirmed
            ),
            "upcoming": booking(
                now + timedelta(days=1), now + timedelta(days=1, hours=1), models.BookingStatus.pending
            ),
        }
        db.add_all(rows.values())
        db.commit()
        return {name: row.id for name, row in rows.items()}


def statuses(SessionLocal):
    with SessionLocal() as db:
        return {b.id: b.status for b in db.query(models.Booking).all()}


def test_sweep_completes_only_expired_active_bookings(session_factory):
    now = datetime.now(timezone.utc)
    ids = seed_bookings(session_factory, now)

    changed = scheduler.mark_completed_bookings(session_factory, clock=lambda: now)

    assert changed == 2
    result = statuses(session_factory)
    assert result[ids["expired_confirmed"]] == models.BookingStatus.completed
    assert result[ids["expired_pending"]] == models.BookingStatus.completed
    assert result[ids["expired_cancelled"]] == models.BookingStatus.cancelled
    assert result[ids["running"]] == models.BookingStatus.confirmed
    assert result[ids["upcoming"]] == models.BookingStatus.pending


def test_sweep_is_idempotent(session_factory):
    now = datetime.now(timezone.utc)
    seed_bookings(session_factory, now)

    assert scheduler.mark_completed_bookings(session_factory, clock=lambda: now) == 2
    before = statuses(session_factory)
    assert scheduler.mark_completed_bookings(session_factory, clock=lambda: now) == 0
    assert statuses(session_factory) == before


def test_sweep_follows_the_injected_clock(session_factory):
    now = datetime.now(timezone.utc)
    ids = seed_bookings(session_factory, now)
    scheduler.mark_completed_bookings(session_factory, clock=lambda: now)

    later = now + timedelta(hours=1)
    assert scheduler.mark_completed_bookings(session_factory, clock=lambda: later) == 1
    assert statuses(session_factory)[ids["running"]] == models.BookingStatus.completed


def test_completed_booking_cannot_be_cancelled(session_factory):
    now = datetime.now(timezone.utc)
    ids = seed_bookings(session_factory, now)
    scheduler.mark_completed_bookings(session_factory, clock=lambda: now)

    with session_factory() as db:
        with pytest.raises(booking_service.InvalidTransitionError):
            booking_service.cancel_booking(db, ids["expired_confirmed"])


def test_sweep_failure_is_logged_and_swallowed(caplog):
    class BrokenSession:
        def __enter__(self):
            raise OperationalError("UPDATE bookings", {}, Exception("database is down"))

        def __exit__(self, *exc):
            return False

    with caplog.at_level("ERROR", logger=scheduler.logger.name):
        changed = scheduler.mark_completed_bookings(BrokenSession)

    assert changed == 0
    assert "Booking completion sweep failed" in caplog.text


def test_scheduler_registers_interval_job(session_factory):
    sweep = scheduler.get_scheduler(session_factory, interval_minutes=1)
    job = sweep.get_job(scheduler.COMPLETION_JOB_ID)

    assert job is not None
    assert job.trigger.interval == timedelta(minutes=1)
    assert job.kwargs["session_factory"] is session_factory
