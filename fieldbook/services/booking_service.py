from contextlib import contextmanager
from datetime import datetime
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.clock import ensure_utc, utc_now
from ..core.constants import BOOKING_OVERLAP_CONSTRAINT
from ..core.errors import (
    BookingError,
    ConflictError,
    InvalidIntervalError,
    InvalidTransitionError,
    NotFoundError,
    PastDateError,
)
from ..db import models, schemas
from ..db.models.booking import ACTIVE_STATUSES, TERMINAL_STATUSES, BookingStatus
from . import directory, notification_service, overlap
from .booking_repository import BookingRepository

logger = logging.getLogger(__name__)

__all__ = [
    "BookingError",
    "ConflictError",
    "InvalidIntervalError",
    "InvalidTransitionError",
    "NotFoundError",
    "PastDateError",
    "create_booking",
    "list_bookings",
    "get_booking",
    "update_booking",
    "cancel_booking",
    "delete_booking",
]

# Caller-driven transitions. Completion is left to the scheduler sweep.
ALLOWED_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.pending: {BookingStatus.confirmed, BookingStatus.cancelled},
    BookingStatus.confirmed: {BookingStatus.cancelled},
    BookingStatus.cancelled: set(),
    BookingStatus.completed: set(),
}


@contextmanager
def _write_transaction(db: Session):
    transaction_ctx = db.begin_nested() if db.in_transaction() else db.begin()
    try:
        with transaction_ctx:
            yield
    except IntegrityError as exc:
        constraint = getattr(getattr(exc.orig, "diag", None), "constraint_name", "")
        if constraint == BOOKING_OVERLAP_CONSTRAINT:
            raise ConflictError() from exc
        raise
    db.commit()


def _ensure_no_conflict(
    db: Session,
    field_id: int,
    start_at: datetime,
    end_at: datetime,
    *,
    exclude_id: int | None = None,
) -> None:
    candidates = BookingRepository.active_for_field(
        db, field_id, window_start=start_at, window_end=end_at
    )
    conflict = overlap.find_conflict(start_at, end_at, candidates, exclude_id=exclude_id)
    if conflict is not None:
        logger.info(
            "Booking rejected: overlapping active booking",
            extra={"field_id": field_id, "conflicting_booking_id": conflict.id},
        )
        raise ConflictError()


def _notify(booking: models.Booking, event: str) -> None:
    notification_service.notify_booking_events(
        [notification_service.BookingNotification.from_booking(booking, event)]
    )


def _load(db: Session, booking_id: int) -> models.Booking:
    booking = BookingRepository.get(db, booking_id, with_relations=True)
    if not booking:
        raise NotFoundError(f"Booking with ID {booking_id} not found")
    return booking


def create_booking(
    db: Session, payload: schemas.BookingCreate, *, now: datetime | None = None
) -> models.Booking:
    """Validate and persist a new booking.

    The status is taken from the payload as given, so a booking may be created
    directly as ``confirmed`` (or even in a terminal status).
    """
    now = ensure_utc(now) if now else utc_now()
    start_at = ensure_utc(payload.start_at)
    end_at = ensure_utc(payload.end_at)

    with _write_transaction(db):
        directory.find_user(db, payload.user_id)
        field = directory.find_field(db, payload.field_id, lock=True)
        overlap.validate_interval(start_at, end_at)
        if start_at < now:
            raise PastDateError()
        _ensure_no_conflict(db, field.id, start_at, end_at)
        booking = BookingRepository.create(
            db,
            user_id=payload.user_id,
            field_id=field.id,
            start_at=start_at,
            end_at=end_at,
            status=payload.status,
        )
        booking_id = booking.id

    booking = _load(db, booking_id)
    logger.info(
        "Booking created",
        extra={"booking_id": booking.id, "field_id": booking.field_id, "user_id": booking.user_id},
    )
    _notify(booking, "created")
    return booking


def list_bookings(db: Session, filters: schemas.BookingFilters) -> list[models.Booking]:
    updates = {}
    if filters.start_date:
        updates["start_date"] = ensure_utc(filters.start_date)
    if filters.end_date:
        updates["end_date"] = ensure_utc(filters.end_date)
    if updates:
        filters = filters.model_copy(update=updates)
    return BookingRepository.find_many(db, filters)


def get_booking(db: Session, booking_id: int) -> models.Booking:
    return _load(db, booking_id)


def update_booking(
    db: Session, booking_id: int, payload: schemas.BookingUpdate
) -> models.Booking:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    with _write_transaction(db):
        booking = BookingRepository.get(db, booking_id)
        if not booking:
            raise NotFoundError(f"Booking with ID {booking_id} not found")

        user_id = changes.get("user_id", booking.user_id)
        if user_id != booking.user_id:
            directory.find_user(db, user_id)

        field_id = changes.get("field_id", booking.field_id)
        # Lock the field the booking will occupy, changed or not.
        directory.find_field(db, field_id, lock=True)

        start_at = ensure_utc(changes.get("start_at", booking.start_at))
        end_at = ensure_utc(changes.get("end_at", booking.end_at))
        overlap.validate_interval(start_at, end_at)

        status = changes.get("status", booking.status)
        if status != booking.status and status not in ALLOWED_TRANSITIONS[booking.status]:
            raise InvalidTransitionError(
                f"Cannot change booking status from {booking.status.value} to {status.value}"
            )

        if status in ACTIVE_STATUSES:
            _ensure_no_conflict(db, field_id, start_at, end_at, exclude_id=booking.id)

        BookingRepository.update(
            db,
            booking,
            user_id=user_id,
            field_id=field_id,
            start_at=start_at,
            end_at=end_at,
            status=status,
        )

    db.expire_all()
    return _load(db, booking_id)


def cancel_booking(db: Session, booking_id: int) -> models.Booking:
    with _write_transaction(db):
        booking = BookingRepository.get(db, booking_id)
        if not booking:
            raise NotFoundError(f"Booking with ID {booking_id} not found")
        if booking.status in TERMINAL_STATUSES:
            raise InvalidTransitionError(
                f"Cannot cancel a booking that is {booking.status.value}"
            )
        BookingRepository.update(db, booking, status=BookingStatus.cancelled)

    db.expire_all()
    booking = _load(db, booking_id)
    logger.info("Booking cancelled", extra={"booking_id": booking.id})
    _notify(booking, "cancelled")
    return booking


def delete_booking(db: Session, booking_id: int) -> None:
    with _write_transaction(db):
        booking = BookingRepository.get(db, booking_id)
        if not booking:
            raise NotFoundError(f"Booking with ID {booking_id} not found")
        BookingRepository.delete(db, booking)
    logger.info("Booking deleted", extra={"booking_id": booking_id})
