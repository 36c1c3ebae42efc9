"""Interval conflict checks for field bookings.

Intervals are half-open, ``[start, end)``: a booking ending at 11:00 and one
starting at 11:00 on the same field do not overlap. Only active bookings
(pending or confirmed) occupy a field's timeline.
"""
from datetime import datetime
from typing import Iterable, Protocol

from ..core.clock import ensure_utc
from ..core.errors import InvalidIntervalError
from ..db.models.booking import ACTIVE_STATUSES, BookingStatus


class BookedInterval(Protocol):
    id: int
    start_at: datetime
    end_at: datetime
    status: BookingStatus


def validate_interval(start: datetime, end: datetime) -> None:
    if ensure_utc(end) <= ensure_utc(start):
        raise InvalidIntervalError()


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    return ensure_utc(start_a) < ensure_utc(end_b) and ensure_utc(end_a) > ensure_utc(start_b)


def find_conflict(
    start: datetime,
    end: datetime,
    bookings: Iterable[BookedInterval],
    *,
    exclude_id: int | None = None,
) -> BookedInterval | None:
    """Return the first active booking overlapping ``[start, end)``, if any.

    ``exclude_id`` drops a booking from the candidate set, which is how an
    update avoids conflicting with the record it is replacing.
    """
    validate_interval(start, end)
    for booking in bookings:
        if exclude_id is not None and booking.id == exclude_id:
            continue
        if booking.status not in ACTIVE_STATUSES:
            continue
        if overlaps(start, end, booking.start_at, booking.end_at):
            return booking
    return None
