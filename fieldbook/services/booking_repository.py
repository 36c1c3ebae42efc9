"""Booking repository - database operations for bookings"""

from datetime import datetime
from typing import Optional

from sqlalchemy import asc, desc, select, update
from sqlalchemy.orm import Session, selectinload

from ..db import models
from ..db.models.booking import ACTIVE_STATUSES, BookingStatus
from ..db.schemas import BookingFilters, SortDirection


class BookingRepository:
    """Repository for booking database operations.

    Writes only flush; committing is left to the caller that owns the
    transaction.
    """

    @staticmethod
    def get(db: Session, booking_id: int, *, with_relations: bool = False) -> Optional[models.Booking]:
        """Get a booking by ID"""
        stmt = select(models.Booking).where(models.Booking.id == booking_id)
        if with_relations:
            stmt = stmt.options(
                selectinload(models.Booking.user),
                selectinload(models.Booking.field).selectinload(models.Field.complex),
            )
        return db.execute(stmt).scalar_one_or_none()

    @staticmethod
    def find_many(db: Session, filters: BookingFilters) -> list[models.Booking]:
        """List bookings matching ``filters``, sorted then paginated"""
        stmt = select(models.Booking).options(
            selectinload(models.Booking.user),
            selectinload(models.Booking.field),
        )
        if filters.user_id:
            stmt = stmt.where(models.Booking.user_id == filters.user_id)
        if filters.field_id:
            stmt = stmt.where(models.Booking.field_id == filters.field_id)
        if filters.status:
            stmt = stmt.where(models.Booking.status == filters.status)
        if filters.start_date:
            stmt = stmt.where(models.Booking.start_at >= filters.start_date)
        if filters.end_date:
            stmt = stmt.where(models.Booking.end_at <= filters.end_date)

        direction = asc if filters.sorted_direction == SortDirection.asc else desc
        sort_column = getattr(models.Booking, filters.sorted_by.value)
        stmt = stmt.order_by(direction(sort_column), direction(models.Booking.id))
        stmt = stmt.offset((filters.page - 1) * filters.limit).limit(filters.limit)
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def active_for_field(
        db: Session,
        field_id: int,
        *,
        window_start: datetime | None = None,
        window_end: datetime | None = None,
    ) -> list[models.Booking]:
        """Active bookings on a field, optionally narrowed to those touching a window"""
        stmt = select(models.Booking).where(
            models.Booking.field_id == field_id,
            models.Booking.status.in_(ACTIVE_STATUSES),
        )
        if window_start is not None:
            stmt = stmt.where(models.Booking.end_at > window_start)
        if window_end is not None:
            stmt = stmt.where(models.Booking.start_at < window_end)
        return list(db.execute(stmt.order_by(models.Booking.start_at)).scalars().all())

    @staticmethod
    def create(db: Session, **booking_data) -> models.Booking:
        """Create a new booking"""
        booking = models.Booking(**booking_data)
        db.add(booking)
        db.flush()
        return booking

    @staticmethod
    def update(db: Session, booking: models.Booking, **updates) -> models.Booking:
        """Update a booking with the provided fields"""
        for key, value in updates.items():
            setattr(booking, key, value)
        db.flush()
        return booking

    @staticmethod
    def delete(db: Session, booking: models.Booking) -> None:
        """Hard-delete a booking"""
        db.delete(booking)
        db.flush()

    @staticmethod
    def complete_expired(db: Session, now: datetime) -> int:
        """Mark active bookings that ended before ``now`` as completed"""
        result = db.execute(
            update(models.Booking)
            .where(
                models.Booking.end_at < now,
                models.Booking.status.in_(ACTIVE_STATUSES),
            )
            .values(status=BookingStatus.completed, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
