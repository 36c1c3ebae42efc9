from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from ...api import deps
from ...db.session import get_db
from ...db import models, schemas
from ...services import booking_service

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _http_error(exc: booking_service.BookingError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))


@router.post("", response_model=schemas.Booking, status_code=status.HTTP_201_CREATED)
def create_booking(payload: schemas.BookingCreate, db: Session = Depends(get_db)):
    try:
        return booking_service.create_booking(db, payload)
    except booking_service.BookingError as exc:
        raise _http_error(exc) from exc


@router.get("", response_model=list[schemas.Booking])
def list_bookings(
    filters: schemas.BookingFilters = Depends(deps.booking_filters),
    db: Session = Depends(get_db),
):
    return booking_service.list_bookings(db, filters)


@router.get("/stats", response_model=schemas.BookingStats)
def booking_stats(db: Session = Depends(get_db)):
    now = datetime.now(timezone.utc)
    today_start = datetime(now.year, now.month, now.day, tzinfo=timezone.utc)
    today_end = today_start + timedelta(days=1)

    total = db.query(models.Booking).count()
    by_status = {booking_status.value: 0 for booking_status in models.BookingStatus}
    for booking_status, count in (
        db.query(models.Booking.status, func.count(models.Booking.id))
        .group_by(models.Booking.status)
        .all()
    ):
        by_status[booking_status.value] = count
    bookings_today = (
        db.query(models.Booking)
        .filter(models.Booking.status.in_(models.ACTIVE_STATUSES))
        .filter(models.Booking.start_at >= today_start)
        .filter(models.Booking.start_at < today_end)
        .count()
    )
    week_start = now - timedelta(days=7)
    weekly_revenue = (
        db.query(func.coalesce(func.sum(models.Field.price), 0))
        .select_from(models.Booking)
        .join(models.Field, models.Booking.field_id == models.Field.id)
        .filter(
            models.Booking.status.in_(
                [models.BookingStatus.confirmed, models.BookingStatus.completed]
            )
        )
        .filter(models.Booking.created_at >= week_start)
        .scalar()
    )
    weekly_revenue = float(weekly_revenue or 0)

    return {
        "total": total,
        "by_status": by_status,
        "bookings_today": bookings_today,
        "weekly_revenue": weekly_revenue,
    }


@router.get("/{booking_id}", response_model=schemas.BookingDetail)
def get_booking(booking_id: int, db: Session = Depends(get_db)):
    try:
        return booking_service.get_booking(db, booking_id)
    except booking_service.BookingError as exc:
        raise _http_error(exc) from exc


@router.patch("/{booking_id}", response_model=schemas.Booking)
def update_booking(
    booking_id: int,
    payload: schemas.BookingUpdate,
    db: Session = Depends(get_db),
):
    try:
        return booking_service.update_booking(db, booking_id, payload)
    except booking_service.BookingError as exc:
        raise _http_error(exc) from exc


@router.patch("/{booking_id}/cancel", response_model=schemas.Booking)
def cancel_booking(booking_id: int, db: Session = Depends(get_db)):
    try:
        return booking_service.cancel_booking(db, booking_id)
    except booking_service.BookingError as exc:
        raise _http_error(exc) from exc


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking(booking_id: int, db: Session = Depends(get_db)):
    try:
        booking_service.delete_booking(db, booking_id)
    except booking_service.BookingError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
