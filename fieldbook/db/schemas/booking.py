from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from ...core.clock import ensure_utc
from ...core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from ..models.booking import BookingStatus
from .field import FieldDetail, FieldSummary
from .user import UserDetail, UserSummary


class BookingSortField(str, Enum):
    id = "id"
    start_at = "start_at"
    end_at = "end_at"
    status = "status"
    created_at = "created_at"
    updated_at = "updated_at"


class SortDirection(str, Enum):
    asc = "asc"
    desc = "desc"


class BookingBase(BaseModel):
    user_id: int = Field(ge=1)
    field_id: int = Field(ge=1)
    start_at: datetime
    end_at: datetime


class BookingCreate(BookingBase):
    status: BookingStatus = BookingStatus.pending


class BookingUpdate(BaseModel):
    user_id: int | None = Field(default=None, ge=1)
    field_id: int | None = Field(default=None, ge=1)
    start_at: datetime | None = None
    end_at: datetime | None = None
    status: BookingStatus | None = None


class BookingFilters(BaseModel):
    """Query options for listing bookings."""

    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    sorted_by: BookingSortField = BookingSortField.created_at
    sorted_direction: SortDirection = SortDirection.desc
    user_id: int | None = Field(default=None, ge=1)
    field_id: int | None = Field(default=None, ge=1)
    status: BookingStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class Booking(BookingBase):
    id: int
    status: BookingStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user: UserSummary | None = None
    field: FieldSummary | None = None

    @field_validator("start_at", "end_at", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    class Config:
        from_attributes = True


class BookingDetail(Booking):
    """Single-booking view with the field's complex and the user's contact details."""

    user: UserDetail | None = None
    field: FieldDetail | None = None


class BookingStats(BaseModel):
    total: int
    by_status: dict[str, int]
    bookings_today: int
    weekly_revenue: float
