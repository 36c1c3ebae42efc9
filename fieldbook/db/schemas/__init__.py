from .user import UserDetail, UserSummary
from .complex import ComplexSummary
from .field import FieldDetail, FieldSummary
from .booking import (
    Booking,
    BookingCreate,
    BookingDetail,
    BookingFilters,
    BookingSortField,
    BookingStats,
    BookingUpdate,
    SortDirection,
)
