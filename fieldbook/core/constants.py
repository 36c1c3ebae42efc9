"""Common application-wide constants."""

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

# Name of the PostgreSQL exclusion constraint guarding active intervals per field
BOOKING_OVERLAP_CONSTRAINT = "ex_booking_field_active_overlap"


__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "BOOKING_OVERLAP_CONSTRAINT",
]
