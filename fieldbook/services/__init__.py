from . import (
    booking_repository,
    booking_service,
    directory,
    notification_service,
    overlap,
)
__all__ = [
    "booking_repository",
    "booking_service",
    "directory",
    "notification_service",
    "overlap",
]
