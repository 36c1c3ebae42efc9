"""Booking error taxonomy.

Every error carries the HTTP status code the API answers with, so callers can
branch on the error kind instead of the message text.
"""


class BookingError(Exception):
    status_code = 400


class NotFoundError(BookingError):
    status_code = 404


class InvalidIntervalError(BookingError):
    status_code = 400

    def __init__(self, message: str = "End time must be after start time") -> None:
        super().__init__(message)


class PastDateError(BookingError):
    status_code = 400

    def __init__(self, message: str = "Cannot book in the past") -> None:
        super().__init__(message)


class ConflictError(BookingError):
    status_code = 409

    def __init__(
        self, message: str = "This field is already booked for the selected time slot"
    ) -> None:
        super().__init__(message)


class InvalidTransitionError(BookingError):
    status_code = 400
