from .user import User
from .complex import Complex
from .field import Field, FieldStatus
from .booking import ACTIVE_STATUSES, TERMINAL_STATUSES, Booking, BookingStatus
