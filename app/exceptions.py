"""
Service-layer exceptions, translated to HTTP responses by the routers
"""


class NotFoundError(LookupError):
    """A requested record does not exist"""


class ValidationError(ValueError):
    """Input rejected before anything was written"""


class BookingNotFoundError(NotFoundError):
    def __init__(self, booking_id):
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found")


class BookingValidationError(ValidationError):
    pass


class CustomerValidationError(ValidationError):
    pass


class EventValidationError(ValidationError):
    pass


class ReminderError(ValueError):
    """A single on-demand reminder could not be sent"""


class InvalidMessageStatus(ValueError):
    def __init__(self, status):
        self.status = status
        super().__init__(f"Invalid message status: {status}")
