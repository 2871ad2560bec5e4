# barbershop/errors.py
"""
Business-rule failures raised by the booking core.

Each carries the HTTP status it maps to and a human-readable ``detail``;
``main.create_app`` renders them the same way FastAPI renders HTTPException.
"""


class BookingError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidInput(BookingError):
    status_code = 422


class NotFound(BookingError):
    status_code = 404


class PastDateTime(BookingError):
    status_code = 422


class OutsideWorkingHours(BookingError):
    status_code = 422


class PermissionDenied(BookingError):
    status_code = 403


class Conflict(BookingError):
    status_code = 409


class SlotAlreadyBooked(Conflict):
    def __init__(self, detail: str = "This time slot is already booked"):
        super().__init__(detail)


class ClientAlreadyBooked(Conflict):
    def __init__(self, detail: str = "You already have a reservation at this time"):
        super().__init__(detail)


class AlreadyExists(Conflict):
    pass
