from fastapi import HTTPException, status


class BookingError(HTTPException):
    """Base for errors surfaced to the caller with a fixed status code."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Booking request failed"

    def __init__(self, detail=None, headers=None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ValidationError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid booking data"


class Unauthorized(BookingError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"

    def __init__(self, detail=None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized to modify this booking"


class NotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Booking not found"


class RoomNotFound(NotFound):
    default_detail = "Room not found"


class RoomUnavailable(BookingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Room is already booked for these dates"


class PaymentInitiationFailed(BookingError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Could not start the payment checkout session"


class PaymentVerificationFailed(BookingError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Could not verify the payment with the checkout provider"
