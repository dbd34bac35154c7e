from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler


class ReservationError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Reservation request failed"
    default_code = "reservation_error"


class InvalidRangeError(ReservationError):
    default_detail = "Invalid time range"
    default_code = "invalid_range"


class OutOfHorizonError(ReservationError):
    default_detail = "Date is outside the booking window"
    default_code = "out_of_horizon"


class SlotUnavailableError(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Selected time slot is no longer available"
    default_code = "slot_unavailable"


class NotFoundError(ReservationError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_code = "not_found"


class InvalidTransitionError(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Reservation cannot move to the requested status"
    default_code = "invalid_transition"


def reservation_exception_handler(exc, context):
    if isinstance(exc, ReservationError):
        return Response(
            {
                "status": "failed",
                "error_code": exc.default_code.upper(),
                "message": str(exc.detail),
            },
            status=exc.status_code,
        )

    return exception_handler(exc, context)
