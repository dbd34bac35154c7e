"""
Reservation state machine.

    pending   -> confirmed | expired | cancelled
    confirmed -> cancelled

Expiry is lazy: a pending reservation older than the expiry window is
treated as expired by every read, whether or not the sweep has already
written the new status.
"""
from django.utils import timezone

from .constants import ReservationStatus
from .exceptions import InvalidTransitionError
from .models import expiry_window

TRANSITIONS = {
    ReservationStatus.PENDING: {
        ReservationStatus.CONFIRMED,
        ReservationStatus.EXPIRED,
        ReservationStatus.CANCELLED,
    },
    ReservationStatus.CONFIRMED: {
        ReservationStatus.CANCELLED,
    },
    ReservationStatus.CANCELLED: set(),
    ReservationStatus.EXPIRED: set(),
}


def expires_at(reservation):
    if reservation.status != ReservationStatus.PENDING:
        return None
    return reservation.created_at + expiry_window()


def is_expired(reservation, now=None):
    now = now or timezone.now()
    return (
        reservation.status == ReservationStatus.PENDING
        and now - reservation.created_at > expiry_window()
    )


def effective_status(reservation, now=None):
    if is_expired(reservation, now):
        return ReservationStatus.EXPIRED
    return reservation.status


def is_blocking(reservation, now=None):
    return effective_status(reservation, now) in ReservationStatus.BLOCKING


def can_transition(current, new_status):
    return new_status in TRANSITIONS.get(current, set())


def transition(reservation, new_status, now=None):
    """
    Move `reservation` to `new_status` in memory. Caller persists.
    """
    current = effective_status(reservation, now)

    if not can_transition(current, new_status):
        raise InvalidTransitionError(
            f"Reservation is {current} and cannot become {new_status}"
        )

    reservation.status = new_status
    return reservation
