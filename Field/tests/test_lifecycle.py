from datetime import datetime, timedelta

import pytest
from django.utils import timezone

from Field import lifecycle
from Field.constants import ReservationStatus
from Field.exceptions import InvalidTransitionError
from Field.models import Reservation

T0 = timezone.make_aware(datetime(2026, 3, 2, 9, 0))


def _reservation(status=ReservationStatus.PENDING, created_at=T0):
    return Reservation(status=status, created_at=created_at)


@pytest.mark.parametrize(
    "elapsed, expired",
    [
        (timedelta(minutes=14, seconds=59), False),
        (timedelta(minutes=15), False),
        (timedelta(minutes=15, seconds=1), True),
        (timedelta(hours=3), True),
    ],
)
def test_pending_expires_after_window(elapsed, expired):
    assert lifecycle.is_expired(_reservation(), T0 + elapsed) is expired


def test_only_pending_reservations_expire():
    later = T0 + timedelta(days=1)

    for status in (ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED):
        assert not lifecycle.is_expired(_reservation(status), later)


def test_effective_status_applies_lazy_expiry():
    reservation = _reservation()

    assert lifecycle.effective_status(reservation, T0) == ReservationStatus.PENDING
    assert lifecycle.effective_status(reservation, T0 + timedelta(minutes=16)) == ReservationStatus.EXPIRED
    assert reservation.status == ReservationStatus.PENDING


def test_expires_at_is_fifteen_minutes_after_creation():
    assert lifecycle.expires_at(_reservation()) == T0 + timedelta(minutes=15)
    assert lifecycle.expires_at(_reservation(ReservationStatus.CONFIRMED)) is None


def test_blocking_statuses():
    assert lifecycle.is_blocking(_reservation(), T0)
    assert lifecycle.is_blocking(_reservation(ReservationStatus.CONFIRMED), T0)
    assert not lifecycle.is_blocking(_reservation(), T0 + timedelta(minutes=20))
    assert not lifecycle.is_blocking(_reservation(ReservationStatus.CANCELLED), T0)


@pytest.mark.parametrize(
    "current, target",
    [
        (ReservationStatus.PENDING, ReservationStatus.CONFIRMED),
        (ReservationStatus.PENDING, ReservationStatus.CANCELLED),
        (ReservationStatus.PENDING, ReservationStatus.EXPIRED),
        (ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED),
    ],
)
def test_allowed_transitions(current, target):
    reservation = _reservation(current)

    lifecycle.transition(reservation, target, T0)

    assert reservation.status == target


@pytest.mark.parametrize(
    "current, target",
    [
        (ReservationStatus.CONFIRMED, ReservationStatus.PENDING),
        (ReservationStatus.CONFIRMED, ReservationStatus.EXPIRED),
        (ReservationStatus.CANCELLED, ReservationStatus.CONFIRMED),
        (ReservationStatus.EXPIRED, ReservationStatus.CONFIRMED),
        (ReservationStatus.EXPIRED, ReservationStatus.CANCELLED),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidTransitionError):
        lifecycle.transition(_reservation(current), target, T0)


def test_stale_pending_cannot_be_confirmed():
    reservation = _reservation()

    with pytest.raises(InvalidTransitionError):
        lifecycle.transition(
            reservation, ReservationStatus.CONFIRMED, T0 + timedelta(minutes=15, seconds=1)
        )
    assert reservation.status == ReservationStatus.PENDING
