import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from slots.pricing import calculate_reservation_price
from slots.utils import TimeInterval, generate_slots, minutes_to_time, to_minutes

from . import lifecycle
from .constants import ReservationStatus
from .exceptions import (
    InvalidRangeError,
    NotFoundError,
    OutOfHorizonError,
    SlotUnavailableError,
)
from .models import Field, Reservation

logger = logging.getLogger(__name__)


def overlaps(a_start, a_end, b_start, b_end):
    return a_start < b_end and b_start < a_end


def check_horizon(booking_date, today):
    horizon_end = today + timedelta(days=settings.BOOKING_HORIZON_DAYS)

    if booking_date < today:
        raise OutOfHorizonError("Cannot book past dates")
    if booking_date >= horizon_end:
        raise OutOfHorizonError(
            f"Booking allowed only up to {settings.BOOKING_HORIZON_DAYS} days in advance"
        )


def operating_interval(field):
    """Operating hours as a TimeInterval, or None when not configured."""
    if not field.has_operating_hours:
        return None

    try:
        return TimeInterval.parse(field.opening_time, field.closing_time)
    except InvalidRangeError:
        raise InvalidRangeError(f"Field {field.id} has malformed operating hours")


def check_conflict(field_id, booking_date, interval, now=None, reservations=None):
    """
    True when `interval` overlaps a reservation that still holds its slot.

    Without `reservations` the current store contents are read, never a
    cached availability snapshot.
    """
    if reservations is None:
        reservations = ReservationStore.list_reservations(
            field_id, booking_date, now=now
        )

    for reservation in reservations:
        if not lifecycle.is_blocking(reservation, now):
            continue
        booked = reservation.interval
        if overlaps(interval.start, interval.end, booked.start, booked.end):
            return True

    return False


@dataclass
class ReservationDraft:
    field_id: int
    booking_date: object
    start_time: str
    duration_hours: int
    customer_name: str
    customer_phone: str
    user: Optional[object] = None
    notes: str = ""

    def interval(self):
        return TimeInterval.from_start(self.start_time, self.duration_hours)


class FieldDirectory:
    """
    Read access to bookable fields.
    """

    @staticmethod
    def get_field(field_id):
        field = Field.objects.filter(id=field_id, is_active=True).first()
        if not field:
            raise NotFoundError(f"Field {field_id} not found")
        return field

    @staticmethod
    def list_fields():
        return Field.objects.filter(is_active=True).order_by("name")


class ReservationStore:
    """
    All reservation reads and writes live here.
    Views should NOT touch the database directly.
    """

    @staticmethod
    def get_reservation(reservation_id):
        reservation = (
            Reservation.objects
            .select_related("field", "user")
            .filter(id=reservation_id)
            .first()
        )
        if not reservation:
            raise NotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    @staticmethod
    def search(user=None, status=None, field_id=None, booking_date=None, now=None):
        """
        Reservation listing. `user=None` means every customer's bookings.
        """
        qs = Reservation.objects.select_related("field")

        if user is not None:
            qs = qs.filter(user=user)
        if status:
            qs = qs.with_effective_status(status, now)
        if field_id:
            qs = qs.filter(field_id=field_id)
        if booking_date:
            qs = qs.filter(booking_date=booking_date)

        return qs.order_by("-created_at")

    @staticmethod
    def list_reservations(field_id, booking_date, statuses=ReservationStatus.BLOCKING, now=None):
        """
        Reservations for (field, date) whose effective status is in
        `statuses`. Stale pending rows count as expired.
        """
        now = now or timezone.now()
        base = Reservation.objects.for_day(field_id, booking_date)

        if set(statuses) == set(ReservationStatus.BLOCKING):
            candidates = base.blocking(now)
        else:
            candidates = Reservation.objects.none()
            for status in statuses:
                candidates = candidates | base.with_effective_status(status, now)

        return list(candidates.order_by("start_time"))

    @staticmethod
    def create_reservation(draft, now=None):
        now = now or timezone.now()
        today = timezone.localdate(now)

        duration = int(draft.duration_hours)
        if not settings.RESERVATION_MIN_HOURS <= duration <= settings.RESERVATION_MAX_HOURS:
            raise InvalidRangeError(
                f"Duration must be between {settings.RESERVATION_MIN_HOURS} "
                f"and {settings.RESERVATION_MAX_HOURS} hours"
            )

        check_horizon(draft.booking_date, today)

        requested = draft.interval()

        if draft.booking_date == today:
            now_minute = to_minutes(timezone.localtime(now).time())
            if requested.start < now_minute:
                raise OutOfHorizonError("Selected start time has already passed")

        with transaction.atomic():
            # Per-field lock serializes admission even when the day is empty
            field = (
                Field.objects
                .select_for_update()
                .filter(id=draft.field_id, is_active=True)
                .first()
            )
            if not field:
                raise NotFoundError(f"Field {draft.field_id} not found")

            hours = operating_interval(field)
            if hours is None:
                raise SlotUnavailableError("Field has no operating hours on this date")

            if requested.start < hours.start or requested.end > hours.end:
                raise SlotUnavailableError("Outside operating hours")

            if requested.start not in generate_slots(hours.start, hours.end):
                raise SlotUnavailableError("Start time is not a bookable slot")

            existing = ReservationStore.list_reservations(
                field.id, draft.booking_date, now=now
            )

            if check_conflict(field.id, draft.booking_date, requested, now=now, reservations=existing):
                logger.warning(
                    "Reservation rejected: field=%s date=%s %s-%s overlaps an active booking",
                    field.id,
                    draft.booking_date,
                    requested.as_labels()["start_time"],
                    requested.as_labels()["end_time"],
                )
                raise SlotUnavailableError()

            reservation = Reservation.objects.create(
                field=field,
                user=draft.user,
                booking_date=draft.booking_date,
                start_time=minutes_to_time(requested.start),
                end_time=minutes_to_time(requested.end),
                duration_hours=duration,
                customer_name=draft.customer_name,
                customer_phone=draft.customer_phone,
                notes=draft.notes,
                total_price=calculate_reservation_price(field.price_per_hour, requested),
                status=ReservationStatus.PENDING,
                created_at=now,
            )

        logger.info(
            "Reservation %s created: field=%s date=%s %s total=%s",
            reservation.id,
            field.id,
            reservation.booking_date,
            requested.as_labels(),
            reservation.total_price,
        )
        return reservation

    @staticmethod
    def update_status(reservation_id, new_status, now=None):
        with transaction.atomic():
            field_id = (
                Reservation.objects
                .filter(id=reservation_id)
                .values_list("field_id", flat=True)
                .first()
            )
            if field_id is None:
                raise NotFoundError(f"Reservation {reservation_id} not found")

            # Same lock order as create_reservation: field, then reservation
            Field.objects.select_for_update().filter(id=field_id).first()
            reservation = Reservation.objects.select_for_update().get(id=reservation_id)

            now = now or timezone.now()
            previous = lifecycle.effective_status(reservation, now)
            lifecycle.transition(reservation, new_status, now)

            if new_status == ReservationStatus.CONFIRMED:
                others = [
                    r for r in ReservationStore.list_reservations(
                        field_id, reservation.booking_date, now=now
                    )
                    if r.id != reservation.id
                ]
                if check_conflict(
                    field_id,
                    reservation.booking_date,
                    reservation.interval,
                    now=now,
                    reservations=others,
                ):
                    logger.warning(
                        "Confirmation rejected: reservation %s overlaps an active booking",
                        reservation.id,
                    )
                    raise SlotUnavailableError(
                        "Slot was taken by another booking after this reservation expired"
                    )

            reservation.save(update_fields=["status", "updated_at"])

        logger.info(
            "Reservation %s status %s -> %s",
            reservation.id,
            previous,
            new_status,
        )
        return reservation

    @staticmethod
    def expire_stale(now=None):
        """
        Persist `expired` for pending rows past their window.
        Reads never depend on this having run.
        """
        now = now or timezone.now()
        count = Reservation.objects.stale_pending(now).update(
            status=ReservationStatus.EXPIRED,
            updated_at=now,
        )

        if count:
            logger.info("Expired %s stale pending reservations", count)
        return count
