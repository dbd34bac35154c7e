from dataclasses import dataclass
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.utils import timezone

from Field import lifecycle
from Field.service import ReservationStore, check_horizon, operating_interval
from slots.constants import SlotStatus
from slots.pricing import CENTS, multiplier_for
from slots.utils import format_minutes, generate_slots, to_minutes


@dataclass(frozen=True)
class Slot:
    time_point: int
    available: bool
    price_multiplier: Decimal

    @property
    def label(self):
        return format_minutes(self.time_point)

    def price(self, base_price):
        return (Decimal(base_price) * self.price_multiplier).quantize(
            CENTS, rounding=ROUND_HALF_UP
        )


def resolve_slots(field, booking_date, now=None, reservations=None):
    """
    Hourly slots of `field` on `booking_date` with availability and price
    multiplier. Empty when the field has no operating hours. On today's date
    hours that have already started are unavailable.
    """
    now = now or timezone.now()
    today = timezone.localdate(now)
    check_horizon(booking_date, today)

    if reservations is None:
        reservations = ReservationStore.list_reservations(
            field.id, booking_date, now=now
        )

    hours = operating_interval(field)
    if hours is None:
        return []

    booked = [r.interval for r in reservations if lifecycle.is_blocking(r, now)]

    earliest = hours.start
    if booking_date == today:
        earliest = to_minutes(timezone.localtime(now).time())

    slots = []
    for point in generate_slots(hours.start, hours.end, step_minutes=60):
        slots.append(Slot(
            time_point=point,
            available=(
                point >= earliest
                and not any(interval.contains(point) for interval in booked)
            ),
            price_multiplier=multiplier_for(point // 60),
        ))

    return slots


def booked_intervals(reservations):
    """
    Merge booked intervals into sorted, non-touching "HH:MM" ranges.
    """
    merged = []
    for interval in sorted((r.interval for r in reservations), key=lambda i: i.start):
        if merged and interval.start <= merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], interval.end)
        else:
            merged.append([interval.start, interval.end])

    return [
        {"start_time": format_minutes(start), "end_time": format_minutes(end)}
        for start, end in merged
    ]


def build_date_selector(selected_date, today):
    days = []
    for i in range(settings.BOOKING_HORIZON_DAYS):
        current = today + timedelta(days=i)
        days.append({
            "day_name": current.strftime("%a").upper(),
            "day_number": current.strftime("%d"),
            "full_date": current.isoformat(),
            "is_today": current == today,
            "is_selected": current == selected_date
        })

    return {
        "current_date": selected_date.isoformat(),
        "month_label": selected_date.strftime("%B %Y"),
        "days": days
    }


def format_slot(slot, field):
    return {
        "time": slot.label,
        "status": SlotStatus.AVAILABLE if slot.available else SlotStatus.BOOKED,
        "available": slot.available,
        "price_multiplier": str(slot.price_multiplier),
        "price": str(slot.price(field.price_per_hour)),
    }


def build_availability_response(field, booking_date, now=None):
    now = now or timezone.now()
    check_horizon(booking_date, timezone.localdate(now))

    reservations = ReservationStore.list_reservations(field.id, booking_date, now=now)
    hours = operating_interval(field)

    return {
        "date": booking_date.isoformat(),
        "available": hours is not None,
        "open_time": format_minutes(hours.start) if hours else None,
        "close_time": format_minutes(hours.end) if hours else None,
        "booked_slots": booked_intervals(reservations),
    }


def build_slots_response(field, booking_date, now=None):
    now = now or timezone.now()
    today = timezone.localdate(now)
    check_horizon(booking_date, today)

    # One read serves both the slot grid and the booked ranges
    reservations = ReservationStore.list_reservations(field.id, booking_date, now=now)
    slots = resolve_slots(field, booking_date, now=now, reservations=reservations)

    return {
        "field_details": {
            "id": field.id,
            "name": field.name,
            "sport": field.sport,
            "price_per_hour": str(field.price_per_hour),
        },
        "date_selector": build_date_selector(booking_date, today),
        "booked_slots": booked_intervals(reservations),
        "slots": [format_slot(slot, field) for slot in slots]
    }
