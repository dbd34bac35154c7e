from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

from Field.exceptions import InvalidRangeError

OFF_PEAK_MULTIPLIER = Decimal("0.8")
NORMAL_MULTIPLIER = Decimal("1.0")
PEAK_MULTIPLIER = Decimal("1.2")

OFF_PEAK_END_HOUR = 8
PEAK_START_HOUR = 16
PEAK_END_HOUR = 21

CENTS = Decimal("0.01")


class PricingPolicy:
    # Whole duration charged at the start hour's multiplier
    START_HOUR = "start_hour"
    # Every occupied hour charged at its own multiplier
    HOURLY = "hourly"

    CHOICES = (
        (START_HOUR, "Start hour"),
        (HOURLY, "Hourly"),
    )


def multiplier_for(hour):
    if not 0 <= hour < 24:
        raise InvalidRangeError(f"Hour out of range: {hour}")

    if hour < OFF_PEAK_END_HOUR:
        return OFF_PEAK_MULTIPLIER
    if PEAK_START_HOUR <= hour < PEAK_END_HOUR:
        return PEAK_MULTIPLIER
    return NORMAL_MULTIPLIER


def current_policy():
    policy = getattr(settings, "RESERVATION_PRICING_POLICY", PricingPolicy.START_HOUR)
    if policy not in dict(PricingPolicy.CHOICES):
        raise ValueError(f"Unknown pricing policy: {policy}")
    return policy


def calculate_reservation_price(base_price, interval, policy=None):
    """
    Total price of a reservation interval on a field charging `base_price`
    per hour.

    START_HOUR applies the multiplier of the first hour to the whole booking.
    HOURLY sums base_price * multiplier(hour) over each occupied hour.
    """
    policy = policy or current_policy()
    base = Decimal(base_price)

    if policy == PricingPolicy.HOURLY:
        total = sum(
            (base * multiplier_for(hour) for hour in interval.hours()),
            Decimal("0.00"),
        )
    elif policy == PricingPolicy.START_HOUR:
        duration_hours = Decimal(interval.duration_minutes) / Decimal(60)
        total = base * multiplier_for(interval.start // 60) * duration_hours
    else:
        raise ValueError(f"Unknown pricing policy: {policy}")

    return total.quantize(CENTS, rounding=ROUND_HALF_UP)
