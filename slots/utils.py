# slots/utils.py
from dataclasses import dataclass
from datetime import time

from Field.exceptions import InvalidRangeError

MINUTES_PER_DAY = 24 * 60


def to_minutes(value):
    """
    Convert "HH:MM" (24-hour) or a datetime.time into minutes of day.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    try:
        hours, minutes = value.split(":")
        hours, minutes = int(hours), int(minutes)
    except (AttributeError, ValueError):
        raise InvalidRangeError(f"Invalid time value: {value!r}. Use HH:MM")

    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise InvalidRangeError(f"Invalid time value: {value!r}. Use HH:MM")

    return hours * 60 + minutes


def format_minutes(minutes):
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_to_time(minutes):
    return time(minutes // 60, minutes % 60)


@dataclass(frozen=True)
class TimeInterval:
    """Half-open [start, end) range in minutes of day."""

    start: int
    end: int

    def __post_init__(self):
        if not (0 <= self.start < MINUTES_PER_DAY):
            raise InvalidRangeError("Interval start must be within the day")
        if not (0 < self.end <= MINUTES_PER_DAY):
            raise InvalidRangeError("Interval end must be within the day")
        if self.start >= self.end:
            raise InvalidRangeError("start_time must be before end_time")

    @classmethod
    def parse(cls, start, end):
        return cls(to_minutes(start), to_minutes(end))

    @classmethod
    def from_start(cls, start, duration_hours):
        start_minute = to_minutes(start)
        return cls(start_minute, start_minute + int(duration_hours) * 60)

    def contains(self, minute):
        return self.start <= minute < self.end

    def overlaps(self, other):
        return self.start < other.end and other.start < self.end

    @property
    def duration_minutes(self):
        return self.end - self.start

    def hours(self):
        """Start hour of every hour the interval occupies."""
        return list(range(self.start // 60, (self.end + 59) // 60))

    def as_labels(self):
        return {
            "start_time": format_minutes(self.start),
            "end_time": format_minutes(self.end),
        }


def generate_slots(open_minute, close_minute, step_minutes=60):
    if step_minutes <= 0:
        raise InvalidRangeError("Slot step must be positive")
    if open_minute >= close_minute:
        raise InvalidRangeError("Opening time must be before closing time")

    slots = []
    current = open_minute
    while current < close_minute:
        slots.append(current)
        current += step_minutes

    return slots
