from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from slots.utils import TimeInterval

from .constants import ReservationStatus, SportType


def expiry_window():
    return timedelta(minutes=settings.RESERVATION_EXPIRY_MINUTES)


# =========================
# FIELD (BOOKABLE ASSET)
# =========================

class Field(models.Model):
    """
    A bookable sports field.
    Operating hours drive the hourly slot grid.
    """

    name = models.CharField(max_length=100)
    sport = models.CharField(max_length=20, choices=SportType.CHOICES)
    address = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)

    # Base hourly price before time-of-day multipliers
    price_per_hour = models.DecimalField(max_digits=10, decimal_places=2)

    # Both empty means the field has no open hours configured
    opening_time = models.TimeField(null=True, blank=True)
    closing_time = models.TimeField(null=True, blank=True)

    # Soft delete / availability flag
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    @property
    def has_operating_hours(self):
        return self.opening_time is not None and self.closing_time is not None

    def clean(self):
        if (self.opening_time is None) != (self.closing_time is None):
            raise ValidationError(
                "Opening and closing time must be set together"
            )
        if self.has_operating_hours and self.opening_time >= self.closing_time:
            raise ValidationError("Opening time must be before closing time")

    def __str__(self):
        return self.name


# =========================
# RESERVATION MODEL
# =========================

class ReservationQuerySet(models.QuerySet):

    def for_day(self, field_id, booking_date):
        return self.filter(field_id=field_id, booking_date=booking_date)

    def blocking(self, now=None):
        """
        Reservations that still hold their slot at `now`:
        confirmed, or pending and inside the expiry window.
        """
        now = now or timezone.now()
        return self.filter(
            Q(status=ReservationStatus.CONFIRMED)
            | Q(
                status=ReservationStatus.PENDING,
                created_at__gte=now - expiry_window(),
            )
        )

    def stale_pending(self, now=None):
        now = now or timezone.now()
        return self.filter(
            status=ReservationStatus.PENDING,
            created_at__lt=now - expiry_window(),
        )

    def with_effective_status(self, status, now=None):
        now = now or timezone.now()
        cutoff = now - expiry_window()

        if status == ReservationStatus.PENDING:
            return self.filter(status=status, created_at__gte=cutoff)
        if status == ReservationStatus.EXPIRED:
            return self.filter(
                Q(status=status)
                | Q(status=ReservationStatus.PENDING, created_at__lt=cutoff)
            )
        return self.filter(status=status)


class Reservation(models.Model):
    """
    A customer's booking of one field for a contiguous range of hours.
    Payment is verified outside this system by an administrator.
    """

    field = models.ForeignKey(
        Field,
        on_delete=models.CASCADE,
        related_name="reservations"
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reservations"
    )

    booking_date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    duration_hours = models.PositiveSmallIntegerField()

    # Contact details captured at submission time
    customer_name = models.CharField(max_length=255)
    customer_phone = models.CharField(max_length=20)
    notes = models.TextField(blank=True)

    # Snapshotted at booking time
    total_price = models.DecimalField(max_digits=10, decimal_places=2)

    status = models.CharField(
        max_length=20,
        choices=ReservationStatus.CHOICES,
        default=ReservationStatus.PENDING
    )

    # Expiry is measured from here, so it must be settable
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReservationQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["field", "booking_date"], name="reservation_field_date_idx"),
            models.Index(fields=["status", "created_at"], name="reservation_status_created_idx"),
        ]

    @property
    def interval(self):
        return TimeInterval.parse(self.start_time, self.end_time)

    def clean(self):
        if self.start_time >= self.end_time:
            raise ValidationError("Invalid time range")

    def __str__(self):
        return f"{self.field} | {self.booking_date} | {self.start_time}-{self.end_time}"
