from django.conf import settings
from rest_framework import serializers

from slots.utils import format_minutes, to_minutes

from . import lifecycle
from .constants import ReservationStatus
from .exceptions import InvalidRangeError
from .models import Field, Reservation


# =========================================================
# FIELD SERIALIZER (READ-ONLY)
# =========================================================
class FieldSerializer(serializers.ModelSerializer):
    opening_time = serializers.TimeField(format="%H:%M", read_only=True)
    closing_time = serializers.TimeField(format="%H:%M", read_only=True)

    class Meta:
        model = Field
        fields = (
            "id",
            "name",
            "sport",
            "address",
            "description",
            "price_per_hour",
            "opening_time",
            "closing_time",
        )


# =========================================================
# DATE QUERY (?date=YYYY-MM-DD)
# =========================================================
class DateQuerySerializer(serializers.Serializer):
    date = serializers.DateField(input_formats=["%Y-%m-%d"])


# =========================================================
# RESERVATION READ SERIALIZER
# Status is always reported with lazy expiry applied
# =========================================================
class ReservationSerializer(serializers.ModelSerializer):
    field_id = serializers.IntegerField(source="field.id", read_only=True)
    field_name = serializers.CharField(source="field.name", read_only=True)
    start_time = serializers.TimeField(format="%H:%M", read_only=True)
    end_time = serializers.TimeField(format="%H:%M", read_only=True)
    status = serializers.SerializerMethodField()
    expires_at = serializers.SerializerMethodField()

    class Meta:
        model = Reservation
        fields = [
            "id",
            "field_id",
            "field_name",
            "booking_date",
            "start_time",
            "end_time",
            "duration_hours",
            "customer_name",
            "customer_phone",
            "notes",
            "total_price",
            "status",
            "expires_at",
            "created_at",
        ]
        read_only_fields = fields

    def _now(self):
        return self.context.get("now")

    def get_status(self, obj):
        return lifecycle.effective_status(obj, self._now())

    def get_expires_at(self, obj):
        if lifecycle.effective_status(obj, self._now()) != ReservationStatus.PENDING:
            return None
        return lifecycle.expires_at(obj)


# =========================================================
# RESERVATION SUBMISSION
# Shape validation only; admission happens in ReservationStore
# =========================================================
class ReservationCreateSerializer(serializers.Serializer):
    field_id = serializers.IntegerField(min_value=1)
    date = serializers.DateField(input_formats=["%Y-%m-%d"])
    start_time = serializers.CharField(max_length=5)
    duration_hours = serializers.IntegerField(
        min_value=settings.RESERVATION_MIN_HOURS,
        max_value=settings.RESERVATION_MAX_HOURS,
    )
    customer_name = serializers.CharField(max_length=255)
    customer_phone = serializers.CharField(max_length=20)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_start_time(self, value):
        try:
            minutes = to_minutes(value)
        except InvalidRangeError:
            raise serializers.ValidationError("Invalid time format. Use HH:MM")
        return format_minutes(minutes)


# =========================================================
# ADMIN STATUS UPDATE (PAYMENT VERIFICATION)
# =========================================================
class ReservationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED]
    )


class ReservationFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=ReservationStatus.CHOICES, required=False
    )
    field_id = serializers.IntegerField(required=False)
    date = serializers.DateField(input_formats=["%Y-%m-%d"], required=False)
