# field/admin.py

from django.contrib import admin, messages

from .constants import ReservationStatus
from .exceptions import ReservationError
from .models import Field, Reservation
from .service import ReservationStore


# -------------------------------
# FIELD ADMIN
# -------------------------------
@admin.register(Field)
class FieldAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "sport",
        "price_per_hour",   # Base per-hour price
        "opening_time",
        "closing_time",
        "is_active",
    )

    list_filter = ("sport", "is_active")
    search_fields = ("name", "address")


# -------------------------------
# RESERVATION ADMIN
# -------------------------------
# Payment verification happens here; status changes go through the store
# so the lifecycle rules apply.
@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "field",
        "customer_name",
        "customer_phone",
        "booking_date",
        "start_time",
        "end_time",
        "total_price",
        "status",
        "created_at",
    )

    list_filter = (
        "status",
        "booking_date",
        "field",
    )

    search_fields = (
        "field__name",
        "customer_name",
        "customer_phone",
        "user__email",
    )

    date_hierarchy = "booking_date"

    # Status and price only change through actions
    readonly_fields = ("status", "total_price", "created_at", "updated_at")

    actions = ["confirm_payment", "cancel_reservations"]

    def _apply_status(self, request, queryset, new_status):
        changed = 0
        for reservation in queryset:
            try:
                ReservationStore.update_status(reservation.id, new_status)
                changed += 1
            except ReservationError as exc:
                self.message_user(
                    request,
                    f"Reservation {reservation.id}: {exc.detail}",
                    level=messages.WARNING,
                )
        self.message_user(request, f"{changed} reservation(s) updated")

    @admin.action(description="Confirm payment")
    def confirm_payment(self, request, queryset):
        self._apply_status(request, queryset, ReservationStatus.CONFIRMED)

    @admin.action(description="Cancel reservations")
    def cancel_reservations(self, request, queryset):
        self._apply_status(request, queryset, ReservationStatus.CANCELLED)
