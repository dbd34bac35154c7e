from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count

from Field.models import Reservation

from .models import User


# ----------------------------------
# CUSTOMER RESERVATIONS (READ-ONLY)
# ----------------------------------
class ReservationInline(admin.TabularInline):
    model = Reservation
    extra = 0
    can_delete = False
    show_change_link = True
    ordering = ("-booking_date", "start_time")

    fields = ("field", "booking_date", "start_time", "end_time", "total_price", "status")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


# ----------------------------------
# CUSTOMERS AND ADMINISTRATORS
# ----------------------------------
@admin.register(User)
class UserAdmin(BaseUserAdmin):
    model = User
    inlines = [ReservationInline]

    list_display = (
        "email",
        "full_name",
        "phone_number",
        "role",
        "reservation_count",
        "is_staff",
        "created_at",
    )

    list_filter = ("role", "is_staff", "is_active")
    search_fields = ("email", "full_name", "phone_number")
    ordering = ("-created_at",)

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Contact", {"fields": ("full_name", "phone_number")}),
        ("Access", {
            "fields": ("role", "is_active", "is_staff", "is_superuser", "groups")
        }),
        ("Activity", {"fields": ("last_login", "created_at")}),
    )

    readonly_fields = ("created_at", "last_login")

    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "full_name", "phone_number", "role", "password1", "password2"),
        }),
    )

    filter_horizontal = ("groups",)

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            _reservation_count=Count("reservations")
        )

    @admin.display(description="Reservations", ordering="_reservation_count")
    def reservation_count(self, obj):
        return obj._reservation_count
