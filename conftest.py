from datetime import datetime, time, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from Field.constants import ReservationStatus
from Field.models import Field, Reservation


@pytest.fixture
def now():
    # 06:00 local, before any field opens
    return timezone.make_aware(datetime(2026, 3, 2, 6, 0))


@pytest.fixture
def today(now):
    return timezone.localdate(now)


@pytest.fixture
def field(db):
    return Field.objects.create(
        name="Lapangan Futsal A",
        sport="futsal",
        price_per_hour=Decimal("100000.00"),
        opening_time=time(8, 0),
        closing_time=time(22, 0),
    )


@pytest.fixture
def customer(django_user_model):
    return django_user_model.objects.create_user(
        email="customer@example.com",
        password="s3cret-pass",
        full_name="Budi Santoso",
        phone_number="081234567890",
    )


@pytest.fixture
def other_customer(django_user_model):
    return django_user_model.objects.create_user(
        email="other@example.com",
        password="s3cret-pass",
        full_name="Sari Dewi",
    )


@pytest.fixture
def staff_user(django_user_model):
    return django_user_model.objects.create_superuser(
        email="admin@example.com",
        password="s3cret-pass",
        full_name="Admin",
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_reservation(field, customer, now):
    def _make(
        start="10:00",
        end="11:00",
        booking_date=None,
        status=ReservationStatus.CONFIRMED,
        created_at=None,
        user=customer,
        target=field,
    ):
        start_time = datetime.strptime(start, "%H:%M").time()
        end_time = datetime.strptime(end, "%H:%M").time()
        hours = (end_time.hour - start_time.hour) or 1
        return Reservation.objects.create(
            field=target,
            user=user,
            booking_date=booking_date or timezone.localdate(now),
            start_time=start_time,
            end_time=end_time,
            duration_hours=hours,
            customer_name="Budi Santoso",
            customer_phone="081234567890",
            total_price=target.price_per_hour * hours,
            status=status,
            created_at=created_at or now,
        )

    return _make


@pytest.fixture
def tomorrow():
    return timezone.localdate() + timedelta(days=1)
