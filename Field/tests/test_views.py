from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from Field.constants import ReservationStatus
from Field.models import Field, Reservation

pytestmark = pytest.mark.django_db


def _payload(field, booking_date, start="10:00", hours=1):
    return {
        "field_id": field.id,
        "date": booking_date.isoformat(),
        "start_time": start,
        "duration_hours": hours,
        "customer_name": "Budi Santoso",
        "customer_phone": "081234567890",
    }


def test_field_list_shows_active_fields(api_client, field):
    Field.objects.create(
        name="Lapangan Tutup",
        sport="badminton",
        price_per_hour="50000.00",
        is_active=False,
    )

    response = api_client.get(reverse("field-list"))

    assert response.status_code == 200
    assert [item["name"] for item in response.data["data"]] == ["Lapangan Futsal A"]
    assert response.data["data"][0]["opening_time"] == "08:00"


def test_unknown_field_is_not_found(api_client, field):
    response = api_client.get(reverse("field-detail", args=[field.id + 1]))

    assert response.status_code == 404
    assert response.data["status"] == "failed"
    assert response.data["error_code"] == "NOT_FOUND"


def test_availability_lists_booked_ranges(api_client, field, tomorrow, make_reservation):
    make_reservation("18:00", "20:00", booking_date=tomorrow)

    response = api_client.get(
        reverse("field-availability", args=[field.id]),
        {"date": tomorrow.isoformat()},
    )

    assert response.status_code == 200
    assert response.data["data"]["booked_slots"] == [
        {"start_time": "18:00", "end_time": "20:00"}
    ]


def test_availability_outside_horizon(api_client, field):
    far = timezone.localdate() + timedelta(days=8)

    response = api_client.get(
        reverse("field-availability", args=[field.id]),
        {"date": far.isoformat()},
    )

    assert response.status_code == 400
    assert response.data["error_code"] == "OUT_OF_HORIZON"


def test_slot_grid(api_client, field, tomorrow, make_reservation):
    make_reservation("10:00", "11:00", booking_date=tomorrow)

    response = api_client.get(
        reverse("slot-list"),
        {"field_id": field.id, "date": tomorrow.isoformat()},
    )

    assert response.status_code == 200
    slots = {slot["time"]: slot for slot in response.data["data"]["slots"]}
    assert len(slots) == 14
    assert slots["10:00"]["status"] == "BOOKED"
    assert slots["11:00"]["status"] == "AVAILABLE"


def test_slot_grid_requires_date(api_client, field):
    response = api_client.get(reverse("slot-list"), {"field_id": field.id})

    assert response.status_code == 400


def test_submission_requires_authentication(api_client, field, tomorrow):
    response = api_client.post(
        reverse("reservation-list"), _payload(field, tomorrow), format="json"
    )

    assert response.status_code == 401
    assert not Reservation.objects.exists()


def test_submit_reservation(api_client, field, customer, tomorrow):
    api_client.force_authenticate(customer)

    response = api_client.post(
        reverse("reservation-list"), _payload(field, tomorrow, "17:00", 2), format="json"
    )

    assert response.status_code == 201
    data = response.data["data"]
    assert data["status"] == ReservationStatus.PENDING
    assert data["start_time"] == "17:00"
    assert data["end_time"] == "19:00"
    assert data["total_price"] == "240000.00"
    assert data["expires_at"] is not None
    assert Reservation.objects.get().user == customer


def test_conflicting_submission(api_client, field, customer, other_customer, tomorrow):
    api_client.force_authenticate(customer)
    first = api_client.post(
        reverse("reservation-list"), _payload(field, tomorrow, "10:00", 2), format="json"
    )
    assert first.status_code == 201

    api_client.force_authenticate(other_customer)
    second = api_client.post(
        reverse("reservation-list"), _payload(field, tomorrow, "11:00", 1), format="json"
    )

    assert second.status_code == 409
    assert second.data["error_code"] == "SLOT_UNAVAILABLE"
    assert Reservation.objects.count() == 1


@pytest.mark.parametrize("start", ["25:00", "ten", "9"])
def test_submission_with_bad_time(api_client, field, customer, tomorrow, start):
    api_client.force_authenticate(customer)

    response = api_client.post(
        reverse("reservation-list"), _payload(field, tomorrow, start), format="json"
    )

    assert response.status_code == 400
    assert "start_time" in response.data


def test_customer_cannot_change_status(api_client, customer, tomorrow, make_reservation):
    reservation = make_reservation(
        booking_date=tomorrow,
        status=ReservationStatus.PENDING,
        created_at=timezone.now(),
    )
    api_client.force_authenticate(customer)

    response = api_client.patch(
        reverse("reservation-status", args=[reservation.id]),
        {"status": ReservationStatus.CONFIRMED},
        format="json",
    )

    assert response.status_code == 403


def test_staff_confirms_payment(api_client, staff_user, tomorrow, make_reservation):
    reservation = make_reservation(
        booking_date=tomorrow,
        status=ReservationStatus.PENDING,
        created_at=timezone.now(),
    )
    api_client.force_authenticate(staff_user)

    response = api_client.patch(
        reverse("reservation-status", args=[reservation.id]),
        {"status": ReservationStatus.CONFIRMED},
        format="json",
    )

    assert response.status_code == 200
    assert response.data["data"]["status"] == ReservationStatus.CONFIRMED
    assert response.data["data"]["expires_at"] is None


def test_staff_cannot_confirm_expired_reservation(api_client, staff_user, tomorrow, make_reservation):
    reservation = make_reservation(
        booking_date=tomorrow,
        status=ReservationStatus.PENDING,
        created_at=timezone.now() - timedelta(minutes=20),
    )
    api_client.force_authenticate(staff_user)

    response = api_client.patch(
        reverse("reservation-status", args=[reservation.id]),
        {"status": ReservationStatus.CONFIRMED},
        format="json",
    )

    assert response.status_code == 409
    assert response.data["error_code"] == "INVALID_TRANSITION"


def test_only_owner_can_cancel(api_client, customer, other_customer, tomorrow, make_reservation):
    reservation = make_reservation(
        booking_date=tomorrow,
        status=ReservationStatus.PENDING,
        created_at=timezone.now(),
    )
    url = reverse("reservation-cancel", args=[reservation.id])

    api_client.force_authenticate(other_customer)
    assert api_client.post(url).status_code == 403

    api_client.force_authenticate(customer)
    response = api_client.post(url)

    assert response.status_code == 200
    assert response.data["data"]["status"] == ReservationStatus.CANCELLED


def test_customer_sees_only_own_reservations(api_client, customer, other_customer, staff_user, tomorrow, make_reservation):
    mine = make_reservation("09:00", "10:00", booking_date=tomorrow)
    make_reservation("12:00", "13:00", booking_date=tomorrow, user=other_customer)

    api_client.force_authenticate(customer)
    response = api_client.get(reverse("reservation-list"))
    assert [item["id"] for item in response.data["data"]] == [mine.id]

    api_client.force_authenticate(staff_user)
    response = api_client.get(reverse("reservation-list"))
    assert len(response.data["data"]) == 2


def test_listing_reports_lazy_expiry(api_client, customer, tomorrow, make_reservation):
    stale = make_reservation(
        "09:00", "10:00",
        booking_date=tomorrow,
        status=ReservationStatus.PENDING,
        created_at=timezone.now() - timedelta(minutes=20),
    )
    api_client.force_authenticate(customer)

    response = api_client.get(
        reverse("reservation-list"), {"status": ReservationStatus.EXPIRED}
    )

    assert response.status_code == 200
    assert [item["id"] for item in response.data["data"]] == [stale.id]
    assert response.data["data"][0]["status"] == ReservationStatus.EXPIRED


def test_reservation_detail_is_private(api_client, other_customer, tomorrow, make_reservation):
    reservation = make_reservation(booking_date=tomorrow)

    api_client.force_authenticate(other_customer)
    response = api_client.get(reverse("reservation-detail", args=[reservation.id]))

    assert response.status_code == 403


def test_admin_role_confirms_payment(api_client, django_user_model, tomorrow, make_reservation):
    cashier = django_user_model.objects.create_user(
        email="kasir@example.com",
        password="s3cret-pass",
        full_name="Kasir",
        role=django_user_model.ADMIN,
    )
    reservation = make_reservation(
        booking_date=tomorrow,
        status=ReservationStatus.PENDING,
        created_at=timezone.now(),
    )
    api_client.force_authenticate(cashier)

    response = api_client.patch(
        reverse("reservation-status", args=[reservation.id]),
        {"status": ReservationStatus.CONFIRMED},
        format="json",
    )

    assert response.status_code == 200
    assert response.data["data"]["status"] == ReservationStatus.CONFIRMED
