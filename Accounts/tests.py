import pytest
from django.urls import reverse


@pytest.mark.django_db
def test_login_returns_tokens_and_profile(api_client, customer):
    response = api_client.post(
        reverse("login"),
        {"email": "customer@example.com", "password": "s3cret-pass"},
        format="json",
    )

    assert response.status_code == 200
    assert "access" in response.data
    assert "refresh" in response.data
    assert response.data["user"]["email"] == "customer@example.com"
    assert response.data["user"]["role"] == "customer"


@pytest.mark.django_db
def test_login_with_wrong_password(api_client, customer):
    response = api_client.post(
        reverse("login"),
        {"email": "customer@example.com", "password": "wrong"},
        format="json",
    )

    assert response.status_code == 401


@pytest.mark.django_db
def test_admin_role_grants_staff_access(django_user_model):
    admin = django_user_model.objects.create_user(
        email="kasir@example.com",
        password="s3cret-pass",
        full_name="Kasir",
        role=django_user_model.ADMIN,
    )
    customer = django_user_model.objects.create_user(
        email="pelanggan@example.com",
        password="s3cret-pass",
        full_name="Pelanggan",
    )

    assert admin.is_staff
    assert not customer.is_staff
