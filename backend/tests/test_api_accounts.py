from datetime import date

import pytest
from django.utils import timezone

from accounts.models import User
from billing.cycles import iter_billing_months
from billing.models import RentBill
from billing.tasks import generate_rent_bills

pytestmark = pytest.mark.django_db


def _login(client, email, password="pass12345"):
    return client.post("/api/auth/login/", {"email": email, "password": password}, format="json")


def test_signup_creates_user(api_client):
    resp = api_client.post(
        "/api/auth/signup/",
        {
            "email": "new@example.com",
            "password": "secret123",
            "first_name": "Nina",
            "last_name": "New",
            "phone": "9123456789",
            "role": "tenant",
        },
        format="json",
    )
    assert resp.status_code == 201
    user = User.objects.get(email="new@example.com")
    assert user.role == User.Role.TENANT
    assert user.check_password("secret123")


def test_signup_rejects_duplicate_email_and_missing_fields(api_client, tenant):
    resp = api_client.post(
        "/api/auth/signup/",
        {"email": tenant.email, "password": "x12345678", "first_name": "A", "last_name": "B", "phone": "9123456789", "role": "owner"},
        format="json",
    )
    assert resp.status_code == 400
    assert "Email already exists." in str(resp.data["email"])

    resp = api_client.post("/api/auth/signup/", {"email": "x@example.com"}, format="json")
    assert resp.status_code == 400
    assert {"password", "first_name", "last_name", "phone", "role"} <= set(resp.data)


def test_login_returns_tokens_and_summary(api_client, owner):
    resp = _login(api_client, owner.email)
    assert resp.status_code == 200
    assert resp.data["access"] and resp.data["refresh"]
    assert resp.data["user"] == {"id": owner.id, "email": owner.email, "first_name": "Olivia", "role": "owner"}


def test_login_with_bad_password_is_rejected(api_client, owner):
    resp = _login(api_client, owner.email, password="wrong")
    assert resp.status_code == 400
    assert resp.data["detail"][0] == "Invalid login credentials."


def test_tenant_login_brings_ledger_up_to_date(api_client, tenant, room, make_tenancy):
    today = timezone.localdate()
    year, month = (today.year, today.month - 2) if today.month > 2 else (today.year - 1, today.month + 10)
    move_in = date(year, month, 1)
    make_tenancy(tenant, room, move_in, payment_day=28)

    resp = _login(api_client, tenant.email)

    assert resp.status_code == 200
    expected = len(list(iter_billing_months(move_in, today.year, today.month)))
    assert RentBill.objects.filter(tenant=tenant).count() == expected == 3


def test_owner_login_does_not_generate(api_client, owner, tenant, room, make_tenancy):
    make_tenancy(tenant, room, date(2024, 1, 1))
    assert _login(api_client, owner.email).status_code == 200
    assert not RentBill.objects.exists()


def test_login_survives_broker_outage(api_client, tenant, room, make_tenancy, monkeypatch):
    make_tenancy(tenant, room, date(2024, 1, 1))

    def broker_down(*args, **kwargs):
        raise ConnectionError("connection refused")

    monkeypatch.setattr(generate_rent_bills, "apply_async", broker_down)
    resp = _login(api_client, tenant.email)

    assert resp.status_code == 200
    assert not RentBill.objects.exists()


def test_login_generation_can_be_disabled(api_client, tenant, room, make_tenancy, settings):
    make_tenancy(tenant, room, date(2024, 1, 1))
    settings.BILLING_GENERATE_ON_LOGIN = False
    assert _login(api_client, tenant.email).status_code == 200
    assert not RentBill.objects.exists()


def test_profile_read_and_update(tenant_client, tenant):
    resp = tenant_client.get("/api/users/me/")
    assert resp.status_code == 200
    assert resp.data["full_name"] == "Tara Tenant"

    resp = tenant_client.put("/api/users/me/", {"full_name": "Tara Jane Doe", "address": "1 Elm"}, format="json")
    assert resp.status_code == 200
    tenant.refresh_from_db()
    assert (tenant.first_name, tenant.last_name, tenant.address) == ("Tara", "Jane Doe", "1 Elm")


def test_empty_profile_update_is_rejected(tenant_client):
    resp = tenant_client.put("/api/users/me/", {}, format="json")
    assert resp.status_code == 400


def test_profile_requires_authentication(api_client):
    assert api_client.get("/api/users/me/").status_code == 401
