from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from dormhive import celery_app
from accounts.models import User
from billing.conf import BillingConfig
from properties.models import Property, Room
from tenants.models import Tenancy


@pytest.fixture(autouse=True)
def eager_celery(settings, tmp_path):
    """Run queued tasks inline and keep uploads out of the source tree."""
    celery_app.conf.task_always_eager = True
    celery_app.conf.task_eager_propagates = False
    # The CELERY_-namespaced Django setting takes precedence over conf changes.
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = False
    settings.MEDIA_ROOT = str(tmp_path / "media")
    yield
    celery_app.conf.task_always_eager = False


def make_user(email, role, password="pass12345", first_name="Test", last_name="User"):
    return User.objects.create_user(
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        phone="9876543210",
        role=role,
    )


@pytest.fixture
def owner(db):
    return make_user("owner@example.com", User.Role.OWNER, first_name="Olivia", last_name="Owner")


@pytest.fixture
def other_owner(db):
    return make_user("other-owner@example.com", User.Role.OWNER, first_name="Oscar", last_name="Other")


@pytest.fixture
def tenant(db):
    return make_user("tenant@example.com", User.Role.TENANT, first_name="Tara", last_name="Tenant")


@pytest.fixture
def other_tenant(db):
    return make_user("tenant2@example.com", User.Role.TENANT, first_name="Tom", last_name="Second")


@pytest.fixture
def property_obj(owner):
    return Property.objects.create(owner=owner, name="Maple House", address="12 Maple Street")


@pytest.fixture
def room(property_obj):
    return Room.objects.create(
        property=property_obj, number="101", room_type="single", monthly_rent=Decimal("450.00"), capacity=2,
    )


@pytest.fixture
def make_tenancy(settings):
    """Create a tenancy without firing the assignment hook."""
    def _make(tenant, room, move_in, payment_day=1):
        settings.BILLING_GENERATE_ON_ASSIGNMENT = False
        try:
            return Tenancy.objects.create(tenant=tenant, room=room, move_in=move_in, payment_day=payment_day)
        finally:
            settings.BILLING_GENERATE_ON_ASSIGNMENT = True
    return _make


@pytest.fixture
def fixed_config():
    """BillingConfig pinned to 2024-04-01 12:00 UTC."""
    now = datetime(2024, 4, 1, 12, 0, tzinfo=dt_timezone.utc)
    return BillingConfig(clock=lambda: now)


@pytest.fixture
def api_client():
    return APIClient()


def auth_client(user):
    client = APIClient()
    token = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.access_token}")
    return client


@pytest.fixture
def owner_client(owner):
    return auth_client(owner)


@pytest.fixture
def tenant_client(tenant):
    return auth_client(tenant)


@pytest.fixture
def january_move_in():
    return date(2024, 1, 15)
