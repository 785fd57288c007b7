from datetime import date
from decimal import Decimal

import pytest

from billing.models import RentBill
from billing.services import BillGenerator
from properties.models import Property, Room
from tenants.models import Tenancy

pytestmark = pytest.mark.django_db


def _rooms_url(prop):
    return f"/api/properties/{prop.id}/rooms/"


def test_owner_creates_and_lists_properties(owner_client, owner, other_owner):
    Property.objects.create(owner=other_owner, name="Not Mine", address="Elsewhere")
    resp = owner_client.post("/api/properties/", {"name": "Birch Hall", "address": "5 Birch Rd"}, format="json")
    assert resp.status_code == 201
    assert resp.data["owner"] == owner.id

    resp = owner_client.get("/api/properties/")
    assert [p["name"] for p in resp.data] == ["Birch Hall"]


def test_tenant_cannot_manage_properties(tenant_client):
    assert tenant_client.get("/api/properties/").status_code == 403


def test_foreign_property_is_not_found(owner_client, other_owner):
    foreign = Property.objects.create(owner=other_owner, name="Not Mine", address="Elsewhere")
    assert owner_client.get(f"/api/properties/{foreign.id}/").status_code == 404
    assert owner_client.get(_rooms_url(foreign)).status_code == 404


def test_room_crud_within_property(owner_client, property_obj):
    resp = owner_client.post(
        _rooms_url(property_obj),
        {"number": "201", "room_type": "double", "monthly_rent": "600.00", "capacity": 2, "amenities": "AC"},
        format="json",
    )
    assert resp.status_code == 201
    room_id = resp.data["id"]

    resp = owner_client.post(
        _rooms_url(property_obj),
        {"number": "201", "room_type": "double", "monthly_rent": "600.00"},
        format="json",
    )
    assert resp.status_code == 400

    resp = owner_client.patch(f"{_rooms_url(property_obj)}{room_id}/", {"monthly_rent": "650.00"}, format="json")
    assert resp.status_code == 200
    assert Decimal(resp.data["monthly_rent"]) == Decimal("650.00")


def test_assign_tenant_creates_tenancy_and_bills(owner_client, property_obj, room, tenant, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        resp = owner_client.post(
            f"{_rooms_url(property_obj)}{room.id}/assign-tenant/",
            {"email": tenant.email, "move_in": "2024-01-15", "payment_day": 31},
            format="json",
        )

    assert resp.status_code == 201
    tenancy = Tenancy.objects.get(tenant=tenant)
    assert (tenancy.room_id, tenancy.move_in, tenancy.payment_day) == (room.id, date(2024, 1, 15), 31)
    first = RentBill.objects.filter(tenant=tenant).order_by("due_date").first()
    assert first.due_date == date(2024, 1, 31)
    assert RentBill.objects.filter(tenant=tenant).count() >= 4


def test_assign_rejects_unknown_email(owner_client, property_obj, room, owner):
    url = f"{_rooms_url(property_obj)}{room.id}/assign-tenant/"
    resp = owner_client.post(url, {"email": "ghost@example.com", "move_in": "2024-01-01", "payment_day": 1}, format="json")
    assert resp.status_code == 400
    # Owners cannot be assigned as tenants
    resp = owner_client.post(url, {"email": owner.email, "move_in": "2024-01-01", "payment_day": 1}, format="json")
    assert resp.status_code == 400


def test_assign_rejects_already_assigned_tenant(owner_client, property_obj, room, tenant, make_tenancy):
    other_room = Room.objects.create(property=property_obj, number="102", room_type="single", monthly_rent=Decimal("300"))
    make_tenancy(tenant, other_room, date(2024, 1, 1))

    resp = owner_client.post(
        f"{_rooms_url(property_obj)}{room.id}/assign-tenant/",
        {"email": tenant.email, "move_in": "2024-02-01", "payment_day": 5},
        format="json",
    )
    assert resp.status_code == 400
    assert Tenancy.objects.get(tenant=tenant).room_id == other_room.id


def test_assign_rejects_full_room(owner_client, property_obj, tenant, other_tenant, make_tenancy):
    single = Room.objects.create(
        property=property_obj, number="S1", room_type="single", monthly_rent=Decimal("300"), capacity=1,
    )
    make_tenancy(other_tenant, single, date(2024, 1, 1))

    resp = owner_client.post(
        f"{_rooms_url(property_obj)}{single.id}/assign-tenant/",
        {"email": tenant.email, "move_in": "2024-02-01", "payment_day": 5},
        format="json",
    )
    assert resp.status_code == 400
    assert not Tenancy.objects.filter(tenant=tenant).exists()


def test_assign_validates_payment_day(owner_client, property_obj, room, tenant):
    resp = owner_client.post(
        f"{_rooms_url(property_obj)}{room.id}/assign-tenant/",
        {"email": tenant.email, "move_in": "2024-02-01", "payment_day": 32},
        format="json",
    )
    assert resp.status_code == 400


def test_update_and_remove_tenant(owner_client, property_obj, room, tenant, make_tenancy):
    make_tenancy(tenant, room, date(2024, 1, 1))
    BillGenerator().generate_bills_up_to(date(2024, 2, 1))
    url = f"{_rooms_url(property_obj)}{room.id}/tenants/{tenant.id}/"

    resp = owner_client.put(url, {"payment_day": 15}, format="json")
    assert resp.status_code == 200
    assert Tenancy.objects.get(tenant=tenant).payment_day == 15

    resp = owner_client.delete(url)
    assert resp.status_code == 204
    assert not Tenancy.objects.filter(tenant=tenant).exists()
    assert RentBill.objects.filter(tenant=tenant).count() == 2


def test_deleting_room_is_soft_and_keeps_ledger(owner_client, property_obj, room, tenant, make_tenancy):
    make_tenancy(tenant, room, date(2024, 1, 1))
    BillGenerator().generate_bills_up_to(date(2024, 3, 1))

    resp = owner_client.delete(f"{_rooms_url(property_obj)}{room.id}/")

    assert resp.status_code == 204
    room.refresh_from_db()
    assert room.is_active is False
    assert not Tenancy.objects.filter(room=room).exists()
    assert RentBill.objects.filter(room=room).count() == 3
    assert owner_client.get(_rooms_url(property_obj)).data == []


def test_deleting_property_deactivates_rooms_and_ends_tenancies(owner_client, property_obj, room, tenant, make_tenancy):
    make_tenancy(tenant, room, date(2024, 1, 1))
    BillGenerator().generate_bills_up_to(date(2024, 1, 1))

    assert owner_client.delete(f"/api/properties/{property_obj.id}/").status_code == 204

    property_obj.refresh_from_db()
    room.refresh_from_db()
    assert property_obj.is_active is False
    assert room.is_active is False
    assert not Tenancy.objects.exists()
    assert RentBill.objects.count() == 1


def test_tenant_sees_own_room(tenant_client, tenant, room, owner, make_tenancy):
    make_tenancy(tenant, room, date(2024, 1, 1), payment_day=7)

    resp = tenant_client.get("/api/tenants/me/room/")

    assert resp.status_code == 200
    assert resp.data["room_number"] == "101"
    assert resp.data["property_name"] == "Maple House"
    assert resp.data["payment_day"] == 7
    assert resp.data["owner"]["email"] == owner.email


def test_tenant_without_room_gets_404(tenant_client):
    assert tenant_client.get("/api/tenants/me/room/").status_code == 404
