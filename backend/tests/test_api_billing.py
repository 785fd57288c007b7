from datetime import date
from decimal import Decimal
from io import BytesIO

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from billing.models import RentBill, UtilityBill
from billing.services import BillGenerator
from tests.conftest import auth_client

pytestmark = pytest.mark.django_db


def _pdf(name="receipt.pdf"):
    return SimpleUploadedFile(name, b"%PDF-1.4 test receipt", content_type="application/pdf")


def _png(name="receipt.png"):
    buffer = BytesIO()
    Image.new("RGBA", (40, 20), (200, 10, 10, 255)).save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


@pytest.fixture
def bills(tenant, room, make_tenancy, fixed_config):
    make_tenancy(tenant, room, date(2024, 1, 15), payment_day=31)
    BillGenerator(fixed_config).generate_bills_up_to()
    return list(RentBill.objects.filter(tenant=tenant).order_by("due_date"))


def _submit(client, month, upload=None, **extra):
    data = {"year": 2024, "month": month, "proof": upload or _pdf(), **extra}
    return client.post("/api/rent-bills/submit/", data, format="multipart")


def test_tenant_lists_own_bills(tenant_client, other_tenant, bills):
    resp = tenant_client.get("/api/rent-bills/")
    assert resp.status_code == 200
    assert [b["id"] for b in resp.data] == [b.id for b in bills]
    assert resp.data[0]["room_number"] == "101"

    assert auth_client(other_tenant).get("/api/rent-bills/").data == []


def test_status_filter_and_unpaid_listing(tenant_client, bills):
    assert _submit(tenant_client, 1).status_code == 200

    pending = tenant_client.get("/api/rent-bills/", {"status": "pending"})
    assert [b["month"] for b in pending.data] == [1]

    unpaid = tenant_client.get("/api/rent-bills/unpaid/")
    assert [b["month"] for b in unpaid.data] == [1, 2, 3, 4]


def test_submit_pdf_marks_bill_pending(tenant_client, bills):
    resp = _submit(tenant_client, 2, amount="450.00")

    assert resp.status_code == 200
    assert resp.data["bill"]["status"] == "pending"
    bill = RentBill.objects.get(pk=bills[1].id)
    assert bill.proof.name.startswith("receipts/rent/")
    assert bill.proof.name.endswith("receipt.pdf")
    assert bill.submitted_amount == Decimal("450.00")


def test_submit_image_is_stored_as_jpeg(tenant_client, bills):
    resp = _submit(tenant_client, 1, upload=_png())

    assert resp.status_code == 200
    bill = RentBill.objects.get(pk=bills[0].id)
    assert bill.proof.name.endswith("receipt.jpg")
    with bill.proof.open("rb") as stored:
        assert Image.open(stored).format == "JPEG"


def test_submit_rejects_bad_extension_and_missing_proof(tenant_client, bills):
    bad = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")
    assert _submit(tenant_client, 1, upload=bad).status_code == 400
    resp = tenant_client.post("/api/rent-bills/submit/", {"year": 2024, "month": 1}, format="multipart")
    assert resp.status_code == 400
    assert RentBill.objects.get(pk=bills[0].id).status == RentBill.Status.UNPAID


def test_submit_for_month_without_bill_is_404(tenant_client, bills):
    assert _submit(tenant_client, 9).status_code == 404


def test_submit_against_paid_bill_is_conflict(tenant_client, owner_client, bills):
    _submit(tenant_client, 1)
    owner_client.post(f"/api/rent-bills/owner/{bills[0].id}/verify/")

    resp = _submit(tenant_client, 1)

    assert resp.status_code == 409
    assert RentBill.objects.get(pk=bills[0].id).status == RentBill.Status.PAID


def test_owner_reconciles_submitted_bill(tenant_client, owner_client, bills):
    _submit(tenant_client, 1)
    _submit(tenant_client, 2)

    listing = owner_client.get("/api/rent-bills/owner/", {"status": "pending"})
    assert [b["month"] for b in listing.data] == [2, 1]
    assert listing.data[0]["tenant_email"] == "tenant@example.com"

    verified = owner_client.post(f"/api/rent-bills/owner/{bills[0].id}/verify/")
    assert verified.status_code == 200
    assert verified.data["bill"]["status"] == "paid"
    assert verified.data["bill"]["action"] == "verify"

    sent_back = owner_client.post(f"/api/rent-bills/owner/{bills[1].id}/send-back/")
    assert sent_back.status_code == 200
    assert sent_back.data["bill"]["status"] == "unpaid"
    assert not RentBill.objects.get(pk=bills[1].id).proof

    reminded = owner_client.post(f"/api/rent-bills/owner/{bills[2].id}/remind/")
    assert reminded.status_code == 200
    assert reminded.data["bill"]["action"] == "remind"


def test_verify_unpaid_bill_is_404(owner_client, bills):
    assert owner_client.post(f"/api/rent-bills/owner/{bills[0].id}/verify/").status_code == 404


def test_other_owner_gets_404(tenant_client, other_owner, bills):
    _submit(tenant_client, 1)
    client = auth_client(other_owner)

    assert client.get("/api/rent-bills/owner/").data == []
    for verb in ("verify", "send-back", "remind"):
        assert client.post(f"/api/rent-bills/owner/{bills[0].id}/{verb}/").status_code == 404
    assert RentBill.objects.get(pk=bills[0].id).status == RentBill.Status.PENDING


def test_roles_are_enforced(tenant_client, owner_client, bills):
    assert tenant_client.get("/api/rent-bills/owner/").status_code == 403
    assert tenant_client.post(f"/api/rent-bills/owner/{bills[0].id}/verify/").status_code == 403
    assert owner_client.get("/api/rent-bills/").status_code == 403


def test_tenant_submits_utility_bill(tenant_client, tenant, owner, room, property_obj, make_tenancy):
    make_tenancy(tenant, room, date(2024, 1, 1))

    resp = tenant_client.post(
        "/api/bills/",
        {"bill_type": "Electricity", "amount": "32.50", "receipt": _pdf("power.pdf")},
        format="multipart",
    )

    assert resp.status_code == 201
    bill = UtilityBill.objects.get(pk=resp.data["bill"]["id"])
    assert bill.owner_id == owner.id
    assert bill.property_id == property_obj.id
    assert (bill.status, bill.verification) == (UtilityBill.Status.UNPAID, UtilityBill.Verification.PENDING)
    assert [b["id"] for b in tenant_client.get("/api/bills/").data] == [bill.id]


def test_utility_bill_validation(tenant_client):
    assert tenant_client.post("/api/bills/", {"bill_type": "Water", "amount": "-1"}, format="json").status_code == 400
    assert tenant_client.post("/api/bills/", {"bill_type": "  ", "amount": "5"}, format="json").status_code == 400


def test_owner_reviews_utility_bills(tenant_client, owner_client, other_owner, tenant, room, make_tenancy):
    make_tenancy(tenant, room, date(2024, 1, 1))
    first = tenant_client.post("/api/bills/", {"bill_type": "Water", "amount": "10"}, format="json").data["bill"]["id"]
    second = tenant_client.post("/api/bills/", {"bill_type": "Gas", "amount": "20"}, format="json").data["bill"]["id"]

    listing = owner_client.get("/api/bills/owner/", {"verification": "pending"})
    assert [b["id"] for b in listing.data] == [second, first]
    assert listing.data[0]["tenant_name"] == "Tara Tenant"
    assert auth_client(other_owner).post(f"/api/bills/owner/{first}/verify/").status_code == 404

    resp = owner_client.post(f"/api/bills/owner/{first}/verify/")
    assert resp.status_code == 200
    assert (resp.data["bill"]["verification"], resp.data["bill"]["status"]) == ("verified", "paid")

    resp = owner_client.post(f"/api/bills/owner/{second}/reject/")
    assert resp.status_code == 200
    assert resp.data["bill"]["verification"] == "rejected"

    # Already reviewed
    assert owner_client.post(f"/api/bills/owner/{first}/reject/").status_code == 404
