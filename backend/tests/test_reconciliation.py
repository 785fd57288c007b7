from datetime import date
from decimal import Decimal

import pytest
from django.db import DatabaseError
from rest_framework.exceptions import ValidationError

from accounts.models import ActivityLog
from billing import reconciliation
from billing.exceptions import BillNotFound, InvalidBillTransition, NotFoundOrUnauthorized, StorageUnavailable
from billing.models import RentBill
from billing.services import BillGenerator
from properties.models import Room

pytestmark = pytest.mark.django_db


@pytest.fixture
def bills(tenant, room, make_tenancy, fixed_config):
    make_tenancy(tenant, room, date(2024, 1, 15), payment_day=31)
    BillGenerator(fixed_config).generate_bills_up_to()
    return list(RentBill.objects.filter(tenant=tenant).order_by("due_date"))


def _refresh(bill):
    bill.refresh_from_db()
    return bill


def test_submit_moves_unpaid_to_pending_with_proof(tenant, bills):
    bill = reconciliation.submit_payment(tenant, 2024, 2, "receipts/rent/feb.pdf", amount="450.00")

    assert bill.id == bills[1].id
    assert bill.status == RentBill.Status.PENDING
    assert bill.proof.name == "receipts/rent/feb.pdf"
    assert bill.submitted_amount == Decimal("450.00")
    assert bill.submitted_at is not None
    assert ActivityLog.objects.filter(user=tenant, action="submit").count() == 1


def test_resubmit_while_pending_replaces_proof_and_clears_action(tenant, owner, bills):
    reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/a.pdf")
    reconciliation.remind_bill(owner, bills[0].id)

    bill = reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/b.pdf")

    assert bill.status == RentBill.Status.PENDING
    assert bill.proof.name == "receipts/rent/b.pdf"
    assert bill.action == RentBill.Action.NONE
    assert bill.action_at is None


def test_submit_without_matching_bill_is_not_found(tenant, bills):
    with pytest.raises(BillNotFound):
        reconciliation.submit_payment(tenant, 2024, 9, "receipts/rent/x.pdf")


def test_submit_rejects_negative_amount_before_touching_the_row(tenant, bills):
    with pytest.raises(ValidationError):
        reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/x.pdf", amount=Decimal("-1"))
    assert _refresh(bills[0]).status == RentBill.Status.UNPAID


def test_submit_requires_proof(tenant, bills):
    with pytest.raises(ValidationError):
        reconciliation.submit_payment(tenant, 2024, 1, "")


def test_submit_against_paid_bill_is_rejected(tenant, owner, bills):
    reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/a.pdf")
    reconciliation.verify_bill(owner, bills[0].id)

    with pytest.raises(InvalidBillTransition):
        reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/again.pdf")
    bill = _refresh(bills[0])
    assert bill.status == RentBill.Status.PAID
    assert bill.proof.name == "receipts/rent/a.pdf"


def test_submit_needs_room_when_two_rooms_are_billed(tenant, room, property_obj, bills):
    second = Room.objects.create(property=property_obj, number="102", room_type="single", monthly_rent=Decimal("300"))
    RentBill.objects.create(
        tenant=tenant, room=second, property=property_obj, owner=property_obj.owner,
        year=2024, month=1, due_date=date(2024, 1, 31), payment_day=31, move_in=date(2024, 1, 15),
    )

    with pytest.raises(ValidationError):
        reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/a.pdf")
    bill = reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/a.pdf", room=second.id)
    assert bill.room_id == second.id


def test_verify_moves_pending_to_paid(tenant, owner, bills):
    reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/a.pdf")

    bill = reconciliation.verify_bill(owner, bills[0].id)

    assert bill.status == RentBill.Status.PAID
    assert bill.action == RentBill.Action.VERIFY
    assert bill.action_at is not None
    assert ActivityLog.objects.filter(user=owner, action="verify").exists()


def test_verify_on_paid_bill_is_not_found_or_unauthorized(tenant, owner, bills):
    reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/a.pdf")
    reconciliation.verify_bill(owner, bills[0].id)

    with pytest.raises(NotFoundOrUnauthorized):
        reconciliation.verify_bill(owner, bills[0].id)


def test_verify_on_unpaid_bill_is_rejected(owner, bills):
    with pytest.raises(NotFoundOrUnauthorized):
        reconciliation.verify_bill(owner, bills[0].id)
    assert _refresh(bills[0]).status == RentBill.Status.UNPAID


def test_send_back_returns_to_unpaid_and_clears_proof(tenant, owner, bills):
    reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/a.pdf")

    bill = reconciliation.send_back_bill(owner, bills[0].id)

    assert bill.status == RentBill.Status.UNPAID
    assert not bill.proof
    assert bill.action == RentBill.Action.SEND_BACK


def test_send_back_requires_pending(owner, bills):
    with pytest.raises(NotFoundOrUnauthorized):
        reconciliation.send_back_bill(owner, bills[0].id)


def test_remind_stamps_action_without_changing_status(owner, bills):
    bill = reconciliation.remind_bill(owner, bills[0].id)

    assert bill.status == RentBill.Status.UNPAID
    assert bill.action == RentBill.Action.REMIND


def test_other_owner_cannot_touch_the_bill(tenant, other_owner, bills):
    reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/a.pdf")

    for operation in (reconciliation.verify_bill, reconciliation.send_back_bill, reconciliation.remind_bill):
        with pytest.raises(NotFoundOrUnauthorized):
            operation(other_owner, bills[0].id)

    bill = _refresh(bills[0])
    assert bill.status == RentBill.Status.PENDING
    assert bill.action == RentBill.Action.NONE
    assert bill.proof.name == "receipts/rent/a.pdf"


def test_missing_bill_is_indistinguishable_from_foreign_bill(owner):
    with pytest.raises(NotFoundOrUnauthorized):
        reconciliation.verify_bill(owner, 987654)


def test_unpaid_listing_is_earliest_due_first_and_excludes_paid(tenant, owner, bills):
    reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/a.pdf")
    reconciliation.verify_bill(owner, bills[0].id)
    reconciliation.submit_payment(tenant, 2024, 3, "receipts/rent/c.pdf")

    listed = list(reconciliation.list_unpaid_bills_for_tenant(tenant))

    assert [b.id for b in listed] == [bills[1].id, bills[2].id, bills[3].id]
    dues = [b.due_date for b in listed]
    assert dues == sorted(dues)


def test_owner_listing_is_most_recent_first(owner, other_owner, bills):
    listed = list(reconciliation.list_bills_for_owner(owner))
    assert [b.id for b in listed] == [b.id for b in reversed(bills)]
    assert list(reconciliation.list_bills_for_owner(other_owner)) == []
    assert [b.id for b in reconciliation.list_bills_for_owner(owner, status="paid")] == []


def test_storage_failure_surfaces_as_storage_unavailable(tenant, bills, monkeypatch):
    def broken_filter(*args, **kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(RentBill.objects, "filter", broken_filter)
    with pytest.raises(StorageUnavailable):
        reconciliation.submit_payment(tenant, 2024, 1, "receipts/rent/a.pdf")
