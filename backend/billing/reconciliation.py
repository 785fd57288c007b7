"""Payment submission and owner reconciliation for rent ledger rows.

Unpaid -> Pending (tenant submits proof), Pending -> Paid (owner verifies),
Pending -> Unpaid (owner sends back, proof cleared). Remind only stamps the
action. Paid is terminal. Every transition is a single conditional UPDATE, so
two racing callers cannot both move the same row.
"""
from __future__ import annotations

import functools
import logging
from decimal import Decimal, InvalidOperation

from django.db import DatabaseError
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from accounts.models import log_activity
from .exceptions import BillNotFound, InvalidBillTransition, NotFoundOrUnauthorized, StorageUnavailable
from .models import RentBill
from .storage import discard_receipt

logger = logging.getLogger(__name__)

OPEN_STATUSES = (RentBill.Status.UNPAID, RentBill.Status.PENDING)


def surface_storage_errors(func):
    """Report database failures in user-facing operations as StorageUnavailable (503)."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.exception("billing.%s: storage failure", func.__name__)
            raise StorageUnavailable() from exc

    return wrapper


def _clean_amount(amount):
    if amount in (None, ""):
        return None
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError({"amount": "Enter a valid amount."})
    if value < 0:
        raise ValidationError({"amount": "Amount cannot be negative."})
    return value


@surface_storage_errors
def submit_payment(tenant, year: int, month: int, proof_ref: str, amount=None, room=None) -> RentBill:
    """Attach a payment proof to the tenant's bill for (year, month) and mark it Pending.

    ``room`` is required only when the tenant has bills for several rooms in
    that month. Raises BillNotFound when no bill exists and
    InvalidBillTransition when the bill is already Paid.
    """
    if not proof_ref:
        raise ValidationError({"proof": "A payment receipt is required."})
    if not 1 <= int(month) <= 12:
        raise ValidationError({"month": "Month must be between 1 and 12."})
    amount = _clean_amount(amount)

    qs = RentBill.objects.filter(tenant=tenant, year=year, month=month)
    if room is not None:
        qs = qs.filter(room=room)
    candidates = list(qs.values("id", "proof")[:2])
    if not candidates:
        raise BillNotFound()
    if len(candidates) > 1:
        raise ValidationError({"room": "Several rooms are billed for this month; specify the room."})
    bill_id, previous_proof = candidates[0]["id"], candidates[0]["proof"]

    updated = RentBill.objects.filter(pk=bill_id, status__in=OPEN_STATUSES).update(
        status=RentBill.Status.PENDING,
        proof=proof_ref,
        submitted_amount=amount,
        submitted_at=timezone.now(),
        action=RentBill.Action.NONE,
        action_at=None,
    )
    if not updated:
        raise InvalidBillTransition()
    if previous_proof and previous_proof != proof_ref:
        discard_receipt(previous_proof)

    bill = RentBill.objects.get(pk=bill_id)
    log_activity(
        tenant,
        "submit",
        f"Submitted rent payment for {bill.due_date:%B %Y}",
        meta={"rent_bill_id": bill.id, "amount": str(amount) if amount is not None else None},
    )
    return bill


def _owner_transition(owner, bill_id, action, description, from_statuses=None, **values):
    qs = RentBill.objects.filter(pk=bill_id, owner=owner)
    if from_statuses is not None:
        qs = qs.filter(status__in=from_statuses)
    updated = qs.update(action=action, action_at=timezone.now(), **values)
    if not updated:
        raise NotFoundOrUnauthorized()
    bill = RentBill.objects.select_related("tenant").get(pk=bill_id)
    log_activity(
        owner,
        action,
        f"{description} rent bill for {bill.tenant.get_full_name()} ({bill.due_date:%B %Y})",
        meta={"rent_bill_id": bill.id},
    )
    return bill


@surface_storage_errors
def verify_bill(owner, bill_id) -> RentBill:
    """Pending -> Paid."""
    return _owner_transition(
        owner, bill_id, RentBill.Action.VERIFY, "Verified",
        from_statuses=[RentBill.Status.PENDING], status=RentBill.Status.PAID,
    )


@surface_storage_errors
def send_back_bill(owner, bill_id) -> RentBill:
    """Pending -> Unpaid; the rejected proof is removed."""
    previous = RentBill.objects.filter(pk=bill_id, owner=owner).values_list("proof", flat=True).first()
    bill = _owner_transition(
        owner, bill_id, RentBill.Action.SEND_BACK, "Sent back",
        from_statuses=[RentBill.Status.PENDING], status=RentBill.Status.UNPAID, proof="",
    )
    discard_receipt(previous)
    return bill


@surface_storage_errors
def remind_bill(owner, bill_id) -> RentBill:
    """Stamp a reminder on any owned bill; status is left as is."""
    return _owner_transition(owner, bill_id, RentBill.Action.REMIND, "Reminded about")


def list_unpaid_bills_for_tenant(tenant):
    """Unpaid and Pending bills, earliest due date first."""
    return (
        RentBill.objects.filter(tenant=tenant, status__in=OPEN_STATUSES)
        .select_related("room", "property")
        .order_by("due_date", "id")
    )


def list_bills_for_owner(owner, status=None):
    """All bills of the owner's properties, most recent due date first."""
    qs = RentBill.objects.filter(owner=owner).select_related("tenant", "room", "property")
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-due_date", "-id")
