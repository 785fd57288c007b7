"""Ad-hoc utility bills: submitted by tenants, verified or rejected by owners."""
from django.utils import timezone

from accounts.models import log_activity
from tenants.models import Tenancy
from .exceptions import NotFoundOrUnauthorized
from .models import UtilityBill
from .reconciliation import surface_storage_errors


@surface_storage_errors
def create_utility_bill(tenant, bill_type, amount, receipt=None) -> UtilityBill:
    """Record a tenant's bill, tagged with the current month and the tenant's owner/property if any."""
    today = timezone.localdate()
    tenancy = (
        Tenancy.objects.select_related('room__property')
        .filter(tenant=tenant)
        .first()
    )
    bill = UtilityBill(
        tenant=tenant,
        bill_type=bill_type,
        amount=amount,
        year=today.year,
        month=today.month,
    )
    if tenancy is not None:
        bill.property = tenancy.room.property
        bill.owner_id = tenancy.room.property.owner_id
    if receipt:
        bill.receipt = receipt
    bill.save()
    log_activity(tenant, 'submit', f"Submitted {bill_type} bill", meta={'utility_bill_id': bill.id})
    return bill


def _review(owner, bill_id, verification, status=None):
    values = {'verification': verification}
    if status is not None:
        values['status'] = status
    updated = UtilityBill.objects.filter(
        pk=bill_id, owner=owner, verification=UtilityBill.Verification.PENDING
    ).update(updated_at=timezone.now(), **values)
    if not updated:
        raise NotFoundOrUnauthorized()
    return UtilityBill.objects.select_related('tenant').get(pk=bill_id)


@surface_storage_errors
def verify_utility_bill(owner, bill_id) -> UtilityBill:
    bill = _review(owner, bill_id, UtilityBill.Verification.VERIFIED, UtilityBill.Status.PAID)
    log_activity(owner, 'verify', f"Verified {bill.bill_type} bill of {bill.tenant.get_full_name()}", meta={'utility_bill_id': bill.id})
    return bill


@surface_storage_errors
def reject_utility_bill(owner, bill_id) -> UtilityBill:
    bill = _review(owner, bill_id, UtilityBill.Verification.REJECTED)
    log_activity(owner, 'send_back', f"Rejected {bill.bill_type} bill of {bill.tenant.get_full_name()}", meta={'utility_bill_id': bill.id})
    return bill
