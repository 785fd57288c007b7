from django.contrib.auth.signals import user_logged_in
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver
import logging

from tenants.models import Tenancy
from .conf import BillingConfig

logger = logging.getLogger(__name__)


@receiver(user_logged_in)
def generate_bills_on_login(sender, request=None, user=None, **kwargs):
    """Bring a returning tenant's ledger up to date. Never blocks the login."""
    if user is None or getattr(user, 'role', None) != 'tenant':
        return
    if not BillingConfig.from_settings().generate_on_login:
        logger.debug("billing.signals:login skip: disabled tenant=%s", user.pk)
        return
    from .services import schedule_bill_generation

    schedule_bill_generation(tenant_id=user.pk, reason="login")


@receiver(post_save, sender=Tenancy)
def generate_bills_on_assignment(sender, instance=None, created=False, **kwargs):
    """Generate historical bills for a tenancy once its row is committed.

    Also runs on updates: an earlier move-in date adds the missing months.
    """
    if instance is None:
        return
    if not BillingConfig.from_settings().generate_on_assignment:
        logger.debug("billing.signals:assignment skip: disabled tenancy=%s", instance.pk)
        return
    from .services import schedule_bill_generation

    tenant_id = instance.tenant_id
    reason = "assignment" if created else "tenancy_update"
    transaction.on_commit(lambda: schedule_bill_generation(tenant_id=tenant_id, reason=reason))
