from __future__ import annotations

import logging

from celery import shared_task
from django.conf import settings
from django.utils.dateparse import parse_date

from .conf import BillingConfig
from .services import BillGenerator

logger = logging.getLogger(__name__)


@shared_task(
    name="billing.tasks.generate_rent_bills",
    soft_time_limit=getattr(settings, "BILLING_TASK_SOFT_TIME_LIMIT", 300),
)
def generate_rent_bills(tenant_id=None, as_of=None) -> int:
    """Create missing rent bills up to today (or ``as_of``, YYYY-MM-DD).

    Runs daily from beat for every tenancy, and on demand for one tenant after
    login or assignment. Returns the number of rows created.
    """
    now = parse_date(as_of) if as_of else None
    result = BillGenerator(BillingConfig.from_settings()).generate_bills_up_to(now, tenant_id=tenant_id)
    if result.failed:
        logger.warning("billing.tasks.generate_rent_bills: %s tenancy(ies) failed", result.failed)
    return result.created
