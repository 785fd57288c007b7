"""Rent bill generation.

``BillGenerator.generate_bills_up_to`` is the single orchestration path used by
the login hook, the tenancy assignment hook, the daily beat task and the
``generate_rent_bills`` management command.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date as _date, datetime
from decimal import Decimal
from typing import List, Optional

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from properties.models import Room
from tenants.models import Tenancy
from .conf import BillingConfig
from .cycles import iter_billing_months, resolve_due_date
from .metrics import RENT_BILL_DUPLICATES, RENT_BILLS_CREATED, TENANCIES_SKIPPED
from .models import RentBill

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenancyRecord:
    tenancy_id: int
    tenant_id: int
    room_id: int
    move_in: _date
    payment_day: Optional[int]


@dataclass(frozen=True)
class OwnerChain:
    room_id: int
    property_id: int
    owner_id: int
    monthly_rent: Decimal


@dataclass
class GenerationResult:
    tenancies: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0


def list_active_tenancies(tenant_id: Optional[int] = None) -> List[TenancyRecord]:
    qs = Tenancy.objects.order_by("id")
    if tenant_id is not None:
        qs = qs.filter(tenant_id=tenant_id)
    return [
        TenancyRecord(
            tenancy_id=row["id"],
            tenant_id=row["tenant_id"],
            room_id=row["room_id"],
            move_in=row["move_in"],
            payment_day=row["payment_day"],
        )
        for row in qs.values("id", "tenant_id", "room_id", "move_in", "payment_day")
    ]


def resolve_owner_chain(room_id: int) -> Optional[OwnerChain]:
    """Room -> property -> owner, or None when the room or its property is gone or inactive."""
    row = (
        Room.objects.filter(pk=room_id, is_active=True, property__is_active=True)
        .values("id", "property_id", "property__owner_id", "monthly_rent")
        .first()
    )
    if row is None:
        return None
    return OwnerChain(
        room_id=row["id"],
        property_id=row["property_id"],
        owner_id=row["property__owner_id"],
        monthly_rent=row["monthly_rent"] or Decimal("0.00"),
    )


def _bill_exists(tenant_id: int, room_id: int, year: int, month: int) -> bool:
    return RentBill.objects.filter(tenant_id=tenant_id, room_id=room_id, year=year, month=month).exists()


def write_rent_bill(record: TenancyRecord, chain: OwnerChain, year: int, month: int, payment_day: int) -> bool:
    """Insert the ledger row for (tenant, room, year, month) unless it exists.

    Returns True when a row was inserted. A concurrent insert of the same key
    surfaces as an IntegrityError from the unique constraint and is treated as
    a successful no-op.
    """
    if _bill_exists(record.tenant_id, record.room_id, year, month):
        return False
    try:
        with transaction.atomic():
            RentBill.objects.create(
                tenant_id=record.tenant_id,
                room_id=chain.room_id,
                property_id=chain.property_id,
                owner_id=chain.owner_id,
                year=year,
                month=month,
                due_date=resolve_due_date(year, month, payment_day),
                payment_day=payment_day,
                move_in=record.move_in,
                amount=chain.monthly_rent,
            )
    except IntegrityError:
        # Only a duplicate key is expected here; anything else is a real failure
        if not RentBill.objects.filter(
            tenant_id=record.tenant_id, room_id=record.room_id, year=year, month=month
        ).exists():
            raise
        logger.debug(
            "billing.write_rent_bill: duplicate absorbed tenant=%s room=%s period=%s-%02d",
            record.tenant_id, record.room_id, year, month,
        )
        RENT_BILL_DUPLICATES.inc()
        return False
    RENT_BILLS_CREATED.inc()
    return True


def _as_local_date(now) -> _date:
    if isinstance(now, datetime):
        if timezone.is_aware(now):
            now = timezone.localtime(now)
        return now.date()
    return now


class BillGenerator:
    def __init__(self, config: Optional[BillingConfig] = None):
        self.config = config or BillingConfig.from_settings()

    def generate_bills_up_to(self, now=None, tenant_id: Optional[int] = None) -> GenerationResult:
        """Create every missing ledger row from each tenancy's move-in month through ``now``'s month.

        Safe to call any number of times. A failing tenancy is logged and
        skipped; the remaining tenancies are still processed.
        """
        target = _as_local_date(now if now is not None else self.config.clock())
        result = GenerationResult()
        for record in list_active_tenancies(tenant_id):
            result.tenancies += 1
            try:
                created = self._generate_for_tenancy(record, target)
            except DatabaseError:
                logger.exception(
                    "billing.generate: tenancy=%s tenant=%s failed; continuing",
                    record.tenancy_id, record.tenant_id,
                )
                TENANCIES_SKIPPED.labels(reason="error").inc()
                result.failed += 1
                continue
            if created is None:
                result.skipped += 1
            else:
                result.created += created
        logger.info(
            "billing.generate: as_of=%s tenancies=%s created=%s skipped=%s failed=%s",
            target, result.tenancies, result.created, result.skipped, result.failed,
        )
        return result

    def _generate_for_tenancy(self, record: TenancyRecord, target: _date) -> Optional[int]:
        chain = resolve_owner_chain(record.room_id)
        if chain is None:
            logger.warning(
                "billing.generate: skip tenancy=%s tenant=%s: room=%s missing or inactive",
                record.tenancy_id, record.tenant_id, record.room_id,
            )
            TENANCIES_SKIPPED.labels(reason="dangling_room").inc()
            return None
        payment_day = record.payment_day or self.config.default_payment_day
        created = 0
        # Months in increasing order; a failure rolls back this tenancy only
        with transaction.atomic():
            for year, month in iter_billing_months(record.move_in, target.year, target.month):
                if write_rent_bill(record, chain, year, month, payment_day):
                    created += 1
        return created


def schedule_bill_generation(tenant_id: Optional[int] = None, reason: str = "") -> None:
    """Queue a generation run without blocking the caller.

    Used by the login and assignment hooks: a broker outage is logged and the
    primary operation carries on; the daily beat run catches up later.
    """
    from .tasks import generate_rent_bills

    try:
        generate_rent_bills.apply_async(kwargs={"tenant_id": tenant_id}, retry=False)
    except Exception:
        logger.exception("billing.schedule: could not queue generation reason=%s tenant=%s", reason, tenant_id)
