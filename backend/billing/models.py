from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator, FileExtensionValidator
from django.utils import timezone
from decimal import Decimal
from tenants.models import validate_file_size


RECEIPT_EXTENSIONS = ["jpg", "jpeg", "png", "webp", "pdf"]


class RentBill(models.Model):
    """
    One rent ledger row per (tenant, room, year, month).

    Rows are created only by ``billing.services.write_rent_bill`` and mutated
    only by the reconciliation functions. Foreign keys use PROTECT so removing
    a room, property or tenancy never erases payment history.
    """

    class Status(models.TextChoices):
        UNPAID = "unpaid", "Unpaid"
        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"

    class Action(models.TextChoices):
        NONE = "none", "None"
        VERIFY = "verify", "Verify"
        SEND_BACK = "send_back", "Send Back"
        REMIND = "remind", "Remind"

    tenant = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="rent_bills")
    room = models.ForeignKey("properties.Room", on_delete=models.PROTECT, related_name="rent_bills")
    property = models.ForeignKey("properties.Property", on_delete=models.PROTECT, related_name="rent_bills")
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="owned_rent_bills")

    year = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    due_date = models.DateField()

    # Snapshots at creation time
    payment_day = models.PositiveSmallIntegerField()
    move_in = models.DateField()
    amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.UNPAID)
    proof = models.FileField(
        upload_to="receipts/rent/",
        max_length=255,
        blank=True,
        validators=[FileExtensionValidator(allowed_extensions=RECEIPT_EXTENSIONS), validate_file_size],
    )
    submitted_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    action = models.CharField(max_length=10, choices=Action.choices, default=Action.NONE)
    action_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "room", "year", "month"], name="uniq_rentbill_tenant_room_period"
            ),
            models.CheckConstraint(check=models.Q(month__gte=1) & models.Q(month__lte=12), name="rentbill_month_range"),
            models.CheckConstraint(check=models.Q(amount__gte=0), name="rentbill_amount_non_negative"),
        ]
        indexes = [
            models.Index(fields=["tenant", "status", "due_date"], name="idx_rentbill_tenant_status"),
            models.Index(fields=["owner", "due_date"], name="idx_rentbill_owner_due"),
        ]
        ordering = ["due_date", "id"]

    def __str__(self) -> str:
        return f"Rent #{self.pk} • {self.tenant_id} • {self.year}-{self.month:02d} • {self.status}"


class UtilityBill(models.Model):
    """Ad-hoc charge submitted by a tenant (electricity, water, ...). Not month-keyed."""

    class Status(models.TextChoices):
        UNPAID = "unpaid", "Unpaid"
        PAID = "paid", "Paid"

    class Verification(models.TextChoices):
        PENDING = "pending", "Pending"
        VERIFIED = "verified", "Verified"
        REJECTED = "rejected", "Rejected"

    tenant = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="utility_bills")
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="owned_utility_bills",
    )
    property = models.ForeignKey(
        "properties.Property", on_delete=models.PROTECT, null=True, blank=True, related_name="utility_bills"
    )
    bill_type = models.CharField(max_length=50, help_text="e.g. electricity, water, internet")
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.UNPAID)
    verification = models.CharField(max_length=10, choices=Verification.choices, default=Verification.PENDING)
    receipt = models.FileField(
        upload_to="receipts/utility/",
        max_length=255,
        blank=True,
        validators=[FileExtensionValidator(allowed_extensions=RECEIPT_EXTENSIONS), validate_file_size],
    )
    # Reporting tag only
    year = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(check=models.Q(amount__gte=0), name="utilitybill_amount_non_negative"),
        ]
        indexes = [
            models.Index(fields=["tenant", "-created_at"], name="idx_utilitybill_tenant"),
            models.Index(fields=["owner", "verification"], name="idx_utilitybill_owner_verif"),
        ]
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.bill_type} #{self.pk} • {self.tenant_id} • {self.amount}"
