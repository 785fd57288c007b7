from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from accounts.middleware import get_current_user


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="%(app_label)s_%(class)s_created",
        help_text="User who created this record",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="%(app_label)s_%(class)s_updated",
        help_text="User who last updated this record",
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        user = get_current_user()
        if user and user.is_authenticated:
            if not self.pk and not self.created_by_id:
                self.created_by = user
            self.updated_by = user
        return super().save(*args, **kwargs)


class Property(TimeStampedModel):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="properties",
        help_text="Owner of this property",
        limit_choices_to={"role": "owner"},
    )
    name = models.CharField(max_length=150)
    address = models.CharField(max_length=400)
    description = models.TextField(blank=True)

    # Soft delete: rent history keeps pointing at inactive properties
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name_plural = "properties"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["owner", "is_active"], name="idx_property_owner_active"),
        ]

    def __str__(self) -> str:
        return self.name


class Room(TimeStampedModel):
    property = models.ForeignKey(Property, on_delete=models.PROTECT, related_name="rooms")
    number = models.CharField(max_length=20, help_text="Room number or identifier")
    room_type = models.CharField(max_length=50, help_text="e.g. single, double, dorm")
    monthly_rent = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    capacity = models.PositiveSmallIntegerField(null=True, blank=True, help_text="Maximum tenants; empty means unlimited")
    amenities = models.TextField(blank=True)

    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["property", "number"]
        constraints = [
            models.UniqueConstraint(
                fields=["property", "number"],
                condition=models.Q(is_active=True),
                name="uniq_active_room_property_number",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "is_active"], name="idx_room_property_active"),
        ]

    def __str__(self) -> str:
        return f"Room {self.number} - {self.property}"

    def has_free_slot(self) -> bool:
        if not self.capacity:
            return True
        return self.tenancies.count() < self.capacity
