from django.db import models
from django.conf import settings
from django.utils import timezone


class Concern(models.Model):
    """Maintenance ticket raised by a tenant against their room's owner."""

    class Status(models.TextChoices):
        OPEN = "open", "Open"
        RESOLVED = "resolved", "Resolved"

    tenant = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="concerns")
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="received_concerns")
    # Kept nullable so tickets survive room/property deactivation
    property = models.ForeignKey(
        "properties.Property", null=True, blank=True, on_delete=models.SET_NULL, related_name="concerns"
    )
    room = models.ForeignKey("properties.Room", null=True, blank=True, on_delete=models.SET_NULL, related_name="concerns")

    category = models.CharField(max_length=50, help_text="e.g. plumbing, electrical, cleaning")
    message = models.TextField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.OPEN)
    resolved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "-created_at"], name="idx_concern_tenant_created"),
            models.Index(fields=["owner", "status"], name="idx_concern_owner_status"),
        ]

    def __str__(self) -> str:
        return f"Concern #{self.pk} • {self.category} • {self.status}"


class ConcernMessage(models.Model):
    class Sender(models.TextChoices):
        TENANT = "tenant", "Tenant"
        OWNER = "owner", "Owner"

    concern = models.ForeignKey(Concern, on_delete=models.CASCADE, related_name="messages")
    sender = models.CharField(max_length=10, choices=Sender.choices)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="concern_messages"
    )
    body = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.sender} on #{self.concern_id} @ {self.created_at:%Y-%m-%d %H:%M}"
