from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import RegexValidator
from django.utils import timezone
from django.utils.text import slugify
import logging
import os
from tenants.models import validate_file_size

logger = logging.getLogger(__name__)


def profile_picture_upload_to(instance: "User", filename: str) -> str:
    """
    Build a deterministic, readable filename for profile pictures:
    - Base name: user's full name; if empty, use email local part (before @).
    - Slugified, lowercase.
    - Append user id and timestamp to avoid collisions.
    - Preserve original file extension.
    Example: profile_pictures/john-doe_u27_20250101T101530.jpg
    """
    base, ext = os.path.splitext(filename or '')
    ext = (ext or '').lower() or '.jpg'
    name = instance.get_full_name() if instance else ''
    slug = slugify(name) or 'user'
    user_id = getattr(instance, 'pk', None) or 'u'
    ts = timezone.now().strftime('%Y%m%dT%H%M%S')
    return os.path.join('profile_pictures', f"{slug}_u{user_id}_{ts}{ext}")


class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('The Email field must be set')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', User.Role.OWNER)
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    class Role(models.TextChoices):
        TENANT = "tenant", "Tenant"
        OWNER = "owner", "Owner"

    email = models.EmailField(unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(
        max_length=15,
        blank=True,
        validators=[RegexValidator(regex=r'^\+?\d{7,15}$', message='Enter a valid phone number')],
    )
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.TENANT)
    address = models.CharField(max_length=400, blank=True)
    emergency_contact = models.CharField(max_length=200, blank=True)
    profile_picture = models.ImageField(
        upload_to=profile_picture_upload_to,
        null=True,
        blank=True,
        validators=[validate_file_size],
        help_text='Profile picture of the user',
    )
    is_active = models.BooleanField(default=True)
    # Important: default non-staff for security; only explicit admins/superusers should be staff
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name']

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['id']
        indexes = [
            models.Index(fields=['role'], name='idx_user_role'),
        ]

    def __str__(self):
        return f"{self.email} ({self.get_role_display()})"

    def get_full_name(self):
        """Return the full name if available; otherwise the email local part."""
        name = " ".join(p for p in (self.first_name, self.last_name) if p).strip()
        if name:
            return name
        if self.email:
            return self.email.split('@')[0]
        return ""

    def get_short_name(self):
        return (self.first_name or "").strip() or self.get_full_name()

    def set_full_name(self, full_name: str):
        """Split a free-form full name: first token is the first name, the rest the last name."""
        parts = str(full_name or '').split()
        self.first_name = parts[0] if parts else ''
        self.last_name = " ".join(parts[1:])

    @property
    def is_tenant(self) -> bool:
        return self.role == self.Role.TENANT

    @property
    def is_owner(self) -> bool:
        return self.role == self.Role.OWNER


class ActivityLog(models.Model):
    ACTION_CHOICES = (
        ("create", "Create"),
        ("update", "Update"),
        ("delete", "Delete"),
        ("login", "Login"),
        ("verify", "Verify"),
        ("send_back", "Send Back"),
        ("remind", "Remind"),
        ("submit", "Submit"),
    )

    user = models.ForeignKey('User', on_delete=models.CASCADE, related_name='activity_logs')
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    description = models.TextField(blank=True)
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    meta = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['user', '-timestamp'], name='idx_activity_user_ts'),
        ]

    def __str__(self):
        return f"{self.user_id} {self.action} @ {self.timestamp:%Y-%m-%d %H:%M:%S}"


def log_activity(user: 'User', action: str, description: str = '', meta: dict | None = None):
    """Safely create an activity log entry."""
    if not user:
        return
    try:
        ActivityLog.objects.create(
            user=user,
            action=action,
            description=description or '',
            meta=meta or {},
        )
    except Exception as e:
        # Avoid breaking the main flow due to logging
        logger.warning("Failed to log activity: %s", e)
