from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.core.exceptions import ValidationError
from io import BytesIO
from PIL import Image, UnidentifiedImageError
import os
import logging
from properties.models import Room, TimeStampedModel

logger = logging.getLogger(__name__)


def validate_file_size(file_obj):
    if not file_obj:
        return
    # Limit depends on extension: PDFs are held to a tighter budget than images
    name = getattr(file_obj, 'name', '') or ''
    ext = os.path.splitext(name)[1].lower().lstrip('.')
    if ext == 'pdf':
        limit_mb = getattr(settings, 'MAX_PDF_UPLOAD_SIZE_MB', 2)
    else:
        limit_mb = getattr(settings, 'MAX_IMAGE_UPLOAD_SIZE_MB', 4)
    max_bytes = limit_mb * 1024 * 1024
    size = getattr(file_obj, 'size', None)
    if size is not None and size > max_bytes:
        raise ValidationError(f"File too large. Maximum allowed size is {limit_mb} MB for .{ext or 'file'}")


# Image optimization for uploaded receipts
MAX_IMAGE_DIMENSIONS = (1600, 1600)
DEFAULT_IMAGE_QUALITY = 75

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp"}


def _is_image_file(file_obj) -> bool:
    if not file_obj:
        return False
    name = getattr(file_obj, 'name', '') or ''
    ext = os.path.splitext(name)[1].lower().lstrip('.')
    return ext in IMAGE_EXTENSIONS


def optimize_image_file(file_obj):
    """Return (bytes, new_filename) for a downscaled JPEG copy, or (None, None) for non-images."""
    if not _is_image_file(file_obj):
        return None, None
    if hasattr(file_obj, 'seek'):
        file_obj.seek(0)
    try:
        with Image.open(file_obj) as img:
            if img.mode in ("RGBA", "P", "LA"):
                img = img.convert("RGB")
            img.thumbnail(MAX_IMAGE_DIMENSIONS, Image.LANCZOS)
            buffer = BytesIO()
            img.save(buffer, format="JPEG", quality=DEFAULT_IMAGE_QUALITY, optimize=True, progressive=True)
    except (UnidentifiedImageError, OSError):
        logger.debug("tenants.optimize_image_file: not a readable image name=%s", getattr(file_obj, 'name', ''))
        return None, None
    base, _ext = os.path.splitext(getattr(file_obj, 'name', 'upload'))
    return buffer.getvalue(), f"{os.path.basename(base)}.jpg"


class Tenancy(TimeStampedModel):
    """
    Active assignment of one tenant user to one room.

    A tenant holds at most one tenancy at a time (OneToOne). Property and owner
    are derived through the room. Deleting a tenancy never touches rent bills.
    """
    tenant = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="tenancy",
        limit_choices_to={"role": "tenant"},
    )
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name="tenancies")
    move_in = models.DateField(help_text="Move-in date; billing starts with this month")
    payment_day = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(31)],
        help_text="Day of month rent is due (clamped to the month's last day)",
    )

    class Meta:
        verbose_name_plural = "tenancies"
        ordering = ["room", "move_in"]
        constraints = [
            models.CheckConstraint(
                check=models.Q(payment_day__gte=1) & models.Q(payment_day__lte=31),
                name="tenancy_payment_day_range",
            ),
        ]
        indexes = [
            models.Index(fields=["room"], name="idx_tenancy_room"),
        ]

    def __str__(self) -> str:
        return f"{self.tenant} @ {self.room}"
