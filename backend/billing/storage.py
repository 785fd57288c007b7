import logging
import os
import uuid

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils import timezone

from tenants.models import optimize_image_file

logger = logging.getLogger(__name__)


def store_receipt(upload, folder: str = "receipts/rent") -> str:
    """Save an uploaded receipt and return its storage name.

    Images are downscaled to JPEG first; PDFs are stored as uploaded. The
    returned name is the opaque proof reference kept on the ledger row.
    """
    content, new_name = optimize_image_file(upload)
    original = os.path.basename(getattr(upload, "name", "") or "receipt")
    if content is not None:
        payload, original = ContentFile(content), new_name
    else:
        if hasattr(upload, "seek"):
            upload.seek(0)
        payload = upload
    stamp = timezone.now().strftime("%Y%m%dT%H%M%S")
    path = os.path.join(folder, f"{stamp}_{uuid.uuid4().hex[:8]}_{original}")
    name = default_storage.save(path, payload)
    logger.debug("billing.store_receipt: saved %s", name)
    return name


def discard_receipt(name: str):
    """Best-effort removal of a stored receipt that no row references any more."""
    if not name:
        return
    try:
        if default_storage.exists(name):
            default_storage.delete(name)
    except OSError:
        logger.warning("billing.discard_receipt: could not delete %s", name)
