"""Models for the invoices app."""
import os
import uuid

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel
from core.transitions import TransitionTable


def invoice_upload_to(instance, filename):
    base = os.path.basename(filename) or "invoice"
    return f"{settings.INVOICE_UPLOAD_DIR.strip('/')}/{uuid.uuid4().hex[:12]}-{base}"


def empty_timeline():
    return {"events": []}


class InvoiceImage(TimeStampedModel):
    """Photographed or scanned supplier invoice, plus what OCR read from it."""

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        PROCESSING = "PROCESSING", "Processing"
        PROCESSED = "PROCESSED", "Processed"
        FAILED = "FAILED", "Failed"

    image = models.FileField("image", upload_to=invoice_upload_to, max_length=500)
    original_name = models.CharField("original file name", max_length=255, blank=True, default="")
    content_type = models.CharField("content type", max_length=100, blank=True, default="")
    status = models.CharField(
        "status", max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True,
    )
    status_timeline = models.JSONField("status timeline", default=empty_timeline)
    ocr_data = models.JSONField("OCR data", default=dict, blank=True)
    extracted_total = models.DecimalField(
        "extracted total", max_digits=14, decimal_places=2, null=True, blank=True,
    )
    campaign = models.ForeignKey(
        "campaigns.Campaign",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoice_images",
    )
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoice_images",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Invoice image"
        verbose_name_plural = "Invoice images"

    def __str__(self):
        return f"{self.original_name or self.image.name} ({self.status})"


S = InvoiceImage.Status

INVOICE_TRANSITIONS = TransitionTable(
    "invoice_image",
    {
        S.PENDING: {S.PROCESSING, S.FAILED},
        S.PROCESSING: {S.PROCESSED, S.FAILED},
        S.PROCESSED: {S.PENDING},
        S.FAILED: {S.PENDING},
    },
)
