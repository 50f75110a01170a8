"""Models for the payouts app."""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class Payout(TimeStampedModel):
    """Money owed to an influencer or paid against a campaign."""

    class Type(models.TextChoices):
        INFLUENCER_COMMISSION = "INFLUENCER_COMMISSION", "Influencer commission"
        CAMPAIGN_PAYMENT = "CAMPAIGN_PAYMENT", "Campaign payment"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        PROCESSING = "PROCESSING", "Processing"
        PAID = "PAID", "Paid"
        FAILED = "FAILED", "Failed"

    # Timestamp field stamped when the payout enters each status.
    STATUS_TIMESTAMP_FIELDS = {
        Status.APPROVED: "approved_at",
        Status.PROCESSING: "processed_at",
        Status.PAID: "paid_at",
        Status.FAILED: "failed_at",
    }

    type = models.CharField("type", max_length=30, choices=Type.choices)
    status = models.CharField(
        "status", max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True,
    )
    amount = models.DecimalField(
        "amount", max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal("0"))],
    )
    currency = models.CharField("currency", max_length=10, default=settings.DEFAULT_PAYOUT_CURRENCY)
    influencer = models.ForeignKey(
        "influencers.Influencer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payouts",
    )
    campaign = models.ForeignKey(
        "campaigns.Campaign",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payouts",
    )
    invoice_id = models.CharField("invoice reference", max_length=64, blank=True, default="")
    po_id = models.CharField("PO reference", max_length=64, blank=True, default="")
    notes = models.TextField("notes", blank=True, default="")
    metadata = models.JSONField("metadata", default=dict, blank=True)
    status_history = models.JSONField("status history", default=list, blank=True)
    requested_at = models.DateTimeField("requested at", null=True, blank=True, db_index=True)
    approved_at = models.DateTimeField("approved at", null=True, blank=True)
    processed_at = models.DateTimeField("processed at", null=True, blank=True)
    paid_at = models.DateTimeField("paid at", null=True, blank=True)
    failed_at = models.DateTimeField("failed at", null=True, blank=True)

    class Meta:
        ordering = ["-requested_at", "-created_at"]
        verbose_name = "Payout"
        verbose_name_plural = "Payouts"

    def __str__(self):
        return f"{self.get_type_display()} {self.amount} {self.currency} ({self.status})"


class DocumentLink(TimeStampedModel):
    """Cross-reference between two financial documents (invoice, PO, payout)."""

    class DocumentType(models.TextChoices):
        INVOICE = "INVOICE", "Invoice"
        PO = "PO", "Purchase order"
        PAYOUT = "PAYOUT", "Payout"

    primary_document_id = models.CharField("primary document", max_length=64, db_index=True)
    primary_document_type = models.CharField(max_length=10, choices=DocumentType.choices)
    linked_document_id = models.CharField("linked document", max_length=64, db_index=True)
    linked_document_type = models.CharField(max_length=10, choices=DocumentType.choices)
    relationship = models.CharField("relationship", max_length=100)
    notes = models.TextField("notes", blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["primary_document_id", "linked_document_id"],
                name="uniq_document_link",
            ),
        ]
        verbose_name = "Document link"
        verbose_name_plural = "Document links"

    def __str__(self):
        return (
            f"{self.primary_document_type}:{self.primary_document_id} -> "
            f"{self.linked_document_type}:{self.linked_document_id}"
        )
