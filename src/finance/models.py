"""Models for the finance app."""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class FinancialDocument(TimeStampedModel):
    """Purchase order, invoice or form attached to a campaign."""

    class Type(models.TextChoices):
        PO = "PO", "Purchase order"
        INVOICE = "INVOICE", "Invoice"
        FORM = "FORM", "Form"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        PAID = "PAID", "Paid"
        CANCELLED = "CANCELLED", "Cancelled"

    type = models.CharField("type", max_length=10, choices=Type.choices, db_index=True)
    document_number = models.CharField(
        "document number",
        max_length=100,
        unique=True,
        error_messages={"unique": "Document number already exists."},
    )
    amount = models.DecimalField(
        "amount", max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal("0"))],
    )
    status = models.CharField(
        "status", max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True,
    )
    issue_date = models.DateTimeField("issue date")
    due_date = models.DateTimeField("due date", null=True, blank=True)
    paid_date = models.DateTimeField("paid date", null=True, blank=True)
    description = models.TextField("description", blank=True, default="")
    metadata = models.JSONField("metadata", default=dict, blank=True)
    file_path = models.CharField("file path", max_length=500, blank=True, default="")
    campaign = models.ForeignKey(
        "campaigns.Campaign",
        on_delete=models.CASCADE,
        related_name="financial_documents",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Financial document"
        verbose_name_plural = "Financial documents"

    def __str__(self):
        return f"{self.type} {self.document_number}"
