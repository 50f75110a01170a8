"""Models for the stores app: firms (tenants), their stores and the audit trail."""
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# Firm
# ---------------------------------------------------------------------------

class Firm(TimeStampedModel):
    """Top-level tenant that owns one or more stores."""

    name = models.CharField("name", max_length=255)
    email = models.EmailField("email", blank=True, default="")
    phone = models.CharField("phone", max_length=30, blank=True, default="")
    address = models.CharField("address", max_length=255, blank=True, default="")
    city = models.CharField("city", max_length=100, blank=True, default="")
    is_active = models.BooleanField("active", default=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Firm"
        verbose_name_plural = "Firms"

    def __str__(self):
        return self.name


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class Store(TimeStampedModel):
    """Location or business unit under a firm. Campaigns belong to stores."""

    firm = models.ForeignKey(
        Firm,
        on_delete=models.CASCADE,
        related_name="stores",
        verbose_name="firm",
    )
    name = models.CharField("name", max_length=255)
    email = models.EmailField("email", blank=True, default="")
    phone = models.CharField("phone", max_length=30, blank=True, default="")
    address = models.CharField("address", max_length=255, blank=True, default="")
    city = models.CharField("city", max_length=100, blank=True, default="")
    state = models.CharField("state", max_length=100, blank=True, default="")
    zip_code = models.CharField("zip code", max_length=20, blank=True, default="")
    country = models.CharField("country", max_length=100, blank=True, default="")
    is_active = models.BooleanField("active", default=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Store"
        verbose_name_plural = "Stores"

    def __str__(self):
        return f"{self.name} ({self.firm.name})"


# ---------------------------------------------------------------------------
# AuditLog
# ---------------------------------------------------------------------------

class AuditLog(models.Model):
    """Immutable log of every significant action in the system."""

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    firm = models.ForeignKey(
        Firm,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    action = models.CharField(max_length=100)
    entity_type = models.CharField(max_length=100, db_index=True)
    entity_id = models.CharField(max_length=255)
    before_json = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    after_json = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Audit log"
        verbose_name_plural = "Audit logs"
        indexes = [
            models.Index(fields=["firm", "created_at"], name="audit_firm_created_idx"),
            models.Index(fields=["entity_type", "created_at"], name="audit_entity_created_idx"),
        ]

    def __str__(self):
        return f"[{self.created_at}] {self.action} on {self.entity_type} #{self.entity_id}"
