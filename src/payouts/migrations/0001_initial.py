import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("campaigns", "0001_initial"),
        ("influencers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="DocumentLink",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("primary_document_id", models.CharField(db_index=True, max_length=64, verbose_name="primary document")),
                (
                    "primary_document_type",
                    models.CharField(
                        choices=[("INVOICE", "Invoice"), ("PO", "Purchase order"), ("PAYOUT", "Payout")],
                        max_length=10,
                    ),
                ),
                ("linked_document_id", models.CharField(db_index=True, max_length=64, verbose_name="linked document")),
                (
                    "linked_document_type",
                    models.CharField(
                        choices=[("INVOICE", "Invoice"), ("PO", "Purchase order"), ("PAYOUT", "Payout")],
                        max_length=10,
                    ),
                ),
                ("relationship", models.CharField(max_length=100, verbose_name="relationship")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
            ],
            options={
                "verbose_name": "Document link",
                "verbose_name_plural": "Document links",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("primary_document_id", "linked_document_id"), name="uniq_document_link",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payout",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("INFLUENCER_COMMISSION", "Influencer commission"),
                            ("CAMPAIGN_PAYMENT", "Campaign payment"),
                        ],
                        max_length=30,
                        verbose_name="type",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("APPROVED", "Approved"),
                            ("PROCESSING", "Processing"),
                            ("PAID", "Paid"),
                            ("FAILED", "Failed"),
                        ],
                        db_index=True,
                        default="PENDING",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="amount",
                    ),
                ),
                ("currency", models.CharField(default="USD", max_length=10, verbose_name="currency")),
                ("invoice_id", models.CharField(blank=True, default="", max_length=64, verbose_name="invoice reference")),
                ("po_id", models.CharField(blank=True, default="", max_length=64, verbose_name="PO reference")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("metadata", models.JSONField(blank=True, default=dict, verbose_name="metadata")),
                ("status_history", models.JSONField(blank=True, default=list, verbose_name="status history")),
                ("requested_at", models.DateTimeField(blank=True, db_index=True, null=True, verbose_name="requested at")),
                ("approved_at", models.DateTimeField(blank=True, null=True, verbose_name="approved at")),
                ("processed_at", models.DateTimeField(blank=True, null=True, verbose_name="processed at")),
                ("paid_at", models.DateTimeField(blank=True, null=True, verbose_name="paid at")),
                ("failed_at", models.DateTimeField(blank=True, null=True, verbose_name="failed at")),
                (
                    "campaign",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payouts",
                        to="campaigns.campaign",
                    ),
                ),
                (
                    "influencer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payouts",
                        to="influencers.influencer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payout",
                "verbose_name_plural": "Payouts",
                "ordering": ["-requested_at", "-created_at"],
            },
        ),
    ]
