import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("campaigns", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="FinancialDocument",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "type",
                    models.CharField(
                        choices=[("PO", "Purchase order"), ("INVOICE", "Invoice"), ("FORM", "Form")],
                        db_index=True,
                        max_length=10,
                        verbose_name="type",
                    ),
                ),
                (
                    "document_number",
                    models.CharField(
                        error_messages={"unique": "Document number already exists."},
                        max_length=100,
                        unique=True,
                        verbose_name="document number",
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
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("APPROVED", "Approved"),
                            ("PAID", "Paid"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        db_index=True,
                        default="PENDING",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("issue_date", models.DateTimeField(verbose_name="issue date")),
                ("due_date", models.DateTimeField(blank=True, null=True, verbose_name="due date")),
                ("paid_date", models.DateTimeField(blank=True, null=True, verbose_name="paid date")),
                ("description", models.TextField(blank=True, default="", verbose_name="description")),
                ("metadata", models.JSONField(blank=True, default=dict, verbose_name="metadata")),
                ("file_path", models.CharField(blank=True, default="", max_length=500, verbose_name="file path")),
                (
                    "campaign",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="financial_documents",
                        to="campaigns.campaign",
                    ),
                ),
            ],
            options={
                "verbose_name": "Financial document",
                "verbose_name_plural": "Financial documents",
                "ordering": ["-created_at"],
            },
        ),
    ]
