import uuid

import django.db.models.deletion
from django.db import migrations, models

import invoices.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("campaigns", "0001_initial"),
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="InvoiceImage",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "image",
                    models.FileField(max_length=500, upload_to=invoices.models.invoice_upload_to, verbose_name="image"),
                ),
                ("original_name", models.CharField(blank=True, default="", max_length=255, verbose_name="original file name")),
                ("content_type", models.CharField(blank=True, default="", max_length=100, verbose_name="content type")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("PROCESSING", "Processing"),
                            ("PROCESSED", "Processed"),
                            ("FAILED", "Failed"),
                        ],
                        db_index=True,
                        default="PENDING",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "status_timeline",
                    models.JSONField(default=invoices.models.empty_timeline, verbose_name="status timeline"),
                ),
                ("ocr_data", models.JSONField(blank=True, default=dict, verbose_name="OCR data")),
                (
                    "extracted_total",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=14, null=True, verbose_name="extracted total",
                    ),
                ),
                (
                    "campaign",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="invoice_images",
                        to="campaigns.campaign",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="invoice_images",
                        to="catalog.product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Invoice image",
                "verbose_name_plural": "Invoice images",
                "ordering": ["-created_at"],
            },
        ),
    ]
