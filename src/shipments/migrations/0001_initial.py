import uuid

import django.db.models.deletion
from django.db import migrations, models

import shipments.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("campaigns", "0001_initial"),
        ("influencers", "0001_initial"),
        ("stores", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CourierShipment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "tracking_number",
                    models.CharField(
                        error_messages={"unique": "Tracking number already exists."},
                        max_length=100,
                        unique=True,
                        verbose_name="tracking number",
                    ),
                ),
                ("courier_name", models.CharField(max_length=100, verbose_name="courier name")),
                ("courier_company", models.CharField(blank=True, default="", max_length=100, verbose_name="courier company")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("SENT", "Sent"),
                            ("IN_TRANSIT", "In transit"),
                            ("DELIVERED", "Delivered"),
                            ("RETURNED", "Returned"),
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
                    models.JSONField(default=shipments.models.empty_timeline, verbose_name="status timeline"),
                ),
                ("sent_date", models.DateTimeField(blank=True, null=True, verbose_name="sent date")),
                ("received_date", models.DateTimeField(blank=True, null=True, verbose_name="received date")),
                ("returned_date", models.DateTimeField(blank=True, null=True, verbose_name="returned date")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                (
                    "campaign",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="shipments",
                        to="campaigns.campaign",
                    ),
                ),
                (
                    "influencer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="shipments",
                        to="influencers.influencer",
                    ),
                ),
                (
                    "return_store",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="returned_shipments",
                        to="stores.store",
                    ),
                ),
                (
                    "send_store",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sent_shipments",
                        to="stores.store",
                    ),
                ),
            ],
            options={
                "verbose_name": "Courier shipment",
                "verbose_name_plural": "Courier shipments",
                "ordering": ["-created_at"],
            },
        ),
    ]
