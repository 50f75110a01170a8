import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        ("influencers", "0001_initial"),
        ("stores", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Campaign",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("description", models.TextField(blank=True, default="", verbose_name="description")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("DRAFT", "Draft"),
                            ("ACTIVE", "Active"),
                            ("PAUSED", "Paused"),
                            ("COMPLETED", "Completed"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        db_index=True,
                        default="DRAFT",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        blank=True,
                        choices=[("REELS", "Reels"), ("POSTS", "Posts"), ("STORIES", "Stories"), ("MIXED", "Mixed")],
                        max_length=20,
                        null=True,
                        verbose_name="type",
                    ),
                ),
                (
                    "budget",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="budget",
                    ),
                ),
                (
                    "budget_spent",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="budget spent",
                    ),
                ),
                (
                    "budget_allocated",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="budget allocated",
                    ),
                ),
                ("start_date", models.DateTimeField(blank=True, null=True, verbose_name="start date")),
                ("end_date", models.DateTimeField(blank=True, null=True, verbose_name="end date")),
                ("deliverable_deadline", models.DateTimeField(blank=True, null=True, verbose_name="deliverable deadline")),
                ("brief", models.TextField(blank=True, default="", verbose_name="brief")),
                ("reels_required", models.PositiveIntegerField(default=0, verbose_name="reels required")),
                ("posts_required", models.PositiveIntegerField(default=0, verbose_name="posts required")),
                ("stories_required", models.PositiveIntegerField(default=0, verbose_name="stories required")),
                (
                    "store",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="campaigns",
                        to="stores.store",
                        verbose_name="store",
                    ),
                ),
            ],
            options={
                "verbose_name": "Campaign",
                "verbose_name_plural": "Campaigns",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="CampaignProduct",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)], verbose_name="quantity",
                    ),
                ),
                ("planned_qty", models.PositiveIntegerField(blank=True, null=True, verbose_name="planned quantity")),
                (
                    "discount",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name="discount"),
                ),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("due_date", models.DateTimeField(blank=True, null=True, verbose_name="due date")),
                (
                    "campaign",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="product_links",
                        to="campaigns.campaign",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="campaign_links",
                        to="catalog.product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Campaign product",
                "verbose_name_plural": "Campaign products",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="InfluencerCampaignLink",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "rate",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="rate",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("ACCEPTED", "Accepted"),
                            ("REJECTED", "Rejected"),
                            ("COMPLETED", "Completed"),
                        ],
                        default="PENDING",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("deliverables", models.TextField(blank=True, default="", verbose_name="deliverables")),
                ("deliverable_type", models.CharField(blank=True, default="", max_length=50, verbose_name="deliverable type")),
                ("expected_date", models.DateTimeField(blank=True, null=True, verbose_name="expected date")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                (
                    "campaign",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="influencer_links",
                        to="campaigns.campaign",
                    ),
                ),
                (
                    "influencer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="campaign_links",
                        to="influencers.influencer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Campaign influencer",
                "verbose_name_plural": "Campaign influencers",
                "ordering": ["-created_at"],
            },
        ),
        migrations.AddField(
            model_name="campaign",
            name="influencers",
            field=models.ManyToManyField(
                blank=True,
                related_name="campaigns",
                through="campaigns.InfluencerCampaignLink",
                to="influencers.influencer",
            ),
        ),
        migrations.AddField(
            model_name="campaign",
            name="products",
            field=models.ManyToManyField(
                blank=True,
                related_name="campaigns",
                through="campaigns.CampaignProduct",
                to="catalog.product",
            ),
        ),
        migrations.AddConstraint(
            model_name="influencercampaignlink",
            constraint=models.UniqueConstraint(fields=("campaign", "influencer"), name="uniq_campaign_influencer"),
        ),
        migrations.AddConstraint(
            model_name="campaignproduct",
            constraint=models.UniqueConstraint(fields=("campaign", "product"), name="uniq_campaign_product"),
        ),
    ]
