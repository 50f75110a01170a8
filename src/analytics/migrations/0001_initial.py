import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("campaigns", "0001_initial"),
        ("influencers", "0001_initial"),
        ("stores", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="AnalyticsSnapshot",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("timestamp", models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="timestamp")),
                ("total_campaigns", models.PositiveIntegerField(default=0)),
                ("active_campaigns", models.PositiveIntegerField(default=0)),
                ("total_budget", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16)),
                ("total_influencers", models.PositiveIntegerField(default=0)),
                ("cold_influencers", models.PositiveIntegerField(default=0)),
                ("active_influencers", models.PositiveIntegerField(default=0)),
                ("final_influencers", models.PositiveIntegerField(default=0)),
                ("total_revenue", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16)),
                ("total_expenses", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16)),
                ("metadata", models.JSONField(blank=True, default=dict)),
            ],
            options={
                "ordering": ["-timestamp"],
            },
        ),
        migrations.CreateModel(
            name="PerformanceMetric",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "metric_type",
                    models.CharField(
                        choices=[
                            ("REACH", "Reach"),
                            ("ENGAGEMENT", "Engagement"),
                            ("ROI", "ROI"),
                            ("FOLLOWERS", "Followers"),
                            ("LIKES", "Likes"),
                            ("COMMENTS", "Comments"),
                            ("SHARES", "Shares"),
                            ("CONVERSIONS", "Conversions"),
                            ("INSTAGRAM_LINK_CLICKS", "Instagram link clicks"),
                        ],
                        db_index=True,
                        max_length=30,
                        verbose_name="metric type",
                    ),
                ),
                ("value", models.DecimalField(decimal_places=4, max_digits=18, verbose_name="value")),
                ("recorded_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="recorded at")),
                (
                    "instagram_profile_url",
                    models.URLField(blank=True, max_length=500, null=True, verbose_name="Instagram profile URL"),
                ),
                ("instagram_followers", models.PositiveIntegerField(blank=True, null=True, verbose_name="Instagram followers")),
                (
                    "instagram_engagement_rate",
                    models.DecimalField(
                        blank=True, decimal_places=4, max_digits=7, null=True, verbose_name="Instagram engagement rate",
                    ),
                ),
                ("instagram_link_data", models.JSONField(blank=True, null=True, verbose_name="Instagram link data")),
                ("metadata", models.JSONField(blank=True, default=dict, verbose_name="metadata")),
                (
                    "campaign",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="performance_metrics",
                        to="campaigns.campaign",
                    ),
                ),
                (
                    "influencer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="performance_metrics",
                        to="influencers.influencer",
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="performance_metrics",
                        to="stores.store",
                    ),
                ),
            ],
            options={
                "ordering": ["-recorded_at"],
                "indexes": [
                    models.Index(fields=["store", "recorded_at"], name="metric_store_recorded_idx"),
                    models.Index(fields=["influencer", "recorded_at"], name="metric_infl_recorded_idx"),
                    models.Index(fields=["campaign", "recorded_at"], name="metric_camp_recorded_idx"),
                ],
            },
        ),
    ]
