"""Models for campaign / influencer performance analytics."""
from decimal import Decimal

from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


class PerformanceMetric(TimeStampedModel):
    """One measured value, attached to an influencer, campaign and/or store.

    Rows are append-only: they are recorded, read and deleted, never edited.
    """

    class MetricType(models.TextChoices):
        REACH = "REACH", "Reach"
        ENGAGEMENT = "ENGAGEMENT", "Engagement"
        ROI = "ROI", "ROI"
        FOLLOWERS = "FOLLOWERS", "Followers"
        LIKES = "LIKES", "Likes"
        COMMENTS = "COMMENTS", "Comments"
        SHARES = "SHARES", "Shares"
        CONVERSIONS = "CONVERSIONS", "Conversions"
        INSTAGRAM_LINK_CLICKS = "INSTAGRAM_LINK_CLICKS", "Instagram link clicks"

    metric_type = models.CharField(
        "metric type", max_length=30, choices=MetricType.choices, db_index=True,
    )
    value = models.DecimalField("value", max_digits=18, decimal_places=4)
    influencer = models.ForeignKey(
        "influencers.Influencer",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="performance_metrics",
    )
    campaign = models.ForeignKey(
        "campaigns.Campaign",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="performance_metrics",
    )
    store = models.ForeignKey(
        "stores.Store",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="performance_metrics",
    )
    recorded_at = models.DateTimeField("recorded at", default=timezone.now, db_index=True)
    instagram_profile_url = models.URLField("Instagram profile URL", max_length=500, null=True, blank=True)
    instagram_followers = models.PositiveIntegerField("Instagram followers", null=True, blank=True)
    instagram_engagement_rate = models.DecimalField(
        "Instagram engagement rate", max_digits=7, decimal_places=4, null=True, blank=True,
    )
    instagram_link_data = models.JSONField("Instagram link data", null=True, blank=True)
    metadata = models.JSONField("metadata", default=dict, blank=True)

    class Meta:
        ordering = ["-recorded_at"]
        indexes = [
            models.Index(fields=["store", "recorded_at"], name="metric_store_recorded_idx"),
            models.Index(fields=["influencer", "recorded_at"], name="metric_infl_recorded_idx"),
            models.Index(fields=["campaign", "recorded_at"], name="metric_camp_recorded_idx"),
        ]

    def __str__(self):
        return f"{self.metric_type}={self.value}"


class AnalyticsSnapshot(TimeStampedModel):
    """Daily point-in-time counters for the dashboard."""

    timestamp = models.DateTimeField("timestamp", default=timezone.now, db_index=True)
    total_campaigns = models.PositiveIntegerField(default=0)
    active_campaigns = models.PositiveIntegerField(default=0)
    total_budget = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    total_influencers = models.PositiveIntegerField(default=0)
    cold_influencers = models.PositiveIntegerField(default=0)
    active_influencers = models.PositiveIntegerField(default=0)
    final_influencers = models.PositiveIntegerField(default=0)
    total_revenue = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    total_expenses = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["-timestamp"]

    def __str__(self):
        return f"Snapshot {self.timestamp:%Y-%m-%d %H:%M}"
