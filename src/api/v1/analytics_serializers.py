"""Serializers for performance metrics, aggregation queries and snapshots."""
from rest_framework import ISO_8601, serializers

from analytics.models import AnalyticsSnapshot, PerformanceMetric

# Accept plain dates as well as full timestamps.
WINDOW_FORMATS = [ISO_8601, "%Y-%m-%d"]


class PerformanceMetricSerializer(serializers.ModelSerializer):
    influencer_id = serializers.UUIDField(required=False, allow_null=True)
    campaign_id = serializers.UUIDField(required=False, allow_null=True)
    store_id = serializers.UUIDField(required=False, allow_null=True)
    recorded_at = serializers.DateTimeField(required=False)

    class Meta:
        model = PerformanceMetric
        fields = [
            "id", "metric_type", "value", "influencer_id", "campaign_id", "store_id",
            "recorded_at", "instagram_profile_url", "instagram_followers",
            "instagram_engagement_rate", "instagram_link_data", "metadata", "created_at",
        ]
        read_only_fields = ["id", "created_at"]


class DateWindowSerializer(serializers.Serializer):
    date_from = serializers.DateTimeField(input_formats=WINDOW_FORMATS)
    date_to = serializers.DateTimeField(input_formats=WINDOW_FORMATS)


class AggregationQuerySerializer(DateWindowSerializer):
    firm_id = serializers.UUIDField(required=False)
    store_id = serializers.UUIDField(required=False)
    influencer_id = serializers.UUIDField(required=False)
    campaign_id = serializers.UUIDField(required=False)


class AnalyticsSnapshotSerializer(serializers.ModelSerializer):
    class Meta:
        model = AnalyticsSnapshot
        fields = [
            "id", "timestamp", "total_campaigns", "active_campaigns", "total_budget",
            "total_influencers", "cold_influencers", "active_influencers", "final_influencers",
            "total_revenue", "total_expenses", "metadata",
        ]
        read_only_fields = fields
