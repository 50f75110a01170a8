"""Admin configuration for analytics models."""
from django.contrib import admin

from analytics.models import AnalyticsSnapshot, PerformanceMetric


@admin.register(PerformanceMetric)
class PerformanceMetricAdmin(admin.ModelAdmin):
    list_display = ("metric_type", "value", "influencer", "campaign", "store", "recorded_at")
    list_filter = ("metric_type", "store")
    search_fields = ("influencer__name", "campaign__name", "instagram_profile_url")
    date_hierarchy = "recorded_at"
    list_select_related = ("influencer", "campaign", "store")
    readonly_fields = ("id", "created_at", "updated_at")


@admin.register(AnalyticsSnapshot)
class AnalyticsSnapshotAdmin(admin.ModelAdmin):
    list_display = (
        "timestamp",
        "total_campaigns",
        "active_campaigns",
        "total_budget",
        "total_influencers",
        "total_revenue",
        "total_expenses",
    )
    date_hierarchy = "timestamp"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
