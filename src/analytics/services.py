"""
Analytics services: metric recording, scoped aggregation, influencer
performance scoring and campaign budget utilization.

The folding / scoring / budget functions are pure and work on any
iterable of objects exposing ``metric_type`` and ``value``; the
``*_for_*`` helpers load rows and delegate to them.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.utils import timezone

from analytics.models import AnalyticsSnapshot, PerformanceMetric
from stores.services import store_ids_for_firm

logger = logging.getLogger("crm")

MetricType = PerformanceMetric.MetricType

# metric type -> named accumulator in the aggregation result
BUCKETS = {
    MetricType.REACH: "total_reach",
    MetricType.ENGAGEMENT: "total_engagement",
    MetricType.ROI: "total_roi",
    MetricType.FOLLOWERS: "total_followers",
    MetricType.LIKES: "total_likes",
    MetricType.COMMENTS: "total_comments",
    MetricType.SHARES: "total_shares",
    MetricType.CONVERSIONS: "total_conversions",
    MetricType.INSTAGRAM_LINK_CLICKS: "instagram_link_clicks",
}

WEIGHTS = {
    MetricType.REACH: 0.2,
    MetricType.ENGAGEMENT: 0.3,
    MetricType.FOLLOWERS: 0.15,
    MetricType.CONVERSIONS: 0.35,
    MetricType.ROI: 0.25,
}
DEFAULT_WEIGHT = 0.1
MAX_SCORE = 100

INSTAGRAM_HISTORY_SIZE = 10


class InvalidDateRange(ValueError):
    def __init__(self):
        super().__init__("date_from must be before date_to")


class MissingScope(ValueError):
    def __init__(self):
        super().__init__(
            "At least one of firm_id, store_id, influencer_id, or campaign_id is required"
        )


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------

def record_metric(*, metric_type: str, value, recorded_at=None, **fields) -> PerformanceMetric:
    """Store a metric row. Related objects are passed as instances."""
    metric = PerformanceMetric.objects.create(
        metric_type=metric_type,
        value=value,
        recorded_at=recorded_at or timezone.now(),
        **fields,
    )
    logger.info("Metric %s recorded (%s=%s)", metric.pk, metric_type, value)
    return metric


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate_metrics(metrics) -> dict:
    """Fold metrics into one named total per type plus a ``by_type`` map.

    Every known type has a named bucket, so the named totals and
    ``by_type`` always agree.
    """
    result = {bucket: 0.0 for bucket in BUCKETS.values()}
    by_type: dict[str, float] = {}
    count = 0
    for metric in metrics:
        value = float(metric.value)
        bucket = BUCKETS.get(metric.metric_type)
        if bucket:
            result[bucket] += value
        by_type[metric.metric_type] = by_type.get(metric.metric_type, 0.0) + value
        count += 1
    result["metric_count"] = count
    result["by_type"] = by_type
    return result


def _window(date_from, date_to):
    return PerformanceMetric.objects.filter(recorded_at__gte=date_from, recorded_at__lte=date_to)


def aggregate_by_store(store_id, date_from, date_to) -> dict:
    return aggregate_metrics(_window(date_from, date_to).filter(store_id=store_id))


def aggregate_by_firm(firm_id, date_from, date_to) -> dict:
    """Firm totals: the union of the metrics of every store of the firm."""
    store_ids = store_ids_for_firm(firm_id)
    return aggregate_metrics(_window(date_from, date_to).filter(store_id__in=store_ids))


def aggregate_by_influencer(influencer_id, date_from, date_to) -> dict:
    return aggregate_metrics(_window(date_from, date_to).filter(influencer_id=influencer_id))


def aggregate_by_campaign(campaign_id, date_from, date_to) -> dict:
    return aggregate_metrics(_window(date_from, date_to).filter(campaign_id=campaign_id))


def get_aggregated_analytics(
    *,
    date_from,
    date_to,
    firm_id=None,
    store_id=None,
    influencer_id=None,
    campaign_id=None,
) -> dict:
    """Aggregate over the first scope given, in firm > store > influencer >
    campaign order.

    Raises
    ------
    InvalidDateRange
        If ``date_from`` is after ``date_to``.
    MissingScope
        If no scope identifier is given.
    """
    if date_from > date_to:
        raise InvalidDateRange()

    if firm_id:
        result = aggregate_by_firm(firm_id, date_from, date_to)
    elif store_id:
        result = aggregate_by_store(store_id, date_from, date_to)
    elif influencer_id:
        result = aggregate_by_influencer(influencer_id, date_from, date_to)
    elif campaign_id:
        result = aggregate_by_campaign(campaign_id, date_from, date_to)
    else:
        raise MissingScope()

    result["period"] = {"from": date_from, "to": date_to}
    return result


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def compute_performance_score(metrics) -> float:
    """Weighted mean of metric values scaled by 10, clamped to [0, 100].

    Values are used as stored; no per-type normalisation is applied.
    An empty set scores 0.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for metric in metrics:
        weight = WEIGHTS.get(metric.metric_type, DEFAULT_WEIGHT)
        weighted_sum += float(metric.value) * weight
        total_weight += weight
    if total_weight <= 0:
        return 0
    return max(0, min(MAX_SCORE, (weighted_sum / total_weight) * 10))


def influencer_performance_score(influencer) -> float:
    return compute_performance_score(influencer.performance_metrics.only("metric_type", "value"))


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------

def compute_budget_utilization(campaign_id, budget, spent, allocated, influencer_count=0) -> dict:
    """Spent / allocated ratios of a campaign budget, in percent.

    Rates are not clamped: overspend yields a utilization above 100.
    A zero budget reports every figure as 0.
    """
    budget = float(budget or 0)
    spent = float(spent or 0)
    allocated = float(allocated or 0)

    if budget == 0:
        return {
            "campaign_id": str(campaign_id),
            "budget": 0,
            "spent": 0,
            "allocated": 0,
            "available": 0,
            "utilization_rate": 0,
            "allocation_rate": 0,
            "influencer_count": influencer_count,
        }
    return {
        "campaign_id": str(campaign_id),
        "budget": budget,
        "spent": spent,
        "allocated": allocated,
        "available": max(0.0, budget - spent),
        "utilization_rate": spent / budget * 100,
        "allocation_rate": allocated / budget * 100,
        "influencer_count": influencer_count,
    }


def campaign_budget_utilization(campaign) -> dict:
    return compute_budget_utilization(
        campaign.pk,
        campaign.budget,
        campaign.budget_spent,
        campaign.budget_allocated,
        influencer_count=campaign.influencer_links.count(),
    )


# ---------------------------------------------------------------------------
# Instagram
# ---------------------------------------------------------------------------

def instagram_insights(influencer) -> dict:
    metrics = list(
        influencer.performance_metrics.filter(instagram_profile_url__isnull=False)
        .exclude(instagram_profile_url="")
        .order_by("-recorded_at")[:INSTAGRAM_HISTORY_SIZE]
    )
    if not metrics:
        return {
            "influencer_id": str(influencer.pk),
            "has_data": False,
            "message": "No Instagram data available for this influencer",
        }

    latest = metrics[0]
    return {
        "influencer_id": str(influencer.pk),
        "has_data": True,
        "profile_url": latest.instagram_profile_url,
        "followers": latest.instagram_followers,
        "engagement_rate": latest.instagram_engagement_rate,
        "link_data": latest.instagram_link_data,
        "metrics": [
            {
                "recorded_at": m.recorded_at,
                "followers": m.instagram_followers,
                "engagement_rate": m.instagram_engagement_rate,
                "link_clicks": (m.instagram_link_data or {}).get("clicks", 0)
                if isinstance(m.instagram_link_data, dict) else 0,
            }
            for m in metrics
        ],
    }


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

def capture_snapshot() -> AnalyticsSnapshot:
    """Persist the current campaign / influencer / finance counters."""
    from campaigns.models import Campaign
    from finance.models import FinancialDocument
    from influencers.models import Influencer

    campaigns = Campaign.objects.order_by().aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(status=Campaign.Status.ACTIVE)),
        budget=Sum("budget"),
        spent=Sum("budget_spent"),
    )
    influencers = Influencer.objects.order_by().aggregate(
        total=Count("id"),
        cold=Count("id", filter=Q(status=Influencer.Status.COLD)),
        active=Count("id", filter=Q(status=Influencer.Status.ACTIVE)),
        final=Count("id", filter=Q(status=Influencer.Status.FINAL)),
    )
    revenue = FinancialDocument.objects.filter(
        type=FinancialDocument.Type.INVOICE,
        status=FinancialDocument.Status.PAID,
    ).aggregate(total=Sum("amount"))["total"]

    snapshot = AnalyticsSnapshot.objects.create(
        total_campaigns=campaigns["total"],
        active_campaigns=campaigns["active"],
        total_budget=campaigns["budget"] or Decimal("0.00"),
        total_influencers=influencers["total"],
        cold_influencers=influencers["cold"],
        active_influencers=influencers["active"],
        final_influencers=influencers["final"],
        total_revenue=revenue or Decimal("0.00"),
        total_expenses=campaigns["spent"] or Decimal("0.00"),
    )
    logger.info("Analytics snapshot %s captured", snapshot.pk)
    return snapshot
