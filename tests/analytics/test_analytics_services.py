from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from analytics import services as analytics
from analytics.models import AnalyticsSnapshot, PerformanceMetric
from analytics.tasks import capture_daily_snapshot
from campaigns.models import Campaign
from finance.models import FinancialDocument

MetricType = PerformanceMetric.MetricType


@dataclass
class Point:
    metric_type: str
    value: float


# ---------------------------------------------------------------------------
# scoring
# ---------------------------------------------------------------------------

def test_empty_metric_set_scores_zero():
    assert analytics.compute_performance_score([]) == 0


def test_score_is_weighted_mean_times_ten():
    points = [Point(MetricType.REACH, 2), Point(MetricType.CONVERSIONS, 4)]
    expected = (2 * 0.2 + 4 * 0.35) / (0.2 + 0.35) * 10
    assert analytics.compute_performance_score(points) == pytest.approx(expected)


def test_unweighted_types_use_default_weight():
    assert analytics.compute_performance_score([Point(MetricType.LIKES, 3)]) == pytest.approx(30)


def test_score_caps_at_hundred():
    assert analytics.compute_performance_score([Point(MetricType.REACH, 50000)]) == 100


@pytest.mark.parametrize(
    "points",
    [
        [Point(MetricType.ROI, -40)],
        [Point(MetricType.ENGAGEMENT, 0.03), Point(MetricType.FOLLOWERS, 120000)],
        [Point(MetricType.SHARES, 1), Point(MetricType.ROI, -2), Point(MetricType.COMMENTS, 7)],
    ],
)
def test_score_stays_within_bounds(points):
    assert 0 <= analytics.compute_performance_score(points) <= 100


# ---------------------------------------------------------------------------
# budget
# ---------------------------------------------------------------------------

def test_zero_budget_reports_zeros():
    result = analytics.compute_budget_utilization("c-1", 0, 500, 200, influencer_count=2)
    assert result["utilization_rate"] == 0
    assert result["allocation_rate"] == 0
    assert result["available"] == 0
    assert result["influencer_count"] == 2


def test_budget_rates():
    result = analytics.compute_budget_utilization("c-1", Decimal("5000"), Decimal("2000"), Decimal("3500"))
    assert result["utilization_rate"] == pytest.approx(40)
    assert result["allocation_rate"] == pytest.approx(70)
    assert result["available"] == pytest.approx(3000)


def test_overspend_exceeds_hundred_and_available_floors_at_zero():
    result = analytics.compute_budget_utilization("c-1", 1000, 1500, 0)
    assert result["utilization_rate"] == pytest.approx(150)
    assert result["available"] == 0


# ---------------------------------------------------------------------------
# aggregation
# ---------------------------------------------------------------------------

def test_every_type_has_a_named_bucket():
    assert set(analytics.BUCKETS) == set(MetricType.values)


def test_named_buckets_agree_with_by_type():
    points = [Point(t, i + 1) for i, t in enumerate(MetricType.values)]
    result = analytics.aggregate_metrics(points + points)
    assert result["metric_count"] == 2 * len(points)
    for metric_type, bucket in analytics.BUCKETS.items():
        assert result[bucket] == result["by_type"][metric_type]


def test_aggregation_of_nothing():
    result = analytics.aggregate_metrics([])
    assert result["metric_count"] == 0
    assert result["by_type"] == {}
    assert result["total_reach"] == 0.0


@pytest.mark.django_db
def test_firm_aggregation_is_union_of_its_stores(firm, store, second_store, other_store):
    now = timezone.now()
    for target, value in ((store, 100), (second_store, 40), (other_store, 999)):
        analytics.record_metric(metric_type=MetricType.REACH, value=value, store=target, recorded_at=now)
    analytics.record_metric(metric_type=MetricType.LIKES, value=7, store=second_store, recorded_at=now)
    analytics.record_metric(
        metric_type=MetricType.REACH, value=5000, store=store, recorded_at=now - timedelta(days=60),
    )

    date_from, date_to = now - timedelta(days=1), now + timedelta(days=1)
    firm_result = analytics.get_aggregated_analytics(date_from=date_from, date_to=date_to, firm_id=firm.pk)
    first = analytics.aggregate_by_store(store.pk, date_from, date_to)
    second = analytics.aggregate_by_store(second_store.pk, date_from, date_to)

    for bucket in analytics.BUCKETS.values():
        assert firm_result[bucket] == first[bucket] + second[bucket]
    assert firm_result["metric_count"] == first["metric_count"] + second["metric_count"] == 3
    assert firm_result["total_reach"] == 140.0
    assert firm_result["period"] == {"from": date_from, "to": date_to}


def test_inverted_range_is_rejected_before_scope():
    now = timezone.now()
    with pytest.raises(analytics.InvalidDateRange):
        analytics.get_aggregated_analytics(date_from=now, date_to=now - timedelta(days=1))


def test_missing_scope_is_rejected():
    now = timezone.now()
    with pytest.raises(analytics.MissingScope):
        analytics.get_aggregated_analytics(date_from=now - timedelta(days=1), date_to=now)


@pytest.mark.django_db
def test_scope_precedence_prefers_firm_over_store(firm, store, other_store):
    now = timezone.now()
    analytics.record_metric(metric_type=MetricType.SHARES, value=3, store=store, recorded_at=now)
    analytics.record_metric(metric_type=MetricType.SHARES, value=8, store=other_store, recorded_at=now)
    result = analytics.get_aggregated_analytics(
        date_from=now - timedelta(hours=1),
        date_to=now + timedelta(hours=1),
        firm_id=firm.pk,
        store_id=other_store.pk,
    )
    assert result["total_shares"] == 3.0


# ---------------------------------------------------------------------------
# instagram and snapshots
# ---------------------------------------------------------------------------

@pytest.mark.django_db
def test_instagram_insights_without_data(influencer):
    result = analytics.instagram_insights(influencer)
    assert result["has_data"] is False
    assert result["message"] == "No Instagram data available for this influencer"


@pytest.mark.django_db
def test_instagram_insights_use_latest_point(influencer):
    now = timezone.now()
    analytics.record_metric(
        metric_type=MetricType.FOLLOWERS, value=1000, influencer=influencer,
        instagram_profile_url="https://instagram.com/lena", instagram_followers=1000,
        recorded_at=now - timedelta(days=2),
    )
    analytics.record_metric(
        metric_type=MetricType.INSTAGRAM_LINK_CLICKS, value=12, influencer=influencer,
        instagram_profile_url="https://instagram.com/lena", instagram_followers=1100,
        instagram_link_data={"clicks": 12}, recorded_at=now,
    )
    result = analytics.instagram_insights(influencer)
    assert result["has_data"] is True
    assert result["followers"] == 1100
    assert [m["link_clicks"] for m in result["metrics"]] == [12, 0]


@pytest.mark.django_db
def test_daily_snapshot_task(campaign, influencer):
    Campaign.objects.create(store=campaign.store, name="Draft one", budget=Decimal("100.00"))
    FinancialDocument.objects.create(
        campaign=campaign, type="INVOICE", document_number="INV-S", amount=Decimal("80.00"),
        status="PAID", issue_date=timezone.now(),
    )
    capture_daily_snapshot()

    snapshot = AnalyticsSnapshot.objects.get()
    assert snapshot.total_campaigns == 2
    assert snapshot.active_campaigns == 1
    assert snapshot.total_budget == Decimal("5100.00")
    assert snapshot.total_influencers == 1
    assert snapshot.cold_influencers == 1
    assert snapshot.total_revenue == Decimal("80.00")
    assert snapshot.total_expenses == Decimal("2000.00")
