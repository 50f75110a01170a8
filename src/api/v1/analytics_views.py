"""REST API endpoints for performance metrics and analytics aggregation."""
import logging

from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from analytics import services as analytics_services
from analytics.models import AnalyticsSnapshot, PerformanceMetric
from campaigns.models import Campaign
from influencers.models import Influencer
from stores.models import Firm, Store

from api.v1.analytics_serializers import (
    AggregationQuerySerializer,
    AnalyticsSnapshotSerializer,
    DateWindowSerializer,
    PerformanceMetricSerializer,
)
from api.v1.filters import PerformanceMetricFilter
from api.v1.permissions import Scope

logger = logging.getLogger("crm")

RELATED_MODELS = {
    "influencer_id": Influencer,
    "campaign_id": Campaign,
    "store_id": Store,
}


def _window(request):
    payload = DateWindowSerializer(data=request.query_params)
    payload.is_valid(raise_exception=True)
    return payload.validated_data["date_from"], payload.validated_data["date_to"]


def _bad_request(exc):
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

class PerformanceMetricListCreateAPIView(generics.ListAPIView):
    """GET: paginated metrics. POST: record a metric point."""

    serializer_class = PerformanceMetricSerializer
    queryset = PerformanceMetric.objects.all().order_by("-recorded_at")
    filterset_class = PerformanceMetricFilter
    ordering_fields = ["recorded_at", "value"]

    def post(self, request):
        payload = self.get_serializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = dict(payload.validated_data)
        for key, model in RELATED_MODELS.items():
            pk = data.pop(key, None)
            if pk:
                data[key[:-3]] = get_object_or_404(model, pk=pk)
        metric = analytics_services.record_metric(**data)
        return Response(self.get_serializer(metric).data, status=status.HTTP_201_CREATED)


class PerformanceMetricDetailAPIView(generics.RetrieveDestroyAPIView):
    serializer_class = PerformanceMetricSerializer
    queryset = PerformanceMetric.objects.all()

    def perform_destroy(self, instance):
        logger.info("Performance metric %s deleted", instance.pk)
        instance.delete()


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

class AggregatedAnalyticsAPIView(APIView):
    """Totals over one scope (firm > store > influencer > campaign) and a date window."""

    def get(self, request):
        payload = AggregationQuerySerializer(data=request.query_params)
        payload.is_valid(raise_exception=True)
        try:
            result = analytics_services.get_aggregated_analytics(**payload.validated_data)
        except ValueError as e:
            return _bad_request(e)
        return Response(result)


class StoreAggregatedAnalyticsAPIView(APIView):
    role_scope = Scope.STORE

    def get(self, request, store_id):
        store = get_object_or_404(Store, pk=store_id)
        date_from, date_to = _window(request)
        try:
            result = analytics_services.get_aggregated_analytics(
                date_from=date_from, date_to=date_to, store_id=store.pk,
            )
        except ValueError as e:
            return _bad_request(e)
        return Response(result)


class FirmAggregatedAnalyticsAPIView(APIView):
    role_scope = Scope.FIRM

    def get(self, request, firm_id):
        firm = get_object_or_404(Firm, pk=firm_id)
        date_from, date_to = _window(request)
        try:
            result = analytics_services.get_aggregated_analytics(
                date_from=date_from, date_to=date_to, firm_id=firm.pk,
            )
        except ValueError as e:
            return _bad_request(e)
        return Response(result)


# ---------------------------------------------------------------------------
# Influencer / campaign insights
# ---------------------------------------------------------------------------

class InfluencerScoreAPIView(APIView):
    def get(self, request, influencer_id):
        influencer = get_object_or_404(Influencer, pk=influencer_id)
        return Response(
            {
                "influencer_id": str(influencer.pk),
                "performance_score": analytics_services.influencer_performance_score(influencer),
            }
        )


class InfluencerInstagramAPIView(APIView):
    def get(self, request, influencer_id):
        influencer = get_object_or_404(Influencer, pk=influencer_id)
        return Response(analytics_services.instagram_insights(influencer))


class CampaignBudgetUtilizationAPIView(APIView):
    def get(self, request, campaign_id):
        campaign = get_object_or_404(Campaign, pk=campaign_id)
        return Response(analytics_services.campaign_budget_utilization(campaign))


class AnalyticsSnapshotListAPIView(generics.ListAPIView):
    serializer_class = AnalyticsSnapshotSerializer
    queryset = AnalyticsSnapshot.objects.all().order_by("-timestamp")
