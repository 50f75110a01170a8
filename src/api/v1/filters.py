"""django-filter FilterSets for list endpoints."""
import django_filters
from django.db.models import Q

from analytics.models import PerformanceMetric
from campaigns.models import Campaign
from catalog.models import Product
from finance.models import FinancialDocument
from influencers.models import Influencer
from invoices.models import InvoiceImage
from payouts.models import Payout
from shipments.models import CourierShipment
from stores.models import Store


class DateRangeFilterSet(django_filters.FilterSet):
    """``date_from`` / ``date_to`` on ``range_field``, applied only when both are given."""

    date_from = django_filters.IsoDateTimeFilter(method="filter_date_range")
    date_to = django_filters.IsoDateTimeFilter(method="filter_date_range")

    range_field = "created_at"

    def filter_date_range(self, queryset, name, value):
        return queryset

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        date_from = self.form.cleaned_data.get("date_from")
        date_to = self.form.cleaned_data.get("date_to")
        if date_from and date_to:
            queryset = queryset.filter(
                **{f"{self.range_field}__gte": date_from, f"{self.range_field}__lte": date_to}
            )
        return queryset


class StoreFilter(django_filters.FilterSet):
    firm_id = django_filters.UUIDFilter(field_name="firm_id")
    search = django_filters.CharFilter(field_name="name", lookup_expr="icontains")

    class Meta:
        model = Store
        fields = ["firm_id", "is_active", "search"]


class InfluencerFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    platform = django_filters.CharFilter(field_name="platform", lookup_expr="iexact")

    class Meta:
        model = Influencer
        fields = ["status", "platform", "search"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(email__icontains=value))


class ProductFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Product
        fields = ["category", "sku", "as_code", "search"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))


class CampaignFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    store_id = django_filters.UUIDFilter(field_name="store_id")
    firm_id = django_filters.UUIDFilter(field_name="store__firm_id")
    start_after = django_filters.IsoDateTimeFilter(field_name="start_date", lookup_expr="gte")
    end_before = django_filters.IsoDateTimeFilter(field_name="end_date", lookup_expr="lte")

    class Meta:
        model = Campaign
        fields = ["status", "type", "store_id", "firm_id", "search", "start_after", "end_before"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))


class CourierShipmentFilter(DateRangeFilterSet):
    campaign_id = django_filters.UUIDFilter(field_name="campaign_id")
    influencer_id = django_filters.UUIDFilter(field_name="influencer_id")
    send_store_id = django_filters.UUIDFilter(field_name="send_store_id")
    return_store_id = django_filters.UUIDFilter(field_name="return_store_id")
    tracking_number = django_filters.CharFilter(lookup_expr="icontains")
    courier_name = django_filters.CharFilter(lookup_expr="icontains")

    class Meta:
        model = CourierShipment
        fields = [
            "status", "campaign_id", "influencer_id", "send_store_id", "return_store_id",
            "tracking_number", "courier_name", "date_from", "date_to",
        ]


class InvoiceImageFilter(DateRangeFilterSet):
    campaign_id = django_filters.UUIDFilter(field_name="campaign_id")
    product_id = django_filters.UUIDFilter(field_name="product_id")
    search = django_filters.CharFilter(field_name="original_name", lookup_expr="icontains")

    class Meta:
        model = InvoiceImage
        fields = ["status", "campaign_id", "product_id", "search", "date_from", "date_to"]


class PayoutFilter(DateRangeFilterSet):
    influencer_id = django_filters.UUIDFilter(field_name="influencer_id")
    campaign_id = django_filters.UUIDFilter(field_name="campaign_id")
    min_amount = django_filters.NumberFilter(field_name="amount", lookup_expr="gte")
    max_amount = django_filters.NumberFilter(field_name="amount", lookup_expr="lte")

    range_field = "requested_at"

    class Meta:
        model = Payout
        fields = [
            "status", "type", "influencer_id", "campaign_id", "min_amount", "max_amount",
            "date_from", "date_to",
        ]


class FinancialDocumentFilter(DateRangeFilterSet):
    campaign_id = django_filters.UUIDFilter(field_name="campaign_id")
    search = django_filters.CharFilter(method="filter_search")

    range_field = "issue_date"

    class Meta:
        model = FinancialDocument
        fields = ["type", "status", "campaign_id", "search", "date_from", "date_to"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(document_number__icontains=value) | Q(description__icontains=value))


class PerformanceMetricFilter(DateRangeFilterSet):
    metric_type = django_filters.ChoiceFilter(choices=PerformanceMetric.MetricType.choices)
    influencer_id = django_filters.UUIDFilter(field_name="influencer_id")
    campaign_id = django_filters.UUIDFilter(field_name="campaign_id")
    store_id = django_filters.UUIDFilter(field_name="store_id")

    range_field = "recorded_at"

    class Meta:
        model = PerformanceMetric
        fields = ["metric_type", "influencer_id", "campaign_id", "store_id", "date_from", "date_to"]
