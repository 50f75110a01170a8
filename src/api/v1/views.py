"""ViewSets for the CRM API v1: firms, stores, influencers, products,
campaigns and courier shipments."""
import logging

from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response

from campaigns import services as campaign_services
from campaigns.models import Campaign
from catalog import services as catalog_services
from catalog.models import Product
from influencers import services as influencer_services
from influencers.models import Influencer
from shipments import services as shipment_services
from shipments.models import CourierShipment
from stores.models import Firm, Store
from stores.services import create_audit_log

from api.v1.filters import (
    CampaignFilter,
    CourierShipmentFilter,
    InfluencerFilter,
    ProductFilter,
    StoreFilter,
)
from api.v1.permissions import ADMIN_ROLES, OTHER_FIRM, Scope, caller_claims
from api.v1.serializers import (
    CampaignProductSerializer,
    CampaignSerializer,
    CampaignStatusSerializer,
    CourierShipmentSerializer,
    CourierShipmentWriteSerializer,
    FirmSerializer,
    InfluencerAssignmentSerializer,
    InfluencerCampaignLinkSerializer,
    InfluencerSerializer,
    ProductImportSerializer,
    ProductLinkSerializer,
    ProductSerializer,
    ScrapedInfluencerSerializer,
    ShipmentStatusSerializer,
    StoreSerializer,
    TimelineEventSerializer,
)

logger = logging.getLogger("crm")

UUID_PATTERN = r"[0-9a-fA-F-]{32,36}"


def _firm_of(instance):
    """Best-effort firm lookup for audit entries."""
    if isinstance(instance, Firm):
        return instance
    store = getattr(instance, "store", None)
    return getattr(store, "firm", None) or getattr(instance, "firm", None)


class AuditedModelViewSet(viewsets.ModelViewSet):
    """ModelViewSet that records create / update / delete in the audit log."""

    audit_entity = None

    def _audit(self, action_name, instance, before=None, after=None):
        create_audit_log(
            actor=self.request.user,
            firm=_firm_of(instance),
            action=f"{self.audit_entity.lower()}.{action_name}",
            entity_type=self.audit_entity,
            entity_id=instance.pk,
            before=before,
            after=after,
        )

    def perform_create(self, serializer):
        instance = serializer.save()
        self._audit("create", instance, after=self.get_serializer(instance).data)

    def perform_update(self, serializer):
        before = self.get_serializer(serializer.instance).data
        instance = serializer.save()
        self._audit("update", instance, before=before, after=self.get_serializer(instance).data)

    def perform_destroy(self, instance):
        before = self.get_serializer(instance).data
        pk = instance.pk
        firm = _firm_of(instance)
        instance.delete()
        create_audit_log(
            actor=self.request.user,
            firm=firm if firm is not None and firm.pk else None,
            action=f"{self.audit_entity.lower()}.delete",
            entity_type=self.audit_entity,
            entity_id=pk,
            before=before,
        )


# ---------------------------------------------------------------------------
# Firms & stores
# ---------------------------------------------------------------------------

class FirmViewSet(AuditedModelViewSet):
    """
    Firms (tenants).

    - Administration is ADMIN only; every role can read.
    - ``GET firms/{firm_id}/stores/`` is restricted to members of that firm.
    """

    serializer_class = FirmSerializer
    queryset = Firm.objects.all()
    lookup_url_kwarg = "firm_id"
    write_roles = ADMIN_ROLES
    action_scopes = {"stores": Scope.FIRM}
    audit_entity = "Firm"
    ordering_fields = ["name", "created_at"]

    @action(detail=True, methods=["get"], url_path="stores")
    def stores(self, request, firm_id=None):
        firm = self.get_object()
        queryset = firm.stores.all()
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(StoreSerializer(page, many=True).data)
        return Response(StoreSerializer(queryset, many=True).data)


class StoreViewSet(AuditedModelViewSet):
    """
    Stores. Every role can read; writes are limited to the caller's firm
    (the body ``firm_id`` on create, the store's own firm otherwise).
    """

    serializer_class = StoreSerializer
    queryset = Store.objects.select_related("firm")
    lookup_url_kwarg = "store_id"
    lookup_value_regex = UUID_PATTERN
    action_scopes = {
        "create": Scope.FIRM,
        "update": Scope.STORE,
        "partial_update": Scope.STORE,
        "destroy": Scope.STORE,
    }
    filterset_class = StoreFilter
    ordering_fields = ["name", "city", "created_at"]
    audit_entity = "Store"

    def perform_update(self, serializer):
        firm = serializer.validated_data.get("firm")
        claims = caller_claims(self.request)
        if firm is not None and str(firm.pk) != str(claims.firm_id):
            raise PermissionDenied(OTHER_FIRM)
        super().perform_update(serializer)


# ---------------------------------------------------------------------------
# Influencers
# ---------------------------------------------------------------------------

class InfluencerViewSet(viewsets.ModelViewSet):
    """Influencer records; filter by status / platform, search by name or email."""

    serializer_class = InfluencerSerializer
    queryset = Influencer.objects.all()
    filterset_class = InfluencerFilter
    ordering_fields = ["name", "followers", "created_at"]

    @action(detail=False, methods=["post"], url_path="from-scraped-data")
    def from_scraped_data(self, request):
        payload = ScrapedInfluencerSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        overrides = {k: v for k, v in payload.validated_data.items() if k != "scraped_data"}
        try:
            influencer = influencer_services.create_from_scraped_profile(
                payload.validated_data["scraped_data"], overrides,
            )
        except influencer_services.DuplicateInfluencer as e:
            return Response({"detail": str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(InfluencerSerializer(influencer).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"], url_path="check-email")
    def check_email(self, request):
        email = (request.query_params.get("email") or "").strip()
        if not email:
            raise ValidationError({"email": "This query parameter is required."})
        return Response({"email": email, "exists": influencer_services.email_exists(email)})


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class ProductViewSet(viewsets.ModelViewSet):
    """
    Product catalog.

    - Search by name / description, filter by category, SKU, AS code.
    - ``POST products/import/`` bulk-creates from CSV and reports row errors.
    - ``GET products/export/?file_format=csv|xlsx`` downloads the filtered list.
    """

    serializer_class = ProductSerializer
    queryset = Product.objects.all()
    filterset_class = ProductFilter
    ordering_fields = ["name", "sku", "price", "stock", "created_at"]

    @action(detail=False, methods=["post"], url_path="import")
    def import_csv(self, request):
        payload = ProductImportSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            content = catalog_services.decode_csv_upload(payload.validated_data["file"])
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        result = catalog_services.import_products_from_csv(content)
        return Response(
            {
                "successes": ProductSerializer(result["successes"], many=True).data,
                "errors": result["errors"],
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["get"], url_path="export")
    def export(self, request):
        fmt = request.query_params.get("file_format", "csv").lower()
        if fmt not in ("csv", "xlsx"):
            raise ValidationError({"file_format": "Must be csv or xlsx."})
        queryset = self.filter_queryset(self.get_queryset())
        return catalog_services.export_products(queryset, fmt=fmt)


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------

class CampaignViewSet(AuditedModelViewSet):
    """
    Campaign CRUD plus influencer assignment and product links.

    Assigning an unknown influencer / product, or removing one that is not
    attached, is a 400.
    """

    serializer_class = CampaignSerializer
    queryset = Campaign.objects.select_related("store").prefetch_related(
        "influencer_links__influencer", "product_links__product",
    )
    filterset_class = CampaignFilter
    ordering_fields = ["name", "start_date", "end_date", "budget", "created_at"]
    audit_entity = "Campaign"

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        campaign = self.get_object()
        payload = CampaignStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        previous = campaign.status
        campaign = campaign_services.set_campaign_status(campaign, payload.validated_data["status"])
        self._audit("status", campaign, before={"status": previous}, after={"status": campaign.status})
        return Response(self.get_serializer(campaign).data)

    @action(detail=True, methods=["post"], url_path="influencers")
    def assign_influencer(self, request, pk=None):
        payload = InfluencerAssignmentSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        terms = dict(payload.validated_data)
        influencer_id = terms.pop("influencer_id")
        try:
            link = campaign_services.assign_influencer(pk, influencer_id, **terms)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(InfluencerCampaignLinkSerializer(link).data, status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["delete"],
        url_path=rf"influencers/(?P<influencer_id>{UUID_PATTERN})",
    )
    def unassign_influencer(self, request, pk=None, influencer_id=None):
        try:
            campaign_services.unassign_influencer(pk, influencer_id)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="products")
    def link_product(self, request, pk=None):
        payload = ProductLinkSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        terms = dict(payload.validated_data)
        product_id = terms.pop("product_id")
        try:
            link = campaign_services.link_product(pk, product_id, **terms)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(CampaignProductSerializer(link).data, status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["delete"],
        url_path=rf"products/(?P<product_id>{UUID_PATTERN})",
    )
    def unlink_product(self, request, pk=None, product_id=None):
        try:
            campaign_services.unlink_product(pk, product_id)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Courier shipments
# ---------------------------------------------------------------------------

SHIPMENT_RELATIONS = {
    "send_store_id": ("send_store", Store),
    "return_store_id": ("return_store", Store),
    "influencer_id": ("influencer", Influencer),
    "campaign_id": ("campaign", Campaign),
}


def _resolve_shipment_relations(data: dict) -> dict:
    """Swap ``*_id`` keys for model instances; unknown ids raise 404."""
    fields = {}
    for key, value in data.items():
        if key in SHIPMENT_RELATIONS:
            field_name, model = SHIPMENT_RELATIONS[key]
            fields[field_name] = get_object_or_404(model, pk=value) if value else None
        else:
            fields[key] = value
    return fields


class CourierShipmentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Courier shipments sent to influencers.

    Status only moves through ``PATCH {id}/status/`` or
    ``POST {id}/timeline-event/``; the regular update ignores it.
    """

    serializer_class = CourierShipmentSerializer
    queryset = CourierShipment.objects.select_related(
        "send_store", "return_store", "influencer", "campaign",
    )
    filterset_class = CourierShipmentFilter
    ordering_fields = ["created_at", "sent_date", "status"]

    def create(self, request):
        payload = CourierShipmentWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        fields = _resolve_shipment_relations(payload.validated_data)
        try:
            shipment = shipment_services.create_shipment(actor=request.user, **fields)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(shipment).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial=False):
        shipment = self.get_object()
        payload = CourierShipmentWriteSerializer(data=request.data, partial=partial)
        payload.is_valid(raise_exception=True)
        fields = _resolve_shipment_relations(payload.validated_data)
        try:
            shipment = shipment_services.update_shipment(shipment, **fields)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(shipment).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        shipment = self.get_object()
        payload = ShipmentStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            shipment = shipment_services.update_status(
                shipment, payload.validated_data["status"], actor=request.user,
            )
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(shipment).data)

    @action(detail=True, methods=["post"], url_path="timeline-event")
    def timeline_event(self, request, pk=None):
        shipment = self.get_object()
        payload = TimelineEventSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        try:
            shipment = shipment_services.add_timeline_event(
                shipment,
                status=data["status"],
                timestamp=data.get("timestamp"),
                notes=data.get("notes"),
                location=data.get("location"),
                user_id=data.get("user_id") or str(request.user.pk),
            )
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(shipment).data)

    @action(detail=False, methods=["get"], url_path=r"by-status/(?P<status_value>[A-Za-z_]+)")
    def by_status(self, request, status_value=None):
        status_value = status_value.upper()
        if status_value not in CourierShipment.Status.values:
            raise ValidationError({"status": f"Unknown status {status_value}"})
        return self._paginated(self.get_queryset().filter(status=status_value))

    @action(detail=False, methods=["get"], url_path=rf"by-campaign/(?P<campaign_id>{UUID_PATTERN})")
    def by_campaign(self, request, campaign_id=None):
        get_object_or_404(Campaign, pk=campaign_id)
        return self._paginated(self.get_queryset().filter(campaign_id=campaign_id))

    @action(detail=False, methods=["get"], url_path="outstanding-returns")
    def outstanding_returns(self, request):
        return self._paginated(shipment_services.outstanding_returns())

    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        return Response(shipment_services.shipment_stats())

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    @transaction.atomic
    def perform_destroy(self, instance):
        logger.info("Shipment %s deleted (tracking=%s)", instance.pk, instance.tracking_number)
        instance.delete()
