"""API views for invoice images, payouts / document links and financial documents."""
import logging

from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from campaigns.models import Campaign
from catalog.models import Product
from finance import services as finance_services
from finance.models import FinancialDocument
from influencers.models import Influencer
from invoices import services as invoice_services
from invoices.models import InvoiceImage
from invoices.tasks import process_invoice_ocr
from payouts import services as payout_services
from payouts.models import DocumentLink, Payout
from stores.models import Firm
from stores.services import create_audit_log

from api.v1.filters import FinancialDocumentFilter, InvoiceImageFilter, PayoutFilter
from api.v1.finance_serializers import (
    DocumentLinkSerializer,
    FinancialDocumentSerializer,
    FinancialDocumentStatusSerializer,
    InvoiceImageSerializer,
    InvoiceStatusSerializer,
    InvoiceUpdateSerializer,
    InvoiceUploadSerializer,
    LinkCampaignSerializer,
    LinkProductSerializer,
    MarkPaidSerializer,
    PayoutCreateSerializer,
    PayoutSerializer,
    PayoutStatusSerializer,
    PayoutUpdateSerializer,
)
from api.v1.permissions import Scope
from api.v1.views import UUID_PATTERN

logger = logging.getLogger("crm")


def _optional(model, pk):
    return get_object_or_404(model, pk=pk) if pk else None


class PaginatedActionsMixin:
    def _paginated(self, queryset, serializer_class=None):
        serializer_class = serializer_class or self.get_serializer_class()
        context = self.get_serializer_context()
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(serializer_class(page, many=True, context=context).data)
        return Response(serializer_class(queryset, many=True, context=context).data)


# ---------------------------------------------------------------------------
# Invoice images
# ---------------------------------------------------------------------------

class InvoiceImageViewSet(
    PaginatedActionsMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Uploaded invoice images.

    - ``POST invoices/upload/`` stores the file, reads it and creates a
      PENDING record.
    - ``PATCH {id}/status/`` goes through the invoice transition table.
    - ``POST {id}/reprocess/`` queues OCR in the background.
    """

    serializer_class = InvoiceImageSerializer
    queryset = InvoiceImage.objects.select_related("campaign", "product")
    filterset_class = InvoiceImageFilter
    ordering_fields = ["created_at", "status"]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    @action(detail=False, methods=["post"], url_path="upload")
    def upload(self, request):
        payload = InvoiceUploadSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        campaign = _optional(Campaign, data.get("campaign_id"))
        product = _optional(Product, data.get("product_id"))
        try:
            invoice = invoice_services.create_invoice(
                data.get("file"), campaign=campaign, product=product, actor=request.user,
            )
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(invoice).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        invoice = self.get_object()
        payload = InvoiceUpdateSerializer(data=request.data, partial=True)
        payload.is_valid(raise_exception=True)
        data = dict(payload.validated_data)
        if "campaign_id" in data:
            data["campaign"] = _optional(Campaign, data.pop("campaign_id"))
        if "product_id" in data:
            data["product"] = _optional(Product, data.pop("product_id"))
        try:
            invoice = invoice_services.update_invoice(invoice, actor=request.user, **data)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(invoice).data)

    def destroy(self, request, pk=None):
        invoice_services.delete_invoice(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        invoice = self.get_object()
        payload = InvoiceStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            invoice = invoice_services.update_status(
                invoice, payload.validated_data["status"], actor=request.user,
            )
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(invoice).data)

    @action(detail=True, methods=["patch"], url_path="link-campaign")
    def link_campaign(self, request, pk=None):
        invoice = self.get_object()
        payload = LinkCampaignSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        campaign = get_object_or_404(Campaign, pk=payload.validated_data["campaign_id"])
        invoice = invoice_services.link_campaign(invoice, campaign)
        return Response(self.get_serializer(invoice).data)

    @action(detail=True, methods=["patch"], url_path="link-product")
    def link_product(self, request, pk=None):
        invoice = self.get_object()
        payload = LinkProductSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        product = get_object_or_404(Product, pk=payload.validated_data["product_id"])
        invoice = invoice_services.link_product(invoice, product)
        return Response(self.get_serializer(invoice).data)

    @action(detail=True, methods=["post"], url_path="reprocess")
    def reprocess(self, request, pk=None):
        invoice = self.get_object()
        if invoice.status == InvoiceImage.Status.PROCESSING:
            return Response(
                {"detail": "Invoice is already being processed"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        process_invoice_ocr.delay(str(invoice.pk))
        invoice.refresh_from_db()
        return Response(self.get_serializer(invoice).data, status=status.HTTP_202_ACCEPTED)

    @action(detail=False, methods=["get"], url_path=r"by-status/(?P<status_value>[A-Za-z_]+)")
    def by_status(self, request, status_value=None):
        status_value = status_value.upper()
        if status_value not in InvoiceImage.Status.values:
            raise ValidationError({"status": f"Unknown status {status_value}"})
        return self._paginated(self.get_queryset().filter(status=status_value))

    @action(detail=False, methods=["get"], url_path=rf"by-campaign/(?P<campaign_id>{UUID_PATTERN})")
    def by_campaign(self, request, campaign_id=None):
        get_object_or_404(Campaign, pk=campaign_id)
        return self._paginated(self.get_queryset().filter(campaign_id=campaign_id))


# ---------------------------------------------------------------------------
# Payouts
# ---------------------------------------------------------------------------

class PayoutViewSet(PaginatedActionsMixin, viewsets.ModelViewSet):
    """
    Influencer commissions and campaign payments.

    Every status change is appended to ``status_history`` and stamps the
    matching ``*_at`` field.
    """

    serializer_class = PayoutSerializer
    queryset = Payout.objects.select_related("influencer", "campaign")
    filterset_class = PayoutFilter
    ordering_fields = ["requested_at", "amount", "status"]
    http_method_names = ["get", "post", "put", "patch", "delete", "head", "options"]

    def _audit_status(self, payout, previous):
        if previous == payout.status:
            return
        firm = payout.campaign.store.firm if payout.campaign_id else None
        create_audit_log(
            actor=self.request.user,
            firm=firm,
            action="payout.status",
            entity_type="Payout",
            entity_id=payout.pk,
            before={"status": previous},
            after={"status": payout.status},
        )

    def create(self, request):
        payload = PayoutCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = dict(payload.validated_data)
        data["influencer"] = _optional(Influencer, data.pop("influencer_id", None))
        data["campaign"] = _optional(Campaign, data.pop("campaign_id", None))
        payout = payout_services.create_payout(actor=request.user, **data)
        return Response(self.get_serializer(payout).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial=False):
        payout = self.get_object()
        previous = payout.status
        payload = PayoutUpdateSerializer(data=request.data, partial=partial)
        payload.is_valid(raise_exception=True)
        payout = payout_services.update_payout(payout, actor=request.user, **payload.validated_data)
        self._audit_status(payout, previous)
        return Response(self.get_serializer(payout).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @action(detail=True, methods=["put"], url_path="status")
    def set_status(self, request, pk=None):
        payout = self.get_object()
        previous = payout.status
        payload = PayoutStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        payout = payout_services.update_payment_status(
            payout,
            payload.validated_data["status"],
            notes=payload.validated_data.get("notes"),
            actor=request.user,
        )
        self._audit_status(payout, previous)
        return Response(self.get_serializer(payout).data)

    @action(detail=True, methods=["get"], url_path="timeline")
    def timeline(self, request, pk=None):
        return Response(payout_services.payment_timeline(self.get_object()))

    @action(detail=True, methods=["get"], url_path="audit-trail")
    def audit_trail(self, request, pk=None):
        return Response(payout_services.audit_trail(self.get_object()))

    @action(detail=False, methods=["get"], url_path=rf"by-influencer/(?P<influencer_id>{UUID_PATTERN})")
    def by_influencer(self, request, influencer_id=None):
        influencer = get_object_or_404(Influencer, pk=influencer_id)
        payouts = self.get_queryset().filter(influencer=influencer)
        return Response(
            {
                "influencer": {"id": str(influencer.pk), "name": influencer.name},
                "payouts": self.get_serializer(payouts, many=True).data,
                "stats": payout_services.summarize(payouts),
            }
        )

    @action(detail=False, methods=["get"], url_path=rf"by-campaign/(?P<campaign_id>{UUID_PATTERN})")
    def by_campaign(self, request, campaign_id=None):
        campaign = get_object_or_404(Campaign, pk=campaign_id)
        payouts = self.get_queryset().filter(campaign=campaign)
        return Response(
            {
                "campaign": {"id": str(campaign.pk), "name": campaign.name, "budget": campaign.budget},
                "payouts": self.get_serializer(payouts, many=True).data,
                "stats": payout_services.campaign_summary(campaign, payouts),
            }
        )

    # -- document links ----------------------------------------------------

    @action(detail=False, methods=["post"], url_path="link-documents")
    def link_documents(self, request):
        payload = DocumentLinkSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            link = payout_services.link_documents(**payload.validated_data)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(DocumentLinkSerializer(link).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"], url_path=r"document-links/(?P<document_id>[^/.]+)")
    def document_links(self, request, document_id=None):
        links = payout_services.document_links_for(document_id)
        return Response(DocumentLinkSerializer(links, many=True).data)

    @document_links.mapping.delete
    def delete_document_link(self, request, document_id=None):
        link = get_object_or_404(DocumentLink, pk=document_id)
        link.delete()
        logger.info("Document link %s deleted", document_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Financial documents
# ---------------------------------------------------------------------------

class FinancialDocumentViewSet(viewsets.ModelViewSet):
    """
    Purchase orders, invoices and forms attached to campaigns.

    ``stats/by-firm/{firm_id}/`` is restricted to members of that firm.
    """

    serializer_class = FinancialDocumentSerializer
    queryset = FinancialDocument.objects.select_related("campaign")
    filterset_class = FinancialDocumentFilter
    ordering_fields = ["issue_date", "due_date", "amount", "created_at"]
    action_scopes = {"stats_by_firm": Scope.FIRM}

    def _campaign_from(self, serializer):
        campaign_id = serializer.validated_data.pop("campaign_id", None)
        if campaign_id is not None:
            serializer.validated_data["campaign"] = get_object_or_404(Campaign, pk=campaign_id)

    def perform_create(self, serializer):
        finance_services.ensure_unique_number(serializer.validated_data["document_number"])
        self._campaign_from(serializer)
        document = serializer.save()
        logger.info("Financial document %s created (%s)", document.pk, document.document_number)

    def perform_update(self, serializer):
        number = serializer.validated_data.get("document_number")
        if number:
            finance_services.ensure_unique_number(number, exclude_pk=serializer.instance.pk)
        self._campaign_from(serializer)
        serializer.save()

    def create(self, request, *args, **kwargs):
        try:
            return super().create(request, *args, **kwargs)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

    def update(self, request, *args, **kwargs):
        try:
            return super().update(request, *args, **kwargs)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        document = self.get_object()
        payload = FinancialDocumentStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        document = finance_services.set_status(document, payload.validated_data["status"])
        return Response(self.get_serializer(document).data)

    @action(detail=True, methods=["patch"], url_path="mark-paid")
    def mark_paid(self, request, pk=None):
        document = self.get_object()
        payload = MarkPaidSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        document = finance_services.mark_paid(document, payload.validated_data.get("paid_date"))
        return Response(self.get_serializer(document).data)

    @action(detail=False, methods=["get"], url_path="stats/by-type")
    def stats_by_type(self, request):
        return Response(finance_services.stats_by_type())

    @action(detail=False, methods=["get"], url_path=rf"stats/by-firm/(?P<firm_id>{UUID_PATTERN})")
    def stats_by_firm(self, request, firm_id=None):
        firm = get_object_or_404(Firm, pk=firm_id)
        return Response(finance_services.stats_for_firm(firm))
