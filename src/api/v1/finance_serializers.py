"""Serializers for invoice images, payouts, document links and financial documents."""
from rest_framework import serializers

from finance.models import FinancialDocument
from invoices.models import InvoiceImage
from payouts.models import DocumentLink, Payout


# ---------------------------------------------------------------------------
# Invoice images
# ---------------------------------------------------------------------------

class InvoiceImageSerializer(serializers.ModelSerializer):
    campaign_id = serializers.UUIDField(read_only=True)
    product_id = serializers.UUIDField(read_only=True)
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = InvoiceImage
        fields = [
            "id", "image_url", "original_name", "content_type", "status", "status_timeline",
            "ocr_data", "extracted_total", "campaign_id", "product_id", "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_image_url(self, obj):
        if not obj.image:
            return None
        request = self.context.get("request")
        url = obj.image.url
        return request.build_absolute_uri(url) if request else url


class InvoiceUploadSerializer(serializers.Serializer):
    file = serializers.FileField(required=False)
    campaign_id = serializers.UUIDField(required=False, allow_null=True)
    product_id = serializers.UUIDField(required=False, allow_null=True)


class InvoiceUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=InvoiceImage.Status.choices, required=False)
    ocr_data = serializers.JSONField(required=False)
    extracted_total = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    campaign_id = serializers.UUIDField(required=False, allow_null=True)
    product_id = serializers.UUIDField(required=False, allow_null=True)


class InvoiceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=InvoiceImage.Status.choices)


class LinkCampaignSerializer(serializers.Serializer):
    campaign_id = serializers.UUIDField()


class LinkProductSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()


# ---------------------------------------------------------------------------
# Payouts
# ---------------------------------------------------------------------------

class PayoutSerializer(serializers.ModelSerializer):
    influencer_id = serializers.UUIDField(read_only=True)
    campaign_id = serializers.UUIDField(read_only=True)
    influencer_name = serializers.CharField(source="influencer.name", read_only=True, default=None)
    campaign_name = serializers.CharField(source="campaign.name", read_only=True, default=None)

    class Meta:
        model = Payout
        fields = [
            "id", "type", "status", "amount", "currency", "influencer_id", "influencer_name",
            "campaign_id", "campaign_name", "invoice_id", "po_id", "notes", "metadata",
            "status_history", "requested_at", "approved_at", "processed_at", "paid_at",
            "failed_at", "created_at", "updated_at",
        ]
        read_only_fields = fields


class PayoutCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Payout.Type.choices)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    currency = serializers.CharField(max_length=10, required=False)
    influencer_id = serializers.UUIDField(required=False, allow_null=True)
    campaign_id = serializers.UUIDField(required=False, allow_null=True)
    invoice_id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    po_id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    metadata = serializers.JSONField(required=False)


class PayoutUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Payout.Status.choices, required=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    metadata = serializers.JSONField(required=False)


class PayoutStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Payout.Status.choices)
    notes = serializers.CharField(required=False, allow_blank=True)


class DocumentLinkSerializer(serializers.ModelSerializer):
    """Document types are validated by the service so the error text is stable."""

    primary_document_type = serializers.CharField(max_length=10)
    linked_document_type = serializers.CharField(max_length=10)

    class Meta:
        model = DocumentLink
        fields = [
            "id", "primary_document_id", "primary_document_type", "linked_document_id",
            "linked_document_type", "relationship", "notes", "created_at",
        ]
        read_only_fields = ["id", "created_at"]
        validators = []


# ---------------------------------------------------------------------------
# Financial documents
# ---------------------------------------------------------------------------

class FinancialDocumentSerializer(serializers.ModelSerializer):
    """Read / write representation; ``campaign_id`` is resolved by the view."""

    campaign_id = serializers.UUIDField()
    campaign_name = serializers.CharField(source="campaign.name", read_only=True)

    class Meta:
        model = FinancialDocument
        fields = [
            "id", "type", "document_number", "amount", "status", "issue_date", "due_date",
            "paid_date", "description", "metadata", "file_path", "campaign_id",
            "campaign_name", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"document_number": {"validators": []}}


class FinancialDocumentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=FinancialDocument.Status.choices)


class MarkPaidSerializer(serializers.Serializer):
    paid_date = serializers.DateTimeField(required=False, allow_null=True)
