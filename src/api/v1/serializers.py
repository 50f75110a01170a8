"""Serializers for the CRM API v1: identity, tenancy, influencers, catalog,
campaigns and courier shipments."""
from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from campaigns.models import Campaign, CampaignProduct, InfluencerCampaignLink
from catalog.models import Product
from influencers.models import Influencer
from shipments.models import CourierShipment
from stores.models import Firm, Store

User = get_user_model()


# ---------------------------------------------------------------------------
# Users & auth
# ---------------------------------------------------------------------------

class MeSerializer(serializers.ModelSerializer):
    """Profile of the authenticated user."""

    firm_id = serializers.UUIDField(read_only=True)
    firm_name = serializers.CharField(source="firm.name", read_only=True, default=None)
    roles = serializers.ListField(source="role_names", child=serializers.CharField(), read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "name", "firm_id", "firm_name", "roles", "is_active", "date_joined"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    name = serializers.CharField(required=False, allow_blank=True, default="")
    firm_id = serializers.PrimaryKeyRelatedField(
        source="firm", queryset=Firm.objects.filter(is_active=True), required=False, allow_null=True,
    )

    def validate_password(self, value):
        from django.contrib.auth.password_validation import validate_password
        from django.core.exceptions import ValidationError as DjangoValidationError
        try:
            validate_password(value)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(list(exc.messages))
        return value


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Adds ``email``, ``firm_id`` and ``roles`` claims and the user profile."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["email"] = user.email
        token["firm_id"] = str(user.firm_id) if user.firm_id else None
        token["roles"] = user.role_names
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data["user"] = MeSerializer(self.user).data
        return data


# ---------------------------------------------------------------------------
# Firms & stores
# ---------------------------------------------------------------------------

class FirmSerializer(serializers.ModelSerializer):
    store_count = serializers.IntegerField(source="stores.count", read_only=True)

    class Meta:
        model = Firm
        fields = [
            "id", "name", "email", "phone", "address", "city", "is_active",
            "store_count", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class StoreSerializer(serializers.ModelSerializer):
    firm_id = serializers.PrimaryKeyRelatedField(source="firm", queryset=Firm.objects.all())
    firm_name = serializers.CharField(source="firm.name", read_only=True)

    class Meta:
        model = Store
        fields = [
            "id", "firm_id", "firm_name", "name", "email", "phone", "address",
            "city", "state", "zip_code", "country", "is_active", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


# ---------------------------------------------------------------------------
# Influencers
# ---------------------------------------------------------------------------

class InfluencerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Influencer
        fields = [
            "id", "name", "email", "phone", "bio", "followers", "status",
            "platform", "profile_url", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class ScrapedProfileSerializer(serializers.Serializer):
    """Social profile payload as returned by the scraper."""

    username = serializers.CharField()
    full_name = serializers.CharField(required=False, allow_blank=True, default="")
    biography = serializers.CharField(required=False, allow_blank=True, default="")
    followers_count = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    emails = serializers.ListField(child=serializers.EmailField(), required=False, default=list)
    phones = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    profile_url = serializers.URLField(required=False, allow_blank=True, default="")


class ScrapedInfluencerSerializer(serializers.Serializer):
    scraped_data = ScrapedProfileSerializer()
    name = serializers.CharField(required=False)
    email = serializers.EmailField(required=False)
    phone = serializers.CharField(required=False)
    status = serializers.ChoiceField(choices=Influencer.Status.choices, required=False)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class ProductSerializer(serializers.ModelSerializer):
    image_urls = serializers.ListField(child=serializers.URLField(), required=False)

    class Meta:
        model = Product
        fields = [
            "id", "name", "sku", "as_code", "description", "category", "stock",
            "price", "image_urls", "metadata", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class ProductImportSerializer(serializers.Serializer):
    file = serializers.FileField()


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------

class InfluencerCampaignLinkSerializer(serializers.ModelSerializer):
    influencer_id = serializers.UUIDField(read_only=True)
    influencer_name = serializers.CharField(source="influencer.name", read_only=True)

    class Meta:
        model = InfluencerCampaignLink
        fields = [
            "id", "influencer_id", "influencer_name", "rate", "status", "deliverables",
            "deliverable_type", "expected_date", "notes", "created_at",
        ]
        read_only_fields = fields


class CampaignProductSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    sku = serializers.CharField(source="product.sku", read_only=True)

    class Meta:
        model = CampaignProduct
        fields = [
            "id", "product_id", "product_name", "sku", "quantity", "planned_qty",
            "discount", "notes", "due_date", "created_at",
        ]
        read_only_fields = fields


class CampaignSerializer(serializers.ModelSerializer):
    store_id = serializers.PrimaryKeyRelatedField(source="store", queryset=Store.objects.all())
    store_name = serializers.CharField(source="store.name", read_only=True)
    firm_id = serializers.UUIDField(source="store.firm_id", read_only=True)
    influencer_links = InfluencerCampaignLinkSerializer(many=True, read_only=True)
    product_links = CampaignProductSerializer(many=True, read_only=True)

    class Meta:
        model = Campaign
        fields = [
            "id", "store_id", "store_name", "firm_id", "name", "description", "status", "type",
            "budget", "budget_spent", "budget_allocated", "start_date", "end_date",
            "deliverable_deadline", "brief", "reels_required", "posts_required",
            "stories_required", "influencer_links", "product_links", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and start > end:
            raise serializers.ValidationError({"end_date": "end_date must be after start_date"})
        return attrs


class CampaignStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Campaign.Status.choices)


class InfluencerAssignmentSerializer(serializers.Serializer):
    influencer_id = serializers.UUIDField()
    rate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    status = serializers.ChoiceField(choices=InfluencerCampaignLink.Status.choices, required=False)
    deliverables = serializers.CharField(required=False, allow_blank=True)
    deliverable_type = serializers.CharField(required=False, allow_blank=True)
    expected_date = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class ProductLinkSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    planned_qty = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    due_date = serializers.DateTimeField(required=False, allow_null=True)


# ---------------------------------------------------------------------------
# Courier shipments
# ---------------------------------------------------------------------------

class CourierShipmentSerializer(serializers.ModelSerializer):
    send_store_id = serializers.UUIDField(read_only=True)
    return_store_id = serializers.UUIDField(read_only=True)
    influencer_id = serializers.UUIDField(read_only=True)
    campaign_id = serializers.UUIDField(read_only=True)
    influencer_name = serializers.CharField(source="influencer.name", read_only=True, default=None)
    campaign_name = serializers.CharField(source="campaign.name", read_only=True, default=None)

    class Meta:
        model = CourierShipment
        fields = [
            "id", "tracking_number", "courier_name", "courier_company", "status",
            "status_timeline", "send_store_id", "return_store_id", "influencer_id",
            "influencer_name", "campaign_id", "campaign_name", "sent_date",
            "received_date", "returned_date", "notes", "created_at", "updated_at",
        ]
        read_only_fields = fields


class CourierShipmentWriteSerializer(serializers.Serializer):
    """Create / update payload. Related ids are resolved by the view (404)."""

    tracking_number = serializers.CharField(max_length=100)
    courier_name = serializers.CharField(max_length=100)
    courier_company = serializers.CharField(max_length=100, required=False, allow_blank=True)
    send_store_id = serializers.UUIDField(required=False, allow_null=True)
    return_store_id = serializers.UUIDField(required=False, allow_null=True)
    influencer_id = serializers.UUIDField(required=False, allow_null=True)
    campaign_id = serializers.UUIDField(required=False, allow_null=True)
    sent_date = serializers.DateTimeField(required=False, allow_null=True)
    received_date = serializers.DateTimeField(required=False, allow_null=True)
    returned_date = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class ShipmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CourierShipment.Status.choices)


class TimelineEventSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CourierShipment.Status.choices)
    timestamp = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    location = serializers.CharField(required=False, allow_blank=True)
    user_id = serializers.CharField(required=False, allow_blank=True)
