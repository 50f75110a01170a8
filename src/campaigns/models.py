"""Models for the campaigns app."""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel

NON_NEGATIVE = [MinValueValidator(Decimal("0"))]


# ---------------------------------------------------------------------------
# Campaign
# ---------------------------------------------------------------------------

class Campaign(TimeStampedModel):
    """Marketing campaign run by a store."""

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        ACTIVE = "ACTIVE", "Active"
        PAUSED = "PAUSED", "Paused"
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"

    class Type(models.TextChoices):
        REELS = "REELS", "Reels"
        POSTS = "POSTS", "Posts"
        STORIES = "STORIES", "Stories"
        MIXED = "MIXED", "Mixed"

    store = models.ForeignKey(
        "stores.Store",
        on_delete=models.CASCADE,
        related_name="campaigns",
        verbose_name="store",
    )
    name = models.CharField("name", max_length=255)
    description = models.TextField("description", blank=True, default="")
    status = models.CharField(
        "status", max_length=20, choices=Status.choices, default=Status.DRAFT, db_index=True,
    )
    type = models.CharField("type", max_length=20, choices=Type.choices, null=True, blank=True)
    budget = models.DecimalField(
        "budget", max_digits=14, decimal_places=2, default=Decimal("0.00"), validators=NON_NEGATIVE,
    )
    budget_spent = models.DecimalField(
        "budget spent", max_digits=14, decimal_places=2, default=Decimal("0.00"), validators=NON_NEGATIVE,
    )
    budget_allocated = models.DecimalField(
        "budget allocated", max_digits=14, decimal_places=2, default=Decimal("0.00"), validators=NON_NEGATIVE,
    )
    start_date = models.DateTimeField("start date", null=True, blank=True)
    end_date = models.DateTimeField("end date", null=True, blank=True)
    deliverable_deadline = models.DateTimeField("deliverable deadline", null=True, blank=True)
    brief = models.TextField("brief", blank=True, default="")
    reels_required = models.PositiveIntegerField("reels required", default=0)
    posts_required = models.PositiveIntegerField("posts required", default=0)
    stories_required = models.PositiveIntegerField("stories required", default=0)

    influencers = models.ManyToManyField(
        "influencers.Influencer",
        through="InfluencerCampaignLink",
        related_name="campaigns",
        blank=True,
    )
    products = models.ManyToManyField(
        "catalog.Product",
        through="CampaignProduct",
        related_name="campaigns",
        blank=True,
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Campaign"
        verbose_name_plural = "Campaigns"

    def __str__(self):
        return self.name


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

class InfluencerCampaignLink(TimeStampedModel):
    """Assignment of an influencer to a campaign, with the agreed terms."""

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        ACCEPTED = "ACCEPTED", "Accepted"
        REJECTED = "REJECTED", "Rejected"
        COMPLETED = "COMPLETED", "Completed"

    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE, related_name="influencer_links")
    influencer = models.ForeignKey(
        "influencers.Influencer", on_delete=models.CASCADE, related_name="campaign_links",
    )
    rate = models.DecimalField("rate", max_digits=12, decimal_places=2, validators=NON_NEGATIVE)
    status = models.CharField("status", max_length=20, choices=Status.choices, default=Status.PENDING)
    deliverables = models.TextField("deliverables", blank=True, default="")
    deliverable_type = models.CharField("deliverable type", max_length=50, blank=True, default="")
    expected_date = models.DateTimeField("expected date", null=True, blank=True)
    notes = models.TextField("notes", blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["campaign", "influencer"], name="uniq_campaign_influencer"),
        ]
        verbose_name = "Campaign influencer"
        verbose_name_plural = "Campaign influencers"

    def __str__(self):
        return f"{self.influencer_id} -> {self.campaign_id}"


class CampaignProduct(TimeStampedModel):
    """Product planned for a campaign."""

    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE, related_name="product_links")
    product = models.ForeignKey("catalog.Product", on_delete=models.CASCADE, related_name="campaign_links")
    quantity = models.PositiveIntegerField("quantity", validators=[MinValueValidator(1)])
    planned_qty = models.PositiveIntegerField("planned quantity", null=True, blank=True)
    discount = models.DecimalField("discount", max_digits=12, decimal_places=2, null=True, blank=True)
    notes = models.TextField("notes", blank=True, default="")
    due_date = models.DateTimeField("due date", null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["campaign", "product"], name="uniq_campaign_product"),
        ]
        verbose_name = "Campaign product"
        verbose_name_plural = "Campaign products"

    def __str__(self):
        return f"{self.product_id} x{self.quantity} -> {self.campaign_id}"
