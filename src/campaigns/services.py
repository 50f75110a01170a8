"""Business-logic / service functions for the campaigns app."""
from __future__ import annotations

import logging

from django.db import transaction

from campaigns.models import Campaign, CampaignProduct, InfluencerCampaignLink
from catalog.models import Product
from influencers.models import Influencer

logger = logging.getLogger("crm")

ASSIGNMENT_FIELDS = ("rate", "status", "deliverables", "deliverable_type", "expected_date", "notes")
PRODUCT_LINK_FIELDS = ("quantity", "planned_qty", "discount", "notes", "due_date")


def _get_or_fail(model, pk, label):
    obj = model.objects.filter(pk=pk).first()
    if obj is None:
        raise ValueError(f"{label} with ID {pk} not found")
    return obj


# ---------------------------------------------------------------------------
# Influencer assignment
# ---------------------------------------------------------------------------

@transaction.atomic
def assign_influencer(campaign_id, influencer_id, **terms) -> InfluencerCampaignLink:
    """Create or update the assignment of an influencer to a campaign.

    Raises
    ------
    ValueError
        If the campaign or influencer does not exist.
    """
    campaign = _get_or_fail(Campaign, campaign_id, "Campaign")
    influencer = _get_or_fail(Influencer, influencer_id, "Influencer")

    defaults = {key: terms[key] for key in ASSIGNMENT_FIELDS if terms.get(key) is not None}
    link, created = InfluencerCampaignLink.objects.update_or_create(
        campaign=campaign,
        influencer=influencer,
        defaults=defaults,
    )
    logger.info(
        "Influencer %s %s campaign %s",
        influencer.pk, "assigned to" if created else "terms updated on", campaign.pk,
    )
    return link


@transaction.atomic
def unassign_influencer(campaign_id, influencer_id) -> None:
    deleted, _ = InfluencerCampaignLink.objects.filter(
        campaign_id=campaign_id, influencer_id=influencer_id,
    ).delete()
    if not deleted:
        raise ValueError(f"Influencer {influencer_id} is not assigned to campaign {campaign_id}")
    logger.info("Influencer %s unassigned from campaign %s", influencer_id, campaign_id)


# ---------------------------------------------------------------------------
# Product links
# ---------------------------------------------------------------------------

@transaction.atomic
def link_product(campaign_id, product_id, **terms) -> CampaignProduct:
    """Create or update the planned quantity of a product for a campaign."""
    campaign = _get_or_fail(Campaign, campaign_id, "Campaign")
    product = _get_or_fail(Product, product_id, "Product")

    quantity = terms.get("quantity")
    if quantity is None or int(quantity) < 1:
        raise ValueError("quantity must be at least 1")

    defaults = {key: terms[key] for key in PRODUCT_LINK_FIELDS if terms.get(key) is not None}
    link, _ = CampaignProduct.objects.update_or_create(
        campaign=campaign,
        product=product,
        defaults=defaults,
    )
    logger.info("Product %s linked to campaign %s (qty=%s)", product.pk, campaign.pk, link.quantity)
    return link


@transaction.atomic
def unlink_product(campaign_id, product_id) -> None:
    deleted, _ = CampaignProduct.objects.filter(campaign_id=campaign_id, product_id=product_id).delete()
    if not deleted:
        raise ValueError(f"Product {product_id} is not linked to campaign {campaign_id}")
    logger.info("Product %s unlinked from campaign %s", product_id, campaign_id)


def set_campaign_status(campaign: Campaign, status: str) -> Campaign:
    if status not in Campaign.Status.values:
        raise ValueError(f"Invalid campaign status {status}")
    campaign.status = status
    campaign.save(update_fields=["status", "updated_at"])
    logger.info("Campaign %s status set to %s", campaign.pk, status)
    return campaign
