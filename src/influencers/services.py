"""Service functions for the influencers app."""
from __future__ import annotations

import logging

from influencers.models import Influencer

logger = logging.getLogger("crm")


class DuplicateInfluencer(ValueError):
    """An influencer with the same email is already on file."""


def email_exists(email: str) -> bool:
    return Influencer.objects.filter(email__iexact=(email or "").strip()).exists()


def create_from_scraped_profile(profile: dict, overrides: dict | None = None) -> Influencer:
    """Create an influencer from a scraped social profile.

    ``profile`` carries ``username``, ``full_name``, ``biography``,
    ``followers_count``, ``emails``, ``phones`` and ``profile_url``. Values in
    ``overrides`` win over the scraped ones.

    Raises
    ------
    DuplicateInfluencer
        If the resolved email already belongs to an influencer.
    """
    username = (profile.get("username") or "").strip()
    emails = [e for e in (profile.get("emails") or []) if e]
    phones = [p for p in (profile.get("phones") or []) if p]

    data = {
        "name": profile.get("full_name") or username,
        "email": emails[0] if emails else f"{username}@instagram.com",
        "phone": phones[0] if phones else "",
        "bio": profile.get("biography") or "",
        "followers": profile.get("followers_count"),
        "platform": "Instagram",
        "profile_url": profile.get("profile_url") or "",
    }
    data.update({k: v for k, v in (overrides or {}).items() if v is not None})

    if email_exists(data["email"]):
        raise DuplicateInfluencer(f"Influencer with email {data['email']} already exists")

    influencer = Influencer.objects.create(**data)
    logger.info("Influencer %s created from scraped profile '%s'", influencer.pk, username)
    return influencer
