"""Models for the influencers app."""
from django.db import models

from core.models import TimeStampedModel


class Influencer(TimeStampedModel):
    """Creator the firm works with across campaigns."""

    class Status(models.TextChoices):
        COLD = "COLD", "Cold"
        ACTIVE = "ACTIVE", "Active"
        FINAL = "FINAL", "Final"

    name = models.CharField("name", max_length=255)
    email = models.EmailField(
        "email",
        unique=True,
        error_messages={"unique": "An influencer with this email already exists."},
    )
    phone = models.CharField("phone", max_length=30, blank=True, default="")
    bio = models.TextField("bio", blank=True, default="")
    followers = models.PositiveIntegerField("followers", null=True, blank=True)
    status = models.CharField(
        "status",
        max_length=10,
        choices=Status.choices,
        default=Status.COLD,
        db_index=True,
    )
    platform = models.CharField("platform", max_length=50, blank=True, default="")
    profile_url = models.URLField("profile URL", max_length=500, blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Influencer"
        verbose_name_plural = "Influencers"

    def __str__(self):
        return f"{self.name} <{self.email}>"
