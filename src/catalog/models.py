"""Models for the catalog app."""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class Product(TimeStampedModel):
    """Item a campaign can promote or ship to influencers."""

    class Category(models.TextChoices):
        ELECTRONICS = "ELECTRONICS", "Electronics"
        FASHION = "FASHION", "Fashion"
        BEAUTY = "BEAUTY", "Beauty"
        LIFESTYLE = "LIFESTYLE", "Lifestyle"
        FITNESS = "FITNESS", "Fitness"
        HOME = "HOME", "Home"
        FOOD = "FOOD", "Food"
        OTHER = "OTHER", "Other"

    name = models.CharField("name", max_length=255)
    sku = models.CharField(
        "SKU",
        max_length=100,
        unique=True,
        error_messages={"unique": "A product with this SKU already exists."},
    )
    # Internal article code, also what invoice OCR looks for (AS + 6 or more alphanumerics).
    as_code = models.CharField(
        "AS code",
        max_length=50,
        unique=True,
        null=True,
        blank=True,
        error_messages={"unique": "A product with this AS code already exists."},
    )
    description = models.TextField("description", blank=True, default="")
    category = models.CharField(
        "category",
        max_length=20,
        choices=Category.choices,
        default=Category.OTHER,
        db_index=True,
    )
    stock = models.PositiveIntegerField("stock", default=0)
    price = models.DecimalField(
        "price",
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    image_urls = models.JSONField("image URLs", default=list, blank=True)
    metadata = models.JSONField("metadata", default=dict, blank=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Product"
        verbose_name_plural = "Products"

    def __str__(self):
        return f"{self.name} ({self.sku})"
