import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                (
                    "sku",
                    models.CharField(
                        error_messages={"unique": "A product with this SKU already exists."},
                        max_length=100,
                        unique=True,
                        verbose_name="SKU",
                    ),
                ),
                (
                    "as_code",
                    models.CharField(
                        blank=True,
                        error_messages={"unique": "A product with this AS code already exists."},
                        max_length=50,
                        null=True,
                        unique=True,
                        verbose_name="AS code",
                    ),
                ),
                ("description", models.TextField(blank=True, default="", verbose_name="description")),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("ELECTRONICS", "Electronics"),
                            ("FASHION", "Fashion"),
                            ("BEAUTY", "Beauty"),
                            ("LIFESTYLE", "Lifestyle"),
                            ("FITNESS", "Fitness"),
                            ("HOME", "Home"),
                            ("FOOD", "Food"),
                            ("OTHER", "Other"),
                        ],
                        db_index=True,
                        default="OTHER",
                        max_length=20,
                        verbose_name="category",
                    ),
                ),
                ("stock", models.PositiveIntegerField(default=0, verbose_name="stock")),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="price",
                    ),
                ),
                ("image_urls", models.JSONField(blank=True, default=list, verbose_name="image URLs")),
                ("metadata", models.JSONField(blank=True, default=dict, verbose_name="metadata")),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "ordering": ["-created_at"],
            },
        ),
    ]
