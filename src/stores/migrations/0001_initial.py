import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Firm",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="email")),
                ("phone", models.CharField(blank=True, default="", max_length=30, verbose_name="phone")),
                ("address", models.CharField(blank=True, default="", max_length=255, verbose_name="address")),
                ("city", models.CharField(blank=True, default="", max_length=100, verbose_name="city")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
            ],
            options={
                "verbose_name": "Firm",
                "verbose_name_plural": "Firms",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Store",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="email")),
                ("phone", models.CharField(blank=True, default="", max_length=30, verbose_name="phone")),
                ("address", models.CharField(blank=True, default="", max_length=255, verbose_name="address")),
                ("city", models.CharField(blank=True, default="", max_length=100, verbose_name="city")),
                ("state", models.CharField(blank=True, default="", max_length=100, verbose_name="state")),
                ("zip_code", models.CharField(blank=True, default="", max_length=20, verbose_name="zip code")),
                ("country", models.CharField(blank=True, default="", max_length=100, verbose_name="country")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                (
                    "firm",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stores",
                        to="stores.firm",
                        verbose_name="firm",
                    ),
                ),
            ],
            options={
                "verbose_name": "Store",
                "verbose_name_plural": "Stores",
                "ordering": ["name"],
            },
        ),
    ]
