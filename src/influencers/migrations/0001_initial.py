import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Influencer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                (
                    "email",
                    models.EmailField(
                        error_messages={"unique": "An influencer with this email already exists."},
                        max_length=254,
                        unique=True,
                        verbose_name="email",
                    ),
                ),
                ("phone", models.CharField(blank=True, default="", max_length=30, verbose_name="phone")),
                ("bio", models.TextField(blank=True, default="", verbose_name="bio")),
                ("followers", models.PositiveIntegerField(blank=True, null=True, verbose_name="followers")),
                (
                    "status",
                    models.CharField(
                        choices=[("COLD", "Cold"), ("ACTIVE", "Active"), ("FINAL", "Final")],
                        db_index=True,
                        default="COLD",
                        max_length=10,
                        verbose_name="status",
                    ),
                ),
                ("platform", models.CharField(blank=True, default="", max_length=50, verbose_name="platform")),
                ("profile_url", models.URLField(blank=True, default="", max_length=500, verbose_name="profile URL")),
            ],
            options={
                "verbose_name": "Influencer",
                "verbose_name_plural": "Influencers",
                "ordering": ["-created_at"],
            },
        ),
    ]
