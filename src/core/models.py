"""Abstract base models shared across apps."""
import uuid

from django.db import models


class TimeStampedModel(models.Model):
    """UUID primary key plus creation / modification timestamps."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField("created at", auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField("updated at", auto_now=True)

    class Meta:
        abstract = True
