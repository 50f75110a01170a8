"""Models for the shipments app."""
from django.db import models

from core.models import TimeStampedModel
from core.transitions import TransitionTable


def empty_timeline():
    return {"events": []}


class CourierShipment(TimeStampedModel):
    """Parcel sent to an influencer and, optionally, returned to a store.

    ``status`` is only changed through :data:`SHIPMENT_TRANSITIONS`, and
    always equals the status of the last event in ``status_timeline``.
    """

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        SENT = "SENT", "Sent"
        IN_TRANSIT = "IN_TRANSIT", "In transit"
        DELIVERED = "DELIVERED", "Delivered"
        RETURNED = "RETURNED", "Returned"
        FAILED = "FAILED", "Failed"

    tracking_number = models.CharField(
        "tracking number",
        max_length=100,
        unique=True,
        error_messages={"unique": "Tracking number already exists."},
    )
    courier_name = models.CharField("courier name", max_length=100)
    courier_company = models.CharField("courier company", max_length=100, blank=True, default="")
    status = models.CharField(
        "status", max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True,
    )
    status_timeline = models.JSONField("status timeline", default=empty_timeline)
    send_store = models.ForeignKey(
        "stores.Store",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_shipments",
    )
    return_store = models.ForeignKey(
        "stores.Store",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="returned_shipments",
    )
    influencer = models.ForeignKey(
        "influencers.Influencer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="shipments",
    )
    campaign = models.ForeignKey(
        "campaigns.Campaign",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="shipments",
    )
    sent_date = models.DateTimeField("sent date", null=True, blank=True)
    received_date = models.DateTimeField("received date", null=True, blank=True)
    returned_date = models.DateTimeField("returned date", null=True, blank=True)
    notes = models.TextField("notes", blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Courier shipment"
        verbose_name_plural = "Courier shipments"

    def __str__(self):
        return f"{self.tracking_number} ({self.status})"

    @property
    def events(self) -> list:
        timeline = self.status_timeline if isinstance(self.status_timeline, dict) else {}
        events = timeline.get("events")
        return events if isinstance(events, list) else []


S = CourierShipment.Status

SHIPMENT_TRANSITIONS = TransitionTable(
    "courier_shipment",
    {
        S.PENDING: {S.SENT, S.FAILED},
        S.SENT: {S.IN_TRANSIT, S.FAILED, S.DELIVERED},
        S.IN_TRANSIT: {S.DELIVERED, S.RETURNED, S.FAILED},
        S.DELIVERED: {S.RETURNED},
        S.RETURNED: set(),
        S.FAILED: {S.PENDING},
    },
)
