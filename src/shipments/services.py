"""Business-logic / service functions for the shipments app."""
from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import Count

from core.transitions import build_event
from shipments.models import SHIPMENT_TRANSITIONS, CourierShipment

logger = logging.getLogger("crm")

UPDATABLE_FIELDS = (
    "tracking_number",
    "courier_name",
    "courier_company",
    "send_store",
    "return_store",
    "influencer",
    "campaign",
    "sent_date",
    "received_date",
    "returned_date",
    "notes",
)


def _ensure_unique_tracking_number(tracking_number: str, exclude_pk=None) -> None:
    qs = CourierShipment.objects.filter(tracking_number=tracking_number)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise ValueError(f"Tracking number {tracking_number} already exists")


def _append_event(shipment: CourierShipment, event: dict) -> None:
    timeline = dict(shipment.status_timeline or {})
    events = list(shipment.events)
    events.append(event)
    timeline["events"] = events
    shipment.status_timeline = timeline


# ---------------------------------------------------------------------------
# create / update
# ---------------------------------------------------------------------------

@transaction.atomic
def create_shipment(*, tracking_number: str, courier_name: str, actor=None, **fields) -> CourierShipment:
    """Create a PENDING shipment with its first timeline event.

    Related objects (``send_store``, ``return_store``, ``influencer``,
    ``campaign``) are passed as model instances; resolving ids is the
    caller's job.

    Raises
    ------
    ValueError
        If the tracking number is already used.
    """
    _ensure_unique_tracking_number(tracking_number)

    extra = {key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}
    shipment = CourierShipment(
        tracking_number=tracking_number,
        courier_name=courier_name,
        status=CourierShipment.Status.PENDING,
        **extra,
    )
    shipment.status_timeline = {
        "events": [
            build_event(
                CourierShipment.Status.PENDING,
                notes="Shipment created",
                user_id=getattr(actor, "pk", None),
            )
        ]
    }
    shipment.save()
    logger.info("Shipment %s created (tracking=%s)", shipment.pk, tracking_number)
    return shipment


@transaction.atomic
def update_shipment(shipment: CourierShipment, **fields) -> CourierShipment:
    """Update descriptive fields. ``status`` is ignored here on purpose;
    use :func:`update_status` or :func:`add_timeline_event`."""
    shipment = CourierShipment.objects.select_for_update().get(pk=shipment.pk)

    new_tracking = fields.get("tracking_number")
    if new_tracking and new_tracking != shipment.tracking_number:
        _ensure_unique_tracking_number(new_tracking, exclude_pk=shipment.pk)

    changed = []
    for key, value in fields.items():
        if key in UPDATABLE_FIELDS:
            setattr(shipment, key, value)
            changed.append(key)
    if changed:
        shipment.save(update_fields=[*changed, "updated_at"])
    return shipment


# ---------------------------------------------------------------------------
# status transitions
# ---------------------------------------------------------------------------

@transaction.atomic
def update_status(shipment: CourierShipment, status: str, actor=None) -> CourierShipment:
    """Move the shipment to ``status`` through the transition table.

    Raises
    ------
    core.transitions.InvalidTransition
        If ``status`` is not reachable from the current status.
    """
    shipment = CourierShipment.objects.select_for_update().get(pk=shipment.pk)
    previous = shipment.status
    try:
        event = SHIPMENT_TRANSITIONS.transition(
            previous,
            status,
            notes=f"Status updated to {status}",
            user_id=getattr(actor, "pk", None),
        )
    except ValueError:
        logger.warning("Shipment %s: rejected transition %s -> %s", shipment.pk, previous, status)
        raise

    _append_event(shipment, event)
    shipment.status = status
    shipment.save(update_fields=["status", "status_timeline", "updated_at"])
    logger.info("Shipment %s status %s -> %s", shipment.pk, previous, status)
    return shipment


@transaction.atomic
def add_timeline_event(
    shipment: CourierShipment,
    *,
    status: str,
    timestamp=None,
    notes: str | None = None,
    location: str | None = None,
    user_id=None,
) -> CourierShipment:
    """Record a tracking event.

    Events that repeat the current status are appended without touching the
    guard; events carrying a new status must be an allowed transition.
    """
    shipment = CourierShipment.objects.select_for_update().get(pk=shipment.pk)
    previous = shipment.status

    if status != previous:
        try:
            SHIPMENT_TRANSITIONS.validate(previous, status)
        except ValueError:
            logger.warning("Shipment %s: rejected event %s -> %s", shipment.pk, previous, status)
            raise

    _append_event(
        shipment,
        build_event(status, notes=notes, location=location, user_id=user_id, timestamp=timestamp),
    )
    update_fields = ["status_timeline", "updated_at"]
    if status != previous:
        shipment.status = status
        update_fields.append("status")
        logger.info("Shipment %s status %s -> %s (timeline event)", shipment.pk, previous, status)
    shipment.save(update_fields=update_fields)
    return shipment


# ---------------------------------------------------------------------------
# queries
# ---------------------------------------------------------------------------

def outstanding_returns():
    """Shipments marked RETURNED whose return has not been received yet."""
    return CourierShipment.objects.filter(
        status=CourierShipment.Status.RETURNED,
        returned_date__isnull=True,
    ).select_related("send_store", "return_store", "influencer", "campaign")


def shipment_stats() -> dict:
    rows = CourierShipment.objects.order_by().values("status").annotate(n=Count("id"))
    counts = {row["status"]: row["n"] for row in rows}
    return {
        "total_shipments": sum(counts.values()),
        "by_status": {status: counts.get(status, 0) for status in CourierShipment.Status.values},
        "outstanding_returns": outstanding_returns().count(),
    }
