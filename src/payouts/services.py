"""Business-logic / service functions for the payouts app."""
from __future__ import annotations

import logging
from collections import Counter
from decimal import Decimal

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from core.transitions import build_event
from payouts.models import DocumentLink, Payout

logger = logging.getLogger("crm")

UPDATABLE_FIELDS = ("amount", "notes", "metadata")


# ---------------------------------------------------------------------------
# create / update
# ---------------------------------------------------------------------------

@transaction.atomic
def create_payout(*, type: str, amount: Decimal, actor=None, **fields) -> Payout:
    """Create a PENDING payout with its first history entry."""
    now = timezone.now()
    payout = Payout(type=type, amount=amount, status=Payout.Status.PENDING, requested_at=now)
    for key in ("currency", "influencer", "campaign", "invoice_id", "po_id", "notes", "metadata"):
        if fields.get(key) not in (None, ""):
            setattr(payout, key, fields[key])
    payout.status_history = [
        build_event(
            Payout.Status.PENDING,
            notes="Payout created",
            user_id=getattr(actor, "pk", None),
            timestamp=now,
        )
    ]
    payout.save()
    logger.info("Payout %s created (%s %s)", payout.pk, payout.amount, payout.currency)
    return payout


@transaction.atomic
def update_payout(
    payout: Payout,
    *,
    status: str | None = None,
    notes: str | None = None,
    actor=None,
    **fields,
) -> Payout:
    """Apply field changes; a status that differs from the current one is
    appended to ``status_history`` and stamps the matching timestamp."""
    payout = Payout.objects.select_for_update().get(pk=payout.pk)
    changed = []

    if status and status != payout.status:
        now = timezone.now()
        payout.status_history = [
            *(payout.status_history or []),
            build_event(
                status,
                notes=notes or f"Status changed to {status}",
                user_id=getattr(actor, "pk", None),
                timestamp=now,
            ),
        ]
        previous, payout.status = payout.status, status
        changed += ["status", "status_history"]
        stamp_field = Payout.STATUS_TIMESTAMP_FIELDS.get(status)
        if stamp_field:
            setattr(payout, stamp_field, now)
            changed.append(stamp_field)
        logger.info("Payout %s status %s -> %s", payout.pk, previous, status)

    if notes is not None:
        payout.notes = notes
        changed.append("notes")
    for key, value in fields.items():
        if key in UPDATABLE_FIELDS and value is not None:
            setattr(payout, key, value)
            changed.append(key)

    if changed:
        payout.save(update_fields=[*dict.fromkeys(changed), "updated_at"])
    return payout


def update_payment_status(payout: Payout, status: str, notes: str | None = None, actor=None) -> Payout:
    return update_payout(payout, status=status, notes=notes, actor=actor)


# ---------------------------------------------------------------------------
# read models
# ---------------------------------------------------------------------------

def payment_timeline(payout: Payout) -> dict:
    return {
        "payout_id": str(payout.pk),
        "amount": payout.amount,
        "type": payout.type,
        "status": payout.status,
        "timeline": {
            "requested": payout.requested_at,
            "approved": payout.approved_at,
            "processing": payout.processed_at,
            "paid": payout.paid_at,
            "failed": payout.failed_at,
        },
        "history": payout.status_history,
    }


def audit_trail(payout: Payout) -> dict:
    history = sorted(payout.status_history or [], key=lambda entry: entry.get("timestamp") or "")
    return {
        "payout_id": str(payout.pk),
        "amount": payout.amount,
        "type": payout.type,
        "created_at": payout.created_at,
        "audit_trail": history,
    }


def summarize(payouts) -> dict:
    """Totals and per-status / per-type counts over an iterable of payouts."""
    payouts = list(payouts)
    return {
        "total_payouts": len(payouts),
        "total_amount": sum((p.amount for p in payouts), Decimal("0")),
        "by_status": dict(Counter(p.status for p in payouts)),
        "by_type": dict(Counter(p.type for p in payouts)),
    }


def campaign_summary(campaign, payouts) -> dict:
    stats = summarize(payouts)
    stats["budget_utilization"] = (
        float(stats["total_amount"] / campaign.budget * 100) if campaign.budget else 0
    )
    return stats


# ---------------------------------------------------------------------------
# document links
# ---------------------------------------------------------------------------

def link_documents(
    *,
    primary_document_id: str,
    primary_document_type: str,
    linked_document_id: str,
    linked_document_type: str,
    relationship: str,
    notes: str = "",
) -> DocumentLink:
    valid = DocumentLink.DocumentType.values
    if primary_document_type not in valid:
        raise ValueError(f"Invalid primary document type. Must be one of: {', '.join(valid)}")
    if linked_document_type not in valid:
        raise ValueError(f"Invalid linked document type. Must be one of: {', '.join(valid)}")
    if DocumentLink.objects.filter(
        primary_document_id=primary_document_id,
        linked_document_id=linked_document_id,
    ).exists():
        raise ValueError("Document link already exists")

    link = DocumentLink.objects.create(
        primary_document_id=primary_document_id,
        primary_document_type=primary_document_type,
        linked_document_id=linked_document_id,
        linked_document_type=linked_document_type,
        relationship=relationship,
        notes=notes or "",
    )
    logger.info("Document link %s created (%s)", link.pk, relationship)
    return link


def document_links_for(document_id: str):
    return DocumentLink.objects.filter(
        Q(primary_document_id=document_id) | Q(linked_document_id=document_id)
    )
