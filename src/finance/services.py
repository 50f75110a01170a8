"""Service functions for the finance app."""
from __future__ import annotations

import logging
from decimal import Decimal

from django.utils import timezone

from finance.models import FinancialDocument

logger = logging.getLogger("crm")


def ensure_unique_number(document_number: str, exclude_pk=None) -> None:
    qs = FinancialDocument.objects.filter(document_number=document_number)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise ValueError(f"Document number {document_number} already exists")


def set_status(document: FinancialDocument, status: str) -> FinancialDocument:
    if status not in FinancialDocument.Status.values:
        raise ValueError(f"Invalid document status {status}")
    document.status = status
    document.save(update_fields=["status", "updated_at"])
    logger.info("Financial document %s status set to %s", document.pk, status)
    return document


def mark_paid(document: FinancialDocument, paid_date=None) -> FinancialDocument:
    document.status = FinancialDocument.Status.PAID
    document.paid_date = paid_date or timezone.now()
    document.save(update_fields=["status", "paid_date", "updated_at"])
    logger.info("Financial document %s marked paid", document.pk)
    return document


def _empty_bucket():
    return {"count": 0, "total": Decimal("0"), "paid": Decimal("0"), "pending": Decimal("0")}


def _fold(bucket, doc):
    bucket["count"] += 1
    bucket["total"] += doc.amount
    if doc.status == FinancialDocument.Status.PAID:
        bucket["paid"] += doc.amount
    else:
        bucket["pending"] += doc.amount


def stats_by_type(queryset=None) -> dict:
    """Count / total / paid / pending amounts per document type."""
    queryset = FinancialDocument.objects.all() if queryset is None else queryset
    stats = {doc_type: _empty_bucket() for doc_type in FinancialDocument.Type.values}
    for doc in queryset.only("type", "amount", "status"):
        _fold(stats[doc.type], doc)
    return stats


def stats_for_firm(firm) -> dict:
    """Same buckets as :func:`stats_by_type`, summed over every document of ``firm``."""
    bucket = _empty_bucket()
    docs = FinancialDocument.objects.filter(campaign__store__firm=firm).only("amount", "status")
    for doc in docs:
        _fold(bucket, doc)
    return {"firm_id": str(firm.pk), "firm_name": firm.name, **bucket}
