"""Business-logic / service functions for the invoices app."""
from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction

from core.transitions import build_event
from invoices import ocr
from invoices.models import INVOICE_TRANSITIONS, InvoiceImage

logger = logging.getLogger("crm")

UPDATABLE_FIELDS = ("ocr_data", "extracted_total", "campaign", "product")


def _apply_transition(invoice: InvoiceImage, status: str, *, notes: str, actor=None) -> None:
    """Validate ``invoice.status -> status`` and append the event (no save)."""
    try:
        event = INVOICE_TRANSITIONS.transition(
            invoice.status, status, notes=notes, user_id=getattr(actor, "pk", None),
        )
    except ValueError:
        logger.warning("Invoice %s: rejected transition %s -> %s", invoice.pk, invoice.status, status)
        raise
    timeline = dict(invoice.status_timeline or {})
    timeline["events"] = [*timeline.get("events", []), event]
    invoice.status_timeline = timeline
    invoice.status = status


def _lock(invoice: InvoiceImage) -> InvoiceImage:
    return InvoiceImage.objects.select_for_update().get(pk=invoice.pk)


# ---------------------------------------------------------------------------
# upload
# ---------------------------------------------------------------------------

def validate_upload(uploaded_file) -> None:
    if not uploaded_file:
        raise ValueError("No file uploaded")
    if uploaded_file.content_type not in settings.INVOICE_ALLOWED_CONTENT_TYPES:
        raise ValueError("Invalid file type. Only JPEG, PNG, and WebP are allowed.")
    if uploaded_file.size > settings.INVOICE_MAX_UPLOAD_BYTES:
        raise ValueError("File is too large.")


@transaction.atomic
def create_invoice(uploaded_file, *, campaign=None, product=None, actor=None) -> InvoiceImage:
    """Store the uploaded image, run OCR and create a PENDING record.

    Raises
    ------
    ValueError
        If the upload is missing, of a disallowed type, or unreadable.
    """
    validate_upload(uploaded_file)
    try:
        ocr_data, total = ocr.build_ocr_data(uploaded_file)
    except ocr.OCRError as exc:
        raise ValueError(f"File upload failed: {exc}") from exc
    uploaded_file.seek(0)

    invoice = InvoiceImage(
        original_name=uploaded_file.name,
        content_type=uploaded_file.content_type,
        status=InvoiceImage.Status.PENDING,
        status_timeline={
            "events": [
                build_event(
                    InvoiceImage.Status.PENDING,
                    notes="Invoice uploaded",
                    user_id=getattr(actor, "pk", None),
                )
            ]
        },
        ocr_data=ocr_data,
        extracted_total=total,
        campaign=campaign,
        product=product,
    )
    invoice.image.save(uploaded_file.name, uploaded_file, save=False)
    invoice.save()
    logger.info("Invoice %s uploaded (%s)", invoice.pk, invoice.image.name)
    return invoice


# ---------------------------------------------------------------------------
# update / status
# ---------------------------------------------------------------------------

@transaction.atomic
def update_invoice(invoice: InvoiceImage, *, status: str | None = None, actor=None, **fields) -> InvoiceImage:
    """Edit OCR fields / links; a *different* ``status`` goes through the guard."""
    invoice = _lock(invoice)
    changed = []
    if status and status != invoice.status:
        _apply_transition(invoice, status, notes=f"Status updated to {status}", actor=actor)
        changed += ["status", "status_timeline"]
    for key, value in fields.items():
        if key in UPDATABLE_FIELDS:
            setattr(invoice, key, value)
            changed.append(key)
    if changed:
        invoice.save(update_fields=[*changed, "updated_at"])
    return invoice


@transaction.atomic
def update_status(invoice: InvoiceImage, status: str, actor=None, notes: str | None = None) -> InvoiceImage:
    """Move the invoice to ``status``.

    Raises
    ------
    core.transitions.InvalidTransition
        If ``status`` is not reachable from the current status.
    """
    invoice = _lock(invoice)
    previous = invoice.status
    _apply_transition(invoice, status, notes=notes or f"Status updated to {status}", actor=actor)
    invoice.save(update_fields=["status", "status_timeline", "updated_at"])
    logger.info("Invoice %s status %s -> %s", invoice.pk, previous, status)
    return invoice


def link_campaign(invoice: InvoiceImage, campaign) -> InvoiceImage:
    invoice.campaign = campaign
    invoice.save(update_fields=["campaign", "updated_at"])
    return invoice


def link_product(invoice: InvoiceImage, product) -> InvoiceImage:
    invoice.product = product
    invoice.save(update_fields=["product", "updated_at"])
    return invoice


def delete_invoice(invoice: InvoiceImage) -> None:
    """Delete the row and its stored file."""
    name = invoice.image.name
    storage = invoice.image.storage
    pk = invoice.pk
    invoice.delete()
    if name:
        transaction.on_commit(lambda: _delete_file(storage, name))
    logger.info("Invoice %s deleted (file %s)", pk, name)


def _delete_file(storage, name) -> None:
    if storage.exists(name):
        storage.delete(name)


# ---------------------------------------------------------------------------
# OCR processing (driven by invoices.tasks)
# ---------------------------------------------------------------------------

def process_invoice(invoice_id) -> InvoiceImage:
    """Run OCR on a stored invoice: PENDING -> PROCESSING -> PROCESSED | FAILED.

    Invoices sitting in PROCESSED or FAILED are first put back to PENDING.
    """
    invoice = InvoiceImage.objects.get(pk=invoice_id)
    if invoice.status in (InvoiceImage.Status.PROCESSED, InvoiceImage.Status.FAILED):
        invoice = update_status(invoice, InvoiceImage.Status.PENDING, notes="Queued for OCR")
    invoice = update_status(invoice, InvoiceImage.Status.PROCESSING, notes="OCR started")

    try:
        with invoice.image.open("rb") as fh:
            ocr_data, total = ocr.build_ocr_data(fh)
    except (ocr.OCRError, OSError) as exc:
        logger.error("Invoice %s OCR failed: %s", invoice.pk, exc)
        invoice.ocr_data = {**(invoice.ocr_data or {}), "error": str(exc)}
        invoice.save(update_fields=["ocr_data", "updated_at"])
        return update_status(invoice, InvoiceImage.Status.FAILED, notes="OCR failed")

    invoice.ocr_data = {**(invoice.ocr_data or {}), **ocr_data}
    if total is not None:
        invoice.extracted_total = total
    invoice.save(update_fields=["ocr_data", "extracted_total", "updated_at"])
    return update_status(invoice, InvoiceImage.Status.PROCESSED, notes="OCR completed")
