"""Celery tasks for invoice OCR."""
import logging

from celery import shared_task

from invoices import services

logger = logging.getLogger("crm")


@shared_task(name="invoices.tasks.process_invoice_ocr")
def process_invoice_ocr(invoice_id):
    invoice = services.process_invoice(invoice_id)
    return f"invoice {invoice.pk} status={invoice.status}"
