import io
import uuid

import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import transaction
from PIL import Image

from invoices import ocr
from invoices import services as invoice_services
from invoices.models import InvoiceImage
from invoices.tasks import process_invoice_ocr

pytestmark = pytest.mark.django_db


def _png(name="receipt.png"):
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color="white").save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


@pytest.fixture
def invoice(campaign):
    return invoice_services.create_invoice(_png(), campaign=campaign)


def _upload(client, **data):
    return client.post("/api/v1/invoices/upload/", data, format="multipart")


# ---------------------------------------------------------------------------
# OCR parsing
# ---------------------------------------------------------------------------

def test_parse_text_extracts_code_price_and_total():
    text = "Item ASX12345 Protein\nUnit $12.50\nTOTAL: $37.50"
    assert ocr.parse_text(text) == {"as_code": "ASX12345", "unit_price": 12.5, "total_amount": 37.5}


def test_parse_text_on_empty_text():
    assert ocr.parse_text("") == {"as_code": None, "unit_price": None, "total_amount": None}


def test_extract_text_rejects_unreadable_image(settings):
    settings.OCR_ENABLED = True
    with pytest.raises(ocr.OCRError):
        ocr.extract_text(io.BytesIO(b"not an image"))


def test_extract_text_reads_image_metadata(settings):
    settings.OCR_ENABLED = True
    result = ocr.extract_text(_png())
    assert result["raw_text"] == ""
    assert result["extracted_fields"]["image_format"] == "PNG"
    assert result["extracted_fields"]["width"] == 8


# ---------------------------------------------------------------------------
# upload
# ---------------------------------------------------------------------------

def test_upload_png_creates_pending_invoice(manager_client, campaign):
    response = _upload(manager_client, file=_png(), campaign_id=str(campaign.pk))
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "PENDING"
    assert body["original_name"] == "receipt.png"
    assert body["campaign_id"] == str(campaign.pk)
    assert body["image_url"].endswith(".png")
    assert body["status_timeline"]["events"][0]["notes"] == "Invoice uploaded"
    invoice = InvoiceImage.objects.get(pk=body["id"])
    assert default_storage.exists(invoice.image.name)


def test_upload_without_file_is_400(manager_client):
    response = _upload(manager_client)
    assert response.status_code == 400
    assert response.json()["detail"] == "No file uploaded"


def test_upload_rejects_other_types(manager_client):
    pdf = SimpleUploadedFile("invoice.pdf", b"%PDF-1.4", content_type="application/pdf")
    response = _upload(manager_client, file=pdf)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid file type. Only JPEG, PNG, and WebP are allowed."
    assert not InvoiceImage.objects.exists()


def test_upload_unknown_campaign_is_404(manager_client):
    response = _upload(manager_client, file=_png(), campaign_id=str(uuid.uuid4()))
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# status and processing
# ---------------------------------------------------------------------------

def test_status_guard(manager_client, invoice):
    url = f"/api/v1/invoices/{invoice.pk}/status/"
    assert manager_client.patch(url, {"status": "PROCESSING"}, format="json").status_code == 200
    assert manager_client.patch(url, {"status": "PROCESSED"}, format="json").status_code == 200

    response = manager_client.patch(url, {"status": "PROCESSING"}, format="json")
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot transition from PROCESSED to PROCESSING"
    invoice.refresh_from_db()
    assert invoice.status == "PROCESSED"
    assert len(invoice.status_timeline["events"]) == 3


def test_partial_update_with_same_status_skips_guard(manager_client, invoice):
    response = manager_client.patch(
        f"/api/v1/invoices/{invoice.pk}/",
        {"status": "PENDING", "extracted_total": "99.90"},
        format="json",
    )
    assert response.status_code == 200
    assert response.json()["extracted_total"] == "99.90"
    assert len(response.json()["status_timeline"]["events"]) == 1


def test_process_invoice_walks_to_processed(invoice):
    process_invoice_ocr(str(invoice.pk))
    invoice.refresh_from_db()
    assert invoice.status == "PROCESSED"
    assert [e["status"] for e in invoice.status_timeline["events"]] == ["PENDING", "PROCESSING", "PROCESSED"]


def test_process_invoice_fails_when_file_is_missing(invoice):
    default_storage.delete(invoice.image.name)
    result = invoice_services.process_invoice(invoice.pk)
    assert result.status == "FAILED"
    assert "error" in result.ocr_data


def test_reprocess_endpoint_requeues_processed_invoice(manager_client, invoice):
    process_invoice_ocr(str(invoice.pk))
    response = manager_client.post(f"/api/v1/invoices/{invoice.pk}/reprocess/")
    assert response.status_code == 202
    assert response.json()["status"] == "PROCESSED"
    statuses = [e["status"] for e in response.json()["status_timeline"]["events"]]
    assert statuses[-3:] == ["PENDING", "PROCESSING", "PROCESSED"]


def test_reprocess_while_processing_is_400(manager_client, invoice):
    invoice_services.update_status(invoice, "PROCESSING")
    response = manager_client.post(f"/api/v1/invoices/{invoice.pk}/reprocess/")
    assert response.status_code == 400
    assert response.json()["detail"] == "Invoice is already being processed"


# ---------------------------------------------------------------------------
# links, queries, delete
# ---------------------------------------------------------------------------

def test_link_product_and_campaign(manager_client, invoice, product, campaign):
    response = manager_client.patch(
        f"/api/v1/invoices/{invoice.pk}/link-product/", {"product_id": str(product.pk)}, format="json",
    )
    assert response.json()["product_id"] == str(product.pk)

    missing = manager_client.patch(
        f"/api/v1/invoices/{invoice.pk}/link-campaign/", {"campaign_id": str(uuid.uuid4())}, format="json",
    )
    assert missing.status_code == 404


def test_by_status_and_by_campaign(coordinator_client, invoice, campaign):
    assert coordinator_client.get("/api/v1/invoices/by-status/pending/").json()["pagination"]["total"] == 1
    assert coordinator_client.get("/api/v1/invoices/by-status/LOST/").status_code == 400
    rows = coordinator_client.get(f"/api/v1/invoices/by-campaign/{campaign.pk}/").json()["data"]
    assert [row["id"] for row in rows] == [str(invoice.pk)]


def test_delete_removes_stored_file(manager_client, invoice, django_capture_on_commit_callbacks):
    name = invoice.image.name
    assert default_storage.exists(name)
    with django_capture_on_commit_callbacks(execute=True):
        response = manager_client.delete(f"/api/v1/invoices/{invoice.pk}/")
    assert response.status_code == 204
    assert not InvoiceImage.objects.filter(pk=invoice.pk).exists()
    assert not default_storage.exists(name)


def test_rolled_back_delete_keeps_file(invoice, django_capture_on_commit_callbacks):
    name = invoice.image.name
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                invoice_services.delete_invoice(invoice)
                raise RuntimeError("abort")

    assert callbacks == []
    assert InvoiceImage.objects.filter(pk=invoice.pk).exists()
    assert default_storage.exists(name)
