"""Invoice OCR: text extraction and field parsing."""
from __future__ import annotations

import logging
import re
from decimal import Decimal

from django.conf import settings
from django.utils import timezone
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger("crm")

AS_CODE_RE = re.compile(r"AS[A-Z0-9]{6,}", re.IGNORECASE)
PRICE_RE = re.compile(r"[$€£]\s*(\d+\.?\d*)")
TOTAL_RE = re.compile(r"total[:\s]+[$€£]\s*(\d+\.?\d*)", re.IGNORECASE)


class OCRError(Exception):
    """The image could not be read."""


def extract_text(fileobj) -> dict:
    """Read ``fileobj`` and return ``{"raw_text", "extracted_fields"}``.

    No OCR engine is wired in yet, so ``raw_text`` is always empty; the image
    is still opened with Pillow so unreadable files fail here.
    """
    if not settings.OCR_ENABLED:
        return {"raw_text": "", "extracted_fields": {}}

    try:
        with Image.open(fileobj) as img:
            width, height = img.size
            fmt = img.format
    except (UnidentifiedImageError, OSError) as exc:
        raise OCRError(f"Unreadable image: {exc}") from exc

    return {
        "raw_text": "",
        "extracted_fields": {
            "image_format": fmt,
            "width": width,
            "height": height,
            "extracted_at": timezone.now().isoformat(),
        },
    }


def parse_text(raw_text: str) -> dict:
    """Pull AS code, first unit price and invoice total out of OCR text."""
    result = {"as_code": None, "unit_price": None, "total_amount": None}
    if not raw_text:
        return result

    match = AS_CODE_RE.search(raw_text)
    if match:
        result["as_code"] = match.group(0)
    match = PRICE_RE.search(raw_text)
    if match:
        result["unit_price"] = float(match.group(1))
    match = TOTAL_RE.search(raw_text)
    if match:
        result["total_amount"] = float(match.group(1))
    return result


def build_ocr_data(fileobj) -> tuple[dict, Decimal | None]:
    """Run extraction + parsing; return the ``ocr_data`` payload and the total."""
    extracted = extract_text(fileobj)
    parsed = parse_text(extracted["raw_text"])
    ocr_data = {"raw_text": extracted["raw_text"], **parsed, **extracted["extracted_fields"]}
    total = parsed["total_amount"]
    return ocr_data, (Decimal(str(total)) if total is not None else None)
