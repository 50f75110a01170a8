"""
Service functions for the catalog app.

Handles bulk product import from CSV and product exports (CSV / XLSX).
"""
import csv
import io
import json
import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from core.export import queryset_to_csv_response, queryset_to_xlsx_response

from .models import Product

logger = logging.getLogger("crm")

MAX_IMPORT_BYTES = 5 * 1024 * 1024

# (attribute or callable, header) pairs shared by both export formats.
EXPORT_COLUMNS = [
    ("name", "name"),
    ("sku", "sku"),
    (lambda p: p.as_code or "", "as_code"),
    ("category", "category"),
    ("stock", "stock"),
    (lambda p: float(p.price), "price"),
    ("description", "description"),
    (lambda p: " ".join(p.image_urls or []), "image_urls"),
    (lambda p: p.created_at.strftime("%Y-%m-%d %H:%M"), "created_at"),
]


# =========================================================================
# IMPORT
# =========================================================================

def decode_csv_upload(uploaded_file) -> str:
    """Decode uploaded CSV content with utf-8 fallback and size guard.

    Raises ``ValueError`` with a user-facing message when the file is
    missing, too large, empty or undecodable.
    """
    if not uploaded_file:
        raise ValueError("No CSV file uploaded")
    if getattr(uploaded_file, "size", 0) and uploaded_file.size > MAX_IMPORT_BYTES:
        raise ValueError("CSV file exceeds 5 MB")

    raw = uploaded_file.read()
    if not raw:
        raise ValueError("CSV file is empty")
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def _build_csv_dict_reader(content: str) -> csv.DictReader:
    """Build a DictReader with automatic delimiter detection."""
    sample = content[:4096]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel
    return csv.DictReader(io.StringIO(content), dialect=dialect)


def _clean(value) -> str:
    return str(value).strip() if value is not None else ""


def _parse_row(row: dict) -> dict:
    """Turn a raw CSV row into Product field values, raising ValueError on bad data."""
    row = {(_clean(k)).lower(): _clean(v) for k, v in row.items() if k is not None}
    name, sku, raw_price = row.get("name"), row.get("sku"), row.get("price")
    if not name or not sku or not raw_price:
        raise ValueError("Missing required fields: name, sku, or price")

    try:
        price = Decimal(raw_price)
    except InvalidOperation:
        raise ValueError(f'Invalid price "{raw_price}"')
    if not price.is_finite():
        raise ValueError(f'Invalid price "{raw_price}"')
    if price < 0:
        raise ValueError("Price cannot be negative")
    try:
        Product._meta.get_field("price").run_validators(price)
    except ValidationError as exc:
        raise ValueError(f'Invalid price "{raw_price}": {" ".join(exc.messages)}')

    category = (row.get("category") or Product.Category.OTHER).upper()
    if category not in Product.Category.values:
        raise ValueError(f'Unknown category "{row.get("category")}"')

    raw_stock = row.get("stock") or "0"
    if not raw_stock.isdigit():
        raise ValueError(f'Invalid stock "{raw_stock}"')

    metadata = {}
    if row.get("metadata"):
        try:
            metadata = json.loads(row["metadata"])
        except json.JSONDecodeError:
            raise ValueError("metadata must be valid JSON")

    return {
        "name": name,
        "sku": sku,
        "as_code": row.get("as_code") or None,
        "description": row.get("description", ""),
        "category": category,
        "stock": int(raw_stock),
        "price": price,
        "image_urls": (row.get("image_urls") or "").split(),
        "metadata": metadata,
    }


def import_products_from_csv(content: str) -> dict:
    """
    Create products from CSV text (first line is the header).

    Columns: name, sku, price (required); as_code, description, category,
    stock, image_urls (space separated), metadata (JSON) (optional).

    Existing SKUs / AS codes are never overwritten: such rows are reported
    as errors. Row numbers follow the spreadsheet convention (header = 1).

    Returns::

        {"successes": list[Product], "errors": [{"row": int, "error": str}]}
    """
    reader = _build_csv_dict_reader(content)
    successes: list[Product] = []
    errors: list[dict] = []

    for row_number, row in enumerate(reader, start=2):
        try:
            data = _parse_row(row)
            if Product.objects.filter(sku=data["sku"]).exists():
                raise ValueError(f'SKU "{data["sku"]}" already exists')
            if data["as_code"] and Product.objects.filter(as_code=data["as_code"]).exists():
                raise ValueError(f'ASCode "{data["as_code"]}" already exists')
            with transaction.atomic():
                successes.append(Product.objects.create(**data))
        except (ValueError, IntegrityError, ValidationError) as exc:
            errors.append({"row": row_number, "error": str(exc)})
            logger.warning("Product import - row %d: %s", row_number, exc)

    logger.info(
        "Product import finished: %d created, %d error(s).",
        len(successes), len(errors),
    )
    return {"successes": successes, "errors": errors}


# =========================================================================
# EXPORT
# =========================================================================

def export_products(queryset, fmt: str = "csv"):
    """Return a download response for ``queryset`` in ``csv`` or ``xlsx``."""
    if fmt == "xlsx":
        return queryset_to_xlsx_response(queryset, EXPORT_COLUMNS, "products_export", sheet_title="Products")
    return queryset_to_csv_response(queryset, EXPORT_COLUMNS, "products_export")
