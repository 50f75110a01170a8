import csv
import io

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from openpyxl import load_workbook

from catalog.models import Product
from catalog.services import decode_csv_upload, import_products_from_csv

pytestmark = pytest.mark.django_db


def test_import_reports_row_errors_and_keeps_going(product):
    content = "\n".join([
        "name,sku,price,as_code,category,stock",
        "Yoga Mat,YM-1,39.90,AS200001,FITNESS,12",
        ",NO-NAME,10,,,",
        "Dup Sku,TST-001,5,,,",
        "Dup Code,NEW-2,5,AS100001,,",
        "Odd,ODD-1,5,,GARDEN,",
        "Cheap,CH-1,abc,,,",
        "Serum,SR-1,19.5,,beauty,",
    ])
    result = import_products_from_csv(content)

    assert [p.sku for p in result["successes"]] == ["YM-1", "SR-1"]
    assert result["errors"] == [
        {"row": 3, "error": "Missing required fields: name, sku, or price"},
        {"row": 4, "error": 'SKU "TST-001" already exists'},
        {"row": 5, "error": 'ASCode "AS100001" already exists'},
        {"row": 6, "error": 'Unknown category "GARDEN"'},
        {"row": 7, "error": 'Invalid price "abc"'},
    ]
    serum = Product.objects.get(sku="SR-1")
    assert serum.category == Product.Category.BEAUTY
    assert serum.stock == 0


def test_import_detects_semicolon_delimiter():
    result = import_products_from_csv("name;sku;price\nBottle;BT-1;12.00\n")
    assert [p.sku for p in result["successes"]] == ["BT-1"]
    assert result["errors"] == []


@pytest.mark.parametrize("raw_price", ["NaN", "Infinity", "-Infinity", "1e30", "1.234"])
def test_unusable_price_is_a_row_error(raw_price):
    content = f"name,sku,price\nGood,GD-1,5.00\nBad,BD-1,{raw_price}\n"
    result = import_products_from_csv(content)

    assert [p.sku for p in result["successes"]] == ["GD-1"]
    assert len(result["errors"]) == 1
    assert result["errors"][0]["row"] == 3
    assert result["errors"][0]["error"].startswith(f'Invalid price "{raw_price}"')
    assert not Product.objects.filter(sku="BD-1").exists()


def test_decode_rejects_empty_upload():
    with pytest.raises(ValueError, match="empty"):
        decode_csv_upload(SimpleUploadedFile("p.csv", b""))


def test_import_endpoint(manager_client):
    upload = SimpleUploadedFile(
        "products.csv",
        b"name,sku,price\nShaker,SH-1,9.99\n,,\n",
        content_type="text/csv",
    )
    response = manager_client.post("/api/v1/products/import/", {"file": upload}, format="multipart")
    assert response.status_code == 200
    body = response.json()
    assert [row["sku"] for row in body["successes"]] == ["SH-1"]
    assert body["errors"][0]["row"] == 3


def test_import_endpoint_requires_file(manager_client):
    response = manager_client.post("/api/v1/products/import/", {}, format="multipart")
    assert response.status_code == 400


def test_export_csv(coordinator_client, product):
    response = coordinator_client.get("/api/v1/products/export/?file_format=csv")
    assert response.status_code == 200
    assert response["Content-Type"].startswith("text/csv")
    rows = list(csv.reader(io.StringIO(response.content.decode("utf-8-sig"))))
    assert rows[0][:3] == ["name", "sku", "as_code"]
    assert rows[1][:3] == [product.name, product.sku, product.as_code]


def test_export_xlsx(coordinator_client, product):
    response = coordinator_client.get("/api/v1/products/export/?file_format=xlsx")
    assert response.status_code == 200
    sheet = load_workbook(io.BytesIO(response.content)).active
    assert sheet.cell(row=2, column=2).value == product.sku


def test_export_unknown_format_is_400(coordinator_client):
    response = coordinator_client.get("/api/v1/products/export/?file_format=pdf")
    assert response.status_code == 400


def test_product_filters(coordinator_client, product):
    Product.objects.create(name="Lipstick", sku="LP-1", category="BEAUTY", price="12.00")
    response = coordinator_client.get("/api/v1/products/?category=FITNESS")
    assert [row["sku"] for row in response.json()["data"]] == [product.sku]
    response = coordinator_client.get(f"/api/v1/products/?as_code={product.as_code}")
    assert response.json()["pagination"]["total"] == 1
