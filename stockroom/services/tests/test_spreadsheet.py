from decimal import Decimal

import pandas as pd
import pytest

from stockroom.data.models import Product
from stockroom.services.spreadsheet import export_products, import_products, parse_product_row


def write_workbook(path, rows):
    pd.DataFrame(rows).to_excel(path, index=False, engine="openpyxl")
    return path


def test_parse_row_accepts_capitalized_columns():
    parsed = parse_product_row({"Name": "Kettlebell", "SKU": "KB-16", "Price": "49.90", "Stock": 7, "Threshold": 2})
    assert parsed.name == "Kettlebell"
    assert parsed.sku == "KB-16"
    assert parsed.price == Decimal("49.90")
    assert parsed.stock == 7
    assert parsed.threshold == 2


def test_parse_row_defaults():
    parsed = parse_product_row({"name": "Towel", "sku": "TWL"})
    assert parsed.category == "Default"
    assert parsed.threshold == 5
    assert parsed.stock == 0
    assert parsed.price == Decimal("0")
    assert parsed.wholesale_price is None
    assert parsed.description is None


def test_parse_row_treats_nan_as_missing():
    parsed = parse_product_row({"name": "Towel", "sku": "TWL", "retail_price": float("nan"), "stock": float("nan")})
    assert parsed.retail_price is None
    assert parsed.stock == 0


def test_parse_row_numeric_sku_is_text():
    assert parse_product_row({"name": "Band", "sku": 1001.0}).sku == "1001"


@pytest.mark.parametrize("row", [{"name": "No SKU"}, {"sku": "NONAME"}, {"name": "  ", "sku": "X"}])
def test_parse_row_requires_name_and_sku(row):
    with pytest.raises(ValueError, match="Missing required fields"):
        parse_product_row(row)


def test_parse_row_rejects_bad_numbers():
    with pytest.raises(ValueError):
        parse_product_row({"name": "Mat", "sku": "M", "price": "cheap"})


def test_import_upserts_by_sku_and_counts_failures(backend, tmp_path):
    path = write_workbook(
        tmp_path / "import.xlsx",
        [
            {"name": "Whey 2kg", "sku": "WHEY900", "price": 120, "stock": 30},
            {"name": "Towel", "sku": "TWL", "price": 12.5, "stock": 4},
            {"name": "Broken", "sku": None, "price": 1, "stock": 1},
        ],
    )
    summary = import_products(backend, path)

    assert (summary.successes, summary.failures) == (2, 1)
    assert summary.message == "Successfully processed 2 products. Failed to process 1 products."
    by_sku = {r["sku"]: r for r in backend.tables["products"]}
    assert by_sku["WHEY900"]["id"] == "p1"
    assert by_sku["WHEY900"]["stock"] == 30
    assert by_sku["TWL"]["price"] == Decimal("12.5")
    assert len(backend.tables["products"]) == 4


def test_import_counts_backend_failures_per_row(backend, tmp_path):
    backend.fail("insert", "products", when=lambda row: row["sku"] == "BAD")
    path = write_workbook(tmp_path / "import.xlsx", [{"name": "A", "sku": "BAD"}, {"name": "B", "sku": "GOOD"}])
    summary = import_products(backend, path)
    assert (summary.successes, summary.failures) == (1, 1)


def test_import_empty_sheet(backend, tmp_path):
    path = write_workbook(tmp_path / "empty.xlsx", {"name": [], "sku": []})
    summary = import_products(backend, path)
    assert (summary.successes, summary.failures) == (0, 0)
    assert summary.message == "No products found in the uploaded file."


def test_export_writes_inventory_sheet(tmp_path):
    products = [
        Product(id="p1", name="Whey", sku="WH", price=Decimal("19.99"), stock=3, threshold=5),
        Product(id="p2", name="Mat", sku="MT", price=Decimal("25"), retail_price=Decimal("30"), stock=0),
    ]
    path = tmp_path / "inventory_export.xlsx"
    export_products(products, path)

    df = pd.read_excel(path, sheet_name="Inventory", engine="openpyxl")
    assert list(df["sku"]) == ["WH", "MT"]
    assert list(df["price"]) == [19.99, 25.0]
    assert list(df["stock"]) == [3, 0]
    assert "threshold" in df.columns


def test_exported_workbook_imports_back(backend, tmp_path):
    path = tmp_path / "inventory_export.xlsx"
    export_products([Product(id="x", name="Rope", sku="ROPE", price=Decimal("9.5"), stock=2, threshold=1)], path)

    summary = import_products(backend, path)
    assert summary.successes == 1
    (rope,) = [r for r in backend.tables["products"] if r["sku"] == "ROPE"]
    assert rope["threshold"] == 1
    assert rope["category"] == "Default"
