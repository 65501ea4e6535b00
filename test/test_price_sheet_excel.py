from pathlib import Path

import pytest
from openpyxl import load_workbook

from conftest import write_sheet

from cpm.domain.errors import ValidationError
from cpm.domain.models import MarginVatPrice, NormalVatPrice, VatRegime
from cpm.services.excel_service import ExcelService

HEADER = ["sku", "name", "purchase_price", "retail_price", "pro_price", "vat_type"]


def test_import_prices_rows_and_reports_bad_lines(tmp_path: Path):
    path = write_sheet(tmp_path / "prices.xlsx", [
        HEADER,
        ["IP14", "iPhone 14", 900, 1200, 1100, "normal"],
        ["IP13-SN1", "iPhone 13", 900, 1200, 1000, "MARGIN"],
        ["", "No sku", 900, 1000, 900, "normal"],
        ["BAD-PURCHASE", "Zero", 0, 100, 90, None],
        ["BAD-PRICE", "Text price", 100, "n/a", 150, None],
        ["DEFAULT", "No regime", 100, 150, 130, None],
    ])

    result = ExcelService().import_price_sheet(str(path))

    assert [r.product.sku for r in result.rows] == ["IP14", "IP13-SN1", "DEFAULT"]
    assert [line for line, _ in result.errors] == [4, 5, 6]
    assert "SKU is required" in result.errors[0][1]

    normal, margin, default = result.rows
    assert isinstance(normal.retail, NormalVatPrice)
    assert normal.product.retail_margin == pytest.approx(33.333, abs=0.01)
    assert isinstance(margin.retail, MarginVatPrice)
    assert margin.regime is VatRegime.MARGIN
    assert margin.retail.net_margin == pytest.approx(250.0)
    assert margin.product.vat_type == "margin"
    assert default.regime is VatRegime.NORMAL


def test_import_rejects_unknown_vat_type(tmp_path: Path):
    path = write_sheet(tmp_path / "prices.xlsx", [HEADER, ["A", "a", 10, 12, 11, "reduced"]])

    result = ExcelService().import_price_sheet(str(path))

    assert result.rows == []
    assert result.errors[0][0] == 2
    assert "Unknown vat_type" in result.errors[0][1]


def test_import_requires_headers(tmp_path: Path):
    path = write_sheet(tmp_path / "prices.xlsx", [["sku", "name", "purchase_price", "retail_price"]])

    with pytest.raises(ValidationError, match="Missing column header: pro_price"):
        ExcelService().import_price_sheet(str(path))


def test_export_writes_priced_rows(tmp_path: Path):
    source = write_sheet(tmp_path / "in.xlsx", [HEADER, ["IP13-SN1", "iPhone 13", 900, 1200, 950, "margin"]])
    excel = ExcelService()
    rows = excel.import_price_sheet(str(source)).rows

    out = tmp_path / "out.xlsx"
    excel.export_price_sheet(str(out), rows)

    ws = load_workbook(out).active
    assert ws.title == "Prices"
    assert ws["A1"].value == "sku"
    assert ws["A1"].font.bold
    assert ws["A2"].value == "IP13-SN1"
    assert ws["C2"].value == "margin"
    assert ws["E2"].value == pytest.approx(1200.0)
    assert ws["F2"].value == pytest.approx(0.2778, abs=1e-4)
    assert ws["G2"].value == pytest.approx(250.0)
    assert ws["H2"].value == "high"
    assert ws["L2"].value == "low"
    assert ws["F2"].number_format == "0.00%"
