from __future__ import annotations

import logging
from dataclasses import dataclass, field

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from cpm.domain.errors import ValidationError
from cpm.domain.models import PriceField, ProductPrices, VatRegime
from cpm.pricing.engine import PriceResult, classify_margin, convert, valid_purchase

log = logging.getLogger("cpm.import")

REQUIRED_HEADERS = ["sku", "name", "purchase_price", "retail_price", "pro_price"]


@dataclass(frozen=True)
class PricedProduct:
    product: ProductPrices
    retail: PriceResult
    pro: PriceResult

    @property
    def regime(self) -> VatRegime:
        return VatRegime.parse(self.product.vat_type) or VatRegime.NORMAL


@dataclass
class ImportResult:
    rows: list[PricedProduct] = field(default_factory=list)
    errors: list[tuple[int, str]] = field(default_factory=list)


class ExcelService:
    def import_price_sheet(self, path: str) -> ImportResult:
        """
        One product per row, header on row 1:
          sku | name | purchase_price | retail_price | pro_price | vat_type (optional, default normal)

        Bad rows are reported with their line number and skipped.
        """
        wb = load_workbook(path, data_only=True)
        ws = wb.active

        headers = {}
        for col in range(1, ws.max_column + 1):
            v = ws.cell(row=1, column=col).value
            if isinstance(v, str):
                headers[v.strip().lower()] = col

        for r in REQUIRED_HEADERS:
            if r not in headers:
                raise ValidationError(f"Missing column header: {r}")

        result = ImportResult()
        for row in range(2, ws.max_row + 1):
            values = {h: ws.cell(row=row, column=c).value for h, c in headers.items()}
            if all(v is None or str(v).strip() == "" for v in values.values()):
                continue
            try:
                result.rows.append(self._price_row(values))
            except ValidationError as e:
                log.warning("price_sheet_row_skipped line=%s error=%s", row, e)
                result.errors.append((row, str(e)))

        log.info("price_sheet_imported path=%s ok=%s skipped=%s", path, len(result.rows), len(result.errors))
        return result

    def _price_row(self, values: dict) -> PricedProduct:
        sku = str(values.get("sku") or "").strip()
        name = str(values.get("name") or "").strip()
        if not sku:
            raise ValidationError("SKU is required.")

        purchase = valid_purchase(values.get("purchase_price"))
        if purchase is None:
            raise ValidationError(f"Purchase price must be > 0 for {sku}.")

        raw_regime = values.get("vat_type")
        regime = VatRegime.parse(raw_regime) if raw_regime not in (None, "") else VatRegime.NORMAL
        if regime is None:
            raise ValidationError(f"Unknown vat_type {raw_regime!r} for {sku}.")

        retail = convert(regime, PriceField.PRICE, values.get("retail_price"), purchase)
        pro = convert(regime, PriceField.PRICE, values.get("pro_price"), purchase)
        if retail is None or pro is None:
            raise ValidationError(f"Retail and pro prices must be numbers for {sku}.")

        product = ProductPrices(
            sku=sku,
            name=name,
            purchase_price=purchase,
            retail_price=retail.price,
            pro_price=pro.price,
            vat_type=regime.value,
            retail_margin=retail.margin_percent,
            pro_margin=pro.margin_percent,
        )
        return PricedProduct(product=product, retail=retail, pro=pro)

    def export_price_sheet(self, path: str, rows: list[PricedProduct]) -> None:
        wb = Workbook()
        ws = wb.active
        ws.title = "Prices"

        header = [
            "sku", "name", "vat_type", "purchase_price",
            "retail_price", "retail_margin_pct", "retail_amount", "retail_level",
            "pro_price", "pro_margin_pct", "pro_amount", "pro_level",
        ]
        ws.append(header)
        for c in ws[1]:
            c.font = Font(bold=True)

        for item in rows:
            p = item.product
            ws.append([
                p.sku, p.name, item.regime.value, p.purchase_price,
                item.retail.price, item.retail.margin_percent / 100, item.retail.amount,
                classify_margin(item.retail.margin_percent).value,
                item.pro.price, item.pro.margin_percent / 100, item.pro.amount,
                classify_margin(item.pro.margin_percent).value,
            ])

        for row in ws.iter_rows(min_row=2):
            for idx in (3, 4, 6, 8, 10):
                row[idx].number_format = "#,##0.00"
            for idx in (5, 9):
                row[idx].number_format = "0.00%"

        widths = {"A": 16, "B": 32, "C": 10, "D": 14, "E": 13, "F": 13, "G": 13, "H": 11,
                  "I": 13, "J": 13, "K": 13, "L": 11}
        for col, w in widths.items():
            ws.column_dimensions[col].width = w

        wb.save(path)
        log.info("price_sheet_exported path=%s rows=%s", path, len(rows))
