from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cpm.domain.models import MarginLevel, PriceTier, ProductPrices, VatRegime
from cpm.pricing.engine import (
    VAT_RATE,
    classify_margin,
    format_amount,
    format_percent_whole,
    list_margin,
    margin_vat_breakdown,
)

CURRENCY = "€"


@dataclass(frozen=True)
class TierCell:
    price: str
    margin: str
    level: MarginLevel


@dataclass(frozen=True)
class PriceRow:
    sku: str
    name: str
    regime_label: str
    purchase: str
    retail: TierCell
    pro: TierCell


@dataclass(frozen=True)
class SerialCell:
    price: str
    margin: str
    cash_margin: str
    level: MarginLevel


@dataclass(frozen=True)
class SerialRow:
    serial_number: str
    regime_label: str
    purchase: str
    retail: SerialCell
    pro: SerialCell


class CatalogService:
    """Display rows for product and serial-number lists."""

    def price_row(self, product: ProductPrices) -> PriceRow:
        regime = VatRegime.parse(product.vat_type) or VatRegime.NORMAL
        purchase = product.purchase_price or 0.0
        return PriceRow(
            sku=product.sku,
            name=product.name,
            regime_label=regime.label,
            purchase=format_amount(purchase, compact=True, currency=CURRENCY),
            retail=self._cell(product, PriceTier.RETAIL, regime, purchase),
            pro=self._cell(product, PriceTier.PRO, regime, purchase),
        )

    def price_rows(self, products: list[ProductPrices]) -> list[PriceRow]:
        return [self.price_row(p) for p in products]

    def margin_flag(self, margin_percent: Optional[float]) -> MarginLevel:
        return classify_margin(float(margin_percent or 0.0))

    def _cell(self, product: ProductPrices, tier: PriceTier, regime: VatRegime, purchase: float) -> TierCell:
        if tier is PriceTier.RETAIL:
            price, stored_margin = product.retail_price or 0.0, product.retail_margin
        else:
            price, stored_margin = product.pro_price or 0.0, product.pro_margin

        if regime is VatRegime.MARGIN:
            # sell price shown as is, margin is the one saved with the product
            shown = price
            margin = stored_margin or 0.0
        else:
            shown = price * (1 + VAT_RATE)
            margin = list_margin(purchase, price)

        return TierCell(
            price=format_amount(shown, compact=True, currency=CURRENCY),
            margin=f"{format_percent_whole(margin)}%",
            level=self.margin_flag(margin),
        )

    def serial_row(self, product: ProductPrices) -> SerialRow:
        regime = VatRegime.parse(product.vat_type) or VatRegime.NORMAL
        purchase = product.purchase_price
        return SerialRow(
            serial_number=product.serial_number or "-",
            regime_label=regime.label,
            purchase=format_amount(purchase, currency=CURRENCY) if purchase is not None else "-",
            retail=self._serial_cell(product.retail_price, purchase, regime),
            pro=self._serial_cell(product.pro_price, purchase, regime),
        )

    def _serial_cell(self, price: Optional[float], purchase: Optional[float], regime: VatRegime) -> SerialCell:
        if price is None:
            return SerialCell(price="-", margin="-", cash_margin="-", level=MarginLevel.LOW)

        base = purchase or 0.0
        if regime is VatRegime.MARGIN:
            _gross, _vat, cash = margin_vat_breakdown(price, base)
            margin = (cash * 100) / base if base else 0.0
            shown = f"{format_amount(price)} {CURRENCY} TVM"
        else:
            cash = price - base
            margin = list_margin(base, price)
            shown = f"{format_amount(price)} {CURRENCY} HT / {format_amount(price * (1 + VAT_RATE))} {CURRENCY} TTC"

        return SerialCell(
            price=shown,
            margin=f"{format_amount(margin)}%",
            cash_margin=format_amount(cash, currency=CURRENCY),
            level=self.margin_flag(margin),
        )
