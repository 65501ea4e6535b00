"""
Price/margin conversions for the two VAT regimes.

Every function here is pure: it never raises, logs or keeps state, since the
form calls it on each keystroke. Invalid input is signalled by ``None`` and
turned into a no-op by ``apply_edit`` / ``reprice``.
"""
from __future__ import annotations

import math
import re
from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Callable, Optional, Union

from cpm.domain.models import (
    MarginLevel,
    MarginVatPrice,
    NormalVatPrice,
    PriceField,
    PriceInputs,
    VatRegime,
)

VAT_RATE = 0.20
MARGIN_VAT_DIVISOR = 1.2

LOW_MARGIN_BELOW = 10
HIGH_MARGIN_FROM = 16

PriceResult = Union[NormalVatPrice, MarginVatPrice]

_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# ---------- parsing / formatting ----------

def parse_amount(value: object) -> Optional[float]:
    """Lenient number parsing: '12abc' -> 12.0, '12,5' -> 12.0, '' -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        m = _NUMBER_PREFIX.match(str(value).strip())
        if not m:
            return None
        number = float(m.group(0))
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def valid_purchase(value: object) -> Optional[float]:
    purchase = parse_amount(value)
    if purchase is None or purchase <= 0:
        return None
    return purchase


def _half_up(value: float, places: str) -> Decimal:
    number = Decimal(repr(float(value)))
    with localcontext() as ctx:
        # quantize needs every integer digit plus the decimals
        ctx.prec = max(ctx.prec, number.adjusted() + 4)
        return number.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def format_amount(value: float, compact: bool = False, currency: Optional[str] = None) -> str:
    """
    2-decimal rendering, half-up.

    compact=True renders integral values without decimals (1440.0 -> '1440'),
    which is how list views show prices. Computed form fields always use 2 decimals.
    """
    if not math.isfinite(value):
        text = "-"
    elif compact and value % 1 == 0:
        text = str(math.floor(value))
    else:
        text = str(_half_up(value, "0.01"))
    if currency:
        text = f"{text} {currency}"
    return text


def format_percent_whole(value: float) -> str:
    if not math.isfinite(value):
        return "-"
    return str(_half_up(value, "1"))


# ---------- normal VAT ----------

def normal_from_ht(ht: float, purchase: float) -> NormalVatPrice:
    margin = ((ht - purchase) / purchase) * 100
    return NormalVatPrice(ht=ht, margin_percent=margin, ttc=ht * (1 + VAT_RATE))


def normal_from_margin(margin_percent: float, purchase: float) -> NormalVatPrice:
    ht = purchase * (1 + margin_percent / 100)
    return NormalVatPrice(ht=ht, margin_percent=margin_percent, ttc=ht * (1 + VAT_RATE))


def normal_from_ttc(ttc: float, purchase: float) -> NormalVatPrice:
    ht = ttc / (1 + VAT_RATE)
    margin = ((ht - purchase) / purchase) * 100
    return NormalVatPrice(ht=ht, margin_percent=margin, ttc=ttc)


# ---------- margin-scheme VAT ----------

def margin_vat_breakdown(sell_price: float, purchase: float) -> tuple[float, float, float]:
    """(gross_margin, vat_due, net_margin) for a sell price; VAT is extracted from the gross margin."""
    gross = sell_price - purchase
    vat_due = (gross / MARGIN_VAT_DIVISOR) * VAT_RATE
    net = sell_price - vat_due - purchase
    return gross, vat_due, net


def margin_from_sell_price(sell_price: float, purchase: float) -> MarginVatPrice:
    _gross, _vat, net = margin_vat_breakdown(sell_price, purchase)
    return MarginVatPrice(sell_price=sell_price, margin_percent=(net * 100) / purchase, net_margin=net)


def margin_from_margin_percent(margin_percent: float, purchase: float) -> MarginVatPrice:
    # Approximation: VAT is estimated on the net margin instead of solved from the
    # gross margin. Stored prices were computed this way, keep it.
    net = (purchase * margin_percent) / 100
    vat_estimated = net * VAT_RATE
    gross = net + vat_estimated
    return MarginVatPrice(sell_price=purchase + gross, margin_percent=margin_percent, net_margin=net)


def margin_from_net_margin(net_margin: float, purchase: float) -> MarginVatPrice:
    margin = (net_margin * 100) / purchase
    gross = net_margin + net_margin * VAT_RATE
    return MarginVatPrice(sell_price=purchase + gross, margin_percent=margin, net_margin=net_margin)


_CONVERTERS: dict[tuple[VatRegime, PriceField], Callable[[float, float], PriceResult]] = {
    (VatRegime.NORMAL, PriceField.PRICE): normal_from_ht,
    (VatRegime.NORMAL, PriceField.MARGIN_PERCENT): normal_from_margin,
    (VatRegime.NORMAL, PriceField.AMOUNT): normal_from_ttc,
    (VatRegime.MARGIN, PriceField.PRICE): margin_from_sell_price,
    (VatRegime.MARGIN, PriceField.MARGIN_PERCENT): margin_from_margin_percent,
    (VatRegime.MARGIN, PriceField.AMOUNT): margin_from_net_margin,
}


def convert(regime: Optional[VatRegime], field: PriceField, value: object, purchase: object) -> Optional[PriceResult]:
    if regime is None:
        return None
    number = parse_amount(value)
    base = valid_purchase(purchase)
    if number is None or base is None:
        return None
    result = _CONVERTERS[(regime, field)](number, base)
    if not all(math.isfinite(v) for v in (result.price, result.margin_percent, result.amount)):
        return None
    return result


def to_inputs(result: PriceResult) -> PriceInputs:
    return PriceInputs(
        price=format_amount(result.price),
        margin_percent=format_amount(result.margin_percent),
        amount=format_amount(result.amount),
    )


# ---------- form contract ----------

def apply_edit(
    inputs: PriceInputs,
    regime: Optional[VatRegime],
    field: PriceField,
    raw_value: object,
    purchase: object,
) -> PriceInputs:
    """The edited field keeps what was typed; the two others follow it, or stay as they were."""
    text = "" if raw_value is None else str(raw_value)
    result = convert(regime, field, text, purchase)
    if result is None:
        return replace(inputs, **{field.value: text})
    return replace(to_inputs(result), **{field.value: text})


def reprice(inputs: PriceInputs, regime: Optional[VatRegime], purchase: object) -> PriceInputs:
    """Re-derive margin and amount from the price input (regime switch, purchase price change)."""
    if not inputs.price.strip():
        return PriceInputs()
    result = convert(regime, PriceField.PRICE, inputs.price, purchase)
    if result is None:
        return inputs
    return replace(to_inputs(result), price=inputs.price)


# ---------- classification ----------

def classify_margin(margin_percent: float) -> MarginLevel:
    if margin_percent < LOW_MARGIN_BELOW:
        return MarginLevel.LOW
    if margin_percent < HIGH_MARGIN_FROM:
        return MarginLevel.MEDIUM
    return MarginLevel.HIGH


def list_margin(purchase: Optional[float], price: Optional[float]) -> float:
    if not purchase or not price:
        return 0.0
    return ((price - purchase) / purchase) * 100
