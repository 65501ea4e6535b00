from .engine import (
    VAT_RATE,
    apply_edit,
    classify_margin,
    convert,
    format_amount,
    format_percent_whole,
    list_margin,
    margin_from_margin_percent,
    margin_from_net_margin,
    margin_from_sell_price,
    margin_vat_breakdown,
    normal_from_ht,
    normal_from_margin,
    normal_from_ttc,
    parse_amount,
    reprice,
    to_inputs,
    valid_purchase,
)

__all__ = [
    "VAT_RATE",
    "apply_edit",
    "classify_margin",
    "convert",
    "format_amount",
    "format_percent_whole",
    "list_margin",
    "margin_from_margin_percent",
    "margin_from_net_margin",
    "margin_from_sell_price",
    "margin_vat_breakdown",
    "normal_from_ht",
    "normal_from_margin",
    "normal_from_ttc",
    "parse_amount",
    "reprice",
    "to_inputs",
    "valid_purchase",
]
