from .models import (
    VatRegime,
    PriceTier,
    PriceField,
    MarginLevel,
    NormalVatPrice,
    MarginVatPrice,
    PriceInputs,
    PriceRecord,
    ProductPrices,
)
from .errors import AppError, ValidationError, RegimeLockedError

__all__ = [
    "VatRegime",
    "PriceTier",
    "PriceField",
    "MarginLevel",
    "NormalVatPrice",
    "MarginVatPrice",
    "PriceInputs",
    "PriceRecord",
    "ProductPrices",
    "AppError",
    "ValidationError",
    "RegimeLockedError",
]
