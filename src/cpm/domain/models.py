from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VatRegime(str, Enum):
    NORMAL = "normal"
    MARGIN = "margin"

    @classmethod
    def parse(cls, value: object) -> Optional["VatRegime"]:
        if isinstance(value, cls):
            return value
        cleaned = str(value or "").strip().lower()
        for regime in cls:
            if regime.value == cleaned:
                return regime
        return None

    @property
    def label(self) -> str:
        return "TVA marge" if self is VatRegime.MARGIN else "TVA normale"


class PriceTier(str, Enum):
    RETAIL = "retail"
    PRO = "pro"


class PriceField(str, Enum):
    """
    Which of the three linked inputs of a tier the user edited.

    PRICE is the HT price under normal VAT and the sell price under margin VAT.
    AMOUNT is the TTC price under normal VAT and the net margin under margin VAT.
    """

    PRICE = "price"
    MARGIN_PERCENT = "margin_percent"
    AMOUNT = "amount"


class MarginLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def color(self) -> str:
        return {"low": "red", "medium": "amber", "high": "green"}[self.value]


@dataclass(frozen=True)
class NormalVatPrice:
    ht: float
    margin_percent: float
    ttc: float

    @property
    def price(self) -> float:
        return self.ht

    @property
    def amount(self) -> float:
        return self.ttc


@dataclass(frozen=True)
class MarginVatPrice:
    sell_price: float
    margin_percent: float
    net_margin: float

    @property
    def price(self) -> float:
        return self.sell_price

    @property
    def amount(self) -> float:
        return self.net_margin


@dataclass(frozen=True)
class PriceInputs:
    """Raw text of a tier's three inputs, as displayed."""

    price: str = ""
    margin_percent: str = ""
    amount: str = ""

    def get(self, field: PriceField) -> str:
        return getattr(self, field.value)


@dataclass(frozen=True)
class PriceRecord:
    purchase_price: float
    retail_price: float
    pro_price: float
    retail_margin: Optional[float]
    pro_margin: Optional[float]
    vat_type: Optional[str]


@dataclass(frozen=True)
class ProductPrices:
    sku: str
    name: str
    purchase_price: Optional[float]
    retail_price: Optional[float]
    pro_price: Optional[float]
    vat_type: Optional[str] = "normal"
    retail_margin: Optional[float] = None
    pro_margin: Optional[float] = None
    serial_number: Optional[str] = None
