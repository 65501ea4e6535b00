from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from cpm.domain.errors import RegimeLockedError, ValidationError
from cpm.domain.models import MarginLevel, PriceField, PriceInputs, PriceRecord, PriceTier, VatRegime
from cpm.pricing.engine import apply_edit, classify_margin, parse_amount, reprice, valid_purchase

log = logging.getLogger("cpm.pricing")


@dataclass(frozen=True)
class PriceForm:
    purchase_price: str = ""
    regime: Optional[VatRegime] = None
    retail: PriceInputs = field(default_factory=PriceInputs)
    pro: PriceInputs = field(default_factory=PriceInputs)
    is_parent: bool = False
    serial_count: int = 0
    existing_serial: bool = False

    @property
    def regime_locked(self) -> bool:
        if self.existing_serial and self.regime is not None:
            return True
        return self.is_parent and self.serial_count > 0

    def tier(self, tier: PriceTier) -> PriceInputs:
        return self.retail if tier is PriceTier.RETAIL else self.pro


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class PriceFormService:
    """
    Adapter between a product form and the pricing engine.

    The form owns its state; every method takes a PriceForm and returns a new one.
    """

    def new_form(
        self,
        purchase_price: object = "",
        regime: object = None,
        retail_price: object = "",
        pro_price: object = "",
        is_parent: bool = False,
        serial_count: int = 0,
        existing_serial: bool = False,
    ) -> PriceForm:
        form = PriceForm(
            purchase_price=_as_text(purchase_price),
            regime=VatRegime.parse(regime),
            retail=PriceInputs(price=_as_text(retail_price)),
            pro=PriceInputs(price=_as_text(pro_price)),
            is_parent=bool(is_parent),
            serial_count=int(serial_count),
            existing_serial=bool(existing_serial),
        )
        return self._reprice_populated(form)

    def edit(self, form: PriceForm, tier: PriceTier, field_: PriceField, raw_value: object) -> PriceForm:
        updated = apply_edit(form.tier(tier), form.regime, field_, raw_value, form.purchase_price)
        return self._with_tier(form, tier, updated)

    def set_purchase_price(self, form: PriceForm, raw_value: object) -> PriceForm:
        form = replace(form, purchase_price=_as_text(raw_value))
        return self._reprice_populated(form)

    def switch_regime(self, form: PriceForm, regime: object) -> PriceForm:
        target = VatRegime.parse(regime)
        if target is None:
            raise ValidationError(f"Unknown VAT regime: {regime!r}")
        if target is form.regime:
            return form
        if form.regime_locked:
            raise RegimeLockedError("VAT regime cannot change once serial items exist.")

        log.info("regime_switched from=%s to=%s", form.regime.value if form.regime else None, target.value)
        return replace(
            form,
            regime=target,
            retail=reprice(form.retail, target, form.purchase_price),
            pro=reprice(form.pro, target, form.purchase_price),
        )

    def margin_levels(self, form: PriceForm) -> dict[PriceTier, Optional[MarginLevel]]:
        levels: dict[PriceTier, Optional[MarginLevel]] = {}
        for tier in PriceTier:
            margin = parse_amount(form.tier(tier).margin_percent)
            levels[tier] = classify_margin(margin) if margin is not None else None
        return levels

    def to_record(self, form: PriceForm) -> PriceRecord:
        if form.regime is None and not form.is_parent:
            raise ValidationError("Select a VAT regime.")
        purchase = valid_purchase(form.purchase_price)
        if purchase is None:
            raise ValidationError("Purchase price must be > 0.")
        retail = parse_amount(form.retail.price)
        pro = parse_amount(form.pro.price)
        if retail is None or pro is None:
            raise ValidationError("Retail and pro selling prices are required.")

        record = PriceRecord(
            purchase_price=purchase,
            retail_price=retail,
            pro_price=pro,
            retail_margin=parse_amount(form.retail.margin_percent),
            pro_margin=parse_amount(form.pro.margin_percent),
            # parent products never overwrite the regime
            vat_type=None if form.is_parent else form.regime.value,
        )
        log.info(
            "price_record purchase=%.2f retail=%.2f pro=%.2f vat_type=%s",
            record.purchase_price, record.retail_price, record.pro_price, record.vat_type,
        )
        return record

    def _reprice_populated(self, form: PriceForm) -> PriceForm:
        # only tiers with a price follow the purchase price; margin-only or amount-only tiers stay as typed
        if form.regime is None or valid_purchase(form.purchase_price) is None:
            return form
        retail, pro = form.retail, form.pro
        if retail.price.strip():
            retail = reprice(retail, form.regime, form.purchase_price)
        if pro.price.strip():
            pro = reprice(pro, form.regime, form.purchase_price)
        return replace(form, retail=retail, pro=pro)

    @staticmethod
    def _with_tier(form: PriceForm, tier: PriceTier, inputs: PriceInputs) -> PriceForm:
        if tier is PriceTier.RETAIL:
            return replace(form, retail=inputs)
        return replace(form, pro=inputs)
