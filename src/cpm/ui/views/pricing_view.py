from __future__ import annotations

import tkinter as tk
from tkinter import ttk
import logging

from cpm.domain.models import PriceField, PriceTier, VatRegime

log = logging.getLogger(__name__)

LEVEL_COLORS = {"red": "#d64545", "amber": "#b7791f", "green": "#2f855a"}

FIELD_LABELS = {
    VatRegime.NORMAL: {PriceField.PRICE: "Prix HT", PriceField.AMOUNT: "Prix TTC"},
    VatRegime.MARGIN: {PriceField.PRICE: "Prix de vente", PriceField.AMOUNT: "Marge numéraire net"},
}


class PricingView:
    """Purchase price, regime and the two tiers' linked inputs; all maths go through PriceFormService."""

    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Pricing")

        self.form = self.app.forms.new_form()
        self.regime_var = tk.StringVar(value="")
        self.entries: dict[tuple[PriceTier, PriceField], tk.Entry] = {}
        self.labels: dict[tuple[PriceTier, PriceField], ttk.Label] = {}

        self._build()

    def _build(self):
        tab = self.frame

        top = ttk.LabelFrame(tab, text="Product")
        top.pack(fill="x", padx=10, pady=10)

        ttk.Label(top, text="Type de TVA").grid(row=0, column=0, sticky="w", padx=8, pady=6)
        for i, regime in enumerate(VatRegime):
            ttk.Radiobutton(
                top, text=regime.label, value=regime.value, variable=self.regime_var,
                command=self.on_regime_change,
            ).grid(row=0, column=1 + i, sticky="w", padx=8, pady=6)

        ttk.Label(top, text="Prix d'achat").grid(row=1, column=0, sticky="w", padx=8, pady=6)
        self.purchase = ttk.Entry(top, width=16)
        self.purchase.grid(row=1, column=1, sticky="w", padx=8, pady=6)
        self.purchase.bind("<KeyRelease>", self.on_purchase_change)

        for row, tier in enumerate(PriceTier):
            title = "Prix de vente magasin" if tier is PriceTier.RETAIL else "Prix de vente pro"
            box = ttk.LabelFrame(tab, text=title)
            box.pack(fill="x", padx=10, pady=(0, 10))
            for col, field in enumerate(PriceField):
                label = ttk.Label(box, text=self._label_for(field))
                label.grid(row=0, column=col, sticky="w", padx=8, pady=(6, 0))
                entry = tk.Entry(box, width=18)
                entry.grid(row=1, column=col, sticky="ew", padx=8, pady=(0, 8))
                entry.bind("<KeyRelease>", lambda _e, t=tier, f=field: self.on_edit(t, f))
                box.columnconfigure(col, weight=1)
                self.entries[(tier, field)] = entry
                self.labels[(tier, field)] = label

        ttk.Button(tab, text="Validate prices", style="Big.TButton", command=self.on_validate)\
            .pack(anchor="w", padx=10, pady=(0, 10))

    def _label_for(self, field: PriceField) -> str:
        if field is PriceField.MARGIN_PERCENT:
            return "Marge %"
        regime = self.form.regime or VatRegime.NORMAL
        return FIELD_LABELS[regime][field]

    def on_edit(self, tier: PriceTier, field: PriceField):
        raw = self.entries[(tier, field)].get()
        self.form = self.app.forms.edit(self.form, tier, field, raw)
        self.render(skip=(tier, field))

    def on_purchase_change(self, _event=None):
        self.form = self.app.forms.set_purchase_price(self.form, self.purchase.get())
        self.render()

    def on_regime_change(self):
        try:
            self.form = self.app.forms.switch_regime(self.form, self.regime_var.get())
            self.render()
        except Exception as e:
            self.regime_var.set(self.form.regime.value if self.form.regime else "")
            self.app.handle_error("VAT regime", e, "Failed to change VAT regime.")

    def on_validate(self):
        try:
            record = self.app.forms.to_record(self.form)
            self.app.toast(
                f"Prices OK: retail {record.retail_price:.2f} / pro {record.pro_price:.2f}", kind="success"
            )
        except Exception as e:
            self.app.handle_error("Validate prices", e, "Failed to validate prices.")

    def render(self, skip: tuple[PriceTier, PriceField] | None = None):
        levels = self.app.forms.margin_levels(self.form)
        for (tier, field), entry in self.entries.items():
            self.labels[(tier, field)].config(text=self._label_for(field))
            if (tier, field) != skip:
                entry.delete(0, tk.END)
                entry.insert(0, self.form.tier(tier).get(field))
            if field is PriceField.MARGIN_PERCENT:
                level = levels[tier]
                entry.config(fg=LEVEL_COLORS[level.color] if level else "black")
