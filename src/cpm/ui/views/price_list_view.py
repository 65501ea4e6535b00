from __future__ import annotations

from pathlib import Path
from tkinter import ttk, filedialog

from cpm.ui.views.pricing_view import LEVEL_COLORS


class PriceListView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Price sheet")

        self.priced = []
        self._build()

    def _build(self):
        tab = self.frame

        box = ttk.LabelFrame(tab, text="Import price sheet from Excel")
        box.pack(fill="x", padx=10, pady=10)
        ttk.Label(box, text="Headers: sku | name | purchase_price | retail_price | pro_price | vat_type")\
            .pack(anchor="w", padx=10, pady=(8, 4))

        btns = ttk.Frame(box)
        btns.pack(fill="x", padx=10, pady=(0, 10))
        ttk.Button(btns, text="Choose file and import", style="Big.TButton", command=self.import_sheet).pack(side="left")
        ttk.Button(btns, text="Export priced sheet", style="Big.TButton", command=self.export_sheet)\
            .pack(side="left", padx=10)

        wrap = ttk.Frame(tab)
        wrap.pack(fill="both", expand=True, padx=10, pady=(0, 10))

        cols = ("sku", "name", "regime", "purchase", "retail", "retail_m", "pro", "pro_m")
        heads = {
            "sku": "SKU", "name": "Name", "regime": "TVA", "purchase": "Prix d'achat",
            "retail": "Magasin", "retail_m": "Marge", "pro": "Pro", "pro_m": "Marge",
        }
        widths = {"sku": 110, "name": 260, "regime": 100, "purchase": 100,
                  "retail": 100, "retail_m": 70, "pro": 100, "pro_m": 70}
        self.tree = ttk.Treeview(wrap, columns=cols, show="headings", height=18)
        for c in cols:
            self.tree.heading(c, text=heads[c])
            self.tree.column(c, width=widths[c], anchor="w")
        for name, color in LEVEL_COLORS.items():
            self.tree.tag_configure(name, foreground=color)

        vsb = ttk.Scrollbar(wrap, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=vsb.set)
        self.tree.grid(row=0, column=0, sticky="nsew")
        vsb.grid(row=0, column=1, sticky="ns")
        wrap.columnconfigure(0, weight=1)
        wrap.rowconfigure(0, weight=1)

    def import_sheet(self):
        path = filedialog.askopenfilename(filetypes=[("Excel", "*.xlsx")], parent=self.frame)
        if not path:
            return
        try:
            result = self.app.excel.import_price_sheet(path)
            self.priced = result.rows
            self.refresh()
            if result.errors:
                first_line, first_msg = result.errors[0]
                self.app.toast(
                    f"Imported {len(result.rows)}, skipped {len(result.errors)} (line {first_line}: {first_msg})",
                    kind="warn", ms=5000,
                )
            else:
                self.app.toast(f"Imported {len(result.rows)} products.", kind="success")
        except Exception as e:
            self.app.handle_error("Import price sheet", e, "Failed to import price sheet.")

    def export_sheet(self):
        path = filedialog.asksaveasfilename(
            defaultextension=".xlsx",
            initialdir=self.app.exports_dir,
            initialfile="price_sheet.xlsx",
            parent=self.frame,
        )
        if not path:
            return
        try:
            self.app.excel.export_price_sheet(path, self.priced)
            self.app.toast(f"Exported {Path(path).name}.", kind="success")
        except Exception as e:
            self.app.handle_error("Export price sheet", e, "Failed to export price sheet.")

    def refresh(self):
        for item in self.tree.get_children():
            self.tree.delete(item)

        for item in self.priced:
            row = self.app.catalog.price_row(item.product)
            self.tree.insert(
                "", "end",
                values=(row.sku, row.name, row.regime_label, row.purchase,
                        row.retail.price, row.retail.margin, row.pro.price, row.pro.margin),
                tags=(row.retail.level.color,),
            )
