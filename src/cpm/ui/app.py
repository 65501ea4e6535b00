from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox
import logging

from cpm.domain.errors import AppError
from cpm.ui.views.pricing_view import PricingView
from cpm.ui.views.price_list_view import PriceListView

log = logging.getLogger(__name__)


class App(tk.Tk):
    def __init__(
        self,
        form_service,
        catalog_service,
        excel_service,
        logs_dir: str,
        exports_dir: str,
    ):
        super().__init__()
        self.title("Catalog Price Manager (TVA normale / TVA marge)")
        self.geometry("1100x640")
        self.minsize(960, 560)

        self.forms = form_service
        self.catalog = catalog_service
        self.excel = excel_service

        self.logs_dir = logs_dir
        self.exports_dir = exports_dir

        self.status_var = tk.StringVar(value="")
        self._toast_after_id = None

        self._build_styles()

        main = ttk.Frame(self)
        main.pack(fill="both", expand=True, padx=12, pady=(10, 8))

        self.nb = ttk.Notebook(main)
        self.nb.pack(fill="both", expand=True)

        self.pricing_view = PricingView(self.nb, self)
        self.price_list_view = PriceListView(self.nb, self)

        self._build_status_bar()
        self.toast("Ready.", kind="info", ms=1200)

    def _build_styles(self):
        style = ttk.Style(self)
        try:
            style.configure("Big.TButton", padding=(14, 10))
            style.configure("Title.TLabel", font=("Segoe UI", 12, "bold"))
        except tk.TclError as e:
            log.exception("UI style setup failed: %s", e)

    def _build_status_bar(self):
        bar = ttk.Frame(self)
        bar.pack(fill="x", padx=12, pady=(0, 10))
        ttk.Label(bar, textvariable=self.status_var).pack(side="left")
        ttk.Label(bar, text=f"Logs: {self.logs_dir}").pack(side="right")

    def toast(self, msg: str, kind: str = "info", ms: int = 2500):
        prefix = {"info": "ℹ ", "success": "✅ ", "warn": "⚠ ", "error": "❌ "}.get(kind, "")
        self.status_var.set(prefix + msg)
        if self._toast_after_id is not None:
            self.after_cancel(self._toast_after_id)
        self._toast_after_id = self.after(ms, lambda: self.status_var.set(""))

    def handle_error(self, title: str, error: Exception, fallback: str):
        if isinstance(error, AppError):
            self.toast(str(error), kind="error", ms=4000)
            return
        log.exception("%s: %s", title, error)
        messagebox.showerror(title, f"{fallback}\n\n{error}", parent=self)
