from __future__ import annotations

from cpm.config import get_app_paths, get_log_level
from cpm.logging_config import setup_logging
from cpm.services.catalog_service import CatalogService
from cpm.services.excel_service import ExcelService
from cpm.services.price_form_service import PriceFormService


def main() -> None:
    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=get_log_level())

    # tkinter is imported late so the services stay usable headless
    from cpm.ui.app import App

    app = App(
        form_service=PriceFormService(),
        catalog_service=CatalogService(),
        excel_service=ExcelService(),
        logs_dir=str(paths.logs_dir),
        exports_dir=str(paths.exports_dir),
    )
    app.mainloop()


if __name__ == "__main__":
    main()
