from .price_form_service import PriceForm, PriceFormService
from .catalog_service import CatalogService
from .excel_service import ExcelService

__all__ = [
    "PriceForm",
    "PriceFormService",
    "CatalogService",
    "ExcelService",
]
