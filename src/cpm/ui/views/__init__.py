from .pricing_view import PricingView
from .price_list_view import PriceListView

__all__ = ["PricingView", "PriceListView"]
