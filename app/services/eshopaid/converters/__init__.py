"""
Converter services for transforming Shopify data to eShopaid format and back.
"""

from .customer_converter import CustomerConverter, parse_birth_date
from .inventory_converter import format_for_shopify, parse_inventory_response
from .lookups import get_state_gst_code, map_payment_gateway
from .order_converter import OrderConverter
from .return_converter import ReturnConverter

__all__ = [
    "CustomerConverter",
    "OrderConverter",
    "ReturnConverter",
    "format_for_shopify",
    "get_state_gst_code",
    "map_payment_gateway",
    "parse_birth_date",
    "parse_inventory_response",
]
