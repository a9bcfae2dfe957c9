"""Manager services for eShopaid business operations."""

from .customer_manager import CustomerManager
from .inventory_manager import InventoryManager
from .order_manager import OrderManager

__all__ = ["CustomerManager", "InventoryManager", "OrderManager"]
