"""
Inventory domain models.

eShopaid reports stock grouped by location. These models hold the
normalized, Decimal-based view that the Shopify side consumes.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class InventoryItem:
    """
    Stock and pricing of one item at one eShopaid location.

    Attributes:
        product_code: AlternateProductCode in eShopaid
        ean_code: EAN / barcode (string, may be empty)
        item_code: eShopaid item code
        item_name: Item description
        stock: Quantity on hand
        sales_price: Selling price
        mrp: Maximum retail price (used as compare-at price)
        tax_rate: Tax rate percentage
        last_modified: LastModifiedOn as reported by eShopaid
        sale_unit: Unit of sale
        per_unit_price: Price per sale unit
    """

    product_code: str | None
    ean_code: str
    item_code: str | None
    item_name: str | None = None
    stock: Decimal = Decimal("0")
    sales_price: Decimal = Decimal("0")
    mrp: Decimal = Decimal("0")
    tax_rate: Decimal = Decimal("0")
    last_modified: str | None = None
    sale_unit: str | None = None
    per_unit_price: Decimal = Decimal("0")

    @property
    def storefront_sku(self) -> str | None:
        """SKU used on Shopify: EAN when present, item code otherwise."""
        return self.ean_code or self.item_code

    @property
    def available_quantity(self) -> int:
        """Whole units available for sale."""
        return math.floor(self.stock)

    def to_dict(self) -> dict[str, Any]:
        """Convert item to a JSON-friendly dictionary."""
        return {
            "product_code": self.product_code,
            "ean_code": self.ean_code,
            "item_code": self.item_code,
            "item_name": self.item_name,
            "stock": float(self.stock),
            "sales_price": float(self.sales_price),
            "mrp": float(self.mrp),
            "tax_rate": float(self.tax_rate),
            "last_modified": self.last_modified,
            "sale_unit": self.sale_unit,
            "per_unit_price": float(self.per_unit_price),
        }


@dataclass(frozen=True)
class LocationInventory:
    """Items stocked at a single eShopaid location."""

    location: str | None
    items: list[InventoryItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert location inventory to dictionary."""
        return {"location": self.location, "items": [item.to_dict() for item in self.items]}


@dataclass(frozen=True)
class InventorySnapshot:
    """
    Result of one inventory pull.

    Attributes:
        success: Whether eShopaid answered SUCCESS
        locations: Normalized per-location inventory
        error: Failure reason when not successful
    """

    success: bool
    locations: list[LocationInventory] = field(default_factory=list)
    error: str | None = None

    @property
    def total_items(self) -> int:
        """Number of items across all locations."""
        return sum(len(location.items) for location in self.locations)

    def to_dict(self) -> dict[str, Any]:
        """Convert snapshot to dictionary."""
        result: dict[str, Any] = {
            "success": self.success,
            "item_count": self.total_items,
            "inventory": [location.to_dict() for location in self.locations],
        }
        if self.error is not None:
            result["error"] = self.error
        return result
