"""
InventoryConverter - normalizes eShopaid inventory responses (ERP → Shopify).

eShopaid returns ``Data.Inventory`` either as a single location object or as
a list of locations, and ``Items.Item`` either as a single item or a list.
Both ambiguities are resolved here, at ingress.
"""

import logging
from typing import Any

from app.domain.models import GatewayResponse, InventoryItem, InventorySnapshot, LocationInventory
from app.utils.eshopaid_utils import ensure_list, to_decimal

logger = logging.getLogger(__name__)


def normalize_item(raw: dict[str, Any]) -> InventoryItem:
    """Convert one raw eShopaid item to InventoryItem."""
    ean_code = raw.get("EANCode")
    return InventoryItem(
        product_code=raw.get("ProductCode"),
        ean_code="" if ean_code is None else str(ean_code),
        item_code=raw.get("ItemCode"),
        item_name=raw.get("ItemName"),
        stock=to_decimal(raw.get("Stock")),
        sales_price=to_decimal(raw.get("SalesPrice")),
        mrp=to_decimal(raw.get("MRP")),
        tax_rate=to_decimal(raw.get("TaxRate")),
        last_modified=raw.get("LastModifiedOn"),
        sale_unit=raw.get("SaleUnit"),
        per_unit_price=to_decimal(raw.get("PerUnitSalesPrice")),
    )


def normalize_location(raw: dict[str, Any]) -> LocationInventory:
    """Convert one raw location block; absent ``Items`` yields no items."""
    items_block = raw.get("Items") or {}
    raw_items = items_block.get("Item") if isinstance(items_block, dict) else None
    return LocationInventory(
        location=raw.get("Location"),
        items=[normalize_item(item) for item in ensure_list(raw_items) if isinstance(item, dict)],
    )


def parse_inventory_response(response: GatewayResponse) -> InventorySnapshot:
    """
    Build an InventorySnapshot from a normalized GetInventory response.

    Args:
        response: Normalized gateway response

    Returns:
        InventorySnapshot: Uniform ``[{location, items[]}]`` view
    """
    if not response.success:
        return InventorySnapshot(success=False, error=response.error or "Unknown error")

    raw_locations = ensure_list(response.get("Inventory"))
    locations = [normalize_location(raw) for raw in raw_locations if isinstance(raw, dict)]

    snapshot = InventorySnapshot(success=True, locations=locations)
    logger.debug(f"Parsed inventory: {len(locations)} locations, {snapshot.total_items} items")
    return snapshot


def format_for_shopify(snapshot: InventorySnapshot) -> list[dict[str, Any]]:
    """
    Flatten a snapshot into Shopify inventory updates.

    Returns:
        list: ``{sku, quantity, price, compare_at_price}`` per item
    """
    return [
        {
            "sku": item.storefront_sku,
            "quantity": item.available_quantity,
            "price": item.sales_price,
            "compare_at_price": item.mrp,
        }
        for location in snapshot.locations
        for item in location.items
    ]
