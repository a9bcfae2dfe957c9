"""InventoryManager service - inventory pulls from eShopaid (SRP)."""

import logging
from typing import Any

from app.db.eshopaid import EShopaidGateway, ServiceMethod
from app.domain.models import InventorySnapshot
from app.services.eshopaid.converters import format_for_shopify, parse_inventory_response

logger = logging.getLogger(__name__)


class InventoryManager:
    """Reads stock and prices from eShopaid (SRP: inventory queries only)."""

    def __init__(self, gateway: EShopaidGateway, store_location: str):
        """
        Args:
            gateway: Authenticated eShopaid gateway
            store_location: Default eShopaid location code
        """
        self.gateway = gateway
        self.store_location = store_location

    async def _query(self, params: dict[str, Any]) -> InventorySnapshot:
        response = await self.gateway.request(ServiceMethod.GET_INVENTORY, {"Params": params})
        snapshot = parse_inventory_response(response)
        if snapshot.success:
            logger.info(f"Fetched {snapshot.total_items} inventory items from eShopaid")
        return snapshot

    async def get_inventory_by_location(self, location: str | None = None) -> InventorySnapshot:
        """All products at a location (default store when omitted)."""
        location = location or self.store_location
        logger.info(f"Fetching inventory for location {location}")
        return await self._query({"Location": location, "DateFilter": "", "ProductCode": ""})

    async def get_inventory_by_product(self, product_code: str) -> InventorySnapshot:
        """One product across all locations."""
        logger.info(f"Fetching inventory for product {product_code}")
        return await self._query({"Location": "", "DateFilter": "", "ProductCode": product_code})

    async def get_incremental_inventory(self, date_filter: str, location: str = "") -> InventorySnapshot:
        """
        Items changed since a date.

        Args:
            date_filter: Date in YYYYMMDD format
            location: Optional location filter
        """
        logger.info(f"Fetching inventory changes since {date_filter}")
        return await self._query({"Location": location, "DateFilter": date_filter, "ProductCode": ""})

    async def get_inventory_by_sku_list(self, sku_codes: list[str], location: str | None = None) -> InventorySnapshot:
        """Stock for a list of SKU/EAN codes."""
        logger.info(f"Fetching inventory for {len(sku_codes)} SKUs")
        return await self._query(
            {
                "Location": location or self.store_location,
                "SKUList": {"SKUCode": list(sku_codes)},
            }
        )

    @staticmethod
    def format_for_shopify(snapshot: InventorySnapshot) -> list[dict[str, Any]]:
        """Flatten a snapshot into Shopify inventory updates."""
        return format_for_shopify(snapshot)
