"""
Interfaces/Protocols for eShopaid services (Dependency Inversion Principle).

These protocols define contracts that services must implement,
allowing for loose coupling and easy testing.
"""

from typing import Any, Protocol

from app.domain.models import Credential, GatewayResponse, InventorySnapshot


class IOrderManager(Protocol):
    """Protocol for order operations in eShopaid."""

    async def create_sales_order(self, shopify_order: dict[str, Any]) -> GatewayResponse:
        """Create a sales order."""
        ...

    async def set_order_status(
        self, order_number: str, order_date: str, status: str, location: str | None = None
    ) -> GatewayResponse:
        """Update an order status."""
        ...

    async def create_return_order(self, refund: dict[str, Any], shopify_order: dict[str, Any]) -> GatewayResponse:
        """Create a return order for a refund."""
        ...

    async def get_order_detail(
        self, order_number: str, order_date: str | None = None, location: str | None = None
    ) -> GatewayResponse:
        """Look up an order in eShopaid."""
        ...


class ICustomerManager(Protocol):
    """Protocol for customer operations in eShopaid."""

    async def sync_from_shopify(self, customer: dict[str, Any], existing_code: str | None = None) -> GatewayResponse:
        """Add or modify a customer."""
        ...


class IInventoryManager(Protocol):
    """Protocol for inventory queries in eShopaid."""

    async def get_inventory_by_location(self, location: str | None = None) -> InventorySnapshot:
        """Pull inventory for a location."""
        ...

    async def get_inventory_by_product(self, product_code: str) -> InventorySnapshot:
        """Pull inventory for one product code."""
        ...

    async def get_incremental_inventory(self, date_filter: str, location: str = "") -> InventorySnapshot:
        """Pull inventory changed since a YYYYMMDD date."""
        ...

    async def get_inventory_by_sku_list(self, sku_codes: list[str], location: str | None = None) -> InventorySnapshot:
        """Pull inventory for a list of SKUs."""
        ...


class ICredentialProvider(Protocol):
    """Protocol for the credential cache."""

    async def get_credential(self) -> Credential:
        """Return a valid credential, acquiring one if needed."""
        ...

    def is_valid(self) -> bool:
        """Whether the cached credential can still be handed out."""
        ...

    def invalidate(self) -> None:
        """Drop the cached credential."""
        ...
