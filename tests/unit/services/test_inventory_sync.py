"""Tests unitarios para la normalización y consulta de inventario eShopaid → Shopify."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.models import GatewayResponse
from app.services.eshopaid.converters import format_for_shopify, parse_inventory_response
from app.services.eshopaid.managers import InventoryManager

RAW_ITEM = {
    "ProductCode": "P-1",
    "EANCode": 8901234567890,
    "ItemCode": "IT-1",
    "ItemName": "Red Tee",
    "Stock": "7.8",
    "SalesPrice": "499.50",
    "MRP": "599.00",
    "TaxRate": "12",
    "LastModifiedOn": "20240315",
}


class TestParseInventoryResponse:
    """Tests para parse_inventory_response."""

    def test_single_location_and_single_item(self):
        """Un objeto único (no lista) se normaliza a lista de un elemento."""
        response = GatewayResponse(
            success=True, data={"Inventory": {"Location": "HO", "Items": {"Item": RAW_ITEM}}}
        )

        snapshot = parse_inventory_response(response)

        assert snapshot.success is True
        assert len(snapshot.locations) == 1
        assert snapshot.locations[0].location == "HO"
        item = snapshot.locations[0].items[0]
        assert item.ean_code == "8901234567890"
        assert item.stock == Decimal("7.8")
        assert item.sales_price == Decimal("499.50")

    def test_multiple_locations_and_items(self):
        response = GatewayResponse(
            success=True,
            data={
                "Inventory": [
                    {"Location": "HO", "Items": {"Item": [RAW_ITEM, {**RAW_ITEM, "ItemCode": "IT-2"}]}},
                    {"Location": "WH", "Items": {"Item": RAW_ITEM}},
                ]
            },
        )

        snapshot = parse_inventory_response(response)

        assert [location.location for location in snapshot.locations] == ["HO", "WH"]
        assert snapshot.total_items == 3

    def test_location_without_items(self):
        """Una location sin Items queda con lista vacía."""
        response = GatewayResponse(success=True, data={"Inventory": {"Location": "HO"}})

        snapshot = parse_inventory_response(response)

        assert snapshot.locations[0].items == []
        assert snapshot.total_items == 0

    def test_failed_response_propagates_error(self):
        snapshot = parse_inventory_response(GatewayResponse(success=False, error="Invalid location"))

        assert snapshot.success is False
        assert snapshot.error == "Invalid location"
        assert snapshot.to_dict() == {"success": False, "item_count": 0, "inventory": [], "error": "Invalid location"}


class TestFormatForShopify:
    """Tests para format_for_shopify."""

    def test_uses_ean_as_sku_and_floors_stock(self):
        response = GatewayResponse(
            success=True, data={"Inventory": {"Location": "HO", "Items": {"Item": RAW_ITEM}}}
        )

        updates = format_for_shopify(parse_inventory_response(response))

        assert updates == [
            {"sku": "8901234567890", "quantity": 7, "price": Decimal("499.50"), "compare_at_price": Decimal("599.00")}
        ]

    def test_falls_back_to_item_code_without_ean(self):
        response = GatewayResponse(
            success=True,
            data={"Inventory": {"Location": "HO", "Items": {"Item": {**RAW_ITEM, "EANCode": None}}}},
        )

        updates = format_for_shopify(parse_inventory_response(response))

        assert updates[0]["sku"] == "IT-1"


class TestInventoryManager:
    """Tests para InventoryManager."""

    @pytest.fixture
    def gateway(self):
        gateway = MagicMock()
        gateway.request = AsyncMock(
            return_value=GatewayResponse(success=True, data={"Inventory": {"Location": "HO", "Items": {"Item": RAW_ITEM}}})
        )
        return gateway

    @pytest.mark.asyncio
    async def test_location_query_defaults_to_store(self, gateway):
        manager = InventoryManager(gateway, store_location="HO")

        snapshot = await manager.get_inventory_by_location()

        method, payload = gateway.request.await_args.args
        assert method.value == "GetInventory"
        assert payload == {"Params": {"Location": "HO", "DateFilter": "", "ProductCode": ""}}
        assert snapshot.total_items == 1

    @pytest.mark.asyncio
    async def test_incremental_query_sends_date_filter(self, gateway):
        manager = InventoryManager(gateway, store_location="HO")

        await manager.get_incremental_inventory("20240301")

        _, payload = gateway.request.await_args.args
        assert payload["Params"]["DateFilter"] == "20240301"
        assert payload["Params"]["Location"] == ""

    @pytest.mark.asyncio
    async def test_sku_list_query(self, gateway):
        manager = InventoryManager(gateway, store_location="HO")

        await manager.get_inventory_by_sku_list(["8901234567890", "IT-2"], location="WH")

        _, payload = gateway.request.await_args.args
        assert payload == {"Params": {"Location": "WH", "SKUList": {"SKUCode": ["8901234567890", "IT-2"]}}}
