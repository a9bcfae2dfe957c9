"""Tests unitarios para los managers de eShopaid."""

import inspect
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.db.eshopaid import ServiceMethod
from app.domain.models import GatewayResponse
from app.services.eshopaid.converters import CustomerConverter, OrderConverter, ReturnConverter
from app.services.eshopaid.interfaces import ICustomerManager, IInventoryManager, IOrderManager
from app.services.eshopaid.managers import CustomerManager, InventoryManager, OrderManager
from app.utils.error_handler import MalformedInputError


def build_gateway(response=None):
    gateway = MagicMock()
    gateway.request = AsyncMock(return_value=response or GatewayResponse(success=True))
    return gateway


def build_order_manager(gateway):
    return OrderManager(
        gateway=gateway,
        order_converter=OrderConverter("HO", "Shopify"),
        return_converter=ReturnConverter("HO", "Shopify"),
        store_location="HO",
    )


class TestOrderManager:
    """Tests para OrderManager."""

    @pytest.mark.asyncio
    async def test_create_sales_order_payload(self):
        gateway = build_gateway()
        manager = build_order_manager(gateway)
        order = {
            "id": 1,
            "name": "#1001",
            "created_at": "2024-03-15T10:30:00Z",
            "line_items": [{"sku": "A", "quantity": 1, "price": "10"}],
        }

        await manager.create_sales_order(order)

        method, payload = gateway.request.await_args.args
        assert method == ServiceMethod.CREATE_SALES_ORDER
        assert payload["Order"]["Header"]["OrderNumber"] == "#1001"

    @pytest.mark.asyncio
    async def test_malformed_order_makes_no_call(self):
        gateway = build_gateway()
        manager = build_order_manager(gateway)

        with pytest.raises(MalformedInputError):
            await manager.create_sales_order({"id": 1, "line_items": []})

        gateway.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_set_order_status_payload(self):
        echoed = {"OrderStatusUpdate": {"VendorOrderNumber": "#1001", "OrderStatus": "PAID"}}
        gateway = build_gateway(GatewayResponse(success=True, data=echoed))
        manager = build_order_manager(gateway)

        response = await manager.set_order_status("#1001", "2024-03-15", "PAID")

        method, payload = gateway.request.await_args.args
        assert method == ServiceMethod.SET_ORDER_STATUS
        assert payload == {
            "OrderStatusUpdate": {
                "VendorOrderDate": "2024-03-15",
                "VendorOrderNumber": "#1001",
                "OrderLocation": "HO",
                "OrderStatus": "PAID",
            }
        }
        assert response.data == echoed["OrderStatusUpdate"]

    @pytest.mark.asyncio
    async def test_get_order_detail_converts_iso_date(self):
        gateway = build_gateway()
        manager = build_order_manager(gateway)

        await manager.get_order_detail("#1001", "2024-03-15T10:30:00Z")

        method, payload = gateway.request.await_args.args
        assert method == ServiceMethod.GET_ORDER_DETAIL
        assert payload == {"Params": {"OrderNumber": "#1001", "OrderDate": "20240315", "OrderLocation": "HO"}}


class TestCustomerManager:
    """Tests para CustomerManager."""

    @pytest.mark.asyncio
    async def test_sync_without_code_adds_customer(self):
        gateway = build_gateway()
        manager = CustomerManager(gateway, CustomerConverter())

        await manager.sync_from_shopify({"first_name": "Asha"})

        method, payload = gateway.request.await_args.args
        assert method == ServiceMethod.ADD_CUSTOMER
        assert "CustomerCode" not in payload["Customer"]

    @pytest.mark.asyncio
    async def test_sync_with_code_modifies_customer(self):
        gateway = build_gateway()
        manager = CustomerManager(gateway, CustomerConverter())

        await manager.sync_from_shopify({"first_name": "Asha"}, existing_code="C-9")

        method, payload = gateway.request.await_args.args
        assert method == ServiceMethod.MODIFY_CUSTOMER
        assert payload["Customer"]["CustomerCode"] == "C-9"

    @pytest.mark.asyncio
    async def test_modify_requires_code(self):
        manager = CustomerManager(build_gateway(), CustomerConverter())

        with pytest.raises(MalformedInputError):
            await manager.modify_customer("", {"first_name": "Asha"})


class TestManagerInterfaces:
    """Los managers concretos cubren todo lo que declaran sus protocolos."""

    @pytest.mark.parametrize(
        "protocol, implementation",
        [
            (IOrderManager, OrderManager),
            (ICustomerManager, CustomerManager),
            (IInventoryManager, InventoryManager),
        ],
    )
    def test_protocol_methods_implemented(self, protocol, implementation):
        declared = {name for name, _ in inspect.getmembers(protocol, inspect.iscoroutinefunction)}

        assert declared
        for name in declared:
            method = getattr(implementation, name)
            assert inspect.iscoroutinefunction(method)
            assert list(inspect.signature(method).parameters) == list(
                inspect.signature(getattr(protocol, name)).parameters
            )

    def test_query_endpoints_methods_are_declared(self):
        """Los métodos usados por los endpoints de consulta forman parte de los protocolos."""
        assert hasattr(IOrderManager, "get_order_detail")
        for name in ("get_inventory_by_product", "get_incremental_inventory", "get_inventory_by_sku_list"):
            assert hasattr(IInventoryManager, name)
