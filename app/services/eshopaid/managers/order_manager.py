"""OrderManager service - sales orders, status updates and returns in eShopaid (SRP)."""

import logging
from typing import Any

from app.db.eshopaid import EShopaidGateway, ServiceMethod
from app.domain.models import GatewayResponse, OrderStatusUpdate
from app.services.eshopaid.converters import OrderConverter, ReturnConverter
from app.utils.eshopaid_utils import format_erp_date

logger = logging.getLogger(__name__)


class OrderManager:
    """Sends order-related records to eShopaid (SRP: order operations only)."""

    def __init__(
        self,
        gateway: EShopaidGateway,
        order_converter: OrderConverter,
        return_converter: ReturnConverter,
        store_location: str,
    ):
        """
        Initialize with dependencies (DIP).

        Args:
            gateway: Authenticated eShopaid gateway
            order_converter: Shopify order → OrderRecord
            return_converter: Shopify refund → ReturnRecord
            store_location: Default eShopaid location code
        """
        self.gateway = gateway
        self.order_converter = order_converter
        self.return_converter = return_converter
        self.store_location = store_location

    async def create_sales_order(self, shopify_order: dict[str, Any]) -> GatewayResponse:
        """
        Create a sales order in eShopaid.

        Raises:
            MalformedInputError: If the order cannot be converted
            TransportError / CredentialAcquisitionError: On faults reaching eShopaid
        """
        record = self.order_converter.convert(shopify_order)
        logger.info(f"Creating sales order {record.order_number} in eShopaid")
        return await self.gateway.request(ServiceMethod.CREATE_SALES_ORDER, record.to_payload())

    async def set_order_status(
        self,
        order_number: str,
        order_date: str,
        status: str,
        location: str | None = None,
    ) -> GatewayResponse:
        """
        Update the status of an existing order.

        Args:
            order_number: Vendor order number (Shopify order name)
            order_date: Order date, YYYY-MM-DD
            status: Target eShopaid status
            location: Order location (defaults to the store location)

        Returns:
            GatewayResponse: ``data`` holds the echoed ``OrderStatusUpdate`` block
        """
        update = OrderStatusUpdate(
            order_number=order_number,
            order_date=order_date,
            status=status,
            location=location or self.store_location,
        )
        logger.info(f"Updating order {order_number} status to {status}")

        response = await self.gateway.request(ServiceMethod.SET_ORDER_STATUS, update.to_payload())
        return GatewayResponse(
            success=response.success,
            data=response.get("OrderStatusUpdate"),
            error=response.error,
            message=response.message,
        )

    async def create_return_order(self, refund: dict[str, Any], shopify_order: dict[str, Any]) -> GatewayResponse:
        """
        Create a return order for a Shopify refund.

        Raises:
            MalformedInputError: If the refund cannot be converted
        """
        record = self.return_converter.convert(refund, shopify_order)
        logger.info(f"Creating return order {record.return_order_number} for {record.header['RefOrderNumber']}")
        return await self.gateway.request(ServiceMethod.CREATE_RETURN_ORDER, record.to_payload())

    async def get_order_detail(
        self,
        order_number: str,
        order_date: str | None = None,
        location: str | None = None,
    ) -> GatewayResponse:
        """
        Look up an order previously pushed to eShopaid.

        Args:
            order_number: Vendor order number
            order_date: Shopify created_at timestamp or YYYYMMDD date (optional)
            location: Order location (defaults to the store location)
        """
        if order_date and not order_date.isdigit():
            order_date = format_erp_date(order_date)

        payload = {
            "Params": {
                "OrderNumber": order_number,
                "OrderDate": order_date or "",
                "OrderLocation": location or self.store_location,
            }
        }
        return await self.gateway.request(ServiceMethod.GET_ORDER_DETAIL, payload)
