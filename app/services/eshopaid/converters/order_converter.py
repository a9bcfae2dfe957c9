"""OrderConverter service - converts Shopify orders to eShopaid sales orders (SRP)."""

import logging
from decimal import Decimal
from typing import Any

from app.domain.models import ERPCharge, ERPLineItem, ERPPayment, OrderRecord
from app.services.eshopaid.converters.lookups import get_state_gst_code, map_payment_gateway
from app.utils.eshopaid_utils import first_non_empty, format_erp_date, to_decimal
from app.utils.error_handler import MalformedInputError

logger = logging.getLogger(__name__)

SHIPPING_CHARGE_DESCRIPTION = "Shipping"
DEFAULT_SHIPPING_REFERENCE = "Standard Shipping"


def item_code_for(line_item: dict[str, Any] | None) -> str | None:
    """
    Resolve the eShopaid item code of a Shopify line item.

    SKU when present, otherwise the variant id as string.
    """
    if not line_item:
        return None
    if line_item.get("sku"):
        return line_item["sku"]
    variant_id = line_item.get("variant_id")
    return str(variant_id) if variant_id is not None else None


class OrderConverter:
    """Converts Shopify order payloads to OrderRecord (pure, no I/O)."""

    def __init__(self, store_location: str, source_channel: str):
        """
        Args:
            store_location: eShopaid location code for new orders
            source_channel: Channel label sent in the order header
        """
        self.store_location = store_location
        self.source_channel = source_channel

    def convert(self, order: dict[str, Any]) -> OrderRecord:
        """
        Convert a Shopify order to an eShopaid sales order.

        Args:
            order: Shopify order (REST webhook shape)

        Returns:
            OrderRecord: Record ready for CreateSalesOrder

        Raises:
            MalformedInputError: If the order has no line items
        """
        line_items = order.get("line_items") or []
        if not line_items:
            raise MalformedInputError("line_items", f"Order {order.get('id')} has no line items")

        shipping_address = order.get("shipping_address") or order.get("billing_address") or {}
        billing_address = order.get("billing_address") or {}
        state_gst_code = get_state_gst_code(shipping_address.get("province"))

        items = [self._convert_line_item(index, item) for index, item in enumerate(line_items, start=1)]

        record = OrderRecord(
            customer=self._build_customer(order, shipping_address, billing_address, state_gst_code),
            header=self._build_header(order, shipping_address, state_gst_code),
            items=items,
            charges=self._build_charges(order.get("shipping_lines") or []),
            payments=[self._build_payment(order)],
        )

        logger.debug(f"Converted order {record.order_number} with {len(items)} lines")
        return record

    @staticmethod
    def _convert_line_item(line_number: int, item: dict[str, Any]) -> ERPLineItem:
        return ERPLineItem(
            line_number=line_number,
            item_code=item_code_for(item),
            quantity=int(item.get("quantity") or 0),
            rate=to_decimal(item.get("price")),
            discount_amount=to_decimal(item.get("total_discount")),
            remarks=item.get("name") or "",
        )

    @staticmethod
    def _build_customer(
        order: dict[str, Any],
        shipping_address: dict[str, Any],
        billing_address: dict[str, Any],
        state_gst_code: str,
    ) -> dict[str, Any]:
        customer = order.get("customer") or {}
        return {
            "TitleName": "",
            "FirstName": first_non_empty(customer.get("first_name"), shipping_address.get("first_name"), default="Guest"),
            "MiddleName": "",
            "LastName": first_non_empty(customer.get("last_name"), shipping_address.get("last_name")),
            "Gender": "",
            "MobileNumber": first_non_empty(shipping_address.get("phone"), customer.get("phone")),
            "EmailID": first_non_empty(customer.get("email"), order.get("email")),
            "CustomerAddressLine1": billing_address.get("address1") or "",
            "CustomerAddressLine2": billing_address.get("address2") or "",
            "CustomerAddressLine3": "",
            "CustomerCityName": billing_address.get("city") or "",
            "CustomerStateName": billing_address.get("province") or "",
            "CustomerStateGSTCode": state_gst_code,
            "Pincode": billing_address.get("zip") or "",
        }

    def _build_header(self, order: dict[str, Any], shipping_address: dict[str, Any], state_gst_code: str) -> dict[str, Any]:
        return {
            "OrderDate": format_erp_date(order.get("created_at")),
            "OrderNumber": order.get("name") or f"ORD{order.get('id')}",
            "OrderLocation": self.store_location,
            "CustomerCode": "",
            "DeliveryAddressLine1": shipping_address.get("address1") or "",
            "DeliveryAddressLine2": shipping_address.get("address2") or "",
            "DeliveryAddressLine3": "",
            "DeliveryCityName": shipping_address.get("city") or "",
            "DeliveryStateName": shipping_address.get("province") or "",
            "DeliveryStateGSTCode": state_gst_code,
            "DeliveryPincode": shipping_address.get("zip") or "",
            "TotalOrderValue": to_decimal(order.get("total_price")),
            "ExpectedDeliveryDate": "",
            "OrderRemarks": order.get("note") or "",
            "SourceChannel": self.source_channel,
        }

    @staticmethod
    def _build_charges(shipping_lines: list[dict[str, Any]]) -> list[ERPCharge]:
        """Aggregate shipping lines into a single charge; none when the total is zero."""
        shipping_total = sum((to_decimal(line.get("price")) for line in shipping_lines), Decimal("0"))
        if shipping_total <= 0:
            return []

        reference = shipping_lines[0].get("title") or DEFAULT_SHIPPING_REFERENCE
        return [ERPCharge(description=SHIPPING_CHARGE_DESCRIPTION, value=shipping_total, reference=reference)]

    @staticmethod
    def _build_payment(order: dict[str, Any]) -> ERPPayment:
        gateway_names = order.get("payment_gateway_names") or []
        return ERPPayment(
            mode=map_payment_gateway(order.get("gateway")),
            value=to_decimal(order.get("total_price")),
            mode_type=gateway_names[0] if gateway_names else "",
            reference=order.get("checkout_token") or "",
        )
