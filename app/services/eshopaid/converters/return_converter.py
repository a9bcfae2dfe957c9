"""ReturnConverter service - converts Shopify refunds to eShopaid return orders (SRP)."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from app.domain.models import ERPLineItem, ERPPayment, ReturnRecord
from app.services.eshopaid.converters.order_converter import item_code_for
from app.utils.eshopaid_utils import first_non_empty, format_erp_date, to_decimal
from app.utils.error_handler import MalformedInputError

logger = logging.getLogger(__name__)

REFUND_PAYMENT_MODE = "Refund"
DEFAULT_RETURN_REMARKS = "Shopify refund"


class ReturnConverter:
    """Converts a Shopify refund plus its original order to ReturnRecord (pure, no I/O)."""

    def __init__(self, store_location: str, source_channel: str):
        self.store_location = store_location
        self.source_channel = source_channel

    def convert(self, refund: dict[str, Any], order: dict[str, Any], today: datetime | None = None) -> ReturnRecord:
        """
        Convert a refund into a return order.

        Args:
            refund: Shopify refund payload
            order: Original Shopify order
            today: Return date (defaults to now, UTC)

        Returns:
            ReturnRecord: Record ready for CreateReturnOrder

        Raises:
            MalformedInputError: If refund id, refund lines or the referenced order name are missing
        """
        if refund.get("id") is None:
            raise MalformedInputError("id", "Refund has no id")
        if not order or not order.get("name"):
            raise MalformedInputError("order.name", f"Refund {refund.get('id')} does not reference an order")

        refund_lines = refund.get("refund_line_items") or []
        if not refund_lines:
            raise MalformedInputError("refund_line_items", f"Refund {refund['id']} has no line items")

        items = [
            ERPLineItem(
                line_number=index,
                ref_line_number=line.get("line_item_id"),
                item_code=item_code_for(line.get("line_item")),
                quantity=int(line.get("quantity") or 0),
                rate=to_decimal((line.get("line_item") or {}).get("price")),
                discount_amount=Decimal("0"),
                remarks=(line.get("line_item") or {}).get("name") or "",
            )
            for index, line in enumerate(refund_lines, start=1)
        ]

        transactions = refund.get("transactions") or []
        total_value = sum((to_decimal(txn.get("amount")) for txn in transactions), Decimal("0"))
        first_amount = to_decimal(transactions[0].get("amount")) if transactions else Decimal("0")

        header = {
            "ReturnOrderDate": format_erp_date(today),
            "ReturnOrderNumber": f"RET{refund['id']}",
            "RefOrderDate": format_erp_date(order.get("created_at")),
            "RefOrderNumber": order["name"],
            "RefOrderLocation": self.store_location,
            "TotalReturnOrderValue": total_value,
            "ReturnOrderRemarks": refund.get("note") or DEFAULT_RETURN_REMARKS,
            "SourceChannel": self.source_channel,
        }

        payment = ERPPayment(
            mode=REFUND_PAYMENT_MODE,
            value=first_amount,
            mode_type="",
            reference=str(refund["id"]),
        )

        return ReturnRecord(
            customer=self._build_customer(order),
            header=header,
            items=items,
            payments=[payment],
        )

    @staticmethod
    def _build_customer(order: dict[str, Any]) -> dict[str, Any]:
        customer = order.get("customer")
        if not customer:
            return {}
        shipping_address = order.get("shipping_address") or {}
        return {
            "TitleName": "",
            "FirstName": customer.get("first_name") or "Guest",
            "LastName": customer.get("last_name") or "",
            "MobileNumber": first_non_empty(customer.get("phone"), shipping_address.get("phone")),
            "EmailID": first_non_empty(customer.get("email"), order.get("email")),
        }
