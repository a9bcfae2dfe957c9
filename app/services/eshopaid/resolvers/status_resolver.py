"""Order status resolution for Shopify update events."""

from enum import Enum
from typing import Any


class ERPOrderStatus(str, Enum):
    """Order statuses pushed to eShopaid via SetOrderStatus."""

    CANCELLED = "CANCELLED"
    DELIVERED = "DELIVERED"
    PARTIALLY_DELIVERED = "PARTIALLY_DELIVERED"
    PAID = "PAID"


NO_UPDATE_NEEDED = "NO_UPDATE_NEEDED"


def resolve_order_status(order: dict[str, Any]) -> ERPOrderStatus | None:
    """
    Pick the status to push for an updated order.

    Priority: cancelled > fulfilled > partially fulfilled > paid.

    Returns:
        ERPOrderStatus, or None when no update is needed
    """
    if order.get("cancelled_at"):
        return ERPOrderStatus.CANCELLED

    fulfillment_status = order.get("fulfillment_status")
    if fulfillment_status == "fulfilled":
        return ERPOrderStatus.DELIVERED
    if fulfillment_status == "partial":
        return ERPOrderStatus.PARTIALLY_DELIVERED

    if order.get("financial_status") == "paid":
        return ERPOrderStatus.PAID

    return None
