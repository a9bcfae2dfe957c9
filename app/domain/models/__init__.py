"""
Domain models for business entities.

These models represent core business concepts and contain
business logic and invariants.
"""

from .credential import Credential
from .erp_records import (
    CustomerRecord,
    ERPCharge,
    ERPLineItem,
    ERPPayment,
    OrderRecord,
    OrderStatusUpdate,
    ReturnRecord,
)
from .inventory import InventoryItem, InventorySnapshot, LocationInventory
from .sync_outcome import GatewayResponse, SyncEntity, SyncOutcome

__all__ = [
    "Credential",
    "CustomerRecord",
    "ERPCharge",
    "ERPLineItem",
    "ERPPayment",
    "GatewayResponse",
    "InventoryItem",
    "InventorySnapshot",
    "LocationInventory",
    "OrderRecord",
    "OrderStatusUpdate",
    "ReturnRecord",
    "SyncEntity",
    "SyncOutcome",
]
