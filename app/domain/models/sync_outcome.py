"""
Result envelopes for eShopaid calls and synchronization runs.

``GatewayResponse`` is what a single ERP call normalizes to. ``SyncOutcome``
is what every public sync entry point returns, so the webhook layer can
always produce a deterministic acknowledgment.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class SyncEntity(str, Enum):
    """Storefront entity a sync run acted upon."""

    ORDER = "order"
    CUSTOMER = "customer"
    REFUND = "refund"


@dataclass(frozen=True)
class GatewayResponse:
    """
    Normalized ``{success, data, error}`` view of an eShopaid response.

    A business rejection (``Result != "SUCCESS"``) is represented here with
    ``success=False``; it is never raised.

    Attributes:
        success: True only when eShopaid answered ``Result == "SUCCESS"``
        data: ``Data`` (or ``StatusReference``) block of the response
        error: ``FailureReason`` or a normalization message
        message: ``StatusMessage`` reported by eShopaid
    """

    success: bool
    data: Any = None
    error: str | None = None
    message: str | None = None

    @classmethod
    def invalid_format(cls) -> "GatewayResponse":
        """Response used when the wire body lacks the ``Response`` envelope."""
        return cls(success=False, error="invalid response format")

    def get(self, key: str, default: Any = None) -> Any:
        """Read a key from ``data`` when it is a mapping."""
        if isinstance(self.data, dict):
            return self.data.get(key, default)
        return default


@dataclass(frozen=True)
class SyncOutcome:
    """
    Aggregated result of one synchronization invocation.

    Attributes:
        success: Overall success of the run
        entity: Kind of storefront entity handled
        entity_id: Shopify identifier (order/customer/refund id)
        erp_reference: Reference assigned by eShopaid (TargetRefID, CustomerCode)
        status: Status pushed to eShopaid (status updates only)
        error: Error message when the run failed
    """

    success: bool
    entity: SyncEntity
    entity_id: Any = None
    erp_reference: str | None = None
    status: str | None = None
    error: str | None = None

    @classmethod
    def failed(cls, entity: SyncEntity, entity_id: Any, error: str) -> "SyncOutcome":
        """Create a failed outcome."""
        return cls(success=False, entity=entity, entity_id=entity_id, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Convert outcome to a JSON-friendly dictionary."""
        result: dict[str, Any] = {
            "success": self.success,
            "entity": self.entity.value,
            f"{self.entity.value}_id": self.entity_id,
        }
        if self.erp_reference is not None:
            result["erp_reference"] = self.erp_reference
        if self.status is not None:
            result["status"] = self.status
        if self.error is not None:
            result["error"] = self.error
        return result
