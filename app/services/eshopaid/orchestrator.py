"""
EShopaidSyncOrchestrator - Main coordinator for Shopify → eShopaid sync.

One entry point per Shopify event kind. Every entry point returns a
SyncOutcome (or InventorySnapshot) and never raises, so the webhook layer
can always acknowledge deterministically:

- Order create: customer stage (failure tolerated) → order stage
- Order update/cancel: status resolution → status stage
- Refund create: return stage

Each invocation is independent; re-delivered events are not deduplicated here.
"""

import logging
from typing import Any

from app.core.logging_config import log_sync_operation
from app.domain.models import GatewayResponse, InventorySnapshot, SyncEntity, SyncOutcome
from app.services.eshopaid.interfaces import ICredentialProvider, ICustomerManager, IInventoryManager, IOrderManager
from app.services.eshopaid.resolvers import NO_UPDATE_NEEDED, ERPOrderStatus, resolve_order_status
from app.utils.error_handler import AppException, MalformedInputError
from app.utils.eshopaid_utils import format_iso_date

logger = logging.getLogger(__name__)


def _failure_message(error: Exception) -> str:
    """Message carried into a failed outcome."""
    if isinstance(error, AppException):
        return error.message
    return f"{type(error).__name__}: {error}"


class EShopaidSyncOrchestrator:
    """
    Orchestrates Shopify events into eShopaid operations.

    Dependencies are injected via constructor (DIP).
    """

    def __init__(
        self,
        order_manager: IOrderManager,
        customer_manager: ICustomerManager,
        inventory_manager: IInventoryManager,
        credentials: ICredentialProvider,
        server_url: str,
    ):
        """
        Initialize orchestrator with service dependencies.

        Args:
            order_manager: Sales orders, statuses and returns
            customer_manager: Customer master
            inventory_manager: Inventory pulls
            credentials: Credential cache (used by the connectivity probe)
            server_url: eShopaid base URL (reported by the connectivity probe)
        """
        self.order_manager = order_manager
        self.customer_manager = customer_manager
        self.inventory_manager = inventory_manager
        self.credentials = credentials
        self.server_url = server_url

    async def handle_order_create(self, order: dict[str, Any]) -> SyncOutcome:
        """
        Sync a newly created Shopify order.

        A customer-stage failure is logged as a warning and never affects the
        outcome; an order-stage failure is terminal.
        """
        order_id = order.get("id")
        logger.info(f"Order created: {order.get('name')} ({order_id})")

        if order.get("customer"):
            await self._sync_order_customer(order)

        try:
            response = await self.order_manager.create_sales_order(order)
        except Exception as e:
            logger.error(f"❌ Order {order_id} sync failed: {_failure_message(e)}")
            return SyncOutcome.failed(SyncEntity.ORDER, order_id, _failure_message(e))

        outcome = self._outcome_from(SyncEntity.ORDER, order_id, response, erp_reference=response.get("TargetRefID"))
        log_sync_operation("order_create", "eshopaid", order_id=order_id, success=outcome.success)
        return outcome

    async def _sync_order_customer(self, order: dict[str, Any]) -> None:
        try:
            response = await self.customer_manager.sync_from_shopify(order["customer"])
        except Exception as e:
            logger.warning(f"⚠️ Customer sync failed for order {order.get('id')}: {_failure_message(e)}")
            return

        if not response.success:
            logger.warning(f"⚠️ Customer sync rejected for order {order.get('id')}: {response.error}")

    async def handle_order_update(self, order: dict[str, Any]) -> SyncOutcome:
        """
        Push the status implied by an updated Shopify order.

        No gateway call is made when no status applies.
        """
        order_id = order.get("id")
        logger.info(f"Order updated: {order.get('name')} ({order_id})")

        status = resolve_order_status(order)
        if status is None:
            logger.debug(f"Order {order_id}: no status update needed")
            return SyncOutcome(success=True, entity=SyncEntity.ORDER, entity_id=order_id, status=NO_UPDATE_NEEDED)

        return await self._push_status(order, status, operation="order_update")

    async def handle_order_cancelled(self, order: dict[str, Any]) -> SyncOutcome:
        """Mark a cancelled Shopify order as CANCELLED in eShopaid."""
        logger.info(f"Order cancelled: {order.get('name')} ({order.get('id')})")
        return await self._push_status(order, ERPOrderStatus.CANCELLED, operation="order_cancelled")

    async def _push_status(self, order: dict[str, Any], status: ERPOrderStatus, operation: str) -> SyncOutcome:
        order_id = order.get("id")

        try:
            if not order.get("name"):
                raise MalformedInputError("name", f"Order {order_id} has no name to update")

            response = await self.order_manager.set_order_status(
                order["name"], format_iso_date(order.get("created_at")), status.value
            )
        except Exception as e:
            logger.error(f"❌ Status update for order {order_id} failed: {_failure_message(e)}")
            return SyncOutcome(
                success=False,
                entity=SyncEntity.ORDER,
                entity_id=order_id,
                status=status.value,
                error=_failure_message(e),
            )

        outcome = self._outcome_from(SyncEntity.ORDER, order_id, response, status=status.value)
        log_sync_operation(operation, "eshopaid", order_id=order_id, status=status.value, success=outcome.success)
        return outcome

    async def handle_customer_create(self, customer: dict[str, Any]) -> SyncOutcome:
        """Create a Shopify customer in eShopaid."""
        return await self._sync_customer(customer, None, operation="customer_create")

    async def handle_customer_update(self, customer: dict[str, Any], erp_customer_code: str | None = None) -> SyncOutcome:
        """Update (or create, when no eShopaid code is known) a customer."""
        return await self._sync_customer(customer, erp_customer_code, operation="customer_update")

    async def _sync_customer(self, customer: dict[str, Any], erp_customer_code: str | None, operation: str) -> SyncOutcome:
        customer_id = customer.get("id")
        logger.info(f"Customer event {operation}: {customer.get('email')} ({customer_id})")

        try:
            response = await self.customer_manager.sync_from_shopify(customer, erp_customer_code)
        except Exception as e:
            logger.error(f"❌ Customer {customer_id} sync failed: {_failure_message(e)}")
            return SyncOutcome.failed(SyncEntity.CUSTOMER, customer_id, _failure_message(e))

        outcome = self._outcome_from(
            SyncEntity.CUSTOMER,
            customer_id,
            response,
            erp_reference=response.get("CustomerCode") or erp_customer_code,
        )
        log_sync_operation(operation, "eshopaid", customer_id=customer_id, success=outcome.success)
        return outcome

    async def handle_refund_create(self, refund: dict[str, Any], order: dict[str, Any] | None) -> SyncOutcome:
        """Create a return order for a Shopify refund."""
        refund_id = refund.get("id")
        logger.info(f"Refund created: {refund_id} for order {(order or {}).get('name')}")

        try:
            if not order:
                raise MalformedInputError("order", f"Refund {refund_id} arrived without its order")
            response = await self.order_manager.create_return_order(refund, order)
        except Exception as e:
            logger.error(f"❌ Refund {refund_id} sync failed: {_failure_message(e)}")
            return SyncOutcome.failed(SyncEntity.REFUND, refund_id, _failure_message(e))

        outcome = self._outcome_from(SyncEntity.REFUND, refund_id, response, erp_reference=response.get("TargetRefID"))
        log_sync_operation("refund_create", "eshopaid", refund_id=refund_id, success=outcome.success)
        return outcome

    async def trigger_inventory_sync(self, location: str | None = None) -> InventorySnapshot:
        """Pull inventory from eShopaid; faults become a failed snapshot."""
        logger.info("Inventory sync triggered")

        try:
            snapshot = await self.inventory_manager.get_inventory_by_location(location)
        except Exception as e:
            logger.error(f"❌ Inventory sync failed: {_failure_message(e)}")
            return InventorySnapshot(success=False, error=_failure_message(e))

        log_sync_operation("inventory_pull", "eshopaid", success=snapshot.success, item_count=snapshot.total_items)
        return snapshot

    async def test_connection(self) -> dict[str, Any]:
        """
        Connectivity probe: obtain a token from eShopaid.

        Returns:
            dict: ``{success, message, server_url}``
        """
        logger.info("Testing eShopaid connection...")

        try:
            await self.credentials.get_credential()
        except Exception as e:
            logger.error(f"❌ Connection test failed: {_failure_message(e)}")
            return {"success": False, "message": _failure_message(e), "server_url": self.server_url}

        logger.info("✅ Connected to eShopaid - token obtained")
        return {
            "success": True,
            "message": "Connected to eShopaid API successfully",
            "server_url": self.server_url,
        }

    @staticmethod
    def _outcome_from(
        entity: SyncEntity,
        entity_id: Any,
        response: GatewayResponse,
        erp_reference: str | None = None,
        status: str | None = None,
    ) -> SyncOutcome:
        if response.success:
            logger.info(f"✅ {entity.value} {entity_id} synced to eShopaid")
        else:
            logger.error(f"❌ {entity.value} {entity_id} rejected by eShopaid: {response.error}")

        return SyncOutcome(
            success=response.success,
            entity=entity,
            entity_id=entity_id,
            erp_reference=erp_reference if response.success else None,
            status=status,
            error=response.error,
        )
