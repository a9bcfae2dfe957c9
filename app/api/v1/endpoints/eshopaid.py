"""
Endpoints de eShopaid: probe de conectividad, inventario y sincronización manual.
"""

import logging
from typing import Any, Awaitable, Dict, Optional, TypeVar

from fastapi import APIRouter, Body, Depends, Query, status

from app.api.v1.dependencies import get_orchestrator, get_scheduler
from app.api.v1.schemas.eshopaid_schemas import (
    ConnectionTestResponse,
    InventoryResponse,
    InventorySyncRequest,
    SkuInventoryRequest,
    SyncOutcomeResponse,
)
from app.core.scheduler import InventorySyncScheduler
from app.services.eshopaid import EShopaidSyncOrchestrator
from app.services.eshopaid.converters import format_for_shopify
from app.utils.error_handler import AppException, SyncException, log_error

logger = logging.getLogger(__name__)

# Crear router
router = APIRouter()

T = TypeVar("T")


async def run_eshopaid_query(operation: str, query: Awaitable[T]) -> T:
    """
    Ejecuta una consulta directa a un manager de eShopaid.

    Las excepciones de la aplicación (transporte, credenciales, input) se
    propagan a sus handlers; cualquier otro error se reporta como SyncException.
    """
    try:
        return await query
    except AppException:
        raise
    except Exception as e:
        log_error(e, {"operation": operation})
        raise SyncException(
            f"eShopaid {operation} failed: {e}", service="eshopaid", operation=operation, retry_suggested=False
        ) from e


@router.get("/test-connection", response_model=ConnectionTestResponse, summary="Probar conexión con eShopaid")
async def test_connection(orchestrator: EShopaidSyncOrchestrator = Depends(get_orchestrator)) -> Dict[str, Any]:
    """
    Intenta obtener un token de eShopaid.

    Returns:
        Dict: ``{success, message, server_url}``
    """
    return await orchestrator.test_connection()


@router.get("/inventory", response_model=InventoryResponse, summary="Inventario por location")
async def get_inventory(
    location: Optional[str] = Query(None, description="Código de location eShopaid"),
    orchestrator: EShopaidSyncOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """
    Obtiene el inventario de una location (default: store location).
    """
    snapshot = await orchestrator.trigger_inventory_sync(location)
    return snapshot.to_dict()


@router.post("/sync/inventory", response_model=InventoryResponse, summary="Sincronización manual de inventario")
async def sync_inventory(
    sync_request: Optional[InventorySyncRequest] = Body(None),
    orchestrator: EShopaidSyncOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """
    Dispara un pull de inventario y opcionalmente devuelve los updates para Shopify.
    """
    sync_request = sync_request or InventorySyncRequest()
    snapshot = await orchestrator.trigger_inventory_sync(sync_request.location)

    result = snapshot.to_dict()
    if sync_request.include_shopify_updates and snapshot.success:
        result["shopify_updates"] = format_for_shopify(snapshot)
    return result


@router.get("/inventory/product/{product_code}", response_model=InventoryResponse, summary="Inventario de un producto")
async def get_product_inventory(
    product_code: str,
    orchestrator: EShopaidSyncOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """
    Obtiene el inventario de un producto en todas las locations.

    Las fallas de transporte o credenciales se responden vía exception handlers.
    """
    snapshot = await run_eshopaid_query(
        "inventory_by_product", orchestrator.inventory_manager.get_inventory_by_product(product_code)
    )
    return snapshot.to_dict()


@router.get("/inventory/changes", response_model=InventoryResponse, summary="Inventario incremental")
async def get_inventory_changes(
    since: str = Query(..., pattern=r"^\d{8}$", description="Fecha YYYYMMDD"),
    location: str = Query("", description="Location opcional"),
    orchestrator: EShopaidSyncOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """
    Obtiene los items modificados desde una fecha.
    """
    snapshot = await run_eshopaid_query(
        "incremental_inventory", orchestrator.inventory_manager.get_incremental_inventory(since, location)
    )
    return snapshot.to_dict()


@router.post("/inventory/skus", response_model=InventoryResponse, summary="Inventario por lista de SKUs")
async def get_sku_inventory(
    sku_request: SkuInventoryRequest,
    orchestrator: EShopaidSyncOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """
    Obtiene el inventario de una lista de SKUs/EANs.
    """
    snapshot = await run_eshopaid_query(
        "inventory_by_sku_list",
        orchestrator.inventory_manager.get_inventory_by_sku_list(sku_request.sku_codes, sku_request.location),
    )
    return snapshot.to_dict()


@router.post(
    "/sync/order",
    response_model=SyncOutcomeResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Sincronización manual de un pedido",
)
async def sync_order(
    order: Dict[str, Any] = Body(..., description="Pedido de Shopify (formato REST)"),
    orchestrator: EShopaidSyncOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """
    Ejecuta el flujo de creación de pedido (cliente + pedido) para un pedido dado.
    """
    outcome = await orchestrator.handle_order_create(order)
    return outcome.to_dict()


@router.get("/orders/{order_number}", summary="Detalle de pedido en eShopaid")
async def get_order_detail(
    order_number: str,
    order_date: Optional[str] = Query(None, description="Fecha del pedido (YYYYMMDD o ISO)"),
    location: Optional[str] = Query(None, description="Location del pedido"),
    orchestrator: EShopaidSyncOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """
    Consulta un pedido previamente enviado a eShopaid (GetOrderDetail).
    """
    response = await run_eshopaid_query(
        "order_detail", orchestrator.order_manager.get_order_detail(order_number, order_date, location)
    )
    return {"success": response.success, "data": response.data, "error": response.error}


@router.get("/scheduler/status", summary="Estado del scheduler de inventario")
async def scheduler_status(scheduler: InventorySyncScheduler = Depends(get_scheduler)) -> Dict[str, Any]:
    """
    Devuelve el estado del scheduler de inventario.
    """
    return scheduler.get_status()
