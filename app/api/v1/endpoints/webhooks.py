"""
Endpoints para webhooks de Shopify.

Cada endpoint verifica la firma, responde 200 de inmediato y procesa el
webhook en background a través del WebhookProcessor.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import get_webhook_processor
from app.core.config import Settings, get_settings
from app.services.webhook_handler import WebhookProcessor, validate_webhook_request

logger = logging.getLogger(__name__)

# Crear router
router = APIRouter()


async def accept_webhook(
    topic: str,
    request: Request,
    background_tasks: BackgroundTasks,
    processor: WebhookProcessor,
    settings: Settings,
    erp_customer_code: Optional[str] = None,
) -> JSONResponse:
    """
    Valida el webhook y agenda su procesamiento.

    Args:
        topic: Topic de Shopify (ej: orders/create)
        request: Request HTTP con el webhook
        background_tasks: Tareas en background
        processor: Procesador de webhooks
        settings: Configuración de la aplicación
        erp_customer_code: Código de cliente eShopaid (customers/update)

    Returns:
        JSONResponse: Respuesta inmediata para Shopify
    """
    # Verificar si webhooks están habilitados
    if not settings.ENABLE_WEBHOOKS:
        logger.warning(f"⚠️ Webhook {topic} received but ENABLE_WEBHOOKS=False")
        return JSONResponse(
            status_code=503,
            content={"error": "Webhooks disabled", "message": "Set ENABLE_WEBHOOKS=True to enable webhook processing."},
        )

    # Firma inválida → WebhookSignatureException (401); JSON inválido → 400
    payload, webhook_id = await validate_webhook_request(request, settings)

    # Procesar webhook en background para respuesta rápida
    background_tasks.add_task(process_webhook_background, processor, topic, payload, webhook_id, erp_customer_code)

    # Respuesta inmediata para Shopify (< 5 segundos)
    return JSONResponse(
        status_code=200,
        content={"received": True, "topic": topic, "webhook_id": webhook_id, "processing": "background"},
    )


@router.post("/orders/create", status_code=status.HTTP_200_OK)
async def order_created_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    processor: WebhookProcessor = Depends(get_webhook_processor),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Webhook para pedido creado en Shopify."""
    return await accept_webhook("orders/create", request, background_tasks, processor, settings)


@router.post("/orders/updated", status_code=status.HTTP_200_OK)
async def order_updated_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    processor: WebhookProcessor = Depends(get_webhook_processor),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Webhook para pedido actualizado en Shopify."""
    return await accept_webhook("orders/updated", request, background_tasks, processor, settings)


@router.post("/orders/cancelled", status_code=status.HTTP_200_OK)
async def order_cancelled_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    processor: WebhookProcessor = Depends(get_webhook_processor),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Webhook para pedido cancelado en Shopify."""
    return await accept_webhook("orders/cancelled", request, background_tasks, processor, settings)


@router.post("/customers/create", status_code=status.HTTP_200_OK)
async def customer_created_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    processor: WebhookProcessor = Depends(get_webhook_processor),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Webhook para cliente creado en Shopify."""
    return await accept_webhook("customers/create", request, background_tasks, processor, settings)


@router.post("/customers/update", status_code=status.HTTP_200_OK)
async def customer_updated_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    erp_customer_code: Optional[str] = Query(None, description="Código de cliente eShopaid existente"),
    processor: WebhookProcessor = Depends(get_webhook_processor),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Webhook para cliente actualizado en Shopify.

    Sin ``erp_customer_code`` el cliente se da de alta (AddCustomer).
    """
    return await accept_webhook(
        "customers/update", request, background_tasks, processor, settings, erp_customer_code=erp_customer_code
    )


@router.post("/refunds/create", status_code=status.HTTP_200_OK)
async def refund_created_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    processor: WebhookProcessor = Depends(get_webhook_processor),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Webhook para reembolso creado en Shopify (payload ``{refund, order}``)."""
    return await accept_webhook("refunds/create", request, background_tasks, processor, settings)


@router.get("/metrics", status_code=status.HTTP_200_OK)
async def get_webhook_metrics(processor: WebhookProcessor = Depends(get_webhook_processor)) -> Dict[str, Any]:
    """
    Obtiene métricas del procesamiento de webhooks.

    Returns:
        Dict: Métricas del procesador
    """
    return processor.get_metrics()


async def process_webhook_background(
    processor: WebhookProcessor,
    topic: str,
    payload: Dict[str, Any],
    webhook_id: Optional[str] = None,
    erp_customer_code: Optional[str] = None,
):
    """
    Procesa un webhook en background.

    Args:
        processor: Procesador de webhooks
        topic: Topic del webhook
        payload: Datos del webhook
        webhook_id: ID único del webhook
        erp_customer_code: Código de cliente eShopaid (customers/update)
    """
    try:
        result = await processor.process_webhook(
            topic=topic, payload=payload, webhook_id=webhook_id, erp_customer_code=erp_customer_code
        )
        logger.info(f"Background webhook processing completed: {result}")

    except Exception as e:
        logger.error(f"Background webhook processing failed: {topic} - {e}")
