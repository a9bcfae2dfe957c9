"""
Manejador de webhooks de Shopify para sincronización con eShopaid.

Este módulo verifica la firma de los webhooks de Shopify, descarta
re-entregas ya procesadas y enruta cada topic al orquestador de eShopaid.
"""

import base64
import hashlib
import hmac
import json
import logging
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import HTTPException, Request

from app.core.config import Settings
from app.core.logging_config import log_webhook_received
from app.domain.models import SyncEntity, SyncOutcome
from app.services.eshopaid import EShopaidSyncOrchestrator
from app.utils.error_handler import WebhookSignatureException

logger = logging.getLogger(__name__)

DEFAULT_DEDUP_CACHE_SIZE = 1000


def verify_webhook_signature(body: bytes, hmac_header: Optional[str], secret: str) -> bool:
    """
    Verifica la firma HMAC-SHA256 (base64) de un webhook de Shopify.

    Args:
        body: Cuerpo crudo del request
        hmac_header: Valor del header X-Shopify-Hmac-Sha256
        secret: Secret compartido del webhook

    Returns:
        bool: True si la firma es válida
    """
    if not hmac_header or not secret:
        return False

    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    expected = base64.b64encode(digest)

    # Comparación segura contra timing attacks
    return hmac.compare_digest(expected, hmac_header.strip().encode("utf-8"))


class WebhookProcessor:
    """
    Procesador principal de webhooks de Shopify.

    Los webhooks con un X-Shopify-Webhook-Id ya visto se descartan; el
    orquestador no deduplica por sí mismo.
    """

    def __init__(self, orchestrator: EShopaidSyncOrchestrator, max_cache_size: int = DEFAULT_DEDUP_CACHE_SIZE):
        """
        Inicializa el procesador de webhooks.

        Args:
            orchestrator: Orquestador de sincronización
            max_cache_size: Cantidad máxima de IDs recordados para deduplicar
        """
        self.orchestrator = orchestrator
        self.max_cache_size = max_cache_size
        self.processed_webhooks: "OrderedDict[str, datetime]" = OrderedDict()
        self.metrics: Dict[str, Any] = {"processed": 0, "failed": 0, "duplicates": 0, "by_topic": {}}

    def is_duplicate(self, webhook_id: Optional[str]) -> bool:
        """True si el webhook ya fue procesado."""
        return bool(webhook_id) and webhook_id in self.processed_webhooks

    def _remember(self, webhook_id: Optional[str]) -> None:
        if not webhook_id:
            return
        self.processed_webhooks[webhook_id] = datetime.now(timezone.utc)
        # Descartar los IDs más antiguos
        while len(self.processed_webhooks) > self.max_cache_size:
            self.processed_webhooks.popitem(last=False)

    def _forget(self, webhook_id: Optional[str]) -> None:
        if webhook_id:
            self.processed_webhooks.pop(webhook_id, None)

    async def process_webhook(
        self,
        topic: str,
        payload: Dict[str, Any],
        webhook_id: Optional[str] = None,
        erp_customer_code: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Procesa un webhook según su topic.

        Args:
            topic: Topic del webhook (ej: orders/create)
            payload: Datos del webhook
            webhook_id: ID único del webhook
            erp_customer_code: Código de cliente eShopaid (customers/update)

        Returns:
            Dict: Resultado del procesamiento
        """
        start_time = datetime.now(timezone.utc)

        # Verificar duplicados
        if self.is_duplicate(webhook_id):
            logger.info(f"Webhook {webhook_id} already processed, skipping")
            self.metrics["duplicates"] += 1
            return {"status": "skipped", "reason": "duplicate", "topic": topic, "webhook_id": webhook_id}

        self._remember(webhook_id)
        logger.info(f"Processing webhook: {topic} (ID: {webhook_id})")

        outcome = await self._route_webhook(topic, payload, erp_customer_code)
        duration = (datetime.now(timezone.utc) - start_time).total_seconds()

        if outcome is None or not outcome.success:
            # Una entrega fallida debe poder reintentarse con el mismo ID
            self._forget(webhook_id)

        if outcome is None:
            return {"status": "ignored", "reason": f"unsupported topic: {topic}", "topic": topic}

        topic_counts = self.metrics["by_topic"].setdefault(topic, {"processed": 0, "failed": 0})
        if outcome.success:
            self.metrics["processed"] += 1
            topic_counts["processed"] += 1
            logger.info(f"Webhook processed successfully in {duration:.2f}s: {topic}")
        else:
            self.metrics["failed"] += 1
            topic_counts["failed"] += 1
            logger.error(f"Webhook processing failed in {duration:.2f}s: {topic} - {outcome.error}")

        return {
            "status": "success" if outcome.success else "error",
            "topic": topic,
            "webhook_id": webhook_id,
            "duration_seconds": duration,
            "result": outcome.to_dict(),
        }

    async def _route_webhook(
        self, topic: str, payload: Dict[str, Any], erp_customer_code: Optional[str]
    ) -> Optional[SyncOutcome]:
        """
        Enruta webhooks al orquestador.

        Returns:
            SyncOutcome, o None si el topic no está soportado
        """
        # Normalizar topic
        topic_normalized = topic.lower().replace("/", "_")

        if topic_normalized == "orders_create":
            return await self.orchestrator.handle_order_create(payload)
        if topic_normalized == "orders_updated":
            return await self.orchestrator.handle_order_update(payload)
        if topic_normalized == "orders_cancelled":
            return await self.orchestrator.handle_order_cancelled(payload)
        if topic_normalized == "customers_create":
            return await self.orchestrator.handle_customer_create(payload)
        if topic_normalized == "customers_update":
            return await self.orchestrator.handle_customer_update(payload, erp_customer_code)
        if topic_normalized == "refunds_create":
            # El payload trae {refund, order}; un refund "desnudo" llega sin orden
            if "refund" in payload:
                refund = payload["refund"]
                if not isinstance(refund, dict):
                    return SyncOutcome.failed(SyncEntity.REFUND, None, "Field 'refund' must be an object")
                return await self.orchestrator.handle_refund_create(refund, payload.get("order"))
            return await self.orchestrator.handle_refund_create(payload, payload.get("order"))

        logger.warning(f"No handler found for webhook topic: {topic}")
        return None

    def get_metrics(self) -> Dict[str, Any]:
        """
        Obtiene métricas del procesador de webhooks.

        Returns:
            Dict: Métricas actuales
        """
        return {
            **self.metrics,
            "processed_webhooks_cache_size": len(self.processed_webhooks),
        }


# === FUNCIONES AUXILIARES ===


async def validate_webhook_request(request: Request, settings: Settings) -> Tuple[Dict[str, Any], Optional[str]]:
    """
    Valida una request de webhook de Shopify.

    Args:
        request: Request de FastAPI
        settings: Configuración de la aplicación

    Returns:
        Tuple: (payload, webhook_id)

    Raises:
        WebhookSignatureException: Si la firma no es válida
        HTTPException: Si el payload no es JSON válido
    """
    topic = request.headers.get("X-Shopify-Topic")
    signature = request.headers.get("X-Shopify-Hmac-Sha256")
    shop_domain = request.headers.get("X-Shopify-Shop-Domain", "unknown")
    webhook_id = request.headers.get("X-Shopify-Webhook-Id")

    payload_bytes = await request.body()

    # Verificar firma si está configurada
    if settings.SHOPIFY_WEBHOOK_SECRET:
        if not verify_webhook_signature(payload_bytes, signature, settings.SHOPIFY_WEBHOOK_SECRET):
            raise WebhookSignatureException(topic=topic)
    else:
        logger.warning("No webhook secret configured, skipping verification")

    try:
        payload = json.loads(payload_bytes.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid JSON payload: {str(e)}") from e

    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Webhook payload must be a JSON object")

    log_webhook_received(topic or request.url.path, shop_domain, webhook_id=webhook_id)
    return payload, webhook_id
