"""
Dependencias de FastAPI para acceder a los servicios publicados en app.state.

El lifespan construye los servicios una sola vez; los endpoints los obtienen
a través de estas funciones (reemplazables con dependency_overrides en tests).
"""

from fastapi import HTTPException, Request

from app.core.scheduler import InventorySyncScheduler
from app.services.eshopaid import EShopaidSyncOrchestrator
from app.services.webhook_handler import WebhookProcessor


def _state_attr(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=503, detail=f"Service not initialized: {name}")
    return value


def get_orchestrator(request: Request) -> EShopaidSyncOrchestrator:
    """Orquestador de sincronización."""
    return _state_attr(request, "orchestrator")


def get_webhook_processor(request: Request) -> WebhookProcessor:
    """Procesador de webhooks."""
    return _state_attr(request, "webhook_processor")


def get_scheduler(request: Request) -> InventorySyncScheduler:
    """Scheduler de inventario."""
    return _state_attr(request, "scheduler")
