"""
Configuración centralizada de routers para la aplicación FastAPI.

Este módulo se encarga de registrar todos los routers de la API,
configurar endpoints base y organizar las rutas de manera estructurada.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

# Importar routers de la API
from app.api.v1.endpoints.eshopaid import router as eshopaid_router
from app.api.v1.endpoints.webhooks import router as webhooks_router
from app.core.config import get_environment_info, get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def create_root_endpoints(app: FastAPI) -> None:
    """
    Crea endpoints raíz de la aplicación.

    Args:
        app: Instancia de FastAPI
    """

    @app.get("/", tags=["Root"], summary="API Info")
    async def root():
        """
        Endpoint raíz que proporciona información básica de la API.

        Returns:
            Dict con información de la API
        """
        return {
            "message": "eShopaid-Shopify Integration API",
            "description": "Sincronización de pedidos, clientes, devoluciones e inventario entre Shopify y eShopaid",
            "version": settings.APP_VERSION,
            "status": "running",
            "documentation": "/docs" if (settings.DEBUG or settings.ENABLE_DOCS) else "disabled",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": get_router_info()["base_paths"],
        }

    @app.get("/ping", tags=["Root"], summary="Simple Ping")
    async def ping():
        """
        Endpoint simple para verificar que la API responde.

        Returns:
            Dict con pong y timestamp
        """
        return {"message": "pong", "timestamp": datetime.now(timezone.utc).isoformat()}


def create_health_endpoints(app: FastAPI) -> None:
    """
    Crea endpoints de health check.

    Args:
        app: Instancia de FastAPI
    """

    @app.get("/health", tags=["Health"], summary="Health Check")
    async def health_check(request: Request):
        """
        Health check local: verifica que los servicios estén inicializados.

        No contacta a eShopaid; para eso existe /api/v1/eshopaid/test-connection.

        Returns:
            Dict con estado de salud
        """
        state = request.app.state
        credential_cache = getattr(state, "credential_cache", None)
        scheduler = getattr(state, "scheduler", None)

        services = {
            "orchestrator": getattr(state, "orchestrator", None) is not None,
            "webhook_processor": getattr(state, "webhook_processor", None) is not None,
            "credential_cached": bool(credential_cache and credential_cache.is_valid()),
            "inventory_scheduler": scheduler.get_status() if scheduler else None,
        }
        healthy = services["orchestrator"] and services["webhook_processor"]

        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "status": "healthy" if healthy else "unhealthy",
                "version": settings.APP_VERSION,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "services": services,
                "environment": settings.ENVIRONMENT,
            },
        )


def create_info_endpoints(app: FastAPI) -> None:
    """
    Crea endpoints informativos (solo en modo debug).

    Args:
        app: Instancia de FastAPI
    """

    @app.get("/config", tags=["Info"], summary="Configuration Info")
    async def config_info():
        """
        Endpoint que retorna configuración (solo en modo debug).

        Returns:
            Dict con configuración (sanitizada)
        """
        if not settings.DEBUG:
            return JSONResponse(
                status_code=404,
                content={"message": "Config endpoint only available in debug mode"},
            )

        return {"config": get_environment_info(), "timestamp": datetime.now(timezone.utc).isoformat()}


def configure_api_v1_routers(app: FastAPI) -> None:
    """
    Configura todos los routers de la API v1.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando routers de API v1...")

    # Router de eShopaid (inventario, sincronización manual, conectividad)
    app.include_router(
        eshopaid_router,
        prefix="/api/v1/eshopaid",
        tags=["eShopaid"],
        responses={
            404: {"description": "Endpoint not found"},
            500: {"description": "Internal server error"},
            503: {"description": "eShopaid unreachable"},
        },
    )
    logger.info("✅ Router de eShopaid configurado")

    # Router de webhooks
    app.include_router(
        webhooks_router,
        prefix="/api/v1/webhooks",
        tags=["Webhooks"],
        responses={
            400: {"description": "Invalid webhook payload"},
            401: {"description": "Invalid webhook signature"},
            503: {"description": "Webhooks disabled"},
        },
    )
    logger.info("✅ Router de webhooks configurado")


def configure_all_routers(app: FastAPI) -> None:
    """
    Configura todos los routers y endpoints de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando todos los routers...")

    create_root_endpoints(app)
    create_health_endpoints(app)
    create_info_endpoints(app)
    configure_api_v1_routers(app)

    logger.info("✅ Todos los routers configurados correctamente")


def get_router_info() -> Dict[str, Any]:
    """
    Obtiene información sobre los routers configurados.

    Returns:
        Dict con información de routers
    """
    return {
        "api_version": "v1",
        "base_paths": {
            "root": "/",
            "health": "/health",
            "eshopaid": "/api/v1/eshopaid",
            "webhooks": "/api/v1/webhooks",
            "config": "/config" if settings.DEBUG else None,
        },
    }
