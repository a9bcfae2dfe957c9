"""
eShopaid-Shopify Integration - FastAPI Application Entry Point

Adaptador de sincronización entre Shopify y el ERP eShopaid: recibe webhooks
de pedidos, clientes y reembolsos, los traduce al formato de eShopaid y
consulta el inventario del ERP de forma periódica.

Este archivo actúa como el punto de entrada principal de la aplicación,
orquestando todos los componentes de manera modular y mantenible.
"""

import logging

import uvicorn
from fastapi import FastAPI

# Importaciones de configuración
from app.core.config import get_settings
from app.core.exception_handlers import configure_exception_handlers
from app.core.lifespan import lifespan

# Importaciones de módulos de configuración
from app.core.middleware import configure_all_middleware
from app.core.routers import configure_all_routers

# Configuración
settings = get_settings()
logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """
    Factory para crear y configurar la aplicación FastAPI.

    Returns:
        FastAPI: Instancia configurada de la aplicación
    """
    logger.info("🏗️ Creando aplicación FastAPI...")

    docs_enabled = settings.DEBUG or settings.ENABLE_DOCS

    # Crear instancia base de FastAPI
    app = FastAPI(
        title=settings.APP_NAME,
        description="Sincronización de pedidos, clientes, devoluciones e inventario entre Shopify y eShopaid",
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    # 1. Middleware
    configure_all_middleware(app)

    # 2. Manejadores de excepciones
    configure_exception_handlers(app)

    # 3. Routers y endpoints
    configure_all_routers(app)

    logger.info("✅ Aplicación FastAPI creada y configurada")
    return app


# Instancia principal que usa el servidor ASGI
app = create_application()


if __name__ == "__main__":
    """
    Ejecutar la aplicación directamente para desarrollo.

    Para producción se recomienda usar:
    uvicorn app.main:app --host 0.0.0.0 --port 3000
    """
    logger.info("🚀 Iniciando aplicación desde main.py...")

    uvicorn_config = {
        "app": "app.main:app",
        "host": settings.HOST,
        "port": settings.PORT,
        "reload": settings.DEBUG,
        "log_level": settings.LOG_LEVEL.lower(),
        "access_log": True,
    }

    if settings.DEBUG:
        uvicorn_config.update(
            {
                "reload_dirs": ["app"],
                "reload_excludes": ["*.pyc", "__pycache__"],
            }
        )

    logger.info(f"🔧 Configuración Uvicorn: {uvicorn_config}")

    try:
        uvicorn.run(**uvicorn_config)
    except KeyboardInterrupt:
        logger.info("🛑 Aplicación detenida por el usuario")
    except Exception as e:
        logger.error(f"❌ Error ejecutando aplicación: {e}")
        raise
