"""
Gestión del ciclo de vida de la aplicación FastAPI.

Este módulo maneja los eventos de startup y shutdown de la aplicación:
configura logging, construye el grafo de servicios de eShopaid sobre
app.state, inicia el scheduler de inventario y libera recursos al cerrar.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import get_settings, validate_required_settings
from app.core.logging_config import setup_logging
from app.core.scheduler import InventorySyncScheduler
from app.services.eshopaid import EShopaidFactory
from app.services.webhook_handler import WebhookProcessor

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gestión del ciclo de vida de la aplicación.
    Maneja eventos de startup y shutdown de manera ordenada.

    Args:
        app: Instancia de FastAPI
    """
    settings = get_settings()

    # === STARTUP ===
    logger.info(f"🚀 Iniciando {settings.APP_NAME}...")

    try:
        # 1. Configurar logging
        await startup_configure_logging()

        # 2. Verificar configuración
        await startup_verify_configuration()

        # 3. Inicializar servicios
        await startup_initialize_services(app)

        # 4. Configurar tareas programadas
        await startup_configure_scheduled_tasks(app)

        logger.info("🎉 Aplicación iniciada correctamente")

    except Exception as e:
        logger.error(f"❌ Error durante el startup: {e}")
        await cleanup_on_startup_failure(app)
        sys.exit(1)

    # === YIELD (aplicación corriendo) ===
    yield

    # === SHUTDOWN ===
    logger.info(f"🛑 Cerrando {settings.APP_NAME}...")

    try:
        # 1. Detener tareas programadas
        await shutdown_stop_scheduled_tasks(app)

        # 2. Cerrar conexiones
        await shutdown_close_connections(app)

        logger.info("👋 Aplicación cerrada correctamente")

    except Exception as e:
        logger.error(f"❌ Error durante el shutdown: {e}")


# === FUNCIONES DE STARTUP ===


async def startup_configure_logging():
    """Configura el sistema de logging."""
    try:
        setup_logging()
        logger.info("✅ Sistema de logging configurado")
    except Exception as e:
        print(f"Error configurando logging: {e}")
        raise


async def startup_verify_configuration():
    """
    Verifica que la configuración sea válida.

    En producción la falta de credenciales de eShopaid es fatal; en otros
    entornos solo se advierte.
    """
    settings = get_settings()

    try:
        validate_required_settings()
        logger.info("✅ Configuración verificada")
    except ValueError as e:
        if settings.is_production:
            raise
        logger.warning(f"⚠️ {e}; las llamadas a eShopaid fallarán")


async def startup_initialize_services(app: FastAPI):
    """
    Construye transporte, cache de credenciales, gateway, servicios y
    orquestador, y los publica en app.state.
    """
    settings = get_settings()

    transport = EShopaidFactory.create_transport(settings)
    await transport.initialize()

    credentials = EShopaidFactory.create_credential_cache(settings, transport)
    orchestrator = EShopaidFactory.create_orchestrator(settings, transport=transport, credentials=credentials)

    app.state.eshopaid_transport = transport
    app.state.credential_cache = credentials
    app.state.orchestrator = orchestrator
    app.state.webhook_processor = WebhookProcessor(orchestrator)

    logger.info(f"✅ Servicios de eShopaid inicializados ({settings.ESHOPAID_SERVER_URL})")


async def startup_configure_scheduled_tasks(app: FastAPI):
    """Configura la sincronización periódica de inventario."""
    settings = get_settings()

    scheduler = InventorySyncScheduler(app.state.orchestrator, settings.INVENTORY_SYNC_INTERVAL_MINUTES)
    app.state.scheduler = scheduler
    await scheduler.start()


async def cleanup_on_startup_failure(app: FastAPI):
    """Limpia recursos si el startup falla."""
    logger.info("🧹 Limpiando recursos después de fallo en startup...")
    try:
        await shutdown_stop_scheduled_tasks(app)
        await shutdown_close_connections(app)
    except Exception as e:
        logger.error(f"Error durante limpieza: {e}")


# === FUNCIONES DE SHUTDOWN ===


async def shutdown_stop_scheduled_tasks(app: FastAPI):
    """Detiene el scheduler de inventario."""
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        await scheduler.stop()
        logger.info("✅ Tareas programadas detenidas")


async def shutdown_close_connections(app: FastAPI):
    """Cierra la sesión HTTP de eShopaid y descarta la credencial cacheada."""
    credentials = getattr(app.state, "credential_cache", None)
    if credentials is not None:
        credentials.invalidate()

    transport = getattr(app.state, "eshopaid_transport", None)
    if transport is not None:
        await transport.close()
        logger.info("✅ Conexiones cerradas")
