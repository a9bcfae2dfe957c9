"""
Configuración de Middleware para la aplicación FastAPI.

Solo se registra el logging de requests/responses con un ID por request;
los webhooks de Shopify llegan servidor a servidor y no requieren CORS.
"""

import logging
import time
import uuid

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

SLOW_REQUEST_THRESHOLD_SECONDS = 5.0


def configure_request_logging_middleware(app: FastAPI) -> None:
    """
    Configura middleware para logging de todas las requests/responses.

    Args:
        app: Instancia de FastAPI
    """

    @app.middleware("http")
    async def log_requests_middleware(request: Request, call_next):
        """
        Middleware que loggea información de cada request/response.

        Args:
            request: Request de FastAPI
            call_next: Siguiente middleware en la cadena

        Returns:
            Response con headers adicionales
        """
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        start_time = time.time()

        logger.info(f"📨 [{request_id}] {request.method} {request.url.path} - Client: {get_client_ip(request)}")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"❌ [{request_id}] {request.method} {request.url.path} - Error: {str(e)} - Time: {process_time:.3f}s"
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            f"{get_status_emoji(response.status_code)} [{request_id}] {request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s"
        )

        # Agregar headers informativos
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        response.headers["X-Request-ID"] = request_id

        if process_time > SLOW_REQUEST_THRESHOLD_SECONDS:
            logger.warning(f"🐌 [{request_id}] Slow request detected: {process_time:.3f}s")

        return response


def configure_all_middleware(app: FastAPI) -> None:
    """
    Configura todos los middlewares de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando middlewares...")
    configure_request_logging_middleware(app)
    logger.info("✅ Todos los middlewares configurados correctamente")


# Funciones auxiliares


def generate_request_id() -> str:
    """
    Genera un ID único para cada request.

    Returns:
        str: ID único de 8 caracteres
    """
    return str(uuid.uuid4())[:8]


def get_client_ip(request: Request) -> str:
    """
    Obtiene la IP real del cliente considerando proxies.

    Args:
        request: Request de FastAPI

    Returns:
        str: IP del cliente
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # Tomar la primera IP en caso de múltiples proxies
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def get_status_emoji(status_code: int) -> str:
    """
    Obtiene emoji apropiado según el código de estado HTTP.

    Args:
        status_code: Código de estado HTTP

    Returns:
        str: Emoji representativo
    """
    if 200 <= status_code < 300:
        return "✅"
    if 300 <= status_code < 400:
        return "↪️"
    if 400 <= status_code < 500:
        return "⚠️"
    return "❌"
