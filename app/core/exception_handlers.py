"""
Manejadores de excepciones centralizados para la aplicación FastAPI.

Este módulo define todos los manejadores de excepciones personalizados y globales,
proporcionando respuestas consistentes y logging apropiado para diferentes tipos de errores.
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.utils.error_handler import (
    AppException,
    ErrorSeverity,
    SyncException,
    WebhookSignatureException,
)

settings = get_settings()
logger = logging.getLogger(__name__)


def _base_content(request: Request) -> Dict[str, Any]:
    """Campos comunes a todas las respuestas de error."""
    return {
        "error": True,
        "path": str(request.url.path),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request.headers.get("X-Request-ID"),
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Manejador para excepciones personalizadas de la aplicación.

    Args:
        request: Request de FastAPI
        exc: Excepción personalizada de la app

    Returns:
        JSONResponse: Respuesta JSON con error formateado
    """
    log_level = logging.CRITICAL if exc.severity == ErrorSeverity.CRITICAL else logging.ERROR
    logger.log(
        log_level,
        f"App Exception: {exc.message} - "
        f"Code: {exc.error_code.value} - "
        f"URL: {request.url} - "
        f"Details: {exc.details}",
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            **_base_content(request),
            "error_type": "application_error",
            "error_code": exc.error_code.value,
            "message": exc.message,
            "is_retryable": exc.is_retryable,
            "details": exc.details if settings.DEBUG else None,
        },
    )


async def sync_exception_handler(request: Request, exc: SyncException) -> JSONResponse:
    """
    Manejador específico para errores de sincronización.

    Args:
        request: Request de FastAPI
        exc: Excepción de sincronización

    Returns:
        JSONResponse: Respuesta JSON con información de error de sync
    """
    logger.error(
        f"Sync Exception: {exc.message} - "
        f"Service: {exc.service} - "
        f"Operation: {exc.operation} - "
        f"URL: {request.url}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            **_base_content(request),
            "error_type": "synchronization_error",
            "error_code": exc.error_code.value,
            "message": exc.message,
            "service": exc.service,
            "operation": exc.operation,
            "retry_suggested": exc.retry_suggested,
        },
    )


async def webhook_signature_exception_handler(request: Request, exc: WebhookSignatureException) -> JSONResponse:
    """
    Manejador para webhooks con firma HMAC inválida.

    Args:
        request: Request de FastAPI
        exc: Excepción de firma

    Returns:
        JSONResponse: 401 sin procesar el webhook
    """
    logger.warning(f"🔒 Webhook rechazado por firma inválida - Topic: {exc.topic} - URL: {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            **_base_content(request),
            "error_type": "webhook_signature_error",
            "error_code": exc.error_code.value,
            "message": exc.message,
        },
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Manejador para errores de validación de parámetros/cuerpo.

    Args:
        request: Request de FastAPI
        exc: Error de validación de FastAPI

    Returns:
        JSONResponse: 422 con detalle de los campos inválidos
    """
    logger.warning(f"Validation Error: {exc.errors()} - URL: {request.url}")

    return JSONResponse(
        status_code=422,
        content={
            **_base_content(request),
            "error_type": "validation_error",
            "message": "Request validation failed",
            "validation_errors": [
                {"field": ".".join(str(loc) for loc in error.get("loc", [])), "message": error.get("msg")}
                for error in exc.errors()
            ],
        },
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Manejador para HTTPException estándar de FastAPI.

    Args:
        request: Request de FastAPI
        exc: HTTPException

    Returns:
        JSONResponse: Respuesta JSON estandarizada
    """
    logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail} - URL: {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            **_base_content(request),
            "error_type": "http_error",
            "status_code": exc.status_code,
            "message": exc.detail,
        },
    )


async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Manejador para HTTPException de Starlette (nivel más bajo).

    Args:
        request: Request de FastAPI
        exc: StarletteHTTPException

    Returns:
        JSONResponse: Respuesta JSON estandarizada
    """
    logger.warning(f"Starlette HTTP Exception: {exc.status_code} - {exc.detail} - URL: {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            **_base_content(request),
            "error_type": "http_error",
            "status_code": exc.status_code,
            "message": exc.detail,
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Manejador global para excepciones no capturadas.

    Args:
        request: Request de FastAPI
        exc: Excepción no manejada

    Returns:
        JSONResponse: Respuesta JSON de error interno
    """
    logger.error(
        f"Unhandled Exception: {str(exc)} - "
        f"Type: {type(exc).__name__} - "
        f"URL: {request.url} - "
        f"Traceback: {traceback.format_exc()}"
    )

    # Respuesta genérica (sin exponer detalles internos)
    error_message = "Internal server error occurred"
    if settings.DEBUG:
        error_message = f"{type(exc).__name__}: {str(exc)}"

    return JSONResponse(
        status_code=500,
        content={
            **_base_content(request),
            "error_type": "internal_server_error",
            "message": error_message,
        },
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Configura todos los manejadores de excepciones de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando manejadores de excepciones...")

    # Manejadores específicos (orden de especificidad)
    app.add_exception_handler(WebhookSignatureException, webhook_signature_exception_handler)
    app.add_exception_handler(SyncException, sync_exception_handler)
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

    # Manejadores HTTP estándar
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, starlette_http_exception_handler)

    # Manejador global (debe ser el último)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("✅ Manejadores de excepciones configurados correctamente")
