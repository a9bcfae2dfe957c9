"""
Configuración del sistema de logging.

Este módulo configura el logging de la integración con:
- Handler de consola (con colores en desarrollo)
- Handlers de archivo con rotación (general y solo errores)
- Formato JSON estructurado en producción
- Helpers para loggear operaciones de sync, llamadas al ERP y webhooks
"""

import json
import logging
import logging.config
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from app.core.config import get_settings

# Atributos estándar de LogRecord que no se copian como "extra"
_RESERVED_RECORD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "taskName",
}


class ColoredFormatter(logging.Formatter):
    """
    Formatter personalizado que agrega colores a los logs en consola.
    """

    # Códigos de color ANSI
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Verde
        "WARNING": "\033[33m",  # Amarillo
        "ERROR": "\033[31m",  # Rojo
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def format(self, record):
        """
        Formatea el record con colores si es para consola.

        Args:
            record: LogRecord a formatear

        Returns:
            str: Mensaje formateado con colores
        """
        formatted = super().format(record)

        # Agregar color solo si es TTY (terminal)
        if hasattr(sys.stderr, "isatty") and sys.stderr.isatty():
            color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
            reset = self.COLORS["RESET"]
            formatted = formatted.replace(record.levelname, f"{color}{record.levelname}{reset}")

        return formatted


class StructuredFormatter(logging.Formatter):
    """
    Formatter para logging estructurado en JSON.
    Útil para sistemas de monitoreo como ELK Stack.
    """

    def format(self, record):
        """
        Formatea el record como JSON estructurado.

        Args:
            record: LogRecord a formatear

        Returns:
            str: Mensaje en formato JSON
        """
        settings = get_settings()

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "app_name": settings.APP_NAME,
            "app_version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        extra_fields = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_RECORD_ATTRS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """
    Configura el sistema de logging completo de la aplicación.
    """
    settings = get_settings()

    # Crear directorio de logs si no existe
    if settings.LOG_FILE_PATH:
        Path(settings.LOG_FILE_PATH).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(get_logging_configuration())
    configure_specific_loggers()

    logger = logging.getLogger(__name__)
    logger.info(f"Sistema de logging configurado - Nivel: {settings.LOG_LEVEL}")
    if settings.LOG_FILE_PATH:
        logger.info(f"Logs guardándose en: {settings.LOG_FILE_PATH}")


def get_logging_configuration() -> Dict[str, Any]:
    """
    Genera configuración completa de logging.

    Returns:
        Dict: Configuración de logging
    """
    settings = get_settings()

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": ("%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "colored": {
                "()": ColoredFormatter,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {"()": StructuredFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.LOG_LEVEL,
                "formatter": "colored" if settings.DEBUG else "standard",
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn.error": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {"level": settings.LOG_LEVEL, "handlers": ["console"]},
    }

    if settings.LOG_FILE_PATH:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "json" if settings.is_production else "detailed",
            "filename": settings.LOG_FILE_PATH,
            "maxBytes": settings.LOG_MAX_SIZE_MB * 1024 * 1024,
            "backupCount": settings.LOG_BACKUP_COUNT,
            "encoding": "utf-8",
        }

        # Handler de errores separado
        error_log_path = settings.LOG_FILE_PATH.replace(".log", "_errors.log")
        config["handlers"]["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": error_log_path,
            "maxBytes": settings.LOG_MAX_SIZE_MB * 1024 * 1024,
            "backupCount": settings.LOG_BACKUP_COUNT,
            "encoding": "utf-8",
        }

        config["root"]["handlers"].extend(["file", "error_file"])

    return config


def configure_specific_loggers() -> None:
    """
    Configura loggers específicos para diferentes módulos.
    """
    settings = get_settings()

    # Operaciones de sincronización y gateway del ERP
    logging.getLogger("app.sync").setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    logging.getLogger("app.db.eshopaid").setLevel(logging.INFO)

    # Reducir verbosidad de librerías externas
    for logger_name in ["aiohttp.access", "aiohttp.client", "httpx", "asyncio"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def log_sync_operation(operation: str, service: str, **kwargs):
    """
    Logger específico para operaciones de sincronización.

    Args:
        operation: Tipo de operación (order_create, refund_create, etc.)
        service: Servicio involucrado (eshopaid, shopify)
        **kwargs: Datos adicionales
    """
    logger = logging.getLogger("app.sync.operation")

    extra_data = {
        "sync_operation": operation,
        "service": service,
        "sync_timestamp": datetime.now(timezone.utc).isoformat(),
        **kwargs,
    }

    logger.info(f"Sync operation: {operation} on {service}", extra=extra_data)


def log_api_call(method: str, url: str, status_code: int, duration: float, **kwargs):
    """
    Logger específico para llamadas a la API de eShopaid.

    Args:
        method: SERVICE_METHODNAME invocado
        url: URL de la API
        status_code: Código de respuesta HTTP
        duration: Duración en segundos
        **kwargs: Datos adicionales
    """
    logger = logging.getLogger("app.api.call")

    extra_data = {
        "service_method": method,
        "url": url,
        "status_code": status_code,
        "duration_ms": round(duration * 1000, 2),
        **kwargs,
    }

    if 200 <= status_code < 300:
        level = logging.INFO
    elif 400 <= status_code < 500:
        level = logging.WARNING
    else:
        level = logging.ERROR

    logger.log(
        level,
        f"API call: {method} {url} -> {status_code} ({duration * 1000:.1f}ms)",
        extra=extra_data,
    )


def log_webhook_received(webhook_type: str, shop: str, **kwargs):
    """
    Logger específico para webhooks recibidos.

    Args:
        webhook_type: Tipo de webhook
        shop: Shop de Shopify
        **kwargs: Datos adicionales
    """
    logger = logging.getLogger("app.webhook.received")

    extra_data = {
        "webhook_type": webhook_type,
        "shop": shop,
        "webhook_timestamp": datetime.now(timezone.utc).isoformat(),
        **kwargs,
    }

    logger.info(f"Webhook received: {webhook_type} from {shop}", extra=extra_data)
