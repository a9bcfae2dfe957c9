"""
Sistema de manejo de errores personalizado.

Este módulo define las excepciones de la integración eShopaid-Shopify
y proporciona utilidades para manejo consistente de errores.

Taxonomía:
- TransportError: falla de red/HTTP al hablar con el ERP (se propaga, no se reintenta)
- CredentialAcquisitionError: no se pudo obtener token (el cache queda vacío)
- MalformedInputError: falta un campo estructural requerido (antes de cualquier llamada)
- Rechazo de negocio: NO es excepción, es un GatewayResponse con success=False
"""

import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """
    Códigos de error estandardizados para la aplicación.
    """

    # Errores generales
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Errores de conexión con eShopaid
    ERP_TRANSPORT_FAILED = "ERP_TRANSPORT_FAILED"
    ERP_CREDENTIAL_FAILED = "ERP_CREDENTIAL_FAILED"

    # Errores de sincronización
    SYNC_FAILED = "SYNC_FAILED"

    # Errores de datos
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # Errores de webhooks
    INVALID_WEBHOOK_SIGNATURE = "INVALID_WEBHOOK_SIGNATURE"


class ErrorSeverity(Enum):
    """
    Niveles de severidad para errores.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AppException(Exception):
    """
    Excepción base para todas las excepciones personalizadas de la aplicación.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        is_retryable: bool = False,
    ):
        """
        Inicializa la excepción.

        Args:
            message: Mensaje de error
            error_code: Código de error estandardizado
            details: Información adicional del error
            status_code: Código HTTP asociado
            severity: Severidad del error
            is_retryable: Si la operación puede reintentarse (por el llamador)
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.severity = severity
        self.is_retryable = is_retryable
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convierte la excepción a diccionario.

        Returns:
            Dict: Representación de la excepción
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "details": self.details,
            "status_code": self.status_code,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        """String representation del error."""
        return f"{self.error_code.value}: {self.message}"


class TransportError(AppException):
    """
    Excepción para fallas de red o HTTP hablando con eShopaid.

    Nunca se reintenta dentro de la capa de integración; el reintento es
    responsabilidad del llamador externo (scheduler o Shopify re-entregando).
    """

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
        http_status: Optional[int] = None,
        **kwargs,
    ):
        """
        Inicializa la excepción de transporte.

        Args:
            message: Mensaje de error
            method: SERVICE_METHODNAME de la llamada
            url: URL invocada
            http_status: Código HTTP devuelto (si hubo respuesta)
            **kwargs: Argumentos adicionales para AppException
        """
        super().__init__(
            message=message,
            error_code=ErrorCode.ERP_TRANSPORT_FAILED,
            status_code=503,
            severity=ErrorSeverity.HIGH,
            is_retryable=True,
            **kwargs,
        )
        self.method = method
        self.url = url
        self.http_status = http_status

        self.details.update({"method": method, "url": url, "http_status": http_status})


class CredentialAcquisitionError(AppException):
    """
    Excepción cuando eShopaid no entrega un token utilizable.
    """

    def __init__(self, message: str, **kwargs):
        """
        Inicializa la excepción de credenciales.

        Args:
            message: Mensaje de error
            **kwargs: Argumentos adicionales para AppException
        """
        super().__init__(
            message=message,
            error_code=ErrorCode.ERP_CREDENTIAL_FAILED,
            status_code=502,
            severity=ErrorSeverity.HIGH,
            is_retryable=True,
            **kwargs,
        )


class MalformedInputError(AppException):
    """
    Excepción para payloads de Shopify a los que les falta un campo requerido.
    """

    def __init__(self, field: str, message: Optional[str] = None, **kwargs):
        """
        Inicializa la excepción de entrada malformada.

        Args:
            field: Campo requerido que falta
            message: Mensaje de error (opcional)
            **kwargs: Argumentos adicionales para AppException
        """
        super().__init__(
            message=message or f"Missing required field: {field}",
            error_code=ErrorCode.MISSING_REQUIRED_FIELD,
            status_code=422,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field = field

        self.details.update({"field": field})


class SyncException(AppException):
    """
    Excepción para errores de sincronización.
    """

    def __init__(
        self,
        message: str,
        service: str,
        operation: str,
        retry_suggested: bool = True,
        **kwargs,
    ):
        """
        Inicializa la excepción de sincronización.

        Args:
            message: Mensaje de error
            service: Servicio involucrado (eshopaid, shopify)
            operation: Operación que falló
            retry_suggested: Si se sugiere reintentar
            **kwargs: Argumentos adicionales para AppException
        """
        super().__init__(
            message=message,
            error_code=ErrorCode.SYNC_FAILED,
            status_code=500,
            severity=ErrorSeverity.HIGH,
            is_retryable=retry_suggested,
            **kwargs,
        )

        self.service = service
        self.operation = operation
        self.retry_suggested = retry_suggested

        self.details.update({"service": service, "operation": operation, "retry_suggested": retry_suggested})


class WebhookSignatureException(AppException):
    """
    Excepción para webhooks cuya firma HMAC no coincide.
    """

    def __init__(self, message: str = "Invalid webhook signature", topic: Optional[str] = None, **kwargs):
        """
        Inicializa la excepción de firma inválida.

        Args:
            message: Mensaje de error
            topic: Topic del webhook rechazado
            **kwargs: Argumentos adicionales para AppException
        """
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_WEBHOOK_SIGNATURE,
            status_code=401,
            severity=ErrorSeverity.MEDIUM,
            **kwargs,
        )
        self.topic = topic

        self.details.update({"topic": topic})


# === FUNCIONES DE UTILIDAD ===


def log_error(
    exception: Exception,
    context: Optional[Dict[str, Any]] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Loggea un error de manera consistente.

    Args:
        exception: Excepción a loggear
        context: Contexto adicional
        level: Nivel de logging
    """
    context = context or {}

    log_data = {
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
        "traceback": traceback.format_exc(),
        **context,
    }

    if isinstance(exception, AppException):
        message = f"{exception.error_code.value}: {exception.message}"
        log_data.update(
            {
                "error_code": exception.error_code.value,
                "severity": exception.severity.value,
                "is_retryable": exception.is_retryable,
            }
        )
    else:
        message = f"Unhandled exception: {type(exception).__name__}: {str(exception)}"

    logger.log(level, message, extra=log_data)
