"""
Gateway autenticado hacia el endpoint ProcessData de eShopaid.

Cada llamada obtiene una credencial vigente del CredentialCache, envía el
request con los headers SERVICE_METHODNAME y AUTHORIZATION y devuelve la
respuesta. Los rechazos de negocio se devuelven como valor
(GatewayResponse); las fallas de red o de credenciales se propagan como
excepción. No hay reintentos en esta capa.
"""

import logging
from typing import Any, Dict, Optional

from app.db.eshopaid.methods import ServiceMethod
from app.db.eshopaid.token_manager import CredentialCache
from app.db.eshopaid.transport import EShopaidTransport
from app.domain.models import GatewayResponse

logger = logging.getLogger(__name__)

SUCCESS_RESULT = "SUCCESS"


def normalize_response(raw: Any) -> GatewayResponse:
    """
    Normaliza la respuesta cruda de eShopaid.

    Args:
        raw: Cuerpo parseado devuelto por el transporte

    Returns:
        GatewayResponse: ``success`` solo si ``Response.Result == "SUCCESS"``;
        cualquier cuerpo sin el sobre ``Response`` se reporta como
        "invalid response format" sin lanzar excepción
    """
    if not isinstance(raw, dict):
        return GatewayResponse.invalid_format()

    envelope = raw.get("Response")
    if not isinstance(envelope, dict) or "Result" not in envelope:
        return GatewayResponse.invalid_format()

    success = envelope.get("Result") == SUCCESS_RESULT
    data = envelope.get("StatusReference") or envelope.get("Data")
    message = envelope.get("StatusMessage")
    error = None
    if not success:
        error = envelope.get("FailureReason") or message or f"eShopaid returned {envelope.get('Result')}"

    return GatewayResponse(success=success, data=data, error=error, message=message)


class EShopaidGateway:
    """
    Ejecuta métodos de eShopaid con autenticación por token.
    """

    def __init__(self, transport: EShopaidTransport, credentials: CredentialCache, process_data_url: str):
        """
        Inicializa el gateway.

        Args:
            transport: Transporte HTTP compartido
            credentials: Cache de credenciales (instancia única por aplicación)
            process_data_url: URL completa del endpoint ProcessData
        """
        self.transport = transport
        self.credentials = credentials
        self.process_data_url = process_data_url

    async def call(self, method: ServiceMethod, payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        Invoca un método de eShopaid y devuelve la respuesta cruda.

        Args:
            method: Método a invocar (SERVICE_METHODNAME)
            payload: Cuerpo JSON del request

        Returns:
            Respuesta tal como la entrega el transporte

        Raises:
            CredentialAcquisitionError: Si no se pudo obtener token
            TransportError: Si el request falla a nivel red/HTTP
        """
        credential = await self.credentials.get_credential()

        headers = {
            "SERVICE_METHODNAME": method.value,
            "AUTHORIZATION": credential.token,
            "Content-Type": "application/json",
        }

        logger.debug(f"Calling eShopaid {method.value}")
        return await self.transport.post(self.process_data_url, headers, payload or {})

    async def request(self, method: ServiceMethod, payload: Optional[Dict[str, Any]] = None) -> GatewayResponse:
        """
        Invoca un método y normaliza la respuesta.

        Raises:
            CredentialAcquisitionError: Si no se pudo obtener token
            TransportError: Si el request falla a nivel red/HTTP
        """
        raw = await self.call(method, payload)
        response = normalize_response(raw)

        if not response.success:
            logger.warning(f"⚠️ eShopaid {method.value} rejected: {response.error}")

        return response
