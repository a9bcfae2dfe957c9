"""
Transporte HTTP hacia eShopaid.

Este módulo encapsula la sesión aiohttp usada para hablar con eShopaid.
No conoce tokens ni formatos de negocio: envía un POST y devuelve el cuerpo
parseado (JSON si se puede, texto si no).
"""

import asyncio
import json
import logging
import time
from decimal import Decimal
from functools import partial
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from app.core.logging_config import log_api_call
from app.utils.error_handler import TransportError

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    """Serializa tipos no nativos de JSON (montos Decimal)."""
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


json_dumps = partial(json.dumps, default=_json_default)


def parse_body(text: str) -> Any:
    """
    Parsea el cuerpo de respuesta de eShopaid.

    Args:
        text: Cuerpo crudo de la respuesta

    Returns:
        Objeto JSON si el texto es JSON válido; el texto tal cual si no
        (eShopaid puede responder XML en GetToken)
    """
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class EShopaidTransport:
    """
    Cliente HTTP mínimo para eShopaid.

    Mantiene una única sesión aiohttp creada de forma perezosa y la cierra
    en el shutdown de la aplicación.
    """

    def __init__(self, timeout: int = 30):
        """
        Inicializa el transporte.

        Args:
            timeout: Timeout total por request en segundos
        """
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def initialize(self) -> None:
        """Crea la sesión HTTP si todavía no existe."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=ClientTimeout(total=self.timeout, connect=10),
                json_serialize=json_dumps,
                headers={"User-Agent": "eShopaid-Shopify-Integration"},
            )
            logger.info("✅ Sesión HTTP de eShopaid inicializada")

    async def close(self) -> None:
        """Cierra la sesión HTTP y libera recursos."""
        if self.session and not self.session.closed:
            await self.session.close()
            logger.info("Sesión HTTP de eShopaid cerrada")
        self.session = None

    async def post(self, url: str, headers: Dict[str, str], body: Optional[Dict[str, Any]] = None) -> Any:
        """
        Envía un POST a eShopaid.

        Args:
            url: URL completa del endpoint
            headers: Headers a enviar (SERVICE_METHODNAME, AUTHORIZATION, ...)
            body: Cuerpo JSON; None envía un cuerpo vacío

        Returns:
            Cuerpo de la respuesta parseado

        Raises:
            TransportError: Si hay error de red, timeout o status no-2xx
        """
        await self.initialize()
        method_name = headers.get("SERVICE_METHODNAME")
        start_time = time.time()

        request_kwargs: Dict[str, Any] = {"headers": headers}
        if body is None:
            request_kwargs["data"] = b""
        else:
            request_kwargs["json"] = body

        try:
            async with self.session.post(url, **request_kwargs) as response:
                try:
                    text = await response.text()
                except UnicodeDecodeError as e:
                    logger.error(f"❌ Cuerpo no decodificable en respuesta de {method_name}: {e}")
                    raise TransportError(
                        "Undecodable response body from eShopaid",
                        method=method_name,
                        url=url,
                        http_status=response.status,
                    ) from e
                log_api_call(method_name or "POST", url, response.status, time.time() - start_time)

                if not 200 <= response.status < 300:
                    raise TransportError(
                        f"HTTP {response.status} from eShopaid: {text[:200]}",
                        method=method_name,
                        url=url,
                        http_status=response.status,
                    )

                return parse_body(text)

        except aiohttp.ClientError as e:
            logger.error(f"❌ Error de red llamando {method_name}: {e}")
            raise TransportError(f"Network error: {e}", method=method_name, url=url) from e
        except asyncio.TimeoutError as e:
            logger.error(f"❌ Timeout llamando {method_name} después de {self.timeout}s")
            raise TransportError(
                f"Request timed out after {self.timeout}s", method=method_name, url=url
            ) from e
