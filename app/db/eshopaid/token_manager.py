"""
Gestión del token de acceso de eShopaid.

eShopaid entrega tokens con vigencia fija a través del método GetToken.
Este módulo obtiene el token (TokenIssuer) y lo cachea hasta que entra en
la ventana de refresco (CredentialCache). El cache es un objeto de
instancia: se construye en el lifespan y se comparte vía app.state.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from app.db.eshopaid.methods import ServiceMethod
from app.db.eshopaid.transport import EShopaidTransport
from app.domain.models import Credential
from app.utils.error_handler import CredentialAcquisitionError, TransportError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_PATTERN = re.compile(r"<Access_Token>(.*?)</Access_Token>", re.DOTALL)


def utc_now() -> datetime:
    """Reloj por defecto del cache (UTC)."""
    return datetime.now(timezone.utc)


def extract_access_token(body: Any) -> Optional[str]:
    """
    Extrae el token de la respuesta de GetToken.

    eShopaid responde JSON (``Response.Access_Token``) o un string XML con
    el tag ``<Access_Token>``.

    Args:
        body: Cuerpo parseado por el transporte

    Returns:
        Token o None si no se encontró
    """
    if isinstance(body, dict):
        response = body.get("Response")
        if isinstance(response, dict):
            token = response.get("Access_Token")
            if token:
                return str(token)
        return None

    if isinstance(body, str):
        match = ACCESS_TOKEN_PATTERN.search(body)
        if match and match.group(1).strip():
            return match.group(1).strip()

    return None


class TokenIssuer:
    """
    Invoca GetToken en eShopaid con usuario y contraseña.
    """

    def __init__(self, transport: EShopaidTransport, token_url: str, username: str, password: str):
        self.transport = transport
        self.token_url = token_url
        self.username = username
        self.password = password

    async def issue(self) -> str:
        """
        Solicita un token nuevo.

        Returns:
            str: Token de acceso

        Raises:
            CredentialAcquisitionError: Si la llamada falla o la respuesta no trae token
        """
        headers = {
            "SERVICE_METHODNAME": ServiceMethod.GET_TOKEN.value,
            "Username": self.username,
            "Password": self.password,
            "Content-Type": "application/json",
        }

        try:
            body = await self.transport.post(self.token_url, headers)
        except TransportError as e:
            raise CredentialAcquisitionError(f"Token request failed: {e.message}") from e

        token = extract_access_token(body)
        if not token:
            raise CredentialAcquisitionError("Access token not found in eShopaid response")

        return token


class CredentialCache:
    """
    Cache de la credencial vigente.

    Una credencial se reutiliza mientras ``now < expires_at - refresh_buffer``.
    Si la obtención falla el cache queda vacío; nunca conserva un token
    parcial o vencido.
    """

    def __init__(
        self,
        issuer: TokenIssuer,
        lifetime: timedelta = timedelta(minutes=30),
        refresh_buffer: timedelta = timedelta(minutes=5),
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Inicializa el cache.

        Args:
            issuer: Emisor de tokens
            lifetime: Vigencia asumida de cada token
            refresh_buffer: Margen antes del vencimiento en el que se renueva
            clock: Fuente de tiempo (inyectable para tests)
        """
        if refresh_buffer >= lifetime:
            raise ValueError("refresh_buffer must be shorter than lifetime")

        self.issuer = issuer
        self.lifetime = lifetime
        self.refresh_buffer = refresh_buffer
        self._clock = clock
        self._credential: Optional[Credential] = None

    @property
    def credential(self) -> Optional[Credential]:
        """Credencial cacheada (puede estar vencida)."""
        return self._credential

    def is_valid(self) -> bool:
        """True si hay credencial y todavía no entró en la ventana de refresco."""
        return self._credential is not None and self._credential.is_valid_at(self._clock(), self.refresh_buffer)

    def invalidate(self) -> None:
        """Descarta la credencial cacheada."""
        self._credential = None

    async def get_credential(self) -> Credential:
        """
        Devuelve una credencial válida, obteniendo una nueva si hace falta.

        Raises:
            CredentialAcquisitionError: Si no se pudo obtener token
        """
        if self.is_valid():
            return self._credential

        return await self.refresh()

    async def refresh(self) -> Credential:
        """
        Fuerza la obtención de un token nuevo.

        Raises:
            CredentialAcquisitionError: Si no se pudo obtener token
        """
        self._credential = None

        try:
            token = await self.issuer.issue()
        except CredentialAcquisitionError as e:
            logger.error(f"❌ No se pudo obtener token de eShopaid: {e.message}")
            raise

        self._credential = Credential(token=token, issued_at=self._clock(), lifetime=self.lifetime)
        logger.info(f"🔑 Token de eShopaid obtenido, vence {self._credential.expires_at.isoformat()}")
        return self._credential
