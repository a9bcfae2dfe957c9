"""Tests unitarios para el cache de credenciales de eShopaid."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.db.eshopaid import CredentialCache, TokenIssuer, extract_access_token
from app.db.eshopaid.transport import EShopaidTransport
from app.utils.error_handler import CredentialAcquisitionError, TransportError


class FakeClock:
    """Reloj controlable para los tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def build_cache(tokens, clock):
    issuer = MagicMock()
    issuer.issue = AsyncMock(side_effect=tokens)
    cache = CredentialCache(
        issuer,
        lifetime=timedelta(minutes=30),
        refresh_buffer=timedelta(minutes=5),
        clock=clock,
    )
    return cache, issuer


class TestCredentialCache:
    """Tests para reutilización y renovación del token."""

    @pytest.mark.asyncio
    async def test_reuses_token_inside_validity_window(self):
        """Dos llamadas seguidas deben usar un solo GetToken."""
        clock = FakeClock(datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))
        cache, issuer = build_cache(["tok-1", "tok-2"], clock)

        first = await cache.get_credential()
        clock.advance(minutes=10)
        second = await cache.get_credential()

        assert first.token == "tok-1"
        assert second is first
        assert issuer.issue.await_count == 1

    @pytest.mark.asyncio
    async def test_token_valid_one_second_before_refresh_deadline(self):
        """A expires_at - buffer - 1s la credencial sigue siendo válida."""
        clock = FakeClock(datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))
        cache, issuer = build_cache(["tok-1", "tok-2"], clock)

        await cache.get_credential()
        clock.advance(minutes=25, seconds=-1)
        credential = await cache.get_credential()

        assert credential.token == "tok-1"
        assert issuer.issue.await_count == 1

    @pytest.mark.asyncio
    async def test_token_refreshed_at_refresh_deadline(self):
        """A expires_at - buffer exacto se pide un token nuevo."""
        clock = FakeClock(datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))
        cache, issuer = build_cache(["tok-1", "tok-2"], clock)

        await cache.get_credential()
        clock.advance(minutes=25)
        credential = await cache.get_credential()

        assert credential.token == "tok-2"
        assert credential.issued_at == clock.now
        assert issuer.issue.await_count == 2

    @pytest.mark.asyncio
    async def test_failed_acquisition_leaves_cache_empty(self):
        """Si GetToken falla no debe quedar ninguna credencial cacheada."""
        clock = FakeClock(datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))
        cache, _ = build_cache(["tok-1", CredentialAcquisitionError("boom")], clock)

        await cache.get_credential()
        clock.advance(minutes=26)

        with pytest.raises(CredentialAcquisitionError):
            await cache.get_credential()

        assert cache.credential is None
        assert cache.is_valid() is False

    @pytest.mark.asyncio
    async def test_invalidate_forces_new_token(self):
        """invalidate() descarta la credencial vigente."""
        clock = FakeClock(datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))
        cache, issuer = build_cache(["tok-1", "tok-2"], clock)

        await cache.get_credential()
        cache.invalidate()
        credential = await cache.get_credential()

        assert credential.token == "tok-2"
        assert issuer.issue.await_count == 2

    def test_buffer_must_be_shorter_than_lifetime(self):
        """Un buffer >= lifetime es una configuración inválida."""
        with pytest.raises(ValueError):
            CredentialCache(MagicMock(), lifetime=timedelta(minutes=5), refresh_buffer=timedelta(minutes=5))


class TestTokenIssuer:
    """Tests para la obtención del token vía GetToken."""

    @pytest.mark.asyncio
    async def test_sends_credentials_in_headers(self):
        """GetToken envía usuario y contraseña como headers, sin cuerpo."""
        transport = MagicMock()
        transport.post = AsyncMock(return_value={"Response": {"Access_Token": "abc123"}})
        issuer = TokenIssuer(transport, "http://erp/Token", "user", "secret")

        token = await issuer.issue()

        assert token == "abc123"
        url, headers = transport.post.await_args.args
        assert url == "http://erp/Token"
        assert headers["SERVICE_METHODNAME"] == "GetToken"
        assert headers["Username"] == "user"
        assert headers["Password"] == "secret"

    @pytest.mark.asyncio
    async def test_extracts_token_from_xml_body(self):
        """Si la respuesta no es JSON se busca el tag <Access_Token>."""
        transport = MagicMock()
        transport.post = AsyncMock(return_value="<Response><Access_Token>xml-token</Access_Token></Response>")
        issuer = TokenIssuer(transport, "http://erp/Token", "user", "secret")

        assert await issuer.issue() == "xml-token"

    @pytest.mark.asyncio
    async def test_missing_token_raises(self):
        """Una respuesta sin token es una falla de credenciales."""
        transport = MagicMock()
        transport.post = AsyncMock(return_value={"Response": {"Result": "FAILURE"}})
        issuer = TokenIssuer(transport, "http://erp/Token", "user", "secret")

        with pytest.raises(CredentialAcquisitionError):
            await issuer.issue()

    @pytest.mark.asyncio
    async def test_transport_error_becomes_credential_error(self):
        """Un error HTTP al pedir el token se reporta como CredentialAcquisitionError."""
        transport = MagicMock()
        transport.post = AsyncMock(side_effect=TransportError("HTTP 500", http_status=500))
        issuer = TokenIssuer(transport, "http://erp/Token", "user", "secret")

        with pytest.raises(CredentialAcquisitionError) as exc_info:
            await issuer.issue()

        assert "HTTP 500" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_undecodable_token_body_becomes_credential_error(self):
        """Un cuerpo GetToken que no es UTF-8 válido falla como CredentialAcquisitionError."""
        response = MagicMock(status=200)
        response.text = AsyncMock(
            side_effect=UnicodeDecodeError("utf-8", b"<Access_Token>\xff\xfe", 14, 15, "invalid start byte")
        )
        session = MagicMock(closed=False)
        session.post.return_value.__aenter__.return_value = response
        transport = EShopaidTransport(timeout=5)
        transport.session = session
        cache = CredentialCache(
            TokenIssuer(transport, "http://erp/Token", "user", "secret"),
            lifetime=timedelta(minutes=30),
            refresh_buffer=timedelta(minutes=5),
        )

        with pytest.raises(CredentialAcquisitionError) as exc_info:
            await cache.get_credential()

        assert "Undecodable" in exc_info.value.message
        assert cache.is_valid() is False


class TestExtractAccessToken:
    """Tests para extract_access_token."""

    def test_json_body(self):
        assert extract_access_token({"Response": {"Access_Token": "t"}}) == "t"

    def test_empty_xml_tag(self):
        assert extract_access_token("<Access_Token> </Access_Token>") is None

    def test_none_body(self):
        assert extract_access_token(None) is None
