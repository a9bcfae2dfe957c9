"""Tests unitarios para el gateway de eShopaid y la normalización de respuestas."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.db.eshopaid import EShopaidGateway, ServiceMethod, normalize_response
from app.db.eshopaid.transport import json_dumps, parse_body
from app.domain.models import Credential
from app.utils.error_handler import CredentialAcquisitionError, TransportError


def build_gateway(post_result=None, post_side_effect=None):
    transport = MagicMock()
    transport.post = AsyncMock(return_value=post_result, side_effect=post_side_effect)
    credentials = MagicMock()
    credentials.get_credential = AsyncMock(
        return_value=Credential(
            token="tok-1",
            issued_at=datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc),
            lifetime=timedelta(minutes=30),
        )
    )
    return EShopaidGateway(transport, credentials, "http://erp/ProcessData"), transport, credentials


class TestNormalizeResponse:
    """Tests para normalize_response."""

    def test_success_with_status_reference(self):
        """Result SUCCESS con StatusReference como data."""
        response = normalize_response(
            {"Response": {"Result": "SUCCESS", "StatusReference": {"TargetRefID": "SO-1"}, "StatusMessage": "ok"}}
        )

        assert response.success is True
        assert response.get("TargetRefID") == "SO-1"
        assert response.error is None
        assert response.message == "ok"

    def test_success_with_data_block(self):
        """Las consultas devuelven el bloque Data."""
        response = normalize_response({"Response": {"Result": "SUCCESS", "Data": {"Inventory": []}}})

        assert response.success is True
        assert response.data == {"Inventory": []}

    def test_failure_reason_reported(self):
        """Un rechazo de negocio se devuelve como valor con FailureReason."""
        response = normalize_response({"Response": {"Result": "FAILURE", "FailureReason": "Duplicate order"}})

        assert response.success is False
        assert response.error == "Duplicate order"

    def test_failure_without_reason_uses_result(self):
        response = normalize_response({"Response": {"Result": "FAILURE"}})

        assert response.success is False
        assert "FAILURE" in response.error

    @pytest.mark.parametrize("raw", [None, "", "<html>error</html>", [], {"Data": {}}, {"Response": "x"}])
    def test_invalid_format_never_raises(self, raw):
        """Cualquier cuerpo sin sobre Response es 'invalid response format'."""
        response = normalize_response(raw)

        assert response.success is False
        assert response.error == "invalid response format"


class TestEShopaidGateway:
    """Tests para EShopaidGateway."""

    @pytest.mark.asyncio
    async def test_request_sends_auth_headers(self):
        """Cada llamada lleva SERVICE_METHODNAME y AUTHORIZATION."""
        gateway, transport, _ = build_gateway({"Response": {"Result": "SUCCESS"}})

        response = await gateway.request(ServiceMethod.CREATE_SALES_ORDER, {"Order": {}})

        assert response.success is True
        url, headers, body = transport.post.await_args.args
        assert url == "http://erp/ProcessData"
        assert headers["SERVICE_METHODNAME"] == "CreateSalesOrder"
        assert headers["AUTHORIZATION"] == "tok-1"
        assert body == {"Order": {}}

    @pytest.mark.asyncio
    async def test_rejection_is_returned_not_raised(self):
        gateway, _, _ = build_gateway({"Response": {"Result": "FAILURE", "FailureReason": "Invalid item"}})

        response = await gateway.request(ServiceMethod.CREATE_SALES_ORDER, {"Order": {}})

        assert response.success is False
        assert response.error == "Invalid item"

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        """Las fallas de red se propagan como excepción."""
        gateway, _, _ = build_gateway(post_side_effect=TransportError("Network error"))

        with pytest.raises(TransportError):
            await gateway.request(ServiceMethod.GET_INVENTORY, {"Params": {}})

    @pytest.mark.asyncio
    async def test_credential_error_skips_transport(self):
        """Sin token no se hace la llamada de negocio."""
        gateway, transport, credentials = build_gateway({"Response": {"Result": "SUCCESS"}})
        credentials.get_credential = AsyncMock(side_effect=CredentialAcquisitionError("no token"))

        with pytest.raises(CredentialAcquisitionError):
            await gateway.request(ServiceMethod.GET_INVENTORY, {"Params": {}})

        transport.post.assert_not_awaited()


class TestTransportHelpers:
    """Tests para el parseo y la serialización del transporte."""

    def test_parse_body_json(self):
        assert parse_body('{"Response": {"Result": "SUCCESS"}}') == {"Response": {"Result": "SUCCESS"}}

    def test_parse_body_keeps_xml_text(self):
        assert parse_body("<Access_Token>t</Access_Token>") == "<Access_Token>t</Access_Token>"

    def test_parse_body_empty(self):
        assert parse_body("") is None

    def test_json_dumps_serializes_decimal(self):
        assert json_dumps({"Rate": Decimal("99.50")}) == '{"Rate": 99.5}'
