"""
Tests de integración para los endpoints HTTP de webhooks y eShopaid.

Usan la aplicación real con los servicios reemplazados vía
dependency_overrides; el lifespan no se ejecuta.
"""

import base64
import hashlib
import hmac
import json
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api.v1.dependencies import get_orchestrator, get_webhook_processor
from app.core.config import Settings, get_settings
from app.domain.models import InventoryItem, InventorySnapshot, LocationInventory, SyncEntity, SyncOutcome
from app.main import app
from app.utils.error_handler import TransportError

SECRET = "shpss_test_secret"


def signed_headers(body: bytes, topic: str, webhook_id: str = "wh-1") -> dict:
    signature = base64.b64encode(hmac.new(SECRET.encode(), body, hashlib.sha256).digest()).decode()
    return {
        "Content-Type": "application/json",
        "X-Shopify-Topic": topic,
        "X-Shopify-Hmac-Sha256": signature,
        "X-Shopify-Shop-Domain": "test-shop.myshopify.com",
        "X-Shopify-Webhook-Id": webhook_id,
    }


@pytest.fixture
def processor():
    processor = MagicMock()
    processor.process_webhook = AsyncMock(return_value={"status": "success"})
    processor.get_metrics = MagicMock(return_value={"processed": 3, "failed": 0, "duplicates": 1, "by_topic": {}})
    return processor


@pytest.fixture
def orchestrator():
    orchestrator = MagicMock()
    snapshot = InventorySnapshot(
        success=True,
        locations=[
            LocationInventory(
                location="HO",
                items=[
                    InventoryItem(
                        product_code="P-1",
                        ean_code="8901234567890",
                        item_code="IT-1",
                        stock=Decimal("4.5"),
                        sales_price=Decimal("499.50"),
                        mrp=Decimal("599.00"),
                    )
                ],
            )
        ],
    )
    orchestrator.trigger_inventory_sync = AsyncMock(return_value=snapshot)
    orchestrator.test_connection = AsyncMock(
        return_value={"success": True, "message": "Connected to eShopaid API successfully", "server_url": "http://erp"}
    )
    orchestrator.handle_order_create = AsyncMock(
        return_value=SyncOutcome(success=True, entity=SyncEntity.ORDER, entity_id=1001, erp_reference="SO-77")
    )
    return orchestrator


@pytest.fixture
def client(processor, orchestrator):
    settings = Settings(SHOPIFY_WEBHOOK_SECRET=SECRET, ENABLE_WEBHOOKS=True)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_webhook_processor] = lambda: processor
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestWebhookEndpoints:
    """Tests para /api/v1/webhooks."""

    def test_order_create_accepted_and_processed(self, client, processor):
        body = json.dumps({"id": 1001, "name": "#1001"}).encode()

        response = client.post("/api/v1/webhooks/orders/create", content=body, headers=signed_headers(body, "orders/create"))

        assert response.status_code == 200
        assert response.json() == {
            "received": True,
            "topic": "orders/create",
            "webhook_id": "wh-1",
            "processing": "background",
        }
        processor.process_webhook.assert_awaited_once_with(
            topic="orders/create", payload={"id": 1001, "name": "#1001"}, webhook_id="wh-1", erp_customer_code=None
        )

    def test_invalid_signature_rejected(self, client, processor):
        body = json.dumps({"id": 1001}).encode()
        headers = signed_headers(body, "orders/create")
        headers["X-Shopify-Hmac-Sha256"] = "invalid"

        response = client.post("/api/v1/webhooks/orders/create", content=body, headers=headers)

        assert response.status_code == 401
        processor.process_webhook.assert_not_awaited()

    def test_invalid_json_rejected(self, client):
        body = b"not-json"

        response = client.post("/api/v1/webhooks/orders/create", content=body, headers=signed_headers(body, "orders/create"))

        assert response.status_code == 400

    def test_customer_update_forwards_erp_code(self, client, processor):
        body = json.dumps({"id": 42}).encode()

        response = client.post(
            "/api/v1/webhooks/customers/update?erp_customer_code=C-9",
            content=body,
            headers=signed_headers(body, "customers/update"),
        )

        assert response.status_code == 200
        assert processor.process_webhook.await_args.kwargs["erp_customer_code"] == "C-9"

    def test_refund_topic(self, client, processor):
        body = json.dumps({"refund": {"id": 9001}, "order": {"name": "#1001"}}).encode()

        response = client.post("/api/v1/webhooks/refunds/create", content=body, headers=signed_headers(body, "refunds/create"))

        assert response.status_code == 200
        assert processor.process_webhook.await_args.kwargs["topic"] == "refunds/create"

    def test_webhooks_disabled(self, client, processor):
        app.dependency_overrides[get_settings] = lambda: Settings(SHOPIFY_WEBHOOK_SECRET=SECRET, ENABLE_WEBHOOKS=False)
        body = json.dumps({"id": 1001}).encode()

        response = client.post("/api/v1/webhooks/orders/create", content=body, headers=signed_headers(body, "orders/create"))

        assert response.status_code == 503
        processor.process_webhook.assert_not_awaited()

    def test_metrics(self, client):
        response = client.get("/api/v1/webhooks/metrics")

        assert response.status_code == 200
        assert response.json()["duplicates"] == 1


class TestEShopaidEndpoints:
    """Tests para /api/v1/eshopaid."""

    def test_connection_probe(self, client):
        response = client.get("/api/v1/eshopaid/test-connection")

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_inventory(self, client, orchestrator):
        response = client.get("/api/v1/eshopaid/inventory?location=HO")

        assert response.status_code == 200
        data = response.json()
        assert data["item_count"] == 1
        assert data["inventory"][0]["location"] == "HO"
        orchestrator.trigger_inventory_sync.assert_awaited_once_with("HO")

    def test_sync_inventory_with_shopify_updates(self, client):
        response = client.post("/api/v1/eshopaid/sync/inventory", json={"include_shopify_updates": True})

        assert response.status_code == 200
        updates = response.json()["shopify_updates"]
        assert updates[0]["sku"] == "8901234567890"
        assert updates[0]["quantity"] == 4

    def test_manual_order_sync(self, client):
        response = client.post("/api/v1/eshopaid/sync/order", json={"id": 1001, "name": "#1001"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "entity": "order", "order_id": 1001, "erp_reference": "SO-77"}

    def test_transport_error_maps_to_503(self, client, orchestrator):
        """Un error de red hacia eShopaid se responde con 503."""
        orchestrator.inventory_manager.get_inventory_by_product = AsyncMock(
            side_effect=TransportError("Network error", method="GetInventory")
        )

        response = client.get("/api/v1/eshopaid/inventory/product/P-1")

        assert response.status_code == 503
        assert response.json()["error_code"] == "ERP_TRANSPORT_FAILED"

    def test_unexpected_error_reported_as_sync_error(self, client, orchestrator):
        orchestrator.order_manager.get_order_detail = AsyncMock(side_effect=KeyError("Params"))

        response = client.get("/api/v1/eshopaid/orders/%231001")

        assert response.status_code == 500
        assert response.json()["error_type"] == "synchronization_error"
        assert response.json()["operation"] == "order_detail"

    def test_sku_request_requires_codes(self, client):
        response = client.post("/api/v1/eshopaid/inventory/skus", json={"sku_codes": []})

        assert response.status_code == 422


class TestServiceAvailability:
    """Tests de endpoints sin servicios inicializados."""

    def test_missing_orchestrator_returns_503(self):
        client = TestClient(app)

        response = client.get("/api/v1/eshopaid/test-connection")

        assert response.status_code == 503

    def test_ping(self):
        response = TestClient(app).get("/ping")

        assert response.status_code == 200
        assert response.json()["message"] == "pong"
