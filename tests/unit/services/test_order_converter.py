"""Tests unitarios para la conversión de pedidos Shopify → eShopaid."""

from decimal import Decimal

import pytest

from app.services.eshopaid.converters import OrderConverter, get_state_gst_code, map_payment_gateway
from app.utils.error_handler import MalformedInputError


def sample_order(**overrides):
    order = {
        "id": 5551234,
        "name": "#1001",
        "email": "order@example.com",
        "created_at": "2024-03-15T10:30:00+05:30",
        "total_price": "1149.00",
        "gateway": "razorpay",
        "payment_gateway_names": ["razorpay"],
        "checkout_token": "chk-abc",
        "note": "Leave at door",
        "customer": {"first_name": "Asha", "last_name": "Rao", "email": "asha@example.com", "phone": "+919800000000"},
        "billing_address": {
            "address1": "12 MG Road",
            "address2": "Flat 4",
            "city": "New Delhi",
            "province": "Delhi",
            "zip": "110001",
        },
        "shipping_address": {
            "first_name": "Asha",
            "last_name": "Rao",
            "address1": "221 Park Street",
            "city": "Kolkata",
            "province": "West Bengal",
            "zip": "700016",
            "phone": "+919811111111",
        },
        "line_items": [
            {"sku": "SKU-RED-M", "variant_id": 11, "quantity": 2, "price": "499.50", "total_discount": "50.00", "name": "Red Tee - M"},
            {"sku": "", "variant_id": 22, "quantity": 1, "price": "100.00", "total_discount": "0", "name": "Socks"},
        ],
        "shipping_lines": [{"title": "Express", "price": "100.00"}],
    }
    order.update(overrides)
    return order


@pytest.fixture
def converter():
    return OrderConverter(store_location="HO", source_channel="Shopify")


class TestOrderConverter:
    """Tests para OrderConverter.convert."""

    def test_line_numbers_are_contiguous(self, converter):
        """Los LineNumber deben ir de 1 a N en orden."""
        record = converter.convert(sample_order())

        payload = record.to_payload()["Order"]
        assert [item["LineNumber"] for item in payload["Items"]["Item"]] == [1, 2]

    def test_line_numbers_ignore_source_item_ids(self, converter):
        """Con ids de línea desordenados y con huecos, re-convertir da siempre 1..N."""
        line_items = [
            {"id": 907, "sku": "SKU-C", "quantity": 1, "price": "30.00"},
            {"id": 12, "sku": "SKU-A", "quantity": 2, "price": "10.00"},
            {"id": 455, "sku": "SKU-B", "quantity": 1, "price": "20.00"},
        ]
        order = sample_order(line_items=line_items)

        first = converter.convert(order).to_payload()["Order"]["Items"]["Item"]
        second = converter.convert(order).to_payload()["Order"]["Items"]["Item"]

        assert [item["LineNumber"] for item in first] == [1, 2, 3]
        assert [item["ItemCode"] for item in first] == ["SKU-C", "SKU-A", "SKU-B"]
        assert first == second

    def test_item_code_falls_back_to_variant_id(self, converter):
        """Sin SKU se usa el variant_id como ItemCode."""
        record = converter.convert(sample_order())

        items = record.to_payload()["Order"]["Items"]["Item"]
        assert items[0]["ItemCode"] == "SKU-RED-M"
        assert items[1]["ItemCode"] == "22"
        assert items[0]["Rate"] == Decimal("499.50")
        assert items[0]["DiscountAmount"] == Decimal("50.00")

    def test_header_fields(self, converter):
        record = converter.convert(sample_order())

        header = record.to_payload()["Order"]["Header"]
        assert header["OrderNumber"] == "#1001"
        assert header["OrderDate"] == "20240315"
        assert header["OrderLocation"] == "HO"
        assert header["SourceChannel"] == "Shopify"
        assert header["TotalOrderValue"] == Decimal("1149.00")
        assert header["DeliveryCityName"] == "Kolkata"

    def test_gst_code_comes_from_shipping_province(self, converter):
        """El código GST se resuelve con la provincia de envío."""
        record = converter.convert(sample_order())

        order = record.to_payload()["Order"]
        assert order["Header"]["DeliveryStateGSTCode"] == "19"
        assert order["Customer"]["CustomerStateGSTCode"] == "19"
        assert order["Customer"]["CustomerStateName"] == "Delhi"

    def test_shipping_charge_included(self, converter):
        record = converter.convert(sample_order())

        charges = record.to_payload()["Order"]["OtherCharges"]["Charge"]
        assert charges == [{"ChargeDescription": "Shipping", "ChargeValue": Decimal("100.00"), "ChargeReference": "Express"}]

    def test_shipping_charge_omitted_when_zero(self, converter):
        """Un envío gratis no genera bloque de cargos."""
        record = converter.convert(sample_order(shipping_lines=[{"title": "Free", "price": "0.00"}]))

        assert record.to_payload()["Order"]["OtherCharges"] == {}

    def test_payment_block(self, converter):
        record = converter.convert(sample_order())

        payments = record.to_payload()["Order"]["Payments"]["Payment"]
        assert payments == [
            {
                "PaymentMode": "OnlinePayment",
                "PaymentValue": Decimal("1149.00"),
                "ModeType": "razorpay",
                "PaymentReference": "chk-abc",
            }
        ]

    def test_guest_order_defaults_first_name(self, converter):
        """Un pedido sin cliente usa el nombre de envío o 'Guest'."""
        order = sample_order(customer=None, shipping_address={"city": "Pune", "province": "Maharashtra"})

        record = converter.convert(order)

        assert record.customer["FirstName"] == "Guest"
        assert record.customer["EmailID"] == "order@example.com"

    def test_order_without_line_items_is_rejected(self, converter):
        """Sin líneas no se puede construir el pedido."""
        with pytest.raises(MalformedInputError) as exc_info:
            converter.convert(sample_order(line_items=[]))

        assert exc_info.value.field == "line_items"


class TestLookups:
    """Tests para las tablas de pago y GST."""

    @pytest.mark.parametrize(
        "gateway,expected",
        [
            ("razorpay", "OnlinePayment"),
            ("cod", "Cash"),
            ("COD", "Cash"),
            ("shopify_payments", "CreditCard"),
            ("unknown_gateway", "OnlinePayment"),
            (None, "OnlinePayment"),
        ],
    )
    def test_map_payment_gateway(self, gateway, expected):
        assert map_payment_gateway(gateway) == expected

    @pytest.mark.parametrize(
        "state,expected",
        [("Delhi", "07"), ("delhi", "07"), (" Maharashtra ", "27"), ("Atlantis", ""), (None, "")],
    )
    def test_get_state_gst_code(self, state, expected):
        assert get_state_gst_code(state) == expected
