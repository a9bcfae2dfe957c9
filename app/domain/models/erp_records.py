"""
eShopaid record models.

Canonical ERP-side shapes produced by the record transformers. Each record
knows how to render itself as the JSON body expected by its
SERVICE_METHODNAME (``to_payload``).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


def _check_line_numbers(items: list["ERPLineItem"]) -> None:
    """Line numbers must run 1..N in sequence order."""
    expected = list(range(1, len(items) + 1))
    actual = [item.line_number for item in items]
    if actual != expected:
        raise ValueError(f"Line numbers must be contiguous starting at 1, got {actual}")


@dataclass(frozen=True)
class ERPLineItem:
    """
    One product line of a sales or return order.

    Attributes:
        line_number: 1-based position assigned during transformation
        item_code: SKU, or the variant id when the SKU is missing
        quantity: Units ordered/returned
        rate: Unit price
        discount_amount: Discount applied to the line
        remarks: Free text (Shopify line item name)
        ref_line_number: Original order line id (return lines only)
    """

    line_number: int
    item_code: str | None
    quantity: int
    rate: Decimal
    discount_amount: Decimal = Decimal("0")
    remarks: str = ""
    ref_line_number: Any = None

    def __post_init__(self) -> None:
        """Validate line item after initialization."""
        if self.line_number < 1:
            raise ValueError(f"Line number must be >= 1: {self.line_number}")

    def to_dict(self) -> dict[str, Any]:
        """Render as an eShopaid ``Item`` entry."""
        data: dict[str, Any] = {"LineNumber": self.line_number}
        if self.ref_line_number is not None:
            data["RefLineNumber"] = self.ref_line_number
        data.update(
            {
                "ItemCode": self.item_code,
                "Quantity": self.quantity,
                "Rate": self.rate,
                "DiscountAmount": self.discount_amount,
                "LineRemarks": self.remarks,
            }
        )
        return data


@dataclass(frozen=True)
class ERPCharge:
    """Additional order charge (shipping)."""

    description: str
    value: Decimal
    reference: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Render as an eShopaid ``Charge`` entry."""
        return {
            "ChargeDescription": self.description,
            "ChargeValue": self.value,
            "ChargeReference": self.reference,
        }


@dataclass(frozen=True)
class ERPPayment:
    """Payment (or refund) attached to an order."""

    mode: str
    value: Decimal
    mode_type: str = ""
    reference: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Render as an eShopaid ``Payment`` entry."""
        return {
            "PaymentMode": self.mode,
            "PaymentValue": self.value,
            "ModeType": self.mode_type,
            "PaymentReference": self.reference,
        }


@dataclass
class CustomerRecord:
    """
    eShopaid customer master record.

    Date of birth is either fully present (day, month and year) or fully
    empty; never partially filled.
    """

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    mobile_number: str = ""
    title: str = ""
    middle_name: str = ""
    gender: str = ""
    address_line1: str = ""
    address_line2: str = ""
    address_line3: str = ""
    city: str = ""
    state: str = ""
    state_gst_code: str = ""
    pincode: str = ""
    delivery_address_line1: str = ""
    delivery_address_line2: str = ""
    delivery_address_line3: str = ""
    delivery_city: str = ""
    delivery_state: str = ""
    delivery_pincode: str = ""
    dob_day: int | str = ""
    dob_month: int | str = ""
    dob_year: int | str = ""
    customer_code: str | None = None

    def __post_init__(self) -> None:
        """Validate date of birth consistency."""
        dob_parts = [self.dob_day, self.dob_month, self.dob_year]
        if any(part == "" for part in dob_parts) and not all(part == "" for part in dob_parts):
            raise ValueError(f"Date of birth must be complete or empty: {dob_parts}")

    def to_dict(self) -> dict[str, Any]:
        """Render the ``Customer`` block."""
        data: dict[str, Any] = {
            "TitleName": self.title,
            "FirstName": self.first_name,
            "MiddleName": self.middle_name,
            "LastName": self.last_name,
            "Gender": self.gender,
            "MobileNumber": self.mobile_number,
            "EmailID": self.email,
            "CustomerAddressLine1": self.address_line1,
            "CustomerAddressLine2": self.address_line2,
            "CustomerAddressLine3": self.address_line3,
            "CustomerCityName": self.city,
            "CustomerStateName": self.state,
            "CustomerStateGSTCode": self.state_gst_code,
            "Pincode": self.pincode,
            "DeliveryAddressLine1": self.delivery_address_line1,
            "DeliveryAddressLine2": self.delivery_address_line2,
            "DeliveryAddressLine3": self.delivery_address_line3,
            "DeliveryCityName": self.delivery_city,
            "DeliveryStateName": self.delivery_state,
            "DeliveryPincode": self.delivery_pincode,
            "DOBDay": self.dob_day,
            "DOBMonth": self.dob_month,
            "DOBYear": self.dob_year,
        }
        if self.customer_code:
            data["CustomerCode"] = self.customer_code
        return data

    def to_payload(self) -> dict[str, Any]:
        """Body for AddCustomer / ModifyCustomer."""
        return {"Customer": self.to_dict()}


@dataclass
class OrderRecord:
    """eShopaid sales order (CreateSalesOrder)."""

    customer: dict[str, Any]
    header: dict[str, Any]
    items: list[ERPLineItem]
    charges: list[ERPCharge] = field(default_factory=list)
    payments: list[ERPPayment] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate order record after initialization."""
        _check_line_numbers(self.items)

    @property
    def order_number(self) -> str:
        """Vendor order number (Shopify order name)."""
        return self.header["OrderNumber"]

    @property
    def total_value(self) -> Decimal:
        """Order total as sent to eShopaid."""
        return self.header["TotalOrderValue"]

    def to_payload(self) -> dict[str, Any]:
        """Body for CreateSalesOrder."""
        return {
            "Order": {
                "Customer": self.customer,
                "Header": self.header,
                "Items": {"Item": [item.to_dict() for item in self.items]},
                "OtherCharges": {"Charge": [charge.to_dict() for charge in self.charges]} if self.charges else {},
                "Payments": {"Payment": [payment.to_dict() for payment in self.payments]},
            }
        }


@dataclass
class ReturnRecord:
    """eShopaid return order (CreateReturnOrder)."""

    customer: dict[str, Any]
    header: dict[str, Any]
    items: list[ERPLineItem]
    payments: list[ERPPayment] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate return record after initialization."""
        _check_line_numbers(self.items)

    @property
    def return_order_number(self) -> str:
        """Return order number (RET + Shopify refund id)."""
        return self.header["ReturnOrderNumber"]

    @property
    def total_value(self) -> Decimal:
        """Sum of refunded amounts."""
        return self.header["TotalReturnOrderValue"]

    def to_payload(self) -> dict[str, Any]:
        """Body for CreateReturnOrder."""
        return {
            "ReturnOrder": {
                "Customer": self.customer,
                "Header": self.header,
                "Items": {"Item": [item.to_dict() for item in self.items]},
                "Payments": {"Payment": [payment.to_dict() for payment in self.payments]},
            }
        }


@dataclass(frozen=True)
class OrderStatusUpdate:
    """Status change pushed to eShopaid (SetOrderStatus)."""

    order_number: str
    order_date: str
    status: str
    location: str

    def to_payload(self) -> dict[str, Any]:
        """Body for SetOrderStatus."""
        return {
            "OrderStatusUpdate": {
                "VendorOrderDate": self.order_date,
                "VendorOrderNumber": self.order_number,
                "OrderLocation": self.location,
                "OrderStatus": self.status,
            }
        }
