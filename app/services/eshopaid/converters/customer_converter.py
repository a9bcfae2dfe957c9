"""CustomerConverter service - converts Shopify customers to eShopaid customer records (SRP)."""

import logging
from datetime import date, datetime
from typing import Any

from app.domain.models import CustomerRecord
from app.services.eshopaid.converters.lookups import get_state_gst_code
from app.utils.eshopaid_utils import first_non_empty

logger = logging.getLogger(__name__)


def parse_birth_date(value: Any) -> date | None:
    """
    Parse a birth date into a calendar date.

    Accepts ``date``/``datetime`` objects and ISO strings
    (``"1990-05-15"`` or a full ISO timestamp). Anything else yields None.

    Examples:
        >>> parse_birth_date("1990-05-15")
        datetime.date(1990, 5, 15)
        >>> parse_birth_date("1990-02-30") is None
        True
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def _metafield_dob(customer: dict[str, Any]) -> Any:
    """Read ``dob`` from metafields, given either as a mapping or a list of {key, value}."""
    metafields = customer.get("metafields")
    if isinstance(metafields, dict):
        return metafields.get("dob")
    if isinstance(metafields, list):
        for metafield in metafields:
            if isinstance(metafield, dict) and metafield.get("key") == "dob":
                return metafield.get("value")
    return None


class CustomerConverter:
    """Converts Shopify customer payloads to CustomerRecord (pure, no I/O)."""

    def convert(self, customer: dict[str, Any], customer_code: str | None = None) -> CustomerRecord:
        """
        Convert a Shopify customer.

        Args:
            customer: Shopify customer payload
            customer_code: Existing eShopaid customer code (ModifyCustomer)

        Returns:
            CustomerRecord: Record for AddCustomer / ModifyCustomer
        """
        addresses = customer.get("addresses") or []
        address = customer.get("default_address") or (addresses[0] if addresses else {}) or {}

        dob = parse_birth_date(customer.get("birthday") or _metafield_dob(customer))
        if dob is None:
            dob_day = dob_month = dob_year = ""
        else:
            dob_day, dob_month, dob_year = dob.day, dob.month, dob.year

        return CustomerRecord(
            first_name=customer.get("first_name") or "",
            last_name=customer.get("last_name") or "",
            email=customer.get("email") or "",
            mobile_number=first_non_empty(customer.get("phone"), address.get("phone")),
            address_line1=address.get("address1") or "",
            address_line2=address.get("address2") or "",
            city=address.get("city") or "",
            state=address.get("province") or "",
            state_gst_code=get_state_gst_code(address.get("province")),
            pincode=address.get("zip") or "",
            dob_day=dob_day,
            dob_month=dob_month,
            dob_year=dob_year,
            customer_code=customer_code,
        )
