"""CustomerManager service - customer master in eShopaid (SRP)."""

import logging
from typing import Any

from app.db.eshopaid import EShopaidGateway, ServiceMethod
from app.domain.models import GatewayResponse
from app.services.eshopaid.converters import CustomerConverter
from app.utils.error_handler import MalformedInputError

logger = logging.getLogger(__name__)


class CustomerManager:
    """Adds and modifies customers in eShopaid (SRP: customer operations only)."""

    def __init__(self, gateway: EShopaidGateway, converter: CustomerConverter):
        self.gateway = gateway
        self.converter = converter

    async def add_customer(self, customer: dict[str, Any]) -> GatewayResponse:
        """Create a customer; ``data.CustomerCode`` holds the assigned code."""
        record = self.converter.convert(customer)
        logger.info(f"Adding customer {record.email or record.mobile_number} to eShopaid")
        return await self.gateway.request(ServiceMethod.ADD_CUSTOMER, record.to_payload())

    async def modify_customer(self, customer_code: str, customer: dict[str, Any]) -> GatewayResponse:
        """
        Update an existing customer.

        Raises:
            MalformedInputError: If no customer code is given
        """
        if not customer_code:
            raise MalformedInputError("customer_code", "ModifyCustomer requires an eShopaid customer code")

        record = self.converter.convert(customer, customer_code=customer_code)
        logger.info(f"Modifying customer {customer_code} in eShopaid")
        return await self.gateway.request(ServiceMethod.MODIFY_CUSTOMER, record.to_payload())

    async def sync_from_shopify(self, customer: dict[str, Any], existing_code: str | None = None) -> GatewayResponse:
        """Modify when an eShopaid code is known, add otherwise."""
        if existing_code:
            return await self.modify_customer(existing_code, customer)
        return await self.add_customer(customer)
