"""
EShopaidFactory - Factory pattern for wiring eShopaid services (OCP).

This factory encapsulates object creation logic, so the lifespan, the
scheduler and tests build the same object graph.
"""

from datetime import timedelta

from app.core.config import Settings
from app.db.eshopaid import CredentialCache, EShopaidGateway, EShopaidTransport, TokenIssuer
from app.services.eshopaid.converters import CustomerConverter, OrderConverter, ReturnConverter
from app.services.eshopaid.managers import CustomerManager, InventoryManager, OrderManager
from app.services.eshopaid.orchestrator import EShopaidSyncOrchestrator


class EShopaidFactory:
    """Factory for creating eShopaid services with proper configuration."""

    @staticmethod
    def create_transport(settings: Settings) -> EShopaidTransport:
        """Create the HTTP transport."""
        return EShopaidTransport(timeout=settings.ESHOPAID_REQUEST_TIMEOUT)

    @staticmethod
    def create_credential_cache(settings: Settings, transport: EShopaidTransport) -> CredentialCache:
        """Create the credential cache (one per application)."""
        issuer = TokenIssuer(
            transport=transport,
            token_url=settings.eshopaid_token_url,
            username=settings.ESHOPAID_USERNAME,
            password=settings.ESHOPAID_PASSWORD,
        )
        return CredentialCache(
            issuer=issuer,
            lifetime=timedelta(minutes=settings.ESHOPAID_TOKEN_LIFETIME_MINUTES),
            refresh_buffer=timedelta(minutes=settings.ESHOPAID_TOKEN_REFRESH_BUFFER_MINUTES),
        )

    @staticmethod
    def create_gateway(settings: Settings, transport: EShopaidTransport, credentials: CredentialCache) -> EShopaidGateway:
        """Create the authenticated gateway."""
        return EShopaidGateway(
            transport=transport,
            credentials=credentials,
            process_data_url=settings.eshopaid_process_data_url,
        )

    @classmethod
    def create_orchestrator(
        cls,
        settings: Settings,
        transport: EShopaidTransport | None = None,
        credentials: CredentialCache | None = None,
    ) -> EShopaidSyncOrchestrator:
        """
        Build the full service graph.

        Args:
            settings: Application settings
            transport: Existing transport (a new one is created when omitted)
            credentials: Existing credential cache (a new one is created when omitted)

        Returns:
            EShopaidSyncOrchestrator: Ready-to-use orchestrator
        """
        transport = transport or cls.create_transport(settings)
        credentials = credentials or cls.create_credential_cache(settings, transport)
        gateway = cls.create_gateway(settings, transport, credentials)

        location = settings.ESHOPAID_STORE_LOCATION
        channel = settings.ESHOPAID_SOURCE_CHANNEL

        return EShopaidSyncOrchestrator(
            order_manager=OrderManager(
                gateway=gateway,
                order_converter=OrderConverter(location, channel),
                return_converter=ReturnConverter(location, channel),
                store_location=location,
            ),
            customer_manager=CustomerManager(gateway=gateway, converter=CustomerConverter()),
            inventory_manager=InventoryManager(gateway=gateway, store_location=location),
            credentials=credentials,
            server_url=settings.ESHOPAID_SERVER_URL,
        )
