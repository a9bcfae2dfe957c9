"""
eShopaid sync services.

Layout:
- converters/: pure Shopify ↔ eShopaid record transformations
- managers/: gateway-backed order, customer and inventory operations
- resolvers/: status resolution for order updates
- orchestrator: per-event sync flows returning SyncOutcome
- factories: object graph wiring
"""

from .factories import EShopaidFactory
from .orchestrator import EShopaidSyncOrchestrator

__all__ = ["EShopaidFactory", "EShopaidSyncOrchestrator"]
