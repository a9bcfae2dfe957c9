"""
Módulo de acceso a eShopaid para eShopaid-Shopify Integration.

Este módulo proporciona acceso al servicio eShopaid con separación clara
de responsabilidades:

- EShopaidTransport: Gestión exclusiva de la sesión HTTP
- CredentialCache: Obtención y cacheo del token de acceso
- EShopaidGateway: Llamadas autenticadas y normalización de respuestas
"""

from app.db.eshopaid import (
    CredentialCache,
    EShopaidGateway,
    EShopaidTransport,
    ServiceMethod,
    TokenIssuer,
    normalize_response,
)

__all__ = [
    "CredentialCache",
    "EShopaidGateway",
    "EShopaidTransport",
    "ServiceMethod",
    "TokenIssuer",
    "normalize_response",
]
