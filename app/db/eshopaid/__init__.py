"""
Cliente de eShopaid: transporte, credenciales y gateway.
"""

from app.db.eshopaid.gateway import EShopaidGateway, normalize_response
from app.db.eshopaid.methods import ServiceMethod
from app.db.eshopaid.token_manager import CredentialCache, TokenIssuer, extract_access_token
from app.db.eshopaid.transport import EShopaidTransport

__all__ = [
    "CredentialCache",
    "EShopaidGateway",
    "EShopaidTransport",
    "ServiceMethod",
    "TokenIssuer",
    "extract_access_token",
    "normalize_response",
]
