"""
Modelos Pydantic para requests y respuestas de los endpoints de eShopaid.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class InventorySyncRequest(BaseModel):
    """Cuerpo de POST /sync/inventory."""

    location: Optional[str] = Field(None, description="Código de location eShopaid (default: store location)")
    include_shopify_updates: bool = Field(False, description="Incluir el listado de updates para Shopify")


class SkuInventoryRequest(BaseModel):
    """Cuerpo de POST /inventory/skus."""

    sku_codes: List[str] = Field(..., min_length=1, description="Códigos SKU/EAN a consultar")
    location: Optional[str] = Field(None, description="Código de location eShopaid")

    @field_validator("sku_codes")
    @classmethod
    def validate_sku_codes(cls, v):
        """Descarta códigos vacíos."""
        codes = [code.strip() for code in v if code and code.strip()]
        if not codes:
            raise ValueError("Se requiere al menos un SKU")
        return codes


class ConnectionTestResponse(BaseModel):
    """Resultado del probe de conectividad."""

    success: bool
    message: str
    server_url: Optional[str] = None


class InventoryResponse(BaseModel):
    """Snapshot de inventario serializado."""

    success: bool
    item_count: int = 0
    inventory: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None
    shopify_updates: Optional[List[Dict[str, Any]]] = None


class SyncOutcomeResponse(BaseModel):
    """Resultado de una sincronización manual."""

    success: bool
    entity: str
    order_id: Optional[Any] = None
    erp_reference: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None
