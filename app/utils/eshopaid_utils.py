"""
Utilidades compartidas para eShopaid.

Este módulo contiene funciones utilitarias que son usadas por los
transformadores y servicios para normalizar montos, fechas y las
estructuras "uno-o-varios" que devuelve eShopaid.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """
    Convierte un valor numérico (o string) a Decimal.

    Args:
        value: Valor a convertir (str, int, float, Decimal o None)
        default: Valor devuelto si no se puede convertir

    Returns:
        Decimal: Valor convertido

    Examples:
        >>> to_decimal("99.90")
        Decimal('99.90')
        >>> to_decimal(None)
        Decimal('0')
        >>> to_decimal("abc", Decimal("1"))
        Decimal('1')
    """
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    try:
        # str() evita artefactos binarios de float
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    if not result.is_finite():
        return default
    return result


def ensure_list(value: Any) -> list[Any]:
    """
    Normaliza un campo "uno-o-varios" a lista.

    eShopaid serializa colecciones de un solo elemento como objeto en lugar
    de lista; ausente se interpreta como vacío.

    Examples:
        >>> ensure_list(None)
        []
        >>> ensure_list({"a": 1})
        [{'a': 1}]
        >>> ensure_list([1, 2])
        [1, 2]
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def parse_shopify_datetime(value: str | None) -> datetime | None:
    """
    Parsea un timestamp ISO 8601 de Shopify.

    Args:
        value: Timestamp (ej: "2024-03-15T10:30:00-05:00" o con sufijo "Z")

    Returns:
        datetime con zona horaria, o None si no es válido
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_erp_date(value: str | datetime | None) -> str:
    """
    Formatea una fecha como YYYYMMDD en UTC (formato de eShopaid).

    Args:
        value: Timestamp ISO de Shopify o datetime; None usa la fecha actual

    Returns:
        str: Fecha en formato YYYYMMDD, o "" si el valor no es parseable
    """
    if value is None:
        moment = datetime.now(timezone.utc)
    elif isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    else:
        moment = parse_shopify_datetime(value)
        if moment is None:
            return ""
    return moment.astimezone(timezone.utc).strftime("%Y%m%d")


def format_iso_date(value: str | datetime | None) -> str:
    """
    Formatea una fecha como YYYY-MM-DD en UTC.

    Usado por SetOrderStatus (VendorOrderDate).
    """
    if value is None:
        moment = datetime.now(timezone.utc)
    elif isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    else:
        moment = parse_shopify_datetime(value)
        if moment is None:
            return ""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d")


def first_non_empty(*values: Any, default: Any = "") -> Any:
    """
    Devuelve el primer valor no vacío.

    Examples:
        >>> first_non_empty(None, "", "abc")
        'abc'
        >>> first_non_empty(None, default="Guest")
        'Guest'
    """
    for value in values:
        if value not in (None, ""):
            return value
    return default
