"""Resolver services for eShopaid sync decisions."""

from .status_resolver import NO_UPDATE_NEEDED, ERPOrderStatus, resolve_order_status

__all__ = ["ERPOrderStatus", "NO_UPDATE_NEEDED", "resolve_order_status"]
