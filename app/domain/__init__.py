"""
Domain layer for eShopaid-Shopify integration.

This layer contains business entities and their invariants, independent
of HTTP transport and web framework concerns.
"""
