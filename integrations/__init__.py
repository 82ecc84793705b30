"""
External service clients.
"""

from integrations.shop_api import ShopApiClient, extract_error_message, get_shop_api_client

__all__ = [
    "ShopApiClient",
    "extract_error_message",
    "get_shop_api_client",
]
