"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.shop_drafts import router as shop_drafts_router

__all__ = [
    "shop_drafts_router",
]
