"""
Business logic services.

Each service handles one domain area.
"""

from services.catalog_service import CatalogService, SkuCatalog, get_catalog_service
from services.payload_service import assemble_payload, build_facings_data, build_planogram_data
from services.draft_service import DraftService, ShopDraft, get_draft_service

__all__ = [
    "CatalogService",
    "SkuCatalog",
    "get_catalog_service",
    "assemble_payload",
    "build_facings_data",
    "build_planogram_data",
    "DraftService",
    "ShopDraft",
    "get_draft_service",
]
