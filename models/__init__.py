"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
)
from models.planogram import (
    PlanogramRow,
    PlanogramRowCreate,
    PlanogramRowUpdate,
)
from models.facings import (
    FacingEntry,
    FacingCreate,
    FacingUpdate,
)
from models.shop import (
    EntryState,
    SkuCatalogEntry,
    ShopIdentity,
    ShopDraftCreate,
    ShopDraftResponse,
    ImportSummary,
    SubmissionResponse,
)

__all__ = [
    # Base
    "BaseSchema",

    # Planogram
    "PlanogramRow",
    "PlanogramRowCreate",
    "PlanogramRowUpdate",

    # Facings
    "FacingEntry",
    "FacingCreate",
    "FacingUpdate",

    # Shop drafts
    "EntryState",
    "SkuCatalogEntry",
    "ShopIdentity",
    "ShopDraftCreate",
    "ShopDraftResponse",
    "ImportSummary",
    "SubmissionResponse",
]
