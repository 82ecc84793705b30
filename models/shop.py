"""
Shop draft schemas for validation and serialization.
"""

from pydantic import Field
from typing import Any, Optional
from datetime import datetime
from enum import Enum

from models.base import BaseSchema
from models.facings import FacingEntry
from models.planogram import PlanogramRow


class EntryState(str, Enum):
    """Whether a draft structure holds anything yet."""
    NO_ENTRIES = "no_entries"
    HAS_ENTRIES = "has_entries"


class SkuCatalogEntry(BaseSchema):
    """SKU registered for an organization (read-only here)."""

    sku_id: str = Field(..., min_length=1, description="SKU identifier")
    sku_name: Optional[str] = Field(None, description="SKU display name")


class ShopIdentity(BaseSchema):
    """Required identity fields of the shop being created."""

    shop_id: str = Field(..., min_length=1, description="Shop identifier")
    shop_name: str = Field(..., min_length=1, description="Shop display name")
    shop_location: str = Field(..., min_length=1, description="Shop address or area")
    shop_type: str = Field(..., min_length=1, description="Shop format (e.g. supermarket)")


class ShopDraftCreate(ShopIdentity):
    """Open a draft for a new shop."""

    org_id: str = Field(..., min_length=1, description="Owning organization")


class ShopDraftResponse(BaseSchema):
    """Current state of a draft."""

    id: str = Field(..., description="Draft identifier")
    org_id: str = Field(..., description="Owning organization")
    identity: ShopIdentity
    planogram: list[PlanogramRow] = Field(default_factory=list)
    facings: dict[str, FacingEntry] = Field(default_factory=dict)
    planogram_state: EntryState
    facings_state: EntryState
    opened_at: datetime


class ImportSummary(BaseSchema):
    """Outcome of a file import."""

    draft_id: str
    filename: Optional[str] = None
    applied: bool = Field(..., description="False if the draft was discarded or a newer import won")
    total_rows: int = 0
    planogram_rows: int = 0
    dropped_rows: int = 0
    facings_entries: int = 0
    has_facings_column: bool = False


class SubmissionResponse(BaseSchema):
    """Outcome of submitting a draft to the shop-creation endpoint."""

    draft_id: str
    shop_id: str
    upstream: Optional[Any] = Field(None, description="Endpoint response body, unmodified")
