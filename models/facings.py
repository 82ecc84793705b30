"""
Facings schemas.

Facings map each SKU to the number of front-facing units expected on the
shelf (OSA scoring). One entry per sku_id.
"""

from pydantic import Field, StrictFloat, StrictInt
from typing import Optional, Union

from models.base import BaseSchema


# Booleans are not counts
RawFacingsCount = Union[StrictInt, StrictFloat, str]


class FacingEntry(BaseSchema):
    """Expected facings for a single SKU."""

    sku_id: str = Field(..., min_length=1, description="SKU identifier")
    sku_name: Optional[str] = Field(None, description="SKU display name")
    facings: int = Field(..., ge=0, description="Expected number of facings")


class FacingCreate(BaseSchema):
    """
    Manual facings entry.

    facings arrives as typed by the user; it is checked by the draft
    service so every entry path applies the same rule.
    """

    sku_id: str = Field(..., min_length=1, description="SKU from the organization's catalog")
    facings: RawFacingsCount = Field(..., description="Expected number of facings")


class FacingUpdate(BaseSchema):
    """Replace the facings count of an existing entry."""

    facings: RawFacingsCount = Field(..., description="New expected number of facings")
