"""
Planogram schemas.

A planogram is the ordered list of shelf slots used for PGC scoring.
Order and repeated SKUs are meaningful; a missing id or name is kept
as an explicit null.
"""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema


class PlanogramRow(BaseSchema):
    """One shelf slot, in shelf order."""

    sku_id: Optional[str] = Field(None, description="SKU identifier (null when the cell was empty)")
    sku_name: Optional[str] = Field(None, description="SKU display name (null when the cell was empty)")


class PlanogramRowCreate(BaseSchema):
    """Append a slot for a catalog SKU."""

    sku_id: str = Field(..., min_length=1, description="SKU from the organization's catalog")


class PlanogramRowUpdate(BaseSchema):
    """Rename the SKU shown in a slot; position never changes."""

    sku_name: Optional[str] = Field(None, description="New display name (null clears it)")
