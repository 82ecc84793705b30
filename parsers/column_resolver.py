"""
Column resolver for planogram uploads.

Maps the logical fields onto header positions. Matching is case- and
whitespace-insensitive; the header strings themselves are left alone.
"""

from dataclasses import dataclass
from typing import Optional
import structlog

from exceptions import MissingColumnError
from utils.text_utils import normalize_header

logger = structlog.get_logger(__name__)


REQUIRED_COLUMNS = ("sku_id", "sku_name")
OPTIONAL_COLUMNS = ("facings",)


@dataclass(frozen=True)
class ColumnMap:
    """Zero-based header index for each logical field."""
    sku_id: int
    sku_name: int
    facings: Optional[int] = None

    @property
    def has_facings(self) -> bool:
        return self.facings is not None


def resolve_columns(header_cells: list[str]) -> ColumnMap:
    """
    Find the required and optional columns in a header row.

    The first header matching a field wins.

    Args:
        header_cells: Header row as decoded

    Returns:
        ColumnMap with indices for sku_id, sku_name and (if present) facings

    Raises:
        MissingColumnError: If sku_id or sku_name is absent. Names the first
            missing field; all missing fields are in the error details.
    """
    positions: dict[str, int] = {}
    for index, header in enumerate(header_cells):
        positions.setdefault(normalize_header(header), index)

    missing = [name for name in REQUIRED_COLUMNS if name not in positions]
    if missing:
        logger.warning("required_columns_missing", missing=missing, headers=header_cells)
        raise MissingColumnError(missing[0], missing)

    column_map = ColumnMap(
        sku_id=positions["sku_id"],
        sku_name=positions["sku_name"],
        facings=positions.get("facings"),
    )

    logger.debug(
        "columns_resolved",
        sku_id=column_map.sku_id,
        sku_name=column_map.sku_name,
        facings=column_map.facings,
    )
    return column_map
