"""
Shared normalization stage.

Resolves columns once and runs every cell either reader needs through the
same null-like rule. The planogram sequencer and the facings aggregator
both consume the NormalizedTable built here, so a cell that one treats as
empty is empty for the other too.
"""

from dataclasses import dataclass, field
from typing import Optional

from parsers.column_resolver import ColumnMap, resolve_columns
from parsers.tabular_decoder import TabularGrid
from utils.text_utils import normalize_cell


@dataclass(frozen=True)
class NormalizedRow:
    """Data row after column resolution and sentinel normalization."""
    row_number: int  # 1-indexed file row (header is row 1)
    sku_id: Optional[str]
    sku_name: Optional[str]
    facings: Optional[str] = None

    @property
    def is_blank(self) -> bool:
        """Both identifying fields are null-like."""
        return self.sku_id is None and self.sku_name is None


@dataclass
class NormalizedTable:
    """Every data row of an upload, normalized, in file order."""
    columns: ColumnMap
    rows: list[NormalizedRow] = field(default_factory=list)

    @property
    def has_facings_column(self) -> bool:
        return self.columns.has_facings


def normalize_grid(grid: TabularGrid) -> NormalizedTable:
    """
    Build the normalized table for a decoded grid.

    Raises:
        MissingColumnError: If a required header is absent (nothing is built)
    """
    columns = resolve_columns(grid.header_cells)
    table = NormalizedTable(columns=columns)

    for row_index in range(len(grid.data_rows)):
        facings = None
        if columns.has_facings:
            facings = normalize_cell(grid.cell(row_index, columns.facings).raw)

        table.rows.append(NormalizedRow(
            row_number=row_index + 2,
            sku_id=normalize_cell(grid.cell(row_index, columns.sku_id).raw),
            sku_name=normalize_cell(grid.cell(row_index, columns.sku_name).raw),
            facings=facings,
        ))

    return table
