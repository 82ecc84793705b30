"""
Shelf file parser.

Runs an uploaded planogram file through the whole preparation pipeline:
decode → resolve columns → normalize → {planogram sequence, facings map}.
Either the whole file is accepted or an error is raised; nothing partial
ever comes out.
"""

from dataclasses import dataclass, field
from typing import Optional
import structlog

from exceptions import InvalidFacingsError
from models.facings import FacingEntry
from models.planogram import PlanogramRow
from parsers.facings_aggregator import aggregate_facings
from parsers.normalizer import normalize_grid
from parsers.planogram_sequencer import build_planogram_sequence
from parsers.tabular_decoder import decode_tabular, detect_extension

logger = structlog.get_logger(__name__)


@dataclass
class ShelfFileParseResult:
    """Both structures produced from one upload."""
    planogram: list[PlanogramRow] = field(default_factory=list)
    facings: dict[str, FacingEntry] = field(default_factory=dict)
    total_rows: int = 0
    has_facings_column: bool = False

    @property
    def dropped_rows(self) -> int:
        """Rows with neither sku_id nor sku_name."""
        return self.total_rows - len(self.planogram)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "planogram": [row.model_dump() for row in self.planogram],
            "facings": {
                sku_id: entry.model_dump(exclude={"sku_id"})
                for sku_id, entry in self.facings.items()
            },
            "total_rows": self.total_rows,
            "dropped_rows": self.dropped_rows,
            "has_facings_column": self.has_facings_column,
        }


def parse_shelf_file(
    content: bytes,
    filename: Optional[str],
    delimiter: str = ",",
    facings_max: Optional[int] = None,
) -> ShelfFileParseResult:
    """
    Parse a planogram upload.

    Args:
        content: Raw file bytes
        filename: Original filename; its extension picks the decoder
        delimiter: Field separator for .csv files
        facings_max: Highest facings count accepted (None = no limit)

    Returns:
        ShelfFileParseResult with the planogram sequence and facings map

    Raises:
        UnsupportedFileTypeError: Extension is not .csv/.xlsx/.xls
        FileDecodeError: Bytes are not a readable table
        EmptyFileError: No data rows
        MissingColumnError: sku_id or sku_name header absent
        InvalidFacingsError: Any facings cell is not a valid count
    """
    extension = detect_extension(filename)
    grid = decode_tabular(content, extension, delimiter=delimiter, filename=filename)
    table = normalize_grid(grid)

    planogram = build_planogram_sequence(table)
    facings = aggregate_facings(table, facings_max=facings_max)

    if not facings.success:
        logger.warning(
            "facings_rejected",
            filename=filename,
            error_count=len(facings.errors),
        )
        raise InvalidFacingsError(errors=facings.error_dicts())

    result = ShelfFileParseResult(
        planogram=planogram,
        facings=facings.entries,
        total_rows=len(table.rows),
        has_facings_column=table.has_facings_column,
    )

    logger.info(
        "shelf_file_parsed",
        filename=filename,
        total_rows=result.total_rows,
        planogram_rows=len(result.planogram),
        dropped_rows=result.dropped_rows,
        facings_entries=len(result.facings),
    )
    return result
