"""
Facings aggregator.

Builds the sku_id → {sku_name, facings} map used for OSA scoring. Unlike the
planogram sequence this is keyed: a repeated sku_id replaces the earlier
entry outright (name and count together). A SKU without an explicit count
is simply absent; no default count is ever inferred.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
import structlog

from exceptions import InvalidFacingsError
from models.facings import FacingEntry
from parsers.normalizer import NormalizedTable

logger = structlog.get_logger(__name__)


@dataclass
class FacingsRowError:
    """Single rejected facings cell."""
    row: int
    sku_id: Optional[str]
    value: Optional[str]
    error: str


@dataclass
class FacingsAggregate:
    """Facings read from a file, plus any rows that failed validation."""
    entries: dict[str, FacingEntry] = field(default_factory=dict)
    errors: list[FacingsRowError] = field(default_factory=list)
    skipped_rows: int = 0

    @property
    def success(self) -> bool:
        """True if no errors occurred."""
        return len(self.errors) == 0

    def error_dicts(self) -> list[dict]:
        return [
            {"row": e.row, "sku_id": e.sku_id, "value": e.value, "error": e.error}
            for e in self.errors
        ]


def parse_facings_count(value: Any, facings_max: Optional[int] = None) -> int:
    """
    Parse a facings count as a non-negative whole number.

    Accepts ints and numeric text with an integral value ("5", " 5 ", "5.0").
    Rejects booleans, fractions, negatives, non-numbers and anything above
    facings_max.

    Raises:
        InvalidFacingsError: If the value is not an acceptable count
    """
    if value is None or isinstance(value, bool):
        raise InvalidFacingsError(value)

    if isinstance(value, int):
        count = value
    else:
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidFacingsError(value)
        if not number.is_finite() or number != number.to_integral_value():
            raise InvalidFacingsError(value)
        count = int(number)

    if count < 0:
        raise InvalidFacingsError(value)
    if facings_max is not None and count > facings_max:
        raise InvalidFacingsError(value)
    return count


def aggregate_facings(
    table: NormalizedTable,
    facings_max: Optional[int] = None,
) -> FacingsAggregate:
    """
    Reduce the normalized table to a facings map.

    Files without a facings column yield an empty map. Rows with no sku_id
    or an empty facings cell are skipped. Later rows win on repeated
    sku_id. Invalid counts are collected, not raised; callers decide
    whether the import stands.
    """
    result = FacingsAggregate()

    if not table.has_facings_column:
        logger.debug("facings_column_absent")
        return result

    for row in table.rows:
        if row.sku_id is None or row.facings is None:
            result.skipped_rows += 1
            continue

        try:
            count = parse_facings_count(row.facings, facings_max)
        except InvalidFacingsError:
            result.errors.append(FacingsRowError(
                row=row.row_number,
                sku_id=row.sku_id,
                value=row.facings,
                error="Must be a whole number between 0 and the facings limit",
            ))
            continue

        if result.entries.pop(row.sku_id, None) is not None:
            logger.debug("facings_row_replaced", sku_id=row.sku_id, row=row.row_number)

        result.entries[row.sku_id] = FacingEntry(
            sku_id=row.sku_id,
            sku_name=row.sku_name,
            facings=count,
        )

    logger.info(
        "facings_aggregated",
        entries=len(result.entries),
        skipped_rows=result.skipped_rows,
        error_count=len(result.errors),
    )
    return result
