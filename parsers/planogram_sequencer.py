"""
Planogram sequencer.

Shelf order is what PGC scoring compares against, so the sequence keeps
rows exactly as they appear: same order, repeated SKUs kept, partial nulls
kept. Only rows with neither an id nor a name are dropped.
"""

from models.planogram import PlanogramRow
from parsers.normalizer import NormalizedTable


def build_planogram_sequence(table: NormalizedTable) -> list[PlanogramRow]:
    """
    One PlanogramRow per non-blank row, in file order.

    No deduplication and no sorting.
    """
    return [
        PlanogramRow(sku_id=row.sku_id, sku_name=row.sku_name)
        for row in table.rows
        if not row.is_blank
    ]
