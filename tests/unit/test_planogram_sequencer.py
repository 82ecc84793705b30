"""
Unit tests for the planogram sequencer.

Order, repetition and partial nulls must all survive.
"""

from parsers.normalizer import normalize_grid
from parsers.planogram_sequencer import build_planogram_sequence
from parsers.tabular_decoder import TabularGrid, decode_tabular


def _sequence(rows: list[list[str]], header: list[str] = None):
    grid = TabularGrid(header_cells=header or ["sku_id", "sku_name"], data_rows=rows)
    return build_planogram_sequence(normalize_grid(grid))


class TestBuildPlanogramSequence:
    """Tests for build_planogram_sequence()"""

    def test_one_record_per_row_in_order(self):
        rows = [["C", "Lemonade"], ["A", "Cola"], ["B", "Cola 1.5L"]]

        sequence = _sequence(rows)

        assert [r.sku_id for r in sequence] == ["C", "A", "B"]

    def test_duplicates_all_kept(self):
        """Repeated SKUs are separate shelf slots."""
        rows = [["A", "Cola"], ["A", "Cola"], ["B", "Cola 1.5L"], ["A", "Cola"]]

        sequence = _sequence(rows)

        assert len(sequence) == 4
        assert [r.sku_id for r in sequence] == ["A", "A", "B", "A"]

    def test_missing_id_kept_as_null(self):
        sequence = _sequence([["", "Widget"]])

        assert len(sequence) == 1
        assert sequence[0].sku_id is None
        assert sequence[0].sku_name == "Widget"

    def test_missing_name_kept_as_null(self):
        sequence = _sequence([["SKU1", "N/A"]])

        assert sequence[0].sku_id == "SKU1"
        assert sequence[0].sku_name is None

    def test_all_null_row_dropped(self):
        sequence = _sequence([["nan", "NaN"]])

        assert sequence == []

    def test_values_trimmed(self):
        sequence = _sequence([["  SKU1 ", " Widget  "]])

        assert (sequence[0].sku_id, sequence[0].sku_name) == ("SKU1", "Widget")

    def test_other_columns_ignored(self):
        """A row with only extra-column data still counts as blank."""
        header = ["aisle", "sku_id", "sku_name"]
        sequence = _sequence([["3", "", "none"], ["4", "A", "Cola"]], header=header)

        assert len(sequence) == 1
        assert sequence[0].sku_id == "A"

    def test_scenario_drop_middle_keep_duplicates(self):
        """Middle null row dropped, duplicate SKU1 kept twice, order intact."""
        content = b"sku_id,sku_name\nSKU1,Widget\n,N/A\nSKU1,Widget2"
        grid = decode_tabular(content, ".csv")

        sequence = build_planogram_sequence(normalize_grid(grid))

        assert [r.model_dump() for r in sequence] == [
            {"sku_id": "SKU1", "sku_name": "Widget"},
            {"sku_id": "SKU1", "sku_name": "Widget2"},
        ]

    def test_row_count_matches_non_blank_rows(self):
        rows = [[f"S{i % 3}", f"Name {i}"] for i in range(25)]

        sequence = _sequence(rows)

        assert len(sequence) == 25
        assert [r.sku_name for r in sequence] == [f"Name {i}" for i in range(25)]
