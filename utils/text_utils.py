"""
Text utilities for cleaning spreadsheet cells.

Shared by the planogram and facings readers so both agree on what
counts as an empty cell.
"""

from typing import Any, Optional


# Compared after strip() + casefold(); "" covers blank and whitespace-only cells
NULL_SENTINELS = frozenset({"nan", "n/a", "na", "null", "none", ""})


def is_null_like(value: Any) -> bool:
    """
    Check whether a cell value represents missing data.

    Examples:
        - None → True
        - "  NaN " → True
        - "N/A" → True
        - "0" → False
    """
    if value is None:
        return True
    return str(value).strip().casefold() in NULL_SENTINELS


def normalize_cell(value: Any) -> Optional[str]:
    """
    Normalize a raw cell to its trimmed text, or None if null-like.

    - "  SKU-1 " → "SKU-1"
    - "None" → None
    - "" → None

    Args:
        value: Raw cell value as decoded (usually a string)

    Returns:
        Trimmed original string, or None for null-like sentinels
    """
    if is_null_like(value):
        return None
    return str(value).strip()


def normalize_header(header: Any) -> str:
    """Comparison key for a header cell (trimmed, lower-cased)."""
    if header is None:
        return ""
    return str(header).strip().lower()
