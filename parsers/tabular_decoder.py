"""
Tabular decoder for planogram uploads.

Turns raw .csv / .xlsx / .xls bytes into a header row plus data rows of
untrimmed text cells. No business rules live here: both file types leave
this module in the same TabularGrid shape.
"""

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import PurePath
from typing import Optional
import structlog

import pandas as pd
from pandas.errors import EmptyDataError, ParserError

from exceptions import EmptyFileError, FileDecodeError, UnsupportedFileTypeError

logger = structlog.get_logger(__name__)


SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")

# Tried in order; latin-1 accepts any byte sequence
CSV_ENCODINGS = ("utf-8-sig", "latin-1")

EXCEL_ENGINES = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}


# ===================
# DATA CLASSES
# ===================

@dataclass(frozen=True)
class RawCell:
    """A cell exactly as decoded."""
    row_index: int
    column_index: int
    raw: str = ""


@dataclass
class TabularGrid:
    """Decoded file: header cells plus data rows, all text."""
    header_cells: list[str]
    data_rows: list[list[str]] = field(default_factory=list)

    def cell(self, row_index: int, column_index: int) -> RawCell:
        """Cell at (data row, column); short rows read as empty."""
        row = self.data_rows[row_index]
        raw = row[column_index] if column_index < len(row) else ""
        return RawCell(row_index=row_index, column_index=column_index, raw=raw)


# ===================
# MAIN DECODER
# ===================

def detect_extension(filename: Optional[str]) -> str:
    """
    Lower-cased extension of an upload, validated against the supported set.

    Raises:
        UnsupportedFileTypeError: If the extension is missing or unknown
    """
    extension = PurePath(filename or "").suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(extension, SUPPORTED_EXTENSIONS)
    return extension


def decode_tabular(
    content: bytes,
    extension: str,
    delimiter: str = ",",
    filename: Optional[str] = None,
) -> TabularGrid:
    """
    Decode file bytes into a TabularGrid.

    Args:
        content: Raw file bytes
        extension: ".csv", ".xlsx" or ".xls" (case-insensitive)
        delimiter: Field separator for delimited text
        filename: Original filename, for logging and error details

    Returns:
        TabularGrid with the first non-blank line as header

    Raises:
        UnsupportedFileTypeError: Unknown extension
        FileDecodeError: Bytes are not a readable table
        EmptyFileError: No data rows remain after blank lines are removed
    """
    extension = extension.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(extension, SUPPORTED_EXTENSIONS)

    logger.info("decoding_file", filename=filename, extension=extension, size_bytes=len(content))

    if extension == ".csv":
        rows = _decode_delimited(content, delimiter)
    else:
        rows = _decode_workbook(content, EXCEL_ENGINES[extension])

    # Blank lines never reach the resolver, whichever format they came from
    rows = [row for row in rows if "".join(row).strip() != ""]

    if len(rows) < 2:
        logger.warning("file_empty", filename=filename, line_count=len(rows))
        raise EmptyFileError(filename)

    grid = TabularGrid(header_cells=rows[0], data_rows=rows[1:])

    logger.info(
        "file_decoded",
        filename=filename,
        columns=len(grid.header_cells),
        data_rows=len(grid.data_rows),
    )
    return grid


# ===================
# HELPER FUNCTIONS
# ===================

def _decode_delimited(content: bytes, delimiter: str) -> list[list[str]]:
    """
    Read delimited text with pandas, every cell kept as untrimmed text.

    The first line sets the width. Cells past it (trailing delimiters in
    spreadsheet exports) are dropped; short rows read as empty.
    """
    last_error = None

    for encoding in CSV_ENCODINGS:
        try:
            width = _first_row_width(content, delimiter, encoding)
            df = pd.read_csv(
                BytesIO(content),
                sep=delimiter,
                header=None,
                dtype=str,
                keep_default_na=False,
                na_filter=False,
                skip_blank_lines=True,
                encoding=encoding,
                engine="python",
                on_bad_lines=lambda fields: fields[:width],
            )
        except EmptyDataError:
            return []
        except UnicodeDecodeError as e:
            last_error = e
            continue
        except ParserError as e:
            logger.error("csv_parse_failed", error=str(e))
            raise FileDecodeError(
                message="Malformed delimited file",
                details={"original_error": str(e)}
            )

        logger.debug("csv_loaded", encoding=encoding, separator=delimiter, columns=len(df.columns))
        return _frame_to_rows(df)

    raise FileDecodeError(
        message="Could not decode file text",
        details={"original_error": str(last_error)}
    )


def _first_row_width(content: bytes, delimiter: str, encoding: str) -> int:
    """Number of cells in the first non-blank line."""
    head = pd.read_csv(
        BytesIO(content),
        sep=delimiter,
        header=None,
        nrows=1,
        dtype=str,
        skip_blank_lines=True,
        encoding=encoding,
        engine="python",
    )
    return len(head.columns)


def _decode_workbook(content: bytes, engine: str) -> list[list[str]]:
    """Read the first sheet of a workbook, every cell as text."""
    try:
        df = pd.read_excel(
            BytesIO(content),
            sheet_name=0,
            header=None,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            engine=engine,
        )
    except Exception as e:
        logger.error("excel_read_failed", engine=engine, error=str(e))
        raise FileDecodeError(
            message="Failed to read spreadsheet",
            details={"engine": engine, "original_error": str(e)}
        )

    logger.debug("excel_loaded", engine=engine, columns=len(df.columns))
    return _frame_to_rows(df)


def _frame_to_rows(df: pd.DataFrame) -> list[list[str]]:
    """Header-less DataFrame to a list of string rows (missing cells → "")."""
    df = df.fillna("")
    return [[str(value) for value in row] for row in df.itertuples(index=False, name=None)]
