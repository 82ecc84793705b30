"""
Planogram file parsers.

Decode → resolve columns → normalize cells, then split into the ordered
planogram sequence and the keyed facings map.
"""

from parsers.shelf_file_parser import (
    parse_shelf_file,
    ShelfFileParseResult,
)
from parsers.file_source import (
    FileSource,
    BytesFileSource,
    PathFileSource,
    UploadFileSource,
)

__all__ = [
    "parse_shelf_file",
    "ShelfFileParseResult",
    "FileSource",
    "BytesFileSource",
    "PathFileSource",
    "UploadFileSource",
]
