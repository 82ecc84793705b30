"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    ExternalServiceError,
    DatabaseError,

    # File import
    UnsupportedFileTypeError,
    EmptyFileError,
    FileDecodeError,
    MissingColumnError,
    InvalidFacingsError,
    UnknownSkuError,

    # Drafts
    DuplicateSkuError,
    FacingNotFoundError,
    RowIndexError,
    DraftNotFoundError,
    BlankPlanogramRowError,

    # Submission
    SubmissionError,
    SubmissionInProgressError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",
    "DatabaseError",

    # File import
    "UnsupportedFileTypeError",
    "EmptyFileError",
    "FileDecodeError",
    "MissingColumnError",
    "InvalidFacingsError",
    "UnknownSkuError",

    # Drafts
    "DuplicateSkuError",
    "FacingNotFoundError",
    "RowIndexError",
    "DraftNotFoundError",
    "BlankPlanogramRowError",

    # Submission
    "SubmissionError",
    "SubmissionInProgressError",
]
