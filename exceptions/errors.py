"""
Custom exception classes for the application.

Every error carries a code, a user-facing message and an HTTP status so the
operation that raised it can surface it without touching draft state.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "MISSING_COLUMN")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None,
        status_code: int = 422
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status_code,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 503
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=status_code,
            details={"service": service, **(details or {})}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# FILE IMPORT ERRORS
# ===================

class UnsupportedFileTypeError(ValidationError):
    """Upload extension is not .csv, .xlsx or .xls."""

    def __init__(self, extension: str, supported: tuple[str, ...] = (".csv", ".xlsx", ".xls")):
        super().__init__(
            code="UNSUPPORTED_FILE_TYPE",
            message=f"Unsupported file type: {extension or '(none)'}",
            status_code=415,
            details={"provided": extension, "supported": list(supported)}
        )
        self.extension = extension


class EmptyFileError(ValidationError):
    """File has no data rows after blank lines are removed."""

    def __init__(self, filename: Optional[str] = None):
        super().__init__(
            code="EMPTY_FILE",
            message="File contains no data rows",
            details={"filename": filename}
        )


class FileDecodeError(ValidationError):
    """File bytes could not be decoded into a table."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="FILE_DECODE_ERROR",
            message=message,
            details=details
        )


class MissingColumnError(ValidationError):
    """Required header absent; the whole import is aborted."""

    def __init__(self, field: str, missing: Optional[list[str]] = None):
        super().__init__(
            code="MISSING_COLUMN",
            message=f"Missing required column: {field}",
            details={"field": field, "missing": missing or [field]}
        )
        self.field = field


class InvalidFacingsError(ValidationError):
    """Facings value is non-numeric, negative or above the configured maximum."""

    def __init__(
        self,
        value: Any = None,
        sku_id: Optional[str] = None,
        errors: Optional[list[dict]] = None
    ):
        if errors:
            message = f"Invalid facings in {len(errors)} row(s)"
        else:
            message = f"Invalid facings value: {value!r}"
        super().__init__(
            code="INVALID_FACINGS",
            message=message,
            details={"value": value, "sku_id": sku_id, "errors": errors or []}
        )


class UnknownSkuError(ValidationError):
    """SKU is not registered in the organization's catalog."""

    def __init__(self, sku_id: str):
        super().__init__(
            code="UNKNOWN_SKU",
            message=f"Unknown SKU: {sku_id}",
            details={"sku_id": sku_id}
        )


# ===================
# DRAFT ERRORS
# ===================

class DuplicateSkuError(ConflictError):
    """Manual add targets a SKU already present in the facings map."""

    def __init__(self, sku_id: str):
        super().__init__(
            code="DUPLICATE_SKU",
            message=f"Facings for SKU {sku_id} already exist; edit the entry instead",
            details={"sku_id": sku_id}
        )
        self.sku_id = sku_id


class FacingNotFoundError(NotFoundError):
    """Edit or remove targets a SKU with no facings entry."""

    def __init__(self, sku_id: str):
        super().__init__(
            resource="Facing entry",
            identifier=sku_id,
            code="FACING_NOT_FOUND"
        )


class RowIndexError(NotFoundError):
    """Planogram row index out of range."""

    def __init__(self, index: int, size: int):
        super().__init__(
            resource="Planogram row",
            identifier=str(index),
            code="PLANOGRAM_ROW_NOT_FOUND"
        )
        self.details["size"] = size


class DraftNotFoundError(NotFoundError):
    """Draft does not exist or was already discarded/submitted."""

    def __init__(self, draft_id: str):
        super().__init__(
            resource="Shop draft",
            identifier=draft_id,
            code="DRAFT_NOT_FOUND"
        )


class BlankPlanogramRowError(ValidationError):
    """Edit would leave a planogram row with neither id nor name."""

    def __init__(self, index: int):
        super().__init__(
            code="BLANK_PLANOGRAM_ROW",
            message="A planogram row needs a SKU id or a name; remove the row instead",
            details={"index": index}
        )


# ===================
# SUBMISSION ERRORS
# ===================

class SubmissionError(ExternalServiceError):
    """Shop-creation endpoint rejected the payload; message passed through verbatim."""

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(
            service="shop_api",
            message=message,
            status_code=502,
            details={"upstream_status": upstream_status}
        )
        self.upstream_status = upstream_status


class SubmissionInProgressError(ConflictError):
    """Draft is already being submitted."""

    def __init__(self, draft_id: str):
        super().__init__(
            code="SUBMISSION_IN_PROGRESS",
            message="This draft is already being submitted",
            details={"draft_id": draft_id}
        )
