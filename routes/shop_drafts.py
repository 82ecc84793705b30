"""
Shop draft API routes.

Endpoints for building a shop's planogram and facings before creation:
open a draft, import a file, apply manual edits, preview and submit.
"""

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse, Response
import structlog

from exceptions import AppError
from models.facings import FacingCreate, FacingEntry, FacingUpdate
from models.planogram import PlanogramRow, PlanogramRowCreate, PlanogramRowUpdate
from models.shop import (
    ImportSummary,
    ShopDraftCreate,
    ShopDraftResponse,
    SkuCatalogEntry,
    SubmissionResponse,
)
from parsers.file_source import UploadFileSource
from services.draft_service import get_draft_service

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/shop-drafts", tags=["Shop Drafts"])


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# DRAFT LIFECYCLE
# ===================

@router.post("", response_model=ShopDraftResponse, status_code=201)
async def open_draft(data: ShopDraftCreate):
    """
    Open an empty draft for a new shop.

    Loads the organization's SKU catalog for manual entry.
    """
    try:
        draft = get_draft_service().open_draft(data)
        return draft.to_response()
    except Exception as e:
        return handle_error(e)


@router.get("/{draft_id}", response_model=ShopDraftResponse)
async def get_draft(draft_id: str):
    """
    Get the current planogram and facings of a draft.

    Raises:
        404: Draft not found
    """
    try:
        return get_draft_service().get_draft(draft_id).to_response()
    except Exception as e:
        return handle_error(e)


@router.delete("/{draft_id}", status_code=204, response_class=Response)
async def discard_draft(draft_id: str):
    """
    Cancel a draft. An upload still in flight is ignored when it finishes.

    Raises:
        404: Draft not found
    """
    try:
        get_draft_service().discard_draft(draft_id)
    except Exception as e:
        return handle_error(e)


@router.get("/{draft_id}/catalog", response_model=list[SkuCatalogEntry])
async def get_catalog(draft_id: str):
    """SKUs available for manual entry on this draft."""
    try:
        return get_draft_service().get_draft(draft_id).catalog.entries
    except Exception as e:
        return handle_error(e)


# ===================
# FILE IMPORT
# ===================

@router.post("/{draft_id}/upload", response_model=ImportSummary)
async def upload_planogram(draft_id: str, file: UploadFile = File(...)):
    """
    Import a planogram file (.csv, .xlsx, .xls).

    Replaces the planogram, and the facings too when the file has a
    facings column. The whole file is accepted or nothing changes.

    Raises:
        415: Unsupported file type
        422: Empty file, missing column, invalid facings
    """
    logger.info(
        "planogram_upload_started",
        draft_id=draft_id,
        filename=file.filename,
        content_type=file.content_type
    )

    try:
        return await get_draft_service().import_file(draft_id, UploadFileSource(file))
    except Exception as e:
        return handle_error(e)


# ===================
# PLANOGRAM ROWS
# ===================

@router.post("/{draft_id}/planogram", response_model=PlanogramRow, status_code=201)
async def add_planogram_row(draft_id: str, data: PlanogramRowCreate):
    """
    Append a shelf slot.

    Raises:
        422: SKU not in catalog
    """
    try:
        return get_draft_service().get_draft(draft_id).add_row(data.sku_id)
    except Exception as e:
        return handle_error(e)


@router.patch("/{draft_id}/planogram/{index}", response_model=PlanogramRow)
async def edit_planogram_row(draft_id: str, index: int, data: PlanogramRowUpdate):
    """
    Rename the SKU in a slot.

    Raises:
        404: No row at index
        422: Row would have neither id nor name
    """
    try:
        return get_draft_service().get_draft(draft_id).edit_row(index, data.sku_name)
    except Exception as e:
        return handle_error(e)


@router.delete("/{draft_id}/planogram/{index}", response_model=PlanogramRow)
async def remove_planogram_row(draft_id: str, index: int):
    """
    Remove a slot.

    Raises:
        404: No row at index
    """
    try:
        return get_draft_service().get_draft(draft_id).remove_row(index)
    except Exception as e:
        return handle_error(e)


# ===================
# FACINGS
# ===================

@router.post("/{draft_id}/facings", response_model=FacingEntry, status_code=201)
async def add_facing(draft_id: str, data: FacingCreate):
    """
    Add expected facings for a SKU.

    Raises:
        409: SKU already has facings
        422: SKU not in catalog or invalid count
    """
    try:
        return get_draft_service().get_draft(draft_id).add_facing(data.sku_id, data.facings)
    except Exception as e:
        return handle_error(e)


@router.patch("/{draft_id}/facings/{sku_id}", response_model=FacingEntry)
async def edit_facing(draft_id: str, sku_id: str, data: FacingUpdate):
    """
    Change the facings count of an existing entry.

    Raises:
        404: No entry for sku_id
        422: Invalid count
    """
    try:
        return get_draft_service().get_draft(draft_id).edit_facing(sku_id, data.facings)
    except Exception as e:
        return handle_error(e)


@router.delete("/{draft_id}/facings/{sku_id}", response_model=FacingEntry)
async def remove_facing(draft_id: str, sku_id: str):
    """
    Remove a facings entry.

    Raises:
        404: No entry for sku_id
    """
    try:
        return get_draft_service().get_draft(draft_id).remove_facing(sku_id)
    except Exception as e:
        return handle_error(e)


# ===================
# PAYLOAD & SUBMISSION
# ===================

@router.get("/{draft_id}/payload")
async def preview_payload(draft_id: str):
    """Form fields that submission would send."""
    try:
        return get_draft_service().get_draft(draft_id).to_payload()
    except Exception as e:
        return handle_error(e)


@router.post("/{draft_id}/submit", response_model=SubmissionResponse)
async def submit_draft(draft_id: str):
    """
    Create the shop. The draft is destroyed on success.

    Raises:
        404: Draft not found
        409: Draft is already being submitted
        502: Shop API rejected the payload (its message is returned as-is)
    """
    try:
        return get_draft_service().submit_draft(draft_id)
    except Exception as e:
        return handle_error(e)
