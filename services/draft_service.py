"""
Draft service for shop creation.

A ShopDraft holds the planogram sequence and facings map of a shop that is
being set up. File imports replace a structure wholesale; manual edits are
named transitions that validate before they mutate, so a failed operation
always leaves the draft exactly as it was.

Drafts live in memory for the length of the creation session: discarded on
cancel, destroyed after a successful submission.
"""

import uuid
from datetime import datetime, timezone
from typing import Callable, Optional, Union

import structlog

from config import settings
from exceptions import (
    BlankPlanogramRowError,
    DraftNotFoundError,
    DuplicateSkuError,
    FacingNotFoundError,
    FileDecodeError,
    InvalidFacingsError,
    RowIndexError,
    SubmissionInProgressError,
)
from integrations.shop_api import ShopApiClient, get_shop_api_client
from models.facings import FacingEntry
from models.planogram import PlanogramRow
from models.shop import (
    EntryState,
    ImportSummary,
    ShopDraftCreate,
    ShopDraftResponse,
    ShopIdentity,
    SubmissionResponse,
)
from parsers.facings_aggregator import parse_facings_count
from parsers.file_source import FileSource
from parsers.shelf_file_parser import ShelfFileParseResult, parse_shelf_file
from parsers.tabular_decoder import detect_extension
from services.catalog_service import SkuCatalog, get_catalog_service
from services.payload_service import assemble_payload
from utils.text_utils import normalize_cell

logger = structlog.get_logger(__name__)


def _state(size: int) -> EntryState:
    return EntryState.HAS_ENTRIES if size > 0 else EntryState.NO_ENTRIES


class ShopDraft:
    """
    In-progress shop creation record.

    Owns one planogram sequence and one facings map; nothing else holds a
    reference to either.
    """

    def __init__(
        self,
        org_id: str,
        identity: ShopIdentity,
        catalog: SkuCatalog,
        draft_id: Optional[str] = None,
        facings_max: Optional[int] = None,
    ):
        self.id = draft_id or str(uuid.uuid4())
        self.org_id = org_id
        self.identity = identity
        self.catalog = catalog
        self.facings_max = facings_max
        self.planogram: list[PlanogramRow] = []
        self.facings: dict[str, FacingEntry] = {}
        self.opened_at = datetime.now(timezone.utc)
        self.closed = False
        self.submitting = False
        self._import_generation = 0

    # ===================
    # STATE
    # ===================

    @property
    def planogram_state(self) -> EntryState:
        return _state(len(self.planogram))

    @property
    def facings_state(self) -> EntryState:
        return _state(len(self.facings))

    def to_response(self) -> ShopDraftResponse:
        """Snapshot for API responses."""
        return ShopDraftResponse(
            id=self.id,
            org_id=self.org_id,
            identity=self.identity,
            planogram=[row.model_copy() for row in self.planogram],
            facings={sku_id: entry.model_copy() for sku_id, entry in self.facings.items()},
            planogram_state=self.planogram_state,
            facings_state=self.facings_state,
            opened_at=self.opened_at,
        )

    def to_payload(self) -> dict[str, str]:
        """Form fields for the shop-creation endpoint."""
        return assemble_payload(self.org_id, self.identity, self.planogram, self.facings)

    # ===================
    # FILE IMPORT
    # ===================

    def begin_import(self) -> int:
        """Stamp a new import; only the newest stamp may apply its result."""
        self._import_generation += 1
        return self._import_generation

    def is_current_import(self, generation: int) -> bool:
        return not self.closed and generation == self._import_generation

    def apply_import(self, generation: int, result: ShelfFileParseResult) -> bool:
        """
        Replace the draft's structures with a parsed file.

        The planogram is always replaced. Facings are replaced only when the
        file had a facings column; a file without one leaves them alone.
        Facing names missing from the file are filled from the catalog.

        Returns:
            False (and nothing changes) if the draft was closed or a newer
            import has started since this one began
        """
        if not self.is_current_import(generation):
            logger.info(
                "stale_import_ignored",
                draft_id=self.id,
                generation=generation,
                closed=self.closed,
            )
            return False

        facings = None
        if result.has_facings_column:
            facings = {
                sku_id: entry if entry.sku_name is not None
                else entry.model_copy(update={"sku_name": self.catalog.name_for(sku_id)})
                for sku_id, entry in result.facings.items()
            }

        self.planogram = list(result.planogram)
        if facings is not None:
            self.facings = facings

        logger.info(
            "import_applied",
            draft_id=self.id,
            planogram_rows=len(self.planogram),
            facings_entries=len(self.facings),
            facings_replaced=facings is not None,
        )
        return True

    # ===================
    # PLANOGRAM TRANSITIONS
    # ===================

    def add_row(self, sku_id: str) -> PlanogramRow:
        """
        Append a shelf slot for a catalog SKU.

        Raises:
            UnknownSkuError: SKU not in the catalog
        """
        entry = self.catalog.require(sku_id)
        row = PlanogramRow(sku_id=entry.sku_id, sku_name=entry.sku_name)
        self.planogram.append(row)

        logger.info("planogram_row_added", draft_id=self.id, sku_id=sku_id, index=len(self.planogram) - 1)
        return row

    def edit_row(self, index: int, sku_name: Optional[str]) -> PlanogramRow:
        """
        Rename the SKU in an existing slot. Position is untouched.

        Raises:
            RowIndexError: No row at index
            BlankPlanogramRowError: Row has no sku_id and the new name is empty
        """
        self._check_row_index(index)
        name = normalize_cell(sku_name)
        if name is None and self.planogram[index].sku_id is None:
            raise BlankPlanogramRowError(index)
        row = self.planogram[index].model_copy(update={"sku_name": name})
        self.planogram[index] = row

        logger.info("planogram_row_edited", draft_id=self.id, index=index)
        return row

    def remove_row(self, index: int) -> PlanogramRow:
        """
        Delete one slot; the rest keep their relative order.

        Raises:
            RowIndexError: No row at index
        """
        self._check_row_index(index)
        row = self.planogram.pop(index)

        logger.info("planogram_row_removed", draft_id=self.id, index=index, sku_id=row.sku_id)
        return row

    def _check_row_index(self, index: int) -> None:
        # Negative indexes are rejected rather than counted from the end
        if not 0 <= index < len(self.planogram):
            raise RowIndexError(index, len(self.planogram))

    # ===================
    # FACINGS TRANSITIONS
    # ===================

    def add_facing(self, sku_id: str, count: Union[int, float, str]) -> FacingEntry:
        """
        Add expected facings for a SKU not yet in the map.

        Raises:
            UnknownSkuError: SKU not in the catalog
            InvalidFacingsError: count is not a valid facings number
            DuplicateSkuError: SKU already has an entry (use edit_facing)
        """
        catalog_entry = self.catalog.require(sku_id)
        facings = self._parse_count(count, sku_id)
        if sku_id in self.facings:
            raise DuplicateSkuError(sku_id)

        entry = FacingEntry(sku_id=sku_id, sku_name=catalog_entry.sku_name, facings=facings)
        self.facings[sku_id] = entry

        logger.info("facing_added", draft_id=self.id, sku_id=sku_id, facings=facings)
        return entry

    def edit_facing(self, sku_id: str, count: Union[int, float, str]) -> FacingEntry:
        """
        Replace the count of an existing entry; the name is kept.

        Raises:
            FacingNotFoundError: No entry for sku_id
            InvalidFacingsError: count is not a valid facings number
        """
        if sku_id not in self.facings:
            raise FacingNotFoundError(sku_id)
        facings = self._parse_count(count, sku_id)

        entry = self.facings[sku_id].model_copy(update={"facings": facings})
        self.facings[sku_id] = entry

        logger.info("facing_edited", draft_id=self.id, sku_id=sku_id, facings=facings)
        return entry

    def remove_facing(self, sku_id: str) -> FacingEntry:
        """
        Delete an entry outright.

        Raises:
            FacingNotFoundError: No entry for sku_id
        """
        if sku_id not in self.facings:
            raise FacingNotFoundError(sku_id)
        entry = self.facings.pop(sku_id)

        logger.info("facing_removed", draft_id=self.id, sku_id=sku_id)
        return entry

    def _parse_count(self, count: Union[int, float, str], sku_id: str) -> int:
        try:
            return parse_facings_count(count, self.facings_max)
        except InvalidFacingsError as e:
            e.details["sku_id"] = sku_id
            raise


class DraftService:
    """
    Shop draft lifecycle.

    Opens, looks up, imports into, submits and discards drafts. Everything
    runs on one event loop; only reading an upload suspends.
    """

    def __init__(
        self,
        catalog_loader: Optional[Callable[[str], SkuCatalog]] = None,
        shop_api: Optional[ShopApiClient] = None,
    ):
        self._drafts: dict[str, ShopDraft] = {}
        self._catalog_loader = catalog_loader
        self._shop_api = shop_api

    def _load_catalog(self, org_id: str) -> SkuCatalog:
        if self._catalog_loader is not None:
            return self._catalog_loader(org_id)
        return get_catalog_service().get_catalog(org_id)

    # ===================
    # LIFECYCLE
    # ===================

    def open_draft(self, data: ShopDraftCreate, catalog: Optional[SkuCatalog] = None) -> ShopDraft:
        """
        Open an empty draft.

        Args:
            data: Shop identity and owning organization
            catalog: Organization's SKUs (loaded from the catalog service if omitted)

        Returns:
            New ShopDraft with no planogram rows and no facings
        """
        if catalog is None:
            catalog = self._load_catalog(data.org_id)

        draft = ShopDraft(
            org_id=data.org_id,
            identity=ShopIdentity(**data.model_dump(exclude={"org_id"})),
            catalog=catalog,
            facings_max=settings.facings_max,
        )
        self._drafts[draft.id] = draft

        logger.info(
            "draft_opened",
            draft_id=draft.id,
            org_id=data.org_id,
            shop_id=data.shop_id,
            catalog_size=len(catalog),
        )
        return draft

    def get_draft(self, draft_id: str) -> ShopDraft:
        """
        Raises:
            DraftNotFoundError: Unknown, discarded or already submitted
        """
        draft = self._drafts.get(draft_id)
        if draft is None:
            raise DraftNotFoundError(draft_id)
        return draft

    def discard_draft(self, draft_id: str) -> None:
        """
        Cancel a draft. Any import still reading will be ignored when it finishes.

        Raises:
            DraftNotFoundError: Unknown, discarded or already submitted
        """
        draft = self._drafts.pop(draft_id, None)
        if draft is None:
            raise DraftNotFoundError(draft_id)
        draft.closed = True

        logger.info("draft_discarded", draft_id=draft_id)

    # ===================
    # FILE IMPORT
    # ===================

    async def import_file(self, draft_id: str, source: FileSource) -> ImportSummary:
        """
        Read, parse and apply an uploaded planogram file.

        The draft keeps its current structures while the file is being read.
        Any failure leaves them untouched. If the draft is discarded, or
        another import starts, before this read completes, the result is
        dropped and the summary reports applied=False.

        Raises:
            DraftNotFoundError: Unknown draft
            UnsupportedFileTypeError, FileDecodeError, EmptyFileError,
            MissingColumnError, InvalidFacingsError: File rejected
        """
        draft = self.get_draft(draft_id)
        filename = source.filename
        detect_extension(filename)

        generation = draft.begin_import()
        logger.info("import_started", draft_id=draft_id, filename=filename, generation=generation)

        content = await source.read_bytes()

        if not draft.is_current_import(generation):
            logger.info("import_result_ignored", draft_id=draft_id, filename=filename, generation=generation)
            return ImportSummary(draft_id=draft_id, filename=filename, applied=False)

        if len(content) > settings.max_upload_bytes:
            raise FileDecodeError(
                message="File is too large",
                details={"size_bytes": len(content), "max_bytes": settings.max_upload_bytes}
            )

        result = parse_shelf_file(
            content,
            filename,
            delimiter=settings.csv_delimiter,
            facings_max=draft.facings_max,
        )
        applied = draft.apply_import(generation, result)

        return ImportSummary(
            draft_id=draft_id,
            filename=filename,
            applied=applied,
            total_rows=result.total_rows,
            planogram_rows=len(result.planogram),
            dropped_rows=result.dropped_rows,
            facings_entries=len(result.facings),
            has_facings_column=result.has_facings_column,
        )

    # ===================
    # SUBMISSION
    # ===================

    def submit_draft(self, draft_id: str) -> SubmissionResponse:
        """
        Send the assembled payload and destroy the draft on success.

        Raises:
            DraftNotFoundError: Unknown draft
            SubmissionInProgressError: A submission of this draft is still running
            SubmissionError: Endpoint failure, message passed through; the
                draft is kept so the user can retry
        """
        draft = self.get_draft(draft_id)
        if draft.submitting:
            logger.warning("draft_submission_in_progress", draft_id=draft_id)
            raise SubmissionInProgressError(draft_id)

        payload = draft.to_payload()
        shop_api = self._shop_api or get_shop_api_client()

        draft.submitting = True
        try:
            upstream = shop_api.create_shop(payload)
        except Exception as e:
            draft.submitting = False
            logger.warning("draft_submission_failed", draft_id=draft_id, error=str(e))
            raise

        self._drafts.pop(draft_id, None)
        draft.closed = True

        logger.info("draft_submitted", draft_id=draft_id, shop_id=draft.identity.shop_id)
        return SubmissionResponse(
            draft_id=draft_id,
            shop_id=draft.identity.shop_id,
            upstream=upstream,
        )


# Singleton instance
_service: Optional[DraftService] = None


def get_draft_service() -> DraftService:
    """Get or create DraftService instance."""
    global _service
    if _service is None:
        _service = DraftService()
    return _service
