"""
SKU catalog service.

Reads the SKUs registered for an organization. Manual entries may only
reference SKUs found here; the pipeline never writes to the catalog.
"""

from typing import Iterable, Optional
import structlog

from config import get_supabase_client, settings
from exceptions import DatabaseError, UnknownSkuError
from models.shop import SkuCatalogEntry

logger = structlog.get_logger(__name__)


class SkuCatalog:
    """
    In-memory, read-only view of an organization's SKUs.

    Keyed by sku_id; if the source lists an id twice the first one is kept.
    """

    def __init__(self, entries: Iterable[SkuCatalogEntry] = ()):
        self._entries: dict[str, SkuCatalogEntry] = {}
        for entry in entries:
            self._entries.setdefault(entry.sku_id, entry)

    def __contains__(self, sku_id: object) -> bool:
        return sku_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[SkuCatalogEntry]:
        """Choices for the manual-entry selector, in source order."""
        return list(self._entries.values())

    def get(self, sku_id: str) -> Optional[SkuCatalogEntry]:
        return self._entries.get(sku_id)

    def require(self, sku_id: str) -> SkuCatalogEntry:
        """
        Look up a SKU chosen for manual entry.

        Raises:
            UnknownSkuError: If the SKU is not registered
        """
        entry = self._entries.get(sku_id)
        if entry is None:
            raise UnknownSkuError(sku_id)
        return entry

    def name_for(self, sku_id: str) -> Optional[str]:
        entry = self._entries.get(sku_id)
        return entry.sku_name if entry else None


class CatalogService:
    """
    Catalog lookups backed by Supabase.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = settings.sku_catalog_table

    def get_catalog(self, org_id: str) -> SkuCatalog:
        """
        Load every SKU registered for an organization.

        Args:
            org_id: Organization identifier

        Returns:
            SkuCatalog for the organization (possibly empty)

        Raises:
            DatabaseError: If the query fails
        """
        logger.info("loading_sku_catalog", org_id=org_id)

        try:
            result = (
                self.db.table(self.table)
                .select("sku_id, sku_name")
                .eq("org_id", org_id)
                .execute()
            )
        except Exception as e:
            logger.error("sku_catalog_load_failed", org_id=org_id, error=str(e))
            raise DatabaseError("select", str(e))

        catalog = SkuCatalog(
            SkuCatalogEntry(sku_id=str(row["sku_id"]), sku_name=row.get("sku_name"))
            for row in result.data
            if row.get("sku_id")
        )

        logger.info("sku_catalog_loaded", org_id=org_id, sku_count=len(catalog))
        return catalog


# Singleton instance
_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    """Get or create CatalogService instance."""
    global _service
    if _service is None:
        _service = CatalogService()
    return _service
