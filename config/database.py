"""
Database connection management.

Provides the Supabase client singleton used for SKU catalog lookups.
The pipeline only reads from the database; it never writes.
"""

from supabase import create_client, Client
from functools import lru_cache
import structlog

from config.settings import settings
from exceptions import ExternalServiceError

logger = structlog.get_logger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance.

    Uses lru_cache to ensure only one client is created.
    Call get_supabase_client.cache_clear() to reconnect.

    Returns:
        Client: Supabase client

    Raises:
        ExternalServiceError: If Supabase is not configured or the connection fails
    """
    if not settings.catalog_configured:
        logger.error("supabase_not_configured")
        raise ExternalServiceError(
            service="supabase",
            message="SKU catalog is not configured (SUPABASE_URL / SUPABASE_KEY)"
        )

    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )

        client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )

        logger.info(
            "supabase_connected",
            status="success"
        )

        return client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise ExternalServiceError(
            service="supabase",
            message=f"Failed to connect to Supabase: {e}"
        ) from e


# ===================
# HELPER FUNCTIONS
# ===================

def check_connection() -> dict:
    """
    Check catalog database health.

    Returns:
        dict: Connection status with details
    """
    if not settings.catalog_configured:
        return {"status": "not_configured"}

    try:
        client = get_supabase_client()
        skus = client.table(settings.sku_catalog_table).select("sku_id", count="exact").execute()

        return {
            "status": "healthy",
            "skus_count": skus.count
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }
