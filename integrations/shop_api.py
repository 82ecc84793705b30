"""
Shop-creation endpoint client.

Posts an assembled draft payload as multipart form fields. Failures are
surfaced with the endpoint's own message, unmodified. No retries: a
re-submission is always an explicit user action.
"""

from typing import Any, Optional
import requests
import structlog

from config import settings
from exceptions import SubmissionError

logger = structlog.get_logger(__name__)


class ShopApiClient:
    """Thin wrapper around the shop-creation endpoint."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or settings.shop_api_url
        self.timeout = timeout or settings.shop_api_timeout_seconds
        self.session = session or requests.Session()

    def create_shop(self, form_fields: dict[str, str]) -> Any:
        """
        Submit a shop payload.

        Args:
            form_fields: Output of assemble_payload()

        Returns:
            Parsed JSON response body (or raw text if not JSON)

        Raises:
            SubmissionError: Endpoint unreachable or returned a non-2xx status
        """
        if not self.url:
            logger.warning("shop_api_not_configured")
            raise SubmissionError("Shop API is not configured (SHOP_API_URL)")

        # (None, value) makes requests send each field as a multipart part
        files = {name: (None, value) for name, value in form_fields.items()}

        try:
            logger.info(
                "submitting_shop",
                shop_id=form_fields.get("shop_id"),
                has_planogram="planogram_data" in form_fields,
                has_facings="facings_data" in form_fields,
            )
            response = self.session.post(self.url, files=files, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("shop_api_request_failed", error=str(e))
            raise SubmissionError(str(e))

        if not response.ok:
            message = extract_error_message(response)
            logger.error(
                "shop_api_rejected",
                status_code=response.status_code,
                error=message,
            )
            raise SubmissionError(message, upstream_status=response.status_code)

        logger.info("shop_submitted", shop_id=form_fields.get("shop_id"), status_code=response.status_code)

        try:
            return response.json()
        except ValueError:
            return response.text


def extract_error_message(response: requests.Response) -> str:
    """
    The endpoint's own failure reason.

    Looks for detail / message / error.message in a JSON body, falling back
    to the raw body, then the HTTP reason phrase.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("detail", "message"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str) and error:
            return error

    return response.text or response.reason or f"HTTP {response.status_code}"


# Singleton instance
_client: Optional[ShopApiClient] = None


def get_shop_api_client() -> ShopApiClient:
    """Get or create ShopApiClient instance."""
    global _client
    if _client is None:
        _client = ShopApiClient()
    return _client
