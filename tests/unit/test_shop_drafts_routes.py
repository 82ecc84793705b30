"""
Unit tests for the shop draft API routes.
"""

import pytest
from unittest.mock import MagicMock, patch

from config import get_supabase_client, settings
from exceptions import SubmissionError
from tests.factories import ShelfFileFactory


DRAFT_BODY = {
    "org_id": "org-1",
    "shop_id": "shop-001",
    "shop_name": "Corner Market",
    "shop_location": "12 High Street",
    "shop_type": "convenience",
}


@pytest.fixture
def draft_id(test_client) -> str:
    """Open a draft through the API."""
    response = test_client.post("/api/shop-drafts", json=DRAFT_BODY)
    return response.json()["id"]


def _upload(test_client, draft_id, content, filename="planogram.csv"):
    return test_client.post(
        f"/api/shop-drafts/{draft_id}/upload",
        files={"file": (filename, content, "application/octet-stream")},
    )


class TestDraftEndpoints:
    """Tests for draft lifecycle endpoints."""

    def test_open_draft(self, test_client):
        response = test_client.post("/api/shop-drafts", json=DRAFT_BODY)

        assert response.status_code == 201
        data = response.json()
        assert data["planogram"] == []
        assert data["facings"] == {}
        assert data["planogram_state"] == "no_entries"

    def test_open_draft_requires_identity(self, test_client):
        body = {**DRAFT_BODY, "shop_name": ""}

        response = test_client.post("/api/shop-drafts", json=body)

        assert response.status_code == 422

    def test_open_draft_without_catalog_configured(self, test_client, draft_service):
        """A missing Supabase config is reported, not hidden behind a 500."""
        draft_service._catalog_loader = None
        get_supabase_client.cache_clear()

        with patch.object(settings, "supabase_url", None), \
                patch("services.catalog_service._service", None):
            response = test_client.post("/api/shop-drafts", json=DRAFT_BODY)

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SUPABASE_ERROR"

    def test_get_unknown_draft(self, test_client):
        response = test_client.get("/api/shop-drafts/missing")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DRAFT_NOT_FOUND"

    def test_discard_draft(self, test_client, draft_id):
        response = test_client.delete(f"/api/shop-drafts/{draft_id}")

        assert response.status_code == 204
        assert test_client.get(f"/api/shop-drafts/{draft_id}").status_code == 404

    def test_catalog_listing(self, test_client, draft_id):
        response = test_client.get(f"/api/shop-drafts/{draft_id}/catalog")

        assert response.status_code == 200
        assert [e["sku_id"] for e in response.json()] == ["A", "B", "C", "SKU1"]


class TestUploadEndpoint:
    """Tests for POST /api/shop-drafts/{id}/upload"""

    def test_upload_csv(self, test_client, draft_id):
        content = ShelfFileFactory.csv(
            [["A", "Cola", "4"], ["", "N/A", ""], ["A", "Cola", "6"]],
            header=["sku_id", "sku_name", "facings"],
        )

        response = _upload(test_client, draft_id, content)

        assert response.status_code == 200
        summary = response.json()
        assert summary["applied"] is True
        assert summary["planogram_rows"] == 2
        assert summary["dropped_rows"] == 1

        draft = test_client.get(f"/api/shop-drafts/{draft_id}").json()
        assert draft["facings"]["A"]["facings"] == 6

    def test_upload_unsupported_type(self, test_client, draft_id):
        response = _upload(test_client, draft_id, b"whatever", filename="layout.pdf")

        assert response.status_code == 415
        assert response.json()["error"]["code"] == "UNSUPPORTED_FILE_TYPE"

    def test_upload_missing_column(self, test_client, draft_id):
        content = ShelfFileFactory.csv([["A"]], header=["sku_id"])

        response = _upload(test_client, draft_id, content)

        assert response.status_code == 422
        assert response.json()["error"]["details"]["field"] == "sku_name"

    def test_upload_empty_file(self, test_client, draft_id):
        response = _upload(test_client, draft_id, b"sku_id,sku_name\n")

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "EMPTY_FILE"


class TestManualEntryEndpoints:
    """Tests for planogram and facings edit endpoints."""

    def test_planogram_row_lifecycle(self, test_client, draft_id):
        base = f"/api/shop-drafts/{draft_id}/planogram"

        assert test_client.post(base, json={"sku_id": "A"}).status_code == 201
        assert test_client.post(base, json={"sku_id": "B"}).status_code == 201

        response = test_client.patch(f"{base}/0", json={"sku_name": "Cola Classic"})
        assert response.json() == {"sku_id": "A", "sku_name": "Cola Classic"}

        response = test_client.delete(f"{base}/1")
        assert response.json()["sku_id"] == "B"

        draft = test_client.get(f"/api/shop-drafts/{draft_id}").json()
        assert draft["planogram"] == [{"sku_id": "A", "sku_name": "Cola Classic"}]

    def test_add_unknown_sku(self, test_client, draft_id):
        response = test_client.post(f"/api/shop-drafts/{draft_id}/planogram", json={"sku_id": "ZZZ"})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "UNKNOWN_SKU"

    def test_row_out_of_range(self, test_client, draft_id):
        response = test_client.delete(f"/api/shop-drafts/{draft_id}/planogram/3")

        assert response.status_code == 404

    def test_facings_lifecycle(self, test_client, draft_id):
        base = f"/api/shop-drafts/{draft_id}/facings"

        assert test_client.post(base, json={"sku_id": "A", "facings": 5}).status_code == 201
        assert test_client.post(base, json={"sku_id": "B", "facings": "3"}).status_code == 201

        response = test_client.patch(f"{base}/A", json={"facings": 7})
        assert response.json()["facings"] == 7

        draft = test_client.get(f"/api/shop-drafts/{draft_id}").json()
        assert {k: v["facings"] for k, v in draft["facings"].items()} == {"A": 7, "B": 3}

        assert test_client.delete(f"{base}/B").status_code == 200

    def test_duplicate_facing(self, test_client, draft_id):
        base = f"/api/shop-drafts/{draft_id}/facings"
        test_client.post(base, json={"sku_id": "A", "facings": 5})

        response = test_client.post(base, json={"sku_id": "A", "facings": 9})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_SKU"

    def test_invalid_facing_count(self, test_client, draft_id):
        response = test_client.post(
            f"/api/shop-drafts/{draft_id}/facings",
            json={"sku_id": "A", "facings": "abc"},
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "INVALID_FACINGS"

    @pytest.mark.parametrize("count", [True, False])
    def test_boolean_facing_count_rejected(self, test_client, draft_id, count):
        """JSON booleans are not facings counts."""
        base = f"/api/shop-drafts/{draft_id}/facings"

        response = test_client.post(base, json={"sku_id": "A", "facings": count})

        assert response.status_code == 422
        draft = test_client.get(f"/api/shop-drafts/{draft_id}").json()
        assert draft["facings"] == {}

    def test_boolean_facing_edit_rejected(self, test_client, draft_id):
        base = f"/api/shop-drafts/{draft_id}/facings"
        test_client.post(base, json={"sku_id": "A", "facings": 5})

        response = test_client.patch(f"{base}/A", json={"facings": True})

        assert response.status_code == 422
        assert test_client.get(f"/api/shop-drafts/{draft_id}").json()["facings"]["A"]["facings"] == 5

    def test_whole_float_facing_count_accepted(self, test_client, draft_id):
        response = test_client.post(
            f"/api/shop-drafts/{draft_id}/facings",
            json={"sku_id": "A", "facings": 5.0},
        )

        assert response.status_code == 201
        assert response.json()["facings"] == 5

    def test_edit_missing_facing(self, test_client, draft_id):
        response = test_client.patch(f"/api/shop-drafts/{draft_id}/facings/A", json={"facings": 2})

        assert response.status_code == 404


class TestSubmissionEndpoints:
    """Tests for payload preview and submission."""

    def test_payload_preview_omits_empty_structures(self, test_client, draft_id):
        response = test_client.get(f"/api/shop-drafts/{draft_id}/payload")

        payload = response.json()
        assert payload["shop_id"] == "shop-001"
        assert "planogram_data" not in payload
        assert "facings_data" not in payload

    def test_submit_success(self, test_client, draft_service, draft_id):
        shop_api = MagicMock()
        shop_api.create_shop.return_value = {"id": "shop-001"}
        draft_service._shop_api = shop_api

        response = test_client.post(f"/api/shop-drafts/{draft_id}/submit")

        assert response.status_code == 200
        assert response.json()["upstream"] == {"id": "shop-001"}
        assert test_client.get(f"/api/shop-drafts/{draft_id}").status_code == 404

    def test_submit_failure_keeps_draft(self, test_client, draft_service, draft_id):
        shop_api = MagicMock()
        shop_api.create_shop.side_effect = SubmissionError("Shop ID already exists", upstream_status=409)
        draft_service._shop_api = shop_api

        response = test_client.post(f"/api/shop-drafts/{draft_id}/submit")

        assert response.status_code == 502
        assert response.json()["error"]["message"] == "Shop ID already exists"
        assert test_client.get(f"/api/shop-drafts/{draft_id}").status_code == 200
