"""Tests for the list_requests tool handler."""

from tools.list_requests import decorate_items, list_requests
from conftest import fail, ok

SERVICES = "/api/v1/admin-portal/services/requests"


class TestDecorateItems:
    """Tests for decorate_items."""

    def test_adds_label_and_color(self):
        """Test status decoration."""
        items = decorate_items([{"id": 1, "status": "rejected"}], "en")
        assert items[0]["status_label"] == "Rejected"
        assert items[0]["status_color"] == "danger"

    def test_unknown_status(self):
        """Test that unknown statuses keep their code as label."""
        items = decorate_items([{"id": 1, "status": "foo_bar"}], "en")
        assert items[0]["status_label"] == "foo_bar"
        assert items[0]["status_color"] == "neutral"

    def test_items_without_status_unchanged(self):
        """Test records without a status pass through."""
        assert decorate_items([{"id": 1}, "raw"], "en") == [{"id": 1}, "raw"]


class TestListRequests:
    """Tests for list_requests."""

    def test_services_default(self, backend, portal_client):
        """Test the default unified services list."""
        backend.add(
            "GET",
            SERVICES,
            (200, ok([{"id": 1, "status": "new_request"}], pagination={"page": 1, "limit": 10, "total": 1, "totalPages": 1})),
        )

        result = list_requests({"status": "new_request", "search": "  "}, portal_client)

        assert result["collection"] == "services"
        assert result["count"] == 1
        assert result["items"][0]["status_color"] == "info"
        assert result["pagination"] == {"page": 1, "limit": 10, "total": 1, "total_pages": 1}
        assert dict(backend.requests[0].url.params) == {"status": "new_request", "page": "1", "limit": "10"}

    def test_default_limit(self, backend, portal_client):
        """Test the configured page size is used when no limit is given."""
        backend.add("GET", SERVICES, (200, ok([])))
        list_requests({}, portal_client, default_limit=25)
        assert backend.requests[0].url.params["limit"] == "25"

    def test_my_licenses(self, backend, citizen_client):
        """Test the citizen's own requests."""
        backend.add("GET", "/api/v1/licenses/my", (200, ok([{"id": 3, "status": "returned"}])))
        result = list_requests({"collection": "my_licenses", "page": 2, "limit": 5}, citizen_client)
        assert result["items"][0]["id"] == 3
        assert result["pagination"] is None
        assert dict(backend.requests[0].url.params) == {"page": "2", "limit": "5"}

    def test_collection_with_sorting(self, backend, portal_client):
        """Test a generic collection with sort parameters."""
        backend.add("GET", "/api/v1/inspections", (200, ok([])))
        result = list_requests(
            {"collection": "inspections", "sort_by": "created_at", "sort_order": "desc", "license_type": "new"},
            portal_client,
        )
        assert result["items"] == []
        assert dict(backend.requests[0].url.params) == {
            "page": "1",
            "limit": "10",
            "licenseType": "new",
            "sortBy": "created_at",
            "sortOrder": "desc",
        }

    def test_null_data_is_empty(self, backend, portal_client):
        """Test that a null list renders as empty."""
        backend.add("GET", SERVICES, (200, ok(None)))
        assert list_requests({}, portal_client)["items"] == []

    def test_invalid_collection(self, backend, portal_client):
        """Test that unknown collections are rejected without a call."""
        result = list_requests({"collection": "payments"}, portal_client)
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert backend.requests == []

    def test_limit_out_of_range(self, portal_client):
        """Test limit bounds."""
        assert list_requests({"limit": 500}, portal_client)["error"]["code"] == "VALIDATION_ERROR"
        assert list_requests({"page": 0}, portal_client)["error"]["code"] == "VALIDATION_ERROR"

    def test_backend_error(self, backend, portal_client):
        """Test a failing list call."""
        backend.add("GET", SERVICES, (403, fail("forbidden")))
        result = list_requests({}, portal_client)
        assert result["error"]["code"] == "UNAUTHORIZED"
        assert result["error"]["message"] == "forbidden"

    def test_include_stats(self, backend, portal_client):
        """Test that collection counters come back alongside the page."""
        backend.add("GET", "/api/v1/audits", (200, ok([])))
        backend.add("GET", "/api/v1/audits/stats", (200, ok({"total": 3, "pending": 1})))
        result = list_requests({"collection": "audits", "include_stats": True}, portal_client)
        assert result["stats"] == {"total": 3, "pending": 1}
        assert len(backend.requests) == 2

    def test_stats_only_when_requested(self, backend, portal_client):
        """Test that no stats call is made by default."""
        backend.add("GET", "/api/v1/licenses", (200, ok([])))
        result = list_requests({"collection": "licenses"}, portal_client)
        assert "stats" not in result
        assert len(backend.requests) == 1

    def test_services_have_no_collection_stats(self, backend, portal_client):
        """Test include_stats on the unified services list."""
        backend.add("GET", SERVICES, (200, ok([])))
        result = list_requests({"include_stats": True}, portal_client)
        assert result["stats"] is None
        assert len(backend.requests) == 1
