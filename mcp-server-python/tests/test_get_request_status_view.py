"""
Tests for the get_request_status_view tool handler.
"""

import pytest

from api.sessions import SessionScope
from tools.get_request_status_view import get_request_status_view
from utils.query_cache import detail_query_key
from conftest import fail, ok

DETAIL_PATH = "/api/v1/admin-portal/services/requests/5"
MY_DETAIL_PATH = "/api/v1/licenses/5"


def record(status="new_request", **extra):
    data = {
        "id": 5,
        "request_number": "REQ-2024-0005",
        "license_type": "new",
        "status": status,
        "title": "Solar Farm Korat",
        "user_id": 7,
    }
    data.update(extra)
    return data


class TestPortalView:
    """Tests for the officer view."""

    def test_found(self, backend, portal_client, cache):
        """Test the officer sees the status block and officer actions."""
        backend.add("GET", DETAIL_PATH, (200, ok(record())))

        result = get_request_status_view({"request_id": 5, "locale": "en"}, portal_client, cache)

        assert result["found"] is True
        assert result["request"]["request_number"] == "REQ-2024-0005"
        assert result["status"]["code"] == "new_request"
        assert result["status"]["label"] == "New request"
        assert result["actor_role"] == "officer"
        assert result["is_submitter"] is False
        assert result["available_actions"] == ["accept", "reject", "assign", "return", "forward"]
        assert dict(backend.requests[0].url.params) == {"type": "new"}

    def test_terminal_status_has_no_actions(self, backend, portal_client, cache):
        """Test that approved requests offer nothing."""
        backend.add("GET", DETAIL_PATH, (200, ok(record("approved"))))
        result = get_request_status_view({"request_id": 5}, portal_client, cache)
        assert result["available_actions"] == []
        assert result["status"]["is_terminal"] is True

    def test_unknown_status_is_shown_raw(self, backend, portal_client, cache):
        """Test that an unknown status code renders without failing."""
        backend.add("GET", DETAIL_PATH, (200, ok(record("foo_bar"))))
        result = get_request_status_view({"request_id": 5}, portal_client, cache)
        assert result["found"] is True
        assert result["status"]["known"] is False
        assert result["status"]["label"] == "foo_bar"
        assert result["available_actions"] == []

    @pytest.mark.parametrize("status", ["", None])
    def test_blank_status_degrades(self, backend, portal_client, cache, status):
        """Test that a blank or null status renders the neutral fallback."""
        backend.add("GET", DETAIL_PATH, (200, ok(record(status))))
        result = get_request_status_view({"request_id": 5, "locale": "en"}, portal_client, cache)
        assert result["found"] is True
        assert result["status"]["code"] == ""
        assert result["status"]["label"] == "No status"
        assert result["status"]["color"] == "neutral"
        assert result["available_actions"] == []

    def test_deadline_and_workflow(self, backend, portal_client, cache):
        """Test the deadline block and the workflow steps."""
        backend.add(
            "GET", DETAIL_PATH, (200, ok(record("appointment", deadline="2020-01-08T09:00:00+07:00")))
        )
        result = get_request_status_view({"request_id": 5, "locale": "en"}, portal_client, cache)
        assert result["deadline"] == {"deadline": "2020-01-08T02:00:00+00:00", "is_overdue": True}
        assert result["request"]["deadline"] == "2020-01-08T09:00:00+07:00"
        current = [step["code"] for step in result["workflow"] if step["current"]]
        assert current == ["appointment"]
        assert result["workflow"][0] == {"code": "new_request", "label": "New request", "current": False}

    def test_naive_deadline_does_not_fail(self, backend, portal_client, cache):
        """Test that a deadline without a timezone is read as UTC."""
        backend.add("GET", DETAIL_PATH, (200, ok(record("document_edit", deadline="2020-01-08T00:00:00"))))
        result = get_request_status_view({"request_id": 5}, portal_client, cache)
        assert result["deadline"]["is_overdue"] is True
        assert result["deadline"]["deadline"] == "2020-01-08T00:00:00+00:00"

    def test_auditor_sees_no_actions(self, backend, portal_client, cache):
        """Test that a read-only role gets an empty action list."""
        backend.add("GET", DETAIL_PATH, (200, ok(record())))
        result = get_request_status_view(
            {"request_id": 5, "actor_role": "auditor"}, portal_client, cache
        )
        assert result["available_actions"] == []


class TestCitizenView:
    """Tests for the citizen's view of their own request."""

    def test_submitter_can_resubmit_returned(self, backend, citizen_client, cache):
        """Test editAndResubmit for the submitter of a returned request."""
        backend.add("GET", MY_DETAIL_PATH, (200, ok(record("returned"))))
        result = get_request_status_view(
            {"request_id": 5, "actor_user_id": "7"}, citizen_client, cache, scope=SessionScope.CITIZEN
        )
        assert result["actor_role"] == "citizen"
        assert result["is_submitter"] is True
        assert result["available_actions"] == ["editAndResubmit"]

    def test_other_citizen_cannot_resubmit(self, backend, citizen_client, cache):
        """Test that another citizen gets no actions."""
        backend.add("GET", MY_DETAIL_PATH, (200, ok(record("returned"))))
        result = get_request_status_view(
            {"request_id": 5, "actor_user_id": 8}, citizen_client, cache, scope=SessionScope.CITIZEN
        )
        assert result["is_submitter"] is False
        assert result["available_actions"] == []

    def test_session_user_is_the_default_viewer(self, backend, citizen_client, cache):
        """Test editAndResubmit when no actor_user_id is passed."""
        backend.add("GET", MY_DETAIL_PATH, (200, ok(record("returned"))))
        result = get_request_status_view(
            {"request_id": 5, "actor_role": "citizen"}, citizen_client, cache, scope=SessionScope.CITIZEN
        )
        assert result["is_submitter"] is True
        assert result["available_actions"] == ["editAndResubmit"]

    def test_own_request_without_submitter_is_owned(self, backend, citizen_client, cache):
        """Test that a citizen record naming no submitter belongs to the caller."""
        backend.add("GET", MY_DETAIL_PATH, (200, ok(record("returned", user_id=None))))
        result = get_request_status_view(
            {"request_id": 5, "actor_user_id": 8}, citizen_client, cache, scope=SessionScope.CITIZEN
        )
        assert result["is_submitter"] is True
        assert result["available_actions"] == ["editAndResubmit"]

    def test_submitter_from_embedded_user(self, backend, citizen_client, cache):
        """Test that the submitter can come from the embedded user object."""
        backend.add(
            "GET", MY_DETAIL_PATH, (200, ok(record("returned", user_id=None, user={"id": 7})))
        )
        result = get_request_status_view(
            {"request_id": 5, "actor_user_id": 7}, citizen_client, cache, scope=SessionScope.CITIZEN
        )
        assert result["is_submitter"] is True


class TestLoadingStates:
    """Tests for not found, errors and caching."""

    def test_not_found_is_empty_state(self, backend, portal_client, cache):
        """Test that a 404 renders an empty state instead of an error."""
        result = get_request_status_view({"request_id": 5, "locale": "en"}, portal_client, cache)
        assert result == {"found": False, "request": None, "message": "License request not found"}

    def test_backend_error(self, backend, portal_client, cache):
        """Test that other backend failures are returned as errors."""
        backend.add("GET", DETAIL_PATH, (500, fail("database unavailable")))
        result = get_request_status_view({"request_id": 5}, portal_client, cache)
        assert result["error"]["code"] == "API_ERROR"
        assert result["error"]["message"] == "database unavailable"
        assert result["error"]["retryable"] is True

    def test_cached_between_calls(self, backend, portal_client, cache):
        """Test that a second view is served from the cache."""
        backend.add("GET", DETAIL_PATH, (200, ok(record())))
        get_request_status_view({"request_id": 5}, portal_client, cache)
        get_request_status_view({"request_id": 5}, portal_client, cache)
        assert len(backend.requests) == 1
        assert cache.load_count(detail_query_key(5, "new")) == 1

    def test_refresh_reloads(self, backend, portal_client, cache):
        """Test that refresh drops the cached copy."""
        backend.add("GET", DETAIL_PATH, (200, ok(record())), (200, ok(record("accepted"))))
        get_request_status_view({"request_id": 5}, portal_client, cache)
        result = get_request_status_view({"request_id": 5, "refresh": True}, portal_client, cache)
        assert len(backend.requests) == 2
        assert result["status"]["code"] == "accepted"

    def test_invalid_request_id(self, backend, portal_client, cache):
        """Test validation happens before any backend call."""
        result = get_request_status_view({"request_id": 0}, portal_client, cache)
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert backend.requests == []

    def test_invalid_license_type(self, backend, portal_client, cache):
        """Test that an unknown license type is rejected."""
        result = get_request_status_view(
            {"request_id": 5, "license_type": "permit"}, portal_client, cache
        )
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "license_type" in result["error"]["message"]
