"""
Unit tests for the backend HTTP client.

Uses httpx.MockTransport so no network is involved.
"""

import httpx
import pytest

from api.client import PortalApiClient
from api.sessions import Session, SessionScope
from models.errors import ErrorCode, ToolError
from conftest import fail, ok


def make_client(handler, session=None):
    return PortalApiClient(
        "http://backend.test/", session=session, transport=httpx.MockTransport(handler)
    )


class TestSuccessfulRequests:
    """Tests for 2xx envelopes."""

    def test_parses_envelope(self, backend, portal_client):
        """Test that data, message and pagination are parsed."""
        backend.add(
            "GET",
            "/api/v1/licenses",
            (200, ok([{"id": 1}], message="ok", pagination={"page": 2, "limit": 10, "total": 11, "totalPages": 2})),
        )
        envelope = portal_client.get("/api/v1/licenses")
        assert envelope.success is True
        assert envelope.data == [{"id": 1}]
        assert envelope.message == "ok"
        assert envelope.pagination.total_pages == 2

    def test_sends_bearer_token(self, backend, portal_client):
        """Test that the session token is sent as a bearer header."""
        backend.add("GET", "/ping", (200, ok()))
        portal_client.get("/ping")
        assert backend.requests[0].headers["Authorization"] == "Bearer portal-token"

    def test_no_header_without_session(self):
        """Test anonymous requests carry no Authorization header."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=ok())

        with make_client(handler) as client:
            client.get("/ping")
        assert "Authorization" not in seen[0].headers

    def test_no_header_for_inactive_session(self):
        """Test that a session that was never started sends no token."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=ok())

        session = Session(SessionScope.PORTAL, token="secret")
        with make_client(handler, session) as client:
            client.get("/ping")
        assert "Authorization" not in seen[0].headers

    def test_drops_empty_query_params(self, backend, portal_client):
        """Test that None and empty params are not sent."""
        backend.add("GET", "/api/v1/licenses", (200, ok([])))
        portal_client.get("/api/v1/licenses", params={"page": 1, "search": None, "status": ""})
        assert dict(backend.requests[0].url.params) == {"page": "1"}

    def test_sends_json_body(self, backend, portal_client):
        """Test POST bodies are JSON."""
        backend.add("POST", "/things", (201, ok({"id": 3})))
        envelope = portal_client.post("/things", json={"name": "x"})
        assert backend.body(backend.requests[0]) == {"name": "x"}
        assert envelope.data == {"id": 3}


class TestErrorMapping:
    """Tests for mapping failures to ToolError."""

    def test_404_is_not_found(self, backend, portal_client):
        """Test that HTTP 404 maps to NOT_FOUND."""
        backend.add("GET", "/missing", (404, fail("record not found")))
        with pytest.raises(ToolError) as exc_info:
            portal_client.get("/missing")
        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "record not found"

    def test_404_without_body_names_path(self, backend, portal_client):
        """Test the fallback message when a 404 carries no backend message."""
        backend.add("GET", "/missing", lambda request: httpx.Response(404))
        with pytest.raises(ToolError) as exc_info:
            portal_client.get("/missing")
        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert exc_info.value.message == "Resource not found: /missing"

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failures(self, backend, portal_client, status):
        """Test that 401 and 403 map to UNAUTHORIZED."""
        backend.add("GET", "/secure", (status, fail("token expired")))
        with pytest.raises(ToolError) as exc_info:
            portal_client.get("/secure")
        assert exc_info.value.code == ErrorCode.UNAUTHORIZED
        assert exc_info.value.message == "token expired"

    def test_400_keeps_backend_message(self, backend, portal_client):
        """Test that the backend's error text is surfaced verbatim."""
        backend.add("PUT", "/status", (400, fail("Invalid status transition from approved")))
        with pytest.raises(ToolError) as exc_info:
            portal_client.put("/status", json={"status": "accepted"})
        assert exc_info.value.code == ErrorCode.API_ERROR
        assert exc_info.value.message == "Invalid status transition from approved"
        assert exc_info.value.retryable is False

    def test_500_uses_message_field_and_is_retryable(self, backend, portal_client):
        """Test 5xx with a message field."""
        backend.add("PUT", "/status", (500, {"success": False, "message": "database unavailable"}))
        with pytest.raises(ToolError) as exc_info:
            portal_client.put("/status")
        assert exc_info.value.message == "database unavailable"
        assert exc_info.value.retryable is True
        assert exc_info.value.status_code == 500

    def test_error_without_body(self):
        """Test an error response with no JSON body."""
        with make_client(lambda request: httpx.Response(502, text="Bad Gateway")) as client:
            with pytest.raises(ToolError) as exc_info:
                client.get("/x")
        assert exc_info.value.code == ErrorCode.API_ERROR
        assert exc_info.value.message == "HTTP 502 Bad Gateway"

    def test_success_false_in_2xx(self, backend, portal_client):
        """Test that an envelope reporting failure is an API_ERROR."""
        backend.add("GET", "/x", (200, fail("quota exceeded")))
        with pytest.raises(ToolError) as exc_info:
            portal_client.get("/x")
        assert exc_info.value.code == ErrorCode.API_ERROR
        assert exc_info.value.message == "quota exceeded"

    def test_non_json_body(self):
        """Test that a non-JSON 200 is MALFORMED_RESPONSE."""
        with make_client(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(ToolError) as exc_info:
                client.get("/x")
        assert exc_info.value.code == ErrorCode.MALFORMED_RESPONSE

    @pytest.mark.parametrize("body", [[1, 2], {"data": []}, {"success": "maybe"}])
    def test_wrong_envelope_shape(self, body):
        """Test that bodies that are not an envelope are MALFORMED_RESPONSE."""
        with make_client(lambda request: httpx.Response(200, json=body)) as client:
            with pytest.raises(ToolError) as exc_info:
                client.get("/x")
        assert exc_info.value.code == ErrorCode.MALFORMED_RESPONSE

    def test_connection_error(self):
        """Test that transport errors are NETWORK_ERROR."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            with pytest.raises(ToolError) as exc_info:
                client.get("/x")
        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
        assert exc_info.value.retryable is True
        assert "connection refused" in exc_info.value.message

    def test_timeout(self):
        """Test that timeouts are NETWORK_ERROR."""

        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with make_client(handler) as client:
            with pytest.raises(ToolError) as exc_info:
                client.get("/x")
        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
        assert "timed out" in exc_info.value.message

    def test_no_retry(self, backend, portal_client):
        """Test that a failing call is made exactly once."""
        backend.add("GET", "/x", (503, fail("busy")))
        with pytest.raises(ToolError):
            portal_client.get("/x")
        assert len(backend.requests) == 1
