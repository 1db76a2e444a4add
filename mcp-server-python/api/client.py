"""
HTTP client for the DEDE e-Service backend.

Wraps an httpx.Client and turns every response into an ApiEnvelope or a
ToolError:
- 404 -> NOT_FOUND
- 401/403 -> UNAUTHORIZED
- other 4xx/5xx -> API_ERROR carrying the backend message verbatim
- transport failures and timeouts -> NETWORK_ERROR
- bodies that are not a JSON envelope -> MALFORMED_RESPONSE
- ``success: false`` in a 2xx envelope -> API_ERROR

Calls are never retried.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from api.sessions import Session
from models.errors import (
    create_api_error,
    create_malformed_response_error,
    create_network_error,
    create_not_found_error,
    create_unauthorized_error,
)
from schemas.api_envelope import ApiEnvelope

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


def _drop_none(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if params is None:
        return None
    return {key: value for key, value in params.items() if value is not None and value != ""}


class PortalApiClient:
    """Synchronous backend client bound to one session."""

    def __init__(
        self,
        base_url: str,
        session: Optional[Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def __enter__(self) -> "PortalApiClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiEnvelope:
        return self.request("GET", path, params=params)

    def post(
        self, path: str, json: Any = None, params: Optional[Dict[str, Any]] = None
    ) -> ApiEnvelope:
        return self.request("POST", path, params=params, json=json)

    def put(
        self, path: str, json: Any = None, params: Optional[Dict[str, Any]] = None
    ) -> ApiEnvelope:
        return self.request("PUT", path, params=params, json=json)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> ApiEnvelope:
        """
        Send one request and parse the response envelope.

        Args:
            method: HTTP method
            path: Path under the base URL, e.g. ``/api/v1/licenses/types``
            params: Query parameters; None and empty values are dropped
            json: JSON body for POST/PUT

        Returns:
            Parsed ApiEnvelope with ``success`` true

        Raises:
            ToolError: NOT_FOUND, UNAUTHORIZED, API_ERROR, NETWORK_ERROR or
                MALFORMED_RESPONSE
        """
        headers = self.session.authorization_header() if self.session is not None else {}
        logger.debug(f"{method} {path}")

        try:
            response = self._http.request(
                method,
                path,
                params=_drop_none(params),
                json=json,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out")
            raise create_network_error(f"request timed out: {method} {path}", original_error=e) from e
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise create_network_error(str(e) or type(e).__name__, original_error=e) from e

        body = self._decode_body(response)

        if response.status_code >= 400:
            raise self._http_error(method, path, response, body)

        if not isinstance(body, dict):
            raise create_malformed_response_error(
                f"expected a JSON object from {method} {path}, got {type(body).__name__}"
            )

        try:
            envelope = ApiEnvelope.model_validate(body)
        except ValidationError as e:
            raise create_malformed_response_error(
                f"unexpected envelope from {method} {path}: {e.errors()[0].get('msg')}",
                original_error=e,
            ) from e

        if not envelope.success:
            logger.warning(f"{method} {path} reported failure: {envelope.failure_message()}")
            raise create_api_error(envelope.failure_message(), status_code=response.status_code)

        return envelope

    @staticmethod
    def _decode_body(response: httpx.Response) -> Any:
        """Decode a JSON body; error responses may legitimately have none."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            if response.status_code >= 400:
                return None
            raise create_malformed_response_error(
                f"response body is not JSON (HTTP {response.status_code})", original_error=e
            ) from e

    @staticmethod
    def _http_error(method: str, path: str, response: httpx.Response, body: Any):
        status = response.status_code
        message = None
        if isinstance(body, dict):
            message = body.get("error") or body.get("message")
        backend_message = isinstance(message, str) and bool(message)
        if not backend_message:
            message = f"HTTP {status} {response.reason_phrase}".strip()

        logger.warning(f"{method} {path} -> HTTP {status}: {message}")

        if status == 404:
            if backend_message:
                return create_not_found_error(message=message)
            return create_not_found_error("Resource", path)
        if status in (401, 403):
            return create_unauthorized_error(message, status_code=status)
        return create_api_error(message, status_code=status)
