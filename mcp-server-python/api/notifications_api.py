"""
Notification endpoints (``/api/v1/notifications``) for the session's user.
"""

from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from api.client import PortalApiClient
from models.errors import create_malformed_response_error
from schemas.api_envelope import Pagination
from schemas.notification import NOTIFICATIONS_ADAPTER, Notification

NOTIFICATIONS_PATH = "/api/v1/notifications"


def _split_payload(data: Any) -> Tuple[Any, Any]:
    # The list comes either bare or as {"notifications": [...], "pagination": {...}}
    if isinstance(data, dict):
        return data.get("notifications"), data.get("pagination")
    return data, None


def list_my_notifications(
    client: PortalApiClient,
    page: int = 1,
    limit: int = 10,
    is_read: Optional[bool] = None,
    type: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[List[Notification], Optional[Pagination]]:
    """
    The caller's notifications, newest first.

    Returns:
        (notifications, pagination); pagination is None when the backend
        sends none

    Raises:
        ToolError: On backend failure, or MALFORMED_RESPONSE for an
            unexpected body
    """
    params = {
        "page": page,
        "limit": limit,
        "isRead": None if is_read is None else str(is_read).lower(),
        "type": type,
        "priority": priority,
        "search": search,
    }
    envelope = client.get(f"{NOTIFICATIONS_PATH}/my", params=params)
    raw_items, raw_pagination = _split_payload(envelope.data)

    try:
        items = NOTIFICATIONS_ADAPTER.validate_python(raw_items or [])
        pagination = envelope.pagination
        if raw_pagination is not None:
            pagination = Pagination.model_validate(raw_pagination)
    except ValidationError as e:
        raise create_malformed_response_error(
            f"notifications: {e.errors()[0].get('msg')}", original_error=e
        ) from e
    return items, pagination
