"""
MCP tool handler for list_notifications.

Pages through the notifications addressed to the session's user. Not
cached: read state changes outside this server.
"""

from typing import Any, Dict

from pydantic import ValidationError

from api.client import PortalApiClient
from api.notifications_api import list_my_notifications
from models.errors import ToolError, create_internal_error
from schemas.request_views import ListNotificationsRequest
from utils.pydantic_error_mapper import map_pydantic_validation_error


def list_notifications(args: Dict[str, Any], client: PortalApiClient) -> Dict[str, Any]:
    """
    List the caller's notifications.

    Args:
        args: Dictionary containing parameters:
            - page (int, optional): 1-based page (default: 1)
            - limit (int, optional): Page size, 1-100 (default: 10)
            - is_read (bool, optional): Only read or only unread
            - type (str, optional): info, warning, success or error
            - priority (str, optional): low, medium, high or urgent
            - search (str, optional): Free-text search
        client: Backend client for the caller's session

    Returns:
        {
            "items": [{"id", "title", "message", "type", "priority",
                       "is_read", "created_at", "read_at", "link"}],
            "count": int,
            "unread_count": int,      # unread items on this page
            "pagination": {...} | null
        }
    """
    try:
        request = ListNotificationsRequest.model_validate(args)
        items, pagination = list_my_notifications(
            client,
            page=request.page,
            limit=request.limit,
            is_read=request.is_read,
            type=request.type,
            priority=request.priority,
            search=request.search,
        )
        return {
            "items": [item.model_dump() for item in items],
            "count": len(items),
            "unread_count": sum(1 for item in items if not item.is_read),
            "pagination": pagination.model_dump() if pagination is not None else None,
        }

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
