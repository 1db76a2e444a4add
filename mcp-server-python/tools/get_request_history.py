"""
MCP tool handler for get_request_history.

Shows the recorded status changes of one license request (the service flow
log), newest first, with localized labels and the deadline each
deadline-bearing step started.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import ValidationError

from api.admin_portal_api import get_request_flow_logs
from api.client import PortalApiClient
from models.errors import ToolError, create_internal_error
from schemas.flow_log import FlowLogEntry
from schemas.request_views import GetRequestHistoryRequest
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.query_cache import QueryCache, flow_log_query_key
from utils.status_presenter import (
    color_category,
    default_deadline,
    display_label,
    progress_percent,
)

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _sort_key(entry: FlowLogEntry) -> datetime:
    created = entry.created_at
    if created is None:
        return _OLDEST
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


def present_entry(entry: FlowLogEntry, locale) -> Dict[str, Any]:
    """
    One history row.

    ``progressed`` is true when the change moved the request forward along
    the workflow (the first recorded status always counts as progress).
    """
    previous = entry.previous_status
    deadline = None
    if entry.created_at is not None:
        deadline = default_deadline(entry.new_status, entry.created_at)
    return {
        "id": entry.id,
        "previous_status": previous,
        "previous_status_label": display_label(previous, locale) if previous is not None else None,
        "new_status": entry.new_status,
        "new_status_label": display_label(entry.new_status, locale),
        "new_status_color": color_category(entry.new_status).value,
        "changed_by": entry.changed_by_name,
        "reason": entry.change_reason,
        "created_at": entry.created_at.isoformat() if entry.created_at is not None else None,
        "deadline": deadline.isoformat() if deadline is not None else None,
        "progressed": previous is None
        or progress_percent(entry.new_status) > progress_percent(previous),
    }


def get_request_history(
    args: Dict[str, Any], client: PortalApiClient, cache: QueryCache
) -> Dict[str, Any]:
    """
    Status history of one license request.

    Args:
        args: Dictionary containing parameters:
            - request_id (int | str): Request identifier
            - locale (str, optional): th or en
            - refresh (bool, optional): Drop the cached history first
        client: Backend client bound to the portal session
        cache: Shared per-query cache

    Returns:
        {
            "request_id": int | str,
            "entries": [...],   # newest first
            "count": int
        }

        A request without recorded changes has an empty entry list.
        Failures return {"error": {"code", "message", "retryable"}}.
    """
    try:
        request = GetRequestHistoryRequest.model_validate(args)
        key = flow_log_query_key(request.request_id)

        if request.refresh:
            cache.invalidate(key)

        entries: List[FlowLogEntry] = cache.fetch(
            key, lambda: get_request_flow_logs(client, request.request_id)
        )
        ordered = sorted(entries, key=_sort_key, reverse=True)
        logger.debug(f"Loaded {len(ordered)} history entries for request {request.request_id}")

        return {
            "request_id": request.request_id,
            "entries": [present_entry(entry, request.locale) for entry in ordered],
            "count": len(ordered),
        }

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
