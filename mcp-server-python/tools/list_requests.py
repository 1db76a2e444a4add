"""
MCP tool handler for list_requests.

Lists license requests from one of the backend collections and decorates each
item with its status label and color.
"""

from typing import Any, Dict, List

from pydantic import ValidationError

from api import admin_portal_api, collections_api, license_api
from api.client import PortalApiClient
from models.errors import ToolError, create_internal_error
from schemas.api_envelope import ApiEnvelope
from schemas.list_requests import ListRequestsRequest
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.status_presenter import color_category, display_label

DEFAULT_LIMIT = 10


def decorate_items(items: List[Any], locale) -> List[Any]:
    """Add status_label/status_color to every item that carries a status."""
    decorated = []
    for item in items:
        if isinstance(item, dict) and item.get("status") is not None:
            item = {
                **item,
                "status_label": display_label(item["status"], locale),
                "status_color": color_category(item["status"]).value,
            }
        decorated.append(item)
    return decorated


def _fetch(client: PortalApiClient, request: ListRequestsRequest, limit: int) -> ApiEnvelope:
    if request.collection == "services":
        return admin_portal_api.list_service_requests(
            client,
            search=request.search,
            status=request.status,
            license_type=request.license_type,
            page=request.page,
            limit=limit,
        )
    if request.collection == "my_licenses":
        return license_api.get_my_license_requests(client, page=request.page, limit=limit)
    return collections_api.list_records(
        client,
        request.collection,
        {
            "page": request.page,
            "limit": limit,
            "search": request.search,
            "status": request.status,
            "license_type": request.license_type,
            "sort_by": request.sort_by,
            "sort_order": request.sort_order,
        },
    )


def list_requests(
    args: Dict[str, Any], client: PortalApiClient, default_limit: int = DEFAULT_LIMIT
) -> Dict[str, Any]:
    """
    List license requests.

    Args:
        args: Dictionary containing parameters:
            - collection (str, optional): services (default), licenses,
              inspections, audits or my_licenses
            - page (int, optional): 1-based page (default: 1)
            - limit (int, optional): Page size, 1-100 (default: configured)
            - search, status, license_type (str, optional): Filters
            - sort_by (str, optional), sort_order ("asc" | "desc", optional)
            - include_stats (bool, optional): Also return the collection's
              counters (licenses, inspections and audits only)
            - locale (str, optional): th or en
        client: Backend client (citizen session for my_licenses, portal otherwise)
        default_limit: Page size when ``limit`` is not given

    Returns:
        {
            "collection": str,
            "items": [...],          # backend records plus status_label/status_color
            "count": int,            # items on this page
            "pagination": {page, limit, total, total_pages} | null,
            "stats": {...} | null    # only when include_stats is set
        }
    """
    try:
        request = ListRequestsRequest.model_validate(args)
        limit = request.limit or default_limit

        envelope = _fetch(client, request, limit)
        items = decorate_items(envelope.data or [], request.locale)

        result = {
            "collection": request.collection,
            "items": items,
            "count": len(items),
            "pagination": envelope.pagination.model_dump() if envelope.pagination else None,
        }
        if request.include_stats:
            result["stats"] = None
            if request.collection in collections_api.COLLECTIONS:
                result["stats"] = collections_api.get_collection_stats(client, request.collection)
        return result

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
