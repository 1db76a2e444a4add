"""
MCP tool handler for dashboard_overview.

Fetches the four officer dashboard read models independently. Each panel
reports its own state so that one failing endpoint never hides the others.
"""

import logging
from typing import Any, Callable, Dict, List

from pydantic import ValidationError

from api import admin_portal_api
from api.client import PortalApiClient
from models.errors import ToolError, create_internal_error
from schemas.dashboard import ServiceSummaryItem, TimelinePoint
from schemas.list_requests import DashboardOverviewRequest
from utils.chart_scaling import DEFAULT_MIN_HEIGHT_PERCENT, normalize_bar_heights
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.query_cache import QueryCache, dashboard_query_key
from utils.status_presenter import display_label, license_type_label

logger = logging.getLogger(__name__)

PANELS = ("stats", "summary", "timeline", "performance")

LOADERS: Dict[str, Callable[[PortalApiClient], Any]] = {
    "stats": admin_portal_api.get_dashboard_stats,
    "summary": admin_portal_api.get_dashboard_summary,
    "timeline": admin_portal_api.get_dashboard_timeline,
    "performance": admin_portal_api.get_dashboard_performance,
}


def present_summary(items: List[ServiceSummaryItem], locale) -> List[Dict[str, Any]]:
    return [
        {
            **item.model_dump(),
            "license_type_label": license_type_label(item.license_type, locale),
            "status_label": display_label(item.status, locale),
        }
        for item in items
    ]


def present_timeline(points: List[TimelinePoint], min_percent: float) -> List[Dict[str, Any]]:
    heights = normalize_bar_heights([point.count for point in points], min_percent)
    return [
        {**point.model_dump(), "bar_height_percent": height}
        for point, height in zip(points, heights)
    ]


def _load_panel(
    panel: str,
    client: PortalApiClient,
    cache: QueryCache,
    locale,
    min_bar_height_percent: float,
) -> Dict[str, Any]:
    """Load one panel; failures become an error state for that panel only."""
    try:
        data = cache.fetch(dashboard_query_key(panel), lambda: LOADERS[panel](client))
    except ToolError as e:
        logger.warning(f"Dashboard panel '{panel}' failed: {e.message}")
        return {"state": "error", **e.to_dict()}
    except Exception as e:
        logger.exception(f"Dashboard panel '{panel}' failed unexpectedly")
        return {"state": "error", **create_internal_error(str(e), original_error=e).to_dict()}

    if panel == "summary":
        payload = present_summary(data, locale)
    elif panel == "timeline":
        payload = present_timeline(data, min_bar_height_percent)
    else:
        payload = data.model_dump()
    return {"state": "success", "data": payload}


def dashboard_overview(
    args: Dict[str, Any],
    client: PortalApiClient,
    cache: QueryCache,
    min_bar_height_percent: float = DEFAULT_MIN_HEIGHT_PERCENT,
) -> Dict[str, Any]:
    """
    Officer dashboard: counters, per-type summary, daily timeline, processing times.

    Args:
        args: Dictionary containing parameters:
            - refresh (bool, optional): Drop cached panels first (default: False)
            - locale (str, optional): th or en
        client: Backend client bound to the portal session
        cache: Shared per-query cache
        min_bar_height_percent: Floor for timeline bar heights

    Returns:
        {
            "stats": {"state": "success", "data": {...}},
            "summary": {"state": "success", "data": [{license_type, status, count,
                        license_type_label, status_label}]},
            "timeline": {"state": "success", "data": [{date, count, bar_height_percent}]},
            "performance": {"state": "error", "error": {...}}
        }
    """
    try:
        request = DashboardOverviewRequest.model_validate(args)

        if request.refresh:
            for panel in PANELS:
                cache.invalidate(dashboard_query_key(panel))

        return {
            panel: _load_panel(panel, client, cache, request.locale, min_bar_height_percent)
            for panel in PANELS
        }

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
