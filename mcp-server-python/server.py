#!/usr/bin/env python3
"""
MCP Server entry point for the DEDE e-Service license portal.

This server exposes the citizen-facing and officer-facing operations of the
renewable-energy license portal as MCP tools. The authoritative workflow
lives in the external REST backend; the tools validate input, call the
backend, keep per-query caches, and present status information (labels,
colors, next steps, permitted actions) as structured JSON.

Usage:
    python server.py

The server runs in stdio mode by default, which is the standard transport
for MCP servers that are invoked by LLM agents.
"""

import logging
from typing import Any, Callable, Dict, Optional

import httpx
from mcp.server.fastmcp import FastMCP

from api.client import PortalApiClient
from api.sessions import SessionRegistry, SessionScope
from config import get_config
from models.errors import ToolError
from tools.dashboard_overview import dashboard_overview
from tools.get_request_history import get_request_history
from tools.get_request_status_view import get_request_status_view
from tools.list_available_actions import list_available_actions
from tools.list_license_types import list_license_types
from tools.list_notifications import list_notifications
from tools.list_requests import list_requests
from tools.submit_license_request import submit_license_request
from tools.transition_request_status import transition_request_status
from utils.query_cache import QueryCache

logger = logging.getLogger(__name__)


class PortalShell:
    """
    Process-wide state shared by the tools.

    Owns the citizen and portal sessions, the per-query cache, and the
    construction of backend clients. Sessions are started in ``main()`` and
    stopped when the server exits.
    """

    def __init__(self, config, transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        self.sessions = SessionRegistry.from_config(config)
        self.cache = QueryCache()
        self.transport = transport

    def start(self) -> None:
        self.sessions.start()

    def stop(self) -> None:
        self.sessions.stop()
        self.cache.clear()

    def client(self, scope: SessionScope) -> PortalApiClient:
        """New backend client bound to the session for ``scope``."""
        return PortalApiClient(
            base_url=self.config.api_base_url,
            session=self.sessions.get(scope),
            timeout=self.config.api_timeout_seconds,
            transport=self.transport,
        )

    def run(self, scope: SessionScope, handler: Callable[[PortalApiClient], Dict[str, Any]]) -> Dict[str, Any]:
        """Call ``handler`` with a client for ``scope``, closing the client afterwards."""
        try:
            client = self.client(scope)
        except ToolError as e:
            return e.to_dict()
        with client:
            return handler(client)


# Create FastMCP server instance
config = get_config()
shell = PortalShell(config)
mcp = FastMCP(
    name=config.server_name,
    instructions=(
        "This server provides tools for the DEDE e-Service renewable-energy license portal. "
        "The backend owns the workflow; these tools display and trigger it."
        "\n\n"
        "CITIZEN TOOLS:\n"
        "Use submit_license_request to submit a new, renewal, extension or reduction request. "
        "The form is validated field by field before anything is sent. "
        "Use list_requests with collection='my_licenses' to list the citizen's own requests. "
        "Use list_license_types to see which license types the backend offers."
        "\n\n"
        "OFFICER TOOLS:\n"
        "Use get_request_status_view to load a request with its localized status, next step and permitted actions. "
        "Use get_request_history to see who changed a request's status, when and why. "
        "Use list_available_actions to ask which actions a role may take for a status without calling the backend. "
        "Use transition_request_status to accept, reject, assign, return, forward or approve a request; "
        "the backend decides whether the transition is legal and its message is returned verbatim. "
        "Use list_requests to browse services, licenses, inspections or audits. "
        "Use dashboard_overview for request counters, per-type summary, daily timeline and processing times. "
        "Use list_notifications to read the notifications addressed to the officer or citizen."
    ),
)


def _locale(locale: Optional[str]) -> str:
    return locale or config.locale


@mcp.tool(
    name="get_request_status_view",
    description=(
        "Load one license request and present its status: localized label, color category, icon, "
        "next-step hint, progress, deadline, workflow steps and the actions the actor may take. "
        "A request that does not exist returns found=false instead of an error."
    ),
)
def get_request_status_view_tool(
    request_id: int | str,
    license_type: str = "new",
    actor_role: str | None = None,
    actor_user_id: int | str | None = None,
    locale: str | None = None,
    refresh: bool = False,
) -> dict:
    """
    Load one license request with its status presentation and permitted actions.

    Citizen roles read through the citizen session (``/api/v1/licenses/{id}``);
    every other role reads the admin-portal detail through the portal session.

    Args:
        request_id: Request identifier.
        license_type: new, renewal, extension or reduction (default new).
        actor_role: Viewer role (default: the configured portal role).
        actor_user_id: Viewer user id (default: the session's user id); a citizen who
            submitted the request may edit and resubmit it.
        locale: th or en (default: configured locale).
        refresh: Reload from the backend even if cached.

    Returns:
        Dictionary with structure:
        {
            "found": bool,
            "request": {...} | None,
            "license_type_label": str,
            "status": {"code", "known", "label", "color", "icon", "next_step", "progress", "is_terminal"},
            "deadline": {"deadline": str | None, "is_overdue": bool},
            "workflow": [{"code", "label", "current"}],
            "actor_role": str,
            "actor_role_label": str,
            "is_submitter": bool,
            "available_actions": [str]
        }

        On error, returns:
        {"error": {"code": str, "message": str, "retryable": bool}}
    """
    role = actor_role or config.portal_role
    scope = SessionRegistry.scope_for_role(role)
    args = {
        "request_id": request_id,
        "license_type": license_type,
        "actor_role": role,
        "locale": _locale(locale),
        "refresh": refresh,
    }
    if actor_user_id is not None:
        args["actor_user_id"] = actor_user_id

    return shell.run(scope, lambda client: get_request_status_view(args, client, shell.cache, scope))


@mcp.tool(
    name="list_available_actions",
    description=(
        "List the workflow actions a role may take for a request status. "
        "Pure lookup with no backend call; unknown statuses or roles yield no actions."
    ),
)
def list_available_actions_tool(
    status: str,
    actor_role: str,
    is_submitter: bool = True,
    locale: str | None = None,
) -> dict:
    """
    List permitted actions for a status and role.

    Args:
        status: Raw status code, e.g. "new_request".
        actor_role: Role such as "officer", "citizen" or "auditor".
        is_submitter: Whether a citizen actor owns the request (default True).
        locale: th or en (default: configured locale).

    Returns:
        {"status": {...}, "actor_role": str, "actor_role_label": str, "actions": [str]}
    """
    return list_available_actions(
        {
            "status": status,
            "actor_role": actor_role,
            "is_submitter": is_submitter,
            "locale": _locale(locale),
        }
    )


@mcp.tool(
    name="submit_license_request",
    description=(
        "Submit a renewable-energy license request (new, renewal, extension or reduction) as the citizen. "
        "Every form field is validated first; field errors are returned together and nothing is sent "
        "to the backend until the whole form is valid."
    ),
)
def submit_license_request_tool(
    form: dict,
    license_type: str = "new",
    locale: str | None = None,
) -> dict:
    """
    Validate and submit a license request form.

    Args:
        form: Form fields with camelCase (projectName) or snake_case (project_name) keys.
        license_type: new, renewal, extension or reduction (default new).
        locale: th or en (default: configured locale).

    Returns:
        Success:
        {"success": true, "request_id", "request_number", "license_type", "status", "status_label"}

        Validation failure:
        {"success": false, "field_errors": {field: message}, "error": {...}}

        On error, returns:
        {"error": {"code": str, "message": str, "retryable": bool}}
    """
    args = {"form": form, "license_type": license_type, "locale": _locale(locale)}
    return shell.run(SessionScope.CITIZEN, lambda client: submit_license_request(args, client))


@mcp.tool(
    name="transition_request_status",
    description=(
        "Run an officer action on a license request: accept, reject, assign, return, forward or approve. "
        "assign needs role and reason; return and forward need a reason. "
        "On success the request is reloaded and its new status returned; on failure the backend's "
        "message is returned and the status is unchanged."
    ),
)
def transition_request_status_tool(
    request_id: int | str,
    action: str,
    license_type: str = "new",
    reason: str | None = None,
    role: str | None = None,
    locale: str | None = None,
) -> dict:
    """
    Trigger an officer workflow action.

    Args:
        request_id: Request identifier.
        action: accept, reject, assign, return, forward or approve.
        license_type: new, renewal, extension or reduction (default new).
        reason: Required for assign, return and forward; optional for reject.
        role: inspector, supervisor or manager (assign only).
        locale: th or en (default: configured locale).

    Returns:
        Success:
        {"success": true, "previous_status", "status", "status_label", "message", "warnings", ...}

        Backend rejection:
        {"success": false, "status": <unchanged status>, "error": {...}}
    """
    args = {
        "request_id": request_id,
        "action": action,
        "license_type": license_type,
        "locale": _locale(locale),
    }
    if reason is not None:
        args["reason"] = reason
    if role is not None:
        args["role"] = role

    return shell.run(
        SessionScope.PORTAL, lambda client: transition_request_status(args, client, shell.cache)
    )


@mcp.tool(
    name="dashboard_overview",
    description=(
        "Officer dashboard: request counters, per-license-type summary, daily timeline with bar heights, "
        "and processing-time statistics. Each panel succeeds or fails independently."
    ),
)
def dashboard_overview_tool(refresh: bool = False, locale: str | None = None) -> dict:
    """
    Fetch the four dashboard panels.

    Args:
        refresh: Reload every panel from the backend.
        locale: th or en (default: configured locale).

    Returns:
        {"stats": panel, "summary": panel, "timeline": panel, "performance": panel}
        where panel is {"state": "success", "data": ...} or {"state": "error", "error": {...}}
    """
    args = {"refresh": refresh, "locale": _locale(locale)}
    return shell.run(
        SessionScope.PORTAL,
        lambda client: dashboard_overview(
            args, client, shell.cache, min_bar_height_percent=config.min_bar_height_percent
        ),
    )


@mcp.tool(
    name="list_requests",
    description=(
        "List license requests from services (all types, back office), licenses, inspections, audits, "
        "or my_licenses (the citizen's own). Supports page, limit, search, status, license_type and sorting. "
        "include_stats adds the collection counters. "
        "Each item gains a localized status_label and status_color."
    ),
)
def list_requests_tool(
    collection: str = "services",
    page: int = 1,
    limit: int | None = None,
    search: str | None = None,
    status: str | None = None,
    license_type: str | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    include_stats: bool = False,
    locale: str | None = None,
) -> dict:
    """
    List license requests with filters and pagination.

    Args:
        collection: services, licenses, inspections, audits or my_licenses.
        page: 1-based page number.
        limit: Page size (1-100, default: configured page limit).
        search: Free-text search.
        status: Status filter.
        license_type: License type filter.
        sort_by: Field to sort by.
        sort_order: asc or desc.
        include_stats: Also return counters for licenses, inspections or audits.
        locale: th or en (default: configured locale).

    Returns:
        {"collection": str, "items": [...], "count": int, "pagination": {...} | None}
        plus "stats" when include_stats is set
    """
    args: Dict[str, Any] = {"collection": collection, "page": page, "locale": _locale(locale)}
    if include_stats:
        args["include_stats"] = True
    optional = {
        "limit": limit,
        "search": search,
        "status": status,
        "license_type": license_type,
        "sort_by": sort_by,
        "sort_order": sort_order,
    }
    args.update({key: value for key, value in optional.items() if value is not None})

    scope = SessionScope.CITIZEN if collection == "my_licenses" else SessionScope.PORTAL
    return shell.run(
        scope,
        lambda client: list_requests(args, client, default_limit=config.default_page_limit),
    )


@mcp.tool(
    name="get_request_history",
    description=(
        "Status history of a license request: every recorded change with previous and new status, "
        "who made it, the reason, and the deadline started by appointment or document-edit steps. "
        "Newest first."
    ),
)
def get_request_history_tool(
    request_id: int | str,
    locale: str | None = None,
    refresh: bool = False,
) -> dict:
    """
    Load the status history (service flow log) of a request.

    Args:
        request_id: Request identifier.
        locale: th or en (default: configured locale).
        refresh: Reload from the backend even if cached.

    Returns:
        {"request_id": ..., "entries": [...], "count": int}
    """
    args = {"request_id": request_id, "locale": _locale(locale), "refresh": refresh}
    return shell.run(
        SessionScope.PORTAL, lambda client: get_request_history(args, client, shell.cache)
    )


@mcp.tool(
    name="list_license_types",
    description=(
        "License types offered by the backend with localized labels. "
        "submittable tells whether submit_license_request accepts the type."
    ),
)
def list_license_types_tool(locale: str | None = None, refresh: bool = False) -> dict:
    """
    List license types.

    Args:
        locale: th or en (default: configured locale).
        refresh: Reload from the backend even if cached.

    Returns:
        {"license_types": [{"value", "license_type", "label", "backend_label", "submittable"}]}
    """
    args = {"locale": _locale(locale), "refresh": refresh}
    return shell.run(
        SessionScope.CITIZEN, lambda client: list_license_types(args, client, shell.cache)
    )


@mcp.tool(
    name="list_notifications",
    description=(
        "Notifications addressed to the current user, newest first. "
        "Filter by is_read, type (info, warning, success, error) or priority (low, medium, high, urgent)."
    ),
)
def list_notifications_tool(
    actor_role: str | None = None,
    page: int = 1,
    limit: int = 10,
    is_read: bool | None = None,
    type: str | None = None,
    priority: str | None = None,
    search: str | None = None,
) -> dict:
    """
    List the caller's notifications.

    Citizen roles read through the citizen session; every other role uses the
    portal session.

    Args:
        actor_role: Whose notifications to read (default: the configured portal role).
        page: 1-based page number.
        limit: Page size (1-100).
        is_read: Only read (true) or unread (false) notifications.
        type: info, warning, success or error.
        priority: low, medium, high or urgent.
        search: Free-text search.

    Returns:
        {"items": [...], "count": int, "unread_count": int, "pagination": {...} | None}
    """
    args: Dict[str, Any] = {"page": page, "limit": limit}
    optional = {"is_read": is_read, "type": type, "priority": priority, "search": search}
    args.update({key: value for key, value in optional.items() if value is not None})

    scope = SessionRegistry.scope_for_role(actor_role or config.portal_role)
    return shell.run(scope, lambda client: list_notifications(args, client))


def main():
    """
    Main entry point for the MCP server.

    Runs the server in stdio mode, which is the standard transport
    for MCP servers that are invoked by LLM agents.
    """
    config.setup_logging()

    logger.info("Starting DEDE e-Service MCP Server")
    logger.info(f"Server name: {config.server_name}")

    # Validate configuration and log warnings
    for warning in config.validate():
        logger.warning(warning)

    shell.start()
    try:
        logger.info("Server starting in stdio mode")
        mcp.run(transport="stdio")
    finally:
        shell.stop()
        logger.info("Server stopped")


if __name__ == "__main__":
    main()
