"""
MCP tool handler for transition_request_status.

Runs one officer action against the backend. The backend decides whether the
transition is legal; this handler only validates the arguments each action
needs, maps the action to its endpoint, and keeps the cached detail query
consistent:
- on success the detail query is invalidated once and refetched once, and the
  citizen's copy, the request history and the dashboard panels are dropped
- on failure nothing is invalidated and the pre-call status is reported
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from api import admin_portal_api
from api.client import PortalApiClient
from models.errors import ToolError, create_internal_error
from models.status import AssignRole, RequestStatus, WorkflowAction
from schemas.api_envelope import ApiEnvelope
from schemas.transition_request_status import (
    TransitionRequestStatusRequest,
    TransitionRequestStatusResponse,
)
from utils.action_policy import approve_target
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.query_cache import (
    DASHBOARD_QUERY,
    QueryCache,
    detail_query_key,
    flow_log_query_key,
    my_request_query_key,
)
from utils.status_presenter import display_label

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES = {
    WorkflowAction.ACCEPT: "Request accepted",
    WorkflowAction.REJECT: "Request rejected",
    WorkflowAction.ASSIGN: "Request assigned",
    WorkflowAction.RETURN: "Request returned for correction",
    WorkflowAction.FORWARD: "Request forwarded",
    WorkflowAction.APPROVE: "Request approved",
}


def perform_action(
    client: PortalApiClient,
    request: TransitionRequestStatusRequest,
    current_status: Optional[str],
) -> ApiEnvelope:
    """
    Call the backend endpoint for ``request.action``.

    accept, reject and approve go through the status endpoint; assign, return
    and forward have their own endpoints.
    """
    action = request.workflow_action
    request_id = request.request_id
    license_type = request.license_type

    if action == WorkflowAction.ACCEPT:
        return admin_portal_api.update_request_status(
            client, request_id, license_type, RequestStatus.ACCEPTED
        )
    if action == WorkflowAction.REJECT:
        return admin_portal_api.update_request_status(
            client, request_id, license_type, RequestStatus.REJECTED, reason=request.reason
        )
    if action == WorkflowAction.APPROVE:
        return admin_portal_api.update_request_status(
            client, request_id, license_type, approve_target(current_status), reason=request.reason
        )
    if action == WorkflowAction.ASSIGN:
        return admin_portal_api.assign_request(
            client, request_id, license_type, AssignRole(request.role), request.reason
        )
    if action == WorkflowAction.RETURN:
        return admin_portal_api.return_request(client, request_id, license_type, request.reason)
    if action == WorkflowAction.FORWARD:
        return admin_portal_api.forward_request(client, request_id, license_type, request.reason)

    raise ValueError(f"Unsupported action: {action.value}")


def build_failure_response(error: ToolError, previous_status: Optional[str]) -> Dict[str, Any]:
    """Backend rejection: the displayed status stays at its pre-call value."""
    return {
        **error.to_dict(),
        "success": False,
        "status": previous_status,
    }


def transition_request_status(
    args: Dict[str, Any], client: PortalApiClient, cache: QueryCache
) -> Dict[str, Any]:
    """
    Trigger an officer action on a license request.

    Args:
        args: Dictionary containing parameters:
            - request_id (int | str): Request identifier
            - license_type (str, optional): new/renewal/extension/reduction (default: new)
            - action (str): accept, reject, assign, return, forward or approve
            - reason (str): Required for assign, return and forward; optional for reject
            - role (str): inspector, supervisor or manager; required for assign
            - locale (str, optional): th or en, for the status label
        client: Backend client bound to the portal session
        cache: Shared per-query cache holding the request detail

    Returns:
        Success:
        {
            "success": true,
            "request_id": int | str,
            "license_type": str,
            "action": str,
            "previous_status": str,
            "status": str | null,       # refetched; null if the refetch failed
            "status_label": str | null,
            "message": str,
            "warnings": [str]
        }

        Backend rejection:
        {
            "error": {"code": str, "message": str, "retryable": bool},
            "success": false,
            "status": str | null        # unchanged pre-call status
        }

        Invalid arguments return {"error": {"code": "VALIDATION_ERROR", ...}}
        before any backend call.
    """
    try:
        # Step 1: Validate action arguments (no network yet)
        request = TransitionRequestStatusRequest.model_validate(args)
        key = detail_query_key(request.request_id, request.license_type)

        def loader():
            return admin_portal_api.get_request_detail(
                client, request.request_id, request.license_type
            )

        # Step 2: Current status (approve picks its target from a fresh copy)
        try:
            if request.workflow_action == WorkflowAction.APPROVE:
                current = loader()
            else:
                current = cache.fetch(key, loader)
        except ToolError as e:
            logger.warning(f"Could not load request {request.request_id}: {e.message}")
            return build_failure_response(e, None)
        previous_status = current.status

        # Step 3: Ask the backend to transition; no optimistic update
        try:
            envelope = perform_action(client, request, previous_status)
        except ToolError as e:
            logger.warning(
                f"{request.action} on request {request.request_id} rejected: {e.message}"
            )
            return build_failure_response(e, previous_status)

        logger.info(f"{request.action} on request {request.request_id} succeeded")

        # Step 4: Invalidate the detail query once and refetch it once
        cache.invalidate(key)
        cache.invalidate(my_request_query_key(request.request_id))
        cache.invalidate(flow_log_query_key(request.request_id))
        cache.invalidate_prefix((DASHBOARD_QUERY,))
        warnings: List[str] = []
        status = None
        status_label = None
        try:
            refreshed = cache.fetch(key, loader)
            status = refreshed.status
            status_label = display_label(status, request.locale)
        except ToolError as e:
            warnings.append(f"Transition succeeded but the request could not be reloaded: {e.message}")

        return TransitionRequestStatusResponse(
            success=True,
            request_id=request.request_id,
            license_type=request.license_type,
            action=request.action,
            previous_status=previous_status,
            status=status,
            status_label=status_label,
            message=envelope.message or DEFAULT_MESSAGES[request.workflow_action],
            warnings=warnings,
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
