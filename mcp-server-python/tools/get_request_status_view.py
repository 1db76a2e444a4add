"""
MCP tool handler for get_request_status_view.

Loads one license request (through the per-query cache) and combines it with
the status presentation and the actions the actor may take.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from api.admin_portal_api import get_request_detail
from api.client import PortalApiClient
from api.license_api import get_license_request
from api.sessions import SessionScope
from models.errors import ErrorCode, ToolError, create_internal_error
from models.status import ActorRole
from schemas.request_views import GetRequestStatusViewRequest
from utils.action_policy import available_actions, sorted_actions
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.query_cache import QueryCache, detail_query_key, my_request_query_key
from utils.status_presenter import (
    display_label,
    license_type_label,
    present_deadline,
    present_status,
    resolve_locale,
    role_label,
    workflow_path,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGES = {
    "th": "ไม่พบคำร้องที่ต้องการ",
    "en": "License request not found",
}


def _default_role(scope: SessionScope) -> str:
    if scope == SessionScope.CITIZEN:
        return ActorRole.CITIZEN.value
    return ActorRole.OFFICER.value


def _same_user(left: Optional[Any], right: Optional[Any]) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


def _is_submitter(actor_user_id, submitter_id, scope: SessionScope) -> bool:
    """
    Decide whether the viewer owns the request.

    Citizen-scope records come from the caller's own-request endpoint, so
    they are owned unless the backend names a different submitter.
    """
    if scope == SessionScope.CITIZEN and (actor_user_id is None or submitter_id is None):
        return True
    return _same_user(actor_user_id, submitter_id)


def workflow_steps(status, locale: Optional[str] = None) -> List[Dict[str, Any]]:
    """Happy-path steps with the current one marked."""
    return [
        {"code": step.value, "label": display_label(step, locale), "current": step.value == status}
        for step in workflow_path()
    ]


def get_request_status_view(
    args: Dict[str, Any],
    client: PortalApiClient,
    cache: QueryCache,
    scope: SessionScope = SessionScope.PORTAL,
) -> Dict[str, Any]:
    """
    Build the status view of one license request.

    Args:
        args: Dictionary containing parameters:
            - request_id (int | str): Request identifier
            - license_type (str, optional): new/renewal/extension/reduction (default: new)
            - actor_role (str, optional): Role of the viewer (default depends on scope)
            - actor_user_id (int | str, optional): Viewer's user id, used to decide
              whether a citizen is the submitter (default: the session's user id)
            - locale (str, optional): th or en
            - refresh (bool, optional): Drop the cached copy first (default: False)
        client: Backend client bound to the session for ``scope``
        cache: Shared per-query cache
        scope: citizen reads ``/api/v1/licenses/{id}``, portal reads the
            admin-portal detail endpoint

    Returns:
        Found:
        {
            "found": true,
            "request": {...},           # id, request_number, license_type, status, ...
            "license_type_label": str,
            "status": {...},            # present_status block
            "deadline": {"deadline": str | null, "is_overdue": bool},
            "workflow": [{"code", "label", "current"}],
            "actor_role": str,
            "actor_role_label": str,
            "is_submitter": bool,
            "available_actions": [str]
        }

        Not found (HTTP 404) is an empty state, not an error:
        {"found": false, "request": null, "message": str}

        Other failures return {"error": {"code", "message", "retryable"}}.
    """
    try:
        request = GetRequestStatusViewRequest.model_validate(args)
        locale = request.locale
        actor_role = request.actor_role or _default_role(scope)

        # Step 1: Pick the query for this audience
        if scope == SessionScope.CITIZEN:
            key = my_request_query_key(request.request_id)

            def loader():
                return get_license_request(client, request.request_id)
        else:
            key = detail_query_key(request.request_id, request.license_type)

            def loader():
                return get_request_detail(client, request.request_id, request.license_type)

        # Step 2: Load through the cache (optionally forcing a reload)
        if request.refresh:
            cache.invalidate(key)

        try:
            detail = cache.fetch(key, loader)
        except ToolError as e:
            if e.code != ErrorCode.NOT_FOUND:
                raise
            logger.info(f"License request {request.request_id} not found")
            return {
                "found": False,
                "request": None,
                "message": NOT_FOUND_MESSAGES[resolve_locale(locale)],
            }

        # Step 3: Decide what the actor may do
        actor_user_id = request.actor_user_id
        if actor_user_id is None and client.session is not None:
            actor_user_id = client.session.user_id
        is_submitter = _is_submitter(actor_user_id, detail.submitter_id, scope)
        actions = available_actions(detail.status, actor_role, is_submitter=is_submitter)

        return {
            "found": True,
            "request": detail.summary(),
            "license_type_label": license_type_label(
                detail.license_type or request.license_type, locale
            ),
            "status": present_status(detail.status, locale),
            "deadline": present_deadline(detail.status, detail.deadline),
            "workflow": workflow_steps(detail.status, locale),
            "actor_role": actor_role,
            "actor_role_label": role_label(actor_role, locale),
            "is_submitter": is_submitter,
            "available_actions": sorted_actions(actions),
        }

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
