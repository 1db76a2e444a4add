"""MCP tool handler for list_available_actions (no backend calls)."""

from typing import Any, Dict

from pydantic import ValidationError

from models.errors import ToolError, create_internal_error
from schemas.request_views import ListAvailableActionsRequest
from utils.action_policy import available_actions, sorted_actions
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.status_presenter import present_status, role_label


def list_available_actions(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Actions to offer for a status and role, with the status presentation.

    Args:
        args: Dictionary containing parameters:
            - status (str): Raw status code (unknown codes allowed)
            - actor_role (str): Raw role (unknown roles get no actions)
            - is_submitter (bool, optional): Citizen owns the request (default: True)
            - locale (str, optional): th or en

    Returns:
        {"status": {...}, "actor_role": str, "actor_role_label": str, "actions": [str]}
    """
    try:
        request = ListAvailableActionsRequest.model_validate(args)
        actions = available_actions(
            request.status, request.actor_role, is_submitter=request.is_submitter
        )
        return {
            "status": present_status(request.status, request.locale),
            "actor_role": request.actor_role,
            "actor_role_label": role_label(request.actor_role, request.locale),
            "actions": sorted_actions(actions),
        }

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
