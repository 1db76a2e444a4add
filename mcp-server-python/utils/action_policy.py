"""
Action policy for license request views.

Decides which workflow actions to offer for a status and actor role:
- Officer/admin roles see officer actions from a per-status table
- The submitting citizen sees editAndResubmit only while the request is returned
- Every other role (auditors, unknown roles) sees nothing

This policy decides what to offer, not what is legal. The backend validates
every transition and remains the source of truth.
"""

from typing import Dict, FrozenSet, Iterable, List

from models.status import (
    CITIZEN_ROLES,
    OFFICER_ROLES,
    RequestStatus,
    WorkflowAction,
    parse_role,
    parse_status,
)

NO_ACTIONS: FrozenSet[WorkflowAction] = frozenset()

OFFICER_ACTIONS_BY_STATUS: Dict[RequestStatus, FrozenSet[WorkflowAction]] = {
    RequestStatus.DRAFT: NO_ACTIONS,
    RequestStatus.NEW_REQUEST: frozenset(
        {
            WorkflowAction.ACCEPT,
            WorkflowAction.REJECT,
            WorkflowAction.ASSIGN,
            WorkflowAction.RETURN,
            WorkflowAction.FORWARD,
        }
    ),
    RequestStatus.ACCEPTED: frozenset(
        {WorkflowAction.ASSIGN, WorkflowAction.RETURN, WorkflowAction.FORWARD}
    ),
    RequestStatus.FORWARDED: frozenset({WorkflowAction.ASSIGN, WorkflowAction.REJECT}),
    RequestStatus.ASSIGNED: NO_ACTIONS,
    RequestStatus.APPOINTMENT: NO_ACTIONS,
    RequestStatus.INSPECTING: NO_ACTIONS,
    RequestStatus.INSPECTION_DONE: NO_ACTIONS,
    RequestStatus.DOCUMENT_EDIT: frozenset({WorkflowAction.APPROVE, WorkflowAction.RETURN}),
    RequestStatus.REPORT_APPROVED: frozenset({WorkflowAction.APPROVE, WorkflowAction.REJECT}),
    RequestStatus.APPROVED: NO_ACTIONS,
    RequestStatus.REJECTED: NO_ACTIONS,
    RequestStatus.REJECTED_FINAL: NO_ACTIONS,
    RequestStatus.RETURNED: NO_ACTIONS,
    RequestStatus.OVERDUE: NO_ACTIONS,
}

_missing = [s.value for s in RequestStatus if s not in OFFICER_ACTIONS_BY_STATUS]
if _missing:
    raise RuntimeError(f"OFFICER_ACTIONS_BY_STATUS is missing entries for: {', '.join(_missing)}")

# Status the backend moves to when an officer approves
APPROVE_TARGETS = {
    RequestStatus.DOCUMENT_EDIT: RequestStatus.REPORT_APPROVED,
    RequestStatus.REPORT_APPROVED: RequestStatus.APPROVED,
}

# Display order for action lists (matches the button order in the back office)
ACTION_ORDER = [
    WorkflowAction.ACCEPT,
    WorkflowAction.APPROVE,
    WorkflowAction.REJECT,
    WorkflowAction.ASSIGN,
    WorkflowAction.RETURN,
    WorkflowAction.FORWARD,
    WorkflowAction.EDIT_AND_RESUBMIT,
]


def is_officer_role(role) -> bool:
    """True when ``role`` may trigger status transitions."""
    return parse_role(role) in OFFICER_ROLES


def is_citizen_role(role) -> bool:
    """True when ``role`` is a request submitter role."""
    return parse_role(role) in CITIZEN_ROLES


def available_actions(status, actor_role, is_submitter: bool = True) -> FrozenSet[WorkflowAction]:
    """
    Actions to offer for a request in ``status`` to an actor with ``actor_role``.

    Args:
        status: Raw or enum status code (unknown codes are allowed)
        actor_role: Raw or enum role of the actor
        is_submitter: Whether the actor is the citizen who owns the request

    Returns:
        Frozen set of WorkflowAction members, possibly empty

    Examples:
        >>> sorted(a.value for a in available_actions("new_request", "officer"))
        ['accept', 'assign', 'forward', 'reject', 'return']
        >>> available_actions("approved", "officer")
        frozenset()
        >>> available_actions("returned", "citizen") == {WorkflowAction.EDIT_AND_RESUBMIT}
        True
    """
    known_status = parse_status(status)

    if is_officer_role(actor_role):
        if known_status is None:
            return NO_ACTIONS
        return OFFICER_ACTIONS_BY_STATUS[known_status]

    if is_citizen_role(actor_role):
        if known_status == RequestStatus.RETURNED and is_submitter:
            return frozenset({WorkflowAction.EDIT_AND_RESUBMIT})
        return NO_ACTIONS

    return NO_ACTIONS


def sorted_actions(actions: Iterable[WorkflowAction]) -> List[str]:
    """Return action codes in stable display order."""
    action_set = set(actions)
    return [action.value for action in ACTION_ORDER if action in action_set]


def approve_target(status) -> RequestStatus:
    """Status requested from the backend when approving from ``status``."""
    return APPROVE_TARGETS.get(parse_status(status), RequestStatus.APPROVED)
