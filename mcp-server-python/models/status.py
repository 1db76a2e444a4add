"""
Centralized, type-safe workflow definitions for the DEDE e-Service portal.

This module is the single source of truth for the status codes, license
types, actor roles and workflow actions exchanged with the portal backend.
All Enums inherit from ``(str, Enum)`` so that members are directly
comparable to plain strings and serialize naturally to JSON at API
boundaries, preserving the external contract.

The backend owns the authoritative state machine; the values here only
describe what the portal displays and which actions it offers.
"""

from enum import Enum
from typing import Optional


class RequestStatus(str, Enum):
    """Lifecycle states of a license request.

    Happy path:
        new_request -> accepted -> assigned -> appointment -> inspecting
        -> inspection_done -> document_edit -> report_approved -> approved

    Side branches reachable from several states:
        rejected, rejected_final, returned, forwarded

    ``draft`` precedes submission and ``overdue`` marks a request the
    backend auto-cancelled after a missed deadline.
    """

    DRAFT = "draft"
    NEW_REQUEST = "new_request"
    ACCEPTED = "accepted"
    FORWARDED = "forwarded"
    ASSIGNED = "assigned"
    APPOINTMENT = "appointment"
    INSPECTING = "inspecting"
    INSPECTION_DONE = "inspection_done"
    DOCUMENT_EDIT = "document_edit"
    REPORT_APPROVED = "report_approved"
    APPROVED = "approved"
    REJECTED = "rejected"
    REJECTED_FINAL = "rejected_final"
    RETURNED = "returned"
    OVERDUE = "overdue"


class LicenseType(str, Enum):
    """Kind of license request. Fixed at creation."""

    NEW = "new"
    RENEWAL = "renewal"
    EXTENSION = "extension"
    REDUCTION = "reduction"


# Spellings used by parts of the backend for the same request kinds
LICENSE_TYPE_ALIASES = {
    "renew": LicenseType.RENEWAL,
    "expand": LicenseType.EXTENSION,
    "reduce": LicenseType.REDUCTION,
}


class ActorRole(str, Enum):
    """Roles of the people acting on a request."""

    CITIZEN = "citizen"
    USER = "user"
    OFFICER = "officer"
    ADMIN = "admin"
    SYSTEM_ADMIN = "system_admin"
    DEDE_HEAD = "dede_head"
    DEDE_HEAD_ADMIN = "dede_head_admin"
    DEDE_STAFF = "dede_staff"
    DEDE_STAFF_ADMIN = "dede_staff_admin"
    DEDE_CONSULT = "dede_consult"
    DEDE_CONSULT_ADMIN = "dede_consult_admin"
    AUDITOR = "auditor"
    AUDITOR_ADMIN = "auditor_admin"


# Roles allowed to trigger status transitions
OFFICER_ROLES = frozenset(
    {
        ActorRole.OFFICER,
        ActorRole.ADMIN,
        ActorRole.SYSTEM_ADMIN,
        ActorRole.DEDE_HEAD,
        ActorRole.DEDE_HEAD_ADMIN,
        ActorRole.DEDE_STAFF,
        ActorRole.DEDE_STAFF_ADMIN,
        ActorRole.DEDE_CONSULT,
        ActorRole.DEDE_CONSULT_ADMIN,
    }
)

# Roles of people who submit and own requests
CITIZEN_ROLES = frozenset({ActorRole.CITIZEN, ActorRole.USER})


class WorkflowAction(str, Enum):
    """Actions the portal can offer for a request."""

    ACCEPT = "accept"
    REJECT = "reject"
    ASSIGN = "assign"
    RETURN = "return"
    FORWARD = "forward"
    APPROVE = "approve"
    EDIT_AND_RESUBMIT = "editAndResubmit"


OFFICER_ACTIONS = frozenset(
    {
        WorkflowAction.ACCEPT,
        WorkflowAction.REJECT,
        WorkflowAction.ASSIGN,
        WorkflowAction.RETURN,
        WorkflowAction.FORWARD,
        WorkflowAction.APPROVE,
    }
)


class ColorCategory(str, Enum):
    """Visual category used for status badges."""

    NEUTRAL = "neutral"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


class AssignRole(str, Enum):
    """Staff role a request can be assigned to."""

    INSPECTOR = "inspector"
    SUPERVISOR = "supervisor"
    MANAGER = "manager"


def parse_status(value) -> Optional[RequestStatus]:
    """Return the RequestStatus for a raw code, or None when unknown."""
    if isinstance(value, RequestStatus):
        return value
    try:
        return RequestStatus(value)
    except ValueError:
        return None


def parse_license_type(value) -> Optional[LicenseType]:
    """Return the LicenseType for a raw code (aliases included), or None."""
    if isinstance(value, LicenseType):
        return value
    if isinstance(value, str) and value in LICENSE_TYPE_ALIASES:
        return LICENSE_TYPE_ALIASES[value]
    try:
        return LicenseType(value)
    except ValueError:
        return None


def parse_role(value) -> Optional[ActorRole]:
    """Return the ActorRole for a raw role string, or None when unknown."""
    if isinstance(value, ActorRole):
        return value
    try:
        return ActorRole(value)
    except ValueError:
        return None
