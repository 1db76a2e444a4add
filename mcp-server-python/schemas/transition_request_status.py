"""Pydantic schemas for transition_request_status tool."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import field_validator, model_validator

from models.status import AssignRole, WorkflowAction
from schemas.common import (
    LicenseTypeMixin,
    LocaleMixin,
    RequestIdMixin,
    StrictIgnoreRequest,
    StrictResponse,
)

TRANSITION_ACTIONS = (
    WorkflowAction.ACCEPT,
    WorkflowAction.REJECT,
    WorkflowAction.ASSIGN,
    WorkflowAction.RETURN,
    WorkflowAction.FORWARD,
    WorkflowAction.APPROVE,
)

REASON_REQUIRED_ACTIONS = (WorkflowAction.ASSIGN, WorkflowAction.RETURN, WorkflowAction.FORWARD)


class TransitionRequestStatusRequest(RequestIdMixin, LicenseTypeMixin, LocaleMixin, StrictIgnoreRequest):
    """Request schema for transition_request_status."""

    action: str
    reason: Optional[str] = None
    role: Optional[str] = None

    @field_validator("action")
    @classmethod
    def validate_action(cls, value: str) -> str:
        allowed = [a.value for a in TRANSITION_ACTIONS]
        if value not in allowed:
            raise ValueError(f"Invalid action: '{value}'. Must be one of: {', '.join(allowed)}")
        return value

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def validate_action_arguments(self) -> "TransitionRequestStatusRequest":
        action = WorkflowAction(self.action)

        if action == WorkflowAction.ASSIGN:
            allowed_roles = [r.value for r in AssignRole]
            if self.role is None:
                raise ValueError(f"role is required for assign. Must be one of: {', '.join(allowed_roles)}")
            if self.role not in allowed_roles:
                raise ValueError(
                    f"Invalid role: '{self.role}'. Must be one of: {', '.join(allowed_roles)}"
                )

        if action in REASON_REQUIRED_ACTIONS and not self.reason:
            raise ValueError(f"reason is required for {action.value}")

        return self

    @property
    def workflow_action(self) -> WorkflowAction:
        return WorkflowAction(self.action)


class TransitionRequestStatusResponse(StrictResponse):
    """Outcome of a transition: what was requested and the refreshed status."""

    success: bool
    request_id: Union[int, str]
    license_type: str
    action: str
    previous_status: Optional[str] = None
    status: Optional[str] = None
    status_label: Optional[str] = None
    message: Optional[str] = None
    warnings: list[str] = []
