"""Pydantic schemas for the request view, history, lookup and notification tools."""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import Field, field_validator

from schemas.common import (
    LicenseTypeMixin,
    LocaleMixin,
    RequestIdMixin,
    StrictIgnoreRequest,
    validate_optional_non_empty_str,
)
from schemas.list_requests import MAX_PAGE_LIMIT


class GetRequestStatusViewRequest(RequestIdMixin, LicenseTypeMixin, LocaleMixin, StrictIgnoreRequest):
    """Request schema for get_request_status_view."""

    actor_role: Optional[str] = None
    actor_user_id: Optional[Union[int, str]] = None
    refresh: bool = False

    @field_validator("actor_role")
    @classmethod
    def validate_actor_role(cls, value: Optional[str]) -> Optional[str]:
        return validate_optional_non_empty_str(value, "actor_role")


class ListAvailableActionsRequest(LocaleMixin, StrictIgnoreRequest):
    """
    Request schema for list_available_actions.

    Status and role are free-form: unknown values are valid input and simply
    produce no actions.
    """

    status: str
    actor_role: str
    is_submitter: bool = True


class GetRequestHistoryRequest(RequestIdMixin, LocaleMixin, StrictIgnoreRequest):
    """Request schema for get_request_history."""

    refresh: bool = False


class ListLicenseTypesRequest(LocaleMixin, StrictIgnoreRequest):
    """Request schema for list_license_types."""

    refresh: bool = False


class ListNotificationsRequest(LocaleMixin, StrictIgnoreRequest):
    """Request schema for list_notifications."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=MAX_PAGE_LIMIT)
    is_read: Optional[bool] = None
    type: Optional[Literal["info", "warning", "success", "error"]] = None
    priority: Optional[Literal["low", "medium", "high", "urgent"]] = None
    search: Optional[str] = None

    @field_validator("search")
    @classmethod
    def blank_search_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()
