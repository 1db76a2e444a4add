"""Pydantic schemas for list_requests and dashboard_overview tools."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator

from schemas.common import LocaleMixin, StrictIgnoreRequest

MAX_PAGE_LIMIT = 100

Collection = Literal["services", "licenses", "inspections", "audits", "my_licenses"]


class ListRequestsRequest(LocaleMixin, StrictIgnoreRequest):
    """Request schema for list_requests."""

    collection: Collection = "services"
    page: int = Field(default=1, ge=1)
    limit: Optional[int] = Field(default=None, ge=1, le=MAX_PAGE_LIMIT)
    search: Optional[str] = None
    status: Optional[str] = None
    license_type: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[Literal["asc", "desc"]] = None
    include_stats: bool = False

    @field_validator("search", "status", "license_type", "sort_by")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()


class DashboardOverviewRequest(LocaleMixin, StrictIgnoreRequest):
    """Request schema for dashboard_overview."""

    refresh: bool = False
