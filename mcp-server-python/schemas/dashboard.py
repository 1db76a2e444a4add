"""Pydantic schemas for the officer dashboard read models."""

from __future__ import annotations

from typing import List

from pydantic import AliasChoices, Field, TypeAdapter

from schemas.common import BackendRecord


class DashboardStats(BackendRecord):
    """Request counters by processing bucket."""

    total_requests: int = Field(
        default=0, validation_alias=AliasChoices("total_requests", "totalRequests")
    )
    pending_requests: int = Field(
        default=0, validation_alias=AliasChoices("pending_requests", "pendingRequests")
    )
    in_progress_requests: int = Field(
        default=0, validation_alias=AliasChoices("in_progress_requests", "inProgressRequests")
    )
    completed_requests: int = Field(
        default=0, validation_alias=AliasChoices("completed_requests", "completedRequests")
    )
    rejected_requests: int = Field(
        default=0, validation_alias=AliasChoices("rejected_requests", "rejectedRequests")
    )


class ServiceSummaryItem(BackendRecord):
    """Request count for one (license type, status) pair."""

    license_type: str
    status: str
    count: int = 0


class TimelinePoint(BackendRecord):
    """Requests received on one day."""

    date: str
    count: int = 0


class PerformanceStats(BackendRecord):
    """Processing times of completed requests, in days."""

    average_processing_time_days: float = 0
    fastest_processing_time_days: float = 0
    slowest_processing_time_days: float = 0


SERVICE_SUMMARY_ADAPTER = TypeAdapter(List[ServiceSummaryItem])
TIMELINE_ADAPTER = TypeAdapter(List[TimelinePoint])
