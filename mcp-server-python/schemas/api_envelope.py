"""Pydantic schemas for the backend's JSON response envelope."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    """Pagination block returned by list endpoints."""

    model_config = ConfigDict(extra="ignore")

    page: int = 1
    limit: int = 0
    total: int = 0
    total_pages: int = Field(default=0, validation_alias=AliasChoices("total_pages", "totalPages"))


class ApiEnvelope(BaseModel):
    """Every backend response: ``{success, data, message, error, pagination}``."""

    model_config = ConfigDict(extra="ignore")

    success: bool
    data: Any = None
    message: Optional[str] = None
    error: Optional[str] = None
    pagination: Optional[Pagination] = None

    def failure_message(self, default: str = "Request failed") -> str:
        """Backend-provided failure text, preferring ``error`` over ``message``."""
        return self.error or self.message or default
