"""Pydantic schemas for the caller's notification list."""

from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import AliasChoices, Field, TypeAdapter

from schemas.common import BackendRecord


class Notification(BackendRecord):
    """One notification addressed to the session's user."""

    id: Union[int, str]
    title: str = ""
    message: str = ""
    type: str = "info"
    priority: str = "medium"
    is_read: bool = Field(default=False, validation_alias=AliasChoices("is_read", "isRead"))
    created_at: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    read_at: Optional[str] = Field(default=None, validation_alias=AliasChoices("read_at", "readAt"))
    link: Optional[Any] = None


NOTIFICATIONS_ADAPTER = TypeAdapter(List[Notification])
