"""Pydantic schemas for the request history (service flow log) read model."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import TypeAdapter, model_validator

from schemas.common import BackendRecord
from schemas.license_request import Submitter


class FlowLogEntry(BackendRecord):
    """One recorded status change of a license request."""

    id: Union[int, str]
    license_request_id: Optional[Union[int, str]] = None
    previous_status: Optional[str] = None
    new_status: str = ""
    changed_by: Optional[Union[int, str]] = None
    changed_by_user: Optional[Submitter] = None
    change_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def empty_strings_to_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            cleaned = {k: (None if v == "" else v) for k, v in data.items()}
            if cleaned.get("new_status") is None:
                cleaned["new_status"] = ""
            return cleaned
        return data

    @property
    def changed_by_name(self) -> Optional[str]:
        """Display name of whoever made the change, when the backend sent one."""
        user = self.changed_by_user
        if user is not None:
            return user.full_name or user.username or str(user.id)
        if self.changed_by is not None:
            return str(self.changed_by)
        return None


FLOW_LOG_ADAPTER = TypeAdapter(List[FlowLogEntry])
