"""Pydantic schemas for license request read models returned by the backend."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import model_validator

from schemas.common import BackendRecord


class Submitter(BackendRecord):
    """The user who submitted (and owns) a request."""

    id: Union[int, str]
    username: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None


class LicenseRequestDetail(BackendRecord):
    """Read model of one license request.

    ``status`` is kept as the raw string so that codes unknown to this
    service still round-trip; presentation falls back for them. Payload
    fields depend on the license type and are all optional here.
    """

    id: Union[int, str]
    request_number: str
    status: str
    deadline: Optional[datetime] = None
    license_type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    request_date: Optional[str] = None
    user_id: Optional[Union[int, str]] = None
    user: Optional[Submitter] = None

    # new
    project_name: Optional[str] = None
    project_address: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    subdistrict: Optional[str] = None
    postal_code: Optional[str] = None
    energy_type: Optional[str] = None
    capacity: Optional[float] = None
    capacity_unit: Optional[str] = None
    expected_start_date: Optional[str] = None

    # renewal / extension / reduction
    license_number: Optional[str] = None
    current_capacity: Optional[float] = None
    current_capacity_unit: Optional[str] = None
    requested_capacity: Optional[float] = None
    requested_capacity_unit: Optional[str] = None
    expiry_date: Optional[str] = None
    requested_expiry_date: Optional[str] = None

    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def empty_strings_to_none(cls, data: Any) -> Any:
        """Convert empty-string values to None for optional fields.

        A blank or null ``status`` is kept as ``""`` so the record still
        renders with the unknown-status presentation.
        """
        if isinstance(data, dict):
            cleaned = {k: (None if v == "" else v) for k, v in data.items()}
            if "status" in cleaned and cleaned["status"] is None:
                cleaned["status"] = ""
            return cleaned
        return data

    @property
    def submitter_id(self) -> Optional[Union[int, str]]:
        """Owner of the request, from ``user_id`` or the embedded user."""
        if self.user_id is not None:
            return self.user_id
        if self.user is not None:
            return self.user.id
        return None

    def summary(self) -> dict:
        """Compact, JSON-serializable view used in tool responses."""
        return self.model_dump(
            mode="json",
            include={
                "id",
                "request_number",
                "license_type",
                "status",
                "title",
                "request_date",
                "deadline",
                "user_id",
                "user",
            },
            exclude_none=True,
        )
