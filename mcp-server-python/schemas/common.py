"""Shared schema primitives for MCP tool request/response models."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from models.status import LicenseType, parse_license_type


def validate_optional_non_empty_str(value: Optional[str], field_name: str) -> Optional[str]:
    """Validate optional string fields that cannot be empty/whitespace."""
    if value is None:
        return None
    if not value.strip():
        raise ValueError(f"Invalid {field_name}: cannot be empty")
    return value


class StrictIgnoreRequest(BaseModel):
    """Request base with strict typing and ignored unknown fields."""

    model_config = ConfigDict(extra="ignore", strict=True)


class StrictResponse(BaseModel):
    """Response/result base with strict typing and forbidden unknown fields."""

    model_config = ConfigDict(extra="forbid")


class BackendRecord(BaseModel):
    """Base for backend payloads: unknown fields are ignored, blanks become None."""

    model_config = ConfigDict(extra="ignore")


class RequestIdMixin(BaseModel):
    """Reusable request_id field validation."""

    request_id: Union[int, str]

    @field_validator("request_id")
    @classmethod
    def validate_request_id(cls, value: Union[int, str]) -> Union[int, str]:
        if isinstance(value, bool):
            raise ValueError("Invalid request_id: expected integer or string")
        if isinstance(value, int) and value < 1:
            raise ValueError(f"Invalid request_id: {value} must be positive")
        if isinstance(value, str) and not value.strip():
            raise ValueError("Invalid request_id: cannot be empty")
        return value


class LicenseTypeMixin(BaseModel):
    """Reusable license_type field validation (defaults to 'new')."""

    license_type: str = LicenseType.NEW.value

    @field_validator("license_type", mode="before")
    @classmethod
    def coerce_license_type_none(cls, value: Any) -> Any:
        """Treat explicit ``None`` as 'use the default'."""
        if value is None:
            return LicenseType.NEW.value
        if isinstance(value, LicenseType):
            return value.value
        return value

    @field_validator("license_type")
    @classmethod
    def validate_license_type(cls, value: str) -> str:
        known = parse_license_type(value)
        if known is None:
            allowed = ", ".join(t.value for t in LicenseType)
            raise ValueError(f"Invalid license_type: '{value}'. Must be one of: {allowed}")
        return known.value


class LocaleMixin(BaseModel):
    """Reusable optional locale field validation."""

    locale: Optional[str] = None

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, value: Optional[str]) -> Optional[str]:
        return validate_optional_non_empty_str(value, "locale")
