"""Pydantic schemas for submit_license_request tool."""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from schemas.common import LicenseTypeMixin, LocaleMixin, StrictIgnoreRequest, StrictResponse


class SubmitLicenseRequestRequest(LicenseTypeMixin, LocaleMixin, StrictIgnoreRequest):
    """Request schema for submit_license_request. ``form`` is validated per license type."""

    form: Dict[str, Any]


class SubmitLicenseRequestResponse(StrictResponse):
    """Success response schema for submit_license_request."""

    success: bool
    request_id: Optional[Union[int, str]] = None
    request_number: Optional[str] = None
    license_type: str
    status: str
    status_label: str
