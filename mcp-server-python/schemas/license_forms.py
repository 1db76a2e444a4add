"""
Pydantic schemas for the four license request submission forms.

Each form mirrors the body of one creation endpoint. Wire names are camelCase
(``projectName``, ``contactEmail``, ...); models also accept snake_case field
names. Every field is required: missing or blank values fail with a
field-specific message, and all field errors are reported together.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from models.status import LicenseType, parse_license_type

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

CAPACITY_UNITS = ("MW", "kW", "MWp", "kWp")
PLANT_TYPES = ("solar", "wind", "biomass", "hydro", "waste")

CAPACITY_FIELDS = frozenset({"capacity", "current_capacity", "requested_capacity"})

FIELD_LABELS = {
    "license_type": "License type",
    "license_number": "License number",
    "project_name": "Project name",
    "project_address": "Project address",
    "province": "Province",
    "district": "District",
    "subdistrict": "Subdistrict",
    "postal_code": "Postal code",
    "energy_type": "Energy type",
    "capacity": "Capacity",
    "capacity_unit": "Capacity unit",
    "current_capacity": "Current capacity",
    "current_capacity_unit": "Current capacity unit",
    "requested_capacity": "Requested capacity",
    "requested_capacity_unit": "Requested capacity unit",
    "expected_start_date": "Expected start date",
    "expiry_date": "Expiry date",
    "requested_expiry_date": "Requested expiry date",
    "extension_reason": "Extension reason",
    "reduction_reason": "Reduction reason",
    "reason": "Reason",
    "contact_person": "Contact person",
    "contact_phone": "Contact phone",
    "contact_email": "Contact email",
    "description": "Description",
}


def required_message(field_name: str) -> str:
    label = FIELD_LABELS.get(field_name, field_name.replace("_", " ").capitalize())
    return f"{label} is required"


class LicenseFormBase(BaseModel):
    """Shared validation for every submission form."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        validate_default=True,
        str_strip_whitespace=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def require_value(cls, value: Any, info: ValidationInfo) -> Any:
        """Reject missing/blank values and normalize scalars per field kind."""
        field_name = info.field_name
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError(required_message(field_name))

        if field_name in CAPACITY_FIELDS:
            if isinstance(value, bool):
                raise ValueError(f"{FIELD_LABELS[field_name]} must be a number")
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"{FIELD_LABELS[field_name]} must be a number") from None
            if number <= 0:
                raise ValueError(f"{FIELD_LABELS[field_name]} must be greater than 0")
            return number

        # Phone numbers and postal codes often arrive as numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_payload(self) -> Dict[str, Any]:
        """Request body for the creation endpoint, with camelCase keys."""
        return self.model_dump(by_alias=True)


class ContactFieldsMixin(BaseModel):
    contact_person: str = ""
    contact_phone: str = ""
    contact_email: str = ""

    @field_validator("contact_email")
    @classmethod
    def validate_contact_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Contact email must be a valid email address")
        return value


class PlantTypeMixin(BaseModel):
    """The plant category, sent on the wire as ``licenseType``."""

    license_type: str = ""

    @field_validator("license_type")
    @classmethod
    def validate_plant_type(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in PLANT_TYPES:
            raise ValueError(f"License type must be one of: {', '.join(PLANT_TYPES)}")
        return normalized


def _validate_unit(value: str, field_name: str) -> str:
    if value not in CAPACITY_UNITS:
        raise ValueError(
            f"{FIELD_LABELS[field_name]} must be one of: {', '.join(CAPACITY_UNITS)}"
        )
    return value


def _validate_iso_date(value: str, field_name: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"{FIELD_LABELS[field_name]} must be a date in YYYY-MM-DD format") from None
    return value


class NewLicenseForm(ContactFieldsMixin, PlantTypeMixin, LicenseFormBase):
    """Application for a new license."""

    project_name: str = ""
    project_address: str = ""
    province: str = ""
    district: str = ""
    subdistrict: str = ""
    postal_code: str = ""
    energy_type: str = ""
    capacity: Optional[float] = None
    capacity_unit: str = ""
    expected_start_date: str = ""
    description: str = ""

    @field_validator("capacity_unit")
    @classmethod
    def validate_capacity_unit(cls, value: str, info: ValidationInfo) -> str:
        return _validate_unit(value, info.field_name)

    @field_validator("expected_start_date")
    @classmethod
    def validate_dates(cls, value: str, info: ValidationInfo) -> str:
        return _validate_iso_date(value, info.field_name)


class CapacityChangeFieldsMixin(BaseModel):
    """Current/requested capacity pairs shared by renewal, extension and reduction."""

    license_number: str = ""
    project_name: str = ""
    current_capacity: Optional[float] = None
    current_capacity_unit: str = ""
    requested_capacity: Optional[float] = None
    requested_capacity_unit: str = ""

    @field_validator("current_capacity_unit", "requested_capacity_unit")
    @classmethod
    def validate_capacity_units(cls, value: str, info: ValidationInfo) -> str:
        return _validate_unit(value, info.field_name)


class RenewalLicenseForm(ContactFieldsMixin, CapacityChangeFieldsMixin, PlantTypeMixin, LicenseFormBase):
    """Application to renew an existing license."""

    project_address: str = ""
    expiry_date: str = ""
    requested_expiry_date: str = ""
    reason: str = ""

    @field_validator("expiry_date", "requested_expiry_date")
    @classmethod
    def validate_dates(cls, value: str, info: ValidationInfo) -> str:
        return _validate_iso_date(value, info.field_name)


class ExtensionLicenseForm(ContactFieldsMixin, CapacityChangeFieldsMixin, PlantTypeMixin, LicenseFormBase):
    """Application to extend the licensed capacity."""

    extension_reason: str = ""
    expected_start_date: str = ""
    description: str = ""

    @field_validator("expected_start_date")
    @classmethod
    def validate_dates(cls, value: str, info: ValidationInfo) -> str:
        return _validate_iso_date(value, info.field_name)


class ReductionLicenseForm(ContactFieldsMixin, CapacityChangeFieldsMixin, LicenseFormBase):
    """Application to reduce the licensed capacity."""

    reduction_reason: str = ""
    expected_start_date: str = ""
    description: str = ""

    @field_validator("expected_start_date")
    @classmethod
    def validate_dates(cls, value: str, info: ValidationInfo) -> str:
        return _validate_iso_date(value, info.field_name)


FORMS_BY_LICENSE_TYPE: Dict[LicenseType, Type[LicenseFormBase]] = {
    LicenseType.NEW: NewLicenseForm,
    LicenseType.RENEWAL: RenewalLicenseForm,
    LicenseType.EXTENSION: ExtensionLicenseForm,
    LicenseType.REDUCTION: ReductionLicenseForm,
}


def form_for_license_type(license_type) -> Optional[Type[LicenseFormBase]]:
    """Form class for a license type (aliases accepted), or None when unknown."""
    known = parse_license_type(license_type)
    if known is None:
        return None
    return FORMS_BY_LICENSE_TYPE[known]
