"""
Unit tests for license submission form schemas and field error collection.
"""

import pytest
from pydantic import ValidationError

from models.errors import ErrorCode
from schemas.license_forms import (
    ExtensionLicenseForm,
    NewLicenseForm,
    ReductionLicenseForm,
    RenewalLicenseForm,
    form_for_license_type,
)
from utils.pydantic_error_mapper import collect_field_errors, map_pydantic_validation_error


def valid_new_form(**overrides):
    form = {
        "licenseType": "solar",
        "projectName": "Solar Farm Korat",
        "projectAddress": "99 Moo 3",
        "province": "Nakhon Ratchasima",
        "district": "Mueang",
        "subdistrict": "Nai Mueang",
        "postalCode": "30000",
        "energyType": "solar_pv",
        "capacity": "12.5",
        "capacityUnit": "MW",
        "expectedStartDate": "2025-01-15",
        "contactPerson": "Somchai",
        "contactPhone": "0812345678",
        "contactEmail": "somchai@example.com",
        "description": "Ground-mounted PV plant",
    }
    form.update(overrides)
    return form


def valid_capacity_change(**overrides):
    form = {
        "licenseNumber": "LIC-2023-001",
        "projectName": "Wind Farm Chaiyaphum",
        "currentCapacity": 10,
        "currentCapacityUnit": "MW",
        "requestedCapacity": 8,
        "requestedCapacityUnit": "MW",
        "contactPerson": "Suda",
        "contactPhone": "0890000000",
        "contactEmail": "suda@example.com",
    }
    form.update(overrides)
    return form


def field_errors(form_cls, data):
    with pytest.raises(ValidationError) as exc_info:
        form_cls.model_validate(data)
    return collect_field_errors(exc_info.value, form_cls)


class TestNewLicenseForm:
    """Tests for the new license form."""

    def test_valid_form(self):
        """Test a complete form validates and serializes with camelCase keys."""
        form = NewLicenseForm.model_validate(valid_new_form())
        payload = form.to_payload()
        assert payload["projectName"] == "Solar Farm Korat"
        assert payload["capacity"] == 12.5
        assert payload["licenseType"] == "solar"
        assert "project_name" not in payload

    def test_snake_case_input_accepted(self):
        """Test that snake_case field names are accepted too."""
        data = valid_new_form()
        data["project_name"] = data.pop("projectName")
        assert NewLicenseForm.model_validate(data).project_name == "Solar Farm Korat"

    def test_empty_license_type_is_a_field_error(self):
        """Test that an empty licenseType is reported on that field."""
        errors = field_errors(NewLicenseForm, valid_new_form(licenseType=""))
        assert errors == {"licenseType": "License type is required"}

    def test_missing_fields_all_reported(self):
        """Test that every missing field is reported at once."""
        errors = field_errors(NewLicenseForm, {})
        assert len(errors) == 15
        assert errors["projectName"] == "Project name is required"
        assert errors["contactEmail"] == "Contact email is required"
        assert errors["capacity"] == "Capacity is required"

    def test_whitespace_only_is_missing(self):
        """Test that blank strings count as missing."""
        errors = field_errors(NewLicenseForm, valid_new_form(province="   "))
        assert errors == {"province": "Province is required"}

    def test_invalid_email(self):
        """Test email format validation."""
        errors = field_errors(NewLicenseForm, valid_new_form(contactEmail="not-an-email"))
        assert errors == {"contactEmail": "Contact email must be a valid email address"}

    @pytest.mark.parametrize("capacity", ["0", -5, "abc", True])
    def test_invalid_capacity(self, capacity):
        """Test that capacity must be a positive number."""
        errors = field_errors(NewLicenseForm, valid_new_form(capacity=capacity))
        assert list(errors) == ["capacity"]

    def test_invalid_capacity_unit(self):
        """Test capacity unit values."""
        errors = field_errors(NewLicenseForm, valid_new_form(capacityUnit="GW"))
        assert errors == {"capacityUnit": "Capacity unit must be one of: MW, kW, MWp, kWp"}

    def test_invalid_date(self):
        """Test ISO date validation."""
        errors = field_errors(NewLicenseForm, valid_new_form(expectedStartDate="15/01/2025"))
        assert errors == {
            "expectedStartDate": "Expected start date must be a date in YYYY-MM-DD format"
        }

    def test_unknown_plant_type(self):
        """Test plant category validation."""
        errors = field_errors(NewLicenseForm, valid_new_form(licenseType="nuclear"))
        assert list(errors) == ["licenseType"]

    def test_numbers_accepted_for_text_fields(self):
        """Test that numeric phone and postal values are converted to text."""
        form = NewLicenseForm.model_validate(valid_new_form(postalCode=30000, contactPhone=812345678))
        assert form.postal_code == "30000"
        assert form.contact_phone == "812345678"


class TestCapacityChangeForms:
    """Tests for renewal, extension and reduction forms."""

    def test_renewal_form(self):
        """Test a complete renewal form."""
        data = valid_capacity_change(
            licenseType="wind",
            projectAddress="1 Moo 1",
            expiryDate="2025-12-31",
            requestedExpiryDate="2030-12-31",
            reason="Continued operation",
        )
        form = RenewalLicenseForm.model_validate(data)
        assert form.to_payload()["requestedExpiryDate"] == "2030-12-31"

    def test_renewal_missing_reason(self):
        """Test renewal requires a reason."""
        data = valid_capacity_change(
            licenseType="wind",
            projectAddress="1 Moo 1",
            expiryDate="2025-12-31",
            requestedExpiryDate="2030-12-31",
        )
        assert field_errors(RenewalLicenseForm, data) == {"reason": "Reason is required"}

    def test_extension_form(self):
        """Test a complete extension form."""
        data = valid_capacity_change(
            licenseType="wind",
            extensionReason="New turbines",
            expectedStartDate="2025-06-01",
            description="Add 2 MW",
        )
        assert ExtensionLicenseForm.model_validate(data).extension_reason == "New turbines"

    def test_reduction_form_has_no_plant_type(self):
        """Test that the reduction form does not ask for a plant category."""
        data = valid_capacity_change(
            reductionReason="Decommissioning",
            expectedStartDate="2025-06-01",
            description="Remove 2 MW",
        )
        form = ReductionLicenseForm.model_validate(data)
        assert "licenseType" not in form.to_payload()

    def test_requested_capacity_unit_validated(self):
        """Test that both capacity units are validated."""
        data = valid_capacity_change(
            reductionReason="Decommissioning",
            expectedStartDate="2025-06-01",
            description="Remove 2 MW",
            requestedCapacityUnit="watts",
        )
        assert list(field_errors(ReductionLicenseForm, data)) == ["requestedCapacityUnit"]


class TestFormLookup:
    """Tests for form_for_license_type."""

    def test_lookup(self):
        """Test each license type maps to its form."""
        assert form_for_license_type("new") is NewLicenseForm
        assert form_for_license_type("renewal") is RenewalLicenseForm
        assert form_for_license_type("expand") is ExtensionLicenseForm
        assert form_for_license_type("reduction") is ReductionLicenseForm
        assert form_for_license_type("other") is None


class TestMapPydanticValidationError:
    """Tests for the single-error mapper."""

    def test_first_error_becomes_validation_error(self):
        """Test mapping to a single VALIDATION_ERROR."""
        with pytest.raises(ValidationError) as exc_info:
            NewLicenseForm.model_validate(valid_new_form(contactEmail="x"))
        error = map_pydantic_validation_error(exc_info.value)
        assert error.code == ErrorCode.VALIDATION_ERROR
        assert error.message == "Invalid contactEmail: Contact email must be a valid email address"

    def test_without_model_uses_location_names(self):
        """Test collect_field_errors without alias translation."""
        with pytest.raises(ValidationError) as exc_info:
            NewLicenseForm.model_validate(valid_new_form(province=""))
        assert collect_field_errors(exc_info.value) == {"province": "Province is required"}
