"""
MCP tool handler for submit_license_request.

Validates the citizen's form for the chosen license type and, only when every
field passes, calls the matching creation endpoint.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from api.client import PortalApiClient
from api.license_api import create_license_request
from models.errors import ToolError, create_internal_error, create_validation_error
from models.status import RequestStatus
from schemas.license_forms import form_for_license_type
from schemas.submit_license_request import (
    SubmitLicenseRequestRequest,
    SubmitLicenseRequestResponse,
)
from utils.pydantic_error_mapper import collect_field_errors, map_pydantic_validation_error
from utils.status_presenter import display_label

logger = logging.getLogger(__name__)


def build_field_errors_response(field_errors: Dict[str, str]) -> Dict[str, Any]:
    """Validation failure with every field message, no backend call made."""
    count = len(field_errors)
    noun = "field" if count == 1 else "fields"
    error = create_validation_error(f"{count} {noun} failed validation")
    return {
        "success": False,
        "field_errors": field_errors,
        **error.to_dict(),
    }


def submit_license_request(args: Dict[str, Any], client: PortalApiClient) -> Dict[str, Any]:
    """
    Validate and submit a license request.

    Args:
        args: Dictionary containing parameters:
            - license_type (str): new, renewal, extension or reduction (default: new)
            - form (dict): Form fields; camelCase or snake_case keys
            - locale (str, optional): th or en, for the status label
        client: Backend client bound to the citizen session

    Returns:
        Success:
        {
            "success": true,
            "request_id": int | str,
            "request_number": str,
            "license_type": str,
            "status": "new_request",
            "status_label": str
        }

        Form validation failure (no backend call is made):
        {
            "success": false,
            "field_errors": {"contactEmail": "...", ...},
            "error": {"code": "VALIDATION_ERROR", "message": str, "retryable": false}
        }

        Other failures return {"error": {"code", "message", "retryable"}} with
        the backend's message for API_ERROR.
    """
    try:
        request = SubmitLicenseRequestRequest.model_validate(args)

        # Step 1: Validate the whole form before touching the network
        form_cls = form_for_license_type(request.license_type)
        try:
            form = form_cls.model_validate(request.form)
        except ValidationError as e:
            field_errors = collect_field_errors(e, form_cls)
            logger.info(
                f"Rejected {request.license_type} license form: {', '.join(field_errors)}"
            )
            return build_field_errors_response(field_errors)

        # Step 2: Create the request; the backend assigns number and initial status
        record = create_license_request(client, request.license_type, form.to_payload())

        status = record.get("status") or RequestStatus.NEW_REQUEST.value
        request_number = record.get("request_number") or record.get("requestNumber")
        logger.info(
            f"Submitted {request.license_type} license request {request_number} (status={status})"
        )

        return SubmitLicenseRequestResponse(
            success=True,
            request_id=record.get("id"),
            request_number=request_number,
            license_type=request.license_type,
            status=status,
            status_label=display_label(status, request.locale),
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
