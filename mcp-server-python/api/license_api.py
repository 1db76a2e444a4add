"""
Citizen-facing license endpoints.

Creation, listing and lookup of the caller's own license requests under
``/api/v1/licenses``.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from api.client import PortalApiClient
from models.errors import create_malformed_response_error
from models.status import LicenseType, parse_license_type
from schemas.api_envelope import ApiEnvelope
from schemas.license_request import LicenseRequestDetail

LICENSES_PATH = "/api/v1/licenses"

CREATE_PATHS = {
    LicenseType.NEW: f"{LICENSES_PATH}/new",
    LicenseType.RENEWAL: f"{LICENSES_PATH}/renewal",
    LicenseType.EXTENSION: f"{LICENSES_PATH}/extension",
    LicenseType.REDUCTION: f"{LICENSES_PATH}/reduction",
}


def _created_record(envelope: ApiEnvelope) -> Dict[str, Any]:
    if not isinstance(envelope.data, dict):
        raise create_malformed_response_error("creation response has no request object")
    return envelope.data


def create_new_license_request(client: PortalApiClient, payload: Dict[str, Any]) -> Dict[str, Any]:
    return _created_record(client.post(CREATE_PATHS[LicenseType.NEW], json=payload))


def create_renewal_license_request(client: PortalApiClient, payload: Dict[str, Any]) -> Dict[str, Any]:
    return _created_record(client.post(CREATE_PATHS[LicenseType.RENEWAL], json=payload))


def create_extension_license_request(client: PortalApiClient, payload: Dict[str, Any]) -> Dict[str, Any]:
    return _created_record(client.post(CREATE_PATHS[LicenseType.EXTENSION], json=payload))


def create_reduction_license_request(client: PortalApiClient, payload: Dict[str, Any]) -> Dict[str, Any]:
    return _created_record(client.post(CREATE_PATHS[LicenseType.REDUCTION], json=payload))


CREATORS = {
    LicenseType.NEW: create_new_license_request,
    LicenseType.RENEWAL: create_renewal_license_request,
    LicenseType.EXTENSION: create_extension_license_request,
    LicenseType.REDUCTION: create_reduction_license_request,
}


def create_license_request(
    client: PortalApiClient, license_type, payload: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Create a license request of the given type.

    Args:
        client: Client bound to the citizen session
        license_type: new, renewal, extension or reduction (aliases accepted)
        payload: Validated form body with camelCase keys

    Returns:
        The created request record as returned by the backend

    Raises:
        ValueError: If the license type is unknown
        ToolError: On any backend failure
    """
    known = parse_license_type(license_type)
    if known is None:
        raise ValueError(f"Unknown license type: {license_type}")
    return CREATORS[known](client, payload)


def get_license_types(client: PortalApiClient) -> List[Any]:
    envelope = client.get(f"{LICENSES_PATH}/types")
    if envelope.data is None:
        return []
    if not isinstance(envelope.data, list):
        raise create_malformed_response_error("license types response is not a list")
    return envelope.data


def get_my_license_requests(
    client: PortalApiClient, page: int = 1, limit: int = 10
) -> ApiEnvelope:
    """The caller's own requests, newest first, with pagination."""
    envelope = client.get(f"{LICENSES_PATH}/my", params={"page": page, "limit": limit})
    if envelope.data is not None and not isinstance(envelope.data, list):
        raise create_malformed_response_error("license request list is not a list")
    return envelope


def get_license_request(client: PortalApiClient, request_id: Union[int, str]) -> LicenseRequestDetail:
    """One of the caller's own requests."""
    envelope = client.get(f"{LICENSES_PATH}/{request_id}")
    return parse_request_detail(envelope.data)


def parse_request_detail(data: Optional[Any]) -> LicenseRequestDetail:
    """Validate a request record; schema mismatches are MALFORMED_RESPONSE."""
    if not isinstance(data, dict):
        raise create_malformed_response_error("license request is missing from the response")
    try:
        return LicenseRequestDetail.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise create_malformed_response_error(
            f"license request field '{field}': {first.get('msg')}", original_error=e
        ) from e
