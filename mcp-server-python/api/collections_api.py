"""
Generic list and stats endpoints shared by the licenses, inspections and
audits collections (``/api/v1/{collection}``).
"""

from typing import Any, Dict, Optional

from api.client import PortalApiClient
from models.errors import create_malformed_response_error
from schemas.api_envelope import ApiEnvelope

COLLECTIONS = ("licenses", "inspections", "audits")

# Tool-side filter names -> query parameter names
FILTER_PARAMS = {
    "page": "page",
    "limit": "limit",
    "search": "search",
    "status": "status",
    "license_type": "licenseType",
    "sort_by": "sortBy",
    "sort_order": "sortOrder",
}


def _collection_path(collection: str) -> str:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}. Must be one of: {', '.join(COLLECTIONS)}")
    return f"/api/v1/{collection}"


def build_query_params(filters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Translate filters to query parameters, keeping only the ones that are set.

    Examples:
        >>> build_query_params({"page": 2, "search": "", "license_type": "new"})
        {'page': 2, 'licenseType': 'new'}
    """
    params: Dict[str, Any] = {}
    for key, value in (filters or {}).items():
        param = FILTER_PARAMS.get(key)
        if param is None or value is None or value == "":
            continue
        params[param] = value
    return params


def list_records(
    client: PortalApiClient, collection: str, filters: Optional[Dict[str, Any]] = None
) -> ApiEnvelope:
    envelope = client.get(_collection_path(collection), params=build_query_params(filters))
    if envelope.data is not None and not isinstance(envelope.data, list):
        raise create_malformed_response_error(f"{collection} list is not a list")
    return envelope


def get_collection_stats(client: PortalApiClient, collection: str) -> Dict[str, Any]:
    """Counters for the officer dashboard of one collection."""
    envelope = client.get(f"{_collection_path(collection)}/stats")
    if envelope.data is None:
        return {}
    if not isinstance(envelope.data, dict):
        raise create_malformed_response_error(f"{collection} stats is not an object")
    return envelope.data
