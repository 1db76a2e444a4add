"""MCP tool handler for list_license_types."""

from typing import Any, Dict

from pydantic import ValidationError

from api.client import PortalApiClient
from api.license_api import get_license_types
from models.errors import ToolError, create_internal_error
from models.status import parse_license_type
from schemas.request_views import ListLicenseTypesRequest
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.query_cache import QueryCache, license_types_query_key
from utils.status_presenter import license_type_label


def present_license_type(item: Any, locale) -> Dict[str, Any]:
    """
    Describe one backend license type.

    The backend sends ``{"value", "label"}`` objects (bare codes are accepted
    too). Types this service cannot submit, such as modify or cancel, are
    listed with ``submittable`` false and keep the backend's label.
    """
    if isinstance(item, dict):
        value = item.get("value")
        backend_label = item.get("label")
    else:
        value = item
        backend_label = None

    known = parse_license_type(value)
    if known is not None:
        label = license_type_label(known, locale)
    else:
        label = backend_label or str(value)

    return {
        "value": value,
        "license_type": known.value if known is not None else None,
        "label": label,
        "backend_label": backend_label,
        "submittable": known is not None,
    }


def list_license_types(
    args: Dict[str, Any], client: PortalApiClient, cache: QueryCache
) -> Dict[str, Any]:
    """
    License types offered by the backend.

    Args:
        args: Dictionary containing parameters:
            - locale (str, optional): th or en
            - refresh (bool, optional): Reload instead of using the cached list
        client: Backend client bound to the citizen session
        cache: Shared per-query cache

    Returns:
        {"license_types": [{"value", "license_type", "label", "backend_label", "submittable"}]}
    """
    try:
        request = ListLicenseTypesRequest.model_validate(args)
        key = license_types_query_key()
        if request.refresh:
            cache.invalidate(key)

        items = cache.fetch(key, lambda: get_license_types(client))
        return {"license_types": [present_license_type(item, request.locale) for item in items]}

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
