"""
Officer-facing endpoints of the admin portal.

Request detail and listing, status transitions, request history and
dashboard read models under ``/api/v1/admin-portal``. Every request-scoped
call except the history carries the license type as the ``type`` query
parameter.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ValidationError

from api.client import PortalApiClient
from api.license_api import parse_request_detail
from models.errors import create_malformed_response_error
from models.status import AssignRole
from schemas.api_envelope import ApiEnvelope
from schemas.dashboard import (
    SERVICE_SUMMARY_ADAPTER,
    TIMELINE_ADAPTER,
    DashboardStats,
    PerformanceStats,
    ServiceSummaryItem,
    TimelinePoint,
)
from schemas.flow_log import FLOW_LOG_ADAPTER, FlowLogEntry
from schemas.license_request import LicenseRequestDetail

logger = logging.getLogger(__name__)

ADMIN_PORTAL_PATH = "/api/v1/admin-portal"
REQUESTS_PATH = f"{ADMIN_PORTAL_PATH}/services/requests"
DASHBOARD_STATS_PATH = f"{ADMIN_PORTAL_PATH}/dashboard/stats"
FLOW_LOGS_PATH = f"{ADMIN_PORTAL_PATH}/flow/logs"

RequestId = Union[int, str]


def _type_param(license_type) -> Dict[str, str]:
    return {"type": getattr(license_type, "value", license_type)}


def _request_path(request_id: RequestId, suffix: str = "") -> str:
    return f"{REQUESTS_PATH}/{request_id}{suffix}"


def get_request_detail(
    client: PortalApiClient, request_id: RequestId, license_type
) -> LicenseRequestDetail:
    """
    Fetch one request for the back office.

    Raises:
        ToolError: NOT_FOUND (with the backend message) when there is no such request,
            MALFORMED_RESPONSE when the record does not match its schema
    """
    envelope = client.get(_request_path(request_id), params=_type_param(license_type))
    return parse_request_detail(envelope.data)


def list_service_requests(
    client: PortalApiClient,
    search: Optional[str] = None,
    status: Optional[str] = None,
    license_type: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> ApiEnvelope:
    """Unified list of requests of every license type."""
    envelope = client.get(
        REQUESTS_PATH,
        params={
            "search": search,
            "status": status,
            "licenseType": license_type,
            "page": page,
            "limit": limit,
        },
    )
    if envelope.data is not None and not isinstance(envelope.data, list):
        raise create_malformed_response_error("service request list is not a list")
    return envelope


def update_request_status(
    client: PortalApiClient,
    request_id: RequestId,
    license_type,
    status,
    reason: Optional[str] = None,
) -> ApiEnvelope:
    """Ask the backend to move a request to ``status``."""
    body: Dict[str, Any] = {"status": getattr(status, "value", status)}
    if reason:
        body["reason"] = reason
    logger.info(f"Requesting status {body['status']} for request {request_id}")
    return client.put(_request_path(request_id, "/status"), json=body, params=_type_param(license_type))


def assign_request(
    client: PortalApiClient,
    request_id: RequestId,
    license_type,
    role: AssignRole,
    reason: str,
) -> ApiEnvelope:
    body = {"role": getattr(role, "value", role), "reason": reason}
    return client.post(_request_path(request_id, "/assign"), json=body, params=_type_param(license_type))


def return_request(
    client: PortalApiClient, request_id: RequestId, license_type, reason: str
) -> ApiEnvelope:
    """Send a request back to the citizen for correction."""
    return client.post(
        _request_path(request_id, "/return"), json={"reason": reason}, params=_type_param(license_type)
    )


def forward_request(
    client: PortalApiClient, request_id: RequestId, license_type, reason: str
) -> ApiEnvelope:
    """Escalate a request to the DEDE head."""
    return client.post(
        _request_path(request_id, "/forward"), json={"reason": reason}, params=_type_param(license_type)
    )


def _parse_model(model_cls, data: Any, what: str) -> BaseModel:
    if not isinstance(data, dict):
        raise create_malformed_response_error(f"{what} is not an object")
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise create_malformed_response_error(
            f"{what}: {e.errors()[0].get('msg')}", original_error=e
        ) from e


def _parse_list(adapter, data: Any, what: str) -> list:
    if data is None:
        return []
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise create_malformed_response_error(
            f"{what}: {e.errors()[0].get('msg')}", original_error=e
        ) from e


def get_dashboard_stats(client: PortalApiClient) -> DashboardStats:
    return _parse_model(DashboardStats, client.get(DASHBOARD_STATS_PATH).data, "dashboard stats")


def get_dashboard_summary(client: PortalApiClient) -> List[ServiceSummaryItem]:
    return _parse_list(
        SERVICE_SUMMARY_ADAPTER, client.get(f"{DASHBOARD_STATS_PATH}/summary").data, "service summary"
    )


def get_dashboard_timeline(client: PortalApiClient) -> List[TimelinePoint]:
    return _parse_list(
        TIMELINE_ADAPTER, client.get(f"{DASHBOARD_STATS_PATH}/timeline").data, "timeline"
    )


def get_dashboard_performance(client: PortalApiClient) -> PerformanceStats:
    return _parse_model(
        PerformanceStats, client.get(f"{DASHBOARD_STATS_PATH}/performance").data, "performance stats"
    )


def get_request_flow_logs(client: PortalApiClient, request_id: RequestId) -> List[FlowLogEntry]:
    """Recorded status changes of one request, as the backend orders them."""
    return _parse_list(
        FLOW_LOG_ADAPTER, client.get(f"{FLOW_LOGS_PATH}/{request_id}").data, "flow logs"
    )
