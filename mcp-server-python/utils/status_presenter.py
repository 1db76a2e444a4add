"""
Status presentation for license requests.

Maps a raw status code to its display label, color category, icon,
next-step hint and progress. Every function here is total: a status code
outside ``RequestStatus`` never raises, it falls back to a neutral
presentation that still shows the raw code.

All tables are keyed by ``RequestStatus`` and checked for completeness at
import time, so adding a status without describing it everywhere fails
loudly instead of silently rendering the fallback.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional

from models.status import (
    ActorRole,
    ColorCategory,
    LicenseType,
    RequestStatus,
    parse_license_type,
    parse_role,
    parse_status,
)

SUPPORTED_LOCALES = ("th", "en")
DEFAULT_LOCALE = "th"

UNKNOWN_ICON = "question-mark-circle"

BLANK_STATUS_LABELS = {
    "th": "ไม่ระบุสถานะ",
    "en": "No status",
}

GENERIC_HINTS = {
    "th": "อยู่ระหว่างดำเนินการ",
    "en": "Request is in progress",
}

STATUS_LABELS: Dict[str, Dict[RequestStatus, str]] = {
    "th": {
        RequestStatus.DRAFT: "ร่าง",
        RequestStatus.NEW_REQUEST: "คำร้องใหม่",
        RequestStatus.ACCEPTED: "รับคำขอ",
        RequestStatus.FORWARDED: "ส่งต่อให้ DEDE Head",
        RequestStatus.ASSIGNED: "มอบหมายผู้ตรวจ",
        RequestStatus.APPOINTMENT: "นัดหมาย",
        RequestStatus.INSPECTING: "เข้าตรวจสอบระบบ",
        RequestStatus.INSPECTION_DONE: "ตรวจสอบเสร็จสิ้น",
        RequestStatus.DOCUMENT_EDIT: "แก้ไขเอกสาร",
        RequestStatus.REPORT_APPROVED: "รับรองรายงาน",
        RequestStatus.APPROVED: "อนุมัติใบอนุญาต",
        RequestStatus.REJECTED: "ปฏิเสธคำขอ",
        RequestStatus.REJECTED_FINAL: "ปฏิเสธสุดท้าย",
        RequestStatus.RETURNED: "ตีเอกสารกลับไปแก้ไข",
        RequestStatus.OVERDUE: "เกินกำหนด",
    },
    "en": {
        RequestStatus.DRAFT: "Draft",
        RequestStatus.NEW_REQUEST: "New request",
        RequestStatus.ACCEPTED: "Accepted",
        RequestStatus.FORWARDED: "Forwarded to DEDE Head",
        RequestStatus.ASSIGNED: "Inspector assigned",
        RequestStatus.APPOINTMENT: "Appointment scheduled",
        RequestStatus.INSPECTING: "Site inspection",
        RequestStatus.INSPECTION_DONE: "Inspection completed",
        RequestStatus.DOCUMENT_EDIT: "Document revision",
        RequestStatus.REPORT_APPROVED: "Report approved",
        RequestStatus.APPROVED: "License approved",
        RequestStatus.REJECTED: "Rejected",
        RequestStatus.REJECTED_FINAL: "Rejected (final)",
        RequestStatus.RETURNED: "Returned for correction",
        RequestStatus.OVERDUE: "Overdue",
    },
}

STATUS_COLORS: Dict[RequestStatus, ColorCategory] = {
    RequestStatus.DRAFT: ColorCategory.NEUTRAL,
    RequestStatus.NEW_REQUEST: ColorCategory.INFO,
    RequestStatus.ACCEPTED: ColorCategory.SUCCESS,
    RequestStatus.FORWARDED: ColorCategory.INFO,
    RequestStatus.ASSIGNED: ColorCategory.INFO,
    RequestStatus.APPOINTMENT: ColorCategory.WARNING,
    RequestStatus.INSPECTING: ColorCategory.WARNING,
    RequestStatus.INSPECTION_DONE: ColorCategory.INFO,
    RequestStatus.DOCUMENT_EDIT: ColorCategory.INFO,
    RequestStatus.REPORT_APPROVED: ColorCategory.SUCCESS,
    RequestStatus.APPROVED: ColorCategory.SUCCESS,
    RequestStatus.REJECTED: ColorCategory.DANGER,
    RequestStatus.REJECTED_FINAL: ColorCategory.DANGER,
    RequestStatus.RETURNED: ColorCategory.WARNING,
    RequestStatus.OVERDUE: ColorCategory.DANGER,
}

STATUS_ICONS: Dict[RequestStatus, str] = {
    RequestStatus.DRAFT: "pencil-square",
    RequestStatus.NEW_REQUEST: "document-text",
    RequestStatus.ACCEPTED: "check-circle",
    RequestStatus.FORWARDED: "arrow-up-right",
    RequestStatus.ASSIGNED: "user-group",
    RequestStatus.APPOINTMENT: "calendar",
    RequestStatus.INSPECTING: "magnifying-glass",
    RequestStatus.INSPECTION_DONE: "clipboard-document-check",
    RequestStatus.DOCUMENT_EDIT: "pencil",
    RequestStatus.REPORT_APPROVED: "document-check",
    RequestStatus.APPROVED: "check-badge",
    RequestStatus.REJECTED: "x-circle",
    RequestStatus.REJECTED_FINAL: "no-symbol",
    RequestStatus.RETURNED: "arrow-uturn-left",
    RequestStatus.OVERDUE: "clock",
}

NEXT_STEP_HINTS: Dict[str, Dict[RequestStatus, str]] = {
    "th": {
        RequestStatus.DRAFT: "ส่งคำขอเพื่อเข้ารับการพิจารณา",
        RequestStatus.NEW_REQUEST: "เจ้าหน้าที่ DEDE จะพิจารณารับ ปฏิเสธ หรือส่งคืนคำขอ",
        RequestStatus.ACCEPTED: "เจ้าหน้าที่ DEDE จะส่งต่อคำขอให้ DEDE Head",
        RequestStatus.FORWARDED: "DEDE Head จะมอบหมายผู้ตรวจหรือปฏิเสธคำขอ",
        RequestStatus.ASSIGNED: "ผู้ตรวจจะนัดหมายเข้าตรวจสถานประกอบการ",
        RequestStatus.APPOINTMENT: "ผู้ตรวจจะเข้าตรวจสอบระบบตามวันนัดหมาย",
        RequestStatus.INSPECTING: "ผู้ตรวจจะสรุปผลการตรวจและจัดทำรายงาน",
        RequestStatus.INSPECTION_DONE: "ผู้ตรวจจะส่งรายงานการตรวจเพื่อพิจารณา",
        RequestStatus.DOCUMENT_EDIT: "เจ้าหน้าที่ DEDE จะตรวจสอบและรับรองรายงาน",
        RequestStatus.REPORT_APPROVED: "รอการอนุมัติใบอนุญาตขั้นสุดท้าย",
        RequestStatus.APPROVED: "ดำเนินการเสร็จสิ้น",
        RequestStatus.REJECTED: "คำขอถูกปฏิเสธ สามารถยื่นคำขอใหม่ได้",
        RequestStatus.REJECTED_FINAL: "คำขอถูกปฏิเสธอย่างถาวร",
        RequestStatus.RETURNED: "ผู้ยื่นคำขอต้องแก้ไขเอกสารและยื่นใหม่",
        RequestStatus.OVERDUE: "คำขอถูกยกเลิกอัตโนมัติเนื่องจากเกินกำหนด",
    },
    "en": {
        RequestStatus.DRAFT: "Submit the request for review",
        RequestStatus.NEW_REQUEST: "DEDE Admin will accept, reject or return the request",
        RequestStatus.ACCEPTED: "DEDE Admin will forward the request to DEDE Head",
        RequestStatus.FORWARDED: "DEDE Head will assign staff or reject the request",
        RequestStatus.ASSIGNED: "An appointment with the facility will be scheduled",
        RequestStatus.APPOINTMENT: "The site inspection will be conducted",
        RequestStatus.INSPECTING: "The inspection will be completed and reported",
        RequestStatus.INSPECTION_DONE: "The audit report will be submitted for review",
        RequestStatus.DOCUMENT_EDIT: "DEDE Staff will review and approve the report",
        RequestStatus.REPORT_APPROVED: "Final license approval is pending",
        RequestStatus.APPROVED: "Process completed",
        RequestStatus.REJECTED: "Request rejected; a new request can be submitted",
        RequestStatus.REJECTED_FINAL: "Request permanently rejected",
        RequestStatus.RETURNED: "The applicant must update and resubmit the documents",
        RequestStatus.OVERDUE: "Request auto-cancelled after a missed deadline",
    },
}

STATUS_PROGRESS: Dict[RequestStatus, int] = {
    RequestStatus.DRAFT: 0,
    RequestStatus.NEW_REQUEST: 10,
    RequestStatus.RETURNED: 15,
    RequestStatus.ACCEPTED: 20,
    RequestStatus.FORWARDED: 30,
    RequestStatus.ASSIGNED: 40,
    RequestStatus.APPOINTMENT: 50,
    RequestStatus.INSPECTING: 60,
    RequestStatus.INSPECTION_DONE: 70,
    RequestStatus.DOCUMENT_EDIT: 80,
    RequestStatus.REPORT_APPROVED: 90,
    RequestStatus.APPROVED: 100,
    RequestStatus.REJECTED: 0,
    RequestStatus.REJECTED_FINAL: 0,
    RequestStatus.OVERDUE: 0,
}

TERMINAL_STATUSES = frozenset(
    {RequestStatus.APPROVED, RequestStatus.REJECTED_FINAL, RequestStatus.OVERDUE}
)

WORKFLOW_PATH = (
    RequestStatus.NEW_REQUEST,
    RequestStatus.ACCEPTED,
    RequestStatus.ASSIGNED,
    RequestStatus.APPOINTMENT,
    RequestStatus.INSPECTING,
    RequestStatus.INSPECTION_DONE,
    RequestStatus.DOCUMENT_EDIT,
    RequestStatus.REPORT_APPROVED,
    RequestStatus.APPROVED,
)

# Days an officer has before the backend auto-cancels the request
DEADLINE_DAYS = {
    RequestStatus.APPOINTMENT: 7,
    RequestStatus.DOCUMENT_EDIT: 14,
}

LICENSE_TYPE_LABELS: Dict[str, Dict[LicenseType, str]] = {
    "th": {
        LicenseType.NEW: "ขอรับใบอนุญาตใหม่",
        LicenseType.RENEWAL: "ขอต่ออายุใบอนุญาต",
        LicenseType.EXTENSION: "ขอขยายการผลิต",
        LicenseType.REDUCTION: "ขอลดการผลิต",
    },
    "en": {
        LicenseType.NEW: "New license",
        LicenseType.RENEWAL: "License renewal",
        LicenseType.EXTENSION: "Production extension",
        LicenseType.REDUCTION: "Production reduction",
    },
}

ROLE_LABELS: Dict[str, Dict[ActorRole, str]] = {
    "th": {
        ActorRole.CITIZEN: "ผู้ยื่นคำขอ",
        ActorRole.USER: "ผู้ใช้งาน",
        ActorRole.OFFICER: "เจ้าหน้าที่",
        ActorRole.ADMIN: "ผู้ดูแลระบบ",
        ActorRole.SYSTEM_ADMIN: "ผู้ดูแลระบบ",
        ActorRole.DEDE_HEAD: "ผู้บริหาร DEDE",
        ActorRole.DEDE_HEAD_ADMIN: "ผู้บริหาร DEDE",
        ActorRole.DEDE_STAFF: "เจ้าหน้าที่ DEDE",
        ActorRole.DEDE_STAFF_ADMIN: "เจ้าหน้าที่ DEDE",
        ActorRole.DEDE_CONSULT: "ที่ปรึกษา DEDE",
        ActorRole.DEDE_CONSULT_ADMIN: "ที่ปรึกษา DEDE",
        ActorRole.AUDITOR: "ผู้ตรวจสอบ",
        ActorRole.AUDITOR_ADMIN: "ผู้ตรวจสอบ",
    },
    "en": {
        ActorRole.CITIZEN: "Applicant",
        ActorRole.USER: "User",
        ActorRole.OFFICER: "Officer",
        ActorRole.ADMIN: "DEDE Admin",
        ActorRole.SYSTEM_ADMIN: "System Admin",
        ActorRole.DEDE_HEAD: "DEDE Head",
        ActorRole.DEDE_HEAD_ADMIN: "DEDE Head",
        ActorRole.DEDE_STAFF: "DEDE Staff",
        ActorRole.DEDE_STAFF_ADMIN: "DEDE Staff",
        ActorRole.DEDE_CONSULT: "DEDE Consult",
        ActorRole.DEDE_CONSULT_ADMIN: "DEDE Consult",
        ActorRole.AUDITOR: "Auditor",
        ActorRole.AUDITOR_ADMIN: "Auditor",
    },
}


def _ensure_total(table: Mapping, members, table_name: str) -> None:
    """Raise RuntimeError if ``table`` does not describe every member."""
    missing = [member.value for member in members if member not in table]
    if missing:
        raise RuntimeError(f"{table_name} is missing entries for: {', '.join(missing)}")


for _locale in SUPPORTED_LOCALES:
    _ensure_total(STATUS_LABELS[_locale], RequestStatus, f"STATUS_LABELS[{_locale}]")
    _ensure_total(NEXT_STEP_HINTS[_locale], RequestStatus, f"NEXT_STEP_HINTS[{_locale}]")
    _ensure_total(LICENSE_TYPE_LABELS[_locale], LicenseType, f"LICENSE_TYPE_LABELS[{_locale}]")
    _ensure_total(ROLE_LABELS[_locale], ActorRole, f"ROLE_LABELS[{_locale}]")
_ensure_total(STATUS_COLORS, RequestStatus, "STATUS_COLORS")
_ensure_total(STATUS_ICONS, RequestStatus, "STATUS_ICONS")
_ensure_total(STATUS_PROGRESS, RequestStatus, "STATUS_PROGRESS")


def resolve_locale(locale: Optional[str]) -> str:
    """Return a supported locale, falling back to the default."""
    if isinstance(locale, str) and locale.lower() in SUPPORTED_LOCALES:
        return locale.lower()
    return DEFAULT_LOCALE


def display_label(status, locale: Optional[str] = None) -> str:
    """Localized label for a status; unknown codes are returned unchanged."""
    known = parse_status(status)
    if known is None:
        if status is None or (isinstance(status, str) and not status.strip()):
            return BLANK_STATUS_LABELS[resolve_locale(locale)]
        return status if isinstance(status, str) else str(status)
    return STATUS_LABELS[resolve_locale(locale)][known]


def color_category(status) -> ColorCategory:
    """Badge color category; unknown codes map to neutral."""
    known = parse_status(status)
    if known is None:
        return ColorCategory.NEUTRAL
    return STATUS_COLORS[known]


def status_icon(status) -> str:
    """Icon name for a status badge."""
    known = parse_status(status)
    if known is None:
        return UNKNOWN_ICON
    return STATUS_ICONS[known]


def next_step_hint(status, locale: Optional[str] = None) -> str:
    """What happens next for a request in ``status``."""
    resolved = resolve_locale(locale)
    known = parse_status(status)
    if known is None:
        return GENERIC_HINTS[resolved]
    return NEXT_STEP_HINTS[resolved][known]


def progress_percent(status) -> int:
    """Progress through the workflow, 0-100."""
    known = parse_status(status)
    if known is None:
        return 0
    return STATUS_PROGRESS[known]


def is_terminal(status) -> bool:
    """True for statuses after which nothing else happens."""
    return parse_status(status) in TERMINAL_STATUSES


def workflow_path() -> List[RequestStatus]:
    """Happy-path statuses in order."""
    return list(WORKFLOW_PATH)


def license_type_label(license_type, locale: Optional[str] = None) -> str:
    """Localized label for a license type; unknown codes are returned unchanged."""
    known = parse_license_type(license_type)
    if known is None:
        return license_type if isinstance(license_type, str) else str(license_type)
    return LICENSE_TYPE_LABELS[resolve_locale(locale)][known]


def role_label(role, locale: Optional[str] = None) -> str:
    """Localized label for an actor role; unknown roles are returned unchanged."""
    known = parse_role(role)
    if known is None:
        return role if isinstance(role, str) else str(role)
    return ROLE_LABELS[resolve_locale(locale)][known]


def default_deadline(status, from_time: datetime) -> Optional[datetime]:
    """Deadline the backend applies when a request enters ``status``."""
    days = DEADLINE_DAYS.get(parse_status(status))
    if days is None:
        return None
    return from_time + timedelta(days=days)


def _as_utc(value: datetime) -> datetime:
    """Convert to UTC; naive datetimes are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_overdue(status, deadline: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """
    Check whether a deadline-bearing request has passed its deadline.

    Only ``appointment`` and ``document_edit`` carry deadlines; every other
    status is never overdue.
    """
    if deadline is None or parse_status(status) not in DEADLINE_DAYS:
        return False
    if now is None:
        now = datetime.now(timezone.utc)
    return _as_utc(now) > _as_utc(deadline)


def present_deadline(
    status, deadline: Optional[datetime], now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Deadline block for a request: ISO deadline (or None) and overdue flag."""
    return {
        "deadline": _as_utc(deadline).isoformat() if deadline is not None else None,
        "is_overdue": is_overdue(status, deadline, now),
    }


def present_status(status, locale: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the full presentation block for a status badge.

    Returns:
        Dictionary with code, known, label, color, icon, next_step,
        progress and is_terminal
    """
    return {
        "code": status.value if isinstance(status, RequestStatus) else status,
        "known": parse_status(status) is not None,
        "label": display_label(status, locale),
        "color": color_category(status).value,
        "icon": status_icon(status),
        "next_step": next_step_hint(status, locale),
        "progress": progress_percent(status),
        "is_terminal": is_terminal(status),
    }
