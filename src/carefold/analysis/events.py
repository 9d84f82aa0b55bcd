"""Clinical record normalizer — maps each record variant onto a TimelineEvent.

Each of the six ClinicalRecord variants has its own mapping of title,
description, icon/color hints, status label and detail fields. Detail fields
whose value is absent are left out rather than rendered empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from carefold.core.utils import enum_value, format_number
from carefold.models import (
    ClinicalRecord,
    Consultation,
    ConsultationStatus,
    ConsultationType,
    DeliveryOutcome,
    DeliveryRecord,
    EventCategory,
    FollowUp,
    FollowUpStatus,
    HealthCheck,
    Registration,
    RiskAlert,
    RiskLevel,
    TimelineEvent,
)


@dataclass(frozen=True)
class StatusInfo:
    label: str
    color: str


NEUTRAL_COLOR = "gray"

CONSULTATION_STATUS_INFO: dict[ConsultationStatus, StatusInfo] = {
    ConsultationStatus.SCHEDULED: StatusInfo("Scheduled", "info"),
    ConsultationStatus.IN_PROGRESS: StatusInfo("In Progress", "warning"),
    ConsultationStatus.COMPLETED: StatusInfo("Completed", "success"),
    ConsultationStatus.CANCELLED: StatusInfo("Cancelled", "gray"),
    ConsultationStatus.NO_SHOW: StatusInfo("No Show", "danger"),
}

FOLLOW_UP_STATUS_INFO: dict[FollowUpStatus, StatusInfo] = {
    FollowUpStatus.PENDING: StatusInfo("Pending", "warning"),
    FollowUpStatus.COMPLETED: StatusInfo("Completed", "success"),
    FollowUpStatus.NO_ANSWER: StatusInfo("No Answer", "danger"),
    FollowUpStatus.RESCHEDULED: StatusInfo("Rescheduled", "info"),
    FollowUpStatus.CANCELLED: StatusInfo("Cancelled", "gray"),
}

DELIVERY_OUTCOME_INFO: dict[DeliveryOutcome, StatusInfo] = {
    DeliveryOutcome.SUCCESSFUL: StatusInfo("Successful Delivery", "success"),
    DeliveryOutcome.MOTHER_MORTALITY: StatusInfo("Mother Mortality", "danger"),
    DeliveryOutcome.BABY_MORTALITY: StatusInfo("Baby Mortality", "danger"),
    DeliveryOutcome.BOTH_MORTALITY: StatusInfo("Both Mortality", "danger"),
}

CONSULTATION_TITLE_PREFIX: dict[ConsultationType, str] = {
    ConsultationType.TELECONSULTATION: "Tele",
    ConsultationType.EMERGENCY: "Emergency",
    ConsultationType.IN_PERSON: "In-Person",
}

RISK_COLORS: dict[RiskLevel, str] = {
    RiskLevel.RED: "danger",
    RiskLevel.YELLOW: "warning",
    RiskLevel.GREEN: "success",
}


def status_info(table: dict, status: object) -> StatusInfo:
    """Look up a status, falling back to the raw value with a neutral color."""
    info = table.get(status)
    if info is not None:
        return info
    return StatusInfo(str(enum_value(status)), NEUTRAL_COLOR)


def risk_color(level: object) -> str:
    return RISK_COLORS.get(level, NEUTRAL_COLOR)


def _details(*pairs: tuple[str, object]) -> dict[str, str]:
    """Build an ordered detail mapping, omitting pairs whose value is None or ""."""
    out: dict[str, str] = {}
    for label, value in pairs:
        if value is None or value == "":
            continue
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            out[label] = format_number(value)
        else:
            out[label] = str(enum_value(value))
    return out


def _with_unit(value: int | float | None, unit: str) -> str | None:
    return None if value is None else f"{format_number(value)} {unit}"


def normalize_registration(record: Registration, now: datetime) -> TimelineEvent:
    name = record.patient_name or "Patient"
    return TimelineEvent(
        id="registration",
        category=EventCategory.REGISTRATION,
        timestamp=record.registered_at,
        title="Patient Registered",
        description=f"{name} was registered in the system",
        icon_hint="user-plus",
        color_hint="primary",
        detail_fields=_details(
            ("Mother ID", record.mother_identifier),
            ("Risk Level", record.risk_level_at_registration),
        ),
        source_record=record,
    )


def normalize_health_check(record: HealthCheck, now: datetime) -> TimelineEvent:
    bp = None
    if record.bp_systolic is not None and record.bp_diastolic is not None:
        bp = f"{record.bp_systolic}/{record.bp_diastolic} mmHg"
    risk_score = format_number(record.risk_score)
    return TimelineEvent(
        id=f"hc-{record.id}",
        category=EventCategory.HEALTH_CHECK,
        timestamp=record.check_date,
        title="Health Check",
        description=record.notes or f"Routine health check - Risk Score: {risk_score}",
        icon_hint="clipboard-check",
        color_hint=risk_color(record.risk_level),
        risk_level=record.risk_level,
        detail_fields=_details(
            ("BP", bp),
            ("Hemoglobin", _with_unit(record.hemoglobin, "g/dL")),
            ("Weight", _with_unit(record.weight, "kg")),
            ("Risk Score", record.risk_score),
        ),
        source_record=record,
    )


def normalize_consultation(record: Consultation, now: datetime) -> TimelineEvent:
    info = status_info(CONSULTATION_STATUS_INFO, record.status)
    prefix = CONSULTATION_TITLE_PREFIX.get(record.type, "In-Person")
    doctor = record.doctor_name or "Unknown"
    return TimelineEvent(
        id=f"consultation-{record.id}",
        category=EventCategory.CONSULTATION,
        timestamp=record.scheduled_at,
        title=f"{prefix} Consultation",
        description=record.chief_complaint or f"Consultation with Dr. {doctor}",
        icon_hint="video-camera",
        color_hint=info.color,
        status_label=info.label,
        status_color_hint=info.color,
        detail_fields=_details(
            ("Doctor", record.doctor_name),
            ("Diagnosis", record.diagnosis),
            ("Status", info.label),
        ),
        source_record=record,
    )


def normalize_follow_up(record: FollowUp, now: datetime) -> TimelineEvent:
    info = status_info(FOLLOW_UP_STATUS_INFO, record.status)
    description = (
        record.patient_condition
        or record.notes
        or f"Follow-up by {record.assignee_name or 'Staff'}"
    )
    return TimelineEvent(
        id=f"followup-{record.id}",
        category=EventCategory.FOLLOW_UP,
        timestamp=record.scheduled_date,
        title="Follow-up Call",
        description=description,
        icon_hint="phone",
        color_hint=info.color,
        status_label=info.label,
        status_color_hint=info.color,
        detail_fields=_details(
            ("Assigned To", record.assignee_name),
            ("Attempts", record.attempt_count),
            ("Status", info.label),
        ),
        source_record=record,
    )


def normalize_alert(record: RiskAlert, now: datetime) -> TimelineEvent:
    if record.is_resolved:
        status = StatusInfo("Resolved", "success")
    elif record.is_acknowledged:
        status = StatusInfo("Acknowledged", "info")
    else:
        status = StatusInfo("Active", "danger")
    alert_type = str(enum_value(record.alert_type) or "")
    return TimelineEvent(
        id=f"alert-{record.id}",
        category=EventCategory.ALERT,
        timestamp=record.created_at,
        title=record.title,
        description=record.description,
        icon_hint="exclamation-triangle" if record.severity == RiskLevel.RED else "bell-alert",
        color_hint=risk_color(record.severity),
        status_label=status.label,
        status_color_hint=status.color,
        risk_level=record.severity,
        detail_fields=_details(
            ("Alert Type", alert_type.replace("_", " ")),
            ("Severity", record.severity),
            ("Resolved", "Yes" if record.is_resolved else "No"),
        ),
        source_record=record,
    )


def normalize_delivery(record: DeliveryRecord, now: datetime) -> TimelineEvent:
    info = DELIVERY_OUTCOME_INFO.get(record.outcome, StatusInfo("Pending", NEUTRAL_COLOR))
    # Both dates absent: place the outcome at the reference time.
    timestamp = record.timestamp or now
    if record.delivery_type:
        description = f"Delivery type: {enum_value(record.delivery_type)}"
    else:
        description = "Delivery recorded"
    return TimelineEvent(
        id="delivery",
        category=EventCategory.DELIVERY,
        timestamp=timestamp,
        title=info.label,
        description=record.notes or description,
        icon_hint="heart-solid" if record.outcome == DeliveryOutcome.SUCCESSFUL else "heart",
        color_hint=info.color,
        detail_fields=_details(
            ("Delivery Type", record.delivery_type),
            ("Baby Gender", record.baby_gender),
            ("Baby Weight", _with_unit(record.baby_weight, "kg")),
            ("Hospital", record.hospital),
        ),
        source_record=record,
    )


_NORMALIZERS: dict[type, Callable[[object, datetime], TimelineEvent]] = {
    Registration: normalize_registration,
    HealthCheck: normalize_health_check,
    Consultation: normalize_consultation,
    FollowUp: normalize_follow_up,
    RiskAlert: normalize_alert,
    DeliveryRecord: normalize_delivery,
}


def normalize(record: ClinicalRecord, now: datetime) -> TimelineEvent:
    """Convert any ClinicalRecord variant into a TimelineEvent.

    Args:
        record: One of the six record variants. Apart from deliveries, the
            record's timestamp must be present; callers filter undated records.
        now: Reference time, used only when a delivery carries no date.

    Raises TypeError for anything that is not a ClinicalRecord variant.
    """
    normalizer = _NORMALIZERS.get(type(record))
    if normalizer is None:
        raise TypeError(f"Not a clinical record: {type(record).__name__}")
    return normalizer(record, now)

