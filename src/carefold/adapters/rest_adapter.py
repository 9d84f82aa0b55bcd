"""Convert REST export payloads into CaseRecords."""

from __future__ import annotations

import logging

from carefold.core.utils import coerce_enum, parse_iso_date, parse_timestamp
from carefold.exceptions import RecordError
from carefold.models import (
    AlertType,
    CaseRecords,
    Consultation,
    ConsultationStatus,
    ConsultationType,
    DeliveryOutcome,
    DeliveryType,
    FollowUp,
    FollowUpStatus,
    HealthCheck,
    Patient,
    RiskAlert,
    RiskLevel,
)

logger = logging.getLogger(__name__)


def _parser_counts(data: dict) -> dict[str, int]:
    """Count records in the raw export before adapter transformation."""
    return {
        "patients": len(data.get("patients", [])),
        "health_checks": len(data.get("healthChecks", [])),
        "consultations": len(data.get("consultations", [])),
        "follow_ups": len(data.get("followUps", [])),
        "alerts": len(data.get("alerts", [])),
    }


def _ts(item: dict, key: str, collection: str):
    try:
        return parse_timestamp(item.get(key))
    except ValueError as e:
        raise RecordError(f"{key} of record {item.get('id')}: {e}", collection=collection) from e


def _day(item: dict, key: str, collection: str):
    try:
        return parse_iso_date(item.get(key))
    except ValueError as e:
        raise RecordError(f"{key} of record {item.get('id')}: {e}", collection=collection) from e


def _enum(enum_cls, value, field_name: str):
    coerced = coerce_enum(enum_cls, value)
    if isinstance(coerced, str):
        logger.warning("Unknown %s value %r kept as-is", field_name, coerced)
    return coerced


def _patient_id(item: dict) -> int | None:
    """Records carry either a nested patient object or a flat patientId."""
    patient = item.get("patient")
    if isinstance(patient, dict):
        return patient.get("id")
    return item.get("patientId")


def _name(item: dict, key: str) -> str | None:
    """Name of a nested user object ({"doctor": {"name": ...}}), or a flat fallback."""
    nested = item.get(key)
    if isinstance(nested, dict):
        return nested.get("name") or None
    return item.get(f"{key}Name") or None


def _number(value):
    return value if isinstance(value, (int, float)) and not isinstance(value, bool) else None


def parse_patient(item: dict) -> Patient:
    return Patient(
        id=item.get("id"),
        name=item.get("name", ""),
        mother_id=item.get("motherId", ""),
        registration_date=_ts(item, "registrationDate", "patients"),
        current_risk_level=_enum(RiskLevel, item.get("currentRiskLevel"), "risk level"),
        lmp_date=_day(item, "lmpDate", "patients"),
        edd_date=_day(item, "eddDate", "patients"),
        delivery_outcome=_enum(DeliveryOutcome, item.get("deliveryOutcome"), "delivery outcome"),
        delivery_type=_enum(DeliveryType, item.get("deliveryType"), "delivery type"),
        delivery_date=_ts(item, "deliveryDate", "patients"),
        delivery_completed_at=_ts(item, "deliveryCompletedAt", "patients"),
        delivery_notes=item.get("deliveryNotes") or None,
        baby_weight=_number(item.get("babyWeight")),
        baby_gender=item.get("babyGender") or None,
        delivery_hospital=item.get("deliveryHospital") or None,
    )


def parse_health_check(item: dict) -> HealthCheck:
    return HealthCheck(
        id=item.get("id"),
        patient_id=_patient_id(item),
        check_date=_ts(item, "checkDate", "healthChecks"),
        risk_level=_enum(RiskLevel, item.get("riskLevel"), "risk level"),
        risk_score=_number(item.get("riskScore")) or 0,
        bp_systolic=_number(item.get("bpSystolic")),
        bp_diastolic=_number(item.get("bpDiastolic")),
        hemoglobin=_number(item.get("hemoglobin")),
        weight=_number(item.get("weight")),
        notes=item.get("notes") or None,
    )


def parse_consultation(item: dict) -> Consultation:
    return Consultation(
        id=item.get("id"),
        patient_id=_patient_id(item),
        scheduled_at=_ts(item, "scheduledAt", "consultations"),
        doctor_name=_name(item, "doctor"),
        type=_enum(ConsultationType, item.get("type"), "consultation type")
        or ConsultationType.IN_PERSON,
        status=_enum(ConsultationStatus, item.get("status"), "consultation status")
        or ConsultationStatus.SCHEDULED,
        chief_complaint=item.get("chiefComplaint") or None,
        diagnosis=item.get("diagnosis") or None,
    )


def parse_follow_up(item: dict) -> FollowUp:
    return FollowUp(
        id=item.get("id"),
        patient_id=_patient_id(item),
        scheduled_date=_ts(item, "scheduledDate", "followUps"),
        assignee_name=_name(item, "assignedTo"),
        status=_enum(FollowUpStatus, item.get("status"), "follow-up status")
        or FollowUpStatus.PENDING,
        attempt_count=_number(item.get("attemptCount")) or 0,
        patient_condition=item.get("patientCondition") or None,
        notes=item.get("notes") or None,
    )


def parse_alert(item: dict) -> RiskAlert:
    return RiskAlert(
        id=item.get("id"),
        patient_id=_patient_id(item),
        created_at=_ts(item, "createdAt", "alerts"),
        severity=_enum(RiskLevel, item.get("severity"), "severity") or RiskLevel.YELLOW,
        title=item.get("title", ""),
        description=item.get("description", ""),
        alert_type=_enum(AlertType, item.get("alertType"), "alert type") or "",
        is_acknowledged=item.get("isAcknowledged") is True,
        is_resolved=item.get("isResolved") is True,
    )


def rest_to_records(data: dict) -> CaseRecords:
    """Transform read_export() output into CaseRecords.

    Raises RecordError when a timestamp field cannot be parsed.
    """
    records = CaseRecords(
        patients=[parse_patient(p) for p in data.get("patients", [])],
        health_checks=[parse_health_check(h) for h in data.get("healthChecks", [])],
        consultations=[parse_consultation(c) for c in data.get("consultations", [])],
        follow_ups=[parse_follow_up(f) for f in data.get("followUps", [])],
        alerts=[parse_alert(a) for a in data.get("alerts", [])],
    )
    logger.debug("Export counts %s, adapted %s", _parser_counts(data), records.counts())
    return records


def load_records(path: str) -> CaseRecords:
    """Read an export file and adapt it in one step."""
    from carefold.sources.rest_export import read_export

    return rest_to_records(read_export(path))
