"""Data model for maternal-health case records and the view-models built from them.

Source records (Patient, HealthCheck, Consultation, FollowUp, RiskAlert) mirror
the REST backend's payloads. Registration and DeliveryRecord are synthesized
from the Patient summary. Together with the four fetched collections they form
the six-way ClinicalRecord union that the timeline normalizes.

The view-models (TimelineEvent, DayBucket, MonthCalendar, GestationalSnapshot)
are built fresh on every call and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Union


class RiskLevel(str, Enum):
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class ConsultationType(str, Enum):
    TELECONSULTATION = "TELECONSULTATION"
    IN_PERSON = "IN_PERSON"
    EMERGENCY = "EMERGENCY"


class ConsultationStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class FollowUpStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    NO_ANSWER = "NO_ANSWER"
    RESCHEDULED = "RESCHEDULED"
    CANCELLED = "CANCELLED"


class DeliveryOutcome(str, Enum):
    PENDING = "PENDING"
    SUCCESSFUL = "SUCCESSFUL"
    MOTHER_MORTALITY = "MOTHER_MORTALITY"
    BABY_MORTALITY = "BABY_MORTALITY"
    BOTH_MORTALITY = "BOTH_MORTALITY"


class DeliveryType(str, Enum):
    NORMAL = "NORMAL"
    CESAREAN = "CESAREAN"
    ASSISTED = "ASSISTED"
    INDUCED = "INDUCED"


class AlertType(str, Enum):
    HIGH_RISK_DETECTED = "HIGH_RISK_DETECTED"
    CRITICAL_VITALS = "CRITICAL_VITALS"
    MISSED_APPOINTMENT = "MISSED_APPOINTMENT"
    OVERDUE_FOLLOWUP = "OVERDUE_FOLLOWUP"
    COMPLICATION_REPORTED = "COMPLICATION_REPORTED"
    EMERGENCY = "EMERGENCY"


class EventCategory(str, Enum):
    REGISTRATION = "registration"
    HEALTH_CHECK = "health_check"
    CONSULTATION = "consultation"
    FOLLOW_UP = "follow_up"
    ALERT = "alert"
    DELIVERY = "delivery"


class Trimester(str, Enum):
    FIRST = "FIRST"
    SECOND = "SECOND"
    THIRD = "THIRD"


class HeatTier(str, Enum):
    """Display classification of one calendar day."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"
    PENDING = "pending"
    OVERDUE = "overdue"


# --- Source records ---


@dataclass
class Patient:
    """Patient summary as returned by the backend."""

    id: int
    name: str = ""
    mother_id: str = ""
    registration_date: datetime | None = None
    current_risk_level: RiskLevel | str | None = None
    lmp_date: date | None = None
    edd_date: date | None = None
    delivery_outcome: DeliveryOutcome | str | None = None
    delivery_type: DeliveryType | str | None = None
    delivery_date: datetime | None = None
    delivery_completed_at: datetime | None = None
    delivery_notes: str | None = None
    baby_weight: float | None = None
    baby_gender: str | None = None
    delivery_hospital: str | None = None


@dataclass
class Registration:
    """Registration event, synthesized once per patient."""

    patient_id: int
    registered_at: datetime | None
    mother_identifier: str = ""
    risk_level_at_registration: RiskLevel | str | None = None
    patient_name: str = ""

    @property
    def timestamp(self) -> datetime | None:
        return self.registered_at


@dataclass
class HealthCheck:
    """An antenatal health check with its computed risk."""

    id: int
    patient_id: int
    check_date: datetime | None
    risk_level: RiskLevel | str | None = None
    risk_score: int | float = 0
    bp_systolic: int | None = None
    bp_diastolic: int | None = None
    hemoglobin: float | None = None
    weight: float | None = None
    notes: str | None = None

    @property
    def timestamp(self) -> datetime | None:
        return self.check_date


@dataclass
class Consultation:
    """A doctor consultation (tele, in-person or emergency)."""

    id: int
    patient_id: int
    scheduled_at: datetime | None
    doctor_name: str | None = None
    type: ConsultationType | str = ConsultationType.IN_PERSON
    status: ConsultationStatus | str = ConsultationStatus.SCHEDULED
    chief_complaint: str | None = None
    diagnosis: str | None = None

    @property
    def timestamp(self) -> datetime | None:
        return self.scheduled_at


@dataclass
class FollowUp:
    """A scheduled follow-up call to the patient."""

    id: int
    patient_id: int
    scheduled_date: datetime | None
    assignee_name: str | None = None
    status: FollowUpStatus | str = FollowUpStatus.PENDING
    attempt_count: int = 0
    patient_condition: str | None = None
    notes: str | None = None

    @property
    def timestamp(self) -> datetime | None:
        return self.scheduled_date


@dataclass
class RiskAlert:
    """A risk alert raised against a patient."""

    id: int
    patient_id: int
    created_at: datetime | None
    severity: RiskLevel | str = RiskLevel.YELLOW
    title: str = ""
    description: str = ""
    alert_type: AlertType | str = ""
    is_acknowledged: bool = False
    is_resolved: bool = False

    @property
    def timestamp(self) -> datetime | None:
        return self.created_at


@dataclass
class DeliveryRecord:
    """Delivery outcome, synthesized only when the outcome is no longer PENDING."""

    patient_id: int
    outcome: DeliveryOutcome | str
    delivery_type: DeliveryType | str | None = None
    delivery_date: datetime | None = None
    delivery_completed_at: datetime | None = None
    notes: str | None = None
    baby_gender: str | None = None
    baby_weight: float | None = None
    hospital: str | None = None

    @property
    def timestamp(self) -> datetime | None:
        return self.delivery_date or self.delivery_completed_at


ClinicalRecord = Union[Registration, HealthCheck, Consultation, FollowUp, RiskAlert, DeliveryRecord]


def registration_from_patient(patient: Patient) -> Registration:
    return Registration(
        patient_id=patient.id,
        registered_at=patient.registration_date,
        mother_identifier=patient.mother_id,
        risk_level_at_registration=patient.current_risk_level,
        patient_name=patient.name,
    )


def delivery_from_patient(patient: Patient) -> DeliveryRecord | None:
    """Return the delivery record, or None while the outcome is absent or PENDING."""
    if not patient.delivery_outcome or patient.delivery_outcome == DeliveryOutcome.PENDING:
        return None
    return DeliveryRecord(
        patient_id=patient.id,
        outcome=patient.delivery_outcome,
        delivery_type=patient.delivery_type,
        delivery_date=patient.delivery_date,
        delivery_completed_at=patient.delivery_completed_at,
        notes=patient.delivery_notes,
        baby_gender=patient.baby_gender,
        baby_weight=patient.baby_weight,
        hospital=patient.delivery_hospital,
    )


@dataclass
class CaseRecords:
    """Container for every collection loaded from one export.

    Collections are flat across patients; use for_patient() to cut out one
    patient's records and follow_ups_between() for a calendar's date range.
    """

    patients: list[Patient] = field(default_factory=list)
    health_checks: list[HealthCheck] = field(default_factory=list)
    consultations: list[Consultation] = field(default_factory=list)
    follow_ups: list[FollowUp] = field(default_factory=list)
    alerts: list[RiskAlert] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "patients": len(self.patients),
            "health_checks": len(self.health_checks),
            "consultations": len(self.consultations),
            "follow_ups": len(self.follow_ups),
            "alerts": len(self.alerts),
        }

    def get_patient(self, patient_id: int) -> Patient | None:
        for p in self.patients:
            if p.id == patient_id:
                return p
        return None

    def for_patient(self, patient_id: int) -> dict[str, list]:
        """Return the four fetched collections filtered to one patient."""
        return {
            "health_checks": [r for r in self.health_checks if r.patient_id == patient_id],
            "consultations": [r for r in self.consultations if r.patient_id == patient_id],
            "follow_ups": [r for r in self.follow_ups if r.patient_id == patient_id],
            "alerts": [r for r in self.alerts if r.patient_id == patient_id],
        }

    def follow_ups_between(self, start: date, end: date) -> list[FollowUp]:
        """Follow-ups whose scheduled date falls within [start, end]."""
        return [
            f for f in self.follow_ups
            if f.scheduled_date is not None and start <= f.scheduled_date.date() <= end
        ]


# --- View-models ---


@dataclass(frozen=True)
class TimelineEvent:
    """One clinical record in the unified patient timeline."""

    id: str  # unique per source + record id
    category: EventCategory
    timestamp: datetime
    title: str
    description: str
    icon_hint: str
    color_hint: str
    status_label: str | None = None
    status_color_hint: str | None = None
    risk_level: RiskLevel | str | None = None
    detail_fields: dict[str, str] = field(default_factory=dict)  # insertion-ordered
    source_record: ClinicalRecord | None = field(default=None, compare=False, repr=False)


@dataclass
class DayBucket:
    """Aggregated follow-up activity for one calendar cell."""

    date: date
    is_in_target_month: bool
    is_today: bool = False
    total_count: int = 0
    completed_count: int = 0
    pending_count: int = 0
    overdue_count: int = 0
    tier: HeatTier = HeatTier.NONE


@dataclass
class MonthSummary:
    """Totals over the target month's cells only."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    busy_days: int = 0


@dataclass
class MonthCalendar:
    year: int
    month: int  # 1-12
    days: list[DayBucket] = field(default_factory=list)
    summary: MonthSummary = field(default_factory=MonthSummary)


@dataclass
class CheckupMarker:
    """A health check placed on the 1-40 week axis."""

    week: int
    date: date
    risk_level: RiskLevel | str | None = None


@dataclass
class GestationalSnapshot:
    """Gestational progress of one pregnancy at a reference date."""

    current_week: int
    days_remaining_to_edd: int
    trimester: Trimester | None
    progress_percent: float
    lmp_date: date
    edd_date: date
    edd_derived: bool = False
    markers: list[CheckupMarker] = field(default_factory=list)
    check_count: int = 0
    last_check_date: date | None = None
