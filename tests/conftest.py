"""Shared test fixtures for carefold tests."""

import json
from datetime import date, datetime

import pytest

from carefold.models import (
    AlertType,
    CaseRecords,
    Consultation,
    ConsultationStatus,
    ConsultationType,
    FollowUp,
    FollowUpStatus,
    HealthCheck,
    Patient,
    RiskAlert,
    RiskLevel,
)

# Reference "now" shared by most tests: day 22 of the scenario below.
NOW = datetime(2024, 3, 23, 12, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def patient():
    """Registered on 2024-03-01, LMP 2024-01-01, delivery still pending."""
    return Patient(
        id=1,
        name="Lakshmi Devi",
        mother_id="MCH-0001",
        registration_date=datetime(2024, 3, 1, 9, 0),
        current_risk_level=RiskLevel.YELLOW,
        lmp_date=date(2024, 1, 1),
    )


@pytest.fixture
def health_checks():
    return [
        HealthCheck(
            id=10,
            patient_id=1,
            check_date=datetime(2024, 3, 11, 10, 0),
            risk_level=RiskLevel.RED,
            risk_score=72,
            bp_systolic=150,
            bp_diastolic=100,
            hemoglobin=8.5,
            weight=54.0,
        ),
    ]


@pytest.fixture
def consultations():
    return [
        Consultation(
            id=20,
            patient_id=1,
            scheduled_at=datetime(2024, 3, 21, 11, 0),
            doctor_name="Anitha Rao",
            type=ConsultationType.TELECONSULTATION,
            status=ConsultationStatus.SCHEDULED,
        ),
    ]


@pytest.fixture
def follow_ups():
    return [
        FollowUp(
            id=30,
            patient_id=1,
            scheduled_date=datetime(2024, 3, 26, 10, 0),
            assignee_name="Sravani",
            status=FollowUpStatus.PENDING,
        ),
    ]


@pytest.fixture
def alerts():
    return [
        RiskAlert(
            id=40,
            patient_id=1,
            created_at=datetime(2024, 3, 11, 10, 5),
            severity=RiskLevel.RED,
            title="High Risk Detected",
            description="BP 150/100 with low hemoglobin",
            alert_type=AlertType.HIGH_RISK_DETECTED,
        ),
    ]


@pytest.fixture
def case_records(patient, health_checks, consultations, follow_ups, alerts):
    other = Patient(id=2, name="Padma", mother_id="MCH-0002",
                    registration_date=datetime(2024, 2, 1))
    return CaseRecords(
        patients=[patient, other],
        health_checks=health_checks,
        consultations=consultations,
        follow_ups=follow_ups + [
            FollowUp(id=31, patient_id=2, scheduled_date=datetime(2024, 3, 5),
                     status=FollowUpStatus.COMPLETED),
        ],
        alerts=alerts,
    )


EXPORT = {
    "patients": [
        {
            "id": 1,
            "name": "Lakshmi Devi",
            "motherId": "MCH-0001",
            "registrationDate": "2024-03-01T09:00:00",
            "currentRiskLevel": "YELLOW",
            "lmpDate": "2024-01-01",
            "deliveryOutcome": "PENDING",
        },
        {
            "id": 2,
            "name": "Padma",
            "motherId": "MCH-0002",
            "registrationDate": "2024-02-01T08:30:00",
            "currentRiskLevel": "GREEN",
            "deliveryOutcome": "SUCCESSFUL",
            "deliveryType": "NORMAL",
            "deliveryDate": "2024-03-10T04:15:00",
            "babyWeight": 2.9,
            "babyGender": "Female",
            "deliveryHospital": "Area Hospital",
        },
    ],
    "healthChecks": [
        {
            "id": 10,
            "patient": {"id": 1},
            "checkDate": "2024-03-11T10:00:00",
            "bpSystolic": 150,
            "bpDiastolic": 100,
            "hemoglobin": 8.5,
            "riskLevel": "RED",
            "riskScore": 72,
        },
    ],
    "consultations": [
        {
            "id": 20,
            "patient": {"id": 1},
            "doctor": {"id": 5, "name": "Anitha Rao"},
            "type": "TELECONSULTATION",
            "status": "SCHEDULED",
            "scheduledAt": "2024-03-21T11:00:00",
        },
    ],
    "followUps": [
        {
            "id": 30,
            "patient": {"id": 1},
            "assignedTo": {"id": 7, "name": "Sravani"},
            "scheduledDate": "2024-03-26T10:00:00",
            "status": "PENDING",
            "attemptCount": 0,
        },
        {
            "id": 31,
            "patient": {"id": 2},
            "assignedTo": {"id": 7, "name": "Sravani"},
            "scheduledDate": "2024-03-05T09:00:00",
            "status": "COMPLETED",
            "attemptCount": 1,
            "patientCondition": "Recovering well",
        },
    ],
    "alerts": [
        {
            "id": 40,
            "patient": {"id": 1},
            "alertType": "HIGH_RISK_DETECTED",
            "severity": "RED",
            "title": "High Risk Detected",
            "description": "BP 150/100 with low hemoglobin",
            "isAcknowledged": True,
            "isResolved": False,
            "createdAt": "2024-03-11T10:05:00",
        },
    ],
}


@pytest.fixture
def export_data():
    return json.loads(json.dumps(EXPORT))


@pytest.fixture
def export_file(tmp_path, export_data):
    """Write the sample export to disk and return its path."""
    path = tmp_path / "export.json"
    path.write_text(json.dumps(export_data))
    return str(path)
