"""Tests for carefold.analysis.events (record normalizer)."""

from datetime import datetime

import pytest

from carefold.analysis.events import (
    CONSULTATION_STATUS_INFO,
    FOLLOW_UP_STATUS_INFO,
    normalize,
    status_info,
)
from carefold.models import (
    AlertType,
    Consultation,
    ConsultationStatus,
    ConsultationType,
    DeliveryOutcome,
    DeliveryRecord,
    DeliveryType,
    EventCategory,
    FollowUp,
    FollowUpStatus,
    HealthCheck,
    Registration,
    RiskAlert,
    RiskLevel,
)

NOW = datetime(2024, 3, 23, 12, 0)
TS = datetime(2024, 3, 10, 9, 30)


class TestRegistration:
    def test_fields(self):
        reg = Registration(patient_id=1, registered_at=TS, mother_identifier="MCH-1",
                           risk_level_at_registration=RiskLevel.GREEN, patient_name="Lakshmi")
        event = normalize(reg, NOW)
        assert event.id == "registration"
        assert event.category == EventCategory.REGISTRATION
        assert event.title == "Patient Registered"
        assert event.description == "Lakshmi was registered in the system"
        assert event.status_label is None
        assert event.detail_fields == {"Mother ID": "MCH-1", "Risk Level": "GREEN"}
        assert event.source_record is reg

    def test_missing_risk_level_omitted(self):
        reg = Registration(patient_id=1, registered_at=TS, mother_identifier="MCH-1")
        event = normalize(reg, NOW)
        assert "Risk Level" not in event.detail_fields


class TestHealthCheck:
    def test_full_vitals(self):
        hc = HealthCheck(id=3, patient_id=1, check_date=TS, risk_level=RiskLevel.RED,
                         risk_score=72, bp_systolic=150, bp_diastolic=100,
                         hemoglobin=8.5, weight=54.0)
        event = normalize(hc, NOW)
        assert event.id == "hc-3"
        assert event.title == "Health Check"
        assert event.risk_level == RiskLevel.RED
        assert event.color_hint == "danger"
        assert list(event.detail_fields) == ["BP", "Hemoglobin", "Weight", "Risk Score"]
        assert event.detail_fields["BP"] == "150/100 mmHg"
        assert event.detail_fields["Hemoglobin"] == "8.5 g/dL"
        assert event.detail_fields["Weight"] == "54 kg"
        assert event.detail_fields["Risk Score"] == "72"

    def test_synthesized_description(self):
        hc = HealthCheck(id=3, patient_id=1, check_date=TS, risk_score=15)
        assert normalize(hc, NOW).description == "Routine health check - Risk Score: 15"

    def test_notes_used_as_description(self):
        hc = HealthCheck(id=3, patient_id=1, check_date=TS, notes="Mild swelling")
        assert normalize(hc, NOW).description == "Mild swelling"

    def test_half_bp_pair_omitted(self):
        hc = HealthCheck(id=3, patient_id=1, check_date=TS, bp_systolic=120)
        details = normalize(hc, NOW).detail_fields
        assert "BP" not in details
        assert not any("undefined" in v or "None" in v for v in details.values())

    def test_absent_vitals_omitted(self):
        hc = HealthCheck(id=3, patient_id=1, check_date=TS, risk_score=0)
        assert normalize(hc, NOW).detail_fields == {"Risk Score": "0"}

    def test_unknown_risk_is_gray(self):
        hc = HealthCheck(id=3, patient_id=1, check_date=TS, risk_level=None)
        assert normalize(hc, NOW).color_hint == "gray"


class TestConsultation:
    @pytest.mark.parametrize("ctype,title", [
        (ConsultationType.TELECONSULTATION, "Tele Consultation"),
        (ConsultationType.EMERGENCY, "Emergency Consultation"),
        (ConsultationType.IN_PERSON, "In-Person Consultation"),
    ])
    def test_title_by_type(self, ctype, title):
        c = Consultation(id=1, patient_id=1, scheduled_at=TS, type=ctype)
        assert normalize(c, NOW).title == title

    def test_status_table(self):
        expected = {
            ConsultationStatus.SCHEDULED: ("Scheduled", "info"),
            ConsultationStatus.IN_PROGRESS: ("In Progress", "warning"),
            ConsultationStatus.COMPLETED: ("Completed", "success"),
            ConsultationStatus.CANCELLED: ("Cancelled", "gray"),
            ConsultationStatus.NO_SHOW: ("No Show", "danger"),
        }
        assert set(CONSULTATION_STATUS_INFO) == set(ConsultationStatus)
        for status, (label, color) in expected.items():
            c = Consultation(id=1, patient_id=1, scheduled_at=TS, status=status)
            event = normalize(c, NOW)
            assert (event.status_label, event.status_color_hint) == (label, color)

    def test_unmapped_status_falls_back_to_raw(self):
        c = Consultation(id=1, patient_id=1, scheduled_at=TS, status="ON_HOLD")
        event = normalize(c, NOW)
        assert event.status_label == "ON_HOLD"
        assert event.status_color_hint == "gray"

    def test_raw_string_of_known_status_maps(self):
        info = status_info(CONSULTATION_STATUS_INFO, "NO_SHOW")
        assert info.label == "No Show"

    def test_description_and_details(self):
        c = Consultation(id=9, patient_id=1, scheduled_at=TS, doctor_name="Rao")
        event = normalize(c, NOW)
        assert event.id == "consultation-9"
        assert event.description == "Consultation with Dr. Rao"
        assert event.detail_fields == {"Doctor": "Rao", "Status": "Scheduled"}

    def test_unknown_doctor(self):
        c = Consultation(id=9, patient_id=1, scheduled_at=TS, chief_complaint=None)
        event = normalize(c, NOW)
        assert event.description == "Consultation with Dr. Unknown"
        assert "Doctor" not in event.detail_fields

    def test_chief_complaint_preferred(self):
        c = Consultation(id=9, patient_id=1, scheduled_at=TS, chief_complaint="Headache",
                         diagnosis="Pre-eclampsia")
        event = normalize(c, NOW)
        assert event.description == "Headache"
        assert event.detail_fields["Diagnosis"] == "Pre-eclampsia"


class TestFollowUp:
    def test_status_table_complete(self):
        assert set(FOLLOW_UP_STATUS_INFO) == set(FollowUpStatus)
        assert FOLLOW_UP_STATUS_INFO[FollowUpStatus.PENDING].color == "warning"
        assert FOLLOW_UP_STATUS_INFO[FollowUpStatus.NO_ANSWER].color == "danger"
        assert FOLLOW_UP_STATUS_INFO[FollowUpStatus.RESCHEDULED].color == "info"

    def test_description_preference(self):
        f = FollowUp(id=1, patient_id=1, scheduled_date=TS, assignee_name="Sravani",
                     patient_condition="Stable", notes="Called twice")
        assert normalize(f, NOW).description == "Stable"

        f = FollowUp(id=1, patient_id=1, scheduled_date=TS, assignee_name="Sravani",
                     notes="Called twice")
        assert normalize(f, NOW).description == "Called twice"

        f = FollowUp(id=1, patient_id=1, scheduled_date=TS, assignee_name="Sravani")
        assert normalize(f, NOW).description == "Follow-up by Sravani"

        f = FollowUp(id=1, patient_id=1, scheduled_date=TS)
        assert normalize(f, NOW).description == "Follow-up by Staff"

    def test_details(self):
        f = FollowUp(id=4, patient_id=1, scheduled_date=TS, assignee_name="Sravani",
                     status=FollowUpStatus.NO_ANSWER, attempt_count=2)
        event = normalize(f, NOW)
        assert event.id == "followup-4"
        assert event.title == "Follow-up Call"
        assert event.detail_fields == {
            "Assigned To": "Sravani", "Attempts": "2", "Status": "No Answer",
        }


class TestAlert:
    def _alert(self, **kw):
        base = dict(id=5, patient_id=1, created_at=TS, severity=RiskLevel.YELLOW,
                    title="Missed visit", description="Did not attend",
                    alert_type=AlertType.MISSED_APPOINTMENT)
        base.update(kw)
        return RiskAlert(**base)

    def test_icon_by_severity(self):
        assert normalize(self._alert(severity=RiskLevel.RED), NOW).icon_hint == "exclamation-triangle"
        assert normalize(self._alert(), NOW).icon_hint == "bell-alert"

    def test_status_precedence(self):
        assert normalize(self._alert(), NOW).status_label == "Active"
        assert normalize(self._alert(is_acknowledged=True), NOW).status_label == "Acknowledged"
        resolved = normalize(self._alert(is_acknowledged=True, is_resolved=True), NOW)
        assert resolved.status_label == "Resolved"
        assert resolved.status_color_hint == "success"

    def test_alert_type_spaces(self):
        event = normalize(self._alert(), NOW)
        assert event.id == "alert-5"
        assert event.title == "Missed visit"
        assert event.detail_fields["Alert Type"] == "MISSED APPOINTMENT"
        assert event.detail_fields["Resolved"] == "No"


class TestDelivery:
    def test_title_table(self):
        for outcome, title in [
            (DeliveryOutcome.SUCCESSFUL, "Successful Delivery"),
            (DeliveryOutcome.MOTHER_MORTALITY, "Mother Mortality"),
            (DeliveryOutcome.BABY_MORTALITY, "Baby Mortality"),
            (DeliveryOutcome.BOTH_MORTALITY, "Both Mortality"),
        ]:
            d = DeliveryRecord(patient_id=1, outcome=outcome, delivery_date=TS)
            assert normalize(d, NOW).title == title

    def test_timestamp_fallbacks(self):
        completed = datetime(2024, 3, 12, 8, 0)
        d = DeliveryRecord(patient_id=1, outcome=DeliveryOutcome.SUCCESSFUL,
                           delivery_date=TS, delivery_completed_at=completed)
        assert normalize(d, NOW).timestamp == TS

        d = DeliveryRecord(patient_id=1, outcome=DeliveryOutcome.SUCCESSFUL,
                           delivery_completed_at=completed)
        assert normalize(d, NOW).timestamp == completed

        d = DeliveryRecord(patient_id=1, outcome=DeliveryOutcome.SUCCESSFUL)
        assert normalize(d, NOW).timestamp == NOW

    def test_description_and_details(self):
        d = DeliveryRecord(patient_id=1, outcome=DeliveryOutcome.SUCCESSFUL,
                           delivery_type=DeliveryType.CESAREAN, delivery_date=TS,
                           baby_weight=2.75)
        event = normalize(d, NOW)
        assert event.id == "delivery"
        assert event.description == "Delivery type: CESAREAN"
        assert event.detail_fields == {"Delivery Type": "CESAREAN", "Baby Weight": "2.75 kg"}

    def test_missing_delivery_type(self):
        d = DeliveryRecord(patient_id=1, outcome=DeliveryOutcome.SUCCESSFUL, delivery_date=TS)
        event = normalize(d, NOW)
        assert event.description == "Delivery recorded"
        assert "None" not in event.description
        assert "Delivery Type" not in event.detail_fields


def test_unknown_record_type_rejected():
    with pytest.raises(TypeError):
        normalize(object(), NOW)
