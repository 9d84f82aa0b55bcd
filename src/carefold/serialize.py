"""JSON-safe dict views of the timeline, calendar and progress models."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from enum import Enum

from carefold.analysis.followup_calendar import month_label
from carefold.analysis.patient_timeline import format_event_time, format_relative_date
from carefold.models import GestationalSnapshot, MonthCalendar, Patient, TimelineEvent


def _plain(value):
    """Recursively convert dates and enums into JSON-friendly values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def event_to_dict(event: TimelineEvent, now: datetime | None = None) -> dict:
    """Serialize an event without its source record.

    With now given, adds the "when" ("Yesterday") and "time" display strings.
    """
    out = {
        "id": event.id,
        "category": event.category.value,
        "timestamp": event.timestamp.isoformat(),
        "title": event.title,
        "description": event.description,
        "icon_hint": event.icon_hint,
        "color_hint": event.color_hint,
        "status_label": event.status_label,
        "status_color_hint": event.status_color_hint,
        "risk_level": _plain(event.risk_level),
        "details": dict(event.detail_fields),
    }
    if now is not None:
        out["when"] = format_relative_date(event.timestamp, now=now)
        out["time"] = format_event_time(event.timestamp)
    return out


def calendar_to_dict(cal: MonthCalendar) -> dict:
    return {
        "year": cal.year,
        "month": cal.month,
        "label": month_label(cal.year, cal.month),
        "summary": asdict(cal.summary),
        "days": [_plain(asdict(d)) for d in cal.days],
    }


def snapshot_to_dict(snapshot: GestationalSnapshot) -> dict:
    return _plain(asdict(snapshot))


def patient_to_dict(patient: Patient) -> dict:
    return _plain(asdict(patient))
