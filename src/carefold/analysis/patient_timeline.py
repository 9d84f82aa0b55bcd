"""Patient timeline builder — merges all record sources into one newest-first list."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable

from carefold.analysis.events import normalize
from carefold.core.utils import MONTH_ABBR, days_between
from carefold.models import (
    ClinicalRecord,
    Consultation,
    FollowUp,
    HealthCheck,
    Patient,
    RiskAlert,
    TimelineEvent,
    delivery_from_patient,
    registration_from_patient,
)

logger = logging.getLogger(__name__)


def _dated(records: Iterable[ClinicalRecord] | None, source: str) -> list[ClinicalRecord]:
    """Drop records without a canonical timestamp; None is an empty source."""
    if not records:
        return []
    records = list(records)
    kept = [r for r in records if r.timestamp is not None]
    skipped = len(records) - len(kept)
    if skipped:
        logger.debug("Skipped %d undated %s record(s)", skipped, source)
    return kept


def assemble_timeline(
    patient: Patient,
    health_checks: list[HealthCheck] | None = None,
    consultations: list[Consultation] | None = None,
    follow_ups: list[FollowUp] | None = None,
    alerts: list[RiskAlert] | None = None,
    max_items: int | None = None,
    *,
    now: datetime,
) -> list[TimelineEvent]:
    """Build a unified patient timeline, newest first.

    Registration is synthesized from the patient record, as is the delivery
    outcome once it is no longer PENDING. Follow-ups scheduled after `now`
    are left out until they are reached.

    Args:
        patient: Patient summary record.
        health_checks: Health checks for the patient (None = not loaded).
        consultations: Consultations for the patient (None = not loaded).
        follow_ups: Follow-up calls for the patient (None = not loaded).
        alerts: Risk alerts for the patient (None = not loaded).
        max_items: Max events to return after sorting (None or 0 = all).
        now: Reference time.
    """
    records: list[ClinicalRecord] = []
    records.extend(_dated([registration_from_patient(patient)], "registration"))
    records.extend(_dated(health_checks, "health check"))
    records.extend(_dated(consultations, "consultation"))
    records.extend(
        f for f in _dated(follow_ups, "follow-up") if f.timestamp <= now
    )
    records.extend(_dated(alerts, "alert"))

    delivery = delivery_from_patient(patient)
    if delivery is not None:
        records.append(delivery)

    events = [normalize(r, now) for r in records]
    events.sort(key=lambda e: e.timestamp, reverse=True)

    if max_items:
        events = events[:max_items]
    return events


def format_short_date(d: date, with_year: bool = True) -> str:
    """Format a date as "7 Mar 2024" (or "7 Mar" without the year)."""
    text = f"{d.day} {MONTH_ABBR[d.month - 1]}"
    return f"{text} {d.year}" if with_year else text


def format_relative_date(ts: datetime, *, now: datetime) -> str:
    """Describe when an event happened relative to now.

    "Today", "Yesterday" and "{n} days ago" cover the last week; older (and
    future) events get a short date, with the year only when it differs
    from now's year.
    """
    elapsed = days_between(ts, now)
    if elapsed == 0:
        return "Today"
    if elapsed == 1:
        return "Yesterday"
    if 1 < elapsed < 7:
        return f"{elapsed} days ago"
    return format_short_date(ts.date(), with_year=ts.year != now.year)


def format_event_time(ts: datetime) -> str:
    """Format the time of day as "02:30 pm"."""
    hour = ts.hour % 12 or 12
    suffix = "am" if ts.hour < 12 else "pm"
    return f"{hour:02d}:{ts.minute:02d} {suffix}"
