"""MCP server for carefold — Claude reads patient timelines, calendars and progress.

Run with: python -m carefold.mcp.server
Configure env: CAREFOLD_DATA=/path/to/export.json
"""

from __future__ import annotations

import os
import re
from datetime import datetime

from mcp.server.fastmcp import FastMCP

from carefold.adapters.rest_adapter import load_records
from carefold.analysis.followup_calendar import build_calendar, grid_range, shift_month
from carefold.analysis.patient_timeline import assemble_timeline
from carefold.analysis.pregnancy_progress import compute_progress
from carefold.core.utils import enum_value, parse_timestamp
from carefold.exceptions import CarefoldError, MissingLMPError
from carefold.models import CaseRecords
from carefold.serialize import (
    calendar_to_dict,
    event_to_dict,
    patient_to_dict,
    snapshot_to_dict,
)

DEFAULT_DATA_PATH = "carefold_export.json"

mcp = FastMCP(
    "carefold",
    instructions=(
        "Maternal-health case data server reading a JSON export of the "
        "case-management backend.\n\n"
        "Key capabilities:\n"
        "- list_patients: Patients with risk level and LMP\n"
        "- get_patient_timeline: Registration, health checks, consultations, follow-ups, "
        "alerts and delivery merged newest-first\n"
        "- get_followup_calendar: 42-day month heatmap of follow-up calls with "
        "completed/pending/overdue counts\n"
        "- get_pregnancy_progress: Gestational week, trimester, days to EDD and checkup markers\n"
        "- get_data_summary: Record counts in the export\n\n"
        "All tools accept an optional `today` (ISO date) to evaluate as of another day. "
        "Start with list_patients to find patient IDs."
    ),
)


def _records() -> CaseRecords:
    return load_records(os.environ.get("CAREFOLD_DATA", DEFAULT_DATA_PATH))


def _now(today: str) -> datetime:
    return parse_timestamp(today) if today else datetime.now()


@mcp.tool()
def list_patients() -> list[dict] | str:
    """List all patients in the export with their ID, name, risk level and LMP date."""
    try:
        records = _records()
    except CarefoldError as e:
        return f"Error: {e}"
    return [
        {
            "id": p.id,
            "name": p.name,
            "mother_id": p.mother_id,
            "risk_level": enum_value(p.current_risk_level),
            "lmp_date": p.lmp_date.isoformat() if p.lmp_date else None,
        }
        for p in records.patients
    ]


@mcp.tool()
def get_patient_timeline(patient_id: int, max_items: int = 0, today: str = "") -> dict | str:
    """Get a patient's unified activity timeline, newest event first.

    Args:
        patient_id: Patient ID (see list_patients).
        max_items: Most recent events to return (0 = all).
        today: ISO date/time to evaluate relative dates against (default: now).
    """
    try:
        records = _records()
        now = _now(today)
    except (CarefoldError, ValueError) as e:
        return f"Error: {e}"

    patient = records.get_patient(patient_id)
    if patient is None:
        return f"Error: Patient {patient_id} not found"

    events = assemble_timeline(
        patient, **records.for_patient(patient_id), max_items=max_items, now=now
    )
    return {
        "patient": patient_to_dict(patient),
        "count": len(events),
        "events": [event_to_dict(e, now=now) for e in events],
    }


@mcp.tool()
def get_followup_calendar(month: str = "", today: str = "", patient_id: int = 0) -> dict | str:
    """Get the follow-up heatmap for a month.

    Returns 42 day cells (6 weeks, Sunday first) with total/completed/pending/overdue
    counts and a heat tier, plus a summary over the month's own days.

    Args:
        month: Month as YYYY-MM (default: the month of `today`).
        today: ISO date used for overdue detection (default: today).
        patient_id: Restrict to one patient's follow-ups (0 = all patients).
    """
    try:
        records = _records()
        now = _now(today)
    except (CarefoldError, ValueError) as e:
        return f"Error: {e}"

    if month:
        m = re.fullmatch(r"(\d{4})-(\d{1,2})", month.strip())
        if not m or not 1 <= int(m.group(2)) <= 12:
            return f"Error: Invalid month '{month}', expected YYYY-MM"
        year, month_num = int(m.group(1)), int(m.group(2))
    else:
        year, month_num = now.year, now.month

    try:
        start, end = grid_range(year, month_num)
    except (ValueError, OverflowError) as e:
        return f"Error: Invalid month '{month}' ({e})"
    follow_ups = records.follow_ups_between(start, end)
    if patient_id:
        follow_ups = [f for f in follow_ups if f.patient_id == patient_id]

    result = calendar_to_dict(build_calendar(year, month_num, follow_ups, today=now.date()))
    prev_year, prev_month = shift_month(year, month_num, -1)
    next_year, next_month = shift_month(year, month_num, 1)
    result["previous_month"] = f"{prev_year:04d}-{prev_month:02d}"
    result["next_month"] = f"{next_year:04d}-{next_month:02d}"
    return result


@mcp.tool()
def get_pregnancy_progress(patient_id: int, today: str = "") -> dict | str:
    """Get gestational progress for a patient from their LMP date.

    Returns current week (0-40), trimester, days to EDD, progress percent and
    one marker per health check on the 1-40 week axis.

    Args:
        patient_id: Patient ID (see list_patients).
        today: ISO date to evaluate as of (default: today).
    """
    try:
        records = _records()
        now = _now(today)
    except (CarefoldError, ValueError) as e:
        return f"Error: {e}"

    patient = records.get_patient(patient_id)
    if patient is None:
        return f"Error: Patient {patient_id} not found"

    try:
        snapshot = compute_progress(
            patient.lmp_date,
            patient.edd_date,
            records.for_patient(patient_id)["health_checks"],
            today=now.date(),
        )
    except MissingLMPError:
        return {"patient_id": patient_id, "lmp_recorded": False}

    result = snapshot_to_dict(snapshot)
    result["patient_id"] = patient_id
    result["lmp_recorded"] = True
    return result


@mcp.tool()
def get_data_summary() -> dict | str:
    """Get record counts per collection in the loaded export."""
    try:
        records = _records()
    except CarefoldError as e:
        return f"Error: {e}"
    return {
        "data_path": os.environ.get("CAREFOLD_DATA", DEFAULT_DATA_PATH),
        "counts": records.counts(),
    }


if __name__ == "__main__":
    mcp.run()
