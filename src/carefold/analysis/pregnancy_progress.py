"""Pregnancy progress — gestational week, trimester and checkup markers from LMP."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from carefold.exceptions import MissingLMPError
from carefold.models import CheckupMarker, GestationalSnapshot, HealthCheck, Trimester

TOTAL_WEEKS = 40
PREGNANCY_DAYS = 280  # LMP to EDD


@dataclass(frozen=True)
class TrimesterSpan:
    trimester: Trimester
    name: str
    start_week: int
    end_week: int


TRIMESTERS: list[TrimesterSpan] = [
    TrimesterSpan(Trimester.FIRST, "1st Trimester", 1, 12),
    TrimesterSpan(Trimester.SECOND, "2nd Trimester", 13, 26),
    TrimesterSpan(Trimester.THIRD, "3rd Trimester", 27, 40),
]


def derive_edd(lmp_date: date) -> date:
    """Estimated due date by Naegele's rule: LMP + 280 days."""
    return lmp_date + timedelta(days=PREGNANCY_DAYS)


def gestational_week(lmp_date: date, on: date) -> int:
    """Unclamped gestational week on a date; week 1 starts on the LMP."""
    return (on - lmp_date).days // 7 + 1


def trimester_for_week(week: int) -> Trimester | None:
    for span in TRIMESTERS:
        if span.start_week <= week <= span.end_week:
            return span.trimester
    return None


def trimester_name(trimester: Trimester | None) -> str:
    for span in TRIMESTERS:
        if span.trimester == trimester:
            return span.name
    return "-"


def checkup_markers(lmp_date: date, health_checks: list[HealthCheck]) -> list[CheckupMarker]:
    """Place each dated health check on the 1-40 week axis."""
    markers = []
    for hc in health_checks:
        if hc.check_date is None:
            continue
        check_day = hc.check_date.date()
        week = min(max(gestational_week(lmp_date, check_day), 1), TOTAL_WEEKS)
        markers.append(CheckupMarker(week=week, date=check_day, risk_level=hc.risk_level))
    return markers


def compute_progress(
    lmp_date: date | None,
    edd_date: date | None = None,
    health_checks: list[HealthCheck] | None = None,
    *,
    today: date,
) -> GestationalSnapshot:
    """Compute gestational progress at `today`.

    Args:
        lmp_date: Last menstrual period. Required; see MissingLMPError.
        edd_date: Recorded due date. Derived from the LMP when absent.
        health_checks: Checks to place as markers on the week axis.
        today: Reference date.

    The current week is clamped to [0, 40] and the trimester follows the
    clamped week, so week 0 (LMP in the future) has no trimester.

    Raises MissingLMPError when lmp_date is None.
    """
    if lmp_date is None:
        raise MissingLMPError()

    health_checks = health_checks or []
    edd_derived = edd_date is None
    edd = derive_edd(lmp_date) if edd_derived else edd_date

    current_week = min(max(gestational_week(lmp_date, today), 0), TOTAL_WEEKS)
    days_remaining = max(0, (edd - today).days)
    progress = min(100.0, current_week / TOTAL_WEEKS * 100)

    markers = checkup_markers(lmp_date, health_checks)
    check_dates = [m.date for m in markers]

    return GestationalSnapshot(
        current_week=current_week,
        days_remaining_to_edd=days_remaining,
        trimester=trimester_for_week(current_week),
        progress_percent=progress,
        lmp_date=lmp_date,
        edd_date=edd,
        edd_derived=edd_derived,
        markers=markers,
        check_count=len(health_checks),
        last_check_date=max(check_dates) if check_dates else None,
    )
