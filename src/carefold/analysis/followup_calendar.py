"""Follow-up calendar heatmap — a fixed 6x7 month grid of per-day follow-up counts.

The grid always holds 42 cells: the trailing days of the previous month up
to the first Sunday-aligned row, every day of the target month, then enough
days of the next month to fill six rows. Each cell counts the follow-ups
scheduled that day and is classified into a heat tier for display.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from carefold.core.utils import MONTH_NAMES
from carefold.models import (
    DayBucket,
    FollowUp,
    FollowUpStatus,
    HeatTier,
    MonthCalendar,
    MonthSummary,
)

GRID_CELLS = 42  # 6 weeks x 7 days
WEEKDAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

# Upper bound of completed count for each intensity step, checked in order.
INTENSITY_STEPS: list[tuple[int, HeatTier]] = [
    (0, HeatTier.NONE),
    (2, HeatTier.LOW),
    (5, HeatTier.MEDIUM),
    (10, HeatTier.HIGH),
]


def intensity_tier(completed: int) -> HeatTier:
    """Map a completed count onto the five-step intensity scale."""
    for upper, tier in INTENSITY_STEPS:
        if completed <= upper:
            return tier
    return HeatTier.VERY_HIGH


def classify_day(bucket: DayBucket) -> HeatTier:
    """Classify a day for display. The first matching rule wins:

    1. nothing scheduled -> none
    2. overdue calls at least as many as pending ones -> overdue
    3. more pending than completed -> pending
    4. otherwise the intensity of the completed count
    """
    if bucket.total_count == 0:
        return HeatTier.NONE
    if bucket.overdue_count > 0 and bucket.overdue_count >= bucket.pending_count:
        return HeatTier.OVERDUE
    if bucket.pending_count > bucket.completed_count:
        return HeatTier.PENDING
    return intensity_tier(bucket.completed_count)


def _count_by_day(follow_ups: list[FollowUp], today: date) -> dict[date, dict[str, int]]:
    """Tally follow-ups per scheduled date.

    COMPLETED counts as completed; PENDING counts as overdue when its date is
    before today, else as pending. Other statuses only raise the total, so
    the three sub-counts can fall short of it.
    """
    by_day: dict[date, dict[str, int]] = {}
    for f in follow_ups:
        if f.scheduled_date is None:
            continue
        day = f.scheduled_date.date()
        counts = by_day.setdefault(
            day, {"total": 0, "completed": 0, "pending": 0, "overdue": 0}
        )
        counts["total"] += 1
        if f.status == FollowUpStatus.COMPLETED:
            counts["completed"] += 1
        elif f.status == FollowUpStatus.PENDING:
            if day < today:
                counts["overdue"] += 1
            else:
                counts["pending"] += 1
    return by_day


def _bucket(day: date, in_month: bool, by_day: dict, today: date) -> DayBucket:
    counts = by_day.get(day, {})
    bucket = DayBucket(
        date=day,
        is_in_target_month=in_month,
        is_today=day == today,
        total_count=counts.get("total", 0),
        completed_count=counts.get("completed", 0),
        pending_count=counts.get("pending", 0),
        overdue_count=counts.get("overdue", 0),
    )
    bucket.tier = classify_day(bucket)
    return bucket


def build_month(
    year: int,
    month: int,
    follow_ups: list[FollowUp] | None,
    *,
    today: date,
) -> list[DayBucket]:
    """Build the 42-cell grid for a month (month is 1-12).

    Args:
        year: Calendar year.
        month: Month number, 1 = January.
        follow_ups: Follow-ups to bucket; dates outside the grid are ignored.
        today: Reference date for overdue detection and the today marker.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1-12, got {month}")

    first = date(year, month, 1)
    start_day_of_week = (first.weekday() + 1) % 7  # 0 = Sunday
    days_in_month = calendar.monthrange(year, month)[1]
    by_day = _count_by_day(follow_ups or [], today)

    days: list[DayBucket] = []

    # Previous month
    for offset in range(start_day_of_week, 0, -1):
        days.append(_bucket(first - timedelta(days=offset), False, by_day, today))

    # Target month
    for day in range(1, days_in_month + 1):
        days.append(_bucket(date(year, month, day), True, by_day, today))

    # Next month
    after = first + timedelta(days=days_in_month)
    for offset in range(GRID_CELLS - len(days)):
        days.append(_bucket(after + timedelta(days=offset), False, by_day, today))

    return days


def summarize_month(days: list[DayBucket]) -> MonthSummary:
    """Sum counts over the target month's cells; filler cells are excluded."""
    summary = MonthSummary()
    for d in days:
        if not d.is_in_target_month:
            continue
        summary.total += d.total_count
        summary.completed += d.completed_count
        summary.pending += d.pending_count
        summary.overdue += d.overdue_count
        if d.total_count > 0:
            summary.busy_days += 1
    return summary


def build_calendar(
    year: int,
    month: int,
    follow_ups: list[FollowUp] | None,
    *,
    today: date,
) -> MonthCalendar:
    """Build the month grid together with its summary."""
    days = build_month(year, month, follow_ups, today=today)
    return MonthCalendar(year=year, month=month, days=days, summary=summarize_month(days))


def grid_range(year: int, month: int) -> tuple[date, date]:
    """First and last date shown in the month's grid.

    Use this to cut the date-ranged follow-up set the grid needs.
    """
    first = date(year, month, 1)
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    return start, start + timedelta(days=GRID_CELLS - 1)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move delta months forward (negative = back), returning (year, month)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"
