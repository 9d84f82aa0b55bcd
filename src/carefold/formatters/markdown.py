"""Markdown output formatter for timelines, follow-up calendars and pregnancy progress."""

from datetime import datetime

from carefold.analysis.followup_calendar import WEEKDAYS, month_label
from carefold.analysis.patient_timeline import (
    format_event_time,
    format_relative_date,
    format_short_date,
)
from carefold.analysis.pregnancy_progress import TOTAL_WEEKS, trimester_name
from carefold.core.utils import enum_value
from carefold.models import (
    DayBucket,
    GestationalSnapshot,
    HeatTier,
    MonthCalendar,
    Patient,
    TimelineEvent,
)

TIER_MARKS = {
    HeatTier.NONE: "",
    HeatTier.LOW: "░",
    HeatTier.MEDIUM: "▒",
    HeatTier.HIGH: "▓",
    HeatTier.VERY_HIGH: "█",
    HeatTier.PENDING: "◐",
    HeatTier.OVERDUE: "⚠",
}


class MarkdownWriter:
    """Builds markdown output incrementally."""

    def __init__(self):
        self._lines: list[str] = []

    def w(self, line: str = "") -> None:
        self._lines.append(line)

    def heading(self, text: str, level: int = 2) -> None:
        self.w(f"{'#' * level} {text}")
        self.w()

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        self.w("| " + " | ".join(headers) + " |")
        self.w("|" + "|".join("---" for _ in headers) + "|")
        for row in rows:
            self.w("| " + " | ".join(str(c) for c in row) + " |")
        self.w()

    def separator(self) -> None:
        self.w("---")
        self.w()

    def text(self) -> str:
        return "\n".join(self._lines)


def format_timeline(patient: Patient, events: list[TimelineEvent], now: datetime) -> str:
    """Format a patient timeline as markdown, newest event first."""
    md = MarkdownWriter()
    md.heading(f"Timeline — {patient.name or f'Patient {patient.id}'}", level=1)

    if not events:
        md.w("*No timeline events yet.*")
        return md.text()

    for event in events:
        when = f"{format_relative_date(event.timestamp, now=now)} at {format_event_time(event.timestamp)}"
        status = f" `{event.status_label}`" if event.status_label else ""
        risk = f" [{enum_value(event.risk_level)}]" if event.risk_level else ""
        md.w(f"### {event.title}{status}{risk}")
        md.w(f"*{when}*")
        md.w()
        if event.description:
            md.w(event.description)
            md.w()
        if event.detail_fields:
            md.w(" · ".join(f"**{k}:** {v}" for k, v in event.detail_fields.items()))
            md.w()

    count = len(events)
    md.separator()
    md.w(f"*{count} event{'s' if count != 1 else ''} in timeline*")
    return md.text()


def _calendar_cell(day: DayBucket, show_filler_counts: bool) -> str:
    label = str(day.date.day)
    if day.is_today:
        label = f"**{label}**"
    if not day.is_in_target_month:
        label = f"_{label}_"
        if not show_filler_counts:
            return label
    if day.total_count:
        mark = TIER_MARKS.get(day.tier, "")
        label = f"{label} {mark}{day.total_count}".rstrip()
    return label


def format_calendar(cal: MonthCalendar, show_filler_counts: bool = True) -> str:
    """Format a follow-up month grid with its summary as markdown."""
    md = MarkdownWriter()
    md.heading(f"Follow-up Calendar — {month_label(cal.year, cal.month)}", level=1)

    s = cal.summary
    md.table(
        ["Total", "Completed", "Pending", "Overdue", "Busy Days"],
        [[s.total, s.completed, s.pending, s.overdue, s.busy_days]],
    )

    rows = []
    for start in range(0, len(cal.days), 7):
        week = cal.days[start:start + 7]
        rows.append([_calendar_cell(d, show_filler_counts) for d in week])
    md.table(list(WEEKDAYS), rows)

    legend = ", ".join(f"{mark} {tier.value}" for tier, mark in TIER_MARKS.items() if mark)
    md.w(f"*Legend: {legend}*")
    return md.text()


def format_progress(patient: Patient, snapshot: GestationalSnapshot) -> str:
    """Format a gestational progress snapshot as markdown."""
    md = MarkdownWriter()
    md.heading(f"Pregnancy Progress — {patient.name or f'Patient {patient.id}'}", level=1)

    md.table(
        ["Current Week", "Trimester", "Days to EDD", "Health Checks"],
        [[
            snapshot.current_week,
            trimester_name(snapshot.trimester),
            snapshot.days_remaining_to_edd,
            snapshot.check_count,
        ]],
    )

    filled = round(snapshot.progress_percent / 100 * TOTAL_WEEKS)
    bar = "█" * filled + "░" * (TOTAL_WEEKS - filled)
    md.w(f"`{bar}` {snapshot.progress_percent:.1f}%")
    md.w()

    edd_note = " (derived from LMP)" if snapshot.edd_derived else ""
    last = format_short_date(snapshot.last_check_date) if snapshot.last_check_date else "No checkups yet"
    md.w(f"- **LMP Date:** {format_short_date(snapshot.lmp_date)}")
    md.w(f"- **Expected Delivery:** {format_short_date(snapshot.edd_date)}{edd_note}")
    md.w(f"- **Last Checkup:** {last}")
    md.w()

    if snapshot.markers:
        md.heading("Checkups")
        md.table(
            ["Week", "Date", "Risk"],
            [
                [m.week, format_short_date(m.date), enum_value(m.risk_level) or ""]
                for m in sorted(snapshot.markers, key=lambda m: m.date)
            ],
        )
    return md.text()


def format_patient_list(patients: list[Patient]) -> str:
    md = MarkdownWriter()
    md.heading("Patients", level=1)
    if not patients:
        md.w("*No patients in export.*")
        return md.text()
    md.table(
        ["ID", "Name", "Mother ID", "Risk", "LMP"],
        [
            [
                p.id,
                p.name,
                p.mother_id,
                enum_value(p.current_risk_level) or "",
                format_short_date(p.lmp_date) if p.lmp_date else "",
            ]
            for p in patients
        ],
    )
    return md.text()
