#!/usr/bin/env python3
"""CLI entry point for carefold package.

Usage:
    carefold patients [--data export.json]
    carefold timeline <patient_id> [--max-items N] [--today YYYY-MM-DD]
    carefold calendar [--month YYYY-MM] [--patient ID] [--today YYYY-MM-DD]
    carefold progress <patient_id> [--today YYYY-MM-DD]
    carefold init-config [--output carefold.toml]
    carefold serve-mcp [--data export.json]
"""

import argparse
import logging
import re
import sys
from datetime import datetime

from carefold.exceptions import CarefoldError, InputError

logger = logging.getLogger(__name__)


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--data", default="", help="JSON export path (default: from config)")
    p.add_argument("--config", default="carefold.toml", help="Path to carefold.toml config file")
    p.add_argument("--today", default="", help="Reference date/time, ISO (default: now)")
    p.add_argument("--output", default="", help="Write markdown to this file instead of stdout")


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        prog="carefold",
        description="Patient timelines, follow-up calendars and pregnancy progress "
                    "from case-management exports.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # --- patients ---
    patients_parser = sub.add_parser("patients", help="List patients in the export")
    _add_common(patients_parser)

    # --- timeline ---
    timeline_parser = sub.add_parser("timeline", help="Show a patient's activity timeline")
    timeline_parser.add_argument("patient_id", type=int, help="Patient ID")
    timeline_parser.add_argument("--max-items", type=int, default=None,
                                 help="Most recent events to show (0 = all)")
    _add_common(timeline_parser)

    # --- calendar ---
    calendar_parser = sub.add_parser("calendar", help="Show the follow-up heatmap for a month")
    calendar_parser.add_argument("--month", default="", help="Month as YYYY-MM (default: current)")
    calendar_parser.add_argument("--patient", type=int, default=None,
                                 help="Only count this patient's follow-ups")
    _add_common(calendar_parser)

    # --- progress ---
    progress_parser = sub.add_parser("progress", help="Show a patient's pregnancy progress")
    progress_parser.add_argument("patient_id", type=int, help="Patient ID")
    _add_common(progress_parser)

    # --- init-config ---
    config_parser = sub.add_parser("init-config", help="Generate carefold.toml config")
    config_parser.add_argument("--output", default="carefold.toml", help="Config file output path")
    config_parser.add_argument("--data", default="carefold_export.json",
                               help="Export path to record in the config")

    # --- serve-mcp ---
    mcp_parser = sub.add_parser("serve-mcp", help="Start MCP server for Claude integration")
    mcp_parser.add_argument("--data", default="", help="JSON export path")
    mcp_parser.add_argument("--config", default="carefold.toml", help="Path to carefold.toml")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    handlers = {
        "patients": _handle_patients,
        "timeline": _handle_timeline,
        "calendar": _handle_calendar,
        "progress": _handle_progress,
        "init-config": _handle_init_config,
        "serve-mcp": _handle_serve_mcp,
    }
    try:
        handlers[args.command](args)
    except CarefoldError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)


def _reference_time(args) -> datetime:
    """The single clock read per invocation, unless --today pins it."""
    from carefold.core.utils import parse_timestamp

    if not args.today:
        return datetime.now()
    try:
        return parse_timestamp(args.today)
    except ValueError as e:
        raise InputError(f"Invalid --today value: {args.today}") from e


def _load(args):
    from carefold.adapters.rest_adapter import load_records
    from carefold.config import load_config

    config = load_config(args.config, quiet=bool(args.data))
    path = args.data or config["data"]["path"]
    logger.debug("Loading export from %s", path)
    return config, load_records(path)


def _patient(records, patient_id: int):
    patient = records.get_patient(patient_id)
    if patient is None:
        raise InputError(f"Patient {patient_id} not found")
    return patient


def _emit(args, text: str) -> None:
    if args.output:
        with open(args.output, "w") as f:
            f.write(text + "\n")
        print(f"Written to {args.output}")
    else:
        print(text)


def _handle_patients(args):
    from carefold.formatters.markdown import format_patient_list

    _, records = _load(args)
    _emit(args, format_patient_list(records.patients))


def _handle_timeline(args):
    from carefold.analysis.patient_timeline import assemble_timeline
    from carefold.formatters.markdown import format_timeline

    config, records = _load(args)
    now = _reference_time(args)
    patient = _patient(records, args.patient_id)
    max_items = args.max_items if args.max_items is not None else config["timeline"]["max_items"]

    events = assemble_timeline(
        patient, **records.for_patient(patient.id), max_items=max_items, now=now
    )
    _emit(args, format_timeline(patient, events, now))


def _parse_month(value: str, now: datetime) -> tuple[int, int]:
    if not value:
        return now.year, now.month
    m = re.fullmatch(r"(\d{4})-(\d{1,2})", value.strip())
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise InputError(f"Invalid --month value: {value} (expected YYYY-MM)")
    return int(m.group(1)), int(m.group(2))


def _handle_calendar(args):
    from carefold.analysis.followup_calendar import build_calendar, grid_range
    from carefold.formatters.markdown import format_calendar

    config, records = _load(args)
    now = _reference_time(args)
    year, month = _parse_month(args.month, now)

    try:
        start, end = grid_range(year, month)
    except (ValueError, OverflowError) as e:
        raise InputError(f"Invalid --month value: {args.month} ({e})") from e
    follow_ups = records.follow_ups_between(start, end)
    if args.patient is not None:
        follow_ups = [f for f in follow_ups if f.patient_id == args.patient]

    cal = build_calendar(year, month, follow_ups, today=now.date())
    _emit(args, format_calendar(cal, config["calendar"]["show_filler_counts"]))


def _handle_progress(args):
    from carefold.analysis.pregnancy_progress import compute_progress
    from carefold.exceptions import MissingLMPError
    from carefold.formatters.markdown import format_progress

    _, records = _load(args)
    now = _reference_time(args)
    patient = _patient(records, args.patient_id)

    if patient.lmp_date is None:
        raise MissingLMPError(patient.id)
    snapshot = compute_progress(
        patient.lmp_date,
        patient.edd_date,
        records.for_patient(patient.id)["health_checks"],
        today=now.date(),
    )
    _emit(args, format_progress(patient, snapshot))


def _handle_init_config(args):
    from carefold.config import generate_config

    path = generate_config(config_path=args.output, data_path=args.data)
    print(f"Config generated at {path}")


def _handle_serve_mcp(args):
    import os

    from carefold.config import load_config

    if args.data:
        os.environ["CAREFOLD_DATA"] = args.data
    elif "CAREFOLD_DATA" not in os.environ:
        os.environ["CAREFOLD_DATA"] = load_config(args.config)["data"]["path"]

    from carefold.mcp.server import mcp

    mcp.run()


if __name__ == "__main__":
    main()
