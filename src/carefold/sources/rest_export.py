"""Reader for JSON exports of the case-management REST backend.

An export is one JSON object holding the backend's list payloads:

    {
      "patients": [...],
      "healthChecks": [...],
      "consultations": [...],
      "followUps": [...],
      "alerts": [...]
    }

Missing keys are read as empty lists. Records keep the backend's camelCase
field names here; carefold.adapters.rest_adapter maps them onto the models.
"""

from __future__ import annotations

import json
import logging
import os

from carefold.exceptions import ExportFormatError, InputError

logger = logging.getLogger(__name__)

COLLECTION_KEYS = ("patients", "healthChecks", "consultations", "followUps", "alerts")


def read_export(path: str) -> dict:
    """Read an export file and return its collections as lists of dicts.

    Raises InputError if the file does not exist and ExportFormatError if it
    is not a JSON object of lists.
    """
    if not os.path.isfile(path):
        raise InputError(f"Data file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ExportFormatError(f"Invalid JSON: {e}", filename=path) from e

    return parse_export(raw, filename=path)


def parse_export(raw: object, filename: str | None = None) -> dict:
    """Validate an already-decoded export and fill in missing collections."""
    if not isinstance(raw, dict):
        raise ExportFormatError("Top level must be a JSON object", filename=filename)

    data: dict[str, list[dict]] = {}
    for key in COLLECTION_KEYS:
        items = raw.get(key) or []
        # Backend page wrappers: {"content": [...], "totalElements": ...}
        if isinstance(items, dict) and "content" in items:
            items = items["content"]
        if not isinstance(items, list):
            raise ExportFormatError(f"'{key}' must be a list", filename=filename)
        data[key] = [item for item in items if isinstance(item, dict)]
        dropped = len(items) - len(data[key])
        if dropped:
            logger.warning("Ignored %d non-object entries in '%s'", dropped, key)

    logger.debug(
        "Read export %s: %s",
        filename or "<memory>",
        ", ".join(f"{k}={len(v)}" for k, v in data.items()),
    )
    return data
