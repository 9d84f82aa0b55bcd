"""Configuration management for carefold.

Handles loading and generating TOML config files for settings like which
data export the CLI and MCP server read and how much of a timeline to show.
"""

from __future__ import annotations

import sys
import tomllib
from pathlib import Path

DEFAULT_CONFIG_PATH = "carefold.toml"
DEFAULT_DATA_PATH = "carefold_export.json"

DEFAULT_CONFIG_TEMPLATE = """\
# carefold configuration
# Edit freely; missing keys fall back to defaults.

[data]
# JSON export of the case-management backend
path = "{data_path}"

[timeline]
# Most recent events to show per patient (0 = all)
max_items = {max_items}

[calendar]
# Show follow-up counts on the adjacent-month cells of the grid
show_filler_counts = true
"""


def load_config(config_path: str = DEFAULT_CONFIG_PATH, quiet: bool = False) -> dict:
    """Load configuration from a TOML file.

    Returns a dict with at least:
    - data: dict with the export path
    - timeline: dict with max_items
    - calendar: dict with show_filler_counts

    Falls back to defaults if the config file doesn't exist.
    """
    path = Path(config_path)
    if not path.exists():
        if not quiet:
            print(
                f"Warning: Config file '{config_path}' not found, using defaults. "
                f"Run 'carefold init-config' to generate one.",
                file=sys.stderr,
            )
        return _default_config()

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    config = _default_config()
    for section in ("data", "timeline", "calendar"):
        if isinstance(raw.get(section), dict):
            config[section].update(
                {k: v for k, v in raw[section].items() if k in config[section]}
            )

    return config


def _default_config() -> dict:
    """Return default configuration."""
    return {
        "data": {
            "path": DEFAULT_DATA_PATH,
        },
        "timeline": {
            "max_items": 0,
        },
        "calendar": {
            "show_filler_counts": True,
        },
    }


def generate_config(
    config_path: str = DEFAULT_CONFIG_PATH,
    data_path: str = DEFAULT_DATA_PATH,
    max_items: int = 0,
) -> str:
    """Write a config file with the given settings.

    Returns the path of the written config file.
    """
    content = DEFAULT_CONFIG_TEMPLATE.format(
        data_path=data_path.replace("\\", "\\\\").replace('"', '\\"'),
        max_items=max_items,
    )
    Path(config_path).write_text(content)
    return config_path
