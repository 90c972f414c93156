"""Configuration file management for adsb-cpr.

Reads/writes ~/.adsb-cpr/config.yaml with CPR pairing limits and the
log level used by the command line.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".adsb-cpr"
CONFIG_FILE = CONFIG_DIR / "config.yaml"


def _parse_value(val: str):
    """Parse a YAML-like value string into a Python type."""
    if val == "null" or val == "~" or val == "":
        return None
    if val.lower() == "true":
        return True
    if val.lower() == "false":
        return False
    try:
        return int(val)
    except ValueError:
        pass
    try:
        return float(val)
    except ValueError:
        pass
    # Strip quotes
    if (val.startswith('"') and val.endswith('"')) or \
       (val.startswith("'") and val.endswith("'")):
        return val[1:-1]
    return val


def _default_config() -> dict:
    return {
        "cpr": {
            "max_pair_age": 10.0,
            "cache_max_age": 15.0,
        },
        "logging": {
            "level": "WARNING",
        },
    }


def load_config() -> dict:
    """Load config from ~/.adsb-cpr/config.yaml.

    Returns default config if the file doesn't exist or can't be read.
    Uses simple key: value parsing to avoid a PyYAML dependency.
    """
    config = _default_config()
    if not CONFIG_FILE.exists():
        return config

    try:
        text = CONFIG_FILE.read_text()
    except OSError as e:
        logger.warning("Could not read %s, using defaults: %s", CONFIG_FILE, e)
        return config

    defaults = _default_config()
    current_section = None
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or ":" not in stripped:
            continue

        # Indented line = belongs to current section
        is_indented = line.startswith("  ") or line.startswith("\t")
        key, _, val = stripped.partition(":")
        key = key.strip()
        val = val.strip()

        if not is_indented:
            if not val:
                # Section header (e.g., "cpr:")
                current_section = key
                if not isinstance(config.get(current_section), dict):
                    config[current_section] = {}
            elif isinstance(defaults.get(key), dict):
                # Built-in sections only take nested keys
                current_section = None
                logger.warning("Ignoring %s: %r in %s, expected a section", key, val, CONFIG_FILE)
            else:
                current_section = None
                config[key] = _parse_value(val)
            continue

        parsed = _parse_value(val)
        if current_section and isinstance(config.get(current_section), dict):
            default = defaults.get(current_section, {}).get(key)
            if parsed is None and default is not None:
                continue
            config[current_section][key] = parsed
        else:
            config[key] = parsed

    return config


def save_config(config: dict) -> Path:
    """Save config to ~/.adsb-cpr/config.yaml.

    Returns the path to the config file.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    lines = ["# adsb-cpr configuration", ""]

    for section, values in config.items():
        if isinstance(values, dict):
            lines.append(f"{section}:")
            for key, val in values.items():
                lines.append(f"  {key}: {_format_value(val)}")
            lines.append("")
        else:
            lines.append(f"{section}: {_format_value(values)}")

    CONFIG_FILE.write_text("\n".join(lines) + "\n")
    return CONFIG_FILE


def _format_value(val) -> str:
    if val is None:
        return "null"
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, str):
        return f"\"{val}\""
    return str(val)
