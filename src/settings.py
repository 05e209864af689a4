"""Static configuration for roomlink.

All user-editable settings (rooms, topologies, blacklist, logging) live in a
single JSON file for quick edits without touching Python.
"""

import json
import os

from core.names import DEFAULT_SHORT_NAME_PATTERN

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Topologies and room ids are loaded from config.json so users can rewire
# rooms without editing code.
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Primary room: media relayed from here carries no attribution line.
HEADQUARTERS = _CONFIG.get("headquarters")

# Sender ids that are never relayed, in any topology.
BLACKLIST = [str(entry) for entry in _CONFIG.get("blacklist", [])]

# Pattern used to shorten room titles for attribution prefixes.
SHORT_NAME_PATTERN = _CONFIG.get("short_name_pattern") or DEFAULT_SHORT_NAME_PATTERN

# Raw topology entries; parsed and validated by connectors.build_relay_config.
TOPOLOGIES_CONFIG = _CONFIG.get("topologies", [])

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
