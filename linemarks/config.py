"""
Configuration logic for linemarks.
Reads/writes linemarks.json; builds the Config snapshot the stores consume.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List

from .colors import is_hex_color

log = logging.getLogger("linemarks.config")

CONFIG_FILENAME = "linemarks.json"

DEFAULT_COLORS = ["#fff59d", "#aed581", "#ba68c8", "#4fc3f7"]
DEFAULT_OPACITY = 0.3
DEFAULT_GROUP = "Default"


@dataclass(frozen=True)
class Config:
    """
    Configuration snapshot.
    """
    group_color_overrides: Dict[str, str] = field(default_factory=dict)
    default_colors: List[str] = field(default_factory=lambda: list(DEFAULT_COLORS))
    opacity: float = DEFAULT_OPACITY

    @property
    def first_default_color(self) -> str:
        return self.default_colors[0] if self.default_colors else DEFAULT_COLORS[0]


def _read_config_file(path):
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        log.warning("Could not read %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def get_config(path, key, default):
    """Get a config value by key. Returns default if missing or on error."""
    return _read_config_file(path).get(key, default)


def set_config(path, key, value):
    """Set a config key to value. Creates file if needed."""
    config_data = _read_config_file(path)
    config_data[key] = value
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config_data, f, indent=4)
    except IOError as e:
        log.error("Error writing to %s: %s", path, e)


def as_bool(value):
    """Parse a value as boolean (handles str, int, float)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(value, (int, float)):
        return value != 0
    return False


def build_config(group_colors=None, default_colors=None, opacity=None) -> Config:
    """
    Normalize raw settings values into a Config.

    Invalid colors are dropped, an empty default list falls back to the
    built-in palette, opacity is clamped to [0, 1].
    """
    overrides = {}
    if isinstance(group_colors, dict):
        for name, color in group_colors.items():
            if is_hex_color(color):
                overrides[str(name)] = color
            else:
                log.warning("Ignoring invalid color %r for group %r", color, name)

    colors = []
    if isinstance(default_colors, list):
        for color in default_colors:
            if is_hex_color(color):
                colors.append(color)
            else:
                log.warning("Ignoring invalid default color %r", color)
    if not colors:
        colors = list(DEFAULT_COLORS)

    try:
        opacity = DEFAULT_OPACITY if opacity is None else float(opacity)
    except (TypeError, ValueError):
        log.warning("Ignoring invalid opacity %r", opacity)
        opacity = DEFAULT_OPACITY
    opacity = max(0.0, min(1.0, opacity))

    return Config(
        group_color_overrides=overrides,
        default_colors=colors,
        opacity=opacity,
    )


def load_config(path=None) -> Config:
    """Load linemarks.json; missing or unreadable files yield the defaults."""
    data = _read_config_file(path or CONFIG_FILENAME)
    return build_config(
        group_colors=data.get("groupColors"),
        default_colors=data.get("defaultColors"),
        opacity=data.get("opacity"),
    )
