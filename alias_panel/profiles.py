"""Display settings resolution and user config merging."""

from __future__ import annotations

import json
from pathlib import Path

from rich.color import Color, ColorParseError

from alias_panel.layout import DEFAULT_MARGIN, MAX_PANEL_WIDTH, MIN_PANEL_WIDTH

DEFAULT_SETTINGS: dict = {
    "margin": DEFAULT_MARGIN,
    "min_panel_width": MIN_PANEL_WIDTH,
    "max_panel_width": MAX_PANEL_WIDTH,
    "min_window_width": 10,
    "min_window_height": 10,
    "frame_color": "white",
    "accent_color": "red",
}

INT_MINIMUMS = {
    "margin": 0,
    "min_panel_width": 1,
    "max_panel_width": 1,
    "min_window_width": 1,
    "min_window_height": 1,
}

COLOR_KEYS = ("frame_color", "accent_color")


def load_user_config(path: str | None) -> dict:
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"config path not found: {config_path}")

    try:
        payload = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON config: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("config must be a JSON object")
    return payload


def _as_int(key: str, value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc
    if number < INT_MINIMUMS[key]:
        raise ValueError(f"{key} must be >= {INT_MINIMUMS[key]}, got {number}")
    return number


def _as_color(key: str, value) -> str:
    text = str(value).strip()
    try:
        Color.parse(text)
    except ColorParseError as exc:
        raise ValueError(f"{key}: {exc}") from exc
    return text


def resolve_settings(config_path: str | None = None, margin: int | None = None) -> dict:
    resolved = dict(DEFAULT_SETTINGS)
    user_config = load_user_config(config_path)

    for key in INT_MINIMUMS:
        if key in user_config:
            resolved[key] = _as_int(key, user_config[key])
    for key in COLOR_KEYS:
        if key in user_config:
            resolved[key] = _as_color(key, user_config[key])

    # The command line beats the config file.
    if margin is not None:
        resolved["margin"] = _as_int("margin", margin)

    if resolved["min_panel_width"] > resolved["max_panel_width"]:
        raise ValueError(
            f"min_panel_width ({resolved['min_panel_width']}) exceeds max_panel_width ({resolved['max_panel_width']})"
        )
    return resolved
