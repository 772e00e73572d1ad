from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_TEXT = (
    "This is a sample text for a typing test. "
    "Click on any character above to reposition your cursor."
)

DEFAULT_TICK_MS = 1000
DEFAULT_ROW_TOLERANCE = 5.0

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_root": "~/.local/share/typetrainer",
    "log_level": "INFO",
    "practice": {
        "default_text": DEFAULT_TEXT,
        "tick_ms": DEFAULT_TICK_MS,
        "row_tolerance": DEFAULT_ROW_TOLERANCE,
        "font_size": 28,
        "line_gap": 8,
        "window_size": [1100, 720],
        "fullscreen": False,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("TYPETRAINER_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("config.yaml"),
        Path("~/.config/typetrainer/config.yaml").expanduser(),
    ])
    return paths


def coerce_positive_int(value: object, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def coerce_non_negative_float(value: object, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 0 else default


def practice_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return the ``practice`` section with every value coerced to a usable type."""
    defaults = DEFAULT_CONFIG["practice"]
    raw = config.get("practice", {})
    if not isinstance(raw, dict):
        raw = {}
    text = raw.get("default_text", defaults["default_text"])
    size = raw.get("window_size", defaults["window_size"])
    if not (isinstance(size, (list, tuple)) and len(size) == 2):
        size = defaults["window_size"]
    return {
        "default_text": text if isinstance(text, str) else defaults["default_text"],
        "tick_ms": coerce_positive_int(raw.get("tick_ms"), DEFAULT_TICK_MS),
        "row_tolerance": coerce_non_negative_float(raw.get("row_tolerance"), DEFAULT_ROW_TOLERANCE),
        "font_size": coerce_positive_int(raw.get("font_size"), defaults["font_size"]),
        "line_gap": coerce_positive_int(raw.get("line_gap"), defaults["line_gap"]),
        "window_size": (
            coerce_positive_int(size[0], defaults["window_size"][0]),
            coerce_positive_int(size[1], defaults["window_size"][1]),
        ),
        "fullscreen": bool(raw.get("fullscreen", defaults["fullscreen"])),
    }


def load_config() -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            break
    return config
