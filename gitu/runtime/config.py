"""Persistent JSON config helpers.

Stores the diff colour style, colour toggle, input poll timeout and the
debug-logging switch. Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "gitu"
CONFIG_FILENAME = "config.json"
CONFIG_ENV_VAR = "GITU_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_STYLE = "monokai"
DEFAULT_POLL_TIMEOUT_MS = 100
MIN_POLL_TIMEOUT_MS = 10
MAX_POLL_TIMEOUT_MS = 1000


@dataclass(frozen=True)
class GituConfig:
    style: str = DEFAULT_STYLE
    no_color: bool = False
    poll_timeout_ms: int = DEFAULT_POLL_TIMEOUT_MS
    debug: bool = False


def config_path() -> Path:
    """Return the active config path, honouring ``GITU_CONFIG`` when set."""
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_file = path if path is not None else config_path()
    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _load_bool(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _load_poll_timeout(data: dict[str, object]) -> int:
    value = data.get("poll_timeout_ms")
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_POLL_TIMEOUT_MS
    if not (MIN_POLL_TIMEOUT_MS <= value <= MAX_POLL_TIMEOUT_MS):
        return DEFAULT_POLL_TIMEOUT_MS
    return value


def _load_style(data: dict[str, object]) -> str:
    value = data.get("style")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_STYLE


def load_gitu_config(path: Path | None = None) -> GituConfig:
    """Build a ``GituConfig`` from disk; invalid keys keep their defaults."""
    data = load_config(path)
    return GituConfig(
        style=_load_style(data),
        no_color=_load_bool(data, "no_color", False),
        poll_timeout_ms=_load_poll_timeout(data),
        debug=_load_bool(data, "debug", False),
    )
