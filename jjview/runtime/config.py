"""Persistent JSON config helpers.

Stores the UI theme, default revset, preview and log-order preferences, and
the bookmarks treated as protected when force pushing. Malformed or missing
config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..jj.constants import DEFAULT_PROTECTED_BOOKMARKS

logger = logging.getLogger(__name__)

APP_NAME = "jjview"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON; write errors are only logged."""
    config_path = path if path is not None else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not write config %s: %s", config_path, exc)


def _string_value(data: dict[str, object], key: str) -> str | None:
    value = data.get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _bool_value(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _protected_bookmarks(data: dict[str, object]) -> tuple[str, ...]:
    value = data.get("protected_bookmarks")
    if not isinstance(value, list):
        return DEFAULT_PROTECTED_BOOKMARKS
    names = tuple(item.strip() for item in value if isinstance(item, str) and item.strip())
    return names


@dataclass(frozen=True)
class Settings:
    """Typed view of the config file with defaults filled in."""

    theme: str | None = None
    default_revset: str | None = None
    preview: bool = True
    log_reversed: bool = False
    protected_bookmarks: tuple[str, ...] = DEFAULT_PROTECTED_BOOKMARKS

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Settings:
        return cls(
            theme=_string_value(data, "theme"),
            default_revset=_string_value(data, "default_revset"),
            preview=_bool_value(data, "preview", True),
            log_reversed=_bool_value(data, "log_reversed", False),
            protected_bookmarks=_protected_bookmarks(data),
        )


def load_settings(path: Path | None = None) -> Settings:
    return Settings.from_dict(load_config(path))


def save_preferences(preview: bool, log_reversed: bool, path: Path | None = None) -> None:
    """Persist the preview and log-order toggles, keeping every other key."""
    config = load_config(path)
    if config.get("preview") == preview and config.get("log_reversed") == log_reversed:
        return
    config["preview"] = preview
    config["log_reversed"] = log_reversed
    save_config(config, path)
