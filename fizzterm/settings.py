"""Persistent settings for fizzterm."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from fizzterm.logger import get_logger
from fizzterm.markup.parser import DEFAULT_MAX_DEPTH
from fizzterm.terminal import DEFAULT_TIMEOUT_MS

logger = get_logger(__name__)

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "DEBUG"

# Palette detection timeout (in milliseconds)
MIN_DETECT_TIMEOUT_MS = 50
MAX_DETECT_TIMEOUT_MS = 10000

# Nesting depth past which markup is flattened
MIN_MAX_DEPTH = 8
MAX_MAX_DEPTH = 400


@dataclass(frozen=True)
class Settings:
    """User-configurable settings stored on disk."""

    detect_palette: bool = True
    detect_timeout_ms: int = DEFAULT_TIMEOUT_MS
    log_level: str = DEFAULT_LOG_LEVEL
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> Settings:
        """Create settings from a mapping, applying defaults for invalid values.

        Args:
            data: Mapping containing raw settings values.

        Returns:
            A Settings instance with validated values.
        """
        detect_palette = _coerce_bool(data.get("detect_palette"))
        if detect_palette is None:
            detect_palette = True

        detect_timeout_ms = _coerce_int(data.get("detect_timeout_ms"))
        if (
            detect_timeout_ms is None
            or detect_timeout_ms < MIN_DETECT_TIMEOUT_MS
            or detect_timeout_ms > MAX_DETECT_TIMEOUT_MS
        ):
            detect_timeout_ms = DEFAULT_TIMEOUT_MS

        log_level_value = _coerce_str(data.get("log_level"))
        if log_level_value is not None:
            log_level_value = log_level_value.upper()
        log_level = log_level_value if log_level_value in LOG_LEVELS else DEFAULT_LOG_LEVEL

        max_depth = _coerce_int(data.get("max_depth"))
        if max_depth is None or max_depth < MIN_MAX_DEPTH or max_depth > MAX_MAX_DEPTH:
            max_depth = DEFAULT_MAX_DEPTH

        return cls(
            detect_palette=detect_palette,
            detect_timeout_ms=detect_timeout_ms,
            log_level=log_level,
            max_depth=max_depth,
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize settings to a dictionary.

        Returns:
            Dictionary representation of settings.
        """
        return {
            "detect_palette": self.detect_palette,
            "detect_timeout_ms": self.detect_timeout_ms,
            "log_level": self.log_level,
            "max_depth": self.max_depth,
        }


def get_config_dir() -> Path:
    """Get the directory used for persistent configuration.

    Returns:
        Path to the configuration directory.
    """
    override_dir = os.environ.get("FIZZTERM_CONFIG_DIR")
    if override_dir:
        return Path(override_dir).expanduser()

    base_dir = os.environ.get("XDG_CONFIG_HOME")
    if base_dir:
        return Path(base_dir).expanduser() / "fizzterm"

    return Path.home() / ".config" / "fizzterm"


def get_settings_path() -> Path:
    """Get the full path to the settings file."""
    return get_config_dir() / "settings.json"


def load_settings() -> Settings:
    """Load settings from disk.

    Returns:
        Loaded settings, or defaults if none exist or the file is unusable.
    """
    settings_path = get_settings_path()
    if not settings_path.exists():
        return Settings()

    try:
        raw = json.loads(settings_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.warning(f"Failed to parse settings file {settings_path}: {exc}")
        return Settings()
    except OSError as exc:
        logger.warning(f"Failed to read settings file {settings_path}: {exc}")
        return Settings()

    if not isinstance(raw, dict):
        logger.warning(f"Settings file {settings_path} contains invalid data")
        return Settings()

    return Settings.from_mapping(raw)


def save_settings(settings: Settings) -> None:
    """Persist settings to disk.

    Args:
        settings: Settings to persist.
    """
    settings_path = get_settings_path()
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        settings_path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
    except OSError as exc:
        logger.warning(f"Failed to save settings to {settings_path}: {exc}")


def _coerce_str(value: object) -> str | None:
    if isinstance(value, str):
        return value
    return None


def _coerce_int(value: object) -> int | None:
    """Coerce a value into an integer if possible.

    Args:
        value: Raw value to coerce.

    Returns:
        Integer value or None.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _coerce_bool(value: object) -> bool | None:
    """Coerce a value into a boolean if possible.

    Args:
        value: Raw value to coerce.

    Returns:
        Boolean value or None.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.lower() in ("true", "1", "yes"):
            return True
        if value.lower() in ("false", "0", "no"):
            return False
    return None
