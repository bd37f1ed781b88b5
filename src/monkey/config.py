"""
Settings for the Monkey console and command-line tool.

Settings are resolved in three layers, later ones winning:

1. Built-in defaults (the ``Settings`` dataclass)
2. A YAML file, given explicitly or named by ``MONKEY_CONFIG``
3. ``MONKEY_*`` environment variables

Example file::

    prompt: "monkey> "
    show_source: false
    max_errors: 5
    log_level: INFO
    recursion_limit: 5000
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import error_invalid_config

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MONKEY_CONFIG"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Console and diagnostic options."""
    prompt: str = ">> "
    show_source: bool = True            # Echo source line and caret in diagnostics
    max_errors: int = 20                # Parser stops recording after this many
    log_level: str = "WARNING"
    recursion_limit: Optional[int] = None   # None keeps the host default


_ENV_KEYS = {
    "MONKEY_PROMPT": "prompt",
    "MONKEY_SHOW_SOURCE": "show_source",
    "MONKEY_MAX_ERRORS": "max_errors",
    "MONKEY_LOG_LEVEL": "log_level",
    "MONKEY_RECURSION_LIMIT": "recursion_limit",
}


def _coerce_bool(key: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        text = raw.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise error_invalid_config(f"{key} must be a boolean, got {raw!r}")


def _coerce_positive_int(key: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise error_invalid_config(f"{key} must be a positive integer, got {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise error_invalid_config(f"{key} must be a positive integer, got {raw!r}") from None
    if value <= 0:
        raise error_invalid_config(f"{key} must be a positive integer, got {raw!r}")
    return value


def _coerce(key: str, raw: Any) -> Any:
    """Validate and normalise one setting value."""
    if key == "prompt":
        if not isinstance(raw, str):
            raise error_invalid_config(f"prompt must be a string, got {raw!r}")
        return raw
    if key == "show_source":
        return _coerce_bool(key, raw)
    if key == "max_errors":
        return _coerce_positive_int(key, raw)
    if key == "log_level":
        level = str(raw).strip().upper()
        if level not in LOG_LEVELS:
            raise error_invalid_config(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {raw!r}"
            )
        return level
    if key == "recursion_limit":
        if raw is None or (isinstance(raw, str) and raw.strip() == ""):
            return None
        return _coerce_positive_int(key, raw)
    raise error_invalid_config(f"unknown setting: {key}")


def settings_from_mapping(data: Mapping[str, Any], base: Optional[Settings] = None) -> Settings:
    """Apply a mapping of overrides on top of ``base`` (defaults if omitted)."""
    base = base if base is not None else Settings()
    known = {f.name for f in fields(Settings)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise error_invalid_config(f"unknown configuration keys: {', '.join(unknown)}")
    overrides = {key: _coerce(key, value) for key, value in data.items()}
    return replace(base, **overrides)


def load_config_file(path: Path | str) -> Dict[str, Any]:
    """Read a YAML configuration file and return its top-level mapping."""
    config_path = Path(path)
    if not config_path.exists():
        raise error_invalid_config(f"configuration file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
    except yaml.YAMLError as exc:
        raise error_invalid_config(f"invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise error_invalid_config(
            f"configuration must be a mapping, got {type(data).__name__}"
        )
    return data


def settings_from_env(base: Settings, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Apply ``MONKEY_*`` environment variables on top of ``base``."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for var, key in _ENV_KEYS.items():
        raw = environ.get(var)
        if raw is not None:
            overrides[key] = raw
    if not overrides:
        return base
    logger.debug("settings from environment: %s", ", ".join(sorted(overrides)))
    return settings_from_mapping(overrides, base)


def load_settings(path: Optional[Path | str] = None,
                  environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Resolve settings from defaults, an optional YAML file and the environment.

    Args:
        path: Config file; when omitted, ``MONKEY_CONFIG`` is consulted
        environ: Environment mapping (defaults to ``os.environ``)

    Raises:
        ConfigError: If the file or any value is invalid
    """
    environ = os.environ if environ is None else environ
    settings = Settings()

    if path is None:
        path = environ.get(CONFIG_ENV_VAR) or None
    if path is not None:
        logger.info("loading configuration from %s", path)
        settings = settings_from_mapping(load_config_file(path), settings)

    return settings_from_env(settings, environ)
