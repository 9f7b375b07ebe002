"""Configuration loading helpers.

Provides strict/non-strict YAML/JSON config parsing used by the extraction
entry points, plus environment lookups for the config file location.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "SPEC_EXTRACT_CONFIG"
STRICT_ENV = "STRICT_CONFIG_VALIDATION"


class ConfigValidationError(RuntimeError):
    """Raised when strict configuration validation fails."""


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag(STRICT_ENV, default=default)


def resolve_config_path(explicit: Optional[str] = None) -> Optional[str]:
    """Pick the config file path: explicit argument first, then env."""
    if explicit:
        return explicit
    raw = os.getenv(CONFIG_PATH_ENV, "").strip()
    return raw or None


def load_config_payload(config_path: str, strict: bool = False) -> dict[str, Any]:
    """Load and parse a YAML or JSON config file.

    In non-strict mode this returns an empty dict on parse/read failures.
    In strict mode this raises ``ConfigValidationError``.
    """
    path = Path(config_path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        msg = f"Config file not found: {config_path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    try:
        if path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        msg = f"Failed to parse config at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        msg = f"Config file is empty: {config_path}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if not isinstance(payload, dict):
        msg = f"Unexpected config payload type: {type(payload).__name__}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; continuing with defaults", msg)
        return {}

    return payload


def get_section(
    payload: dict[str, Any],
    section_name: str,
    strict: bool = False,
) -> dict[str, Any]:
    """Fetch a named sub-mapping from a config payload."""
    section = payload.get(section_name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        msg = f"Config section '{section_name}' must be a mapping"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; using defaults", msg)
        return {}
    return section
