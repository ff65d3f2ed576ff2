"""Configuration resolution with precedence layering.

:func:`resolve_config` merges keyword overrides, environment variables and
the project-local ``./httphook.json`` file into a single
:class:`~httphook.models.ClientConfig`.

Precedence (high to low):
    1. Keyword overrides passed to :func:`resolve_config`
    2. Environment variables (``HTTPHOOK_*``)
    3. Project config (``./httphook.json``)
    4. Defaults
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from httphook.exceptions import ConfigError
from httphook.models import ClientConfig

_PROJECT_CONFIG_FILENAME = "httphook.json"

_ENV_FIELDS: dict[str, str] = {
    "HTTPHOOK_TIMEOUT": "timeout",
    "HTTPHOOK_CONNECT_TIMEOUT": "connect_timeout",
    "HTTPHOOK_IDLE_TIMEOUT": "idle_timeout",
    "HTTPHOOK_MAX_IDLE_CONNS": "max_idle_conns",
    "HTTPHOOK_VERIFY_SSL": "verify_ssl",
    "HTTPHOOK_STRICT_JSON": "strict_json_body",
}


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./httphook.json``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _env_overrides() -> dict[str, str]:
    """Collect ``HTTPHOOK_*`` variables that are set and non-empty."""
    overrides: dict[str, str] = {}
    for env_var, field_name in _ENV_FIELDS.items():
        value = os.environ.get(env_var, "")
        if value:
            overrides[field_name] = value
    return overrides


def resolve_config(**overrides: Any) -> ClientConfig:
    """Resolve the effective client configuration.

    Args:
        **overrides: Field values for :class:`ClientConfig` that take
            precedence over everything else. ``None`` values are ignored.

    Returns:
        The validated :class:`ClientConfig`.

    Raises:
        ConfigError: If the project file is malformed or any layer supplies
            a value that fails validation.
    """
    merged: dict[str, Any] = {}

    project = load_project_config()
    if project is not None:
        merged.update(project)

    merged.update(_env_overrides())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ClientConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid httphook configuration: {exc}") from exc
