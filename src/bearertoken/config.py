"""Credential and URL resolution with precedence.

The three run inputs (client id, client secret, authorization server URL)
can come from several places. :func:`resolve_settings` merges them,
highest precedence first:

1. CLI flags (``--id``, ``--secret``, ``--auth``)
2. Environment variables (``BEARER_CLIENT_ID``, ``BEARER_CLIENT_SECRET``,
   ``BEARER_AUTH_URL``)
3. A JSON config file (``--file``, default ``./.bearer.cfg``)

The config file is optional. It is only read, never written::

    {
        "client_id": "my-client",
        "auth_url": "https://auth.example.com/oauth2/token"
    }

Values still missing after resolution are handled by
:mod:`bearertoken.app` (a usage error, or a hidden prompt for the secret).
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from bearertoken.exceptions import ConfigError
from bearertoken.models import Settings

DEFAULT_CONFIG_FILENAME = ".bearer.cfg"

ENV_CLIENT_ID = "BEARER_CLIENT_ID"
ENV_CLIENT_SECRET = "BEARER_CLIENT_SECRET"
ENV_AUTH_URL = "BEARER_AUTH_URL"

_ENV_FIELDS = {
    "client_id": ENV_CLIENT_ID,
    "client_secret": ENV_CLIENT_SECRET,
    "auth_url": ENV_AUTH_URL,
}


def default_config_path() -> Path:
    """Return the default config file location, ``./.bearer.cfg``."""
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def load_config_file(path: Optional[str | Path] = None) -> dict[str, Any]:
    """Read the JSON config file.

    Args:
        path: Explicit config file path. When ``None``, the default
            ``./.bearer.cfg`` is used if it exists.

    Returns:
        The validated, non-null values from the file. Empty when no file
        applies.

    Raises:
        ConfigError: If an explicit *path* does not exist, or the file is
            unreadable, not JSON, not an object, or has unknown keys.
    """
    if path is None:
        config_path = default_config_path()
        if not config_path.is_file():
            return {}
    else:
        config_path = Path(path).expanduser()
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")

    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc

    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid JSON in config file {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")

    try:
        Settings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {config_path}: {exc}") from exc

    return {key: value for key, value in raw.items() if value is not None}


def _from_environment() -> dict[str, str]:
    """Collect non-empty values from the ``BEARER_*`` environment variables."""
    values: dict[str, str] = {}
    for field, var_name in _ENV_FIELDS.items():
        value = os.environ.get(var_name)
        if value:
            values[field] = value
    return values


def resolve_settings(
    cli_client_id: Optional[str] = None,
    cli_client_secret: Optional[str] = None,
    cli_auth_url: Optional[str] = None,
    config_file: Optional[str | Path] = None,
) -> Settings:
    """Resolve the run settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables
        3. Config file
        4. Unset

    Returns:
        The merged :class:`~bearertoken.models.Settings`. Fields may be
        ``None`` when no source supplies them.

    Raises:
        ConfigError: If the config file cannot be loaded.
    """
    # 3. Config file (lowest precedence)
    merged: dict[str, Any] = load_config_file(config_file)

    # 2. Environment variables
    merged.update(_from_environment())

    # 1. CLI flags (highest precedence)
    cli_values = {
        "client_id": cli_client_id,
        "client_secret": cli_client_secret,
        "auth_url": cli_auth_url,
    }
    merged.update({key: value for key, value in cli_values.items() if value is not None})

    return Settings(**merged)
