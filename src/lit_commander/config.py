"""lit-commander configuration management.

Configuration sources (in priority order):
1. Environment variables (LIT_COMMANDER_ prefix)
2. Config file (YAML)
3. Defaults
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lit_commander.errors import ConfigurationError

DEFAULT_AUTH_URL = "http://localhost:8080"


class CommanderSettings(BaseSettings):
    """Connection settings for the remote lit-server."""

    model_config = SettingsConfigDict(
        env_prefix="LIT_COMMANDER_",
        case_sensitive=False,
    )

    # Required at init() time; left optional here so a partial config can be
    # loaded and rejected with a ConfigurationError instead of a pydantic error.
    server_url: str | None = None
    base_path: str | None = None

    auth_url: str = DEFAULT_AUTH_URL
    auth_token: str = ""
    username: str | None = None
    password: str | None = None

    # Keycloak realm / client used for the password grant
    auth_realm: str = "LIT"
    auth_client_id: str = "lit-app"

    # None = no client-side timeout
    request_timeout: float | None = None

    log_level: str = "INFO"
    max_tool_text_chars: int = Field(default=12000, gt=0)


def _config_candidates() -> Iterator[Path]:
    explicit = os.environ.get("LIT_COMMANDER_CONFIG_FILE")
    if explicit:
        yield Path(explicit)
    yield Path("config.yaml")
    yield Path.home() / ".config" / "lit-commander" / "config.yaml"


def _load_config_file() -> dict[str, Any]:
    """Return the first YAML config found, or an empty dict.

    Search order: ``$LIT_COMMANDER_CONFIG_FILE``, ``./config.yaml``,
    ``~/.config/lit-commander/config.yaml``.

    Raises:
        ConfigurationError: If the file does not hold a mapping
    """
    path = next((p for p in _config_candidates() if p.is_file()), None)
    if path is None:
        return {}

    loaded = yaml.safe_load(path.read_text())
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a mapping, got {type(loaded).__name__}",
            details={"path": str(path)},
        )
    return loaded


@lru_cache
def get_settings() -> CommanderSettings:
    """Get cached settings instance.

    File values are passed as init kwargs; pydantic-settings gives init kwargs
    precedence, so environment variables are layered on top explicitly.
    """
    file_config = _load_config_file()
    env_config = CommanderSettings().model_dump(exclude_unset=True)
    return CommanderSettings(**{**file_config, **env_config})
