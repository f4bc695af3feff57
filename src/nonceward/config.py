"""Configuration for nonceward.

Settings come from three places, highest precedence first:

1. ``NONCEWARD_*`` environment variables
2. ``~/.nonceward/config.json`` (directory overridable with ``NONCEWARD_CONFIG_DIR``)
3. Field defaults

Usage::

    from nonceward.config import get_settings

    settings = get_settings()
    settings.lifetime_amount, settings.lifetime_unit
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nonceward.lifetime import TimeUnit

logger = logging.getLogger(__name__)

_ENV_PREFIX = "NONCEWARD_"

__all__ = ["Settings", "get_config_dir", "get_config_path", "get_settings"]


def get_config_dir() -> Path:
    """Return the nonceward config directory (not created here)."""
    override = os.environ.get(f"{_ENV_PREFIX}CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".nonceward"


def get_config_path() -> Path:
    return get_config_dir() / "config.json"


class Settings(BaseSettings):
    """Nonce service settings."""

    model_config = SettingsConfigDict(env_prefix=_ENV_PREFIX, extra="ignore")

    # Secret sources, checked in this order by keys.provider_from_settings()
    secret: SecretStr | None = Field(
        default=None,
        description="Explicit HMAC secret (at least 16 bytes)",
    )
    secret_file: Path | None = Field(
        default=None,
        description="File holding a hex-encoded secret; created on first use if missing",
    )
    ephemeral: bool = Field(
        default=False,
        description="Dev mode: generate a random per-process secret when none is configured",
    )

    # Lifetime policy
    lifetime_amount: int = Field(default=24, gt=0, description="Nonce lifetime amount")
    lifetime_unit: str = Field(default="hours", description="seconds | minutes | hours")

    # Token / transport
    token_length: int = Field(default=10, ge=8, le=64, description="Hex chars per token")
    query_arg: str = Field(default="_nonce", min_length=1, description="Query/form field name")
    allowed_origin: str | None = Field(
        default=None,
        description="Origin (scheme://host[:port]) required by same-origin checks",
    )

    # HTTP API callers: identity -> bearer token
    api_tokens: dict[str, SecretStr] = Field(
        default_factory=dict,
        description="Bearer tokens for the HTTP API, keyed by the identity they authenticate",
    )

    # Ambient
    log_level: str = Field(default="INFO", description="Logging level")
    api_host: str = Field(default="127.0.0.1", description="Bind host for `nonceward serve`")
    api_port: int = Field(default=8890, description="Bind port for `nonceward serve`")

    @field_validator("lifetime_unit")
    @classmethod
    def _check_unit(cls, v: str) -> str:
        return TimeUnit.parse(v).value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @classmethod
    def load(cls) -> Settings:
        """Build settings from the config file, letting env vars win."""
        data: dict = {}
        config_path = get_config_path()
        if config_path.exists():
            try:
                data = json.loads(config_path.read_text())
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring unreadable config file %s: %s", config_path, e)
                data = {}
            if not isinstance(data, dict):
                logger.warning("Ignoring config file %s: expected a JSON object", config_path)
                data = {}

        # Init kwargs outrank env vars in pydantic-settings, so drop overridden keys.
        data = {k: v for k, v in data.items() if f"{_ENV_PREFIX}{k.upper()}" not in os.environ}
        return cls(**data)


@lru_cache
def get_settings() -> Settings:
    """Return the cached process-wide settings."""
    return Settings.load()
