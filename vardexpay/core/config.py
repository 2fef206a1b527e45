"""
Client Configuration - Loads and validates VardexPay client settings.

Merges an optional YAML file with environment variables. Environment
variables take precedence over YAML values; explicit overrides win over both.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator


DEFAULT_API_URL = "https://api.vardexpay.com"
DEFAULT_SITE_URL = "https://vardexpay.com/api"


def _as_bool(v: str) -> bool:
    return v.strip().lower() in ("1", "true", "yes", "on")


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------

_ENV_MAPPINGS = {
    "VARDEXPAY_API_URL": ("api_url", str),
    "VARDEXPAY_SITE_URL": ("site_url", str),
    "VARDEXPAY_TIMEOUT": ("timeout_seconds", float),
    "VARDEXPAY_STRICT_AUTH": ("strict_auth", _as_bool),
    "VARDEXPAY_LOG_LEVEL": ("log_level", str),
}


def _apply_env_overrides(config: Dict[str, Any]) -> None:
    """Override YAML values with environment variables where set."""
    for env_key, (key, converter) in _ENV_MAPPINGS.items():
        value = os.getenv(env_key)
        if value is None:
            continue
        try:
            config[key] = converter(value)
        except (ValueError, TypeError) as e:
            logging.getLogger("config").warning(
                "Env %s=%r failed to convert: %s. Using YAML value.",
                env_key, value, e,
            )


# ---------------------------------------------------------------------------
# Pydantic Configuration Model
# ---------------------------------------------------------------------------

class ClientConfig(BaseModel):
    api_url: str = DEFAULT_API_URL
    site_url: str = DEFAULT_SITE_URL
    timeout_seconds: float = 20.0
    # Raise NotAuthenticated instead of returning None before login.
    strict_auth: bool = False
    log_level: str = "INFO"

    @field_validator("api_url", "site_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        v = (v or "").strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base url must be http(s), got {v!r}")
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout_seconds must be > 0")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = (v or "").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {v!r}")
        return level


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ClientConfig:
    """Load a fresh config (YAML + .env + environment) with optional overrides."""
    load_dotenv()

    yaml_config: Dict[str, Any] = {}
    if config_path:
        config_file = Path(config_path)
        if config_file.exists():
            with open(config_file, "r") as f:
                loaded = yaml.safe_load(f) or {}
            # Accept either a flat file or one nested under a "vardexpay" key.
            if isinstance(loaded.get("vardexpay"), dict):
                loaded = loaded["vardexpay"]
            yaml_config.update(loaded)

    _apply_env_overrides(yaml_config)

    if overrides:
        yaml_config.update(overrides)

    return ClientConfig(**yaml_config)
