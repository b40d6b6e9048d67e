# src/llm_relay/core/config.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

logger = logging.getLogger(__name__)

# Earlier files win: load_dotenv never overrides a variable that is already set.
DEFAULT_ENV_FILES: Tuple[str, ...] = (".env.local", ".env")

DEFAULT_PORT = 5000
DEV_ORIGIN = "http://localhost:5173"
PROD_ORIGIN = "your-production-domain"

_TRUTHY = ("1", "true", "yes", "on")


class ConfigError(RuntimeError):
    """Raised when the process cannot start with the current environment."""


def env_flag(var: str) -> bool:
    return (os.getenv(var, "") or "").strip().lower() in _TRUTHY


def _opt(var: str) -> Optional[str]:
    val = (os.getenv(var) or "").strip()
    return val or None


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    gg_api_key: Optional[str] = None
    ds_api_key: Optional[str] = None

    gg_model: str = "gemini-2.0-flash"
    gg_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    ds_model: str = "deepseek-chat"
    ds_base_url: str = "https://api.deepseek.com/v1"
    request_timeout: float = 60.0

    env: str = "development"
    client_origin: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    debug: bool = False

    @model_validator(mode="after")
    def _require_a_key(self) -> "Settings":
        if not self.gg_api_key and not self.ds_api_key:
            raise ValueError(
                "At least one API key (GG_API_KEY or DS_API_KEY) must be configured"
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def allowed_origin(self) -> str:
        if self.client_origin:
            return self.client_origin
        return PROD_ORIGIN if self.is_production else DEV_ORIGIN

    @property
    def available_apis(self) -> list[str]:
        names = []
        if self.gg_api_key:
            names.append("google")
        if self.ds_api_key:
            names.append("deepseek")
        return names


def load_env_files(env_files: Iterable[str | Path], debug: bool = False) -> None:
    for path in env_files:
        loaded = load_dotenv(path, override=False, verbose=debug)
        if debug:
            logger.debug("env file %s loaded=%s", path, loaded)


def load_settings(env_files: Iterable[str | Path] = DEFAULT_ENV_FILES) -> Settings:
    """
    Build Settings from env files + process environment.

    Raises ConfigError when neither GG_API_KEY nor DS_API_KEY is present,
    or when a numeric variable cannot be parsed.
    """
    load_env_files(env_files, debug=env_flag("DEBUG"))

    raw = {
        "gg_api_key": _opt("GG_API_KEY"),
        "ds_api_key": _opt("DS_API_KEY"),
        "env": _opt("NODE_ENV") or "development",
        "client_origin": _opt("CLIENT_ORIGIN"),
        "debug": env_flag("DEBUG"),
    }
    # Only pass what is set so model defaults apply otherwise
    for field, var in (
        ("gg_model", "GG_MODEL"),
        ("ds_model", "DS_MODEL"),
        ("ds_base_url", "DS_BASE_URL"),
        ("request_timeout", "REQUEST_TIMEOUT"),
        ("host", "HOST"),
        ("port", "PORT"),
    ):
        val = _opt(var)
        if val is not None:
            raw[field] = val

    try:
        return Settings(**raw)
    except ValidationError as ex:
        messages = "; ".join(err["msg"] for err in ex.errors())
        raise ConfigError(messages) from ex
