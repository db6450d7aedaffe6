"""Configuration handling for the Canvas assignment assistant."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    The token and host may be missing; the client reports that per request
    instead of refusing to start.
    """

    api_token: Optional[str] = None
    api_host: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def is_configured(self) -> bool:
        return bool(self.api_token) and bool(self.api_host)


def _optional(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def get_settings() -> Settings:
    """Load settings from environment variables (and a local .env file)."""
    load_dotenv()

    timeout_raw = os.getenv("CANVAS_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
    try:
        request_timeout = float(timeout_raw)
    except ValueError as exc:
        raise ValueError("CANVAS_REQUEST_TIMEOUT must be a number") from exc
    if request_timeout <= 0:
        raise ValueError("CANVAS_REQUEST_TIMEOUT must be positive")

    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"LOG_LEVEL must be a logging level name, got {log_level}")

    return Settings(
        api_token=_optional("CANVAS_API_TOKEN"),
        api_host=_optional("CANVAS_DOMAIN"),
        request_timeout=request_timeout,
        log_level=log_level,
    )
