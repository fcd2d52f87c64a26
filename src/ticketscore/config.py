"""Configuration parsing and validation for the ticket score aggregator."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError

DEFAULT_DATABASE_PATH = "database.db"
DEFAULT_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the score report."""

    database_url: str
    api_url: Optional[str]
    log_level: str
    timeout_seconds: int

    @property
    def uses_gateway(self) -> bool:
        """Whether scores are read from the HTTP gateway instead of the database."""
        return bool(self.api_url)


def _resolve_database_url(database_url: Optional[str]) -> str:
    if database_url:
        return database_url

    env_url = os.getenv("DATABASE_URL", "").strip()
    if env_url:
        return env_url

    db_path = os.getenv("DB_PATH", "").strip() or DEFAULT_DATABASE_PATH
    return f"sqlite:///{db_path}"


def _resolve_timeout() -> int:
    raw = os.getenv("SCORES_API_TIMEOUT", "").strip()
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS

    try:
        timeout = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            "Invalid value for 'SCORES_API_TIMEOUT': expected an integer number of seconds."
        ) from exc

    if timeout <= 0:
        raise ConfigurationError("Invalid value for 'SCORES_API_TIMEOUT': expected an integer greater than 0.")

    return timeout


def load_config(database_url: Optional[str] = None, api_url: Optional[str] = None) -> Config:
    """Build and validate application configuration.

    Explicit arguments win over environment variables:
    ``DATABASE_URL`` / ``DB_PATH`` for the rating store, ``SCORES_API_URL``
    for the gateway, ``LOG_LEVEL`` and ``SCORES_API_TIMEOUT``.

    Args:
        database_url: SQLAlchemy database URL for the rating store.
        api_url: Base URL of the scores HTTP gateway.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If the log level or timeout is invalid, or if the
            gateway URL is not an http(s) URL.
    """
    resolved_api_url = (api_url or os.getenv("SCORES_API_URL", "")).strip() or None
    if resolved_api_url and not resolved_api_url.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"Invalid scores API URL '{resolved_api_url}': expected an http:// or https:// URL."
        )

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"Invalid value for 'LOG_LEVEL': {log_level!r}.")

    return Config(
        database_url=_resolve_database_url(database_url),
        api_url=resolved_api_url.rstrip("/") if resolved_api_url else None,
        log_level=log_level,
        timeout_seconds=_resolve_timeout(),
    )
