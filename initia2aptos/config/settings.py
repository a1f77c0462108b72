"""
Application settings.

Responsibilities:
- Load configuration from environment variables and .env files.
- Validate settings and provide defaults for optional ones.
- Expose a typed AppConfig (endpoint, chain id, port, cache policy, ...)
  for the API server, the upstream client and the CLI.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any

from initia2aptos.config.env import (
    DEFAULT_APTOS_CHAIN_ID,
    DEFAULT_CACHE_DURATION,
    DEFAULT_CHAIN_ID,
    DEFAULT_ENDPOINT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_REQUEST_TIMEOUT_SEC,
    env_bool,
    env_float,
    env_int,
    env_str,
    load_bridge_env,
)

_DURATION_UNITS_MS = (
    ("second", 1000),
    ("minute", 60 * 1000),
    ("hour", 60 * 60 * 1000),
    ("day", 24 * 60 * 60 * 1000),
)
_LEADING_INT = re.compile(r"^\s*(\d+)")


def parse_duration_ms(duration: str | None) -> int:
    """
    Parse a human cache duration ("5 minutes", "1 hour", "2 days") to milliseconds.

    The leading integer is multiplied by the first unit found in the string.
    Missing, unitless or unparseable durations return 0.
    """
    if not duration:
        return 0
    text = duration.lower()
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    amount = int(match.group(1))
    for unit, factor in _DURATION_UNITS_MS:
        if unit in text:
            return amount * factor
    return 0


@dataclass(frozen=True)
class AppConfig:
    """Runtime configuration for one bridge instance (one upstream endpoint)."""

    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    chain_id: str = DEFAULT_CHAIN_ID
    endpoint: str = DEFAULT_ENDPOINT
    aptos_chain_id: int = DEFAULT_APTOS_CHAIN_ID
    cache_enabled: bool = True
    cache_duration: str = DEFAULT_CACHE_DURATION
    debug: bool = False
    log_errors: bool = True
    request_timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC

    def __post_init__(self) -> None:
        if not self.endpoint.strip():
            raise ValueError("endpoint must be non-empty")
        if not (0 < self.port < 65536):
            raise ValueError("port must be between 1 and 65535")
        if self.request_timeout_sec <= 0:
            raise ValueError("request_timeout_sec must be positive")

    @property
    def cache_ttl_ms(self) -> int:
        return parse_duration_ms(self.cache_duration)

    @property
    def caching(self) -> bool:
        """True when the response cache is enabled and has a usable TTL."""
        return self.cache_enabled and self.cache_ttl_ms > 0

    def with_overrides(self, **overrides: Any) -> "AppConfig":
        """Return a copy with non-None overrides applied (CLI flags over env)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def get_settings() -> AppConfig:
    """Return the current application settings, read from env (and .env)."""
    load_bridge_env()
    return AppConfig(
        port=env_int("PORT", DEFAULT_PORT),
        host=env_str("HOST", DEFAULT_HOST),
        chain_id=env_str("CHAIN_ID", DEFAULT_CHAIN_ID),
        endpoint=env_str("INITIA_ENDPOINT", DEFAULT_ENDPOINT),
        aptos_chain_id=env_int("APTOS_CHAIN_ID", DEFAULT_APTOS_CHAIN_ID),
        cache_enabled=env_bool("CACHE_ENABLED", True),
        cache_duration=env_str("CACHE_DURATION", DEFAULT_CACHE_DURATION),
        debug=env_bool("DEBUG", False),
        log_errors=env_bool("LOG_ERRORS", True),
        request_timeout_sec=env_float("REQUEST_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT_SEC),
    )
