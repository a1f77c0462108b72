"""
Environment variable loading for the bridge.

- PORT / HOST: listen address (default 3000 / 0.0.0.0)
- CHAIN_ID: Initia chain id (default echelon-1)
- INITIA_ENDPOINT: upstream Initia REST endpoint
- APTOS_CHAIN_ID: numeric chain id reported in ledger info (default 1)
- CACHE_ENABLED / CACHE_DURATION: upstream response cache ("5 minutes", "1 hour", ...)
- DEBUG / LOG_ERRORS: request logging and handler error logging
- REQUEST_TIMEOUT_SEC: per-call upstream HTTP timeout
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is initia2aptos/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_CHAIN_ID = "echelon-1"
DEFAULT_ENDPOINT = "https://archival-rest-echelon-1.anvil.asia-southeast.initia.xyz"
DEFAULT_APTOS_CHAIN_ID = 1
DEFAULT_CACHE_DURATION = "5 minutes"
DEFAULT_REQUEST_TIMEOUT_SEC = 30.0

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


def load_bridge_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides set vars."""
    load_dotenv(_ENV_PATH)


def env_str(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def env_bool(name: str, default: bool) -> bool:
    """
    Return a boolean flag from env.
    Accepts 1/true/yes/on and 0/false/no/off (case-insensitive); empty -> default.
    """
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")
