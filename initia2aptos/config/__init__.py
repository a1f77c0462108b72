"""
Configuration management for the bridge.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for all service configuration.
"""

from initia2aptos.config.settings import AppConfig, get_settings, parse_duration_ms  # noqa: F401

__all__ = ["AppConfig", "get_settings", "parse_duration_ms"]
