"""
Configuration management for the lookup client.

Loads settings from environment variables and an optional .env file at the
project root. Exposes a single source of truth for client configuration.
"""

from lookup_client.config.settings import ClientSettings, get_settings  # noqa: F401

__all__ = ["ClientSettings", "get_settings"]
