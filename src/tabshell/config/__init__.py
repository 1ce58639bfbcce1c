"""Configuration management for tabshell.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides for every setting.
"""

from tabshell.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
