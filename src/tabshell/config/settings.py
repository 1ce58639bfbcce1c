"""Configuration management for tabshell.

Loads settings from a YAML configuration file with environment variable
overrides (``TABSHELL_`` prefix, ``__`` for nested sections). Supports
.env files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/tabshell.yaml")
DEFAULT_STATE_PATH = Path("~/.tabshell/state.json")


class ExecutorConfig(BaseModel):
    backend: Literal["http", "local"] = Field(default="http")
    base_url: str = Field(default="http://localhost:3000")
    execute_path: str = Field(default="/api/execute")
    timeout: float | None = Field(
        default=None, gt=0, description="Request timeout in seconds (None waits forever)"
    )


class EndpointConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=1, le=65535)
    shell_command: str = Field(default="zsh")
    command_timeout: float | None = Field(default=None, gt=0)


class StorageConfig(BaseModel):
    backend: Literal["file", "memory"] = Field(default="file")
    path: Path = Field(default=DEFAULT_STATE_PATH)


class HistoryConfig(BaseModel):
    limit: int = Field(default=50, gt=0, description="Recallable commands kept in memory")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for tabshell.

    One nested section per subsystem. Any field can be overridden from
    the environment, e.g. ``TABSHELL_STORAGE__BACKEND=memory``.
    """

    model_config = {
        "env_prefix": "TABSHELL_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    executor: ExecutorConfig = Field(default_factory=ExecutorConfig)
    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs; environment wins over them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Build Settings from a YAML file, a .env file and the environment.

    Environment variables win over .env, which wins over the YAML file;
    anything left unset keeps its default.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
