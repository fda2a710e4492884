import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import pydantic
import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from .loaders import load_file

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "MAACONSOLE_CONFIG"
DEFAULT_CONFIG_PATH = "~/.config/easy_maa/console.yaml"


def expand_path(path: Union[str, Path]) -> Path:
    """Expand ``~`` and environment variables in path."""
    return Path(os.path.expandvars(Path(path).expanduser()))


class StartupMode(str, Enum):
    """How the initial snapshot is combined with the push stream."""
    RECONCILE = "reconcile"
    PULL_THEN_SUBSCRIBE = "pull_then_subscribe"


def resolve_config_path(config_path: Optional[Union[str, Path]] = None) -> Path:
    """
    Pick the configuration file to read.

    Priority:
    1. explicit ``config_path``
    2. the MAACONSOLE_CONFIG environment variable
    3. ~/.config/easy_maa/console.yaml
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
    return expand_path(config_path)


class ConsoleSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MAACONSOLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True
    )

    backend_url: str = pydantic.Field(
        default="ws://127.0.0.1:8765",
        description="WebSocket URL of the process supervisor backend"
    )
    connect_timeout: float = pydantic.Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for the backend connection"
    )
    request_timeout: Optional[float] = pydantic.Field(
        default=None,
        gt=0,
        description="Seconds to wait for an RPC reply (None waits forever)"
    )
    log_capacity: int = pydantic.Field(
        default=200,
        ge=1,
        description="Maximum number of log entries kept in memory"
    )
    startup_mode: StartupMode = pydantic.Field(
        default=StartupMode.RECONCILE,
        description="How the initial snapshot and the push stream are combined"
    )
    log_level: str = pydantic.Field(
        default="WARNING",
        description="Console log level when no -v flag is given"
    )

    @pydantic.field_validator("backend_url")
    @classmethod
    def validate_backend_url(cls, v: str) -> str:
        if not v.startswith(("ws://", "wss://")):
            raise ValueError(f"backend_url must be a ws:// or wss:// URL, got {v!r}")
        return v

    @pydantic.field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def load(cls, config_path: Optional[Union[str, Path]] = None) -> "ConsoleSettings":
        """
        Load settings from a config file layered over environment and defaults.

        A missing file, or one that cannot be parsed or validated, is logged
        and the environment and defaults are used instead.

        :param config_path: Optional explicit path to a YAML or JSON file.
        :return: The loaded settings.
        """
        path = resolve_config_path(config_path)
        if not path.exists():
            logger.info("Config file not found: %s; using environment and defaults", path)
            return cls()

        logger.info("Loading config file: %s", path)
        try:
            return cls(**load_file(path))
        except (OSError, RuntimeError, ValueError, yaml.YAMLError) as e:
            logger.warning("Failed to load config file %s, using environment and defaults: %s", path, e)
            return cls()
