from .loaders import load_file
from .models import (
    CONFIG_PATH_ENV,
    DEFAULT_CONFIG_PATH,
    ConsoleSettings,
    StartupMode,
    expand_path,
    resolve_config_path,
)
from .setup import setup_logging, verbosity_level

__all__ = [
    "CONFIG_PATH_ENV",
    "DEFAULT_CONFIG_PATH",
    "ConsoleSettings",
    "StartupMode",
    "expand_path",
    "load_file",
    "resolve_config_path",
    "setup_logging",
    "verbosity_level",
]
