import logging
import logging.config
from logging import Logger
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
}


def verbosity_level(verbose: int) -> int:
    """Map a -v count to a logging level: 0 WARNING, 1 INFO, 2+ DEBUG."""
    return _VERBOSITY_LEVELS.get(verbose, logging.DEBUG)


def setup_logging(
        level: Union[int, str] = logging.WARNING,
        logging_config: Optional[Path] = None,
        name: str = "maaconsole"
) -> Logger:
    """
    Configure console logging.

    An existing ``logging_config`` ini file takes precedence over ``level``.
    Otherwise a single stream handler is attached to the ``name`` logger.

    :param level: Logging level (number or name such as "INFO").
    :param logging_config: Optional path to a logging .ini file.
    :param name: Logger to configure.
    :return: The configured logger.
    """
    if logging_config is not None and logging_config.exists():
        logging.config.fileConfig(logging_config, disable_existing_loggers=False)
        return logging.getLogger(name)

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
