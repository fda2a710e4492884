from .logs import (
    ALL_LEVELS,
    DEFAULT_CAPACITY,
    LogStore,
    LogView,
)
from .status import StatusStore

__all__ = [
    "ALL_LEVELS",
    "DEFAULT_CAPACITY",
    "LogStore",
    "LogView",
    "StatusStore",
]
