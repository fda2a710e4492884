import logging
from collections import deque
from collections.abc import Sequence
from typing import Deque, Iterable, Iterator, Optional, Union

from ..models import LogEntry, LogLevel

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 200

ALL_LEVELS = "all"

LevelFilter = Union[LogLevel, str, None]


def _parse_filter(level: LevelFilter) -> Optional[LogLevel]:
    if level is None or level == ALL_LEVELS:
        return None
    return LogLevel(level)


class LogView(Sequence):
    """
    Lazy, read-only window over a LogStore buffer.

    Nothing is copied: every access walks the live buffer, so the view
    reflects appends made after it was created. Only the last ``limit``
    matching entries are visible.
    """

    def __init__(self, buffer: Deque[LogEntry], level: Optional[LogLevel], limit: int):
        self._buffer = buffer
        self._level = level
        self._limit = limit

    @property
    def level(self) -> Optional[LogLevel]:
        return self._level

    def _matches(self, entry: LogEntry) -> bool:
        return self._level is None or entry.level == self._level

    def _matching(self) -> int:
        return sum(1 for entry in self._buffer if self._matches(entry))

    def __len__(self) -> int:
        return min(self._matching(), self._limit)

    def __iter__(self) -> Iterator[LogEntry]:
        skip = max(0, self._matching() - self._limit)
        for entry in self._buffer:
            if not self._matches(entry):
                continue
            if skip:
                skip -= 1
                continue
            yield entry

    def __getitem__(self, index):
        return list(self)[index]

    def __repr__(self) -> str:
        level = self._level.value if self._level else ALL_LEVELS
        return f"LogView(level={level!r}, size={len(self)})"


class LogStore:
    """Bounded buffer of log entries kept in arrival order."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._buffer: Deque[LogEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, entry: LogEntry) -> None:
        """Insert one entry, silently evicting the oldest when full."""
        if len(self._buffer) == self._capacity:
            logger.debug("Log buffer full, evicting oldest entry")
        self._buffer.append(entry)

    def replace_all(self, entries: Iterable[LogEntry]) -> None:
        """Install a pulled snapshot, keeping only its last ``capacity`` entries."""
        self._buffer.clear()
        self._buffer.extend(entries)
        logger.debug("Installed log snapshot (%d entries kept)", len(self._buffer))

    def filtered_view(self, level: LevelFilter = ALL_LEVELS) -> LogView:
        """
        Get the stored entries matching a level.

        :param level: A LogLevel, its string value, or "all"/None for every entry.
        :return: A lazy view preserving stored order.
        :raises ValueError: If level is not a known level.
        """
        return LogView(self._buffer, _parse_filter(level), self._capacity)

    def clear(self) -> None:
        self._buffer.clear()

    def entries(self) -> list[LogEntry]:
        return list(self._buffer)

    def __contains__(self, entry: object) -> bool:
        return entry in self._buffer

    def __len__(self) -> int:
        return len(self._buffer)
