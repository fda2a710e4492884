import logging
from typing import Iterable, Optional

from ..models import SoftwareKind, SoftwareStatus

logger = logging.getLogger(__name__)


class StatusStore:
    """Latest status per component kind, in first-seen order."""

    def __init__(self) -> None:
        # dict preserves insertion order, and replacing a value keeps its slot
        self._statuses: dict[SoftwareKind, SoftwareStatus] = {}

    def upsert(self, status: SoftwareStatus) -> None:
        """Replace the entry for ``status.kind`` wholesale, or append it."""
        self._statuses[status.kind] = status

    def replace_all(self, statuses: Iterable[SoftwareStatus]) -> None:
        """Discard prior state and install a pulled snapshot."""
        self._statuses.clear()
        for status in statuses:
            self.upsert(status)
        logger.debug("Installed status snapshot (%d kinds)", len(self._statuses))

    def refresh(self, statuses: Iterable[SoftwareStatus]) -> None:
        """Apply a re-pulled snapshot without dropping kinds already known."""
        for status in statuses:
            self.upsert(status)

    def snapshot(self) -> list[SoftwareStatus]:
        return list(self._statuses.values())

    def get(self, kind: SoftwareKind) -> Optional[SoftwareStatus]:
        return self._statuses.get(kind)

    def __len__(self) -> int:
        return len(self._statuses)
