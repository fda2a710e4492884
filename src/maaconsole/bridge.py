import logging
from typing import Any, Callable, Optional

import pydantic

from .backend.protocols import Backend, Unlisten
from .models import LOG_CHANNEL, STATUS_CHANNEL, LogEntry, SoftwareStatus

logger = logging.getLogger(__name__)

LogCallback = Callable[[LogEntry], None]
StatusCallback = Callable[[SoftwareStatus], None]


class EventBridge:
    """
    Owns the push-channel subscriptions of a session.

    Raw payloads are validated and handed to the callbacks in the order the
    transport delivers them. Invalid payloads are logged and dropped.
    """

    def __init__(self, backend: Backend) -> None:
        self._backend = backend
        self._unlisten_log: Optional[Unlisten] = None
        self._unlisten_status: Optional[Unlisten] = None

    @property
    def subscribed(self) -> bool:
        return self._unlisten_log is not None or self._unlisten_status is not None

    async def subscribe(
            self,
            on_log: LogCallback,
            on_status: StatusCallback
    ) -> tuple[Unlisten, Unlisten]:
        """
        Register the log and status listeners.

        :param on_log: Receives each pushed LogEntry.
        :param on_status: Receives each pushed SoftwareStatus.
        :return: The two cancellation handles (log, status).
        :raises TransportError: If the transport refuses a registration.
        """
        if self.subscribed:
            logger.debug("Already subscribed; replacing existing listeners")
            self.unsubscribe()

        unlisten_log = await self._backend.listen(
            LOG_CHANNEL, self._route(LOG_CHANNEL, LogEntry, on_log)
        )
        self._unlisten_log = unlisten_log
        try:
            unlisten_status = await self._backend.listen(
                STATUS_CHANNEL, self._route(STATUS_CHANNEL, SoftwareStatus, on_status)
            )
        except Exception:
            self.unsubscribe()
            raise
        self._unlisten_status = unlisten_status

        logger.debug("Subscribed to %s and %s", LOG_CHANNEL, STATUS_CHANNEL)
        return unlisten_log, unlisten_status

    def unsubscribe(self) -> None:
        """Release both listeners. Safe to call repeatedly or before subscribe."""
        unlisten_log, self._unlisten_log = self._unlisten_log, None
        unlisten_status, self._unlisten_status = self._unlisten_status, None
        if unlisten_log is not None:
            unlisten_log()
        if unlisten_status is not None:
            unlisten_status()
        if unlisten_log or unlisten_status:
            logger.debug("Unsubscribed from push channels")

    @staticmethod
    def _route(
            channel: str,
            model: type[pydantic.BaseModel],
            callback: Callable[[Any], None]
    ) -> Callable[[Any], None]:
        def handler(payload: Any) -> None:
            try:
                value = model.model_validate(payload)
            except pydantic.ValidationError as e:
                logger.warning("Dropping invalid payload on %s: %s", channel, e)
                return
            callback(value)

        return handler
