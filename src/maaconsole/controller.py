"""
Console session lifecycle.

A ConsoleController is the session object: it owns the stores, the action
dispatcher and the push subscription for as long as the console is open,
and sequences how the initial snapshot and the live push stream are
combined.

Two startup modes are supported:

- ``reconcile`` subscribes first and buffers pushed events while the
  snapshot pulls are in flight. Once both pulls settle the snapshots are
  installed and the buffered events replayed on top of them, skipping log
  entries already contained in the log snapshot and statuses older than the
  pulled status of the same kind. Nothing emitted after the subscription
  is lost.
- ``pull_then_subscribe`` pulls first and subscribes afterwards. Events
  emitted by the backend between its readiness and the end of the pulls
  are lost.
"""
import asyncio
import logging
from enum import Enum
from typing import Optional, Union

from .backend.client import BackendClient
from .backend.protocols import Backend
from .bridge import EventBridge
from .config.models import StartupMode
from .dispatcher import ActionDispatcher
from .errors import TransportError
from .events import ConsoleEvent, EventHub
from .models import LogEntry, SoftwareKind, SoftwareStatus
from .stores.logs import LogStore
from .stores.status import StatusStore

logger = logging.getLogger(__name__)

_Buffered = Union[LogEntry, SoftwareStatus]


class SessionState(str, Enum):
    IDLE = "idle"
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    LIVE = "live"
    STOPPED = "stopped"


class ConsoleController:
    """Owns one console session from start() to stop()."""

    def __init__(
            self,
            backend: Backend,
            client: BackendClient,
            log_store: LogStore,
            status_store: StatusStore,
            dispatcher: ActionDispatcher,
            bridge: EventBridge,
            events: EventHub,
            startup_mode: StartupMode = StartupMode.RECONCILE
    ) -> None:
        self.backend = backend
        self.client = client
        self.log_store = log_store
        self.status_store = status_store
        self.dispatcher = dispatcher
        self.bridge = bridge
        self.events = events
        self.startup_mode = StartupMode(startup_mode)

        self._state = SessionState.IDLE
        self._buffer: Optional[list[_Buffered]] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state in (SessionState.CONNECTED, SessionState.LIVE) and self.backend.connected

    @property
    def live(self) -> bool:
        return self._state is SessionState.LIVE and self.backend.connected

    @property
    def stopped(self) -> bool:
        return self._state is SessionState.STOPPED

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        logger.debug("Session state %s -> %s", self._state.value, state.value)
        self._state = state
        self.events.emit(ConsoleEvent.STATE_CHANGED, state)

    async def start(self) -> None:
        """
        Connect, pull the initial snapshots and subscribe to push events.

        Never raises for backend failures: an unreachable backend leaves the
        session disconnected, a failed pull leaves its store empty and a
        failed subscription leaves the session connected but not live.

        :raises RuntimeError: If the session was already started.
        """
        if self._state is not SessionState.IDLE:
            raise RuntimeError(f"Session already started (state: {self._state.value})")

        try:
            await self.backend.connect()
        except TransportError as e:
            logger.warning("Console running disconnected: %s", e)
            self._set_state(SessionState.DISCONNECTED)
            return
        if self.stopped:
            await self.backend.close()
            return
        self._set_state(SessionState.CONNECTED)

        if self.startup_mode is StartupMode.RECONCILE:
            self._buffer = []
            subscribed = await self._subscribe()
            statuses, logs = await self._pull()
            if self.stopped:
                self._buffer = None
                logger.debug("Session stopped during startup; discarding snapshots")
                return
            self._install(statuses, logs)
            self._replay(statuses, logs)
        else:
            statuses, logs = await self._pull()
            if self.stopped:
                logger.debug("Session stopped during startup; discarding snapshots")
                return
            self._install(statuses, logs)
            subscribed = await self._subscribe()

        if subscribed and not self.stopped:
            self._set_state(SessionState.LIVE)

    async def stop(self) -> None:
        """Release the push subscription and the backend. Idempotent."""
        if self.stopped:
            logger.debug("Session already stopped")
            return
        was_started = self._state is not SessionState.IDLE
        self._set_state(SessionState.STOPPED)
        self._buffer = None
        self.bridge.unsubscribe()
        if was_started:
            await self.backend.close()
        logger.info("Console session stopped")

    async def refresh(self) -> None:
        """Re-pull both snapshots; failed pulls leave their store as it was."""
        if not self.connected:
            logger.debug("Ignoring refresh: backend not connected")
            return
        statuses, logs = await self._pull()
        if statuses is not None:
            self.status_store.refresh(statuses)
            for status in statuses:
                self.events.emit(ConsoleEvent.STATUS_CHANGED, status)
        if logs is not None:
            self.log_store.replace_all(logs)
            self.events.emit(ConsoleEvent.LOGS_REPLACED, self.log_store.entries())

    def clear_logs(self) -> None:
        self.log_store.clear()
        self.events.emit(ConsoleEvent.LOGS_REPLACED, [])

    async def __aenter__(self) -> "ConsoleController":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

    async def _pull(self) -> tuple[Optional[list[SoftwareStatus]], Optional[list[LogEntry]]]:
        results = await asyncio.gather(
            self.client.fetch_status(),
            self.client.fetch_logs(),
            return_exceptions=True
        )

        settled = []
        for name, result in zip(("status", "log"), results):
            if isinstance(result, Exception):
                logger.warning("Snapshot %s pull failed: %s", name, result)
                settled.append(None)
            elif isinstance(result, BaseException):
                raise result
            else:
                settled.append(result)
        return settled[0], settled[1]

    async def _subscribe(self) -> bool:
        try:
            await self.bridge.subscribe(self._on_log, self._on_status)
        except Exception as e:
            logger.error("Live updates unavailable: %s", e)
            return False
        if self.stopped:
            self.bridge.unsubscribe()
            return False
        return True

    def _install(
            self,
            statuses: Optional[list[SoftwareStatus]],
            logs: Optional[list[LogEntry]]
    ) -> None:
        self.status_store.replace_all(statuses or [])
        self.log_store.replace_all(logs or [])
        for status in self.status_store.snapshot():
            self.events.emit(ConsoleEvent.STATUS_CHANGED, status)
        self.events.emit(ConsoleEvent.LOGS_REPLACED, self.log_store.entries())

    def _replay(
            self,
            statuses: Optional[list[SoftwareStatus]],
            logs: Optional[list[LogEntry]]
    ) -> None:
        buffered, self._buffer = self._buffer or [], None
        pulled_logs = set(logs or ())
        pulled_at: dict[SoftwareKind, int] = {
            status.kind: status.last_updated_ms for status in statuses or ()
        }

        replayed = 0
        for item in buffered:
            if isinstance(item, LogEntry):
                if item in pulled_logs:
                    continue
                self._apply_log(item)
            else:
                if item.last_updated_ms < pulled_at.get(item.kind, item.last_updated_ms):
                    continue
                self._apply_status(item)
            replayed += 1

        if buffered:
            logger.debug("Replayed %d of %d events buffered during startup", replayed, len(buffered))

    def _on_log(self, entry: LogEntry) -> None:
        if self._buffer is not None:
            self._buffer.append(entry)
            return
        self._apply_log(entry)

    def _on_status(self, status: SoftwareStatus) -> None:
        if self._buffer is not None:
            self._buffer.append(status)
            return
        self._apply_status(status)

    def _apply_log(self, entry: LogEntry) -> None:
        self.log_store.append(entry)
        self.events.emit(ConsoleEvent.LOG_APPENDED, entry)

    def _apply_status(self, status: SoftwareStatus) -> None:
        self.status_store.upsert(status)
        self.events.emit(ConsoleEvent.STATUS_CHANGED, status)
