import asyncio
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from maaconsole.errors import TransportError  # noqa: E402
from maaconsole.models import (  # noqa: E402
    LOG_CHANNEL,
    STATUS_CHANNEL,
    CommandOutcome,
    LogEntry,
    LogLevel,
    SoftwareKind,
    SoftwarePhase,
    SoftwareStatus,
)


def make_log(n: int, level: LogLevel = LogLevel.INFO, message: Optional[str] = None) -> LogEntry:
    return LogEntry(timestamp_ms=1000 + n, level=level, message=message or f"line {n}")


def make_status(
        kind: SoftwareKind = SoftwareKind.EMULATOR,
        phase: SoftwarePhase = SoftwarePhase.IDLE,
        updated: int = 100,
        message: Optional[str] = None
) -> SoftwareStatus:
    return SoftwareStatus(kind=kind, phase=phase, last_message=message, last_updated_ms=updated)


def make_outcome(success: bool = True, label: str = "Start emulator") -> CommandOutcome:
    return CommandOutcome(
        label=label,
        command="podman start maa-container",
        exit_code=0 if success else 125,
        success=success,
        stdout="maa-container" if success else "",
        stderr="" if success else "Error: no container with name maa-container",
    )


def _wire(value: Any) -> Any:
    if isinstance(value, list):
        return [_wire(v) for v in value]
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return value


class FakeBackend:
    """In-memory backend recording every call made by the console."""

    def __init__(
            self,
            statuses: Optional[list[SoftwareStatus]] = None,
            logs: Optional[list[LogEntry]] = None,
            available: bool = True
    ) -> None:
        self.available = available
        self.connected = False
        self.replies: dict[str, Any] = {
            "fetch_status": list(statuses or []),
            "fetch_logs": list(logs or []),
        }
        self.gates: dict[str, asyncio.Event] = {}
        self.on_invoke: Optional[Callable[[str], None]] = None
        self.fail_listen: set[str] = set()

        self.calls: list[str] = []
        self.listen_calls: list[str] = []
        self.unlisten_calls = 0
        self.connect_calls = 0
        self.close_calls = 0
        self.listeners: dict[str, dict[int, Callable[[Any], None]]] = {}
        self._token = 0
        self._closed = asyncio.Event()

    async def connect(self) -> None:
        self.connect_calls += 1
        if not self.available:
            raise TransportError("connection refused")
        self.connected = True

    async def close(self) -> None:
        self.close_calls += 1
        self.connected = False
        self._closed.set()

    async def wait_closed(self) -> None:
        await self._closed.wait()

    def gate(self, command: str) -> asyncio.Event:
        """Block replies to command until the returned event is set."""
        event = asyncio.Event()
        self.gates[command] = event
        return event

    async def invoke(self, command: str) -> Any:
        self.calls.append(command)
        if not self.connected:
            raise TransportError("Backend not connected")
        if self.on_invoke is not None:
            self.on_invoke(command)
        gate = self.gates.get(command)
        if gate is not None:
            await gate.wait()
        reply = self.replies.get(command)
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            reply = reply()
        return _wire(reply)

    async def listen(self, channel: str, handler: Callable[[Any], None]):
        self.listen_calls.append(channel)
        if channel in self.fail_listen:
            raise TransportError(f"cannot listen on {channel}")
        self._token += 1
        token = self._token
        self.listeners.setdefault(channel, {})[token] = handler

        def unlisten() -> None:
            self.unlisten_calls += 1
            self.listeners.get(channel, {}).pop(token, None)

        return unlisten

    def push(self, channel: str, payload: Any) -> None:
        for handler in list(self.listeners.get(channel, {}).values()):
            handler(_wire(payload))

    def push_log(self, entry: LogEntry) -> None:
        self.push(LOG_CHANNEL, entry)

    def push_status(self, status: SoftwareStatus) -> None:
        self.push(STATUS_CHANNEL, status)

    def listener_count(self, channel: str) -> int:
        return len(self.listeners.get(channel, {}))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def backend():
    """A connected-capable fake backend with empty snapshots."""
    return FakeBackend()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, temp_dir):
    """Keep tests independent from the user's config file and environment."""
    for name in (
            "MAACONSOLE_CONFIG",
            "MAACONSOLE_BACKEND_URL",
            "MAACONSOLE_LOG_CAPACITY",
            "MAACONSOLE_STARTUP_MODE",
            "MAACONSOLE_CONNECT_TIMEOUT",
            "MAACONSOLE_REQUEST_TIMEOUT",
            "MAACONSOLE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(temp_dir))
    monkeypatch.chdir(temp_dir)
