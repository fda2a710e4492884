"""
Terminal presentation of a console session.

UI side effects (confirmation prompts, clipboard writes) are capabilities
injected here; the core components never call them.
"""
import base64
import sys
from datetime import datetime
from typing import Callable, Optional, Protocol, TextIO, runtime_checkable

from .events import ConsoleEvent, EventHub
from .models import (
    ActionResult,
    ControlAction,
    LogEntry,
    SoftwareStatus,
)

NO_OUTPUT = "(no output)"


@runtime_checkable
class Confirm(Protocol):
    def confirm(self, prompt: str) -> bool:
        ...


@runtime_checkable
class Clipboard(Protocol):
    def write(self, text: str) -> bool:
        ...


class TerminalConfirm:
    """Ask a yes/no question on the terminal; anything but y/yes declines."""

    def __init__(self, read: Callable[[str], str] = input) -> None:
        self._read = read

    def confirm(self, prompt: str) -> bool:
        try:
            answer = self._read(f"{prompt} [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")


class AlwaysConfirm:
    def confirm(self, prompt: str) -> bool:
        return True


class Osc52Clipboard:
    """Copy text through the OSC 52 terminal escape sequence."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def write(self, text: str) -> bool:
        stream = self._stream or sys.stdout
        if not stream.isatty():
            return False
        payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
        stream.write(f"\x1b]52;c;{payload}\x07")
        stream.flush()
        return True


def format_timestamp(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M:%S")


def format_log_entry(entry: LogEntry) -> str:
    return f"{format_timestamp(entry.timestamp_ms)} {entry.level.value.upper():5} {entry.message}"


def format_status(status: SoftwareStatus) -> str:
    line = f"{status.kind.value:8} {status.phase.value:8} {format_timestamp(status.last_updated_ms)}"
    if status.last_message:
        line += f"  {status.last_message}"
    return line


def format_action(action: ControlAction) -> str:
    return f"{action.key:16} {action.label} ({action.intent.value})"


def format_result(result: ActionResult) -> str:
    outcome = result.outcome
    verdict = "succeeded" if outcome.success else "failed"
    lines = [
        f"{outcome.label} {verdict} (exit code {outcome.exit_code}) "
        f"at {result.finished_at.astimezone().strftime('%H:%M:%S')}",
        f"$ {outcome.command}",
        "[STDOUT]",
        outcome.stdout or NO_OUTPUT,
        "[STDERR]",
        outcome.stderr or NO_OUTPUT,
    ]
    return "\n".join(lines)


class ConsoleView:
    """Prints session changes as they happen."""

    def __init__(self, events: EventHub, stream: Optional[TextIO] = None) -> None:
        self._events = events
        self._stream = stream
        self._attached = False

    def _write(self, text: str) -> None:
        print(text, file=self._stream or sys.stdout, flush=True)

    def attach(self) -> None:
        if self._attached:
            return
        self._events.on(ConsoleEvent.LOG_APPENDED, self._on_log)
        self._events.on(ConsoleEvent.STATUS_CHANGED, self._on_status)
        self._events.on(ConsoleEvent.ACTION_STARTED, self._on_action_started)
        self._events.on(ConsoleEvent.ACTION_FINISHED, self._on_action_finished)
        self._events.on(ConsoleEvent.ACTION_FAILED, self._on_action_failed)
        self._events.on(ConsoleEvent.STATE_CHANGED, self._on_state)
        self._attached = True

    def detach(self) -> None:
        self._events.off(ConsoleEvent.LOG_APPENDED, self._on_log)
        self._events.off(ConsoleEvent.STATUS_CHANGED, self._on_status)
        self._events.off(ConsoleEvent.ACTION_STARTED, self._on_action_started)
        self._events.off(ConsoleEvent.ACTION_FINISHED, self._on_action_finished)
        self._events.off(ConsoleEvent.ACTION_FAILED, self._on_action_failed)
        self._events.off(ConsoleEvent.STATE_CHANGED, self._on_state)
        self._attached = False

    def _on_log(self, entry: LogEntry) -> None:
        self._write(format_log_entry(entry))

    def _on_status(self, status: SoftwareStatus) -> None:
        self._write(f"[status] {format_status(status)}")

    def _on_action_started(self, action: ControlAction) -> None:
        self._write(f"[action] {action.label}...")

    def _on_action_finished(self, result: ActionResult) -> None:
        self._write(format_result(result))

    def _on_action_failed(self, error: str) -> None:
        self._write(f"[error] {error}")

    def _on_state(self, state) -> None:
        self._write(f"[session] {state.value}")
