"""CLI commands operating on a console session."""

import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, TextIO

from .backend.protocols import Backend
from .catalog import CONTROL_ACTIONS, get_action
from .config.models import ConsoleSettings
from .container import create_session
from .controller import ConsoleController
from .models import ActionIntent
from .presentation import (
    Clipboard,
    Confirm,
    ConsoleView,
    Osc52Clipboard,
    TerminalConfirm,
    format_action,
    format_log_entry,
    format_result,
    format_status,
)
from .stores.logs import ALL_LEVELS

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


@dataclass
class CommandContext:
    """
    Context passed to command execution.

    Contains the parsed options plus the capabilities commands may use.
    """
    command: str
    settings: ConsoleSettings
    options: dict[str, Any] = field(default_factory=dict)
    backend: Optional[Backend] = None
    stream: Optional[TextIO] = None
    confirm: Confirm = field(default_factory=TerminalConfirm)
    clipboard: Clipboard = field(default_factory=Osc52Clipboard)

    def write(self, text: str) -> None:
        print(text, file=self.stream or sys.stdout, flush=True)

    def session(self) -> ConsoleController:
        return create_session(self.settings, backend=self.backend)


CommandFn = Callable[[CommandContext], Awaitable[int]]

# Command registry to track available commands
_command_registry: dict[str, CommandFn] = {}


def register_command(name: str):
    """Decorator registering an async command function under name."""

    def decorator(fn: CommandFn) -> CommandFn:
        _command_registry[name] = fn
        return fn

    return decorator


def get_registered_commands() -> dict[str, CommandFn]:
    return _command_registry.copy()


async def execute(ctx: CommandContext) -> int:
    command = _command_registry.get(ctx.command)
    if command is None:
        ctx.write(f"Unknown command: {ctx.command}")
        return EXIT_USAGE
    return await command(ctx)


def _report_disconnected(ctx: CommandContext) -> int:
    ctx.write(f"Not connected: backend unreachable at {ctx.settings.backend_url}")
    return EXIT_FAILURE


@register_command("actions")
async def list_actions(ctx: CommandContext) -> int:
    for action in CONTROL_ACTIONS:
        ctx.write(format_action(action))
    return EXIT_OK


@register_command("status")
async def show_status(ctx: CommandContext) -> int:
    async with ctx.session() as session:
        if not session.connected:
            return _report_disconnected(ctx)
        statuses = session.status_store.snapshot()
        if not statuses:
            ctx.write("No status reported")
        for status in statuses:
            ctx.write(format_status(status))
    return EXIT_OK


@register_command("logs")
async def show_logs(ctx: CommandContext) -> int:
    level = ctx.options.get("level") or ALL_LEVELS
    async with ctx.session() as session:
        if not session.connected:
            return _report_disconnected(ctx)
        for entry in session.log_store.filtered_view(level):
            ctx.write(format_log_entry(entry))
    return EXIT_OK


@register_command("run")
async def run_action(ctx: CommandContext) -> int:
    key = ctx.options.get("action")
    try:
        action = get_action(key)
    except KeyError:
        ctx.write(f"Unknown action: {key}")
        ctx.write("Available actions: " + ", ".join(a.key for a in CONTROL_ACTIONS))
        return EXIT_USAGE

    if action.intent is ActionIntent.DANGER and not ctx.options.get("yes"):
        if not ctx.confirm.confirm(f"{action.label}?"):
            ctx.write("Cancelled")
            return EXIT_FAILURE

    async with ctx.session() as session:
        if not session.connected:
            return _report_disconnected(ctx)

        dispatcher = session.dispatcher
        await dispatcher.dispatch(action)

        if dispatcher.action_error:
            ctx.write(dispatcher.action_error)
            return EXIT_FAILURE

        result = dispatcher.last_result
        ctx.write(format_result(result))
        for status in session.status_store.snapshot():
            ctx.write(format_status(status))

        if ctx.options.get("copy"):
            output = "\n".join(part for part in (result.outcome.stdout, result.outcome.stderr) if part)
            if not ctx.clipboard.write(output):
                logger.warning("Clipboard not available; output not copied")

        return EXIT_OK if result.outcome.success else EXIT_FAILURE


@register_command("watch")
async def watch(ctx: CommandContext) -> int:
    session = ctx.session()
    view = ConsoleView(session.events, stream=ctx.stream)
    try:
        await session.start()
        if not session.connected:
            return _report_disconnected(ctx)

        for status in session.status_store.snapshot():
            ctx.write(format_status(status))
        for entry in session.log_store.entries():
            ctx.write(format_log_entry(entry))
        if not session.live:
            ctx.write("Live updates unavailable")
            return EXIT_FAILURE

        view.attach()
        await session.backend.wait_closed()
        ctx.write("Backend connection closed")
        return EXIT_OK
    finally:
        view.detach()
        await session.stop()
