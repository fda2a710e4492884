"""
Public API of the console core.

Import only from this module (or the package root) for stable API access.
"""

from .backend import Backend, BackendClient, WebSocketBackend
from .bridge import EventBridge
from .catalog import CONTROL_ACTIONS, get_action
from .config import ConsoleSettings, StartupMode, load_file, setup_logging
from .container import SessionContainer, create_session
from .controller import ConsoleController, SessionState
from .dispatcher import ActionDispatcher
from .errors import BackendError, ConsoleError, TransportError
from .events import ConsoleEvent, EventHub
from .models import (
    LOG_CHANNEL,
    STATUS_CHANNEL,
    ActionIntent,
    ActionResult,
    BackendCommand,
    CommandOutcome,
    ControlAction,
    LogEntry,
    LogLevel,
    SoftwareKind,
    SoftwarePhase,
    SoftwareStatus,
)
from .stores import ALL_LEVELS, LogStore, LogView, StatusStore

__all__ = [
    # Models
    "LOG_CHANNEL",
    "STATUS_CHANNEL",
    "ActionIntent",
    "ActionResult",
    "BackendCommand",
    "CommandOutcome",
    "ControlAction",
    "LogEntry",
    "LogLevel",
    "SoftwareKind",
    "SoftwarePhase",
    "SoftwareStatus",
    "CONTROL_ACTIONS",
    "get_action",
    # Stores
    "ALL_LEVELS",
    "LogStore",
    "LogView",
    "StatusStore",
    # Session
    "ActionDispatcher",
    "EventBridge",
    "ConsoleController",
    "SessionState",
    "SessionContainer",
    "create_session",
    # Events
    "ConsoleEvent",
    "EventHub",
    # Backend
    "Backend",
    "BackendClient",
    "WebSocketBackend",
    # Errors
    "ConsoleError",
    "TransportError",
    "BackendError",
    # Config
    "ConsoleSettings",
    "StartupMode",
    "load_file",
    "setup_logging",
]
