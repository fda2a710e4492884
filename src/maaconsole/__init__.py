"""
maaconsole - client-side synchronization and dispatch layer of the emulator/MAA control console.

This module provides a clean public surface for the console core.
Consumers should import from here for stable API access.
"""

from .api import (
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
    CONTROL_ACTIONS,
    get_action,
    ALL_LEVELS,
    LogStore,
    LogView,
    StatusStore,
    ActionDispatcher,
    EventBridge,
    ConsoleController,
    SessionState,
    SessionContainer,
    create_session,
    ConsoleEvent,
    EventHub,
    Backend,
    BackendClient,
    WebSocketBackend,
    ConsoleError,
    TransportError,
    BackendError,
    ConsoleSettings,
    StartupMode,
    load_file,
    setup_logging,
)

__all__ = [
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
    "ALL_LEVELS",
    "LogStore",
    "LogView",
    "StatusStore",
    "ActionDispatcher",
    "EventBridge",
    "ConsoleController",
    "SessionState",
    "SessionContainer",
    "create_session",
    "ConsoleEvent",
    "EventHub",
    "Backend",
    "BackendClient",
    "WebSocketBackend",
    "ConsoleError",
    "TransportError",
    "BackendError",
    "ConsoleSettings",
    "StartupMode",
    "load_file",
    "setup_logging",
]

__version__ = "0.1.0"
