"""
Wire and session models for the console.

Every payload exchanged with the backend (RPC replies and push events) is
decoded into one of these immutable pydantic models.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

import pydantic

LOG_CHANNEL = "backend://log"
STATUS_CHANNEL = "backend://status"


class LogLevel(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class SoftwareKind(str, Enum):
    EMULATOR = "emulator"
    MAA = "maa"


class SoftwarePhase(str, Enum):
    UNKNOWN = "unknown"
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    ERROR = "error"


class ActionIntent(str, Enum):
    PRIMARY = "primary"
    NEUTRAL = "neutral"
    DANGER = "danger"


class BackendCommand(str, Enum):
    """Request/reply commands exposed by the backend."""
    FETCH_STATUS = "fetch_status"
    FETCH_LOGS = "fetch_logs"
    START_EMULATOR = "start_emulator"
    STOP_EMULATOR = "stop_emulator"
    RUN_MAA_STARTUP = "run_maa_startup"


ACTION_COMMANDS = frozenset({
    BackendCommand.START_EMULATOR,
    BackendCommand.STOP_EMULATOR,
    BackendCommand.RUN_MAA_STARTUP,
})


class _WireModel(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True, extra="ignore")


class LogEntry(_WireModel):
    """A single backend log line."""
    timestamp_ms: int
    level: LogLevel
    message: str


class SoftwareStatus(_WireModel):
    """Latest known state of one supervised component."""
    kind: SoftwareKind
    phase: SoftwarePhase
    last_message: Optional[str] = None
    last_updated_ms: int


class CommandOutcome(_WireModel):
    """Terminal result of one executed control command."""
    label: str
    command: str
    exit_code: int
    success: bool
    stdout: str = ""
    stderr: str = ""


class ActionResult(_WireModel):
    """A command outcome paired with the time the client observed it."""
    outcome: CommandOutcome
    finished_at: datetime


class ControlAction(_WireModel):
    """
    Entry of the static control action catalog.

    Attributes:
        key (str): Unique identifier of the action.
        label (str): Human readable label.
        command (BackendCommand): Backend command invoked, with no arguments.
        intent (ActionIntent): Presentation hint; danger actions are confirmed first.
    """
    key: str
    label: str
    command: BackendCommand
    intent: ActionIntent = ActionIntent.NEUTRAL

    @pydantic.field_validator("command")
    @classmethod
    def validate_command(cls, v: BackendCommand) -> BackendCommand:
        if v not in ACTION_COMMANDS:
            raise ValueError(f"{v.value} is not a control command")
        return v
