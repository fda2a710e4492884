"""Typed wrappers around raw backend RPCs."""

import logging

import pydantic

from ..models import (
    ACTION_COMMANDS,
    BackendCommand,
    CommandOutcome,
    LogEntry,
    SoftwareStatus,
)
from .protocols import Backend

logger = logging.getLogger(__name__)

_STATUS_LIST = pydantic.TypeAdapter(list[SoftwareStatus])
_LOG_LIST = pydantic.TypeAdapter(list[LogEntry])


class BackendClient:
    """Decode backend replies into console models."""

    def __init__(self, backend: Backend) -> None:
        self.backend = backend

    @property
    def connected(self) -> bool:
        return self.backend.connected

    async def fetch_status(self) -> list[SoftwareStatus]:
        raw = await self.backend.invoke(BackendCommand.FETCH_STATUS.value)
        return _STATUS_LIST.validate_python(raw)

    async def fetch_logs(self) -> list[LogEntry]:
        raw = await self.backend.invoke(BackendCommand.FETCH_LOGS.value)
        return _LOG_LIST.validate_python(raw)

    async def run(self, command: BackendCommand) -> CommandOutcome:
        """
        Invoke a control command and decode its outcome.

        :param command: One of the control commands.
        :return: The outcome reported by the backend.
        :raises ValueError: If command is not a control command.
        """
        if command not in ACTION_COMMANDS:
            raise ValueError(f"{command.value} is not a control command")
        logger.debug("Invoking %s", command.value)
        raw = await self.backend.invoke(command.value)
        return CommandOutcome.model_validate(raw)
