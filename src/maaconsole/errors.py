class ConsoleError(Exception):
    """Base class for errors raised by the console core."""


class TransportError(ConsoleError):
    """The backend transport is unreachable or the connection was lost."""


class BackendError(ConsoleError):
    """The backend rejected a command before producing a reply."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"{command}: {message}")
        self.command = command
        self.message = message
