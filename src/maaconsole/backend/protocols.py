from typing import Any, Callable, Protocol, runtime_checkable

PushHandler = Callable[[Any], None]
Unlisten = Callable[[], None]


@runtime_checkable
class Backend(Protocol):
    """
    Protocol defining the transport to the process supervisor backend.

    Required:
        connected: Whether RPCs and subscriptions can currently be issued
        connect: Async method establishing the transport
        close: Async method releasing the transport
        invoke: Async request/reply call of a named command with no arguments
        listen: Async registration of a push-channel handler
        wait_closed: Async method returning once the transport is gone

    ``listen`` returns a synchronous cancellation handle. Calling it more than
    once must be harmless. Push handlers are called on the event loop, one
    payload at a time, in delivery order.
    """

    @property
    def connected(self) -> bool:
        ...

    async def connect(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def invoke(self, command: str) -> Any:
        ...

    async def listen(self, channel: str, handler: PushHandler) -> Unlisten:
        ...

    async def wait_closed(self) -> None:
        ...
