"""
Session event hub.

Lets the presentation layer observe changes to the session state (new log
lines, status updates, action progress) without the core components knowing
who is listening. Each session owns its own hub; there is no module level
handler registry.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

logger = logging.getLogger(__name__)

# Type aliases
EventHandler = Callable[[Any], None]
CheckFn = Callable[[Any], bool]


class ConsoleEvent(Enum):
    """Events emitted while a console session is running."""
    LOG_APPENDED = "log_appended"
    LOGS_REPLACED = "logs_replaced"
    STATUS_CHANGED = "status_changed"
    ACTION_STARTED = "action_started"
    ACTION_FINISHED = "action_finished"
    ACTION_FAILED = "action_failed"
    STATE_CHANGED = "state_changed"


@dataclass
class _RegisteredHandler:
    """Internal representation of a registered handler."""
    handler: EventHandler
    check: Optional[CheckFn] = None


class EventHub:
    """Synchronous fan-out of session events to registered handlers."""

    def __init__(self) -> None:
        self._handlers: dict[ConsoleEvent, list[_RegisteredHandler]] = {}

    def on(
            self,
            event: ConsoleEvent,
            handler: Optional[EventHandler] = None,
            check: Optional[CheckFn] = None
    ) -> Union[EventHandler, Callable[[EventHandler], EventHandler]]:
        """
        Register a handler for a session event.

        Can be used as a direct call or as a decorator:

            @hub.on(ConsoleEvent.LOG_APPENDED)
            def print_entry(entry):
                print(entry.message)

            hub.on(ConsoleEvent.STATUS_CHANGED, redraw, check=lambda s: s.kind == SoftwareKind.MAA)

        :param event: The event type to listen for.
        :param handler: The callback. If None, returns a decorator.
        :param check: Optional predicate on the payload; the handler only runs when it returns True.
        :return: The handler, or a decorator if handler is None.
        """

        def _register(h: EventHandler) -> EventHandler:
            self._handlers.setdefault(event, []).append(_RegisteredHandler(handler=h, check=check))
            logger.debug("Registered handler for %s (with check: %s)", event.value, check is not None)
            return h

        if handler is None:
            return _register
        return _register(handler)

    def off(self, event: ConsoleEvent, handler: EventHandler) -> None:
        """Remove every registration of handler for event."""
        registered = self._handlers.get(event)
        if not registered:
            return
        # equality, not identity: bound methods are rebuilt on every attribute access
        self._handlers[event] = [r for r in registered if r.handler != handler]

    def emit(self, event: ConsoleEvent, payload: Any = None) -> None:
        """
        Call every handler registered for event whose check passes.

        Handlers run synchronously, in registration order.

        :param event: The event being emitted.
        :param payload: Value passed to each handler.
        """
        registered = self._handlers.get(event)
        if not registered:
            return

        for entry in list(registered):
            if entry.check is not None and not entry.check(payload):
                continue
            try:
                entry.handler(payload)
            except Exception as e:
                logger.exception("Error in event handler for %s: %s", event.value, e)
                raise

    def clear(self, event: Optional[ConsoleEvent] = None) -> None:
        """
        Clear event handlers.

        :param event: If provided, only clear handlers for this event.
                      If None, clear all handlers.
        """
        if event is None:
            self._handlers.clear()
            logger.debug("Cleared all event handlers")
        elif event in self._handlers:
            del self._handlers[event]
            logger.debug("Cleared handlers for %s", event.value)
