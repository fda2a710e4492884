"""
Single-flight execution of user triggered control actions.

At most one backend command is outstanding at any time. A dispatch issued
while another is pending, or while the backend is unreachable, is ignored
rather than queued.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from .backend.client import BackendClient
from .events import ConsoleEvent, EventHub
from .models import ActionResult, ControlAction
from .stores.status import StatusStore

logger = logging.getLogger(__name__)


def describe_error(error: BaseException) -> str:
    """Render an exception as a single line for display."""
    message = " ".join(str(error).split())
    return message or type(error).__name__


class ActionDispatcher:
    """Runs control actions one at a time and records their outcome."""

    def __init__(
            self,
            client: BackendClient,
            status_store: StatusStore,
            events: Optional[EventHub] = None
    ) -> None:
        self._client = client
        self._status_store = status_store
        self._events = events or EventHub()

        self._pending_action: Optional[str] = None
        self._action_error: Optional[str] = None
        self._last_result: Optional[ActionResult] = None

    @property
    def pending_action(self) -> Optional[str]:
        return self._pending_action

    @property
    def action_error(self) -> Optional[str]:
        return self._action_error

    @property
    def last_result(self) -> Optional[ActionResult]:
        return self._last_result

    @property
    def busy(self) -> bool:
        return self._pending_action is not None

    def can_dispatch(self) -> bool:
        return self._client.connected and not self.busy

    async def dispatch(self, action: ControlAction) -> bool:
        """
        Run a control action unless another is pending.

        :param action: The action to run.
        :return: False if the call was ignored, True once an accepted action settled.
        """
        if not self._client.connected:
            logger.debug("Ignoring %s: backend not connected", action.key)
            return False
        if self._pending_action is not None:
            logger.debug("Ignoring %s: %s still pending", action.key, self._pending_action)
            return False

        # Claimed before the first suspension point so a concurrent call sees it
        self._pending_action = action.key
        self._action_error = None
        logger.info("Running action %s (%s)", action.key, action.command.value)

        try:
            self._events.emit(ConsoleEvent.ACTION_STARTED, action)
            try:
                outcome = await self._client.run(action.command)
            except Exception as e:
                self._action_error = f"{action.label} failed: {describe_error(e)}"
                logger.error("Action %s failed: %s", action.key, e)
                self._events.emit(ConsoleEvent.ACTION_FAILED, self._action_error)
                return True

            self._last_result = ActionResult(
                outcome=outcome,
                finished_at=datetime.now(timezone.utc)
            )
            logger.info("Action %s finished with exit code %d", action.key, outcome.exit_code)

            # status refresh runs before any observer sees the result
            await self._refresh_status()
            self._events.emit(ConsoleEvent.ACTION_FINISHED, self._last_result)
            return True
        finally:
            self._pending_action = None

    async def _refresh_status(self) -> None:
        try:
            statuses = await self._client.fetch_status()
        except Exception as e:
            logger.warning("Status refresh after action failed: %s", e)
            return
        self._status_store.refresh(statuses)
        for status in statuses:
            self._events.emit(ConsoleEvent.STATUS_CHANGED, status)
