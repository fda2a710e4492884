import logging
from typing import Optional

from dependency_injector import containers, providers

from .backend.client import BackendClient
from .backend.protocols import Backend
from .backend.websocket import WebSocketBackend
from .bridge import EventBridge
from .config.models import ConsoleSettings
from .controller import ConsoleController
from .dispatcher import ActionDispatcher
from .events import EventHub
from .stores.logs import LogStore
from .stores.status import StatusStore

logger = logging.getLogger(__name__)


class SessionContainer(containers.DeclarativeContainer):
    """Wires the components of one console session."""

    config = providers.Object(None)

    backend = providers.Singleton(
        WebSocketBackend,
        config.provided.backend_url,
        connect_timeout=config.provided.connect_timeout,
        request_timeout=config.provided.request_timeout,
    )
    client = providers.Singleton(BackendClient, backend)

    events = providers.Singleton(EventHub)
    log_store = providers.Singleton(LogStore, capacity=config.provided.log_capacity)
    status_store = providers.Singleton(StatusStore)

    dispatcher = providers.Singleton(
        ActionDispatcher,
        client=client,
        status_store=status_store,
        events=events,
    )
    bridge = providers.Singleton(EventBridge, backend)

    controller = providers.Singleton(
        ConsoleController,
        backend=backend,
        client=client,
        log_store=log_store,
        status_store=status_store,
        dispatcher=dispatcher,
        bridge=bridge,
        events=events,
        startup_mode=config.provided.startup_mode,
    )


def create_session(
        settings: Optional[ConsoleSettings] = None,
        backend: Optional[Backend] = None
) -> ConsoleController:
    """
    Build a new, not yet started console session.

    :param settings: Session settings. Defaults to ConsoleSettings().
    :param backend: Backend transport. Defaults to a WebSocketBackend for settings.backend_url.
    :return: The session controller owning every session component.
    """
    container = SessionContainer()
    container.config.override(providers.Object(settings or ConsoleSettings()))
    if backend is not None:
        container.backend.override(providers.Object(backend))

    controller = container.controller()
    logger.debug("Created console session (startup mode: %s)", controller.startup_mode.value)
    return controller
