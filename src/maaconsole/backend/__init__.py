from .client import BackendClient
from .protocols import Backend, PushHandler, Unlisten
from .websocket import WebSocketBackend

__all__ = [
    "Backend",
    "BackendClient",
    "PushHandler",
    "Unlisten",
    "WebSocketBackend",
]
