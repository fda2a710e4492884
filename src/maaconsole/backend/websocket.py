"""
WebSocket transport to the process supervisor backend.

Frames are JSON objects:

    client -> backend   {"type": "invoke", "id": 1, "command": "fetch_status"}
    client -> backend   {"type": "listen", "channel": "backend://log"}
    backend -> client   {"type": "reply", "id": 1, "ok": true, "result": [...]}
    backend -> client   {"type": "reply", "id": 1, "ok": false, "error": "..."}
    backend -> client   {"type": "event", "channel": "backend://log", "payload": {...}}

A single reader task consumes the socket, resolving request futures and
calling push handlers on the event loop in the order frames arrive.
"""
import asyncio
import itertools
import json
import logging
from typing import Any, Optional

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..errors import BackendError, TransportError
from .protocols import PushHandler, Unlisten

logger = logging.getLogger(__name__)


class WebSocketBackend:
    """Backend reached over a single websocket connection."""

    def __init__(
            self,
            url: str,
            *,
            connect_timeout: float = 5.0,
            request_timeout: Optional[float] = None
    ) -> None:
        self.url = url
        self.connect_timeout = connect_timeout
        self.request_timeout = request_timeout

        self._ws = None
        self._reader: Optional[asyncio.Task] = None
        self._ids = itertools.count(1)
        self._tokens = itertools.count(1)
        self._pending: dict[int, asyncio.Future] = {}
        self._listeners: dict[str, dict[int, PushHandler]] = {}

    @property
    def connected(self) -> bool:
        return self._ws is not None and self._reader is not None and not self._reader.done()

    async def connect(self) -> None:
        if self.connected:
            return
        logger.info("Connecting to backend at %s", self.url)
        try:
            self._ws = await websockets.connect(self.url, open_timeout=self.connect_timeout)
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            self._ws = None
            logger.warning("Backend unreachable at %s: %s", self.url, e)
            raise TransportError(f"Backend unreachable at {self.url}: {e}") from e
        self._reader = asyncio.create_task(self._read_loop())
        logger.debug("Connected to backend at %s", self.url)

    async def close(self) -> None:
        ws, reader = self._ws, self._reader
        if ws is None:
            return
        logger.debug("Closing backend connection")
        try:
            await ws.close()
            if reader is not None:
                await reader
        except Exception as e:
            logger.warning("Backend connection closed with error: %s", e)
        finally:
            self._ws = None
            self._reader = None

    async def wait_closed(self) -> None:
        if self._reader is not None:
            await asyncio.shield(self._reader)

    async def invoke(self, command: str) -> Any:
        """
        Send a request and wait for its reply.

        :param command: The command name.
        :return: The ``result`` field of the reply.
        :raises TransportError: If not connected, the connection drops or the request times out.
        :raises BackendError: If the backend answered with ``ok: false``.
        """
        if not self.connected:
            raise TransportError("Backend not connected")

        request_id = next(self._ids)
        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        try:
            await self._send({"type": "invoke", "id": request_id, "command": command})
            reply = await asyncio.wait_for(future, self.request_timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(f"{command} timed out after {self.request_timeout}s") from e
        finally:
            self._pending.pop(request_id, None)

        if not reply.get("ok", False):
            raise BackendError(command, str(reply.get("error") or "unknown error"))
        return reply.get("result")

    async def listen(self, channel: str, handler: PushHandler) -> Unlisten:
        if not self.connected:
            raise TransportError("Backend not connected")

        handlers = self._listeners.setdefault(channel, {})
        if not handlers:
            await self._send({"type": "listen", "channel": channel})
        token = next(self._tokens)
        handlers[token] = handler
        logger.debug("Listening on %s (token %d)", channel, token)

        def unlisten() -> None:
            if self._listeners.get(channel, {}).pop(token, None) is not None:
                logger.debug("Stopped listening on %s (token %d)", channel, token)

        return unlisten

    async def _send(self, frame: dict) -> None:
        try:
            await self._ws.send(json.dumps(frame))
        except ConnectionClosed as e:
            raise TransportError(f"Backend connection closed: {e}") from e

    async def _read_loop(self) -> None:
        try:
            async for raw in self._ws:
                self._handle_frame(raw)
        except ConnectionClosed as e:
            logger.warning("Backend connection lost: %s", e)
        finally:
            for future in self._pending.values():
                if not future.done():
                    future.set_exception(TransportError("Backend connection closed"))
            self._pending.clear()
            logger.info("Backend connection closed")

    def _handle_frame(self, raw) -> None:
        try:
            frame = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding malformed frame: %r", raw)
            return
        if not isinstance(frame, dict):
            logger.warning("Discarding malformed frame: %r", raw)
            return

        frame_type = frame.get("type")
        if frame_type == "reply":
            request_id = frame.get("id")
            if not isinstance(request_id, int):
                logger.warning("Discarding reply with invalid id: %r", raw)
                return
            future = self._pending.get(request_id)
            if future is None or future.done():
                logger.debug("Reply for unknown request %r", request_id)
                return
            future.set_result(frame)
        elif frame_type == "event":
            channel = frame.get("channel")
            if not isinstance(channel, str):
                logger.warning("Discarding event with invalid channel: %r", raw)
                return
            for handler in list(self._listeners.get(channel, {}).values()):
                try:
                    handler(frame.get("payload"))
                except Exception as e:
                    logger.exception("Error in push handler for %s: %s", channel, e)
        else:
            logger.debug("Ignoring frame of type %r", frame_type)
