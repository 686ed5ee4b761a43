"""
Websocket transport for exec sessions.

One instance wraps one connection. Inbound messages are pumped by a reader
task and handed to the ``on_message`` callback in arrival order.
"""

import asyncio
import logging
from typing import Callable, Dict, Optional, Union

from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK, WebSocketException
from websockets.protocol import State

from ..errors import TransportError

logger = logging.getLogger(__name__)

Message = Union[bytes, str]
MessageCallback = Callable[[Message], None]
ErrorCallback = Callable[[TransportError], None]
CloseCallback = Callable[[], None]


class WebSocketTransport:
    """Duplex message transport over a websocket."""

    def __init__(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        open_timeout: float = 10.0,
        connector=connect,
    ):
        """
        Initialize transport. Nothing is opened until open() is awaited.

        Args:
            url: ws:// or wss:// URL
            headers: Extra handshake headers
            open_timeout: Seconds allowed for the opening handshake
            connector: websockets connect coroutine (replaceable for tests)
        """
        self.url = url
        self.headers = headers or {}
        self.open_timeout = open_timeout
        self._connector = connector
        self._ws = None
        self._reader: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed and self._ws is not None and self._ws.state is State.OPEN

    async def open(
        self,
        on_message: MessageCallback,
        on_error: ErrorCallback,
        on_close: Optional[CloseCallback] = None,
    ) -> None:
        """
        Connect and start delivering messages.

        Raises:
            TransportError: The connection could not be established
        """
        try:
            self._ws = await self._connector(
                self.url,
                additional_headers=self.headers,
                open_timeout=self.open_timeout,
                max_size=None,
            )
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            raise TransportError(f"Failed to connect to {self.url}: {e}") from e

        if self._closed:
            # close() was called while the handshake was in flight
            await self._ws.close()
            return

        logger.info("Exec websocket connected")
        self._reader = asyncio.create_task(self._read_loop(on_message, on_error, on_close))

    async def _read_loop(
        self,
        on_message: MessageCallback,
        on_error: ErrorCallback,
        on_close: Optional[CloseCallback],
    ) -> None:
        try:
            async for message in self._ws:
                on_message(message)
        except ConnectionClosedOK:
            pass
        except ConnectionClosed as e:
            if not self._closed:
                on_error(TransportError(f"Connection closed abnormally: {e}"))
            return
        except Exception as e:
            # The consumer failed; stop reading and drop the connection
            logger.debug("Exec websocket message handler failed", exc_info=True)
            await self._ws.close()
            if not self._closed:
                on_error(TransportError(f"Message handler failed: {e}"))
            return

        logger.info("Exec websocket closed")
        if not self._closed and on_close is not None:
            on_close()

    async def send(self, data: bytes) -> None:
        """
        Send one binary message.

        Raises:
            TransportError: The connection is not open or the send failed
        """
        if not self.is_open:
            raise TransportError("Transport is not open")
        try:
            await self._ws.send(data)
        except ConnectionClosed as e:
            raise TransportError(f"Send failed: {e}") from e

    async def close(self) -> None:
        """Close the connection. Safe to call more than once or before open()."""
        if self._closed:
            return
        self._closed = True

        if self._ws is not None:
            await self._ws.close()

        if self._reader is not None and self._reader is not asyncio.current_task():
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
