"""Terminal and transport interfaces following Black Box Design principles."""
from typing import Callable, Dict, Optional, Protocol, Union

from .errors import SessionError, TransportError


class TerminalSink(Protocol):
    """
    Protocol for the terminal the session renders into.

    Typed input is not part of the sink: it reaches the session as an async
    iterator of text passed to SessionBridge.pump_input.
    """

    def write(self, text: str) -> None:
        """Append text to the visible output."""
        ...

    def reset(self) -> None:
        """Clear the visible buffer."""
        ...

    def set_input_enabled(self, enabled: bool) -> None:
        """Allow or block keystroke events."""
        ...


class Transport(Protocol):
    """Protocol for the duplex channel owned by one connection attempt."""

    @property
    def is_open(self) -> bool:
        ...

    async def open(
        self,
        on_message: Callable[[Union[bytes, str]], None],
        on_error: Callable[[TransportError], None],
        on_close: Callable[[], None],
    ) -> None:
        ...

    async def send(self, data: bytes) -> None:
        ...

    async def close(self) -> None:
        ...


# Builds an unopened transport for a URL and handshake headers
TransportFactory = Callable[[str, Optional[Dict[str, str]]], Transport]

ErrorListener = Callable[[SessionError], None]
