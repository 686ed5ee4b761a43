import logging
from typing import AsyncIterator, Optional

from ...config.provider import ConsoleConfig
from ..auth.interfaces import TokenService
from ..codec import DecodedFrame, UnrecognizedFrame
from ..errors import ProtocolViolation
from ..interfaces import ErrorListener, TerminalSink, TransportFactory
from ..lifecycle import ConnectionLifecycle
from ..target import SessionTarget, resolve

logger = logging.getLogger(__name__)


class SessionBridge:
    """
    Connects a terminal to the exec session of the selected container.

    Inbound frames are written to the terminal in arrival order. Keystrokes
    are sent one frame per event while the transport is open and dropped
    otherwise.
    """

    def __init__(
        self,
        terminal: TerminalSink,
        token_service: TokenService,
        transport_factory: TransportFactory,
        config: Optional[ConsoleConfig] = None,
        error_listener: Optional[ErrorListener] = None,
    ):
        self.terminal = terminal
        self.config = config or ConsoleConfig()
        self.lifecycle = ConnectionLifecycle(
            terminal=terminal,
            token_service=token_service,
            transport_factory=transport_factory,
            on_frame=self.handle_frame,
            config=self.config,
            error_listener=error_listener,
        )

    async def __aenter__(self) -> "SessionBridge":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def select(
        self,
        resource_id: Optional[str],
        revision: Optional[str] = None,
        replica: Optional[str] = None,
        container: Optional[str] = None,
    ) -> Optional[SessionTarget]:
        """
        Apply a new selection and reconnect if needed.

        Returns:
            The resolved target, or None for a partial selection
        """
        target = resolve(resource_id, revision, replica, container)

        if not self.config.reconnect_on_same_target and target == self.lifecycle.target:
            logger.debug("Selection resolved to the current target, keeping session")
            return target

        await self.lifecycle.reset(target)
        return target

    def handle_frame(self, frame: DecodedFrame) -> None:
        """Render one inbound frame."""
        if isinstance(frame, UnrecognizedFrame):
            self.lifecycle.report(ProtocolViolation(frame.tag, frame.stream_id))
            return

        text = frame.terminal_text
        if text is not None:
            self.terminal.write(text)

    async def on_keystroke(self, text: str) -> bool:
        """
        Forward one input event to the container.

        Returns:
            True if sent, False if dropped because the transport is not open
        """
        sent = await self.lifecycle.send(text)
        if not sent:
            logger.debug("Transport not open, keystroke dropped")
        return sent

    async def pump_input(self, events: AsyncIterator[str]) -> None:
        """Forward every event from a terminal input stream, in order."""
        async for text in events:
            await self.on_keystroke(text)

    async def wait_closed(self) -> None:
        """Wait until the current session has ended."""
        await self.lifecycle.wait_closed()

    async def aclose(self) -> None:
        await self.lifecycle.aclose()
