import asyncio
import logging
from enum import Enum
from functools import partial
from typing import Callable, Optional, Set, Union

from ...config.provider import ConsoleConfig
from ..auth.interfaces import TokenService
from ..codec import DecodedFrame, decode_message, encode
from ..errors import ProtocolViolation, SessionError, TokenAcquisitionError, TransportError
from ..interfaces import ErrorListener, TerminalSink, Transport, TransportFactory
from ..target import SessionTarget, build_exec_endpoint

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    """State of the exec connection."""

    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class ConnectionLifecycle:
    """
    Owns the transport for the current target and replaces it on every reset.

    Each reset bumps the generation. Work started for an older generation
    (token requests, transport opens, inbound messages) is dropped when it
    completes, so only the newest connection attempt can touch the terminal.
    """

    def __init__(
        self,
        terminal: TerminalSink,
        token_service: TokenService,
        transport_factory: TransportFactory,
        on_frame: Callable[[DecodedFrame], None],
        config: Optional[ConsoleConfig] = None,
        error_listener: Optional[ErrorListener] = None,
    ):
        """
        Initialize connection lifecycle.

        Args:
            terminal: Terminal to reset and enable/disable
            token_service: Source of exec tokens
            transport_factory: Builds an unopened transport for a URL
            on_frame: Receives every decoded inbound frame of the live generation
            config: Console configuration
            error_listener: Optional callback for reported errors
        """
        self.terminal = terminal
        self.token_service = token_service
        self.transport_factory = transport_factory
        self.on_frame = on_frame
        self.config = config or ConsoleConfig()
        self.error_listener = error_listener

        self._target: Optional[SessionTarget] = None
        self._generation = 0
        self._transport: Optional[Transport] = None
        self._state = ConnectionState.IDLE
        self._pending: Set[asyncio.Task] = set()
        self._ended = asyncio.Event()

    @property
    def target(self) -> Optional[SessionTarget]:
        return self._target

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> ConnectionState:
        if self._state is ConnectionState.OPEN and not self.is_open:
            return ConnectionState.CLOSED
        return self._state

    @property
    def is_open(self) -> bool:
        return self._transport is not None and self._transport.is_open

    def _is_current(self, target: SessionTarget, generation: int) -> bool:
        return generation == self._generation and target == self._target

    async def reset(self, new_target: Optional[SessionTarget]) -> None:
        """
        Tear down the current session and, if a target is given, start a new one.

        Logic:
        1. Detach the transport and clear/disable the terminal
        2. Bump the generation
        3. Start connecting to new_target in the background
        4. Close the detached transport
        """
        previous = self._transport
        self._transport = None

        self.terminal.reset()
        self.terminal.set_input_enabled(False)

        self._generation += 1
        self._target = new_target
        generation = self._generation

        if new_target is None:
            self._state = ConnectionState.IDLE
            self._ended.set()
            logger.info("No target selected, session torn down")
        else:
            self._state = ConnectionState.CONNECTING
            self._ended.clear()
            logger.info(f"Connecting to {new_target.path} (generation {generation})")
            task = asyncio.create_task(self._connect(new_target, generation))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        if previous is not None:
            try:
                await previous.close()
            except TransportError as e:
                logger.warning(f"Error closing previous transport: {e}")

    async def _connect(self, target: SessionTarget, generation: int) -> None:
        try:
            token = await self.token_service.get_auth_token(target.resource_id)
        except Exception as e:
            error = e if isinstance(e, SessionError) else TokenAcquisitionError(target.resource_id, str(e))
            if self._is_current(target, generation):
                self._fail(error)
            else:
                logger.debug(f"Ignoring token failure for superseded generation {generation}")
            return

        if not self._is_current(target, generation):
            logger.debug(f"Discarding auth token for superseded generation {generation}")
            return

        url = build_exec_endpoint(
            token.log_stream_endpoint,
            target,
            startup_command=self.config.startup_command,
            socket_scheme=self.config.socket_scheme,
        )
        headers = None
        if self.config.send_token_header and token.token:
            headers = {"Authorization": f"Bearer {token.token}"}

        transport = self.transport_factory(url, headers)
        self._transport = transport

        try:
            await transport.open(
                on_message=partial(self._handle_message, generation),
                on_error=partial(self._handle_transport_error, generation),
                on_close=partial(self._handle_transport_closed, generation),
            )
        except Exception as e:
            error = e if isinstance(e, SessionError) else TransportError(f"Failed to open transport: {e}")
            if self._is_current(target, generation):
                self._fail(error)
            return

        if not self._is_current(target, generation):
            # Superseded while the handshake was in flight
            logger.debug(f"Closing transport opened for superseded generation {generation}")
            await transport.close()
            return

        self._state = ConnectionState.OPEN
        self.terminal.set_input_enabled(True)
        logger.info(f"Exec session open (generation {generation})")

    def _fail(self, error: SessionError) -> None:
        self._state = ConnectionState.CLOSED
        self.report(error)
        self._ended.set()

    def _handle_message(self, generation: int, message: Union[bytes, str]) -> None:
        if generation != self._generation:
            return
        self.on_frame(decode_message(message))

    def _handle_transport_error(self, generation: int, error: TransportError) -> None:
        if generation != self._generation:
            return
        self.report(error)
        if not self.is_open:
            self._ended.set()

    def _handle_transport_closed(self, generation: int) -> None:
        if generation != self._generation:
            return
        logger.info(f"Exec session closed by remote (generation {generation})")
        self.terminal.set_input_enabled(False)
        self._ended.set()

    async def wait_closed(self) -> None:
        """Wait until the current session has ended or been torn down."""
        await self._ended.wait()

    async def send(self, text: str) -> bool:
        """
        Send typed text to the container's stdin.

        Returns:
            True if a frame was sent, False if the text was dropped
        """
        transport = self._transport
        if transport is None or not transport.is_open:
            return False
        try:
            await transport.send(encode(text))
        except TransportError as e:
            self.report(e)
            return False
        return True

    def report(self, error: SessionError) -> None:
        """Log an error and pass it to the error listener."""
        if isinstance(error, ProtocolViolation):
            # Single bad frames are skipped, never shown on the terminal
            logger.warning(f"Skipped frame: {error}")
        else:
            logger.error(f"{type(error).__name__}: {error}")
        if self.error_listener is not None:
            self.error_listener(error)

    async def aclose(self) -> None:
        """Tear down the session and wait for outstanding connect attempts."""
        await self.reset(None)
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
