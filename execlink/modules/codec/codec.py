"""
Frame codec for the exec proxy wire protocol.

Inbound binary messages are tagged by their first byte:

    0x00 <stream> <payload>   exec stream forwarded from the cluster
    0x01 <utf-8 text>         info message from the proxy
    0x02 <utf-8 text>         error message from the proxy

Stream ids for tag 0 are 1 (stdout), 2 (stderr), 3 (other output) and
4 (terminal resize, payload ignored). Outbound messages are always
``0x00 0x00`` followed by utf-8 stdin text.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Union

INFO_PREFIX = "INFO: "
ERROR_PREFIX = "ERROR: "
LINE_BREAK = "\r\n"

STDIN_HEADER = bytes([0, 0])


class FrameTag(IntEnum):
    """Leading byte of a binary frame."""

    EXEC = 0
    INFO = 1
    ERROR = 2


class StreamId(IntEnum):
    """Second byte of an EXEC frame."""

    STDIN = 0
    STDOUT = 1
    STDERR = 2
    OTHER = 3
    RESIZE = 4


OUTPUT_STREAMS = frozenset({StreamId.STDOUT, StreamId.STDERR, StreamId.OTHER})


@dataclass(frozen=True)
class StreamOutput:
    """Output forwarded from one of the container's streams."""

    stream_id: StreamId
    text: str

    @property
    def terminal_text(self) -> Optional[str]:
        return self.text


@dataclass(frozen=True)
class ResizeSignal:
    """Resize signal from the server. Not acted upon."""

    @property
    def terminal_text(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class InfoMessage:
    text: str

    @property
    def terminal_text(self) -> Optional[str]:
        return f"{INFO_PREFIX}{self.text}{LINE_BREAK}"


@dataclass(frozen=True)
class ErrorMessage:
    text: str

    @property
    def terminal_text(self) -> Optional[str]:
        return f"{ERROR_PREFIX}{self.text}{LINE_BREAK}"


@dataclass(frozen=True)
class TextMessage:
    """A text (non-binary) transport message, shown as one line."""

    text: str

    @property
    def terminal_text(self) -> Optional[str]:
        return f"{self.text}{LINE_BREAK}"


@dataclass(frozen=True)
class UnrecognizedFrame:
    """
    A frame whose tag or stream id is outside the protocol.

    ``tag`` is None for an empty message; ``stream_id`` is None when the
    frame is not an EXEC frame or ends before the stream byte.
    """

    tag: Optional[int]
    stream_id: Optional[int] = None

    @property
    def terminal_text(self) -> Optional[str]:
        return None


WireFrame = Union[StreamOutput, ResizeSignal, InfoMessage, ErrorMessage, TextMessage]
DecodedFrame = Union[WireFrame, UnrecognizedFrame]


def _decode_utf8(payload: bytes) -> str:
    return payload.decode("utf-8", errors="replace")


def decode(data: bytes) -> DecodedFrame:
    """
    Decode one binary transport message.

    Args:
        data: Raw message bytes

    Returns:
        The decoded frame, or UnrecognizedFrame for anything outside the
        protocol. Never raises on malformed input.
    """
    if not data:
        return UnrecognizedFrame(tag=None)

    tag = data[0]

    if tag == FrameTag.EXEC:
        if len(data) < 2:
            return UnrecognizedFrame(tag=tag)
        stream_id = data[1]
        if stream_id in OUTPUT_STREAMS:
            return StreamOutput(StreamId(stream_id), _decode_utf8(data[2:]))
        if stream_id == StreamId.RESIZE:
            return ResizeSignal()
        return UnrecognizedFrame(tag=tag, stream_id=stream_id)

    if tag == FrameTag.INFO:
        return InfoMessage(_decode_utf8(data[1:]))

    if tag == FrameTag.ERROR:
        return ErrorMessage(_decode_utf8(data[1:]))

    return UnrecognizedFrame(tag=tag)


def decode_text(text: str) -> TextMessage:
    """Wrap a text transport message."""
    return TextMessage(text)


def decode_message(message: Union[bytes, bytearray, memoryview, str]) -> DecodedFrame:
    """Decode a transport message of either kind."""
    if isinstance(message, str):
        return decode_text(message)
    return decode(bytes(message))


def encode(text: str) -> bytes:
    """Encode typed text as a stdin frame on the primary stream."""
    return STDIN_HEADER + text.encode("utf-8")
