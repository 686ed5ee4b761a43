"""
Codec Module - Black Box Interface

Purpose: Translate between exec proxy wire frames and terminal text
Interface: decode(), decode_text(), decode_message(), encode()
Hidden: Tag layout, stream ids, text decoding rules

Pure functions, no I/O and no state. Replaceable with any other framing
as long as the frame types stay the same.
"""

from .codec import (
    DecodedFrame,
    ErrorMessage,
    FrameTag,
    InfoMessage,
    ResizeSignal,
    StreamId,
    StreamOutput,
    TextMessage,
    UnrecognizedFrame,
    WireFrame,
    decode,
    decode_message,
    decode_text,
    encode,
)

__all__ = [
    "DecodedFrame",
    "ErrorMessage",
    "FrameTag",
    "InfoMessage",
    "ResizeSignal",
    "StreamId",
    "StreamOutput",
    "TextMessage",
    "UnrecognizedFrame",
    "WireFrame",
    "decode",
    "decode_message",
    "decode_text",
    "encode",
]
