"""
Transport Module - Black Box Interface

Purpose: Duplex message channel to the exec proxy
Interface: open(), send(), close(), is_open
Hidden: Websocket library, handshake headers, reader task

Replaceable with any message-oriented transport that honours the same
callbacks.
"""

from .websocket import WebSocketTransport

__all__ = ["WebSocketTransport"]
