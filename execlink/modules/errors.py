"""
Error taxonomy shared by all modules.

None of these are fatal: they are reported from the event handler that hit
them and the session carries on in whatever state it was left.
"""

from typing import Optional


class SessionError(Exception):
    """Base class for errors reported on the session error channel."""


class ProtocolViolation(SessionError):
    """A single inbound frame carried an unknown tag or sub-stream id."""

    def __init__(self, tag: Optional[int], stream_id: Optional[int] = None):
        self.tag = tag
        self.stream_id = stream_id
        if tag == 0:
            detail = f"unknown exec signal {stream_id}"
        else:
            detail = f"unknown exec signal {tag}"
        super().__init__(detail)


class TransportError(SessionError):
    """Socket level failure (connect, abnormal close, send)."""


class TokenAcquisitionError(SessionError):
    """The token service call failed or returned an unusable response."""

    def __init__(self, resource_id: str, message: str):
        self.resource_id = resource_id
        super().__init__(f"Failed to get auth token for {resource_id}: {message}")
