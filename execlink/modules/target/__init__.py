"""
Target Module - Black Box Interface

Purpose: Decide which container the session points at and where to connect
Interface: resolve(), SessionTarget, build_exec_endpoint()
Hidden: Path layout of the exec proxy

Pure functions, no I/O.
"""

from .endpoint import build_exec_endpoint
from .resolver import SessionTarget, resolve

__all__ = ["SessionTarget", "build_exec_endpoint", "resolve"]
