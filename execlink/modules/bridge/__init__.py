"""
Bridge Module - Black Box Interface

Purpose: Wire an exec session to a terminal
Interface: select(), on_keystroke(), pump_input(), wait_closed(), aclose()
Hidden: Connection lifecycle, frame rendering, keystroke encoding

SessionFactory is the composition root that assembles the full stack.
"""

from .bridge import SessionBridge
from .factory import SessionFactory

__all__ = ["SessionBridge", "SessionFactory"]
