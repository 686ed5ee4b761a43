"""
Lifecycle Module - Black Box Interface

Purpose: Manage the exec connection for the currently selected target
Interface: reset(), send(), wait_closed(), aclose(), state, generation
Hidden: Token requests, endpoint derivation, stale-result discard

Replaceable with any connection manager that guarantees only the newest
connection attempt reaches the terminal.
"""

from .lifecycle import ConnectionLifecycle, ConnectionState

__all__ = ["ConnectionLifecycle", "ConnectionState"]
