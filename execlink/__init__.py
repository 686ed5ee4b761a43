"""
Execlink - Interactive exec console for container app replicas

A client that opens a shell inside a running container and bridges it to a
terminal.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- codec: Wire frame encoding and decoding
- target: Session target resolution and endpoint derivation
- auth: Short-lived exec token acquisition
- api: Token service data models
- transport: Duplex websocket transport
- lifecycle: Connection state machine
- bridge: Terminal <-> transport wiring
"""

__version__ = "1.0.0"
