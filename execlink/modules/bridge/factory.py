"""
Session Factory following Black Box Design principles.

This factory:
- Constructs the session stack based on configuration
- Wires dependencies together
- Returns only the bridge facade (hiding implementation)
"""

import logging
from typing import Dict, Optional

from ...config.provider import ConfigProvider, ConsoleConfig
from ..auth import ContainerAppTokenService
from ..auth.interfaces import TokenService
from ..interfaces import ErrorListener, TerminalSink, TransportFactory
from ..transport import WebSocketTransport
from .bridge import SessionBridge

logger = logging.getLogger(__name__)


class SessionFactory:
    """
    Factory for building the exec session stack.

    This is the composition root that:
    - Creates the token service and transport factory
    - Wires them together via dependency injection
    - Returns only the public interface
    """

    @staticmethod
    def build(
        config_provider: ConfigProvider,
        terminal: TerminalSink,
        error_listener: Optional[ErrorListener] = None,
    ) -> SessionBridge:
        """
        Build the complete session stack.

        Args:
            config_provider: Configuration provider
            terminal: Terminal the session renders into
            error_listener: Optional callback for reported errors

        Returns:
            SessionBridge facade
        """
        token_config = config_provider.get_token_service_config()
        console_config = config_provider.get_console_config()

        token_service = ContainerAppTokenService(token_config)

        def transport_factory(url: str, headers: Optional[Dict[str, str]] = None):
            return WebSocketTransport(url, headers=headers, open_timeout=console_config.open_timeout)

        logger.info(f"Building session stack (token service: {token_config.arm_endpoint})")

        return SessionBridge(
            terminal=terminal,
            token_service=token_service,
            transport_factory=transport_factory,
            config=console_config,
            error_listener=error_listener,
        )

    @staticmethod
    def build_for_testing(
        terminal: TerminalSink,
        token_service: TokenService,
        transport_factory: TransportFactory,
        error_listener: Optional[ErrorListener] = None,
        **config_overrides,
    ) -> SessionBridge:
        """
        Build the session stack with mock dependencies.

        Args:
            terminal: Fake terminal
            token_service: Mock token service
            transport_factory: Factory returning fake transports
            error_listener: Optional callback for reported errors
            **config_overrides: ConsoleConfig fields to override

        Returns:
            SessionBridge for testing
        """
        return SessionBridge(
            terminal=terminal,
            token_service=token_service,
            transport_factory=transport_factory,
            config=ConsoleConfig(**config_overrides),
            error_listener=error_listener,
        )
