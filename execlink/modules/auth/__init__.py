"""
Authentication Module - Black Box Interface

Purpose: Acquire the short-lived token needed to open an exec session
Interface: TokenService.get_auth_token()
Hidden: Management API URL layout, credentials, response parsing

This module can be replaced with any other token source (cached tokens,
a different cloud API) without affecting other modules.
"""

from .interfaces import TokenService
from .service import ContainerAppTokenService

__all__ = ["ContainerAppTokenService", "TokenService"]
