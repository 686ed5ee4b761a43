"""
API Module - Black Box Interface

Purpose: Data models for the management API
Interface: AuthTokenResponse, AuthTokenProperties
Hidden: Wire field names and validation rules
"""

from .models import AuthTokenProperties, AuthTokenResponse

__all__ = ["AuthTokenProperties", "AuthTokenResponse"]
