"""
Execlink shared data models.

These models describe the token service payloads exchanged with the
container apps management API.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthTokenProperties(BaseModel):
    """Properties of a getAuthToken response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    token: Optional[str] = Field(None, description="Short-lived exec/log stream token")
    expires: Optional[datetime] = Field(None, description="Token expiry")
    log_stream_endpoint: str = Field(
        ...,
        alias="logStreamEndpoint",
        description="HTTPS log stream URL the exec endpoint is derived from",
    )

    @field_validator("log_stream_endpoint")
    @classmethod
    def validate_log_stream_endpoint(cls, v):
        """The exec endpoint is derived by rewriting an https URL."""
        if not v.startswith("https://"):
            raise ValueError(f"logStreamEndpoint must be an https URL: {v}")
        return v


class AuthTokenResponse(BaseModel):
    """Response of POST {resourceId}/getAuthToken."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
    properties: AuthTokenProperties

    @property
    def log_stream_endpoint(self) -> str:
        return self.properties.log_stream_endpoint

    @property
    def token(self) -> Optional[str]:
        return self.properties.token
