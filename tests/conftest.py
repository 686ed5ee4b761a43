"""
Shared pytest fixtures for Execlink tests.

This module provides common fixtures including:
- FakeTerminal: Records everything the session does to the terminal
- FakeTransport / TransportRecorder: In-memory transports with a controllable open
- FakeTokenService: Token requests that resolve when the test says so
"""

import asyncio
import os
import sys
from typing import Dict, List, Optional, Tuple

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from execlink.modules.api.models import AuthTokenResponse
from execlink.modules.errors import TransportError


LOG_STREAM_ENDPOINT = (
    "https://proxy.example.com/subscriptions/sub-1/resourceGroups/rg/providers"
    "/Microsoft.App/containerApps/my-app/revisions/logstream"
)
RESOURCE_ID = "/subscriptions/sub-1/resourceGroups/rg/providers/Microsoft.App/containerApps/my-app"


async def settle(rounds: int = 10) -> None:
    """Let scheduled tasks run until they block again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_token(endpoint: str = LOG_STREAM_ENDPOINT, token: Optional[str] = "exec-token") -> AuthTokenResponse:
    return AuthTokenResponse.model_validate(
        {
            "id": RESOURCE_ID,
            "name": "my-app",
            "properties": {"token": token, "logStreamEndpoint": endpoint},
        }
    )


# =============================================================================
# Terminal
# =============================================================================

class FakeTerminal:
    """TerminalSink that records calls."""

    def __init__(self):
        self.writes: List[str] = []
        self.reset_count = 0
        self.input_enabled = False
        self.input_history: List[bool] = []

    def write(self, text: str) -> None:
        self.writes.append(text)

    def reset(self) -> None:
        self.reset_count += 1

    def set_input_enabled(self, enabled: bool) -> None:
        self.input_enabled = enabled
        self.input_history.append(enabled)

    @property
    def output(self) -> str:
        return "".join(self.writes)


@pytest.fixture
def terminal():
    return FakeTerminal()


# =============================================================================
# Transport
# =============================================================================

class FakeTransport:
    """
    In-memory transport.

    With auto_open=False, open() blocks until release() is called so tests
    can interleave resets with an in-flight handshake.
    """

    def __init__(self, url: str, headers: Optional[Dict[str, str]] = None,
                 auto_open: bool = True, fail_with: Optional[Exception] = None):
        self.url = url
        self.headers = headers
        self.opened = False
        self.closed = False
        self.close_calls = 0
        self.sent: List[bytes] = []
        self.fail_with = fail_with
        self.on_message = None
        self.on_error = None
        self.on_close = None
        self._gate = None if auto_open else asyncio.Event()

    @property
    def is_open(self) -> bool:
        return self.opened and not self.closed

    async def open(self, on_message, on_error, on_close=None) -> None:
        self.on_message = on_message
        self.on_error = on_error
        self.on_close = on_close
        if self._gate is not None:
            await self._gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        self.opened = True

    def release(self) -> None:
        self._gate.set()

    async def send(self, data: bytes) -> None:
        if not self.is_open:
            raise TransportError("Transport is not open")
        self.sent.append(data)

    async def close(self) -> None:
        self.close_calls += 1
        self.closed = True

    def deliver(self, message) -> None:
        self.on_message(message)

    def error(self, message: str = "boom") -> None:
        self.on_error(TransportError(message))

    def finish(self) -> None:
        """Simulate the remote shell exiting."""
        self.closed = True
        self.on_close()


class TransportRecorder:
    """Transport factory that keeps every transport it builds."""

    def __init__(self):
        self.created: List[FakeTransport] = []
        self.auto_open = True
        self.fail_with: Optional[Exception] = None

    def __call__(self, url: str, headers: Optional[Dict[str, str]] = None) -> FakeTransport:
        transport = FakeTransport(url, headers, auto_open=self.auto_open, fail_with=self.fail_with)
        self.created.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.created[-1]


@pytest.fixture
def transports():
    return TransportRecorder()


# =============================================================================
# Token service
# =============================================================================

class FakeTokenService:
    """Token service whose requests stay pending until resolved by the test."""

    def __init__(self):
        self.requests: List[Tuple[str, asyncio.Future]] = []

    async def get_auth_token(self, resource_id: str) -> AuthTokenResponse:
        future = asyncio.get_running_loop().create_future()
        self.requests.append((resource_id, future))
        return await future

    def resolve(self, index: int = -1, endpoint: str = LOG_STREAM_ENDPOINT,
                token: Optional[str] = "exec-token") -> None:
        self.requests[index][1].set_result(make_token(endpoint, token))

    def fail(self, index: int, error: Exception) -> None:
        self.requests[index][1].set_exception(error)

    @property
    def resource_ids(self) -> List[str]:
        return [resource_id for resource_id, _ in self.requests]


@pytest.fixture
def token_service():
    return FakeTokenService()


class ErrorCollector(list):
    """Error listener that keeps every reported error."""

    def __call__(self, error) -> None:
        self.append(error)


@pytest.fixture
def errors():
    return ErrorCollector()


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring network access"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
