import asyncio
import io
import os
import sys

import pytest
from click.testing import CliRunner

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from execlink import __version__
from execlink.cli import CliConfigProvider, FailureCollector, main, run_session
from execlink.modules.bridge import SessionFactory
from execlink.modules.errors import ProtocolViolation, TokenAcquisitionError, TransportError
from execlink.terminal import StdioTerminal

from conftest import RESOURCE_ID, settle

SELECTION = (RESOURCE_ID, "rev1", "replica-a", "main")


def test_version():
    result = CliRunner().invoke(main, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_connect_requires_arm_token(monkeypatch):
    monkeypatch.delenv("EXECLINK_ARM_TOKEN", raising=False)
    monkeypatch.setattr("execlink.cli.load_dotenv", lambda: False)

    result = CliRunner().invoke(
        main,
        ["connect", "/subscriptions/s/containerApps/app", "--revision", "r",
         "--replica", "p", "--container", "c"],
    )

    assert result.exit_code == 1
    assert "EXECLINK_ARM_TOKEN" in result.output


def test_connect_requires_full_selection():
    result = CliRunner().invoke(main, ["connect", "/subscriptions/s/containerApps/app", "--revision", "r"])

    assert result.exit_code == 2
    assert "--replica" in result.output


def test_command_override(monkeypatch):
    monkeypatch.setenv("EXECLINK_STARTUP_COMMAND", "/sh")

    assert CliConfigProvider("/bash").get_console_config().startup_command == "/bash"
    assert CliConfigProvider().get_console_config().startup_command == "/sh"


def test_failure_collector_ignores_skipped_frames():
    failures = FailureCollector()

    failures(ProtocolViolation(9))
    failures(TransportError("connection reset"))

    assert [str(e) for e in failures] == ["connection reset"]


# =============================================================================
# Session runner
# =============================================================================

@pytest.fixture
def stdout():
    return io.StringIO()


@pytest.fixture
def stdio(stdout):
    read_fd, write_fd = os.pipe()
    stdin = os.fdopen(read_fd, "rb", buffering=0)
    yield StdioTerminal(stdin=stdin, stdout=stdout)
    stdin.close()
    os.close(write_fd)


@pytest.fixture
def failures():
    return FailureCollector()


@pytest.fixture
def session_bridge(stdio, token_service, transports, failures):
    return SessionFactory.build_for_testing(stdio, token_service, transports, error_listener=failures)


class TestRunSession:
    """Test the interactive session runner behind `execlink connect`."""

    @pytest.mark.asyncio
    async def test_input_forwarded_until_detach(self, session_bridge, stdio, stdout, token_service, transports, failures):
        """Test keystrokes reach the container and Ctrl-] tears the session down."""
        session = asyncio.create_task(run_session(session_bridge, stdio, *SELECTION))
        await settle()
        assert token_service.resource_ids == [RESOURCE_ID]

        token_service.resolve()
        await settle()
        transports.last.deliver(b"\x00\x01$ ")
        stdio.feed(b"ls\r")
        await settle()

        assert transports.last.sent == [b"\x00\x00ls\r"]
        assert "$ " in stdout.getvalue()

        stdio.feed(b"\x1d")
        await asyncio.wait_for(session, timeout=1.0)

        assert transports.last.closed is True
        assert session_bridge.lifecycle.target is None
        assert list(failures) == []

    @pytest.mark.asyncio
    async def test_token_failure_ends_session(self, session_bridge, stdio, token_service, transports, failures):
        """Test a failed token request ends the session without waiting for detach."""
        session = asyncio.create_task(run_session(session_bridge, stdio, *SELECTION))
        await settle()

        token_service.fail(0, TokenAcquisitionError(RESOURCE_ID, "403 Forbidden"))
        await asyncio.wait_for(session, timeout=1.0)

        assert transports.created == []
        assert len(failures) == 1
        assert isinstance(failures[0], TokenAcquisitionError)

    @pytest.mark.asyncio
    async def test_remote_exit_ends_session(self, session_bridge, stdio, token_service, transports, failures):
        """Test the remote shell exiting ends the session cleanly."""
        session = asyncio.create_task(run_session(session_bridge, stdio, *SELECTION))
        await settle()
        token_service.resolve()
        await settle()

        transports.last.finish()
        await asyncio.wait_for(session, timeout=1.0)

        assert list(failures) == []

    @pytest.mark.asyncio
    async def test_partial_selection_returns_immediately(self, session_bridge, stdio, token_service):
        """Test an incomplete selection never connects."""
        await asyncio.wait_for(
            run_session(session_bridge, stdio, RESOURCE_ID, "rev1", "", "main"), timeout=1.0
        )

        assert token_service.requests == []
