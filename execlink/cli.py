"""
Command line host for exec sessions.

Usage:
    execlink connect /subscriptions/.../containerApps/my-app \
        --revision my-app--abc123 --replica my-app--abc123-5d8f --container my-app
"""

import asyncio
import logging
import sys
from dataclasses import replace
from typing import Optional

import click
from dotenv import load_dotenv

from . import __version__
from .config.provider import ConsoleConfig, EnvConfigProvider
from .logging_config import configure_logging
from .modules.bridge import SessionBridge, SessionFactory
from .modules.errors import ProtocolViolation, SessionError
from .terminal import StdioTerminal

logger = logging.getLogger(__name__)


class CliConfigProvider(EnvConfigProvider):
    """Environment configuration with command line overrides."""

    def __init__(self, startup_command: Optional[str] = None):
        self.startup_command = startup_command

    def get_console_config(self) -> ConsoleConfig:
        config = super().get_console_config()
        if self.startup_command:
            config = replace(config, startup_command=self.startup_command)
        return config


class FailureCollector(list):
    """Error listener keeping the errors that make the command fail."""

    def __call__(self, error: SessionError) -> None:
        # Skipped frames are logged, never fatal
        if not isinstance(error, ProtocolViolation):
            self.append(error)


async def run_session(
    bridge: SessionBridge,
    terminal: StdioTerminal,
    resource_id: str,
    revision: str,
    replica: str,
    container: str,
) -> None:
    """
    Run one interactive session.

    Logic:
    1. Select the target, which starts connecting
    2. Forward terminal input until the user detaches or the session ends
    3. Tear the session down
    """
    async with bridge:
        with terminal.attached():
            target = await bridge.select(resource_id, revision, replica, container)
            if target is None:
                return

            pump = asyncio.create_task(bridge.pump_input(terminal.events()))
            ended = asyncio.create_task(bridge.wait_closed())
            done, pending = await asyncio.wait({pump, ended}, return_when=asyncio.FIRST_COMPLETED)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            for task in done:
                task.result()


@click.group()
@click.version_option(__version__, prog_name="execlink")
def main():
    """Interactive exec console for container app replicas."""


@main.command()
@click.argument("resource_id")
@click.option("--revision", required=True, help="Revision name")
@click.option("--replica", required=True, help="Replica name")
@click.option("--container", required=True, help="Container name")
@click.option("--command", "startup_command", default=None, help="Startup command, e.g. /sh or /bash")
@click.option("--log-level", default=None, help="Log level (default: LOG_LEVEL or ERROR)")
def connect(
    resource_id: str,
    revision: str,
    replica: str,
    container: str,
    startup_command: Optional[str],
    log_level: Optional[str],
):
    """Open a shell in a container. Press Ctrl-] to detach."""
    load_dotenv()
    configure_logging(log_level)

    if startup_command and not startup_command.startswith("/"):
        startup_command = f"/{startup_command}"

    config_provider = CliConfigProvider(startup_command=startup_command)
    try:
        config_provider.get_token_service_config()
    except ValueError as e:
        raise click.ClickException(str(e))

    failures = FailureCollector()
    terminal = StdioTerminal()
    bridge = SessionFactory.build(config_provider, terminal, error_listener=failures)
    try:
        asyncio.run(run_session(bridge, terminal, resource_id, revision, replica, container))
    except KeyboardInterrupt:
        pass

    click.echo("", err=True)
    for error in failures:
        click.echo(f"error: {error}", err=True)
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
