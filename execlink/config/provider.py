"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class TokenServiceConfig:
    """Token service configuration."""
    arm_endpoint: str
    api_version: str
    access_token: str
    timeout: float
    verify_ssl: bool
    ca_cert_path: Optional[str]

    @property
    def verify(self):
        """Value for httpx's ``verify`` argument."""
        return self.ca_cert_path if self.ca_cert_path else self.verify_ssl


@dataclass
class ConsoleConfig:
    """Exec console configuration."""
    startup_command: str = "/sh"
    socket_scheme: str = "wss://"
    reconnect_on_same_target: bool = True
    send_token_header: bool = False
    open_timeout: float = 10.0


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_token_service_config(self) -> TokenServiceConfig:
        """Get token service configuration."""
        ...

    def get_console_config(self) -> ConsoleConfig:
        """Get console configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_token_service_config(self) -> TokenServiceConfig:
        """Get token service configuration from environment variables."""
        # The ARM token is required - no default for security
        access_token = os.getenv("EXECLINK_ARM_TOKEN")
        if not access_token:
            raise ValueError(
                "EXECLINK_ARM_TOKEN environment variable is required. "
                "Example: export EXECLINK_ARM_TOKEN=$(az account get-access-token "
                "--query accessToken -o tsv)"
            )

        return TokenServiceConfig(
            arm_endpoint=os.getenv("EXECLINK_ARM_ENDPOINT", "https://management.azure.com").rstrip("/"),
            api_version=os.getenv("EXECLINK_API_VERSION", "2023-05-01"),
            access_token=access_token,
            timeout=float(os.getenv("EXECLINK_HTTP_TIMEOUT", "30")),
            verify_ssl=_env_flag("EXECLINK_SSL_VERIFY", "true"),
            ca_cert_path=os.getenv("EXECLINK_CA_CERT") or None,
        )

    def get_console_config(self) -> ConsoleConfig:
        """Get console configuration from environment variables."""
        return ConsoleConfig(
            startup_command=os.getenv("EXECLINK_STARTUP_COMMAND", "/sh"),
            socket_scheme=os.getenv("EXECLINK_SOCKET_SCHEME", "wss://"),
            reconnect_on_same_target=_env_flag("EXECLINK_RECONNECT_ON_SAME_TARGET", "true"),
            send_token_header=_env_flag("EXECLINK_SEND_TOKEN_HEADER", "false"),
            open_timeout=float(os.getenv("EXECLINK_OPEN_TIMEOUT", "10")),
        )
