"""
Exec endpoint derivation.

The token service hands back the app's log stream endpoint, e.g.

    https://proxy.example/subscriptions/.../containerApps/app/revisions/logstream

and the exec endpoint for a container is the same URL on the websocket scheme
with ``/revisions/logstream`` replaced by the container path plus
``/exec<command>``.
"""

from .resolver import SessionTarget

HTTPS_SCHEME = "https://"
DEFAULT_SOCKET_SCHEME = "wss://"
DEFAULT_STARTUP_COMMAND = "/sh"
LOG_STREAM_SEGMENT = "/revisions/logstream"


def build_exec_endpoint(
    log_stream_endpoint: str,
    target: SessionTarget,
    startup_command: str = DEFAULT_STARTUP_COMMAND,
    socket_scheme: str = DEFAULT_SOCKET_SCHEME,
) -> str:
    """
    Derive the websocket URL for an exec session.

    Args:
        log_stream_endpoint: logStreamEndpoint from the token response
        target: Container to exec into
        startup_command: Command appended after ``/exec`` (e.g. "/sh")
        socket_scheme: Scheme replacing ``https://``

    Returns:
        Connection URL for the transport
    """
    endpoint = log_stream_endpoint.replace(HTTPS_SCHEME, socket_scheme, 1)
    return endpoint.replace(
        LOG_STREAM_SEGMENT, f"{target.path}/exec{startup_command}", 1
    )
