"""
Stdio terminal for the CLI host.

Puts the local tty in raw mode, writes session output straight to stdout and
turns stdin reads into input events. The local terminal does the rendering.
"""

import asyncio
import codecs
import contextlib
import os
import sys
import termios
import tty
from typing import AsyncIterator, Optional

DETACH_KEY = "\x1d"  # Ctrl-]
RESET_SEQUENCE = "\x1bc"


class StdioTerminal:
    """TerminalSink backed by the process's stdin/stdout."""

    def __init__(self, stdin=None, stdout=None):
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._input_enabled = False
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def input_enabled(self) -> bool:
        return self._input_enabled

    def write(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()

    def reset(self) -> None:
        self.write(RESET_SEQUENCE)

    def set_input_enabled(self, enabled: bool) -> None:
        self._input_enabled = enabled

    def feed(self, data: bytes) -> None:
        """Turn raw stdin bytes into an input event."""
        text = self._decoder.decode(data)
        if DETACH_KEY in text:
            self._queue.put_nowait(None)
            return
        if text and self._input_enabled:
            self._queue.put_nowait(text)

    def close_input(self) -> None:
        self._queue.put_nowait(None)

    async def events(self) -> AsyncIterator[str]:
        """Input events until detach or end of input."""
        while True:
            text = await self._queue.get()
            if text is None:
                return
            yield text

    def _on_readable(self, fd: int) -> None:
        try:
            data = os.read(fd, 4096)
        except OSError:
            data = b""
        if data:
            self.feed(data)
        else:
            self.close_input()

    @contextlib.contextmanager
    def attached(self):
        """Raw mode plus a stdin reader on the running loop for the duration."""
        loop = asyncio.get_running_loop()
        fd = self._stdin.fileno()
        saved_attrs = None
        if os.isatty(fd):
            saved_attrs = termios.tcgetattr(fd)
            tty.setraw(fd)
        loop.add_reader(fd, self._on_readable, fd)
        try:
            yield self
        finally:
            loop.remove_reader(fd)
            if saved_attrs is not None:
                termios.tcsetattr(fd, termios.TCSADRAIN, saved_attrs)
