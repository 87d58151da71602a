"""
KeyboardTask for async keyboard input in the viewer.

This module provides non-blocking keyboard reading for integration
with the ProfileViewer's asyncio TaskGroup.

- Uses loop.run_in_executor() to wrap the blocking stdin read
- Sets cbreak mode for single-keypress detection
- Uses select() with a timeout so the reader thread returns quickly
  and shutdown is never held up by a pending read
"""

import asyncio
import os
import select
import sys
import termios
import tty
from typing import Callable

# Names for control characters the viewer cares about
KEY_NAMES = {
    "\x03": "ctrl+c",
    "\x1b": "escape",
    "\r": "enter",
    "\n": "enter",
}


def normalize_key(raw: str) -> str:
    """
    Map a raw character or escape sequence to a key name.

    Printable characters are returned unchanged (case is preserved).

    Args:
        raw: Characters read for a single keypress

    Returns:
        Key name such as "r", "ctrl+c" or "escape"
    """
    return KEY_NAMES.get(raw, raw)


ESCAPE_WAIT = 0.05
"""Seconds to wait for the rest of an escape or multi-byte sequence."""


def _ready(fd: int, timeout: float) -> bool:
    return bool(select.select([fd], [], [], timeout)[0])


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _readkey_with_timeout(fd: int, timeout: float) -> str | None:
    """
    Read one keypress from a file descriptor with timeout.

    Reads with os.read() rather than sys.stdin so that unread bytes stay in
    the kernel buffer where select() can see them; a pasted "rq" yields
    "r" and then "q" on the next call.

    Does NOT change terminal modes - caller must ensure cbreak mode is set.

    Args:
        fd: File descriptor to read from (normally stdin)
        timeout: Maximum seconds to wait for input

    Returns:
        Key pressed, or None if timeout or end of input
    """
    if not _ready(fd, timeout):
        return None
    data = os.read(fd, 1)
    if not data:
        return None

    if data == b"\x1b":
        # Arrow keys arrive as ESC [ <final byte>
        if _ready(fd, ESCAPE_WAIT):
            data += os.read(fd, 1)
            if data == b"\x1b[" and _ready(fd, ESCAPE_WAIT):
                data += os.read(fd, 1)
    else:
        missing = _utf8_length(data[0]) - 1
        while missing > 0 and _ready(fd, ESCAPE_WAIT):
            chunk = os.read(fd, missing)
            if not chunk:
                break
            data += chunk
            missing -= len(chunk)

    return data.decode("utf-8", errors="replace")


class KeyboardTask:
    """
    Async keyboard reader for integration with the ProfileViewer TaskGroup.

    Example:
        keyboard = KeyboardTask(on_key=lambda key: queue.put_nowait(KeyPressed(key)))
        tg.create_task(keyboard.run())
        # Later:
        keyboard.stop()
    """

    def __init__(self, on_key: Callable[[str], None], poll_timeout: float = 0.3) -> None:
        """
        Initialize keyboard task.

        Args:
            on_key: Callback invoked with each normalized key name
            poll_timeout: Seconds each executor read waits before re-checking
                for shutdown
        """
        self._on_key = on_key
        self._poll_timeout = poll_timeout
        self._shutdown = asyncio.Event()
        self._old_settings: list | None = None

    async def run(self) -> None:
        """
        Main task loop. Run inside TaskGroup.

        Sets cbreak mode once at startup, restores at shutdown.

        Raises:
            termios.error: If stdin is not a terminal
        """
        loop = asyncio.get_running_loop()

        fd = sys.stdin.fileno()
        self._old_settings = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd)

            while not self._shutdown.is_set():
                key = await loop.run_in_executor(
                    None,
                    _readkey_with_timeout,
                    fd,
                    self._poll_timeout,
                )
                if key is not None:
                    self._on_key(normalize_key(key))
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._old_settings)

    def stop(self) -> None:
        """Signal task to stop."""
        self._shutdown.set()
