"""Single-key input from the controlling terminal, without waiting for Enter."""

from __future__ import annotations

import logging
import os
import sys
import threading
import time
from typing import Callable, Optional

if sys.platform == "win32":
    import msvcrt
else:
    import select
    import termios
    import tty

logger = logging.getLogger(__name__)

ESCAPE_KEY = "\x1b"
# Bytes of an escape sequence written by the terminal arrive together.
ESCAPE_SEQUENCE_WAIT = 0.02


class PosixTerminal:
    """cbreak-mode key reader for a POSIX tty.

    cbreak keeps ISIG on, so Ctrl+C still raises KeyboardInterrupt while keys
    are read one at a time.
    """

    def __init__(self, stream=None):
        self._stream = stream if stream is not None else sys.stdin
        self._saved_attrs = None

    @property
    def is_raw(self) -> bool:
        return self._saved_attrs is not None

    def _fd(self) -> int:
        return self._stream.fileno()

    def enter_raw(self):
        if self._saved_attrs is not None:
            return
        if not self._stream.isatty():
            raise OSError("standard input is not a terminal")
        fd = self._fd()
        try:
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except termios.error as e:
            self._saved_attrs = None
            raise OSError(f"could not switch terminal to raw mode: {e}") from e

    def restore(self):
        if self._saved_attrs is None:
            return
        attrs, self._saved_attrs = self._saved_attrs, None
        termios.tcsetattr(self._fd(), termios.TCSADRAIN, attrs)

    def read_key(self, timeout: float) -> Optional[str]:
        """Return one key, None on timeout, or "" once input is closed.

        Arrow and function keys arrive as ESC-prefixed sequences; they are
        returned whole so a lone ESC stays distinguishable.
        """
        fd = self._fd()
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return None
        data = os.read(fd, 1)
        if data == ESCAPE_KEY.encode():
            more, _, _ = select.select([fd], [], [], ESCAPE_SEQUENCE_WAIT)
            if more:
                data += os.read(fd, 32)
        return data.decode("utf-8", errors="replace")


class WindowsTerminal:
    """Console key reader; the Windows console delivers keys unbuffered via msvcrt."""

    def __init__(self):
        self._raw = False

    @property
    def is_raw(self) -> bool:
        return self._raw

    def enter_raw(self):
        self._raw = True

    def restore(self):
        self._raw = False

    def read_key(self, timeout: float) -> Optional[str]:
        if not msvcrt.kbhit():
            time.sleep(timeout)
            if not msvcrt.kbhit():
                return None
        return msvcrt.getwch()


def open_terminal():
    if sys.platform == "win32":
        return WindowsTerminal()
    return PosixTerminal()


class KeyListener:
    """Reads keys on a daemon thread and hands each one to a callback."""

    def __init__(self, terminal, on_key: Callable[[str], None], poll_interval: float = 0.1):
        self._terminal = terminal
        self._on_key = on_key
        self._poll_interval = poll_interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._listen_loop, name="key-listener", daemon=True)
        self._thread.start()

    def stop(self):
        """Stop listening. Safe to call from inside the on_key callback."""
        self._stop_event.set()
        self.join()

    def join(self, timeout: float | None = 3):
        thread = self._thread
        if not thread:
            return
        # Joining the current thread raises RuntimeError.
        if thread is threading.current_thread():
            return
        thread.join(timeout=timeout)
        if not thread.is_alive():
            self._thread = None

    def _listen_loop(self):
        while not self._stop_event.is_set():
            key = self._terminal.read_key(self._poll_interval)
            if key is None:
                continue
            if key == "":
                logger.debug("Terminal input closed, key listener exiting")
                return
            if self._stop_event.is_set():
                return
            self._on_key(key)
