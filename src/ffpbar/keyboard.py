"""
Non-blocking single keystroke reading.

POSIX terminals are switched to cbreak mode and polled with select(). Bytes
are read straight from the file descriptor and decoded incrementally, so a
burst such as an arrow key sequence or pasted text is handed out one character
at a time without waiting for the next keypress. Windows consoles are polled
with msvcrt.
"""

import codecs
import os
import sys
import time
from typing import Any, List, Optional, TextIO

if os.name == "nt":
    try:
        import msvcrt

        WINDOWS_KEYBOARD = True
    except ImportError:
        WINDOWS_KEYBOARD = False
    UNIX_KEYBOARD = False
else:
    WINDOWS_KEYBOARD = False
    try:
        import select
        import termios
        import tty

        UNIX_KEYBOARD = True
    except ImportError:
        UNIX_KEYBOARD = False


def _is_tty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except Exception:
        return False


class KeyReader:
    """Read keystrokes from the controlling terminal without waiting for Enter.

    Use as a context manager: the terminal mode is changed on enter and
    restored on exit (or by an explicit :meth:`restore`).
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdin
        self._old_attrs: Optional[Any] = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: List[str] = []

    @property
    def available(self) -> bool:
        """True if keystrokes can be read from an interactive terminal."""
        if not _is_tty(self.stream):
            return False
        return WINDOWS_KEYBOARD or UNIX_KEYBOARD

    def __enter__(self) -> "KeyReader":
        if UNIX_KEYBOARD and self.available:
            try:
                fd = self.stream.fileno()
                self._old_attrs = termios.tcgetattr(fd)
                tty.setcbreak(fd)
            except (termios.error, OSError, ValueError):
                self._old_attrs = None
        return self

    def __exit__(self, *exc) -> None:
        self.restore()

    def restore(self) -> None:
        """Put the terminal back into the mode it had before."""
        if self._old_attrs is None:
            return
        try:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._old_attrs)
        except (termios.error, OSError, ValueError):
            pass
        self._old_attrs = None

    def read_key(self, timeout: float) -> Optional[str]:
        """Wait up to ``timeout`` seconds for a keystroke and return it."""
        if WINDOWS_KEYBOARD:
            if msvcrt.kbhit():
                return msvcrt.getwch()
            time.sleep(timeout)
            return None

        if self._pending:
            return self._pending.pop(0)

        fd = self.stream.fileno()
        deadline = time.monotonic() + timeout
        while True:
            remaining = max(0.0, deadline - time.monotonic())
            ready, _, _ = select.select([fd], [], [], remaining)
            if not ready:
                return None
            data = os.read(fd, 64)
            if not data:
                # EOF stays readable; wait out the timeout instead of spinning
                time.sleep(remaining)
                return None
            self._pending.extend(self._decoder.decode(data))
            if self._pending:
                return self._pending.pop(0)
            # Only part of a multi-byte character so far
