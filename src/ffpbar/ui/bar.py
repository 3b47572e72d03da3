"""
Single-line terminal progress bar for ffpbar.

The bar repaints itself in place with a carriage return and is safe to
drive from more than one thread.
"""

import os
import sys
import threading
import time
from typing import Optional, TextIO

MIN_BAR_WIDTH = 20
MAX_BAR_WIDTH = 60
# Room for percentage, counts, unit and timing around the bar
RESERVED_COLUMNS = 50


def term_columns(stream: TextIO) -> Optional[int]:
    """Width of the terminal behind ``stream``, or None if it has none."""
    try:
        return os.get_terminal_size(stream.fileno()).columns
    except (AttributeError, OSError, ValueError):
        return None


def fmt_ms(seconds: float) -> str:
    """Format seconds as MM:SS (minutes are not wrapped at the hour)."""
    if seconds < 0:
        seconds = 0
    s = int(seconds)
    return f"{s // 60:02d}:{s % 60:02d}"


class ProgressBar:
    """Progress bar counting ``current`` ticks out of ``total``.

    A ``total`` of None means the end is unknown: the bar never fills, the
    counter is shown without a total and no remaining time is estimated.
    """

    def __init__(
        self,
        total: Optional[int],
        title: str = "",
        output: Optional[TextIO] = None,
        dynamic_width: bool = True,
        width: int = MIN_BAR_WIDTH,
        unit: str = "",
        ascii: Optional[bool] = None,
    ):
        self.total = total
        self.title = title
        self.output = output if output is not None else sys.stderr
        self.dynamic_width = dynamic_width
        self.width = width
        self.unit = unit
        if ascii is None:
            ascii = os.name == "nt"
        self.fill_char, self.empty_char = ("#", "-") if ascii else ("█", "░")

        self.current = 0
        self.start_time = time.monotonic()
        self._last_rendered = ""
        self._closed = False
        self._lock = threading.Lock()

        with self._lock:
            self._render()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def progress(self) -> float:
        """Completed fraction in [0, 1]; 0 when the total is unknown."""
        if self.total is None or self.total <= 0:
            return 0.0
        return min(1.0, self.current / self.total)

    def advance(self, delta: int = 1) -> None:
        """Move the bar forward by ``delta`` ticks and repaint."""
        if delta <= 0:
            return
        with self._lock:
            if self._closed:
                return
            self.current += delta
            if self.total is not None:
                self.current = min(self.current, self.total)
            self._render()

    def bar_width(self) -> int:
        if not self.dynamic_width:
            return self.width
        columns = term_columns(self.output)
        if columns is None:
            return MIN_BAR_WIDTH
        available = columns - (len(self.title) + RESERVED_COLUMNS)
        return min(MAX_BAR_WIDTH, max(MIN_BAR_WIDTH, available))

    def format_line(self, elapsed: float) -> str:
        progress = self.progress
        width = self.bar_width()
        filled = int(progress * width)

        parts = []
        if self.title:
            parts.append(f"{self.title}: ")
        parts.append(f"{int(progress * 100 + 0.5)}% ")
        parts.append("|" + self.fill_char * filled + self.empty_char * (width - filled) + "|")

        if self.total is not None:
            parts.append(f" {self.current}/{self.total}")
        else:
            parts.append(f" {self.current}")
        if self.unit:
            parts.append(f" {self.unit}")

        if elapsed > 0:
            timing = fmt_ms(elapsed)
            if progress > 0 and self.total is not None:
                remaining = elapsed / progress - elapsed
                if remaining > 0:
                    timing += "<" + fmt_ms(remaining)
            parts.append(f" [{timing}]")

        return "".join(parts)

    def _render(self) -> None:
        # Caller holds the lock
        try:
            line = self.format_line(time.monotonic() - self.start_time)
            blank = " " * max(len(self._last_rendered), len(line))
            self.output.write(f"\r{blank}\r{line}")
            self.output.flush()
            self._last_rendered = line
        except Exception:
            # A broken terminal must never take the wrapped process down
            pass

    def close(self) -> None:
        """Fill the bar, repaint one last time and end the line."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self.total is not None and self.total > 0:
                self.current = self.total
            self._render()
            try:
                self.output.write("\n")
                self.output.flush()
            except Exception:
                pass

    def __enter__(self) -> "ProgressBar":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
