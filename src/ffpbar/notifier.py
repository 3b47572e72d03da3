"""
Progress tracking for a running ffmpeg process.

The notifier consumes ffmpeg's stderr one character at a time, remembers the
stream metadata it announces (duration, frame rate, source name) and turns
each ``time=`` marker into ticks on a :class:`~ffpbar.ui.bar.ProgressBar`.
"""

import sys
from pathlib import Path
from typing import Callable, Generic, Optional, TextIO, TypeVar

from ffpbar.config import Config
from ffpbar.i18n import _
from ffpbar.parsing import (
    PROMPT,
    LineAccumulator,
    parse_duration,
    parse_fps,
    parse_progress_time,
    parse_source,
)
from ffpbar.ui.bar import ProgressBar

T = TypeVar("T")

BarFactory = Callable[..., ProgressBar]


class Latch(Generic[T]):
    """A value that can be set once; later writes are ignored."""

    def __init__(self):
        self._value: Optional[T] = None
        self._set = False

    @property
    def is_set(self) -> bool:
        return self._set

    @property
    def value(self) -> Optional[T]:
        return self._value

    def set_if_unset(self, value: Optional[T]) -> bool:
        """Store ``value`` if nothing is stored yet. None is not a value."""
        if self._set or value is None:
            return False
        self._value = value
        self._set = True
        return True


class ProgressNotifier:
    """Drive a progress bar from ffmpeg's stderr output."""

    def __init__(
        self,
        output: Optional[TextIO] = None,
        cfg: Optional[Config] = None,
        log_path: Optional[Path] = None,
        bar_factory: BarFactory = ProgressBar,
    ):
        self.output = output if output is not None else sys.stderr
        self.cfg = cfg or Config()
        self.log_path = log_path
        self.bar_factory = bar_factory

        self.accumulator = LineAccumulator()
        self.duration: Latch[int] = Latch()
        self.source: Latch[str] = Latch()
        self.fps: Latch[int] = Latch()
        self.bar: Optional[ProgressBar] = None
        self._closed = False

    def process_char(self, char: str) -> None:
        """Feed one character of ffmpeg's stderr."""
        result = self.accumulator.feed(char)
        if result is None:
            return
        if result is PROMPT:
            self._pass_through_prompt()
            return

        line = result
        self._log_line(line)
        if not self.duration.is_set:
            self.duration.set_if_unset(parse_duration(line))
        if not self.source.is_set:
            self.source.set_if_unset(parse_source(line))
        if not self.fps.is_set:
            self.fps.set_if_unset(parse_fps(line))
        self._update_progress(line)

    def _pass_through_prompt(self) -> None:
        # Keep the next repaint from overwriting the question
        if self.bar is not None:
            self.output.write("\n")
        self.output.write(self.accumulator.pending)
        self.output.flush()
        self._log_line(self.accumulator.complete())

    def _update_progress(self, line: str) -> None:
        seconds = parse_progress_time(line)
        if seconds is None:
            return

        current = seconds
        total = self.duration.value
        fps = self.fps.value
        if fps is not None:
            current *= fps
            if total is not None:
                total *= fps

        if self.bar is None:
            self.bar = self.bar_factory(
                total,
                title=self.source.value or _("Processing"),
                output=self.output,
                dynamic_width=self.cfg.bar_width <= 0,
                width=self.cfg.bar_width if self.cfg.bar_width > 0 else 20,
                unit="frames" if fps is not None else "seconds",
                ascii=self.cfg.ascii_bar,
            )

        delta = current - self.bar.current
        if delta > 0:
            self.bar.advance(delta)

    def _log_line(self, line: str) -> None:
        if not self.log_path:
            return
        try:
            with self.log_path.open("a", encoding="utf-8", errors="replace") as lf:
                lf.write(line + "\n")
        except Exception:
            pass

    def get_last_line(self) -> str:
        """Return the most recent completed line (empty if none yet)."""
        return self.accumulator.last_line

    def close(self) -> None:
        """Finish the progress bar, if one was ever shown."""
        if self._closed:
            return
        self._closed = True
        if self.bar is not None:
            self.bar.close()

    def __enter__(self) -> "ProgressNotifier":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
