"""
Parsing of ffmpeg's diagnostic output.

Contains:
- Line splitting of the raw stderr character stream
- Detection of interactive ``[y/N]`` prompts
- Extraction of duration, progress time, frame rate and source name
"""

import re
from typing import List, Optional

# -------------------- PATTERNS --------------------

DURATION_RE = re.compile(r"Duration: (\d{2}):(\d{2}):(\d{2})\.\d{2}")
PROGRESS_RE = re.compile(r"time=(\d{2}):(\d{2}):(\d{2})\.\d{2}")
SOURCE_RE = re.compile(r"from '(.*)':")
FPS_RE = re.compile(r"(\d+\.\d+|\d+) fps")

PROMPT_SUFFIX = "[y/N] "

# Returned by LineAccumulator.feed when the pending text is a confirmation prompt
PROMPT = object()


def _hms_to_seconds(match: "re.Match[str]") -> int:
    hours, minutes, seconds = (int(g) for g in match.groups())
    return (hours * 60 + minutes) * 60 + seconds


def parse_duration(line: str) -> Optional[int]:
    """Parse ``Duration: HH:MM:SS.ff`` and return whole seconds."""
    m = DURATION_RE.search(line)
    if m:
        return _hms_to_seconds(m)
    return None


def parse_progress_time(line: str) -> Optional[int]:
    """Parse ``time=HH:MM:SS.ff`` and return whole seconds."""
    m = PROGRESS_RE.search(line)
    if m:
        return _hms_to_seconds(m)
    return None


def parse_source(line: str) -> Optional[str]:
    """Parse ``from '<path>':`` and return the file name part of the path."""
    m = SOURCE_RE.search(line)
    if m:
        return re.split(r"[\\/]", m.group(1))[-1]
    return None


def parse_fps(line: str) -> Optional[int]:
    """
    Parse the first ``<n> fps`` or ``<n.n> fps`` in a line.

    The value is rounded to the nearest integer (ties to even). A rate that
    rounds to zero cannot scale ticks and is treated as absent.
    """
    m = FPS_RE.search(line)
    if m:
        fps = round(float(m.group(1)))
        if fps > 0:
            return fps
    return None


# -------------------- LINE ACCUMULATOR --------------------


class LineAccumulator:
    """Split a character stream into completed lines."""

    def __init__(self):
        self._buffer: List[str] = []
        self.last_line = ""

    @property
    def pending(self) -> str:
        """Text received since the last completed line."""
        return "".join(self._buffer)

    def complete(self) -> str:
        """Complete the pending text as a line and start a new one."""
        line = "".join(self._buffer)
        self._buffer.clear()
        self.last_line = line
        return line

    def feed(self, char: str):
        """
        Consume one character.

        Returns the completed line on ``\\r`` or ``\\n``, :data:`PROMPT` when
        the pending text ends with a ``[y/N] `` confirmation prompt, and
        None otherwise. A prompt stays pending until the caller has written
        it out and called :meth:`complete`.
        """
        if char in ("\r", "\n"):
            return self.complete()

        self._buffer.append(char)
        if len(self._buffer) >= len(PROMPT_SUFFIX) and "".join(self._buffer[-len(PROMPT_SUFFIX):]) == PROMPT_SUFFIX:
            return PROMPT
        return None
