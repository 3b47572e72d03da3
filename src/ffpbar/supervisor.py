"""
Supervision of the wrapped ffmpeg process.

While ffmpeg runs, three things happen side by side:
- its stderr is read one character at a time and fed to the progress notifier
- keystrokes typed by the user are forwarded to its stdin
- SIGINT aborts the wrapper immediately with exit code 130
"""

import enum
import io
import os
import shlex
import signal
import subprocess
import sys
import threading
import time
from pathlib import Path
from typing import List, Optional, TextIO

from ffpbar.config import Config
from ffpbar.i18n import _
from ffpbar.keyboard import KeyReader
from ffpbar.notifier import ProgressNotifier


class ChildStartError(Exception):
    """The ffmpeg process could not be started."""


class SupervisorState(enum.Enum):
    STARTING = "starting"
    RUNNING = "running"
    DRAINING = "draining"
    EXITED = "exited"


def exit_code_for(returncode: int) -> int:
    """Map a Popen returncode to a shell exit status (-N -> 128+N)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


class ProcessSupervisor:
    """Run one ffmpeg command with a live progress bar."""

    def __init__(
        self,
        cmd: List[str],
        cfg: Optional[Config] = None,
        output: Optional[TextIO] = None,
        key_reader: Optional[KeyReader] = None,
        log_path: Optional[Path] = None,
        handle_signals: bool = True,
    ):
        self.cmd = list(cmd)
        self.cfg = cfg or Config()
        self.output = output if output is not None else sys.stderr
        self.key_reader = key_reader if key_reader is not None else KeyReader()
        self.handle_signals = handle_signals
        self.notifier = ProgressNotifier(output=self.output, cfg=self.cfg, log_path=log_path)

        self.state = SupervisorState.STARTING
        self.process: Optional[subprocess.Popen] = None
        self._stop_event = threading.Event()
        self._stdin_thread: Optional[threading.Thread] = None
        self._previous_handler = None

    # -------------------- STARTING --------------------

    def _start(self) -> subprocess.Popen:
        if self.cfg.debug:
            print(f"[ffpbar] {shlex.join(self.cmd)}", file=sys.stderr, flush=True)

        kwargs = {}
        if os.name == "nt":
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW
        try:
            return subprocess.Popen(
                self.cmd,
                stdin=subprocess.PIPE,
                stderr=subprocess.PIPE,
                shell=False,
                **kwargs,
            )
        except (OSError, ValueError) as e:
            raise ChildStartError(str(e)) from e

    # -------------------- SIGNALS --------------------

    def _on_interrupt(self, signum, frame) -> None:
        self.key_reader.restore()
        try:
            print(f"\n{_('Exiting.')}", file=sys.stderr, flush=True)
        finally:
            os._exit(128 + signum)

    def _install_signal_handler(self) -> bool:
        if not self.handle_signals or threading.current_thread() is not threading.main_thread():
            return False
        self._previous_handler = signal.signal(signal.SIGINT, self._on_interrupt)
        return True

    # -------------------- PUMPS --------------------

    def _pump_stderr(self, process: subprocess.Popen) -> None:
        """Feed every stderr character to the notifier until ffmpeg is gone."""
        if process.stderr is None:
            return
        reader = io.TextIOWrapper(process.stderr, encoding="utf-8", errors="replace", newline="")
        retry_delay = self.cfg.stderr_retry_ms / 1000.0
        try:
            while True:
                char = reader.read(1)
                if char:
                    self.notifier.process_char(char)
                elif process.poll() is not None:
                    break
                else:
                    time.sleep(retry_delay)
        except Exception:
            # Stop reading; once the pipe is closed below, ffmpeg gets EPIPE or SIGPIPE
            # on its next stderr write
            pass
        finally:
            try:
                reader.close()
            except Exception:
                pass

    def _pump_stdin(self, process: subprocess.Popen) -> None:
        """Forward keystrokes to ffmpeg's stdin while it runs."""
        poll_interval = self.cfg.stdin_poll_ms / 1000.0
        while process.poll() is None and not self._stop_event.is_set():
            try:
                key = self.key_reader.read_key(poll_interval)
                if not key:
                    continue
                if key in ("\r", "\n"):
                    key = "\n"
                self.output.write(key)
                self.output.flush()
                if process.stdin is not None:
                    process.stdin.write(key.encode("utf-8"))
                    process.stdin.flush()
            except Exception:
                # Keystroke forwarding is best effort; keep polling
                self._stop_event.wait(poll_interval)

    def _start_stdin_pump(self, process: subprocess.Popen) -> None:
        if not self.cfg.forward_stdin or not self.key_reader.available:
            return
        self._stdin_thread = threading.Thread(
            target=self._pump_stdin, args=(process,), name="ffpbar-stdin", daemon=True
        )
        self._stdin_thread.start()

    def _drain(self) -> None:
        self._stop_event.set()
        if self._stdin_thread is not None:
            self._stdin_thread.join(timeout=self.cfg.drain_timeout)

    # -------------------- MAIN FLOW --------------------

    def run(self) -> int:
        """Run the command to completion and return the exit code to use."""
        self.state = SupervisorState.STARTING
        process = self._start()
        self.process = process

        handler_installed = self._install_signal_handler()
        try:
            with self.key_reader:
                self.state = SupervisorState.RUNNING
                self._start_stdin_pump(process)
                try:
                    self._pump_stderr(process)
                finally:
                    self.state = SupervisorState.DRAINING
                    self._drain()

            returncode = process.wait()
        finally:
            self.state = SupervisorState.EXITED
            self.notifier.close()
            if process.stdin is not None:
                try:
                    process.stdin.close()
                except OSError:
                    pass
            if handler_installed:
                signal.signal(signal.SIGINT, self._previous_handler or signal.SIG_DFL)

        if returncode != 0:
            try:
                self.output.write(self.notifier.get_last_line() + "\n")
                self.output.flush()
            except Exception:
                pass
        return exit_code_for(returncode)
