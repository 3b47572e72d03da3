"""
ffpbar - A progress bar wrapper for ffmpeg.

Runs ffmpeg with the given arguments, follows its stderr output and shows a
single-line progress bar with percentage and ETA, while keystrokes are still
forwarded so interactive prompts keep working.

Example usage:
    # As a command-line tool
    $ ffpbar -i input.mp4 -c:v libx264 -crf 23 output.mp4

    # As a Python module
    from ffpbar import ProcessSupervisor, Config

    rc = ProcessSupervisor(["ffmpeg", "-i", "in.mkv", "out.mp4"], cfg=Config()).run()
"""

__version__ = "1.0.0"
__license__ = "GPL-3.0"
__description__ = "A progress bar wrapper for ffmpeg"

# Public API exports
from ffpbar.config import Config, get_app_dirs, load_config, load_config_file
from ffpbar.i18n import _, setup_i18n
from ffpbar.notifier import Latch, ProgressNotifier
from ffpbar.parsing import (
    LineAccumulator,
    parse_duration,
    parse_fps,
    parse_progress_time,
    parse_source,
)
from ffpbar.supervisor import ChildStartError, ProcessSupervisor, SupervisorState
from ffpbar.ui.bar import ProgressBar

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Config
    "Config",
    "get_app_dirs",
    "load_config",
    "load_config_file",
    # i18n
    "_",
    "setup_i18n",
    # Parsing
    "LineAccumulator",
    "parse_duration",
    "parse_fps",
    "parse_progress_time",
    "parse_source",
    # Progress
    "Latch",
    "ProgressNotifier",
    "ProgressBar",
    # Process
    "ChildStartError",
    "ProcessSupervisor",
    "SupervisorState",
]
