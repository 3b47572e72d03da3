"""
Command-line interface for ffpbar.

This is the main entry point for the application. Every argument is handed
to ffmpeg untouched; ffpbar's own settings come from its config file and
FFPBAR_* environment variables.
"""

import datetime
import os
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ffpbar import __version__
from ffpbar.config import Config, get_app_dirs, load_config
from ffpbar.i18n import _, setup_i18n
from ffpbar.supervisor import ChildStartError, ProcessSupervisor


def _should_use_color() -> bool:
    """Check if color output should be used."""
    # Check NO_COLOR environment variable (https://no-color.org/)
    if os.getenv("NO_COLOR"):
        return False
    try:
        if not sys.stdout.isatty():
            return False
    except Exception:
        return False
    return True


def print_usage(console: Optional[Console] = None) -> None:
    """Print version, usage and examples to stdout."""
    if console is None:
        use_color = _should_use_color()
        console = Console(no_color=not use_color, highlight=False)

    console.print(f"[bold]ffpbar[/bold] v{__version__}")
    console.print(_("A progress bar wrapper for ffmpeg"))
    console.print()
    console.print(f"[bold]{_('Usage:')}[/bold]")
    console.print("  ffpbar \\[ffmpeg options]")
    console.print()
    console.print(f"[bold]{_('Examples:')}[/bold]")
    console.print("  ffpbar -i input.mp4 -c:v libx264 -crf 23 output.mp4")
    console.print("  ffpbar -i input.avi -c:v copy -c:a aac output.mp4")
    console.print("  ffpbar -i input.mov -vf scale=1280:720 -c:v libx264 output.mp4")
    console.print()
    console.print(_("This tool wraps ffmpeg and displays a progress bar during conversion."))
    console.print(_("All ffmpeg options are supported - just pass them as arguments."))


def get_log_path() -> Path:
    """Generate the transcript log path for this run."""
    logs_dir = get_app_dirs()["logs"]
    date_str = datetime.date.today().isoformat()
    return logs_dir / f"{date_str}_{os.getpid()}.log"


def run(args: List[str], cfg: Config) -> int:
    """Run ffmpeg with ``args`` under a progress bar and return the exit code."""
    log_path = get_log_path() if cfg.log_output else None
    supervisor = ProcessSupervisor([cfg.ffmpeg, *args], cfg=cfg, log_path=log_path)
    return supervisor.run()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = list(sys.argv[1:] if argv is None else argv)

    cfg = load_config()
    setup_i18n(cfg.lang)

    if not args:
        print_usage()
        return 0

    try:
        return run(args, cfg)
    except ChildStartError as e:
        print(_("Failed to start {binary} process: {error}").format(binary=cfg.ffmpeg, error=e), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print(f"\n{_('Exiting.')}", file=sys.stderr)
        return 130
    except Exception as e:
        print(_("Unexpected exception: {error}").format(error=e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
