"""
Entry point for running ffpbar as a module: python -m ffpbar

This allows the package to be executed directly:
    python -m ffpbar -i input.mp4 output.mkv
"""

import sys

from ffpbar.cli import main

if __name__ == "__main__":
    sys.exit(main())
