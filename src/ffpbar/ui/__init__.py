"""
User interface components for ffpbar.

Provides the in-place terminal progress bar.
"""

from ffpbar.ui.bar import ProgressBar, fmt_ms, term_columns

__all__ = [
    "ProgressBar",
    "fmt_ms",
    "term_columns",
]
