"""
Pytest configuration and shared fixtures for ffpbar tests.
"""

import io
import os
import sys
import tempfile
import textwrap
from pathlib import Path
from typing import Generator, List

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_dir(temp_dir: Path) -> Path:
    """Create a temporary config directory."""
    config_dir = temp_dir / "config" / "ffpbar"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


@pytest.fixture
def mock_xdg_dirs(temp_dir: Path, monkeypatch):
    """Mock XDG directories to use temporary paths."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(temp_dir / "state"))
    for var in list(os.environ):
        if var.startswith("FFPBAR_"):
            monkeypatch.delenv(var, raising=False)


@pytest.fixture
def output() -> io.StringIO:
    """A text stream with no terminal behind it (bar width falls back to 20)."""
    return io.StringIO()


class NoKeyboard:
    """KeyReader stand-in for runs without an interactive terminal."""

    available = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None

    def restore(self):
        pass

    def read_key(self, timeout):
        return None


@pytest.fixture
def no_keyboard() -> NoKeyboard:
    return NoKeyboard()


def fake_ffmpeg(script: str) -> List[str]:
    """Command that runs ``script`` with the current interpreter in place of ffmpeg."""
    return [sys.executable, "-c", textwrap.dedent(script)]


@pytest.fixture
def make_fake_ffmpeg():
    return fake_ffmpeg


@pytest.fixture(autouse=True)
def english_messages():
    """Keep translated strings in English regardless of earlier tests."""
    from ffpbar.i18n import setup_i18n

    setup_i18n("en")
    yield
    setup_i18n("en")
