"""
Tests for configuration loading and management.
"""

from pathlib import Path


class TestConfig:
    """Tests for Config dataclass."""

    def test_config_defaults(self):
        """Test default config values."""
        from ffpbar.config import Config
        cfg = Config()

        assert cfg.ffmpeg == "ffmpeg"
        assert cfg.bar_width == 0
        assert cfg.ascii_bar is None
        assert cfg.forward_stdin is True
        assert cfg.stdin_poll_ms == 50
        assert cfg.stderr_retry_ms == 10
        assert cfg.drain_timeout == 1.0
        assert cfg.log_output is False
        assert cfg.debug is False
        assert cfg.lang is None


class TestXDGDirectories:
    """Tests for XDG directory functions."""

    def test_get_xdg_config_home_default(self, monkeypatch):
        """Test default config home."""
        from ffpbar.config import get_xdg_config_home

        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_xdg_config_home() == Path.home() / ".config"

    def test_get_xdg_config_home_custom(self, monkeypatch, temp_dir):
        """Test custom config home."""
        from ffpbar.config import get_xdg_config_home

        monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir))
        assert get_xdg_config_home() == temp_dir

    def test_get_xdg_state_home_default(self, monkeypatch):
        """Test default state home."""
        from ffpbar.config import get_xdg_state_home

        monkeypatch.delenv("XDG_STATE_HOME", raising=False)
        assert get_xdg_state_home() == Path.home() / ".local" / "state"

    def test_get_app_dirs(self, mock_xdg_dirs, temp_dir):
        """Test app directories creation."""
        from ffpbar.config import get_app_dirs

        dirs = get_app_dirs()

        assert dirs["config"] == temp_dir / "config" / "ffpbar"
        assert dirs["logs"] == temp_dir / "state" / "ffpbar" / "logs"
        for d in dirs.values():
            assert d.exists()


class TestConfigFileLoading:
    """Tests for configuration file loading."""

    def test_load_config_file_empty(self, temp_config_dir, temp_dir):
        """Test loading from empty directory."""
        from ffpbar.config import load_config_file

        assert load_config_file(temp_config_dir, system_config_dir=temp_dir / "etc") == {}

    def test_load_config_file_ini(self, temp_config_dir, temp_dir, monkeypatch):
        """Test loading INI config."""
        from ffpbar import config as config_module
        from ffpbar.config import load_config_file

        monkeypatch.setattr(config_module, "TOML_AVAILABLE", False)
        (temp_config_dir / "config.ini").write_text("[ui]\nbar_width = 30\nascii = yes\n")

        loaded = load_config_file(temp_config_dir, system_config_dir=temp_dir / "etc")
        assert loaded == {"ui": {"bar_width": 30, "ascii": True}}

    def test_load_config_file_toml(self, temp_config_dir, temp_dir):
        """Test loading TOML config."""
        import pytest

        from ffpbar.config import TOML_AVAILABLE, load_config_file

        if not TOML_AVAILABLE:
            pytest.skip("TOML support not available")

        (temp_config_dir / "config.toml").write_text('[ffmpeg]\nbinary = "/opt/ffmpeg/bin/ffmpeg"\n')

        loaded = load_config_file(temp_config_dir, system_config_dir=temp_dir / "etc")
        assert loaded["ffmpeg"]["binary"] == "/opt/ffmpeg/bin/ffmpeg"

    def test_load_invalid_toml_warns(self, temp_config_dir, temp_dir, capsys):
        """Test a broken TOML file is reported and ignored."""
        import pytest

        from ffpbar.config import TOML_AVAILABLE, load_config_file

        if not TOML_AVAILABLE:
            pytest.skip("TOML support not available")

        (temp_config_dir / "config.toml").write_text("[ui\nbar_width = ")

        assert load_config_file(temp_config_dir, system_config_dir=temp_dir / "etc") == {}
        assert "Warning: Failed to load" in capsys.readouterr().err

    def test_system_config_merged_under_user(self, temp_config_dir, temp_dir, monkeypatch):
        """Test user values override system values section by section."""
        from ffpbar import config as config_module
        from ffpbar.config import load_config_file

        monkeypatch.setattr(config_module, "TOML_AVAILABLE", False)
        system_dir = temp_dir / "etc"
        system_dir.mkdir()
        (system_dir / "config.ini").write_text("[ui]\nbar_width = 40\nascii = no\n[debug]\nenabled = true\n")
        (temp_config_dir / "config.ini").write_text("[ui]\nbar_width = 25\n")

        loaded = load_config_file(temp_config_dir, system_config_dir=system_dir)
        assert loaded == {"ui": {"bar_width": 25, "ascii": False}, "debug": {"enabled": True}}


class TestApplyConfig:
    """Tests for applying file and environment values."""

    def test_apply_config_to_args(self):
        """Test file values are mapped to Config attributes."""
        from ffpbar.config import Config, apply_config_to_args

        cfg = Config()
        apply_config_to_args(
            {
                "ffmpeg": {"binary": "/usr/local/bin/ffmpeg"},
                "ui": {"bar_width": 30, "ascii": True},
                "io": {"drain_timeout": 2, "forward_stdin": False},
                "log": {"enabled": True},
                "unknown": {"key": 1},
            },
            cfg,
        )

        assert cfg.ffmpeg == "/usr/local/bin/ffmpeg"
        assert cfg.bar_width == 30
        assert cfg.ascii_bar is True
        assert cfg.drain_timeout == 2.0
        assert cfg.forward_stdin is False
        assert cfg.log_output is True

    def test_apply_config_wrong_type(self, capsys):
        """Test a badly typed value is skipped with a warning."""
        from ffpbar.config import Config, apply_config_to_args

        cfg = Config()
        apply_config_to_args({"ui": {"bar_width": "wide"}, "debug": {"enabled": 3}}, cfg)

        assert cfg.bar_width == 0
        assert cfg.debug is False
        assert "Ignoring config value" in capsys.readouterr().err

    def test_apply_env_overrides(self):
        """Test FFPBAR_* variables are parsed and applied."""
        from ffpbar.config import Config, apply_env_overrides

        cfg = Config(bar_width=30)
        apply_env_overrides(
            cfg,
            {
                "FFPBAR_FFMPEG": "/opt/ffmpeg",
                "FFPBAR_BAR_WIDTH": "45",
                "FFPBAR_ASCII": "true",
                "FFPBAR_STDIN_POLL_MS": "20",
                "FFPBAR_DRAIN_TIMEOUT": "0.5",
                "FFPBAR_DEBUG": "on",
                "FFPBAR_LANG": "fr",
                "FFPBAR_LOG": "",
            },
        )

        assert cfg.ffmpeg == "/opt/ffmpeg"
        assert cfg.bar_width == 45
        assert cfg.ascii_bar is True
        assert cfg.stdin_poll_ms == 20
        assert cfg.drain_timeout == 0.5
        assert cfg.debug is True
        assert cfg.lang == "fr"
        assert cfg.log_output is False

    def test_apply_env_invalid_value(self, capsys):
        """Test an invalid environment value is ignored with a warning."""
        from ffpbar.config import Config, apply_env_overrides

        cfg = Config()
        apply_env_overrides(cfg, {"FFPBAR_BAR_WIDTH": "wide"})

        assert cfg.bar_width == 0
        assert "Ignoring FFPBAR_BAR_WIDTH" in capsys.readouterr().err

    def test_load_config_precedence(self, mock_xdg_dirs, temp_config_dir, monkeypatch):
        """Test environment values win over the user config file."""
        from ffpbar import config as config_module
        from ffpbar.config import load_config

        monkeypatch.setattr(config_module, "TOML_AVAILABLE", False)
        monkeypatch.setattr(config_module, "load_config_file", lambda d: config_module._load_single_config(d))
        (temp_config_dir / "config.ini").write_text("[ffmpeg]\nbinary = /from/file\n[ui]\nbar_width = 33\n")

        cfg = load_config({"FFPBAR_FFMPEG": "/from/env"})

        assert cfg.ffmpeg == "/from/env"
        assert cfg.bar_width == 33
