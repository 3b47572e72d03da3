"""
Configuration management for ffpbar.

Handles:
- XDG Base Directory compliance
- TOML/INI configuration file loading
- Config dataclass with all options
- Configuration merging (system -> user -> environment)

Every command-line argument belongs to ffmpeg, so the wrapper's own settings
come only from configuration files and FFPBAR_* environment variables.
"""

import configparser
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

# Try TOML support (Python 3.11+ or tomli package)
try:
    import tomllib  # Python 3.11+

    TOML_AVAILABLE = True
except ImportError:
    try:
        import tomli as tomllib  # pip install tomli

        TOML_AVAILABLE = True
    except ImportError:
        TOML_AVAILABLE = False


# -------------------- XDG DIRECTORIES --------------------


def get_xdg_config_home() -> Path:
    """Get XDG config home directory."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def get_xdg_state_home() -> Path:
    """Get XDG state home directory."""
    return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))


def get_app_dirs() -> Dict[str, Path]:
    """Return all application directories, creating them if needed."""
    dirs = {
        "config": get_xdg_config_home() / "ffpbar",
        "state": get_xdg_state_home() / "ffpbar",
        "logs": get_xdg_state_home() / "ffpbar" / "logs",
    }
    for d in dirs.values():
        d.mkdir(parents=True, exist_ok=True)
    return dirs


# -------------------- CONFIGURATION DATACLASS --------------------


@dataclass
class Config:
    """All configuration options for ffpbar."""

    # Child process
    ffmpeg: str = "ffmpeg"

    # UI settings
    bar_width: int = 0  # 0 = size the bar from the terminal width
    ascii_bar: Optional[bool] = None  # None = ASCII glyphs on Windows only

    # Process I/O
    forward_stdin: bool = True
    stdin_poll_ms: int = 50
    stderr_retry_ms: int = 10
    drain_timeout: float = 1.0

    # Transcript log of ffmpeg output
    log_output: bool = False

    # Debug
    debug: bool = False

    # Internationalization
    lang: Optional[str] = None


# -------------------- CONFIG FILE LOADING --------------------


def _parse_ini_value(value: str):
    """Parse INI value: bool, int, float, or string."""
    v = value.strip()
    if not v:
        return ""
    if v.lower() in ("true", "yes", "on"):
        return True
    if v.lower() in ("false", "no", "off"):
        return False
    # Try int
    try:
        return int(v)
    except ValueError:
        pass
    # Try float
    try:
        return float(v)
    except ValueError:
        pass
    return v


def _load_ini_config(path: Path) -> Dict[str, Any]:
    """Load INI file and convert to nested dict."""
    cp = configparser.ConfigParser()
    cp.read(path)
    result: Dict[str, Any] = {}
    for section in cp.sections():
        result[section] = {}
        for key, value in cp.items(section):
            result[section][key] = _parse_ini_value(value)
    return result


def _load_single_config(config_dir: Path) -> Dict[str, Any]:
    """Load config from a single directory (TOML or INI file)."""
    toml_path = config_dir / "config.toml"
    ini_path = config_dir / "config.ini"

    if TOML_AVAILABLE and toml_path.exists():
        try:
            with toml_path.open("rb") as f:
                return dict(tomllib.load(f))
        except Exception as e:
            print(f"Warning: Failed to load {toml_path}: {e}", file=sys.stderr)
            return {}
    elif ini_path.exists():
        try:
            return _load_ini_config(ini_path)
        except Exception as e:
            print(f"Warning: Failed to load {ini_path}: {e}", file=sys.stderr)
            return {}
    return {}


def _deep_merge_dicts(base: dict, override: dict) -> dict:
    """Deep merge two dicts, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def load_config_file(config_dir: Path, system_config_dir: Path = Path("/etc/ffpbar")) -> dict:
    """
    Load config with priority:
    1. User config: ~/.config/ffpbar/config.toml (highest priority)
    2. System config: /etc/ffpbar/config.toml (lowest priority, optional)

    User config values override system config values.
    """
    system_config = {}
    if system_config_dir.exists():
        system_config = _load_single_config(system_config_dir)

    user_config = _load_single_config(config_dir)

    if system_config and user_config:
        return _deep_merge_dicts(system_config, user_config)
    elif user_config:
        return user_config
    elif system_config:
        return system_config
    return {}


# Map config file keys and environment variables to Config attribute names
FILE_MAPPINGS = {
    ("ffmpeg", "binary"): "ffmpeg",
    ("ui", "bar_width"): "bar_width",
    ("ui", "ascii"): "ascii_bar",
    ("io", "forward_stdin"): "forward_stdin",
    ("io", "stdin_poll_ms"): "stdin_poll_ms",
    ("io", "stderr_retry_ms"): "stderr_retry_ms",
    ("io", "drain_timeout"): "drain_timeout",
    ("log", "enabled"): "log_output",
    ("debug", "enabled"): "debug",
    ("i18n", "lang"): "lang",
}

ENV_MAPPINGS = {
    "FFPBAR_FFMPEG": "ffmpeg",
    "FFPBAR_BAR_WIDTH": "bar_width",
    "FFPBAR_ASCII": "ascii_bar",
    "FFPBAR_FORWARD_STDIN": "forward_stdin",
    "FFPBAR_STDIN_POLL_MS": "stdin_poll_ms",
    "FFPBAR_STDERR_RETRY_MS": "stderr_retry_ms",
    "FFPBAR_DRAIN_TIMEOUT": "drain_timeout",
    "FFPBAR_LOG": "log_output",
    "FFPBAR_DEBUG": "debug",
    "FFPBAR_LANG": "lang",
}


def _coerce(attr_name: str, value: Any) -> Any:
    """Convert a raw file/env value to the type of the Config attribute."""
    default_val = getattr(Config(), attr_name)
    if isinstance(value, str) and not isinstance(default_val, str):
        value = _parse_ini_value(value)
    if isinstance(default_val, bool) or attr_name == "ascii_bar":
        if not isinstance(value, bool):
            raise ValueError(f"expected a boolean, got {value!r}")
        return value
    if isinstance(default_val, float):
        return float(value)
    if isinstance(default_val, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"expected an integer, got {value!r}")
        return value
    return str(value) if value != "" else default_val


def apply_config_to_args(file_config: dict, cfg: Config) -> None:
    """
    Apply file config values to Config instance.

    Unknown sections and keys are ignored; values with the wrong type are
    reported on stderr and skipped.
    """
    for (section, key), attr_name in FILE_MAPPINGS.items():
        if section in file_config and key in file_config[section]:
            try:
                setattr(cfg, attr_name, _coerce(attr_name, file_config[section][key]))
            except (TypeError, ValueError) as e:
                print(f"Warning: Ignoring config value [{section}] {key}: {e}", file=sys.stderr)


def apply_env_overrides(cfg: Config, environ: Optional[Mapping[str, str]] = None) -> None:
    """Apply FFPBAR_* environment variables on top of the file config."""
    if environ is None:
        environ = os.environ
    for var, attr_name in ENV_MAPPINGS.items():
        raw = environ.get(var)
        if raw is None or raw == "":
            continue
        try:
            setattr(cfg, attr_name, _coerce(attr_name, raw))
        except (TypeError, ValueError) as e:
            print(f"Warning: Ignoring {var}: {e}", file=sys.stderr)


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Build the effective Config: defaults, then system/user files, then environment."""
    cfg = Config()
    file_config = load_config_file(get_xdg_config_home() / "ffpbar")
    if file_config:
        apply_config_to_args(file_config, cfg)
    apply_env_overrides(cfg, environ)
    return cfg
