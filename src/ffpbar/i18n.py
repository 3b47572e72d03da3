"""
Translations for the messages ffpbar prints itself.

ffmpeg's own output is passed through untouched. Only ffpbar's usage text,
the fallback bar title and its fatal error messages go through gettext.
Catalogs live in ``ffpbar/locales/<lang>/LC_MESSAGES/ffpbar.mo`` and are
compiled from the .po sources at build time. Without a compiled catalog the
English source strings are used.
"""

import gettext
import os
from pathlib import Path
from typing import Callable, Mapping, Optional

DOMAIN = "ffpbar"
SUPPORTED_LANGUAGES = ("en", "fr", "es", "it", "de")
DEFAULT_LANGUAGE = "en"

# Checked in order; FFPBAR_LANG mirrors the [i18n] lang config key
LANGUAGE_ENV_VARS = ("FFPBAR_LANG", "LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG")

_translate: Optional[Callable[[str], str]] = None


def get_locales_dir() -> Path:
    """Get the locales directory path."""
    return Path(__file__).parent / "locales"


def normalize_language(value: str) -> Optional[str]:
    """
    Reduce a locale name to a supported language code.

    'fr_FR.UTF-8' -> 'fr', 'de_DE@euro' -> 'de'. LANGUAGE-style priority
    lists such as 'it:en' yield the first supported entry. Returns None if
    nothing in ``value`` is shipped with ffpbar.
    """
    for candidate in value.split(":"):
        code = candidate.split(".")[0].split("@")[0].split("_")[0].strip().lower()
        if code in SUPPORTED_LANGUAGES:
            return code
    return None


def detect_system_language(environ: Optional[Mapping[str, str]] = None) -> str:
    """Pick the language from FFPBAR_LANG or the POSIX locale variables."""
    env = os.environ if environ is None else environ
    for var in LANGUAGE_ENV_VARS:
        value = env.get(var)
        if value:
            code = normalize_language(value)
            if code:
                return code
    return DEFAULT_LANGUAGE


def setup_i18n(lang: Optional[str] = None) -> Callable[[str], str]:
    """
    Load the catalog for ``lang`` and return its translation function.

    With no ``lang`` the language is detected from the environment. An
    explicit language that ffpbar does not ship falls back to English.
    """
    global _translate

    if lang:
        code = normalize_language(lang) or DEFAULT_LANGUAGE
    else:
        code = detect_system_language()

    translation = gettext.translation(
        DOMAIN,
        localedir=str(get_locales_dir()),
        languages=[code],
        fallback=True,
    )
    _translate = translation.gettext
    return _translate


def _(message: str) -> str:
    """Translate a message, loading the detected language on first use."""
    if _translate is None:
        setup_i18n()
    return _translate(message)


# Every string passed to _() in ffpbar, kept in sync with the .po files
TRANSLATION_CATALOG = [
    "A progress bar wrapper for ffmpeg",
    "Usage:",
    "Examples:",
    "This tool wraps ffmpeg and displays a progress bar during conversion.",
    "All ffmpeg options are supported - just pass them as arguments.",
    "Processing",
    "Exiting.",
    "Failed to start {binary} process: {error}",
    "Unexpected exception: {error}",
]
