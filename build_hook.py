"""Hatch build hook that compiles the gettext catalogs shipped with ffpbar."""

import subprocess
from pathlib import Path
from typing import Any, Dict, List

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

LOCALES_DIR = Path(__file__).parent / "src" / "ffpbar" / "locales"


def compile_translations(locales_dir: Path = LOCALES_DIR) -> List[Path]:
    """Compile every ``ffpbar.po`` under ``locales_dir`` with msgfmt.

    Returns the .mo files written. Without msgfmt the package still works,
    it just falls back to English.
    """
    written: List[Path] = []
    for po_file in sorted(locales_dir.glob("*/LC_MESSAGES/ffpbar.po")):
        mo_file = po_file.with_suffix(".mo")
        try:
            subprocess.run(["msgfmt", "-o", str(mo_file), str(po_file)], check=True, capture_output=True)
        except FileNotFoundError:
            print("Warning: msgfmt not found, translations not compiled")
            break
        except subprocess.CalledProcessError as e:
            print(f"Error compiling {po_file}: {e.stderr.decode(errors='replace').strip()}")
            continue
        written.append(mo_file)
    return written


class TranslationsBuildHook(BuildHookInterface):
    PLUGIN_NAME = "custom"

    def initialize(self, version: str, build_data: Dict[str, Any]) -> None:
        compile_translations()


if __name__ == "__main__":
    for path in compile_translations():
        print(f"Compiled {path}")
