# src/app/settings.py
#!/usr/bin/env python3
"""
Startup settings for the creepage viewer.

Each value comes from an environment variable and can be overridden on the
command line with --key=value (e.g. --cell-mm=0.5). Resolved once; the board
size never changes while the window is open.
"""

from dataclasses import dataclass
import logging
import os
import sys
from typing import Callable, Dict, List, Optional

from src.core.presets import PRESETS

DEFAULT_ROWS = 25
DEFAULT_COLS = 40
DEFAULT_CELL_MM = 1.0
THEMES = ("soldermask", "midnight")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    cell_mm: float = DEFAULT_CELL_MM
    preset: str = "blank"
    theme: str = "soldermask"
    log_level: str = "INFO"


# setting -> (env var, cli flag)
_SOURCES: Dict[str, tuple] = {
    "rows":      ("CREEPAGE_ROWS",      "--rows="),
    "cols":      ("CREEPAGE_COLS",      "--cols="),
    "cell_mm":   ("CREEPAGE_CELL_MM",   "--cell-mm="),
    "preset":    ("CREEPAGE_PRESET",    "--preset="),
    "theme":     ("CREEPAGE_THEME",     "--theme="),
    "log_level": ("CREEPAGE_LOG_LEVEL", "--log-level="),
}


def _positive_int(name: str, raw: str) -> int:
    try:
        v = int(raw)
    except ValueError:
        raise SettingsError(f"{name} must be an integer, got {raw!r}") from None
    if v < 1:
        raise SettingsError(f"{name} must be >= 1, got {v}")
    return v


def _positive_float(name: str, raw: str) -> float:
    try:
        v = float(raw)
    except ValueError:
        raise SettingsError(f"{name} must be a number, got {raw!r}") from None
    if not v > 0:
        raise SettingsError(f"{name} must be > 0, got {v}")
    return v


def _choice(options) -> Callable[[str, str], str]:
    def parse(name: str, raw: str) -> str:
        v = raw.strip()
        if name == "log_level":
            v = v.upper()
        else:
            v = v.lower()
        if v not in options:
            raise SettingsError(f"{name} must be one of {', '.join(options)}, got {raw!r}")
        return v
    return parse


_PARSERS: Dict[str, Callable[[str, str], object]] = {
    "rows": _positive_int,
    "cols": _positive_int,
    "cell_mm": _positive_float,
    "preset": _choice(tuple(PRESETS)),
    "theme": _choice(THEMES),
    "log_level": _choice(LOG_LEVELS),
}


def resolve_settings(argv: Optional[List[str]] = None,
                     environ: Optional[Dict[str, str]] = None) -> Settings:
    """Merge defaults, environment and --key=value flags (flags win)."""
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ

    values = {}
    for name, (env_key, flag) in _SOURCES.items():
        raw = environ.get(env_key)
        for arg in argv:
            if arg.startswith(flag):
                raw = arg.split("=", 1)[1]
        if raw is not None:
            values[name] = _PARSERS[name](name, raw)
    return Settings(**values)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
