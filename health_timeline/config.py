"""Helpers for loading environment variables and timeline settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Mapping

from .timeline.zoom import DEFAULT_ZOOM_LEVEL, MAX_ZOOM_LEVEL, MIN_ZOOM_LEVEL

__all__ = [
    "ConfigError",
    "DATA_FILE_ENV",
    "DEFAULT_DATA_FILE",
    "ZOOM_ENV",
    "data_file_from_env",
    "load_env_file",
    "parse_zoom_level",
    "zoom_level_from_env",
]

DATA_FILE_ENV = "HEALTH_TIMELINE_DATA_FILE"
ZOOM_ENV = "HEALTH_TIMELINE_ZOOM"
DEFAULT_DATA_FILE = Path.home() / ".health_timeline" / "data.json"


class ConfigError(RuntimeError):
    """Raised when configuration values are malformed."""


def load_env_file(env_file: str | Path | None = None) -> None:
    """Load environment variables from ``env_file`` if provided.

    When ``env_file`` is :data:`None`, the loader looks for a ``.env`` file in the
    current working directory. Existing environment variables are never overwritten.
    """

    path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
    if not path.exists() or not path.is_file():
        return

    for key, value in _iter_env_entries(path):
        os.environ.setdefault(key, value)


def _iter_env_entries(path: Path) -> Iterable[tuple[str, str]]:
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ConfigError(
                f"Invalid line in {path.name!r}: {raw_line!r}. Expected KEY=VALUE format."
            )
        key, raw_value = line.split("=", 1)
        key = key.strip()
        value = raw_value.strip().strip('"').strip("'")
        if not key:
            raise ConfigError(f"Environment variable key is missing in line: {raw_line!r}")
        yield key, value


def parse_zoom_level(raw: str | int) -> int:
    try:
        level = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"Zoom level must be an integer, got {raw!r}") from None
    if not MIN_ZOOM_LEVEL <= level <= MAX_ZOOM_LEVEL:
        raise ConfigError(
            f"Zoom level {level} is out of range ({MIN_ZOOM_LEVEL}-{MAX_ZOOM_LEVEL})"
        )
    return level


def zoom_level_from_env(environ: Mapping[str, str] | None = None) -> int:
    environ = os.environ if environ is None else environ
    raw = environ.get(ZOOM_ENV)
    if raw is None or not raw.strip():
        return DEFAULT_ZOOM_LEVEL
    return parse_zoom_level(raw.strip())


def data_file_from_env(environ: Mapping[str, str] | None = None) -> Path:
    environ = os.environ if environ is None else environ
    raw = environ.get(DATA_FILE_ENV)
    if raw is None or not raw.strip():
        return DEFAULT_DATA_FILE
    return Path(raw.strip()).expanduser()
