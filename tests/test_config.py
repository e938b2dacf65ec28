from __future__ import annotations

import os
from pathlib import Path

import pytest

from health_timeline.config import (
    DATA_FILE_ENV,
    DEFAULT_DATA_FILE,
    ZOOM_ENV,
    ConfigError,
    data_file_from_env,
    load_env_file,
    parse_zoom_level,
    zoom_level_from_env,
)


def test_load_env_file_sets_missing_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("FOO=bar\n# comment\nBAZ = 123\n", encoding="utf-8")

    monkeypatch.delenv("FOO", raising=False)
    monkeypatch.setenv("BAZ", "keep")

    load_env_file(env_file)

    assert os.environ["FOO"] == "bar"
    assert os.environ["BAZ"] == "keep"
    monkeypatch.delenv("FOO", raising=False)


def test_load_env_file_is_noop_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    missing = tmp_path / "missing.env"
    monkeypatch.delenv("FOO", raising=False)

    load_env_file(missing)

    assert "FOO" not in os.environ


def test_invalid_line_raises(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("INVALID", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid line"):
        load_env_file(env_file)


def test_zoom_level_defaults_and_parses() -> None:
    assert zoom_level_from_env({}) == 3
    assert zoom_level_from_env({ZOOM_ENV: " 1 "}) == 1
    assert parse_zoom_level(4) == 4


@pytest.mark.parametrize("raw", ["5", "-1", "wide", "2.5"])
def test_bad_zoom_level_raises(raw: str) -> None:
    with pytest.raises(ConfigError):
        zoom_level_from_env({ZOOM_ENV: raw})


def test_data_file_from_env(tmp_path: Path) -> None:
    assert data_file_from_env({}) == DEFAULT_DATA_FILE
    target = tmp_path / "health.json"
    assert data_file_from_env({DATA_FILE_ENV: str(target)}) == target
