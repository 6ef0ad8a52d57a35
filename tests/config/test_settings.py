"""Tests for TimeLoopSettings and logging configuration."""

import logging
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from timegraph.config import TimeLoopSettings, configure_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's TIMEGRAPH_* variables and .env file."""
    for key in list(os.environ):
        if key.startswith("TIMEGRAPH_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = TimeLoopSettings()
    assert settings.content_dir == Path("assets")
    assert settings.entry_timeline == "tl/intro.tl.json"
    assert settings.timelines == ["tl/intro.tl.json", "tl/area_1.tl.json"]
    assert settings.peak_speedup == 8.0
    assert settings.reset_crossing == 0.4
    assert settings.history_max_ticks == 1000
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TIMEGRAPH_CONTENT_DIR", "/srv/content")
    monkeypatch.setenv("TIMEGRAPH_TIMELINES", '["tl/only.tl.json"]')
    monkeypatch.setenv("TIMEGRAPH_PEAK_SPEEDUP", "2.5")
    monkeypatch.setenv("TIMEGRAPH_LOG_LEVEL", "debug")

    settings = TimeLoopSettings()

    assert settings.content_dir == Path("/srv/content")
    assert settings.timelines == ["tl/only.tl.json"]
    assert settings.peak_speedup == 2.5
    assert settings.log_level == "DEBUG"


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("TIMEGRAPH_RESET_CROSSING=0.25\nUNRELATED=1\n")
    assert TimeLoopSettings().reset_crossing == 0.25


@pytest.mark.parametrize(
    "overrides",
    [
        {"peak_speedup": -1.0},
        {"reset_crossing": 0.0},
        {"reset_crossing": 1.0},
        {"history_max_ticks": 0},
        {"log_level": "LOUD"},
    ],
)
def test_validation(overrides):
    with pytest.raises(ValidationError):
        TimeLoopSettings(**overrides)


def test_configure_logging_applies_level(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    configure_logging(TimeLoopSettings(log_level="warning"))

    assert root.level == logging.WARNING
    assert root.handlers
