"""Configuration settings using Pydantic Settings.

Provides typed configuration for the time loop with environment variable
support.

Usage:
    from timegraph.config import TimeLoopSettings

    # Load from environment variables (TIMEGRAPH_*)
    settings = TimeLoopSettings()

    # Or override with explicit values
    settings = TimeLoopSettings(content_dir="assets", peak_speedup=4.0)
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TimeLoopSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the time loop and its content.

    Attributes:
        content_dir: Root directory timeline ids are relative to.
        entry_timeline: Timeline the cursor starts on.
        timelines: Timeline files to load at startup, relative to content_dir.
        peak_speedup: Extra seek speed at the middle of a reset (total is 1 + this).
        reset_crossing: Seek progress at which the world-reset callback fires.
        history_max_ticks: Tick records kept by the in-memory history store.
        log_level: Root log level applied by configure_logging.

    Environment Variables:
        TIMEGRAPH_CONTENT_DIR
        TIMEGRAPH_ENTRY_TIMELINE
        TIMEGRAPH_TIMELINES (JSON list)
        TIMEGRAPH_PEAK_SPEEDUP
        TIMEGRAPH_RESET_CROSSING
        TIMEGRAPH_HISTORY_MAX_TICKS
        TIMEGRAPH_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="TIMEGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    content_dir: Path = Path("assets")
    entry_timeline: str = "tl/intro.tl.json"
    timelines: list[str] = Field(
        default_factory=lambda: ["tl/intro.tl.json", "tl/area_1.tl.json"]
    )
    peak_speedup: float = Field(default=8.0, ge=0.0)
    reset_crossing: float = Field(default=0.4, gt=0.0, lt=1.0)
    history_max_ticks: int = Field(default=1000, ge=1)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level


def configure_logging(settings: TimeLoopSettings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or TimeLoopSettings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
