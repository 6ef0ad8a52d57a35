"""Configuration module using Pydantic Settings.

Usage:
    from timegraph.config import TimeLoopSettings, configure_logging

    settings = TimeLoopSettings(content_dir="assets")
    configure_logging(settings)
"""

from timegraph.config.settings import TimeLoopSettings, configure_logging

__all__ = [
    "TimeLoopSettings",
    "configure_logging",
]
