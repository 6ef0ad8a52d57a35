"""Loop time: signed millisecond durations and timeline points."""

from timegraph.core.time.format import LoopTimeParseError, format_millis, parse_millis
from timegraph.core.time.models import LoopTime, TimePoint

__all__ = [
    "LoopTime",
    "TimePoint",
    "LoopTimeParseError",
    "parse_millis",
    "format_millis",
]
