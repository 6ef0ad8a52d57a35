"""Loop time models.

Usage:
    t = LoopTime.parse("-1h20m")
    later = t + LoopTime.from_secs(0.016)
    point = TimePoint("tl/intro.tl.json", LoopTime.parse("45s"))
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, ClassVar, NamedTuple

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from timegraph.core.time.format import LoopTimeParseError, format_millis, parse_millis

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


@dataclass(frozen=True, slots=True, order=True)
class LoopTime:
    """Duration since the beginning of the loop, in whole milliseconds.

    Serializes in a human-readable format (``"1h 20m"``). Values are confined
    to the signed 64-bit range; leaving it is a programming error and raises
    OverflowError instead of wrapping.
    """

    millis: int = 0

    EPOCH: ClassVar[LoopTime]

    def __post_init__(self) -> None:
        if not isinstance(self.millis, int) or isinstance(self.millis, bool):
            raise TypeError(f"LoopTime millis must be int, got {type(self.millis).__name__}")
        if not _I64_MIN <= self.millis <= _I64_MAX:
            raise OverflowError(f"LoopTime out of range: {self.millis}ms")

    @classmethod
    def parse(cls, text: str) -> LoopTime:
        """Parse a signed human-readable duration such as ``"-1h20m"``."""
        try:
            return cls(parse_millis(text))
        except OverflowError as e:
            raise LoopTimeParseError(text, "out of range") from e

    @classmethod
    def from_secs(cls, secs: float) -> LoopTime:
        """Convert seconds to the nearest whole millisecond."""
        return cls(round(secs * 1000))

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> LoopTime:
        """Convert a timedelta, truncating sub-millisecond precision."""
        return cls(delta // timedelta(milliseconds=1))

    def secs(self) -> int:
        """Whole seconds, truncated toward zero."""
        whole = abs(self.millis) // 1000
        return -whole if self.millis < 0 else whole

    def secs_f(self) -> float:
        return self.millis / 1000.0

    def __add__(self, other: object) -> LoopTime:
        if isinstance(other, LoopTime):
            return LoopTime(self.millis + other.millis)
        if isinstance(other, timedelta):
            return self + LoopTime.from_timedelta(other)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other: object) -> LoopTime:
        if isinstance(other, LoopTime):
            return LoopTime(self.millis - other.millis)
        if isinstance(other, timedelta):
            return self - LoopTime.from_timedelta(other)
        return NotImplemented

    def __neg__(self) -> LoopTime:
        return LoopTime(-self.millis)

    def __abs__(self) -> LoopTime:
        return LoopTime(abs(self.millis))

    def __str__(self) -> str:
        return format_millis(self.millis)

    def __repr__(self) -> str:
        return f"LoopTime({format_millis(self.millis)!r})"

    @classmethod
    def coerce(cls, value: Any) -> LoopTime:
        """Accept a LoopTime, a duration string or integer milliseconds."""
        if isinstance(value, LoopTime):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except OverflowError as e:
                raise ValueError(str(e)) from e
        raise ValueError(f"expected a duration string or integer milliseconds, got {value!r}")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )


LoopTime.EPOCH = LoopTime(0)


class TimePoint(NamedTuple):
    """A point in loop time on a specific timeline.

    Timeline ids are content paths, so the serialized form
    ``["tl/intro.tl.json", "45s"]`` is also the runtime reference.
    """

    timeline: str
    time: LoopTime

    def __str__(self) -> str:
        return f"{self.timeline}@{self.time}"

    def at(self, time: LoopTime) -> TimePoint:
        """Same timeline, different time."""
        return TimePoint(self.timeline, time)

    def on(self, timeline: str) -> TimePoint:
        """Same time, different timeline."""
        return TimePoint(timeline, self.time)
