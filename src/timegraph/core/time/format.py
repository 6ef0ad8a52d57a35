"""Human-readable duration codec for LoopTime.

Accepts the same vocabulary as humantime (`"1h 20m"`, `"-45s"`, `"2m3s"`)
and renders `d h m s ms` groups separated by spaces.
"""

from __future__ import annotations

import re

from timegraph.errors import TimegraphError

_NS_PER_MS = 1_000_000
_NS_PER_SEC = 1_000_000_000

_UNITS: dict[str, int] = {
    **dict.fromkeys(("ns", "nsec", "nanos"), 1),
    **dict.fromkeys(("us", "usec", "micros"), 1_000),
    **dict.fromkeys(("ms", "msec", "millis"), _NS_PER_MS),
    **dict.fromkeys(("s", "sec", "secs", "second", "seconds"), _NS_PER_SEC),
    **dict.fromkeys(("m", "min", "mins", "minute", "minutes"), 60 * _NS_PER_SEC),
    **dict.fromkeys(("h", "hr", "hrs", "hour", "hours"), 3_600 * _NS_PER_SEC),
    **dict.fromkeys(("d", "day", "days"), 86_400 * _NS_PER_SEC),
    **dict.fromkeys(("w", "week", "weeks"), 604_800 * _NS_PER_SEC),
    **dict.fromkeys(("M", "month", "months"), 2_630_016 * _NS_PER_SEC),
    **dict.fromkeys(("y", "year", "years"), 31_557_600 * _NS_PER_SEC),
}

_GROUP = re.compile(r"\s*(\d+)\s*([A-Za-z]+)")

_FORMAT_UNITS: tuple[tuple[str, int], ...] = (
    ("d", 86_400_000),
    ("h", 3_600_000),
    ("m", 60_000),
    ("s", 1_000),
    ("ms", 1),
)


class LoopTimeParseError(TimegraphError, ValueError):
    """Text could not be parsed as a signed duration."""

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        super().__init__(f"Invalid loop time {text!r}: {reason}")


def parse_millis(text: str) -> int:
    """Parse a signed human-readable duration into whole milliseconds.

    Args:
        text: Duration such as ``"-1h20m"``, ``"45s"`` or ``"+2m 3s"``.

    Returns:
        Signed millisecond count. Sub-millisecond precision is truncated.

    Raises:
        LoopTimeParseError: If the text is empty, has an unknown unit or
            contains anything but number/unit groups.
    """
    body = text.strip()
    if not body:
        raise LoopTimeParseError(text, "empty string")

    sign = 1
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    total_ns = 0
    pos = 0
    while pos < len(body):
        match = _GROUP.match(body, pos)
        if match is None:
            if body[pos:].strip():
                raise LoopTimeParseError(text, f"unexpected {body[pos:]!r}")
            break
        number, unit = match.groups()
        scale = _UNITS.get(unit)
        if scale is None:
            raise LoopTimeParseError(text, f"unknown unit {unit!r}")
        total_ns += int(number) * scale
        pos = match.end()

    if pos == 0:
        raise LoopTimeParseError(text, "expected <number><unit>")
    return sign * (total_ns // _NS_PER_MS)


def format_millis(millis: int) -> str:
    """Render signed milliseconds as ``"1h 20m"``, ``"-45s"`` or ``"0s"``."""
    if millis == 0:
        return "0s"
    sign = "-" if millis < 0 else ""
    remaining = abs(millis)
    parts: list[str] = []
    for unit, size in _FORMAT_UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count}{unit}")
    return sign + " ".join(parts)
