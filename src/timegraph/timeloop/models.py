"""Timeline content models: Timeline, Moment, Happenings and moment references.

Usage:
    tl = Timeline()
    tl.insert(LoopTime.parse("5s"), Moment(label="wake", happenings=[
        Happenings(label="greet", actions=[Log(msg="hello")]),
    ]))

    tl.get_moment(At(LoopTime.parse("5s")))
    tl.get_moment(Labelled("wake"))

    for time, moment in tl.range(LoopTime.EPOCH, LoopTime.parse("10s")):
        ...
"""

from __future__ import annotations

import bisect
import logging
import sys
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import PlainSerializer, PlainValidator

from timegraph.core.action import Action, clone_actions
from timegraph.core.time import LoopTime, TimePoint

logger = logging.getLogger(__name__)


def _intern(label: str | None) -> str | None:
    return sys.intern(label) if label is not None else None


@dataclass
class Happenings:
    """One labelled, independently disableable group of actions."""

    label: str | None = None
    actions: list[Action] = field(default_factory=list)
    disabled: bool = False

    def __post_init__(self) -> None:
        self.label = _intern(self.label)

    def clone(self) -> Happenings:
        return Happenings(self.label, clone_actions(self.actions), self.disabled)


@dataclass
class Moment:
    """Everything scheduled at one exact loop time."""

    label: str | None = None
    desc: str | None = None
    happenings: list[Happenings] = field(default_factory=list)
    disabled: bool = False

    def __post_init__(self) -> None:
        self.label = _intern(self.label)

    def get_happenings(self, label: str) -> Happenings | None:
        """First happenings group with this label, or None."""
        for group in self.happenings:
            if group.label == label:
                return group
        return None

    def clone(self) -> Moment:
        return Moment(
            label=self.label,
            desc=self.desc,
            happenings=[h.clone() for h in self.happenings],
            disabled=self.disabled,
        )


@dataclass(frozen=True, slots=True)
class At:
    """Reference to the moment at an exact time."""

    time: LoopTime


@dataclass(frozen=True, slots=True)
class Labelled:
    """Reference to the first moment (ascending time) carrying a label."""

    label: str


def parse_moment_ref(value: Any) -> At | Labelled:
    """Decode ``{"At": "5s"}`` or ``{"Labelled": "name"}``."""
    if isinstance(value, (At, Labelled)):
        return value
    if not isinstance(value, Mapping) or len(value) != 1:
        raise ValueError(f'expected {{"At": <time>}} or {{"Labelled": <label>}}, got {value!r}')
    (kind, inner), = value.items()
    if kind == "At":
        return At(LoopTime.coerce(inner))
    if kind == "Labelled":
        if not isinstance(inner, str):
            raise ValueError(f"Labelled moment reference must be a string, got {inner!r}")
        return Labelled(sys.intern(inner))
    raise ValueError(f"unknown moment reference kind {kind!r}")


def dump_moment_ref(ref: At | Labelled) -> dict[str, str]:
    if isinstance(ref, At):
        return {"At": str(ref.time)}
    return {"Labelled": ref.label}


MomentRef = Annotated[
    At | Labelled,
    PlainValidator(parse_moment_ref),
    PlainSerializer(dump_moment_ref, when_used="json"),
]
"""Pydantic field type for moment references."""


class Timeline:
    """Ordered mapping of loop time to Moment, with optional branch/merge links.

    ``branch_from`` means this timeline's history continues the referenced
    timeline's stream up to the referenced time; ``merge_into`` continues
    forward into the referenced timeline from the referenced time on.
    """

    def __init__(
        self,
        branch_from: TimePoint | None = None,
        moments: Mapping[LoopTime, Moment] | None = None,
        merge_into: TimePoint | None = None,
    ) -> None:
        self.branch_from = branch_from
        self.merge_into = merge_into
        self._moments: dict[LoopTime, Moment] = {}
        self._keys: list[LoopTime] = []
        for time, moment in (moments or {}).items():
            self.insert(time, moment)

    @property
    def moments(self) -> Mapping[LoopTime, Moment]:
        """Read-only view, iterating in ascending time."""
        return MappingProxyType(self._moments)

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[tuple[LoopTime, Moment]]:
        for time in list(self._keys):
            yield time, self._moments[time]

    def insert(self, time: LoopTime, moment: Moment) -> Moment | None:
        """Insert a moment, replacing any moment already at ``time``.

        Returns:
            The replaced moment, or None. Replacing is logged as a warning
            since keys are expected to be unique.
        """
        previous = self._moments.get(time)
        if previous is not None:
            logger.warning(
                "Duplicate moment at %s: %r replaces %r", time, moment.label, previous.label
            )
            self._moments[time] = moment
            return previous
        bisect.insort(self._keys, time)
        if self._keys[-1] != time:
            # Out-of-order insert: rebuild so dict iteration stays ascending
            self._moments[time] = moment
            self._moments = {t: self._moments[t] for t in self._keys}
        else:
            self._moments[time] = moment
        return None

    def remove(self, time: LoopTime) -> Moment | None:
        moment = self._moments.pop(time, None)
        if moment is not None:
            self._keys.remove(time)
        return moment

    def get_moment(self, ref: At | Labelled) -> Moment | None:
        """Exact lookup for At, first match in ascending time for Labelled."""
        if isinstance(ref, At):
            return self._moments.get(ref.time)
        for time in self._keys:
            moment = self._moments[time]
            if moment.label == ref.label:
                return moment
        return None

    # Moments are mutable objects, so the "mutable" lookup is the same lookup.
    get_moment_mut = get_moment

    def range(self, start: LoopTime, end: LoopTime) -> Iterator[tuple[LoopTime, Moment]]:
        """Moments with ``start <= time < end``, ascending.

        Keys are snapshotted up front and each moment is looked up again when
        reached, so moments patched by earlier actions in the same range are
        seen in their patched state.
        """
        if end <= start:
            return
        lo = bisect.bisect_left(self._keys, start)
        hi = bisect.bisect_left(self._keys, end)
        for time in self._keys[lo:hi]:
            moment = self._moments.get(time)
            if moment is not None:
                yield time, moment

    def clone(self) -> Timeline:
        """Deep copy. Actions are cloned, never shared."""
        return Timeline(
            branch_from=self.branch_from,
            moments={t: m.clone() for t, m in self._moments.items()},
            merge_into=self.merge_into,
        )

    def summary(self) -> str:
        """One-line description used in debug logs."""
        parts = [f"{len(self)} moments"]
        if self.branch_from is not None:
            parts.append(f"branch_from={self.branch_from}")
        if self.merge_into is not None:
            parts.append(f"merge_into={self.merge_into}")
        return ", ".join(parts)

    def __repr__(self) -> str:
        return f"Timeline({self.summary()})"
