"""Timeline content loader.

Timeline files are JSON objects::

    {
      "branch_from": ["tl/intro.tl.json", "5s"],
      "moments": {
        "0s": {
          "label": "wake",
          "desc": "player wakes up",
          "happenings": [
            {"LABEL": "greet", "Log": {"msg": "hello"}}
          ]
        }
      },
      "merge_into": null
    }

Each happenings group maps action tags to payloads in declaration order;
``LABEL`` and ``DISABLED`` are reserved keys. A tag may repeat inside a group.

Usage:
    loader = TimelineLoader(get_registry(), root=Path("assets"))
    timeline = loader.load("tl/intro.tl.json")
    loader.save(timeline, "tl/intro.tl.json")
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any

from timegraph.core.action import ActionRegistry
from timegraph.core.time import LoopTime, LoopTimeParseError, TimePoint
from timegraph.errors import ActionError, ContentError
from timegraph.timeloop.models import Happenings, Moment, Timeline

logger = logging.getLogger(__name__)

LABEL_KEY = "LABEL"
DISABLED_KEY = "DISABLED"

_TIMELINE_FIELDS = frozenset({"branch_from", "moments", "merge_into"})
_MOMENT_FIELDS = frozenset({"label", "desc", "happenings", "disabled"})


class JsonObject(dict[str, Any]):
    """Decoded JSON object that remembers every pair, duplicate keys included."""

    pairs: list[tuple[str, Any]]

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, Any]]) -> JsonObject:
        obj = cls(pairs)
        obj.pairs = pairs
        return obj


def timeline_id(path: str | Path, root: str | Path | None = None) -> str:
    """Stable id of a timeline file: its POSIX path relative to the content root."""
    p = Path(path)
    if root is not None and p.is_absolute():
        p = p.relative_to(root)
    return PurePosixPath(*p.parts).as_posix()


class TimelineLoader:
    """Reads and writes timeline files using an action registry for payloads.

    Args:
        registry: Registry resolving action tags.
        root: Content root; timeline ids are paths relative to it.
    """

    def __init__(self, registry: ActionRegistry, root: str | Path = ".") -> None:
        self.registry = registry
        self.root = Path(root)

    # Loading

    def load(self, path: str | Path) -> Timeline:
        """Load a timeline file.

        Raises:
            ContentError: If the file cannot be read or its content is invalid.
        """
        tl_id = timeline_id(path, self.root)
        try:
            text = (self.root / tl_id).read_text(encoding="utf-8")
        except OSError as e:
            raise ContentError(f"cannot read timeline: {e}", tl_id) from e
        return self.loads(text, tl_id)

    def loads(self, text: str, timeline_id: str = "<string>") -> Timeline:
        """Parse timeline JSON text. ``timeline_id`` names the source in errors."""
        try:
            data = json.loads(text, object_pairs_hook=JsonObject.from_pairs)
        except json.JSONDecodeError as e:
            raise ContentError(f"malformed JSON: {e}", timeline_id) from e
        return _TimelineReader(self.registry, timeline_id).read(data)

    # Writing

    def dump(self, timeline: Timeline) -> dict[str, Any]:
        """Convert a timeline to JSON-compatible data, disabled flags included.

        Happenings groups are returned as JsonObject so repeated tags survive
        ``dumps``; plain ``json.dumps`` keeps only the last of them.
        """
        return {
            "branch_from": _dump_point(timeline.branch_from),
            "moments": {str(t): self._dump_moment(m) for t, m in timeline.moments.items()},
            "merge_into": _dump_point(timeline.merge_into),
        }

    def dumps(self, timeline: Timeline, indent: int | None = 2) -> str:
        return _encode(self.dump(timeline), indent, 0)

    def save(self, timeline: Timeline, path: str | Path) -> None:
        target = self.root / timeline_id(path, self.root)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.dumps(timeline) + "\n", encoding="utf-8")

    def _dump_moment(self, moment: Moment) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if moment.label is not None:
            data["label"] = moment.label
        if moment.desc is not None:
            data["desc"] = moment.desc
        if moment.disabled:
            data["disabled"] = True
        data["happenings"] = [self._dump_happenings(h) for h in moment.happenings]
        return data

    def _dump_happenings(self, group: Happenings) -> JsonObject:
        pairs: list[tuple[str, Any]] = []
        if group.label is not None:
            pairs.append((LABEL_KEY, group.label))
        if group.disabled:
            pairs.append((DISABLED_KEY, True))
        pairs.extend(self.registry.encode_list(group.actions))
        return JsonObject.from_pairs(pairs)


class _TimelineReader:
    """Validates decoded JSON for one file, tracking where errors occur."""

    def __init__(self, registry: ActionRegistry, path: str) -> None:
        self.registry = registry
        self.path = path

    def fail(self, message: str) -> ContentError:
        return ContentError(message, self.path)

    def read(self, data: Any) -> Timeline:
        if not isinstance(data, dict):
            raise self.fail("timeline must be a JSON object")
        unknown = set(data) - _TIMELINE_FIELDS
        if unknown:
            raise self.fail(f"unknown timeline field(s): {', '.join(sorted(unknown))}")

        timeline = Timeline(
            branch_from=self.read_point(data.get("branch_from"), "branch_from"),
            merge_into=self.read_point(data.get("merge_into"), "merge_into"),
        )
        moments = data.get("moments", JsonObject.from_pairs([]))
        if not isinstance(moments, JsonObject):
            raise self.fail("`moments` must be an object keyed by loop time")

        seen: dict[LoopTime, str] = {}
        for key, raw in moments.pairs:
            time = self.read_time(key, "moment key")
            if time in seen:
                logger.warning(
                    "%s: duplicate moment key %r (same time as %r); the later one wins",
                    self.path,
                    key,
                    seen[time],
                )
            seen[time] = key
            timeline.insert(time, self.read_moment(raw, key))
        return timeline

    def read_time(self, value: Any, what: str) -> LoopTime:
        try:
            return LoopTime.coerce(value)
        except (LoopTimeParseError, ValueError) as e:
            raise self.fail(f"bad {what} {value!r}: {e}") from e

    def read_point(self, value: Any, what: str) -> TimePoint | None:
        if value is None:
            return None
        if not (isinstance(value, list) and len(value) == 2 and isinstance(value[0], str)):
            raise self.fail(f"`{what}` must be [timeline, time], got {value!r}")
        return TimePoint(value[0], self.read_time(value[1], what))

    def read_moment(self, raw: Any, key: str) -> Moment:
        where = f"moment {key}"
        if not isinstance(raw, dict):
            raise self.fail(f"{where}: must be an object")
        unknown = set(raw) - _MOMENT_FIELDS
        if unknown:
            raise self.fail(f"{where}: unknown field(s): {', '.join(sorted(unknown))}")
        label = raw.get("label")
        if label is not None:
            where = f"moment {key} ({label})"
        desc = raw.get("desc")
        disabled = raw.get("disabled", False)
        happenings = raw.get("happenings", [])
        if label is not None and not isinstance(label, str):
            raise self.fail(f"{where}: `label` must be a string")
        if desc is not None and not isinstance(desc, str):
            raise self.fail(f"{where}: `desc` must be a string")
        if not isinstance(disabled, bool):
            raise self.fail(f"{where}: `disabled` must be a boolean")
        if not isinstance(happenings, list):
            raise self.fail(f"{where}: `happenings` must be a list")
        return Moment(
            label=label,
            desc=desc,
            happenings=[
                self.read_happenings(group, f"{where}, happenings #{i}")
                for i, group in enumerate(happenings)
            ],
            disabled=disabled,
        )

    def read_happenings(self, raw: Any, where: str) -> Happenings:
        if not isinstance(raw, JsonObject):
            raise self.fail(f"{where}: must be an object of action tags")
        label = raw.get(LABEL_KEY)
        disabled = raw.get(DISABLED_KEY, False)
        if label is not None and not isinstance(label, str):
            raise self.fail(f"{where}: `{LABEL_KEY}` must be a string")
        if not isinstance(disabled, bool):
            raise self.fail(f"{where}: `{DISABLED_KEY}` must be a boolean")
        if label is not None:
            where = f"{where} ({label})"
        entries = [(k, v) for k, v in raw.pairs if k not in (LABEL_KEY, DISABLED_KEY)]
        try:
            actions = self.registry.decode_list(entries, context=where)
        except ActionError as e:
            raise ContentError(str(e), self.path) from e
        return Happenings(label=label, actions=actions, disabled=disabled)


def _dump_point(point: TimePoint | None) -> list[str] | None:
    if point is None:
        return None
    return [point.timeline, str(point.time)]


def _encode(value: Any, indent: int | None, level: int) -> str:
    """json.dumps that writes JsonObject pairs verbatim, duplicates included."""
    if not isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, JsonObject):
        items = [(json.dumps(k, ensure_ascii=False), v) for k, v in value.pairs]
    elif isinstance(value, dict):
        items = [(json.dumps(k, ensure_ascii=False), v) for k, v in value.items()]
    else:
        items = [(None, v) for v in value]
    open_, close = ("[", "]") if isinstance(value, list) else ("{", "}")
    if not items:
        return open_ + close
    parts = [
        (f"{k}: " if k is not None else "") + _encode(v, indent, level + 1) for k, v in items
    ]
    if indent is None:
        return open_ + ", ".join(parts) + close
    pad = " " * (indent * (level + 1))
    return open_ + "\n" + ",\n".join(pad + p for p in parts) + "\n" + " " * (indent * level) + close
