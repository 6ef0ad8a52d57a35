"""Timelines resource: every loaded timeline, keyed by id.

Usage:
    timelines = Timelines()
    failed = timelines.load_all(loader, ["tl/intro.tl.json", "tl/area_1.tl.json"])
    timelines.validate_links()
    world.insert_resource(timelines)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from timegraph.errors import ContentError
from timegraph.timeloop.loader import TimelineLoader, timeline_id
from timegraph.timeloop.models import Timeline

logger = logging.getLogger(__name__)


class Timelines:
    """In-memory map of timeline id to Timeline."""

    def __init__(self, timelines: dict[str, Timeline] | None = None) -> None:
        self._timelines: dict[str, Timeline] = dict(timelines or {})

    def add(self, tl_id: str, timeline: Timeline) -> None:
        if tl_id in self._timelines:
            logger.info("Replacing timeline %s", tl_id)
        self._timelines[tl_id] = timeline

    def get(self, tl_id: str) -> Timeline | None:
        return self._timelines.get(tl_id)

    def __contains__(self, tl_id: object) -> bool:
        return tl_id in self._timelines

    def __len__(self) -> int:
        return len(self._timelines)

    def __iter__(self) -> Iterator[tuple[str, Timeline]]:
        return iter(list(self._timelines.items()))

    def ids(self) -> list[str]:
        return list(self._timelines)

    def load_all(self, loader: TimelineLoader, paths: Iterable[str | Path]) -> list[str]:
        """Load each file, skipping (and logging) the ones that fail.

        Returns:
            Ids of the files that failed to load.
        """
        failed: list[str] = []
        for path in paths:
            tl_id = timeline_id(path, loader.root)
            try:
                timeline = loader.load(tl_id)
            except ContentError as e:
                logger.error("Failed to load timeline %s: %s", tl_id, e)
                failed.append(tl_id)
                continue
            self.add(tl_id, timeline)
            logger.debug("Loaded %s: %s", tl_id, timeline.summary())
        return failed

    def validate_links(self) -> list[str]:
        """Warn about branch/merge pointers to unloaded timelines and link cycles.

        Returns:
            One human-readable line per problem found.
        """
        problems: list[str] = []
        for tl_id, timeline in self._timelines.items():
            links = (("branch_from", timeline.branch_from), ("merge_into", timeline.merge_into))
            for kind, point in links:
                if point is not None and point.timeline not in self._timelines:
                    problems.append(
                        f"{tl_id}: {kind} points at unloaded timeline {point.timeline}"
                    )
        for cycle in self._find_cycles():
            problems.append("link cycle: " + " -> ".join(cycle))
        for problem in problems:
            logger.warning(problem)
        return problems

    def _links(self, tl_id: str) -> list[str]:
        timeline = self._timelines[tl_id]
        return [
            p.timeline
            for p in (timeline.branch_from, timeline.merge_into)
            if p is not None and p.timeline in self._timelines
        ]

    def _find_cycles(self) -> list[list[str]]:
        """Each cycle once, as the path from its first-visited node back to it."""
        cycles: list[list[str]] = []
        done: set[str] = set()

        def visit(node: str, stack: list[str]) -> None:
            if node in stack:
                cycles.append(stack[stack.index(node) :] + [node])
                return
            if node in done:
                return
            stack.append(node)
            for nxt in self._links(node):
                visit(nxt, stack)
            stack.pop()
            done.add(node)

        for tl_id in self._timelines:
            visit(tl_id, [])
        return cycles
