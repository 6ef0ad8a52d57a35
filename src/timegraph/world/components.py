"""Hierarchy and naming components understood by the world itself."""

from __future__ import annotations

from dataclasses import dataclass

from timegraph.core.component import component
from timegraph.core.identity import EntityId


@component
@dataclass(slots=True)
class Name:
    """Human-readable entity name, used for lookups by content actions."""

    value: str


@component
@dataclass(slots=True)
class Parent:
    """Links a child entity to its parent for recursive despawn."""

    entity: EntityId
