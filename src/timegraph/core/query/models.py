"""Query models.

Usage:
    # All entities with these components
    world.query(Transform, Trigger)

    # Archetype filtering: portals that are not part of the static environment
    world.query(Query(PortalTo).excluding(EnvRoot))
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Query:
    """Component archetype filter. Each builder call returns a new Query.

    Matched tuples carry the ``required`` components in declaration order;
    ``excluded`` types only filter.
    """

    required: tuple[type, ...] = ()
    excluded: frozenset[type] = field(default=frozenset())

    def __init__(self, *required: type, excluded: frozenset[type] = frozenset()):
        object.__setattr__(self, "required", required)
        object.__setattr__(self, "excluded", frozenset(excluded))

    def having(self, *types: type) -> Query:
        return Query(*self.required, *types, excluded=self.excluded)

    def excluding(self, *types: type) -> Query:
        return Query(*self.required, excluded=self.excluded | frozenset(types))

    def matches_archetype(self, has: frozenset[type]) -> bool:
        """True when ``has`` holds every required type and no excluded one."""
        return has.issuperset(self.required) and self.excluded.isdisjoint(has)
