"""Query functionality: archetype filters for world queries."""

from timegraph.core.query.models import Query

__all__ = [
    "Query",
]
