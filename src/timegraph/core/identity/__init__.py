"""Entity identity: generational handles and the reserved singleton entities."""

from timegraph.core.identity.models import RESERVED_ENTITIES, EntityId, SystemEntity

__all__ = [
    "RESERVED_ENTITIES",
    "EntityId",
    "SystemEntity",
]
