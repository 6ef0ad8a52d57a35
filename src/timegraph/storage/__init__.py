"""Storage backends."""

from timegraph.storage.allocator import EntityAllocator
from timegraph.storage.local import LocalStorage
from timegraph.storage.protocol import Storage

__all__ = [
    "Storage",
    "LocalStorage",
    "EntityAllocator",
]
