"""Shared type aliases."""

from typing import TypeVar

from typing_extensions import TypeAliasType

T = TypeVar("T")

Copy = TypeAliasType("Copy", T, type_params=(T,))
"""A deep copy detached from the world.

Returned by ``World.get_copy`` and ``World.query_copies``; edits only land
in the world through ``world.set(entity, component)``.
"""
