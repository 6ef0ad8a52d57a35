"""Action registry, decorator and list helpers.

Usage:
    @action("Log")
    class Log(BaseModel):
        msg: str

        def apply(self, world: World) -> None:
            logger.info(self.msg)

    registry = get_registry()
    entry = registry.decode("Log", {"msg": "hello"}, context="moment 5s")
    entry.apply(world)
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable
from typing import Any, TypeVar, cast

from pydantic import BaseModel, ValidationError

from timegraph.core.action.models import Action
from timegraph.errors import ActionDecodeError, NotAnActionError, UnknownActionError

ModelT = TypeVar("ModelT", bound=type[BaseModel])


class ActionRegistry:
    """Maps serialized type tags to decodable models.

    Any pydantic model may be registered under a tag; only models exposing
    ``apply(world)`` decode into actions. Registration is bidirectional so
    actions can be encoded back to ``(tag, payload)``.
    """

    def __init__(self) -> None:
        """Initialize empty action registry."""
        self._by_tag: dict[str, type[BaseModel]] = {}
        self._by_type: dict[type[BaseModel], str] = {}

    def register(self, tag: str, cls: type[BaseModel]) -> type[BaseModel]:
        """Register a model under a tag.

        Args:
            tag: Serialized type tag, e.g. ``"ModifyTimeline"``.
            cls: Pydantic model decoding the tag's payload.

        Returns:
            The registered class, unchanged.

        Raises:
            RuntimeError: If the tag is already bound to a different class.
            TypeError: If the class is not a pydantic model.
        """
        if not (isinstance(cls, type) and issubclass(cls, BaseModel)):
            raise TypeError(f"Action {cls!r} for tag `{tag}` must be a pydantic model")
        existing = self._by_tag.get(tag)
        if existing is not None and existing is not cls:
            raise RuntimeError(
                f"Action tag collision: `{tag}` is bound to {existing.__qualname__}, "
                f"cannot rebind to {cls.__qualname__}"
            )
        self._by_tag[tag] = cls
        self._by_type[cls] = tag
        return cls

    def get_type(self, tag: str) -> type[BaseModel] | None:
        """Get the model registered under a tag, or None."""
        return self._by_tag.get(tag)

    def tag_of(self, cls: type) -> str | None:
        """Get the tag a model was registered under, or None."""
        return self._by_type.get(cls)

    def is_registered(self, tag: str) -> bool:
        return tag in self._by_tag

    def tags(self) -> list[str]:
        return sorted(self._by_tag)

    def decode(self, tag: str, payload: Any, context: str | None = None) -> Action:
        """Decode one serialized action.

        Args:
            tag: Serialized type tag.
            payload: Raw payload (usually a dict parsed from JSON; ``None``
                decodes as an empty payload for field-less actions).
            context: Human-readable location for error messages.

        Returns:
            A concrete action instance.

        Raises:
            UnknownActionError: No model is registered under the tag.
            ActionDecodeError: The payload failed validation.
            NotAnActionError: The registered model has no ``apply``.
        """
        cls = self._by_tag.get(tag)
        if cls is None:
            raise UnknownActionError(tag, context)
        if not callable(getattr(cls, "apply", None)):
            raise NotAnActionError(tag, cls.__qualname__, context)
        try:
            value = cls.model_validate({} if payload is None else payload)
        except ValidationError as e:
            raise ActionDecodeError(tag, _summarize(e), context) from e
        return value  # type: ignore[return-value]

    def decode_list(
        self, entries: Iterable[tuple[str, Any]], context: str | None = None
    ) -> list[Action]:
        """Decode ``(tag, payload)`` pairs in order. The first failure aborts."""
        return [self.decode(tag, payload, context) for tag, payload in entries]

    def encode(self, value: Action) -> tuple[str, Any]:
        """Encode an action to ``(tag, json-compatible payload)``.

        Raises:
            UnknownActionError: If the action's type was never registered.
        """
        tag = self._by_type.get(type(value))
        if tag is None:
            raise UnknownActionError(type(value).__qualname__)
        # only BaseModel subclasses get past register()
        model = cast(BaseModel, value)
        return tag, model.model_dump(mode="json", exclude_defaults=True)

    def encode_list(self, actions: Iterable[Action]) -> list[tuple[str, Any]]:
        return [self.encode(a) for a in actions]


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item["loc"]) or "<payload>"
        parts.append(f"{loc}: {item['msg']}")
    return "; ".join(parts)


# Module-level registry instance
_registry = ActionRegistry()


def get_registry() -> ActionRegistry:
    """Access the global action registry.

    Returns:
        The process-local ActionRegistry instance.
    """
    return _registry


def action(tag: str, registry: ActionRegistry | None = None) -> Callable[[ModelT], ModelT]:
    """Register a pydantic model as an action under ``tag``.

    Args:
        tag: Serialized type tag used in content files.
        registry: Registry to use (defaults to the global one).

    Returns:
        Class decorator returning the class unchanged.

    Raises:
        TypeError: If the class has no ``apply`` method.
    """

    def decorator(cls: ModelT) -> ModelT:
        if not callable(getattr(cls, "apply", None)):
            raise TypeError(
                f"Action {cls.__name__} must define apply(world). "
                f"Use ActionRegistry.register() for plain data types."
            )
        (registry or _registry).register(tag, cls)
        return cls

    return decorator


def clone_actions(actions: Iterable[Action]) -> list[Action]:
    """Deep, independent copy of an action list."""
    cloned: list[Action] = []
    for item in actions:
        if isinstance(item, BaseModel):
            cloned.append(item.model_copy(deep=True))  # type: ignore[arg-type]
        else:
            cloned.append(copy.deepcopy(item))
    return cloned

