"""Exception hierarchy.

Content errors fail the load of a single file. Reference errors and
invariant violations are logged by the code that detects them and never
raised across a tick.
"""

from __future__ import annotations


class TimegraphError(Exception):
    """Base class for all timegraph errors."""


class ContentError(TimegraphError):
    """Malformed or undecodable content (timeline files, trigger definitions)."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ActionError(ContentError):
    """An action entry could not be turned into a runnable action."""

    def __init__(self, message: str, tag: str, context: str | None = None) -> None:
        self.tag = tag
        self.context = context
        where = f" (in {context})" if context else ""
        super().__init__(f"{message}{where}")


class UnknownActionError(ActionError):
    """No action is registered under the tag."""

    def __init__(self, tag: str, context: str | None = None) -> None:
        super().__init__(f"No action registered for tag `{tag}`", tag, context)


class ActionDecodeError(ActionError):
    """The payload did not validate against the registered action model."""

    def __init__(self, tag: str, detail: str, context: str | None = None) -> None:
        self.detail = detail
        super().__init__(f"Failed to decode `{tag}`: {detail}", tag, context)


class NotAnActionError(ActionError):
    """The tag resolves to a type that cannot be applied to the world."""

    def __init__(self, tag: str, type_name: str, context: str | None = None) -> None:
        super().__init__(f"`{tag}` resolves to {type_name}, which has no apply()", tag, context)
