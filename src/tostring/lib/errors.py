"""Formatter error taxonomy."""

from __future__ import annotations


class ToStringError(Exception):
    """Base class for all formatter errors."""


class InvalidSelectionError(ToStringError, ValueError):
    """A member selection was not a direct field or property access on the bound type."""

    def __init__(self, target_type: type, detail: str) -> None:
        self.target_type = target_type
        self.detail = detail
        super().__init__(f"Invalid member selection for {target_type.__name__}: {detail}")


class NotCompiledError(ToStringError, RuntimeError):
    """stringify() was called before compile() produced a render plan."""

    def __init__(self, target_type: type) -> None:
        self.target_type = target_type
        super().__init__(
            f"ToStringSpec not compiled: call compile() before stringify() "
            f"({target_type.__name__})"
        )


class NullTargetError(ToStringError, ValueError):
    """stringify() was called with None instead of an instance."""

    def __init__(self, target_type: type) -> None:
        self.target_type = target_type
        super().__init__(f"Cannot stringify None as {target_type.__name__}")
