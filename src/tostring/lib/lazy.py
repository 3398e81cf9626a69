"""One-time, lazily compiled formatters for self-describing types."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from tostring.lib.compiled import CompiledFormatter
from tostring.lib.spec import ToStringSpec

T = TypeVar("T")
C = TypeVar("C")

type FormatterFactory = Callable[[], CompiledFormatter[Any] | ToStringSpec[Any]]


class LazyFormatter(Generic[T]):
    """Caller-owned formatter singleton compiled on first use.

    Intended as a module-level constant next to the class it formats, so the
    factory may reference the class before it is fully defined. The factory
    runs exactly once; a factory returning a spec is compiled.
    """

    __slots__ = ("_factory", "_formatter", "_lock")

    def __init__(self, factory: FormatterFactory) -> None:
        self._factory = factory
        self._formatter: CompiledFormatter[T] | None = None
        self._lock = threading.Lock()

    @property
    def formatter(self) -> CompiledFormatter[T]:
        formatter = self._formatter
        if formatter is not None:
            return formatter
        with self._lock:
            if self._formatter is None:
                built = self._factory()
                if isinstance(built, ToStringSpec):
                    built = built.compile()
                self._formatter = built
            return self._formatter

    def __call__(self, instance: T) -> str:
        return self.formatter.stringify(instance)


def format_with(
    configure: Callable[[ToStringSpec[C]], ToStringSpec[C]],
) -> Callable[[type[C]], type[C]]:
    """Class decorator installing a `__str__` backed by a lazily compiled spec.

    `configure` receives a fresh spec bound to the decorated class.
    """

    def decorate(cls: type[C]) -> type[C]:
        lazy: LazyFormatter[C] = LazyFormatter(lambda: configure(ToStringSpec(cls)))

        def __str__(self: C) -> str:
            return lazy(self)

        cls.__str__ = __str__  # type: ignore[method-assign,assignment]
        cls.__tostring_formatter__ = lazy  # type: ignore[attr-defined]
        return cls

    return decorate
