"""Formatter specification: declarative member selection and formatting options."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Generic, TypeVar

import structlog

from tostring.lib.compiled import CompiledFormatter
from tostring.lib.config import FormatterDefaults
from tostring.lib.errors import NotCompiledError, NullTargetError
from tostring.lib.members import MemberRef, Selector, public_members, resolve_selector
from tostring.lib.plan import build_plan

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ToStringSpec(Generic[T]):
    """Mutable, single-owner configuration of how instances of `target_type` render.

    Chain `include(...)` / option setters, then `compile()` to obtain an
    immutable `CompiledFormatter`. Compiling takes a snapshot: later changes to
    the spec never affect formatters it already produced.

    >>> spec = ToStringSpec(Point).include(lambda p: p.x).include(lambda p: p.y)
    >>> spec.compile().stringify(Point(x=1, y=2))
    'Point{x:1,y:2}'
    """

    def __init__(
        self,
        target_type: type[T],
        *,
        quote_strings: bool | None = None,
        multi_line: bool | None = None,
        order_alphabetically: bool | None = None,
        defaults: FormatterDefaults | None = None,
    ) -> None:
        options = defaults if defaults is not None else FormatterDefaults()
        if quote_strings is not None:
            options = replace(options, quote_strings=quote_strings)
        if multi_line is not None:
            options = replace(options, multi_line=multi_line)
        if order_alphabetically is not None:
            options = replace(options, order_alphabetically=order_alphabetically)

        self._target_type = target_type
        self._options = options
        self._members: list[MemberRef] = []
        self._compiled: CompiledFormatter[T] | None = None

    @property
    def target_type(self) -> type[T]:
        return self._target_type

    @property
    def options(self) -> FormatterDefaults:
        return self._options

    @property
    def members(self) -> tuple[MemberRef, ...]:
        return tuple(self._members)

    @property
    def is_compiled(self) -> bool:
        return self._compiled is not None

    def include(self, selector: Selector, *, value_type: Any = None) -> ToStringSpec[T]:
        """Append one field or property to the selection.

        `selector` is `lambda obj: obj.member`, the member name, or a property
        declared on the bound type. `value_type` declares the type of an
        instance attribute the class does not annotate. Raises
        `InvalidSelectionError` for anything else.
        """

        self._members.append(resolve_selector(self._target_type, selector, value_type))
        return self

    def include_all_public(self) -> ToStringSpec[T]:
        """Append every public field and property, inherited ones included."""

        self._members.extend(public_members(self._target_type))
        return self

    def quote_strings(self, quote_strings: bool) -> ToStringSpec[T]:
        self._options = replace(self._options, quote_strings=quote_strings)
        return self

    def multi_line(self, multi_line: bool) -> ToStringSpec[T]:
        self._options = replace(self._options, multi_line=multi_line)
        return self

    def order_alphabetically(self, order_alphabetically: bool) -> ToStringSpec[T]:
        self._options = replace(self._options, order_alphabetically=order_alphabetically)
        return self

    def line_separator(self, line_separator: str) -> ToStringSpec[T]:
        """Set the line break used by multi-line output."""

        if not line_separator:
            raise ValueError("line_separator must be a non-empty string.")
        self._options = replace(self._options, line_separator=line_separator)
        return self

    def compile(self) -> CompiledFormatter[T]:
        """Freeze the current selection and options into a new formatter."""

        plan = build_plan(self._target_type, tuple(self._members), self._options)
        formatter: CompiledFormatter[T] = CompiledFormatter.from_plan(plan)
        self._compiled = formatter
        logger.debug(
            "Compiled formatter.",
            target=plan.type_name,
            members=[step.name for step in plan.steps],
            quote_strings=self._options.quote_strings,
            multi_line=self._options.multi_line,
            order_alphabetically=self._options.order_alphabetically,
        )
        return formatter

    def stringify(self, instance: T) -> str:
        """Render `instance` with the formatter from the latest `compile()`."""

        if instance is None:
            raise NullTargetError(self._target_type)
        if self._compiled is None:
            raise NotCompiledError(self._target_type)
        return self._compiled.stringify(instance)

    def __repr__(self) -> str:
        names = ", ".join(member.name for member in self._members)
        return f"ToStringSpec({self._target_type.__name__}: [{names}])"
