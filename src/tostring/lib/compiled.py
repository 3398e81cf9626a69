"""Compiled formatter: the reusable instance -> str routine built from a render plan."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from tostring.lib.classify import NULL_TOKEN, Renderer, renderer_for
from tostring.lib.errors import NullTargetError
from tostring.lib.members import Accessor
from tostring.lib.plan import RenderPlan

T = TypeVar("T")

INDENT = "  "


@dataclass(frozen=True, slots=True)
class _CompiledStep:
    # Separator, optional line break + indent, and "name:" pre-joined.
    label: str
    quote: str
    read: Accessor
    render: Renderer


def _compile_steps(plan: RenderPlan) -> tuple[_CompiledStep, ...]:
    options = plan.options
    compiled: list[_CompiledStep] = []
    for index, step in enumerate(plan.steps):
        label = "," if index else ""
        if options.multi_line:
            label += options.line_separator + INDENT
        label += f"{step.name}:"
        compiled.append(
            _CompiledStep(
                label=label,
                quote=step.quote,
                read=step.member.accessor,
                render=renderer_for(step.category),
            )
        )
    return tuple(compiled)


@dataclass(frozen=True, slots=True, eq=False)
class CompiledFormatter(Generic[T]):
    """Immutable, reentrant formatter for instances of one type.

    All type-level decisions live in `plan` and the pre-rendered step table;
    each call only reads member values and joins a call-local buffer, so one
    formatter can be shared freely between threads.
    """

    plan: RenderPlan
    head: str = field(repr=False)
    tail: str = field(repr=False)
    steps: tuple[_CompiledStep, ...] = field(repr=False)

    @classmethod
    def from_plan(cls, plan: RenderPlan) -> CompiledFormatter[T]:
        options = plan.options
        if options.multi_line:
            head = f"{plan.type_name}{options.line_separator}{{"
            tail = f"{options.line_separator}}}"
        else:
            head = f"{plan.type_name}{{"
            tail = "}"
        return cls(plan=plan, head=head, tail=tail, steps=_compile_steps(plan))

    @property
    def type_name(self) -> str:
        return self.plan.type_name

    def stringify(self, instance: T) -> str:
        """Render `instance` using the compiled plan."""

        if instance is None:
            raise NullTargetError(self.plan.target_type)

        buffer = [self.head]
        for step in self.steps:
            buffer.append(step.label)
            value = step.read(instance)
            if value is None:
                buffer.append(NULL_TOKEN)
                continue
            buffer.append(step.quote)
            buffer.append(step.render(value))
            buffer.append(step.quote)
        buffer.append(self.tail)
        return "".join(buffer)

    def __call__(self, instance: T) -> str:
        return self.stringify(instance)
