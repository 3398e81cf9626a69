"""CLI command handlers for inspecting member discovery, render plans and defaults."""

from __future__ import annotations

import importlib
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Annotated, Any

from cyclopts import Parameter

from tostring.cli.output import FormatContext, tabular
from tostring.lib.classify import classify
from tostring.lib.config import FormatterDefaults, load_defaults
from tostring.lib.members import MemberRef, declared_members, public_members
from tostring.lib.spec import ToStringSpec

Emitter = Callable[[Any], None]


def load_target(target: str) -> type:
    """Import `MODULE:QUALNAME` and return the class it names."""

    module_name, separator, qualname = target.partition(":")
    if not separator or not module_name or not qualname:
        raise ValueError(f"Expected MODULE:TYPE, got '{target}'.")
    resolved: object = importlib.import_module(module_name)
    for part in qualname.split("."):
        resolved = getattr(resolved, part)
    if not isinstance(resolved, type):
        raise ValueError(f"'{target}' does not name a class.")
    return resolved


def _type_label(value_type: Any) -> str:
    if value_type is None:
        return "-"
    if isinstance(value_type, type):
        return value_type.__name__
    return str(value_type).replace("typing.", "")


@dataclass(frozen=True, slots=True)
class MemberRow:
    name: str
    kind: str
    declared_type: str
    category: str
    owner: str


def _member_row(member: MemberRef) -> MemberRow:
    return MemberRow(
        name=member.name,
        kind=member.kind,
        declared_type=_type_label(member.value_type),
        category=classify(member.value_type),
        owner=member.owner.__name__,
    )


@dataclass(frozen=True, slots=True)
class MembersOutput:
    target: str
    members: tuple[MemberRow, ...]

    def format_text(self, ctx: FormatContext | None = None) -> str:
        if not self.members:
            return f"{self.target}: no members"
        header = ["NAME", "KIND", "TYPE", "CATEGORY"]
        rows = [[row.name, row.kind, row.declared_type, row.category] for row in self.members]
        if ctx is not None and ctx.verbosity > 0:
            header.append("OWNER")
            for cells, row in zip(rows, self.members, strict=True):
                cells.append(row.owner)
        return tabular(rows, header=header)


@dataclass(frozen=True, slots=True)
class PlanStepRow:
    position: int
    name: str
    category: str
    quoted: bool


@dataclass(frozen=True, slots=True)
class PlanOutput:
    target: str
    options: FormatterDefaults
    steps: tuple[PlanStepRow, ...]

    def format_text(self, ctx: FormatContext | None = None) -> str:
        _ = ctx
        flags = (
            f"quote_strings={str(self.options.quote_strings).lower()} "
            f"multi_line={str(self.options.multi_line).lower()} "
            f"order_alphabetically={str(self.options.order_alphabetically).lower()}"
        )
        rows = [
            [str(row.position), row.name, row.category, "yes" if row.quoted else "no"]
            for row in self.steps
        ]
        table = tabular(rows, header=["#", "MEMBER", "CATEGORY", "QUOTED"])
        return f"{self.target} ({flags})\n{table}"


@dataclass(frozen=True, slots=True)
class DefaultsOutput:
    source: str
    defaults: FormatterDefaults

    def format_text(self, ctx: FormatContext | None = None) -> str:
        _ = ctx
        rows = [
            ["quote_strings", str(self.defaults.quote_strings).lower()],
            ["multi_line", str(self.defaults.multi_line).lower()],
            ["order_alphabetically", str(self.defaults.order_alphabetically).lower()],
            ["line_separator", repr(self.defaults.line_separator)],
            ["source", self.source],
        ]
        return tabular(rows)


def _members(
    emit: Emitter,
    target: str,
    include_private: Annotated[
        bool,
        Parameter(name="--all", help="Also list non-public members."),
    ] = False,
) -> None:
    """List the members a spec can select on TARGET (MODULE:TYPE)."""

    target_type = load_target(target)
    members = (
        list(declared_members(target_type).values())
        if include_private
        else public_members(target_type)
    )
    emit(MembersOutput(target=target, members=tuple(_member_row(member) for member in members)))


def _plan(
    emit: Emitter,
    target: str,
    alphabetical: Annotated[
        bool,
        Parameter(name="--alphabetical", help="Order members alphabetically."),
    ] = False,
    multi_line: Annotated[
        bool,
        Parameter(name="--multi-line", help="Use the multi-line layout."),
    ] = False,
    no_quote: Annotated[
        bool,
        Parameter(name="--no-quote", help="Do not quote string and char values."),
    ] = False,
    config: Annotated[
        Path | None,
        Parameter(name="--config", help="TOML file with formatter defaults."),
    ] = None,
) -> None:
    """Show the render plan include_all_public() compiles to for TARGET."""

    spec = ToStringSpec(load_target(target), defaults=load_defaults(config))
    spec.include_all_public()
    if alphabetical:
        spec.order_alphabetically(True)
    if multi_line:
        spec.multi_line(True)
    if no_quote:
        spec.quote_strings(False)

    plan = spec.compile().plan
    steps = tuple(
        PlanStepRow(position=index, name=step.name, category=step.category, quoted=step.quoted)
        for index, step in enumerate(plan.steps, start=1)
    )
    emit(PlanOutput(target=target, options=plan.options, steps=steps))


def _config(
    emit: Emitter,
    path: Annotated[
        Path | None,
        Parameter(name="--path", help="TOML file to read instead of ./pyproject.toml."),
    ] = None,
) -> None:
    """Show the resolved formatter defaults."""

    source = str(path) if path is not None else "pyproject.toml [tool.tostring]"
    emit(DefaultsOutput(source=source, defaults=load_defaults(path)))


def register_inspect_commands(app: Any, emit: Emitter) -> set[str]:
    handlers: dict[str, tuple[Callable[..., None], str]] = {
        "members": (_members, "List selectable members of a type."),
        "plan": (_plan, "Show the compiled render plan of a type."),
        "config": (_config, "Show resolved formatter defaults."),
    }

    registered: set[str] = set()
    for name, (handler, description) in handlers.items():
        command = partial(handler, emit)
        command.__name__ = f"cmd_{name}"  # type: ignore[attr-defined]
        app.command(command, name=name, help=description)
        registered.add(name)
    return registered
