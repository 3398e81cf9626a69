"""Render plan derivation: ordering and classification of selected members."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from tostring.lib.classify import RenderCategory, classify, quote_for
from tostring.lib.config import FormatterDefaults
from tostring.lib.members import MemberRef
from tostring.lib.types import MemberName, TypeName


@dataclass(frozen=True, slots=True)
class RenderStep:
    """Rendering instruction for one selected member."""

    member: MemberRef
    category: RenderCategory
    quote: str = ""

    @property
    def name(self) -> MemberName:
        return self.member.name

    @property
    def quoted(self) -> bool:
        return bool(self.quote)


@dataclass(frozen=True, slots=True)
class RenderPlan:
    """Ordered render steps plus the option snapshot they were derived with."""

    target_type: type
    type_name: TypeName
    steps: tuple[RenderStep, ...]
    options: FormatterDefaults


def ordering_key(member: MemberRef) -> str:
    """Ordinal, case-insensitive sort key for a member name."""

    return member.name.upper()


def build_plan(
    target_type: type,
    members: Sequence[MemberRef],
    options: FormatterDefaults,
) -> RenderPlan:
    """Derive the render plan for `members` under `options`.

    Insertion order is kept unless alphabetical ordering is requested.
    """

    ordered = list(members)
    if options.order_alphabetically:
        ordered.sort(key=ordering_key)

    steps: list[RenderStep] = []
    for member in ordered:
        category = classify(member.value_type)
        steps.append(
            RenderStep(
                member=member,
                category=category,
                quote=quote_for(category, options.quote_strings),
            )
        )

    return RenderPlan(
        target_type=target_type,
        type_name=TypeName(target_type.__name__),
        steps=tuple(steps),
        options=options,
    )
