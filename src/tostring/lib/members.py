"""Member introspection and selector resolution for bound types."""

from __future__ import annotations

import dataclasses
import functools
import inspect
import sys
import types
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from operator import attrgetter
from typing import Any, ClassVar, get_origin, get_type_hints

import structlog

from tostring.lib.errors import InvalidSelectionError
from tostring.lib.types import MemberName

logger = structlog.get_logger(__name__)

type Accessor = Callable[[object], object]
type Selector = Callable[[Any], object] | str | property | functools.cached_property[Any]

_PROPERTY_TYPES = (property, functools.cached_property)
_ABSENT = object()


class MemberKind(StrEnum):
    """How a member is declared on its owning class."""

    FIELD = "field"
    PROPERTY = "property"


@dataclass(frozen=True, slots=True)
class MemberRef:
    """One field or property of a bound type.

    Identity is the declaration (owner, name, kind), so a base-class property
    and the subclass member shadowing it are distinct references.
    """

    owner: type
    name: MemberName
    kind: MemberKind
    accessor: Accessor = field(compare=False, repr=False)
    value_type: Any = field(default=None, compare=False)

    @property
    def is_public(self) -> bool:
        return not self.name.startswith("_")

    def read(self, instance: object) -> object:
        return self.accessor(instance)


def _resolve_hints(obj: object) -> dict[str, Any]:
    try:
        return get_type_hints(obj)
    except (NameError, TypeError, AttributeError):
        # Unresolvable forward references fall back to the raw annotations.
        logger.debug("Falling back to raw annotations", owner=getattr(obj, "__qualname__", obj))
        return {}


def _resolve_annotation(owner: type, annotation: Any) -> Any:
    """Evaluate one raw string annotation in the namespace of `owner`.

    Used when the class as a whole cannot be resolved, so one bad forward
    reference does not hide the types of its sibling fields.
    """

    if not isinstance(annotation, str):
        return annotation
    module = sys.modules.get(owner.__module__)
    holder = types.SimpleNamespace(__annotations__={"value": annotation})
    try:
        hints = get_type_hints(
            holder,
            globalns=dict(vars(module)) if module is not None else {},
            localns=dict(vars(owner)),
        )
    except (NameError, TypeError, AttributeError, SyntaxError):
        return annotation
    return hints.get("value", annotation)


def _is_class_level(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    if annotation is dataclasses.InitVar or isinstance(annotation, dataclasses.InitVar):
        return True
    if isinstance(annotation, str):
        head = annotation.strip().split("[", 1)[0]
        return head in {"ClassVar", "typing.ClassVar", "InitVar", "dataclasses.InitVar"}
    return False


def _descriptor_accessor(descriptor: property | functools.cached_property[Any]) -> Accessor:
    def read(instance: object) -> object:
        return descriptor.__get__(instance, type(instance))

    return read


def _property_type(descriptor: property | functools.cached_property[Any]) -> Any:
    getter = descriptor.func if isinstance(descriptor, functools.cached_property) else descriptor.fget
    if getter is None:
        return None
    hints = _resolve_hints(getter)
    if "return" in hints:
        return hints["return"]
    return inspect.get_annotations(getter).get("return")


def _property_ref(
    owner: type,
    name: str,
    descriptor: property | functools.cached_property[Any],
) -> MemberRef | None:
    if isinstance(descriptor, property) and descriptor.fget is None:
        return None
    return MemberRef(
        owner=owner,
        name=MemberName(name),
        kind=MemberKind.PROPERTY,
        accessor=_descriptor_accessor(descriptor),
        value_type=_property_type(descriptor),
    )


def declared_members(target_type: type) -> dict[str, MemberRef]:
    """Return the instance fields and properties visible on `target_type`.

    Classes are walked base-first. Within one class, annotated fields come
    before properties. A name redeclared by a subclass keeps its original
    position but resolves to the subclass declaration.
    """

    hints = _resolve_hints(target_type)
    members: dict[str, MemberRef] = {}
    for klass in reversed(target_type.__mro__):
        if klass is object:
            continue
        for name, raw_annotation in inspect.get_annotations(klass).items():
            if _is_class_level(raw_annotation):
                continue
            if name in hints:
                annotation = hints[name]
            else:
                annotation = _resolve_annotation(klass, raw_annotation)
            if _is_class_level(annotation):
                continue
            members[name] = MemberRef(
                owner=klass,
                name=MemberName(name),
                kind=MemberKind.FIELD,
                accessor=attrgetter(name),
                value_type=annotation,
            )
        for name, attribute in vars(klass).items():
            if not isinstance(attribute, _PROPERTY_TYPES):
                continue
            ref = _property_ref(klass, name, attribute)
            if ref is not None:
                members[name] = ref
    return members


def public_members(target_type: type) -> list[MemberRef]:
    """Return the public members of `target_type` in declaration order."""

    return [member for member in declared_members(target_type).values() if member.is_public]


class _AccessMarker:
    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name


class _SelectionProbe:
    """Stand-in instance that records every attribute read made by a selector."""

    __slots__ = ("_accessed",)

    def __init__(self, accessed: list[str]) -> None:
        object.__setattr__(self, "_accessed", accessed)

    def __getattribute__(self, name: str) -> _AccessMarker:
        object.__getattribute__(self, "_accessed").append(name)
        return _AccessMarker(name)


def _name_from_callable(target_type: type, selector: Callable[[Any], object]) -> str:
    accessed: list[str] = []
    try:
        result = selector(_SelectionProbe(accessed))
    except Exception as error:
        raise InvalidSelectionError(
            target_type,
            f"selector is not a direct member access ({type(error).__name__}: {error})",
        ) from error

    if not isinstance(result, _AccessMarker):
        raise InvalidSelectionError(
            target_type,
            f"selector returned {type(result).__name__} instead of a member access",
        )
    if accessed != [result.name]:
        raise InvalidSelectionError(
            target_type,
            f"selector must access exactly one member, accessed {accessed}",
        )
    return result.name


def _ref_for_descriptor(
    target_type: type,
    descriptor: property | functools.cached_property[Any],
) -> MemberRef:
    for klass in target_type.__mro__:
        for name, attribute in vars(klass).items():
            if attribute is not descriptor:
                continue
            ref = _property_ref(klass, name, descriptor)
            if ref is None:
                raise InvalidSelectionError(target_type, f"property '{name}' has no getter")
            return ref
    raise InvalidSelectionError(target_type, "property is not declared on the bound type")


def _can_hold_instance_value(static: object) -> bool:
    # Plain class defaults and slot descriptors can back an instance attribute.
    # Methods and getter-less properties cannot.
    if static is _ABSENT:
        return True
    if isinstance(static, _PROPERTY_TYPES):
        return False
    if callable(static):
        return False
    descriptor_type = type(static)
    return not hasattr(descriptor_type, "__get__") or hasattr(descriptor_type, "__set__")


def _ref_for_name(target_type: type, name: str, value_type: Any) -> MemberRef:
    if not name.isidentifier():
        raise InvalidSelectionError(target_type, f"'{name}' is not a member name")

    member = declared_members(target_type).get(name)
    if member is None:
        if not _can_hold_instance_value(inspect.getattr_static(target_type, name, _ABSENT)):
            raise InvalidSelectionError(
                target_type,
                f"'{name}' is a method or descriptor, not a field or property",
            )
        if value_type is None:
            raise InvalidSelectionError(
                target_type,
                f"'{name}' is not a declared field or property; "
                "annotate it or pass value_type=",
            )
        return MemberRef(
            owner=target_type,
            name=MemberName(name),
            kind=MemberKind.FIELD,
            accessor=attrgetter(name),
            value_type=value_type,
        )
    if value_type is not None:
        return dataclasses.replace(member, value_type=value_type)
    return member


def resolve_selector(target_type: type, selector: Selector, value_type: Any = None) -> MemberRef:
    """Resolve one member selector against `target_type`.

    Accepts a one-argument callable performing a single attribute access
    (`lambda a: a.field`), a member name, or a property object declared on
    the bound type.
    """

    if isinstance(selector, _PROPERTY_TYPES):
        member = _ref_for_descriptor(target_type, selector)
        if value_type is not None:
            return dataclasses.replace(member, value_type=value_type)
        return member
    if isinstance(selector, str):
        return _ref_for_name(target_type, selector, value_type)
    if callable(selector):
        return _ref_for_name(target_type, _name_from_callable(target_type, selector), value_type)
    raise InvalidSelectionError(
        target_type,
        f"expected a selector callable, member name or property, got {type(selector).__name__}",
    )
