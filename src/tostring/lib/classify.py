"""Per-type rendering rules resolved once at compile time."""

from __future__ import annotations

import collections
import collections.abc
import numbers
import types
import typing
from collections.abc import Callable
from enum import StrEnum
from typing import Any, Union, cast, get_args, get_origin

from tostring.lib.types import Char

NULL_TOKEN = "null"
SEQUENCE_SEPARATOR = ", "

type Renderer = Callable[[object], str]


class RenderCategory(StrEnum):
    """Rendering rule chosen for one member from its declared type."""

    SCALAR = "scalar"
    STRING = "string"
    CHAR = "char"
    SEQUENCE = "sequence"
    OBJECT = "object"


_QUOTES: dict[RenderCategory, str] = {
    RenderCategory.STRING: '"',
    RenderCategory.CHAR: "'",
}

# Raw annotation strings left over when forward references cannot be resolved.
_NAMED_TYPES: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "complex": complex,
    "Char": Char,
    "list": list,
    "tuple": tuple,
}

# typing.List[...] and friends report these same origins.
_SEQUENCE_ORIGINS: frozenset[Any] = frozenset(
    {
        list,
        tuple,
        collections.deque,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
    }
)


def normalize_optional(annotation: Any) -> tuple[Any, bool]:
    """Return the wrapped type + whether the annotation is Optional[T]."""

    origin = get_origin(annotation)
    if origin is None:
        return annotation, False
    args = get_args(annotation)
    if origin is types.UnionType or origin is Union:
        non_none_args = [arg for arg in args if arg is not type(None)]
        if len(non_none_args) == 1 and len(non_none_args) != len(args):
            return non_none_args[0], True
    return annotation, False


def _unwrap(annotation: Any) -> Any:
    if isinstance(annotation, str):
        name = annotation.strip()
        if name.startswith(("Optional[", "typing.Optional[")) and name.endswith("]"):
            name = name.split("[", 1)[1][:-1].strip()
        name = name.removesuffix("| None").removeprefix("None |").strip()
        return _NAMED_TYPES.get(name.split("[", 1)[0], annotation)
    if get_origin(annotation) is typing.Annotated:
        annotation = get_args(annotation)[0]
    normalized, _ = normalize_optional(annotation)
    if isinstance(normalized, typing.TypeAliasType):
        return _unwrap(normalized.__value__)
    return normalized


def classify(value_type: Any) -> RenderCategory:
    """Pick the render category for a declared member type."""

    normalized = _unwrap(value_type)
    if normalized is Char:
        return RenderCategory.CHAR
    # Any other NewType renders like the type it wraps.
    while isinstance(normalized, typing.NewType):
        normalized = normalized.__supertype__

    origin = get_origin(normalized)
    if origin is not None:
        if origin in _SEQUENCE_ORIGINS:
            return RenderCategory.SEQUENCE
        return RenderCategory.OBJECT

    if not isinstance(normalized, type):
        return RenderCategory.OBJECT
    if issubclass(normalized, str):
        return RenderCategory.STRING
    if issubclass(normalized, (bytes, bytearray)):
        return RenderCategory.OBJECT
    if issubclass(normalized, numbers.Number):
        return RenderCategory.SCALAR
    if normalized in _SEQUENCE_ORIGINS or issubclass(normalized, (list, tuple, collections.deque)):
        return RenderCategory.SEQUENCE
    return RenderCategory.OBJECT


def quote_for(category: RenderCategory, quote_strings: bool) -> str:
    """Return the quote character wrapped around values of `category`, or ''."""

    if not quote_strings:
        return ""
    return _QUOTES.get(category, "")


def _render_text(value: object) -> str:
    return str(value)


def _render_sequence(value: object) -> str:
    items = cast("collections.abc.Iterable[object]", value)
    rendered = (NULL_TOKEN if item is None else str(item) for item in items)
    return "{" + SEQUENCE_SEPARATOR.join(rendered) + "}"


_RENDERERS: dict[RenderCategory, Renderer] = {
    RenderCategory.SCALAR: _render_text,
    RenderCategory.STRING: _render_text,
    RenderCategory.CHAR: _render_text,
    RenderCategory.SEQUENCE: _render_sequence,
    RenderCategory.OBJECT: _render_text,
}


def renderer_for(category: RenderCategory) -> Renderer:
    """Return the value renderer for `category`."""

    return _RENDERERS[category]
