"""Core tostring library exports."""

from tostring.lib.classify import RenderCategory
from tostring.lib.compiled import CompiledFormatter
from tostring.lib.config import FormatterDefaults, load_defaults
from tostring.lib.errors import (
    InvalidSelectionError,
    NotCompiledError,
    NullTargetError,
    ToStringError,
)
from tostring.lib.lazy import LazyFormatter, format_with
from tostring.lib.logging import configure_logging
from tostring.lib.members import MemberKind, MemberRef
from tostring.lib.plan import RenderPlan, RenderStep
from tostring.lib.spec import ToStringSpec
from tostring.lib.types import Char

__all__ = [
    "Char",
    "CompiledFormatter",
    "FormatterDefaults",
    "InvalidSelectionError",
    "LazyFormatter",
    "MemberKind",
    "MemberRef",
    "NotCompiledError",
    "NullTargetError",
    "RenderCategory",
    "RenderPlan",
    "RenderStep",
    "ToStringError",
    "ToStringSpec",
    "configure_logging",
    "format_with",
    "load_defaults",
]
