"""Declarative, compiled to-string formatters."""

from tostring.lib import (
    Char,
    CompiledFormatter,
    FormatterDefaults,
    InvalidSelectionError,
    LazyFormatter,
    MemberKind,
    MemberRef,
    NotCompiledError,
    NullTargetError,
    RenderCategory,
    RenderPlan,
    RenderStep,
    ToStringError,
    ToStringSpec,
    configure_logging,
    format_with,
    load_defaults,
)

__version__ = "0.1.0"

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
    "__version__",
    "configure_logging",
    "format_with",
    "load_defaults",
]
