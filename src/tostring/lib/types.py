"""Stable domain newtypes."""

from typing import NewType

# Python has no character type; annotate one-character members with `Char`
# to have them rendered in single quotes.
Char = NewType("Char", str)
MemberName = NewType("MemberName", str)
TypeName = NewType("TypeName", str)
