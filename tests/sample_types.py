"""Importable sample types for CLI inspection tests."""

from __future__ import annotations

from typing import ClassVar

from tostring import Char


class Base:
    name: str
    _secret: int

    def __init__(self, name: str = "base") -> None:
        self.name = name
        self._secret = 7


class Widget(Base):
    registry: ClassVar[dict[str, int]] = {}

    count: int
    tags: list[str]
    code: Char

    def __init__(self) -> None:
        super().__init__("widget")
        self.count = 3
        self.tags = ["a", "b"]
        self.code = Char("w")

    @property
    def label(self) -> str:
        return f"{self.name}#{self.count}"
