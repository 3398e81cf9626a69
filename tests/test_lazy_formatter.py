"""Lazy singleton formatter tests."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from tostring import CompiledFormatter, LazyFormatter, ToStringSpec, format_with


class Point:
    x: int
    y: int

    def __init__(self, x: int = 0, y: int = 0) -> None:
        self.x = x
        self.y = y


@format_with(lambda spec: spec.include_all_public().order_alphabetically(True))
class Tagged:
    zeta: str
    alpha: int

    def __init__(self) -> None:
        self.zeta = "z"
        self.alpha = 1


def test_factory_runs_once() -> None:
    calls: list[int] = []

    def build() -> CompiledFormatter[Point]:
        calls.append(1)
        return ToStringSpec(Point).include_all_public().compile()

    lazy: LazyFormatter[Point] = LazyFormatter(build)
    assert calls == []

    assert lazy(Point(1, 2)) == "Point{x:1,y:2}"
    assert lazy(Point(3, 4)) == "Point{x:3,y:4}"
    assert calls == [1]
    assert lazy.formatter is lazy.formatter


def test_factory_returning_spec_is_compiled() -> None:
    lazy: LazyFormatter[Point] = LazyFormatter(lambda: ToStringSpec(Point).include("y"))

    assert isinstance(lazy.formatter, CompiledFormatter)
    assert lazy(Point(5, 6)) == "Point{y:6}"


def test_concurrent_first_use_builds_once() -> None:
    calls: list[int] = []
    gate = threading.Barrier(8)

    def build() -> ToStringSpec[Point]:
        calls.append(1)
        return ToStringSpec(Point).include("x")

    lazy: LazyFormatter[Point] = LazyFormatter(build)

    def worker(value: int) -> str:
        gate.wait()
        return lazy(Point(value, 0))

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(worker, range(8)))

    assert results == [f"Point{{x:{value}}}" for value in range(8)]
    assert calls == [1]


def test_format_with_installs_str() -> None:
    assert str(Tagged()) == 'Tagged{alpha:1,zeta:"z"}'
    assert isinstance(Tagged.__tostring_formatter__, LazyFormatter)  # type: ignore[attr-defined]
