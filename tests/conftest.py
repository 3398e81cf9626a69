"""Shared pytest fixtures for tostring tests."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import structlog

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

PACKAGE_ROOT = Path(__file__).resolve().parents[1]


@dataclass(frozen=True, slots=True)
class CliResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


@pytest.fixture
def package_root() -> Path:
    return PACKAGE_ROOT


@pytest.fixture
def cli_env(package_root: Path) -> dict[str, str]:
    env = os.environ.copy()
    paths = [str(package_root / "src"), str(package_root / "tests")]
    existing = env.get("PYTHONPATH", "")
    if existing:
        paths.append(existing)
    env["PYTHONPATH"] = os.pathsep.join(paths)
    for name in list(env):
        if name.startswith("TOSTRING_"):
            del env[name]
    return env


@pytest.fixture
def run_tostring(
    package_root: Path, cli_env: dict[str, str], tmp_path: Path
) -> Callable[..., CliResult]:
    def _run(args: list[str], timeout: float = 30.0) -> CliResult:
        completed = subprocess.run(
            [sys.executable, "-m", "tostring", *args],
            cwd=tmp_path,
            env=cli_env,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
        return CliResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    return _run


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "TOSTRING_QUOTE_STRINGS",
        "TOSTRING_MULTI_LINE",
        "TOSTRING_ORDER_ALPHABETICALLY",
        "TOSTRING_LINE_SEPARATOR",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    structlog.reset_defaults()
