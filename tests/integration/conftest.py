"""Fixtures for integration tests running real processes."""

import os
from pathlib import Path
from typing import Protocol

import pytest

collect_ignore_glob: list[str] = []
if os.name != "posix":
    collect_ignore_glob.append("*.py")


class MakeProgramFn(Protocol):
    """Protocol for program creation function."""

    def __call__(self, body: str, *, name: str = "program") -> Path:
        """Write an executable shell script and return its path."""


@pytest.fixture
def make_program(tmp_path: Path) -> MakeProgramFn:
    """Return a function creating executable shell scripts."""

    def _make(body: str, *, name: str = "program") -> Path:
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        path.chmod(0o755)
        return path

    return _make
