"""Shared pytest fixtures for clj-native-image tests."""

from __future__ import annotations

import stat
import sys
from pathlib import Path
from typing import Callable

import pytest

from clj_native_image.config import BuildConfig
from clj_native_image.providers import ProcessOutcome

FAKE_TOOL = """#!{python}
import os
import sys

print("args: " + " ".join(sys.argv[1:]))
sys.stdout.flush()
sys.stderr.write("stderr line\\n")
sys.stderr.flush()
print("cwd: " + os.getcwd())
sys.stdout.flush()
sys.exit({exit_code})
"""


def write_executable(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def make_fake_tool(tmp_path: Path) -> Callable[..., Path]:
    """Create an executable script that echoes its arguments and exits with `exit_code`."""

    def _make(name: str = "native-image", exit_code: int = 0, directory: Path | None = None) -> Path:
        target_dir = directory or (tmp_path / "bin")
        return write_executable(
            target_dir / name,
            FAKE_TOOL.format(python=sys.executable, exit_code=exit_code),
        )

    return _make


@pytest.fixture
def build_config(tmp_path: Path) -> BuildConfig:
    """A non-Windows configuration whose search path contains nothing."""
    return BuildConfig(
        log_level="error",
        graalvm_home=None,
        path=str(tmp_path / "empty"),
        classpath=None,
        windows=False,
    )


class RecordingRunner:
    """Stands in for run_process and records every invocation."""

    def __init__(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        self.calls: list[tuple[str, tuple[str, ...], str | None]] = []

    def __call__(self, bin, args=(), out=None, cwd=None) -> ProcessOutcome:
        self.calls.append((bin, tuple(args), cwd))
        return ProcessOutcome(exit_code=self.exit_code)


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()

