"""Synchronous subprocess execution with streamed output."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import Sequence, TextIO

from clj_native_image.errors import ProcessLaunchError
from clj_native_image.providers import ProcessOutcome

logger = logging.getLogger(__name__)


def run_process(
    bin: str,
    args: Sequence[str] = (),
    out: TextIO | None = None,
    cwd: str | None = None,
) -> ProcessOutcome:
    """Run `bin` with `args`, echoing stdout and stderr line by line to `out`.

    Blocks until the process exits. There is no timeout.

    Raises
    ------
    ProcessLaunchError
        If the process cannot be started.
    """
    sink = out if out is not None else sys.stdout
    argv = [bin, *args]
    logger.debug("Running %s", argv)
    try:
        process = subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
            encoding="utf-8",
            errors="replace",
            cwd=cwd,
        )
    except OSError as e:
        raise ProcessLaunchError(f"Could not start `{bin}`: {e}") from e

    try:
        with process.stdout as stream:
            for line in stream:
                sink.write(line)
                sink.flush()
    finally:
        exit_code = process.wait()
    if exit_code < 0:
        # Killed by a signal: 128 + signal number.
        exit_code = 128 - exit_code
    return ProcessOutcome(exit_code=exit_code)
