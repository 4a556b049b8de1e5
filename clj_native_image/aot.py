"""Ahead-of-time compilation of Clojure namespaces and compile directory cleanup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence, TextIO

from clj_native_image.classpath import _split_command
from clj_native_image.errors import CompileError
from clj_native_image.process import run_process
from clj_native_image.providers import ProcessOutcome

logger = logging.getLogger(__name__)

Runner = Callable[..., ProcessOutcome]


def clean(directory: str | os.PathLike[str]) -> Path:
    """Delete everything under `directory`, deepest entries first, then recreate it."""
    target_dir = Path(directory)
    logger.info("Cleaning %s", target_dir)
    if target_dir.exists():
        entries = sorted(target_dir.rglob("*"), key=lambda p: len(p.parts), reverse=True)
        for entry in entries:
            if entry.is_dir() and not entry.is_symlink():
                entry.rmdir()
            else:
                entry.unlink()
    target_dir.mkdir(parents=True, exist_ok=True)
    return target_dir


def compile_form(namespace: str, compile_path: str) -> str:
    escaped = compile_path.replace("\\", "\\\\").replace('"', '\\"')
    return f"(binding [*compile-path* \"{escaped}\"] (compile '{namespace}))"


@dataclass(frozen=True)
class ClojureCompiler:
    """Compiles namespaces by running `clojure.main` on the resolved classpath."""

    java: str
    classpath: str
    compile_path: str
    cwd: str | None = None
    runner: Runner = run_process
    out: TextIO | None = None

    def argv(self, namespace: str) -> tuple[str, ...]:
        return (
            *_split_command(self.java),
            "-cp",
            self.classpath,
            "clojure.main",
            "-e",
            compile_form(namespace, self.compile_path),
        )

    def compile(self, namespace: str) -> None:
        bin, *args = self.argv(namespace)
        outcome = self.runner(bin, args, out=self.out, cwd=self.cwd)
        if not outcome.ok:
            raise CompileError(namespace, outcome.exit_code)

    def compile_all(self, libs: Sequence[str], main: str) -> None:
        if libs:
            logger.info("Compiling Libs")
            for lib in libs:
                self.compile(lib)
        logger.info("Compiling %s", main)
        self.compile(main)
