"""Explicit build configuration threaded through every component."""

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass
from typing import Mapping

LOG_LEVEL_ENV = "CLJ_NATIVE_IMAGE_LOG_LEVEL"

LOG_LEVELS = ("debug", "info", "warn", "error")

DEFAULT_LOG_LEVEL = "debug"

_LOGGING_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def normalize_log_level(value: str | None) -> str:
    """Map a user supplied verbosity onto one of `LOG_LEVELS`, defaulting to debug."""
    level = (value or "").strip().lower()
    return level if level in LOG_LEVELS else DEFAULT_LOG_LEVEL


def is_windows_host() -> bool:
    return platform.system().startswith("Windows") or os.name == "nt"


@dataclass(frozen=True)
class BuildConfig:
    """Host environment and verbosity for a single build."""

    log_level: str = DEFAULT_LOG_LEVEL
    graalvm_home: str | None = None
    path: str | None = None
    classpath: str | None = None
    windows: bool = False
    clojure: str = "clojure"
    java: str = "java"

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        log_level: str | None = None,
        windows: bool | None = None,
    ) -> "BuildConfig":
        env = os.environ if environ is None else environ
        return cls(
            log_level=normalize_log_level(log_level or env.get(LOG_LEVEL_ENV)),
            graalvm_home=env.get("GRAALVM_HOME") or None,
            path=env.get("PATH") or None,
            classpath=env.get("CLASSPATH") or None,
            windows=is_windows_host() if windows is None else windows,
        )

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS[normalize_log_level(self.log_level)]

    @property
    def shows_progress(self) -> bool:
        return normalize_log_level(self.log_level) in ("debug", "info")
