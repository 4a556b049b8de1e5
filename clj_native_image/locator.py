"""Discovery of the GraalVM `native-image` executable."""

from __future__ import annotations

import os

from clj_native_image.config import BuildConfig
from clj_native_image.providers import _dedupe

NATIVE_IMAGE = "native-image"


def native_image_filename(windows: bool) -> str:
    return f"{NATIVE_IMAGE}.cmd" if windows else NATIVE_IMAGE


def candidate_dirs(graalvm_home: str | None, path: str | None) -> tuple[str, ...]:
    """Directories searched for native-image, in priority order and without repeats."""
    dirs: list[str] = []
    if graalvm_home:
        dirs.extend([f"{graalvm_home}/bin", graalvm_home])
    if path:
        dirs.extend(entry for entry in path.split(os.pathsep) if entry)
    return _dedupe(dirs)


def find_native_image(config: BuildConfig) -> str | None:
    filename = native_image_filename(config.windows)
    for directory in candidate_dirs(config.graalvm_home, config.path):
        candidate = os.path.join(directory, filename)
        if os.path.isfile(candidate):
            return os.path.abspath(candidate)
    return None


def resolve_binary(explicit: str | None, config: BuildConfig) -> str | None:
    """Prefer an explicit binary that exists on disk, else search the host."""
    if explicit and os.path.exists(explicit):
        return explicit
    return find_native_image(config)
