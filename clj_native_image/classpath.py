"""Classpath resolution for deps.edn projects."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from typing import Sequence

from clj_native_image.config import BuildConfig
from clj_native_image.errors import ResolutionError
from clj_native_image.providers import ClasspathRoots, _dedupe

logger = logging.getLogger(__name__)

STANDARD_REPOS = (
    ("central", "https://repo1.maven.org/maven2/"),
    ("clojars", "https://repo.clojars.org/"),
)

# Substrings identifying this tool's own artifact on a classpath.
SELF_ARTIFACT_MARKERS = ("clj.native-image", "clj-native-image", "clj_native_image")


def _split_command(command: str) -> tuple[str, ...]:
    parts = tuple(shlex.split(command))
    if not parts:
        raise ValueError("Tool command cannot be empty.")
    return parts


def standard_repos_edn() -> str:
    repos = " ".join(f'"{name}" {{:url "{url}"}}' for name, url in STANDARD_REPOS)
    return f"{{:mvn/repos {{{repos}}}}}"


def alias_arg(aliases: Sequence[str]) -> str | None:
    """Combine alias names into the single `-A:a:b` argument the Clojure CLI expects."""
    names = [alias.lstrip(":") for alias in _dedupe(list(aliases)) if alias.lstrip(":")]
    if not names:
        return None
    return "-A" + "".join(f":{name}" for name in names)


def clojure_path_argv(clojure: str, aliases: Sequence[str]) -> tuple[str, ...]:
    argv = [*_split_command(clojure), "-Sdeps", standard_repos_edn(), "-Spath"]
    combined = alias_arg(aliases)
    if combined:
        argv.append(combined)
    return tuple(argv)


def resolve_classpath_roots(
    deps_dir: str | None,
    aliases: Sequence[str],
    config: BuildConfig,
) -> ClasspathRoots:
    """Ask the Clojure CLI for the merged install, user and project classpath.

    Raises
    ------
    ResolutionError
        If the CLI cannot be started or exits non-zero.
    """
    argv = clojure_path_argv(config.clojure, aliases)
    logger.debug("Resolving classpath in %s with %s", deps_dir, argv)
    try:
        result = subprocess.run(
            argv,
            cwd=deps_dir,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
        )
    except OSError as e:
        raise ResolutionError(f"Could not run `{argv[0]}` to resolve the classpath: {e}") from e

    if result.returncode != 0:
        raise ResolutionError(
            f"`{' '.join(argv)}` failed in {deps_dir or os.getcwd()} with exit code {result.returncode}",
            output=result.stderr or result.stdout,
        )
    return ClasspathRoots.parse(result.stdout)


def make_classpath(deps_dir: str | None, aliases: Sequence[str], config: BuildConfig) -> str:
    return resolve_classpath_roots(deps_dir, aliases, config).join()


def is_self_entry(entry: str) -> bool:
    return any(marker in entry for marker in SELF_ARTIFACT_MARKERS)


def own_classpath_roots(classpath: str | None) -> ClasspathRoots:
    """The running process's classpath with this tool's own artifact removed."""
    roots = ClasspathRoots.parse(classpath or "")
    return ClasspathRoots(tuple(entry for entry in roots.roots if not is_self_entry(entry)))


def native_image_classpath(config: BuildConfig) -> str:
    return own_classpath_roots(config.classpath).join()
