"""Value types passed between the build orchestration components."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_COMPILE_PATH = "classes"


def _dedupe(items: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return tuple(out)


@dataclass(frozen=True)
class BuildRequest:
    """Everything the caller asked for in one invocation."""

    main: str | None
    libs: tuple[str, ...] = ()
    deps_file: str | None = None
    aliases: tuple[str, ...] = ()
    compile_path: str | None = None
    bin: str | None = None
    args: tuple[str, ...] = ()
    extended: bool = False
    legacy_classpath: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "libs", tuple(self.libs))
        object.__setattr__(self, "aliases", _dedupe(tuple(self.aliases)))
        object.__setattr__(self, "args", tuple(self.args))

    @property
    def effective_compile_path(self) -> str:
        return self.compile_path or DEFAULT_COMPILE_PATH

    @property
    def deps_dir(self) -> str | None:
        """Directory the Clojure CLI resolves `deps.edn` from; None means the working directory."""
        if self.deps_file:
            return os.path.dirname(os.path.realpath(self.deps_file))
        return None


@dataclass(frozen=True)
class ClasspathRoots:
    """Ordered classpath entries as produced by a resolver."""

    roots: tuple[str, ...]

    @classmethod
    def parse(cls, classpath: str, separator: str = os.pathsep) -> "ClasspathRoots":
        return cls(tuple(entry for entry in classpath.strip().split(separator) if entry))

    def join(self, separator: str = os.pathsep) -> str:
        return separator.join(self.roots)

    def with_root(self, root: str) -> "ClasspathRoots":
        if root in self.roots:
            return self
        return ClasspathRoots((*self.roots, root))


@dataclass(frozen=True)
class Invocation:
    """A fully assembled native-image command line."""

    bin: str
    args: tuple[str, ...]

    @property
    def argv(self) -> tuple[str, ...]:
        return (self.bin, *self.args)


@dataclass(frozen=True)
class ProcessOutcome:
    """Exit status of a finished subprocess whose output was already forwarded."""

    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0
