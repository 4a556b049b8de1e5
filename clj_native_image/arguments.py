"""Assembly of the native-image command line."""

from __future__ import annotations

from typing import Sequence

from clj_native_image.providers import Invocation

# native-image --no-server is not supported on Windows.
NO_SERVER_FLAG = "--no-server"


def munge(name: str) -> str:
    """Turn a namespace name into the class name Clojure emits for it."""
    return name.replace("-", "_")


def native_image_args(
    opts: Sequence[str] | None,
    classpath: str | None,
    main: str | None,
    windows: bool,
) -> tuple[str, ...]:
    args: list[str] = []
    if opts:
        args.extend(opts)
    if classpath:
        args.extend(["-cp", classpath])
    if main:
        args.append(main)
    if not windows:
        args.append(NO_SERVER_FLAG)
    return tuple(args)


def build_invocation(
    bin: str,
    opts: Sequence[str] | None,
    classpath: str | None,
    main: str | None,
    windows: bool,
) -> Invocation:
    return Invocation(
        bin=bin,
        args=native_image_args(opts, classpath, munge(main) if main else None, windows),
    )
