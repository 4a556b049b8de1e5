"""Command line entry point for clj-native-image."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from clj_native_image.build import build
from clj_native_image.config import LOG_LEVELS, BuildConfig
from clj_native_image.errors import ConfigurationError
from clj_native_image.providers import BuildRequest


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clj-native-image",
        description="Build a GraalVM native image from a deps.edn Clojure project.",
    )
    parser.add_argument("--deps-file", help="Path to the project's deps.edn.")
    parser.add_argument(
        "-A", "--alias", dest="aliases", action="append", default=[], help="deps.edn alias (repeatable)."
    )
    parser.add_argument(
        "--lib", dest="libs", action="append", default=[], help="Namespace to AOT compile before main."
    )
    parser.add_argument("--compile-path", help="AOT output directory, cleaned before compiling.")
    parser.add_argument("--aot", action="store_true", help="Clean and AOT compile before building.")
    parser.add_argument("--bin", help="Path to the native-image binary.")
    parser.add_argument(
        "--legacy-classpath",
        action="store_true",
        help="Use $CLASSPATH instead of resolving deps.edn.",
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Build progress verbosity.")
    parser.add_argument("main", nargs="?", help="Main namespace, e.g. `script` for ./script.clj.")
    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="Optional native-image path followed by flags passed through to native-image.",
    )
    return parser


def split_binary(args: list[str]) -> tuple[str | None, list[str]]:
    """Treat the first argument as the native-image path when it exists on disk."""
    if args and os.path.exists(args[0]):
        return args[0], args[1:]
    return None, args


def request_from_args(namespace: argparse.Namespace) -> BuildRequest:
    bin = namespace.bin
    args = list(namespace.args)
    if bin is None:
        bin, args = split_binary(args)
    return BuildRequest(
        main=namespace.main,
        libs=tuple(namespace.libs),
        deps_file=namespace.deps_file,
        aliases=tuple(namespace.aliases),
        compile_path=namespace.compile_path,
        bin=bin,
        args=tuple(args),
        extended=bool(namespace.aot or namespace.libs or namespace.compile_path),
        legacy_classpath=namespace.legacy_classpath,
    )


def configure_logging(config: BuildConfig) -> None:
    logger = logging.getLogger("clj_native_image")
    logger.setLevel(config.logging_level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)


def main(argv: list[str] | None = None) -> int:
    namespace = create_parser().parse_args(argv)
    config = BuildConfig.from_env(log_level=namespace.log_level)
    configure_logging(config)
    request = request_from_args(namespace)
    try:
        outcome = build(request, config)
    except ConfigurationError as e:
        print(e, file=sys.stderr)
        return e.exit_code
    return outcome.exit_code


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
