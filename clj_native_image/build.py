"""Build orchestration: validate, resolve, compile, locate, run."""

from __future__ import annotations

import logging
import os
from typing import Callable, TextIO

from clj_native_image.aot import ClojureCompiler, clean
from clj_native_image.arguments import build_invocation
from clj_native_image.classpath import make_classpath, native_image_classpath
from clj_native_image.config import BuildConfig
from clj_native_image.errors import ConfigurationError
from clj_native_image.locator import resolve_binary
from clj_native_image.process import run_process
from clj_native_image.providers import BuildRequest, ClasspathRoots, ProcessOutcome

logger = logging.getLogger(__name__)

MISSING_MAIN_MESSAGE = 'Main namespace required e.g. "script" if main file is ./script.clj'

MISSING_BINARY_MESSAGE = "\n".join(
    [
        "Could not find GraalVM's native-image!",
        "Please make sure that the environment variable $GRAALVM_HOME is set",
        "The native-image tool must also be installed ($GRAALVM_HOME/bin/gu install native-image)",
        "If you do not wish to set the GRAALVM_HOME environment variable,",
        "you may pass the path to native-image as the second argument to clj-native-image",
    ]
)

Resolver = Callable[[BuildRequest, BuildConfig], str]


def request_classpath(request: BuildRequest, config: BuildConfig) -> str:
    """Resolve from deps.edn, or from the process classpath when explicitly requested."""
    if request.legacy_classpath:
        return native_image_classpath(config)
    return make_classpath(request.deps_dir, request.aliases, config)


def validate(request: BuildRequest) -> str:
    if not isinstance(request.main, str) or not request.main:
        raise ConfigurationError(MISSING_MAIN_MESSAGE)
    return request.main


def build(
    request: BuildRequest,
    config: BuildConfig,
    *,
    runner: Callable[..., ProcessOutcome] = run_process,
    resolver: Resolver = request_classpath,
    compiler_factory: Callable[..., ClojureCompiler] = ClojureCompiler,
    out: TextIO | None = None,
) -> ProcessOutcome:
    """Run one native-image build and return the outcome of the native-image process.

    Raises
    ------
    ConfigurationError
        If the entry namespace is missing or native-image cannot be found. Nothing
        has been executed at that point.
    """
    main = validate(request)
    classpath = resolver(request, config)

    if request.extended:
        compile_path = os.path.abspath(request.effective_compile_path)
        classpath = ClasspathRoots.parse(classpath).with_root(compile_path).join()
        clean(compile_path)
        compiler = compiler_factory(
            java=config.java,
            classpath=classpath,
            compile_path=compile_path,
            cwd=request.deps_dir,
            runner=runner,
            out=out,
        )
        compiler.compile_all(request.libs, main)

    bin = resolve_binary(request.bin, config)
    if not bin:
        raise ConfigurationError(MISSING_BINARY_MESSAGE)

    logger.debug("-cp %s", classpath)
    invocation = build_invocation(bin, request.args, classpath, main, config.windows)
    return runner(invocation.bin, invocation.args, out=out, cwd=request.deps_dir)
