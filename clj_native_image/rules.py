"""Rules for packaging Clojure projects as GraalVM native images."""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from pants.core.goals.package import (
    BuiltPackage,
    BuiltPackageArtifact,
    OutputPathField,
    PackageFieldSet,
)
from pants.core.util_rules.system_binaries import BinaryPathRequest, BinaryPaths
from pants.engine.env_vars import EnvironmentVars, EnvironmentVarsRequest
from pants.engine.fs import Digest, MergeDigests
from pants.engine.internals.graph import hydrate_sources
from pants.engine.internals.selectors import Get
from pants.engine.process import Process, ProcessResult
from pants.engine.rules import collect_rules, implicitly, rule
from pants.engine.target import HydrateSourcesRequest
from pants.engine.unions import UnionRule

from clj_native_image.aot import compile_form
from clj_native_image.arguments import build_invocation
from clj_native_image.build import MISSING_BINARY_MESSAGE, MISSING_MAIN_MESSAGE
from clj_native_image.classpath import _split_command, clojure_path_argv
from clj_native_image.config import BuildConfig
from clj_native_image.locator import candidate_dirs, native_image_filename
from clj_native_image.providers import DEFAULT_COMPILE_PATH, ClasspathRoots, _dedupe
from clj_native_image.subsystem import NativeImageSubsystem
from clj_native_image.target_types import (
    NativeImageAliasesField,
    NativeImageCompilePathField,
    NativeImageDepsFileField,
    NativeImageExtraArgsField,
    NativeImageLibsField,
    NativeImageMainField,
    NativeImageSourcesField,
)

logger = logging.getLogger(__name__)

_PASSTHROUGH_ENV_VARS = ("PATH", "HOME", "JAVA_HOME", "GRAALVM_HOME")


@dataclass(frozen=True)
class NativeImageFieldSet(PackageFieldSet):
    required_fields = (NativeImageMainField,)

    main: NativeImageMainField
    libs: NativeImageLibsField
    aliases: NativeImageAliasesField
    deps_file: NativeImageDepsFileField
    sources: NativeImageSourcesField
    compile_path: NativeImageCompilePathField
    extra_args: NativeImageExtraArgsField
    output_path: OutputPathField


def _join_shell(parts: list[str]) -> str:
    return " ".join(p for p in parts if p)


def _shell_quote_parts(parts: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in parts)


def _tool_process_env(env_vars: Mapping[str, str | None], tools: NativeImageSubsystem) -> dict[str, str]:
    tool_dirs: list[str] = []
    for command in (tools.clojure, tools.java, tools.native_image):
        if not command:
            continue
        binary = _split_command(command)[0]
        if os.path.isabs(binary):
            tool_dirs.append(str(Path(binary).parent))

    path_parts: list[str] = list(_dedupe(tool_dirs))
    existing_path = env_vars.get("PATH")
    if existing_path:
        path_parts.append(existing_path)

    env: dict[str, str] = {}
    if path_parts:
        env["PATH"] = os.pathsep.join(path_parts)

    graalvm_home = tools.graalvm_home or env_vars.get("GRAALVM_HOME")
    if graalvm_home:
        env["GRAALVM_HOME"] = graalvm_home

    for name in ("HOME", "JAVA_HOME"):
        value = env_vars.get(name)
        if value:
            env[name] = value

    return env


def _rebase_classpath(classpath: str, project_dir: str) -> str:
    """Make relative classpath roots reported by the Clojure CLI relative to the sandbox root."""
    roots = ClasspathRoots.parse(classpath)
    if not project_dir:
        return roots.join()
    return ClasspathRoots(
        tuple(root if os.path.isabs(root) else os.path.join(project_dir, root) for root in roots.roots)
    ).join()


def _aot_script(
    java: str,
    classpath: str,
    compile_path: str,
    namespaces: Sequence[str],
) -> str:
    forms = " ".join(compile_form(ns, compile_path) for ns in namespaces)
    return "\n".join(
        [
            "set -euo pipefail",
            f"mkdir -p {shlex.quote(compile_path)}",
            _join_shell(
                [
                    _shell_quote_parts(_split_command(java)),
                    "-cp",
                    shlex.quote(classpath),
                    "clojure.main",
                    "-e",
                    shlex.quote(f"(do {forms})"),
                ]
            ),
        ]
    )


def _native_image_script(argv: Sequence[str], output_path: str) -> str:
    output_dir = os.path.dirname(output_path)
    lines = ["set -euo pipefail"]
    if output_dir:
        lines.append(f"mkdir -p {shlex.quote(output_dir)}")
    lines.append(_shell_quote_parts(argv))
    return "\n".join(lines)


async def _find_native_image(
    tools: NativeImageSubsystem,
    env_vars: Mapping[str, str | None],
) -> str:
    if tools.native_image:
        return tools.native_image

    graalvm_home = tools.graalvm_home or env_vars.get("GRAALVM_HOME")
    paths = await Get(
        BinaryPaths,
        BinaryPathRequest(
            binary_name=native_image_filename(windows=False),
            search_path=candidate_dirs(graalvm_home, env_vars.get("PATH")),
        ),
    )
    if paths.first_path is None:
        raise ValueError(MISSING_BINARY_MESSAGE)
    return paths.first_path.path


@rule(desc="Package Clojure native image")
async def package_native_image(
    field_set: NativeImageFieldSet,
    tools: NativeImageSubsystem,
) -> BuiltPackage:
    main = field_set.main.value
    if not main:
        raise ValueError(f"{field_set.address}: {MISSING_MAIN_MESSAGE}")

    env_vars = await Get(EnvironmentVars, EnvironmentVarsRequest(_PASSTHROUGH_ENV_VARS))
    env = _tool_process_env(env_vars, tools)

    deps_sources = await hydrate_sources(HydrateSourcesRequest(field_set.deps_file), **implicitly())
    project_sources = await hydrate_sources(HydrateSourcesRequest(field_set.sources), **implicitly())
    input_digest = await Get(
        Digest,
        MergeDigests((deps_sources.snapshot.digest, project_sources.snapshot.digest)),
    )

    if not deps_sources.snapshot.files:
        raise ValueError(f"{field_set.address} has no `{NativeImageDepsFileField.alias}` file")
    project_dir = os.path.dirname(deps_sources.snapshot.files[0])

    aliases = tuple(field_set.aliases.value or ())
    classpath_result = await Get(
        ProcessResult,
        Process(
            argv=clojure_path_argv(tools.clojure, aliases),
            env=env,
            input_digest=input_digest,
            working_directory=project_dir or None,
            description=f"Resolve deps.edn classpath for {field_set.address}",
        ),
    )

    compile_path = os.path.join(project_dir, field_set.compile_path.value or DEFAULT_COMPILE_PATH)
    classpath = (
        ClasspathRoots.parse(_rebase_classpath(classpath_result.stdout.decode(), project_dir))
        .with_root(compile_path)
        .join()
    )
    logger.debug("-cp %s", classpath)

    namespaces = (*tuple(field_set.libs.value or ()), main)
    if BuildConfig(log_level=tools.log_level).shows_progress:
        logger.info("Compiling %s", ", ".join(namespaces))
    aot_result = await Get(
        ProcessResult,
        Process(
            argv=(tools.bash, "-c", _aot_script(tools.java, classpath, compile_path, namespaces)),
            env=env,
            input_digest=input_digest,
            output_directories=(compile_path,),
            description=f"AOT compile {main} for {field_set.address}",
        ),
    )

    native_image = await _find_native_image(tools, env_vars)
    output_path = field_set.output_path.value_or_default(file_ending=None)
    invocation = build_invocation(
        native_image,
        (*tuple(field_set.extra_args.value or ()), "-o", output_path),
        classpath,
        main,
        windows=False,
    )
    native_input = await Get(Digest, MergeDigests((input_digest, aot_result.output_digest)))
    result = await Get(
        ProcessResult,
        Process(
            argv=(tools.bash, "-c", _native_image_script(invocation.argv, output_path)),
            env=env,
            input_digest=native_input,
            output_files=(output_path,),
            description=f"Build native image {output_path}",
        ),
    )

    return BuiltPackage(result.output_digest, (BuiltPackageArtifact(relpath=output_path),))


def rules() -> list:
    return [
        *collect_rules(),
        UnionRule(PackageFieldSet, NativeImageFieldSet),
    ]
