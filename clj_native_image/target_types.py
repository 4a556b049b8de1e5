"""Pants target types for Clojure native-image builds."""

from __future__ import annotations

from pants.core.goals.package import OutputPathField
from pants.engine.target import (
    COMMON_TARGET_FIELDS,
    MultipleSourcesField,
    SingleSourceField,
    StringField,
    StringSequenceField,
    Target,
)

from clj_native_image.providers import DEFAULT_COMPILE_PATH


class NativeImageMainField(StringField):
    alias = "main"
    required = True
    help = "Main namespace, e.g. `my-app.core`. It must declare `(:gen-class)`."


class NativeImageLibsField(StringSequenceField):
    alias = "libs"
    default = ()
    help = "Namespaces to AOT compile, in order, before the main namespace."


class NativeImageAliasesField(StringSequenceField):
    alias = "aliases"
    default = ()
    help = "deps.edn aliases used when resolving the classpath."


class NativeImageDepsFileField(SingleSourceField):
    alias = "deps_file"
    default = "deps.edn"
    help = "The project's deps.edn, relative to the BUILD file."


class NativeImageSourcesField(MultipleSourcesField):
    alias = "sources"
    default = ("src/**/*.clj", "src/**/*.cljc", "resources/**/*")
    help = "Project sources made available to AOT compilation."


class NativeImageCompilePathField(StringField):
    alias = "compile_path"
    default = DEFAULT_COMPILE_PATH
    help = "Directory AOT compiled classes are written to, relative to the project root."


class NativeImageExtraArgsField(StringSequenceField):
    alias = "extra_args"
    default = ()
    help = "Additional flags passed to native-image."


class NativeImage(Target):
    alias = "clojure_native_image"
    core_fields = (
        *COMMON_TARGET_FIELDS,
        NativeImageMainField,
        NativeImageLibsField,
        NativeImageAliasesField,
        NativeImageDepsFileField,
        NativeImageSourcesField,
        NativeImageCompilePathField,
        NativeImageExtraArgsField,
        OutputPathField,
    )
    help = "A standalone GraalVM native executable built from a deps.edn Clojure project."
