"""Exception types raised while orchestrating a native-image build."""

from __future__ import annotations


class NativeImageError(Exception):
    """Base class for every failure raised by clj_native_image."""


class ConfigurationError(NativeImageError):
    """Raised before any subprocess starts when the build cannot be configured.

    Covers a missing entry namespace and a `native-image` binary that cannot be
    located. The command line maps it to exit status 1.
    """

    exit_code = 1


class ResolutionError(NativeImageError):
    """Raised when the Clojure CLI fails to resolve the project classpath."""

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class ProcessLaunchError(NativeImageError):
    """Raised when a binary cannot be started at all."""


class CompileError(NativeImageError):
    """Raised when AOT compilation of a namespace exits non-zero."""

    def __init__(self, namespace: str, exit_code: int) -> None:
        super().__init__(f"AOT compilation of `{namespace}` failed with exit code {exit_code}")
        self.namespace = namespace
        self.exit_code = exit_code
