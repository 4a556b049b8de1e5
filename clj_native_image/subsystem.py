"""Subsystem options for the tools used by the native-image Pants backend."""

from __future__ import annotations

from pants.option.option_types import StrOption
from pants.option.subsystem import Subsystem

from clj_native_image.config import DEFAULT_LOG_LEVEL, LOG_LEVELS


class NativeImageSubsystem(Subsystem):
    options_scope = "clj-native-image"
    help = "Tool configuration for building GraalVM native images from Clojure projects."

    clojure = StrOption(default="clojure", help="Command used to invoke the Clojure CLI.")
    java = StrOption(default="java", help="Command used to run clojure.main for AOT compilation.")
    native_image = StrOption(
        default="",
        help="Path to native-image. Empty means search $GRAALVM_HOME/bin, $GRAALVM_HOME and $PATH.",
    )
    graalvm_home = StrOption(default="", help="GraalVM installation directory. Empty means $GRAALVM_HOME.")
    bash = StrOption(default="/bin/bash", help="Path to bash used for shell pipeline steps.")
    log_level = StrOption(
        default=DEFAULT_LOG_LEVEL,
        help=f"Build progress verbosity, one of: {', '.join(LOG_LEVELS)}.",
    )
