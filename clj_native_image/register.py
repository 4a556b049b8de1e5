"""Registration entrypoint for the Clojure native-image Pants backend."""

from __future__ import annotations

from clj_native_image import rules as native_image_rules
from clj_native_image.target_types import NativeImage


def target_types() -> list[type]:
    return [
        NativeImage,
    ]


def rules() -> list:
    return [
        *native_image_rules.rules(),
    ]
