"""Build GraalVM native images from deps.edn Clojure projects."""

from __future__ import annotations

__version__ = "0.1.0"
