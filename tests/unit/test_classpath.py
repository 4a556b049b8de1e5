"""Unit tests for classpath resolution."""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

from clj_native_image.classpath import (
    alias_arg,
    clojure_path_argv,
    is_self_entry,
    make_classpath,
    native_image_classpath,
    own_classpath_roots,
    resolve_classpath_roots,
    standard_repos_edn,
)
from clj_native_image.config import BuildConfig
from clj_native_image.errors import ResolutionError

FAKE_CLOJURE = """#!{python}
import os
import sys

with open(os.path.join(os.getcwd(), "argv.txt"), "w") as f:
    f.write("\\n".join(sys.argv[1:]))
if os.path.exists("fail"):
    sys.stderr.write("Error building classpath. Malformed deps.edn\\n")
    sys.exit(1)
sys.stdout.write({classpath!r} + "\\n")
"""


def _fake_clojure(directory: Path, classpath: str) -> Path:
    script = directory / "clojure"
    script.write_text(FAKE_CLOJURE.format(python=sys.executable, classpath=classpath))
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return script


class TestAliasArg:
    """Tests for alias_arg."""

    def test_combines_aliases(self) -> None:
        """Test that aliases combine into one -A argument."""
        assert alias_arg(["native", "dev"]) == "-A:native:dev"

    def test_accepts_keyword_syntax(self) -> None:
        """Test that a leading colon on an alias is accepted."""
        assert alias_arg([":native", "dev"]) == "-A:native:dev"

    def test_drops_duplicates(self) -> None:
        """Test that repeated aliases appear once."""
        assert alias_arg(["a", "b", "a"]) == "-A:a:b"

    def test_empty(self) -> None:
        """Test that no usable aliases give no argument."""
        assert alias_arg([]) is None
        assert alias_arg([":"]) is None


class TestClojurePathArgv:
    """Tests for clojure_path_argv."""

    def test_without_aliases(self) -> None:
        """Test that the standard repos are passed with -Spath."""
        assert clojure_path_argv("clojure", ()) == ("clojure", "-Sdeps", standard_repos_edn(), "-Spath")

    def test_with_aliases(self) -> None:
        """Test that the tool command is split and aliases come last."""
        assert clojure_path_argv("clojure -J-Xmx1g", ["native"])[-1] == "-A:native"
        assert clojure_path_argv("clojure -J-Xmx1g", ["native"])[:2] == ("clojure", "-J-Xmx1g")

    def test_empty_command_raises_error(self) -> None:
        """Test that a blank tool command is rejected."""
        with pytest.raises(ValueError, match="Tool command cannot be empty"):
            clojure_path_argv("  ", ())


def test_standard_repos_edn_names_central_and_clojars() -> None:
    """Test that Maven Central and Clojars are declared."""
    edn = standard_repos_edn()
    assert edn.startswith("{:mvn/repos {")
    assert '"central" {:url "https://repo1.maven.org/maven2/"}' in edn
    assert '"clojars" {:url "https://repo.clojars.org/"}' in edn


@pytest.mark.skipif(os.name == "nt", reason="fake clojure is a POSIX shebang script")
class TestResolveClasspathRoots:
    """Tests for resolution through the Clojure CLI."""

    def test_splits_cli_output(self, tmp_path: Path) -> None:
        """Test that the CLI output is split into ordered roots."""
        classpath = os.pathsep.join(["src", "/m2/clojure.jar", "/m2/spec.jar"])
        config = BuildConfig(clojure=str(_fake_clojure(tmp_path, classpath)))

        roots = resolve_classpath_roots(str(tmp_path), ["native"], config)

        assert roots.roots == ("src", "/m2/clojure.jar", "/m2/spec.jar")
        argv = (tmp_path / "argv.txt").read_text().splitlines()
        assert argv[-2:] == ["-Spath", "-A:native"]

    def test_make_classpath_joins_roots(self, tmp_path: Path) -> None:
        """Test that make_classpath returns the joined roots."""
        classpath = os.pathsep.join(["src", "resources"])
        config = BuildConfig(clojure=str(_fake_clojure(tmp_path, classpath)))

        assert make_classpath(str(tmp_path), (), config) == classpath

    def test_failure_raises_resolution_error(self, tmp_path: Path) -> None:
        """Test that a failing CLI raises ResolutionError with its output."""
        (tmp_path / "fail").write_text("")
        config = BuildConfig(clojure=str(_fake_clojure(tmp_path, "unused")))

        with pytest.raises(ResolutionError) as excinfo:
            resolve_classpath_roots(str(tmp_path), (), config)
        assert "Malformed deps.edn" in excinfo.value.output

    def test_missing_cli_raises_resolution_error(self, tmp_path: Path) -> None:
        """Test that a missing CLI raises ResolutionError."""
        config = BuildConfig(clojure=str(tmp_path / "no-such-clojure"))

        with pytest.raises(ResolutionError, match="Could not run"):
            resolve_classpath_roots(str(tmp_path), (), config)


class TestOwnClasspath:
    """Tests for the legacy classpath taken from the running process."""

    def test_excludes_self(self) -> None:
        """Test that the tool's own entries are dropped."""
        classpath = os.pathsep.join(
            [
                "src",
                "/m2/clj.native-image/clj.native-image-0.1.jar",
                "/m2/org/clojure/clojure.jar",
                "/site-packages/clj_native_image",
            ]
        )
        assert own_classpath_roots(classpath).roots == ("src", "/m2/org/clojure/clojure.jar")

    @pytest.mark.parametrize(
        "entries",
        [
            [],
            ["clj-native-image.jar"],
            ["a", "b", "a"],
            ["x/clj.native-image", "y", "z/clj-native-image/lib.jar"],
        ],
    )
    def test_never_contains_self(self, entries: list[str]) -> None:
        """Test that no remaining entry names the tool itself."""
        roots = own_classpath_roots(os.pathsep.join(entries)).roots
        assert not any(is_self_entry(entry) for entry in roots)

    def test_preserves_duplicates_and_order(self) -> None:
        """Test that other entries keep their order and duplicates."""
        classpath = os.pathsep.join(["a", "b", "a"])
        assert own_classpath_roots(classpath).roots == ("a", "b", "a")

    def test_unset_classpath(self) -> None:
        """Test that an unset classpath gives no roots."""
        assert own_classpath_roots(None).roots == ()

    def test_native_image_classpath_reads_config(self) -> None:
        """Test that the legacy classpath is read from the config."""
        config = BuildConfig(classpath=os.pathsep.join(["src", "clj-native-image.jar", "lib.jar"]))
        assert native_image_classpath(config) == os.pathsep.join(["src", "lib.jar"])
