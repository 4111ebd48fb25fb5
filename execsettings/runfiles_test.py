"""Unit tests for the runfiles descriptor."""

from __future__ import annotations

from execsettings.graph.artifacts import Artifact
from execsettings.runfiles import RunfilesSupport

EXECUTABLE = Artifact("bazel-out/bin/pkg/foo_test", owner="//pkg:foo_test")


class TestForExecutable:
    """Tests for RunfilesSupport.for_executable()."""

    def test_with_runfile_links(self):
        runfiles = RunfilesSupport.for_executable(EXECUTABLE, build_runfile_links=True)
        assert runfiles.runfiles_manifest == Artifact(
            "bazel-out/bin/pkg/foo_test.runfiles/MANIFEST", "//pkg:foo_test"
        )
        assert runfiles.runfiles_input_manifest == Artifact(
            "bazel-out/bin/pkg/foo_test.runfiles_manifest", "//pkg:foo_test"
        )

    def test_without_runfile_links(self):
        """Without the symlink tree, the input manifest is used at run time."""
        runfiles = RunfilesSupport.for_executable(EXECUTABLE, build_runfile_links=False)
        assert runfiles.runfiles_manifest == runfiles.runfiles_input_manifest

    def test_args_frozen(self):
        args = ["--foo"]
        runfiles = RunfilesSupport.for_executable(EXECUTABLE, args)
        args.append("--bar")
        assert runfiles.args == ("--foo",)


def test_defaults():
    runfiles = RunfilesSupport()
    assert runfiles.args == ()
    assert runfiles.runfiles_manifest is None
    assert runfiles.runfiles_input_manifest is None
