"""Runfiles descriptor for a test executable.

Carries the target-declared ``args`` (already expanded) and references to
the two runfiles manifests. Manifest contents and the symlink tree itself
are produced elsewhere.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from execsettings.graph.artifacts import Artifact


@dataclass(frozen=True)
class RunfilesSupport:
    """Runfiles information attached to an executable target."""

    args: tuple[str, ...] = ()
    runfiles_manifest: Artifact | None = None
    runfiles_input_manifest: Artifact | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    @classmethod
    def for_executable(
        cls,
        executable: Artifact,
        args: Sequence[str] = (),
        build_runfile_links: bool = True,
    ) -> RunfilesSupport:
        """Derive manifest references for an executable.

        The input manifest sits next to the executable as
        ``<exec>.runfiles_manifest``. When runfile links are built, the
        manifest used at run time is ``<exec>.runfiles/MANIFEST`` inside the
        symlink tree; otherwise it is the input manifest.

        Args:
            executable: The executable the runfiles belong to.
            args: Target-declared arguments.
            build_runfile_links: Whether the runfiles tree is materialized.

        Returns:
            A RunfilesSupport with both manifest references set.
        """
        owner = executable.owner
        input_manifest = Artifact(f"{executable.exec_path}.runfiles_manifest", owner)
        if build_runfile_links:
            manifest = Artifact(f"{executable.exec_path}.runfiles/MANIFEST", owner)
        else:
            manifest = input_manifest
        return cls(
            args=tuple(args),
            runfiles_manifest=manifest,
            runfiles_input_manifest=input_manifest,
        )
