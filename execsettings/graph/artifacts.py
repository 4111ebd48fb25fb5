"""Opaque artifact references.

Artifacts are owned by the build graph's artifact registry. Settings only
record references to them; nothing here creates or touches files.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Artifact:
    """Reference to a file produced or consumed by the build.

    Two references are equal when they name the same execution path and
    owner, so they can be used as dict keys and compared across records.
    """

    exec_path: str
    owner: str | None = None  # label of the generating target, if any

    def __post_init__(self) -> None:
        if not self.exec_path:
            raise ValueError("Artifact exec_path must not be empty")

    def __str__(self) -> str:
        return self.exec_path
