"""Error types raised while assembling test execution settings."""

from __future__ import annotations


class ExecutionSettingsError(Exception):
    """Base class for all execution settings errors."""


class InvariantViolation(ExecutionSettingsError, ValueError):
    """A precondition of settings construction was broken by the caller.

    Raised for defects in the calling pipeline (a non-test target, a
    negative shard count), never for bad user input.
    """


class ConfigurationError(ExecutionSettingsError):
    """The build graph or configuration is wired up incorrectly."""

    def __init__(
        self,
        message: str,
        label: str | None = None,
        capability: str | None = None,
    ) -> None:
        if label is not None and capability is not None:
            message = f"{label}: {message} (missing capability: {capability})"
        elif label is not None:
            message = f"{label}: {message}"
        super().__init__(message)
        self.label: str | None = label
        self.capability: str | None = capability
