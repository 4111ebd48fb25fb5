"""The ``--run_under`` wrapper descriptor.

A run-under value names either a build target (a label) or a plain
command already present on the machine, optionally followed by options
for the wrapper, e.g. ``//tools:valgrind_wrapper --leak-check=full`` or
``strace -f``.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass

from execsettings.errors import ConfigurationError

_LABEL_PREFIXES = ("//", "@", ":")


@dataclass(frozen=True)
class RunUnder:
    """Parsed run-under value. Exactly one of label or command is set."""

    value: str
    label: str | None
    command: str | None
    options: tuple[str, ...] = ()

    @property
    def is_target(self) -> bool:
        """True when the wrapper is built by this build."""
        return self.label is not None

    def __str__(self) -> str:
        return self.value


def parse_run_under(value: str) -> RunUnder:
    """Parse a run-under option value.

    Args:
        value: Raw option value, shell-quoted.

    Returns:
        The parsed descriptor.

    Raises:
        ConfigurationError: If the value is empty or cannot be tokenized.
    """
    try:
        tokens = shlex.split(value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid run_under value '{value}': {e}") from e
    if not tokens:
        raise ConfigurationError("run_under value must not be empty")

    head, options = tokens[0], tuple(tokens[1:])
    if head.startswith(_LABEL_PREFIXES):
        return RunUnder(value=value, label=head, command=None, options=options)
    return RunUnder(value=value, label=None, command=head, options=options)
