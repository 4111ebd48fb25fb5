"""Rules, configured targets and the rule context seen by a test rule.

These are the read-only views of the build graph that settings
construction consumes: rule classification, providers attached to a
configured target, and prerequisite lookup by attribute name and mode.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeVar

from execsettings.errors import InvariantViolation
from execsettings.graph.artifacts import Artifact

# Configuration transitions a prerequisite can be resolved under.
TARGET = "target"
HOST = "host"
DATA = "data"
DONT_CHECK = "dont_check"

VALID_MODES = frozenset({TARGET, HOST, DATA, DONT_CHECK})

# Rule classes ending in this suffix are test rules.
_TEST_RULE_SUFFIX = "_test"

P = TypeVar("P")


@dataclass(frozen=True)
class Rule:
    """A rule instance in a package (e.g. ``cc_test`` named ``//pkg:foo_test``)."""

    label: str
    rule_class: str


def is_test_rule(rule: Rule) -> bool:
    """Return True if the rule's class is a test rule class."""
    return rule.rule_class.endswith(_TEST_RULE_SUFFIX)


@dataclass(frozen=True)
class FilesToRunProvider:
    """Capability exposed by targets that can be executed."""

    executable: Artifact | None


@dataclass(frozen=True)
class ConfiguredTarget:
    """A target analyzed under a configuration, with its providers."""

    label: str
    providers: tuple[Any, ...] = ()

    def get_provider(self, provider_type: type[P]) -> P | None:
        """Return the provider of the given type, or None if not provided."""
        for provider in self.providers:
            if isinstance(provider, provider_type):
                return provider
        return None


def _check_mode(mode: str) -> None:
    if mode not in VALID_MODES:
        raise ValueError(
            f"Invalid prerequisite mode '{mode}'. Must be one of: {sorted(VALID_MODES)}"
        )


@dataclass(frozen=True)
class RuleContext:
    """The rule being analyzed together with its resolved prerequisites.

    ``prerequisites`` maps ``(attribute, mode)`` to the targets resolved
    for that attribute. Attribute names for implicit dependencies carry
    a leading colon (e.g. ``:run_under``).
    """

    rule: Rule
    prerequisites: Mapping[tuple[str, str], tuple[ConfiguredTarget, ...]] = field(
        default_factory=dict
    )

    def __post_init__(self) -> None:
        frozen: dict[tuple[str, str], tuple[ConfiguredTarget, ...]] = {}
        for (attribute, mode), targets in self.prerequisites.items():
            _check_mode(mode)
            frozen[(attribute, mode)] = tuple(targets)
        object.__setattr__(self, "prerequisites", MappingProxyType(frozen))

    def __hash__(self) -> int:
        return hash((self.rule, frozenset(self.prerequisites.items())))

    @classmethod
    def create(
        cls,
        rule: Rule,
        prerequisites: Iterable[tuple[str, str, ConfiguredTarget]] = (),
    ) -> RuleContext:
        """Build a context from ``(attribute, mode, target)`` triples."""
        grouped: dict[tuple[str, str], list[ConfiguredTarget]] = {}
        for attribute, mode, target in prerequisites:
            grouped.setdefault((attribute, mode), []).append(target)
        return cls(rule=rule, prerequisites={k: tuple(v) for k, v in grouped.items()})

    @property
    def label(self) -> str:
        return self.rule.label

    def get_prerequisites(
        self, attribute: str, mode: str
    ) -> tuple[ConfiguredTarget, ...]:
        """Return all targets resolved for an attribute in the given mode."""
        _check_mode(mode)
        return self.prerequisites.get((attribute, mode), ())

    def get_prerequisite(self, attribute: str, mode: str) -> ConfiguredTarget | None:
        """Return the single target of an attribute, or None if it has none.

        Raises:
            InvariantViolation: If the attribute resolved to several targets.
        """
        targets = self.get_prerequisites(attribute, mode)
        if not targets:
            return None
        if len(targets) > 1:
            raise InvariantViolation(
                f"{self.label}: attribute '{attribute}' holds {len(targets)} "
                "targets, expected at most one"
            )
        return targets[0]
