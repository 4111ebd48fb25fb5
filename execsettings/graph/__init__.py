"""Read-only views of the build graph: artifacts, rules and prerequisites."""

from execsettings.graph.artifacts import Artifact
from execsettings.graph.targets import (
    DATA,
    DONT_CHECK,
    HOST,
    TARGET,
    ConfiguredTarget,
    FilesToRunProvider,
    Rule,
    RuleContext,
    is_test_rule,
)

__all__ = [
    "DATA",
    "DONT_CHECK",
    "HOST",
    "TARGET",
    "Artifact",
    "ConfiguredTarget",
    "FilesToRunProvider",
    "Rule",
    "RuleContext",
    "is_test_rule",
]
