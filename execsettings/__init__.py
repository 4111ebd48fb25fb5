"""Test execution settings: the frozen per-target inputs of test-run actions."""

from execsettings.config import BuildConfiguration, RunUnder, load_build_configuration, parse_run_under
from execsettings.errors import ConfigurationError, ExecutionSettingsError, InvariantViolation
from execsettings.graph import Artifact, ConfiguredTarget, FilesToRunProvider, Rule, RuleContext
from execsettings.runfiles import RunfilesSupport
from execsettings.settings import TestExecutionSettings

__all__ = [
    "Artifact",
    "BuildConfiguration",
    "ConfigurationError",
    "ConfiguredTarget",
    "ExecutionSettingsError",
    "FilesToRunProvider",
    "InvariantViolation",
    "Rule",
    "RuleContext",
    "RunUnder",
    "RunfilesSupport",
    "TestExecutionSettings",
    "load_build_configuration",
    "parse_run_under",
]
