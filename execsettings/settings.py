"""Per-target test execution settings shared by all test-run actions.

A ``TestExecutionSettings`` record is built once per test target and
build configuration. Every shard of the target reads from the same record,
so it is frozen on construction.

Argument precedence::

    target args    build-wide args    result
    -----------    ---------------    ------------------------------
    []             B                  B  (the very same sequence)
    T              B                  T + B  (target args first)

The test environment is a copy of the build-wide test environment.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from execsettings.config.build_config import BuildConfiguration
from execsettings.config.run_under import RunUnder
from execsettings.errors import ConfigurationError, InvariantViolation
from execsettings.graph.artifacts import Artifact
from execsettings.graph.targets import DATA, FilesToRunProvider, RuleContext, is_test_rule
from execsettings.runfiles import RunfilesSupport

# Implicit attribute holding the wrapper target named by --run_under.
RUN_UNDER_ATTRIBUTE = ":run_under"


def _artifact_path(artifact: Artifact | None) -> str | None:
    return artifact.exec_path if artifact is not None else None


@dataclass(frozen=True)
class TestExecutionSettings:
    """Common test execution settings for one test target."""

    __test__ = False  # not a pytest test class

    arguments: tuple[str, ...]
    environment: Mapping[str, str]
    test_filter: str | None
    total_shards: int
    run_under: RunUnder | None
    run_under_executable: Artifact | None
    executable: Artifact
    runfiles_manifest: Artifact | None = None
    runfiles_input_manifest: Artifact | None = None
    instrumented_file_manifest: Artifact | None = None

    @classmethod
    def build(
        cls,
        rule_context: RuleContext,
        runfiles: RunfilesSupport,
        executable: Artifact,
        instrumented_file_manifest: Artifact | None = None,
        shard_count: int = 0,
        *,
        configuration: BuildConfiguration,
    ) -> TestExecutionSettings:
        """Assemble the settings for a test target.

        Args:
            rule_context: The test rule and its resolved prerequisites.
            runfiles: Runfiles descriptor carrying the target-declared args.
            executable: The test's main executable.
            instrumented_file_manifest: Coverage manifest, or None when
                coverage is not collected.
            shard_count: Number of shards; 0 disables sharding.
            configuration: Build-wide test options.

        Returns:
            A new, immutable settings record.

        Raises:
            InvariantViolation: If the rule is not a test rule or
                shard_count is negative.
            ConfigurationError: If the run-under target cannot be executed.
        """
        if not is_test_rule(rule_context.rule):
            raise InvariantViolation(
                f"{rule_context.label}: {rule_context.rule.rule_class} is not a test rule"
            )
        if (
            isinstance(shard_count, bool)
            or not isinstance(shard_count, int)
            or shard_count < 0
        ):
            raise InvariantViolation(
                f"{rule_context.label}: shard count must be a non-negative integer, "
                f"got {shard_count!r}"
            )

        target_args = runfiles.args
        if not target_args:
            arguments = configuration.test_arguments
        else:
            arguments = tuple(target_args) + tuple(configuration.test_arguments)

        # No per-target environment layer exists; build-wide values are the
        # only source.
        environment = MappingProxyType(dict(configuration.test_env))

        return cls(
            arguments=arguments,
            environment=environment,
            test_filter=configuration.test_filter,
            total_shards=shard_count,
            run_under=configuration.run_under,
            run_under_executable=_run_under_executable(rule_context),
            executable=executable,
            runfiles_manifest=runfiles.runfiles_manifest,
            runfiles_input_manifest=runfiles.runfiles_input_manifest,
            instrumented_file_manifest=instrumented_file_manifest,
        )

    def __hash__(self) -> int:
        return hash((
            self.arguments,
            frozenset(self.environment.items()),
            self.test_filter,
            self.total_shards,
            self.run_under,
            self.run_under_executable,
            self.executable,
            self.runfiles_manifest,
            self.runfiles_input_manifest,
            self.instrumented_file_manifest,
        ))

    @property
    def manifest(self) -> Artifact | None:
        """Runfiles manifest for this test.

        This is the input manifest outside of the runfiles tree when
        runfile links are not built, and the manifest inside the runfiles
        tree when they are.
        """
        return self.runfiles_manifest

    @property
    def input_manifest(self) -> Artifact | None:
        """Input runfiles manifest, always outside of the runfiles tree."""
        return self.runfiles_input_manifest

    @property
    def is_sharded(self) -> bool:
        return self.total_shards > 0

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view of the record, suitable for YAML/JSON output."""
        run_under: dict[str, Any] | None = None
        if self.run_under is not None:
            run_under = {
                "value": self.run_under.value,
                "label": self.run_under.label,
                "command": self.run_under.command,
                "options": list(self.run_under.options),
            }
        return {
            "executable": self.executable.exec_path,
            "arguments": list(self.arguments),
            "environment": dict(self.environment),
            "test_filter": self.test_filter,
            "total_shards": self.total_shards,
            "run_under": run_under,
            "run_under_executable": _artifact_path(self.run_under_executable),
            "runfiles_manifest": _artifact_path(self.runfiles_manifest),
            "runfiles_input_manifest": _artifact_path(self.runfiles_input_manifest),
            "instrumented_file_manifest": _artifact_path(self.instrumented_file_manifest),
        }


def _run_under_executable(rule_context: RuleContext) -> Artifact | None:
    """Resolve the executable of the run-under target, if there is one.

    Returns:
        The wrapper's executable, or None when no run-under target was
        resolved (no wrapper, or a wrapper that is a plain command).

    Raises:
        ConfigurationError: If the run-under target is not executable.
    """
    target = rule_context.get_prerequisite(RUN_UNDER_ATTRIBUTE, DATA)
    if target is None:
        return None

    provider = target.get_provider(FilesToRunProvider)
    if provider is None:
        raise ConfigurationError(
            f"run_under target {target.label} cannot be run",
            label=rule_context.label,
            capability=FilesToRunProvider.__name__,
        )
    if provider.executable is None:
        raise ConfigurationError(
            f"run_under target {target.label} does not provide an executable",
            label=rule_context.label,
            capability="executable",
        )
    return provider.executable
