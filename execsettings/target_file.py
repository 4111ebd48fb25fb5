"""Load a test target description from JSON.

The description stands in for the analysis results of a single test
target: its rule, declared args, executable, shard count, coverage
manifest and (optionally) a resolved run-under target. Example::

    {
      "label": "//pkg:foo_test",
      "rule_class": "cc_test",
      "executable": "bazel-out/k8-fastbuild/bin/pkg/foo_test",
      "args": ["--foo"],
      "shard_count": 4,
      "instrumented_file_manifest": null,
      "run_under": {
        "label": "//tools:wrapper",
        "executable": "bazel-out/k8-fastbuild/bin/tools/wrapper"
      }
    }

A ``run_under`` object without an ``executable`` key describes a target
that is not runnable.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from execsettings.config.build_config import BuildConfiguration
from execsettings.errors import ConfigurationError
from execsettings.graph.artifacts import Artifact
from execsettings.graph.targets import DATA, ConfiguredTarget, FilesToRunProvider, Rule, RuleContext
from execsettings.runfiles import RunfilesSupport
from execsettings.settings import RUN_UNDER_ATTRIBUTE, TestExecutionSettings


@dataclass(frozen=True)
class TargetDescription:
    """Inputs for building one test target's settings."""

    rule_context: RuleContext
    args: tuple[str, ...]
    executable: Artifact
    instrumented_file_manifest: Artifact | None
    shard_count: int

    def build_settings(self, configuration: BuildConfiguration) -> TestExecutionSettings:
        """Build the settings record for this target under a configuration.

        Raises:
            ConfigurationError: If the described run-under target does not
                match the configuration's run_under value.
        """
        self._check_run_under(configuration)
        runfiles = RunfilesSupport.for_executable(
            self.executable,
            self.args,
            build_runfile_links=configuration.build_runfile_links,
        )
        coverage_manifest = (
            self.instrumented_file_manifest if configuration.collect_code_coverage else None
        )
        return TestExecutionSettings.build(
            self.rule_context,
            runfiles,
            self.executable,
            coverage_manifest,
            self.shard_count,
            configuration=configuration,
        )

    def _check_run_under(self, configuration: BuildConfiguration) -> None:
        """A run-under target is only valid when run_under names that label."""
        target = self.rule_context.get_prerequisite(RUN_UNDER_ATTRIBUTE, DATA)
        if target is None:
            return
        run_under = configuration.run_under
        if run_under is None:
            raise ConfigurationError(
                f"run_under target {target.label} given but run_under is not set",
                label=self.rule_context.label,
            )
        if run_under.label != target.label:
            raise ConfigurationError(
                f"run_under target {target.label} does not match run_under '{run_under.value}'",
                label=self.rule_context.label,
            )


def _require_string(data: dict[str, Any], key: str) -> str:
    if key not in data:
        raise ConfigurationError(f"Target description is missing '{key}'")
    value = data[key]
    if not isinstance(value, str):
        raise ConfigurationError(f"Target description field '{key}' has the wrong type")
    return value


def _run_under_target(data: Any) -> ConfiguredTarget:
    if not isinstance(data, dict) or not isinstance(data.get("label"), str):
        raise ConfigurationError("'run_under' must be an object with a 'label'")
    label = data["label"]
    if "executable" not in data:
        return ConfiguredTarget(label=label)
    executable = data["executable"]
    if executable is not None and not isinstance(executable, str):
        raise ConfigurationError("'run_under' executable must be a string or null")
    artifact = Artifact(executable, owner=label) if executable else None
    return ConfiguredTarget(label=label, providers=(FilesToRunProvider(artifact),))


def parse_target_description(data: dict[str, Any]) -> TargetDescription:
    """Build a TargetDescription from parsed JSON.

    Raises:
        ConfigurationError: If a required field is missing or malformed.
    """
    label = _require_string(data, "label")
    rule = Rule(label=label, rule_class=_require_string(data, "rule_class"))
    exec_path = _require_string(data, "executable")
    if not exec_path:
        raise ConfigurationError("Target description field 'executable' must not be empty")
    executable = Artifact(exec_path, owner=label)

    args = data.get("args", [])
    if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
        raise ConfigurationError("Target description field 'args' must be a list of strings")

    shard_count = data.get("shard_count", 0)
    if isinstance(shard_count, bool) or not isinstance(shard_count, int):
        raise ConfigurationError("Target description field 'shard_count' must be an integer")

    coverage = data.get("instrumented_file_manifest")
    if coverage is not None and not isinstance(coverage, str):
        raise ConfigurationError(
            "Target description field 'instrumented_file_manifest' must be a string"
        )

    prerequisites = []
    if data.get("run_under") is not None:
        prerequisites.append(
            (RUN_UNDER_ATTRIBUTE, DATA, _run_under_target(data["run_under"]))
        )

    return TargetDescription(
        rule_context=RuleContext.create(rule, prerequisites),
        args=tuple(args),
        executable=executable,
        instrumented_file_manifest=Artifact(coverage, owner=label) if coverage else None,
        shard_count=shard_count,
    )


def load_target_description(path: Path) -> TargetDescription:
    """Read and parse a target description file.

    Raises:
        ConfigurationError: If the file cannot be read or is not valid.
    """
    try:
        data = json.loads(path.read_text())
    except OSError as e:
        raise ConfigurationError(f"Cannot read target description {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in target description {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Target description {path} must be a JSON object")
    return parse_target_description(data)
