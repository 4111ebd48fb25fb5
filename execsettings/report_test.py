"""Unit tests for settings serialization."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest
import yaml

from execsettings.config.build_config import BuildConfiguration
from execsettings.graph.artifacts import Artifact
from execsettings.graph.targets import Rule, RuleContext
from execsettings.report import format_settings, write_settings
from execsettings.runfiles import RunfilesSupport
from execsettings.settings import TestExecutionSettings


def _settings() -> TestExecutionSettings:
    executable = Artifact("bin/foo_test")
    return TestExecutionSettings.build(
        RuleContext.create(Rule("//pkg:foo_test", "py_test")),
        RunfilesSupport.for_executable(executable, ["--foo"]),
        executable,
        shard_count=2,
        configuration=BuildConfiguration(test_arguments=["--bar"], test_env={"A": "1"}),
    )


class TestFormatSettings:
    """Tests for format_settings()."""

    def test_yaml(self):
        text = format_settings(_settings(), "yaml")
        data = yaml.safe_load(text)["test_execution_settings"]
        assert data["arguments"] == ["--foo", "--bar"]
        assert data["environment"] == {"A": "1"}
        assert data["total_shards"] == 2

    def test_yaml_keeps_field_order(self):
        text = format_settings(_settings(), "yaml")
        assert text.index("executable:") < text.index("arguments:")

    def test_json(self):
        text = format_settings(_settings(), "json")
        data = json.loads(text)["test_execution_settings"]
        assert data["executable"] == "bin/foo_test"
        assert text.endswith("\n")

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown output format"):
            format_settings(_settings(), "xml")


class TestWriteSettings:
    """Tests for write_settings()."""

    def test_creates_parent_dirs(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "out" / "settings.yaml"
            write_settings(_settings(), path)
            data = yaml.safe_load(path.read_text())
            assert data["test_execution_settings"]["total_shards"] == 2
