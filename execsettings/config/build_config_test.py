"""Unit tests for the build configuration module."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from execsettings.config.build_config import (
    DEFAULT_CONFIG,
    BuildConfiguration,
    load_build_configuration,
)
from execsettings.errors import ConfigurationError


def _write(tmpdir: str, data: object) -> Path:
    path = Path(tmpdir) / "build_config.json"
    path.write_text(json.dumps(data))
    return path


class TestBuildConfiguration:
    """Tests for the BuildConfiguration value type."""

    def test_defaults(self):
        config = BuildConfiguration()
        assert config.test_arguments == ()
        assert dict(config.test_env) == {}
        assert config.test_filter is None
        assert config.run_under is None
        assert config.build_runfile_links is True
        assert config.collect_code_coverage is False

    def test_sequences_normalized(self):
        config = BuildConfiguration(test_arguments=["--a"], test_env={"A": "1"})
        assert config.test_arguments == ("--a",)
        with pytest.raises(TypeError):
            config.test_env["B"] = "2"  # type: ignore[index]

    def test_equal_configurations_hash_equal(self):
        first = BuildConfiguration(test_arguments=["--a"], test_env={"A": "1", "B": "2"})
        second = BuildConfiguration(test_arguments=["--a"], test_env={"B": "2", "A": "1"})
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1


class TestLoadBuildConfiguration:
    """Tests for load_build_configuration()."""

    def test_no_path_uses_defaults(self):
        config = load_build_configuration(None, client_env={})
        assert config.test_arguments == tuple(DEFAULT_CONFIG["test_arguments"])

    def test_missing_file_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_build_configuration(Path(tmpdir) / "missing.json", client_env={})
            assert config == BuildConfiguration()

    def test_corrupted_file_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "build_config.json"
            path.write_text("{ invalid json }")
            config = load_build_configuration(path, client_env={})
            assert config.test_arguments == ()

    def test_non_object_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_build_configuration(_write(tmpdir, ["--a"]), client_env={})
            assert config.test_arguments == ()

    def test_load_all_fields(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, {
                "test_arguments": ["--gtest_shuffle", "--gtest_repeat=2"],
                "test_env": {"LANG": "C"},
                "test_filter": "FooTest.*",
                "run_under": "//tools:wrapper -v",
                "build_runfile_links": False,
                "collect_code_coverage": True,
            })
            config = load_build_configuration(path, client_env={})
            assert config.test_arguments == ("--gtest_shuffle", "--gtest_repeat=2")
            assert dict(config.test_env) == {"LANG": "C"}
            assert config.test_filter == "FooTest.*"
            assert config.run_under is not None
            assert config.run_under.label == "//tools:wrapper"
            assert config.run_under.options == ("-v",)
            assert config.build_runfile_links is False
            assert config.collect_code_coverage is True

    def test_partial_file_fills_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_build_configuration(
                _write(tmpdir, {"test_filter": "A.*"}), client_env={}
            )
            assert config.test_filter == "A.*"
            assert config.test_arguments == ()
            assert config.build_runfile_links is True

    def test_null_env_value_inherits_from_client(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, {"test_env": {"HOME": None, "LANG": "C"}})
            config = load_build_configuration(path, client_env={"HOME": "/home/me"})
            assert dict(config.test_env) == {"HOME": "/home/me", "LANG": "C"}

    def test_null_env_value_dropped_when_client_unset(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, {"test_env": {"MISSING": None}})
            config = load_build_configuration(path, client_env={})
            assert dict(config.test_env) == {}

    @pytest.mark.parametrize("data, match", [
        ({"test_arguments": "--a"}, "test_arguments"),
        ({"test_arguments": ["--a", 1]}, "test_arguments"),
        ({"test_env": ["A=1"]}, "test_env"),
        ({"test_env": {"A": 1}}, "test_env"),
        ({"test_filter": 3}, "test_filter"),
        ({"run_under": ["strace"]}, "run_under"),
        ({"build_runfile_links": "yes"}, "build_runfile_links"),
        ({"collect_code_coverage": 1}, "collect_code_coverage"),
    ])
    def test_wrong_types_rejected(self, data, match):
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(ConfigurationError, match=match):
                load_build_configuration(_write(tmpdir, data), client_env={})

    def test_empty_run_under_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(ConfigurationError, match="run_under"):
                load_build_configuration(_write(tmpdir, {"run_under": ""}), client_env={})
