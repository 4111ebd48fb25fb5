"""Build-wide test options and the JSON file they are loaded from.

The build configuration file is a JSON object; any key left out falls
back to ``DEFAULT_CONFIG``. An unreadable or corrupted file is treated as
absent.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from execsettings.config.run_under import RunUnder, parse_run_under
from execsettings.errors import ConfigurationError

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "test_arguments": [],
    "test_env": {},
    "test_filter": None,
    "run_under": None,
    "build_runfile_links": True,
    "collect_code_coverage": False,
}


@dataclass(frozen=True)
class BuildConfiguration:
    """Build-wide options that feed every test target's settings."""

    test_arguments: tuple[str, ...] = ()
    test_env: Mapping[str, str] = field(default_factory=dict)
    test_filter: str | None = None
    run_under: RunUnder | None = None
    build_runfile_links: bool = True
    collect_code_coverage: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "test_arguments", tuple(self.test_arguments))
        object.__setattr__(self, "test_env", MappingProxyType(dict(self.test_env)))

    def __hash__(self) -> int:
        return hash((
            self.test_arguments,
            frozenset(self.test_env.items()),
            self.test_filter,
            self.run_under,
            self.build_runfile_links,
            self.collect_code_coverage,
        ))


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def _string_list(key: str, value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"'{key}' must be a list of strings")
    return value


def _optional_string(key: str, value: Any) -> str | None:
    if value is not None and not isinstance(value, str):
        raise ConfigurationError(f"'{key}' must be a string")
    return value


def _boolean(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"'{key}' must be true or false")
    return value


def _resolve_test_env(
    value: Any, client_env: Mapping[str, str]
) -> dict[str, str]:
    """Resolve the test_env table.

    A ``null`` value inherits the variable from the client environment
    and is dropped when the client does not define it.
    """
    if not isinstance(value, dict):
        raise ConfigurationError("'test_env' must be an object")
    env: dict[str, str] = {}
    for name, val in value.items():
        if val is None:
            if name in client_env:
                env[name] = client_env[name]
        elif isinstance(val, str):
            env[name] = val
        else:
            raise ConfigurationError(f"'test_env' value for {name} must be a string or null")
    return env


def load_build_configuration(
    path: Path | None = None,
    client_env: Mapping[str, str] | None = None,
) -> BuildConfiguration:
    """Load a BuildConfiguration from a JSON file.

    Args:
        path: Path to the configuration file. ``None`` or a missing file
            gives the defaults.
        client_env: Environment that ``null`` test_env entries inherit
            from. Defaults to ``os.environ``.

    Returns:
        The loaded configuration.

    Raises:
        ConfigurationError: If a value has the wrong type.
    """
    data = dict(DEFAULT_CONFIG)
    if path is not None and path.exists():
        data.update(_read_json(path))
    if client_env is None:
        client_env = os.environ

    run_under_value = _optional_string("run_under", data["run_under"])
    return BuildConfiguration(
        test_arguments=tuple(_string_list("test_arguments", data["test_arguments"])),
        test_env=_resolve_test_env(data["test_env"], client_env),
        test_filter=_optional_string("test_filter", data["test_filter"]),
        run_under=parse_run_under(run_under_value) if run_under_value is not None else None,
        build_runfile_links=_boolean("build_runfile_links", data["build_runfile_links"]),
        collect_code_coverage=_boolean(
            "collect_code_coverage", data["collect_code_coverage"]
        ),
    )
