"""Build configuration: build-wide test options and the run-under descriptor."""

from execsettings.config.build_config import (
    DEFAULT_CONFIG,
    BuildConfiguration,
    load_build_configuration,
)
from execsettings.config.run_under import RunUnder, parse_run_under

__all__ = [
    "DEFAULT_CONFIG",
    "BuildConfiguration",
    "RunUnder",
    "load_build_configuration",
    "parse_run_under",
]
