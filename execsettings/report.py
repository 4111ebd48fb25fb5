"""Serialize test execution settings as YAML or JSON."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from execsettings.settings import TestExecutionSettings

FORMATS = ("yaml", "json")


def format_settings(settings: TestExecutionSettings, fmt: str = "yaml") -> str:
    """Render a settings record as text.

    Args:
        settings: The record to render.
        fmt: ``yaml`` or ``json``.

    Returns:
        The rendered document, ending in a newline.

    Raises:
        ValueError: If the format is unknown.
    """
    data = {"test_execution_settings": settings.to_dict()}
    if fmt == "yaml":
        return yaml.dump(
            data,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    raise ValueError(f"Unknown output format: {fmt}")


def write_settings(
    settings: TestExecutionSettings, path: Path, fmt: str = "yaml"
) -> None:
    """Write a settings record to a file, creating parent directories."""
    text = format_settings(settings, fmt)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(text)
