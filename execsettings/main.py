"""Entry point for inspecting a test target's execution settings.

Loads the build configuration and a target description, assembles the
settings record and prints it (or writes it to a file).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from execsettings.config.build_config import load_build_configuration
from execsettings.errors import ConfigurationError, InvariantViolation
from execsettings.report import FORMATS, format_settings, write_settings
from execsettings.target_file import load_target_description


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Assemble the execution settings shared by a test target's runs"
    )
    parser.add_argument(
        "--target",
        required=True,
        type=Path,
        help="Path to the JSON target description",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="Path to the JSON build configuration file",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the settings to this file instead of stdout",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default="yaml",
        help="Output format (default: yaml)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the command.

    Returns:
        0 on success, 1 on a configuration or output error, 2 on an invariant
        violation.
    """
    args = parse_args(argv)

    try:
        configuration = load_build_configuration(args.config_file)
        target = load_target_description(args.target)
        settings = target.build_settings(configuration)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except InvariantViolation as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.output is not None:
        try:
            write_settings(settings, args.output, args.format)
        except OSError as e:
            print(f"Error: cannot write {args.output}: {e}", file=sys.stderr)
            return 1
        print(f"Settings written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(format_settings(settings, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
