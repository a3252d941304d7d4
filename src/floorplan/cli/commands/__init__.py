"""CLI command implementations for the floorplan application.

This package contains subcommands for the floorplan CLI, including:
- validate: Validate a projectData file
"""

from floorplan.cli.commands.validate import (
    display_import_error,
    plan_warnings,
    validate_command,
)

__all__ = ["display_import_error", "plan_warnings", "validate_command"]
