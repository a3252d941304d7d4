"""Validate command for checking projectData files.

This module provides the `validate` command that imports a projectData file
and reports structural errors and plan warnings.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Annotated

import typer

from floorplan.application import get_factory
from floorplan.domain import Plan
from floorplan.domain.services import CabinetLayoutService
from floorplan.infrastructure import PlanImportError


def plan_warnings(plan: Plan, layout: CabinetLayoutService | None = None) -> list[str]:
    """Problems that do not stop a plan from loading."""
    layout = layout or CabinetLayoutService()
    warnings = []
    for room in plan.rooms:
        label = "main room" if room.is_main else f"room '{room.id}'"
        if not room.is_complete:
            warnings.append(f"{label} is not complete")
        elif len(room.points) < 3:
            warnings.append(f"{label} has fewer than 3 points")
    for run in plan.cabinet_runs:
        expected = layout.expected_length(plan, run)
        if expected is None:
            continue
        if not math.isclose(run.length, expected, abs_tol=0.5):
            warnings.append(
                f"run {run.id} is {run.length:.0f} long but its cabinets and fillers "
                f"add up to {expected:.0f}"
            )
    return warnings


def display_import_error(error: PlanImportError) -> None:
    """Display a projectData import error.

    Args:
        error: The PlanImportError to display
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            path = detail.get("path", "unknown")
            message = detail.get("message", "Unknown error")
            typer.echo(f"  {path}: {message}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)


def validate_command(
    plan_file: Annotated[
        Path,
        typer.Argument(help="Path to the projectData JSON file to validate"),
    ],
) -> None:
    """Validate a projectData file.

    Exit codes:
        0 - Plan is valid with no warnings
        1 - Plan cannot be loaded
        2 - Plan loads but has warnings

    Example:
        floorplan validate kitchen.json
    """
    typer.echo(f"Validating {plan_file}...")
    typer.echo()

    if not plan_file.exists():
        typer.echo("Errors:", err=True)
        typer.echo(f"  File not found: {plan_file}", err=True)
        raise typer.Exit(code=1)

    try:
        plan = get_factory().get_plan_serializer().load(plan_file)
    except PlanImportError as e:
        display_import_error(e)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    warnings = plan_warnings(plan, get_factory().get_layout_service())
    if warnings:
        typer.echo("Warnings:")
        for warning in warnings:
            typer.echo(f"  {warning}")
        typer.echo()
        typer.echo(f"Validation passed with {len(warnings)} warning(s)")
        raise typer.Exit(code=2)

    typer.echo("Validation passed. Plan is valid.")
