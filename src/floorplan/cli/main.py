"""Typer CLI for floor plan files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from floorplan.application import ServiceFactory, get_factory, set_factory
from floorplan.application.config import ConfigError, load_settings
from floorplan.cli.commands import display_import_error, validate_command
from floorplan.domain import Plan
from floorplan.infrastructure import PlanImportError
from floorplan.infrastructure.exporters import ExporterRegistry

app = typer.Typer(
    name="floorplan",
    help="Inspect, normalize and export floor plans in projectData format.",
)

# Register validate command
app.command(name="validate")(validate_command)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log engine activity to stderr")
    ] = False,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Engine settings JSON file"),
    ] = None,
) -> None:
    """Floor plan tools."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )
    if config_file is not None:
        try:
            settings = load_settings(config_file)
        except ConfigError as e:
            typer.echo(f"Error: {e}", err=True)
            for detail in e.details:
                typer.echo(f"  {detail.get('path', 'unknown')}: {detail.get('message')}", err=True)
            raise typer.Exit(code=1)
        set_factory(ServiceFactory(settings=settings))


def _load_plan(plan_file: Path) -> Plan:
    if not plan_file.exists():
        typer.echo(f"Error: File not found: {plan_file}", err=True)
        raise typer.Exit(code=1)
    try:
        return get_factory().get_plan_serializer().load(plan_file)
    except PlanImportError as e:
        display_import_error(e)
        raise typer.Exit(code=1)


@app.command()
def summary(
    plan_file: Annotated[Path, typer.Argument(help="projectData JSON file")],
) -> None:
    """Print walls, openings and cabinet runs of every room."""
    plan = _load_plan(plan_file)
    typer.echo(get_factory().get_summary_formatter().format(plan))


@app.command()
def normalize(
    plan_file: Annotated[Path, typer.Argument(help="projectData JSON file")],
    output_file: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write to this file instead of stdout"),
    ] = None,
    python_booleans: Annotated[
        bool,
        typer.Option("--python-booleans", help="Write True/False for legacy consumers"),
    ] = False,
) -> None:
    """Re-export a plan with clockwise rooms and remapped openings."""
    plan = _load_plan(plan_file)
    serializer = get_factory().get_plan_serializer()
    if python_booleans:
        serializer.python_style_booleans = True
    text = serializer.export_text(plan)

    if output_file is None:
        typer.echo(text)
        return
    output_file.write_text(text, encoding="utf-8")
    typer.echo(f"Normalized plan written to {output_file}")


@app.command()
def export(
    plan_file: Annotated[Path, typer.Argument(help="projectData JSON file")],
    formats: Annotated[
        str,
        typer.Option("--formats", "-f", help="Comma-separated formats, or 'all'"),
    ] = "json",
    output_dir: Annotated[
        Path, typer.Option("--output-dir", "-d", help="Directory for exported files")
    ] = Path("."),
    project_name: Annotated[
        Optional[str],
        typer.Option("--project-name", "-n", help="Base name for files (default: input name)"),
    ] = None,
) -> None:
    """Export a plan to one or more formats."""
    if formats.lower() == "all":
        format_list = ExporterRegistry.available_formats()
    else:
        format_list = [f.strip().lower() for f in formats.split(",") if f.strip()]

    available = ExporterRegistry.available_formats()
    invalid = [f for f in format_list if f not in available]
    if invalid or not format_list:
        typer.echo(f"Unknown formats: {', '.join(invalid) or '(none given)'}", err=True)
        typer.echo(f"Available formats: {', '.join(available)}", err=True)
        raise typer.Exit(code=1)

    plan = _load_plan(plan_file)
    manager = get_factory().get_export_manager()
    results = manager.export_all(
        format_list,
        plan,
        project_name=project_name or plan_file.stem,
        output_dir=output_dir,
    )
    for format_name, path in results.items():
        typer.echo(f"{format_name}: {path}")


if __name__ == "__main__":
    app()
