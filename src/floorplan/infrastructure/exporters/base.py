"""Base exporter framework with Protocol, Registry, and Manager."""

from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from floorplan.domain import Plan
    from floorplan.infrastructure.plan_serializer import PlanSerializer


logger = logging.getLogger(__name__)


@runtime_checkable
class Exporter(Protocol):
    """Protocol for all plan exporters.

    Exporters are constructed with the PlanSerializer that defines how the
    plan looks on the way out (clockwise rooms, remapped features, integer
    room ids), so every format shows the same geometry.

    Attributes:
        format_name: Registered name of the format (e.g., "json", "dxf").
        file_extension: File extension without leading dot.
    """

    format_name: ClassVar[str]
    file_extension: ClassVar[str]

    @abstractmethod
    def export(self, plan: Plan, path: Path) -> None:
        """Export a plan to a file.

        Args:
            plan: The plan to export. It is not modified.
            path: Path where the file will be saved.
        """
        ...

    def export_string(self, plan: Plan) -> str:
        """Export a plan as a string.

        Raises:
            NotImplementedError: If the format does not support string export.
        """
        raise NotImplementedError(
            f"Format '{self.format_name}' does not support string export"
        )


class ExporterRegistry:
    """Registry for exporter classes.

    Exporters register themselves using the @ExporterRegistry.register
    decorator.

    Example:
        @ExporterRegistry.register("json")
        class ProjectJsonExporter:
            format_name = "json"
            file_extension = "json"
            ...
    """

    _exporters: ClassVar[dict[str, type[Exporter]]] = {}

    @classmethod
    def register(cls, format_name: str) -> type:
        """Decorator to register an exporter class.

        Args:
            format_name: The format name to register (e.g., "dxf").

        Returns:
            Decorator function that registers the class.
        """

        def decorator(exporter_class: type[Exporter]) -> type[Exporter]:
            if format_name in cls._exporters:
                logger.warning(
                    f"Overwriting existing exporter for format '{format_name}'"
                )
            cls._exporters[format_name] = exporter_class
            logger.debug(f"Registered exporter '{format_name}': {exporter_class.__name__}")
            return exporter_class

        return decorator

    @classmethod
    def get(cls, format_name: str) -> type[Exporter]:
        """Get an exporter class by format name.

        Raises:
            KeyError: If no exporter is registered for the format.
        """
        if format_name not in cls._exporters:
            available = ", ".join(sorted(cls._exporters.keys()))
            raise KeyError(
                f"No exporter registered for format '{format_name}'. "
                f"Available formats: {available or 'none'}"
            )
        return cls._exporters[format_name]

    @classmethod
    def available_formats(cls) -> list[str]:
        return sorted(cls._exporters.keys())

    @classmethod
    def is_registered(cls, format_name: str) -> bool:
        return format_name in cls._exporters


class ExportManager:
    """Manages export operations to multiple formats.

    Attributes:
        output_dir: Default directory for exported files.
        serializer: Serializer handed to every exporter.
    """

    def __init__(
        self,
        output_dir: Path | None = None,
        serializer: PlanSerializer | None = None,
    ) -> None:
        """Initialize the export manager.

        Args:
            output_dir: Default directory where exported files will be saved.
                Created on export if it doesn't exist.
            serializer: Serializer to use; a default one when omitted.
        """
        if serializer is None:
            from floorplan.infrastructure.plan_serializer import PlanSerializer

            serializer = PlanSerializer()
        self.output_dir = Path(output_dir) if output_dir is not None else Path(".")
        self.serializer = serializer

    def create_exporter(self, format_name: str) -> Exporter:
        exporter_class = ExporterRegistry.get(format_name)
        return exporter_class(serializer=self.serializer)

    def export_all(
        self,
        formats: list[str],
        plan: Plan,
        project_name: str = "floorplan",
        output_dir: Path | None = None,
    ) -> dict[str, Path]:
        """Export a plan to multiple formats.

        Args:
            formats: List of format names to export (e.g., ["json", "dxf"]).
            plan: The plan to export.
            project_name: Base name for output files.
            output_dir: Overrides the manager's output directory.

        Returns:
            Dictionary mapping format names to output file paths.

        Raises:
            KeyError: If any format is not registered.
            OSError: If file operations fail.
        """
        target_dir = Path(output_dir) if output_dir is not None else self.output_dir
        # Resolve every format before writing anything
        exporters = {name: self.create_exporter(name) for name in formats}
        target_dir.mkdir(parents=True, exist_ok=True)

        results: dict[str, Path] = {}
        for format_name, exporter in exporters.items():
            # Generate filename: {project_name}_{format}.{ext}
            filename = f"{project_name}_{format_name}.{exporter.file_extension}"
            filepath = target_dir / filename

            logger.info(f"Exporting to {format_name}: {filepath}")
            exporter.export(plan, filepath)
            results[format_name] = filepath

        return results

    def export_single(
        self,
        format_name: str,
        plan: Plan,
        project_name: str = "floorplan",
        output_dir: Path | None = None,
    ) -> Path:
        """Export a plan to a single format."""
        results = self.export_all([format_name], plan, project_name, output_dir)
        return results[format_name]
