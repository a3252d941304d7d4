"""projectData JSON exporter."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from floorplan.infrastructure.exporters.base import ExporterRegistry
from floorplan.infrastructure.plan_serializer import PlanSerializer

if TYPE_CHECKING:
    from floorplan.domain import Plan


logger = logging.getLogger(__name__)


@ExporterRegistry.register("json")
class ProjectJsonExporter:
    """Writes the projectData document consumed by the 3D viewer.

    Attributes:
        format_name: "json"
        file_extension: "json"
    """

    format_name: ClassVar[str] = "json"
    file_extension: ClassVar[str] = "json"

    def __init__(self, serializer: PlanSerializer | None = None) -> None:
        self.serializer = serializer or PlanSerializer()

    def export(self, plan: Plan, path: Path) -> None:
        Path(path).write_text(self.export_string(plan), encoding="utf-8")
        logger.info(f"Exported projectData JSON to {path}")

    def export_string(self, plan: Plan) -> str:
        return self.serializer.export_text(plan)
