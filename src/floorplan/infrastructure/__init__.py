"""Infrastructure layer - persistence, export and formatting."""

from floorplan.infrastructure.exporters import (
    DxfPlanExporter,
    ExporterRegistry,
    ExportManager,
    ProjectJsonExporter,
)
from floorplan.infrastructure.formatters import (
    RoomSummaryFormatter,
    format_room_for_processing,
)
from floorplan.infrastructure.plan_serializer import (
    PlanImportError,
    PlanSerializer,
    round_mm,
)

__all__ = [
    "DxfPlanExporter",
    "ExportManager",
    "ExporterRegistry",
    "PlanImportError",
    "PlanSerializer",
    "ProjectJsonExporter",
    "RoomSummaryFormatter",
    "format_room_for_processing",
    "round_mm",
]
