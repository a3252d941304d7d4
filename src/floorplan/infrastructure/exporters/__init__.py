"""Exporter framework for floor plans.

This package provides a unified exporter framework with:
- Exporter Protocol: Defines the interface for all exporters
- ExporterRegistry: Central registry for format discovery
- ExportManager: Coordinates multi-format export operations

Registered exporters:
- dxf: 2D plan drawing for CAD tools
- json: projectData document for the 3D viewer

Usage:
    from floorplan.infrastructure.exporters import ExportManager, ExporterRegistry

    formats = ExporterRegistry.available_formats()

    manager = ExportManager(output_dir=Path("./output"))
    results = manager.export_all(["json", "dxf"], plan, project_name="kitchen")
"""

from floorplan.infrastructure.exporters.base import (
    Exporter,
    ExporterRegistry,
    ExportManager,
)
from floorplan.infrastructure.exporters.dxf import LAYERS, DxfPlanExporter
from floorplan.infrastructure.exporters.project_json import ProjectJsonExporter

__all__ = [
    "LAYERS",
    "DxfPlanExporter",
    "ExportManager",
    "Exporter",
    "ExporterRegistry",
    "ProjectJsonExporter",
]
