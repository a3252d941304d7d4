"""DXF format exporter for floor plans.

Generates a 2D plan drawing (R2010 format) in millimetres: room outlines,
door and window openings, cabinet run footprints with the cabinet dividers
inside them, and labels. The drawing is built from the exported projectData
document, so it shows rooms exactly as the JSON export does.
"""

from __future__ import annotations

import logging
import math
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

import ezdxf
from ezdxf import units

from floorplan.infrastructure.exporters.base import ExporterRegistry
from floorplan.infrastructure.plan_serializer import PlanSerializer

if TYPE_CHECKING:
    from ezdxf.document import Drawing
    from ezdxf.layouts import Modelspace

    from floorplan.domain import Plan


logger = logging.getLogger(__name__)


# Layer configuration for DXF output
LAYERS = {
    "WALLS": {"color": 7},  # White - room outlines
    "DOORS": {"color": 1},  # Red - door openings
    "WINDOWS": {"color": 4},  # Cyan - window openings
    "CABINETS": {"color": 3},  # Green - run footprints and dividers
    "LABELS": {"color": 5},  # Blue - text labels
}

LABEL_HEIGHT_MM = 100.0

XY = tuple[float, float]


@ExporterRegistry.register("dxf")
class DxfPlanExporter:
    """Exports floor plans to DXF for CAD tools.

    Attributes:
        format_name: "dxf"
        file_extension: "dxf"
    """

    format_name: ClassVar[str] = "dxf"
    file_extension: ClassVar[str] = "dxf"

    def __init__(
        self,
        serializer: PlanSerializer | None = None,
        include_labels: bool = True,
    ) -> None:
        self.serializer = serializer or PlanSerializer()
        self.include_labels = include_labels

    def export(self, plan: Plan, path: Path) -> None:
        doc = self._build_document(plan)
        doc.saveas(path)
        logger.info(f"Exported DXF plan to {path}")

    def export_string(self, plan: Plan) -> str:
        doc = self._build_document(plan)
        stream = StringIO()
        doc.write(stream)
        return stream.getvalue()

    def _build_document(self, plan: Plan) -> Drawing:
        data = self.serializer.export_dict(plan)
        doc = ezdxf.new("R2010")
        doc.units = units.MM
        for name, props in LAYERS.items():
            doc.layers.add(name, color=props["color"])

        msp = doc.modelspace()
        for room in data["rooms"]:
            self._draw_room(msp, room)
        cabinets_by_run: dict[int, list[dict[str, Any]]] = {}
        for cabinet in data["cabinets"]:
            cabinets_by_run.setdefault(cabinet["cabinet_run_id"], []).append(cabinet)
        for run in data["cabinetRuns"]:
            self._draw_run(msp, run, cabinets_by_run.get(run["id"], []))
        return doc

    def _draw_room(self, msp: Modelspace, room: dict[str, Any]) -> None:
        points = list(zip(room["points"]["x"], room["points"]["y"]))
        n = len(points)
        if n < 2:
            return
        closed = room["walls"]["count"] == n
        msp.add_lwpolyline(points, close=closed, dxfattribs={"layer": "WALLS"})

        for layer, features in (("DOORS", room["doors"]), ("WINDOWS", room["windows"])):
            for i in range(features["count"]):
                wall_index = features["wallIndices"][i]
                start, end = _opening(
                    points[wall_index],
                    points[(wall_index + 1) % n],
                    features["positions"][i],
                    features["widths"][i],
                )
                msp.add_line(start, end, dxfattribs={"layer": layer})

        if self.include_labels:
            cx = sum(p[0] for p in points) / n
            cy = sum(p[1] for p in points) / n
            name = "Main room" if room["isMain"] else f"Room {room['id']}"
            self._add_label(msp, name, (cx, cy))

    def _draw_run(
        self, msp: Modelspace, run: dict[str, Any], cabinets: list[dict[str, Any]]
    ) -> None:
        x = run["position"]["x"]
        y = run["position"]["y"]
        length = run["dimensions"]["length"]
        depth = run["dimensions"]["depth"]
        theta = math.radians(run["rotation_z"])
        # Along the rear edge, and from the rear edge towards the front
        ax, ay = math.cos(theta), math.sin(theta)
        fx, fy = math.sin(theta), -math.cos(theta)

        def at(along: float, out: float) -> XY:
            return (x + ax * along + fx * out, y + ay * along + fy * out)

        corners = [at(0, 0), at(length, 0), at(length, depth), at(0, depth)]
        msp.add_lwpolyline(corners, close=True, dxfattribs={"layer": "CABINETS"})

        for cabinet in cabinets:
            position = cabinet["position"]
            if 0 < position < length:
                msp.add_line(at(position, 0), at(position, depth), dxfattribs={"layer": "CABINETS"})

        if self.include_labels:
            self._add_label(msp, f"Run {run['id']}", at(length / 2, depth / 2))

    @staticmethod
    def _add_label(msp: Modelspace, text: str, location: XY) -> None:
        msp.add_mtext(
            text,
            dxfattribs={
                "layer": "LABELS",
                "char_height": LABEL_HEIGHT_MM,
                "insert": location,
                "attachment_point": 5,  # MIDDLE_CENTER
            },
        )


def _opening(start: XY, end: XY, position: float, width: float) -> tuple[XY, XY]:
    """Endpoints of an opening measured along the wall start -> end."""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length = math.hypot(dx, dy)
    if length == 0:
        return start, start
    ux, uy = dx / length, dy / length
    a = (start[0] + ux * position, start[1] + uy * position)
    b = (a[0] + ux * width, a[1] + uy * width)
    return a, b


__all__ = ["DxfPlanExporter", "LAYERS"]
