"""projectData export and import.

Export works on the live plan without changing it: each closed room's
points are normalized to clockwise order on the way out and its doors,
windows and snapped runs are remapped onto the renumbered walls. Rooms get
integer ids (main room 0, the others 1..n in plan order) and snapInfo room
references are translated through the same map.
"""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from floorplan.application.config import (
    extract_validation_errors,
    format_validation_error_message,
)
from floorplan.domain import (
    MAIN_ROOM_ID,
    Cabinet,
    CabinetRun,
    Camera,
    Door,
    FocalPoint,
    Plan,
    Point,
    Point2D,
    Room,
    SnapInfo,
    Window,
)
from floorplan.domain.geometry import distance
from floorplan.domain.services import (
    FeatureDefaults,
    reanchor_feature,
    remap_wall_features,
    sort_points_clockwise,
)
from floorplan.infrastructure.project_schema import (
    CabinetRunSchema,
    CabinetSchema,
    ProjectDataSchema,
    RoomSchema,
)

logger = logging.getLogger(__name__)

# String literals are matched whole so their contents are never rewritten
_JSON_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"|\b(?:true|false|True|False)\b')
_TO_PYTHON = {"true": "True", "false": "False"}
_TO_JSON = {"True": "true", "False": "false"}


def _swap_booleans(text: str, mapping: dict[str, str]) -> str:
    return _JSON_TOKEN.sub(lambda m: mapping.get(m.group(0), m.group(0)), text)


class PlanImportError(Exception):
    """Raised when a projectData document cannot be imported.

    Attributes:
        message: The primary error message
        error_type: "json_parse" or "validation"
        details: Per-field problems for validation errors (path, message, ...)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def round_mm(value: float) -> int:
    """Round half up to whole millimetres."""
    return int(math.floor(value + 0.5))


def _optional_at(values: list | None, index: int, default: Any) -> Any:
    if values is None or index >= len(values):
        return default
    return values[index]


class PlanSerializer:
    """Converts plans to and from projectData JSON.

    Args:
        python_style_booleans: Write True/False instead of true/false. Only
            boolean tokens are rewritten; string values are left as they are.
        indent: JSON indentation, None for compact output.
        feature_defaults: Values for door/window fields missing on import.
    """

    def __init__(
        self,
        python_style_booleans: bool = False,
        indent: int | None = 2,
        feature_defaults: FeatureDefaults | None = None,
    ) -> None:
        self.python_style_booleans = python_style_booleans
        self.indent = indent
        self.feature_defaults = feature_defaults or FeatureDefaults()

    # =========================================================================
    # Export
    # =========================================================================

    @staticmethod
    def room_id_map(plan: Plan) -> dict[str, int]:
        """Integer export ids: main room 0, other rooms 1..n in plan order."""
        ids = {plan.main_room.id: 0}
        for number, room in enumerate(plan.secondary_rooms(), start=1):
            ids[room.id] = number
        return ids

    def export_dict(self, plan: Plan, export_date: str | None = None) -> dict[str, Any]:
        """Build the projectData document for a plan."""
        ids = self.room_id_map(plan)
        rooms = []
        wall_maps: dict[str, tuple[dict[int, int], list[Point2D]]] = {}
        for room in [plan.main_room, *plan.secondary_rooms()]:
            entry, index_map, points = self._export_room(room, ids[room.id])
            rooms.append(entry)
            wall_maps[room.id] = (index_map, points)

        data: dict[str, Any] = {
            "address": plan.address,
            "rooms": rooms,
            "cabinetRuns": [self._export_run(run, ids, wall_maps) for run in plan.cabinet_runs],
            "cabinets": [self._export_cabinet(c) for c in plan.cabinets],
            "camera": None,
            "focalPoint": None,
            "exportDate": export_date or datetime.now(timezone.utc).isoformat(),
        }
        if plan.camera is not None:
            data["camera"] = {
                "x": plan.camera.x,
                "y": plan.camera.y,
                "height": plan.camera.height,
                "rotation": plan.camera.rotation,
            }
        if plan.focal_point is not None:
            data["focalPoint"] = {
                "x": plan.focal_point.x,
                "y": plan.focal_point.y,
                "height": plan.focal_point.height,
            }
        return data

    def export_text(self, plan: Plan, export_date: str | None = None) -> str:
        """Serialize a plan to projectData JSON text."""
        text = json.dumps(self.export_dict(plan, export_date), indent=self.indent)
        if self.python_style_booleans:
            text = _swap_booleans(text, _TO_PYTHON)
        return text

    def save(self, plan: Plan, path: Path) -> None:
        Path(path).write_text(self.export_text(plan), encoding="utf-8")
        logger.info(f"Saved plan with {len(plan.rooms)} room(s) to {path}")

    def _export_room(
        self, room: Room, export_id: int
    ) -> tuple[dict[str, Any], dict[int, int], list[Point2D]]:
        points = room.vertices()
        doors: list[Door] = list(room.doors)
        windows: list[Window] = list(room.windows)
        index_map = {i: i for i in range(len(points))}

        # Open outlines keep their drawn order; reordering would break them.
        if room.is_complete and not room.no_closing_wall:
            points, index_map = sort_points_clockwise(points)
            doors = remap_wall_features(doors, index_map, points)
            windows = remap_wall_features(windows, index_map, points)

        n = len(points)
        wall_count = room.wall_count
        entry = {
            "id": export_id,
            "isMain": room.is_main,
            "isComplete": room.is_complete,
            "height": room.height,
            "wall_thickness": room.wall_thickness,
            "wall_material": room.wall_material,
            "floor_material": room.floor_material,
            "ceiling_material": room.ceiling_material,
            "points": {
                "x": [round_mm(p.x) for p in points],
                "y": [round_mm(p.y) for p in points],
            },
            "walls": {
                "count": wall_count,
                "from": list(range(wall_count)),
                "to": [(i + 1) % n for i in range(wall_count)],
            },
            "doors": {
                "count": len(doors),
                "wallIndices": [d.wall_index for d in doors],
                "widths": [round_mm(d.width) for d in doors],
                "positions": [round_mm(d.position) for d in doors],
                "heights": [round_mm(d.height) for d in doors],
                "frameThicknesses": [round_mm(d.frame_thickness) for d in doors],
                "frameWidths": [round_mm(d.frame_width) for d in doors],
                "materials": [d.material for d in doors],
            },
            "windows": {
                "count": len(windows),
                "wallIndices": [w.wall_index for w in windows],
                "widths": [round_mm(w.width) for w in windows],
                "heights": [round_mm(w.height) for w in windows],
                "sillHeights": [round_mm(w.sill_height) for w in windows],
                "positions": [round_mm(w.position) for w in windows],
                "types": [w.window_type.value for w in windows],
            },
        }
        return entry, index_map, points

    def _export_snap(
        self,
        run: CabinetRun,
        ids: dict[str, int],
        wall_maps: dict[str, tuple[dict[int, int], list[Point2D]]],
    ) -> dict[str, Any] | None:
        info = run.snap_info
        if info is None:
            return None
        if info.room_id not in ids:
            logger.warning(f"Run {run.id} is snapped to unknown room '{info.room_id}'")
            return None
        index_map, points = wall_maps[info.room_id]
        n = len(points)
        if info.wall_index not in index_map or (info.wall_index + 1) % n not in index_map:
            logger.warning(f"Run {run.id} is snapped to unknown wall {info.wall_index}")
            return None
        a = index_map[info.wall_index]
        b = index_map[(info.wall_index + 1) % n]
        wall_index = a
        along = info.distance_from_start
        if b != (a + 1) % n:
            if a != (b + 1) % n:
                logger.warning(f"Dropping snap of run {run.id}: its wall was split by reordering")
                return None
            # Wall direction flipped; measure from the other end.
            wall_index = b
            along = distance(points[b], points[a]) - along
        return {
            "snappedEdge": info.snapped_edge,
            "roomId": ids[info.room_id],
            "wallIndex": wall_index,
            "distanceFromStart": along,
        }

    def _export_run(
        self,
        run: CabinetRun,
        ids: dict[str, int],
        wall_maps: dict[str, tuple[dict[int, int], list[Point2D]]],
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "id": run.id,
            "type": run.run_type.value,
            "position": {"x": run.start_pos_x, "y": run.start_pos_y},
            "dimensions": {"length": run.length, "depth": run.depth},
            "rotation_z": run.rotation_z,
            "properties": {
                "start_type": run.start_type.value,
                "end_type": run.end_type.value,
                "top_filler": run.top_filler,
                "is_island": run.is_island,
                "omit_backsplash": run.omit_backsplash,
            },
        }
        snap = self._export_snap(run, ids, wall_maps)
        if snap is not None:
            entry["snapInfo"] = snap
        return entry

    @staticmethod
    def _export_cabinet(cabinet: Cabinet) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "id": cabinet.id,
            "cabinet_run_id": cabinet.cabinet_run_id,
            "cabinet_type": cabinet.cabinet_type,
            "cabinet_width": cabinet.width,
            "hinge_right": cabinet.hinge_right,
            "material_doors": cabinet.material,
            "position": cabinet.position,
        }
        if cabinet.is_floating_shelf:
            entry["floating_shelf_depth"] = cabinet.shelf_depth
            entry["floating_shelf_height"] = cabinet.shelf_height
            entry["floating_shelf_num"] = cabinet.shelf_count
            entry["floating_shelf_vertical_spacing"] = cabinet.shelf_spacing
        return entry

    # =========================================================================
    # Import
    # =========================================================================

    @staticmethod
    def parse_text(text: str) -> Any:
        """Parse projectData text, accepting Python-style booleans.

        Raises:
            PlanImportError: With error_type "json_parse".
        """
        try:
            return json.loads(text)
        except json.JSONDecodeError as first:
            try:
                return json.loads(_swap_booleans(text, _TO_JSON))
            except json.JSONDecodeError:
                raise PlanImportError(
                    message=(
                        f"Invalid projectData JSON (line {first.lineno}, "
                        f"column {first.colno}): {first.msg}"
                    ),
                    error_type="json_parse",
                    details=[
                        {"line": first.lineno, "column": first.colno, "message": first.msg}
                    ],
                )

    def import_text(self, text: str) -> Plan:
        return self.import_dict(self.parse_text(text))

    def load(self, path: Path) -> Plan:
        return self.import_text(Path(path).read_text(encoding="utf-8"))

    def import_dict(self, data: Any) -> Plan:
        """Rebuild a plan from a projectData document.

        Raises:
            PlanImportError: With error_type "validation" when the document
                is structurally invalid.
        """
        try:
            doc = ProjectDataSchema.model_validate(data)
        except PydanticValidationError as e:
            details = extract_validation_errors(e)
            raise PlanImportError(
                message=format_validation_error_message(
                    details, heading="Invalid projectData document:"
                ),
                error_type="validation",
                details=details,
            )

        plan = Plan(address=doc.address)
        room_ids = self._import_rooms(plan, doc.rooms)
        for run_schema in doc.cabinetRuns:
            plan.cabinet_runs.append(self._import_run(run_schema, room_ids))
        run_ids = {run.id for run in plan.cabinet_runs}
        for cabinet_schema in doc.cabinets:
            if cabinet_schema.cabinet_run_id not in run_ids:
                logger.warning(
                    f"Dropping cabinet {cabinet_schema.id}: unknown run "
                    f"{cabinet_schema.cabinet_run_id}"
                )
                continue
            plan.cabinets.append(self._import_cabinet(cabinet_schema))

        if doc.camera is not None:
            plan.camera = Camera(
                x=doc.camera.x,
                y=doc.camera.y,
                height=doc.camera.height,
                rotation=doc.camera.rotation,
            )
        if doc.focalPoint is not None:
            plan.focal_point = FocalPoint(
                x=doc.focalPoint.x, y=doc.focalPoint.y, height=doc.focalPoint.height
            )

        logger.info(
            f"Imported plan with {len(plan.rooms)} room(s), "
            f"{len(plan.cabinet_runs)} run(s) and {len(plan.cabinets)} cabinet(s)"
        )
        return plan

    def _import_rooms(self, plan: Plan, schemas: list[RoomSchema]) -> dict[int, str]:
        main_seen = False
        room_ids: dict[int, str] = {}
        for schema in schemas:
            is_main = schema.isMain and not main_seen
            main_seen = main_seen or is_main
            room_id = MAIN_ROOM_ID if is_main else f"room-{schema.id}"
            if plan.room(room_id) is not None:
                room_id = plan.new_room_id()
            room_ids[schema.id] = room_id
            plan.rooms.append(self._import_room(schema, room_id, is_main))

        if not main_seen:
            logger.warning("projectData has no main room; adding an empty one")
            plan.rooms.insert(0, Room(id=MAIN_ROOM_ID, is_main=True))
        return room_ids

    def _import_room(self, schema: RoomSchema, room_id: str, is_main: bool) -> Room:
        points = [Point(x, y) for x, y in zip(schema.points.x, schema.points.y)]
        no_closing_wall = (
            not is_main
            and schema.isComplete
            and schema.walls is not None
            and schema.walls.count < len(points)
        )
        room = Room(
            id=room_id,
            points=points,
            is_complete=schema.isComplete,
            is_main=is_main,
            no_closing_wall=no_closing_wall,
            height=schema.height,
            wall_thickness=schema.wall_thickness,
            wall_material=schema.wall_material,
            floor_material=schema.floor_material,
            ceiling_material=schema.ceiling_material,
        )

        d = self.feature_defaults
        doors = schema.doors
        for i in range(doors.count):
            room.doors.append(
                Door(
                    wall_index=doors.wallIndices[i],
                    start_point=Point2D(0, 0),
                    end_point=Point2D(0, 0),
                    width=doors.widths[i],
                    position=doors.positions[i],
                    height=_optional_at(doors.heights, i, d.door_height),
                    frame_thickness=_optional_at(
                        doors.frameThicknesses, i, d.door_frame_thickness
                    ),
                    frame_width=_optional_at(doors.frameWidths, i, d.door_frame_width),
                    material=_optional_at(doors.materials, i, d.door_material),
                )
            )
        windows = schema.windows
        for i in range(windows.count):
            room.windows.append(
                Window(
                    wall_index=windows.wallIndices[i],
                    start_point=Point2D(0, 0),
                    end_point=Point2D(0, 0),
                    width=windows.widths[i],
                    position=windows.positions[i],
                    height=_optional_at(windows.heights, i, d.window_height),
                    sill_height=_optional_at(windows.sillHeights, i, d.window_sill_height),
                    window_type=_optional_at(windows.types, i, d.window_type),
                )
            )

        for features in (room.doors, room.windows):
            kept = []
            for feature in features:
                wall = room.wall(feature.wall_index)
                if wall is None:
                    logger.warning(
                        f"Dropping feature on missing wall {feature.wall_index} of '{room_id}'"
                    )
                    continue
                reanchor_feature(feature, wall)
                kept.append(feature)
            features[:] = kept
        return room

    @staticmethod
    def _import_run(schema: CabinetRunSchema, room_ids: dict[int, str]) -> CabinetRun:
        props = schema.properties
        run = CabinetRun(
            id=schema.id,
            start_pos_x=schema.position.x,
            start_pos_y=schema.position.y,
            length=schema.dimensions.length,
            depth=schema.dimensions.depth,
            rotation_z=schema.rotation_z,
            run_type=schema.type,
            start_type=props.start_type,
            end_type=props.end_type,
            top_filler=props.top_filler,
            is_island=props.is_island,
            omit_backsplash=props.omit_backsplash,
        )
        snap = schema.snapInfo
        if snap is not None:
            if snap.roomId in room_ids and snap.snappedEdge == "rear":
                run.snap_info = SnapInfo(
                    room_id=room_ids[snap.roomId],
                    wall_index=snap.wallIndex,
                    distance_from_start=snap.distanceFromStart,
                )
            else:
                logger.warning(f"Ignoring snap of run {schema.id} to unknown room {snap.roomId}")
        return run

    @staticmethod
    def _import_cabinet(schema: CabinetSchema) -> Cabinet:
        return Cabinet(
            id=schema.id,
            cabinet_run_id=schema.cabinet_run_id,
            cabinet_type=schema.cabinet_type,
            width=schema.cabinet_width,
            position=schema.position,
            hinge_right=schema.hinge_right,
            material=schema.material_doors,
            shelf_depth=schema.floating_shelf_depth,
            shelf_height=schema.floating_shelf_height,
            shelf_count=schema.floating_shelf_num,
            shelf_spacing=schema.floating_shelf_vertical_spacing,
        )
