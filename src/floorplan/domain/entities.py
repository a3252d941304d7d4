"""Domain entities for floor plans, wall features and cabinet runs."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field

from .geometry import interior_angle, lerp, rectangle_corners
from .value_objects import (
    AttachmentConstraint,
    CabinetRunType,
    Point2D,
    RunCorners,
    RunEndType,
    SnapInfo,
    WallData,
    WallPosition,
    WindowType,
)

MAIN_ROOM_ID = "main"

# Width of the filler strip reserved at a run end that abuts a wall (mm).
FILLER_WIDTH = 50.0

DEFAULT_DOOR_HEIGHT = 2032.0
DEFAULT_FRAME_THICKNESS = 40.0
DEFAULT_FRAME_WIDTH = 70.0
DEFAULT_WINDOW_HEIGHT = 1200.0
DEFAULT_WINDOW_SILL_HEIGHT = 900.0


class Point:
    """A room vertex, either free or attached to another room's wall.

    A free point stores its coordinates. An attached point derives them on
    every read from its AttachmentConstraint and the parent room's current
    wall, so the coordinates can never drift from the constraint. When the
    constraint cannot be resolved (parent unbound, wall missing) the point
    reports the coordinates it last materialized.
    """

    __slots__ = ("_x", "_y", "attachment", "_parent")

    def __init__(
        self,
        x: float,
        y: float,
        attachment: AttachmentConstraint | None = None,
    ) -> None:
        self._x = float(x)
        self._y = float(y)
        self.attachment = attachment
        self._parent: Room | None = None

    def __repr__(self) -> str:
        if self.attachment is None:
            return f"Point(x={self.x!r}, y={self.y!r})"
        return f"Point(x={self.x!r}, y={self.y!r}, attachment={self.attachment!r})"

    @property
    def is_attached(self) -> bool:
        return self.attachment is not None

    @property
    def parent(self) -> Room | None:
        """Room the attachment is currently bound to, if any."""
        return self._parent

    def _resolved(self) -> Point2D | None:
        if self.attachment is None or self._parent is None:
            return None
        wall = self._parent.wall(self.attachment.wall_index)
        if wall is None:
            return None
        resolved = lerp(wall.start, wall.end, self.attachment.t)
        self._x = resolved.x
        self._y = resolved.y
        return resolved

    @property
    def x(self) -> float:
        resolved = self._resolved()
        return resolved.x if resolved is not None else self._x

    @property
    def y(self) -> float:
        resolved = self._resolved()
        return resolved.y if resolved is not None else self._y

    def as_point2d(self) -> Point2D:
        resolved = self._resolved()
        if resolved is not None:
            return resolved
        return Point2D(self._x, self._y)

    def move_to(self, x: float, y: float) -> None:
        """Set the coordinates of a free point.

        Raises:
            ValueError: If the point is attached; its position is derived.
        """
        if self.attachment is not None:
            raise ValueError("Attached points are positioned by their constraint")
        self._x = float(x)
        self._y = float(y)

    def attach(self, attachment: AttachmentConstraint, parent: Room) -> None:
        """Bind this point to a wall of `parent`."""
        self.attachment = attachment
        self._parent = parent

    def bind(self, parent: Room | None) -> None:
        """Rebind the attachment to a (possibly replaced) parent room object."""
        self._parent = parent

    def detach(self) -> None:
        """Drop the attachment, freezing the point where it currently is."""
        current = self.as_point2d()
        self._x = current.x
        self._y = current.y
        self.attachment = None
        self._parent = None

    def __deepcopy__(self, memo: dict) -> Point:
        clone = Point(self._x, self._y, self.attachment)
        memo[id(self)] = clone
        clone._parent = copy.deepcopy(self._parent, memo)
        return clone


@dataclass
class WallFeature:
    """A door or window anchored to one wall of its room.

    The feature is anchored by its absolute distance from the wall's start
    vertex (position) and its width; start_point and end_point are kept
    colinear with the wall by the wall feature maintenance pass.

    Attributes:
        wall_index: Wall owning the feature, within its own room.
        start_point: Start of the opening in plan coordinates.
        end_point: End of the opening in plan coordinates.
        width: Opening width in mm.
        position: Distance of start_point from the wall start in mm.
    """

    wall_index: int
    start_point: Point2D
    end_point: Point2D
    width: float
    position: float

    def __post_init__(self) -> None:
        if self.wall_index < 0:
            raise ValueError("Wall index must be non-negative")
        if self.width < 0:
            raise ValueError("Feature width must be non-negative")


@dataclass
class Door(WallFeature):
    """A door opening with its frame dimensions."""

    height: float = DEFAULT_DOOR_HEIGHT
    frame_thickness: float = DEFAULT_FRAME_THICKNESS
    frame_width: float = DEFAULT_FRAME_WIDTH
    material: str = "Wood"


@dataclass
class Window(WallFeature):
    """A window opening."""

    height: float = DEFAULT_WINDOW_HEIGHT
    sill_height: float = DEFAULT_WINDOW_SILL_HEIGHT
    window_type: WindowType = WindowType.SINGLE


@dataclass
class Room:
    """A polygonal room drawn as an ordered list of points.

    Walls are implicit: wall i is the segment points[i] -> points[i + 1],
    and the closing wall points[n - 1] -> points[0] exists only for a
    complete room without no_closing_wall. An incomplete room exposes the
    n - 1 walls drawn so far.

    Attributes:
        id: Room identifier, unique within the plan.
        points: Polygon vertices in drawing (winding) order.
        is_complete: Whether the polygon has been closed.
        is_main: Whether this is the plan's main room.
        no_closing_wall: True for a secondary room that ends on the wall it
            started from, so there is no wall back to its first point.
        height: Ceiling height in mm.
        wall_thickness: Wall thickness in mm.
        doors: Doors owned by this room.
        windows: Windows owned by this room.
    """

    id: str
    points: list[Point] = field(default_factory=list)
    is_complete: bool = False
    is_main: bool = False
    no_closing_wall: bool = False
    height: float = 2400.0
    wall_thickness: float = 100.0
    wall_material: str = "Drywall"
    floor_material: str = "Oak"
    ceiling_material: str = "Plaster"
    doors: list[Door] = field(default_factory=list)
    windows: list[Window] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.height <= 0:
            raise ValueError("Room height must be positive")
        if self.wall_thickness <= 0:
            raise ValueError("Wall thickness must be positive")

    @property
    def wall_count(self) -> int:
        n = len(self.points)
        if n < 2:
            return 0
        if not self.is_complete or self.no_closing_wall:
            return n - 1
        return n

    def has_wall(self, wall_index: int) -> bool:
        return 0 <= wall_index < self.wall_count

    def vertex(self, index: int) -> Point2D:
        return self.points[index].as_point2d()

    def vertices(self) -> list[Point2D]:
        return [p.as_point2d() for p in self.points]

    def wall(self, wall_index: int) -> WallPosition | None:
        """Current geometry of a wall, or None if the wall does not exist."""
        if not self.has_wall(wall_index):
            return None
        n = len(self.points)
        return WallPosition(
            wall_index=wall_index,
            start=self.vertex(wall_index),
            end=self.vertex((wall_index + 1) % n),
        )

    def walls(self) -> list[WallPosition]:
        result = []
        for i in range(self.wall_count):
            wall = self.wall(i)
            assert wall is not None
            result.append(wall)
        return result

    def wall_data(self) -> list[WallData]:
        """Length and interior angle of every wall.

        The angle is only defined for rooms with three or more points; with
        fewer, every wall reports 0.
        """
        vertices = self.vertices()
        n = len(vertices)
        data = []
        for wall in self.walls():
            i = wall.wall_index
            angle = 0.0
            if n > 2:
                angle = interior_angle(vertices[(i - 1) % n], vertices[i], vertices[(i + 1) % n])
            data.append(WallData(wall_index=i, length=wall.length, angle=angle))
        return data

    def features(self) -> list[WallFeature]:
        """Doors followed by windows."""
        return [*self.doors, *self.windows]

    @property
    def perimeter(self) -> float:
        return sum(w.length for w in self.walls())


@dataclass
class Cabinet:
    """A single cabinet placed inside a cabinet run.

    Attributes:
        id: Cabinet identifier, unique within the plan.
        cabinet_run_id: Owning run.
        cabinet_type: Catalogue type name (e.g. "base", "dishwasher").
        width: Width along the run in mm.
        position: Distance of the cabinet's left edge from the run origin.
        hinge_right: Door hinge side.
        material: Door material name.
        shelf_depth: Floating shelf depth (floating shelves only).
        shelf_height: Floating shelf thickness (floating shelves only).
        shelf_count: Number of floating shelves (floating shelves only).
        shelf_spacing: Vertical spacing between floating shelves.
    """

    id: int
    cabinet_run_id: int
    cabinet_type: str
    width: float
    position: float = 0.0
    hinge_right: bool = False
    material: str = "White Shaker"
    shelf_depth: float | None = None
    shelf_height: float | None = None
    shelf_count: int | None = None
    shelf_spacing: float | None = None

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("Cabinet width must be positive")

    @property
    def end(self) -> float:
        """Distance of the cabinet's right edge from the run origin."""
        return self.position + self.width

    @property
    def is_floating_shelf(self) -> bool:
        return self.cabinet_type == "floating_shelf"


@dataclass
class CabinetRun:
    """A rectangular run of cabinets.

    The run is anchored at its rear-left corner (start_pos_x, start_pos_y)
    and extends `length` along rotation_z and `depth` towards its front.

    Attributes:
        id: Run identifier, unique within the plan.
        start_pos_x: X of the rear-left corner.
        start_pos_y: Y of the rear-left corner.
        length: Length along the rear edge in mm.
        depth: Depth from rear to front in mm.
        rotation_z: Rotation in degrees.
        run_type: Base or Upper.
        start_type: Whether a filler occupies the start end.
        end_type: Whether a filler occupies the far end.
        snap_info: Standing wall constraint, if snapped.
    """

    id: int
    start_pos_x: float
    start_pos_y: float
    length: float
    depth: float
    rotation_z: float = 0.0
    run_type: CabinetRunType = CabinetRunType.BASE
    start_type: RunEndType = RunEndType.OPEN
    end_type: RunEndType = RunEndType.OPEN
    top_filler: bool = False
    is_island: bool = False
    omit_backsplash: bool = False
    snap_info: SnapInfo | None = None

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError("Run length must be non-negative")
        if self.depth <= 0:
            raise ValueError("Run depth must be positive")

    @property
    def start_pos(self) -> Point2D:
        return Point2D(self.start_pos_x, self.start_pos_y)

    @property
    def is_snapped(self) -> bool:
        return self.snap_info is not None

    def move_to(self, x: float, y: float) -> None:
        self.start_pos_x = x
        self.start_pos_y = y

    def corners(self) -> RunCorners:
        return rectangle_corners(self.start_pos, self.length, self.depth, self.rotation_z)


@dataclass
class Camera:
    """Viewpoint marker with no constraint logic."""

    x: float
    y: float
    height: float = 1600.0
    rotation: float = 0.0


@dataclass
class FocalPoint:
    """Point the camera looks at."""

    x: float
    y: float
    height: float = 1000.0


@dataclass
class Plan:
    """Aggregate holding everything that makes up a floor plan.

    Exactly one room is main; Plan.new() creates it and it is never removed.
    Id counters live on the aggregate so ids stay unique for its lifetime.
    """

    rooms: list[Room] = field(default_factory=list)
    cabinet_runs: list[CabinetRun] = field(default_factory=list)
    cabinets: list[Cabinet] = field(default_factory=list)
    camera: Camera | None = None
    focal_point: FocalPoint | None = None
    address: str = ""
    _next_room_number: int = field(default=1, repr=False)
    _next_run_id: int = field(default=1, repr=False)
    _next_cabinet_id: int = field(default=1, repr=False)

    @classmethod
    def new(cls, address: str = "") -> Plan:
        """Create an empty plan with its main room."""
        return cls(rooms=[Room(id=MAIN_ROOM_ID, is_main=True)], address=address)

    @property
    def main_room(self) -> Room:
        for room in self.rooms:
            if room.is_main:
                return room
        raise LookupError("Plan has no main room")

    def room(self, room_id: str) -> Room | None:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def get_room(self, room_id: str) -> Room:
        room = self.room(room_id)
        if room is None:
            raise KeyError(f"Unknown room '{room_id}'")
        return room

    def secondary_rooms(self) -> list[Room]:
        return [r for r in self.rooms if not r.is_main]

    def complete_rooms(self) -> list[Room]:
        return [r for r in self.rooms if r.is_complete]

    def run(self, run_id: int) -> CabinetRun | None:
        for run in self.cabinet_runs:
            if run.id == run_id:
                return run
        return None

    def get_run(self, run_id: int) -> CabinetRun:
        run = self.run(run_id)
        if run is None:
            raise KeyError(f"Unknown cabinet run {run_id}")
        return run

    def cabinet(self, cabinet_id: int) -> Cabinet | None:
        for cabinet in self.cabinets:
            if cabinet.id == cabinet_id:
                return cabinet
        return None

    def cabinets_in_run(self, run_id: int) -> list[Cabinet]:
        """Cabinets of a run ordered by position."""
        return sorted(
            (c for c in self.cabinets if c.cabinet_run_id == run_id),
            key=lambda c: c.position,
        )

    def runs_snapped_to(self, room_id: str) -> list[CabinetRun]:
        return [
            r for r in self.cabinet_runs
            if r.snap_info is not None and r.snap_info.room_id == room_id
        ]

    def new_room_id(self) -> str:
        while True:
            room_id = f"room-{self._next_room_number}"
            self._next_room_number += 1
            if self.room(room_id) is None:
                return room_id

    def new_run_id(self) -> int:
        used = {r.id for r in self.cabinet_runs}
        self._next_run_id = max(self._next_run_id, max(used, default=0) + 1)
        run_id = self._next_run_id
        self._next_run_id += 1
        return run_id

    def new_cabinet_id(self) -> int:
        used = {c.id for c in self.cabinets}
        self._next_cabinet_id = max(self._next_cabinet_id, max(used, default=0) + 1)
        cabinet_id = self._next_cabinet_id
        self._next_cabinet_id += 1
        return cabinet_id

    def copy(self) -> Plan:
        """Deep copy; attached points are rebound to the copied rooms."""
        return copy.deepcopy(self)


def total_cabinet_width(cabinets: list[Cabinet]) -> float:
    return math.fsum(c.width for c in cabinets)
