"""Clockwise normalization of room polygons for export.

Exported rooms list their points clockwise (Y axis up, so a negative
signed area). Reordering points renumbers walls, so doors and windows are
remapped onto the new wall indices, with their position measured from the
other end when a wall's direction flipped.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Sequence
from typing import TypeVar

from ..entities import WallFeature
from ..geometry import centroid, distance, signed_area
from ..value_objects import Point2D

__all__ = [
    "remap_wall_features",
    "sort_points_clockwise",
]

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=WallFeature)


def sort_points_clockwise(
    points: Sequence[Point2D],
) -> tuple[list[Point2D], dict[int, int]]:
    """Order points clockwise around their vertex centroid.

    Already clockwise polygons (negative signed area) keep their order, so
    the operation is idempotent.

    Returns:
        The reordered points and a map from old to new point index.
    """
    n = len(points)
    if n < 3 or signed_area(points) < 0:
        return list(points), {i: i for i in range(n)}

    c = centroid(points)
    order = sorted(
        range(n),
        key=lambda i: -math.atan2(points[i].y - c.y, points[i].x - c.x),
    )
    index_map = {old: new for new, old in enumerate(order)}
    return [points[i] for i in order], index_map


def remap_wall_features(
    features: Sequence[F],
    index_map: dict[int, int],
    points: Sequence[Point2D],
) -> list[F]:
    """Move features onto the walls they occupy after a point reordering.

    Args:
        features: Doors or windows indexed against the old point order.
        index_map: Old to new point index map from sort_points_clockwise.
        points: The reordered points.

    Returns:
        Remapped copies. A feature whose wall endpoints are no longer
        adjacent has no wall to live on and is dropped.
    """
    n = len(points)
    result: list[F] = []
    for feature in features:
        old_start = feature.wall_index
        old_end = (old_start + 1) % n
        if old_start not in index_map or old_end not in index_map:
            logger.warning(f"Dropping feature on unknown wall {old_start}")
            continue
        a = index_map[old_start]
        b = index_map[old_end]

        if b == (a + 1) % n:
            result.append(dataclasses.replace(feature, wall_index=a))
        elif a == (b + 1) % n:
            # Wall now runs b -> a; the pair (n - 1, 0) is the closing wall.
            wall_length = distance(points[b], points[a])
            result.append(
                dataclasses.replace(
                    feature,
                    wall_index=b,
                    position=max(0.0, wall_length - feature.position - feature.width),
                    start_point=feature.end_point,
                    end_point=feature.start_point,
                )
            )
        else:
            logger.warning(
                f"Dropping feature on wall {old_start}: its endpoints are no longer adjacent"
            )
    return result
