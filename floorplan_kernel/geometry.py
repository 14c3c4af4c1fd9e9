"""Pure 2D primitives shared by the snap, topology and selection engines."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .types import Point
from .validate import require_choice

INTERSECTION_EPSILON = 1e-4
_ORIENT_EPS = 1e-6


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def segment_intersection(
    p1: Point, p2: Point, p3: Point, p4: Point, epsilon: float = INTERSECTION_EPSILON
) -> Optional[Point]:
    """Return the crossing point of segments ``p1-p2`` and ``p3-p4``.

    Near-parallel pairs (``|denominator| < epsilon``) are rejected as unstable,
    and the point must lie within both finite segments (``t, u`` in ``[0, 1]``).
    """

    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = p3
    x4, y4 = p4

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < epsilon:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom
    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return (x1 + t * (x2 - x1), y1 + t * (y2 - y1))
    return None


def point_in_polygon(point: Point, ring: Sequence[Point]) -> bool:
    """Crossing-number test; the ring may be non-convex and need not repeat its first point.

    The answer for a point lying exactly on an edge is unspecified.
    """

    if len(ring) < 3:
        return False
    px, py = point
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i]
        xj, yj = ring[j]
        if (yi > py) != (yj > py) and px < (xj - xi) * (py - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def polygon_area(points: Sequence[Point]) -> float:
    """Shoelace area of the ring, always non-negative."""

    if len(points) < 3:
        return 0.0
    coords = np.asarray(points, dtype=float)
    xs = coords[:, 0]
    ys = coords[:, 1]
    signed = float(np.dot(xs, np.roll(ys, -1)) - np.dot(np.roll(xs, -1), ys))
    return abs(signed) / 2.0


def polygon_perimeter(points: Sequence[Point]) -> float:
    if len(points) < 2:
        return 0.0
    coords = np.asarray(points, dtype=float)
    edges = np.roll(coords, -1, axis=0) - coords
    return float(np.hypot(edges[:, 0], edges[:, 1]).sum())


def polygon_centroid(points: Sequence[Point]) -> Point:
    """Arithmetic mean of the vertices.

    This is not the area-weighted centroid: for non-convex rings it can fall
    outside the polygon.
    """

    if not points:
        raise ValueError("polygon_centroid requires at least one point")
    coords = np.asarray(points, dtype=float)
    mean = coords.mean(axis=0)
    return (float(mean[0]), float(mean[1]))


def closest_point_on_segment(point: Point, a: Point, b: Point) -> Optional[Tuple[Point, float]]:
    """Foot of the perpendicular from ``point`` onto ``a-b`` clamped to the segment.

    Returns ``(foot, t)`` or ``None`` for a zero-length segment.
    """

    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return None
    t = ((point[0] - a[0]) * dx + (point[1] - a[1]) * dy) / length_sq
    t = min(max(t, 0.0), 1.0)
    return (a[0] + t * dx, a[1] + t * dy), t


OFFSET_SIDES = ("left", "right")


def _along(start: Point, length: float, angle: float) -> Point:
    return (start[0] + length * math.cos(angle), start[1] + length * math.sin(angle))


def orthogonal_point(start: Point, current: Point) -> Point:
    """Lock ``current`` to the horizontal or vertical through ``start``, whichever is closer."""

    if abs(current[0] - start[0]) > abs(current[1] - start[1]):
        return (current[0], start[1])
    return (start[0], current[1])


def angle_locked_point(start: Point, current: Point, angle_degrees: float) -> Point:
    return _along(start, distance(start, current), math.radians(angle_degrees))


def parallel_point(ref_start: Point, ref_end: Point, start: Point, current: Point) -> Point:
    """Keep the pointer's reach from ``start`` but follow the reference wall's direction."""

    heading = math.atan2(ref_end[1] - ref_start[1], ref_end[0] - ref_start[0])
    return _along(start, distance(start, current), heading)


def perpendicular_point(ref_start: Point, ref_end: Point, start: Point, current: Point) -> Point:
    heading = math.atan2(ref_end[1] - ref_start[1], ref_end[0] - ref_start[0]) + math.pi / 2
    return _along(start, distance(start, current), heading)


def offset_wall(
    wall_start: Point, wall_end: Point, offset: float, side: str = "right"
) -> Optional[Tuple[Point, Point]]:
    """Translate a wall along its normal ``(-dy, dx) / length``.

    ``'right'`` moves along the normal, ``'left'`` against it.  Returns
    ``None`` for a zero-length wall.
    """

    require_choice("offset side", side, OFFSET_SIDES)
    dx = wall_end[0] - wall_start[0]
    dy = wall_end[1] - wall_start[1]
    length = math.hypot(dx, dy)
    if length == 0.0:
        return None
    sign = 1.0 if side == "right" else -1.0
    ox = -dy / length * offset * sign
    oy = dx / length * offset * sign
    return (wall_start[0] + ox, wall_start[1] + oy), (wall_end[0] + ox, wall_end[1] + oy)


def _orientation(a: Point, b: Point, c: Point) -> int:
    value = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
    if abs(value) < _ORIENT_EPS:
        return 0
    return 1 if value > 0 else 2


def _on_segment(a: Point, b: Point, c: Point) -> bool:
    return (
        min(a[0], b[0]) - _ORIENT_EPS <= c[0] <= max(a[0], b[0]) + _ORIENT_EPS
        and min(a[1], b[1]) - _ORIENT_EPS <= c[1] <= max(a[1], b[1]) + _ORIENT_EPS
    )


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    """Boolean intersection test that also reports touching and collinear overlap."""

    o1 = _orientation(p1, p2, q1)
    o2 = _orientation(p1, p2, q2)
    o3 = _orientation(q1, q2, p1)
    o4 = _orientation(q1, q2, p2)

    if o1 != o2 and o3 != o4:
        return True
    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, p2, q2):
        return True
    if o3 == 0 and _on_segment(q1, q2, p1):
        return True
    if o4 == 0 and _on_segment(q1, q2, p2):
        return True
    return False


@dataclass
class PolygonCheck:
    ok: bool
    reason: Optional[str] = None


def validate_simple_polygon(points: Sequence[Point]) -> PolygonCheck:
    """Check that ``points`` is a closed ring without self-intersections.

    The ring must repeat its first point at the end.
    """

    if len(points) < 3:
        return PolygonCheck(False, "Need at least 3 points")

    first = points[0]
    last = points[-1]
    if abs(first[0] - last[0]) > _ORIENT_EPS or abs(first[1] - last[1]) > _ORIENT_EPS:
        return PolygonCheck(False, "Polygon is not closed")

    edges = [(i, i + 1) for i in range(len(points) - 1)]
    for i in range(len(edges)):
        for j in range(i + 1, len(edges)):
            e1 = edges[i]
            e2 = edges[j]
            if set(e1) & set(e2):
                continue
            # first and last edges meet at the closing vertex
            if i == 0 and j == len(edges) - 1:
                continue
            if segments_intersect(points[e1[0]], points[e1[1]], points[e2[0]], points[e2[1]]):
                return PolygonCheck(False, "Polygon self-intersects")
    return PolygonCheck(True)
