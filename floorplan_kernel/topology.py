"""Wall-graph analysis: rooms, collinear cleanup, T-junctions and gaps.

The wall graph is the host's flat vertex/segment lists plus an adjacency map
keyed by vertex id.  Every function here reads those lists and returns new
values; malformed segments (self-loops, missing vertices) are skipped.

Room detection runs one depth-first search per vertex, so its cost grows
exponentially with connectivity.  Wall graphs have vertex degree <= 4 in
practice and detection is only run on explicit user action.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import replace
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Set, Tuple

import numpy as np
from scipy.spatial import cKDTree

from .config import KernelConfig, active_kernel_config
from .geometry import polygon_area, polygon_centroid, polygon_perimeter
from .logging_utils import apply_debug_logging
from .types import (
    Room,
    Segment,
    TJunction,
    Vertex,
    VertexId,
    WallCleanupResult,
    WallGap,
    index_vertices,
    valid_segments,
)
from .validate import require_non_negative

logger = logging.getLogger(__name__)

Adjacency = Dict[VertexId, List[VertexId]]

AUTO_CLOSE_MATERIAL = "drywall"
AUTO_CLOSE_THICKNESS = 0.5


def build_adjacency(vertices: Sequence[Vertex], segments: Sequence[Segment]) -> Adjacency:
    """Undirected adjacency in segment order, restricted to well-formed segments."""

    index = index_vertices(vertices)
    adjacency: Adjacency = {}
    for seg in valid_segments(segments, index):
        adjacency.setdefault(seg.a, []).append(seg.b)
        adjacency.setdefault(seg.b, []).append(seg.a)
    return adjacency


def _find_cycle(start: VertexId, adjacency: Adjacency, limit: int) -> Optional[List[VertexId]]:
    path: List[VertexId] = [start]
    visited: Set[VertexId] = {start}
    frontier: List[Iterator[VertexId]] = [iter(adjacency.get(start, ()))]

    while frontier:
        advanced = False
        for neighbor in frontier[-1]:
            if neighbor == start:
                if len(path) > 2:
                    return list(path)
                continue
            if neighbor in visited or len(visited) >= limit:
                continue
            visited.add(neighbor)
            path.append(neighbor)
            frontier.append(iter(adjacency.get(neighbor, ())))
            advanced = True
            break
        if not advanced:
            frontier.pop()
            visited.discard(path.pop())
    return None


def _classify_room(area: float, config: KernelConfig) -> str:
    for bound, room_type in config.room_type_thresholds:
        if area < bound:
            return room_type
    return config.default_room_type


def detect_rooms(
    vertices: Sequence[Vertex], segments: Sequence[Segment], unit_scale: Optional[float] = None
) -> List[Room]:
    """Return every distinct closed cycle of the wall graph as a :class:`Room`.

    ``unit_scale`` converts world units to display units: areas are multiplied
    by its square and perimeters by it.  Centroids stay in world units and are
    the plain vertex mean.
    """

    config = active_kernel_config()
    scale = require_non_negative("unit_scale", config.unit_scale if unit_scale is None else unit_scale)

    index = index_vertices(vertices)
    adjacency = build_adjacency(vertices, segments)
    limit = len(index)

    rooms: List[Room] = []
    seen: Set[FrozenSet[VertexId]] = set()

    for vertex_id in index:
        cycle = _find_cycle(vertex_id, adjacency, limit)
        if cycle is None:
            continue
        key = frozenset(cycle)
        if len(key) < 3 or key in seen:
            continue
        seen.add(key)

        points = [index[vid].point for vid in cycle]
        area = polygon_area(points) * scale * scale
        number = len(rooms) + 1
        rooms.append(
            Room(
                id=f"room_{number}",
                name=f"Room {number}",
                vertices=cycle,
                area=area,
                perimeter=polygon_perimeter(points) * scale,
                centroid=polygon_centroid(points),
                type=_classify_room(area, config),
            )
        )

    logger.info("Detected %d room(s) in %d vertices / %d segments", len(rooms), len(index), len(segments))
    return rooms


def _shared_vertex(first: Segment, second: Segment) -> Optional[VertexId]:
    if {first.a, first.b} == {second.a, second.b}:
        return None
    if first.b == second.a:
        return first.b
    if first.a == second.b:
        return first.a
    if first.b == second.b:
        return first.b
    if first.a == second.a:
        return first.a
    return None


def _angle_gap(first: float, second: float) -> float:
    """Absolute difference of two directions folded into ``[0, pi]``."""

    diff = abs(first - second) % (2 * math.pi)
    return min(diff, 2 * math.pi - diff)


def _mergeable(
    first: Segment, second: Segment, index: Dict[VertexId, Vertex], tolerance: float
) -> Optional[Tuple[VertexId, VertexId, VertexId]]:
    for seg in (first, second):
        if seg.is_self_loop or seg.a not in index or seg.b not in index:
            return None
    shared = _shared_vertex(first, second)
    if shared is None:
        return None
    outer_first = first.other_end(shared)
    outer_second = second.other_end(shared)
    v1 = index[outer_first]
    mid = index[shared]
    v2 = index[outer_second]

    heading_in = math.atan2(mid.y - v1.y, mid.x - v1.x)
    heading_out = math.atan2(v2.y - mid.y, v2.x - mid.x)
    gap = _angle_gap(heading_in, heading_out)
    if gap < tolerance or abs(gap - math.pi) < tolerance:
        return outer_first, shared, outer_second
    return None


def _merge_once(
    merged: List[Segment], index: Dict[VertexId, Vertex], tolerance: float
) -> Optional[VertexId]:
    for i in range(len(merged)):
        first = merged[i]
        for j in range(i + 1, len(merged)):
            second = merged[j]
            match = _mergeable(first, second, index, tolerance)
            if match is None:
                continue
            outer_first, shared, outer_second = match
            merged[:] = [seg for k, seg in enumerate(merged) if k != i and k != j]
            merged.append(replace(first, a=outer_first, b=outer_second))
            logger.debug("Merged %s and %s through %s", first.id, second.id, shared)
            return shared
    return None


def cleanup_walls(
    vertices: Sequence[Vertex],
    segments: Sequence[Segment],
    angle_tolerance: Optional[float] = None,
) -> WallCleanupResult:
    """Merge collinear neighbours to a fixed point and flag T-junctions.

    The pair scan restarts from the beginning after every merge, which is
    quadratic per merge; the merge order depends on it.
    """

    config = active_kernel_config()
    tolerance = require_non_negative(
        "angle_tolerance", config.angle_tolerance if angle_tolerance is None else angle_tolerance
    )
    index = index_vertices(vertices)
    # Malformed segments are carried through untouched; they never take part in a merge.
    result = WallCleanupResult(merged_segments=list(segments))

    while True:
        shared = _merge_once(result.merged_segments, index, tolerance)
        if shared is None:
            break
        result.removed_vertices.append(shared)

    for vertex_id in index:
        incident = [seg.id for seg in segments if seg.a == vertex_id or seg.b == vertex_id]
        if len(incident) == 3:
            result.flagged_t_junctions.append(TJunction(vertex_id=vertex_id, connected_segments=incident))

    logger.info(
        "Wall cleanup: %d merge(s), %d T-junction(s)",
        len(result.removed_vertices),
        len(result.flagged_t_junctions),
    )
    return result


def find_wall_gaps(
    vertices: Sequence[Vertex],
    segments: Sequence[Segment],
    max_gap_distance: Optional[float] = None,
) -> List[WallGap]:
    """Vertex pairs closer than ``max_gap_distance`` that no segment joins, nearest first."""

    config = active_kernel_config()
    limit = require_non_negative(
        "max_gap_distance", config.max_gap_distance if max_gap_distance is None else max_gap_distance
    )
    if len(vertices) < 2:
        return []

    connected = {frozenset((seg.a, seg.b)) for seg in segments}
    coords = np.asarray([(v.x, v.y) for v in vertices], dtype=float)
    tree = cKDTree(coords)

    gaps: List[Tuple[float, int, int]] = []
    # The tree compares squared distances, so pairs exactly at the limit can be
    # lost to rounding; widen the query and apply the exact test below.
    for i, j in tree.query_pairs(r=limit * (1 + 1e-9) + 1e-12):
        first, second = (i, j) if i < j else (j, i)
        if frozenset((vertices[first].id, vertices[second].id)) in connected:
            continue
        dx = float(vertices[second].x) - float(vertices[first].x)
        dy = float(vertices[second].y) - float(vertices[first].y)
        dist = math.sqrt(dx * dx + dy * dy)
        if dist <= limit:
            gaps.append((dist, first, second))

    gaps.sort()
    return [WallGap(v1=vertices[i].id, v2=vertices[j].id, distance=dist) for dist, i, j in gaps]


def auto_close_room(
    start_id: VertexId,
    end_id: VertexId,
    vertices: Sequence[Vertex],
    segments: Sequence[Segment],
) -> Optional[Segment]:
    """Propose a new wall joining two vertices, or ``None`` if that is not possible."""

    if start_id == end_id:
        return None
    index = index_vertices(vertices)
    if start_id not in index or end_id not in index:
        return None
    if any(seg.joins(start_id, end_id) for seg in segments):
        return None
    return Segment(
        id=f"seg_{uuid.uuid4().hex[:12]}",
        a=start_id,
        b=end_id,
        thickness=AUTO_CLOSE_THICKNESS,
        material=AUTO_CLOSE_MATERIAL,
    )


_NAME_TABLE: Dict[str, Tuple[Tuple[float, str], ...]] = {
    "bathroom": ((30.0, "Powder Room"), (50.0, "Half Bath"), (math.inf, "Full Bath")),
    "bedroom": ((100.0, "Small Bedroom"), (150.0, "Bedroom"), (math.inf, "Master Bedroom")),
    "kitchen": ((100.0, "Kitchenette"), (200.0, "Kitchen"), (math.inf, "Large Kitchen")),
    "living": ((150.0, "Living Room"), (300.0, "Great Room"), (math.inf, "Grand Hall")),
    "office": ((100.0, "Office"), (200.0, "Study"), (math.inf, "Library")),
    "hallway": ((math.inf, "Hallway"),),
    "storage": ((50.0, "Closet"), (100.0, "Storage"), (math.inf, "Warehouse")),
}


def suggest_room_name(room: Room) -> str:
    for bound, name in _NAME_TABLE.get(room.type, ()):
        if room.area < bound:
            return name
    return f"Room ({math.floor(room.area + 0.5)} sq ft)"


apply_debug_logging(globals(), logger=logger)
