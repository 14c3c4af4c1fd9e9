"""Entities exchanged between the host editor and the kernel."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

VertexId = str
SegmentId = str
Point = Tuple[float, float]


@dataclass
class Vertex:
    """A corner of the drawing in world units."""

    id: VertexId
    x: float
    y: float

    @property
    def point(self) -> Point:
        return (float(self.x), float(self.y))


@dataclass
class Segment:
    """Undirected wall edge between two vertices."""

    id: SegmentId
    a: VertexId
    b: VertexId
    thickness: Optional[float] = None
    material: Optional[str] = None

    @property
    def is_self_loop(self) -> bool:
        return self.a == self.b

    def joins(self, first: VertexId, second: VertexId) -> bool:
        return (self.a == first and self.b == second) or (self.a == second and self.b == first)

    def other_end(self, vertex_id: VertexId) -> VertexId:
        return self.b if self.a == vertex_id else self.a


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned box; ``y`` grows downward as on the editor canvas."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_corners(cls, start: Point, end: Point) -> "Bounds":
        return cls(
            x=min(start[0], end[0]),
            y=min(start[1], end[1]),
            width=abs(end[0] - start[0]),
            height=abs(end[1] - start[1]),
        )

    @classmethod
    def enclosing(cls, boxes: Iterable["Bounds"]) -> Optional["Bounds"]:
        boxes = list(boxes)
        if not boxes:
            return None
        min_x = min(box.left for box in boxes)
        min_y = min(box.top for box in boxes)
        max_x = max(box.right for box in boxes)
        max_y = max(box.bottom for box in boxes)
        return cls(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def intersects(self, other: "Bounds") -> bool:
        # Touching edges count as overlap.
        return not (
            self.right < other.left
            or other.right < self.left
            or self.bottom < other.top
            or other.bottom < self.top
        )

    def contains(self, other: "Bounds") -> bool:
        return (
            self.left <= other.left
            and self.top <= other.top
            and self.right >= other.right
            and self.bottom >= other.bottom
        )


@dataclass
class SelectableElement:
    """Selection view over any drawable the host wants to expose."""

    id: str
    type: str
    bounds: Bounds
    category: Optional[str] = None
    layer_id: Optional[str] = None


@dataclass(frozen=True)
class WallSegment:
    """Segment resolved to coordinates, as consumed by snapping."""

    id: str
    start: Point
    end: Point

    @property
    def is_degenerate(self) -> bool:
        return self.start[0] == self.end[0] and self.start[1] == self.end[1]


@dataclass(frozen=True)
class SnapObject:
    id: str
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass
class Room:
    """Closed cycle of the wall graph with derived measurements."""

    id: str
    name: str
    vertices: List[VertexId]
    area: float
    perimeter: float
    centroid: Point
    type: str


@dataclass
class TJunction:
    vertex_id: VertexId
    connected_segments: List[SegmentId]


@dataclass
class WallCleanupResult:
    merged_segments: List[Segment] = field(default_factory=list)
    removed_vertices: List[VertexId] = field(default_factory=list)
    flagged_t_junctions: List[TJunction] = field(default_factory=list)


@dataclass
class WallGap:
    v1: VertexId
    v2: VertexId
    distance: float


def index_vertices(vertices: Iterable[Vertex]) -> Dict[VertexId, Vertex]:
    """Return an id -> vertex index; the first occurrence of a repeated id wins."""

    index: Dict[VertexId, Vertex] = {}
    for vertex in vertices:
        index.setdefault(vertex.id, vertex)
    return index


def valid_segments(segments: Iterable[Segment], index: Dict[VertexId, Vertex]) -> List[Segment]:
    """Drop self-loops and segments that reference vertices missing from ``index``."""

    kept: List[Segment] = []
    for seg in segments:
        if seg.is_self_loop:
            logger.debug("Skipping self-loop segment %s", seg.id)
            continue
        if seg.a not in index or seg.b not in index:
            logger.debug("Skipping segment %s with missing vertex (%s, %s)", seg.id, seg.a, seg.b)
            continue
        kept.append(seg)
    return kept


def resolve_wall_segments(
    vertices: Sequence[Vertex], segments: Sequence[Segment]
) -> List[WallSegment]:
    """Resolve vertex ids to coordinates so the graph can be fed to snapping."""

    index = index_vertices(vertices)
    return [
        WallSegment(id=seg.id, start=index[seg.a].point, end=index[seg.b].point)
        for seg in valid_segments(segments, index)
    ]
