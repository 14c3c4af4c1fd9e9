"""Snap resolution for pointer input.

Every call builds candidates from the current drawing, drops those outside
the snap radius and returns the best one by (priority desc, distance asc).
Nothing is cached between calls; hosts throttle invocation themselves.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Mapping, Optional, Sequence

from .config import active_kernel_config
from .geometry import closest_point_on_segment, distance, segment_intersection
from .types import Point, SnapObject, WallSegment
from .validate import ContractError, require_non_negative, require_positive

logger = logging.getLogger(__name__)


class SnapType(str, Enum):
    VERTEX = "vertex"
    INTERSECTION = "intersection"
    MIDPOINT = "midpoint"
    CENTER = "center"
    PERPENDICULAR = "perpendicular"
    GRID = "grid"


SNAP_PRIORITIES: Mapping[SnapType, int] = MappingProxyType(
    {
        SnapType.VERTEX: 10,
        SnapType.INTERSECTION: 9,
        SnapType.MIDPOINT: 8,
        SnapType.CENTER: 7,
        SnapType.PERPENDICULAR: 6,
        SnapType.GRID: 1,
    }
)

DEFAULT_SNAP_TYPES: FrozenSet[SnapType] = frozenset(
    {SnapType.VERTEX, SnapType.MIDPOINT, SnapType.CENTER, SnapType.INTERSECTION, SnapType.GRID}
)


@dataclass(frozen=True)
class SnapCandidate:
    x: float
    y: float
    type: SnapType
    element_id: Optional[str]
    priority: int
    distance: float

    @property
    def point(self) -> Point:
        return (self.x, self.y)


def _coerce_types(enabled_types: Optional[Iterable[object]]) -> FrozenSet[SnapType]:
    if enabled_types is None:
        return DEFAULT_SNAP_TYPES
    coerced = set()
    for item in enabled_types:
        try:
            coerced.add(SnapType(item))
        except ValueError:
            raise ContractError(f'unknown snap type "{item}"') from None
    return frozenset(coerced)


def _candidate(point: Point, kind: SnapType, element_id: Optional[str], pointer: Point) -> SnapCandidate:
    return SnapCandidate(
        x=point[0],
        y=point[1],
        type=kind,
        element_id=element_id,
        priority=SNAP_PRIORITIES[kind],
        distance=distance(point, pointer),
    )


def _grid_point(pointer: Point, grid_size: float) -> Point:
    # Round half up so a pointer midway between lines snaps to the higher one.
    return (
        math.floor(pointer[0] / grid_size + 0.5) * grid_size,
        math.floor(pointer[1] / grid_size + 0.5) * grid_size,
    )


def _intersections(segments: Sequence[WallSegment], epsilon: float) -> List[Point]:
    points: List[Point] = []
    for i in range(len(segments)):
        first = segments[i]
        for j in range(i + 1, len(segments)):
            second = segments[j]
            hit = segment_intersection(first.start, first.end, second.start, second.end, epsilon)
            if hit is not None:
                points.append(hit)
    return points


def _perpendicular_candidate(pointer: Point, segment: WallSegment) -> Optional[SnapCandidate]:
    foot = closest_point_on_segment(pointer, segment.start, segment.end)
    if foot is None:
        logger.debug("Skipping perpendicular snap on zero-length segment %s", segment.id)
        return None
    return _candidate(foot[0], SnapType.PERPENDICULAR, segment.id, pointer)


def find_snap_point(
    pointer: Point,
    segments: Sequence[WallSegment],
    objects: Sequence[SnapObject] = (),
    grid_size: Optional[float] = None,
    enabled_types: Optional[Iterable[object]] = None,
    snap_radius: Optional[float] = None,
    *,
    perpendicular_to: Optional[WallSegment] = None,
) -> Optional[SnapCandidate]:
    """Return the best snap target near ``pointer`` or ``None``.

    ``perpendicular_to`` adds the perpendicular foot on that one segment when
    the perpendicular type is enabled; it is never part of the default sweep.
    """

    config = active_kernel_config()
    radius = require_non_negative("snap_radius", config.snap_radius if snap_radius is None else snap_radius)
    types = _coerce_types(enabled_types)

    candidates: List[SnapCandidate] = []

    if SnapType.VERTEX in types:
        for seg in segments:
            candidates.append(_candidate(seg.start, SnapType.VERTEX, seg.id, pointer))
            candidates.append(_candidate(seg.end, SnapType.VERTEX, seg.id, pointer))

    if SnapType.MIDPOINT in types:
        for seg in segments:
            if seg.is_degenerate:
                continue
            mid = ((seg.start[0] + seg.end[0]) / 2, (seg.start[1] + seg.end[1]) / 2)
            candidates.append(_candidate(mid, SnapType.MIDPOINT, seg.id, pointer))

    if SnapType.CENTER in types:
        for obj in objects:
            candidates.append(_candidate(obj.center, SnapType.CENTER, obj.id, pointer))

    if SnapType.INTERSECTION in types:
        for point in _intersections(segments, config.intersection_epsilon):
            candidates.append(_candidate(point, SnapType.INTERSECTION, None, pointer))

    if SnapType.PERPENDICULAR in types and perpendicular_to is not None:
        perpendicular = _perpendicular_candidate(pointer, perpendicular_to)
        if perpendicular is not None:
            candidates.append(perpendicular)

    if SnapType.GRID in types:
        size = require_positive("grid_size", config.grid_size if grid_size is None else grid_size)
        candidates.append(_candidate(_grid_point(pointer, size), SnapType.GRID, None, pointer))

    in_range = [c for c in candidates if c.distance <= radius]
    if not in_range:
        return None
    in_range.sort(key=lambda c: (-c.priority, c.distance))
    return in_range[0]


def find_perpendicular_snap(
    pointer: Point, segment: WallSegment, snap_radius: Optional[float] = None
) -> Optional[SnapCandidate]:
    radius = require_non_negative(
        "snap_radius", active_kernel_config().snap_radius if snap_radius is None else snap_radius
    )
    candidate = _perpendicular_candidate(pointer, segment)
    if candidate is None or candidate.distance > radius:
        return None
    return candidate


@dataclass
class SnapSettings:
    enabled: bool = True
    snap_distance: float = field(default_factory=lambda: active_kernel_config().snap_radius)
    enabled_types: FrozenSet[SnapType] = DEFAULT_SNAP_TYPES


class SnapEngine:
    """Holds the editor's snap toggles and forwards to :func:`find_snap_point`."""

    def __init__(self, settings: Optional[SnapSettings] = None):
        settings = settings or SnapSettings()
        self._settings = replace(settings, enabled_types=_coerce_types(settings.enabled_types))
        require_non_negative("snap_distance", self._settings.snap_distance)

    @property
    def settings(self) -> SnapSettings:
        return replace(self._settings)

    def find_snap_point(
        self,
        pointer: Point,
        walls: Sequence[WallSegment],
        objects: Sequence[SnapObject] = (),
        grid_size: Optional[float] = None,
        *,
        perpendicular_to: Optional[WallSegment] = None,
    ) -> Optional[SnapCandidate]:
        if not self._settings.enabled:
            return None
        return find_snap_point(
            pointer,
            walls,
            objects,
            grid_size=grid_size,
            enabled_types=self._settings.enabled_types,
            snap_radius=self._settings.snap_distance,
            perpendicular_to=perpendicular_to,
        )

    def find_perpendicular_snap(self, pointer: Point, segment: WallSegment) -> Optional[SnapCandidate]:
        if not self._settings.enabled:
            return None
        return find_perpendicular_snap(pointer, segment, self._settings.snap_distance)

    def update_settings(self, **changes: object) -> None:
        if "enabled_types" in changes:
            changes["enabled_types"] = _coerce_types(changes["enabled_types"])  # type: ignore[arg-type]
        try:
            updated = replace(self._settings, **changes)
        except TypeError as exc:
            raise ContractError(str(exc)) from exc
        require_non_negative("snap_distance", updated.snap_distance)
        self._settings = updated
        logger.debug("Snap settings updated: %s", self._settings)

    def toggle_snap_type(self, kind: object, enabled: bool) -> None:
        (snap_type,) = _coerce_types([kind])
        types = set(self._settings.enabled_types)
        if enabled:
            types.add(snap_type)
        else:
            types.discard(snap_type)
        self._settings = replace(self._settings, enabled_types=frozenset(types))
