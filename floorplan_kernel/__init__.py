from .types import (
    Bounds,
    Point,
    Room,
    Segment,
    SelectableElement,
    SnapObject,
    TJunction,
    Vertex,
    WallCleanupResult,
    WallGap,
    WallSegment,
    resolve_wall_segments,
)
from .validate import ContractError
from .config import KernelConfig, get_kernel_config, set_kernel_config, reset_kernel_config
from .geometry import (
    PolygonCheck,
    angle_locked_point,
    closest_point_on_segment,
    distance,
    offset_wall,
    orthogonal_point,
    parallel_point,
    perpendicular_point,
    point_in_polygon,
    polygon_area,
    polygon_centroid,
    polygon_perimeter,
    segment_intersection,
    segments_intersect,
    validate_simple_polygon,
)
from .snap import (
    SNAP_PRIORITIES,
    SnapCandidate,
    SnapEngine,
    SnapSettings,
    SnapType,
    find_perpendicular_snap,
    find_snap_point,
)
from .topology import (
    auto_close_room,
    build_adjacency,
    cleanup_walls,
    detect_rooms,
    find_wall_gaps,
    suggest_room_name,
)
from .selection import SelectionManager, SelectionOptions
from .bulk import align, distribute, new_group_id

__all__ = [
    'Bounds',
    'Point',
    'Room',
    'Segment',
    'SelectableElement',
    'SnapObject',
    'TJunction',
    'Vertex',
    'WallCleanupResult',
    'WallGap',
    'WallSegment',
    'resolve_wall_segments',
    'ContractError',
    'KernelConfig',
    'get_kernel_config',
    'set_kernel_config',
    'reset_kernel_config',
    'PolygonCheck',
    'angle_locked_point',
    'closest_point_on_segment',
    'distance',
    'offset_wall',
    'orthogonal_point',
    'parallel_point',
    'perpendicular_point',
    'point_in_polygon',
    'polygon_area',
    'polygon_centroid',
    'polygon_perimeter',
    'segment_intersection',
    'segments_intersect',
    'validate_simple_polygon',
    'SNAP_PRIORITIES',
    'SnapCandidate',
    'SnapEngine',
    'SnapSettings',
    'SnapType',
    'find_perpendicular_snap',
    'find_snap_point',
    'auto_close_room',
    'build_adjacency',
    'cleanup_walls',
    'detect_rooms',
    'find_wall_gaps',
    'suggest_room_name',
    'SelectionManager',
    'SelectionOptions',
    'align',
    'distribute',
    'new_group_id',
]
