from . import (
    Bounds,
    SelectableElement,
    SelectionManager,
    Segment,
    SnapObject,
    Vertex,
    align,
    cleanup_walls,
    detect_rooms,
    distribute,
    find_snap_point,
    find_wall_gaps,
    resolve_wall_segments,
    suggest_room_name,
)

# Two bays split by the wall B-E (room detection reports the outer outline A-B-C-E-H),
# plus a stray corner G just off H.
VERTICES = [
    Vertex('A', 0, 0),
    Vertex('B', 200, 0),
    Vertex('C', 400, 0),
    Vertex('D', 400, 160),
    Vertex('E', 200, 160),
    Vertex('H', 0, 160),
    Vertex('G', 0.5, 160.4),
]
SEGMENTS = [
    Segment('ab', 'A', 'B'),
    Segment('bc', 'B', 'C'),
    Segment('cd', 'C', 'D'),
    Segment('de', 'D', 'E'),
    Segment('eh', 'E', 'H'),
    Segment('ha', 'H', 'A'),
    Segment('be', 'B', 'E'),
]
ELEMENTS = [
    SelectableElement('bench', 'equipment', Bounds(20, 20, 40, 20), category='furniture'),
    SelectableElement('saw', 'equipment', Bounds(90, 35, 30, 30), category='machinery'),
    SelectableElement('rack', 'storage', Bounds(250, 28, 60, 15), category='storage'),
]


def run():
    walls = resolve_wall_segments(VERTICES, SEGMENTS)
    snap = find_snap_point((203, 4), walls, [SnapObject('saw', 90, 35, 30, 30)], grid_size=12)
    print(f"Snap near (203, 4): {snap}\n")

    print("Rooms:")
    for room in detect_rooms(VERTICES, SEGMENTS, unit_scale=0.1):
        print(f"  - {room.id} {room.vertices} area={room.area:.1f} -> {suggest_room_name(room)}")

    cleanup = cleanup_walls(VERTICES, SEGMENTS)
    print(f"\nMerged through: {cleanup.removed_vertices}")
    print(f"T-junctions: {[j.vertex_id for j in cleanup.flagged_t_junctions]}")
    print(f"Gaps: {find_wall_gaps(VERTICES, SEGMENTS, max_gap_distance=1.0)}")

    manager = SelectionManager()
    manager.select_box((0, 0), (150, 80), ELEMENTS)
    manager.select_single('rack', additive=True)
    print(f"\nSelection: {manager.get_selection()} bounds={manager.get_selection_bounds(ELEMENTS)}")
    print(f"Align top: {align(ELEMENTS, manager.get_selection(), 'top')}")
    print(f"Distribute horizontally: {distribute(ELEMENTS, manager.get_selection(), 'horizontal')}")


if __name__ == "__main__":
    run()
