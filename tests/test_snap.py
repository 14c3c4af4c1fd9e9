import pytest

from floorplan_kernel import (
    ContractError,
    KernelConfig,
    SNAP_PRIORITIES,
    SnapEngine,
    SnapObject,
    SnapSettings,
    SnapType,
    WallSegment,
    find_perpendicular_snap,
    find_snap_point,
    resolve_wall_segments,
    set_kernel_config,
)


@pytest.fixture
def walls(rectangle):
    return resolve_wall_segments(*rectangle)


def test_grid_wins_when_vertex_is_outside_radius(walls):
    # (20, 0) is 20 units from vertex A and lies on a grid line
    snap = find_snap_point((20, 0), walls, grid_size=10, enabled_types={'vertex', 'grid'}, snap_radius=15)

    assert snap is not None
    assert snap.type is SnapType.GRID
    assert snap.point == pytest.approx((20.0, 0.0))
    assert snap.priority == 1


def test_vertex_priority_beats_closer_grid_point(walls):
    snap = find_snap_point((103, 2), walls, grid_size=7, enabled_types={'vertex', 'grid'}, snap_radius=15)

    assert snap.type is SnapType.VERTEX
    assert snap.point == (100.0, 0.0)
    # B is shared by ab and bc; the first generated candidate wins the tie
    assert snap.element_id == 'ab'


def test_nothing_within_radius_returns_none(walls):
    snap = find_snap_point(
        (50, 40), walls, grid_size=100, enabled_types={'vertex', 'midpoint', 'grid'}, snap_radius=15
    )
    assert snap is None


def test_intersection_outranks_coincident_midpoints():
    cross = [WallSegment('d1', (0, 0), (100, 100)), WallSegment('d2', (0, 100), (100, 0))]

    snap = find_snap_point((52, 49), cross, enabled_types={'intersection', 'midpoint'}, snap_radius=15)

    assert snap.type is SnapType.INTERSECTION
    assert snap.element_id is None
    assert snap.point == pytest.approx((50.0, 50.0))


def test_midpoint_and_center_candidates(walls):
    snap = find_snap_point((52, 3), walls, enabled_types={'midpoint'}, snap_radius=15)
    assert snap.type is SnapType.MIDPOINT
    assert snap.element_id == 'ab'
    assert snap.point == (50.0, 0.0)

    objects = [SnapObject('saw', 10, 10, 20, 20)]
    snap = find_snap_point((22, 21), walls, objects, enabled_types={'center'}, snap_radius=15)
    assert snap.type is SnapType.CENTER
    assert snap.element_id == 'saw'
    assert snap.point == (20.0, 20.0)


def test_zero_length_segment_is_skipped_for_midpoint_and_perpendicular():
    stub = WallSegment('z', (5, 5), (5, 5))

    assert (
        find_snap_point((5, 6), [stub], enabled_types={'midpoint', 'perpendicular'}, perpendicular_to=stub)
        is None
    )
    snap = find_snap_point((5, 6), [stub], enabled_types={'vertex', 'midpoint'})
    assert snap.type is SnapType.VERTEX


def test_perpendicular_snap_is_clamped_to_segment():
    wall = WallSegment('w', (0, 0), (100, 0))

    snap = find_perpendicular_snap((30, 5), wall, snap_radius=15)
    assert snap.type is SnapType.PERPENDICULAR
    assert snap.point == pytest.approx((30.0, 0.0))
    assert snap.distance == pytest.approx(5.0)

    assert find_perpendicular_snap((130, 5), wall, snap_radius=15) is None
    far = find_perpendicular_snap((130, 5), wall, snap_radius=40)
    assert far.point == pytest.approx((100.0, 0.0))


def test_perpendicular_only_joins_sweep_for_reference_segment():
    wall = WallSegment('w', (0, 0), (100, 0))

    assert find_snap_point((33, 4), [wall], enabled_types={'perpendicular'}) is None

    snap = find_snap_point(
        (33, 4), [wall], grid_size=10, enabled_types={'perpendicular', 'grid'}, perpendicular_to=wall
    )
    assert snap.type is SnapType.PERPENDICULAR
    assert snap.point == pytest.approx((33.0, 0.0))


def test_grid_rounds_half_up():
    snap = find_snap_point((5, 15), [], grid_size=10, enabled_types={'grid'}, snap_radius=100)
    assert snap.point == (10.0, 20.0)


def test_default_radius_comes_from_config(walls):
    assert find_snap_point((103, 4), walls, enabled_types={'vertex'}) is not None

    set_kernel_config(KernelConfig(snap_radius=1.0))
    assert find_snap_point((103, 4), walls, enabled_types={'vertex'}) is None


@pytest.mark.parametrize(
    'kwargs',
    [
        {'snap_radius': -1},
        {'enabled_types': {'tangent'}},
        {'enabled_types': {'grid'}, 'grid_size': 0},
    ],
)
def test_contract_violations_raise(walls, kwargs):
    with pytest.raises(ContractError):
        find_snap_point((0, 0), walls, **kwargs)


def test_priority_table_is_read_only():
    assert SNAP_PRIORITIES[SnapType.VERTEX] == 10
    assert SNAP_PRIORITIES[SnapType.GRID] == 1
    with pytest.raises(TypeError):
        SNAP_PRIORITIES[SnapType.GRID] = 50


def test_snap_engine_respects_toggles(walls):
    engine = SnapEngine(SnapSettings(snap_distance=15, enabled_types=frozenset({'vertex', 'grid'})))

    assert engine.find_snap_point((103, 2), walls, grid_size=7).type is SnapType.VERTEX

    engine.toggle_snap_type('vertex', False)
    assert engine.find_snap_point((103, 2), walls, grid_size=7).type is SnapType.GRID
    assert SnapType.VERTEX not in engine.settings.enabled_types

    engine.update_settings(enabled=False)
    assert engine.find_snap_point((103, 2), walls, grid_size=7) is None
    assert engine.find_perpendicular_snap((30, 5), walls[0]) is None


def test_snap_engine_rejects_bad_settings():
    engine = SnapEngine()
    with pytest.raises(ContractError):
        engine.update_settings(snap_distance=-5)
    with pytest.raises(ContractError):
        engine.update_settings(colour='red')
    with pytest.raises(ContractError):
        engine.toggle_snap_type('tangent', True)
    assert engine.settings.snap_distance == 15.0
