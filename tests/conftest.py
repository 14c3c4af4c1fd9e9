import pytest

from floorplan_kernel import Segment, Vertex, reset_kernel_config


@pytest.fixture(autouse=True)
def _default_kernel_config():
    reset_kernel_config()
    yield
    reset_kernel_config()


@pytest.fixture
def rectangle():
    vertices = [
        Vertex('A', 0, 0),
        Vertex('B', 100, 0),
        Vertex('C', 100, 80),
        Vertex('D', 0, 80),
    ]
    segments = [
        Segment('ab', 'A', 'B'),
        Segment('bc', 'B', 'C'),
        Segment('cd', 'C', 'D'),
        Segment('da', 'D', 'A'),
    ]
    return vertices, segments
