import logging

import numpy as np
import pytest

from floorplan_kernel import detect_rooms
from floorplan_kernel.logging_utils import debug_log_call


def test_topology_calls_are_logged_with_summaries(rectangle, caplog):
    caplog.set_level(logging.DEBUG, logger='floorplan_kernel.topology')

    detect_rooms(*rectangle, unit_scale=0.1)

    messages = [record.getMessage() for record in caplog.records]
    assert any(
        msg.startswith('-> detect_rooms(4 x Vertex[A, B, C, D], 4 x Segment[ab, bc, cd, da]')
        for msg in messages
    )
    assert any(msg.startswith('<- detect_rooms = 1 x Room[room_1]') for msg in messages)
    assert 'Detected 1 room(s) in 4 vertices / 4 segments' in messages


def test_debug_log_call_is_silent_above_debug(caplog):
    logger = logging.getLogger('floorplan_kernel.tests.quiet')
    caplog.set_level(logging.INFO, logger=logger.name)

    @debug_log_call(logger)
    def add(a, b):
        return a + b

    assert add(1, 2) == 3
    assert caplog.records == []


def test_debug_log_call_reports_and_reraises(caplog):
    logger = logging.getLogger('floorplan_kernel.tests.loud')
    caplog.set_level(logging.DEBUG, logger=logger.name)

    @debug_log_call(logger, name='explode')
    def explode(points):
        raise ValueError('boom')

    with pytest.raises(ValueError):
        explode(np.zeros((3, 2)))

    messages = [record.getMessage() for record in caplog.records]
    assert messages[0] == '-> explode(ndarray(shape=(3, 2), dtype=float64))'
    assert messages[1] == '!! explode raised ValueError: boom'


def test_debug_log_call_does_not_double_wrap():
    logger = logging.getLogger('floorplan_kernel.tests.once')

    def noop():
        return None

    wrapped = debug_log_call(logger)(noop)
    assert debug_log_call(logger)(wrapped) is wrapped
