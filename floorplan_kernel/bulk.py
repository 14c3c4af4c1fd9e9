"""Align/distribute edits; each returns ``{element id: new top-left}`` for the host to apply."""

from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterable, List, Sequence

from .logging_utils import apply_debug_logging
from .types import Bounds, Point, SelectableElement
from .validate import ContractError, require_choice

logger = logging.getLogger(__name__)

ALIGN_EDGES = ("left", "center", "right", "top", "middle", "bottom")
DISTRIBUTE_AXES = ("horizontal", "vertical")


def _selected(elements: Sequence[SelectableElement], selected_ids: Iterable[str]) -> List[SelectableElement]:
    wanted = set(selected_ids)
    return [el for el in elements if el.id in wanted]


def align(
    elements: Sequence[SelectableElement], selected_ids: Iterable[str], edge: str
) -> Dict[str, Point]:
    require_choice("align edge", edge, ALIGN_EDGES)
    selected = _selected(elements, selected_ids)
    overall = Bounds.enclosing(el.bounds for el in selected)
    if overall is None:
        return {}

    positions: Dict[str, Point] = {}
    for el in selected:
        box = el.bounds
        x, y = box.x, box.y
        if edge == "left":
            x = overall.left
        elif edge == "center":
            x = overall.x + (overall.width - box.width) / 2
        elif edge == "right":
            x = overall.right - box.width
        elif edge == "top":
            y = overall.top
        elif edge == "middle":
            y = overall.y + (overall.height - box.height) / 2
        else:
            y = overall.bottom - box.height
        positions[el.id] = (x, y)
    return positions


def distribute(
    elements: Sequence[SelectableElement], selected_ids: Iterable[str], axis: str
) -> Dict[str, Point]:
    """Space the selection evenly along ``axis`` keeping the outermost elements fixed.

    Needs at least three selected elements; otherwise nothing moves.
    """

    require_choice("distribute axis", axis, DISTRIBUTE_AXES)
    selected = _selected(elements, selected_ids)
    if len(selected) < 3:
        return {}

    horizontal = axis == "horizontal"

    def near(el: SelectableElement) -> float:
        return el.bounds.x if horizontal else el.bounds.y

    def size(el: SelectableElement) -> float:
        return el.bounds.width if horizontal else el.bounds.height

    ordered = sorted(selected, key=near)
    first, last = ordered[0], ordered[-1]
    outer_span = near(last) + size(last) - near(first)
    gap = (outer_span - sum(size(el) for el in ordered)) / (len(ordered) - 1)

    positions: Dict[str, Point] = {}
    cursor = near(first) + size(first) + gap
    for el in ordered[1:-1]:
        if horizontal:
            positions[el.id] = (cursor, el.bounds.y)
        else:
            positions[el.id] = (el.bounds.x, cursor)
        cursor += size(el) + gap
    return positions


def new_group_id(selected_ids: Iterable[str]) -> str:
    """Allocate an id for grouping the current selection."""

    if not list(selected_ids):
        raise ContractError("cannot group an empty selection")
    return f"group-{uuid.uuid4().hex[:12]}"


apply_debug_logging(globals(), logger=logger)
