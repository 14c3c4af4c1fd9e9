"""Multi-mode selection over axis-aligned element boxes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from .config import active_kernel_config
from .geometry import point_in_polygon
from .types import Bounds, Point, SelectableElement
from .validate import ContractError, require_choice, require_non_negative

logger = logging.getLogger(__name__)

SELECTION_MODES = ("single", "box", "lasso", "magic_wand", "paint")
BOX_COMPARE_MODES = ("intersect", "contain")
SIMILARITY_CRITERIA = ("type", "category", "layer")


@dataclass
class SelectionOptions:
    mode: str = "single"
    additive: bool = False
    subtractive: bool = False
    brush_size: float = field(default_factory=lambda: active_kernel_config().brush_size)

    def __post_init__(self) -> None:
        require_choice("selection mode", self.mode, SELECTION_MODES)
        require_non_negative("brush_size", self.brush_size)


def box_hits(
    start: Point, end: Point, elements: Sequence[SelectableElement], compare_mode: str = "intersect"
) -> List[str]:
    require_choice("box compare mode", compare_mode, BOX_COMPARE_MODES)
    box = Bounds.from_corners(start, end)
    if compare_mode == "intersect":
        return [el.id for el in elements if box.intersects(el.bounds)]
    return [el.id for el in elements if box.contains(el.bounds)]


def lasso_hits(path: Sequence[Point], elements: Sequence[SelectableElement]) -> List[str]:
    """Elements whose box center lies inside the lasso ring (not full-shape containment)."""

    return [el.id for el in elements if point_in_polygon(el.bounds.center, path)]


def similar_hits(
    reference: SelectableElement, elements: Sequence[SelectableElement], criteria: str = "type"
) -> List[str]:
    require_choice("similarity criteria", criteria, SIMILARITY_CRITERIA)
    if criteria == "type":
        return [el.id for el in elements if el.type == reference.type]
    if criteria == "category":
        return [el.id for el in elements if el.category == reference.category]
    return [el.id for el in elements if el.layer_id == reference.layer_id]


def paint_hits(
    path: Sequence[Point], elements: Sequence[SelectableElement], brush_size: float
) -> List[str]:
    """Elements whose box center is within ``brush_size`` of any stroke point, in element order."""

    require_non_negative("brush_size", brush_size)
    if not path or not elements:
        return []
    stroke = np.asarray(path, dtype=float).reshape(-1, 2)
    centers = np.asarray([el.bounds.center for el in elements], dtype=float)
    # (stroke points) x (elements) distance matrix
    deltas = stroke[:, None, :] - centers[None, :, :]
    touched = (np.hypot(deltas[..., 0], deltas[..., 1]) <= brush_size).any(axis=0)
    return [el.id for el, hit in zip(elements, touched) if hit]


class SelectionManager:
    """Owns the current selection; each mode is a pure hit function plus a merge."""

    def __init__(self, options: Optional[SelectionOptions] = None):
        self._options = options or SelectionOptions()
        # dict as an insertion-ordered set
        self._selected: Dict[str, None] = {}

    @property
    def options(self) -> SelectionOptions:
        return replace(self._options)

    def update_options(self, **changes: object) -> None:
        try:
            self._options = replace(self._options, **changes)
        except TypeError as exc:
            raise ContractError(str(exc)) from exc

    def _merge(self, hits: Iterable[str], additive: bool) -> None:
        if not additive:
            self._selected.clear()
        for element_id in hits:
            self._selected[element_id] = None

    def select_single(self, element_id: str, additive: bool = False, subtractive: bool = False) -> None:
        if subtractive:
            self._selected.pop(element_id, None)
        elif additive:
            self._selected[element_id] = None
        else:
            self._selected = {element_id: None}

    def select_box(
        self,
        start: Point,
        end: Point,
        elements: Sequence[SelectableElement],
        compare_mode: str = "intersect",
        additive: bool = False,
    ) -> List[str]:
        hits = box_hits(start, end, elements, compare_mode)
        self._merge(hits, additive)
        return hits

    def select_lasso(
        self, path: Sequence[Point], elements: Sequence[SelectableElement], additive: bool = False
    ) -> List[str]:
        hits = lasso_hits(path, elements)
        self._merge(hits, additive)
        return hits

    def select_similar(
        self,
        reference: SelectableElement,
        elements: Sequence[SelectableElement],
        criteria: str = "type",
        additive: bool = False,
    ) -> List[str]:
        hits = similar_hits(reference, elements, criteria)
        self._merge(hits, additive)
        return hits

    def select_paint(
        self,
        path: Sequence[Point],
        elements: Sequence[SelectableElement],
        brush_size: Optional[float] = None,
        additive: bool = True,
    ) -> List[str]:
        """Brush over elements; returns only the ids this stroke newly added."""

        size = self._options.brush_size if brush_size is None else brush_size
        hits = paint_hits(path, elements, size)
        added = [element_id for element_id in hits if element_id not in self._selected]
        self._merge(hits, additive)
        return added

    def select(self, mode: Optional[str] = None, **params: object) -> Optional[List[str]]:
        """Dispatch to the handler for ``mode`` (default: the configured mode)."""

        mode = require_choice("selection mode", mode or self._options.mode, SELECTION_MODES)
        # paint keeps adding unless told otherwise
        additive = params.pop("additive", True if mode == "paint" else self._options.additive)
        try:
            if mode == "single":
                subtractive = params.pop("subtractive", self._options.subtractive)
                self.select_single(params.pop("element_id"), additive=additive, subtractive=subtractive)
                result = None
            elif mode == "box":
                result = self.select_box(
                    params.pop("start"),
                    params.pop("end"),
                    params.pop("elements"),
                    compare_mode=params.pop("compare_mode", "intersect"),
                    additive=additive,
                )
            elif mode == "lasso":
                result = self.select_lasso(params.pop("path"), params.pop("elements"), additive=additive)
            elif mode == "magic_wand":
                result = self.select_similar(
                    params.pop("reference"),
                    params.pop("elements"),
                    criteria=params.pop("criteria", "type"),
                    additive=additive,
                )
            else:
                result = self.select_paint(
                    params.pop("path"),
                    params.pop("elements"),
                    brush_size=params.pop("brush_size", None),
                    additive=additive,
                )
        except KeyError as exc:
            raise ContractError(f"{mode} selection requires parameter {exc.args[0]!r}") from None
        if params:
            raise ContractError(f"unexpected parameters for {mode} selection: {', '.join(sorted(params))}")
        return result

    def select_all(self, elements: Sequence[SelectableElement]) -> None:
        self._selected = {el.id: None for el in elements}

    def deselect_all(self) -> None:
        self._selected.clear()

    def invert_selection(self, elements: Sequence[SelectableElement]) -> None:
        self._selected = {el.id: None for el in elements if el.id not in self._selected}

    def get_selection(self) -> List[str]:
        return list(self._selected)

    def selection_count(self) -> int:
        return len(self._selected)

    def is_selected(self, element_id: str) -> bool:
        return element_id in self._selected

    def get_selection_bounds(self, elements: Sequence[SelectableElement]) -> Optional[Bounds]:
        return Bounds.enclosing(el.bounds for el in elements if el.id in self._selected)
