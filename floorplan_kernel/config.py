"""Default tolerances and interaction parameters for the kernel."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Tuple

from .validate import ContractError


@dataclass
class KernelConfig:
    """Values used whenever an operation is called without an explicit argument."""

    snap_radius: float = 15.0
    grid_size: float = 12.0
    intersection_epsilon: float = 1e-4
    unit_scale: float = 0.05
    angle_tolerance: float = 0.1
    max_gap_distance: float = 1.0
    brush_size: float = 20.0
    # (upper area bound, room type); areas at or above the last bound fall back to the default.
    room_type_thresholds: Tuple[Tuple[float, str], ...] = field(
        default_factory=lambda: (
            (50.0, "bathroom"),
            (150.0, "bedroom"),
            (250.0, "living"),
            (400.0, "office"),
        )
    )
    default_room_type: str = "storage"


_KERNEL_CONFIG = KernelConfig()


def get_kernel_config() -> KernelConfig:
    return copy.deepcopy(_KERNEL_CONFIG)


def set_kernel_config(config: KernelConfig) -> None:
    global _KERNEL_CONFIG
    if not isinstance(config, KernelConfig):
        raise ContractError(f"expected KernelConfig, got {type(config).__name__}")
    _KERNEL_CONFIG = copy.deepcopy(config)


def reset_kernel_config() -> None:
    set_kernel_config(KernelConfig())


def active_kernel_config() -> KernelConfig:
    """Return the live configuration without copying; callers must not mutate it."""

    return _KERNEL_CONFIG

