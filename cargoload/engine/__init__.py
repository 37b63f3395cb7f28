"""
Container Loading Engine

This module implements the placement engine with:
- First-fit-decreasing box ordering
- Extreme-point candidate generation
- Bounds, weight, overlap, support and stacking validation
- A greedy single-pass orchestrator
"""

from .cargo import (
    CONTAINER_TYPES,
    EPSILON,
    PRESET_COLORS,
    CargoBox,
    ContainerSpec,
    InvalidInputError,
    get_container,
    reset_boxes,
)
from .candidates import CandidatePoint, CandidateSet
from .ordering import order_boxes
from .placement import PackingReport, PackingRun, calculate_packing, run_packing
from .state import PlacementState
from .validator import FailureReason, PlacementValidator, ValidationResult

__all__ = [
    "CONTAINER_TYPES",
    "EPSILON",
    "PRESET_COLORS",
    "CargoBox",
    "ContainerSpec",
    "InvalidInputError",
    "get_container",
    "reset_boxes",
    "CandidatePoint",
    "CandidateSet",
    "order_boxes",
    "PackingReport",
    "PackingRun",
    "calculate_packing",
    "run_packing",
    "PlacementState",
    "FailureReason",
    "PlacementValidator",
    "ValidationResult",
]
