"""
Placement Validation

Decides whether a box may have its minimum corner at a candidate point,
given the boxes already committed. Checks run in a fixed order and stop at
the first failure:

    1. bounds      - box stays inside the container
    2. weight      - committed weight plus this box stays within max_load
    3. overlap     - no volume shared with a committed box
    4. support     - bottom face fully backed by floor or top faces
    5. stacking    - nothing rests on a box flagged cant_stack_top

Every comparison uses the shared EPSILON, so exact fits and face contact
are treated the same way by all five checks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from .cargo import EPSILON, CargoBox, ContainerSpec
from .candidates import CandidatePoint
from .state import CommittedBox, PlacementState


class FailureReason(Enum):
    BOUNDS = "bounds"
    WEIGHT = "weight"
    OVERLAP = "overlap"
    SUPPORT = "support"
    STACKING = "stacking"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single validation; ``reason`` is None when legal."""

    legal: bool
    reason: Optional[FailureReason] = None
    detail: str = ""

    def __bool__(self) -> bool:
        return self.legal


LEGAL = ValidationResult(True)


def _overlap_length(a_min: float, a_max: float, b_min: float, b_max: float) -> float:
    """Length shared by the intervals [a_min, a_max] and [b_min, b_max]."""
    return min(a_max, b_max) - max(a_min, b_min)


def _merge_breakpoints(values: np.ndarray) -> np.ndarray:
    values = np.sort(values)
    keep = np.concatenate([[True], np.diff(values) > EPSILON])
    return values[keep]


def footprint_covered(x0: float, x1: float, z0: float, z1: float,
                      rects: np.ndarray) -> bool:
    """
    Check that rectangles cover the footprint [x0, x1] x [z0, z1].

    The footprint is cut along every rectangle edge into a grid of cells;
    each cell lies either fully inside or fully outside each rectangle, so
    testing the cell midpoints decides coverage exactly.

    Args:
        x0, x1, z0, z1: Footprint bounds
        rects: Array of shape (n, 4) with rows (x_min, x_max, z_min, z_max),
            already clipped to the footprint

    Returns:
        True if every cell wider than EPSILON is covered
    """
    if len(rects) == 0:
        return False

    xs = _merge_breakpoints(np.concatenate([[x0, x1], rects[:, 0], rects[:, 1]]))
    zs = _merge_breakpoints(np.concatenate([[z0, z1], rects[:, 2], rects[:, 3]]))
    if len(xs) < 2 or len(zs) < 2:
        return True

    mid_x = (xs[:-1] + xs[1:]) / 2.0
    mid_z = (zs[:-1] + zs[1:]) / 2.0

    # Shape (n_rects, n_x_cells, n_z_cells)
    inside_x = ((rects[:, 0, None] - EPSILON <= mid_x[None, :])
                & (mid_x[None, :] <= rects[:, 1, None] + EPSILON))
    inside_z = ((rects[:, 2, None] - EPSILON <= mid_z[None, :])
                & (mid_z[None, :] <= rects[:, 3, None] + EPSILON))
    covered = np.any(inside_x[:, :, None] & inside_z[:, None, :], axis=0)

    return bool(np.all(covered))


class PlacementValidator:
    """
    Read-only predicate over a PlacementState.

    Example:
        >>> validator = PlacementValidator(state)
        >>> result = validator.validate(box, point)
        >>> if not result:
        ...     print(result.reason)
    """

    def __init__(self, state: PlacementState):
        self.state = state

    @property
    def container(self) -> ContainerSpec:
        return self.state.container

    def validate(self, box: CargoBox, point: CandidatePoint) -> ValidationResult:
        """Run all checks for ``box`` anchored at ``point``."""
        for check in (self.check_bounds, self.check_weight, self.check_overlap):
            result = check(box, point)
            if not result.legal:
                return result

        supporters = self.supporting_boxes(box, point)

        result = self.check_support(box, point, supporters)
        if not result.legal:
            return result

        return self.check_stacking(box, point, supporters)

    def check_bounds(self, box: CargoBox, point: CandidatePoint) -> ValidationResult:
        c = self.container
        if point.x < -EPSILON or point.y < -EPSILON or point.z < -EPSILON:
            return ValidationResult(False, FailureReason.BOUNDS, "negative corner")
        if point.x + box.width > c.width + EPSILON:
            return ValidationResult(False, FailureReason.BOUNDS, "exceeds width")
        if point.y + box.height > c.height + EPSILON:
            return ValidationResult(False, FailureReason.BOUNDS, "exceeds height")
        if point.z + box.depth > c.depth + EPSILON:
            return ValidationResult(False, FailureReason.BOUNDS, "exceeds depth")
        return LEGAL

    def check_weight(self, box: CargoBox, point: CandidatePoint) -> ValidationResult:
        total = self.state.committed_weight + box.weight
        if total > self.container.max_load + EPSILON:
            return ValidationResult(
                False, FailureReason.WEIGHT,
                f"load {total:g} exceeds max_load {self.container.max_load:g}",
            )
        return LEGAL

    def check_overlap(self, box: CargoBox, point: CandidatePoint) -> ValidationResult:
        x1 = point.x + box.width
        y1 = point.y + box.height
        z1 = point.z + box.depth

        for other in self.state.committed:
            # Disjoint as soon as one axis separates them.
            if (point.x < other.x_max - EPSILON and x1 > other.x + EPSILON
                    and point.y < other.y_max - EPSILON and y1 > other.y + EPSILON
                    and point.z < other.z_max - EPSILON and z1 > other.z + EPSILON):
                return ValidationResult(False, FailureReason.OVERLAP,
                                        f"intersects box {other.box.id!r}")
        return LEGAL

    def supporting_boxes(self, box: CargoBox, point: CandidatePoint) -> List[CommittedBox]:
        """Committed boxes whose top face touches the box's bottom face with positive area."""
        if point.on_floor:
            return []

        x1 = point.x + box.width
        z1 = point.z + box.depth
        return [
            other for other in self.state.committed
            if abs(other.y_max - point.y) <= EPSILON
            and _overlap_length(point.x, x1, other.x, other.x_max) > EPSILON
            and _overlap_length(point.z, z1, other.z, other.z_max) > EPSILON
        ]

    def check_support(self, box: CargoBox, point: CandidatePoint,
                      supporters: List[CommittedBox]) -> ValidationResult:
        if point.on_floor:
            return LEGAL

        x0, x1 = point.x, point.x + box.width
        z0, z1 = point.z, point.z + box.depth

        # Common case: the box that produced the point carries it alone
        if point.source is not None:
            below = self.state.committed[point.source]
            if (abs(below.y_max - point.y) <= EPSILON
                    and below.x <= x0 + EPSILON and x1 <= below.x_max + EPSILON
                    and below.z <= z0 + EPSILON and z1 <= below.z_max + EPSILON):
                return LEGAL

        rects = np.array(
            [[max(s.x, x0), min(s.x_max, x1), max(s.z, z0), min(s.z_max, z1)]
             for s in supporters],
            dtype=np.float64,
        ).reshape(-1, 4)

        if not footprint_covered(x0, x1, z0, z1, rects):
            return ValidationResult(False, FailureReason.SUPPORT,
                                    f"footprint not fully supported at y={point.y:g}")
        return LEGAL

    def check_stacking(self, box: CargoBox, point: CandidatePoint,
                       supporters: List[CommittedBox]) -> ValidationResult:
        for other in supporters:
            if other.box.cant_stack_top:
                return ValidationResult(False, FailureReason.STACKING,
                                        f"box {other.box.id!r} must not be stacked on")
        return LEGAL
