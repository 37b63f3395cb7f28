"""
Placement Orchestrator

Greedy single-pass container loading. Boxes are taken in first-fit-decreasing
order; each one is tried at the current candidate points, lowest first, and
committed at the first legal point. A box with no legal point is reported
unplaced and leaves the state untouched. Committed boxes are never moved.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .candidates import CandidatePoint
from .cargo import CargoBox, ContainerSpec, InvalidInputError
from .ordering import order_boxes
from .state import PlacementState
from .validator import FailureReason, PlacementValidator

logger = logging.getLogger(__name__)


class BoxStatus(Enum):
    PENDING = "pending"
    PLACED = "placed"
    UNPLACED = "unplaced"


class RunStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


@dataclass
class PackingReport:
    """
    Result of one packing run.

    Attributes:
        boxes: Annotated copies of the input boxes, in input order
        container: Container that was packed
        failures: Deciding failure reason for each unplaced box id
        candidates_evaluated: Number of (box, point) validations performed
        duration: Wall-clock seconds spent in the run
    """

    boxes: List[CargoBox]
    container: ContainerSpec
    failures: Dict[str, FailureReason] = field(default_factory=dict)
    candidates_evaluated: int = 0
    duration: float = 0.0

    @property
    def placed(self) -> List[CargoBox]:
        return [b for b in self.boxes if b.placed]

    @property
    def unplaced(self) -> List[CargoBox]:
        return [b for b in self.boxes if not b.placed]

    @property
    def num_placed(self) -> int:
        return sum(1 for b in self.boxes if b.placed)


def validate_inputs(boxes: Sequence[CargoBox], container: ContainerSpec):
    """
    Reject malformed input before any placement is attempted.

    Raises:
        InvalidInputError: On invalid container or box data, or duplicate ids
    """
    container.validate()

    seen = set()
    for box in boxes:
        box.validate()
        if box.id in seen:
            raise InvalidInputError(f"Duplicate box id: {box.id!r}")
        seen.add(box.id)


class PackingRun:
    """
    One invocation of the placement engine.

    The run owns its PlacementState exclusively and moves through
    IDLE -> RUNNING -> DONE. Each box moves from PENDING to PLACED or
    UNPLACED exactly once.

    Args:
        boxes: Boxes to pack; placement fields on input are ignored
        container: Target container
    """

    def __init__(self, boxes: Sequence[CargoBox], container: ContainerSpec):
        validate_inputs(boxes, container)

        self.boxes = list(boxes)
        self.container = container
        self.state = PlacementState(container)
        self.validator = PlacementValidator(self.state)
        self.status = RunStatus.IDLE
        self.box_status: List[BoxStatus] = [BoxStatus.PENDING] * len(self.boxes)
        self.positions: List[Optional[tuple]] = [None] * len(self.boxes)
        self.failures: Dict[str, FailureReason] = {}
        self.candidates_evaluated = 0

    def _find_position(self, box: CargoBox) -> Optional[CandidatePoint]:
        last_reason = None
        for point in self.state.candidates.scan():
            self.candidates_evaluated += 1
            result = self.validator.validate(box, point)
            if result.legal:
                return point

            last_reason = result.reason
            if result.reason is FailureReason.WEIGHT:
                # Weight does not depend on the point.
                break

        if last_reason is None:
            # No candidate survived pruning, so nothing fits inside the container
            last_reason = FailureReason.BOUNDS
        self.failures[box.id] = last_reason
        return None

    def place(self, idx: int) -> bool:
        """Attempt box ``idx`` once; returns True if it was committed."""
        if self.box_status[idx] is not BoxStatus.PENDING:
            raise RuntimeError(f"Box {self.boxes[idx].id!r} was already attempted")

        box = self.boxes[idx]
        point = self._find_position(box)
        if point is None:
            self.box_status[idx] = BoxStatus.UNPLACED
            logger.debug("Box %s unplaced (%s)", box.id, self.failures[box.id].value)
            return False

        self.state.commit(box, point.position)
        self.positions[idx] = point.position
        self.box_status[idx] = BoxStatus.PLACED
        logger.debug("Box %s placed at %s", box.id, point.position)
        return True

    def run(self) -> PackingReport:
        if self.status is not RunStatus.IDLE:
            raise RuntimeError("A PackingRun can only be executed once")

        start = time.perf_counter()
        self.status = RunStatus.RUNNING
        for idx in order_boxes(self.boxes):
            self.place(idx)
        self.status = RunStatus.DONE
        duration = time.perf_counter() - start

        report = PackingReport(
            boxes=[box.with_placement(pos) for box, pos in zip(self.boxes, self.positions)],
            container=self.container,
            failures=self.failures,
            candidates_evaluated=self.candidates_evaluated,
            duration=duration,
        )
        logger.info(
            "Packed %d/%d boxes into %s in %.4fs (%d candidates, %d checks)",
            report.num_placed, len(report.boxes), self.container.name, duration,
            len(self.state.candidates), self.candidates_evaluated,
        )
        return report


def run_packing(boxes: Sequence[CargoBox], container: ContainerSpec) -> PackingReport:
    """
    Pack ``boxes`` into ``container`` and return the full report.

    Raises:
        InvalidInputError: If the input is malformed
    """
    return PackingRun(boxes, container).run()


def calculate_packing(boxes: Sequence[CargoBox], container: ContainerSpec) -> List[CargoBox]:
    """
    Pack ``boxes`` into ``container``.

    Returns a new list, same length and order as ``boxes``, where each box
    carries ``placed`` and, if placed, its minimum-corner ``position``.
    Caller-owned boxes are not modified.

    Example:
        >>> container = ContainerSpec(100, 100, 100, max_load=10)
        >>> result = calculate_packing([CargoBox("a", 50, 50, 50, 1.0)], container)
        >>> result[0].position
        (0.0, 0.0, 0.0)
    """
    return run_packing(boxes, container).boxes
