"""
Placement State

Engine-private record of one packing run: committed boxes, running weight
and the candidate arena. A fresh state is built per call and discarded
afterwards.
"""

from dataclasses import dataclass
from typing import List, Tuple

from .candidates import CandidateSet
from .cargo import CargoBox, ContainerSpec


@dataclass(frozen=True)
class CommittedBox:
    """A box with its final minimum corner."""

    box: CargoBox
    x: float
    y: float
    z: float

    @property
    def position(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def x_max(self) -> float:
        return self.x + self.box.width

    @property
    def y_max(self) -> float:
        """Level of the top face."""
        return self.y + self.box.height

    @property
    def z_max(self) -> float:
        return self.z + self.box.depth


class PlacementState:
    """
    Growing set of committed boxes for a single packing run.

    Attributes:
        container: Target container
        committed (List[CommittedBox]): Boxes placed so far, in commit order
        committed_weight (float): Sum of committed weights
        candidates (CandidateSet): Current anchor points
    """

    def __init__(self, container: ContainerSpec):
        self.container = container
        self.committed: List[CommittedBox] = []
        self.committed_weight = 0.0
        self.candidates = CandidateSet(container)

    def commit(self, box: CargoBox, position: Tuple[float, float, float]) -> CommittedBox:
        """
        Record ``box`` at ``position`` and derive new candidates.

        The caller is responsible for having validated the placement.
        """
        entry = CommittedBox(box, *position)
        self.committed.append(entry)
        self.committed_weight += box.weight
        self.candidates.add_extreme_points(
            len(self.committed) - 1, entry.position, box.dimensions
        )
        return entry

    @property
    def num_committed(self) -> int:
        return len(self.committed)

    @property
    def committed_volume(self) -> float:
        return sum(entry.box.volume for entry in self.committed)

    def __repr__(self) -> str:
        return (f"PlacementState(committed={self.num_committed}, "
                f"weight={self.committed_weight:g}, {self.candidates})")
