"""
Candidate (Extreme Point) Generation

Maintains the anchor points at which a box's minimum corner is tried next.
The set starts with the floor origin; each committed box contributes the
three points just beyond its right, top and front faces.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .cargo import EPSILON, ContainerSpec


@dataclass(frozen=True)
class CandidatePoint:
    """
    Anchor point for a box's minimum corner.

    Attributes:
        x, y, z: Coordinates in the container frame
        on_floor: True when the point lies on the container floor, derived
            from y
        source: Index (into the committed list) of the box whose face
            produced the point, None for the floor origin
    """

    x: float
    y: float
    z: float
    source: Optional[int] = None
    on_floor: bool = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "on_floor", self.y <= EPSILON)

    @property
    def position(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def scan_key(self) -> Tuple[float, float, float]:
        """Lowest first, then most rearward, then most leftward."""
        return (self.y, self.z, self.x)


class CandidateSet:
    """
    Index-addressable arena of candidate points.

    Points are only ever appended. A point at or beyond the container bound
    on any axis is discarded on arrival since no positive-size box fits
    there, and a point coinciding with an existing one (within EPSILON) is
    dropped as dominated.

    Attributes:
        container: Container the points live in
        points (List[CandidatePoint]): Arena of accepted points
        rejected (int): Number of points pruned on arrival
    """

    def __init__(self, container: ContainerSpec):
        self.container = container
        self.points: List[CandidatePoint] = []
        self.rejected = 0
        self._order: Optional[List[int]] = None

        self.add(CandidatePoint(0.0, 0.0, 0.0))

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, idx: int) -> CandidatePoint:
        return self.points[idx]

    def _out_of_bounds(self, x: float, y: float, z: float) -> bool:
        c = self.container
        return (
            x < -EPSILON or y < -EPSILON or z < -EPSILON
            or x >= c.width - EPSILON
            or y >= c.height - EPSILON
            or z >= c.depth - EPSILON
        )

    def _is_duplicate(self, point: CandidatePoint) -> bool:
        return any(
            abs(p.x - point.x) <= EPSILON
            and abs(p.y - point.y) <= EPSILON
            and abs(p.z - point.z) <= EPSILON
            for p in self.points
        )

    def add(self, point: CandidatePoint) -> bool:
        """
        Add a point to the arena.

        Returns:
            True if the point was kept, False if it was pruned
        """
        if self._out_of_bounds(point.x, point.y, point.z) or self._is_duplicate(point):
            self.rejected += 1
            return False

        self.points.append(point)
        self._order = None
        return True

    def add_extreme_points(self, source: int, position: Tuple[float, float, float],
                           dimensions: Tuple[float, float, float]) -> int:
        """
        Derive the three extreme points of a newly committed box.

        Args:
            source: Index of the committed box
            position: Its minimum corner (x, y, z)
            dimensions: Its (width, height, depth)

        Returns:
            Number of points kept
        """
        x, y, z = position
        w, h, d = dimensions
        derived = [
            CandidatePoint(x + w, y, z, source=source),
            CandidatePoint(x, y + h, z, source=source),
            CandidatePoint(x, y, z + d, source=source),
        ]
        return sum(self.add(p) for p in derived)

    def scan(self) -> Iterator[CandidatePoint]:
        """Iterate points in ascending (y, z, x) order."""
        if self._order is None:
            self._order = sorted(range(len(self.points)),
                                 key=lambda i: self.points[i].scan_key)
        for idx in self._order:
            yield self.points[idx]

    def __repr__(self) -> str:
        return f"CandidateSet(points={len(self.points)}, rejected={self.rejected})"
