"""
Cargo and Container Types

Defines the cargo box and container specifications consumed by the placement
engine, the registry of standard shipping containers, and the error raised
for malformed inputs.

Coordinates follow the container frame: the origin sits at one bottom corner,
x runs along the width, z along the depth and y is vertical.
"""

import math
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Tuple

# Shared tolerance for every geometric and weight comparison.
EPSILON = 1e-6

Position = Tuple[float, float, float]


class InvalidInputError(ValueError):
    """Raised when boxes or container data cannot be packed at all."""


@dataclass(frozen=True)
class CargoBox:
    """
    Rectangular cargo item with fixed orientation.

    Attributes:
        id: Opaque identity, unique within one packing request
        width: X-extent
        height: Y-extent (vertical)
        depth: Z-extent
        weight: Item weight (kg)
        cant_stack_top: If True, nothing may rest on this box
        color: Display color, not used by the engine
        placed: Whether the engine found a position for this box
        position: Minimum corner (x, y, z), present iff ``placed``
    """

    id: str
    width: float
    height: float
    depth: float
    weight: float
    cant_stack_top: bool = False
    color: str = "#64748b"
    placed: bool = False
    position: Optional[Position] = None

    def __post_init__(self):
        if self.placed != (self.position is not None):
            raise InvalidInputError(
                f"Box {self.id!r}: position must be set if and only if placed"
            )

    @property
    def dimensions(self) -> Tuple[float, float, float]:
        """Dimensions as (width, height, depth)."""
        return (self.width, self.height, self.depth)

    @property
    def volume(self) -> float:
        return self.width * self.height * self.depth

    @property
    def footprint(self) -> float:
        """Base area (width x depth)."""
        return self.width * self.depth

    def validate(self):
        """
        Check that the box can take part in a packing request.

        Raises:
            InvalidInputError: If any dimension or the weight is not positive
        """
        # Written as "not > 0" so NaN is rejected too
        if not (self.width > 0 and self.height > 0 and self.depth > 0):
            raise InvalidInputError(f"Box {self.id!r}: all dimensions must be positive")
        if not self.weight > 0:
            raise InvalidInputError(f"Box {self.id!r}: weight must be positive")

    def with_placement(self, position: Optional[Position]) -> "CargoBox":
        """Return a copy annotated with ``position`` (None means unplaced)."""
        if position is None:
            return replace(self, placed=False, position=None)
        return replace(self, placed=True, position=tuple(float(c) for c in position))

    def __repr__(self) -> str:
        where = f"@{self.position}" if self.placed else "unplaced"
        return (f"CargoBox(id={self.id!r}, w={self.width:g}, h={self.height:g}, "
                f"d={self.depth:g}, kg={self.weight:g}, {where})")


@dataclass(frozen=True)
class ContainerSpec:
    """
    Container interior and load limit.

    ``max_load`` defaults to unlimited; the engine still runs the weight
    check against it for every candidate.
    """

    width: float
    height: float
    depth: float
    max_load: float = math.inf
    name: str = "custom"
    label: str = ""
    description: str = ""

    @property
    def dimensions(self) -> Tuple[float, float, float]:
        return (self.width, self.height, self.depth)

    @property
    def volume(self) -> float:
        return self.width * self.height * self.depth

    def validate(self):
        """
        Raises:
            InvalidInputError: On non-positive or NaN dimensions, or a negative
                max load
        """
        if not (self.width > 0 and self.height > 0 and self.depth > 0):
            raise InvalidInputError("All container dimensions must be positive")
        if math.isnan(self.max_load) or self.max_load < 0:
            raise InvalidInputError("Container max_load must be non-negative")

    def __repr__(self) -> str:
        return (f"ContainerSpec({self.name}: W={self.width:g}, H={self.height:g}, "
                f"D={self.depth:g}, max_load={self.max_load:g})")


# Interior dimensions in cm, max load in kg.
CONTAINER_TYPES: Dict[str, ContainerSpec] = {
    spec.name: spec
    for spec in [
        ContainerSpec(589.8, 239.3, 235.2, 28000, "20GP", "20GP", "20ft general purpose"),
        ContainerSpec(1203.2, 239.3, 235.2, 26000, "40GP", "40GP", "40ft general purpose"),
        ContainerSpec(1203.2, 269.8, 235.2, 26000, "40HQ", "40HQ", "40ft high cube"),
        ContainerSpec(1355.6, 269.8, 235.2, 25000, "45HQ", "45HQ", "45ft high cube"),
        ContainerSpec(545.0, 225.0, 226.0, 27000, "20RF", "20RF", "20ft reefer"),
        ContainerSpec(1155.0, 225.0, 228.0, 29000, "40RF", "40RF", "40ft reefer"),
    ]
}

PRESET_COLORS: List[str] = [
    "#ef4444",  # red
    "#f97316",  # orange
    "#f59e0b",  # amber
    "#84cc16",  # lime
    "#10b981",  # emerald
    "#06b6d4",  # cyan
    "#3b82f6",  # blue
    "#8b5cf6",  # violet
    "#d946ef",  # fuchsia
    "#f43f5e",  # rose
    "#64748b",  # slate
    "#78350f",  # brown
]


def get_container(name: str) -> ContainerSpec:
    """
    Look up a standard container by name (case-insensitive).

    Example:
        >>> get_container("40hq").height
        269.8
    """
    key = name.strip().upper()
    if key not in CONTAINER_TYPES:
        known = ", ".join(CONTAINER_TYPES)
        raise InvalidInputError(f"Unknown container type {name!r} (known: {known})")
    return CONTAINER_TYPES[key]


def reset_boxes(boxes: Iterable[CargoBox]) -> List[CargoBox]:
    """Return copies of ``boxes`` with any placement cleared."""
    return [box.with_placement(None) for box in boxes]
