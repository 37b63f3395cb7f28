"""
Cargo Manifests

Turns operator input into engine boxes: cargo lines with quantities,
YAML manifest files, and random cargo for benchmarking.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import yaml

from ..engine.cargo import (
    PRESET_COLORS,
    CargoBox,
    ContainerSpec,
    InvalidInputError,
    get_container,
)


@dataclass(frozen=True)
class CargoLine:
    """
    One entry of a cargo list: ``quantity`` identical boxes.

    Attributes:
        width, height, depth: Box dimensions
        weight: Weight of a single box
        quantity: Number of boxes on this line
        cant_stack_top: Whether nothing may rest on these boxes
        color: Display color (assigned from PRESET_COLORS when None)
        id: Prefix for the generated box ids (defaults to ``line<n>``)
    """

    width: float
    height: float
    depth: float
    weight: float
    quantity: int = 1
    cant_stack_top: bool = False
    color: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CargoLine":
        missing = [k for k in ("width", "height", "depth", "weight") if k not in data]
        if missing:
            raise InvalidInputError(f"Cargo line {data!r} is missing {', '.join(missing)}")

        return cls(
            width=float(data["width"]),
            height=float(data["height"]),
            depth=float(data["depth"]),
            weight=float(data["weight"]),
            quantity=int(data.get("quantity", 1)),
            cant_stack_top=bool(data.get("cant_stack_top", False)),
            color=data.get("color"),
            id=None if data.get("id") is None else str(data["id"]),
        )


def expand_cargo_lines(lines: Sequence[CargoLine]) -> List[CargoBox]:
    """
    Expand cargo lines into individual boxes with unique ids.

    Box ids are ``<prefix>-<n>`` with n counting from 1 within the line.
    Lines without a color take the next preset color in turn.

    Raises:
        InvalidInputError: On non-positive quantity or repeated line ids
    """
    boxes = []
    prefixes = set()

    for line_idx, line in enumerate(lines):
        if line.quantity < 1:
            raise InvalidInputError(f"Cargo line {line_idx}: quantity must be at least 1")

        prefix = line.id if line.id is not None else f"line{line_idx + 1}"
        if prefix in prefixes:
            raise InvalidInputError(f"Duplicate cargo line id: {prefix!r}")
        prefixes.add(prefix)

        color = line.color or PRESET_COLORS[line_idx % len(PRESET_COLORS)]
        for n in range(line.quantity):
            boxes.append(CargoBox(
                id=f"{prefix}-{n + 1}",
                width=line.width,
                height=line.height,
                depth=line.depth,
                weight=line.weight,
                cant_stack_top=line.cant_stack_top,
                color=color,
            ))

    return boxes


def _parse_container(section: Any) -> ContainerSpec:
    if isinstance(section, str):
        return get_container(section)

    if isinstance(section, dict):
        if "preset" in section:
            return get_container(str(section["preset"]))
        try:
            return ContainerSpec(
                width=float(section["width"]),
                height=float(section["height"]),
                depth=float(section["depth"]),
                max_load=float(section.get("max_load", float("inf"))),
                name=str(section.get("name", "custom")),
            )
        except KeyError as e:
            raise InvalidInputError(f"Manifest container is missing {e}") from e

    raise InvalidInputError(f"Unsupported manifest container: {section!r}")


def load_manifest(manifest_path: str) -> Tuple[Optional[ContainerSpec], List[CargoBox]]:
    """
    Load a YAML cargo manifest.

    Expected layout::

        container: 40HQ            # or {width, height, depth, max_load}
        cargo:
          - {width: 120, height: 100, depth: 80, weight: 250, quantity: 4}
          - {width: 60, height: 40, depth: 40, weight: 20, cant_stack_top: true}

    Args:
        manifest_path: Path to the manifest file

    Returns:
        (container or None if the manifest names none, expanded boxes)
    """
    manifest_path = Path(manifest_path)

    if not manifest_path.exists():
        raise FileNotFoundError(f"Manifest not found: {manifest_path}")

    with open(manifest_path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict) or not isinstance(data.get("cargo"), list):
        raise InvalidInputError(f"Manifest must contain a 'cargo' list: {manifest_path}")

    container = _parse_container(data["container"]) if data.get("container") is not None else None
    lines = [CargoLine.from_dict(entry) for entry in data["cargo"]]

    return container, expand_cargo_lines(lines)


def generate_random_boxes(n_boxes: int,
                          container: ContainerSpec,
                          size_range: Tuple[float, float] = (0.1, 0.4),
                          weight_range: Tuple[float, float] = (5.0, 500.0),
                          cant_stack_top_ratio: float = 0.0,
                          seed: Optional[int] = None) -> List[CargoBox]:
    """
    Generate random boxes for benchmarking.

    Args:
        n_boxes: Number of boxes to generate
        container: Container the sizes are relative to
        size_range: Fraction of each container dimension (min, max)
        weight_range: Box weight range (min, max)
        cant_stack_top_ratio: Probability that a box is flagged cant_stack_top
        seed: Random seed for reproducibility

    Returns:
        List of randomly generated boxes

    Example:
        >>> boxes = generate_random_boxes(10, get_container("20GP"), seed=0)
        >>> print(f"Generated {len(boxes)} boxes")
    """
    rng = np.random.default_rng(seed)
    min_frac, max_frac = size_range

    fractions = rng.uniform(min_frac, max_frac, size=(n_boxes, 3))
    dims = fractions * np.array(container.dimensions)
    weights = rng.uniform(weight_range[0], weight_range[1], size=n_boxes)
    no_stack = rng.random(n_boxes) < cant_stack_top_ratio

    return [
        CargoBox(
            id=f"rand-{i + 1}",
            width=round(float(dims[i, 0]), 1),
            height=round(float(dims[i, 1]), 1),
            depth=round(float(dims[i, 2]), 1),
            weight=round(float(weights[i]), 1),
            cant_stack_top=bool(no_stack[i]),
            color=PRESET_COLORS[i % len(PRESET_COLORS)],
        )
        for i in range(n_boxes)
    ]
