"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from cargoload.engine.cargo import EPSILON, CargoBox, ContainerSpec
from cargoload.engine.state import PlacementState
from cargoload.engine.validator import footprint_covered
from cargoload.utils.config import DEFAULT_CONFIG


@pytest.fixture
def cube_container():
    """100 x 100 x 100 container without a weight limit."""
    return ContainerSpec(100.0, 100.0, 100.0, name="cube")


@pytest.fixture
def state(cube_container):
    return PlacementState(cube_container)


@pytest.fixture
def make_box():
    """Factory for boxes with sequential ids."""
    counter = {"n": 0}

    def _make(width, height, depth, weight=1.0, cant_stack_top=False, box_id=None):
        counter["n"] += 1
        return CargoBox(
            id=box_id or f"b{counter['n']}",
            width=width,
            height=height,
            depth=depth,
            weight=weight,
            cant_stack_top=cant_stack_top,
        )

    return _make


@pytest.fixture(scope="session")
def test_config():
    """Minimal config for testing (matches config/default.yaml)."""
    return DEFAULT_CONFIG


def _overlaps(a: CargoBox, b: CargoBox) -> bool:
    (ax, ay, az), (bx, by, bz) = a.position, b.position
    return (ax < bx + b.width - EPSILON and bx < ax + a.width - EPSILON
            and ay < by + b.height - EPSILON and by < ay + a.height - EPSILON
            and az < bz + b.depth - EPSILON and bz < az + a.depth - EPSILON)


def check_layout(boxes, container):
    """Assert every invariant a packing result must satisfy."""
    placed = [b for b in boxes if b.placed]

    for box in boxes:
        assert box.placed == (box.position is not None)

    assert sum(b.weight for b in placed) <= container.max_load + EPSILON

    for i, box in enumerate(placed):
        x, y, z = box.position
        assert x >= -EPSILON and y >= -EPSILON and z >= -EPSILON
        assert x + box.width <= container.width + EPSILON
        assert y + box.height <= container.height + EPSILON
        assert z + box.depth <= container.depth + EPSILON

        for other in placed[i + 1:]:
            assert not _overlaps(box, other), f"{box.id} overlaps {other.id}"

        if y <= EPSILON:
            continue

        below = [
            o for o in placed
            if abs(o.position[1] + o.height - y) <= EPSILON
            and min(x + box.width, o.position[0] + o.width) - max(x, o.position[0]) > EPSILON
            and min(z + box.depth, o.position[2] + o.depth) - max(z, o.position[2]) > EPSILON
        ]
        assert not any(o.cant_stack_top for o in below), f"{box.id} rests on a no-stack box"

        rects = np.array([
            [max(o.position[0], x), min(o.position[0] + o.width, x + box.width),
             max(o.position[2], z), min(o.position[2] + o.depth, z + box.depth)]
            for o in below
        ], dtype=np.float64).reshape(-1, 4)
        assert footprint_covered(x, x + box.width, z, z + box.depth, rects), \
            f"{box.id} is not fully supported"


@pytest.fixture
def layout_checker():
    return check_layout
