"""
Placement Ordering

First-fit-decreasing order: large boxes are attempted before small ones so
the remaining container space fragments less.
"""

from typing import List, Sequence

from .cargo import CargoBox


def order_boxes(boxes: Sequence[CargoBox]) -> List[int]:
    """
    Compute the placement sequence for ``boxes``.

    Sort key: descending volume, then descending footprint, then descending
    weight. ``sorted`` is stable, so equal boxes keep their input order.

    Args:
        boxes: Input boxes in caller order

    Returns:
        Indices into ``boxes`` in the order they should be attempted
    """
    return sorted(
        range(len(boxes)),
        key=lambda i: (-boxes[i].volume, -boxes[i].footprint, -boxes[i].weight),
    )
