"""
Load Statistics

Aggregate figures computed from a packing result: volume and weight usage,
box counts, and summaries over repeated benchmark trials.
"""

from dataclasses import asdict, dataclass
from typing import Dict, List, Sequence

import numpy as np

from ..engine.cargo import CargoBox, ContainerSpec


@dataclass(frozen=True)
class LoadStatistics:
    """
    Load figures for one container layout.

    Attributes:
        total_volume: Container interior volume
        used_volume: Volume of placed boxes
        box_count: Number of boxes in the request
        placed_count: Number of placed boxes
        total_weight: Weight of all boxes in the request
        loaded_weight: Weight of placed boxes
        max_load: Container load limit
    """

    total_volume: float
    used_volume: float
    box_count: int
    placed_count: int
    total_weight: float
    loaded_weight: float
    max_load: float

    @classmethod
    def from_boxes(cls, boxes: Sequence[CargoBox], container: ContainerSpec) -> "LoadStatistics":
        placed = [b for b in boxes if b.placed]
        return cls(
            total_volume=container.volume,
            used_volume=float(sum(b.volume for b in placed)),
            box_count=len(boxes),
            placed_count=len(placed),
            total_weight=float(sum(b.weight for b in boxes)),
            loaded_weight=float(sum(b.weight for b in placed)),
            max_load=container.max_load,
        )

    @property
    def volume_utilization(self) -> float:
        """Used volume / container volume."""
        return self.used_volume / self.total_volume if self.total_volume > 0 else 0.0

    @property
    def weight_utilization(self) -> float:
        """Loaded weight / max load (0 when the container has no finite limit)."""
        if not np.isfinite(self.max_load) or self.max_load <= 0:
            return 0.0
        return self.loaded_weight / self.max_load

    @property
    def remaining_weight(self) -> float:
        """Load capacity left; negative if a layout exceeds the limit."""
        return self.max_load - self.loaded_weight

    @property
    def placed_ratio(self) -> float:
        return self.placed_count / self.box_count if self.box_count > 0 else 0.0

    def as_dict(self) -> Dict[str, float]:
        metrics = asdict(self)
        metrics.update(
            volume_utilization=self.volume_utilization,
            weight_utilization=self.weight_utilization,
            remaining_weight=self.remaining_weight,
            placed_ratio=self.placed_ratio,
        )
        return metrics


def summarize_trials(trials: List[LoadStatistics]) -> Dict[str, float]:
    """
    Calculate aggregate metrics across multiple benchmark trials.

    Args:
        trials: Statistics of each trial

    Returns:
        Mean/std/min/max of volume utilization and placed ratio, plus mean
        weight utilization
    """
    if not trials:
        raise ValueError("No trials to summarize")

    volume = np.array([t.volume_utilization for t in trials])
    placed = np.array([t.placed_ratio for t in trials])
    weight = np.array([t.weight_utilization for t in trials])

    return {
        "n_trials": len(trials),
        "mean_volume_utilization": float(np.mean(volume)),
        "std_volume_utilization": float(np.std(volume)),
        "max_volume_utilization": float(np.max(volume)),
        "min_volume_utilization": float(np.min(volume)),
        "mean_placed_ratio": float(np.mean(placed)),
        "std_placed_ratio": float(np.std(placed)),
        "max_placed_ratio": float(np.max(placed)),
        "min_placed_ratio": float(np.min(placed)),
        "mean_weight_utilization": float(np.mean(weight)),
    }


def format_metrics(metrics: Dict[str, float], title: str = "Metrics") -> str:
    """
    Format metrics as a fixed-width table.

    Ratios and utilizations are shown as percentages.
    """
    lines = ["=" * 50, f"{title:^50}", "=" * 50]

    for key, value in metrics.items():
        if isinstance(value, float):
            if "ratio" in key or "utilization" in key:
                lines.append(f"{key:.<40} {value:>8.2%}")
            else:
                lines.append(f"{key:.<40} {value:>8.2f}")
        else:
            lines.append(f"{key:.<40} {value:>8}")

    lines.append("=" * 50)
    return "\n".join(lines)
