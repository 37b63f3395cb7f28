"""
Utility modules for configuration, logging, manifests and load statistics
"""

from .config import load_config, save_config
from .logger import setup_logger
from .manifest import CargoLine, expand_cargo_lines, generate_random_boxes, load_manifest
from .metrics import LoadStatistics, format_metrics, summarize_trials

__all__ = [
    "load_config",
    "save_config",
    "setup_logger",
    "CargoLine",
    "expand_cargo_lines",
    "generate_random_boxes",
    "load_manifest",
    "LoadStatistics",
    "format_metrics",
    "summarize_trials",
]
