"""
Container Loading Script

Pack a cargo manifest into a container, or benchmark the engine on random
cargo.

Usage:
    python pack.py --manifest cargo.yaml
    python pack.py --manifest cargo.yaml --container 40HQ --output-dir outputs
    python pack.py --random 50 --n-trials 20 --seed 7
"""

import argparse
import sys
from pathlib import Path

import pandas as pd
import yaml
from tqdm import tqdm

from cargoload.engine import InvalidInputError, run_packing
from cargoload.engine.placement import PackingReport
from cargoload.utils.config import (
    container_spec_from_config,
    get_default_config,
    load_config,
    update_config_from_args,
)
from cargoload.utils.logger import setup_logger
from cargoload.utils.manifest import generate_random_boxes, load_manifest
from cargoload.utils.metrics import LoadStatistics, format_metrics, summarize_trials


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Plan a container load")

    # Input
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--manifest",
        type=str,
        help="Path to a YAML cargo manifest",
    )
    source.add_argument(
        "--random",
        type=int,
        help="Benchmark with this many random boxes per trial",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (defaults to config/default.yaml if present)",
    )
    parser.add_argument(
        "--container",
        type=str,
        default=None,
        help="Container preset (20GP, 40GP, 40HQ, 45HQ, 20RF, 40RF)",
    )

    # Benchmark
    parser.add_argument(
        "--n-trials",
        type=int,
        default=None,
        help="Number of random trials",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the first trial",
    )

    # Output
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory to save outputs",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level",
    )

    return parser.parse_args(argv)


def placements_frame(report: PackingReport) -> pd.DataFrame:
    """One row per box, in input order."""
    rows = []
    for box in report.boxes:
        x, y, z = box.position if box.placed else (None, None, None)
        failure = report.failures.get(box.id)
        rows.append({
            "id": box.id,
            "width": box.width,
            "height": box.height,
            "depth": box.depth,
            "weight": box.weight,
            "cant_stack_top": box.cant_stack_top,
            "color": box.color,
            "placed": box.placed,
            "x": x,
            "y": y,
            "z": z,
            "failure": failure.value if failure is not None else None,
        })
    return pd.DataFrame(rows)


def pack_manifest(args, config, logger) -> int:
    manifest_container, boxes = load_manifest(args.manifest)

    if args.container is None and manifest_container is not None:
        container = manifest_container
    else:
        container = container_spec_from_config(config)

    logger.info(f"Packing {len(boxes)} boxes from {args.manifest} into {container}")
    report = run_packing(boxes, container)

    stats = LoadStatistics.from_boxes(report.boxes, container)
    logger.info("\n" + format_metrics(stats.as_dict(), f"Load: {container.name}"))

    for box in report.unplaced:
        logger.info(f"  Unplaced {box.id}: {report.failures[box.id].value}")

    output_dir = Path(config["output"]["dir"])
    output_dir.mkdir(parents=True, exist_ok=True)

    placements_path = output_dir / "placements.csv"
    placements_frame(report).to_csv(placements_path, index=False)
    logger.info(f"Placements saved to: {placements_path}")

    stats_path = output_dir / "statistics.yaml"
    with open(stats_path, "w") as f:
        yaml.dump({k: float(v) for k, v in stats.as_dict().items()}, f,
                  default_flow_style=False, sort_keys=False)
    logger.info(f"Statistics saved to: {stats_path}")

    return 0


def run_benchmark(config, logger) -> int:
    container = container_spec_from_config(config)
    bench = config["benchmark"]
    cargo = config["cargo"]

    logger.info(f"Benchmarking {bench['n_trials']} trials of {bench['n_boxes']} boxes in {container}")

    trials = []
    for trial in tqdm(range(bench["n_trials"]), desc="Trials"):
        seed = None if bench["seed"] is None else bench["seed"] + trial
        boxes = generate_random_boxes(
            bench["n_boxes"],
            container,
            size_range=tuple(cargo["size_range"]),
            weight_range=tuple(cargo["weight_range"]),
            cant_stack_top_ratio=cargo["cant_stack_top_ratio"],
            seed=seed,
        )
        report = run_packing(boxes, container)
        trials.append(LoadStatistics.from_boxes(report.boxes, container))

    summary = summarize_trials(trials)
    logger.info("\n" + format_metrics(summary, "Benchmark Results"))

    output_dir = Path(config["output"]["dir"])
    output_dir.mkdir(parents=True, exist_ok=True)
    summary_path = output_dir / "benchmark.yaml"
    with open(summary_path, "w") as f:
        yaml.dump(summary, f, default_flow_style=False, sort_keys=False)
    logger.info(f"Benchmark summary saved to: {summary_path}")

    return 0


def main(argv=None) -> int:
    """Entry point."""
    args = parse_args(argv)

    # Console only until the config names a log file
    logger = setup_logger("cargoload")

    try:
        if args.config is not None:
            config = load_config(args.config)
        else:
            config = get_default_config()
        config = update_config_from_args(config, vars(args))

        logger = setup_logger("cargoload", log_file=config["output"].get("log_file"),
                              level=args.log_level)

        if args.manifest is not None:
            return pack_manifest(args, config, logger)
        return run_benchmark(config, logger)
    except (InvalidInputError, ValueError, FileNotFoundError, yaml.YAMLError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
