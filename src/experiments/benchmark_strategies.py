from __future__ import annotations

import argparse
import csv
import os
import statistics
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from block_allocation import Strategy, compare_strategies
from experiments.instrumentation import AllocationProfiler
from experiments.workload import WorkloadConfig, WorkloadGenerator


@dataclass
class BenchmarkConfig:
    label: str
    workload: WorkloadConfig = field(default_factory=WorkloadConfig)
    strategies: List[Strategy] = field(default_factory=lambda: list(Strategy))


def run_single(
    config: BenchmarkConfig,
    seed: int,
    *,
    profiler: Optional[AllocationProfiler] = None,
) -> List[Dict[str, object]]:
    """Run every configured strategy on one seeded workload; one row per strategy."""
    workload = WorkloadGenerator(seed=seed).next_workload(config.workload)
    results = compare_strategies(workload.blocks, workload.processes, config.strategies)

    rows: List[Dict[str, object]] = []
    for strategy, result in results.items():
        if profiler:
            profiler.record_result(result, label=f"{config.label}_seed{seed}")
        stats = result.stats()
        processes = stats["processes"]
        rows.append(
            {
                "config": config.label,
                "seed": seed,
                "strategy": strategy.value,
                "assigned": stats["assigned"],
                "rejected": stats["rejected"],
                "acceptance_rate": stats["assigned"] / processes if processes else 1.0,
                "utilization": stats["utilization"],
                "external_fragmentation": stats["external_fragmentation"],
                "largest_free": stats["largest_free"],
            }
        )
    return rows


def build_default_configs(args: argparse.Namespace) -> List[BenchmarkConfig]:
    configs = [
        BenchmarkConfig(label="textbook", workload=WorkloadConfig()),
        BenchmarkConfig(
            label="many_small",
            workload=WorkloadConfig(blocks=10, processes=30, min_process=5, max_process=120),
        ),
        BenchmarkConfig(
            label="few_large",
            workload=WorkloadConfig(blocks=4, processes=10, min_block=200, max_block=1000, max_process=700),
        ),
    ]
    for config in configs:
        if args.blocks:
            config.workload.blocks = args.blocks
        if args.processes:
            config.workload.processes = args.processes
    return configs


def write_summary(path: str, records: Iterable[Dict[str, object]]) -> None:
    records = list(records)
    if not records:
        return
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(records[0].keys()))
        writer.writeheader()
        writer.writerows(records)


def summarise(rows: Iterable[Dict[str, object]]) -> Dict[str, Dict[str, float]]:
    """Mean acceptance rate and utilisation per strategy across all rows."""
    grouped: Dict[str, Dict[str, List[float]]] = defaultdict(lambda: defaultdict(list))
    for row in rows:
        bucket = grouped[str(row["strategy"])]
        bucket["acceptance_rate"].append(float(row["acceptance_rate"]))
        bucket["utilization"].append(float(row["utilization"]))
        bucket["external_fragmentation"].append(float(row["external_fragmentation"]))
    return {
        strategy: {metric: statistics.mean(values) for metric, values in metrics.items()}
        for strategy, metrics in grouped.items()
    }


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare placement strategies on synthetic workloads.")
    parser.add_argument("--seeds", type=int, default=5, help="Number of random seeds to evaluate.")
    parser.add_argument("--seed-offset", type=int, default=0, help="Offset applied to generated seeds.")
    parser.add_argument("--blocks", type=int, default=None, help="Override block count for all configs.")
    parser.add_argument("--processes", type=int, default=None, help="Override process count for all configs.")
    parser.add_argument("--output", type=str, default="results/strategy_summary.csv", help="Path to CSV summary output.")
    parser.add_argument("--events-dir", type=str, default=None, help="Optional directory for per-run event logs.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configs = build_default_configs(args)
    seeds = [args.seed_offset + index for index in range(args.seeds)]
    profiler = AllocationProfiler(run_id="benchmark_strategies", output_dir=args.events_dir)

    rows: List[Dict[str, object]] = []
    for config in configs:
        for seed in seeds:
            rows.extend(run_single(config, seed, profiler=profiler))

    write_summary(args.output, rows)
    profiler.flush()

    for strategy, metrics in summarise(rows).items():
        print(
            f"[{strategy}] acceptance={metrics['acceptance_rate']:.3f} "
            f"utilization={metrics['utilization']:.3f} "
            f"external_fragmentation={metrics['external_fragmentation']:.3f}"
        )


if __name__ == "__main__":
    main()
