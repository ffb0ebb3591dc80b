import csv
import os
import tempfile
import unittest

from block_allocation import Strategy
from experiments.benchmark_strategies import BenchmarkConfig, run_single, summarise, write_summary
from experiments.instrumentation import AllocationProfiler
from experiments.workload import WorkloadConfig, WorkloadGenerator


class WorkloadGeneratorTests(unittest.TestCase):
    def test_same_seed_same_workload(self) -> None:
        config = WorkloadConfig(blocks=6, processes=12)
        first = WorkloadGenerator(seed=7).next_workload(config)
        second = WorkloadGenerator(seed=7).next_workload(config)
        self.assertEqual(first, second)
        self.assertEqual(len(first.blocks), 6)
        self.assertEqual(len(first.processes), 12)

    def test_block_sizes_are_rounded_and_bounded(self) -> None:
        config = WorkloadConfig(blocks=50, min_block=50, max_block=600)
        workload = WorkloadGenerator(seed=3).next_workload(config)
        for block in workload.blocks:
            self.assertEqual(block % 10, 0)
            self.assertGreaterEqual(block, 50)
            self.assertLessEqual(block, 600)
        self.assertTrue(all(size >= 0 for size in workload.processes))

    def test_invalid_bounds(self) -> None:
        with self.assertRaises(ValueError):
            WorkloadGenerator(seed=1).next_workload(WorkloadConfig(min_block=10, max_block=5))


class BenchmarkHarnessTests(unittest.TestCase):
    def test_one_row_per_strategy(self) -> None:
        config = BenchmarkConfig(label="test_config", workload=WorkloadConfig(blocks=4, processes=9))
        profiler = AllocationProfiler(run_id="bench")
        rows = run_single(config, seed=123, profiler=profiler)
        self.assertEqual([row["strategy"] for row in rows], [strategy.value for strategy in Strategy])
        for row in rows:
            self.assertEqual(row["assigned"] + row["rejected"], 9)
            self.assertGreaterEqual(row["acceptance_rate"], 0.0)
            self.assertLessEqual(row["utilization"], 1.0)
        self.assertEqual(profiler.counts()["allocation_run"], len(Strategy))

    def test_empty_strategy_list_produces_no_rows(self) -> None:
        config = BenchmarkConfig(label="none", strategies=[])
        self.assertEqual(run_single(config, seed=5), [])

    def test_summary_csv_and_means(self) -> None:
        config = BenchmarkConfig(label="pair", strategies=[Strategy.FIRST_FIT, Strategy.BEST_FIT])
        rows = run_single(config, seed=1) + run_single(config, seed=2)
        means = summarise(rows)
        self.assertEqual(set(means), {"first-fit", "best-fit"})
        self.assertIn("acceptance_rate", means["first-fit"])

        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "nested", "summary.csv")
            write_summary(path, rows)
            with open(path, newline="") as handle:
                written = list(csv.DictReader(handle))
        self.assertEqual(len(written), 4)
        self.assertEqual(written[0]["config"], "pair")


if __name__ == "__main__":
    unittest.main()
