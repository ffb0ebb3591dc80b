from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass
class WorkloadConfig:
    blocks: int = 5
    processes: int = 8
    min_block: int = 50
    max_block: int = 600
    min_process: int = 10
    max_process: int = 450


@dataclass
class Workload:
    blocks: List[int]
    processes: List[int]


class WorkloadGenerator:
    """
    Generate block pools and process queues for comparing strategies.

    Block capacities are rounded to multiples of 10 the way textbook
    exercises state them; a few processes are deliberately oversized so every
    strategy sees some rejections.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.random = random.Random(seed)

    def next_workload(self, config: WorkloadConfig) -> Workload:
        if config.min_block > config.max_block or config.min_process > config.max_process:
            raise ValueError("Workload bounds must satisfy min <= max.")
        blocks = [
            self._round(self.random.randint(config.min_block, config.max_block))
            for _ in range(config.blocks)
        ]
        processes = [self._sample_process(config) for _ in range(config.processes)]
        return Workload(blocks=blocks, processes=processes)

    def _sample_process(self, config: WorkloadConfig) -> int:
        if self.random.random() < 0.1:
            low, high = self._oversized_range(config)
            return self.random.randint(low, high)
        return self.random.randint(config.min_process, config.max_process)

    @staticmethod
    def _oversized_range(config: WorkloadConfig) -> Tuple[int, int]:
        low = max(config.max_process, config.max_block)
        return low, low + max(1, config.max_block // 2)

    @staticmethod
    def _round(value: int) -> int:
        return max(0, (value // 10) * 10)
