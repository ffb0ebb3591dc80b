from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .allocators import Allocator, Strategy, create_allocator
from .block_pool import BlockPool
from .process_request import AllocationOutcome, ProcessRequest
from .validation import parse_strategy, validate_sizes

StrategyLike = Union[Strategy, str]


@dataclass(frozen=True)
class AllocationResult:
    """
    Everything one allocation run produced.

    `fragmentations[i]` is the remaining capacity of every block right after
    process `i` was handled; `remaining_blocks` is the state after the last
    process (equal to the initial capacities when there were no processes).
    """

    strategy: Strategy
    capacities: Tuple[int, ...]
    outcomes: Tuple[AllocationOutcome, ...]
    fragmentations: Tuple[Tuple[int, ...], ...]
    remaining_blocks: Tuple[int, ...]

    @property
    def allocations(self) -> List[int]:
        return [outcome.to_wire() for outcome in self.outcomes]

    @property
    def assigned_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.is_assigned)

    @property
    def rejected_count(self) -> int:
        return len(self.outcomes) - self.assigned_count

    @property
    def rejected_indices(self) -> List[int]:
        return [outcome.process_index for outcome in self.outcomes if outcome.is_rejected]

    @property
    def total_assigned(self) -> int:
        return sum(outcome.size for outcome in self.outcomes if outcome.is_assigned)

    def processes_by_block(self) -> List[List[int]]:
        placed: List[List[int]] = [[] for _ in self.capacities]
        for outcome in self.outcomes:
            if outcome.block_index is not None:
                placed[outcome.block_index].append(outcome.process_index)
        return placed

    def stats(self) -> Dict[str, Any]:
        capacity = sum(self.capacities)
        free = sum(self.remaining_blocks)
        largest = max(self.remaining_blocks, default=0)
        return {
            "strategy": self.strategy.value,
            "blocks": len(self.capacities),
            "processes": len(self.outcomes),
            "assigned": self.assigned_count,
            "rejected": self.rejected_count,
            "capacity": capacity,
            "used": capacity - free,
            "free": free,
            "utilization": (capacity - free) / capacity if capacity else 0.0,
            "largest_free": largest,
            "external_fragmentation": 1.0 - (largest / free) if free else 0.0,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Response body of the `/allocate` contract."""
        return {
            "allocations": self.allocations,
            "remainingBlocks": list(self.remaining_blocks),
            "fragmentations": [list(snapshot) for snapshot in self.fragmentations],
        }


class AllocationEngine:
    """
    Places processes into fixed-size blocks, one process at a time.

    The engine keeps no state between calls: every `allocate` builds its own
    pool and allocator, so a NextFit cursor lives exactly as long as the run
    that owns it.
    """

    def __init__(self, strategy: StrategyLike = Strategy.FIRST_FIT) -> None:
        self.strategy = parse_strategy(strategy)

    def allocate(
        self,
        blocks: Iterable[int],
        processes: Iterable[int],
        strategy: Optional[StrategyLike] = None,
    ) -> AllocationResult:
        """Validate everything, then run the single pass."""
        capacities = validate_sizes(blocks, "blockSizes")
        sizes = validate_sizes(processes, "processSizes")
        selected = self.strategy if strategy is None else parse_strategy(strategy)
        return self._run(capacities, sizes, selected)

    def _run(
        self,
        capacities: Sequence[int],
        sizes: Sequence[int],
        strategy: Strategy,
    ) -> AllocationResult:
        pool = BlockPool(capacities)
        allocator = create_allocator(strategy)
        outcomes: List[AllocationOutcome] = []
        fragmentations: List[Tuple[int, ...]] = []

        for index, size in enumerate(sizes):
            request = ProcessRequest(index=index, size=size)
            outcomes.append(self._place(pool, allocator, request))
            fragmentations.append(pool.remaining())

        return AllocationResult(
            strategy=strategy,
            capacities=pool.capacities(),
            outcomes=tuple(outcomes),
            fragmentations=tuple(fragmentations),
            remaining_blocks=pool.remaining(),
        )

    @staticmethod
    def _place(pool: BlockPool, allocator: Allocator, request: ProcessRequest) -> AllocationOutcome:
        block_index = allocator.select(pool, request)
        if block_index is None:
            return AllocationOutcome.rejected(request)
        pool.assign(block_index, request.size)
        allocator.notify_assigned(block_index)
        return AllocationOutcome.assigned(request, block_index)

    def compare(
        self,
        blocks: Iterable[int],
        processes: Iterable[int],
        strategies: Optional[Iterable[StrategyLike]] = None,
    ) -> Dict[Strategy, AllocationResult]:
        capacities = validate_sizes(blocks, "blockSizes")
        sizes = validate_sizes(processes, "processSizes")
        if strategies is None:
            strategies = list(Strategy)
        elif isinstance(strategies, str):
            strategies = [strategies]
        selected = [parse_strategy(item) for item in strategies]
        return {strategy: self._run(capacities, sizes, strategy) for strategy in selected}


def allocate(
    blocks: Iterable[int],
    processes: Iterable[int],
    strategy: StrategyLike = Strategy.FIRST_FIT,
) -> AllocationResult:
    return AllocationEngine().allocate(blocks, processes, strategy)


def compare_strategies(
    blocks: Iterable[int],
    processes: Iterable[int],
    strategies: Optional[Iterable[StrategyLike]] = None,
) -> Dict[Strategy, AllocationResult]:
    """Run several strategies on independent pools built from the same input."""
    return AllocationEngine().compare(blocks, processes, strategies)
