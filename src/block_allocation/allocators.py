from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, Type

from .block_pool import BlockPool
from .process_request import ProcessRequest


class Strategy(str, Enum):
    FIRST_FIT = "first-fit"
    BEST_FIT = "best-fit"
    WORST_FIT = "worst-fit"
    NEXT_FIT = "next-fit"
    LAST_FIT = "last-fit"

    def __str__(self) -> str:
        return self.value


class Allocator(ABC):
    """Abstract placement strategy over a block pool."""

    strategy: Strategy

    @abstractmethod
    def select(self, pool: BlockPool, request: ProcessRequest) -> Optional[int]:
        """Return the index of the block to use, or None when nothing fits."""

    def notify_assigned(self, block_index: int) -> None:
        """Called after the engine places a request in `block_index`."""


class FirstFitAllocator(Allocator):
    """Pick the lowest-indexed block with enough room."""

    strategy = Strategy.FIRST_FIT

    def select(self, pool: BlockPool, request: ProcessRequest) -> Optional[int]:
        for block in pool.blocks():
            if block.fits(request.size):
                return block.index
        return None


class BestFitAllocator(Allocator):
    """
    Best-fit: choose the block whose remaining space is smallest while still
    fitting the request. Ties go to the lowest index, which keeps the choice
    deterministic on pools with repeated sizes.
    """

    strategy = Strategy.BEST_FIT

    def select(self, pool: BlockPool, request: ProcessRequest) -> Optional[int]:
        candidates = pool.candidates(request.size)
        if not candidates:
            return None
        target = min(candidates, key=lambda block: (block.remaining, block.index))
        return target.index


class WorstFitAllocator(Allocator):
    """
    Worst-fit: choose the block with the most remaining space so the leftover
    stays as large as possible. Ties go to the lowest index.
    """

    strategy = Strategy.WORST_FIT

    def select(self, pool: BlockPool, request: ProcessRequest) -> Optional[int]:
        candidates = pool.candidates(request.size)
        if not candidates:
            return None
        target = min(candidates, key=lambda block: (-block.remaining, block.index))
        return target.index


class NextFitAllocator(Allocator):
    """
    First-fit that resumes from the block used by the previous successful
    placement instead of restarting at index 0.

    The cursor points at the last block that received a process (inclusive),
    and the scan wraps around to the start of the pool. One instance holds
    one cursor, so every run must use its own allocator.
    """

    strategy = Strategy.NEXT_FIT

    def __init__(self) -> None:
        self.cursor = 0

    def select(self, pool: BlockPool, request: ProcessRequest) -> Optional[int]:
        count = len(pool)
        if count == 0:
            return None
        start = self.cursor % count
        for offset in range(count):
            index = (start + offset) % count
            if pool.block(index).fits(request.size):
                return index
        candidates = pool.candidates(request.size)
        return candidates[0].index if candidates else None

    def notify_assigned(self, block_index: int) -> None:
        self.cursor = block_index


class LastFitAllocator(Allocator):
    """Pick the highest-indexed block with enough room."""

    strategy = Strategy.LAST_FIT

    def select(self, pool: BlockPool, request: ProcessRequest) -> Optional[int]:
        for block in reversed(pool.blocks()):
            if block.fits(request.size):
                return block.index
        return None


ALLOCATORS: Dict[Strategy, Type[Allocator]] = {
    Strategy.FIRST_FIT: FirstFitAllocator,
    Strategy.BEST_FIT: BestFitAllocator,
    Strategy.WORST_FIT: WorstFitAllocator,
    Strategy.NEXT_FIT: NextFitAllocator,
    Strategy.LAST_FIT: LastFitAllocator,
}


def create_allocator(strategy: Strategy) -> Allocator:
    """Build a fresh allocator; stateful strategies never share instances."""
    return ALLOCATORS[strategy]()
