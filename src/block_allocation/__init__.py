"""
Fixed-block memory allocation engine.

Places an ordered list of process sizes into fixed-capacity blocks using one
of the classic placement strategies and reports the per-step leftover space.
"""

from .allocators import (
    Allocator,
    BestFitAllocator,
    FirstFitAllocator,
    LastFitAllocator,
    NextFitAllocator,
    Strategy,
    WorstFitAllocator,
    create_allocator,
)
from .block_pool import Block, BlockPool
from .engine import AllocationEngine, AllocationResult, allocate, compare_strategies
from .process_request import REJECTED_SENTINEL, AllocationOutcome, ProcessRequest
from .service import handle_allocate
from .validation import InvalidInput, parse_sizes, parse_strategy

__all__ = [
    "Allocator",
    "FirstFitAllocator",
    "BestFitAllocator",
    "WorstFitAllocator",
    "NextFitAllocator",
    "LastFitAllocator",
    "Strategy",
    "create_allocator",
    "Block",
    "BlockPool",
    "AllocationEngine",
    "AllocationResult",
    "allocate",
    "compare_strategies",
    "AllocationOutcome",
    "ProcessRequest",
    "REJECTED_SENTINEL",
    "handle_allocate",
    "InvalidInput",
    "parse_sizes",
    "parse_strategy",
]
