from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple


@dataclass(slots=True)
class Block:
    index: int
    capacity: int
    remaining: int

    def fits(self, size: int) -> bool:
        return self.remaining >= size


class BlockPool:
    """
    Working copy of fixed-size blocks for a single allocation run.

    Blocks keep their input position as identity and are never split or
    merged; only their remaining capacity shrinks as processes are placed.
    The caller's capacity sequence is copied, never referenced.
    """

    def __init__(self, capacities: Sequence[int]) -> None:
        self._blocks: List[Block] = [
            Block(index=index, capacity=capacity, remaining=capacity)
            for index, capacity in enumerate(capacities)
        ]

    def __len__(self) -> int:
        return len(self._blocks)

    def blocks(self) -> List[Block]:
        """Return a copy of the block list for inspection."""
        return list(self._blocks)

    def block(self, index: int) -> Block:
        return self._blocks[index]

    def candidates(self, size: int) -> List[Block]:
        """Blocks that can hold `size`, in index order."""
        return [block for block in self._blocks if block.fits(size)]

    def assign(self, index: int, size: int) -> Block:
        block = self._blocks[index]
        if not block.fits(size):
            raise ValueError(
                f"Block {index} has {block.remaining} free, cannot place {size}"
            )
        block.remaining -= size
        return block

    def capacities(self) -> Tuple[int, ...]:
        return tuple(block.capacity for block in self._blocks)

    def remaining(self) -> Tuple[int, ...]:
        return tuple(block.remaining for block in self._blocks)
