from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

REJECTED_SENTINEL = -1


@dataclass(frozen=True, slots=True)
class ProcessRequest:
    """A process asking for `size` units, identified by its input position."""

    index: int
    size: int


@dataclass(frozen=True, slots=True)
class AllocationOutcome:
    """
    Result of placing one process.

    `block_index` is None when no block had enough room. Use the
    `assigned` / `rejected` constructors rather than building these directly.
    """

    process_index: int
    size: int
    block_index: Optional[int] = None

    @classmethod
    def assigned(cls, request: ProcessRequest, block_index: int) -> "AllocationOutcome":
        return cls(process_index=request.index, size=request.size, block_index=block_index)

    @classmethod
    def rejected(cls, request: ProcessRequest) -> "AllocationOutcome":
        return cls(process_index=request.index, size=request.size)

    @property
    def is_assigned(self) -> bool:
        return self.block_index is not None

    @property
    def is_rejected(self) -> bool:
        return self.block_index is None

    def to_wire(self) -> int:
        return REJECTED_SENTINEL if self.block_index is None else self.block_index

    def __str__(self) -> str:
        if self.block_index is None:
            return "Rejected"
        return f"Assigned({self.block_index})"
