"""
Request handler for the `/allocate` contract.

Transport is left to whoever mounts this: the handler takes the decoded JSON
body and returns the body to encode, raising InvalidInput for anything the
engine must not see.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Dict, Optional

from .allocators import Strategy
from .engine import AllocationEngine
from .validation import InvalidInput

if TYPE_CHECKING:
    from experiments.instrumentation import AllocationProfiler

DEFAULT_ALLOCATION_TYPE = Strategy.FIRST_FIT.value
REQUIRED_FIELDS = ("blockSizes", "processSizes")


def handle_allocate(
    payload: Any,
    *,
    engine: Optional[AllocationEngine] = None,
    profiler: Optional["AllocationProfiler"] = None,
) -> Dict[str, Any]:
    engine = engine or AllocationEngine()
    try:
        if not isinstance(payload, Mapping):
            raise InvalidInput(f"Request body must be an object, got {type(payload).__name__}")
        missing = [name for name in REQUIRED_FIELDS if name not in payload]
        if missing:
            raise InvalidInput(f"Missing required field(s): {', '.join(missing)}")
        result = engine.allocate(
            payload["blockSizes"],
            payload["processSizes"],
            payload.get("allocationType"),
        )
    except InvalidInput as exc:
        if profiler:
            profiler.record_event("invalid_request", {"error": str(exc)})
        raise

    if profiler:
        profiler.record_event("allocation_request", result.stats())
    return result.to_dict()
