from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from block_allocation import (
    AllocationResult,
    InvalidInput,
    Strategy,
    compare_strategies,
    handle_allocate,
    parse_sizes,
)
from block_allocation.service import DEFAULT_ALLOCATION_TYPE
from experiments.instrumentation import AllocationProfiler


def format_result(result: AllocationResult) -> str:
    """Render the allocation table and per-block summary for one run."""
    header = f"{'Process':<8} {'Size':>8}  {'Block':<9} Remaining after step"
    lines = [f"[{result.strategy.value}]", header, "-" * len(header)]
    for outcome, snapshot in zip(result.outcomes, result.fragmentations):
        block = "rejected" if outcome.block_index is None else str(outcome.block_index + 1)
        leftovers = ", ".join(f"{value}KB" for value in snapshot)
        lines.append(f"{'P' + str(outcome.process_index + 1):<8} {outcome.size:>6}KB  {block:<9} {leftovers}")
    lines.append("")
    for index, placed in enumerate(result.processes_by_block()):
        names = ", ".join(f"P{process + 1}" for process in placed) or "-"
        lines.append(f"Block {index + 1}: {names:<20} {result.remaining_blocks[index]}KB free")
    return "\n".join(lines)


def load_request(args: argparse.Namespace) -> Dict[str, Any]:
    if args.request:
        try:
            with Path(args.request).open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"Request file is not valid JSON: {exc}") from None
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"Request file is not UTF-8 text: {exc}") from None
        except OSError as exc:
            raise InvalidInput(f"Cannot read request file {args.request}: {exc.strerror or exc}") from None
        if not isinstance(payload, dict):
            raise InvalidInput(f"Request body must be an object, got {type(payload).__name__}")
        if args.strategy:
            payload["allocationType"] = args.strategy
        return payload
    if args.blocks is None or args.processes is None:
        raise InvalidInput("Either --request or both --blocks and --processes are required.")
    return {
        "blockSizes": parse_sizes(args.blocks, "blockSizes"),
        "processSizes": parse_sizes(args.processes, "processSizes"),
        "allocationType": args.strategy or DEFAULT_ALLOCATION_TYPE,
    }


def run(args: argparse.Namespace) -> List[str]:
    payload = load_request(args)
    profiler = AllocationProfiler(run_id=args.run_id, output_dir=args.events_dir, record_steps=True)
    try:
        if args.json and not args.all:
            return [json.dumps(handle_allocate(payload, profiler=profiler))]
        strategies = list(Strategy) if args.all else [payload.get("allocationType", DEFAULT_ALLOCATION_TYPE)]
        results = compare_strategies(payload.get("blockSizes"), payload.get("processSizes"), strategies)
        outputs: List[str] = []
        for result in results.values():
            profiler.record_result(result, label=args.run_id)
            if args.json:
                outputs.append(json.dumps({"allocationType": result.strategy.value, **result.to_dict()}))
            else:
                outputs.append(format_result(result))
        return outputs
    finally:
        profiler.flush()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Place processes into fixed-size memory blocks.")
    parser.add_argument("--blocks", type=str, default=None, help='Block capacities, e.g. "100,500,200,300,600".')
    parser.add_argument("--processes", type=str, default=None, help='Process sizes, e.g. "212,417,112,426".')
    parser.add_argument(
        "--strategy",
        type=str,
        default=None,
        help="Placement strategy: " + ", ".join(strategy.value for strategy in Strategy) + ".",
    )
    parser.add_argument("--request", type=str, default=None, help="JSON file holding an /allocate request body.")
    parser.add_argument("--all", action="store_true", help="Run every strategy on the same input.")
    parser.add_argument("--json", action="store_true", help="Print the /allocate response body instead of a table.")
    parser.add_argument("--events-dir", type=str, default=None, help="Directory for JSONL/CSV event output.")
    parser.add_argument("--run-id", type=str, default="allocation", help="File stem for event output.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        outputs = run(args)
    except InvalidInput as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print("\n\n".join(outputs))
    return 0


if __name__ == "__main__":
    sys.exit(main())
