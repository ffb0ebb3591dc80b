from __future__ import annotations

import csv
import json
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from block_allocation.engine import AllocationResult


@dataclass
class AllocationProfiler:
    """
    Event recorder for allocation requests and runs.

    The engine itself never logs; callers hand finished results (or request
    failures) to the profiler, which keeps them in memory and writes them out
    as `<run_id>.jsonl` and `<run_id>.csv` on `flush()`.
    """

    run_id: str
    output_dir: Optional[str] = None
    write_immediately: bool = False
    record_steps: bool = False
    events: List[Dict[str, object]] = field(default_factory=list)

    def record_event(self, event_type: str, payload: Dict[str, object]) -> None:
        record: Dict[str, object] = {"event": event_type, "run_id": self.run_id, "timestamp": time.time()}
        record.update(payload)
        self.events.append(record)
        if self.write_immediately:
            self._write_jsonl([record], mode="a")

    def record_result(self, result: "AllocationResult", *, label: str = "") -> None:
        """Store run statistics and, with `record_steps`, one event per process."""
        self.record_event("allocation_run", {"label": label, **result.stats()})
        if not self.record_steps:
            return
        for outcome, snapshot in zip(result.outcomes, result.fragmentations):
            self.record_event(
                "allocation_step",
                {
                    "label": label,
                    "strategy": result.strategy.value,
                    "process": outcome.process_index,
                    "size": outcome.size,
                    "block": outcome.to_wire(),
                    "remaining": list(snapshot),
                },
            )

    def counts(self) -> Counter[str]:
        return Counter(str(record["event"]) for record in self.events)

    def events_of(self, event_type: str) -> List[Dict[str, object]]:
        return [record for record in self.events if record["event"] == event_type]

    def flush(self) -> None:
        if not self.events:
            return
        self._write_jsonl(self.events, mode="w")
        csv_path = self._event_path(".csv")
        if csv_path is not None:
            self._write_csv(csv_path)

    def _event_path(self, suffix: str) -> Optional[Path]:
        if not self.output_dir:
            return None
        output_path = Path(self.output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        return output_path / f"{self.run_id}{suffix}"

    def _write_jsonl(self, records: List[Dict[str, object]], *, mode: str) -> None:
        path = self._event_path(".jsonl")
        if path is None:
            return
        with path.open(mode, encoding="utf-8") as handle:
            handle.writelines(json.dumps(record) + "\n" for record in records)

    def _write_csv(self, path: Path) -> None:
        fieldnames = sorted({key for event in self.events for key in event.keys()})
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames)
            writer.writeheader()
            for record in self.events:
                # Lists (remaining snapshots) go into a single CSV cell.
                writer.writerow(
                    {
                        key: json.dumps(value) if isinstance(value, list) else value
                        for key, value in record.items()
                    }
                )
