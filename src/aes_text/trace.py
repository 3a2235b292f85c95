"""
Trace recording and pretty printing for round engine operations.

Contains:
- TraceRecorder: JSON Lines trace + compact verbose stdout lines
- print_header / print_result: shared formatting helpers for the CLI
"""

import json
from typing import Any, TextIO

from .utils import format_state_line


class TraceRecorder:
    """
    Records the state after each round engine step.

    Supports:
    - JSON Lines file output  (when trace_file is set)
    - Compact verbose stdout   (when verbose is set)
    """

    def __init__(self, verbose: bool = False, trace_file: TextIO | None = None):
        self.verbose = verbose
        self.trace_file = trace_file
        self._records: list[dict[str, Any]] = []

    def record(self, **kwargs) -> None:
        """
        Record a trace entry.

        Entries written by the round engine carry 'direction', 'round',
        'operation' and a copy of 'state'.
        """
        self._records.append(kwargs)

        if self.trace_file:
            self._write_jsonl(kwargs)

        if self.verbose:
            self._print_verbose(kwargs)

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        serializable = self._make_serializable(record)
        self.trace_file.write(json.dumps(serializable) + "\n")
        self.trace_file.flush()

    def _make_serializable(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._make_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._make_serializable(item) for item in obj]
        elif isinstance(obj, bytes):
            return obj.hex()
        else:
            return obj

    def _print_verbose(self, record: dict[str, Any]) -> None:
        direction = record.get("direction", "?")
        round_num = record.get("round", "?")
        operation = record.get("operation", "unknown")

        if "state" in record:
            state_hex = format_state_line(record["state"])
            print(f"{direction[:3].upper()} R{round_num:<2}  {operation:20s} STATE:{state_hex}")

    def get_records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()


# ------------------------------------------------------------------
# Shared formatting functions
# ------------------------------------------------------------------

def print_header(title: str) -> None:
    """Print a section header."""
    print(f"\n{'#'*70}")
    print(f"# {title}")
    print(f"{'#'*70}")


def print_result(output_hex: str, blocks: int, passed: bool = True) -> None:
    """Print the result of a single-block walkthrough."""
    print(f"\n{'='*70}")
    print("RESULT")
    print(f"{'='*70}")
    print(f"Output: {output_hex}")
    print(f"Blocks: {blocks}")

    status = "PASS" if passed else "FAIL"
    marker = "[OK]" if passed else "[ERROR]"
    print(f"Inverse check: {marker} {status}")
    print(f"{'='*70}")
