from __future__ import annotations

from dataclasses import replace
from typing import List

from .models import ExecutionInterval


class TimelineBuilder:
    """
    Accumulates execution intervals for one algorithm run.

    ``append`` always records a new interval. ``extend`` merges the slice
    into the previous interval when it belongs to the same process and
    starts exactly where that interval ends; otherwise it appends. Stored
    intervals are never mutated: a merge replaces the last entry with a
    widened copy.
    """

    def __init__(self) -> None:
        self._intervals: List[ExecutionInterval] = []

    def __len__(self) -> int:
        return len(self._intervals)

    @property
    def last(self) -> ExecutionInterval | None:
        return self._intervals[-1] if self._intervals else None

    def append(self, process_name: str, start: int, end: int) -> ExecutionInterval:
        self._check_order(start)
        interval = ExecutionInterval(process_name=process_name, start=start, end=end)
        self._intervals.append(interval)
        return interval

    def extend(self, process_name: str, start: int, end: int) -> ExecutionInterval:
        last = self.last
        if last is not None and last.process_name == process_name and last.end == start:
            merged = replace(last, end=end)
            self._intervals[-1] = merged
            return merged
        return self.append(process_name, start, end)

    def build(self) -> List[ExecutionInterval]:
        return list(self._intervals)

    def _check_order(self, start: int) -> None:
        # Single core: a new slice may not begin before the previous one ends.
        last = self.last
        if last is not None and start < last.end:
            raise ValueError(
                f"Interval starting at {start} overlaps {last.process_name!r} ending at {last.end}"
            )
