from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .errors import InvalidWorkloadError


@dataclass(frozen=True, eq=False)
class Process:
    """
    Static description of one synthetic process. Two processes are equal
    when their names are equal.
    """

    name: str
    arrival_time: int
    duration: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Process):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


@dataclass(frozen=True)
class ExecutionInterval:
    """
    One contiguous slice of execution for a process in the timeline.
    """

    process_name: str
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(
                f"Interval for {self.process_name!r} must end after it starts "
                f"(start={self.start}, end={self.end})"
            )

    @property
    def length(self) -> int:
        return self.end - self.start


Timeline = List[ExecutionInterval]


@dataclass
class ProcessMetrics:
    name: str
    arrival_time: int
    duration: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int


@dataclass
class Metrics:
    throughput: float
    turnaround_times: Dict[str, int] = field(default_factory=dict)
    response_times: Dict[str, int] = field(default_factory=dict)
    waiting_times: Dict[str, int] = field(default_factory=dict)
    makespan: int = 0
    cpu_busy_time: int = 0
    cpu_utilization: float = 0.0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    timeline: Timeline = field(default_factory=list)
    metrics: Optional[Metrics] = None
    processes: List[ProcessMetrics] = field(default_factory=list)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_processes(processes: Iterable[Process]) -> List[Process]:
    """
    Check a workload before any scheduling happens and return it as a list.

    Raises InvalidWorkloadError on the first problem found: a non-Process
    entry, an empty name, a negative or non-integer arrival time, a
    non-positive or non-integer duration, or a name used twice.
    """
    checked: List[Process] = []
    seen: set[str] = set()

    for p in processes:
        if not isinstance(p, Process):
            raise InvalidWorkloadError(f"Expected a Process, got {p!r}")
        if not isinstance(p.name, str) or not p.name:
            raise InvalidWorkloadError(f"Process name must be a non-empty string: {p!r}")
        if not _is_int(p.arrival_time) or p.arrival_time < 0:
            raise InvalidWorkloadError(
                f"Process {p.name!r} has invalid arrival time {p.arrival_time!r} (need integer >= 0)"
            )
        if not _is_int(p.duration) or p.duration <= 0:
            raise InvalidWorkloadError(
                f"Process {p.name!r} has invalid duration {p.duration!r} (need integer > 0)"
            )
        if p.name in seen:
            raise InvalidWorkloadError(f"Duplicate process name {p.name!r}")

        seen.add(p.name)
        checked.append(p)

    return checked
