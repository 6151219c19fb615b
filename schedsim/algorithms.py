from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence, Tuple, Union

from .errors import InvalidQuantumError, UnknownAlgorithmError
from .metrics import build_process_metrics, compute_metrics
from .models import Process, ScheduleResult, Timeline, validate_processes
from .timeline import TimelineBuilder
from .workload_io import parse_process_text

logger = logging.getLogger(__name__)


def schedule_fcfs(
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    *,
    order_by_arrival: bool = False,
) -> Timeline:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run in the order they are given. Pass ``order_by_arrival=True``
    for strict FCFS, which stable-sorts the workload by arrival time first.
    """
    workload = validate_processes(processes)
    if order_by_arrival:
        workload = sorted(workload, key=lambda p: p.arrival_time)

    time = 0
    builder = TimelineBuilder()

    for p in workload:
        start_time = max(time, p.arrival_time)
        if start_time > time:
            logger.debug(f"FCFS: CPU idle from t={time} to t={start_time}")
        end_time = start_time + p.duration
        builder.append(p.name, start_time, end_time)
        time = end_time

    return builder.build()


def schedule_stf(processes: Sequence[Process], quantum: Optional[int] = None) -> Timeline:
    """
    Shortest Time First (non-preemptive shortest-job-next).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest duration. Ties go to the
    earlier arrival, then to the earlier position in the input.
    """
    workload = validate_processes(processes)

    # Indexed working set; the caller's list is never filtered in place.
    remaining: List[Tuple[int, Process]] = sorted(
        enumerate(workload), key=lambda item: (item[1].arrival_time, item[1].duration)
    )

    time = 0
    builder = TimelineBuilder()

    while remaining:
        ready = [item for item in remaining if item[1].arrival_time <= time]

        if not ready:
            next_arrival = min(p.arrival_time for _, p in remaining)
            logger.debug(f"STF: CPU idle from t={time} to t={next_arrival}")
            time = next_arrival
            continue

        chosen = min(ready, key=lambda item: (item[1].duration, item[1].arrival_time, item[0]))
        p = chosen[1]

        builder.append(p.name, time, time + p.duration)
        time += p.duration
        remaining.remove(chosen)

    return builder.build()


def schedule_srtf(processes: Sequence[Process], quantum: Optional[int] = None) -> Timeline:
    """
    Shortest Remaining Time First (preemptive STF).

    Behaves like a one-unit tick loop that always runs the arrived process
    with the least remaining time (ties: earlier arrival, then input order),
    merging consecutive ticks of the same process into one interval. Instead
    of ticking, each step runs the chosen process until it finishes or the
    next process arrives, since the choice cannot change in between.
    """
    workload = validate_processes(processes)
    remaining = [p.duration for p in workload]

    time = 0
    builder = TimelineBuilder()

    def unfinished() -> List[int]:
        return [i for i, rt in enumerate(remaining) if rt > 0]

    def next_arrival_after(t: int) -> Optional[int]:
        future = [workload[i].arrival_time for i in unfinished() if workload[i].arrival_time > t]
        return min(future) if future else None

    while unfinished():
        ready = [i for i in unfinished() if workload[i].arrival_time <= time]
        if not ready:
            nxt = min(workload[i].arrival_time for i in unfinished())
            logger.debug(f"SRTF: CPU idle from t={time} to t={nxt}")
            time = nxt
            continue

        current = min(ready, key=lambda i: (remaining[i], workload[i].arrival_time, i))
        p = workload[current]

        last = builder.last
        if last is not None and last.end == time and last.process_name != p.name:
            logger.debug(f"SRTF: t={time} switching from {last.process_name} to {p.name}")

        nxt_arrival = next_arrival_after(time)
        if nxt_arrival is None:
            run_time = remaining[current]
        else:
            run_time = min(remaining[current], nxt_arrival - time)

        builder.extend(p.name, time, time + run_time)
        time += run_time
        remaining[current] -= run_time

        if remaining[current] == 0:
            logger.debug(f"SRTF: {p.name} completed at t={time}")

    return builder.build()


def _check_quantum(quantum: Optional[int]) -> int:
    if quantum is None or isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise InvalidQuantumError(
            f"Round Robin requires a positive integer quantum, got {quantum!r} (use --quantum)"
        )
    return quantum


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> Timeline:
    """
    Round Robin scheduling with a fixed time quantum.

    The queue starts in input order and finished slices go to the tail.
    Arrival times only delay a process when it reaches the head of the queue
    (``start = max(time, arrival)``); the queue is never reordered by
    arrival. Every slice is its own interval, even when the same process
    runs twice in a row.
    """
    quantum = _check_quantum(quantum)
    workload = validate_processes(processes)

    queue: Deque[Tuple[Process, int]] = deque((p, p.duration) for p in workload)

    time = 0
    builder = TimelineBuilder()

    while queue:
        p, remaining = queue.popleft()

        start_time = max(time, p.arrival_time)
        run_time = min(remaining, quantum)
        builder.append(p.name, start_time, start_time + run_time)

        time = start_time + run_time
        remaining -= run_time

        if remaining > 0:
            queue.append((p, remaining))
        else:
            logger.debug(f"RR: {p.name} completed at t={time}")

    return builder.build()


Scheduler = Callable[..., Timeline]

ALGORITHMS: Dict[str, Scheduler] = {
    "fcfs": schedule_fcfs,
    "stf": schedule_stf,
    "srtf": schedule_srtf,
    "rr": schedule_rr,
}

ALIASES = {
    "sjf": "stf",
    "round_robin": "rr",
}

DISPLAY_NAMES = {
    "fcfs": "FCFS",
    "stf": "STF",
    "srtf": "SRTF",
    "rr": "Round Robin",
}


def resolve_algorithm(name: str) -> str:
    """
    Normalize a user-supplied selector (case, dashes, aliases) to a key of
    ALGORITHMS.
    """
    key = str(name).strip().lower().replace("-", "_")
    key = ALIASES.get(key, key)
    if key not in ALGORITHMS:
        raise UnknownAlgorithmError(
            f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})"
        )
    return key


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm and measure its timeline. Quantum is
    only used by round-robin.
    """
    key = resolve_algorithm(name)
    workload = list(processes)
    used_quantum = quantum if key == "rr" else None

    timeline = ALGORITHMS[key](workload, quantum=used_quantum)
    logger.info(f"{DISPLAY_NAMES[key]}: scheduled {len(workload)} processes into {len(timeline)} intervals")

    return ScheduleResult(
        algorithm=DISPLAY_NAMES[key],
        quantum=used_quantum,
        timeline=timeline,
        metrics=compute_metrics(timeline, workload),
        processes=build_process_metrics(timeline, workload),
    )


def simulate(
    workload: Union[str, Sequence[Process]],
    algorithm: str,
    quantum: Optional[int] = None,
) -> ScheduleResult:
    """
    Parse (when given text), validate, schedule and measure in one call.

    ``workload`` is either the textual notation understood by
    ``parse_process_text`` (``"A(0,5) B(1,3)"``) or a sequence of Process
    records. Nothing is printed or stored.
    """
    processes = parse_process_text(workload) if isinstance(workload, str) else list(workload)
    return run_algorithm(algorithm, processes, quantum=quantum)
