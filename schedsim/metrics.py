from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .models import ExecutionInterval, Metrics, Process, ProcessMetrics


def _span_by_name(timeline: Sequence[ExecutionInterval]) -> Dict[str, Tuple[int, int]]:
    """
    Map each process name to (first start, last end) across the timeline.
    """
    spans: Dict[str, Tuple[int, int]] = {}
    for interval in timeline:
        if interval.process_name in spans:
            first_start, _ = spans[interval.process_name]
            spans[interval.process_name] = (first_start, interval.end)
        else:
            spans[interval.process_name] = (interval.start, interval.end)
    return spans


def _lookup(spans: Dict[str, Tuple[int, int]], process: Process) -> Tuple[int, int]:
    try:
        return spans[process.name]
    except KeyError:
        raise ValueError(f"Process {process.name!r} never ran in the timeline") from None


def calculate_throughput(timeline: Sequence[ExecutionInterval]) -> float:
    """
    Completed processes per time unit, measured up to the end of the last
    interval. Counts distinct process names, not intervals.
    """
    if not timeline:
        return 0.0

    total_time = timeline[-1].end
    if total_time <= 0:
        return 0.0

    completed = {interval.process_name for interval in timeline}
    return len(completed) / total_time


def calculate_turnaround_times(
    timeline: Sequence[ExecutionInterval], processes: Sequence[Process]
) -> Dict[str, int]:
    if not timeline:
        return {}
    spans = _span_by_name(timeline)
    return {p.name: _lookup(spans, p)[1] - p.arrival_time for p in processes}


def calculate_response_times(
    timeline: Sequence[ExecutionInterval], processes: Sequence[Process]
) -> Dict[str, int]:
    if not timeline:
        return {}
    spans = _span_by_name(timeline)
    return {p.name: _lookup(spans, p)[0] - p.arrival_time for p in processes}


def calculate_waiting_times(
    timeline: Sequence[ExecutionInterval], processes: Sequence[Process]
) -> Dict[str, int]:
    turnaround = calculate_turnaround_times(timeline, processes)
    return {p.name: turnaround[p.name] - p.duration for p in processes if p.name in turnaround}


def compute_metrics(timeline: Sequence[ExecutionInterval], processes: Sequence[Process]) -> Metrics:
    """
    Bundle the four per-run metrics with makespan and CPU utilization.
    """
    if not timeline:
        return Metrics(throughput=0.0)

    makespan = timeline[-1].end
    cpu_busy_time = sum(interval.length for interval in timeline)

    return Metrics(
        throughput=calculate_throughput(timeline),
        turnaround_times=calculate_turnaround_times(timeline, processes),
        response_times=calculate_response_times(timeline, processes),
        waiting_times=calculate_waiting_times(timeline, processes),
        makespan=makespan,
        cpu_busy_time=cpu_busy_time,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )


def build_process_metrics(
    timeline: Sequence[ExecutionInterval], processes: Sequence[Process]
) -> List[ProcessMetrics]:
    """
    Per-process rows (input order) for tables and reports.
    """
    if not timeline:
        return []

    spans = _span_by_name(timeline)
    rows: List[ProcessMetrics] = []
    for p in processes:
        start_time, completion_time = _lookup(spans, p)
        turnaround_time = completion_time - p.arrival_time
        rows.append(
            ProcessMetrics(
                name=p.name,
                arrival_time=p.arrival_time,
                duration=p.duration,
                start_time=start_time,
                completion_time=completion_time,
                waiting_time=turnaround_time - p.duration,
                turnaround_time=turnaround_time,
                response_time=start_time - p.arrival_time,
            )
        )
    return rows


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
