"""
CPU scheduling simulator.

Runs FCFS, STF, SRTF and Round Robin over a static workload of synthetic
processes and reports the execution timeline together with throughput,
turnaround, response and waiting times.
"""

from .algorithms import run_algorithm, simulate
from .errors import InvalidQuantumError, InvalidWorkloadError, SchedulerError, UnknownAlgorithmError
from .models import ExecutionInterval, Metrics, Process, ScheduleResult

__all__ = [
    "ExecutionInterval",
    "InvalidQuantumError",
    "InvalidWorkloadError",
    "Metrics",
    "Process",
    "ScheduleResult",
    "SchedulerError",
    "UnknownAlgorithmError",
    "run_algorithm",
    "simulate",
]
