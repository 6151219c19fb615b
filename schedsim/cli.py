from __future__ import annotations

import argparse
import logging
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, ALIASES, resolve_algorithm, run_algorithm
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_process_metrics
from .models import Process, ScheduleResult
from .workload_io import load_workload, parse_process_text

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2
DEFAULT_COMPARE = ["fcfs", "stf", "srtf", "rr"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _add_workload_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--workload",
        "-w",
        help="Path to JSON, CSV or TXT workload file.",
    )
    source.add_argument(
        "--processes",
        "-p",
        help='Inline workload, e.g. "A(0,5) B(1,3) C(2,1)".',
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, STF, SRTF, Round Robin).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    algorithm_names = ", ".join(list(ALGORITHMS) + list(ALIASES))

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({algorithm_names}).",
    )
    _add_workload_arguments(run_parser)
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by FCFS, STF, SRTF).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text Gantt chart instead of the colored one.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    _add_workload_arguments(compare_parser)
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=DEFAULT_COMPARE,
        help=f"Algorithms to compare (default: {' '.join(DEFAULT_COMPARE)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _read_processes(args: argparse.Namespace) -> List[Process]:
    if args.workload is not None:
        return load_workload(args.workload)
    return parse_process_text(args.processes)


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.timeline), highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks, highlight=False)

    console.print()

    slice_table = Table(title="Timeline", box=box.SIMPLE_HEAVY)
    slice_table.add_column("Process", justify="center")
    slice_table.add_column("Start", justify="right")
    slice_table.add_column("End", justify="right")
    for interval in result.timeline:
        slice_table.add_row(interval.process_name, str(interval.start), str(interval.end))

    console.print(slice_table)
    console.print()

    headers = ["Process", "Arrive", "Duration", "Start", "Complete", "Wait", "Turnaround", "Response"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "Process" else "right")

    for p in result.processes:
        proc_table.add_row(
            p.name,
            str(p.arrival_time),
            str(p.duration),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    if result.metrics:
        m = result.metrics
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
        sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
        sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
        sys_table.add_row("Throughput (proc/time)", f"{m.throughput:.3f}")
        sys_table.add_row("Makespan", str(m.makespan))
        sys_table.add_row("CPU utilization", f"{m.cpu_utilization*100:.1f}%")

        console.print(sys_table)


def _print_comparison(processes: List[Process], algorithms: List[str], quantum: int, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Throughput", justify="right")

    for alg in algorithms:
        result = run_algorithm(alg, processes, quantum=quantum)
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            f"{result.metrics.throughput:.3f}",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    console = Console()

    try:
        if args.command == "run":
            processes = _read_processes(args)
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            _print_result(result, console, plain=args.plain)
            return 0

        if args.command == "compare":
            # Reject bad selectors before any table output.
            for alg in args.algorithms:
                resolve_algorithm(alg)
            processes = _read_processes(args)
            _print_comparison(processes, args.algorithms, args.quantum, console)
            return 0
    except (ValueError, OSError) as exc:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
