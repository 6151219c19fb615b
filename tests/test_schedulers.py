import pytest

from schedsim.algorithms import (
    run_algorithm,
    schedule_fcfs,
    schedule_rr,
    schedule_srtf,
    schedule_stf,
    simulate,
)
from schedsim.errors import InvalidQuantumError, InvalidWorkloadError, UnknownAlgorithmError
from schedsim.models import ExecutionInterval, Process


def _spans(timeline):
    return [(s.process_name, s.start, s.end) for s in timeline]


def _procs():
    return [
        Process("A", arrival_time=0, duration=5),
        Process("B", arrival_time=1, duration=3),
        Process("C", arrival_time=2, duration=1),
    ]


def test_fcfs_two_processes():
    timeline = schedule_fcfs([Process("A", 0, 5), Process("B", 1, 3)])
    assert timeline == [ExecutionInterval("A", 0, 5), ExecutionInterval("B", 5, 8)]


def test_fcfs_keeps_input_order():
    procs = [Process("B", 1, 3), Process("A", 0, 5)]
    assert _spans(schedule_fcfs(procs)) == [("B", 1, 4), ("A", 4, 9)]


def test_fcfs_order_by_arrival():
    procs = [Process("B", 1, 3), Process("A", 0, 5)]
    assert _spans(schedule_fcfs(procs, order_by_arrival=True)) == [("A", 0, 5), ("B", 5, 8)]


def test_fcfs_idle_gap():
    procs = [Process("A", 0, 2), Process("B", 6, 1)]
    assert _spans(schedule_fcfs(procs)) == [("A", 0, 2), ("B", 6, 7)]


def test_stf_order():
    assert _spans(schedule_stf(_procs())) == [("A", 0, 5), ("C", 5, 6), ("B", 6, 9)]


def test_stf_tie_prefers_earlier_arrival():
    procs = [Process("X", 0, 4), Process("Y", 2, 2), Process("Z", 1, 2)]
    assert _spans(schedule_stf(procs)) == [("X", 0, 4), ("Z", 4, 6), ("Y", 6, 8)]


def test_stf_tie_prefers_input_order():
    procs = [Process("A", 0, 2), Process("C", 1, 3), Process("B", 1, 3)]
    assert _spans(schedule_stf(procs)) == [("A", 0, 2), ("C", 2, 5), ("B", 5, 8)]


def test_stf_jumps_to_next_arrival():
    procs = [Process("A", 5, 2), Process("B", 0, 1)]
    assert _spans(schedule_stf(procs)) == [("B", 0, 1), ("A", 5, 7)]


def test_srtf_preempts_on_shorter_arrival():
    procs = [Process("A", 0, 7), Process("B", 2, 4), Process("C", 4, 1)]
    assert _spans(schedule_srtf(procs)) == [
        ("A", 0, 2),
        ("B", 2, 4),
        ("C", 4, 5),
        ("B", 5, 7),
        ("A", 7, 12),
    ]


def test_srtf_coalesces_uninterrupted_run():
    procs = [Process("A", 0, 5), Process("B", 1, 10)]
    assert _spans(schedule_srtf(procs)) == [("A", 0, 5), ("B", 5, 15)]


def test_srtf_tie_keeps_earlier_arrival():
    procs = [Process("A", 0, 4), Process("B", 1, 3)]
    assert _spans(schedule_srtf(procs)) == [("A", 0, 4), ("B", 4, 7)]


def test_srtf_tie_same_arrival_uses_input_order():
    procs = [Process("B", 0, 3), Process("A", 0, 3)]
    assert _spans(schedule_srtf(procs)) == [("B", 0, 3), ("A", 3, 6)]


def test_srtf_idle_until_first_arrival():
    assert _spans(schedule_srtf([Process("A", 3, 2)])) == [("A", 3, 5)]


def test_rr_quantum_2():
    procs = [Process("A", 0, 5), Process("B", 0, 3)]
    assert _spans(schedule_rr(procs, quantum=2)) == [
        ("A", 0, 2),
        ("B", 2, 4),
        ("A", 4, 6),
        ("B", 6, 7),
        ("A", 7, 8),
    ]


def test_rr_does_not_merge_consecutive_slices():
    assert _spans(schedule_rr([Process("A", 0, 5)], quantum=2)) == [
        ("A", 0, 2),
        ("A", 2, 4),
        ("A", 4, 5),
    ]


def test_rr_visits_in_input_order_regardless_of_arrival():
    procs = [Process("A", 4, 2), Process("B", 0, 2)]
    assert _spans(schedule_rr(procs, quantum=2)) == [("A", 4, 6), ("B", 6, 8)]


@pytest.mark.parametrize("quantum", [None, 0, -1, 1.5, True])
def test_rr_rejects_bad_quantum(quantum):
    with pytest.raises(InvalidQuantumError):
        schedule_rr(_procs(), quantum=quantum)


@pytest.mark.parametrize("scheduler", [schedule_fcfs, schedule_stf, schedule_srtf])
def test_empty_workload(scheduler):
    assert scheduler([]) == []


def test_rr_empty_workload():
    assert schedule_rr([], quantum=3) == []


@pytest.mark.parametrize("scheduler", [schedule_stf, schedule_srtf])
def test_input_list_untouched(scheduler):
    procs = [Process("C", 2, 1), Process("A", 0, 5), Process("B", 1, 3)]
    snapshot = list(procs)
    scheduler(procs)
    assert procs == snapshot
    assert [p.duration for p in procs] == [1, 5, 3]


@pytest.mark.parametrize(
    "bad",
    [
        [Process("A", 0, 0)],
        [Process("A", -1, 2)],
        [Process("", 0, 2)],
        [Process("A", 0, 2), Process("A", 1, 1)],
        [Process("A", 0, 2.5)],
        [Process("A", 0, True)],
    ],
)
def test_invalid_workload_rejected(bad):
    for name in ("fcfs", "stf", "srtf", "rr"):
        with pytest.raises(InvalidWorkloadError):
            run_algorithm(name, bad, quantum=2)


def test_run_algorithm_bundles_metrics():
    res = run_algorithm("stf", _procs())
    assert res.algorithm == "STF"
    assert res.quantum is None
    assert [p.name for p in res.processes] == ["A", "B", "C"]
    assert res.metrics.waiting_times == {"A": 0, "B": 5, "C": 3}


def test_run_algorithm_ignores_quantum_for_non_rr():
    res = run_algorithm("fcfs", _procs(), quantum=4)
    assert res.quantum is None


@pytest.mark.parametrize("name, expected", [("SJF", "STF"), ("round-robin", "Round Robin"), ("Round_Robin", "Round Robin"), (" SRTF ", "SRTF")])
def test_algorithm_aliases(name, expected):
    assert run_algorithm(name, _procs(), quantum=2).algorithm == expected


def test_unknown_algorithm():
    with pytest.raises(UnknownAlgorithmError):
        run_algorithm("priority", _procs())


def test_simulate_from_text():
    res = simulate("A(0,5) B(0,3)", "rr", quantum=2)
    assert _spans(res.timeline)[0] == ("A", 0, 2)
    assert res.metrics.throughput == pytest.approx(2 / 8)


def test_simulate_rejects_before_scheduling():
    with pytest.raises(InvalidWorkloadError):
        simulate("A(0,0)", "fcfs")
