import pytest

from schedsim.models import ExecutionInterval, Process
from schedsim.timeline import TimelineBuilder


def test_extend_merges_contiguous_same_process():
    builder = TimelineBuilder()
    first = builder.extend("A", 0, 1)
    builder.extend("A", 1, 3)
    assert builder.build() == [ExecutionInterval("A", 0, 3)]
    # the stored interval is replaced, not mutated
    assert first == ExecutionInterval("A", 0, 1)


def test_extend_does_not_merge_across_gap_or_process():
    builder = TimelineBuilder()
    builder.extend("A", 0, 1)
    builder.extend("A", 2, 3)
    builder.extend("B", 3, 4)
    assert len(builder) == 3


def test_append_never_merges():
    builder = TimelineBuilder()
    builder.append("A", 0, 2)
    builder.append("A", 2, 4)
    assert builder.build() == [ExecutionInterval("A", 0, 2), ExecutionInterval("A", 2, 4)]


def test_overlap_rejected():
    builder = TimelineBuilder()
    builder.append("A", 0, 3)
    with pytest.raises(ValueError):
        builder.append("B", 2, 4)


def test_build_returns_copy():
    builder = TimelineBuilder()
    builder.append("A", 0, 1)
    out = builder.build()
    out.clear()
    assert len(builder) == 1


def test_interval_must_have_positive_length():
    with pytest.raises(ValueError):
        ExecutionInterval("A", 3, 3)
    assert ExecutionInterval("A", 1, 4).length == 3


def test_process_equality_by_name():
    assert Process("A", 0, 1) == Process("A", 3, 4)
    assert hash(Process("A", 0, 1)) == hash(Process("A", 3, 4))
    assert Process("A", 0, 1) != Process("B", 0, 1)
    assert Process("A", 0, 1) != "A"
