from __future__ import annotations

import deal
import pytest
from hypothesis import given, strategies as st

from applytime.events import Message
from applytime.latency import (
    BY_ADDRESS,
    BY_PROVIDER,
    BY_RESOURCE_TYPE,
    DIMENSIONS,
    LatencyAccumulator,
    LatencyStats,
)

ELAPSED = st.integers(min_value=0, max_value=100_000)


def _complete(addr: str, sec: int, provider: str = "aws", rtype: str = "aws_instance") -> Message:
    return Message.from_obj({
        "type": "apply_complete",
        "hook": {
            "resource": {"addr": addr, "implied_provider": provider, "resource_type": rtype},
            "elapsed_seconds": sec,
        },
    })


@given(st.lists(ELAPSED, min_size=1, max_size=200))
def test_stats_match_contributions(values):
    s = LatencyStats()
    for v in values:
        s.add(v)
    assert s.total_time == sum(values)
    assert s.min_time == min(values)
    assert s.max_time == max(values)
    assert s.instance_count == len(values)
    assert s.min_time <= s.max_time


def test_zero_elapsed_is_a_real_minimum():
    s = LatencyStats()
    for v in (0, 7, 3):
        s.add(v)
    assert s.min_time == 0
    assert s.max_time == 7


def test_first_contribution_sets_min():
    s = LatencyStats()
    s.add(42)
    assert s.min_time == 42
    assert s.max_time == 42


def test_two_contributions_scenario():
    s = LatencyStats()
    s.add(4)
    s.add(6)
    assert (s.total_time, s.instance_count, s.min_time, s.max_time) == (10, 2, 4, 6)
    assert s.average() == 5.0


def test_average_of_empty_record_violates_contract():
    with pytest.raises(deal.PreContractError):
        LatencyStats().average()


def test_negative_contribution_violates_contract():
    with pytest.raises(deal.PreContractError):
        LatencyStats().add(-1)


def test_accumulator_keys_each_dimension():
    acc = LatencyAccumulator()
    assert acc.accumulate(_complete("aws_instance.a", 5))
    assert acc.accumulate(_complete("google_sql.db", 9, provider="google", rtype="google_sql"))
    assert acc.accumulate(_complete("aws_instance.b", 3))

    assert set(acc.mapping(BY_ADDRESS)) == {"aws_instance.a", "aws_instance.b", "google_sql.db"}
    assert acc.mapping(BY_PROVIDER)["aws"].total_time == 8
    assert acc.mapping(BY_PROVIDER)["aws"].instance_count == 2
    assert acc.mapping(BY_RESOURCE_TYPE)["google_sql"].total_time == 9
    assert acc.completed == 3


def test_accumulator_starts_empty():
    acc = LatencyAccumulator()
    for dim in DIMENSIONS:
        assert acc.mapping(dim) == {}


@given(
    tag=st.text().filter(lambda t: t != "apply_complete"),
    payload=st.dictionaries(st.text(max_size=8), st.one_of(st.none(), st.integers(), st.text(max_size=8))),
)
def test_other_tags_never_mutate(tag, payload):
    acc = LatencyAccumulator()
    acc.accumulate(_complete("x", 1))
    before = {dim.label: dict(acc.mapping(dim)) for dim in DIMENSIONS}
    snapshot = {label: {k: (v.total_time, v.instance_count) for k, v in m.items()} for label, m in before.items()}

    msg = Message.from_obj({"type": tag, "hook": payload})
    assert acc.accumulate(msg) is False

    after = {dim.label: {k: (v.total_time, v.instance_count) for k, v in acc.mapping(dim).items()} for dim in DIMENSIONS}
    assert after == snapshot
    assert acc.completed == 1
