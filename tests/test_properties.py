"""
Properties every algorithm must satisfy on every predefined scenario.
"""

from collections import defaultdict

import pytest

from cpu_scheduler.config import Algorithm
from cpu_scheduler.dispatcher import run_scheduler
from cpu_scheduler.models import EventType
from cpu_scheduler.scenarios import load_scenario, scenario_names
from tests.conftest import make_processes

CASES = [(algorithm, name) for algorithm in Algorithm for name in scenario_names()]


@pytest.fixture(params=CASES, ids=lambda case: f"{case[0].value}-{case[1]}")
def run(request):
    algorithm, name = request.param
    processes = load_scenario(name)
    return processes, run_scheduler(algorithm, processes)


def test_every_process_finishes(run):
    processes, result = run
    assert [s.pid for s in result.process_states] == [p.pid for p in processes]
    assert all(s.remaining_time == 0 and s.is_finished for s in result.process_states)


def test_per_process_times_are_consistent(run):
    _, result = run
    for s in result.process_states:
        assert s.turnaround_time == s.end_time - s.arrival_time
        assert s.waiting_time == s.turnaround_time - s.burst_time
        assert s.waiting_time >= 0
        assert s.start_time >= s.arrival_time
        assert s.response_time == s.start_time - s.arrival_time
        assert s.response_time <= s.waiting_time
        assert s.response_ratio == pytest.approx((s.waiting_time + s.burst_time) / s.burst_time)


def test_timeline_is_ordered_and_disjoint(run):
    _, result = run
    for block in result.timeline:
        assert block.start_time < block.end_time
    for prev, block in zip(result.timeline, result.timeline[1:]):
        assert prev.end_time <= block.start_time


def test_each_process_runs_exactly_its_burst(run):
    processes, result = run
    executed = defaultdict(int)
    for block in result.timeline:
        executed[block.pid] += block.duration
    assert dict(executed) == {p.pid: p.burst_time for p in processes}


def test_last_block_of_each_process_is_a_completion(run):
    _, result = run
    last = {}
    for block in result.timeline:
        last[block.pid] = block
    for state in result.process_states:
        assert not last[state.pid].is_preemption
        assert last[state.pid].end_time == state.end_time


def test_averages_match_process_states(run):
    _, result = run
    states = result.process_states
    n = len(states)
    m = result.metrics

    assert m.average_waiting_time == pytest.approx(sum(s.waiting_time for s in states) / n)
    assert m.average_turnaround_time == pytest.approx(sum(s.turnaround_time for s in states) / n)
    assert m.average_response_time == pytest.approx(sum(s.response_time for s in states) / n)
    assert m.total_execution_time == max(s.end_time for s in states)
    assert m.throughput == pytest.approx(n / m.total_execution_time)


def test_utilization_reflects_busy_time(run):
    processes, result = run
    busy = sum(p.burst_time for p in processes)
    assert result.metrics.cpu_utilization == pytest.approx(busy / result.metrics.total_execution_time * 100)
    assert 0 < result.metrics.cpu_utilization <= 100


def test_context_switches_count_pid_changes(run):
    _, result = run
    pids = [b.pid for b in result.timeline]
    assert result.metrics.context_switches == sum(1 for a, b in zip(pids, pids[1:]) if a != b)


def test_event_times_never_decrease(run):
    _, result = run
    times = [e.time for e in result.events]
    assert times == sorted(times)


def test_one_completion_event_per_process(run):
    processes, result = run
    completions = [e.pid for e in result.events if e.type is EventType.COMPLETION]
    assert sorted(completions) == sorted(p.pid for p in processes)


def test_deterministic(run):
    processes, result = run
    again = run_scheduler(result.algorithm, processes)
    assert again.to_dict() == result.to_dict()


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_idle_gap_before_first_arrival(algorithm):
    result = run_scheduler(algorithm, make_processes((4, 2), (4, 1)))

    assert result.timeline[0].start_time == 4
    assert result.metrics.total_execution_time == 7
    assert result.metrics.cpu_utilization == pytest.approx(3 / 7 * 100)


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_single_process_never_waits(algorithm):
    result = run_scheduler(algorithm, make_processes((2, 5)))

    state = result.state_for("P1")
    assert (state.start_time, state.end_time, state.waiting_time) == (2, 7, 0)
    assert result.metrics.context_switches == 0
