"""Tests for the shared simulation primitives."""

import pytest

from cpu_scheduler.models import EventType, Metrics, Process, normalize_process
from cpu_scheduler.schedulers.base import (
    apply_aging,
    calculate_metrics,
    empty_result,
    finalize_state,
    initialize_states,
    make_block,
    make_event,
    next_arrival_time,
    ready_processes,
    record_dispatch,
    response_ratio,
)
from tests.conftest import make_processes


class TestInitializeStates:
    def test_one_state_per_process_with_defaults(self, basic_processes):
        states = initialize_states(basic_processes)

        assert [s.pid for s in states] == ["P1", "P2", "P3", "P4"]
        for state, process in zip(states, basic_processes):
            assert state.remaining_time == process.burst_time
            assert state.start_time is None
            assert state.end_time is None
            assert state.response_time is None
            assert state.current_priority == process.priority
            assert state.current_queue == process.queue_level

    def test_processes_are_not_mutated(self, basic_processes):
        states = initialize_states(basic_processes)
        states[0].remaining_time = 0
        assert basic_processes[0].burst_time == 5


class TestReadyProcesses:
    def test_only_arrived_and_unfinished(self, basic_processes):
        states = initialize_states(basic_processes)
        states[0].remaining_time = 0

        ready = ready_processes(states, 2)

        assert [s.pid for s in ready] == ["P2", "P3"]

    def test_next_arrival_time(self, basic_processes):
        states = initialize_states(basic_processes)
        assert next_arrival_time(states, 1) == 2
        assert next_arrival_time(states, 3) is None


class TestResponseRatio:
    def test_formula(self):
        assert response_ratio(4, 3) == pytest.approx(7 / 3)
        assert response_ratio(0, 5) == 1.0

    def test_zero_burst_is_rejected(self):
        with pytest.raises(ValueError):
            response_ratio(3, 0)


class TestFinalize:
    def test_computes_turnaround_and_waiting(self):
        state = initialize_states([Process("P1", 2, 4)])[0]
        record_dispatch(state, 5)

        finalize_state(state, 9)

        assert state.end_time == 9
        assert state.turnaround_time == 7
        assert state.waiting_time == 3
        assert state.remaining_time == 0
        assert state.response_time == 3
        assert state.response_ratio == pytest.approx(7 / 4)

    def test_finalizing_twice_raises(self):
        state = initialize_states([Process("P1", 0, 1)])[0]
        finalize_state(state, 1)
        with pytest.raises(RuntimeError):
            finalize_state(state, 2)

    def test_dispatch_is_recorded_once(self):
        state = initialize_states([Process("P1", 1, 4)])[0]
        record_dispatch(state, 3)
        record_dispatch(state, 7)
        assert state.start_time == 3
        assert state.response_time == 2


class TestMetrics:
    def test_empty_input_gives_zero_metrics(self):
        assert calculate_metrics([], [], 0) == Metrics()
        assert empty_result().metrics == Metrics()

    def test_aggregates(self):
        states = initialize_states(make_processes((0, 2), (0, 2)))
        timeline = [
            make_block(states[0], 0, 2),
            make_block(states[1], 2, 3, is_preemption=True),
            make_block(states[1], 3, 4),
        ]
        record_dispatch(states[0], 0)
        record_dispatch(states[1], 2)
        finalize_state(states[0], 2)
        finalize_state(states[1], 4)

        metrics = calculate_metrics(states, timeline, 5)

        assert metrics.average_waiting_time == 1.0
        assert metrics.average_turnaround_time == 3.0
        assert metrics.average_response_time == 1.0
        assert metrics.cpu_utilization == pytest.approx(80.0)
        assert metrics.throughput == pytest.approx(0.4)
        assert metrics.context_switches == 1
        assert metrics.total_execution_time == 5


class TestBlocksAndEvents:
    def test_block_snapshots_current_queue_and_priority(self):
        state = initialize_states([Process("P1", 0, 3, priority=4, queue_level=1)])[0]
        state.current_priority = 2
        state.current_queue = 0

        block = make_block(state, 0, 2, is_preemption=True, quantum_used=2)
        state.current_priority = 1

        assert block.priority == 2
        assert block.queue_level == 0
        assert block.quantum_used == 2
        assert block.duration == 2

    def test_event_details(self):
        event = make_event(4, EventType.PREEMPTION, "P1", "text", remaining_time=3)
        assert event.type is EventType.PREEMPTION
        assert event.details == {"remaining_time": 3}
        assert event.to_dict()["type"] == "preemption"


class TestAging:
    def test_priority_drops_per_full_interval(self):
        states = initialize_states(make_processes((0, 3, 5)))
        events = []

        apply_aging(states, 25, events, interval=10, boost=1)

        assert states[0].current_priority == 3
        assert len(events) == 1
        assert events[0].details["old_priority"] == 5
        assert events[0].details["new_priority"] == 3

    def test_priority_never_below_zero(self):
        states = initialize_states(make_processes((0, 3, 1)))
        apply_aging(states, 100, [], interval=10, boost=2)
        assert states[0].current_priority == 0

    def test_executed_time_does_not_count_as_waiting(self):
        states = initialize_states(make_processes((0, 20, 5)))
        states[0].remaining_time = 8  # ran for 12 units
        events = []

        apply_aging(states, 15, events, interval=10, boost=1)

        assert states[0].current_priority == 5
        assert events == []


class TestNormalization:
    def test_clamps_out_of_range_values(self):
        process = normalize_process("P1", arrival_time=-3, burst_time=0, priority=-1, queue_level=9)
        assert process.arrival_time == 0
        assert process.burst_time == 1
        assert process.priority == 0
        assert process.queue_level == 4
        assert process.name == "P1"

    def test_non_numeric_values_fall_back_to_defaults(self):
        process = normalize_process("P2", arrival_time="soon", burst_time="7", priority=None)
        assert process.arrival_time == 0
        assert process.burst_time == 7
        assert process.priority == 0

    def test_process_normalized_copy(self):
        process = Process("P1", -1, -5, priority=-2, queue_level=-1)
        fixed = process.normalized()
        assert (fixed.arrival_time, fixed.burst_time, fixed.priority, fixed.queue_level) == (0, 1, 0, 0)
