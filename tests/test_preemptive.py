"""Tests for the preemptive single-queue engines: SRTF and Priority-P."""

import pytest

from cpu_scheduler.config import PriorityConfig
from cpu_scheduler.models import EventType
from cpu_scheduler.schedulers import priority_preemptive, srtf
from tests.conftest import make_processes, segments, waiting_times


class TestSRTF:
    def test_shorter_arrival_preempts(self, basic_processes):
        result = srtf(basic_processes)

        assert segments(result) == [
            ("P1", 0, 1),
            ("P2", 1, 4),
            ("P4", 4, 6),
            ("P1", 6, 10),
            ("P3", 10, 18),
        ]
        assert [b.is_preemption for b in result.timeline] == [True, False, False, False, False]
        assert waiting_times(result) == [5, 0, 8, 1]
        assert result.metrics.average_waiting_time == pytest.approx(3.5)

    def test_preemption_event(self, basic_processes):
        result = srtf(basic_processes)

        preemptions = [e for e in result.events if e.type is EventType.PREEMPTION]
        assert len(preemptions) == 1
        assert preemptions[0].time == 1
        assert preemptions[0].pid == "P1"
        assert preemptions[0].details["preempted_by"] == "P2"
        assert preemptions[0].details["remaining_time"] == 4

    def test_running_process_keeps_cpu_across_arrivals(self):
        # Arrivals at 2 and 3 do not beat P1, so P1 runs in one block.
        result = srtf(make_processes((0, 4), (2, 5), (3, 6)))
        assert segments(result)[0] == ("P1", 0, 4)

    def test_response_time_set_on_first_dispatch(self, basic_processes):
        result = srtf(basic_processes)
        assert [s.response_time for s in result.process_states] == [0, 0, 8, 1]
        assert result.state_for("P1").start_time == 0

    def test_idle_then_resume(self):
        result = srtf(make_processes((0, 1), (5, 2)))
        assert segments(result) == [("P1", 0, 1), ("P2", 5, 7)]
        assert result.metrics.total_execution_time == 7


class TestPriorityPreemptive:
    def test_higher_priority_arrival_preempts(self, priority_processes):
        result = priority_preemptive(priority_processes, PriorityConfig(aging_interval=0))

        assert segments(result) == [
            ("P1", 0, 1),
            ("P2", 1, 4),
            ("P1", 4, 5),
            ("P5", 5, 11),
            ("P1", 11, 13),
            ("P4", 13, 15),
            ("P3", 15, 20),
        ]
        assert waiting_times(result) == [9, 0, 13, 10, 0]
        assert [s.response_time for s in result.process_states] == [0, 0, 13, 10, 0]

    def test_preempted_blocks_are_marked(self, priority_processes):
        result = priority_preemptive(priority_processes, PriorityConfig(aging_interval=0))
        preempted = [(b.pid, b.end_time) for b in result.timeline if b.is_preemption]
        assert preempted == [("P1", 1), ("P1", 5)]

    def test_equal_priority_does_not_preempt_earlier_process(self):
        result = priority_preemptive(
            make_processes((0, 4, 1), (2, 2, 1)), PriorityConfig(aging_interval=0)
        )
        assert segments(result) == [("P1", 0, 4), ("P2", 4, 6)]

    def test_aging_lets_waiting_process_win(self):
        processes = make_processes((0, 3, 2), (0, 10, 3), (1, 20, 1))
        aged = priority_preemptive(processes, PriorityConfig(aging_interval=4, aging_boost=1))

        # P3 (priority 1) preempts P1; P2 keeps aging while it waits.
        assert aged.timeline[0].pid == "P1"
        assert aged.timeline[1].pid == "P3"
        aging = [e for e in aged.events if e.type is EventType.PRIORITY_AGING]
        assert aging
        assert all(e.details["new_priority"] < e.details["old_priority"] for e in aging)
