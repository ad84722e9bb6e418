import pytest

from cpu_scheduler.models import Process


def make_processes(*rows):
    """rows of (arrival, burst[, priority[, queue_level]]) -> P1, P2, ..."""
    processes = []
    for index, row in enumerate(rows):
        arrival, burst = row[0], row[1]
        priority = row[2] if len(row) > 2 else 0
        queue_level = row[3] if len(row) > 3 else 0
        processes.append(
            Process(
                pid=f"P{index + 1}",
                arrival_time=arrival,
                burst_time=burst,
                priority=priority,
                queue_level=queue_level,
            )
        )
    return processes


def segments(result):
    """Timeline as (pid, start, end) tuples."""
    return [(b.pid, b.start_time, b.end_time) for b in result.timeline]


def waiting_times(result):
    return [s.waiting_time for s in result.process_states]


@pytest.fixture
def basic_processes():
    return make_processes((0, 5), (1, 3), (2, 8), (3, 2))


@pytest.fixture
def priority_processes():
    return make_processes((0, 4, 2), (1, 3, 1), (2, 5, 4), (3, 2, 3), (5, 6, 1))
