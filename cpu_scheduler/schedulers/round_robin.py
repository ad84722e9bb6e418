"""
Round Robin and Dynamic Round Robin scheduling.

Both keep an explicit FIFO ready queue of pids. A dispatched process runs
for at most one quantum; if it is not finished it goes to the back of the
queue, behind every process that arrived while it was running.
"""

import logging
import math
from collections import deque
from typing import Callable, Deque, List, Optional, Sequence, Set

from cpu_scheduler.config import DynamicRoundRobinConfig, RoundRobinConfig
from cpu_scheduler.models import Event, EventType, Process, ProcessState, SchedulerResult, TimelineBlock
from cpu_scheduler.schedulers.base import (
    build_result,
    empty_result,
    finalize_state,
    index_states,
    initialize_states,
    make_block,
    make_event,
    record_dispatch,
)

logger = logging.getLogger(__name__)

# quantum_for(queue, states_by_pid, now, events) -> quantum for the next dispatch
QuantumPolicy = Callable[[Deque[str], dict, int, List[Event]], int]


def _enqueue_arrivals(
    states: Sequence[ProcessState],
    ready_queue: Deque[str],
    arrived: Set[str],
    after: int,
    until: int,
) -> None:
    """Enqueue processes arriving in ``(after, until]`` in arrival order."""
    # sorted() is stable: simultaneous arrivals keep input order.
    newcomers = sorted(
        (s for s in states if s.pid not in arrived and after < s.arrival_time <= until),
        key=lambda s: s.arrival_time,
    )
    for state in newcomers:
        ready_queue.append(state.pid)
        arrived.add(state.pid)


def _run_quantum_loop(processes: Sequence[Process], quantum_for: QuantumPolicy) -> SchedulerResult:
    if not processes:
        return empty_result()

    states = initialize_states(processes)
    by_pid = index_states(states)
    timeline: List[TimelineBlock] = []
    events: List[Event] = []

    current_time = 0
    completed = 0
    n = len(states)

    ready_queue: Deque[str] = deque()
    arrived: Set[str] = set()
    _enqueue_arrivals(states, ready_queue, arrived, after=-1, until=0)

    while completed < n:
        if not ready_queue:
            # CPU idle: jump to the next arrival and admit everything arriving then.
            current_time = min(s.arrival_time for s in states if s.pid not in arrived)
            _enqueue_arrivals(states, ready_queue, arrived, after=-1, until=current_time)
            continue

        quantum = quantum_for(ready_queue, by_pid, current_time, events)

        current = by_pid[ready_queue.popleft()]
        record_dispatch(current, current_time)

        execute_time = min(quantum, current.remaining_time)
        end_time = current_time + execute_time

        # New arrivals queue up before the preempted process goes back.
        _enqueue_arrivals(states, ready_queue, arrived, after=current_time, until=end_time)

        current.remaining_time -= execute_time
        is_preemption = current.remaining_time > 0
        timeline.append(
            make_block(current, current_time, end_time, is_preemption, quantum_used=execute_time)
        )

        if is_preemption:
            events.append(
                make_event(
                    end_time,
                    EventType.PREEMPTION,
                    current.pid,
                    f"Process {current.name} quantum expired (used: {execute_time})",
                    quantum=quantum,
                    remaining_time=current.remaining_time,
                )
            )
            ready_queue.append(current.pid)
        else:
            events.append(
                make_event(end_time, EventType.COMPLETION, current.pid, f"Process {current.name} completed")
            )
            finalize_state(current, end_time)
            completed += 1

        current_time = end_time

    return build_result(states, timeline, events, current_time)


def round_robin(
    processes: Sequence[Process], config: Optional[RoundRobinConfig] = None
) -> SchedulerResult:
    """
    Round Robin (RR) scheduling with a fixed time quantum.

    Concept:
        - Preemptive.
        - Each process gets a time slice of length ``time_quantum``.
        - After using its slice the process is moved to the end of the
          ready queue (if it is not finished).
        - Processes that arrive while the CPU is busy are queued as soon as
          they arrive, ahead of the process whose slice just expired.
        - When the ready queue is empty, the CPU is idle until the next
          process arrives.
    """
    config = config or RoundRobinConfig()

    def fixed_quantum(ready_queue, by_pid, now, events) -> int:
        return config.time_quantum

    return _run_quantum_loop(processes, fixed_quantum)


def dynamic_quantum(
    remaining_times: Sequence[int], min_quantum: int, max_quantum: int
) -> int:
    """Half the mean remaining time (rounded up), clamped to the bounds."""
    average = sum(remaining_times) / len(remaining_times)
    return max(min_quantum, min(max_quantum, math.ceil(average / 2)))


def dynamic_round_robin(
    processes: Sequence[Process], config: Optional[DynamicRoundRobinConfig] = None
) -> SchedulerResult:
    """
    Round Robin with an adaptive quantum.

    Before each dispatch the quantum is recomputed from the processes
    waiting in the ready queue (including the one about to run) as
    ``ceil(mean remaining / 2)`` clamped to ``[min_quantum, max_quantum]``.
    Short remaining work gives short slices and long work longer ones. A
    ``quantum-update`` event is emitted whenever the value changes.
    """
    config = config or DynamicRoundRobinConfig()
    current_quantum = math.ceil((config.min_quantum + config.max_quantum) / 2)

    def adaptive_quantum(ready_queue, by_pid, now, events) -> int:
        nonlocal current_quantum
        remaining = [by_pid[pid].remaining_time for pid in ready_queue]
        new_quantum = dynamic_quantum(remaining, config.min_quantum, config.max_quantum)
        if new_quantum != current_quantum:
            average = sum(remaining) / len(remaining)
            events.append(
                make_event(
                    now,
                    EventType.QUANTUM_UPDATE,
                    None,
                    f"Quantum adjusted: {current_quantum} -> {new_quantum} "
                    f"(avg remaining: {average:.1f})",
                    old_quantum=current_quantum,
                    new_quantum=new_quantum,
                    average_remaining=round(average, 4),
                )
            )
            logger.debug("t=%d quantum %d -> %d", now, current_quantum, new_quantum)
            current_quantum = new_quantum
        return current_quantum

    return _run_quantum_loop(processes, adaptive_quantum)
