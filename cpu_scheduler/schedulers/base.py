"""
Simulation primitives shared by every scheduling engine.

The engines are discrete-event loops: time jumps from one interesting
moment (an arrival, a completion, a quantum expiry) to the next instead of
ticking one unit at a time. The helpers below take care of the bookkeeping
that is identical across algorithms.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from cpu_scheduler.models import (
    DetailValue,
    Event,
    EventType,
    Metrics,
    Process,
    ProcessState,
    SchedulerResult,
    TimelineBlock,
)

logger = logging.getLogger(__name__)


def initialize_states(processes: Iterable[Process]) -> List[ProcessState]:
    """Create one fresh :class:`ProcessState` per process, in input order."""
    return [ProcessState.from_process(p) for p in processes]


def index_states(states: Iterable[ProcessState]) -> Dict[str, ProcessState]:
    """Map pid -> state for O(1) lookups from queues holding pids."""
    return {state.pid: state for state in states}


def ready_processes(states: Sequence[ProcessState], now: int) -> List[ProcessState]:
    """
    Return the processes that have arrived and are not finished at ``now``.

    The result keeps input order, so callers sorting it with ``sorted`` (a
    stable sort) fall back to input order on ties.
    """
    return [s for s in states if s.arrival_time <= now and s.remaining_time > 0]


def next_arrival_time(states: Sequence[ProcessState], now: int) -> Optional[int]:
    """Earliest arrival strictly after ``now`` among unfinished processes."""
    upcoming = [
        s.arrival_time for s in states if s.arrival_time > now and s.remaining_time > 0
    ]
    return min(upcoming) if upcoming else None


def earliest_pending_arrival(states: Sequence[ProcessState]) -> int:
    """Arrival time of the earliest unfinished process (for idle fast-forward)."""
    return min(s.arrival_time for s in states if s.remaining_time > 0)


def response_ratio(waiting_time: float, burst_time: float) -> float:
    """
    Response ratio ``(waiting + burst) / burst`` used by HRRN.

    Raises:
        ValueError: If ``burst_time`` is not positive.
    """
    if burst_time <= 0:
        raise ValueError("Response ratio is undefined for a non-positive burst time.")
    return (waiting_time + burst_time) / burst_time


def record_dispatch(state: ProcessState, now: int) -> None:
    """Set start and response time the first time a process gets the CPU."""
    if state.start_time is None:
        state.start_time = now
    if state.response_time is None:
        state.response_time = now - state.arrival_time


def make_block(
    state: ProcessState,
    start_time: int,
    end_time: int,
    is_preemption: bool = False,
    quantum_used: Optional[int] = None,
) -> TimelineBlock:
    """Snapshot one execution segment using the state's current queue and priority."""
    return TimelineBlock(
        pid=state.pid,
        name=state.name,
        color=state.color,
        start_time=start_time,
        end_time=end_time,
        is_preemption=is_preemption,
        queue_level=state.current_queue,
        priority=state.current_priority,
        quantum_used=quantum_used,
    )


def make_event(
    time: int,
    event_type: EventType,
    pid: Optional[str],
    description: str,
    **details: DetailValue,
) -> Event:
    return Event(time=time, type=event_type, pid=pid, description=description, details=details)


def finalize_state(state: ProcessState, end_time: int) -> ProcessState:
    """
    Mark a process as completed at ``end_time``.

    Computes turnaround (end - arrival), waiting (turnaround - burst) and
    the final response ratio. Must be called exactly once per process.

    Raises:
        RuntimeError: If the process was already finalized.
    """
    if state.end_time is not None:
        raise RuntimeError(f"Process {state.pid} finalized twice")
    state.remaining_time = 0
    state.end_time = end_time
    state.turnaround_time = end_time - state.arrival_time
    state.waiting_time = state.turnaround_time - state.burst_time
    state.response_ratio = response_ratio(state.waiting_time, state.burst_time)
    return state


def apply_aging(
    states: Sequence[ProcessState],
    now: int,
    events: List[Event],
    interval: int,
    boost: int,
) -> None:
    """
    Lower the priority number of ready processes that have waited long enough.

    The new priority is ``max(0, base - floor(wait / interval) * boost)``,
    where ``wait`` is the time spent ready but not running. A
    ``priority-aging`` event is emitted for every change.
    """
    for state in ready_processes(states, now):
        waited = now - state.arrival_time - state.executed_time
        new_priority = max(0, state.priority - (waited // interval) * boost)
        if new_priority != state.current_priority:
            events.append(
                make_event(
                    now,
                    EventType.PRIORITY_AGING,
                    state.pid,
                    f"Process {state.name} priority aged: "
                    f"{state.current_priority} -> {new_priority}",
                    old_priority=state.current_priority,
                    new_priority=new_priority,
                    waiting_time=waited,
                )
            )
            logger.debug(
                "t=%d aging %s: %d -> %d", now, state.pid, state.current_priority, new_priority
            )
            state.current_priority = new_priority


def calculate_metrics(
    states: Sequence[ProcessState],
    timeline: Sequence[TimelineBlock],
    total_time: int,
) -> Metrics:
    """
    Aggregate per-process results and the timeline into :class:`Metrics`.

    Args:
        states:     Finalized process states.
        timeline:   All blocks of the run.
        total_time: Time at which the run ended.

    Returns:
        Averages, utilization (percent of ``total_time`` covered by blocks),
        throughput and the number of context switches. All zeros when there
        are no processes.
    """
    n = len(states)
    if n == 0:
        return Metrics()

    total_waiting = sum(s.waiting_time for s in states)
    total_turnaround = sum(s.turnaround_time for s in states)
    total_response = sum(s.response_time or 0 for s in states)
    busy_time = sum(block.duration for block in timeline)
    context_switches = sum(
        1 for prev, block in zip(timeline, timeline[1:]) if block.pid != prev.pid
    )

    return Metrics(
        average_waiting_time=total_waiting / n,
        average_turnaround_time=total_turnaround / n,
        average_response_time=total_response / n,
        cpu_utilization=(busy_time / total_time) * 100 if total_time > 0 else 0.0,
        throughput=n / total_time if total_time > 0 else 0.0,
        context_switches=context_switches,
        total_execution_time=total_time,
    )


def build_result(
    states: List[ProcessState],
    timeline: List[TimelineBlock],
    events: List[Event],
    total_time: int,
) -> SchedulerResult:
    return SchedulerResult(
        timeline=timeline,
        process_states=states,
        metrics=calculate_metrics(states, timeline, total_time),
        events=events,
    )


def empty_result() -> SchedulerResult:
    """Result for an empty workload: no blocks, no events, zero metrics."""
    return SchedulerResult()
