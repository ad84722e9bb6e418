"""
Shared loop for the preemptive single-queue engines (SRTF, Priority-P).

Instead of simulating every time unit, the loop only stops at moments
where the scheduling decision can change: the next arrival of an
unfinished process or the completion of the running one.
"""

import logging
from typing import Callable, List, Optional, Sequence

from cpu_scheduler.models import Event, EventType, Process, ProcessState, SchedulerResult, TimelineBlock
from cpu_scheduler.schedulers.base import (
    build_result,
    earliest_pending_arrival,
    empty_result,
    finalize_state,
    initialize_states,
    make_block,
    make_event,
    next_arrival_time,
    ready_processes,
    record_dispatch,
)
from cpu_scheduler.schedulers.nonpreemptive import Hook

logger = logging.getLogger(__name__)


def run_preemptive(
    processes: Sequence[Process],
    key: Callable[[ProcessState], int],
    key_name: str,
    before_select: Optional[Hook] = None,
) -> SchedulerResult:
    """
    Run a preemptive scheduling loop.

    Args:
        processes:     Process definitions.
        key:           Sort key; the ready process with the smallest value
                       runs (first in input order on ties).
        key_name:      Name of the key, used in event details.
        before_select: Optional hook called at every decision point.

    Returns:
        The full result of the run.
    """
    if not processes:
        return empty_result()

    states = initialize_states(processes)
    timeline: List[TimelineBlock] = []
    events: List[Event] = []

    current_time = 0
    completed = 0
    n = len(states)
    running: Optional[ProcessState] = None
    block_start = 0

    while completed < n:
        if before_select is not None:
            before_select(states, current_time, events)

        ready = ready_processes(states, current_time)
        if not ready:
            if running is not None and block_start < current_time:
                timeline.append(make_block(running, block_start, current_time))
            running = None
            current_time = earliest_pending_arrival(states)
            continue

        selected = min(ready, key=key)

        if running is not None and running.pid != selected.pid:
            timeline.append(make_block(running, block_start, current_time, is_preemption=True))
            events.append(
                make_event(
                    current_time,
                    EventType.PREEMPTION,
                    running.pid,
                    f"Process {running.name} preempted by {selected.name} "
                    f"({key_name}: {key(selected)})",
                    preempted_by=selected.pid,
                    remaining_time=running.remaining_time,
                )
            )
            logger.debug("t=%d %s preempts %s", current_time, selected.pid, running.pid)
            running = None

        if running is None:
            block_start = current_time
            events.append(
                make_event(
                    current_time,
                    EventType.ARRIVAL,
                    selected.pid,
                    f"Process {selected.name} selected ({key_name}: {key(selected)})",
                    **{key_name: key(selected)},
                )
            )

        record_dispatch(selected, current_time)
        running = selected

        # Run until the next arrival could change the decision, or completion.
        completion_time = current_time + selected.remaining_time
        upcoming = next_arrival_time(states, current_time)
        next_event_time = completion_time if upcoming is None else min(upcoming, completion_time)

        selected.remaining_time -= next_event_time - current_time
        current_time = next_event_time

        if selected.remaining_time == 0:
            timeline.append(make_block(selected, block_start, current_time))
            events.append(
                make_event(
                    current_time,
                    EventType.COMPLETION,
                    selected.pid,
                    f"Process {selected.name} completed",
                )
            )
            finalize_state(selected, current_time)
            completed += 1
            running = None

    return build_result(states, timeline, events, current_time)
