"""
Shared loop for the non-preemptive engines (FCFS, SJF, HRRN, Priority-NP).

Once selected, a process runs to completion in a single timeline block.
The engines only differ in how they pick the next process from the ready
set, so each one passes a ``select`` callable to :func:`run_non_preemptive`.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from cpu_scheduler.models import DetailValue, Event, EventType, Process, ProcessState, SchedulerResult
from cpu_scheduler.schedulers.base import (
    build_result,
    earliest_pending_arrival,
    empty_result,
    finalize_state,
    initialize_states,
    make_block,
    make_event,
    ready_processes,
    record_dispatch,
)

logger = logging.getLogger(__name__)

# select(ready, now) -> (chosen process, details for the selection event)
Selector = Callable[[List[ProcessState], int], Tuple[ProcessState, Dict[str, DetailValue]]]

# before_select(states, now, events) runs at the top of every iteration.
Hook = Callable[[Sequence[ProcessState], int, List[Event]], None]


def run_non_preemptive(
    processes: Sequence[Process],
    select: Selector,
    before_select: Optional[Hook] = None,
) -> SchedulerResult:
    """
    Run a non-preemptive scheduling loop.

    Concept:
        - While unfinished processes remain, compute the ready set.
        - If nothing is ready, the CPU is idle until the earliest pending
          arrival.
        - Otherwise ``select`` picks exactly one process, which then runs
          to completion without being reassessed.

    Args:
        processes:     Process definitions.
        select:        Picks the next process from a non-empty ready list.
        before_select: Optional hook (used for priority aging).

    Returns:
        The full result of the run.
    """
    if not processes:
        return empty_result()

    states = initialize_states(processes)
    timeline = []
    events: List[Event] = []

    current_time = 0
    completed = 0
    n = len(states)

    while completed < n:
        if before_select is not None:
            before_select(states, current_time, events)

        ready = ready_processes(states, current_time)
        if not ready:
            # CPU idle: jump to the next arrival and try again.
            current_time = earliest_pending_arrival(states)
            continue

        selected, details = select(ready, current_time)
        record_dispatch(selected, current_time)

        detail_text = ", ".join(f"{key}: {value}" for key, value in details.items())
        events.append(
            make_event(
                current_time,
                EventType.ARRIVAL,
                selected.pid,
                f"Process {selected.name} selected ({detail_text})"
                if detail_text
                else f"Process {selected.name} starts execution",
                **details,
            )
        )

        end_time = current_time + selected.remaining_time
        timeline.append(make_block(selected, current_time, end_time))
        events.append(
            make_event(end_time, EventType.COMPLETION, selected.pid, f"Process {selected.name} completed")
        )
        logger.debug("t=%d run %s to completion at %d", current_time, selected.pid, end_time)

        finalize_state(selected, end_time)
        current_time = end_time
        completed += 1

    return build_result(states, timeline, events, current_time)
