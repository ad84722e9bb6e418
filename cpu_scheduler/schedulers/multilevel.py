"""
Multilevel Queue (MLQ) and Multilevel Feedback Queue (MLFQ) scheduling.

Both keep one FIFO queue per level, level 0 being the most urgent. The
dispatcher always serves the first non-empty level.

- MLQ: a process stays in the level it was assigned (``queue_level``) for
  its whole life. Each level has its own policy (RR with a quantum, FCFS
  or SJF). A process arriving for a strictly more urgent level cuts the
  running segment short.
- MLFQ: every process enters level 0. Using a whole quantum demotes it one
  level; quanta grow geometrically with the level. A periodic boost moves
  everything back to level 0 so long jobs cannot starve.
"""

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence, Set

from cpu_scheduler.config import MLFQConfig, MultilevelQueueConfig, QueuePolicy
from cpu_scheduler.models import (
    MAX_QUEUE_LEVEL,
    Event,
    EventType,
    Process,
    ProcessState,
    SchedulerResult,
    TimelineBlock,
)
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


def _pending(states: Sequence[ProcessState], arrived: Set[str]) -> List[ProcessState]:
    return [s for s in states if s.pid not in arrived and s.remaining_time > 0]


def _first_non_empty(queues: Sequence[Deque[str]]) -> Optional[int]:
    for level, queue in enumerate(queues):
        if queue:
            return level
    return None


# ---------------------------------------------------------------------------
# Multilevel Queue
# ---------------------------------------------------------------------------


def _take_from_level(queue: Deque[str], policy: QueuePolicy, by_pid: Dict[str, ProcessState]) -> str:
    """Remove and return the pid the level's policy runs next."""
    if policy is QueuePolicy.SJF:
        # Shortest burst in the level; min() keeps FIFO order on ties.
        pid = min(queue, key=lambda p: by_pid[p].burst_time)
        queue.remove(pid)
        return pid
    return queue.popleft()


def multilevel_queue(
    processes: Sequence[Process], config: Optional[MultilevelQueueConfig] = None
) -> SchedulerResult:
    """
    Multilevel Queue scheduling with static queue assignment.

    Concept:
        - Each process is queued in its own ``queue_level`` when it arrives;
          it never changes level.
        - Strict priority across levels, FIFO within a level.
        - RR levels run a process for at most their quantum; FCFS and SJF
          levels run it to completion.
        - A segment is cut short at the earliest arrival of a process bound
          for a strictly more urgent level. The interrupted process goes
          back to its level: to the tail on an RR level, to the head on a
          run-to-completion level.

    Args:
        processes: Process definitions.
        config:    Per-level policies; levels beyond the configured ones use
                   the last entry.
    """
    if not processes:
        return empty_result()

    config = config or MultilevelQueueConfig()
    states = initialize_states(processes)
    by_pid = index_states(states)
    timeline: List[TimelineBlock] = []
    events: List[Event] = []

    queues: List[Deque[str]] = [deque() for _ in range(MAX_QUEUE_LEVEL + 1)]
    arrived: Set[str] = set()

    current_time = 0
    completed = 0
    n = len(states)

    def add_arrivals(now: int) -> None:
        newcomers = sorted(
            (s for s in _pending(states, arrived) if s.arrival_time <= now),
            key=lambda s: s.arrival_time,
        )
        for state in newcomers:
            queues[state.queue_level].append(state.pid)
            arrived.add(state.pid)

    while completed < n:
        add_arrivals(current_time)

        level = _first_non_empty(queues)
        if level is None:
            current_time = min(s.arrival_time for s in _pending(states, arrived))
            continue

        level_config = config.level(level)
        queue = queues[level]
        current = by_pid[_take_from_level(queue, level_config.policy, by_pid)]
        record_dispatch(current, current_time)

        if level_config.is_quantum_based:
            execute_time = min(level_config.time_quantum, current.remaining_time)
        else:
            execute_time = current.remaining_time

        # Earliest arrival for a more urgent level strictly inside the segment.
        interrupters = [
            s
            for s in _pending(states, arrived)
            if current_time < s.arrival_time < current_time + execute_time
            and s.queue_level < level
        ]
        interrupter = min(interrupters, key=lambda s: s.arrival_time) if interrupters else None
        if interrupter is not None:
            execute_time = interrupter.arrival_time - current_time

        end_time = current_time + execute_time
        # Admit arrivals before the interrupted process is queued again.
        add_arrivals(end_time)

        current.remaining_time -= execute_time
        is_preemption = current.remaining_time > 0
        timeline.append(
            make_block(
                current,
                current_time,
                end_time,
                is_preemption,
                quantum_used=execute_time if level_config.is_quantum_based else None,
            )
        )

        if is_preemption:
            if interrupter is not None:
                description = (
                    f"Process {current.name} preempted by higher priority queue "
                    f"{interrupter.queue_level}"
                )
                details = {"queue": level, "preempted_by": interrupter.pid}
            else:
                description = f"Process {current.name} quantum expired in queue {level}"
                details = {"queue": level}
            events.append(
                make_event(
                    end_time,
                    EventType.PREEMPTION,
                    current.pid,
                    description,
                    remaining_time=current.remaining_time,
                    **details,
                )
            )
            if interrupter is not None and not level_config.is_quantum_based:
                queue.appendleft(current.pid)
            else:
                queue.append(current.pid)
        else:
            events.append(
                make_event(
                    end_time,
                    EventType.COMPLETION,
                    current.pid,
                    f"Process {current.name} completed (queue {level})",
                    queue=level,
                )
            )
            finalize_state(current, end_time)
            completed += 1

        current_time = end_time

    return build_result(states, timeline, events, current_time)


# ---------------------------------------------------------------------------
# Multilevel Feedback Queue
# ---------------------------------------------------------------------------


def multilevel_feedback_queue(
    processes: Sequence[Process], config: Optional[MLFQConfig] = None
) -> SchedulerResult:
    """
    Multilevel Feedback Queue scheduling.

    Concept:
        - New processes always enter level 0.
        - Level ``i`` has a quantum of ``base_quantum * multiplier ** i``.
        - A process that uses its whole quantum without finishing is
          demoted one level (the last level keeps it).
        - Any new arrival cuts the running segment short; the interrupted
          process keeps its level.
        - Every ``boost_interval`` time units all queued processes are moved
          back to level 0. The check happens once per dispatch cycle,
          before arrivals for that cycle are admitted.
    """
    if not processes:
        return empty_result()

    config = config or MLFQConfig()
    states = initialize_states(processes)
    by_pid = index_states(states)
    timeline: List[TimelineBlock] = []
    events: List[Event] = []

    queues: List[Deque[str]] = [deque() for _ in range(config.num_queues)]
    arrived: Set[str] = set()
    bottom = config.num_queues - 1

    current_time = 0
    completed = 0
    n = len(states)
    last_boost_time = 0

    def add_arrivals(now: int) -> None:
        newcomers = sorted(
            (s for s in _pending(states, arrived) if s.arrival_time <= now),
            key=lambda s: s.arrival_time,
        )
        for state in newcomers:
            state.current_queue = 0
            queues[0].append(state.pid)
            arrived.add(state.pid)

    def boost(now: int) -> None:
        for level in range(1, config.num_queues):
            while queues[level]:
                pid = queues[level].popleft()
                state = by_pid[pid]
                queues[0].append(pid)
                state.current_queue = 0
                events.append(
                    make_event(
                        now,
                        EventType.PRIORITY_AGING,
                        pid,
                        f"Process {state.name} boosted to queue 0",
                        from_queue=level,
                        to_queue=0,
                    )
                )
        logger.debug("t=%d priority boost", now)

    while completed < n:
        if config.boost_interval > 0 and current_time - last_boost_time >= config.boost_interval:
            boost(current_time)
            last_boost_time = current_time

        add_arrivals(current_time)

        level = _first_non_empty(queues)
        if level is None:
            current_time = min(s.arrival_time for s in _pending(states, arrived))
            continue

        current = by_pid[queues[level].popleft()]
        quantum = config.quantum(level)
        record_dispatch(current, current_time)

        execute_time = min(quantum, current.remaining_time)
        upcoming = [
            s.arrival_time
            for s in _pending(states, arrived)
            if current_time < s.arrival_time < current_time + execute_time
        ]
        if upcoming:
            execute_time = min(upcoming) - current_time

        end_time = current_time + execute_time
        # Admit arrivals before the interrupted process is queued again.
        add_arrivals(end_time)

        current.remaining_time -= execute_time
        is_preemption = current.remaining_time > 0
        timeline.append(
            make_block(current, current_time, end_time, is_preemption, quantum_used=execute_time)
        )

        if is_preemption:
            next_level = min(level + 1, bottom) if execute_time >= quantum else level
            if next_level != level:
                events.append(
                    make_event(
                        end_time,
                        EventType.QUEUE_CHANGE,
                        current.pid,
                        f"Process {current.name} demoted: queue {level} -> {next_level}",
                        from_queue=level,
                        to_queue=next_level,
                    )
                )
                logger.debug("t=%d demote %s to queue %d", end_time, current.pid, next_level)
                current.current_queue = next_level
            else:
                events.append(
                    make_event(
                        end_time,
                        EventType.PREEMPTION,
                        current.pid,
                        f"Process {current.name} preempted in queue {level}",
                        queue=level,
                        remaining_time=current.remaining_time,
                    )
                )
            queues[next_level].append(current.pid)
        else:
            events.append(
                make_event(
                    end_time,
                    EventType.COMPLETION,
                    current.pid,
                    f"Process {current.name} completed (queue {level})",
                    queue=level,
                )
            )
            finalize_state(current, end_time)
            completed += 1

        current_time = end_time

    return build_result(states, timeline, events, current_time)
