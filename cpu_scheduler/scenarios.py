"""
Predefined example workloads.

Each scenario is a list of ``(arrival, burst, priority, queue_level, name)``
rows; :func:`load_scenario` turns one into :class:`Process` objects with
pids ``P1``, ``P2``, ... in row order.
"""

from typing import Dict, List, NamedTuple, Optional, Tuple

from cpu_scheduler.models import Process, normalize_process

Row = Tuple[int, int, int, int, Optional[str]]


class Scenario(NamedTuple):
    description: str
    rows: List[Row]


SCENARIOS: Dict[str, Scenario] = {
    "basic": Scenario(
        "Four processes with staggered arrivals; the textbook FCFS/SJF example.",
        [
            (0, 5, 1, 0, None),
            (1, 3, 1, 0, None),
            (2, 8, 1, 0, None),
            (3, 2, 1, 0, None),
        ],
    ),
    "priority": Scenario(
        "Mixed priorities, including a late high-priority arrival.",
        [
            (0, 4, 2, 0, None),
            (1, 3, 1, 0, None),
            (2, 5, 4, 0, None),
            (3, 2, 3, 0, None),
            (5, 6, 1, 0, None),
        ],
    ),
    "multilevel": Scenario(
        "System, interactive and batch processes spread over three queues.",
        [
            (0, 3, 1, 0, "System"),
            (1, 4, 2, 1, "Interactive"),
            (2, 6, 3, 2, "Batch1"),
            (4, 2, 1, 0, "System2"),
            (5, 5, 3, 2, "Batch2"),
        ],
    ),
    "simple-fcfs": Scenario(
        "Small workload for a first look at FCFS.",
        [
            (0, 5, 2, 0, None),
            (2, 3, 1, 0, None),
            (4, 1, 3, 0, None),
            (6, 7, 2, 0, None),
        ],
    ),
    "starvation": Scenario(
        # One low-priority job arrives first, many high-priority jobs arrive later.
        "A long low-priority job competing with a stream of urgent ones.",
        [
            (0, 20, 5, 2, None),
            (2, 3, 1, 0, None),
            (4, 4, 1, 0, None),
            (6, 2, 1, 0, None),
            (8, 1, 1, 0, None),
        ],
    ),
    "sjf-preemption": Scenario(
        "Shorter jobs arriving one by one; contrasts SJF with SRTF.",
        [
            (0, 8, 1, 0, None),
            (1, 4, 1, 0, None),
            (2, 2, 1, 0, None),
            (3, 1, 1, 0, None),
        ],
    ),
}


def scenario_names() -> List[str]:
    return list(SCENARIOS)


def load_scenario(name: str) -> List[Process]:
    """
    Build the processes of a named scenario.

    Raises:
        ValueError: If no scenario has that name.
    """
    try:
        scenario = SCENARIOS[name]
    except KeyError:
        raise ValueError(
            f"Unknown scenario: {name!r} (available: {', '.join(SCENARIOS)})"
        ) from None

    processes: List[Process] = []
    for index, (arrival, burst, priority, queue_level, label) in enumerate(scenario.rows):
        pid = f"P{index + 1}"
        processes.append(
            normalize_process(
                pid=pid,
                arrival_time=arrival,
                burst_time=burst,
                priority=priority,
                queue_level=queue_level,
                name=label,
                index=index,
            )
        )
    return processes
