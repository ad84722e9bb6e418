"""
CPU Scheduling Simulator
========================

A discrete-event simulator of classic CPU scheduling algorithms:

- First-Come, First-Served (FCFS)
- Shortest Job First (SJF, non-preemptive)
- Shortest Remaining Time First (SRTF)
- Priority scheduling, non-preemptive and preemptive, with optional aging
- Round Robin and Dynamic Round Robin
- Highest Response Ratio Next (HRRN)
- Multilevel Queue and Multilevel Feedback Queue

Typical use::

    from cpu_scheduler import Process, RoundRobinConfig, run_scheduler

    processes = [Process("P1", 0, 5), Process("P2", 1, 3)]
    result = run_scheduler("rr", processes, RoundRobinConfig(time_quantum=2))
    print(result.metrics.average_waiting_time)
"""

from cpu_scheduler.config import (
    ALGORITHM_INFO,
    Algorithm,
    DynamicRoundRobinConfig,
    MLFQConfig,
    MultilevelQueueConfig,
    NoConfig,
    PriorityConfig,
    QueueLevelConfig,
    QueuePolicy,
    RoundRobinConfig,
    config_for,
)
from cpu_scheduler.dispatcher import run_scheduler
from cpu_scheduler.models import (
    Event,
    EventType,
    Metrics,
    Process,
    ProcessState,
    SchedulerResult,
    TimelineBlock,
    normalize_process,
)

__version__ = "1.0.0"

__all__ = [
    "ALGORITHM_INFO",
    "Algorithm",
    "DynamicRoundRobinConfig",
    "Event",
    "EventType",
    "MLFQConfig",
    "Metrics",
    "MultilevelQueueConfig",
    "NoConfig",
    "PriorityConfig",
    "Process",
    "ProcessState",
    "QueueLevelConfig",
    "QueuePolicy",
    "RoundRobinConfig",
    "SchedulerResult",
    "TimelineBlock",
    "config_for",
    "normalize_process",
    "run_scheduler",
]
