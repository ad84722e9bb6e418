"""First-Come, First-Served scheduling."""

from typing import Dict, List, Sequence, Tuple

from cpu_scheduler.models import DetailValue, Process, ProcessState, SchedulerResult
from cpu_scheduler.schedulers.nonpreemptive import run_non_preemptive


def _earliest_arrival(
    ready: List[ProcessState], now: int
) -> Tuple[ProcessState, Dict[str, DetailValue]]:
    # min() keeps the first of equal arrivals, i.e. input order.
    return min(ready, key=lambda s: s.arrival_time), {}


def fcfs(processes: Sequence[Process]) -> SchedulerResult:
    """
    First-Come, First-Served (FCFS) scheduling.

    Concept:
        - Non-preemptive.
        - Processes are served in order of arrival time; processes arriving
          at the same time are served in input order.
        - If the CPU becomes idle (no ready process), time jumps forward
          to the arrival of the next process.
    """
    return run_non_preemptive(processes, _earliest_arrival)
