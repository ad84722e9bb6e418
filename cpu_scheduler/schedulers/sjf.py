"""Shortest Job First scheduling (non-preemptive)."""

from typing import Dict, List, Sequence, Tuple

from cpu_scheduler.models import DetailValue, Process, ProcessState, SchedulerResult
from cpu_scheduler.schedulers.nonpreemptive import run_non_preemptive


def _shortest_burst(
    ready: List[ProcessState], now: int
) -> Tuple[ProcessState, Dict[str, DetailValue]]:
    selected = min(ready, key=lambda s: s.burst_time)
    return selected, {"burst": selected.burst_time}


def sjf(processes: Sequence[Process]) -> SchedulerResult:
    """
    Shortest Job First (SJF) scheduling, non-preemptive.

    Concept:
        - Among the processes that have arrived and are waiting, always
          choose the one with the smallest CPU burst time.
        - Equal bursts are broken by input order.
        - The chosen process runs to completion even if a shorter job
          arrives meanwhile (see :func:`srtf` for the preemptive variant).
    """
    return run_non_preemptive(processes, _shortest_burst)
