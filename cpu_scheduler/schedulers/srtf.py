"""Shortest Remaining Time First scheduling (preemptive SJF)."""

from typing import Sequence

from cpu_scheduler.models import Process, SchedulerResult
from cpu_scheduler.schedulers.preemptive import run_preemptive


def srtf(processes: Sequence[Process]) -> SchedulerResult:
    """
    Shortest Remaining Time First (preemptive SJF) scheduling.

    Concept:
        - At every arrival or completion, among the ready processes, choose
          the one with the smallest remaining burst time.
        - A newly arrived process with a shorter remaining time preempts
          the running one at its arrival time.
        - Equal remaining times are broken by input order.
    """
    return run_preemptive(processes, key=lambda s: s.remaining_time, key_name="remaining_time")
