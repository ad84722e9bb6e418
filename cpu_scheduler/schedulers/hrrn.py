"""Highest Response Ratio Next scheduling."""

from typing import Dict, List, Sequence, Tuple

from cpu_scheduler.models import DetailValue, Process, ProcessState, SchedulerResult
from cpu_scheduler.schedulers.base import response_ratio
from cpu_scheduler.schedulers.nonpreemptive import run_non_preemptive


def _highest_ratio(
    ready: List[ProcessState], now: int
) -> Tuple[ProcessState, Dict[str, DetailValue]]:
    ratios = [(response_ratio(now - s.arrival_time, s.burst_time), s) for s in ready]
    # Sort on the negated ratio so the usual "ascending, first wins" rule applies.
    ratio, selected = sorted(ratios, key=lambda pair: -pair[0])[0]
    return selected, {
        "response_ratio": round(ratio, 4),
        "waiting_time": now - selected.arrival_time,
    }


def hrrn(processes: Sequence[Process]) -> SchedulerResult:
    """
    Highest Response Ratio Next (HRRN) scheduling.

    Concept:
        - Non-preemptive.
        - At every decision point each ready process gets the ratio
          ``(waiting + burst) / burst``; the highest ratio runs next.
        - Waiting raises the ratio, so long jobs cannot starve behind a
          stream of short ones.
    """
    return run_non_preemptive(processes, _highest_ratio)
