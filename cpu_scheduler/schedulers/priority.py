"""
Priority scheduling, non-preemptive and preemptive.

Convention:
    Lower numeric priority value means *higher* priority (priority 1 runs
    before priority 2).

Both variants support aging: a ready process that has waited
``aging_interval`` time units has its priority number lowered by
``aging_boost``, down to 0, so low-priority work cannot starve forever.
"""

from functools import partial
from typing import Dict, List, Optional, Sequence, Tuple

from cpu_scheduler.config import PriorityConfig
from cpu_scheduler.models import DetailValue, Process, ProcessState, SchedulerResult
from cpu_scheduler.schedulers.base import apply_aging
from cpu_scheduler.schedulers.nonpreemptive import Hook, run_non_preemptive
from cpu_scheduler.schedulers.preemptive import run_preemptive


def _aging_hook(config: PriorityConfig) -> Optional[Hook]:
    if not config.aging_enabled:
        return None
    return partial(apply_aging, interval=config.aging_interval, boost=config.aging_boost)


def _highest_priority(
    ready: List[ProcessState], now: int
) -> Tuple[ProcessState, Dict[str, DetailValue]]:
    selected = min(ready, key=lambda s: s.current_priority)
    return selected, {"priority": selected.current_priority}


def priority_non_preemptive(
    processes: Sequence[Process], config: Optional[PriorityConfig] = None
) -> SchedulerResult:
    """
    Priority scheduling, non-preemptive.

    Concept:
        - Among the ready processes, always choose the one with the
          smallest current priority number; ties go to input order.
        - The chosen process runs to completion.
        - With aging enabled, priorities are recomputed before every
          selection.
    """
    config = config or PriorityConfig()
    return run_non_preemptive(processes, _highest_priority, before_select=_aging_hook(config))


def priority_preemptive(
    processes: Sequence[Process], config: Optional[PriorityConfig] = None
) -> SchedulerResult:
    """
    Priority scheduling, preemptive.

    Concept:
        - At every arrival or completion the ready process with the
          smallest current priority number gets the CPU.
        - A newly arrived process with a higher priority preempts the
          running one at its arrival time.
    """
    config = config or PriorityConfig()
    return run_preemptive(
        processes,
        key=lambda s: s.current_priority,
        key_name="priority",
        before_select=_aging_hook(config),
    )
