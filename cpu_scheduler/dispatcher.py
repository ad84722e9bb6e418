"""
Algorithm dispatch.

:func:`run_scheduler` is the single entry point used by front ends: it maps
an algorithm selector plus its configuration variant to the matching
engine.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Union

from cpu_scheduler.config import Algorithm, AlgorithmConfig, check_config
from cpu_scheduler.models import Process, SchedulerResult, check_unique_pids
from cpu_scheduler.schedulers import (
    dynamic_round_robin,
    fcfs,
    hrrn,
    multilevel_feedback_queue,
    multilevel_queue,
    priority_non_preemptive,
    priority_preemptive,
    round_robin,
    sjf,
    srtf,
)

logger = logging.getLogger(__name__)


def _without_config(engine: Callable[[Sequence[Process]], SchedulerResult]):
    def run(processes: Sequence[Process], config: Any) -> SchedulerResult:
        return engine(processes)

    return run


ENGINES: Dict[Algorithm, Callable[[Sequence[Process], Any], SchedulerResult]] = {
    Algorithm.FCFS: _without_config(fcfs),
    Algorithm.SJF: _without_config(sjf),
    Algorithm.SRTF: _without_config(srtf),
    Algorithm.HRRN: _without_config(hrrn),
    Algorithm.PRIORITY_NP: priority_non_preemptive,
    Algorithm.PRIORITY_P: priority_preemptive,
    Algorithm.RR: round_robin,
    Algorithm.DYNAMIC_RR: dynamic_round_robin,
    Algorithm.MLQ: multilevel_queue,
    Algorithm.MLFQ: multilevel_feedback_queue,
}


def run_scheduler(
    algorithm: Union[Algorithm, str],
    processes: Iterable[Process],
    config: Optional[AlgorithmConfig] = None,
) -> SchedulerResult:
    """
    Run one scheduling algorithm over a workload.

    Args:
        algorithm: An :class:`Algorithm` or its string value (e.g. ``"rr"``).
        processes: Process definitions (any iterable); they are never mutated.
        config:    The configuration variant for ``algorithm``, or ``None``
                   for its defaults.

    Returns:
        The timeline, final process states, metrics and event log, with
        ``result.algorithm`` set to the selector value.

    Raises:
        ValueError: If the algorithm is unknown, the configuration variant
            does not belong to it, or two processes share a pid.
    """
    algorithm = Algorithm.parse(algorithm)
    config = check_config(algorithm, config)
    processes = list(processes)
    check_unique_pids(p.pid for p in processes)

    logger.debug("Running %s on %d processes with %r", algorithm.value, len(processes), config)
    result = ENGINES[algorithm](processes, config)
    result.algorithm = algorithm.value
    logger.debug(
        "%s finished at t=%d: avg waiting %.2f, %d context switches",
        algorithm.value,
        result.metrics.total_execution_time,
        result.metrics.average_waiting_time,
        result.metrics.context_switches,
    )
    return result
