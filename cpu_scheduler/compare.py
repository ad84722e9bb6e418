"""
Side-by-side comparison of all algorithms on one workload.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Union

from cpu_scheduler.config import ALGORITHM_INFO, Algorithm, AlgorithmConfig
from cpu_scheduler.dispatcher import run_scheduler
from cpu_scheduler.models import Metrics, Process, SchedulerResult


@dataclass(frozen=True)
class ComparisonRow:
    """Aggregates of one algorithm's run, as shown in the comparison table."""

    algorithm: Algorithm
    label: str
    metrics: Metrics
    min_waiting_time: float
    max_waiting_time: float

    def to_dict(self) -> Dict[str, object]:
        row: Dict[str, object] = {"algorithm": self.algorithm.value, "label": self.label}
        row.update(self.metrics.to_dict())
        row["min_waiting_time"] = self.min_waiting_time
        row["max_waiting_time"] = self.max_waiting_time
        return row


def summarize(algorithm: Algorithm, result: SchedulerResult) -> ComparisonRow:
    waiting = [state.waiting_time for state in result.process_states]
    return ComparisonRow(
        algorithm=algorithm,
        label=ALGORITHM_INFO[algorithm].name,
        metrics=result.metrics,
        min_waiting_time=min(waiting) if waiting else 0.0,
        max_waiting_time=max(waiting) if waiting else 0.0,
    )


def compare_algorithms(
    processes: Sequence[Process],
    configs: Optional[Mapping[Algorithm, AlgorithmConfig]] = None,
    algorithms: Optional[Sequence[Union[Algorithm, str]]] = None,
) -> List[ComparisonRow]:
    """
    Run every algorithm on the same processes.

    Args:
        processes:  The workload.
        configs:    Optional configuration per algorithm; missing entries use
                    the defaults.
        algorithms: Subset to run, as selectors or their string values;
                    defaults to all ten, in selector order.

    Returns:
        One row per algorithm, in the order they were run.
    """
    processes = list(processes)
    configs = configs or {}
    rows: List[ComparisonRow] = []
    for selector in algorithms or list(Algorithm):
        algorithm = Algorithm.parse(selector)
        result = run_scheduler(algorithm, processes, configs.get(algorithm))
        rows.append(summarize(algorithm, result))
    return rows


def best_by(rows: Sequence[ComparisonRow], metric: str) -> ComparisonRow:
    """Row with the smallest value of a :class:`Metrics` field (first on ties)."""
    return min(rows, key=lambda row: getattr(row.metrics, metric))
