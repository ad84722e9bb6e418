"""
Algorithm selector and per-algorithm configuration.

Each algorithm takes exactly one configuration variant carrying only the
parameters it understands. Variants are frozen dataclasses that validate
themselves on construction and raise ``ValueError`` for values the engines
cannot work with.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Tuple, Type, Union


class Algorithm(str, Enum):
    """Selector for the ten scheduling engines."""

    FCFS = "fcfs"
    SJF = "sjf"
    SRTF = "srtf"
    PRIORITY_NP = "priority-np"
    PRIORITY_P = "priority-p"
    RR = "rr"
    HRRN = "hrrn"
    MLQ = "mlq"
    MLFQ = "mlfq"
    DYNAMIC_RR = "dynamic-rr"

    @classmethod
    def parse(cls, value: Union["Algorithm", str]) -> "Algorithm":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(a.value for a in cls)
            raise ValueError(
                f"Unsupported algorithm: {value!r} (expected one of {choices})"
            ) from None


@dataclass(frozen=True)
class AlgorithmInfo:
    name: str
    description: str
    preemptive: bool


ALGORITHM_INFO: Dict[Algorithm, AlgorithmInfo] = {
    Algorithm.FCFS: AlgorithmInfo(
        "First Come First Serve",
        "Processes are executed in the order they arrive. Simple but can cause convoy effect.",
        False,
    ),
    Algorithm.SJF: AlgorithmInfo(
        "Shortest Job First",
        "Non-preemptive. Selects the process with the smallest burst time from the ready queue.",
        False,
    ),
    Algorithm.SRTF: AlgorithmInfo(
        "Shortest Remaining Time First",
        "Preemptive version of SJF. Always runs the process with the least remaining time.",
        True,
    ),
    Algorithm.PRIORITY_NP: AlgorithmInfo(
        "Priority (Non-Preemptive)",
        "Selects the highest priority process. Lower number = higher priority. No preemption.",
        False,
    ),
    Algorithm.PRIORITY_P: AlgorithmInfo(
        "Priority (Preemptive)",
        "New high-priority arrivals preempt the running process.",
        True,
    ),
    Algorithm.RR: AlgorithmInfo(
        "Round Robin",
        "Each process gets a fixed time quantum. Fair but may cause many context switches.",
        True,
    ),
    Algorithm.HRRN: AlgorithmInfo(
        "Highest Response Ratio Next",
        "Non-preemptive. Selects the process with the highest (waiting + burst) / burst ratio.",
        False,
    ),
    Algorithm.MLQ: AlgorithmInfo(
        "Multilevel Queue",
        "Multiple fixed-priority queues, each with its own policy.",
        True,
    ),
    Algorithm.MLFQ: AlgorithmInfo(
        "Multilevel Feedback Queue",
        "Processes move between queues based on behavior, with periodic priority boosts.",
        True,
    ),
    Algorithm.DYNAMIC_RR: AlgorithmInfo(
        "Dynamic Round Robin",
        "Round Robin with a quantum adapted to the remaining work in the ready queue.",
        True,
    ),
}


def _require_positive(name: str, value: int) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer.")


def _require_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must not be negative.")


# ---------------------------------------------------------------------------
# Configuration variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoConfig:
    """Configuration for algorithms without tunable parameters."""


@dataclass(frozen=True)
class PriorityConfig:
    """
    Aging parameters for both priority engines.

    Every ``aging_interval`` time units of waiting lower the priority number
    by ``aging_boost`` (never below 0). An interval of 0 disables aging.
    """

    aging_interval: int = 10
    aging_boost: int = 1

    def __post_init__(self) -> None:
        _require_non_negative("Aging interval", self.aging_interval)
        _require_non_negative("Aging boost", self.aging_boost)

    @property
    def aging_enabled(self) -> bool:
        return self.aging_interval > 0


@dataclass(frozen=True)
class RoundRobinConfig:
    time_quantum: int = 2

    def __post_init__(self) -> None:
        _require_positive("Time quantum", self.time_quantum)


@dataclass(frozen=True)
class DynamicRoundRobinConfig:
    min_quantum: int = 1
    max_quantum: int = 6

    def __post_init__(self) -> None:
        _require_positive("Minimum quantum", self.min_quantum)
        _require_positive("Maximum quantum", self.max_quantum)
        if self.min_quantum > self.max_quantum:
            raise ValueError("Minimum quantum must not exceed maximum quantum.")


class QueuePolicy(str, Enum):
    """Policy used inside one level of the multilevel queue."""

    RR = "rr"
    FCFS = "fcfs"
    SJF = "sjf"


@dataclass(frozen=True)
class QueueLevelConfig:
    """One level of the multilevel queue; ``time_quantum`` applies to RR only."""

    policy: QueuePolicy = QueuePolicy.FCFS
    time_quantum: int = 2

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "policy", QueuePolicy(self.policy))
        except ValueError:
            raise ValueError(f"Unknown queue policy: {self.policy!r}") from None
        _require_positive("Queue time quantum", self.time_quantum)

    @property
    def is_quantum_based(self) -> bool:
        return self.policy is QueuePolicy.RR


DEFAULT_MLQ_QUEUES: Tuple[QueueLevelConfig, ...] = (
    QueueLevelConfig(QueuePolicy.RR, 2),
    QueueLevelConfig(QueuePolicy.RR, 4),
    QueueLevelConfig(QueuePolicy.FCFS),
)


@dataclass(frozen=True)
class MultilevelQueueConfig:
    """
    Per-level policies for the multilevel queue, level 0 first.

    Processes whose queue level lies beyond the configured levels use the
    last entry.
    """

    queues: Tuple[QueueLevelConfig, ...] = DEFAULT_MLQ_QUEUES

    def __post_init__(self) -> None:
        object.__setattr__(self, "queues", tuple(self.queues))
        if not self.queues:
            raise ValueError("Multilevel queue needs at least one queue level.")

    def level(self, queue_level: int) -> QueueLevelConfig:
        return self.queues[min(queue_level, len(self.queues) - 1)]


MLFQ_MIN_QUEUES = 2
MLFQ_MAX_QUEUES = 5


@dataclass(frozen=True)
class MLFQConfig:
    """
    Multilevel feedback queue parameters.

    Level ``i`` gets a quantum of ``base_quantum * quantum_multiplier ** i``.
    Every ``boost_interval`` time units all queued processes are moved back
    to level 0; an interval of 0 disables the boost.
    """

    num_queues: int = 3
    base_quantum: int = 2
    quantum_multiplier: int = 2
    boost_interval: int = 20

    def __post_init__(self) -> None:
        if not MLFQ_MIN_QUEUES <= self.num_queues <= MLFQ_MAX_QUEUES:
            raise ValueError(
                f"Number of queues must be between {MLFQ_MIN_QUEUES} and {MLFQ_MAX_QUEUES}."
            )
        _require_positive("Base quantum", self.base_quantum)
        _require_positive("Quantum multiplier", self.quantum_multiplier)
        _require_non_negative("Boost interval", self.boost_interval)

    def quantum(self, level: int) -> int:
        return self.base_quantum * self.quantum_multiplier ** level


AlgorithmConfig = Union[
    NoConfig,
    PriorityConfig,
    RoundRobinConfig,
    DynamicRoundRobinConfig,
    MultilevelQueueConfig,
    MLFQConfig,
]

CONFIG_TYPES: Dict[Algorithm, Type[Any]] = {
    Algorithm.FCFS: NoConfig,
    Algorithm.SJF: NoConfig,
    Algorithm.SRTF: NoConfig,
    Algorithm.HRRN: NoConfig,
    Algorithm.PRIORITY_NP: PriorityConfig,
    Algorithm.PRIORITY_P: PriorityConfig,
    Algorithm.RR: RoundRobinConfig,
    Algorithm.DYNAMIC_RR: DynamicRoundRobinConfig,
    Algorithm.MLQ: MultilevelQueueConfig,
    Algorithm.MLFQ: MLFQConfig,
}

DEFAULT_CONFIGS: Dict[Algorithm, AlgorithmConfig] = {
    algorithm: config_type() for algorithm, config_type in CONFIG_TYPES.items()
}


def config_fields(algorithm: Union[Algorithm, str]) -> Tuple[str, ...]:
    """Names of the parameters the algorithm's configuration accepts."""
    config_type = CONFIG_TYPES[Algorithm.parse(algorithm)]
    return tuple(f.name for f in fields(config_type))


def config_for(algorithm: Union[Algorithm, str], **overrides: Any) -> AlgorithmConfig:
    """
    Build the configuration variant for ``algorithm``.

    Args:
        algorithm: Selector or its string value.
        overrides: Field values replacing the defaults.

    Returns:
        A validated configuration instance.

    Raises:
        ValueError: For an unknown algorithm, an unknown field, or an
            invalid value.
    """
    algorithm = Algorithm.parse(algorithm)
    base = DEFAULT_CONFIGS[algorithm]
    unknown = set(overrides) - set(config_fields(algorithm))
    if unknown:
        raise ValueError(
            f"{algorithm.value} does not accept: {', '.join(sorted(unknown))}"
        )
    if not overrides:
        return base
    return replace(base, **overrides)


def check_config(algorithm: Algorithm, config: Any) -> AlgorithmConfig:
    """Return ``config`` (or the default) after checking its variant matches."""
    if config is None:
        return DEFAULT_CONFIGS[algorithm]
    expected = CONFIG_TYPES[algorithm]
    if not isinstance(config, expected):
        raise ValueError(
            f"{algorithm.value} expects {expected.__name__}, got {type(config).__name__}"
        )
    return config
