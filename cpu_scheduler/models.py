"""
Data model for the CPU scheduling simulator.

The static input of a run is a list of :class:`Process` records. Each
engine copies them into mutable :class:`ProcessState` objects, produces
:class:`TimelineBlock` entries (the Gantt chart) and :class:`Event` records
(the event log), and finally aggregates everything into :class:`Metrics`.
All of it is bundled into a :class:`SchedulerResult`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union


# Queue levels are plain ints in the range 0 (highest) .. 4 (lowest).
QueueLevel = int
MIN_QUEUE_LEVEL = 0
MAX_QUEUE_LEVEL = 4

# Palette used when the caller does not provide a color.
PROCESS_COLORS = [
    "hsl(175, 80%, 50%)",
    "hsl(145, 70%, 45%)",
    "hsl(45, 90%, 55%)",
    "hsl(280, 70%, 60%)",
    "hsl(200, 80%, 60%)",
    "hsl(330, 70%, 60%)",
    "hsl(100, 60%, 50%)",
    "hsl(20, 85%, 55%)",
]

DetailValue = Union[int, float, str]


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Process:
    """
    Represents a single process definition.

    Attributes:
        pid:          A human-readable process identifier (e.g. "P1").
        arrival_time: The time at which the process arrives in the ready queue.
        burst_time:   The total CPU time required by the process.
        priority:     Base priority (lower number = higher priority).
        queue_level:  Initial queue for the multilevel queue algorithm.
        name:         Display name; defaults to the pid.
        color:        Display color handed through to timeline blocks.
    """

    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 0
    queue_level: QueueLevel = 0
    name: str = ""
    color: str = PROCESS_COLORS[0]

    @property
    def display_name(self) -> str:
        return self.name or self.pid

    def normalized(self) -> "Process":
        """Return a copy clamped into the ranges the engines expect."""
        return normalize_process(
            pid=self.pid,
            arrival_time=self.arrival_time,
            burst_time=self.burst_time,
            priority=self.priority,
            queue_level=self.queue_level,
            name=self.name,
            color=self.color,
        )


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def normalize_process(
    pid: str,
    arrival_time: Any = 0,
    burst_time: Any = 1,
    priority: Any = 0,
    queue_level: Any = 0,
    name: Optional[str] = None,
    color: Optional[str] = None,
    index: int = 0,
) -> Process:
    """
    Build a :class:`Process` from loosely typed values.

    Non-numeric values fall back to the field default and every number is
    clamped: arrival >= 0, burst >= 1, priority >= 0, queue level in 0..4.
    ``index`` selects a palette color when none is given.
    """
    level = _to_int(queue_level, MIN_QUEUE_LEVEL)
    return Process(
        pid=str(pid),
        arrival_time=max(0, _to_int(arrival_time, 0)),
        burst_time=max(1, _to_int(burst_time, 1)),
        priority=max(0, _to_int(priority, 0)),
        queue_level=min(MAX_QUEUE_LEVEL, max(MIN_QUEUE_LEVEL, level)),
        name=str(name) if name else str(pid),
        color=color or PROCESS_COLORS[index % len(PROCESS_COLORS)],
    )


def check_unique_pids(pids: Iterable[str]) -> None:
    """
    Engines key their state by pid, so every pid of a workload must be unique.

    Raises:
        ValueError: Naming the first pid that appears twice.
    """
    seen = set()
    for pid in pids:
        if pid in seen:
            raise ValueError(f"Duplicate process id: {pid!r}")
        seen.add(pid)


# ---------------------------------------------------------------------------
# Per-run simulation state
# ---------------------------------------------------------------------------


@dataclass
class ProcessState:
    """
    Mutable simulation state of one process during a single run.

    ``start_time``, ``end_time`` and ``response_time`` stay ``None`` until
    the corresponding moment happens. ``waiting_time``, ``turnaround_time``
    and ``response_ratio`` are only meaningful after completion.
    """

    process: Process
    remaining_time: int
    current_priority: int
    current_queue: QueueLevel
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    waiting_time: int = 0
    turnaround_time: int = 0
    response_time: Optional[int] = None
    response_ratio: float = 0.0

    @classmethod
    def from_process(cls, process: Process) -> "ProcessState":
        return cls(
            process=process,
            remaining_time=process.burst_time,
            current_priority=process.priority,
            current_queue=process.queue_level,
        )

    # Read-only views of the static definition.

    @property
    def pid(self) -> str:
        return self.process.pid

    @property
    def name(self) -> str:
        return self.process.display_name

    @property
    def arrival_time(self) -> int:
        return self.process.arrival_time

    @property
    def burst_time(self) -> int:
        return self.process.burst_time

    @property
    def priority(self) -> int:
        return self.process.priority

    @property
    def queue_level(self) -> QueueLevel:
        return self.process.queue_level

    @property
    def color(self) -> str:
        return self.process.color

    @property
    def executed_time(self) -> int:
        return self.burst_time - self.remaining_time

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pid": self.pid,
            "name": self.name,
            "arrival_time": self.arrival_time,
            "burst_time": self.burst_time,
            "priority": self.priority,
            "queue_level": self.queue_level,
            "color": self.color,
            "remaining_time": self.remaining_time,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "waiting_time": self.waiting_time,
            "turnaround_time": self.turnaround_time,
            "response_time": self.response_time,
            "response_ratio": self.response_ratio,
            "current_priority": self.current_priority,
            "current_queue": self.current_queue,
        }


# ---------------------------------------------------------------------------
# Output records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimelineBlock:
    """One contiguous CPU allocation to one process (a Gantt chart bar)."""

    pid: str
    name: str
    color: str
    start_time: int
    end_time: int
    is_preemption: bool
    queue_level: QueueLevel
    priority: int
    quantum_used: Optional[int] = None

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pid": self.pid,
            "name": self.name,
            "color": self.color,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "is_preemption": self.is_preemption,
            "queue_level": self.queue_level,
            "priority": self.priority,
            "quantum_used": self.quantum_used,
        }


class EventType(str, Enum):
    ARRIVAL = "arrival"
    COMPLETION = "completion"
    PREEMPTION = "preemption"
    QUEUE_CHANGE = "queue-change"
    PRIORITY_AGING = "priority-aging"
    QUANTUM_UPDATE = "quantum-update"


@dataclass(frozen=True)
class Event:
    """
    A timestamped scheduling event.

    The structured fields (``time``, ``type``, ``pid`` and ``details``) are
    the record of what happened; ``description`` is display text derived
    from them. ``pid`` is ``None`` for system-wide events such as a quantum
    update.
    """

    time: int
    type: EventType
    pid: Optional[str]
    description: str
    details: Mapping[str, DetailValue] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "type": self.type.value,
            "pid": self.pid,
            "description": self.description,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class Metrics:
    """Aggregate statistics for one run."""

    average_waiting_time: float = 0.0
    average_turnaround_time: float = 0.0
    average_response_time: float = 0.0
    cpu_utilization: float = 0.0
    throughput: float = 0.0
    context_switches: int = 0
    total_execution_time: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average_waiting_time": self.average_waiting_time,
            "average_turnaround_time": self.average_turnaround_time,
            "average_response_time": self.average_response_time,
            "cpu_utilization": self.cpu_utilization,
            "throughput": self.throughput,
            "context_switches": self.context_switches,
            "total_execution_time": self.total_execution_time,
        }


@dataclass
class SchedulerResult:
    """Everything a single simulation run produces."""

    timeline: List[TimelineBlock] = field(default_factory=list)
    process_states: List[ProcessState] = field(default_factory=list)
    metrics: Metrics = field(default_factory=Metrics)
    events: List[Event] = field(default_factory=list)
    algorithm: Optional[str] = None

    def state_for(self, pid: str) -> ProcessState:
        for state in self.process_states:
            if state.pid == pid:
                return state
        raise KeyError(pid)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "timeline": [block.to_dict() for block in self.timeline],
            "process_states": [state.to_dict() for state in self.process_states],
            "metrics": self.metrics.to_dict(),
            "events": [event.to_dict() for event in self.events],
        }
