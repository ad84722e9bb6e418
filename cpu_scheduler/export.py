"""
Reading workloads from files and writing results out.

Workloads are read from CSV (header row with at least ``arrival_time`` and
``burst_time``) or JSON (a list of objects with the same keys). Every row
is normalized, so messy spreadsheets still yield valid processes.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence, TextIO, Union

from cpu_scheduler.compare import ComparisonRow
from cpu_scheduler.models import Process, SchedulerResult, check_unique_pids, normalize_process

logger = logging.getLogger(__name__)

PROCESS_COLUMNS = ["pid", "name", "arrival_time", "burst_time", "priority", "queue_level", "color"]

RESULT_COLUMNS = [
    "pid",
    "name",
    "arrival_time",
    "burst_time",
    "priority",
    "queue_level",
    "start_time",
    "end_time",
    "turnaround_time",
    "waiting_time",
    "response_time",
    "response_ratio",
]

TIMELINE_COLUMNS = [
    "pid",
    "name",
    "start_time",
    "end_time",
    "is_preemption",
    "queue_level",
    "priority",
    "quantum_used",
]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def processes_from_records(records: Iterable[Mapping[str, Any]]) -> List[Process]:
    """
    Normalize loosely typed records (CSV rows, JSON objects) into processes.

    Records without a pid are named ``P<row number>``, or the next ``P<n>``
    not used by any other record.

    Raises:
        ValueError: If two records give the same pid.
    """
    records = list(records)
    given = [str(record.get("pid") or record.get("id") or "") for record in records]
    check_unique_pids(pid for pid in given if pid)
    used = set(pid for pid in given if pid)

    processes: List[Process] = []
    for index, record in enumerate(records):
        pid = given[index]
        if not pid:
            number = index + 1
            while f"P{number}" in used:
                number += 1
            pid = f"P{number}"
            used.add(pid)
        processes.append(
            normalize_process(
                pid=pid,
                arrival_time=record.get("arrival_time", 0),
                burst_time=record.get("burst_time", 1),
                priority=record.get("priority", 0),
                queue_level=record.get("queue_level", 0),
                name=record.get("name"),
                color=record.get("color"),
                index=index,
            )
        )
    return processes


def load_processes(path: Union[str, Path]) -> List[Process]:
    """
    Load a workload from a ``.csv`` or ``.json`` file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: For an unsupported extension, malformed content or a
            pid used twice.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    with path.open("r", newline="", encoding="utf-8") as fh:
        if suffix == ".csv":
            records = list(csv.DictReader(fh))
        elif suffix == ".json":
            try:
                records = json.load(fh)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}: invalid JSON ({exc})") from exc
            if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
                raise ValueError(f"{path}: expected a JSON list of process objects")
        else:
            raise ValueError(f"{path}: unsupported file type {suffix or '(none)'}")

    processes = processes_from_records(records)
    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def result_to_dict(result: SchedulerResult) -> Dict[str, Any]:
    return result.to_dict()


def result_to_json(result: SchedulerResult, indent: int = 2) -> str:
    return json.dumps(result_to_dict(result), indent=indent)


def write_processes_csv(processes: Sequence[Process], fh: TextIO) -> None:
    writer = csv.writer(fh)
    writer.writerow(PROCESS_COLUMNS)
    for p in processes:
        writer.writerow(
            [p.pid, p.display_name, p.arrival_time, p.burst_time, p.priority, p.queue_level, p.color]
        )


def write_results_csv(result: SchedulerResult, fh: TextIO) -> None:
    """Write the per-process metrics table, one row per process, sorted by pid."""
    writer = csv.DictWriter(fh, fieldnames=RESULT_COLUMNS, extrasaction="ignore")
    writer.writeheader()
    for state in sorted(result.process_states, key=lambda s: s.pid):
        row = state.to_dict()
        row["response_ratio"] = f"{state.response_ratio:.4f}"
        writer.writerow(row)


def write_timeline_csv(result: SchedulerResult, fh: TextIO) -> None:
    writer = csv.DictWriter(fh, fieldnames=TIMELINE_COLUMNS, extrasaction="ignore")
    writer.writeheader()
    for block in result.timeline:
        writer.writerow(block.to_dict())


def write_comparison_csv(rows: Sequence[ComparisonRow], fh: TextIO) -> None:
    if not rows:
        return
    records = [row.to_dict() for row in rows]
    writer = csv.DictWriter(fh, fieldnames=list(records[0]))
    writer.writeheader()
    writer.writerows(records)
