"""
Matplotlib rendering of simulation results.

- :func:`gantt_figure` draws the timeline, one row per process, preempted
  segments hatched.
- :func:`comparison_figure` draws the average times of every algorithm in
  a comparison side by side.
"""

import colorsys
import logging
import re
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402
from matplotlib.patches import Patch  # noqa: E402

from cpu_scheduler.compare import ComparisonRow  # noqa: E402
from cpu_scheduler.config import ALGORITHM_INFO, Algorithm  # noqa: E402
from cpu_scheduler.models import SchedulerResult  # noqa: E402

logger = logging.getLogger(__name__)

RGB = Tuple[float, float, float]

_HSL_PATTERN = re.compile(r"hsl\(\s*([\d.]+)\s*,\s*([\d.]+)%\s*,\s*([\d.]+)%\s*\)")

DEFAULT_DPI = 150


def to_rgb(color: str) -> Union[RGB, str]:
    """
    Convert a CSS ``hsl(h, s%, l%)`` color into an RGB tuple.

    Anything else (hex codes, named colors) is returned unchanged for
    matplotlib to interpret.
    """
    match = _HSL_PATTERN.fullmatch(color.strip())
    if not match:
        return color
    hue, saturation, lightness = (float(g) for g in match.groups())
    return colorsys.hls_to_rgb(hue / 360.0, lightness / 100.0, saturation / 100.0)


def gantt_figure(result: SchedulerResult, title: Optional[str] = None) -> Figure:
    """
    Draw the Gantt chart of one run.

    Args:
        result: A finished simulation run.
        title:  Figure title; defaults to the algorithm's display name.

    Returns:
        The matplotlib figure; save it with :func:`save_figure`.
    """
    if title is None:
        if result.algorithm:
            title = ALGORITHM_INFO[Algorithm(result.algorithm)].name
        else:
            title = "Gantt Chart"

    # First process listed at the top.
    pids = [state.pid for state in result.process_states]
    rows: Dict[str, int] = {pid: len(pids) - 1 - i for i, pid in enumerate(pids)}
    labels = {state.pid: state.name for state in result.process_states}

    fig, ax = plt.subplots(figsize=(12, max(2.0, 0.6 * len(pids) + 1)))
    for block in result.timeline:
        y = rows[block.pid]
        ax.broken_barh(
            [(block.start_time, block.duration)],
            (y - 0.4, 0.8),
            facecolors=[to_rgb(block.color)],
            edgecolor="black",
            hatch="//" if block.is_preemption else None,
        )
        ax.text(
            block.start_time + block.duration / 2,
            y,
            block.pid,
            ha="center",
            va="center",
            fontsize=8,
        )

    ax.set_yticks(list(rows.values()))
    ax.set_yticklabels([labels[pid] for pid in rows])
    ax.set_xlabel("Time")
    ax.set_xlim(0, max(result.metrics.total_execution_time, 1))
    ax.set_title(title)
    ax.grid(True, axis="x", linestyle="--", alpha=0.4)
    if any(block.is_preemption for block in result.timeline):
        ax.legend(
            handles=[Patch(facecolor="white", edgecolor="black", hatch="//", label="Preempted")],
            loc="upper right",
        )
    fig.tight_layout()
    return fig


def comparison_figure(rows: Sequence[ComparisonRow], title: str = "Algorithm Comparison") -> Figure:
    """Grouped bars of average waiting, turnaround and response time per algorithm."""
    series = [
        ("Avg Waiting", lambda row: row.metrics.average_waiting_time),
        ("Avg Turnaround", lambda row: row.metrics.average_turnaround_time),
        ("Avg Response", lambda row: row.metrics.average_response_time),
    ]
    width = 0.8 / len(series)

    fig, ax = plt.subplots(figsize=(max(8.0, 1.2 * len(rows)), 5))
    positions = range(len(rows))
    for offset, (label, value) in enumerate(series):
        ax.bar(
            [x + (offset - 1) * width for x in positions],
            [value(row) for row in rows],
            width,
            label=label,
        )

    ax.set_xticks(list(positions))
    ax.set_xticklabels([row.algorithm.value for row in rows], rotation=30, ha="right")
    ax.set_ylabel("Time")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, axis="y", linestyle="--", alpha=0.4)
    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: Union[str, Path], dpi: int = DEFAULT_DPI) -> None:
    """Write ``fig`` to ``path`` (format taken from the extension) and close it."""
    try:
        fig.savefig(path, dpi=dpi, bbox_inches="tight")
    finally:
        plt.close(fig)
    logger.info("Saved chart to %s", path)
