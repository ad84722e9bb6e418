"""
Command-line front end.

Examples::

    cpu-scheduler scenarios
    cpu-scheduler run rr --scenario basic --quantum 3 --events
    cpu-scheduler run mlfq --input workload.csv --format json --output result.json
    cpu-scheduler compare --scenario starvation
    cpu-scheduler run srtf --scenario sjf-preemption --chart gantt.png
"""

import argparse
import logging
import sys
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Sequence, TextIO

from cpu_scheduler.chart import comparison_figure, gantt_figure, save_figure
from cpu_scheduler.compare import compare_algorithms
from cpu_scheduler.config import ALGORITHM_INFO, Algorithm, AlgorithmConfig, config_fields, config_for
from cpu_scheduler.dispatcher import run_scheduler
from cpu_scheduler.export import (
    load_processes,
    result_to_json,
    write_comparison_csv,
    write_results_csv,
    write_timeline_csv,
)
from cpu_scheduler.models import Process, SchedulerResult
from cpu_scheduler.scenarios import SCENARIOS, load_scenario

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2

# CLI option -> configuration field; each option only applies to the
# algorithms whose configuration has that field.
OPTION_FIELDS = {
    "quantum": "time_quantum",
    "aging_interval": "aging_interval",
    "aging_boost": "aging_boost",
    "min_quantum": "min_quantum",
    "max_quantum": "max_quantum",
    "mlfq_queues": "num_queues",
    "base_quantum": "base_quantum",
    "multiplier": "quantum_multiplier",
    "boost_interval": "boost_interval",
}


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _add_workload_options(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--scenario",
        choices=list(SCENARIOS),
        default="basic",
        help="predefined workload (default: basic)",
    )
    source.add_argument("--input", metavar="FILE", help="workload file (.csv or .json)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpu-scheduler",
        description="Simulate CPU scheduling algorithms on a set of processes.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="run one algorithm")
    run.add_argument("algorithm", choices=[a.value for a in Algorithm])
    _add_workload_options(run)
    run.add_argument("--quantum", type=int, help="Round Robin time quantum")
    run.add_argument("--aging-interval", type=int, help="priority aging interval (0 disables)")
    run.add_argument("--aging-boost", type=int, help="priority decrease per aging interval")
    run.add_argument("--min-quantum", type=int, help="dynamic RR minimum quantum")
    run.add_argument("--max-quantum", type=int, help="dynamic RR maximum quantum")
    run.add_argument("--mlfq-queues", type=int, help="MLFQ number of queues (2-5)")
    run.add_argument("--base-quantum", type=int, help="MLFQ quantum of queue 0")
    run.add_argument("--multiplier", type=int, help="MLFQ quantum multiplier per level")
    run.add_argument("--boost-interval", type=int, help="MLFQ boost interval (0 disables)")
    run.add_argument("--events", action="store_true", help="also print the event log")
    run.add_argument("--format", choices=["text", "json", "csv"], default="text")
    run.add_argument("--output", metavar="FILE", help="write to FILE instead of stdout")
    run.add_argument("--chart", metavar="FILE", help="save a Gantt chart image (.png, .svg, .pdf)")

    compare = subparsers.add_parser("compare", help="run every algorithm on one workload")
    _add_workload_options(compare)
    compare.add_argument("--format", choices=["text", "csv"], default="text")
    compare.add_argument("--output", metavar="FILE", help="write to FILE instead of stdout")
    compare.add_argument("--chart", metavar="FILE", help="save a bar chart of the averages")

    subparsers.add_parser("scenarios", help="list predefined workloads")
    return parser


def config_from_args(algorithm: Algorithm, args: argparse.Namespace) -> AlgorithmConfig:
    """Collect the options that apply to ``algorithm`` into its configuration."""
    accepted = set(config_fields(algorithm))
    overrides: Dict[str, int] = {}
    for option, field_name in OPTION_FIELDS.items():
        value = getattr(args, option, None)
        if value is None:
            continue
        if field_name in accepted:
            overrides[field_name] = value
        else:
            logger.warning("--%s is ignored by %s", option.replace("_", "-"), algorithm.value)
    return config_for(algorithm, **overrides)


def _load_workload(args: argparse.Namespace) -> List[Process]:
    if args.input:
        return load_processes(args.input)
    return load_scenario(args.scenario)


@contextmanager
def _open_output(path: Optional[str]) -> Iterator[TextIO]:
    if path is None:
        yield sys.stdout
    else:
        with open(path, "w", newline="", encoding="utf-8") as fh:
            yield fh
        logger.info("Wrote %s", path)


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------


def format_result(result: SchedulerResult, show_events: bool = False) -> str:
    algorithm = Algorithm(result.algorithm) if result.algorithm else None
    lines: List[str] = []
    if algorithm is not None:
        lines.append(ALGORITHM_INFO[algorithm].name)
        lines.append("")

    lines.append("Timeline:")
    for block in result.timeline:
        marker = " (preempted)" if block.is_preemption else ""
        lines.append(f"  {block.start_time:>4} - {block.end_time:<4} {block.name}{marker}")

    lines.append("")
    header = f"  {'PID':<6}{'Arr':>5}{'Burst':>7}{'Prio':>6}{'Start':>7}{'End':>6}{'TAT':>6}{'Wait':>6}{'Resp':>6}"
    lines.append(header)
    for state in sorted(result.process_states, key=lambda s: s.pid):
        lines.append(
            f"  {state.pid:<6}{state.arrival_time:>5}{state.burst_time:>7}{state.priority:>6}"
            f"{state.start_time:>7}{state.end_time:>6}{state.turnaround_time:>6}"
            f"{state.waiting_time:>6}{state.response_time:>6}"
        )

    m = result.metrics
    lines.append("")
    lines.append(f"Average Waiting Time: {m.average_waiting_time:.2f}")
    lines.append(f"Average Turnaround Time: {m.average_turnaround_time:.2f}")
    lines.append(f"Average Response Time: {m.average_response_time:.2f}")
    lines.append(
        f"CPU Utilization: {m.cpu_utilization:.2f}%  |  "
        f"Throughput: {m.throughput:.3f} proc/unit  |  "
        f"Context Switches: {m.context_switches}  |  "
        f"Total Time: {m.total_execution_time}"
    )

    if show_events:
        lines.append("")
        lines.append("Events:")
        for event in result.events:
            lines.append(f"  t={event.time:<4} {event.type.value:<15} {event.description}")
    return "\n".join(lines) + "\n"


def format_comparison(rows) -> str:
    lines = [f"{'Algorithm':<32}{'Avg Wait':>10}{'Avg TAT':>10}{'Avg Resp':>10}{'CPU %':>9}{'Thru':>8}{'CS':>5}"]
    for row in rows:
        m = row.metrics
        lines.append(
            f"{row.label:<32}{m.average_waiting_time:>10.2f}{m.average_turnaround_time:>10.2f}"
            f"{m.average_response_time:>10.2f}{m.cpu_utilization:>9.2f}{m.throughput:>8.3f}"
            f"{m.context_switches:>5}"
        )
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_run(args: argparse.Namespace) -> int:
    algorithm = Algorithm.parse(args.algorithm)
    config = config_from_args(algorithm, args)
    processes = _load_workload(args)
    result = run_scheduler(algorithm, processes, config)

    with _open_output(args.output) as out:
        if args.format == "json":
            out.write(result_to_json(result) + "\n")
        elif args.format == "csv":
            write_results_csv(result, out)
            out.write("\n")
            write_timeline_csv(result, out)
        else:
            out.write(format_result(result, show_events=args.events))

    if args.chart:
        save_figure(gantt_figure(result), args.chart)
    return EXIT_OK


def _cmd_compare(args: argparse.Namespace) -> int:
    rows = compare_algorithms(_load_workload(args))
    with _open_output(args.output) as out:
        if args.format == "csv":
            write_comparison_csv(rows, out)
        else:
            out.write(format_comparison(rows))

    if args.chart:
        save_figure(comparison_figure(rows), args.chart)
    return EXIT_OK


def _cmd_scenarios(args: argparse.Namespace) -> int:
    for name, scenario in SCENARIOS.items():
        print(f"{name:<16}{len(scenario.rows):>3} processes  {scenario.description}")
    return EXIT_OK


COMMANDS = {
    "run": _cmd_run,
    "compare": _cmd_compare,
    "scenarios": _cmd_scenarios,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point of the ``cpu-scheduler`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        return COMMANDS[args.command](args)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
