"""Scheduling engines. Each takes a list of processes and returns a SchedulerResult."""

from cpu_scheduler.schedulers.fcfs import fcfs
from cpu_scheduler.schedulers.hrrn import hrrn
from cpu_scheduler.schedulers.multilevel import multilevel_feedback_queue, multilevel_queue
from cpu_scheduler.schedulers.priority import priority_non_preemptive, priority_preemptive
from cpu_scheduler.schedulers.round_robin import dynamic_round_robin, round_robin
from cpu_scheduler.schedulers.sjf import sjf
from cpu_scheduler.schedulers.srtf import srtf

__all__ = [
    "fcfs",
    "sjf",
    "srtf",
    "hrrn",
    "priority_non_preemptive",
    "priority_preemptive",
    "round_robin",
    "dynamic_round_robin",
    "multilevel_queue",
    "multilevel_feedback_queue",
]
