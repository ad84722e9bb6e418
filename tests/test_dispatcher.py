"""Tests for algorithm dispatch and configuration variants."""

import pytest

from cpu_scheduler.config import (
    Algorithm,
    DynamicRoundRobinConfig,
    MLFQConfig,
    MultilevelQueueConfig,
    NoConfig,
    PriorityConfig,
    QueueLevelConfig,
    QueuePolicy,
    RoundRobinConfig,
    check_config,
    config_fields,
    config_for,
)
from cpu_scheduler.dispatcher import ENGINES, run_scheduler
from cpu_scheduler.models import Process
from cpu_scheduler.schedulers import fcfs, round_robin
from tests.conftest import make_processes, segments


class TestRunScheduler:
    def test_every_algorithm_has_an_engine(self):
        assert set(ENGINES) == set(Algorithm)

    @pytest.mark.parametrize("selector", ["rr", " RR ", Algorithm.RR])
    def test_selector_forms(self, basic_processes, selector):
        result = run_scheduler(selector, basic_processes)
        assert result.algorithm == "rr"
        assert segments(result) == segments(round_robin(basic_processes))

    def test_matches_engine_called_directly(self, basic_processes):
        assert segments(run_scheduler("fcfs", basic_processes)) == segments(fcfs(basic_processes))

    def test_config_is_passed_through(self, basic_processes):
        result = run_scheduler("rr", basic_processes, RoundRobinConfig(time_quantum=100))
        assert len(result.timeline) == 4

    def test_unknown_algorithm(self, basic_processes):
        with pytest.raises(ValueError, match="Unsupported algorithm"):
            run_scheduler("lottery", basic_processes)

    def test_wrong_config_variant(self, basic_processes):
        with pytest.raises(ValueError, match="RoundRobinConfig"):
            run_scheduler("rr", basic_processes, MLFQConfig())

    def test_no_config_algorithms_accept_no_config(self, basic_processes):
        result = run_scheduler("sjf", basic_processes, NoConfig())
        assert result.algorithm == "sjf"

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_empty_workload(self, algorithm):
        result = run_scheduler(algorithm, [])

        assert result.algorithm == algorithm.value
        assert result.timeline == []
        assert result.process_states == []
        assert result.events == []
        assert result.metrics.total_execution_time == 0
        assert result.metrics.cpu_utilization == 0

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_input_is_not_mutated(self, algorithm, basic_processes):
        before = list(basic_processes)
        run_scheduler(algorithm, basic_processes)
        assert basic_processes == before

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_duplicate_pids_are_rejected(self, algorithm):
        processes = make_processes((0, 3), (1, 2))
        processes.append(Process("P1", arrival_time=2, burst_time=1))

        with pytest.raises(ValueError, match="Duplicate process id: 'P1'"):
            run_scheduler(algorithm, processes)

    def test_accepts_any_iterable(self, basic_processes):
        result = run_scheduler("fcfs", (p for p in basic_processes))

        assert len(result.process_states) == 4
        assert segments(result) == segments(run_scheduler("fcfs", basic_processes))


class TestConfig:
    def test_fields(self):
        assert config_fields("fcfs") == ()
        assert config_fields("rr") == ("time_quantum",)
        assert config_fields(Algorithm.PRIORITY_P) == ("aging_interval", "aging_boost")
        assert config_fields("mlfq") == (
            "num_queues",
            "base_quantum",
            "quantum_multiplier",
            "boost_interval",
        )

    def test_config_for_defaults_and_overrides(self):
        assert config_for("rr") == RoundRobinConfig(time_quantum=2)
        assert config_for("rr", time_quantum=5) == RoundRobinConfig(time_quantum=5)
        assert config_for("dynamic-rr", max_quantum=8) == DynamicRoundRobinConfig(1, 8)
        assert config_for("priority-np") == PriorityConfig(aging_interval=10, aging_boost=1)

    def test_config_for_unknown_field(self):
        with pytest.raises(ValueError, match="does not accept: time_quantum"):
            config_for("fcfs", time_quantum=3)

    def test_check_config_default(self):
        assert check_config(Algorithm.MLFQ, None) == MLFQConfig()

    @pytest.mark.parametrize(
        "build",
        [
            lambda: RoundRobinConfig(time_quantum=0),
            lambda: DynamicRoundRobinConfig(min_quantum=5, max_quantum=2),
            lambda: DynamicRoundRobinConfig(min_quantum=0, max_quantum=2),
            lambda: PriorityConfig(aging_interval=-1),
            lambda: MLFQConfig(num_queues=1),
            lambda: MLFQConfig(num_queues=6),
            lambda: MLFQConfig(base_quantum=0),
            lambda: MLFQConfig(boost_interval=-5),
            lambda: QueueLevelConfig("lottery"),
            lambda: QueueLevelConfig(QueuePolicy.RR, 0),
            lambda: MultilevelQueueConfig(queues=()),
        ],
    )
    def test_invalid_values(self, build):
        with pytest.raises(ValueError):
            build()

    def test_queue_policy_from_string(self):
        assert QueueLevelConfig("sjf").policy is QueuePolicy.SJF

    def test_mlfq_quantum_per_level(self):
        config = MLFQConfig(num_queues=4, base_quantum=3, quantum_multiplier=2)
        assert [config.quantum(level) for level in range(4)] == [3, 6, 12, 24]

    def test_mlq_levels_clamp_to_last(self):
        config = MultilevelQueueConfig()
        assert config.level(4) == config.queues[-1]
        assert config.level(0).policy is QueuePolicy.RR

    def test_priority_aging_disabled_by_zero(self):
        assert not PriorityConfig(aging_interval=0).aging_enabled
        assert PriorityConfig().aging_enabled

    def test_single_process(self):
        result = run_scheduler("mlfq", make_processes((3, 4)))
        assert result.state_for("P1").waiting_time == 0
        assert result.metrics.total_execution_time == 7
