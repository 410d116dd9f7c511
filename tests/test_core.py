# Configuration validation, statistics table bounds and the event clock.

import pytest

from mcsim.config import MAX_FLOWS, MAX_ROUNDS, HarnessConfig, PolicyConfig, ScenarioConfig
from mcsim.errors import CapacityError, ConfigurationError, HarnessError
from mcsim.flow_stats import FlowStatsTable
from mcsim.simcore import EventKind, Simulator


class TestHarnessConfig:
    def test_defaults(self):
        cfg = HarnessConfig()
        assert cfg.total_rounds == 11
        assert cfg.productive_duration == 1.0
        assert cfg.stop_time == 22.0
        assert cfg.output_path == "example-algorithms.csv"

    @pytest.mark.parametrize("warmup", [2.0, 3.5])
    def test_warmup_not_shorter_than_round(self, warmup):
        with pytest.raises(ConfigurationError, match="Warmup time cannot exceed"):
            HarnessConfig(round_duration=2.0, warmup_duration=warmup)

    @pytest.mark.parametrize("kwargs", [
        {"round_duration": 0.0},
        {"number_of_rounds": -1},
        {"number_of_rounds": 2.5},
        {"warmup_duration": -0.1},
        {"printing_threshold": -1},
        {"output_name": ""},
    ])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            HarnessConfig(**kwargs)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            HarnessConfig(round_duration=-1.0)


class TestPolicyConfig:
    @pytest.mark.parametrize("kwargs", [
        {"name": "softmax"},
        {"epsilon": -0.1},
        {"epsilon": 1.01},
        {"sticky_counter": -1},
    ])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            PolicyConfig(**kwargs)

    def test_bounds_accepted(self):
        assert PolicyConfig(name="greedy", epsilon=0.0).epsilon == 0.0
        assert PolicyConfig(name="none", epsilon=1.0, sticky_counter=0).sticky_counter == 0


def test_scenario_shape():
    scenario = ScenarioConfig()
    assert scenario.n_stations == 2
    assert scenario.n_aps == 2
    with pytest.raises(ConfigurationError):
        ScenarioConfig(TRAFFIC="bursty")
    with pytest.raises(ConfigurationError):
        ScenarioConfig(DATA_RATE_MBPS=(12.0,))


class TestFlowStatsTable:
    def test_starts_zeroed(self):
        table = FlowStatsTable(3, 4)
        assert table.reward_table().shape == (3, 4)
        assert not table.reward_table().any()
        assert not table.throughput_table().any()
        assert table.successful_rounds_array().tolist() == [0.0, 0.0, 0.0]

    def test_capacity_limits(self):
        FlowStatsTable(MAX_FLOWS, MAX_ROUNDS)
        with pytest.raises(CapacityError):
            FlowStatsTable(MAX_FLOWS + 1, 2)
        with pytest.raises(CapacityError):
            FlowStatsTable(2, MAX_ROUNDS + 1)

    @pytest.mark.parametrize("flow,round_idx", [(2, 0), (-1, 0), (0, 5), (0, -1)])
    def test_out_of_range_access(self, flow, round_idx):
        table = FlowStatsTable(2, 5)
        with pytest.raises(CapacityError):
            table.reward(flow, round_idx)
        with pytest.raises(CapacityError):
            table.set_throughput(flow, round_idx, 1.0)

    def test_capacity_error_is_index_error(self):
        table = FlowStatsTable(1, 1)
        with pytest.raises(IndexError):
            table.successful_rounds(1)
        with pytest.raises(HarnessError):
            table.bytes_at_round_start(3)

    def test_carry_without_history_leaves_zero(self):
        table = FlowStatsTable(1, 3)
        table.carry_reward(0, 0)
        assert table.reward(0, 0) == 0.0

    def test_record_success_running_average(self):
        table = FlowStatsTable(1, 3)
        table.set_throughput(0, 0, 4.0)
        table.record_success(0, 0)
        table.set_throughput(0, 1, 8.0)
        table.record_success(0, 1)
        table.carry_reward(0, 2)
        assert table.reward_row(2).tolist() == [6.0]
        assert table.throughput_sum(0) == 12.0
        assert table.successful_rounds(0) == 2


class TestSimulator:
    def test_runs_in_time_then_registration_order(self):
        sim = Simulator()
        order = []
        sim.schedule_at(2.0, lambda: order.append("b"))
        sim.schedule_at(1.0, lambda: order.append("a"))
        sim.schedule_at(2.0, lambda: order.append("c"))
        sim.run()
        assert order == ["a", "b", "c"]
        assert sim.now == 2.0
        assert sim.executed == 3

    def test_until_leaves_later_events(self):
        sim = Simulator()
        fired = []
        sim.schedule_at(1.0, lambda: fired.append(1.0))
        sim.schedule_at(3.0, lambda: fired.append(3.0))
        sim.run(until=2.0)
        assert fired == [1.0]
        assert sim.now == 2.0
        assert [t.timestamp for t in sim.pending()] == [3.0]

    def test_event_at_until_still_runs(self):
        sim = Simulator()
        fired = []
        sim.schedule_at(2.0, lambda: fired.append(sim.now))
        sim.run(until=2.0)
        assert fired == [2.0]

    def test_stop_abandons_pending(self):
        sim = Simulator()
        fired = []
        sim.schedule_at(1.0, sim.stop)
        sim.schedule_at(1.0, lambda: fired.append("same tick"))
        sim.schedule_at(5.0, lambda: fired.append("later"))
        sim.run()
        assert fired == []
        assert sim.stopped
        assert sim.pending() == []
        assert sim.now == 1.0

    def test_schedule_in_is_relative(self):
        sim = Simulator()
        times = []
        sim.schedule_at(1.5, lambda: sim.schedule_in(0.5, lambda: times.append(sim.now)))
        sim.run()
        assert times == [2.0]

    def test_rejects_past_timestamps(self):
        sim = Simulator()
        sim.schedule_at(3.0, lambda: None)
        sim.run()
        with pytest.raises(ValueError):
            sim.schedule_at(1.0, lambda: None)

    def test_pending_filters_by_kind(self):
        sim = Simulator()
        sim.schedule_at(1.0, lambda: None, EventKind.BEHAVIOUR)
        sim.schedule_at(0.5, lambda: None)
        assert [t.event for t in sim.pending(EventKind.BEHAVIOUR)] == [EventKind.BEHAVIOUR]
        assert [t.timestamp for t in sim.pending()] == [0.5, 1.0]
