# -*- coding: utf-8 -*-
"""
Round scheduler for Monte Carlo experiments.

The harness splits a simulated run into `number_of_rounds + 1` rounds of equal
length. At construction it registers, on the host timeline, every event the
experiment will fire:

    t = W                       warmup snapshot (baseline of round 0)
    t = (r+1)*T                 reward calculation -> results -> behaviour
    t = (r+1)*T + W             warmup snapshot for round r+1

for r = 0..number_of_rounds, T the round duration and W the warmup. With
`use_default_calculation=False` only the behaviour events are registered and
the caller installs its own calculator and warmup collector.

Hooks (behaviour, custom calculator, custom warmup, end condition) are called
with the harness as their only argument.
"""
import logging
from typing import Callable, Optional

from mcsim.errors import ConfigurationError, ResultsWriteError
from mcsim.flow_stats import FlowStatsTable
from mcsim.results import ResultsSink
from mcsim.reward import DefaultRewardCalculator
from mcsim.simcore import EventKind

logger = logging.getLogger(__name__)

Hook = Callable[["MonteCarloHarness"], None]


class MonteCarloHarness:
    def __init__(self, config, flows, simulator, behaviour: Hook):
        """
        Args:
            config: HarnessConfig (validated on its own construction)
            flows: byte counter source, get_cumulative_bytes(i) and len()
            simulator: timeline exposing schedule_at(time, action, event) and stop()
            behaviour: arm selection hook, invoked once per round
        """
        if not callable(behaviour):
            raise ConfigurationError("Behaviour function must be callable")
        self.config = config
        self.flows = flows
        self.simulator = simulator
        self.behaviour = behaviour
        self.n_flows = len(flows)
        self.stats = FlowStatsTable(self.n_flows, config.total_rounds)
        self.calculator = DefaultRewardCalculator(flows, self.stats, config.productive_duration)
        self.sink = ResultsSink(config.output_path, self.n_flows, config.printing_threshold)
        self._current_round = 0
        self._custom_calculation = None
        self._custom_warmup = None
        self._end_condition = None
        self.schedule_all()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------
    def _at(self, timestamp, event, action):
        self.simulator.schedule_at(timestamp, action, event)

    def schedule_all(self):
        cfg = self.config
        T = cfg.round_duration
        W = cfg.warmup_duration
        default = cfg.use_default_calculation
        if default:
            self._at(W, EventKind.WARMUP_SNAPSHOT, self.snapshot_warmup_bytes)
        for r in range(cfg.total_rounds):
            boundary = (r + 1) * T
            if default:
                self._at(boundary, EventKind.REWARD_CALC, self._run_default_calculation)
                self._at(boundary + W, EventKind.WARMUP_SNAPSHOT, self.snapshot_warmup_bytes)
                self._at(boundary, EventKind.RESULTS_REPORT, self._run_results)
            self._at(boundary, EventKind.BEHAVIOUR, self._run_behaviour)
        logger.info("Scheduled %d rounds of %.3fs (warmup %.3fs), default calculation %s",
                    cfg.total_rounds, T, W, "on" if default else "off")

    def set_reward_calculation_function(self, fn: Hook):
        """Install a custom reward calculation, followed by results handling, each round"""
        if self.config.use_default_calculation:
            raise ConfigurationError(
                "Custom reward calculation requires use_default_calculation=False")
        self._custom_calculation = fn
        T = self.config.round_duration
        for r in range(self.config.total_rounds):
            self._at((r + 1) * T, EventKind.CUSTOM_CALC, self._run_custom_calculation)
            self._at((r + 1) * T, EventKind.RESULTS_REPORT, self._run_results)

    def set_warmup_statistics_function(self, fn: Hook):
        """Install a custom statistics collector, invoked `warmup` into every round"""
        if self.config.use_default_calculation:
            raise ConfigurationError(
                "Custom warmup statistics require use_default_calculation=False")
        self._custom_warmup = fn
        T = self.config.round_duration
        W = self.config.warmup_duration
        # one extra pass covers the snapshot after the final round boundary
        for r in range(self.config.total_rounds + 1):
            self._at(r * T + W, EventKind.CUSTOM_WARMUP, self._run_custom_warmup)

    def set_end_condition_function(self, fn: Callable[["MonteCarloHarness"], bool]):
        """Stop the whole simulation at the first round boundary where fn returns True"""
        self._end_condition = fn
        T = self.config.round_duration
        for r in range(self.config.total_rounds):
            self._at((r + 1) * T, EventKind.END_CHECK, self._run_end_check)

    # ------------------------------------------------------------------
    # Event bodies
    # ------------------------------------------------------------------
    def _run_default_calculation(self):
        self.default_reward_calculation()

    def _run_custom_calculation(self):
        self._custom_calculation(self)

    def _run_custom_warmup(self):
        self._custom_warmup(self)

    def _run_behaviour(self):
        self.behaviour(self)

    def _run_results(self):
        try:
            self.handle_results()
        except ResultsWriteError as e:
            # the timeline keeps going; the round counter already advanced
            logger.warning("%s", e)

    def _run_end_check(self):
        if self._end_condition(self):
            logger.info("End condition met after round %d", self._current_round - 1)
            self.simulator.stop()

    # ------------------------------------------------------------------
    # Default statistics
    # ------------------------------------------------------------------
    def snapshot_warmup_bytes(self):
        self.calculator.snapshot_warmup_bytes()

    def default_reward_calculation(self):
        self.calculator.calculate(self._current_round)

    def handle_results(self):
        """
        Echo and persist the current round's rewards, then advance the round.
        The round advances even when writing fails.
        """
        round_idx = self._current_round
        try:
            self.sink.handle(round_idx, self.stats.reward_row(round_idx))
        finally:
            self._current_round += 1

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def current_round(self) -> int:
        return self._current_round

    @property
    def last_completed_round(self) -> Optional[int]:
        """Most recent round whose results were handled, None before the first"""
        return self._current_round - 1 if self._current_round > 0 else None

    def get_choose_array(self):
        return self.stats.successful_rounds_array()

    def get_total_bytes(self):
        return self.stats.bytes_at_round_start_array()

    def get_throughput_array(self):
        return self.stats.throughput_table()

    def get_throughput_sum_array(self):
        return self.stats.throughput_sum_array()

    def get_reward_array(self):
        return self.stats.reward_table()
