# -*- coding: utf-8 -*-
"""
Default throughput and reward calculation
"""
import logging

logger = logging.getLogger(__name__)


def calculate_throughput(delta_bytes, duration):
    """
    Calculate throughput over a measurement window

    Args:
        delta_bytes: Bytes received during the window
        duration: Window length in seconds

    Returns:
        Throughput in Mbps
    """
    delta_bits = delta_bytes * 8
    return delta_bits / (duration * 1e6)


class DefaultRewardCalculator:
    """
    Per-flow reward = average throughput over the rounds in which the flow was
    active (throughput > 0). Throughput only counts the productive part of a
    round, after the warmup snapshot.
    """

    def __init__(self, flows, stats, productive_duration):
        """
        Args:
            flows: Byte counter source exposing get_cumulative_bytes(i) and len()
            stats: FlowStatsTable written by this calculator
            productive_duration: round duration minus warmup, in seconds
        """
        self.flows = flows
        self.stats = stats
        self.productive_duration = productive_duration
        self.calls = 0

    def snapshot_warmup_bytes(self):
        """Store every flow's counter as the baseline of the measurement window"""
        for flow in range(self.stats.n_flows):
            self.stats.set_bytes_at_round_start(flow, self.flows.get_cumulative_bytes(flow))

    def calculate(self, current_round):
        # The whole throughput column is finalised before any reward is derived
        for flow in range(self.stats.n_flows):
            current = int(self.flows.get_cumulative_bytes(flow))
            delta = current - self.stats.bytes_at_round_start(flow)
            self.stats.set_throughput(flow, current_round,
                                      calculate_throughput(delta, self.productive_duration))
            self.stats.set_bytes_at_round_start(flow, current)

        for flow in range(self.stats.n_flows):
            if self.stats.throughput(flow, current_round) > 0:
                self.stats.record_success(flow, current_round)
            else:
                self.stats.carry_reward(flow, current_round)

        self.calls += 1
        logger.debug("Round %d throughput: %s", current_round,
                     [round(self.stats.throughput(f, current_round), 3)
                      for f in range(self.stats.n_flows)])
