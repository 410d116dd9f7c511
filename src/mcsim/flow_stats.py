# -*- coding: utf-8 -*-
"""
Per-flow statistics kept by the harness for the whole run.

Layout (n_flows x n_rounds for the 2-D tables):
    bytes_at_round_start  baseline byte counter for the current window
    throughput            Mbit/s over the productive part of each round
    reward                running average of positive throughputs
    successful_rounds     number of rounds with throughput > 0
    throughput_sum        sum of positive throughputs
All cells start at zero and the arrays are never reallocated.
"""
import numpy as np

from mcsim.config import MAX_FLOWS, MAX_ROUNDS
from mcsim.errors import CapacityError


class FlowStatsTable:
    """Owned statistics arrays; accessors hand out copies, never aliases"""

    def __init__(self, n_flows, n_rounds):
        if not 0 <= n_flows <= MAX_FLOWS:
            raise CapacityError(f"Number of flows {n_flows} outside 0..{MAX_FLOWS}")
        if not 1 <= n_rounds <= MAX_ROUNDS:
            raise CapacityError(f"Number of rounds {n_rounds} outside 1..{MAX_ROUNDS}")
        self.n_flows = n_flows
        self.n_rounds = n_rounds
        self._bytes_at_round_start = np.zeros(n_flows, dtype=np.uint64)
        self._throughput = np.zeros((n_flows, n_rounds), dtype=float)
        self._reward = np.zeros((n_flows, n_rounds), dtype=float)
        self._successful_rounds = np.zeros(n_flows, dtype=float)
        self._throughput_sum = np.zeros(n_flows, dtype=float)

    def _check_flow(self, flow):
        if not 0 <= flow < self.n_flows:
            raise CapacityError(f"Flow index {flow} outside 0..{self.n_flows - 1}")

    def _check_round(self, round_idx):
        if not 0 <= round_idx < self.n_rounds:
            raise CapacityError(f"Round index {round_idx} outside 0..{self.n_rounds - 1}")

    # ---- baseline bytes ----
    def bytes_at_round_start(self, flow) -> int:
        self._check_flow(flow)
        return int(self._bytes_at_round_start[flow])

    def set_bytes_at_round_start(self, flow, value):
        self._check_flow(flow)
        self._bytes_at_round_start[flow] = value

    # ---- throughput ----
    def throughput(self, flow, round_idx) -> float:
        self._check_flow(flow)
        self._check_round(round_idx)
        return float(self._throughput[flow, round_idx])

    def set_throughput(self, flow, round_idx, value):
        self._check_flow(flow)
        self._check_round(round_idx)
        self._throughput[flow, round_idx] = value

    # ---- reward ----
    def reward(self, flow, round_idx) -> float:
        self._check_flow(flow)
        self._check_round(round_idx)
        return float(self._reward[flow, round_idx])

    def set_reward(self, flow, round_idx, value):
        self._check_flow(flow)
        self._check_round(round_idx)
        self._reward[flow, round_idx] = value

    def reward_row(self, round_idx):
        """Rewards of every flow for one round"""
        self._check_round(round_idx)
        return self._reward[:, round_idx].copy()

    # ---- running average state ----
    def successful_rounds(self, flow) -> float:
        self._check_flow(flow)
        return float(self._successful_rounds[flow])

    def throughput_sum(self, flow) -> float:
        self._check_flow(flow)
        return float(self._throughput_sum[flow])

    def carry_reward(self, flow, round_idx):
        """Inactive round: the cell keeps the running average of earlier active rounds"""
        self._check_flow(flow)
        self._check_round(round_idx)
        if self._successful_rounds[flow] > 0:
            self._reward[flow, round_idx] = self._throughput_sum[flow] / self._successful_rounds[flow]

    def record_success(self, flow, round_idx):
        """
        Fold this round's throughput into the running average of active rounds.
        Only called when the throughput is positive, so the count is never zero.
        """
        value = self.throughput(flow, round_idx)
        self._successful_rounds[flow] += 1
        self._throughput_sum[flow] += value
        self._reward[flow, round_idx] = self._throughput_sum[flow] / self._successful_rounds[flow]

    # ---- whole-table copies ----
    def throughput_table(self):
        return self._throughput.copy()

    def reward_table(self):
        return self._reward.copy()

    def successful_rounds_array(self):
        return self._successful_rounds.copy()

    def throughput_sum_array(self):
        return self._throughput_sum.copy()

    def bytes_at_round_start_array(self):
        return self._bytes_at_round_start.copy()
