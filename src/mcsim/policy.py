# -*- coding: utf-8 -*-
"""
Access point selection policies (two-armed bandits, one per station).

Policies:
1. none:   uniform random choice between the two arms
2. greedy: epsilon-greedy on the reward table
3. sticky: epsilon-greedy with a lock that keeps a station on an arm while the
           arm delivers close to the station's nominal data rate

Comparisons use strict `>`, so on equal values the second arm wins.
"""
import logging
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from mcsim.config import STICKY_THRESHOLD, PolicyConfig
from mcsim.errors import ConfigurationError

logger = logging.getLogger(__name__)

ARM_A, ARM_B = 0, 1


class Station:
    """A station choosing between two arms (flow indices)"""

    def __init__(self, station_id: int, arms: Tuple[int, int], data_rate: float,
                 apply: Optional[Callable[[int], None]] = None):
        """
        Args:
            station_id: Station index
            arms: (flow of arm A, flow of arm B)
            data_rate: Nominal data rate in Mbps
            apply: Host callback switching the station to arm 0 or 1
        """
        if len(arms) != 2:
            raise ConfigurationError(f"Station {station_id} needs exactly two arms, got {arms}")
        self.station_id = station_id
        self.arms = tuple(arms)
        self.data_rate = data_rate
        self.apply = apply
        self.arm = None  # undecided until the first evaluation
        self.locked = False

    def assign(self, arm):
        self.arm = arm
        if self.apply is not None:
            self.apply(arm)

    def keep(self, arm):
        """Record the arm the station already uses, no switch needed"""
        self.arm = arm

    def flow(self, arm):
        return self.arms[arm]

    def __repr__(self):
        return f"Station(id={self.station_id}, arms={self.arms}, arm={self.arm})"


def _value(getter, flow, round_idx):
    # nothing has been measured before the first completed round
    if round_idx is None:
        return 0.0
    return getter(flow, round_idx)


class SelectionPolicy:
    """Base behaviour hook: evaluates every station once per round"""

    name = None

    def __init__(self, stations: Sequence[Station], rng=None):
        self.stations: List[Station] = list(stations)
        self.rng = rng if rng is not None else np.random.RandomState()
        self.decisions = []

    def __call__(self, harness):
        prev = harness.last_completed_round
        for station in self.stations:
            self.select(station, harness.stats, prev)

    def select(self, station, stats, prev):
        raise NotImplementedError

    def _record(self, station, prev, reason):
        self.decisions.append({
            'round': prev,
            'station': station.station_id,
            'arm': station.arm,
            'reason': reason,
        })

    def random_choice(self, station, prev):
        draw = self.rng.random_sample()
        station.assign(ARM_A if draw < .5 else ARM_B)
        self._record(station, prev, 'random')

    def switch_count(self, station_id=None):
        """Number of times a station changed arm between consecutive decisions"""
        switches = 0
        last = {}
        for d in self.decisions:
            if station_id is not None and d['station'] != station_id:
                continue
            sid = d['station']
            if sid in last and last[sid] != d['arm']:
                switches += 1
            last[sid] = d['arm']
        return switches


class RandomPolicy(SelectionPolicy):
    name = "none"

    def select(self, station, stats, prev):
        self.random_choice(station, prev)


class EpsilonGreedyPolicy(SelectionPolicy):
    name = "greedy"

    def __init__(self, stations, epsilon, rng=None):
        super().__init__(stations, rng)
        if not 0.0 <= epsilon <= 1.0:
            raise ConfigurationError(f"Epsilon parameter should be in range <0, 1>, got {epsilon}")
        self.epsilon = epsilon

    def select(self, station, stats, prev):
        self.epsilon_greedy(station, stats, prev)

    def epsilon_greedy(self, station, stats, prev):
        if self.rng.random_sample() < self.epsilon:
            self.random_choice(station, prev)
            return
        reward_a = _value(stats.reward, station.flow(ARM_A), prev)
        reward_b = _value(stats.reward, station.flow(ARM_B), prev)
        station.assign(ARM_A if reward_a > reward_b else ARM_B)
        self._record(station, prev, 'greedy')


class StickyEpsilonGreedyPolicy(EpsilonGreedyPolicy):
    """
    Each arm carries a lock counter. When the arm a station is associated with
    delivers more than STICKY_THRESHOLD of the station's data rate, its counter
    is reset to `sticky_counter`; a locked station whose arm misses the
    threshold loses one step. While the counter is positive the station stays
    where it is, otherwise it falls back to epsilon-greedy.
    """
    name = "sticky"

    def __init__(self, stations, epsilon, sticky_counter, rng=None):
        super().__init__(stations, epsilon, rng)
        if sticky_counter < 0:
            raise ConfigurationError(f"Sticky counter must be non-negative, got {sticky_counter}")
        self.sticky_counter = sticky_counter
        self.lock_counters = {flow: 0 for st in self.stations for flow in st.arms}

    def associated_arm(self, station, stats, prev):
        thr_a = _value(stats.throughput, station.flow(ARM_A), prev)
        thr_b = _value(stats.throughput, station.flow(ARM_B), prev)
        return ARM_A if thr_a > thr_b else ARM_B

    def select(self, station, stats, prev):
        arm = self.associated_arm(station, stats, prev)
        flow = station.flow(arm)
        at_capacity = _value(stats.throughput, flow, prev) > station.data_rate * STICKY_THRESHOLD
        if at_capacity:
            self.lock_counters[flow] = self.sticky_counter
        elif station.locked:
            self.lock_counters[flow] -= 1

        if self.lock_counters[flow] > 0:
            station.locked = True
            station.keep(arm)
            self._record(station, prev, 'sticky')
        else:
            station.locked = False
            self.epsilon_greedy(station, stats, prev)


def build_policy(config: PolicyConfig, stations, rng=None) -> SelectionPolicy:
    """Create the behaviour hook named by the policy configuration"""
    if rng is None:
        rng = np.random.RandomState(config.seed)
    if config.name == "sticky":
        policy = StickyEpsilonGreedyPolicy(stations, config.epsilon, config.sticky_counter, rng)
    elif config.name == "greedy":
        policy = EpsilonGreedyPolicy(stations, config.epsilon, rng)
    elif config.name == "none":
        policy = RandomPolicy(stations, rng)
    else:
        raise ConfigurationError(f"Unsupported epsilon algorithm {config.name!r}")
    logger.info("Selection policy %s for %d stations", policy.name, len(policy.stations))
    return policy
