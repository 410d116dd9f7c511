# -*- coding: utf-8 -*-
"""
Configuration objects for the round harness, the selection policies and the
example two-AP scenario. Every object validates itself on construction so an
invalid run is rejected before anything is scheduled.
"""
import numbers
from dataclasses import dataclass
from typing import Optional, Tuple

from mcsim.errors import ConfigurationError

# Upper bounds of the statistics table
MAX_FLOWS = 200
MAX_ROUNDS = 500

POLICIES = ("none", "greedy", "sticky")

# Fraction of the nominal data rate treated as "running at capacity"
STICKY_THRESHOLD = 0.996


@dataclass(frozen=True)
class HarnessConfig:
    round_duration: float = 2.0     # seconds
    number_of_rounds: int = 10      # rounds scheduled after the warm-start round 0
    warmup_duration: float = 1.0    # seconds excluded from each measurement window
    output_name: str = "example-algorithms"
    printing_threshold: int = 0     # first round echoed to the console
    use_default_calculation: bool = True

    def __post_init__(self):
        if not self.round_duration > 0:
            raise ConfigurationError(
                f"Round duration must be positive, got {self.round_duration}")
        if not isinstance(self.number_of_rounds, numbers.Integral) or self.number_of_rounds < 0:
            raise ConfigurationError(
                f"Number of rounds must be a non-negative integer, got {self.number_of_rounds!r}")
        if self.warmup_duration < 0:
            raise ConfigurationError(
                f"Warmup time cannot be negative, got {self.warmup_duration}")
        if self.warmup_duration >= self.round_duration:
            raise ConfigurationError(
                "Warmup time cannot exceed time of a single round "
                f"(warmup={self.warmup_duration}, round={self.round_duration})")
        if not isinstance(self.printing_threshold, numbers.Integral) or self.printing_threshold < 0:
            raise ConfigurationError(
                f"Printing threshold must be a non-negative round index, got {self.printing_threshold!r}")
        if not isinstance(self.output_name, str) or not self.output_name:
            raise ConfigurationError("Output name must be a non-empty string")

    @property
    def total_rounds(self) -> int:
        """Round 0 plus every scheduled round"""
        return int(self.number_of_rounds) + 1

    @property
    def productive_duration(self) -> float:
        return self.round_duration - self.warmup_duration

    @property
    def stop_time(self) -> float:
        return self.total_rounds * self.round_duration

    @property
    def output_path(self) -> str:
        return self.output_name + ".csv"


@dataclass(frozen=True)
class PolicyConfig:
    name: str = "sticky"
    epsilon: float = 0.3
    sticky_counter: int = 2
    seed: Optional[int] = None

    def __post_init__(self):
        if self.name not in POLICIES:
            raise ConfigurationError(
                f"Unsupported epsilon algorithm {self.name!r}, expected one of {', '.join(POLICIES)}")
        if not 0.0 <= self.epsilon <= 1.0:
            raise ConfigurationError(
                f"Epsilon parameter should be in range <0, 1>, got {self.epsilon}")
        if not isinstance(self.sticky_counter, numbers.Integral) or self.sticky_counter < 0:
            raise ConfigurationError(
                f"Sticky counter must be a non-negative integer, got {self.sticky_counter!r}")


@dataclass(frozen=True)
class ScenarioConfig:
    # Offered load of each station (Mbit/s), also the sticky reference rate
    DATA_RATE_MBPS: Tuple[float, ...] = (12.0, 15.0)
    # Deliverable rate of each station on each AP, indexed [station][ap]
    LINK_CAPACITY_MBPS: Tuple[Tuple[float, ...], ...] = ((9.0, 14.0), (16.0, 11.0))
    PACKET_SIZE: int = 1472         # bytes
    TICK: float = 0.01              # traffic generation step (seconds)
    TRAFFIC: str = "constant"       # "constant" or "poisson"

    def __post_init__(self):
        if len(self.LINK_CAPACITY_MBPS) != len(self.DATA_RATE_MBPS):
            raise ConfigurationError("One row of link capacities is needed per station")
        if self.TRAFFIC not in ("constant", "poisson"):
            raise ConfigurationError(f"Unknown traffic model {self.TRAFFIC!r}")
        if not self.TICK > 0:
            raise ConfigurationError("Traffic tick must be positive")

    @property
    def n_stations(self) -> int:
        return len(self.DATA_RATE_MBPS)

    @property
    def n_aps(self) -> int:
        return len(self.LINK_CAPACITY_MBPS[0]) if self.LINK_CAPACITY_MBPS else 0


DEFAULT_SCENARIO = ScenarioConfig()
