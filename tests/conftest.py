# Shared fixtures for the harness test suite

import pytest

from mcsim.config import HarnessConfig
from mcsim.simcore import Simulator


class CounterFlows:
    """Byte counters set directly by the test"""

    def __init__(self, n_flows):
        self.counters = [0] * n_flows

    def __len__(self):
        return len(self.counters)

    def get_cumulative_bytes(self, flow_index):
        return self.counters[flow_index]


class ClockFlows:
    """Byte counters growing linearly with simulated time"""

    def __init__(self, simulator, bytes_per_second):
        self.simulator = simulator
        self.bytes_per_second = list(bytes_per_second)

    def __len__(self):
        return len(self.bytes_per_second)

    def get_cumulative_bytes(self, flow_index):
        return int(self.bytes_per_second[flow_index] * self.simulator.now)


class ScriptedRng:
    """Stands in for numpy RandomState with a fixed sequence of draws"""

    def __init__(self, draws):
        self.draws = list(draws)

    def random_sample(self):
        return self.draws.pop(0)


def noop(harness):
    return None


@pytest.fixture
def sim():
    return Simulator()


@pytest.fixture
def make_config(tmp_path):
    def _make(**kwargs):
        kwargs.setdefault("output_name", str(tmp_path / "rewards"))
        kwargs.setdefault("round_duration", 2.0)
        kwargs.setdefault("warmup_duration", 1.0)
        kwargs.setdefault("number_of_rounds", 4)
        return HarnessConfig(**kwargs)
    return _make
