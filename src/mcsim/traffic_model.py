# -*- coding: utf-8 -*-
"""
Offered traffic models for the example scenario
"""


class TrafficModel:
    """Base class for traffic models"""

    def __init__(self, rate_mbps, packet_size):
        self.rate_mbps = rate_mbps
        self.packet_size = packet_size

    def expected_packets(self, time_step):
        return self.rate_mbps * 1e6 / 8.0 * time_step / self.packet_size

    def generate_bytes(self, time_step, rng):
        """Bytes offered during one time step"""
        raise NotImplementedError


class ConstantRateTrafficModel(TrafficModel):
    """Constant bit rate source - whole packets, fractional remainder carried over"""

    def __init__(self, rate_mbps, packet_size):
        super().__init__(rate_mbps, packet_size)
        self.backlog = 0.0

    def generate_bytes(self, time_step, rng):
        self.backlog += self.expected_packets(time_step)
        packets = int(self.backlog)
        self.backlog -= packets
        return packets * self.packet_size


class PoissonTrafficModel(TrafficModel):
    """Poisson traffic model - packet count per step follows a Poisson distribution"""

    def generate_bytes(self, time_step, rng):
        num_packets = rng.poisson(self.expected_packets(time_step))
        return int(num_packets) * self.packet_size


def build_traffic_model(kind, rate_mbps, packet_size):
    if kind == "constant":
        return ConstantRateTrafficModel(rate_mbps, packet_size)
    if kind == "poisson":
        return PoissonTrafficModel(rate_mbps, packet_size)
    raise ValueError(f"Unknown traffic model {kind!r}")
