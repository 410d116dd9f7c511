# -*- coding: utf-8 -*-
"""
Example host for the harness: stations that can send to one of several access
points, one packet sink per (station, AP) pair.

This is a byte-counter model only. Every tick, a station offers traffic from
its traffic model to the AP whose interface is up; the AP delivers at most the
link capacity, with airtime split evenly among the stations associated to it.
Flow index of (station s, AP a) is s * n_aps + a.
"""
import logging
from functools import partial

import numpy as np

from mcsim.policy import Station
from mcsim.simcore import EventKind
from mcsim.traffic_model import build_traffic_model

logger = logging.getLogger(__name__)


class PacketSink:
    """Counts bytes received on one flow"""

    def __init__(self, station_id, ap_id):
        self.station_id = station_id
        self.ap_id = ap_id
        self.total_rx = 0

    def receive(self, n_bytes):
        self.total_rx += n_bytes

    def __repr__(self):
        return f"PacketSink(station={self.station_id}, ap={self.ap_id}, rx={self.total_rx}B)"


class WifiStation:
    """A station with one interface per AP; only one interface is up at a time"""

    def __init__(self, station_id, data_rate, link_capacities, traffic_model):
        self.station_id = station_id
        self.data_rate = data_rate
        self.link_capacities = tuple(link_capacities)
        self.traffic_model = traffic_model
        self.active_ap = None
        self.switches = 0

    def set_up(self, ap_id):
        if self.active_ap is not None and self.active_ap != ap_id:
            self.switches += 1
        self.active_ap = ap_id


class Network:
    def __init__(self, scenario, simulator, rng=None):
        self.scenario = scenario
        self.simulator = simulator
        self.rng = rng if rng is not None else np.random.RandomState()
        self.n_aps = scenario.n_aps
        self.stations = [
            WifiStation(s, rate, scenario.LINK_CAPACITY_MBPS[s],
                        build_traffic_model(scenario.TRAFFIC, rate, scenario.PACKET_SIZE))
            for s, rate in enumerate(scenario.DATA_RATE_MBPS)
        ]
        self.sinks = [PacketSink(s, a) for s in range(len(self.stations)) for a in range(self.n_aps)]
        self.stop_time = None

    # ---- byte counter capability used by the harness ----
    def __len__(self):
        return len(self.sinks)

    def get_cumulative_bytes(self, flow_index):
        return self.sinks[flow_index].total_rx

    def flow_index(self, station_id, ap_id):
        return station_id * self.n_aps + ap_id

    # ---- association ----
    def associate(self, station_id, ap_id):
        self.stations[station_id].set_up(ap_id)

    def randomize_connections(self):
        for station in self.stations:
            self.associate(station.station_id, 0 if self.rng.random_sample() < .5 else 1)

    def make_stations(self):
        """Policy-side view: each station's two arms and the callback that switches it"""
        if self.n_aps != 2:
            raise ValueError(f"Selection policies need exactly two APs, scenario has {self.n_aps}")
        return [
            Station(st.station_id,
                    (self.flow_index(st.station_id, 0), self.flow_index(st.station_id, 1)),
                    st.data_rate,
                    apply=partial(self.associate, st.station_id))
            for st in self.stations
        ]

    # ---- traffic ----
    def start(self, stop_time):
        """Generate traffic from t=0 until stop_time"""
        self.stop_time = stop_time
        self.simulator.schedule_at(0.0, partial(self._tick, 0), EventKind.EXTERNAL)

    def _tick(self, k):
        dt = self.scenario.TICK
        self.deliver(dt)
        next_time = round((k + 1) * dt, 9)
        if next_time < self.stop_time:
            self.simulator.schedule_at(next_time, partial(self._tick, k + 1), EventKind.EXTERNAL)

    def deliver(self, dt):
        """Move one step of traffic into the sinks of the active associations"""
        per_ap = {}
        for st in self.stations:
            if st.active_ap is not None:
                per_ap[st.active_ap] = per_ap.get(st.active_ap, 0) + 1
        for st in self.stations:
            offered = st.traffic_model.generate_bytes(dt, self.rng)
            if st.active_ap is None or offered == 0:
                continue
            airtime = 1.0 / per_ap[st.active_ap]
            capacity = st.link_capacities[st.active_ap] * 1e6 / 8.0 * dt * airtime
            delivered = int(min(offered, capacity))
            self.sinks[self.flow_index(st.station_id, st.active_ap)].receive(delivered)
