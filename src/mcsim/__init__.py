# -*- coding: utf-8 -*-
"""
mcsim - round-based Monte Carlo harness for access point selection experiments
"""
from mcsim.config import (DEFAULT_SCENARIO, MAX_FLOWS, MAX_ROUNDS, POLICIES,
                          HarnessConfig, PolicyConfig, ScenarioConfig)
from mcsim.errors import CapacityError, ConfigurationError, HarnessError, ResultsWriteError
from mcsim.harness import MonteCarloHarness
from mcsim.policy import (EpsilonGreedyPolicy, RandomPolicy, Station,
                          StickyEpsilonGreedyPolicy, build_policy)
from mcsim.results import ResultsSink, load_results
from mcsim.simcore import EventKind, Simulator, Task

__version__ = "0.1.0"
