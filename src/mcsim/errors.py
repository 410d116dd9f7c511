# -*- coding: utf-8 -*-
"""
Exception types raised by the round harness.
"""


class HarnessError(Exception):
    """Base class for all harness errors"""


class ConfigurationError(HarnessError, ValueError):
    """Invalid configuration detected before any simulated time advances"""


class CapacityError(HarnessError, IndexError):
    """Flow or round index outside the statistics table"""


class ResultsWriteError(HarnessError, OSError):
    """The results table could not be written"""
