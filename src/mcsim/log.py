# -*- coding: utf-8 -*-
"""Console logging for the command line scripts"""
import logging

from colorlog import ColoredFormatter

LOG_FORMAT = "  %(log_color)s%(levelname)-8s%(reset)s %(log_color)s%(name)s: %(message)s%(reset)s"


def setup_logging(level="INFO"):
    formatter = ColoredFormatter(
        LOG_FORMAT,
        datefmt=None,
        reset=True,
        log_colors={
            'DEBUG':    'cyan',
            'INFO':     'green',
            'WARNING':  'yellow',
            'ERROR':    'red',
            'CRITICAL': 'white,bg_red',
        },
        style='%'
    )
    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers[:] = [stream]
    root.setLevel(level.upper() if isinstance(level, str) else level)
    return root
