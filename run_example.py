# -*- coding: utf-8 -*-
"""
Two stations, two access points: each round every station picks an AP with the
selected policy; per-flow rewards are appended to <output-name>.csv.

Usage:
    python run_example.py --epsilon-type sticky --num-rounds 10
    python run_example.py --epsilon-type greedy --epsilon-value 0.1 --output-name results/greedy
"""
import argparse
import logging
import sys
from dataclasses import replace

from mcsim.config import DEFAULT_SCENARIO, HarnessConfig, PolicyConfig
from mcsim.errors import ConfigurationError
from mcsim.experiment import run_experiment
from mcsim.log import setup_logging

logger = logging.getLogger("run_example")


def build_parser():
    ap = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    ap.add_argument('--round-time', type=float, default=2.0, help='Duration of single round')
    ap.add_argument('--num-rounds', type=int, default=10, help='Number of rounds')
    ap.add_argument('--printing', type=int, default=0,
                    help='Number of stage from which results will be printed')
    ap.add_argument('--round-warmup', type=float, default=1.0, help='Warmup time for each round')
    ap.add_argument('--epsilon-type', type=str, default='sticky',
                    help='Type of epsilon algorithm. Available types: none, greedy, sticky')
    ap.add_argument('--epsilon-value', type=float, default=0.3, help='Value of epsilon parameter')
    ap.add_argument('--sticky-counter', type=int, default=2,
                    help='Sticky counter, used in epsilon sticky algorithm')
    ap.add_argument('--output-name', type=str, default='example-algorithms',
                    help='Name of the output file with results')
    ap.add_argument('--traffic', type=str, default=DEFAULT_SCENARIO.TRAFFIC,
                    help='Offered traffic model: constant or poisson')
    ap.add_argument('--seed', type=int, default=None)
    ap.add_argument('--log-level', type=str, default='INFO')
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        harness_cfg = HarnessConfig(
            round_duration=args.round_time,
            number_of_rounds=args.num_rounds,
            warmup_duration=args.round_warmup,
            output_name=args.output_name,
            printing_threshold=args.printing,
        )
        policy_cfg = PolicyConfig(
            name=args.epsilon_type,
            epsilon=args.epsilon_value,
            sticky_counter=args.sticky_counter,
            seed=args.seed,
        )
        scenario = DEFAULT_SCENARIO
        if args.traffic != scenario.TRAFFIC:
            scenario = replace(scenario, TRAFFIC=args.traffic)
    except ConfigurationError as e:
        logger.error("%s", e)
        return 1

    result = run_experiment(harness_cfg, policy_cfg, scenario, seed=args.seed)
    summary = result.summary()
    logger.info("Mean aggregate throughput %.3f Mbps over %d rounds, %d AP switches",
                summary["mean_throughput_mbps"], summary["rounds"], summary["switches"])
    logger.info("Results appended to %s", harness_cfg.output_path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
