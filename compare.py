# -*- coding: utf-8 -*-
"""
Compare the three selection policies on the same seeds and save a summary CSV.

Usage:
    python compare.py --seeds 42 43 44 --num-rounds 20 --out results/compare.csv
"""
import argparse
import logging
import os

import pandas as pd
from tqdm import tqdm

from mcsim.config import POLICIES, HarnessConfig, PolicyConfig
from mcsim.experiment import run_experiment
from mcsim.log import setup_logging


def compare_policies(seeds, number_of_rounds=20, round_duration=2.0, warmup_duration=1.0,
                     epsilon=0.3, sticky_counter=2, output_dir='results'):
    rows = []
    runs = [(name, s) for name in POLICIES for s in seeds]
    for name, seed in tqdm(runs, desc="Policies"):
        harness_cfg = HarnessConfig(
            round_duration=round_duration,
            number_of_rounds=number_of_rounds,
            warmup_duration=warmup_duration,
            output_name=os.path.join(output_dir, f"{name}_seed{seed}"),
            # keep the console quiet, the CSV still gets every round
            printing_threshold=number_of_rounds + 1,
        )
        policy_cfg = PolicyConfig(name=name, epsilon=epsilon, sticky_counter=sticky_counter, seed=seed)
        result = run_experiment(harness_cfg, policy_cfg, seed=seed)
        row = {"seed": seed}
        row.update(result.summary())
        rows.append(row)
    return pd.DataFrame(rows)


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument('--seeds', type=int, nargs='+', default=[42, 43, 44])
    ap.add_argument('--num-rounds', type=int, default=20)
    ap.add_argument('--round-time', type=float, default=2.0)
    ap.add_argument('--round-warmup', type=float, default=1.0)
    ap.add_argument('--epsilon-value', type=float, default=0.3)
    ap.add_argument('--sticky-counter', type=int, default=2)
    ap.add_argument('--out', type=str, default='results/compare.csv')
    args = ap.parse_args()
    setup_logging(logging.WARNING)

    out_dir = os.path.dirname(args.out) or '.'
    df = compare_policies(args.seeds, args.num_rounds, args.round_time, args.round_warmup,
                          args.epsilon_value, args.sticky_counter, output_dir=out_dir)
    print(df)
    print(df.groupby("policy")[["mean_throughput_mbps", "switches"]].mean())
    os.makedirs(out_dir, exist_ok=True)
    df.to_csv(args.out, index=False)
    print("Saved:", args.out)


if __name__ == "__main__":
    main()
