# -*- coding: utf-8 -*-
"""
Plot per-flow rewards from results tables.
Usage:
  python visualize.py --files example-algorithms.csv
  python visualize.py --results results
Figures are written to <results>/plots/.
"""
import argparse
import os
from glob import glob
from typing import List

import matplotlib
matplotlib.use('Agg')  # headless
import matplotlib.pyplot as plt
import seaborn as sns

from mcsim.results import load_results


def plot_rewards(path: str, out_path: str, run: int = -1):
    """Plot every RewardN column against StageNumber for one appended run"""
    df = load_results(path)
    runs = sorted(df['run'].unique())
    df = df[df['run'] == runs[run]]
    reward_cols = [c for c in df.columns if c.startswith('Reward')]

    plt.figure(figsize=(8, 5))
    sns.set_style('whitegrid')
    for col in reward_cols:
        plt.plot(df['StageNumber'], df[col], marker='o', label=col)
    plt.xlabel('Round')
    plt.ylabel('Reward (Mbps)')
    plt.title(os.path.splitext(os.path.basename(path))[0])
    plt.legend()
    plt.tight_layout()
    os.makedirs(os.path.dirname(out_path) or '.', exist_ok=True)
    plt.savefig(out_path, dpi=150)
    plt.close()
    print(f"Saved figure: {out_path}")
    return out_path


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument('--results', type=str, default='results', help='directory with results tables')
    ap.add_argument('--files', type=str, nargs='*', default=None, help='explicit results CSV files')
    ap.add_argument('--run', type=int, default=-1, help='which appended run to plot (default: last)')
    args = ap.parse_args()

    files: List[str]
    if not args.files:
        files = sorted(f for f in glob(os.path.join(args.results, '*.csv'))
                       if not f.endswith('compare.csv'))
        if not files:
            print(f"No results tables found in {args.results}.")
            return
    else:
        files = args.files

    plot_dir = os.path.join(args.results, 'plots')
    for f in files:
        name = os.path.splitext(os.path.basename(f))[0]
        plot_rewards(f, os.path.join(plot_dir, f"{name}.png"), run=args.run)


if __name__ == '__main__':
    main()
