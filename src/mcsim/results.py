# -*- coding: utf-8 -*-
"""
Results table: one CSV row of per-flow rewards per round.

The table is append-only. A header is written only when the file does not
exist yet, so repeated runs with the same output name accumulate rows under a
single header.
"""
import os

import pandas as pd

from mcsim.errors import ResultsWriteError


def results_header(n_flows):
    return ["StageNumber"] + [f"Reward{i}" for i in range(n_flows)]


class ResultsSink:
    def __init__(self, path, n_flows, printing_threshold=0):
        self.path = path
        self.n_flows = n_flows
        self.printing_threshold = printing_threshold
        self.rows_written = 0

    def echo(self, round_idx, rewards):
        print(f"Results for round {round_idx}: ")
        for i, value in enumerate(rewards):
            print(f"Reward for application number {i}: {value}")

    def append(self, round_idx, rewards):
        """
        Append one row; raises ResultsWriteError when the file cannot be written.
        """
        row = [int(round_idx)] + [float(v) for v in rewards]
        df = pd.DataFrame([row], columns=results_header(self.n_flows))
        try:
            parent = os.path.dirname(self.path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            exists = os.path.exists(self.path)
            df.to_csv(self.path, mode="a", header=not exists, index=False, encoding="utf-8")
        except OSError as e:
            raise ResultsWriteError(f"Cannot write results to '{self.path}': {e}") from e
        self.rows_written += 1

    def handle(self, round_idx, rewards):
        if round_idx >= self.printing_threshold:
            self.echo(round_idx, rewards)
        self.append(round_idx, rewards)


def load_results(path):
    """
    Read a results table back. Each appended run gets its own `run` number;
    a run starts wherever StageNumber stops increasing.
    """
    df = pd.read_csv(path)
    restarts = df["StageNumber"].diff().fillna(-1) <= 0
    df["run"] = restarts.cumsum() - 1
    return df
