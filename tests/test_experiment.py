# End-to-end runs of the two-AP example: experiment wiring, CLI, policy comparison.

import logging

import pandas as pd
import pytest
from colorlog import ColoredFormatter

from mcsim.config import HarnessConfig, PolicyConfig
from mcsim.experiment import run_experiment
from mcsim.log import setup_logging
from mcsim.results import load_results

import compare
import run_example
import visualize


def quick_config(tmp_path, name="run", rounds=3):
    return HarnessConfig(round_duration=1.0, warmup_duration=0.5, number_of_rounds=rounds,
                         output_name=str(tmp_path / name), printing_threshold=rounds + 1)


class TestRunExperiment:
    def test_one_row_per_round(self, tmp_path):
        cfg = quick_config(tmp_path)
        result = run_experiment(cfg, PolicyConfig(name="greedy", epsilon=0.1), seed=5)

        df = load_results(cfg.output_path)
        assert df["StageNumber"].tolist() == [0, 1, 2, 3]
        assert list(df.columns) == ["StageNumber", "Reward0", "Reward1", "Reward2", "Reward3", "run"]
        assert result.harness.current_round == 4
        assert result.simulator.now == cfg.stop_time

    def test_summary(self, tmp_path):
        result = run_experiment(quick_config(tmp_path), PolicyConfig(name="sticky"), seed=1)
        summary = result.summary()
        assert set(summary) == {"policy", "rounds", "mean_throughput_mbps",
                                "final_throughput_mbps", "switches"}
        assert summary["policy"] == "sticky"
        assert summary["rounds"] == 4
        # both stations always send somewhere
        assert summary["mean_throughput_mbps"] > 0

    def test_each_station_uses_one_flow_per_round(self, tmp_path):
        result = run_experiment(quick_config(tmp_path), PolicyConfig(name="none"), seed=3)
        throughput = result.harness.get_throughput_array()
        for station in range(2):
            active = (throughput[2 * station:2 * station + 2] > 0).sum(axis=0)
            assert active.tolist() == [1, 1, 1, 1]

    def test_same_seed_same_rewards(self, tmp_path):
        a = run_experiment(quick_config(tmp_path, "a"), PolicyConfig(name="greedy"), seed=11)
        b = run_experiment(quick_config(tmp_path, "b"), PolicyConfig(name="greedy"), seed=11)
        assert a.harness.get_reward_array().tolist() == b.harness.get_reward_array().tolist()
        assert a.policy.decisions == b.policy.decisions


class TestRunExampleCli:
    @pytest.fixture(autouse=True)
    def keep_root_handlers(self, monkeypatch):
        monkeypatch.setattr(run_example, "setup_logging", lambda level: None)

    def test_warmup_longer_than_round_fails(self, tmp_path):
        code = run_example.main(["--round-time", "1", "--round-warmup", "1",
                                 "--output-name", str(tmp_path / "x")])
        assert code == 1
        assert not (tmp_path / "x.csv").exists()

    def test_unknown_policy_fails(self, tmp_path):
        code = run_example.main(["--epsilon-type", "ucb", "--output-name", str(tmp_path / "x")])
        assert code == 1

    def test_valid_run(self, tmp_path, capsys):
        out = tmp_path / "example"
        code = run_example.main(["--num-rounds", "2", "--round-time", "1", "--round-warmup", "0.5",
                                 "--printing", "2", "--seed", "4", "--output-name", str(out)])
        assert code == 0
        assert len(pd.read_csv(str(out) + ".csv")) == 3
        stdout = capsys.readouterr().out
        assert "Results for round 2: " in stdout
        assert "Results for round 1: " not in stdout


def test_compare_policies(tmp_path):
    df = compare.compare_policies([1, 2], number_of_rounds=2, round_duration=1.0,
                                  warmup_duration=0.5, output_dir=str(tmp_path))
    assert len(df) == 6
    assert sorted(df["policy"].unique()) == ["greedy", "none", "sticky"]
    assert (tmp_path / "sticky_seed2.csv").exists()


def test_setup_logging_installs_colored_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ColoredFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_plot_rewards_picks_last_run(tmp_path):
    csv = tmp_path / "rewards.csv"
    csv.write_text("StageNumber,Reward0,Reward1\n0,1.0,2.0\n1,1.5,2.0\n0,3.0,0.0\n1,3.0,1.0\n2,3.0,1.0\n")
    df = load_results(str(csv))
    assert df["run"].tolist() == [0, 0, 1, 1, 1]

    out = visualize.plot_rewards(str(csv), str(tmp_path / "plots" / "rewards.png"))
    assert (tmp_path / "plots" / "rewards.png").exists()
    assert out.endswith("rewards.png")
