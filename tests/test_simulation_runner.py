"""Smoke tests for the headless simulation harness and CLI."""

from __future__ import annotations

import pytest

from director.simulation_runner import SimulationRunner
from main import build_parser, main


@pytest.fixture(scope="module")
def result():
    return SimulationRunner(seconds=180.0, seed=3, n_players=4).run()


class TestSimulationRunner:
    def test_encounters_stay_within_cap(self, result) -> None:
        assert 0 < result.encounters_spawned
        assert result.peak_active_encounters <= 3

    def test_round_end_retires_everything(self, result) -> None:
        assert result.encounters_ended == result.encounters_spawned

    def test_scaling_stays_bounded(self, result) -> None:
        assert 0.5 <= result.final_scaling <= 2.0
        assert result.final_profile == "medium"

    def test_pacing_cycles(self, result) -> None:
        assert result.phase_transitions >= 4

    def test_squads_follow_encounters(self, result) -> None:
        assert result.squads_formed <= result.encounters_spawned
        assert sum(result.encounter_mix.values()) == result.encounters_spawned

    def test_same_seed_same_round(self, result) -> None:
        again = SimulationRunner(seconds=180.0, seed=3, n_players=4).run()
        assert again == result


class TestCli:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.seconds == 300.0
        assert args.difficulty == "medium"

    def test_rejects_unknown_difficulty(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--difficulty", "nightmare"])

    def test_main_runs_and_plots(self, tmp_path, capsys: pytest.CaptureFixture) -> None:
        target = tmp_path / "trend.png"
        assert main(["--seconds", "40", "--seed", "1", "--players", "2",
                     "--difficulty", "hard", "--plot", str(target)]) == 0
        assert target.exists()
        out = capsys.readouterr().out
        assert "DIRECTOR SUMMARY" in out
        assert "Final profile    : hard" in out
