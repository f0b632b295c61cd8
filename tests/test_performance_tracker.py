"""Unit tests for PerformanceTracker scoring, team aggregates and history."""

from __future__ import annotations

import dataclasses
import random
import threading

import pytest

from director.collaborators import TeamInfo
from director.performance_tracker import PerformanceTracker, PlayerMetrics
from settings import DIFFICULTY_LEVELS

from conftest import FakePlayer


class TestPlayerMetrics:
    def test_kd_ratio_without_deaths_is_kill_count(self) -> None:
        assert PlayerMetrics(kills=3).kd_ratio() == 3.0

    def test_kd_ratio_with_deaths(self) -> None:
        assert PlayerMetrics(kills=3, deaths=2).kd_ratio() == 1.5


class TestSkillLevel:
    def test_unknown_player_is_medium(self, tracker: PerformanceTracker) -> None:
        assert tracker.compute_skill_level("ghost") == "medium"

    def test_zero_deaths_does_not_divide(self, tracker: PerformanceTracker) -> None:
        for _ in range(3):
            tracker.record_kill("p1")
        # 75 from K/D alone
        assert tracker.compute_skill_level("p1") == "medium"

    def test_only_deaths_is_easy(self, tracker: PerformanceTracker) -> None:
        tracker.record_death("p1")
        assert tracker.compute_skill_level("p1") == "easy"

    def test_hard_band(self, tracker: PerformanceTracker) -> None:
        for _ in range(4):
            tracker.record_kill("p1")
        tracker.record_death("p1")
        tracker.record_accuracy("p1", 0.2)
        # 100 + 10
        assert tracker.compute_skill_level("p1") == "hard"

    def test_expert_band(self, tracker: PerformanceTracker) -> None:
        for _ in range(10):
            tracker.record_kill("p1")
        tracker.record_death("p1")
        tracker.record_accuracy("p1", 1.0)
        tracker.record_survival_time("p1", 60.0)
        assert tracker.compute_skill_level("p1") == "expert"

    def test_survival_contribution_is_capped(self, tracker: PerformanceTracker) -> None:
        tracker.record_death("p1")
        tracker.record_survival_time("p1", 10_000.0)
        # survival term tops out at 50, the bottom of the medium band
        assert tracker.compute_skill_level("p1") == "medium"

    def test_random_event_streams_always_classify(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            tracker = PerformanceTracker()
            for _ in range(rng.randint(0, 40)):
                roll = rng.random()
                if roll < 0.4:
                    tracker.record_kill("p")
                elif roll < 0.8:
                    tracker.record_death("p")
                else:
                    tracker.record_accuracy("p", rng.random())
            assert tracker.compute_skill_level("p") in DIFFICULTY_LEVELS


class TestAveragePerformance:
    def test_empty_is_neutral(self, tracker: PerformanceTracker) -> None:
        assert tracker.compute_average_performance() == 0.5

    def test_mean_over_players(self, tracker: PerformanceTracker) -> None:
        tracker.record_kill("p1")
        tracker.record_kill("p1")
        tracker.record_death("p1")
        tracker.record_accuracy("p1", 0.5)
        tracker.record_death("p2")
        # p1: 0.5 + 0.15, p2: 0.0
        assert tracker.compute_average_performance() == pytest.approx(0.325)

    def test_per_player_cap(self, tracker: PerformanceTracker) -> None:
        for _ in range(10):
            tracker.record_kill("p1")
        tracker.record_accuracy("p1", 1.0)
        for _ in range(5):
            tracker.record_objective_completion("p1")
        assert tracker.compute_average_performance() == pytest.approx(1.0)

    def test_objectives_raise_performance(self, tracker: PerformanceTracker) -> None:
        tracker.record_death("p1")
        tracker.record_objective_completion("p1")
        assert tracker.compute_average_performance() == pytest.approx(0.2)

    def test_result_in_unit_range(self) -> None:
        rng = random.Random(11)
        tracker = PerformanceTracker()
        for _ in range(500):
            pid = f"p{rng.randint(1, 4)}"
            getattr(tracker, rng.choice(
                ["record_kill", "record_death", "record_objective_completion"]
            ))(pid)
            perf = tracker.compute_average_performance()
            assert 0.0 <= perf <= 1.0


class TestRecording:
    def test_accuracy_is_clamped(self, tracker: PerformanceTracker) -> None:
        tracker.record_accuracy("p1", 1.7)
        assert tracker.player_metrics("p1").accuracy == 1.0

    def test_damage_accumulates(self, tracker: PerformanceTracker) -> None:
        tracker.record_damage_dealt("p1", 10.0)
        tracker.record_damage_dealt("p1", 5.5)
        tracker.record_damage_taken("p1", 3.0)
        metrics = tracker.player_metrics("p1")
        assert metrics.damage_dealt == pytest.approx(15.5)
        assert metrics.damage_taken == pytest.approx(3.0)

    def test_player_metrics_is_a_copy(self, tracker: PerformanceTracker) -> None:
        tracker.record_kill("p1")
        tracker.player_metrics("p1").kills = 99
        assert tracker.player_metrics("p1").kills == 1

    def test_unknown_player_metrics_is_none(self, tracker: PerformanceTracker) -> None:
        assert tracker.player_metrics("nobody") is None

    def test_concurrent_recording(self, tracker: PerformanceTracker) -> None:
        def feed() -> None:
            for _ in range(1000):
                tracker.record_kill("p1")

        threads = [threading.Thread(target=feed) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert tracker.player_metrics("p1").kills == 4000

    def test_reset_drops_everything(self, tracker: PerformanceTracker) -> None:
        tracker.record_kill("p1")
        tracker.analyze([FakePlayer("p1")], [TeamInfo("alpha", [FakePlayer("p1")])])
        tracker.reset()
        assert tracker.tracked_players == 0
        assert tracker.all_team_metrics() == {}
        assert tracker.compute_average_performance() == 0.5


class TestAnalyze:
    def test_returns_skill_per_player(self, tracker: PerformanceTracker) -> None:
        tracker.record_death("p1")
        skills = tracker.analyze([FakePlayer("p1"), FakePlayer("p2")], [])
        assert skills == {"p1": "easy", "p2": "easy"}

    def test_stats_provider_overwrites_counters(self, tracker: PerformanceTracker) -> None:
        players = [FakePlayer("p1")]
        stats = {"p1": {"accuracy": 0.8, "survival_time": 45.0, "kills": None}}
        tracker.record_kill("p1")
        tracker.analyze(players, [], lambda p: stats.get(p.player_id))
        metrics = tracker.player_metrics("p1")
        assert metrics.accuracy == 0.8
        assert metrics.survival_time == 45.0
        assert metrics.kills == 1

    def test_provider_returning_none_is_ignored(self, tracker: PerformanceTracker) -> None:
        tracker.record_kill("p1")
        tracker.analyze([FakePlayer("p1")], [], lambda p: None)
        assert tracker.player_metrics("p1").kills == 1

    def test_team_aggregates(self, tracker: PerformanceTracker) -> None:
        a, b = FakePlayer("a"), FakePlayer("b")
        tracker.record_kill("a")
        tracker.record_kill("a")
        tracker.record_death("b")
        tracker.record_accuracy("a", 0.6)
        tracker.record_accuracy("b", 0.2)
        tracker.record_objective_completion("b")
        tracker.analyze([a, b], [TeamInfo("alpha", [a, b])])

        team = tracker.team_metrics("alpha")
        assert team.kills_sum == 2
        assert team.deaths_sum == 1
        assert team.average_accuracy == pytest.approx(0.4)
        assert team.objectives_completed == 1

    def test_empty_team(self, tracker: PerformanceTracker) -> None:
        tracker.analyze([], [TeamInfo("ghosts", [])])
        assert tracker.team_metrics("ghosts").average_accuracy == 0.0


class TestSnapshots:
    def _snap(self, tracker: PerformanceTracker, t: float):
        return tracker.snapshot(t, "medium", 1.0, 0.5, "building")

    def test_history_is_bounded(self) -> None:
        tracker = PerformanceTracker(history_size=3)
        for t in range(5):
            self._snap(tracker, float(t))
        history = tracker.history
        assert len(history) == 3
        assert [s.timestamp for s in history] == [2.0, 3.0, 4.0]

    def test_default_capacity_is_100(self, tracker: PerformanceTracker) -> None:
        for t in range(150):
            self._snap(tracker, float(t))
        assert len(tracker.history) == 100
        assert tracker.history[0].timestamp == 50.0

    def test_snapshot_is_frozen_copy(self, tracker: PerformanceTracker) -> None:
        tracker.record_kill("p1")
        snap = self._snap(tracker, 0.0)
        tracker.record_kill("p1")
        assert snap.player_metrics["p1"].kills == 1
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.scaling_factor = 2.0

    def test_reset_keeps_history(self, tracker: PerformanceTracker) -> None:
        self._snap(tracker, 0.0)
        tracker.reset()
        assert len(tracker.history) == 1
