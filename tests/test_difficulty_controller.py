"""Unit tests for the closed-loop DifficultyController."""

from __future__ import annotations

import pytest

from director.difficulty_controller import (
    AXES, ControllerConfig, DIFFICULTY_PROFILES, DifficultyController,
)
from director.events import DifficultyChanged, RecordingSink
from director.performance_tracker import PerformanceTracker


class TestAdaptivePass:
    def test_five_high_passes_reach_1_25(self, controller: DifficultyController) -> None:
        for _ in range(5):
            controller.adjust(0.9)
        assert controller.state.scaling_factor == 1.25

    def test_low_performance_eases_off(self, controller: DifficultyController) -> None:
        controller.adjust(0.2)
        assert controller.state.scaling_factor == 0.95

    def test_clamped_at_maximum(self, controller: DifficultyController) -> None:
        for _ in range(100):
            controller.adjust(1.0)
        assert controller.state.scaling_factor == 2.0

    def test_clamped_at_minimum(self, controller: DifficultyController) -> None:
        for _ in range(100):
            controller.adjust(0.0)
        assert controller.state.scaling_factor == 0.5

    @pytest.mark.parametrize("perf", [0.55, 0.6, 0.65])
    def test_deadband_holds(self, controller: DifficultyController, perf: float) -> None:
        controller.adjust(perf)
        assert controller.state.scaling_factor == 1.0

    def test_neutral_tracker_holds(self, controller: DifficultyController) -> None:
        # nobody tracked → 0.5, just inside the deadband
        for _ in range(10):
            controller.adjust()
        assert controller.state.scaling_factor == 1.0

    def test_reads_tracker_when_not_given(self, tracker: PerformanceTracker,
                                          controller: DifficultyController) -> None:
        for _ in range(10):
            tracker.record_kill("p1")
        tracker.record_accuracy("p1", 1.0)
        controller.adjust()
        assert controller.state.scaling_factor == 1.05

    def test_disabled_loop_does_nothing(self, controller: DifficultyController,
                                        sink: RecordingSink) -> None:
        controller.set_adaptive_difficulty(False)
        controller.adjust(1.0)
        assert controller.state.scaling_factor == 1.0
        assert sink.of_type(DifficultyChanged.type) == []
        assert controller.adaptive_enabled is False

    def test_emits_on_every_pass(self, controller: DifficultyController,
                                 sink: RecordingSink) -> None:
        controller.adjust(0.6)
        controller.adjust(0.9)
        events = sink.of_type(DifficultyChanged.type)
        assert len(events) == 2
        assert events[-1].scaling_factor == 1.05
        assert events[-1].profile_name == "medium"

    def test_custom_config(self, tracker: PerformanceTracker) -> None:
        controller = DifficultyController(tracker, config=ControllerConfig(step=0.25))
        controller.adjust(0.9)
        assert controller.state.scaling_factor == 1.25


class TestMultipliers:
    def test_profile_times_scaling(self, controller: DifficultyController) -> None:
        for _ in range(5):
            controller.adjust(0.9)
        profile = DIFFICULTY_PROFILES["medium"]
        mults = controller.state.adaptive_multipliers
        assert set(mults) == set(AXES)
        for axis in AXES:
            assert mults[axis] == pytest.approx(profile.value(axis) * 1.25)

    def test_recomputed_on_profile_switch(self, controller: DifficultyController) -> None:
        controller.set_global_difficulty("expert")
        expert = DIFFICULTY_PROFILES["expert"]
        assert controller.state.adaptive_multipliers["accuracy"] == pytest.approx(
            expert.accuracy
        )

    def test_get_difficulty_settings(self, controller: DifficultyController) -> None:
        controller.adjust(0.0)
        settings = controller.get_difficulty_settings("hard")
        assert settings["health"] == pytest.approx(
            DIFFICULTY_PROFILES["hard"].health * 0.95
        )

    def test_get_difficulty_settings_unknown(self, controller: DifficultyController) -> None:
        assert controller.get_difficulty_settings("nightmare") == {}


class TestManualControl:
    def test_switch_profile_keeps_scaling(self, controller: DifficultyController,
                                          sink: RecordingSink) -> None:
        controller.adjust(0.9)
        controller.set_global_difficulty("hard")
        assert controller.state.profile_name == "hard"
        assert controller.state.scaling_factor == 1.05
        assert sink.of_type(DifficultyChanged.type)[-1].profile_name == "hard"

    def test_unknown_profile_ignored(self, controller: DifficultyController,
                                     sink: RecordingSink) -> None:
        controller.set_global_difficulty("nightmare")
        assert controller.state.profile_name == "medium"
        assert sink.events == []

    def test_reset_returns_to_neutral(self, controller: DifficultyController) -> None:
        controller.set_global_difficulty("easy")
        controller.adjust(1.0)
        controller.reset()
        assert controller.state.scaling_factor == 1.0
        assert controller.state.profile_name == "easy"

    def test_profiles_cover_all_levels(self, controller: DifficultyController) -> None:
        assert list(controller.profiles) == ["easy", "medium", "hard", "expert"]
