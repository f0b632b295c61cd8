"""
difficulty_controller.py – Closed-loop global difficulty scaling.

Two knobs shape how hard the opposition plays:

  profile         – one of four named static bundles (easy / medium /
                    hard / expert) chosen by the player or an admin.
  scaling factor  – continuous multiplier in [0.5, 2.0] that the
                    controller nudges every analysis interval.

Each adaptive pass compares the average player performance against a
60 % target.  Outside a ±0.1 deadband the scaling factor moves one fixed
0.05 step toward harder (players cruising) or easier (players
struggling).  Small constant steps keep the change invisible; switching
the named profile never throws the learned trend away.

Output: ``adaptive_multipliers`` – profile value × scaling factor for each
of the five axes, read by the encounter scheduler and actor behaviour.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from settings import (
    DIFFICULTY_EASY, DIFFICULTY_MEDIUM, DIFFICULTY_HARD, DIFFICULTY_EXPERT,
    DEFAULT_DIFFICULTY, TARGET_PERFORMANCE, PERFORMANCE_DEADBAND,
    SCALING_STEP, SCALING_MIN, SCALING_MAX,
)
from director.events import DifficultyChanged, NotificationSink
from utils import clamp

logger = logging.getLogger(__name__)

AXES = ("reaction_time", "accuracy", "aggression", "spawn_rate", "health")


# ══════════════════════════════════════════════════════════
#  Profiles
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DifficultyProfile:
    """Static per-axis values for one named difficulty level."""

    name: str
    reaction_time: float
    accuracy: float
    aggression: float
    spawn_rate: float
    health: float
    description: str = ""

    @classmethod
    def from_params(cls, name: str, params: dict) -> "DifficultyProfile":
        return cls(name=name, **params)

    def value(self, axis: str) -> float:
        return getattr(self, axis)


DIFFICULTY_PROFILES: dict[str, DifficultyProfile] = {
    "easy":   DifficultyProfile.from_params("easy",   DIFFICULTY_EASY),
    "medium": DifficultyProfile.from_params("medium", DIFFICULTY_MEDIUM),
    "hard":   DifficultyProfile.from_params("hard",   DIFFICULTY_HARD),
    "expert": DifficultyProfile.from_params("expert", DIFFICULTY_EXPERT),
}


# ══════════════════════════════════════════════════════════
#  Configuration / State
# ══════════════════════════════════════════════════════════

@dataclass
class ControllerConfig:
    """Tunable knobs for the difficulty controller."""

    target_performance: float = TARGET_PERFORMANCE
    deadband: float = PERFORMANCE_DEADBAND
    step: float = SCALING_STEP
    scaling_min: float = SCALING_MIN
    scaling_max: float = SCALING_MAX


@dataclass
class DifficultyState:
    """Mutable difficulty state – written only by DifficultyController."""

    profile_name: str = DEFAULT_DIFFICULTY
    scaling_factor: float = 1.0
    adaptive_multipliers: dict[str, float] = field(default_factory=dict)


# ══════════════════════════════════════════════════════════
#  Difficulty Controller
# ══════════════════════════════════════════════════════════

class DifficultyController:
    """Feedback controller over the global scaling factor.

    Usage:
        controller = DifficultyController(tracker, sink)
        # every analysis interval:
        controller.adjust()
        mults = controller.state.adaptive_multipliers
    """

    def __init__(self, tracker, sink: NotificationSink | None = None,
                 config: ControllerConfig | None = None,
                 profiles: dict[str, DifficultyProfile] | None = None):
        self.cfg = config or ControllerConfig()
        self._tracker = tracker
        self._sink = sink or NotificationSink()
        self._profiles = dict(profiles or DIFFICULTY_PROFILES)
        self._state = DifficultyState()
        self._adaptive_enabled: bool = True
        self._recompute_multipliers()

    @property
    def state(self) -> DifficultyState:
        return self._state

    @property
    def profiles(self) -> dict[str, DifficultyProfile]:
        return dict(self._profiles)

    @property
    def profile(self) -> DifficultyProfile:
        return self._profiles[self._state.profile_name]

    @property
    def adaptive_enabled(self) -> bool:
        return self._adaptive_enabled

    # ══════════════════════════════════════════════════════
    #  Adaptive pass (once per analysis interval)
    # ══════════════════════════════════════════════════════

    def adjust(self, average_performance: float | None = None):
        """Nudge the scaling factor toward the target success rate.

        Args:
            average_performance: override for the tracker's average
                (the tracker is read when omitted).
        """
        if not self._adaptive_enabled:
            return

        cfg = self.cfg
        if average_performance is None:
            average_performance = self._tracker.compute_average_performance()

        delta = average_performance - cfg.target_performance
        if abs(delta) > cfg.deadband:
            step = cfg.step if delta > 0 else -cfg.step
            old = self._state.scaling_factor
            # stays on the step grid so repeated steps sum exactly
            self._state.scaling_factor = round(
                clamp(old + step, cfg.scaling_min, cfg.scaling_max), 6,
            )
            if self._state.scaling_factor != old:
                logger.info(
                    "Difficulty scaling %.2f → %.2f (perf=%.2f, delta=%+.2f)",
                    old, self._state.scaling_factor, average_performance, delta,
                )
        else:
            logger.debug("Performance %.2f within deadband – scaling held at %.2f",
                         average_performance, self._state.scaling_factor)

        self._recompute_multipliers()
        self._broadcast()

    # ══════════════════════════════════════════════════════
    #  Manual control
    # ══════════════════════════════════════════════════════

    def set_global_difficulty(self, name: str):
        """Switch the named baseline profile; unknown names are ignored."""
        if name not in self._profiles:
            logger.debug("Ignoring unknown difficulty profile %r", name)
            return
        self._state.profile_name = name
        self._recompute_multipliers()
        self._broadcast()
        logger.info("Global difficulty set to %s", name)

    def set_adaptive_difficulty(self, enabled: bool):
        """Turn the feedback loop on or off; metrics keep flowing either way."""
        self._adaptive_enabled = bool(enabled)
        logger.info("Adaptive difficulty %s", "enabled" if enabled else "disabled")

    def get_difficulty_settings(self, name: str | None = None) -> dict[str, float]:
        """Effective per-axis values for *name* (default: current profile)."""
        profile = self._profiles.get(name or self._state.profile_name)
        if profile is None:
            return {}
        scale = self._state.scaling_factor
        return {axis: profile.value(axis) * scale for axis in AXES}

    # ══════════════════════════════════════════════════════
    #  Internals / Reset
    # ══════════════════════════════════════════════════════

    def _recompute_multipliers(self):
        profile = self.profile
        scale = self._state.scaling_factor
        self._state.adaptive_multipliers = {
            axis: profile.value(axis) * scale for axis in AXES
        }

    def _broadcast(self):
        self._sink.emit(DifficultyChanged(
            profile_name=self._state.profile_name,
            scaling_factor=self._state.scaling_factor,
            adaptive_multipliers=dict(self._state.adaptive_multipliers),
        ))

    def reset(self):
        """Full session reset – scaling back to neutral, profile kept."""
        self._state.scaling_factor = 1.0
        self._recompute_multipliers()
