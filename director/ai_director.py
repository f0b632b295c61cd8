"""
ai_director.py – The Adaptive Director: orchestrates every sub-system.

Architecture:
    ai_director.AdaptiveDirector
      ├── performance_tracker.PerformanceTracker   (measure)
      ├── difficulty_controller.DifficultyController (decide: scaling)
      ├── pacing.PacingStateMachine                (decide: rhythm)
      ├── encounter_scheduler.EncounterScheduler   (actuate: spawns)
      └── squad_coordinator.SquadCoordinator       (formation / alerts)

Time is simulated: the host calls ``tick(dt)`` from its own loop (or a
test calls it with fixed steps).  Every tick runs the squad update.  Each
time ``analysis_interval`` seconds have accumulated, one analysis pass
runs, strictly in order:

    analyze → snapshot → adjust difficulty → advance pacing → manage encounters

Game events (kills, deaths, damage, objectives) may arrive at any time
between ticks, from any thread; the tracker serialises them.

No exception escapes ``tick``: a failing step is logged with its
traceback and the remaining steps still run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from settings import ANALYSIS_INTERVAL
from director.collaborators import DirectorContext
from director.difficulty_controller import ControllerConfig, DifficultyController
from director.encounter_scheduler import (
    ActiveEncounter, EncounterScheduler, SchedulerConfig,
)
from director.pacing import PacingConfig, PacingPhase, PacingStateMachine
from director.performance_tracker import PerformanceTracker
from director.squad_coordinator import SquadConfig, SquadCoordinator

logger = logging.getLogger(__name__)


@dataclass
class DirectorConfig:
    """Top-level knobs; per-component configs default from settings."""

    analysis_interval: float = ANALYSIS_INTERVAL
    controller: ControllerConfig | None = None
    pacing: PacingConfig | None = None
    scheduler: SchedulerConfig | None = None
    squads: SquadConfig | None = None


class AdaptiveDirector:
    """Closed-loop director over difficulty, pacing and encounters.

    Usage:
        director = AdaptiveDirector(DirectorContext(roster=..., spawner=...))
        director.on_round_start()
        # game loop:
        director.tick(dt)
        director.on_player_kill("p1")
    """

    def __init__(self, ctx: DirectorContext | None = None,
                 config: DirectorConfig | None = None):
        self.ctx = ctx or DirectorContext()
        self.cfg = config or DirectorConfig()
        if self.cfg.analysis_interval <= 0:
            raise ValueError("analysis_interval must be positive")

        sink = self.ctx.sink
        self.tracker = PerformanceTracker()
        self.difficulty = DifficultyController(self.tracker, sink, self.cfg.controller)
        self.pacing = PacingStateMachine(sink, self.cfg.pacing)
        self.scheduler = EncounterScheduler(
            self.ctx, self.difficulty, self.pacing, self.tracker, self.cfg.scheduler,
        )
        self.squads = SquadCoordinator(self.ctx, self.cfg.squads)

        self._clock: float = 0.0
        self._since_analysis: float = 0.0
        self._passes: int = 0

    @property
    def now(self) -> float:
        """Simulated seconds since the director was created."""
        return self._clock

    @property
    def analysis_passes(self) -> int:
        return self._passes

    # ══════════════════════════════════════════════════════
    #  Tick
    # ══════════════════════════════════════════════════════

    def tick(self, dt: float):
        """Advance simulated time by *dt* seconds."""
        if dt <= 0:
            return
        self._clock += dt
        self._run_step("squads", self.squads.update)

        self._since_analysis += dt
        interval = self.cfg.analysis_interval
        while self._since_analysis >= interval:
            self._since_analysis -= interval
            self._analysis_pass(interval)

    def _analysis_pass(self, interval: float):
        roster = self.ctx.roster
        self._passes += 1
        self._run_step("analyze", self._analyze, roster)
        self._run_step("snapshot", self._snapshot)
        self._run_step("adjust", self.difficulty.adjust)
        self._run_step("pacing", self.pacing.advance, interval)
        self._run_step("encounters", self.scheduler.manage, self._clock)

    def _analyze(self, roster):
        return self.tracker.analyze(
            roster.get_active_players(), roster.get_teams(), roster.player_stats,
        )

    def _snapshot(self):
        state = self.difficulty.state
        return self.tracker.snapshot(
            timestamp=self._clock,
            difficulty_name=state.profile_name,
            scaling_factor=state.scaling_factor,
            tension_level=self.pacing.tension_level,
            pacing_phase=self.pacing.phase.label,
        )

    def _run_step(self, name: str, fn, *args):
        try:
            return fn(*args)
        except Exception:
            logger.exception("Director step '%s' failed at t=%.1fs", name, self._clock)
            return None

    # ══════════════════════════════════════════════════════
    #  Game events
    # ══════════════════════════════════════════════════════

    def on_player_kill(self, player_id: str):
        self.tracker.record_kill(player_id)

    def on_player_death(self, player_id: str):
        self.tracker.record_death(player_id)

    def on_damage_dealt(self, player_id: str, damage: float):
        self.tracker.record_damage_dealt(player_id, damage)

    def on_damage_taken(self, player_id: str, damage: float):
        self.tracker.record_damage_taken(player_id, damage)

    def on_objective_completed(self, player_id: str):
        self.tracker.record_objective_completion(player_id)

    def on_round_start(self):
        """Fresh metrics, pacing back to BUILDING, spawning enabled."""
        self.tracker.reset()
        self.pacing.reset_for_round()
        self.scheduler.begin_round()
        logger.info("Round started at t=%.1fs", self._clock)

    def on_round_end(self):
        """Tear down every encounter and keep a final snapshot."""
        ended = self.scheduler.end_round()
        self._snapshot()
        logger.info("Round ended at t=%.1fs (%d encounter(s) torn down)",
                    self._clock, len(ended))

    def on_objective_changed(self, objective):
        self.squads.set_objective(objective)

    def on_squad_eliminated(self, squad_id: str):
        self.squads.on_squad_eliminated(squad_id)

    def on_reinforcements_requested(self, position=None,
                                    difficulty: str | None = None) -> ActiveEncounter | None:
        return self.scheduler.request_reinforcements(position, difficulty, self._clock)

    # ══════════════════════════════════════════════════════
    #  Public API
    # ══════════════════════════════════════════════════════

    def set_global_difficulty(self, name: str):
        self.difficulty.set_global_difficulty(name)

    def set_adaptive_difficulty(self, enabled: bool):
        self.difficulty.set_adaptive_difficulty(enabled)

    def get_difficulty_settings(self, name: str | None = None) -> dict[str, float]:
        return self.difficulty.get_difficulty_settings(name)

    def create_squad(self, members, formation: str = "line") -> str:
        return self.squads.create_squad(members, formation)

    @property
    def current_tension(self) -> float:
        return self.pacing.tension_level

    @property
    def pacing_phase(self) -> PacingPhase:
        return self.pacing.phase

    def performance_metrics(self) -> dict:
        return {
            "players": self.tracker.all_player_metrics(),
            "teams": self.tracker.all_team_metrics(),
            "global": self.tracker.compute_average_performance(),
        }

    def active_encounters(self) -> dict[str, ActiveEncounter]:
        return self.scheduler.active_encounters
