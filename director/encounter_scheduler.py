"""
encounter_scheduler.py – Spawns, tracks and retires scripted encounters.

An *encounter* is a small group of opposing actors created together at
one spawn point with a bounded lifetime.  Every management pass:

  1. Sweep   – retire encounters whose duration elapsed or whose members
               are all down; any member still standing is handed back to
               the spawner for destruction.
  2. Spawn   – if fewer than ``max_active`` encounters are live and the
               cooldown (15s ÷ encounter rate) has passed, pick a type,
               a spawn point and a difficulty, then ask the spawner for
               the actors.

Decision inputs:
  - pacing phase        → base encounter rate and per-type weights
  - scaling factor      → multiplies the encounter rate
  - average performance → rate modifier and difficulty override

Type selection is a single cumulative-weight draw over an injected RNG
(only ``rng.random()`` is used), so tests can script exact outcomes.
Spawning tolerates partial failure: whatever actors the spawner returns
are recorded, missing ones are not retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pygame

from settings import (
    ENCOUNTER_PATROL, ENCOUNTER_AMBUSH, ENCOUNTER_REINFORCEMENT,
    ENCOUNTER_ELITE_SQUAD, ENCOUNTER_SIEGE,
    MAX_ACTIVE_ENCOUNTERS, ENCOUNTER_COOLDOWN, PHASE_ENCOUNTER_RATE,
    HIGH_PERFORMANCE, LOW_PERFORMANCE,
    HIGH_PERFORMANCE_RATE_MULT, LOW_PERFORMANCE_RATE_MULT,
    ELITE_PERFORMANCE, STRUGGLING_PERFORMANCE,
    SPAWN_MIN_DISTANCE, SPAWN_MAX_DISTANCE, OPPOSING_TEAM,
)
from director.collaborators import SpawnRequest
from director.events import EncounterEnded, EncounterSpawned
from director.pacing import PacingPhase
from utils import as_vector

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Encounter types
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EncounterTypeConfig:
    """Static description of one encounter type."""

    name: str
    actor_count: int
    difficulty: str
    duration: float
    description: str = ""

    def __post_init__(self):
        if self.duration <= 0:
            raise ValueError(f"encounter type {self.name!r} needs a positive duration")
        if self.actor_count < 0:
            raise ValueError(f"encounter type {self.name!r} has a negative actor count")

    @classmethod
    def from_params(cls, name: str, params: dict) -> "EncounterTypeConfig":
        return cls(name=name, **params)


ENCOUNTER_TYPES: dict[str, EncounterTypeConfig] = {
    "patrol":        EncounterTypeConfig.from_params("patrol",        ENCOUNTER_PATROL),
    "ambush":        EncounterTypeConfig.from_params("ambush",        ENCOUNTER_AMBUSH),
    "reinforcement": EncounterTypeConfig.from_params("reinforcement", ENCOUNTER_REINFORCEMENT),
    "elite_squad":   EncounterTypeConfig.from_params("elite_squad",   ENCOUNTER_ELITE_SQUAD),
    "siege":         EncounterTypeConfig.from_params("siege",         ENCOUNTER_SIEGE),
}

# phase → (favoured types, favoured weight, weight for everything else)
PHASE_WEIGHTS: dict[PacingPhase, tuple[frozenset, float, float]] = {
    PacingPhase.REST:     (frozenset({"patrol"}), 2.0, 0.3),
    PacingPhase.BUILDING: (frozenset({"patrol", "reinforcement"}), 1.5, 1.0),
    PacingPhase.ACTION:   (frozenset({"ambush", "reinforcement"}), 1.8, 1.0),
    PacingPhase.CLIMAX:   (frozenset({"elite_squad", "siege"}), 2.0, 1.0),
}


# ══════════════════════════════════════════════════════════
#  Active encounter record
# ══════════════════════════════════════════════════════════

@dataclass
class ActiveEncounter:
    """Bookkeeping for one live encounter."""

    id: str
    encounter_type: str
    spawn_position: pygame.math.Vector3
    difficulty: str
    spawn_timestamp: float
    duration: float
    requested_count: int = 0
    members: list = field(default_factory=list)

    def expired(self, now: float) -> bool:
        return now - self.spawn_timestamp > self.duration


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class SchedulerConfig:
    """Tunable knobs for encounter scheduling."""

    max_active: int = MAX_ACTIVE_ENCOUNTERS
    cooldown: float = ENCOUNTER_COOLDOWN
    phase_rate: dict = field(default_factory=lambda: dict(PHASE_ENCOUNTER_RATE))

    high_performance: float = HIGH_PERFORMANCE
    low_performance: float = LOW_PERFORMANCE
    high_performance_mult: float = HIGH_PERFORMANCE_RATE_MULT
    low_performance_mult: float = LOW_PERFORMANCE_RATE_MULT

    elite_performance: float = ELITE_PERFORMANCE
    struggling_performance: float = STRUGGLING_PERFORMANCE

    spawn_min_distance: float = SPAWN_MIN_DISTANCE
    spawn_max_distance: float = SPAWN_MAX_DISTANCE
    team: str = OPPOSING_TEAM


# ══════════════════════════════════════════════════════════
#  Encounter Scheduler
# ══════════════════════════════════════════════════════════

class EncounterScheduler:
    """Decides when and what to spawn; owns the active-encounter set.

    Usage:
        scheduler = EncounterScheduler(ctx, controller, pacing, tracker)
        scheduler.begin_round()
        # every analysis interval:
        scheduler.manage(now)
    """

    def __init__(self, ctx, difficulty, pacing, tracker,
                 config: SchedulerConfig | None = None,
                 encounter_types: dict[str, EncounterTypeConfig] | None = None):
        self.cfg = config or SchedulerConfig()
        self._ctx = ctx
        self._difficulty = difficulty
        self._pacing = pacing
        self._tracker = tracker
        self._types = dict(encounter_types or ENCOUNTER_TYPES)

        self._active: dict[str, ActiveEncounter] = {}
        self._last_encounter_time: float | None = None
        self._next_id: int = 1
        self._round_active: bool = False

    # ── Read-only views ───────────────────────────────────

    @property
    def active_encounters(self) -> dict[str, ActiveEncounter]:
        return dict(self._active)

    @property
    def active_count(self) -> int:
        return len(self._active)

    @property
    def last_encounter_time(self) -> float | None:
        return self._last_encounter_time

    @property
    def round_active(self) -> bool:
        return self._round_active

    @property
    def encounter_types(self) -> dict[str, EncounterTypeConfig]:
        return dict(self._types)

    # ══════════════════════════════════════════════════════
    #  Management pass
    # ══════════════════════════════════════════════════════

    def manage(self, now: float) -> ActiveEncounter | None:
        """Sweep finished encounters, then spawn one if allowed."""
        self.sweep(now)
        return self.try_spawn(now)

    def try_spawn(self, now: float) -> ActiveEncounter | None:
        """Spawn one encounter if the cap and cooldown permit."""
        if len(self._active) >= self.cfg.max_active:
            logger.debug("Encounter cap reached (%d) – no spawn", len(self._active))
            return None

        rate = self.calculate_encounter_rate()
        if rate <= 0:
            logger.debug("Encounter rate %.2f – spawning suppressed", rate)
            return None
        if self._last_encounter_time is not None:
            wait = self.cfg.cooldown / rate
            if now - self._last_encounter_time <= wait:
                return None

        encounter_type = self.select_encounter_type()
        position = self.select_spawn_position()
        if position is None:
            return None
        difficulty = self.calculate_encounter_difficulty()
        return self.spawn_encounter(encounter_type, position, difficulty, now)

    # ══════════════════════════════════════════════════════
    #  Decisions
    # ══════════════════════════════════════════════════════

    def calculate_encounter_rate(self) -> float:
        """Phase base rate × scaling factor × performance modifier."""
        cfg = self.cfg
        rate = cfg.phase_rate.get(self._pacing.phase.label, 1.0)
        rate *= self._difficulty.state.scaling_factor

        perf = self._tracker.compute_average_performance()
        if perf > cfg.high_performance:
            rate *= cfg.high_performance_mult
        elif perf < cfg.low_performance:
            rate *= cfg.low_performance_mult
        return rate

    def encounter_weights(self) -> dict[str, float]:
        """Per-type selection weight for the current pacing phase."""
        favoured, boost, other = PHASE_WEIGHTS.get(
            self._pacing.phase, (frozenset(), 1.0, 1.0),
        )
        return {
            name: (boost if name in favoured else other)
            for name in self._types
        }

    def select_encounter_type(self) -> str:
        """Single-pass cumulative-weight draw over all encounter types."""
        weights = self.encounter_weights()
        names = list(weights)
        total = sum(weights.values())

        r = self._ctx.rng.random() * total
        cumulative = 0.0
        chosen = names[-1]
        for name in names:
            cumulative += weights[name]
            if r < cumulative:
                chosen = name
                break

        logger.debug("Encounter type → %s (r=%.3f, weights=%s)", chosen, r, weights)
        return chosen

    def select_spawn_position(self) -> pygame.math.Vector3 | None:
        """Random spawn point 30–100 units from some player.

        Falls back to the first known spawn point when none fit the band;
        returns None only if there are no spawn points at all.
        """
        points = self._ctx.spawn_points.spawn_points()
        if not points:
            logger.warning("No spawn points registered – skipping spawn")
            return None

        cfg = self.cfg
        players = self._ctx.roster.get_active_players()
        player_positions = [as_vector(p.position) for p in players]

        candidates = []
        for point in points:
            point = as_vector(point)
            if any(cfg.spawn_min_distance < point.distance_to(pos) < cfg.spawn_max_distance
                   for pos in player_positions):
                candidates.append(point)

        if not candidates:
            logger.debug("No spawn point inside the distance band – using fallback")
            return as_vector(points[0])

        index = min(int(self._ctx.rng.random() * len(candidates)), len(candidates) - 1)
        return candidates[index]

    def calculate_encounter_difficulty(self) -> str:
        """Current profile, overridden by extreme performance."""
        perf = self._tracker.compute_average_performance()
        if perf > self.cfg.elite_performance:
            return "hard"
        if perf < self.cfg.struggling_performance:
            return "easy"
        return self._difficulty.state.profile_name

    # ══════════════════════════════════════════════════════
    #  Spawning
    # ══════════════════════════════════════════════════════

    def spawn_encounter(self, encounter_type: str, position, difficulty: str,
                        now: float) -> ActiveEncounter | None:
        """Create one encounter and ask the spawner for its actors.

        Returns None when the round is not active (or ends mid-spawn),
        when the cap is already reached, or for an unknown type.
        """
        if not self._round_active:
            logger.debug("Round inactive – discarding %s spawn", encounter_type)
            return None
        if len(self._active) >= self.cfg.max_active:
            return None
        type_cfg = self._types.get(encounter_type)
        if type_cfg is None:
            logger.warning("Unknown encounter type %r", encounter_type)
            return None

        position = as_vector(position)
        encounter = ActiveEncounter(
            id=self._allocate_id(),
            encounter_type=encounter_type,
            spawn_position=position,
            difficulty=difficulty,
            spawn_timestamp=now,
            duration=type_cfg.duration,
            requested_count=type_cfg.actor_count,
        )

        spawner = self._ctx.spawner
        try:
            for _ in range(type_cfg.actor_count):
                if not self._round_active:
                    logger.warning("Round ended during %s spawn – discarding %d actor(s)",
                                   encounter.id, len(encounter.members))
                    self._discard(encounter)
                    return None
                actor = spawner.spawn_actor(SpawnRequest(
                    position=pygame.math.Vector3(position),
                    difficulty=difficulty,
                    encounter_id=encounter.id,
                    team=self.cfg.team,
                ))
                if actor is not None:
                    encounter.members.append(actor)
        except Exception:
            logger.exception("Spawner failed during %s – discarding %d actor(s)",
                             encounter.id, len(encounter.members))
            self._discard(encounter)
            return None

        if len(encounter.members) < type_cfg.actor_count:
            logger.warning("Encounter %s spawned %d/%d actors",
                           encounter.id, len(encounter.members), type_cfg.actor_count)

        self._active[encounter.id] = encounter
        self._last_encounter_time = now

        logger.info("Encounter %s spawned: %s x%d (%s) at (%.0f, %.0f, %.0f)",
                    encounter.id, encounter_type, len(encounter.members),
                    difficulty, position.x, position.y, position.z)
        self._ctx.sink.emit(EncounterSpawned(
            id=encounter.id,
            encounter_type=encounter_type,
            position=tuple(position),
            difficulty=difficulty,
            actor_count=len(encounter.members),
        ))
        return encounter

    def request_reinforcements(self, position=None, difficulty: str | None = None,
                               now: float = 0.0) -> ActiveEncounter | None:
        """Immediate reinforcement encounter; skips the cooldown, not the cap."""
        if len(self._active) >= self.cfg.max_active:
            logger.info("Reinforcements refused – encounter cap reached")
            return None
        if position is None:
            position = self.select_spawn_position()
            if position is None:
                return None
        if difficulty is None:
            difficulty = self.calculate_encounter_difficulty()
        return self.spawn_encounter("reinforcement", position, difficulty, now)

    def _allocate_id(self) -> str:
        suffix = int(self._ctx.rng.random() * 0xFFFFFF)
        encounter_id = f"encounter_{self._next_id}_{suffix:06x}"
        self._next_id += 1
        return encounter_id

    # ══════════════════════════════════════════════════════
    #  Cleanup
    # ══════════════════════════════════════════════════════

    def sweep(self, now: float) -> list[str]:
        """Retire expired or wiped-out encounters. Returns removed ids."""
        health = self._ctx.introspection.current_health
        finished = [
            enc_id for enc_id, enc in self._active.items()
            if enc.expired(now) or all(health(a) <= 0 for a in enc.members)
        ]
        for enc_id in finished:
            self._cleanup(enc_id)
        return finished

    def teardown_all(self) -> list[str]:
        """Round end: retire every encounter regardless of time left."""
        ids = list(self._active)
        for enc_id in ids:
            self._cleanup(enc_id)
        return ids

    def _cleanup(self, encounter_id: str):
        encounter = self._active.pop(encounter_id, None)
        if encounter is None:
            return

        health = self._ctx.introspection.current_health
        try:
            for actor in encounter.members:
                try:
                    alive = health(actor) > 0
                except Exception:
                    logger.exception("Health lookup failed for %r in %s", actor, encounter_id)
                    alive = True
                if alive:
                    self._ctx.spawner.destroy_actor(actor)
        finally:
            logger.info("Encounter %s ended (%s)", encounter_id, encounter.encounter_type)
            self._ctx.sink.emit(EncounterEnded(
                id=encounter_id,
                encounter_type=encounter.encounter_type,
            ))

    def _discard(self, encounter: ActiveEncounter):
        """Destroy actors of an encounter that was never recorded."""
        for actor in encounter.members:
            try:
                self._ctx.spawner.destroy_actor(actor)
            except Exception:
                logger.exception("Could not destroy %r from %s", actor, encounter.id)

    # ══════════════════════════════════════════════════════
    #  Round lifecycle
    # ══════════════════════════════════════════════════════

    def begin_round(self):
        self._round_active = True

    def end_round(self) -> list[str]:
        """Clear the round flag first so in-flight spawns are discarded."""
        self._round_active = False
        return self.teardown_all()
