"""
simulation_runner.py – Headless, deterministic director simulation.

Plays one simulated round against a fully-wired ``AdaptiveDirector``:
simulated players trade shots with whatever actors the director spawned,
events are fed back into the director, and encounter members are
grouped into squads as soon as they appear.

Usage (from CLI):
    python main.py --seconds 300 --seed 7 --players 4

Architecture:
    SimulationRunner builds the simulated world (roster, spawn points,
    spawn system) and a director over it, then steps both with a fixed
    tick.  Everything random draws from one seeded ``random.Random`` so
    a given seed always replays the same round.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from settings import SIMULATION_TICK, SIM_EVENT_RATE, SIM_SPAWN_FAILURE_RATE
from director.ai_director import AdaptiveDirector
from director.collaborators import DirectorContext
from director.events import EncounterEnded, EncounterSpawned, PacingChanged, RecordingSink
from entities.player import SimPlayer
from systems.roster import GameRoster
from systems.spawn_system import ActorSpawnSystem, ArenaSpawnPoints

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Result record
# ══════════════════════════════════════════════════════════

@dataclass
class SimulationResult:
    """Lightweight record for one simulated round."""
    seconds: float = 0.0
    seed: int = 0
    players: int = 0
    encounters_spawned: int = 0
    encounters_ended: int = 0
    squads_formed: int = 0
    kills: int = 0
    deaths: int = 0
    spawn_requests: int = 0
    spawn_failures: int = 0
    phase_transitions: int = 0
    peak_active_encounters: int = 0
    final_scaling: float = 1.0
    final_profile: str = ""
    encounter_mix: dict = field(default_factory=dict)


# ══════════════════════════════════════════════════════════
#  Simulation Runner
# ══════════════════════════════════════════════════════════

class SimulationRunner:
    """Run one simulated round of *seconds* simulated time.

    Parameters
    ----------
    seconds : float
        Simulated round length.
    seed : int
        Seed for every random draw (world, spawner and director).
    n_players : int
        Players, split across two teams.
    """

    def __init__(self, seconds: float = 300.0, seed: int = 0, n_players: int = 4,
                 tick: float = SIMULATION_TICK,
                 failure_rate: float = SIM_SPAWN_FAILURE_RATE,
                 difficulty: str = "medium") -> None:
        self._seconds = max(tick, seconds)
        self._seed = seed
        self._tick = tick
        self._rng = random.Random(seed)

        self.players = [
            SimPlayer(
                player_id=f"p{i + 1}",
                team="alpha" if i % 2 == 0 else "bravo",
                position=(self._rng.uniform(-15, 15), 0.0, self._rng.uniform(-15, 15)),
                skill=self._rng.uniform(0.3, 0.9),
            )
            for i in range(max(1, n_players))
        ]

        self.sink = RecordingSink()
        self.spawns = ActorSpawnSystem(failure_rate, rng=random.Random(seed + 1))
        self.roster = GameRoster(self.players, clock=lambda: self.director.now)
        self.director = AdaptiveDirector(DirectorContext(
            roster=self.roster,
            spawner=self.spawns,
            introspection=self.spawns,
            control=self.spawns,
            spawn_points=ArenaSpawnPoints(),
            sink=self.sink,
            rng=random.Random(seed + 2),
        ))
        self.director.set_global_difficulty(difficulty)

        # encounter id → squad id
        self._squad_for: dict[str, str] = {}
        self._kills = 0
        self._deaths = 0
        self._peak_active = 0
        self._squads_formed = 0

        self.sink.subscribe(self._on_encounter_spawned, EncounterSpawned.type)
        self.sink.subscribe(self._on_encounter_ended, EncounterEnded.type)

    # ── Public entry point ────────────────────────────────

    def run(self) -> SimulationResult:
        """Play the round, then print and return the result."""
        director = self.director
        director.on_round_start()
        for player in self.players:
            player.respawn(director.now)

        steps = int(round(self._seconds / self._tick))
        for _ in range(steps):
            self._simulate_combat()
            self.spawns.update(self._tick)
            director.tick(self._tick)
            self._peak_active = max(self._peak_active, len(director.active_encounters()))

        director.on_round_end()
        result = self._build_result()
        self._print_summary(result)
        return result

    # ── Event hooks ───────────────────────────────────────

    def _on_encounter_spawned(self, event: EncounterSpawned):
        encounter = self.director.scheduler.active_encounters.get(event.id)
        if encounter is None or not encounter.members:
            return
        self._squad_for[event.id] = self.director.create_squad(encounter.members)
        self._squads_formed += 1

    def _on_encounter_ended(self, event: EncounterEnded):
        squad_id = self._squad_for.pop(event.id, None)
        if squad_id is not None:
            self.director.on_squad_eliminated(squad_id)

    # ── Combat stand-in ───────────────────────────────────

    def _simulate_combat(self):
        """Each player may trade one exchange with a random living actor."""
        director = self.director
        living = self.spawns.living()
        if not living:
            return

        for player in self.players:
            if self._rng.random() >= SIM_EVENT_RATE:
                continue
            target = self._rng.choice(living)
            target.behavior_state = "combat"

            hit = self._rng.random() < player.skill
            player.record_shot(hit)
            if hit:
                damage = self._rng.uniform(20.0, 45.0)
                target.take_damage(damage)
                director.on_damage_dealt(player.player_id, damage)
                if not target.alive:
                    director.on_player_kill(player.player_id)
                    self._kills += 1
                    living = [a for a in living if a.alive]
                    if not living:
                        return
            elif self._rng.random() < 0.5 * (1.0 - player.skill):
                damage = self._rng.uniform(10.0, 30.0)
                director.on_damage_taken(player.player_id, damage)
                if self._rng.random() < 0.15:
                    director.on_player_death(player.player_id)
                    player.respawn(director.now)
                    self._deaths += 1

            if self._rng.random() < 0.01:
                director.on_objective_completed(player.player_id)

    # ── Result builders ───────────────────────────────────

    def _build_result(self) -> SimulationResult:
        spawned = self.sink.of_type(EncounterSpawned.type)
        mix: dict[str, int] = {}
        for event in spawned:
            mix[event.encounter_type] = mix.get(event.encounter_type, 0) + 1

        state = self.director.difficulty.state
        return SimulationResult(
            seconds=self._seconds,
            seed=self._seed,
            players=len(self.players),
            encounters_spawned=len(spawned),
            encounters_ended=len(self.sink.of_type(EncounterEnded.type)),
            squads_formed=self._squads_formed,
            kills=self._kills,
            deaths=self._deaths,
            spawn_requests=self.spawns.spawn_requests,
            spawn_failures=self.spawns.failed_spawns,
            phase_transitions=len(self.sink.of_type(PacingChanged.type)),
            peak_active_encounters=self._peak_active,
            final_scaling=state.scaling_factor,
            final_profile=state.profile_name,
            encounter_mix=mix,
        )

    # ── Summary printout ──────────────────────────────────

    def _print_summary(self, result: SimulationResult) -> None:
        print(f"\n{'=' * 58}")
        print(f"  Director Simulation  ({result.seconds:.0f}s, seed {result.seed})")
        print(f"{'=' * 58}")
        print(f"\n  Players               : {result.players}")
        print(f"  Kills / deaths        : {result.kills} / {result.deaths}")
        print(f"\n  Encounters spawned    : {result.encounters_spawned}")
        print(f"  Encounters ended      : {result.encounters_ended}")
        print(f"  Peak active           : {result.peak_active_encounters}")
        print(f"  Squads formed         : {result.squads_formed}")
        print(f"  Spawn failures        : {result.spawn_failures} / {result.spawn_requests}")
        print(f"  Phase transitions     : {result.phase_transitions}")
        print(f"\n  Final profile         : {result.final_profile}")
        print(f"  Final scaling factor  : {result.final_scaling:.2f}")

        if result.encounter_mix:
            print(f"\n  Encounter Mix:")
            total = result.encounters_spawned or 1
            for name in sorted(result.encounter_mix, key=lambda k: result.encounter_mix[k],
                               reverse=True):
                cnt = result.encounter_mix[name]
                print(f"    {name:<14s}  spawned={cnt:>3d}  share={100 * cnt / total:5.1f}%")

        print(f"\n{'=' * 58}\n")
