"""
spawn_system.py – Simulated spawn points and actor spawning.

``ActorSpawnSystem`` owns every ``SimActor`` it creates and answers the
director's spawner, introspection and control protocols for them.  An
optional failure rate makes individual spawn requests come back empty so
partial encounters get exercised.
"""

from __future__ import annotations

import logging
import math
import random

import pygame
from settings import SIM_ARENA_SIZE, SIM_SPAWN_POINTS, SIM_SPAWN_FAILURE_RATE
from entities.actor import SimActor

logger = logging.getLogger(__name__)


class ArenaSpawnPoints:
    """Spawn points evenly spread on a ring inside a square arena."""

    def __init__(self, count: int = SIM_SPAWN_POINTS, arena_size: float = SIM_ARENA_SIZE):
        radius = arena_size * 0.4
        self._points = [
            pygame.math.Vector3(
                radius * math.cos(2 * math.pi * i / count),
                0.0,
                radius * math.sin(2 * math.pi * i / count),
            )
            for i in range(count)
        ]

    def spawn_points(self) -> list[pygame.math.Vector3]:
        return [pygame.math.Vector3(p) for p in self._points]


class ActorSpawnSystem:
    """Creates, tracks and destroys simulated actors."""

    def __init__(self, failure_rate: float = SIM_SPAWN_FAILURE_RATE,
                 rng: random.Random | None = None):
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()
        self.actors: list[SimActor] = []
        self.spawn_requests: int = 0
        self.failed_spawns: int = 0

    # ── ActorSpawner ──────────────────────────────────────

    def spawn_actor(self, request) -> SimActor | None:
        self.spawn_requests += 1
        if self._rng.random() < self.failure_rate:
            self.failed_spawns += 1
            return None
        jitter = pygame.math.Vector3(self._rng.uniform(-2, 2), 0.0, self._rng.uniform(-2, 2))
        actor = SimActor(
            request.position + jitter,
            difficulty=request.difficulty,
            encounter_id=request.encounter_id,
            team=request.team,
        )
        actor.behavior_state = "patrol"
        self.actors.append(actor)
        return actor

    def destroy_actor(self, actor):
        actor.destroy()
        if actor in self.actors:
            self.actors.remove(actor)

    # ── ActorIntrospection ────────────────────────────────

    def position(self, actor) -> pygame.math.Vector3:
        return pygame.math.Vector3(actor.position)

    def current_health(self, actor) -> float:
        return actor.health

    def behavior_state(self, actor) -> str:
        return actor.behavior_state

    # ── ActorControl ──────────────────────────────────────

    def set_squad_role(self, actor, role: str):
        actor.squad_role = role

    def set_destination(self, actor, position):
        actor.set_destination(position)

    def alert_squad_member(self, actor, engaged_member):
        actor.on_squad_member_in_combat(engaged_member)

    # ── Per-tick ──────────────────────────────────────────

    def living(self) -> list[SimActor]:
        return [a for a in self.actors if a.alive]

    def update(self, dt: float):
        # killed actors are never handed back through destroy_actor
        self.actors = [a for a in self.actors if a.alive]
        for actor in self.actors:
            actor.update(dt)
