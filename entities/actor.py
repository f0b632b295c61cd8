"""
actor.py – Simulated opposing actor for the headless director harness.

Stands in for the engine's real AI-controlled entity: it has a position,
health, a coarse behaviour state, a squad role and a movement
destination.  ``update(dt)`` walks it toward its destination.
"""

from __future__ import annotations

import itertools
import logging

import pygame
from settings import SIM_ACTOR_SPEED, SIM_ACTOR_HEALTH

logger = logging.getLogger(__name__)

_ids = itertools.count(1)


class SimActor:
    """One spawned opposing actor."""

    def __init__(self, position, difficulty: str = "medium",
                 encounter_id: str = "", team: str = "opposing",
                 health: float = SIM_ACTOR_HEALTH):
        self.actor_id = f"actor_{next(_ids)}"
        self.position = pygame.math.Vector3(position)
        self.difficulty = difficulty
        self.encounter_id = encounter_id
        self.team = team
        self.max_health = health
        self.health = health
        self.speed = SIM_ACTOR_SPEED

        self.behavior_state = "idle"   # idle | patrol | combat
        self.squad_role = "none"       # none | leader | soldier
        self.destination: pygame.math.Vector3 | None = None
        self.alerted_by = None
        self.destroyed = False

    @property
    def alive(self) -> bool:
        return self.health > 0 and not self.destroyed

    # ── Control hooks ─────────────────────────────────────

    def take_damage(self, amount: float):
        self.health = max(0.0, self.health - amount)

    def set_destination(self, position):
        self.destination = pygame.math.Vector3(position)

    def on_squad_member_in_combat(self, member):
        """An ally engaged; join the fight."""
        self.alerted_by = member
        if self.alive and self.behavior_state != "combat":
            self.behavior_state = "combat"

    def destroy(self):
        self.destroyed = True
        self.health = 0.0

    # ── Per-tick ──────────────────────────────────────────

    def update(self, dt: float):
        if not self.alive or self.destination is None:
            return
        to_target = self.destination - self.position
        dist = to_target.length()
        step = self.speed * dt
        if dist <= step:
            self.position = pygame.math.Vector3(self.destination)
        else:
            self.position += to_target.normalize() * step

    def __repr__(self) -> str:
        return f"SimActor({self.actor_id}, hp={self.health:.0f}, {self.behavior_state})"
