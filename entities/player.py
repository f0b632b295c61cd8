"""
player.py – Simulated human player for the headless director harness.

Carries the identity and position the roster exposes, plus the running
stats a real game would report (accuracy, survival time).
"""

from __future__ import annotations

import pygame


class SimPlayer:
    """One tracked player."""

    def __init__(self, player_id: str, team: str, position=(0.0, 0.0, 0.0),
                 skill: float = 0.5):
        self.player_id = player_id
        self.team = team
        self.position = pygame.math.Vector3(position)
        self.skill = skill            # 0.0–1.0, drives simulated outcomes

        self.shots_fired = 0
        self.shots_hit = 0
        self.alive_since = 0.0

    @property
    def accuracy(self) -> float:
        """Hit fraction; 0 before the first shot."""
        return self.shots_hit / self.shots_fired if self.shots_fired > 0 else 0.0

    def record_shot(self, hit: bool):
        self.shots_fired += 1
        if hit:
            self.shots_hit += 1

    def respawn(self, now: float):
        self.alive_since = now

    def survival_time(self, now: float) -> float:
        return max(0.0, now - self.alive_since)

    def __repr__(self) -> str:
        return f"SimPlayer({self.player_id}, team={self.team})"
