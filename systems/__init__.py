"""systems package – Simulated roster, spawn points and actor spawning."""

from .roster import GameRoster
from .spawn_system import ArenaSpawnPoints, ActorSpawnSystem
