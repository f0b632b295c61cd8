"""
collaborators.py – Interfaces the director consumes, plus no-op stand-ins.

The director only decides *what* to create and *when*.  Everything that
touches the live game (rosters, spawning, actor state, movement) sits
behind one of the protocols below.  A director built without one of them
gets the matching ``Null*`` stand-in instead, so the control logic never
has to null-check a collaborator at runtime.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol, runtime_checkable

import pygame

from director.events import NotificationSink
from utils import as_vector


# ══════════════════════════════════════════════════════════
#  Requests / records passed across the seam
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SpawnRequest:
    """One actor spawn the scheduler asks the spawner to perform."""
    position: pygame.math.Vector3
    difficulty: str
    encounter_id: str
    team: str


@dataclass
class TeamInfo:
    """Roster view of one team."""
    id: str
    players: list


# ══════════════════════════════════════════════════════════
#  Protocols
# ══════════════════════════════════════════════════════════

@runtime_checkable
class Roster(Protocol):
    def get_active_players(self) -> list: ...

    def get_teams(self) -> list[TeamInfo]: ...

    def player_stats(self, player) -> dict | None:
        """Authoritative stats for *player*, or None if the host has none."""
        ...


@runtime_checkable
class ActorSpawner(Protocol):
    def spawn_actor(self, request: SpawnRequest) -> Any | None: ...

    def destroy_actor(self, actor) -> None: ...


@runtime_checkable
class ActorIntrospection(Protocol):
    def position(self, actor) -> pygame.math.Vector3: ...

    def current_health(self, actor) -> float: ...

    def behavior_state(self, actor) -> str: ...


@runtime_checkable
class ActorControl(Protocol):
    def set_squad_role(self, actor, role: str) -> None: ...

    def set_destination(self, actor, position: pygame.math.Vector3) -> None: ...

    def alert_squad_member(self, actor, engaged_member) -> None: ...


@runtime_checkable
class SpawnPointRegistry(Protocol):
    def spawn_points(self) -> list[pygame.math.Vector3]: ...


# ══════════════════════════════════════════════════════════
#  No-op stand-ins
# ══════════════════════════════════════════════════════════

class NullRoster:
    def get_active_players(self) -> list:
        return []

    def get_teams(self) -> list[TeamInfo]:
        return []

    def player_stats(self, player) -> dict | None:
        return None


class NullSpawner:
    """Spawner that never produces an actor (every request is a miss)."""

    def spawn_actor(self, request: SpawnRequest) -> Any | None:
        return None

    def destroy_actor(self, actor) -> None:
        pass


class NullIntrospection:
    def position(self, actor) -> pygame.math.Vector3:
        return pygame.math.Vector3()

    def current_health(self, actor) -> float:
        return 0.0

    def behavior_state(self, actor) -> str:
        return "idle"


class NullControl:
    def set_squad_role(self, actor, role: str) -> None:
        pass

    def set_destination(self, actor, position: pygame.math.Vector3) -> None:
        pass

    def alert_squad_member(self, actor, engaged_member) -> None:
        pass


class StaticSpawnPoints:
    """Registry over a fixed list of positions."""

    def __init__(self, points: Iterable = ()):
        self._points = [as_vector(p) for p in points]

    def spawn_points(self) -> list[pygame.math.Vector3]:
        return list(self._points)


# ══════════════════════════════════════════════════════════
#  Director Context
# ══════════════════════════════════════════════════════════

@dataclass
class DirectorContext:
    """Everything the director talks to, handed to each component.

    Any collaborator left unset is filled with its no-op stand-in.
    """

    roster: Roster = field(default_factory=NullRoster)
    spawner: ActorSpawner = field(default_factory=NullSpawner)
    introspection: ActorIntrospection = field(default_factory=NullIntrospection)
    control: ActorControl = field(default_factory=NullControl)
    spawn_points: SpawnPointRegistry = field(default_factory=StaticSpawnPoints)
    sink: NotificationSink = field(default_factory=NotificationSink)
    rng: random.Random = field(default_factory=random.Random)

    def __post_init__(self):
        # explicit None means "not wired" as well
        if self.roster is None:
            self.roster = NullRoster()
        if self.spawner is None:
            self.spawner = NullSpawner()
        if self.introspection is None:
            self.introspection = NullIntrospection()
        if self.control is None:
            self.control = NullControl()
        if self.spawn_points is None:
            self.spawn_points = StaticSpawnPoints()
        if self.sink is None:
            self.sink = NotificationSink()
        if self.rng is None:
            self.rng = random.Random()
