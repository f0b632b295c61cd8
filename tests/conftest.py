"""Shared fakes and fixtures for director tests."""

from __future__ import annotations

import pygame
import pytest

from director.collaborators import DirectorContext, StaticSpawnPoints, TeamInfo
from director.difficulty_controller import DifficultyController
from director.encounter_scheduler import EncounterScheduler
from director.events import RecordingSink
from director.pacing import PacingStateMachine
from director.performance_tracker import PerformanceTracker


class ScriptedRng:
    """Returns the scripted values from ``random()`` in order, cycling."""

    def __init__(self, values):
        self._values = list(values)
        self._i = 0

    def random(self) -> float:
        value = self._values[self._i % len(self._values)]
        self._i += 1
        return value


class FakePlayer:
    def __init__(self, player_id: str, position=(0.0, 0.0, 0.0), team: str = "alpha"):
        self.player_id = player_id
        self.position = pygame.math.Vector3(position)
        self.team = team


class FakeActor:
    def __init__(self, name: str, position=(0.0, 0.0, 0.0), health: float = 100.0,
                 state: str = "idle"):
        self.name = name
        self.position = pygame.math.Vector3(position)
        self.health = health
        self.state = state

    def __repr__(self) -> str:
        return f"FakeActor({self.name})"


class FakeRoster:
    def __init__(self, players=(), stats=None):
        self.players = list(players)
        self.stats = stats or {}

    def get_active_players(self):
        return list(self.players)

    def get_teams(self):
        teams: dict[str, list] = {}
        for p in self.players:
            teams.setdefault(p.team, []).append(p)
        return [TeamInfo(id=t, players=m) for t, m in teams.items()]

    def player_stats(self, player):
        return self.stats.get(player.player_id)


class FakeWorld:
    """Spawner + introspection + control over FakeActors, recording calls."""

    def __init__(self, fail_pattern=None):
        self.fail_pattern = list(fail_pattern or [])
        self.spawn_calls: list = []
        self.spawned: list[FakeActor] = []
        self.destroyed: list[FakeActor] = []
        self.roles: dict = {}
        self.destinations: dict = {}
        self.alerts: list = []

    # spawner
    def spawn_actor(self, request):
        index = len(self.spawn_calls)
        self.spawn_calls.append(request)
        if self.fail_pattern and self.fail_pattern[index % len(self.fail_pattern)]:
            return None
        actor = FakeActor(f"a{index}", request.position)
        self.spawned.append(actor)
        return actor

    def destroy_actor(self, actor):
        self.destroyed.append(actor)
        actor.health = 0.0

    # introspection
    def position(self, actor):
        return pygame.math.Vector3(actor.position)

    def current_health(self, actor):
        return actor.health

    def behavior_state(self, actor):
        return actor.state

    # control
    def set_squad_role(self, actor, role):
        self.roles[actor] = role

    def set_destination(self, actor, position):
        self.destinations[actor] = pygame.math.Vector3(position)

    def alert_squad_member(self, actor, engaged_member):
        self.alerts.append((actor, engaged_member))


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def world() -> FakeWorld:
    return FakeWorld()


@pytest.fixture
def roster() -> FakeRoster:
    return FakeRoster([FakePlayer("p1", (0.0, 0.0, 0.0))])


@pytest.fixture
def ctx(world, roster, sink) -> DirectorContext:
    return DirectorContext(
        roster=roster,
        spawner=world,
        introspection=world,
        control=world,
        spawn_points=StaticSpawnPoints([(50.0, 0.0, 0.0), (200.0, 0.0, 0.0)]),
        sink=sink,
        rng=ScriptedRng([0.0]),
    )


@pytest.fixture
def tracker() -> PerformanceTracker:
    return PerformanceTracker()


@pytest.fixture
def controller(tracker, sink) -> DifficultyController:
    return DifficultyController(tracker, sink)


@pytest.fixture
def pacing(sink) -> PacingStateMachine:
    return PacingStateMachine(sink)


@pytest.fixture
def scheduler(ctx, controller, pacing, tracker) -> EncounterScheduler:
    return EncounterScheduler(ctx, controller, pacing, tracker)
