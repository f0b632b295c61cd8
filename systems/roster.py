"""
roster.py – Simulated player / team roster.

Satisfies the director's ``Roster`` protocol over a list of ``SimPlayer``.
Kills and deaths reach the director as events; the roster only reports
the stats the host owns outright (accuracy, survival time).
"""

from __future__ import annotations

from director.collaborators import TeamInfo


class GameRoster:
    """Active players grouped into teams."""

    def __init__(self, players=(), clock=None):
        self._players = list(players)
        self._clock = clock or (lambda: 0.0)

    def add_player(self, player):
        self._players.append(player)

    def remove_player(self, player_id: str):
        self._players = [p for p in self._players if p.player_id != player_id]

    def get_active_players(self) -> list:
        return list(self._players)

    def get_teams(self) -> list[TeamInfo]:
        teams: dict[str, list] = {}
        for player in self._players:
            teams.setdefault(player.team, []).append(player)
        return [TeamInfo(id=team_id, players=members) for team_id, members in teams.items()]

    def player_stats(self, player) -> dict | None:
        return {
            "accuracy": player.accuracy,
            "survival_time": player.survival_time(self._clock()),
        }
