"""
performance_tracker.py – Rolling player / team performance metrics.

Game events (kills, deaths, damage, objectives) arrive whenever they
happen and are folded into a per-player ``PlayerMetrics`` record.  Once per
analysis interval the director calls ``analyze`` to pull authoritative
stats from the roster, rebuild team aggregates and classify each player.

Two scoring functions live here and are deliberately kept apart:

  compute_skill_level         – coarse classification (easy … expert),
                                K/D, accuracy and survival time.
  compute_average_performance – 0.0–1.0 scalar fed to the difficulty
                                controller, K/D, accuracy and objectives.

They weigh similar inputs differently; do not merge them.

All public methods hold an internal lock so event feeds coming from other
threads never interleave with an analysis pass.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field, replace

from settings import (
    AVG_SURVIVAL_TIME, SKILL_THRESHOLDS, NEUTRAL_PERFORMANCE,
    SNAPSHOT_HISTORY_SIZE,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Metrics records
# ══════════════════════════════════════════════════════════

@dataclass
class PlayerMetrics:
    """Per-player counters for the current round."""

    kills: int = 0
    deaths: int = 0
    accuracy: float = 0.0            # 0.0–1.0
    survival_time: float = 0.0       # seconds
    damage_dealt: float = 0.0
    damage_taken: float = 0.0
    objective_completions: int = 0

    def kd_ratio(self) -> float:
        """Kills per death; with no deaths the ratio is the kill count."""
        if self.deaths > 0:
            return self.kills / self.deaths
        return float(self.kills)


@dataclass
class TeamMetrics:
    """Aggregate over a team's members, rebuilt on every analysis pass."""

    kills_sum: int = 0
    deaths_sum: int = 0
    average_accuracy: float = 0.0
    objectives_completed: int = 0


@dataclass(frozen=True)
class PerformanceSnapshot:
    """Immutable point-in-time copy used for diagnostics only."""

    timestamp: float
    difficulty_name: str
    scaling_factor: float
    tension_level: float
    pacing_phase: str
    player_metrics: dict = field(default_factory=dict)
    team_metrics: dict = field(default_factory=dict)


# Stats keys a roster may report, mapped onto PlayerMetrics fields
_STAT_FIELDS = {
    "kills": "kills",
    "deaths": "deaths",
    "accuracy": "accuracy",
    "survival_time": "survival_time",
    "damage_dealt": "damage_dealt",
    "damage_taken": "damage_taken",
}


# ══════════════════════════════════════════════════════════
#  Performance Tracker
# ══════════════════════════════════════════════════════════

class PerformanceTracker:
    """Owns every PlayerMetrics record and the snapshot history.

    Usage:
        tracker = PerformanceTracker()
        tracker.record_kill("p1")
        tracker.record_death("p2")
        # every analysis interval:
        tracker.analyze(players, teams, roster.player_stats)
        perf = tracker.compute_average_performance()
    """

    def __init__(self, history_size: int = SNAPSHOT_HISTORY_SIZE):
        self._lock = threading.RLock()
        self._players: dict[str, PlayerMetrics] = {}
        self._teams: dict[str, TeamMetrics] = {}
        self._history: deque[PerformanceSnapshot] = deque(maxlen=history_size)

    # ══════════════════════════════════════════════════════
    #  Event Recording
    # ══════════════════════════════════════════════════════

    def _metrics(self, player_id: str) -> PlayerMetrics:
        metrics = self._players.get(player_id)
        if metrics is None:
            metrics = PlayerMetrics()
            self._players[player_id] = metrics
        return metrics

    def record_kill(self, player_id: str):
        with self._lock:
            self._metrics(player_id).kills += 1

    def record_death(self, player_id: str):
        with self._lock:
            self._metrics(player_id).deaths += 1

    def record_damage_dealt(self, player_id: str, damage: float):
        with self._lock:
            self._metrics(player_id).damage_dealt += damage

    def record_damage_taken(self, player_id: str, damage: float):
        with self._lock:
            self._metrics(player_id).damage_taken += damage

    def record_objective_completion(self, player_id: str):
        with self._lock:
            self._metrics(player_id).objective_completions += 1

    def record_accuracy(self, player_id: str, accuracy: float):
        with self._lock:
            self._metrics(player_id).accuracy = max(0.0, min(1.0, accuracy))

    def record_survival_time(self, player_id: str, seconds: float):
        with self._lock:
            self._metrics(player_id).survival_time = max(0.0, seconds)

    # ══════════════════════════════════════════════════════
    #  Analysis
    # ══════════════════════════════════════════════════════

    def analyze(self, players, teams, stats_provider=None) -> dict[str, str]:
        """Run one analysis pass.

        Args:
            players: active player handles (anything with ``player_id``).
            teams: ``TeamInfo``-like objects with ``id`` and ``players``.
            stats_provider: optional callable ``player -> dict | None``
                returning authoritative stats that overwrite the counters.

        Returns:
            skill level per active player id.
        """
        with self._lock:
            skills: dict[str, str] = {}
            for player in players:
                pid = player.player_id
                metrics = self._metrics(pid)
                stats = stats_provider(player) if stats_provider else None
                if stats:
                    for key, attr in _STAT_FIELDS.items():
                        if key in stats and stats[key] is not None:
                            setattr(metrics, attr, stats[key])
                skills[pid] = self.compute_skill_level(pid)

            self._rebuild_team_metrics(teams)
            logger.debug("Analysis pass: skills=%s", skills)
            return skills

    def _rebuild_team_metrics(self, teams):
        self._teams = {}
        for team in teams:
            agg = TeamMetrics()
            members = list(team.players or [])
            for player in members:
                metrics = self._players.get(player.player_id)
                if metrics is None:
                    continue
                agg.kills_sum += metrics.kills
                agg.deaths_sum += metrics.deaths
                agg.average_accuracy += metrics.accuracy
                agg.objectives_completed += metrics.objective_completions
            if members:
                agg.average_accuracy /= len(members)
            self._teams[team.id] = agg

    def compute_skill_level(self, player_id: str) -> str:
        """Classify one player as easy / medium / hard / expert.

        score = min(kd × 25, 100) + accuracy × 50
                + min(survival / 30, 2) × 25
        """
        with self._lock:
            metrics = self._players.get(player_id)
            if metrics is None:
                return "medium"

            score = min(metrics.kd_ratio() * 25.0, 100.0)
            score += metrics.accuracy * 50.0
            score += min(metrics.survival_time / AVG_SURVIVAL_TIME, 2.0) * 25.0

        easy_below, medium_below, hard_below = SKILL_THRESHOLDS
        if score < easy_below:
            return "easy"
        if score < medium_below:
            return "medium"
        if score < hard_below:
            return "hard"
        return "expert"

    def compute_average_performance(self) -> float:
        """Mean per-player performance in 0.0–1.0 (0.5 with nobody tracked).

        Per player:  min(kd / 2, 0.5) + accuracy × 0.3 + objectives × 0.2,
        capped at 1.0.  Objectives are the raw completion count; the
        per-player cap bounds their contribution.
        """
        with self._lock:
            if not self._players:
                return NEUTRAL_PERFORMANCE

            total = 0.0
            for metrics in self._players.values():
                perf = min(metrics.kd_ratio() / 2.0, 0.5)
                perf += metrics.accuracy * 0.3
                perf += metrics.objective_completions * 0.2
                total += min(perf, 1.0)
            return total / len(self._players)

    # ══════════════════════════════════════════════════════
    #  Snapshots
    # ══════════════════════════════════════════════════════

    def snapshot(self, timestamp: float, difficulty_name: str,
                 scaling_factor: float, tension_level: float,
                 pacing_phase: str) -> PerformanceSnapshot:
        """Freeze current metrics into the bounded history ring."""
        with self._lock:
            snap = PerformanceSnapshot(
                timestamp=timestamp,
                difficulty_name=difficulty_name,
                scaling_factor=scaling_factor,
                tension_level=tension_level,
                pacing_phase=pacing_phase,
                player_metrics={pid: replace(m) for pid, m in self._players.items()},
                team_metrics={tid: replace(t) for tid, t in self._teams.items()},
            )
            self._history.append(snap)
            return snap

    @property
    def history(self) -> tuple[PerformanceSnapshot, ...]:
        with self._lock:
            return tuple(self._history)

    # ══════════════════════════════════════════════════════
    #  Accessors / Reset
    # ══════════════════════════════════════════════════════

    def player_metrics(self, player_id: str) -> PlayerMetrics | None:
        """Copy of one player's record, or None if never seen."""
        with self._lock:
            metrics = self._players.get(player_id)
            return replace(metrics) if metrics is not None else None

    def all_player_metrics(self) -> dict[str, PlayerMetrics]:
        with self._lock:
            return {pid: replace(m) for pid, m in self._players.items()}

    def team_metrics(self, team_id: str) -> TeamMetrics | None:
        with self._lock:
            metrics = self._teams.get(team_id)
            return replace(metrics) if metrics is not None else None

    def all_team_metrics(self) -> dict[str, TeamMetrics]:
        with self._lock:
            return {tid: replace(t) for tid, t in self._teams.items()}

    @property
    def tracked_players(self) -> int:
        with self._lock:
            return len(self._players)

    def reset(self):
        """Round start: drop every player and team record."""
        with self._lock:
            self._players.clear()
            self._teams.clear()
