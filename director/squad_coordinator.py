"""
squad_coordinator.py – Loose squads of spawned actors.

Groups actors into squads with a leader (the first member), keeps the
others trailing the leader in a simple line, and relays combat alerts:
when any member reports the ``combat`` behaviour state, every other
member of the same squad is told once per tick.  No acknowledgement, no
retry.

Runs on its own every tick, independent of the difficulty / pacing
pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pygame

from settings import (
    SQUAD_LATERAL_SPACING, SQUAD_TRAIL_DISTANCE, DEFAULT_FORMATION, COMBAT_STATE,
)

logger = logging.getLogger(__name__)


@dataclass
class Squad:
    id: str
    members: list
    formation: str = DEFAULT_FORMATION
    objective: object | None = None

    @property
    def leader(self):
        return self.members[0] if self.members else None


@dataclass
class SquadConfig:
    lateral_spacing: float = SQUAD_LATERAL_SPACING
    trail_distance: float = SQUAD_TRAIL_DISTANCE
    combat_state: str = COMBAT_STATE


class SquadCoordinator:
    """Creates squads and runs their per-tick formation / alert update."""

    def __init__(self, ctx, config: SquadConfig | None = None):
        self.cfg = config or SquadConfig()
        self._ctx = ctx
        self._squads: dict[str, Squad] = {}
        self._next_id: int = 1

    @property
    def squads(self) -> dict[str, Squad]:
        return dict(self._squads)

    def squad(self, squad_id: str) -> Squad | None:
        return self._squads.get(squad_id)

    # ── Lifecycle ─────────────────────────────────────────

    def create_squad(self, members, formation: str = DEFAULT_FORMATION) -> str:
        members = list(members)
        if not members:
            raise ValueError("a squad needs at least one member")

        suffix = int(self._ctx.rng.random() * 0xFFFFFF)
        squad_id = f"squad_{self._next_id}_{suffix:06x}"
        self._next_id += 1

        squad = Squad(id=squad_id, members=members, formation=formation)
        self._squads[squad_id] = squad

        control = self._ctx.control
        for member in members:
            control.set_squad_role(member, "leader" if member is squad.leader else "soldier")

        logger.info("Squad %s formed (%d members, %s)", squad_id, len(members), formation)
        return squad_id

    def on_squad_eliminated(self, squad_id: str):
        if self._squads.pop(squad_id, None) is not None:
            logger.info("Squad %s eliminated", squad_id)

    def set_objective(self, objective):
        """Point every squad at a new objective."""
        for squad in self._squads.values():
            squad.objective = objective

    # ── Per-tick update ───────────────────────────────────

    def update(self):
        for squad in list(self._squads.values()):
            try:
                self.update_formation(squad)
                self.update_alerts(squad)
            except Exception:
                logger.exception("Squad %s update failed", squad.id)

    def update_formation(self, squad: Squad):
        """Send each follower to its slot beside and behind the leader."""
        if len(squad.members) < 2:
            return

        leader = squad.leader
        leader_pos = pygame.math.Vector3(self._ctx.introspection.position(leader))
        for index, member in enumerate(squad.members):
            if member is leader:
                continue
            offset = pygame.math.Vector3(index * self.cfg.lateral_spacing,
                                         0.0, -self.cfg.trail_distance)
            self._ctx.control.set_destination(member, leader_pos + offset)

    def update_alerts(self, squad: Squad):
        """One-hop broadcast of any member's engagement to the rest."""
        behavior = self._ctx.introspection.behavior_state
        control = self._ctx.control
        for member in squad.members:
            if behavior(member) != self.cfg.combat_state:
                continue
            for ally in squad.members:
                if ally is not member:
                    control.alert_squad_member(ally, member)
