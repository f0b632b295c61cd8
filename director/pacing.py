"""
pacing.py – Cyclic pacing state machine.

Drives the rhythm of a round through four timed phases that loop forever:

  REST      (20s, tension 0.2) : breathing room, patrols only.
  BUILDING  (30s, tension 0.5) : pressure ramps up.
  ACTION    (25s, tension 0.8) : ambushes and reinforcements.
  CLIMAX    (15s, tension 1.0) : elite squads and sieges.

Phase changes are purely time based.  The phase only sets a *target*
tension; the actual ``tension_level`` closes 10 % of the remaining gap on
every advance, so it glides toward the target, never jumps and never
overshoots.

Other systems read ``phase`` and ``tension_level`` to shape encounter
frequency and encounter type weights.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum

from settings import (
    PACING_REST, PACING_BUILDING, PACING_ACTION, PACING_CLIMAX,
    TENSION_SMOOTHING, ROUND_START_TENSION, INITIAL_TENSION,
)
from director.events import NotificationSink, PacingChanged
from utils import clamp

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Phase Enum
# ══════════════════════════════════════════════════════════

class PacingPhase(IntEnum):
    """Pacing phases in cycle order."""

    REST = 0
    BUILDING = 1
    ACTION = 2
    CLIMAX = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    def next(self) -> "PacingPhase":
        return PacingPhase((self.value + 1) % len(PacingPhase))


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class PacingConfig:
    """Per-phase (duration seconds, target tension) and smoothing rate."""

    curve: dict = field(default_factory=lambda: {
        PacingPhase.REST:     PACING_REST,
        PacingPhase.BUILDING: PACING_BUILDING,
        PacingPhase.ACTION:   PACING_ACTION,
        PacingPhase.CLIMAX:   PACING_CLIMAX,
    })
    smoothing: float = TENSION_SMOOTHING
    round_start_phase: PacingPhase = PacingPhase.BUILDING
    round_start_tension: float = ROUND_START_TENSION

    def duration(self, phase: PacingPhase) -> float:
        return self.curve[phase][0]

    def tension(self, phase: PacingPhase) -> float:
        return self.curve[phase][1]


@dataclass
class PacingState:
    """Mutable pacing state – written only by PacingStateMachine."""

    phase: PacingPhase = PacingPhase.BUILDING
    phase_elapsed: float = 0.0
    tension_level: float = INITIAL_TENSION
    target_tension: float = INITIAL_TENSION


# ══════════════════════════════════════════════════════════
#  Pacing State Machine
# ══════════════════════════════════════════════════════════

class PacingStateMachine:
    """Advances the pacing phase and smooths tension.

    Usage:
        pacing = PacingStateMachine(sink)
        pacing.advance(dt)
        if pacing.just_transitioned:
            # phase changed this advance
    """

    def __init__(self, sink: NotificationSink | None = None,
                 config: PacingConfig | None = None,
                 initial_phase: PacingPhase = PacingPhase.BUILDING):
        self.cfg = config or PacingConfig()
        self._sink = sink or NotificationSink()
        self._state = PacingState(
            phase=initial_phase,
            target_tension=self.cfg.tension(initial_phase),
        )
        self._transition_flag: bool = False

    @property
    def state(self) -> PacingState:
        return self._state

    @property
    def phase(self) -> PacingPhase:
        return self._state.phase

    @property
    def tension_level(self) -> float:
        return self._state.tension_level

    @property
    def just_transitioned(self) -> bool:
        return self._transition_flag

    def advance(self, dt: float):
        """Advance the phase clock by *dt* seconds and smooth tension."""
        st = self._state
        st.phase_elapsed += dt

        self._transition_flag = False
        if st.phase_elapsed >= self.cfg.duration(st.phase):
            old = st.phase
            st.phase = old.next()
            st.phase_elapsed = 0.0
            st.target_tension = self.cfg.tension(st.phase)
            self._transition_flag = True
            logger.info("Pacing %s → %s (target tension %.2f)",
                        old.label, st.phase.label, st.target_tension)
            self._sink.emit(PacingChanged(
                phase=st.phase.label,
                target_tension=st.target_tension,
            ))

        gap = st.target_tension - st.tension_level
        st.tension_level = clamp(
            st.tension_level + gap * self.cfg.smoothing, 0.0, 1.0,
        )

    def reset_for_round(self):
        """Round start: force BUILDING with a low starting tension."""
        st = self._state
        st.phase = self.cfg.round_start_phase
        st.phase_elapsed = 0.0
        st.tension_level = self.cfg.round_start_tension
        st.target_tension = self.cfg.tension(st.phase)
        self._transition_flag = False
        logger.debug("Pacing reset for round: %s @ %.2f",
                     st.phase.label, st.tension_level)
