"""
events.py – Outbound director notifications.

The director never reaches for a global event bus.  Each component is handed
a ``NotificationSink`` at construction and emits plain frozen dataclasses
into it; whoever cares (HUD, network layer, music system, tests) subscribes.

Delivery is synchronous and fire-and-forget: a subscriber that raises is
logged and skipped, the remaining subscribers still receive the event.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, ClassVar

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Event payloads
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DifficultyChanged:
    type: ClassVar[str] = "difficulty-changed"

    profile_name: str
    scaling_factor: float
    adaptive_multipliers: dict = field(default_factory=dict)


@dataclass(frozen=True)
class PacingChanged:
    type: ClassVar[str] = "pacing-changed"

    phase: str
    target_tension: float


@dataclass(frozen=True)
class EncounterSpawned:
    type: ClassVar[str] = "encounter-spawned"

    id: str
    encounter_type: str
    position: tuple
    difficulty: str
    actor_count: int


@dataclass(frozen=True)
class EncounterEnded:
    type: ClassVar[str] = "encounter-ended"

    id: str
    encounter_type: str


Subscriber = Callable[[object], None]


# ══════════════════════════════════════════════════════════
#  Notification Sink
# ══════════════════════════════════════════════════════════

class NotificationSink:
    """Thread-safe observer list for director events."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[tuple[str | None, Subscriber]] = []

    def subscribe(self, callback: Subscriber, event_type: str | None = None) -> None:
        """Register *callback*; restrict to one ``event_type`` if given."""
        with self._lock:
            self._subscribers.append((event_type, callback))

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers = [
                (t, cb) for t, cb in self._subscribers if cb != callback
            ]

    def emit(self, event) -> None:
        with self._lock:
            targets = list(self._subscribers)
        for event_type, callback in targets:
            if event_type is not None and event_type != event.type:
                continue
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %r failed on %s", callback, event.type)


class RecordingSink(NotificationSink):
    """Sink that also keeps every emitted event – handy for diagnostics."""

    def __init__(self) -> None:
        super().__init__()
        self.events: list = []

    def emit(self, event) -> None:
        self.events.append(event)
        super().emit(event)

    def of_type(self, event_type: str) -> list:
        return [e for e in self.events if e.type == event_type]
