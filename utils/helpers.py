"""helpers.py - Reusable numeric and vector utilities."""

from __future__ import annotations

import pygame


def clamp(value: float, low: float, high: float) -> float:
    """Clamp *value* into the closed range [low, high]."""
    return max(low, min(high, value))


def as_vector(position) -> pygame.math.Vector3:
    """Coerce a position-like value into a fresh ``Vector3``.

    Accepts ``Vector3``, ``Vector2`` (z = 0) or any 2/3-item sequence.
    """
    if isinstance(position, pygame.math.Vector3):
        return pygame.math.Vector3(position)
    if isinstance(position, pygame.math.Vector2):
        return pygame.math.Vector3(position.x, position.y, 0.0)
    coords = tuple(position)
    if len(coords) == 2:
        return pygame.math.Vector3(coords[0], coords[1], 0.0)
    return pygame.math.Vector3(coords[0], coords[1], coords[2])
