"""entities package – Simulated actors and players for the headless harness."""

from .actor import SimActor
from .player import SimPlayer
