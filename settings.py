"""
settings.py - Static configuration for the Adaptive Director.

All tunable values live here so they're easy to tweak
and easy to reference from any module.  Nothing in this file is
loaded at runtime from disk; it is compiled-in data.
"""

# ── Tick / analysis loop ──────────────────────────────────
ANALYSIS_INTERVAL = 10.0       # seconds between analysis passes
SIMULATION_TICK = 0.5          # seconds per tick in the headless simulation

# ── Difficulty profiles ───────────────────────────────────
# Five per-axis values for each discrete level.
DIFFICULTY_EASY = {
    "reaction_time": 0.8,
    "accuracy": 0.4,
    "aggression": 0.3,
    "spawn_rate": 0.6,
    "health": 0.8,
    "description": "Relaxed gameplay",
}
DIFFICULTY_MEDIUM = {
    "reaction_time": 0.3,
    "accuracy": 0.7,
    "aggression": 0.5,
    "spawn_rate": 1.0,
    "health": 1.0,
    "description": "Balanced challenge",
}
DIFFICULTY_HARD = {
    "reaction_time": 0.15,
    "accuracy": 0.85,
    "aggression": 0.8,
    "spawn_rate": 1.3,
    "health": 1.2,
    "description": "Intense combat",
}
DIFFICULTY_EXPERT = {
    "reaction_time": 0.1,
    "accuracy": 0.95,
    "aggression": 1.0,
    "spawn_rate": 1.5,
    "health": 1.5,
    "description": "Maximum challenge",
}
DIFFICULTY_LEVELS = ("easy", "medium", "hard", "expert")
DEFAULT_DIFFICULTY = "medium"

# ── Difficulty controller ─────────────────────────────────
TARGET_PERFORMANCE = 0.6       # aim for a 60 % success rate
PERFORMANCE_DEADBAND = 0.1     # |delta| must exceed this to adjust
SCALING_STEP = 0.05
SCALING_MIN = 0.5
SCALING_MAX = 2.0

# ── Performance scoring ───────────────────────────────────
AVG_SURVIVAL_TIME = 30.0       # seconds – reference survival for skill score
SKILL_THRESHOLDS = (50.0, 100.0, 150.0)   # easy < medium < hard < expert
NEUTRAL_PERFORMANCE = 0.5      # reported when no players are tracked
SNAPSHOT_HISTORY_SIZE = 100

# ── Pacing curve ──────────────────────────────────────────
# (duration seconds, target tension) per phase, in cycle order.
PACING_REST = (20.0, 0.2)
PACING_BUILDING = (30.0, 0.5)
PACING_ACTION = (25.0, 0.8)
PACING_CLIMAX = (15.0, 1.0)
TENSION_SMOOTHING = 0.1        # fraction of the gap closed per advance
ROUND_START_TENSION = 0.3
INITIAL_TENSION = 0.5

# ── Encounter types ───────────────────────────────────────
ENCOUNTER_PATROL = {
    "actor_count": 2,
    "difficulty": "medium",
    "duration": 30.0,
    "description": "Basic patrol encounter",
}
ENCOUNTER_AMBUSH = {
    "actor_count": 3,
    "difficulty": "hard",
    "duration": 20.0,
    "description": "Surprise attack",
}
ENCOUNTER_REINFORCEMENT = {
    "actor_count": 4,
    "difficulty": "medium",
    "duration": 45.0,
    "description": "Enemy reinforcements",
}
ENCOUNTER_ELITE_SQUAD = {
    "actor_count": 2,
    "difficulty": "expert",
    "duration": 60.0,
    "description": "Elite enemy squad",
}
ENCOUNTER_SIEGE = {
    "actor_count": 6,
    "difficulty": "hard",
    "duration": 90.0,
    "description": "Large scale assault",
}

# ── Encounter scheduler ───────────────────────────────────
MAX_ACTIVE_ENCOUNTERS = 3
ENCOUNTER_COOLDOWN = 15.0      # seconds, divided by the encounter rate

# Base encounter rate per pacing phase
PHASE_ENCOUNTER_RATE = {
    "rest": 0.3,
    "building": 0.7,
    "action": 1.2,
    "climax": 1.8,
}
HIGH_PERFORMANCE = 0.7         # above → rate x1.3
LOW_PERFORMANCE = 0.4          # below → rate x0.7
HIGH_PERFORMANCE_RATE_MULT = 1.3
LOW_PERFORMANCE_RATE_MULT = 0.7

# Encounter difficulty overrides
ELITE_PERFORMANCE = 0.8        # above → "hard"
STRUGGLING_PERFORMANCE = 0.3   # below → "easy"

# Spawn-point distance band from the nearest player
SPAWN_MIN_DISTANCE = 30.0
SPAWN_MAX_DISTANCE = 100.0
OPPOSING_TEAM = "opposing"

# ── Squads ────────────────────────────────────────────────
SQUAD_LATERAL_SPACING = 3.0    # units between members, sideways
SQUAD_TRAIL_DISTANCE = 2.0     # units behind the leader
DEFAULT_FORMATION = "line"
COMBAT_STATE = "combat"

# ── Headless simulation ───────────────────────────────────
SIM_ARENA_SIZE = 200.0         # square arena side, centered on origin
SIM_SPAWN_POINTS = 12
SIM_SPAWN_FAILURE_RATE = 0.1   # chance a single actor spawn returns nothing
SIM_EVENT_RATE = 0.35          # chance per player per tick of a combat event
SIM_ACTOR_SPEED = 4.0          # units per second toward destination
SIM_ACTOR_HEALTH = 100.0
