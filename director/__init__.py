"""
director package – Adaptive Director: difficulty, pacing and encounter control.

Modules:
    ai_director           – AdaptiveDirector, orchestrates every sub-system per tick
    performance_tracker   – Per-player / per-team metrics, skill and performance scoring
    difficulty_controller – Closed-loop global scaling over named difficulty profiles
    pacing                – Cyclic pacing state machine (Rest → Building → Action → Climax)
    encounter_scheduler   – Weighted encounter selection, spawning and retirement
    squad_coordinator     – Squad formation and combat-alert relay
    collaborators         – Protocols for the host game, no-op stand-ins, DirectorContext
    events                – Outbound notifications and the notification sink
    diagnostics           – Snapshot history summary and trend plot
    simulation_runner     – Headless seeded simulation over a simulated world
"""
