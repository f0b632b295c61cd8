"""
diagnostics.py  –  End-of-session reporting over the snapshot history.

The director's snapshot ring is diagnostics only; nothing here feeds back
into control decisions.  ``summarize_history`` aggregates it,
``print_summary`` prints a formatted report and ``plot_history`` saves a
scaling-factor / tension trend graph via matplotlib.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)

import matplotlib
matplotlib.use("Agg")  # headless backend, never opens a window
import matplotlib.pyplot as plt

from director.pacing import PacingPhase


def summarize_history(snapshots) -> dict:
    """Aggregate a sequence of PerformanceSnapshot into plain numbers."""
    snapshots = list(snapshots)
    if not snapshots:
        return {"count": 0}

    scaling = np.array([s.scaling_factor for s in snapshots], dtype=float)
    tension = np.array([s.tension_level for s in snapshots], dtype=float)
    phases = [s.pacing_phase for s in snapshots]

    occupancy = {
        phase.label: phases.count(phase.label) / len(phases)
        for phase in PacingPhase
    }

    return {
        "count":           len(snapshots),
        "duration":        snapshots[-1].timestamp - snapshots[0].timestamp,
        "scaling_mean":    float(scaling.mean()),
        "scaling_min":     float(scaling.min()),
        "scaling_max":     float(scaling.max()),
        "scaling_final":   float(scaling[-1]),
        "tension_mean":    float(tension.mean()),
        "tension_max":     float(tension.max()),
        "phase_occupancy": occupancy,
        "final_difficulty": snapshots[-1].difficulty_name,
    }


def print_summary(summary: dict):
    """Print a clean formatted history summary to stdout."""
    print("\n" + "=" * 52)
    print("  DIRECTOR SUMMARY")
    print("=" * 52)
    if not summary.get("count"):
        print("  No snapshots recorded.")
        print("=" * 52 + "\n")
        return

    print(f"  Snapshots        : {summary['count']}")
    print(f"  Span             : {summary['duration']:.1f}s")
    print(f"  Final profile    : {summary['final_difficulty']}")
    print("-" * 52)
    print(f"  Scaling mean     : {summary['scaling_mean']:.3f}")
    print(f"  Scaling range    : {summary['scaling_min']:.2f} – {summary['scaling_max']:.2f}")
    print(f"  Scaling final    : {summary['scaling_final']:.2f}")
    print(f"  Tension mean     : {summary['tension_mean']:.3f}")
    print(f"  Tension peak     : {summary['tension_max']:.3f}")
    print("-" * 52)
    for label, share in summary["phase_occupancy"].items():
        print(f"  {label:<16s} : {100 * share:5.1f}%")
    print("=" * 52 + "\n")


def plot_history(snapshots, filename: str = "director_trend.png") -> str | None:
    """Save scaling factor and tension over time. Returns the path or None."""
    snapshots = list(snapshots)
    if not snapshots:
        return None

    t = np.array([s.timestamp for s in snapshots], dtype=float)
    scaling = np.array([s.scaling_factor for s in snapshots], dtype=float)
    tension = np.array([s.tension_level for s in snapshots], dtype=float)

    fig, ax = plt.subplots()
    ax.plot(t, scaling, marker="o", label="Scaling factor")
    ax.plot(t, tension, marker=".", label="Tension")
    ax.set_xlabel("Time (seconds)")
    ax.set_ylabel("Value")
    ax.set_title("Director Trend")
    ax.legend()
    ax.grid(True)

    fig.savefig(filename, dpi=100, bbox_inches="tight")
    plt.close(fig)
    logger.info("Director trend graph saved to %s", filename)
    return filename
