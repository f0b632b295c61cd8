"""
main.py - Entry point for the Adaptive Director headless simulation.

Wires the director to a simulated world:
- Performance tracking (director/performance_tracker.py)
- Closed-loop difficulty scaling (director/difficulty_controller.py)
- Cyclic pacing (director/pacing.py)
- Encounter scheduling (director/encounter_scheduler.py)
- Squad formation / alerts (director/squad_coordinator.py)
- Simulated roster and spawner (systems/)

Run:  python main.py --seconds 300 --seed 7 --players 4 --plot trend.png
"""
VERSION = "1.0.0"

import argparse
import logging
import sys

logger = logging.getLogger(__name__)

from settings import DIFFICULTY_LEVELS, DEFAULT_DIFFICULTY
from director.diagnostics import summarize_history, print_summary, plot_history
from director.simulation_runner import SimulationRunner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a headless Adaptive Director simulation.",
    )
    parser.add_argument("--seconds", type=float, default=300.0,
                        help="simulated round length in seconds (default: 300)")
    parser.add_argument("--seed", type=int, default=0,
                        help="random seed (default: 0)")
    parser.add_argument("--players", type=int, default=4,
                        help="number of simulated players (default: 4)")
    parser.add_argument("--difficulty", choices=DIFFICULTY_LEVELS,
                        default=DEFAULT_DIFFICULTY,
                        help="starting difficulty profile")
    parser.add_argument("--plot", metavar="FILE", default=None,
                        help="save a scaling / tension trend graph to FILE")
    parser.add_argument("--verbose", action="store_true",
                        help="log routine decisions (DEBUG)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    runner = SimulationRunner(
        seconds=args.seconds,
        seed=args.seed,
        n_players=args.players,
        difficulty=args.difficulty,
    )
    runner.run()

    history = runner.director.tracker.history
    print_summary(summarize_history(history))
    if args.plot:
        plot_history(history, args.plot)
    return 0


# ── Run ───────────────────────────────────────────────────
if __name__ == "__main__":
    sys.exit(main())
