"""
Quick start example for taskgrid.

Demonstrates the core workflow:
1. Build a seeded simulation of the standard task
2. Drive a few actions by hand and read the percepts
3. Let the scripted controller play the remaining episodes
"""

import logging

from taskgrid import Simulation, SimulationConfig
from taskgrid.scripted import ScriptedController
from taskgrid.worlds.percepts import render


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = SimulationConfig(
        seed=42,
        episode_budget=5,        # short run for the demo
        reward_log_path=None,    # keep the working directory clean
    )
    sim = Simulation(config)

    print("taskgrid — Quick Start")
    print("=" * 50)
    print(sim.render())
    print()

    # --- Fetch the brush by hand ---
    sim.apply("agent", "path_to", "b")
    sim.apply("agent", "pickup", "b")
    print("Percepts after fetching the brush:")
    print(render(sim.last_percepts))
    print()

    # --- Hand over to the scripted controller ---
    sim.apply("agent", "reset_episode")
    summary = ScriptedController(sim).run()

    print()
    print(summary.summary())


if __name__ == "__main__":
    main()
