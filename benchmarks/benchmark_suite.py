"""
Benchmark suite for taskgrid.

Runs the scripted controller under a set of world configurations of
increasing difficulty, measuring:
- Completion rate (episodes completed / episodes attempted)
- Episode reward (average, best, worst)
- Moves per completed episode
- Wall-clock cost
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict

import numpy as np

from taskgrid import Simulation, SimulationConfig
from taskgrid.scripted import ScriptedController
from taskgrid.worlds.grid_env import GridConfig


@dataclass
class BenchmarkScenario:
    """A world configuration the controller is measured on."""
    name: str
    description: str
    options: Dict = field(default_factory=dict)
    difficulty: str = "easy"  # easy, medium, hard


# ---------------------------------------------------------------------------
# Scenarios — ordered by difficulty
# ---------------------------------------------------------------------------

SCENARIOS = [
    # --- Easy: nothing moves ---
    BenchmarkScenario(
        "static_default", "default layout, no motion",
        dict(dynamic_objects=False, randomize_on_init=False),
    ),
    BenchmarkScenario(
        "static_random", "random goal placement, no motion",
        dict(dynamic_objects=False),
    ),

    # --- Medium: goal objects drift ---
    BenchmarkScenario(
        "dynamic", "goal objects nudged every 3 actions",
        dict(), difficulty="medium",
    ),
    BenchmarkScenario(
        "open_floor", "no obstacles, goal objects nudged",
        dict(grid=GridConfig(obstacles=[])), difficulty="medium",
    ),

    # --- Hard: faster drift ---
    BenchmarkScenario(
        "restless", "goal objects nudged every action",
        dict(motion_period=1), difficulty="hard",
    ),
]


def run_benchmark(scenario: BenchmarkScenario, episodes: int = 50,
                  seed: int = 42) -> dict:
    """Run a single scenario for ``episodes`` attempts."""
    config = SimulationConfig(
        seed=seed,
        episode_budget=episodes,
        reward_log_path=None,
        **scenario.options,
    )
    sim = Simulation(config)

    t0 = time.time()
    ScriptedController(sim).run(max_episodes=episodes)
    elapsed = time.time() - t0

    history = np.array(sim.episode_history)
    steps = [r.steps for r in sim.records]
    return {
        "name": scenario.name,
        "difficulty": scenario.difficulty,
        "completed": len(history),
        "attempted": episodes,
        "avg_reward": float(history.mean()) if len(history) else 0.0,
        "best_reward": float(history.max()) if len(history) else 0.0,
        "worst_reward": float(history.min()) if len(history) else 0.0,
        "avg_steps": float(np.mean(steps)) if steps else 0.0,
        "actions": sim.world.action_counter,
        "time_sec": elapsed,
    }


def run_all_benchmarks(episodes: int = 50, seed: int = 42, verbose: bool = True):
    """Run all scenarios and print a summary table."""
    print("=" * 90)
    print("  taskgrid — Benchmark Suite")
    print("=" * 90)
    print()

    results = []
    for scenario in SCENARIOS:
        if verbose:
            print(f"  [{scenario.difficulty:6s}] {scenario.name:15s} {scenario.description}")
        r = run_benchmark(scenario, episodes=episodes, seed=seed)
        results.append(r)
        if verbose:
            status = "✓" if r["completed"] == r["attempted"] else "✗"
            print(f"           {status} completed={r['completed']}/{r['attempted']}  "
                  f"reward={r['avg_reward']:.3f} "
                  f"[{r['worst_reward']:.3f}, {r['best_reward']:.3f}]  "
                  f"steps={r['avg_steps']:.1f}  "
                  f"time={r['time_sec']:.2f}s")
            print()

    solved = sum(1 for r in results if r["completed"] == r["attempted"])
    print("=" * 90)
    print(f"  Fully completed: {solved}/{len(results)} scenarios")

    by_difficulty = {}
    for r in results:
        d = by_difficulty.setdefault(r["difficulty"], {"completed": 0, "attempted": 0})
        d["completed"] += r["completed"]
        d["attempted"] += r["attempted"]

    for d in ["easy", "medium", "hard"]:
        if d in by_difficulty:
            s = by_difficulty[d]
            print(f"    {d:8s}: {s['completed']}/{s['attempted']} episodes")

    print("=" * 90)

    return results


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    run_all_benchmarks()
