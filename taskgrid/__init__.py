"""
taskgrid: a discrete grid-world simulation engine.

A single agent moves on a small grid with obstacles, carries tools, paints
the table and chair and opens the door. Each action is validated and
applied by the engine, which keeps shaped rewards, rolls episodes over and
publishes the observable world as a flat set of percepts.
"""

from taskgrid.objects import ObjectId, ObjectSpec, OBJECT_REGISTRY
from taskgrid.pathfinding import AStarSearch, find_path
from taskgrid.rewards import RewardConfig, RewardFunction, StepReward
from taskgrid.simulation import Simulation, SimulationConfig
from taskgrid.worlds.executor import UnknownActionError

__version__ = "0.1.0"
__all__ = [
    "ObjectId",
    "ObjectSpec",
    "OBJECT_REGISTRY",
    "AStarSearch",
    "find_path",
    "RewardConfig",
    "RewardFunction",
    "StepReward",
    "Simulation",
    "SimulationConfig",
    "UnknownActionError",
]
