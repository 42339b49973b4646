"""
The grid world: state, rules and observation.

The world is a single mutable WorldState acted on by a handful of
components:

- Grid / WorldState: bounds, obstacles, agent, objects, counters
- ActionExecutor: validates and applies actions (taskgrid.worlds.executor)
- EpisodeLifecycle: rewards, goal bonuses, episode rollover
- DynamicMotionDriver: periodic nudging of the table, chair and door
- PerceptPublisher: projection of the world into flat facts
"""

from taskgrid.worlds.grid_env import (
    AgentState,
    Direction,
    EpisodeState,
    Grid,
    GridConfig,
    WorldObject,
    WorldState,
)
from taskgrid.worlds.percepts import Percept, PerceptPublisher, PerceptSet

__all__ = [
    "AgentState",
    "Direction",
    "EpisodeState",
    "Grid",
    "GridConfig",
    "WorldObject",
    "WorldState",
    "Percept",
    "PerceptPublisher",
    "PerceptSet",
]
