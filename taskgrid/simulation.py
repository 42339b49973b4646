"""
Simulation — the high-level entry point for driving the grid world.

Wires the world state, reward lifecycle, motion driver, percept publisher
and action executor behind a small API:

Usage:
    sim = Simulation(SimulationConfig(seed=42))
    sim.apply("agent", "path_to", "b")
    sim.apply("agent", "pickup", "b")
    facts = sim.percepts()

Each Simulation owns its own WorldState and random source, so several can
run side by side and a fixed seed replays exactly.
"""

from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, List, Optional, Union

from taskgrid.objects import DYNAMIC_OBJECTS
from taskgrid.placement import randomize_positions
from taskgrid.rewards import RewardConfig, RewardFunction
from taskgrid.worlds.dynamics import DynamicMotionDriver
from taskgrid.worlds.episodes import EpisodeLifecycle, EpisodeRecord, RunSummary
from taskgrid.worlds.executor import ActionExecutor
from taskgrid.worlds.grid_env import GridConfig, WorldState
from taskgrid.worlds.percepts import PerceptPublisher, PerceptSet

logger = logging.getLogger(__name__)

_TRUE_STRINGS = ("1", "true", "yes", "on")


@dataclass
class SimulationConfig:
    """Configuration for a simulation run."""
    grid: GridConfig = field(default_factory=GridConfig)
    rewards: RewardConfig = field(default_factory=RewardConfig)
    seed: Optional[int] = None
    episode_budget: int = 100           # completed episodes before the run ends
    dynamic_objects: bool = True        # nudge table, chair and door while on the ground
    motion_period: int = 3              # nudge every N actions
    motion_attempts: int = 10           # random directions tried per nudge
    placement_attempts: int = 50        # rejection-sampling budget per object
    randomize_on_init: bool = True      # re-place table, chair and door before play
    reward_log_path: Optional[Union[str, Path]] = "episode_rewards.txt"
    auto_exit: bool = False             # exit the process after each episode
    move_delay: float = 0.0             # pacing between composite moves (seconds)
    explore_delay: float = 0.0
    verbose: bool = False

    @classmethod
    def from_env(cls, base: Optional["SimulationConfig"] = None,
                 environ: Optional[dict] = None) -> "SimulationConfig":
        """
        Apply environment overrides for batch invocation.

        TASKGRID_AUTO_EXIT      exit after each completed episode
        TASKGRID_SEED           integer seed
        TASKGRID_REWARD_LOG     reward log path ("" disables the log)
        """
        config = base or cls()
        env = os.environ if environ is None else environ
        changes = {}
        if "TASKGRID_AUTO_EXIT" in env:
            changes["auto_exit"] = env["TASKGRID_AUTO_EXIT"].strip().lower() in _TRUE_STRINGS
        if env.get("TASKGRID_SEED", "").strip():
            changes["seed"] = int(env["TASKGRID_SEED"])
        if "TASKGRID_REWARD_LOG" in env:
            changes["reward_log_path"] = env["TASKGRID_REWARD_LOG"] or None
        return replace(config, **changes)


class Simulation:
    """
    A grid world driven by discrete actions.

    Parameters
    ----------
    config : SimulationConfig, optional
        Run configuration. Defaults reproduce the standard task.
    rng : random.Random, optional
        Random source for placement and motion. Overrides ``config.seed``.
    on_publish : Callable, optional
        Called with every published percept snapshot.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[random.Random] = None,
        on_publish: Optional[Callable[[PerceptSet], None]] = None,
    ):
        self.config = config or SimulationConfig()
        c = self.config
        self.world = WorldState(c.grid, rng if rng is not None else random.Random(c.seed))
        self.lifecycle = EpisodeLifecycle(
            reward_fn=RewardFunction(c.rewards),
            episode_budget=c.episode_budget,
            placement_attempts=c.placement_attempts,
            reward_log_path=c.reward_log_path,
            auto_exit=c.auto_exit,
            verbose=c.verbose,
        )
        self.motion = DynamicMotionDriver(
            period=c.motion_period,
            max_attempts=c.motion_attempts,
            enabled=c.dynamic_objects,
        )
        self.publisher = PerceptPublisher(c.grid.visibility_radius)
        self.executor = ActionExecutor(
            self.world,
            self.lifecycle,
            self.motion,
            self.publisher,
            on_publish=on_publish,
            move_delay=c.move_delay,
            explore_delay=c.explore_delay,
        )

        if c.randomize_on_init:
            randomize_positions(self.world, DYNAMIC_OBJECTS, c.placement_attempts)
        self.executor.publish(apply_step_cost=False)

    # --- action intake ---

    def apply(self, actor_id: str, action_name: str, *args) -> bool:
        """Apply one action; see ActionExecutor.apply."""
        return self.executor.apply(actor_id, action_name, *args)

    @property
    def actions(self) -> List[str]:
        return self.executor.actions

    # --- percept egress ---

    def percepts(self) -> PerceptSet:
        """Fresh projection of the current world (no reward pass)."""
        return self.publisher.publish(self.world)

    @property
    def last_percepts(self) -> Optional[PerceptSet]:
        """The snapshot emitted by the last publication."""
        return self.executor.last_percepts

    # --- run state ---

    @property
    def episode_history(self) -> List[float]:
        return list(self.world.episode.history)

    @property
    def records(self) -> List[EpisodeRecord]:
        return list(self.lifecycle.records)

    @property
    def summary(self) -> Optional[RunSummary]:
        return self.lifecycle.summary

    @property
    def finished(self) -> bool:
        return self.world.episode.finished

    def render(self) -> str:
        return self.world.render()
