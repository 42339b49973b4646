"""
Episode lifecycle — reward accounting, goal detection and episode rollover.

Every publication of the world runs one reward pass:

    settle → reward(step) → pay new goal bonuses → accumulate → completed?

A pass with step cost happens once per primitive move; a pass without step
cost happens after every other action, so painting or opening the last goal
completes the episode even though no move was made.

When the table and chair are painted and the door is open:
1. The episode reward is appended to the history and to the reward log
2. If auto-exit is configured the process terminates here
3. If the episode budget is spent the run finishes: dynamic motion is
   switched off for good and a summary is produced
4. Otherwise the world is reset for the next episode, with the table,
   chair and door placed at fresh random cells
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np

from taskgrid.objects import DYNAMIC_OBJECTS, ObjectId
from taskgrid.placement import randomize_positions
from taskgrid.rewards import RewardFunction, StepReward
from taskgrid.worlds.grid_env import Cell, WorldState

logger = logging.getLogger(__name__)


@dataclass
class EpisodeRecord:
    """Record of a single completed episode."""
    index: int
    reward: float
    steps: int
    goal_positions: Dict[ObjectId, Cell] = field(default_factory=dict)


@dataclass
class RunSummary:
    """Result of a run that has used up its episode budget."""
    episodes_run: int
    history: List[float]

    @property
    def average(self) -> float:
        return float(np.mean(self.history)) if self.history else 0.0

    def summary(self) -> str:
        lines = [
            "═" * 55,
            "  taskgrid — Run Summary",
            "═" * 55,
            f"  Episodes run:      {self.episodes_run}",
            f"  Average reward:    {self.average:.4f}",
        ]
        if self.history:
            lines.append(f"  Best reward:       {max(self.history):.4f}")
            lines.append(f"  Worst reward:      {min(self.history):.4f}")
            lines.append(f"  Last reward:       {self.history[-1]:.4f}")
        lines.append("═" * 55)
        return "\n".join(lines)


class EpisodeLifecycle:
    """
    Owns reward accumulation and the episode boundary.

    Parameters
    ----------
    reward_fn : RewardFunction
        Computes the reward of each pass.
    episode_budget : int
        Completed episodes after which the run finishes. Default 100.
    placement_attempts : int
        Rejection-sampling budget per dynamic object on reset. Default 50.
    reward_log_path : str or Path, optional
        Append-only log of completed episode rewards, one per line.
        None disables the log.
    auto_exit : bool
        Terminate the process after every completed episode. Default False.
    verbose : bool
        Print the run summary as well as logging it.
    """

    def __init__(
        self,
        reward_fn: Optional[RewardFunction] = None,
        episode_budget: int = 100,
        placement_attempts: int = 50,
        reward_log_path: Optional[Union[str, Path]] = "episode_rewards.txt",
        auto_exit: bool = False,
        verbose: bool = False,
    ):
        if episode_budget <= 0:
            raise ValueError("episode_budget must be positive")
        self.reward_fn = reward_fn or RewardFunction()
        self.episode_budget = episode_budget
        self.placement_attempts = placement_attempts
        self.reward_log_path = Path(reward_log_path) if reward_log_path else None
        self.auto_exit = auto_exit
        self.verbose = verbose
        self.records: List[EpisodeRecord] = []
        self.summary: Optional[RunSummary] = None

    # --- reward passes ---

    def settle(self, world: WorldState, apply_step_cost: bool) -> StepReward:
        """Run one reward pass and handle episode completion."""
        objects = world.objects
        goal_states = {
            ObjectId.TABLE: (objects[ObjectId.TABLE].colored, objects[ObjectId.TABLE].awarded),
            ObjectId.CHAIR: (objects[ObjectId.CHAIR].colored, objects[ObjectId.CHAIR].awarded),
            ObjectId.DOOR: (objects[ObjectId.DOOR].opened, objects[ObjectId.DOOR].awarded),
        }
        result = self.reward_fn.compute(
            world.carried_objects(), goal_states, apply_step_cost)

        episode = world.episode
        if apply_step_cost:
            episode.step_count += 1
        for obj in result.goals_awarded:
            objects[obj].awarded = True
        episode.reward += result.total
        episode.last_step_reward = result.total

        logger.debug("step cost=%s %r => episode=%.3f",
                     apply_step_cost, result, episode.reward)

        if not episode.finished and world.goals_met():
            self.complete(world)
        return result

    # --- episode boundary ---

    def complete(self, world: WorldState) -> EpisodeRecord:
        """Record the finished episode, then finish the run or reset."""
        episode = world.episode
        record = EpisodeRecord(
            index=episode.episode_index,
            reward=episode.reward,
            steps=episode.step_count,
            goal_positions={o: world.objects[o].position for o in DYNAMIC_OBJECTS},
        )
        logger.info("episode completed with reward %s, steps=%d, positions: %s",
                    record.reward, record.steps, ", ".join(
                        f"{o}@{p}" for o, p in record.goal_positions.items()))

        episode.history.append(record.reward)
        episode.episodes_run += 1
        self.records.append(record)
        self._append_to_log(record.reward)

        if self.auto_exit:
            logger.info("episode done, exiting (auto_exit=True)")
            sys.exit(0)

        if episode.episodes_run >= self.episode_budget:
            self.finish(world)
        else:
            self.reset(world)
        return record

    def finish(self, world: WorldState) -> RunSummary:
        episode = world.episode
        episode.finished = True
        episode.dynamic_objects_enabled = False
        self.summary = RunSummary(episode.episodes_run, list(episode.history))
        text = self.summary.summary()
        logger.info("completed %d episodes, average episode reward %s",
                    self.summary.episodes_run, self.summary.average)
        logger.info("\n%s", text)
        if self.verbose:
            print(text)
        return self.summary

    def reset(self, world: WorldState) -> None:
        """Return the world to the start state with fresh goal placements."""
        episode = world.episode
        episode.episode_index += 1
        logger.info("resetting episode %d", episode.episode_index)

        world.agent.position = world.start
        world.agent.carried = 0
        for state in world.objects.values():
            state.carried = False
            state.colored = False
            state.opened = False
            state.awarded = False

        episode.reward = 0.0
        episode.last_step_reward = 0.0
        episode.step_count = 0
        randomize_positions(world, DYNAMIC_OBJECTS, self.placement_attempts)

    def _append_to_log(self, reward: float) -> None:
        if self.reward_log_path is None:
            return
        try:
            with self.reward_log_path.open("a", encoding="utf-8") as fh:
                fh.write(f"{reward}\n")
        except OSError as e:
            logger.warning("failed to write reward file %s: %s",
                           self.reward_log_path, e)
