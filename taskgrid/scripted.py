"""
Reference scripted controller.

A fixed plan that solves one episode through the public action surface:

    fetch brush, fetch color → paint table → paint chair
    → drop brush and color → fetch key, fetch card → open door

It makes no decisions beyond retrying an interaction when the target has
drifted away while the agent was walking. Used by the demos, the benchmark
runner and the integration tests; real agents live outside this package.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from taskgrid.objects import ObjectId
from taskgrid.simulation import Simulation
from taskgrid.worlds.episodes import RunSummary

logger = logging.getLogger(__name__)

# (action, object) pairs; every interaction is preceded by path_to(object).
EPISODE_PLAN: List[Tuple[str, ObjectId]] = [
    ("pickup", ObjectId.BRUSH),
    ("pickup", ObjectId.COLOR),
    ("paint", ObjectId.TABLE),
    ("paint", ObjectId.CHAIR),
    ("drop", ObjectId.BRUSH),
    ("drop", ObjectId.COLOR),
    ("pickup", ObjectId.KEY),
    ("pickup", ObjectId.CARD),
    ("open", ObjectId.DOOR),
]


class ScriptedController:
    """
    Drives a Simulation with EPISODE_PLAN.

    Parameters
    ----------
    sim : Simulation
        The simulation to drive.
    actor_id : str
        Name the actions are submitted under. Default "agent".
    max_attempts : int
        Approach-and-interact attempts per plan step. Default 10.
    """

    def __init__(self, sim: Simulation, actor_id: str = "agent",
                 max_attempts: int = 10):
        self.sim = sim
        self.actor_id = actor_id
        self.max_attempts = max_attempts

    def _act(self, action: str, obj: ObjectId) -> bool:
        if action == "drop":
            return self.sim.apply(self.actor_id, action, obj.token)
        for _ in range(self.max_attempts):
            self.sim.apply(self.actor_id, "path_to", obj.token)
            if self.sim.apply(self.actor_id, action, obj.token):
                return True
        return False

    def run_episode(self) -> bool:
        """Play one episode; True if it was completed."""
        episode = self.sim.world.episode
        completed_before = episode.episodes_run
        for action, obj in EPISODE_PLAN:
            if not self._act(action, obj):
                logger.warning("plan step %s(%s) failed, resetting episode",
                               action, obj)
                self.sim.apply(self.actor_id, "reset_episode")
                return False
        return episode.episodes_run > completed_before

    def run(self, max_episodes: Optional[int] = None) -> Optional[RunSummary]:
        """Play episodes until the run finishes or ``max_episodes`` were tried."""
        played = 0
        while not self.sim.finished:
            if max_episodes is not None and played >= max_episodes:
                break
            self.run_episode()
            played += 1
        return self.sim.summary
