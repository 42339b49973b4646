"""Periodic random motion of the dynamic objects (table, chair, door)."""

from __future__ import annotations

import logging
from typing import List

from taskgrid.objects import DYNAMIC_OBJECTS, ObjectId
from taskgrid.placement import nudge_object
from taskgrid.worlds.grid_env import WorldState

logger = logging.getLogger(__name__)


class DynamicMotionDriver:
    """
    Nudges every dynamic object lying on the grid once per ``period`` actions.

    Driven by the executor's action counter. Motion is best effort and never
    affects the outcome of the action that triggered it.
    """

    def __init__(self, period: int = 3, max_attempts: int = 10,
                 enabled: bool = True):
        if period <= 0:
            raise ValueError("motion period must be positive")
        self.period = period
        self.max_attempts = max_attempts
        self.enabled = enabled

    def should_fire(self, world: WorldState) -> bool:
        return (self.enabled
                and world.episode.dynamic_objects_enabled
                and world.action_counter % self.period == 0)

    def on_action(self, world: WorldState) -> List[ObjectId]:
        """Called after every counter advance; returns the objects that moved."""
        if not self.should_fire(world):
            return []
        return self.perturb(world)

    def perturb(self, world: WorldState) -> List[ObjectId]:
        moved = []
        for obj in DYNAMIC_OBJECTS:
            if world.objects[obj].carried:
                continue
            if nudge_object(world, obj, self.max_attempts):
                moved.append(obj)
        if moved:
            logger.debug("action %d: nudged %s", world.action_counter,
                         ", ".join(o.token for o in moved))
        return moved
