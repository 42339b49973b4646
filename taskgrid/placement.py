"""
Random placement and nudging of objects on the grid.

These are the two random operators of the world:

- ``sample_free_cell``: rejection-sample a cell for an object at the start
  of an episode (a large jump anywhere on the grid)
- ``nudge_object``: try to shift an object one cell in a random cardinal
  direction (a small local perturbation)

Both draw from the random source stored on the WorldState, so a seeded
simulation replays exactly. Both are best effort: when the attempt budget
runs out the object keeps its current cell.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from taskgrid.objects import ObjectId
from taskgrid.worlds.grid_env import Cell, Direction, WorldState

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Episode placement
# ---------------------------------------------------------------------------

def sample_free_cell(world: WorldState, obj: ObjectId,
                     max_attempts: int = 50) -> Optional[Cell]:
    """
    Draw a uniformly random usable cell for ``obj``.

    A candidate is rejected if it is an obstacle, the agent's start cell or
    holds another object lying on the grid. Returns None when no candidate
    is accepted within ``max_attempts`` draws.
    """
    size = world.grid.size
    for _ in range(max_attempts):
        x = world.rng.randint(1, size - 1)
        y = world.rng.randint(1, size - 1)
        if world.grid.is_obstacle(x, y):
            continue
        if (x, y) == world.start:
            continue
        if world.is_object_at(x, y, exclude=obj):
            continue
        return (x, y)
    return None


def randomize_positions(world: WorldState, objects: Iterable[ObjectId],
                        max_attempts: int = 50) -> None:
    """Re-place each object in turn; failures keep the previous cell."""
    objects = list(objects)
    for obj in objects:
        cell = sample_free_cell(world, obj, max_attempts)
        if cell is None:
            logger.debug("no free cell for %s after %d attempts, keeping %s",
                         obj, max_attempts, world.objects[obj].position)
            continue
        world.objects[obj].position = cell
    logger.debug("positions randomized: %s", ", ".join(
        f"{o}@{world.objects[o].position}" for o in objects))


# ---------------------------------------------------------------------------
# Local perturbation
# ---------------------------------------------------------------------------

def nudge_object(world: WorldState, obj: ObjectId,
                 max_attempts: int = 10) -> bool:
    """
    Try to move a non-carried object one cell in a random direction.

    A destination is accepted if it is in bounds, obstacle free and not
    occupied by another object on the grid. Returns True if the object
    moved.
    """
    state = world.objects[obj]
    if state.carried:
        return False

    x, y = state.position
    directions = Direction.all()
    for _ in range(max_attempts):
        dx, dy = world.rng.choice(directions).delta()
        nx, ny = x + dx, y + dy
        if world.grid.is_free(nx, ny) and not world.is_object_at(nx, ny, exclude=obj):
            state.position = (nx, ny)
            logger.debug("object %s moved to %s", obj, state.position)
            return True
    return False
