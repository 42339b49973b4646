"""
Grid world state: static bounds and obstacles plus the mutable world.

The grid is a square of ``size × size`` cells addressed as (x, y). Row and
column 0 are reserved; usable coordinates run from 1 to ``size - 1``
inclusive. ``UP`` increases y and ``RIGHT`` increases x.

Two layers live here:
1. Grid: immutable bounds and a read-only obstacle mask (pure lookup)
2. WorldState: the single mutable simulation context: agent, objects,
   episode counters, the action counter and the random source

Default layout (size 6, usable 1..5):

    y=5  b  .  cd #  cl      (t, ch and d are re-placed at
    y=4  k  .  .  #  .        random before play)
    y=3  .  .  .  .  .
    y=2  .  #  .  ch .
    y=1  A  #  d  .  t
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from taskgrid.objects import OBJECT_REGISTRY, ObjectId


Cell = Tuple[int, int]


# ---------------------------------------------------------------------------
# Directions
# ---------------------------------------------------------------------------

class Direction(IntEnum):
    """The four cardinal directions."""
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    def delta(self) -> Tuple[int, int]:
        """(dx, dy) displacement for this direction."""
        return {
            Direction.UP: (0, 1),
            Direction.RIGHT: (1, 0),
            Direction.DOWN: (0, -1),
            Direction.LEFT: (-1, 0),
        }[self]

    @property
    def token(self) -> str:
        return self.name.lower()

    @staticmethod
    def all() -> List["Direction"]:
        return [Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT]

    @staticmethod
    def parse(value) -> Optional["Direction"]:
        """Resolve a token like "up" (or a Direction) to a Direction."""
        if isinstance(value, Direction):
            return value
        try:
            return Direction[str(value).upper()]
        except KeyError:
            return None

    def __str__(self) -> str:
        return self.token


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def _default_object_positions() -> Dict[ObjectId, Cell]:
    return {
        ObjectId.BRUSH: (1, 5),
        ObjectId.COLOR: (5, 5),
        ObjectId.KEY: (1, 4),
        ObjectId.CARD: (3, 5),
        ObjectId.TABLE: (5, 1),
        ObjectId.CHAIR: (4, 2),
        ObjectId.DOOR: (3, 1),
    }


@dataclass
class GridConfig:
    """Configuration for building a grid world."""
    size: int = 6  # usable coordinates are 1..size-1
    obstacles: List[Cell] = field(
        default_factory=lambda: [(2, 1), (2, 2), (4, 4), (4, 5)])
    start: Cell = (1, 1)
    capacity: int = 3
    visibility_radius: int = 2
    object_positions: Dict[ObjectId, Cell] = field(
        default_factory=_default_object_positions)


# ---------------------------------------------------------------------------
# Grid model
# ---------------------------------------------------------------------------

class Grid:
    """
    Static bounds and obstacle mask.

    The mask is loaded once and marked read-only; nothing may change it for
    the life of the grid.
    """

    def __init__(self, size: int, obstacles: List[Cell]):
        if size < 2:
            raise ValueError("grid size must be at least 2")
        self.size = size
        mask = np.zeros((size, size), dtype=bool)
        for x, y in obstacles:
            if not self.in_bounds(x, y):
                raise ValueError(f"obstacle {(x, y)} is outside the grid")
            mask[x, y] = True
        mask.setflags(write=False)
        self._mask = mask

    @property
    def mask(self) -> np.ndarray:
        return self._mask

    def in_bounds(self, x: int, y: int) -> bool:
        return 1 <= x < self.size and 1 <= y < self.size

    def is_obstacle(self, x: int, y: int) -> bool:
        if not (0 <= x < self.size and 0 <= y < self.size):
            return False
        return bool(self._mask[x, y])

    def is_free(self, x: int, y: int) -> bool:
        """In bounds and not an obstacle."""
        return self.in_bounds(x, y) and not self._mask[x, y]

    def cells(self) -> Iterator[Cell]:
        """All usable cells, column by column."""
        for x in range(1, self.size):
            for y in range(1, self.size):
                yield (x, y)

    def obstacles(self) -> List[Cell]:
        return [(int(x), int(y)) for x, y in zip(*np.nonzero(self._mask))]


# ---------------------------------------------------------------------------
# Mutable world state
# ---------------------------------------------------------------------------

@dataclass
class AgentState:
    position: Cell
    capacity: int
    carried: int = 0


@dataclass
class WorldObject:
    """
    One object's mutable state.

    While ``carried`` is set the stored position is stale and is not
    reported. ``colored`` applies to paintable objects and ``opened`` to
    the door. ``awarded`` is set the first time the object's goal bonus is
    paid out in the current episode.
    """
    object_id: ObjectId
    position: Cell
    carried: bool = False
    colored: bool = False
    opened: bool = False
    awarded: bool = False


@dataclass
class EpisodeState:
    reward: float = 0.0
    last_step_reward: float = 0.0
    step_count: int = 0
    episode_index: int = 0  # resets performed so far
    episodes_run: int = 0   # completed episodes
    history: List[float] = field(default_factory=list)
    dynamic_objects_enabled: bool = True
    finished: bool = False  # episode budget exhausted


class WorldState:
    """
    The simulation context passed to every engine operation.

    Holds the grid, the agent, every object keyed by ObjectId, the episode
    counters, the global action counter (never reset) and the random source
    used for placement and motion.
    """

    def __init__(self, config: GridConfig, rng: Optional[random.Random] = None):
        self.config = config
        self.grid = Grid(config.size, config.obstacles)
        if not self.grid.is_free(*config.start):
            raise ValueError(f"start cell {config.start} is not a free cell")
        if config.capacity < 0:
            raise ValueError("capacity must be non-negative")
        missing = set(OBJECT_REGISTRY).difference(config.object_positions)
        if missing:
            raise ValueError(
                f"missing object positions: {sorted(o.token for o in missing)}")
        for obj in OBJECT_REGISTRY:
            cell = tuple(config.object_positions[obj])
            if not self.grid.is_free(*cell):
                raise ValueError(
                    f"object {obj.token} at {cell} is not on a free cell")

        self.start = config.start
        self.agent = AgentState(position=config.start, capacity=config.capacity)
        self.objects: Dict[ObjectId, WorldObject] = {
            obj: WorldObject(obj, tuple(config.object_positions[obj]))
            for obj in OBJECT_REGISTRY
        }
        self.episode = EpisodeState()
        self.action_counter = 0
        self.rng = rng if rng is not None else random.Random()

    # --- queries ---

    def carried_objects(self) -> List[ObjectId]:
        return [o for o, state in self.objects.items() if state.carried]

    def is_carrying(self, obj: ObjectId) -> bool:
        return self.objects[obj].carried

    def ground_objects(self) -> List[WorldObject]:
        """Objects lying on the grid (not carried)."""
        return [state for state in self.objects.values() if not state.carried]

    def is_object_at(self, x: int, y: int,
                     exclude: Optional[ObjectId] = None) -> bool:
        """Whether a non-carried object (other than ``exclude``) sits at (x, y)."""
        for state in self.ground_objects():
            if state.object_id != exclude and state.position == (x, y):
                return True
        return False

    def goals_met(self) -> bool:
        return (self.objects[ObjectId.TABLE].colored
                and self.objects[ObjectId.CHAIR].colored
                and self.objects[ObjectId.DOOR].opened)

    def render(self) -> str:
        """ASCII rendering of the grid for debugging (top row is highest y)."""
        lines = []
        for y in range(self.grid.size - 1, 0, -1):
            row_str = ""
            for x in range(1, self.grid.size):
                if (x, y) == self.agent.position:
                    row_str += "A"
                elif self.grid.is_obstacle(x, y):
                    row_str += "#"
                else:
                    here = [s.object_id for s in self.ground_objects()
                            if s.position == (x, y)]
                    row_str += OBJECT_REGISTRY[here[0]].glyph if here else "."
            lines.append(row_str)
        return "\n".join(lines)
