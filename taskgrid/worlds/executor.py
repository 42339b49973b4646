"""
Action executor — validates and applies one discrete action.

This is the ONLY way anything outside the engine changes the world. Each
call to ``apply`` runs one action to completion:

    validate → apply (maybe as a sequence of primitive moves) → publish

Actions:
- ``move(dir)``                primitive, the only action that costs reward
- ``pickup(o)``, ``drop(o)``   carry objects, bounded by capacity
- ``paint(o)``, ``open(o)``    goal interactions, need tools and adjacency
- ``path_to(o)``, ``goto_coord(x, y)``
                               composite: A* plan executed as moves
- ``explore()``                composite: fixed sweep with detours
- ``reset_episode()``          start a new episode unconditionally

Precondition failures return False and leave the world as it was before
the failing step. Composite actions keep the moves they already made when a
later move fails. An unknown action name raises UnknownActionError.

Every discrete call advances the world's action counter once, and every
primitive move inside a composite action is itself such a call. Whenever
the counter reaches a multiple of the motion period the dynamic objects
are nudged.
"""

from __future__ import annotations

import logging
import numbers
import re
import time
from typing import Callable, Dict, List, Optional, Sequence

from taskgrid.objects import (
    OBJECT_REGISTRY,
    OPENABLE_OBJECTS,
    PAINTABLE_OBJECTS,
    ObjectId,
)
from taskgrid.pathfinding import AStarSearch
from taskgrid.worlds.dynamics import DynamicMotionDriver
from taskgrid.worlds.episodes import EpisodeLifecycle
from taskgrid.worlds.grid_env import Cell, Direction, WorldState, manhattan
from taskgrid.worlds.percepts import PerceptPublisher, PerceptSet

logger = logging.getLogger(__name__)


class UnknownActionError(ValueError):
    """Raised for an action name the executor does not support."""


# Sweep used by explore(), and the detour tried when a step is blocked.
EXPLORATION_PATTERN = [
    Direction.RIGHT, Direction.RIGHT, Direction.DOWN, Direction.DOWN,
    Direction.LEFT, Direction.LEFT, Direction.UP, Direction.UP,
]
ALTERNATE_DIRECTION = {
    Direction.UP: Direction.RIGHT,
    Direction.DOWN: Direction.LEFT,
    Direction.RIGHT: Direction.DOWN,
    Direction.LEFT: Direction.UP,
}


def _single(args: Sequence):
    return args[0] if len(args) == 1 else None


def _coordinate(value) -> Optional[int]:
    """An int or a string of digits; floats are rejected, not truncated."""
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, str) and re.fullmatch(r"[+-]?\d+", value.strip()):
        return int(value)
    return None


class ActionExecutor:
    """
    Applies actions to a WorldState.

    Parameters
    ----------
    world : WorldState
        The simulation context to mutate.
    lifecycle : EpisodeLifecycle
        Runs the reward pass on every publication.
    motion : DynamicMotionDriver
        Fired on the action counter.
    publisher : PerceptPublisher
        Projects the world after each publication.
    on_publish : Callable, optional
        Called with every published PerceptSet.
    move_delay : float
        Seconds to wait between moves of path_to / goto_coord. Default 0.
    explore_delay : float
        Seconds to wait between moves of explore. Default 0.
    """

    def __init__(
        self,
        world: WorldState,
        lifecycle: EpisodeLifecycle,
        motion: DynamicMotionDriver,
        publisher: Optional[PerceptPublisher] = None,
        on_publish: Optional[Callable[[PerceptSet], None]] = None,
        move_delay: float = 0.0,
        explore_delay: float = 0.0,
    ):
        self.world = world
        self.lifecycle = lifecycle
        self.motion = motion
        self.publisher = publisher or PerceptPublisher()
        self.on_publish = on_publish
        self.move_delay = move_delay
        self.explore_delay = explore_delay
        self.search = AStarSearch(world.grid)
        self.last_percepts: Optional[PerceptSet] = None

        self._handlers: Dict[str, Callable[[Sequence], bool]] = {
            "move": self._do_move,
            "pickup": self._do_pickup,
            "drop": self._do_drop,
            "paint": self._do_paint,
            "open": self._do_open,
            "path_to": self._do_path_to,
            "goto_coord": self._do_goto_coord,
            "explore": self._do_explore,
            "reset_episode": self._do_reset_episode,
        }
        self._moved = False
        self._ticks = 0

    @property
    def actions(self) -> List[str]:
        return sorted(self._handlers)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def apply(self, actor_id: str, action_name: str, *args) -> bool:
        """
        Apply one action on behalf of ``actor_id``.

        Returns True on success, False on an unmet precondition.
        Raises UnknownActionError for an unsupported action name.
        """
        handler = self._handlers.get(action_name)
        if handler is None:
            raise UnknownActionError(f"Unknown action: {action_name}")

        logger.debug("%s: %s%s", actor_id, action_name, tuple(args))
        self._moved = False
        self._ticks = 0

        result = bool(handler(args))

        if self._ticks == 0:
            self._tick()
        # A successful move has already published with its step cost.
        if not self._moved:
            self.publish(apply_step_cost=False)
        return result

    def publish(self, apply_step_cost: bool) -> PerceptSet:
        """Run a reward pass and emit the resulting snapshot."""
        self.lifecycle.settle(self.world, apply_step_cost)
        percepts = self.publisher.publish(self.world)
        self.last_percepts = percepts
        if self.on_publish is not None:
            self.on_publish(percepts)
        return percepts

    def _tick(self) -> None:
        self.world.action_counter += 1
        self._ticks += 1
        self.motion.on_action(self.world)

    # ------------------------------------------------------------------
    # Primitive move
    # ------------------------------------------------------------------

    def _step(self, direction: Direction) -> bool:
        """One primitive move as its own discrete call."""
        try:
            return self._move(direction)
        finally:
            self._tick()

    def _move(self, direction: Direction) -> bool:
        agent = self.world.agent
        dx, dy = direction.delta()
        nx, ny = agent.position[0] + dx, agent.position[1] + dy

        if not self.world.grid.in_bounds(nx, ny):
            logger.debug("move %s: (%d,%d) is out of bounds", direction, nx, ny)
            return False
        if self.world.grid.is_obstacle(nx, ny):
            logger.debug("move %s: obstacle at (%d,%d)", direction, nx, ny)
            return False

        agent.position = (nx, ny)
        self._moved = True
        logger.debug("new position: %s", agent.position)
        self.publish(apply_step_cost=True)
        return True

    def _do_move(self, args: Sequence) -> bool:
        direction = Direction.parse(_single(args))
        if direction is None:
            logger.debug("unknown direction: %s", args)
            return False
        return self._step(direction)

    # ------------------------------------------------------------------
    # Carrying
    # ------------------------------------------------------------------

    def _do_pickup(self, args: Sequence) -> bool:
        obj = ObjectId.parse(_single(args))
        if obj is None:
            logger.debug("pickup: unknown object %s", args)
            return False
        agent = self.world.agent
        state = self.world.objects[obj]

        if state.carried:
            logger.debug("pickup: already carrying %s", obj)
            return False
        if agent.carried >= agent.capacity:
            logger.debug("pickup: capacity full %d/%d", agent.carried, agent.capacity)
            return False
        if state.position != agent.position:
            logger.debug("pickup: %s is at %s, agent at %s",
                         obj, state.position, agent.position)
            return False

        agent.carried += 1
        state.carried = True
        logger.debug("picked up %s, now carrying %d", obj, agent.carried)
        return True

    def _do_drop(self, args: Sequence) -> bool:
        obj = ObjectId.parse(_single(args))
        if obj is None or not self.world.objects[obj].carried:
            logger.debug("drop: not carrying %s", args)
            return False
        agent = self.world.agent
        state = self.world.objects[obj]

        agent.carried -= 1
        state.carried = False
        state.position = agent.position
        logger.debug("dropped %s at %s, now carrying %d",
                     obj, agent.position, agent.carried)
        return True

    # ------------------------------------------------------------------
    # Goal interactions
    # ------------------------------------------------------------------

    def _can_interact(self, obj: ObjectId) -> bool:
        """Agent holds every required tool and is on or next to ``obj``."""
        spec = OBJECT_REGISTRY[obj]
        missing = [t for t in spec.requires if not self.world.is_carrying(t)]
        if missing:
            logger.debug("%s %s: need %s", spec.interaction, obj,
                         ", ".join(OBJECT_REGISTRY[t].name for t in missing))
            return False
        target = self.world.objects[obj].position
        if manhattan(target, self.world.agent.position) > 1:
            logger.debug("%s %s failed: agent at %s, object at %s",
                         spec.interaction, obj, self.world.agent.position, target)
            return False
        return True

    def _do_paint(self, args: Sequence) -> bool:
        obj = ObjectId.parse(_single(args))
        if obj not in PAINTABLE_OBJECTS:
            logger.debug("paint: can only paint %s",
                         ", ".join(o.token for o in PAINTABLE_OBJECTS))
            return False
        if not self._can_interact(obj):
            return False
        self.world.objects[obj].colored = True
        logger.debug("painted %s", obj)
        return True

    def _do_open(self, args: Sequence) -> bool:
        obj = ObjectId.parse(_single(args))
        if obj not in OPENABLE_OBJECTS:
            logger.debug("open: can only open %s",
                         ", ".join(o.token for o in OPENABLE_OBJECTS))
            return False
        if not self._can_interact(obj):
            return False
        self.world.objects[obj].opened = True
        logger.debug("door opened")
        return True

    # ------------------------------------------------------------------
    # Composite actions
    # ------------------------------------------------------------------

    def _follow(self, goal: Cell) -> bool:
        """Plan to ``goal`` and walk the plan, stopping at the first failure."""
        path = self.search.search(self.world.agent.position, goal)
        if path is None:
            logger.debug("no path to %s", goal)
            return False

        logger.debug("found path with %d steps: %s",
                     len(path), " ".join(d.token for d in path))
        for i, direction in enumerate(path):
            if i and self.move_delay > 0:
                time.sleep(self.move_delay)
            if not self._step(direction):
                # An object may have been nudged or the plan gone stale.
                logger.debug("path aborted: move %s failed at %s",
                             direction, self.world.agent.position)
                return False
        return True

    def _do_path_to(self, args: Sequence) -> bool:
        obj = ObjectId.parse(_single(args))
        if obj is None:
            logger.debug("path_to: unknown object %s", args)
            return False
        state = self.world.objects[obj]
        if state.carried:
            logger.debug("path_to: %s is being carried", obj)
            return False
        return self._follow(state.position)

    def _do_goto_coord(self, args: Sequence) -> bool:
        if len(args) != 2:
            return False
        x, y = _coordinate(args[0]), _coordinate(args[1])
        if x is None or y is None:
            logger.debug("goto_coord: bad coordinates %s", args)
            return False
        if not self.world.grid.in_bounds(x, y):
            logger.debug("goto_coord: (%d,%d) out of bounds", x, y)
            return False
        return self._follow((x, y))

    def _do_explore(self, args: Sequence) -> bool:
        # Objects are always known, so agents rarely need this sweep.
        for i, direction in enumerate(EXPLORATION_PATTERN):
            if i and self.explore_delay > 0:
                time.sleep(self.explore_delay)
            if self._step(direction):
                continue
            if not self._step(ALTERNATE_DIRECTION[direction]):
                logger.debug("exploration blocked at %s", self.world.agent.position)
                break
        return True

    def _do_reset_episode(self, args: Sequence) -> bool:
        self.lifecycle.reset(self.world)
        return True
