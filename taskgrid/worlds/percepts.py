"""
Percepts — the flat fact set describing what the agent can observe.

A percept is a ground fact ``functor(arg, ...)``. A snapshot is an
order-insensitive set of them:

    position(X,Y)          agent cell
    carry_count(N)         objects carried
    capacity(N)            carrying capacity
    carrying(O)            one per carried object
    location(O,X,Y)        one per object lying on the grid
    colored(O)             one per painted object
    open(d)                the door is open
    step_reward(R)         reward of the last reward pass
    episode_reward(R)      running episode reward
    steps(N)               primitive moves taken this episode
    obstacle(X,Y)          obstacles within the visibility window

The grid is fully known internally, but obstacles are only reported inside
a square window of ``visibility_radius`` cells around the agent.

Publishing never mutates the world.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Tuple

from taskgrid.objects import ObjectId
from taskgrid.worlds.grid_env import WorldState


@dataclass(frozen=True)
class Percept:
    """A single ground fact."""
    functor: str
    args: Tuple = ()

    def __str__(self) -> str:
        if not self.args:
            return self.functor
        return f"{self.functor}({','.join(str(a) for a in self.args)})"


PerceptSet = FrozenSet[Percept]


def _number(value: float) -> float:
    # Collapse float noise so equal rewards render equally.
    return round(float(value), 10)


class PerceptPublisher:
    """
    Projects a WorldState into a PerceptSet.

    Parameters
    ----------
    visibility_radius : int
        Half-width of the obstacle window around the agent. Default 2.
    """

    def __init__(self, visibility_radius: int = 2):
        self.visibility_radius = visibility_radius

    def publish(self, world: WorldState) -> PerceptSet:
        agent = world.agent
        facts = [
            Percept("position", agent.position),
            Percept("carry_count", (agent.carried,)),
            Percept("capacity", (agent.capacity,)),
        ]

        for state in world.objects.values():
            if state.carried:
                facts.append(Percept("carrying", (state.object_id.token,)))
            else:
                x, y = state.position
                facts.append(Percept("location", (state.object_id.token, x, y)))
            if state.colored:
                facts.append(Percept("colored", (state.object_id.token,)))

        if world.objects[ObjectId.DOOR].opened:
            facts.append(Percept("open", (ObjectId.DOOR.token,)))

        facts.append(Percept("step_reward", (_number(world.episode.last_step_reward),)))
        facts.append(Percept("episode_reward", (_number(world.episode.reward),)))
        facts.append(Percept("steps", (world.episode.step_count,)))

        facts.extend(self._visible_obstacles(world))
        return frozenset(facts)

    def _visible_obstacles(self, world: WorldState) -> Iterable[Percept]:
        ax, ay = world.agent.position
        r = self.visibility_radius
        size = world.grid.size
        for x in range(max(1, ax - r), min(size - 1, ax + r) + 1):
            for y in range(max(1, ay - r), min(size - 1, ay + r) + 1):
                if world.grid.is_obstacle(x, y):
                    yield Percept("obstacle", (x, y))


# ---------------------------------------------------------------------------
# Snapshot helpers
# ---------------------------------------------------------------------------

def find(percepts: PerceptSet, functor: str) -> list:
    """All percepts with the given functor."""
    return [p for p in percepts if p.functor == functor]


def value_of(percepts: PerceptSet, functor: str) -> Optional[Tuple]:
    """Args of the single percept with the given functor, or None."""
    matches = find(percepts, functor)
    return matches[0].args if matches else None


def render(percepts: PerceptSet) -> str:
    """Sorted, one fact per line."""
    return "\n".join(sorted(str(p) for p in percepts))
