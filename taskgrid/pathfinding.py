"""
A* search over the 4-connected grid.

The pathfinder turns a (start, goal) pair into the list of cardinal moves
that walks the agent from one to the other:

1. Push the start node with f = h(start).
2. Pop the node with the lowest f-score; ties go to the node pushed first.
3. Stop when the goal is popped and walk the parent links back to the start.
4. Otherwise expand the four neighbours, skipping out-of-bounds cells,
   obstacles and cells already closed.

Each step costs 1 and the heuristic is the Manhattan distance, which is
admissible and consistent on a 4-connected unit-cost grid, so the first
time the goal is popped its path is a shortest one.

An unreachable goal is a normal outcome: ``search`` returns None and the
caller reports an ordinary failure.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from taskgrid.worlds.grid_env import Cell, Direction, Grid, manhattan

logger = logging.getLogger(__name__)

# Expansion order: right, left, up, down.
_NEIGHBOURS: Tuple[Direction, ...] = (
    Direction.RIGHT, Direction.LEFT, Direction.UP, Direction.DOWN,
)


@dataclass
class SearchNode:
    """A cell reached with cost g, heuristic h and a parent link."""
    cell: Cell
    g: int
    h: int
    parent: Optional["SearchNode"] = None
    move: Optional[Direction] = None  # direction taken from the parent

    @property
    def f(self) -> int:
        return self.g + self.h


@dataclass
class SearchStats:
    """Bookkeeping from the last query, for debugging and tests."""
    nodes_expanded: int = 0
    nodes_pushed: int = 0
    path_length: Optional[int] = None


class AStarSearch:
    """
    Shortest-path search on a Grid.

    Stateless between queries apart from ``stats``: the grid is fixed and
    every call builds its own open and closed sets.

    Parameters
    ----------
    grid : Grid
        Bounds and obstacle mask to plan against.
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self.stats = SearchStats()

    def search(self, start: Cell, goal: Cell) -> Optional[List[Direction]]:
        """
        Plan a path from start to goal.

        Returns
        -------
        Optional[List[Direction]]
            The moves to apply in order (empty if start == goal), or None
            when the goal cannot be reached.
        """
        self.stats = SearchStats()
        if not self.grid.is_free(*goal):
            return None

        counter = itertools.count()
        closed = np.zeros((self.grid.size, self.grid.size), dtype=bool)
        root = SearchNode(start, 0, manhattan(start, goal))
        open_heap = [(root.f, next(counter), root)]
        self.stats.nodes_pushed = 1

        while open_heap:
            _, _, current = heapq.heappop(open_heap)
            x, y = current.cell

            if current.cell == goal:
                path = self._reconstruct(current)
                self.stats.path_length = len(path)
                return path

            if closed[x, y]:
                continue
            closed[x, y] = True
            self.stats.nodes_expanded += 1

            for direction in _NEIGHBOURS:
                dx, dy = direction.delta()
                nx, ny = x + dx, y + dy
                if not self.grid.in_bounds(nx, ny):
                    continue
                if self.grid.is_obstacle(nx, ny):
                    continue
                if closed[nx, ny]:
                    continue
                node = SearchNode((nx, ny), current.g + 1,
                                  manhattan((nx, ny), goal), current, direction)
                heapq.heappush(open_heap, (node.f, next(counter), node))
                self.stats.nodes_pushed += 1

        logger.debug("no path from %s to %s", start, goal)
        return None

    @staticmethod
    def _reconstruct(goal: SearchNode) -> List[Direction]:
        moves: List[Direction] = []
        node = goal
        while node.parent is not None:
            moves.append(node.move)
            node = node.parent
        moves.reverse()
        return moves


def find_path(grid: Grid, start: Cell, goal: Cell) -> Optional[List[Direction]]:
    """Convenience wrapper: one-off A* query."""
    return AStarSearch(grid).search(start, goal)
