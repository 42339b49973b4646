"""Tests for A* pathfinding."""

import unittest
from collections import deque

from taskgrid.pathfinding import AStarSearch, find_path
from taskgrid.worlds.grid_env import Direction, Grid

OBSTACLES = [(2, 1), (2, 2), (4, 4), (4, 5)]


def bfs_distance(grid, start, goal):
    """Reference shortest-path length by breadth-first search."""
    frontier = deque([(start, 0)])
    seen = {start}
    while frontier:
        cell, dist = frontier.popleft()
        if cell == goal:
            return dist
        for d in Direction.all():
            dx, dy = d.delta()
            nxt = (cell[0] + dx, cell[1] + dy)
            if grid.is_free(*nxt) and nxt not in seen:
                seen.add(nxt)
                frontier.append((nxt, dist + 1))
    return None


def walk(grid, start, path):
    """Apply a path, failing on any illegal cell."""
    x, y = start
    for d in path:
        dx, dy = d.delta()
        x, y = x + dx, y + dy
        assert grid.is_free(x, y), f"path enters blocked cell {(x, y)}"
    return (x, y)


class TestAStarSearch(unittest.TestCase):
    """Test the search on known layouts."""

    def setUp(self):
        self.grid = Grid(6, OBSTACLES)

    def test_corner_to_corner(self):
        path = find_path(self.grid, (1, 1), (5, 5))
        self.assertIsNotNone(path)
        self.assertEqual(walk(self.grid, (1, 1), path), (5, 5))
        self.assertEqual(len(path), bfs_distance(self.grid, (1, 1), (5, 5)))
        self.assertEqual(len(path), 8)

    def test_detour_around_obstacles(self):
        # (1,5) -> (5,5) must go around the wall at x=4.
        path = find_path(self.grid, (1, 5), (5, 5))
        self.assertEqual(walk(self.grid, (1, 5), path), (5, 5))
        self.assertEqual(len(path), 8)

    def test_start_equals_goal(self):
        self.assertEqual(find_path(self.grid, (3, 3), (3, 3)), [])

    def test_goal_on_obstacle(self):
        self.assertIsNone(find_path(self.grid, (1, 1), (2, 2)))

    def test_goal_out_of_bounds(self):
        self.assertIsNone(find_path(self.grid, (1, 1), (6, 6)))

    def test_enclosed_goal(self):
        grid = Grid(6, [(4, 5), (5, 4)])
        self.assertIsNone(find_path(grid, (1, 1), (5, 5)))

    def test_all_pairs_are_shortest(self):
        """Every reachable pair yields a legal path of BFS length."""
        cells = [c for c in self.grid.cells() if self.grid.is_free(*c)]
        search = AStarSearch(self.grid)
        for start in cells:
            for goal in cells:
                path = search.search(start, goal)
                self.assertIsNotNone(path, f"{start} -> {goal}")
                self.assertEqual(walk(self.grid, start, path), goal)
                self.assertEqual(len(path), bfs_distance(self.grid, start, goal))

    def test_deterministic(self):
        first = find_path(self.grid, (1, 1), (5, 5))
        for _ in range(5):
            self.assertEqual(find_path(self.grid, (1, 1), (5, 5)), first)

    def test_stats(self):
        search = AStarSearch(self.grid)
        path = search.search((1, 1), (5, 5))
        self.assertEqual(search.stats.path_length, len(path))
        self.assertGreater(search.stats.nodes_expanded, 0)
        search.search((1, 1), (2, 2))
        self.assertIsNone(search.stats.path_length)


if __name__ == "__main__":
    unittest.main()
