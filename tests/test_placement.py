"""Tests for random placement and nudging."""

import random
import unittest

from taskgrid.objects import DYNAMIC_OBJECTS, ObjectId
from taskgrid.placement import nudge_object, randomize_positions, sample_free_cell
from taskgrid.worlds.grid_env import GridConfig, WorldState, manhattan


def crowded_config():
    """3x3 grid (usable 1..2) where every free non-start cell is taken."""
    positions = {obj: (1, 2) for obj in ObjectId}
    return GridConfig(size=3, obstacles=[(2, 1), (2, 2)], start=(1, 1),
                      object_positions=positions)


class TestSampleFreeCell(unittest.TestCase):

    def test_accepted_cells_are_valid(self):
        world = WorldState(GridConfig(), random.Random(3))
        for _ in range(200):
            cell = sample_free_cell(world, ObjectId.TABLE)
            self.assertIsNotNone(cell)
            self.assertTrue(world.grid.is_free(*cell))
            self.assertNotEqual(cell, world.start)
            self.assertFalse(world.is_object_at(*cell, exclude=ObjectId.TABLE))

    def test_exhausted_budget_returns_none(self):
        world = WorldState(crowded_config(), random.Random(0))
        self.assertIsNone(sample_free_cell(world, ObjectId.TABLE, max_attempts=20))

    def test_randomize_keeps_position_on_failure(self):
        world = WorldState(crowded_config(), random.Random(0))
        randomize_positions(world, DYNAMIC_OBJECTS, max_attempts=20)
        for obj in DYNAMIC_OBJECTS:
            self.assertEqual(world.objects[obj].position, (1, 2))

    def test_seeded_placement_is_reproducible(self):
        a = WorldState(GridConfig(), random.Random(42))
        b = WorldState(GridConfig(), random.Random(42))
        randomize_positions(a, DYNAMIC_OBJECTS)
        randomize_positions(b, DYNAMIC_OBJECTS)
        for obj in DYNAMIC_OBJECTS:
            self.assertEqual(a.objects[obj].position, b.objects[obj].position)


class TestNudgeObject(unittest.TestCase):

    def test_moves_one_cell_to_a_free_cell(self):
        world = WorldState(GridConfig(), random.Random(1))
        for _ in range(100):
            before = world.objects[ObjectId.CHAIR].position
            if nudge_object(world, ObjectId.CHAIR):
                after = world.objects[ObjectId.CHAIR].position
                self.assertEqual(manhattan(before, after), 1)
                self.assertTrue(world.grid.is_free(*after))
                self.assertFalse(world.is_object_at(*after, exclude=ObjectId.CHAIR))

    def test_enclosed_object_stays(self):
        config = GridConfig(obstacles=[(4, 5), (5, 4)])
        config.object_positions[ObjectId.TABLE] = (5, 5)
        config.object_positions[ObjectId.COLOR] = (1, 2)
        world = WorldState(config, random.Random(0))
        self.assertFalse(nudge_object(world, ObjectId.TABLE))
        self.assertEqual(world.objects[ObjectId.TABLE].position, (5, 5))

    def test_carried_object_stays(self):
        world = WorldState(GridConfig(), random.Random(0))
        world.objects[ObjectId.DOOR].carried = True
        self.assertFalse(nudge_object(world, ObjectId.DOOR))
        self.assertEqual(world.objects[ObjectId.DOOR].position, (3, 1))


if __name__ == "__main__":
    unittest.main()
