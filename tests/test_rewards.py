"""Tests for the shaped reward function."""

import unittest

from taskgrid.objects import ObjectId
from taskgrid.rewards import RewardConfig, RewardFunction

NO_GOALS = {
    ObjectId.TABLE: (False, False),
    ObjectId.CHAIR: (False, False),
    ObjectId.DOOR: (False, False),
}


class TestMovementCost(unittest.TestCase):
    """Test per-move costs."""

    def setUp(self):
        self.reward_fn = RewardFunction()

    def test_empty_handed(self):
        self.assertEqual(self.reward_fn.movement_cost([]), (-0.01, 0.0, 0.0))

    def test_carrying_tools(self):
        base, carry, non_tool = self.reward_fn.movement_cost(
            [ObjectId.BRUSH, ObjectId.COLOR])
        self.assertEqual(base, 0.0)
        self.assertAlmostEqual(carry, -0.04)
        self.assertEqual(non_tool, 0.0)

    def test_carrying_goal_object_costs_more(self):
        tools = sum(self.reward_fn.movement_cost([ObjectId.BRUSH, ObjectId.KEY]))
        mixed = sum(self.reward_fn.movement_cost([ObjectId.BRUSH, ObjectId.TABLE]))
        self.assertAlmostEqual(mixed, -0.07)
        self.assertLess(mixed, tools)


class TestCompute(unittest.TestCase):
    """Test full step rewards."""

    def setUp(self):
        self.reward_fn = RewardFunction()

    def test_no_step_cost_for_non_moves(self):
        result = self.reward_fn.compute([ObjectId.TABLE], NO_GOALS, apply_step_cost=False)
        self.assertEqual(result.total, 0.0)

    def test_goal_bonus_paid_once(self):
        goals = dict(NO_GOALS)
        goals[ObjectId.TABLE] = (True, False)
        result = self.reward_fn.compute([], goals, apply_step_cost=True)
        self.assertAlmostEqual(result.total, 0.99)
        self.assertEqual(result.goals_awarded, [ObjectId.TABLE])

        goals[ObjectId.TABLE] = (True, True)
        result = self.reward_fn.compute([], goals, apply_step_cost=False)
        self.assertEqual(result.total, 0.0)
        self.assertEqual(result.goals_awarded, [])

    def test_door_bonus(self):
        goals = dict(NO_GOALS)
        goals[ObjectId.DOOR] = (True, False)
        result = self.reward_fn.compute([], goals, apply_step_cost=False)
        self.assertAlmostEqual(result.goal_bonus, 0.8)

    def test_custom_weights(self):
        fn = RewardFunction(RewardConfig(base_step_cost=-1.0))
        result = fn.compute([], NO_GOALS, apply_step_cost=True)
        self.assertEqual(result.total, -1.0)

    def test_repr(self):
        result = self.reward_fn.compute([ObjectId.KEY], NO_GOALS, True)
        self.assertIn("StepReward", repr(result))


if __name__ == "__main__":
    unittest.main()
