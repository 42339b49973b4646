"""End-to-end tests: full runs driven by the scripted controller."""

import os
import tempfile
import unittest

import numpy as np

from taskgrid import Simulation, SimulationConfig, UnknownActionError
from taskgrid.objects import DYNAMIC_OBJECTS
from taskgrid.scripted import EPISODE_PLAN, ScriptedController


def snapshot(sim):
    return {o: s.position for o, s in sim.world.objects.items()}


class TestFullRun(unittest.TestCase):

    def test_hundred_episodes_without_motion(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "episode_rewards.txt")
            sim = Simulation(SimulationConfig(
                seed=2024, dynamic_objects=False, reward_log_path=path))
            summary = ScriptedController(sim).run()

            with open(path, encoding="utf-8") as fh:
                logged = [float(v) for v in fh.read().splitlines()]

        self.assertTrue(sim.finished)
        self.assertIsNotNone(summary)
        self.assertEqual(summary.episodes_run, 100)
        self.assertEqual(len(sim.episode_history), 100)
        self.assertEqual(logged, sim.episode_history)
        self.assertAlmostEqual(summary.average, float(np.mean(sim.episode_history)))
        self.assertFalse(sim.world.episode.dynamic_objects_enabled)
        for reward in sim.episode_history:
            # Bonuses minus the cost of walking.
            self.assertLess(reward, 2.8)
            self.assertGreater(reward, 0.0)

    def test_controller_stops_after_finish(self):
        sim = Simulation(SimulationConfig(
            seed=1, dynamic_objects=False, episode_budget=3, reward_log_path=None))
        controller = ScriptedController(sim)
        controller.run()
        self.assertTrue(sim.finished)
        self.assertEqual(sim.world.episode.episodes_run, 3)
        controller.run()
        self.assertEqual(sim.world.episode.episodes_run, 3)

    def test_run_with_motion(self):
        sim = Simulation(SimulationConfig(seed=99, reward_log_path=None))
        ScriptedController(sim).run(max_episodes=3)
        episode = sim.world.episode
        self.assertLessEqual(episode.episodes_run, 3)
        self.assertEqual(len(sim.episode_history), episode.episodes_run)
        self.assertGreater(episode.action_counter, 0)
        for obj in DYNAMIC_OBJECTS:
            x, y = sim.world.objects[obj].position
            self.assertTrue(sim.world.grid.is_free(x, y))

    def test_plan_covers_every_goal(self):
        actions = {(a, o.token) for a, o in EPISODE_PLAN}
        self.assertIn(("paint", "t"), actions)
        self.assertIn(("paint", "ch"), actions)
        self.assertIn(("open", "d"), actions)


class TestDeterminism(unittest.TestCase):

    def _play(self, seed):
        sim = Simulation(SimulationConfig(seed=seed, reward_log_path=None))
        ScriptedController(sim).run(max_episodes=2)
        return sim

    def test_same_seed_replays(self):
        a, b = self._play(5), self._play(5)
        self.assertEqual(a.episode_history, b.episode_history)
        self.assertEqual(snapshot(a), snapshot(b))
        self.assertEqual(a.world.action_counter, b.world.action_counter)

    def test_initial_placement_depends_on_seed(self):
        layouts = {
            tuple(sorted(snapshot(Simulation(SimulationConfig(
                seed=s, reward_log_path=None))).items()))
            for s in range(10)
        }
        self.assertGreater(len(layouts), 1)

    def test_instances_are_independent(self):
        config = SimulationConfig(seed=8, dynamic_objects=False,
                                  randomize_on_init=False, reward_log_path=None)
        a, b = Simulation(config), Simulation(config)
        a.apply("agent", "move", "up")
        self.assertEqual(a.world.agent.position, (1, 2))
        self.assertEqual(b.world.agent.position, (1, 1))
        self.assertEqual(b.world.episode.step_count, 0)


class TestSimulationApi(unittest.TestCase):

    def setUp(self):
        self.sim = Simulation(SimulationConfig(
            seed=4, randomize_on_init=False, reward_log_path=None))

    def test_actions(self):
        self.assertEqual(self.sim.actions, sorted([
            "move", "pickup", "drop", "paint", "open",
            "path_to", "goto_coord", "explore", "reset_episode",
        ]))

    def test_unknown_action(self):
        with self.assertRaises(UnknownActionError):
            self.sim.apply("agent", "fly", "up")
        self.assertEqual(self.sim.world.action_counter, 0)

    def test_render(self):
        self.assertEqual(self.sim.render(), self.sim.world.render())
        self.assertTrue(self.sim.render().splitlines()[-1].startswith("A#"))

    def test_no_summary_before_finish(self):
        self.assertIsNone(self.sim.summary)
        self.assertFalse(self.sim.finished)


class TestConfigFromEnv(unittest.TestCase):

    def test_overrides(self):
        config = SimulationConfig.from_env(environ={
            "TASKGRID_AUTO_EXIT": "true",
            "TASKGRID_SEED": "17",
            "TASKGRID_REWARD_LOG": "",
        })
        self.assertTrue(config.auto_exit)
        self.assertEqual(config.seed, 17)
        self.assertIsNone(config.reward_log_path)

    def test_defaults_untouched(self):
        base = SimulationConfig(seed=3, episode_budget=7)
        config = SimulationConfig.from_env(base, environ={})
        self.assertEqual(config, base)
        self.assertFalse(config.auto_exit)
        self.assertEqual(config.reward_log_path, "episode_rewards.txt")

    def test_false_auto_exit(self):
        config = SimulationConfig.from_env(environ={"TASKGRID_AUTO_EXIT": "0"})
        self.assertFalse(config.auto_exit)


if __name__ == "__main__":
    unittest.main()
