import numpy as np
import pytest

from rrt_connect.common.utils import get_dist, is_collision_free
from rrt_connect.planner.config import PlannerConfig
from rrt_connect.planner.rrt import RRT


def test_rrt_reaches_goal_with_goal_bias():
    config = PlannerConfig(bounds=np.array([[-10.0, 10.0], [-10.0, 10.0]]), max_dist=1.0, goal_sample_rate=0.2)
    planner = RRT(config)
    start, goal = np.array([0.0, 0.0]), np.array([10.0, 0.0])
    planner.reset(start, goal, [], seed=0)
    for _ in range(200):
        if planner.step(10):
            break
    path, success, cost = planner.get_best_solution()
    assert success
    np.testing.assert_array_equal(path[0], start)
    np.testing.assert_array_equal(path[-1], goal)
    for a, b in zip(path[:-1], path[1:]):
        assert get_dist(a, b) <= 1.0 + 1e-9
    assert cost >= 10.0 - 1e-9


def test_rrt_avoids_wall(wall_scene):
    bounds, start, goal, obstacles = wall_scene
    planner = RRT(PlannerConfig(bounds=bounds, max_dist=1.0, goal_sample_rate=0.1))
    planner.reset(start, goal, obstacles, seed=2)
    for _ in range(500):
        if planner.step(10):
            break
    path, success, _ = planner.get_best_solution()
    assert success
    for a, b in zip(path[:-1], path[1:]):
        assert is_collision_free(a, b, obstacles)
    for parent, child in planner.tree.edges():
        assert is_collision_free(parent, child, obstacles)


def test_rrt_reset_is_reproducible(wall_scene):
    bounds, start, goal, obstacles = wall_scene

    def grow():
        planner = RRT(PlannerConfig(bounds=bounds, max_dist=0.5))
        planner.reset(start, goal, obstacles, seed=4)
        planner.step(40)
        return planner.tree.snapshot()

    a, b = grow(), grow()
    np.testing.assert_array_equal(a.positions, b.positions)
    np.testing.assert_array_equal(a.parents, b.parents)


def test_rrt_unsolved_and_reset_required():
    planner = RRT(PlannerConfig())
    assert planner.get_best_solution() == (None, False, float("inf"))
    with pytest.raises(RuntimeError):
        planner.step()


def test_rrt_config_edits_after_reset_do_not_reach_episode():
    config = PlannerConfig(bounds=np.array([[-10.0, 10.0], [-10.0, 10.0]]), max_dist=1.0)
    planner = RRT(config)
    planner.reset([0.0, 0.0], [9.0, 9.0], [], seed=3)
    config.max_dist = 50.0

    planner.step(20)
    for parent, child in planner.tree.edges():
        assert get_dist(parent, child) <= 1.0 + 1e-9
