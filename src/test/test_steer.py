import numpy as np
import pytest

from rrt_connect.common.utils import Box, get_dist
from rrt_connect.planner.config import PlannerConfig
from rrt_connect.planner.steer import ExtendStatus, connect, extend, new_config
from rrt_connect.planner.tree import Tree


def _config(**kwargs):
    kwargs.setdefault("bounds", np.array([[-10.0, 10.0], [-10.0, 10.0]]))
    return PlannerConfig(**kwargs).validate()


def test_new_config_within_reach_returns_target():
    tree = Tree([0.0, 0.0])
    q = np.array([0.3, 0.2])
    candidate, unobstructed = new_config(q, tree.root, 1.0, [])
    assert unobstructed
    np.testing.assert_array_equal(candidate, q)


def test_new_config_clamps_to_max_dist():
    tree = Tree([0.0, 0.0])
    candidate, unobstructed = new_config([10.0, 0.0], tree.root, 1.0, [])
    assert unobstructed
    np.testing.assert_allclose(candidate, [1.0, 0.0])


def test_new_config_unaffected_by_distant_obstacle():
    tree = Tree([0.0, 0.0])
    far = Box.from_bounds([5.0, -1.0], [6.0, 1.0])
    clamped, _ = new_config([10.0, 0.0], tree.root, 1.0, [])
    candidate, unobstructed = new_config([10.0, 0.0], tree.root, 1.0, [far])
    assert unobstructed
    np.testing.assert_array_equal(candidate, clamped)


def test_new_config_backs_off_before_obstacle():
    tree = Tree([0.0, 0.0])
    box = Box.from_bounds([0.5, -1.0], [2.0, 1.0])
    candidate, unobstructed = new_config([10.0, 0.0], tree.root, 1.0, [box], backoff=0.1)
    assert not unobstructed
    np.testing.assert_allclose(candidate, [0.4, 0.0])
    assert not box.contains(candidate)


def test_new_config_clipping_is_cumulative():
    tree = Tree([0.0, 0.0])
    farther = Box.from_bounds([0.8, -1.0], [0.9, 1.0])
    nearer = Box.from_bounds([0.5, -1.0], [0.6, 1.0])
    candidate, unobstructed = new_config([10.0, 0.0], tree.root, 1.0, [farther, nearer], backoff=0.1)
    assert not unobstructed
    np.testing.assert_allclose(candidate, [0.4, 0.0])


def test_new_config_never_exceeds_max_dist():
    rng = np.random.default_rng(7)
    tree = Tree([0.0, 0.0])
    obstacles = [Box(rng.uniform(-5, 5, size=2), [0.5, 0.5]) for _ in range(10)]
    for _ in range(500):
        q = rng.uniform(-10, 10, size=2)
        candidate, _ = new_config(q, tree.root, 0.7, obstacles)
        assert get_dist(candidate, tree.root.state) <= 0.7 + 1e-9


def test_extend_reaches_existing_node():
    config = _config(max_dist=0.4)
    tree = Tree([0.0, 0.0])
    existing = tree.add_node([0.3, 0.0])
    status = extend(tree, existing.state.copy(), config, [])
    assert status is ExtendStatus.REACHED
    assert len(tree) == 3


def test_extend_advances_toward_far_target():
    config = _config(max_dist=0.4)
    tree = Tree([0.0, 0.0])
    assert extend(tree, [5.0, 0.0], config, []) is ExtendStatus.ADVANCED
    np.testing.assert_allclose(tree.frontier().state, [0.4, 0.0])


def test_extend_trapped_leaves_tree_unchanged():
    config = _config(max_dist=1.0)
    tree = Tree([0.0, 0.0])
    wall = Box.from_bounds([0.5, -5.0], [1.0, 5.0])
    assert extend(tree, [5.0, 0.0], config, [wall]) is ExtendStatus.TRAPPED
    assert len(tree) == 1
    assert tree.frontier() is None


def test_reach_tolerance():
    tree = Tree([0.0, 0.0])
    assert extend(tree, [1.0, 0.0], _config(max_dist=0.9), []) is ExtendStatus.ADVANCED
    tree = Tree([0.0, 0.0])
    assert extend(tree, [1.0, 0.0], _config(max_dist=0.9, reach_tolerance=0.2), []) is ExtendStatus.REACHED


def test_connect_reaches_target():
    config = _config(max_dist=0.4)
    tree = Tree([0.0, 0.0])
    target = np.array([2.0, 0.0])
    assert connect(tree, target, config, []) is ExtendStatus.REACHED
    np.testing.assert_array_equal(tree.frontier().state, target)
    for parent, child in tree.edges():
        assert get_dist(parent, child) <= 0.4 + 1e-9


def test_connect_gives_up_after_cap():
    config = _config(max_dist=0.4, connect_iterations=2)
    tree = Tree([0.0, 0.0])
    assert connect(tree, [10.0, 0.0], config, []) is ExtendStatus.ADVANCED
    # one initial extension plus two more
    assert len(tree) == 4


def test_connect_stops_when_trapped():
    config = _config(max_dist=0.4)
    tree = Tree([0.0, 0.0])
    wall = Box.from_bounds([1.0, -5.0], [1.5, 5.0])
    assert connect(tree, [5.0, 0.0], config, [wall]) is ExtendStatus.TRAPPED
    assert all(not wall.contains(n.state) for n in tree.nodes)
    assert tree.frontier().state[0] < 1.0


@pytest.mark.parametrize("backoff", [0.0, 0.05, 0.1])
def test_backoff_distance(backoff):
    tree = Tree([0.0, 0.0])
    box = Box.from_bounds([0.5, -1.0], [2.0, 1.0])
    candidate, _ = new_config([10.0, 0.0], tree.root, 1.0, [box], backoff=backoff)
    assert candidate[0] == pytest.approx(0.5 - backoff)
