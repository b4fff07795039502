# planner/rrt.py
import logging

import numpy as np

from rrt_connect.common.utils import get_dist, is_collision_free, path_length, sample_uniform
from rrt_connect.planner.config import PlannerConfig, PlannerConfigError
from rrt_connect.planner.rrt_connect import new_session
from rrt_connect.planner.steer import new_config

logger = logging.getLogger(__name__)


class RRT:
    """
    Simple single-tree RRT (no rewiring), grown from the start only.
    Shares steering with RRTConnect and exposes the same controls:
      - reset()
      - step()
      - get_best_solution()
    """

    def __init__(self, config=None, sampler=None):
        self.config = config if config is not None else PlannerConfig()
        self.sampler = sampler if sampler is not None else sample_uniform
        self.tree = None
        self._config = None  # validated copy taken at reset
        self.goal = None
        self.obstacles = ()
        self.rng = None
        self.iterations = 0
        self.solved = False

    def reset(self, start, goal, obstacles=(), seed=None):
        # same validation as the bidirectional planner; only the start tree is kept
        session = new_session(start, goal, obstacles, self.config)
        self.tree = session.start_tree
        self._config = session.config
        self.goal = session.goal_tree.root.state
        self.obstacles = session.obstacles
        self.rng = np.random.default_rng(seed)
        self.iterations = 0
        self.solved = False
        logger.info("reset: start=%s goal=%s obstacles=%d seed=%s",
                    self.tree.root.state.tolist(), self.goal.tolist(), len(self.obstacles), seed)

    def step(self, iterations=None):
        """Run up to ``iterations`` RRT iterations; returns whether the goal was attached."""
        if self.tree is None:
            raise RuntimeError("reset() must be called before step()")
        if iterations is None:
            iterations = self._config.iterations_per_step
        if isinstance(iterations, bool) or not isinstance(iterations, (int, np.integer)) or iterations < 1:
            raise PlannerConfigError(f"iterations must be an integer >= 1, got {iterations!r}")

        for _ in range(int(iterations)):
            if self.solved:
                break
            self._iterate()
        return self.solved

    @property
    def nodes_in_tree(self):
        return 0 if self.tree is None else len(self.tree)

    def get_best_solution(self):
        """
        Returns (path, success, total_cost).
        total_cost for simple RRT = geometric path length from start to goal.
        """
        if not self.solved:
            return None, False, float("inf")
        path = self.tree.path_to_root(self.tree.frontier())[::-1]
        return path, True, path_length(path)

    # -----------------------
    # Helpers
    # -----------------------
    def _iterate(self):
        self.iterations += 1
        q_rand = self._get_random_state()
        near = self.tree.nearest_neighbor(q_rand)
        candidate, unobstructed = new_config(q_rand, near, self._config.max_dist, self.obstacles, self._config.backoff)
        if not unobstructed:
            return

        self.tree.add_node(candidate)

        # goal check: nearest node to the goal within one step and a clear final edge
        closest = self.tree.nearest_neighbor(self.goal)
        if get_dist(closest.state, self.goal) < self._config.max_dist and \
                is_collision_free(closest.state, self.goal, self.obstacles):
            self.tree.add_node(self.goal)
            self.solved = True
            logger.info("goal attached after %d iterations with %d nodes", self.iterations, len(self.tree))

    def _get_random_state(self):
        # goal bias
        if self._config.goal_sample_rate > 0.0 and self.rng.random() < self._config.goal_sample_rate:
            return self.goal.copy()
        return np.asarray(self.sampler(self._config.bounds, self.rng), dtype=float)
