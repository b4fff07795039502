"""Bidirectional RRT-Connect driven by explicit reset/step calls."""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple

import numpy as np

from rrt_connect.common.utils import Obstacle, is_collision_free, path_length, sample_uniform
from rrt_connect.planner.config import PlannerConfig, PlannerConfigError, as_configuration
from rrt_connect.planner.steer import ExtendStatus, connect, extend
from rrt_connect.planner.tree import Tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannerSession:
    """
    State of one planning episode.

    ``trees[0]`` is seeded at the start configuration and ``trees[1]`` at the
    goal. ``active`` is the index of the tree grown toward samples this
    iteration; the other one is grown toward the active frontier. The trees
    themselves only ever gain nodes, every other field changes by building a
    new session.
    """

    trees: Tuple[Tree, Tree]
    config: PlannerConfig
    obstacles: Tuple[Obstacle, ...]
    active: int = 0
    solved: bool = False
    iterations: int = 0

    @property
    def start_tree(self):
        return self.trees[0]

    @property
    def goal_tree(self):
        return self.trees[1]

    @property
    def active_tree(self):
        return self.trees[self.active]

    @property
    def passive_tree(self):
        return self.trees[1 - self.active]

    @property
    def nodes_in_tree(self):
        return len(self.trees[0]) + len(self.trees[1])


def new_session(start, goal, obstacles, config):
    """Validate the episode parameters and seed both trees.

    The session keeps its own validated copy of ``config``; later edits to the
    caller's object do not reach a running episode.
    """
    config = replace(config).validate()
    config.bounds.setflags(write=False)
    dim = config.dim
    start = as_configuration(start, dim, "start")
    goal = as_configuration(goal, dim, "goal")

    obstacles = tuple(obstacles)
    for obs in obstacles:
        if obs.dim != dim:
            raise PlannerConfigError(f"{obs!r} has dimension {obs.dim}, expected {dim}")

    for name, q in (("start", start), ("goal", goal)):
        if np.any(q < config.bounds[:, 0]) or np.any(q > config.bounds[:, 1]):
            logger.warning("%s %s lies outside the sampling domain", name, q.tolist())

    return PlannerSession(trees=(Tree(start), Tree(goal)), config=config, obstacles=obstacles)


def run_iteration(session, q):
    """
    One outer RRT-Connect iteration toward sample q.

    Extends the active tree toward q; on progress, connects the passive tree
    to the new active frontier. Roles swap unless the trees met.
    """
    if session.solved:
        return session

    status = extend(session.active_tree, q, session.config, session.obstacles)
    logger.debug("iteration %d: extend tree %d -> %s", session.iterations, session.active, status.value)

    if status is not ExtendStatus.TRAPPED:
        target = session.active_tree.frontier().state
        connect_status = connect(session.passive_tree, target, session.config, session.obstacles)
        if connect_status is ExtendStatus.REACHED and _bridge_is_free(session):
            return replace(session, solved=True, iterations=session.iterations + 1)

    return replace(session, active=1 - session.active, iterations=session.iterations + 1)


def _bridge_is_free(session):
    # frontiers differ only under a reach tolerance; that gap was never steered
    a = session.active_tree.frontier().state
    b = session.passive_tree.frontier().state
    return np.array_equal(a, b) or is_collision_free(a, b, session.obstacles)


def advance(session, iterations, sample):
    """Run up to ``iterations`` outer iterations, stopping early once solved."""
    for _ in range(iterations):
        if session.solved:
            break
        session = run_iteration(session, sample())
    return session


def extract_path(session):
    """
    Start-to-goal path through the connection point, or None if unsolved.

    The connection point appears once when both frontiers coincide. Under a
    reach tolerance they may differ, and both are kept.
    """
    if not session.solved:
        return None
    active_half = session.active_tree.path_to_root(session.active_tree.frontier())
    passive_half = session.passive_tree.path_to_root(session.passive_tree.frontier())

    if session.active == 0:
        start_half, goal_half = active_half, passive_half
    else:
        start_half, goal_half = passive_half, active_half
    if np.array_equal(start_half[0], goal_half[0]):
        goal_half = goal_half[1:]
    return np.vstack([start_half[::-1], goal_half])


class RRTConnect:
    """
    Episode controller.

    reset() builds a fresh PlannerSession, step() grows it. Samples are drawn
    uniformly over the configured bounds from a generator seeded at reset,
    unless a ``sampler(bounds, rng)`` callable is supplied.
    """

    def __init__(self, config: Optional[PlannerConfig] = None,
                 sampler: Optional[Callable[[np.ndarray, np.random.Generator], np.ndarray]] = None):
        self.config = config if config is not None else PlannerConfig()
        self.sampler = sampler if sampler is not None else sample_uniform
        self.session: Optional[PlannerSession] = None
        self.rng: Optional[np.random.Generator] = None

    # -----------------------
    # Episode controls
    # -----------------------
    def reset(self, start, goal, obstacles=(), seed=None):
        session = new_session(start, goal, obstacles, self.config)
        self.session = session
        self.rng = np.random.default_rng(seed)
        logger.info("reset: start=%s goal=%s obstacles=%d seed=%s",
                    session.start_tree.root.state.tolist(), session.goal_tree.root.state.tolist(),
                    len(session.obstacles), seed)
        return session

    def step(self, iterations=None):
        """Grow the trees; returns whether the episode is solved."""
        if self.session is None:
            raise RuntimeError("reset() must be called before step()")
        if iterations is None:
            iterations = self.session.config.iterations_per_step
        if isinstance(iterations, bool) or not isinstance(iterations, (int, np.integer)) or iterations < 1:
            raise PlannerConfigError(f"iterations must be an integer >= 1, got {iterations!r}")

        was_solved = self.session.solved
        self.session = advance(self.session, int(iterations), self._sample)
        if self.session.solved and not was_solved:
            logger.info("solved after %d iterations with %d nodes",
                        self.session.iterations, self.session.nodes_in_tree)
        return self.session.solved

    def _sample(self):
        return np.asarray(self.sampler(self.session.config.bounds, self.rng), dtype=float)

    # -----------------------
    # Read-only views
    # -----------------------
    @property
    def solved(self):
        return self.session is not None and self.session.solved

    @property
    def iterations(self):
        return 0 if self.session is None else self.session.iterations

    @property
    def nodes_in_tree(self):
        return 0 if self.session is None else self.session.nodes_in_tree

    def snapshots(self):
        """(start_tree, goal_tree) snapshots for renderers."""
        if self.session is None:
            return None
        return self.session.start_tree.snapshot(), self.session.goal_tree.snapshot()

    def get_path(self):
        if self.session is None:
            return None
        return extract_path(self.session)

    def get_best_solution(self):
        """Return (path, success, total_cost)."""
        path = self.get_path()
        if path is None:
            return None, False, float("inf")
        return path, True, path_length(path)
