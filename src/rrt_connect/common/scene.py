"""Random planning episodes and their JSON form."""

import numpy as np

from rrt_connect.common.utils import Box, Sphere, sample_uniform
from rrt_connect.planner.config import as_bounds

MAX_ENDPOINT_ATTEMPTS = 1000


def _sample_free(bounds, rng, obstacles):
    for _ in range(MAX_ENDPOINT_ATTEMPTS):
        q = sample_uniform(bounds, rng=rng)
        if not any(obs.contains(q) for obs in obstacles):
            return q
    raise RuntimeError("could not place a configuration outside the obstacles; reduce obstacle_count")


def make_random_scene(rng, bounds, obstacle_count=25, obstacle_size=1.0):
    """
    Random start, goal and axis-aligned cube obstacles inside ``bounds``.

    Obstacle centres are uniform over the domain. Start and goal are
    resampled until neither lies inside an obstacle.

    Returns
    -------
    start, goal : np.ndarray
    obstacles : list of Box
    """
    bounds = as_bounds(bounds)
    if obstacle_count < 0:
        raise ValueError(f"obstacle_count must be >= 0, got {obstacle_count}")
    if obstacle_size <= 0:
        raise ValueError(f"obstacle_size must be > 0, got {obstacle_size}")

    half = np.full(bounds.shape[0], obstacle_size / 2.0)
    obstacles = [Box(sample_uniform(bounds, rng=rng), half) for _ in range(int(obstacle_count))]
    start = _sample_free(bounds, rng, obstacles)
    goal = _sample_free(bounds, rng, obstacles)
    return start, goal, obstacles


def obstacle_to_dict(obs):
    if isinstance(obs, Box):
        return {"type": "box", "center": obs.center.tolist(), "extents": obs.extents.tolist()}
    if isinstance(obs, Sphere):
        return {"type": "sphere", "center": obs.center.tolist(), "radius": obs.radius}
    raise TypeError(f"cannot serialise obstacle {obs!r}")


def obstacle_from_dict(data):
    kind = data.get("type")
    if kind == "box":
        return Box(data["center"], data["extents"])
    if kind == "sphere":
        return Sphere(data["center"], data["radius"])
    raise ValueError(f"unknown obstacle type: {kind!r}")


def scene_to_dict(bounds, start, goal, obstacles):
    return {
        "bounds": np.asarray(bounds, dtype=float).tolist(),
        "start": np.asarray(start, dtype=float).tolist(),
        "goal": np.asarray(goal, dtype=float).tolist(),
        "obstacles": [obstacle_to_dict(o) for o in obstacles],
    }


def scene_from_dict(data):
    """Inverse of scene_to_dict. Returns (bounds, start, goal, obstacles)."""
    bounds = as_bounds(data["bounds"])
    start = np.array(data["start"], dtype=float)
    goal = np.array(data["goal"], dtype=float)
    obstacles = [obstacle_from_dict(o) for o in data.get("obstacles", [])]
    return bounds, start, goal, obstacles
