"""Steering, Extend and Connect for RRT-Connect."""

import logging
from enum import Enum

import numpy as np

from rrt_connect.common.utils import get_dist, normalize, segment_intersect

logger = logging.getLogger(__name__)


class ExtendStatus(Enum):
    TRAPPED = "trapped"
    ADVANCED = "advanced"
    REACHED = "reached"


def new_config(q, q_near, max_dist, obstacles, backoff=0.1):
    """
    Next safely reachable configuration from q_near toward q.

    The candidate is first clamped to max_dist, then clipped back by
    ``backoff`` in front of every obstacle the segment q_near -> candidate
    strikes. Clipping is applied obstacle by obstacle against the current
    candidate, so it is cumulative and depends on obstacle order.

    Returns
    -------
    candidate : np.ndarray
    unobstructed : bool
        True iff no obstacle changed the step-clamped candidate.
    """
    q = np.asarray(q, dtype=float)
    start = np.asarray(q_near.state, dtype=float)

    dist = get_dist(q, start)
    if dist > max_dist:
        candidate = start + (q - start) / dist * max_dist
    else:
        candidate = q.copy()

    clamped = candidate.copy()
    for obs in obstacles:
        hit = segment_intersect(obs, start, candidate)
        if hit is None:
            continue
        direction = normalize(candidate - start)
        candidate = start + (hit - backoff) * direction

    return candidate, bool(np.array_equal(candidate, clamped))


def reached(candidate, q, tolerance=0.0):
    if tolerance > 0.0:
        return get_dist(candidate, q) <= tolerance
    return bool(np.array_equal(candidate, q))


def extend(tree, q, config, obstacles):
    """Grow ``tree`` by at most one node toward q."""
    near = tree.nearest_neighbor(q)
    candidate, unobstructed = new_config(q, near, config.max_dist, obstacles, config.backoff)
    if not unobstructed:
        return ExtendStatus.TRAPPED

    tree.add_node(candidate)
    if reached(candidate, np.asarray(q, dtype=float), config.reach_tolerance):
        return ExtendStatus.REACHED
    return ExtendStatus.ADVANCED


def connect(tree, q, config, obstacles):
    """
    Extend ``tree`` toward q until it is reached or trapped.

    One Extend is always attempted, followed by up to
    ``config.connect_iterations`` more while the tree keeps advancing. Running
    out of attempts returns ADVANCED.
    """
    status = extend(tree, q, config, obstacles)
    iters = 0
    while status is ExtendStatus.ADVANCED and iters != config.connect_iterations:
        status = extend(tree, q, config, obstacles)
        iters += 1

    if status is ExtendStatus.ADVANCED:
        logger.debug("connect gave up after %d extensions", iters + 1)
    return status
